"""Analytics service: the emotional-analysis read path.

Wires a trade provider, the aggregator, the leaning calculator, a raw
score provider and the coupling model into one response.  Failures of
the trade provider propagate to the caller unchanged.
"""

from __future__ import annotations

import logging

from ..core.config import Settings
from ..core.interfaces import IRawScoreProvider, ITradeProvider
from ..core.models import AnalyticsResponse, FilterState, Trade
from .aggregator import TradeAggregator
from .emotions import EmotionLeaningCalculator
from .psychology import EmotionFrequencyScorer, PsychologicalCouplingModel

logger = logging.getLogger(__name__)


class AnalyticsService:
    """Filtered trade reads and emotional analysis for one trade source."""

    def __init__(
        self,
        trade_provider: ITradeProvider,
        *,
        aggregator: TradeAggregator | None = None,
        calculator: EmotionLeaningCalculator | None = None,
        scorer: IRawScoreProvider | None = None,
        coupling: PsychologicalCouplingModel | None = None,
    ) -> None:
        self._provider = trade_provider
        self._aggregator = aggregator or TradeAggregator()
        self._calculator = calculator or EmotionLeaningCalculator()
        self._scorer: IRawScoreProvider = scorer or EmotionFrequencyScorer()
        self._coupling = coupling or PsychologicalCouplingModel()

    @classmethod
    def from_settings(
        cls,
        trade_provider: ITradeProvider,
        settings: Settings,
        *,
        scorer: IRawScoreProvider | None = None,
    ) -> AnalyticsService:
        return cls(
            trade_provider,
            calculator=EmotionLeaningCalculator(threshold=settings.leaning.threshold),
            scorer=scorer or EmotionFrequencyScorer.from_config(settings.coupling),
            coupling=PsychologicalCouplingModel.from_config(settings.coupling),
        )

    async def filtered_trades(
        self, filters: FilterState, user_id: str | None = None,
    ) -> list[Trade]:
        """Trades matching ``filters``, sorted by its sort keys."""
        trades = await self._provider.fetch_trades(user_id)
        return self._aggregator.run(trades, filters)

    async def emotional_analysis(
        self, filters: FilterState, user_id: str | None = None,
    ) -> AnalyticsResponse:
        trades = await self._provider.fetch_trades(user_id)
        filtered = self._aggregator.apply(trades, filters)
        emotional_data = self._calculator.calculate(filtered)

        raw_discipline, raw_tilt = self._scorer.score(filtered, emotional_data)
        metrics = self._coupling.correct(raw_discipline, raw_tilt)

        logger.info(
            "Emotional analysis: %d/%d trades, %d emotion(s), %d warning(s)",
            len(filtered), len(trades), len(emotional_data),
            len(metrics.validation_warnings),
        )
        return AnalyticsResponse(
            emotional_data=emotional_data,
            metrics=metrics,
            total_trades=len(filtered),
            active_filters=filters.active_count(),
        )
