"""Trade aggregator: apply a FilterState to a trade collection.

Every active dimension of the filter narrows the set further (AND
across dimensions); the emotion dimension matches a trade carrying any
of the selected tags (OR within the dimension).  Filtering keeps input
order.  Sorting is a separate, explicit and equally stable pass.

Usage::

    aggregator = TradeAggregator()
    crypto_wins = aggregator.apply(
        trades, FilterState(market="crypto", pnl_filter="profitable"),
    )
    newest_first = aggregator.sort(crypto_wins, "trade_date", "desc")
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable

from ..core.enums import PnlFilter, SortField, SortOrder
from ..core.models import FilterState, Trade
from .emotions import emotions_of

logger = logging.getLogger(__name__)

Predicate = Callable[[Trade], bool]


def _norm(value: str | None) -> str:
    return (value or "").strip().casefold()


def _sort_key(trade: Trade, sort_by: SortField) -> Any:
    if sort_by == SortField.SYMBOL:
        return trade.symbol.casefold() if trade.symbol else None
    return getattr(trade, sort_by.value)


class TradeAggregator:
    """Stateless filter / sort engine over :class:`Trade` sequences."""

    # ------------------------------------------------------------------ #
    # Filtering                                                            #
    # ------------------------------------------------------------------ #

    def predicates(self, filters: FilterState) -> list[Predicate]:
        """One predicate per active dimension of ``filters``."""
        preds: list[Predicate] = []

        if filters.symbol:
            needle = filters.symbol.casefold()
            preds.append(lambda t: needle in t.symbol.casefold())

        if filters.market is not None:
            market = filters.market.value
            preds.append(lambda t: _norm(t.market) == market)

        if filters.side is not None:
            side = filters.side.value
            preds.append(lambda t: t.side == side)

        if filters.strategy_id:
            strategy_id = filters.strategy_id
            preds.append(lambda t: t.strategy_id == strategy_id)

        if filters.date_from is not None:
            date_from = filters.date_from
            preds.append(lambda t: t.trade_date >= date_from)

        if filters.date_to is not None:
            date_to = filters.date_to
            preds.append(lambda t: t.trade_date <= date_to)

        if filters.pnl_filter == PnlFilter.PROFITABLE:
            preds.append(lambda t: t.pnl is not None and t.pnl > 0)
        elif filters.pnl_filter == PnlFilter.LOSSABLE:
            preds.append(lambda t: t.pnl is not None and t.pnl < 0)

        if filters.emotional_states:
            wanted = frozenset(filters.emotional_states)
            preds.append(lambda t: not wanted.isdisjoint(emotions_of(t)))

        return preds

    def apply(self, trades: Iterable[Trade], filters: FilterState) -> list[Trade]:
        """Trades matching every active dimension, in input order."""
        trades = list(trades)
        preds = self.predicates(filters)
        if not preds:
            return trades
        kept = [t for t in trades if all(p(t) for p in preds)]
        logger.debug(
            "Filtered %d -> %d trades on %d dimension(s)",
            len(trades), len(kept), len(preds),
        )
        return kept

    # ------------------------------------------------------------------ #
    # Sorting                                                              #
    # ------------------------------------------------------------------ #

    def sort(
        self,
        trades: Iterable[Trade],
        sort_by: SortField | str = SortField.TRADE_DATE,
        sort_order: SortOrder | str = SortOrder.DESC,
    ) -> list[Trade]:
        """Stable sort; trades without a value for ``sort_by`` go last."""
        sort_by = SortField(sort_by)
        descending = SortOrder(sort_order) == SortOrder.DESC

        present: list[Trade] = []
        missing: list[Trade] = []
        for trade in trades:
            (missing if _sort_key(trade, sort_by) is None else present).append(trade)

        # sorted() stays stable with reverse=True
        present = sorted(
            present, key=lambda t: _sort_key(t, sort_by), reverse=descending,
        )
        return present + missing

    def run(self, trades: Iterable[Trade], filters: FilterState) -> list[Trade]:
        """Filter, then sort by the state's sort keys (defaults applied)."""
        effective = filters.with_defaults()
        return self.sort(
            self.apply(trades, effective),
            effective.sort_by,
            effective.sort_order,
        )
