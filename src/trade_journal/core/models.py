"""Core domain models used across the trade journal.

Wire names (query-string keys and JSON payload keys) are camelCase and
exposed as pydantic aliases; Python attributes stay snake_case.  All
models are immutable once built.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .enums import (
    Emotion,
    Leaning,
    LeaningSide,
    Market,
    PnlFilter,
    Side,
    SortField,
    SortOrder,
)


# ---------------------------------------------------------------------------
# Filter state
# ---------------------------------------------------------------------------

class FilterState(BaseModel):
    """Canonical trade filter.

    Every field is optional; ``None`` means "unconstrained".  Blank
    strings and empty emotion lists collapse to ``None`` on construction
    so two states that filter identically always compare equal.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    symbol: str | None = None
    market: Market | None = None
    date_from: date | None = Field(default=None, alias="dateFrom")
    date_to: date | None = Field(default=None, alias="dateTo")
    pnl_filter: PnlFilter | None = Field(default=None, alias="pnlFilter")
    strategy_id: str | None = Field(default=None, alias="strategyId")
    side: Side | None = None
    emotional_states: tuple[Emotion, ...] | None = Field(
        default=None, alias="emotionalStates"
    )
    sort_by: SortField | None = Field(default=None, alias="sortBy")
    sort_order: SortOrder | None = Field(default=None, alias="sortOrder")

    @field_validator("symbol", "strategy_id", mode="before")
    @classmethod
    def _strip_text(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip() or None
        return value

    @field_validator(
        "market", "date_from", "date_to", "pnl_filter",
        "side", "sort_by", "sort_order",
        mode="before",
    )
    @classmethod
    def _blank_is_unset(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("emotional_states", mode="before")
    @classmethod
    def _normalise_emotions(cls, value: Any) -> Any:
        if value is None:
            return None
        if isinstance(value, str):
            value = value.split(",")
        tags: list[Any] = []
        for item in value:
            if isinstance(item, str) and not isinstance(item, Emotion):
                item = item.strip().upper()
                if not item:
                    continue
            if item not in tags:
                tags.append(item)
        return tuple(tags) or None

    # ------------------------------------------------------------------ #
    # Derived views                                                        #
    # ------------------------------------------------------------------ #

    def active_count(self) -> int:
        """Number of filter dimensions that narrow the trade set.

        Sort keys and ``pnlFilter=all`` do not count.
        """
        count = sum(
            1
            for value in (
                self.symbol,
                self.market,
                self.date_from,
                self.date_to,
                self.strategy_id,
                self.side,
                self.emotional_states,
            )
            if value
        )
        if self.pnl_filter not in (None, PnlFilter.ALL):
            count += 1
        return count

    def has_active(self) -> bool:
        return self.active_count() > 0

    def with_defaults(self) -> FilterState:
        """Merge this state over the default trade filters."""
        return DEFAULT_TRADE_FILTERS.model_copy(
            update=self.model_dump(exclude_none=True)
        )


DEFAULT_TRADE_FILTERS = FilterState(
    pnl_filter=PnlFilter.ALL,
    sort_by=SortField.TRADE_DATE,
    sort_order=SortOrder.DESC,
)


# ---------------------------------------------------------------------------
# Trades (external, read-only)
# ---------------------------------------------------------------------------

class Trade(BaseModel):
    """A journalled trade as delivered by the persistence provider.

    ``market`` and ``side`` are kept as received; ``emotional_state`` is
    kept raw and decoded lazily by :mod:`trade_journal.journal.emotions`.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    symbol: str = ""
    market: str | None = None
    side: str | None = None
    pnl: float | None = None
    trade_date: date
    emotional_state: Any = None
    strategy_id: str | None = None
    entry_price: float | None = None
    exit_price: float | None = None
    quantity: float | None = None

    @field_validator("id", "strategy_id", mode="before")
    @classmethod
    def _stringify_ids(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("symbol", mode="before")
    @classmethod
    def _symbol_or_blank(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("trade_date", mode="before")
    @classmethod
    def _date_only(cls, value: Any) -> Any:
        # Timestamps ("2024-03-01T14:30:00Z") are truncated to their date
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, str) and len(value) > 10:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
        return value


# ---------------------------------------------------------------------------
# Analytics results
# ---------------------------------------------------------------------------

class EmotionAggregate(BaseModel):
    """Directional statistics for one emotion tag."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    tag: Emotion = Field(alias="subject")
    value: float  # |leaning_value|, radar magnitude
    full_mark: int = Field(default=100, alias="fullMark")
    leaning: Leaning
    side: LeaningSide
    leaning_value: float = Field(alias="leaningValue")
    total_trades: int = Field(alias="totalTrades")
    buy_count: int = Field(alias="buyCount")
    sell_count: int = Field(alias="sellCount")
    null_count: int = Field(alias="nullCount")


class PsychologicalMetrics(BaseModel):
    """Corrected discipline / tilt pair.

    Invariants: both in [0, 100], ``|discipline - tilt|`` within the
    configured deviation, and never in a forbidden corner.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    discipline_level: float = Field(alias="disciplineLevel")
    tilt_control: float = Field(alias="tiltControl")
    stability_index: float = Field(alias="stabilityIndex")
    validation_warnings: tuple[str, ...] = Field(
        default=(), alias="validationWarnings"
    )


class AnalyticsResponse(BaseModel):
    """Result of one emotional-analysis read."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    emotional_data: list[EmotionAggregate] = Field(
        default_factory=list, alias="emotionalData"
    )
    metrics: PsychologicalMetrics = Field(alias="psychologicalMetrics")
    total_trades: int = Field(default=0, alias="totalTrades")
    active_filters: int = Field(default=0, alias="activeFilters")

    def to_payload(self) -> dict[str, Any]:
        """JSON body of the analytics read endpoint."""
        return {
            "emotionalData": [
                agg.model_dump(by_alias=True, mode="json")
                for agg in self.emotional_data
            ],
            "psychologicalMetrics": self.metrics.model_dump(
                by_alias=True, mode="json", exclude={"validation_warnings"},
            ),
            "validationWarnings": list(self.metrics.validation_warnings),
            "totalTrades": self.total_trades,
            "activeFilters": self.active_filters,
        }
