"""Emotion leaning: directional skew of emotion tags toward Buy or Sell.

Tallies, for every tag of the emotion vocabulary, how many of the given
trades were buys, sells or side-less, and classifies the tag as
"Buy Leaning", "Sell Leaning" or "Balanced".  Answers questions like
"Does FOMO push me into longs?".

A trade's ``emotional_state`` arrives in whatever shape the journal form
stored it: a list of strings, a JSON-encoded list, a bare string, or
garbage.  :func:`decode_emotional_state` turns it into a tagged variant
and never raises; tags outside the vocabulary are dropped without
dropping the trade.

Usage::

    calculator = EmotionLeaningCalculator()
    for agg in calculator.calculate(trades):
        print(agg.tag, agg.leaning, round(agg.leaning_value, 1))
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Iterable, Union

from ..core.enums import Emotion, Leaning, LeaningSide
from ..core.models import EmotionAggregate, Trade

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Emotional state decoding
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StringArray:
    """A list of tag strings (native or JSON-encoded)."""

    items: tuple[str, ...]

    @property
    def tags(self) -> tuple[str, ...]:
        return self.items


@dataclass(frozen=True)
class SingleString:
    """One tag stored as a plain string."""

    value: str

    @property
    def tags(self) -> tuple[str, ...]:
        return (self.value,)


@dataclass(frozen=True)
class Malformed:
    """Anything that cannot carry tags (None, numbers, blank strings, ...)."""

    raw: Any

    @property
    def tags(self) -> tuple[str, ...]:
        return ()


EmotionalState = Union[StringArray, SingleString, Malformed]


def _string_items(values: Iterable[Any]) -> tuple[str, ...]:
    return tuple(v.strip() for v in values if isinstance(v, str) and v.strip())


def decode_emotional_state(raw: Any) -> EmotionalState:
    """Decode a raw ``emotional_state`` value; falls back, never raises."""
    if isinstance(raw, (list, tuple)):
        return StringArray(_string_items(raw))
    if isinstance(raw, str):
        text = raw.strip()
        if not text:
            return Malformed(raw)
        try:
            parsed = json.loads(text)
        except ValueError:
            return SingleString(text)
        if isinstance(parsed, list):
            return StringArray(_string_items(parsed))
        if isinstance(parsed, str) and parsed.strip():
            return SingleString(parsed.strip())
        return SingleString(text)
    return Malformed(raw)


def normalise_tags(state: EmotionalState) -> tuple[Emotion, ...]:
    """Vocabulary tags of a decoded state, upper-cased and de-duplicated."""
    tags: list[Emotion] = []
    for raw_tag in state.tags:
        tag = Emotion.lookup(raw_tag)
        if tag is None:
            logger.debug("Ignoring unknown emotion tag %r", raw_tag)
            continue
        if tag not in tags:
            tags.append(tag)
    return tuple(tags)


def emotions_of(trade: Trade) -> tuple[Emotion, ...]:
    """Vocabulary emotion tags carried by ``trade``."""
    return normalise_tags(decode_emotional_state(trade.emotional_state))


def side_of(trade: Trade) -> LeaningSide:
    """Normalised trade side; anything but buy/sell is ``NULL``."""
    side = (trade.side or "").strip().casefold()
    if side == "buy":
        return LeaningSide.BUY
    if side == "sell":
        return LeaningSide.SELL
    return LeaningSide.NULL


# ---------------------------------------------------------------------------
# Leaning calculator
# ---------------------------------------------------------------------------

@dataclass
class _Tally:
    """Per-tag side counter."""

    buys: int = 0
    sells: int = 0
    nulls: int = 0

    @property
    def total(self) -> int:
        return self.buys + self.sells + self.nulls

    def record(self, side: LeaningSide) -> None:
        if side == LeaningSide.BUY:
            self.buys += 1
        elif side == LeaningSide.SELL:
            self.sells += 1
        else:
            self.nulls += 1


class EmotionLeaningCalculator:
    """Per-tag leaning statistics over a set of trades.

    Parameters
    ----------
    threshold : float
        ``leaning_value`` above ``threshold`` is Buy Leaning, below
        ``-threshold`` Sell Leaning, otherwise Balanced.  Default 15.
    """

    def __init__(self, *, threshold: float = 15.0) -> None:
        self._threshold = threshold

    @property
    def threshold(self) -> float:
        return self._threshold

    def calculate(self, trades: Iterable[Trade]) -> list[EmotionAggregate]:
        """Aggregate the trades.  Tags that never occur are left out.

        Output follows vocabulary order.  A tag repeated within one trade
        is counted once for that trade.
        """
        tallies = {tag: _Tally() for tag in Emotion}
        for trade in trades:
            tags = emotions_of(trade)
            if not tags:
                continue
            side = side_of(trade)
            for tag in tags:
                tallies[tag].record(side)

        return [
            self._aggregate(tag, tally)
            for tag, tally in tallies.items()
            if tally.total > 0
        ]

    def classify(self, leaning_value: float) -> tuple[Leaning, LeaningSide]:
        if leaning_value > self._threshold:
            return Leaning.BUY, LeaningSide.BUY
        if leaning_value < -self._threshold:
            return Leaning.SELL, LeaningSide.SELL
        return Leaning.BALANCED, LeaningSide.NULL

    def _aggregate(self, tag: Emotion, tally: _Tally) -> EmotionAggregate:
        total = tally.total
        leaning_value = (tally.buys - tally.sells) / total * 100.0
        leaning_value = max(-100.0, min(100.0, leaning_value))
        leaning, side = self.classify(leaning_value)
        return EmotionAggregate(
            tag=tag,
            value=abs(leaning_value),
            leaning=leaning,
            side=side,
            leaning_value=leaning_value,
            total_trades=total,
            buy_count=tally.buys,
            sell_count=tally.sells,
            null_count=tally.nulls,
        )
