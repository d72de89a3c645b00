"""Psychological coupling: keep discipline and tilt scores coherent.

Discipline Level and Tilt Control are produced by a raw scorer that
knows nothing about each other.  A trader cannot be highly disciplined
while having no tilt control at all, so the pair is post-processed:

1. both scores are clamped into [0, 100];
2. if they are more than ``max_deviation`` apart, the more extreme one
   (farther from 50) is pulled toward the other until the gap equals
   ``max_deviation`` exactly;
3. if the pair sits in a forbidden corner (discipline > 90 with tilt
   < 10, or the mirror image), tilt is moved toward the centre just
   enough to leave it, and step 2 is re-checked.

Every correction is recorded as a warning string; nothing is raised.
Correcting an already-corrected pair returns it unchanged with no
warnings.  An optional stability floor adds an advisory warning
when ``(discipline + tilt) / 2`` is below it; that one describes the pair
and so repeats.

Usage::

    model = PsychologicalCouplingModel()
    metrics = model.correct(95, 5)
    metrics.discipline_level, metrics.tilt_control   # (95.0, 65.0)
    metrics.validation_warnings                      # ('Tilt Control raised ...',)
"""

from __future__ import annotations

import logging
import math
from typing import Sequence

from ..core.config import CouplingConfig
from ..core.enums import Emotion
from ..core.models import EmotionAggregate, PsychologicalMetrics, Trade

logger = logging.getLogger(__name__)

DISCIPLINE = "Discipline Level"
TILT = "Tilt Control"

# Float slack so a gap of exactly max_deviation survives re-application
_EPS = 1e-9


def _moved(delta: float) -> str:
    return "raised" if delta > 0 else "lowered"


class PsychologicalCouplingModel:
    """Pure corrector for (discipline, tilt) pairs.

    Parameters
    ----------
    max_deviation : float
        Largest allowed ``|discipline - tilt|``.  Default 30.
    upper_extreme, lower_extreme : float
        Bounds of the forbidden corners.  Defaults 90 / 10.
    min_stability_index : float
        Floor for the stability index.  A corrected pair below it gets an
        advisory warning; values are left alone.  Default 0 (off).
    """

    def __init__(
        self,
        *,
        max_deviation: float = 30.0,
        upper_extreme: float = 90.0,
        lower_extreme: float = 10.0,
        min_stability_index: float = 0.0,
    ) -> None:
        self._max_deviation = max_deviation
        self._upper = upper_extreme
        self._lower = lower_extreme
        self._min_stability = min_stability_index

    @classmethod
    def from_config(cls, config: CouplingConfig) -> PsychologicalCouplingModel:
        return cls(
            max_deviation=config.max_deviation,
            upper_extreme=config.upper_extreme,
            lower_extreme=config.lower_extreme,
            min_stability_index=config.min_stability_index,
        )

    def correct(self, raw_discipline: float, raw_tilt: float) -> PsychologicalMetrics:
        warnings: list[str] = []
        discipline = self._clamp(DISCIPLINE, raw_discipline, warnings)
        tilt = self._clamp(TILT, raw_tilt, warnings)
        discipline, tilt = self._limit_deviation(discipline, tilt, warnings)
        discipline, tilt = self._leave_forbidden_corner(discipline, tilt, warnings)
        stability = (discipline + tilt) / 2
        if stability < self._min_stability:
            warnings.append(
                f"Stability index {stability:.1f} is below the minimum of "
                f"{self._min_stability:g}"
            )

        if warnings:
            logger.warning(
                "Psychological metrics corrected to discipline=%.1f tilt=%.1f (%d warning(s))",
                discipline, tilt, len(warnings),
            )
        return PsychologicalMetrics(
            discipline_level=discipline,
            tilt_control=tilt,
            stability_index=stability,
            validation_warnings=tuple(warnings),
        )

    def is_coherent(self, discipline: float, tilt: float) -> bool:
        """Whether the pair already satisfies every coupling invariant."""
        return (
            0.0 <= discipline <= 100.0
            and 0.0 <= tilt <= 100.0
            and abs(discipline - tilt) <= self._max_deviation + _EPS
            and not self._in_forbidden_corner(discipline, tilt)
        )

    # ------------------------------------------------------------------ #
    # Steps                                                                #
    # ------------------------------------------------------------------ #

    @staticmethod
    def _clamp(label: str, value: float, warnings: list[str]) -> float:
        value = float(value)
        if math.isnan(value):
            warnings.append(f"{label} was not a number and was reset to 50.0")
            return 50.0
        clamped = min(100.0, max(0.0, value))
        if clamped != value:
            warnings.append(f"{label} was outside [0, 100] and was clamped to {clamped:.1f}")
        return clamped

    def _limit_deviation(
        self,
        discipline: float,
        tilt: float,
        warnings: list[str],
        mover: str | None = None,
    ) -> tuple[float, float]:
        if abs(discipline - tilt) <= self._max_deviation + _EPS:
            return discipline, tilt

        if mover is None:
            # Ties move tilt, matching the forbidden-corner step
            mover = DISCIPLINE if abs(discipline - 50) > abs(tilt - 50) else TILT

        if mover == DISCIPLINE:
            target = tilt + self._max_deviation if discipline > tilt else tilt - self._max_deviation
            delta = target - discipline
            discipline = target
            other = TILT
        else:
            target = discipline + self._max_deviation if tilt > discipline else discipline - self._max_deviation
            delta = target - tilt
            tilt = target
            other = DISCIPLINE

        warnings.append(
            f"{mover} {_moved(delta)} by {abs(delta):.1f} to keep its deviation "
            f"from {other} within {self._max_deviation:g}"
        )
        return discipline, tilt

    def _in_forbidden_corner(self, discipline: float, tilt: float) -> bool:
        return (discipline > self._upper and tilt < self._lower) or (
            discipline < self._lower and tilt > self._upper
        )

    def _leave_forbidden_corner(
        self, discipline: float, tilt: float, warnings: list[str],
    ) -> tuple[float, float]:
        if not self._in_forbidden_corner(discipline, tilt):
            return discipline, tilt

        target = self._lower if tilt < self._lower else self._upper
        delta = target - tilt
        warnings.append(
            f"Impossible psychological state: {TILT} {_moved(delta)} by "
            f"{abs(delta):.1f} to leave the forbidden region"
        )
        return self._limit_deviation(discipline, target, warnings, mover=DISCIPLINE)


class EmotionFrequencyScorer:
    """Default raw score provider.

    Discipline follows the DISCIPLINE tag's radar value (x10, capped at
    100); tilt control falls as the TILT tag's value rises.  Missing tags
    fall back to fixed defaults.  The output is *not* coupled; feed it to
    :class:`PsychologicalCouplingModel`.
    """

    def __init__(
        self,
        *,
        default_discipline: float = 85.0,
        default_tilt: float = 72.0,
    ) -> None:
        self._default_discipline = default_discipline
        self._default_tilt = default_tilt

    @classmethod
    def from_config(cls, config: CouplingConfig) -> EmotionFrequencyScorer:
        return cls(
            default_discipline=config.default_discipline,
            default_tilt=config.default_tilt,
        )

    def score(
        self,
        trades: Sequence[Trade],
        emotional_data: Sequence[EmotionAggregate],
    ) -> tuple[float, float]:
        by_tag = {agg.tag: agg for agg in emotional_data}

        discipline = by_tag.get(Emotion.DISCIPLINE)
        tilt = by_tag.get(Emotion.TILT)
        discipline_level = (
            min(100.0, discipline.value * 10) if discipline else self._default_discipline
        )
        tilt_control = (
            max(0.0, 100.0 - tilt.value * 10) if tilt else self._default_tilt
        )
        return discipline_level, tilt_control
