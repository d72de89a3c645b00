"""Shared fixtures for journal tests."""

import pytest

from trade_journal.journal.aggregator import TradeAggregator
from trade_journal.journal.emotions import EmotionLeaningCalculator
from trade_journal.journal.psychology import (
    EmotionFrequencyScorer,
    PsychologicalCouplingModel,
)


@pytest.fixture
def aggregator():
    return TradeAggregator()


@pytest.fixture
def calculator():
    return EmotionLeaningCalculator(threshold=15.0)


@pytest.fixture
def coupling():
    return PsychologicalCouplingModel(
        max_deviation=30.0, upper_extreme=90.0, lower_extreme=10.0
    )


@pytest.fixture
def scorer():
    return EmotionFrequencyScorer(default_discipline=85.0, default_tilt=72.0)
