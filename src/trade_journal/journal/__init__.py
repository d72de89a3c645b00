"""Trade journal analytics: filtering, emotion leaning, psychology.

Key components
--------------
TradeAggregator              Conjunctive FilterState predicate + stable sort
EmotionLeaningCalculator     Per-emotion Buy/Sell leaning statistics
PsychologicalCouplingModel   Keeps discipline / tilt scores coherent
EmotionFrequencyScorer       Default raw discipline / tilt scorer
AnalyticsService             Read path behind the analytics endpoint
InMemoryTradeProvider        Fixed trade list
JsonFileTradeProvider        Trades from a JSON export
"""

from .aggregator import TradeAggregator
from .analytics import AnalyticsService
from .emotions import (
    EmotionLeaningCalculator,
    Malformed,
    SingleString,
    StringArray,
    decode_emotional_state,
    emotions_of,
)
from .providers import InMemoryTradeProvider, JsonFileTradeProvider
from .psychology import EmotionFrequencyScorer, PsychologicalCouplingModel

__all__ = [
    "TradeAggregator",
    "AnalyticsService",
    "EmotionLeaningCalculator",
    "Malformed",
    "SingleString",
    "StringArray",
    "decode_emotional_state",
    "emotions_of",
    "InMemoryTradeProvider",
    "JsonFileTradeProvider",
    "EmotionFrequencyScorer",
    "PsychologicalCouplingModel",
]
