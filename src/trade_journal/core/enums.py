"""Enumerations used across the trade journal core."""

from enum import Enum


class Market(str, Enum):
    STOCK = "stock"
    CRYPTO = "crypto"
    FOREX = "forex"
    FUTURES = "futures"


class Side(str, Enum):
    BUY = "Buy"
    SELL = "Sell"


class PnlFilter(str, Enum):
    ALL = "all"
    PROFITABLE = "profitable"  # pnl > 0
    LOSSABLE = "lossable"  # pnl < 0


class SortField(str, Enum):
    TRADE_DATE = "trade_date"
    SYMBOL = "symbol"
    ENTRY_PRICE = "entry_price"
    EXIT_PRICE = "exit_price"
    PNL = "pnl"
    QUANTITY = "quantity"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class Emotion(str, Enum):
    """Closed emotion vocabulary a trade can be tagged with.

    Declaration order is the output order of the leaning calculator.
    """

    FOMO = "FOMO"
    REVENGE = "REVENGE"
    TILT = "TILT"
    OVERRISK = "OVERRISK"
    PATIENCE = "PATIENCE"
    REGRET = "REGRET"
    DISCIPLINE = "DISCIPLINE"
    CONFIDENT = "CONFIDENT"
    ANXIOUS = "ANXIOUS"
    NEUTRAL = "NEUTRAL"

    @classmethod
    def lookup(cls, raw: str) -> "Emotion | None":
        """Case-insensitive lookup; ``None`` for tags outside the vocabulary."""
        try:
            return cls(raw.strip().upper())
        except ValueError:
            return None


class Leaning(str, Enum):
    BUY = "Buy Leaning"
    SELL = "Sell Leaning"
    BALANCED = "Balanced"


class LeaningSide(str, Enum):
    BUY = "Buy"
    SELL = "Sell"
    NULL = "NULL"
