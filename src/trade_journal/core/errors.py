"""Custom exception hierarchy for the trade journal core.

Invalid filter values, malformed emotional states and incoherent
psychological scores are never errors: they are dropped or corrected.
The exceptions below cover programmer mistakes, configuration and the
bundled trade sources.
"""


class JournalError(Exception):
    """Base exception for all trade journal errors."""


# --- Configuration ---
class ConfigError(JournalError):
    """Invalid or missing configuration."""


# --- Filters ---
class FilterError(JournalError):
    """Filter schema misuse."""


class UnknownFilterFieldError(FilterError, KeyError):
    """A filter key outside the recognised query-string schema."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Unknown filter field: {key!r}")

    def __str__(self) -> str:
        return self.args[0]


# --- Providers ---
class ProviderError(JournalError):
    """A bundled collaborator (trade source, scorer) failed."""


class TradeSourceError(ProviderError):
    """Trades could not be loaded from their source."""
