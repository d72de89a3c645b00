"""Protocol interfaces for the trade journal core.

Every collaborator the core talks to is defined here as a Protocol so
tests can plug in in-memory fakes and hosts can plug in real ones
without changing callers.
"""

from __future__ import annotations

from typing import Any, Callable, Protocol, Sequence, runtime_checkable

from .models import EmotionAggregate, Trade


# ---------------------------------------------------------------------------
# Navigable location
# ---------------------------------------------------------------------------

@runtime_checkable
class ILocation(Protocol):
    """A mutable URL the filter state is mirrored into.

    Exactly one writer mutates it at a time; the filter codec and the
    debounced sync are the only writers inside this package.
    """

    def read(self) -> str:
        """Full current URL, query string included."""
        ...

    def replace(self, url: str) -> None:
        """Replace the current URL in place (no new history entry)."""
        ...


# ---------------------------------------------------------------------------
# Timers
# ---------------------------------------------------------------------------

@runtime_checkable
class IScheduler(Protocol):
    """Single-threaded delayed-callback scheduler."""

    def schedule(self, fn: Callable[[], None], delay_ms: float) -> Any:
        """Run ``fn`` once after ``delay_ms``; returns a cancellable handle."""
        ...

    def cancel(self, handle: Any) -> None:
        """Cancel a pending callback.  Cancelling a fired handle is a no-op."""
        ...


# ---------------------------------------------------------------------------
# External providers
# ---------------------------------------------------------------------------

@runtime_checkable
class ITradeProvider(Protocol):
    """Trade persistence collaborator."""

    async def fetch_trades(self, user_id: str | None = None) -> list[Trade]: ...


@runtime_checkable
class IRawScoreProvider(Protocol):
    """Produces *uncorrected* discipline / tilt scores.

    The coupling model sanitises whatever this returns, so
    implementations only have to return two numbers.
    """

    def score(
        self,
        trades: Sequence[Trade],
        emotional_data: Sequence[EmotionAggregate],
    ) -> tuple[float, float]: ...
