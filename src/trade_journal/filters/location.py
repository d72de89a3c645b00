"""In-memory navigable location.

Used wherever no browser is around: tests, the CLI and server-side
rendering of shareable links.  Keeps every URL it was replaced with so
callers can count writes.
"""

from __future__ import annotations


class InMemoryLocation:
    """Mutable URL holder implementing :class:`~trade_journal.core.interfaces.ILocation`."""

    def __init__(self, url: str = "http://localhost/") -> None:
        self._url = url
        self.history: list[str] = []

    def read(self) -> str:
        return self._url

    def replace(self, url: str) -> None:
        self._url = url
        self.history.append(url)

    @property
    def writes(self) -> int:
        return len(self.history)

    def __repr__(self) -> str:
        return f"InMemoryLocation({self._url!r})"
