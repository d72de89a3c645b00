"""Debounced URL sync: coalesce filter edits into one location write.

Every :meth:`DebouncedURLSync.trigger` cancels the write scheduled by the
previous trigger and schedules a fresh one ``delay_ms`` later, so a burst
of edits produces exactly one write carrying the latest filters.  Writes
only ever run from the scheduler's callback on a single thread; there is
no separate cancel operation.

Two schedulers ship with the package:

AsyncioScheduler   ``loop.call_later`` on the running event loop
ManualScheduler    deterministic virtual time, advanced explicitly

Usage::

    sync = debounced_url_update(codec, filters, delay_ms=300)
    sync()                       # schedule
    sync(new_filters)            # reschedule with the latest state
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from ..core.config import FilterSyncConfig
from ..core.interfaces import IScheduler
from ..core.models import FilterState
from .codec import FilterCodec

logger = logging.getLogger(__name__)

DEFAULT_DELAY_MS = 500


# ---------------------------------------------------------------------------
# Schedulers
# ---------------------------------------------------------------------------

class AsyncioScheduler:
    """Schedule callbacks on an asyncio event loop.

    The loop defaults to the one running when :meth:`schedule` is called.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def schedule(self, fn: Callable[[], None], delay_ms: float) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(max(0.0, delay_ms) / 1000.0, fn)

    def cancel(self, handle: asyncio.TimerHandle) -> None:
        handle.cancel()


@dataclass(order=True)
class _Timer:
    due_ms: float
    seq: int
    fn: Callable[[], None] = field(compare=False)
    cancelled: bool = field(default=False, compare=False)


class ManualScheduler:
    """Virtual-time scheduler.

    Time only moves when :meth:`advance` is called; due callbacks fire
    in (due time, scheduling order) order.
    """

    def __init__(self) -> None:
        self._now_ms = 0.0
        self._queue: list[_Timer] = []
        self._seq = itertools.count()

    @property
    def now_ms(self) -> float:
        return self._now_ms

    @property
    def pending(self) -> int:
        return sum(1 for timer in self._queue if not timer.cancelled)

    def schedule(self, fn: Callable[[], None], delay_ms: float) -> _Timer:
        timer = _Timer(self._now_ms + max(0.0, delay_ms), next(self._seq), fn)
        heapq.heappush(self._queue, timer)
        return timer

    def cancel(self, handle: _Timer) -> None:
        handle.cancelled = True

    def advance(self, ms: float) -> int:
        """Move time forward, firing due callbacks.  Returns how many fired."""
        if ms < 0:
            raise ValueError(f"ManualScheduler cannot go backwards: {ms}")
        target = self._now_ms + ms
        fired = 0
        while self._queue and self._queue[0].due_ms <= target:
            timer = heapq.heappop(self._queue)
            if timer.cancelled:
                continue
            self._now_ms = timer.due_ms
            timer.fn()
            fired += 1
        self._now_ms = target
        return fired


# ---------------------------------------------------------------------------
# Debounced writer
# ---------------------------------------------------------------------------

class DebouncedURLSync:
    """Single-owner writer of filter state into the codec's location.

    Parameters
    ----------
    codec : FilterCodec
        Codec whose location receives the writes.
    filters : FilterState | None
        Initial state to write.
    delay_ms : float
        Quiet period before a write.  Default 500.
    scheduler : IScheduler | None
        Timer source.  Defaults to :class:`AsyncioScheduler`.
    """

    def __init__(
        self,
        codec: FilterCodec,
        filters: FilterState | None = None,
        *,
        delay_ms: float = DEFAULT_DELAY_MS,
        scheduler: IScheduler | None = None,
    ) -> None:
        self._codec = codec
        self._filters = filters if filters is not None else FilterState()
        self._delay_ms = delay_ms
        self._scheduler: IScheduler = scheduler or AsyncioScheduler()
        self._handle: Any = None
        self._writes = 0

    @classmethod
    def from_config(
        cls,
        codec: FilterCodec,
        config: FilterSyncConfig,
        filters: FilterState | None = None,
        *,
        scheduler: IScheduler | None = None,
    ) -> DebouncedURLSync:
        return cls(codec, filters, delay_ms=config.debounce_ms, scheduler=scheduler)

    @property
    def filters(self) -> FilterState:
        return self._filters

    @property
    def pending(self) -> bool:
        return self._handle is not None

    @property
    def writes(self) -> int:
        return self._writes

    def trigger(self, filters: FilterState | None = None) -> None:
        """(Re)schedule a write of the latest filters."""
        if filters is not None:
            self._filters = filters
        if self._handle is not None:
            self._scheduler.cancel(self._handle)
        self._handle = self._scheduler.schedule(self._flush, self._delay_ms)
        logger.debug("URL write scheduled in %sms", self._delay_ms)

    __call__ = trigger

    def _flush(self) -> None:
        self._handle = None
        if self._codec.update(self._filters):
            self._writes += 1
            logger.info(
                "Filter state synced to URL",
                extra={"active_filters": self._filters.active_count()},
            )


def debounced_url_update(
    codec: FilterCodec,
    filters: FilterState | None = None,
    delay_ms: float = DEFAULT_DELAY_MS,
    scheduler: IScheduler | None = None,
) -> DebouncedURLSync:
    """Return a trigger that writes ``filters`` after ``delay_ms`` of quiet."""
    return DebouncedURLSync(
        codec, filters, delay_ms=delay_ms, scheduler=scheduler,
    )
