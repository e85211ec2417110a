"""Cancellable timelines of delayed actions."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Callable, Protocol, Sequence


class TimerHandle(Protocol):
    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    """Clock plus delayed-callback primitive, in seconds."""

    def now(self) -> float:
        ...

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        ...


class AsyncioScheduler(Scheduler):
    """Schedule callbacks on the running asyncio event loop."""

    def now(self) -> float:
        return asyncio.get_running_loop().time()

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        return asyncio.get_running_loop().call_later(delay, callback)


@dataclass(frozen=True, slots=True)
class TimelineEntry:
    delay_ms: int
    action: Callable[[], None]


class Timeline:
    """Run actions at fixed offsets from ``start()``, strictly in order.

    Only the next entry is ever armed, so entries sharing an offset still run
    in the order given and ``cancel()`` has a single handle to revoke.
    """

    def __init__(self, scheduler: Scheduler, entries: Sequence[TimelineEntry]) -> None:
        self._scheduler = scheduler
        self._entries = sorted(entries, key=lambda entry: entry.delay_ms)
        self._started_at: float | None = None
        self._position = 0
        self._handle: TimerHandle | None = None
        self._cancelled = False

    @property
    def finished(self) -> bool:
        return self._position >= len(self._entries)

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def start(self) -> None:
        if self._started_at is not None:
            raise RuntimeError("Timeline already started")
        self._started_at = self._scheduler.now()
        self._arm()

    def cancel(self) -> None:
        self._cancelled = True
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _arm(self) -> None:
        if self._cancelled or self.finished:
            return
        assert self._started_at is not None
        due = self._started_at + self._entries[self._position].delay_ms / 1000
        delay = max(0.0, due - self._scheduler.now())
        self._handle = self._scheduler.call_later(delay, self._fire)

    def _fire(self) -> None:
        self._handle = None
        if self._cancelled:
            return
        entry = self._entries[self._position]
        self._position += 1
        entry.action()
        self._arm()
