"""Cancellable repeating timers used by the passive scheduler.

ManualClock is deterministic and advanced explicitly (headless loop, tests).
ArcadeTimerBackend hands timers to the Arcade/pyglet clock so firings are
serialized with input events on the window's event loop.
"""
from __future__ import annotations

import itertools
import logging
from typing import Callable, List, Optional, Protocol

logger = logging.getLogger(__name__)

TimerCallback = Callable[[], None]


class TimerHandle(Protocol):
    @property
    def active(self) -> bool:  # pragma: no cover - interface
        ...

    def cancel(self) -> None:  # pragma: no cover - interface
        ...


class TimerBackend(Protocol):
    def schedule_interval(self, callback: TimerCallback, interval_ms: int) -> TimerHandle:  # pragma: no cover
        ...


class _ManualTimer:
    def __init__(self, clock: "ManualClock", callback: TimerCallback, interval_ms: int, seq: int) -> None:
        self._clock = clock
        self.callback = callback
        self.interval_ms = interval_ms
        self.next_due_ms = clock.now_ms + interval_ms
        self.seq = seq
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        if self._active:
            self._active = False
            self._clock._discard(self)


class ManualClock:
    """Integer-millisecond clock that fires repeating timers on advance().

    Timers fire in due-time order (ties in creation order); a timer that is
    due several times within one advance fires once per elapsed interval.
    """

    def __init__(self) -> None:
        self._now_ms = 0
        self._timers: List[_ManualTimer] = []
        self._seq = itertools.count()

    @property
    def now_ms(self) -> int:
        return self._now_ms

    @property
    def active_timers(self) -> int:
        return len(self._timers)

    def schedule_interval(self, callback: TimerCallback, interval_ms: int) -> _ManualTimer:
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be > 0, got {interval_ms}")
        timer = _ManualTimer(self, callback, int(interval_ms), next(self._seq))
        self._timers.append(timer)
        return timer

    def _discard(self, timer: _ManualTimer) -> None:
        if timer in self._timers:
            self._timers.remove(timer)

    def _next_due(self, until_ms: int) -> Optional[_ManualTimer]:
        due = [t for t in self._timers if t.next_due_ms <= until_ms]
        if not due:
            return None
        return min(due, key=lambda t: (t.next_due_ms, t.seq))

    def advance(self, ms: int) -> int:
        """Move time forward by ``ms`` and fire due timers. Returns firings."""
        if ms < 0:
            raise ValueError("Cannot advance the clock backwards")
        target = self._now_ms + int(ms)
        fired = 0
        while True:
            timer = self._next_due(target)
            if timer is None:
                break
            self._now_ms = timer.next_due_ms
            timer.next_due_ms += timer.interval_ms
            fired += 1
            timer.callback()
        self._now_ms = target
        return fired


class _ArcadeTimer:
    def __init__(self, arcade_module, callback: TimerCallback) -> None:
        self._arcade = arcade_module
        self._callback = callback
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def fire(self, delta_time: float) -> None:
        self._callback()

    def cancel(self) -> None:
        if self._active:
            self._active = False
            self._arcade.unschedule(self.fire)


class ArcadeTimerBackend:
    """Schedules timers on the Arcade clock via arcade.schedule/unschedule."""

    def __init__(self) -> None:
        import arcade

        self._arcade = arcade

    def schedule_interval(self, callback: TimerCallback, interval_ms: int) -> _ArcadeTimer:
        timer = _ArcadeTimer(self._arcade, callback)
        self._arcade.schedule(timer.fire, interval_ms / 1000.0)
        logger.debug("Arcade timer scheduled every %dms", interval_ms)
        return timer
