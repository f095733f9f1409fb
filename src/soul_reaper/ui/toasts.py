from __future__ import annotations

import logging
from collections import deque
from typing import Deque, Optional

from ..core.events import AchievementUnlocked, EventBus

logger = logging.getLogger(__name__)


class AchievementToasts:
    """Queues one transient message per unlocked achievement.

    Messages are shown one at a time for ``duration`` seconds each; the
    window advances them with update(dt).
    """

    def __init__(self, duration: float = 2.5) -> None:
        if duration <= 0:
            raise ValueError("Toast duration must be > 0")
        self.duration = duration
        self._pending: Deque[str] = deque()
        self._current: Optional[str] = None
        self._remaining = 0.0
        self._bus: Optional[EventBus] = None

    @property
    def current(self) -> Optional[str]:
        return self._current

    @property
    def pending(self) -> int:
        return len(self._pending)

    def attach(self, bus: EventBus) -> None:
        self._bus = bus
        bus.subscribe(AchievementUnlocked, self._on_unlocked)

    def detach(self) -> None:
        if self._bus is not None:
            self._bus.unsubscribe(AchievementUnlocked, self._on_unlocked)
            self._bus = None

    def push(self, message: str) -> None:
        self._pending.append(message)
        if self._current is None:
            self._advance()

    def update(self, dt: float) -> None:
        if self._current is None:
            return
        self._remaining -= dt
        if self._remaining <= 0:
            self._advance()

    def _advance(self) -> None:
        if self._pending:
            self._current = self._pending.popleft()
            self._remaining = self.duration
            logger.debug("Showing toast: %s", self._current)
        else:
            self._current = None
            self._remaining = 0.0

    def _on_unlocked(self, evt: AchievementUnlocked) -> None:
        self.push(f"{evt.name} Unlocked!")
