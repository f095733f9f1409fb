from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, TYPE_CHECKING

from ..core.events import PassiveUnitsChangedEvent
from ..exceptions import CatalogError
from .timers import TimerBackend, TimerHandle

if TYPE_CHECKING:
    from .game_state import GameState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CadenceConfig:
    """Tick interval tuning.

    Attributes:
        base_ms: Interval with a single passive unit.
        step_ms: Reduction per additional unit.
        floor_ms: Shortest allowed interval.
    """

    base_ms: int = 1000
    step_ms: int = 100
    floor_ms: int = 200

    def __post_init__(self) -> None:
        if self.floor_ms <= 0:
            raise CatalogError(f"floor_ms must be > 0, got {self.floor_ms}")
        if self.base_ms < self.floor_ms:
            raise CatalogError(f"base_ms ({self.base_ms}) must be >= floor_ms ({self.floor_ms})")
        if self.step_ms < 0:
            raise CatalogError(f"step_ms must be >= 0, got {self.step_ms}")


def interval_for(units: int, config: Optional[CadenceConfig] = None) -> Optional[int]:
    """Tick interval in ms for ``units`` passive units, or None when idle."""
    if units <= 0:
        return None
    cfg = config or CadenceConfig()
    return max(cfg.floor_ms, cfg.base_ms - (units - 1) * cfg.step_ms)


class SchedulerState(Enum):
    IDLE = "idle"
    RUNNING = "running"


class PassiveScheduler:
    """Fires GameState.tick(1) at a cadence set by the owned passive units.

    The scheduler owns exactly one timer handle. reconfigure() cancels it and
    re-arms a fresh one at the recomputed interval; it runs automatically on
    every PassiveUnitsChangedEvent.
    """

    def __init__(self, game: "GameState", backend: TimerBackend, config: Optional[CadenceConfig] = None) -> None:
        self.game = game
        self.backend = backend
        self.config = config or CadenceConfig()
        self._timer: Optional[TimerHandle] = None
        self._interval_ms: Optional[int] = None
        self._ticks = 0
        self.game.event_bus.subscribe(PassiveUnitsChangedEvent, self._on_passive_changed)
        self.reconfigure()

    @property
    def state(self) -> SchedulerState:
        return SchedulerState.RUNNING if self._timer is not None else SchedulerState.IDLE

    @property
    def interval_ms(self) -> Optional[int]:
        return self._interval_ms

    @property
    def ticks_fired(self) -> int:
        return self._ticks

    def reconfigure(self) -> SchedulerState:
        self._cancel()
        interval = interval_for(self.game.passive_units, self.config)
        if interval is None:
            logger.debug("No passive units owned; scheduler idle")
            return self.state
        self._timer = self.backend.schedule_interval(self._on_timer, interval)
        self._interval_ms = interval
        logger.info("Passive production armed: units=%d interval=%dms", self.game.passive_units, interval)
        return self.state

    def stop(self) -> None:
        if self._timer is not None:
            logger.info("Passive production stopped after %d ticks", self._ticks)
        self._cancel()

    def close(self) -> None:
        self.stop()
        self.game.event_bus.unsubscribe(PassiveUnitsChangedEvent, self._on_passive_changed)

    def _cancel(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
        self._timer = None
        self._interval_ms = None

    def _on_passive_changed(self, evt: PassiveUnitsChangedEvent) -> None:
        self.reconfigure()

    def _on_timer(self) -> None:
        self._ticks += 1
        self.game.tick(1)
