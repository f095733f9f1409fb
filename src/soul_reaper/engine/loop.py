from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Optional

from ..catalog import Catalog
from .game_state import GameState, PurchaseReceipt
from .scheduler import CadenceConfig, PassiveScheduler
from .timers import ManualClock

logger = logging.getLogger(__name__)


@dataclass
class GameConfig:
    """Configuration for the headless game loop.

    Attributes:
        tick_rate: Target updates per second for the loop. If 0 or None, updates as fast as possible.
        max_steps: If provided and > 0, the loop will automatically stop after this many updates.
        clicks_per_second: Automatic reaps performed per second of game time.
        auto_buy: Buy the cheapest affordable upgrade after each update.
        fixed_dt: If set, every update advances game time by exactly this many seconds.
    """

    tick_rate: float = 30.0
    max_steps: Optional[int] = None
    clicks_per_second: float = 5.0
    auto_buy: bool = True
    fixed_dt: Optional[float] = None


class GameEngine:
    """Headless driver: owns a GameState, a ManualClock and the scheduler.

    Each update advances the clock (firing passive ticks), performs the
    automatic clicks owed for the elapsed time and optionally buys upgrades.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        catalog: Optional[Catalog] = None,
        cadence: Optional[CadenceConfig] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.clock = ManualClock()
        self.game = GameState(catalog)
        self.scheduler = PassiveScheduler(self.game, self.clock, cadence)
        self._running: bool = False
        self._step: int = 0
        self._last_time: Optional[float] = None
        self._click_credit: float = 0.0
        self._ms_credit: float = 0.0

    @property
    def running(self) -> bool:
        return self._running

    @property
    def step(self) -> int:
        return self._step

    def start(self) -> None:
        """Start the engine loop state.

        Safe to call multiple times; subsequent calls are no-ops.
        """
        if self._running:
            logger.debug("GameEngine.start() called while already running")
            return
        self._running = True
        self._step = 0
        self._last_time = time.perf_counter()
        self.scheduler.reconfigure()
        logger.info("GameEngine started (tick_rate=%s, max_steps=%s)", self.config.tick_rate, self.config.max_steps)

    def stop(self) -> None:
        """Stop the loop gracefully and cancel passive production."""
        if not self._running:
            return
        self._running = False
        self.scheduler.stop()
        logger.info("GameEngine stopped at step=%s (souls=%s)", self._step, self.game.souls)

    def update(self, dt: float) -> None:
        """Perform a single update.

        Args:
            dt: Delta time in seconds since last update.
        """
        if not self._running:
            logger.debug("update() called while not running; ignored")
            return
        if self.config.fixed_dt is not None:
            dt = self.config.fixed_dt
        dt = max(0.0, dt)
        self._step += 1

        # Whole milliseconds only; the remainder carries to the next update
        self._ms_credit += dt * 1000.0
        whole_ms = int(self._ms_credit)
        self._ms_credit -= whole_ms
        self.clock.advance(whole_ms)

        self._click_credit += dt * max(0.0, self.config.clicks_per_second)
        clicks = int(self._click_credit)
        self._click_credit -= clicks
        for _ in range(clicks):
            self.game.click()

        if self.config.auto_buy:
            self.buy_cheapest()

        logger.debug("Step #%d (dt=%.4f) souls=%d", self._step, dt, self.game.souls)

        if self.config.max_steps is not None and self._step >= self.config.max_steps:
            self.stop()

    def buy_cheapest(self) -> Optional[PurchaseReceipt]:
        """Buy the cheapest upgrade if it is affordable."""
        cheapest = min(self.game.upgrades, key=lambda u: u.cost)
        if not self.game.wallet.can_afford(cheapest.cost):
            return None
        return self.game.purchase(cheapest.id)

    def run(self) -> None:
        """Run a blocking loop until stopped or max_steps reached.

        Throttles to tick_rate if configured.
        """
        self.start()
        target_dt = 0.0
        if self.config.tick_rate and self.config.tick_rate > 0:
            target_dt = 1.0 / float(self.config.tick_rate)

        while self._running:
            now = time.perf_counter()
            if self._last_time is None:
                dt = 0.0
            else:
                dt = now - self._last_time
            self._last_time = now

            self.update(dt)

            if target_dt > 0:
                elapsed = time.perf_counter() - now
                remaining = target_dt - elapsed
                if remaining > 0:
                    time.sleep(remaining)

        logger.info("Loop complete (steps=%d)", self._step)
