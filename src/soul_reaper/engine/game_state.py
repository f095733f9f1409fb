from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from ..catalog import Catalog, load_catalog
from ..core.events import EventBus, PassiveUnitsChangedEvent, PurchaseCompletedEvent, PurchaseFailedEvent
from ..economy.upgrades import Upgrade, UpgradeKind
from ..economy.wallet import SoulWallet
from ..exceptions import UpgradeNotFoundError
from ..progression.achievements import Achievement, AchievementKind, AchievementTracker

logger = logging.getLogger(__name__)

INSUFFICIENT_SOULS = "insufficient_souls"


@dataclass(frozen=True)
class PurchaseReceipt:
    success: bool
    upgrade_id: str
    cost: int
    owned: int
    message: str
    reason: Optional[str] = None


@dataclass(frozen=True)
class UpgradeView:
    id: str
    name: str
    kind: UpgradeKind
    effect: float
    owned: int
    cost: int
    affordable: bool
    description: str


@dataclass(frozen=True)
class AchievementView:
    name: str
    requirement: int
    kind: AchievementKind
    description: str
    unlocked: bool


@dataclass(frozen=True)
class GameSnapshot:
    souls: int
    total_collected: int
    per_click_yield: int
    passive_rate: int
    passive_units: int
    total_upgrades: int
    upgrades: Tuple[UpgradeView, ...]
    achievements: Tuple[AchievementView, ...]


class GameState:
    """Holds one session's souls, upgrades and achievements.

    Every mutation (click, purchase, tick) updates the wallet, recomputes the
    derived yields when ownership changed, then re-evaluates achievements.
    Buying the passive upgrade publishes PassiveUnitsChangedEvent so a
    PassiveScheduler listening on the same bus can re-arm its timer.
    """

    def __init__(self, catalog: Optional[Catalog] = None, event_bus: Optional[EventBus] = None) -> None:
        self.catalog = catalog or load_catalog()
        self.event_bus = event_bus or EventBus()
        self.wallet = SoulWallet(event_bus=self.event_bus)
        self._upgrades: Dict[str, Upgrade] = {u.id: u for u in self.catalog.new_upgrades()}
        self._passive: Upgrade = self._upgrades[self.catalog.passive_upgrade_id]
        self.achievements = AchievementTracker(self.catalog.new_achievements(), self.event_bus)
        self._per_click_yield = 1
        self._passive_rate = 0
        self._recompute()
        logger.info("Initialized GameState with %d upgrades", len(self._upgrades))

    # Read side

    @property
    def souls(self) -> int:
        return self.wallet.souls

    @property
    def total_collected(self) -> int:
        return self.wallet.total_collected

    @property
    def per_click_yield(self) -> int:
        return self._per_click_yield

    @property
    def passive_rate(self) -> int:
        return self._passive_rate

    @property
    def passive_units(self) -> int:
        return self._passive.owned

    @property
    def passive_upgrade(self) -> Upgrade:
        return self._passive

    @property
    def upgrades(self) -> Tuple[Upgrade, ...]:
        return tuple(self._upgrades.values())

    @property
    def total_upgrades(self) -> int:
        return sum(u.owned for u in self._upgrades.values())

    def upgrade(self, upgrade_id: str) -> Upgrade:
        try:
            return self._upgrades[upgrade_id]
        except KeyError:
            raise UpgradeNotFoundError(upgrade_id) from None

    def cost_of(self, upgrade_id: str) -> int:
        return self.upgrade(upgrade_id).cost

    def can_afford(self, upgrade_id: str) -> bool:
        return self.wallet.can_afford(self.cost_of(upgrade_id))

    def snapshot(self) -> GameSnapshot:
        souls = self.souls
        upgrades = tuple(
            UpgradeView(
                id=u.id,
                name=u.name,
                kind=u.kind,
                effect=u.effect,
                owned=u.owned,
                cost=u.cost,
                affordable=souls >= u.cost,
                description=u.description,
            )
            for u in self._upgrades.values()
        )
        achievements = tuple(
            AchievementView(
                name=a.name,
                requirement=a.requirement,
                kind=a.kind,
                description=a.description,
                unlocked=a.unlocked,
            )
            for a in self.achievements.achievements
        )
        return GameSnapshot(
            souls=souls,
            total_collected=self.total_collected,
            per_click_yield=self._per_click_yield,
            passive_rate=self._passive_rate,
            passive_units=self.passive_units,
            total_upgrades=self.total_upgrades,
            upgrades=upgrades,
            achievements=achievements,
        )

    # Commands

    def click(self) -> int:
        gained = self.wallet.collect(self._per_click_yield, reason="click")
        self._check_achievements()
        return gained

    def purchase(self, upgrade_id: str) -> PurchaseReceipt:
        """Buy one unit of an upgrade.

        Returns a failed receipt (no state change) when the player cannot
        afford it. Raises UpgradeNotFoundError for ids outside the catalog.
        """
        upgrade = self.upgrade(upgrade_id)
        cost = upgrade.cost
        if not self.wallet.can_afford(cost):
            msg = f"Insufficient souls for '{upgrade.name}'; cost={cost}, have={self.souls}"
            logger.debug(msg)
            self.event_bus.emit(
                PurchaseFailedEvent(upgrade_id=upgrade.id, cost=cost, reason=INSUFFICIENT_SOULS, current_souls=self.souls)
            )
            return PurchaseReceipt(False, upgrade.id, cost, upgrade.owned, msg, reason=INSUFFICIENT_SOULS)

        self.wallet.spend(cost, reason="purchase")
        upgrade.owned += 1
        self._recompute()
        logger.info("Purchased '%s' for %d souls (owned=%d)", upgrade.name, cost, upgrade.owned)
        self.event_bus.emit(
            PurchaseCompletedEvent(upgrade_id=upgrade.id, cost=cost, owned=upgrade.owned, remaining_souls=self.souls)
        )
        if upgrade is self._passive:
            self.event_bus.emit(PassiveUnitsChangedEvent(units=upgrade.owned))
        self._check_achievements()
        return PurchaseReceipt(True, upgrade.id, cost, upgrade.owned, f"Purchased '{upgrade.name}' for {cost} souls")

    def tick(self, units_elapsed: int = 1) -> int:
        """Apply passive production for ``units_elapsed`` scheduler intervals."""
        if units_elapsed < 0:
            raise ValueError(f"units_elapsed must be >= 0, got {units_elapsed}")
        gained = self.wallet.collect(self._passive_rate * int(units_elapsed), reason="tick")
        self._check_achievements()
        return gained

    # Internals

    def _recompute(self) -> None:
        bonus = sum(u.effect * u.owned for u in self._upgrades.values() if u.kind is UpgradeKind.CLICK)
        self._per_click_yield = int(math.floor(1 + bonus))
        self._passive_rate = self._per_click_yield * self._passive.owned
        logger.debug("Derived rates: per_click=%d passive=%d", self._per_click_yield, self._passive_rate)

    def _check_achievements(self) -> List[Achievement]:
        return self.achievements.evaluate(self.total_collected, self._passive_rate)
