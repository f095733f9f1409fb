from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Tuple

from ..core.events import AchievementUnlocked, EventBus
from ..exceptions import CatalogError
from ..utils.numbers import whole_number

logger = logging.getLogger(__name__)


class AchievementKind(str, Enum):
    TOTAL = "total"
    PASSIVE = "passive"


@dataclass
class Achievement:
    """A one-way milestone.

    ``total`` achievements compare against the lifetime souls collected,
    ``passive`` achievements against the instantaneous passive rate.
    """

    name: str
    requirement: int
    kind: AchievementKind = AchievementKind.TOTAL
    description: str = ""
    unlocked: bool = False

    def __post_init__(self) -> None:
        if not self.name:
            raise CatalogError("Achievement name must not be empty")
        try:
            self.kind = AchievementKind(self.kind)
        except ValueError:
            raise CatalogError(f"Achievement '{self.name}' has unknown kind {self.kind!r}") from None
        self.requirement = whole_number(self.requirement, f"Achievement '{self.name}' requirement")
        if self.requirement < 0:
            raise CatalogError(f"Achievement '{self.name}' requirement must be >= 0, got {self.requirement}")
        if not self.description:
            if self.kind is AchievementKind.PASSIVE:
                self.description = f"Passive souls per tick: {self.requirement}"
            else:
                self.description = f"Souls needed: {self.requirement}"

    def is_met(self, total_collected: int, passive_rate: int) -> bool:
        if self.kind is AchievementKind.PASSIVE:
            return passive_rate >= self.requirement
        return total_collected >= self.requirement


class AchievementTracker:
    """Evaluates achievements in catalog order and announces first unlocks."""

    def __init__(self, achievements: Iterable[Achievement], event_bus: EventBus) -> None:
        self._achievements: List[Achievement] = list(achievements)
        self.event_bus = event_bus

    @property
    def achievements(self) -> Tuple[Achievement, ...]:
        return tuple(self._achievements)

    @property
    def unlocked_count(self) -> int:
        return sum(1 for a in self._achievements if a.unlocked)

    def evaluate(self, total_collected: int, passive_rate: int) -> List[Achievement]:
        """Unlock every locked achievement whose predicate now holds.

        Returns the newly unlocked achievements; one AchievementUnlocked event
        is emitted per unlock, in catalog order.
        """
        newly: List[Achievement] = []
        for ach in self._achievements:
            if ach.unlocked:
                continue
            if ach.is_met(total_collected, passive_rate):
                ach.unlocked = True
                newly.append(ach)
                logger.info("Achievement unlocked: %s", ach.name)
        for ach in newly:
            self.event_bus.emit(AchievementUnlocked(name=ach.name))
        return newly
