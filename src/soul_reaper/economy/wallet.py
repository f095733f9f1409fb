import logging
from dataclasses import dataclass

from ..core.events import EventBus, SoulsChangedEvent
from ..exceptions import InsufficientSoulsError

logger = logging.getLogger(__name__)


@dataclass
class SoulWallet:
    """Holds the player's spendable souls and the lifetime total collected.

    Emits SoulsChangedEvent on every state change via provided EventBus.
    The lifetime total only ever grows; spending does not touch it.
    """

    event_bus: EventBus
    _souls: int = 0
    _total_collected: int = 0

    @property
    def souls(self) -> int:
        return self._souls

    @property
    def total_collected(self) -> int:
        return self._total_collected

    def can_afford(self, cost: int) -> bool:
        if cost < 0:
            return False
        return self._souls >= cost

    def collect(self, amount: int, reason: str) -> int:
        if amount < 0:
            raise ValueError("Cannot collect negative souls; use spend() for deduction")
        amount = int(amount)
        if amount == 0:
            return 0
        old = self._souls
        self._souls = old + amount
        self._total_collected += amount
        logger.debug(
            "Souls collected: +%s (reason=%s); old=%s new=%s total=%s",
            amount,
            reason,
            old,
            self._souls,
            self._total_collected,
        )
        self.event_bus.emit(SoulsChangedEvent(old_amount=old, new_amount=self._souls, delta=amount, reason=reason))
        return amount

    def spend(self, amount: int, reason: str = "purchase") -> int:
        if amount < 0:
            raise ValueError("Cannot spend negative souls")
        amount = int(amount)
        if amount == 0:
            return 0
        if not self.can_afford(amount):
            raise InsufficientSoulsError(f"Insufficient souls: have {self._souls}, need {amount}")
        old = self._souls
        self._souls = old - amount
        logger.debug("Souls spent: -%s (reason=%s); old=%s new=%s", amount, reason, old, self._souls)
        self.event_bus.emit(SoulsChangedEvent(old_amount=old, new_amount=self._souls, delta=-amount, reason=reason))
        return amount
