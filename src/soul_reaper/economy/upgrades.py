import math
from dataclasses import dataclass
from enum import Enum

from ..exceptions import CatalogError
from ..utils.numbers import finite_number


class UpgradeKind(str, Enum):
    CLICK = "click"
    PASSIVE = "passive"


def price_for(base_price: float, growth: float, owned: int) -> int:
    """Cost of the next unit: ``floor(base_price * growth ** owned)``."""
    return int(math.floor(base_price * math.pow(growth, owned)))


@dataclass
class Upgrade:
    """A purchasable upgrade and how many units the player owns.

    Click upgrades raise the per-click yield by ``effect`` per unit. Each unit
    of the passive upgrade adds one yield's worth of souls per scheduler tick.
    """

    id: str
    name: str
    base_price: float
    growth: float
    effect: float
    kind: UpgradeKind = UpgradeKind.CLICK
    description: str = ""
    owned: int = 0

    def __post_init__(self) -> None:
        if not self.id:
            raise CatalogError("Upgrade id must not be empty")
        try:
            self.kind = UpgradeKind(self.kind)
        except ValueError:
            raise CatalogError(f"Upgrade '{self.id}' has unknown kind {self.kind!r}") from None
        self.base_price = finite_number(self.base_price, f"Upgrade '{self.id}' base_price")
        self.growth = finite_number(self.growth, f"Upgrade '{self.id}' growth")
        self.effect = finite_number(self.effect, f"Upgrade '{self.id}' effect")
        if self.base_price <= 0:
            raise CatalogError(f"Upgrade '{self.id}' base_price must be > 0, got {self.base_price}")
        if self.growth <= 1:
            raise CatalogError(f"Upgrade '{self.id}' growth must be > 1, got {self.growth}")
        if self.effect <= 0:
            raise CatalogError(f"Upgrade '{self.id}' effect must be > 0, got {self.effect}")
        if self.owned < 0:
            raise CatalogError(f"Upgrade '{self.id}' owned must be >= 0, got {self.owned}")

    @property
    def is_passive(self) -> bool:
        return self.kind is UpgradeKind.PASSIVE

    @property
    def cost(self) -> int:
        return price_for(self.base_price, self.growth, self.owned)
