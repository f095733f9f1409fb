class SoulReaperError(Exception):
    """Base exception for the Soul Reaper project."""


class UpgradeNotFoundError(SoulReaperError, KeyError):
    """Raised when an upgrade id is not part of the catalog."""

    def __init__(self, upgrade_id: str) -> None:
        super().__init__(upgrade_id)
        self.upgrade_id = upgrade_id

    def __str__(self) -> str:
        return f"Unknown upgrade id: {self.upgrade_id!r}"


class InsufficientSoulsError(SoulReaperError):
    """Raised when the wallet cannot cover a spend."""


class CatalogError(SoulReaperError, ValueError):
    """Raised when catalog or settings data is invalid."""
