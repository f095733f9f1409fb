from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from .economy.upgrades import Upgrade, UpgradeKind
from .exceptions import CatalogError
from .progression.achievements import Achievement

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_RESOURCE = "catalog.yaml"


@dataclass(frozen=True)
class Catalog:
    """The fixed list of upgrades and achievements a game starts from.

    Entries are templates: every game state receives its own copies through
    new_upgrades()/new_achievements(). The single passive upgrade is resolved
    once here and exposed as ``passive_upgrade_id``.
    """

    upgrades: Tuple[Upgrade, ...]
    achievements: Tuple[Achievement, ...]
    passive_upgrade_id: str = field(init=False)

    def __post_init__(self) -> None:
        seen = set()
        for u in self.upgrades:
            if u.id in seen:
                raise CatalogError(f"Duplicate upgrade id: {u.id!r}")
            seen.add(u.id)
        passive = [u.id for u in self.upgrades if u.kind is UpgradeKind.PASSIVE]
        if len(passive) != 1:
            raise CatalogError(f"Catalog must define exactly one passive upgrade, found {len(passive)}")
        names = set()
        for a in self.achievements:
            if a.name in names:
                raise CatalogError(f"Duplicate achievement name: {a.name!r}")
            names.add(a.name)
        object.__setattr__(self, "passive_upgrade_id", passive[0])

    @property
    def upgrade_ids(self) -> Tuple[str, ...]:
        return tuple(u.id for u in self.upgrades)

    def new_upgrades(self) -> List[Upgrade]:
        return [dataclasses.replace(u, owned=0) for u in self.upgrades]

    def new_achievements(self) -> List[Achievement]:
        return [dataclasses.replace(a, unlocked=False) for a in self.achievements]


def _upgrade_from_dict(raw: Dict[str, Any]) -> Upgrade:
    try:
        return Upgrade(
            id=str(raw["id"]),
            name=str(raw.get("name", raw["id"])),
            base_price=float(raw["base_price"]),
            growth=float(raw["growth"]),
            effect=float(raw["effect"]),
            kind=raw.get("kind", UpgradeKind.CLICK.value),
            description=str(raw.get("description", "")),
        )
    except CatalogError:
        raise
    except KeyError as e:
        raise CatalogError(f"Upgrade entry missing field {e.args[0]!r}: {raw}") from None
    except (TypeError, ValueError) as e:
        raise CatalogError(f"Invalid upgrade entry {raw}: {e}") from e


def _achievement_from_dict(raw: Dict[str, Any]) -> Achievement:
    try:
        return Achievement(
            name=str(raw["name"]),
            requirement=raw["requirement"],
            kind=raw.get("kind", "total"),
            description=str(raw.get("description", "")),
        )
    except CatalogError:
        raise
    except KeyError as e:
        raise CatalogError(f"Achievement entry missing field {e.args[0]!r}: {raw}") from None
    except (TypeError, ValueError) as e:
        raise CatalogError(f"Invalid achievement entry {raw}: {e}") from e


def catalog_from_dict(data: Dict[str, Any]) -> Catalog:
    if not isinstance(data, dict):
        raise CatalogError("Catalog data must be a mapping")
    upgrades = tuple(_upgrade_from_dict(u) for u in data.get("upgrades") or [])
    achievements = tuple(_achievement_from_dict(a) for a in data.get("achievements") or [])
    return Catalog(upgrades=upgrades, achievements=achievements)


def load_catalog(path: Optional[Path] = None) -> Catalog:
    """Load the upgrade/achievement catalog from YAML.

    If path is None, loads the embedded default resource at
    soul_reaper/config/catalog.yaml.
    """
    try:
        if path is None:
            text = resources.files("soul_reaper.config").joinpath(DEFAULT_CATALOG_RESOURCE).read_text(encoding="utf-8")
            logger.debug("Loaded embedded catalog resource")
        else:
            with Path(path).open("r", encoding="utf-8") as f:
                text = f.read()
            logger.debug("Loaded catalog from path: %s", path)
        raw = yaml.safe_load(text)
    except OSError as e:
        raise CatalogError(f"Cannot read catalog {path or DEFAULT_CATALOG_RESOURCE}: {e}") from e
    except yaml.YAMLError as e:
        raise CatalogError(f"Malformed catalog YAML in {path or DEFAULT_CATALOG_RESOURCE}: {e}") from e

    catalog = catalog_from_dict(raw or {})
    logger.info(
        "Catalog ready: %d upgrades, %d achievements, passive=%s",
        len(catalog.upgrades),
        len(catalog.achievements),
        catalog.passive_upgrade_id,
    )
    return catalog
