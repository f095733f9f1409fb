import pytest

from soul_reaper.catalog import Catalog, catalog_from_dict, load_catalog
from soul_reaper.economy.upgrades import UpgradeKind
from soul_reaper.exceptions import CatalogError
from soul_reaper.progression.achievements import AchievementKind


def _minimal(**overrides):
    data = {
        "upgrades": [
            {"id": "blade", "name": "Blade", "base_price": 10, "growth": 1.5, "effect": 1},
            {"id": "minion", "name": "Minion", "base_price": 20, "growth": 1.5, "effect": 1, "kind": "passive"},
        ],
        "achievements": [{"name": "Start", "requirement": 1}],
    }
    data.update(overrides)
    return data


def test_default_catalog_contents():
    catalog = load_catalog()
    assert catalog.upgrade_ids == ("scythe", "spectral", "pact", "rift")
    assert catalog.passive_upgrade_id == "rift"

    scythe = catalog.upgrades[0]
    assert scythe.name == "Rusty Scythe"
    assert scythe.base_price == 10 and scythe.growth == 1.25 and scythe.effect == 1
    assert scythe.kind is UpgradeKind.CLICK

    names = [a.name for a in catalog.achievements]
    assert names == ["First Soul", "Novice Harvester", "Automation Begins", "Soul Collector", "Soul King"]
    automation = catalog.achievements[2]
    assert automation.kind is AchievementKind.PASSIVE
    assert automation.requirement == 4
    assert catalog.achievements[0].description == "Souls needed: 10"


def test_new_copies_are_independent():
    catalog = load_catalog()
    first = catalog.new_upgrades()
    second = catalog.new_upgrades()
    first[0].owned = 3
    assert second[0].owned == 0
    assert catalog.upgrades[0].owned == 0

    achievements = catalog.new_achievements()
    achievements[0].unlocked = True
    assert not catalog.achievements[0].unlocked


def test_load_catalog_from_file(tmp_path):
    path = tmp_path / "catalog.yaml"
    path.write_text(
        "upgrades:\n"
        "  - {id: claw, name: Claw, base_price: 5, growth: 2, effect: 3}\n"
        "  - {id: ghoul, name: Ghoul, base_price: 8, growth: 2, effect: 1, kind: passive}\n"
        "achievements:\n"
        "  - {name: Taste, requirement: 5}\n",
        encoding="utf-8",
    )
    catalog = load_catalog(path)
    assert catalog.upgrade_ids == ("claw", "ghoul")
    assert catalog.passive_upgrade_id == "ghoul"
    assert isinstance(catalog, Catalog)


def test_requires_exactly_one_passive():
    data = _minimal()
    data["upgrades"][1]["kind"] = "click"
    with pytest.raises(CatalogError, match="exactly one passive"):
        catalog_from_dict(data)

    data = _minimal()
    data["upgrades"][0]["kind"] = "passive"
    with pytest.raises(CatalogError, match="exactly one passive"):
        catalog_from_dict(data)


def test_duplicate_ids_rejected():
    data = _minimal()
    data["upgrades"].append({"id": "blade", "name": "Other", "base_price": 1, "growth": 2, "effect": 1})
    with pytest.raises(CatalogError, match="Duplicate upgrade id"):
        catalog_from_dict(data)


def test_duplicate_achievement_names_rejected():
    data = _minimal(achievements=[{"name": "A", "requirement": 1}, {"name": "A", "requirement": 2}])
    with pytest.raises(CatalogError, match="Duplicate achievement"):
        catalog_from_dict(data)


@pytest.mark.parametrize(
    "entry",
    [
        {"name": "No id", "base_price": 1, "growth": 2, "effect": 1},
        {"id": "cheap", "base_price": "free", "growth": 2, "effect": 1},
        {"id": "flat", "base_price": 1, "growth": 1, "effect": 1},
    ],
)
def test_bad_upgrade_entries(entry):
    data = _minimal()
    data["upgrades"].append(entry)
    with pytest.raises(CatalogError):
        catalog_from_dict(data)


def test_bad_achievement_entries():
    with pytest.raises(CatalogError):
        catalog_from_dict(_minimal(achievements=[{"name": "No requirement"}]))
    with pytest.raises(CatalogError):
        catalog_from_dict(_minimal(achievements=[{"name": "Weird", "requirement": 1, "kind": "speed"}]))
    with pytest.raises(CatalogError):
        catalog_from_dict(_minimal(achievements=[{"name": "Negative", "requirement": -1}]))


def test_non_mapping_rejected():
    with pytest.raises(CatalogError):
        catalog_from_dict(["not", "a", "mapping"])


def test_malformed_catalog_yaml(tmp_path):
    path = tmp_path / "catalog.yaml"
    path.write_text("upgrades: [\n", encoding="utf-8")
    with pytest.raises(CatalogError, match="Malformed catalog YAML"):
        load_catalog(path)


def test_missing_catalog_file(tmp_path):
    with pytest.raises(CatalogError, match="Cannot read catalog"):
        load_catalog(tmp_path / "missing.yaml")


def test_fractional_requirement_rejected():
    with pytest.raises(CatalogError, match="whole number"):
        catalog_from_dict(_minimal(achievements=[{"name": "Half", "requirement": 9.5}]))


def test_integral_float_requirement_accepted():
    catalog = catalog_from_dict(_minimal(achievements=[{"name": "Ten", "requirement": 10.0}]))
    assert catalog.achievements[0].requirement == 10


@pytest.mark.parametrize("field", ["base_price", "growth", "effect"])
@pytest.mark.parametrize("value", [float("nan"), float("inf")])
def test_non_finite_upgrade_numbers_rejected(field, value):
    data = _minimal()
    data["upgrades"][1][field] = value
    with pytest.raises(CatalogError, match="finite"):
        catalog_from_dict(data)


def test_non_finite_yaml_values_rejected(tmp_path):
    path = tmp_path / "catalog.yaml"
    path.write_text(
        "upgrades:\n"
        "  - {id: ghoul, name: Ghoul, base_price: .nan, growth: 2, effect: 1, kind: passive}\n",
        encoding="utf-8",
    )
    with pytest.raises(CatalogError):
        load_catalog(path)
