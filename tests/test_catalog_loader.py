"""Tests for catalog_loader — entity parsing, references and validation."""

import json
from pathlib import Path

import pytest

from fleetsim.loaders.catalog_loader import build_catalog, load_catalog
from fleetsim.loaders.errors import (
    CatalogReferenceError,
    CatalogValidationError,
    UnknownTargetTypeError,
)
from fleetsim.models.catalog import AcquisitionLogic, TargetType, WeaponKind

# Path to the real config directory
CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"


def _unit(weapons=(), **extra):
    unit = {
        "target_type": "frigate",
        "ai_attack_target": {"attack_priority": 10, "attack_target_types": ["frigate"]},
        "physics": {"time_to_max_linear_speed": 2, "max_linear_speed": 500},
        "weapons": {"weapons": [{"weapon": w} for w in weapons]},
        "health": {"max_hull_points": 100, "max_shield_points": 50,
                   "shield_mitigation": 1, "hull_armor": 3},
        "build": {"supply_cost": 4, "price": {"credits": 200, "metal": 30, "crystal": 5}},
    }
    unit.update(extra)
    return unit


def _gun(**extra):
    gun = {"cooldown_duration": 2, "range": 1000, "damage": 10, "hull_armor_penetration": 1}
    gun.update(extra)
    return gun


class TestLoadCatalogFromConfig:
    """The bundled catalog.yaml must load cleanly."""

    def test_bundled_catalog_loads(self):
        catalog = load_catalog(CONFIG_DIR / "catalog.yaml")
        assert catalog.get_ship("trader_light_frigate") is not None
        assert catalog.get_ship("trader_torpedo") is not None
        assert catalog.get_ship("ghost") is None

    def test_bundled_encounter_ships_exist(self):
        catalog = load_catalog(CONFIG_DIR / "catalog.yaml")
        for name in ("trader_light_frigate", "trader_long_range_cruiser",
                     "trader_antifighter_frigate", "trader_torpedo_frigate"):
            ship = catalog.get_ship(name)
            assert ship is not None, name
            assert ship.weapons, f"{name} has no weapons"
            assert ship.hull > 0

    def test_bundled_torpedo_is_a_projectile_weapon(self):
        catalog = load_catalog(CONFIG_DIR / "catalog.yaml")
        torpedo = catalog.get_weapon("trader_torpedo_frigate_torpedo")
        assert torpedo.kind is WeaponKind.PROJECTILE
        assert torpedo.salvo_size == 3
        assert torpedo.projectile.name == "trader_torpedo"
        assert TargetType.TORPEDO in torpedo.projectile.target_types


class TestBuildCatalog:

    def test_unit_fields(self):
        catalog = build_catalog({"gun": _gun()}, {"ship": _unit(weapons=["gun", "gun"])})
        ship = catalog.get_ship("ship")

        assert ship.accel_time == 2.0
        assert ship.speed == 500.0
        assert ship.hull == 100.0
        assert ship.shields == 50.0
        assert ship.mitigation == 1.0
        assert ship.armor == 3.0
        assert ship.supply == 4.0
        assert ship.resources == 235.0
        assert ship.target_types == frozenset({TargetType.FRIGATE})
        assert ship.attack_target.attack_priority == 10.0
        assert [w.name for w in ship.weapons] == ["gun", "gun"]

    def test_weapon_fields(self):
        catalog = build_catalog({"gun": _gun(target_filter={"unit_types": ["torpedo"]},
                                             acquire_target_logic="best_target_in_range")}, {})
        gun = catalog.get_weapon("gun")

        assert gun.cooldown == 2.0
        assert gun.range == 1000.0
        assert gun.damage == 10.0
        assert gun.armor_penetration == 1.0
        assert gun.kind is WeaponKind.DIRECT
        assert gun.logic is AcquisitionLogic.BEST_TARGET_IN_RANGE
        assert gun.target_filter == frozenset({TargetType.TORPEDO})

    def test_target_filter_as_plain_list(self):
        catalog = build_catalog({"gun": _gun(target_filter=["frigate", "cruiser"])}, {})
        assert catalog.get_weapon("gun").target_filter == frozenset({TargetType.FRIGATE, TargetType.CRUISER})

    def test_defaults_for_missing_fields(self):
        catalog = build_catalog({"gun": {}}, {"rock": {}})
        gun = catalog.get_weapon("gun")
        rock = catalog.get_ship("rock")

        assert gun.logic is AcquisitionLogic.ORDER_TARGET_OR_BEST_TARGET_IN_RANGE
        assert gun.target_filter == frozenset()
        assert gun.salvo_size == 1
        assert rock.weapons == ()
        assert rock.hull == 0.0
        assert rock.target_types == frozenset()

    def test_target_type_defaults_to_attack_target_tags(self):
        unit = _unit()
        del unit["target_type"]
        catalog = build_catalog({}, {"ship": unit})
        assert catalog.get_ship("ship").target_types == frozenset({TargetType.FRIGATE})

    def test_ai_priority_bonus(self):
        unit = _unit(ai={"priority_bonus_per_attack_target_type": {"cruiser": 25}})
        ship = build_catalog({}, {"ship": unit}).get_ship("ship")
        assert ship.priority_bonus == {TargetType.CRUISER: 25.0}

    def test_projectile_weapon_by_name_suffix(self):
        catalog = build_catalog(
            {"tube_missile": _gun(salvo_size=4, projectile_unit="missile")},
            {"missile": _unit(target_type="torpedo"), "boat": _unit(weapons=["tube_missile"])},
        )
        weapon = catalog.get_ship("boat").weapons[0]
        assert weapon.kind is WeaponKind.PROJECTILE
        assert weapon.salvo_size == 4
        assert weapon.projectile.name == "missile"

    def test_projectile_weapon_by_declared_type(self):
        catalog = build_catalog(
            {"launcher": _gun(weapon_type="torpedo", projectile_unit="fish")},
            {"fish": _unit()},
        )
        assert catalog.get_weapon("launcher").is_projectile

    def test_levelled_ship_uses_requested_tier(self):
        unit = _unit()
        unit["health"]["levels"] = [
            {"max_hull_points": 1000},
            {"max_hull_points": 2000, "hull_armor": 20},
        ]
        catalog = build_catalog({}, {"titan": unit}, level=1)
        titan = catalog.get_ship("titan")
        assert titan.hull == 2000.0
        assert titan.armor == 20.0
        assert titan.shields == 50.0

    def test_level_out_of_range(self):
        unit = _unit()
        unit["health"]["levels"] = [{"max_hull_points": 1000}]
        with pytest.raises(CatalogValidationError):
            build_catalog({}, {"titan": unit}, level=3)


class TestCatalogErrors:

    def test_unknown_target_type(self):
        with pytest.raises(UnknownTargetTypeError):
            build_catalog({}, {"ship": _unit(target_type="battlestar")})

    def test_unknown_filter_type(self):
        with pytest.raises(UnknownTargetTypeError):
            build_catalog({"gun": _gun(target_filter=["dreadnought"])}, {})

    def test_unknown_bonus_type(self):
        with pytest.raises(UnknownTargetTypeError):
            build_catalog({}, {"ship": _unit(ai={"priority_bonus_per_attack_target_type": {"moon": 1}})})

    def test_undefined_weapon(self):
        with pytest.raises(CatalogReferenceError):
            build_catalog({}, {"ship": _unit(weapons=["missing_gun"])})

    def test_undefined_projectile_unit(self):
        with pytest.raises(CatalogReferenceError):
            build_catalog({"tube_torpedo": _gun(projectile_unit="nothing")}, {})

    def test_projectile_weapon_needs_body(self):
        with pytest.raises(CatalogValidationError):
            build_catalog({"tube_torpedo": _gun()}, {})

    @pytest.mark.parametrize("salvo", [0, -2, 1.5, "three"])
    def test_invalid_salvo_size(self, salvo):
        with pytest.raises(CatalogValidationError):
            build_catalog({"gun": _gun(salvo_size=salvo)}, {})

    def test_unknown_acquisition_logic(self):
        with pytest.raises(CatalogValidationError):
            build_catalog({"gun": _gun(acquire_target_logic="shoot_everything")}, {})

    def test_non_numeric_field(self):
        with pytest.raises(CatalogValidationError):
            build_catalog({"gun": _gun(damage="lots")}, {})

    def test_negative_level(self):
        with pytest.raises(CatalogValidationError):
            build_catalog({}, {}, level=-1)


class TestLoadCatalogFromEntityDir:

    def test_loads_weapon_and_unit_files(self, tmp_path):
        (tmp_path / "gun.weapon").write_text(json.dumps(_gun()))
        (tmp_path / "ship.unit").write_text(json.dumps(_unit(weapons=["gun"])))
        (tmp_path / "notes.txt").write_text("ignored")

        catalog = load_catalog(tmp_path)

        assert list(catalog.ships) == ["ship"]
        assert catalog.get_ship("ship").weapons[0].name == "gun"

    def test_invalid_json(self, tmp_path):
        (tmp_path / "broken.unit").write_text("{not json")
        with pytest.raises(CatalogValidationError):
            load_catalog(tmp_path)

    def test_missing_path(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_catalog(tmp_path / "missing.yaml")

    def test_yaml_bundle(self, tmp_path):
        bundle = tmp_path / "catalog.yaml"
        bundle.write_text(
            "weapons:\n"
            "  gun: {damage: 4, range: 100}\n"
            "units:\n"
            "  ship:\n"
            "    weapons: {weapons: [{weapon: gun}]}\n"
            "    health: {max_hull_points: 30}\n"
        )
        ship = load_catalog(bundle).get_ship("ship")
        assert ship.hull == 30.0
        assert ship.weapons[0].damage == 4.0
