"""Catalog loader — parses game entity definitions into a Catalog.

Supports two modes:
  1. Directory of game entity files: ``<name>.weapon`` and ``<name>.unit``
     JSON documents, the entity name being the file stem.
  2. Single YAML file with ``weapons:`` and ``units:`` sections keyed by
     entity name, each entry shaped like the JSON entity files.

Weapons are resolved by reference, projectile weapons get their projectile
body, and levelled ships are resolved to one tier of their health stats.
Every target-type tag is validated here so the simulation never sees one
it does not know.
"""

from __future__ import annotations

import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Iterable

import yaml

from fleetsim.loaders.errors import (
    CatalogReferenceError,
    CatalogValidationError,
    UnknownTargetTypeError,
)
from fleetsim.models.catalog import (
    AcquisitionLogic,
    AttackTarget,
    Catalog,
    ShipType,
    TargetType,
    WeaponKind,
    WeaponType,
)
from fleetsim.util.constants import PROJECTILE_WEAPON_SUFFIXES

log = logging.getLogger(__name__)

WEAPON_SUFFIX = ".weapon"
UNIT_SUFFIX = ".unit"

_HEALTH_FIELDS = ("max_hull_points", "max_shield_points", "shield_mitigation", "hull_armor")


# -- Field helpers -------------------------------------------------------

def _mapping(value: Any, context: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise CatalogValidationError(f"{context} must be a mapping")
    return value


def _number(attrs: dict[str, Any], key: str, context: str, default: float = 0.0) -> float:
    value = attrs.get(key, default)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise CatalogValidationError(f"{context}: {key} must be a number, got {value!r}")
    return float(value)


def _target_type(tag: Any, context: str) -> TargetType:
    try:
        return TargetType(tag)
    except ValueError:
        raise UnknownTargetTypeError(f"{context}: unknown target type {tag!r}") from None


def _target_types(tags: Iterable[Any] | None, context: str) -> tuple[TargetType, ...]:
    return tuple(_target_type(tag, context) for tag in (tags or ()))


# -- Weapons -------------------------------------------------------------

def _weapon_kind(name: str, attrs: dict[str, Any]) -> WeaponKind:
    declared = attrs.get("weapon_type")
    if declared is None:
        is_projectile = name.endswith(PROJECTILE_WEAPON_SUFFIXES)
    else:
        is_projectile = declared in PROJECTILE_WEAPON_SUFFIXES
    return WeaponKind.PROJECTILE if is_projectile else WeaponKind.DIRECT


def _parse_weapon(name: str, attrs: Any, bodies: dict[str, ShipType]) -> WeaponType:
    context = f"weapon {name!r}"
    attrs = _mapping(attrs, context)

    logic_raw = attrs.get("acquire_target_logic", AcquisitionLogic.ORDER_TARGET_OR_BEST_TARGET_IN_RANGE.value)
    try:
        logic = AcquisitionLogic(logic_raw)
    except ValueError:
        raise CatalogValidationError(f"{context}: unknown acquire_target_logic {logic_raw!r}") from None

    target_filter = attrs.get("target_filter")
    if not isinstance(target_filter, list):
        target_filter = _mapping(target_filter, f"{context} target_filter").get("unit_types")
    filter_types = frozenset(_target_types(target_filter, f"{context} target_filter"))

    salvo_size = attrs.get("salvo_size", 1)
    if not isinstance(salvo_size, int) or isinstance(salvo_size, bool) or salvo_size < 1:
        raise CatalogValidationError(f"{context}: salvo_size must be a positive integer, got {salvo_size!r}")

    kind = _weapon_kind(name, attrs)
    body: ShipType | None = None
    if kind is WeaponKind.PROJECTILE:
        body_name = attrs.get("projectile_unit")
        if not body_name:
            raise CatalogValidationError(f"{context}: projectile weapon needs a projectile_unit")
        body = bodies.get(body_name)
        if body is None:
            raise CatalogReferenceError(f"{context}: projectile_unit {body_name!r} is not defined")

    return WeaponType(
        name=name,
        cooldown=_number(attrs, "cooldown_duration", context),
        range=_number(attrs, "range", context),
        armor_penetration=_number(attrs, "hull_armor_penetration", context),
        damage=_number(attrs, "damage", context),
        kind=kind,
        logic=logic,
        target_filter=filter_types,
        salvo_size=salvo_size,
        projectile=body,
    )


# -- Units ---------------------------------------------------------------

def _health_for_level(name: str, health: dict[str, Any], level: int) -> dict[str, Any]:
    """Overlay the requested tier onto the base health block of a levelled ship."""
    levels = health.get("levels")
    if not levels:
        return health
    if not isinstance(levels, list):
        raise CatalogValidationError(f"unit {name!r}: health.levels must be a list")
    if level >= len(levels):
        raise CatalogValidationError(
            f"unit {name!r}: level {level} requested but only {len(levels)} levels defined")
    tier = _mapping(levels[level], f"unit {name!r} health.levels[{level}]")
    resolved = {k: health[k] for k in _HEALTH_FIELDS if k in health}
    resolved.update({k: tier[k] for k in _HEALTH_FIELDS if k in tier})
    return resolved


def _parse_unit(name: str, attrs: Any, level: int) -> ShipType:
    """Parse everything but weapons, which are resolved in a second pass."""
    context = f"unit {name!r}"
    attrs = _mapping(attrs, context)

    ai = _mapping(attrs.get("ai"), f"{context} ai")
    bonus_raw = _mapping(ai.get("priority_bonus_per_attack_target_type"), f"{context} ai bonus")
    priority_bonus = {
        _target_type(tag, f"{context} ai bonus"): _number(bonus_raw, tag, f"{context} ai bonus")
        for tag in bonus_raw
    }

    attack_raw = _mapping(attrs.get("ai_attack_target"), f"{context} ai_attack_target")
    attack_target = AttackTarget(
        attack_priority=_number(attack_raw, "attack_priority", context),
        attack_target_types=_target_types(attack_raw.get("attack_target_types"), f"{context} ai_attack_target"),
    )

    category = attrs.get("target_type")
    if isinstance(category, list):
        target_types = frozenset(_target_types(category, context))
    elif category is not None:
        target_types = frozenset({_target_type(category, context)})
    else:
        target_types = frozenset(attack_target.attack_target_types)

    physics = _mapping(attrs.get("physics"), f"{context} physics")
    health = _health_for_level(name, _mapping(attrs.get("health"), f"{context} health"), level)
    build = _mapping(attrs.get("build"), f"{context} build")
    price = _mapping(build.get("price"), f"{context} build.price")

    return ShipType(
        name=name,
        priority_bonus=priority_bonus,
        attack_target=attack_target,
        accel_time=_number(physics, "time_to_max_linear_speed", context),
        speed=_number(physics, "max_linear_speed", context),
        hull=_number(health, "max_hull_points", context),
        shields=_number(health, "max_shield_points", context),
        mitigation=_number(health, "shield_mitigation", context),
        armor=_number(health, "hull_armor", context),
        supply=_number(build, "supply_cost", context),
        credits=_number(price, "credits", context),
        metal=_number(price, "metal", context),
        crystal=_number(price, "crystal", context),
        target_types=target_types,
    )


def _weapon_refs(name: str, attrs: dict[str, Any]) -> list[str]:
    weapons = _mapping(attrs.get("weapons"), f"unit {name!r} weapons")
    refs = []
    for i, mount in enumerate(weapons.get("weapons") or []):
        mount = _mapping(mount, f"unit {name!r} weapons[{i}]")
        ref = mount.get("weapon")
        if not ref:
            raise CatalogValidationError(f"unit {name!r} weapons[{i}] has no weapon name")
        refs.append(ref)
    return refs


# -- Public API ----------------------------------------------------------

def build_catalog(
    raw_weapons: dict[str, Any],
    raw_units: dict[str, Any],
    level: int = 0,
) -> Catalog:
    """Resolve raw entity definitions into an immutable Catalog.

    Args:
        raw_weapons: Weapon entity dicts keyed by weapon name.
        raw_units: Unit entity dicts keyed by unit name.
        level: Tier used for levelled (capital/titan) ships.

    Raises:
        UnknownTargetTypeError: A target-type tag is not in the enumeration.
        CatalogReferenceError: A weapon or projectile unit is not defined.
        CatalogValidationError: Any other malformed field.
    """
    if level < 0:
        raise CatalogValidationError(f"level must not be negative, got {level}")

    bodies = {name: _parse_unit(name, attrs, level) for name, attrs in (raw_units or {}).items()}
    weapons = {name: _parse_weapon(name, attrs, bodies) for name, attrs in (raw_weapons or {}).items()}

    ships: dict[str, ShipType] = {}
    for name, body in bodies.items():
        mounts = []
        for ref in _weapon_refs(name, raw_units[name]):
            weapon = weapons.get(ref)
            if weapon is None:
                raise CatalogReferenceError(f"unit {name!r} references undefined weapon {ref!r}")
            mounts.append(weapon)
        ships[name] = replace(body, weapons=tuple(mounts))

    log.info("Catalog built: %d units, %d weapons (level %d)", len(ships), len(weapons), level)
    return Catalog(ships=ships, weapons=weapons)


def _load_entity_dir(path: Path) -> tuple[dict[str, Any], dict[str, Any]]:
    raw_weapons: dict[str, Any] = {}
    raw_units: dict[str, Any] = {}
    for entity in sorted(path.iterdir()):
        if entity.suffix == WEAPON_SUFFIX:
            target = raw_weapons
        elif entity.suffix == UNIT_SUFFIX:
            target = raw_units
        else:
            continue
        with entity.open() as f:
            try:
                target[entity.stem] = json.load(f)
            except json.JSONDecodeError as e:
                raise CatalogValidationError(f"{entity.name}: invalid JSON ({e})") from e
    return raw_weapons, raw_units


def load_catalog(path: str | Path, level: int = 0) -> Catalog:
    """Load the catalog from an entity directory or a single YAML file.

    Args:
        path: Directory of ``*.weapon``/``*.unit`` files, or a YAML bundle.
        level: Tier used for levelled ships.

    Returns:
        The resolved Catalog.
    """
    path = Path(path)

    if path.is_dir():
        # ── Entity directory mode ──────────────────────────
        raw_weapons, raw_units = _load_entity_dir(path)
    else:
        # ── Single-file YAML mode ──────────────────────────
        with path.open() as f:
            data = yaml.safe_load(f) or {}
        raw_weapons = _mapping(data.get("weapons"), "weapons")
        raw_units = _mapping(data.get("units"), "units")

    log.debug("Read %d weapon and %d unit definitions from %s", len(raw_weapons), len(raw_units), path)
    return build_catalog(raw_weapons, raw_units, level=level)
