"""Catalog models — immutable ship and weapon type definitions.

Loaded from game entity files via the catalog_loader. Combatants copy
their live state from these; nothing here changes during a battle.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class TargetType(Enum):
    """Closed set of target categories used by weapon filters and AI bonuses."""

    TITAN = "titan"
    CAPITAL_SHIP = "capital_ship"
    CRUISER = "cruiser"
    FRIGATE = "frigate"
    CORVETTE = "corvette"
    STRIKECRAFT = "strikecraft"
    TORPEDO = "torpedo"
    STARBASE = "starbase"
    STRUCTURE = "structure"
    PLANET = "planet"


class AcquisitionLogic(Enum):
    """Per-weapon targeting policy relative to the primary weapon."""

    ORDER_TARGET_ONLY = "order_target_only"
    BEST_TARGET_IN_RANGE = "best_target_in_range"
    ORDER_TARGET_OR_BEST_TARGET_IN_RANGE = "order_target_or_best_target_in_range"


class WeaponKind(Enum):
    """Direct-fire weapons hit instantly, projectile weapons spawn missiles."""

    DIRECT = "direct"
    PROJECTILE = "projectile"


@dataclass(frozen=True)
class WeaponType:
    """Definition of a single weapon.

    Attributes:
        name: Unique weapon identifier (entity file stem).
        cooldown: Seconds between firing events.
        range: Maximum engagement distance.
        armor_penetration: Subtracted from the target's hull armor.
        damage: Damage per firing event (split across a salvo).
        kind: DIRECT or PROJECTILE.
        logic: Acquisition logic relative to the primary weapon.
        target_filter: Target types this weapon may engage (empty = any).
        salvo_size: Projectiles spawned per firing event.
        projectile: Ship type of the spawned projectile body.
    """

    name: str
    cooldown: float = 0.0
    range: float = 0.0
    armor_penetration: float = 0.0
    damage: float = 0.0
    kind: WeaponKind = WeaponKind.DIRECT
    logic: AcquisitionLogic = AcquisitionLogic.ORDER_TARGET_OR_BEST_TARGET_IN_RANGE
    target_filter: frozenset[TargetType] = frozenset()
    salvo_size: int = 1
    projectile: ShipType | None = None

    def __post_init__(self) -> None:
        if self.salvo_size < 1:
            raise ValueError(f"Weapon {self.name}: salvo_size must be at least 1")
        if self.kind is WeaponKind.PROJECTILE and self.projectile is None:
            raise ValueError(f"Weapon {self.name}: projectile weapons need a projectile body")

    @property
    def is_projectile(self) -> bool:
        return self.kind is WeaponKind.PROJECTILE

    def can_engage(self, target_types: frozenset[TargetType]) -> bool:
        """True if this weapon's filter matches any of the given categories."""
        if not self.target_filter:
            return True
        return bool(self.target_filter & target_types)


@dataclass(frozen=True)
class AttackTarget:
    """How attractive a ship is as a target for enemy AI."""

    attack_priority: float = 0.0
    attack_target_types: tuple[TargetType, ...] = ()


@dataclass(frozen=True)
class ShipType:
    """Definition of a ship (or projectile body).

    Attributes:
        name: Unique unit identifier.
        priority_bonus: AI bonus per enemy attack-target type.
        attack_target: Metadata enemies use to score this ship.
        accel_time: Seconds to reach top speed.
        speed: Top speed in units per second.
        weapons: Ordered weapons; index 0 is the primary weapon.
        hull: Max hull points.
        shields: Max shield points.
        mitigation: Flat reduction applied to each hit while shields are up.
        armor: Hull armor.
        supply, credits, metal, crystal: Build costs.
        target_types: Categories weapon filters match against.
    """

    name: str
    priority_bonus: dict[TargetType, float] = field(default_factory=dict)
    attack_target: AttackTarget = field(default_factory=AttackTarget)
    accel_time: float = 0.0
    speed: float = 0.0
    weapons: tuple[WeaponType, ...] = ()
    hull: float = 0.0
    shields: float = 0.0
    mitigation: float = 0.0
    armor: float = 0.0
    supply: float = 0.0
    credits: float = 0.0
    metal: float = 0.0
    crystal: float = 0.0
    target_types: frozenset[TargetType] = frozenset()

    @property
    def resources(self) -> float:
        return self.credits + self.metal + self.crystal


@dataclass(frozen=True)
class Catalog:
    """Immutable lookup of every ship and weapon type by name."""

    ships: dict[str, ShipType] = field(default_factory=dict)
    weapons: dict[str, WeaponType] = field(default_factory=dict)

    def get_ship(self, name: str) -> ShipType | None:
        return self.ships.get(name)

    def get_weapon(self, name: str) -> WeaponType | None:
        return self.weapons.get(name)
