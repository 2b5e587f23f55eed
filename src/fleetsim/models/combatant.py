"""Combatant model — a ship or projectile taking part in a battle.

Combatants are built from a ShipType snapshot and carry all mutable battle
state. Targets are referenced by cid and resolved through the owning Fleet,
so a removed or dead combatant is never held directly.
Business logic is in engine/combat_service.py.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum

from fleetsim.models.catalog import ShipType, TargetType, WeaponType

NO_PRIORITY: float = -math.inf

# Next unique combatant instance id (global counter)
_next_cid: int = 1


def new_cid() -> int:
    global _next_cid
    cid = _next_cid
    _next_cid += 1
    return cid


class CombatantKind(Enum):
    SHIP = "ship"
    PROJECTILE = "projectile"


@dataclass
class WeaponState:
    """Live state of one weapon mount.

    Attributes:
        weapon: The static weapon definition.
        target_cid: CID of the current target (None if no target).
        target_priority: Score the current target was acquired with.
        cooldown_remaining_ms: Time until the weapon may fire again.
    """

    weapon: WeaponType
    target_cid: int | None = None
    target_priority: float = NO_PRIORITY
    cooldown_remaining_ms: float = 0.0

    def clear_target(self) -> None:
        self.target_cid = None
        self.target_priority = NO_PRIORITY


@dataclass
class Combatant:
    """A single participant on the one-dimensional battle axis.

    Attributes:
        cid: Unique combatant instance ID.
        ship_type: The ShipType this combatant was built from.
        side: Name of the fleet this combatant belongs to.
        kind: SHIP or PROJECTILE.
        start_position: Position restored by reset().
        start_direction: Direction restored by reset().
        position: Current scalar position.
        direction: +1 or -1, the way this combatant advances.
        hull: Current hull points.
        shields: Current shield points.
        weapons: Per-weapon live state, same order as ship_type.weapons.
        target_cid: Primary (weapon 0) target, used for movement.
        target_priority: Priority of the primary target.
        lifetime: Ticks this combatant has acted in the current repetition.
        dealt: Cumulative damage dealt across repetitions.
        tanked: Cumulative damage received across repetitions.
        survived: Repetitions this combatant was alive at the end of.
        spawner_cid: For projectiles, the ship that launched it.
    """

    cid: int
    ship_type: ShipType
    side: str = ""
    kind: CombatantKind = CombatantKind.SHIP
    start_position: float = 0.0
    start_direction: int = 1

    position: float = 0.0
    direction: int = 1
    hull: float = 0.0
    shields: float = 0.0
    weapons: list[WeaponState] = field(default_factory=list)
    target_cid: int | None = None
    target_priority: float = NO_PRIORITY
    lifetime: int = 0
    dead: bool = False

    dealt: float = 0.0
    tanked: float = 0.0
    survived: int = 0

    spawner_cid: int | None = None

    # -- Construction ----------------------------------------------------

    @classmethod
    def from_ship_type(
        cls,
        ship_type: ShipType,
        *,
        side: str = "",
        position: float = 0.0,
        direction: int = 1,
    ) -> Combatant:
        """Create a fresh combatant at full health with all weapons ready."""
        combatant = cls(
            cid=new_cid(),
            ship_type=ship_type,
            side=side,
            start_position=position,
            start_direction=direction,
        )
        combatant.reset()
        return combatant

    @classmethod
    def projectile(
        cls,
        body: ShipType,
        spawner: Combatant,
        target_cid: int | None,
        damage: float,
        armor_penetration: float,
    ) -> Combatant:
        """Create an in-flight projectile carrying a single warhead.

        The warhead is a synthetic zero-range, zero-cooldown weapon aimed at
        the spawner's target. Projectiles start at the spawner's position.
        """
        warhead = WeaponType(
            name=f"{body.name}_warhead",
            damage=damage,
            armor_penetration=armor_penetration,
        )
        missile = cls(
            cid=new_cid(),
            ship_type=body,
            side=spawner.side,
            kind=CombatantKind.PROJECTILE,
            start_position=spawner.position,
            start_direction=spawner.direction,
            position=spawner.position,
            direction=spawner.direction,
            hull=body.hull,
            shields=body.shields,
            weapons=[WeaponState(weapon=warhead, target_cid=target_cid)],
            target_cid=target_cid,
            spawner_cid=spawner.cid,
        )
        return missile

    def reset(self) -> None:
        """Restore post-construction battle state.

        Cumulative statistics (dealt, tanked, survived) are kept so they
        accumulate across repetitions.
        """
        self.position = self.start_position
        self.direction = self.start_direction
        self.hull = self.ship_type.hull
        self.shields = self.ship_type.shields
        self.weapons = [WeaponState(weapon=w) for w in self.ship_type.weapons]
        self.target_cid = None
        self.target_priority = NO_PRIORITY
        self.lifetime = 0
        self.dead = False

    # -- Derived properties ----------------------------------------------

    @property
    def name(self) -> str:
        return self.ship_type.name

    @property
    def label(self) -> str:
        """Short identifier used in trace output."""
        return f"{self.side}:{self.name}#{self.cid}"

    @property
    def is_dead(self) -> bool:
        return self.dead

    @property
    def is_projectile(self) -> bool:
        return self.kind is CombatantKind.PROJECTILE

    @property
    def target_types(self) -> frozenset[TargetType]:
        return self.ship_type.target_types

    def distance_to(self, other: Combatant) -> float:
        return abs(self.position - other.position)
