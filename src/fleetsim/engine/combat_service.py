"""Combat service — the per-tick action protocol of a single combatant.

Each tick, every combatant acts once, in fleet-list order:

1. select_target   — per weapon, pick the best enemy by AI priority
2. move_to_target  — close distance until every targeted weapon reaches
3. attack          — fire ready weapons, reload or count down the rest

Ships and projectiles share damage resolution. Projectiles never move or
re-acquire targets; they "fire" by detonating on their target the first
time they act.

Launched projectiles are returned to the caller instead of being inserted
into the allied fleet, so no fleet list is mutated while it is iterated.
"""

from __future__ import annotations

import logging
import random

from fleetsim.models.catalog import AcquisitionLogic
from fleetsim.models.combatant import Combatant, WeaponState
from fleetsim.models.fleet import Fleet
from fleetsim.util.constants import ARMOR_SCALE
from fleetsim.util.events import (
    CombatantDestroyed,
    EventBus,
    ProjectileDetonated,
    ProjectileLaunched,
    TargetAcquired,
    WeaponFired,
)

log = logging.getLogger(__name__)


class CombatService:
    """Runs the action protocol for individual combatants.

    Args:
        rng: Source for the target-candidate shuffle. Inject a seeded
             ``random.Random`` for reproducible battles.
        events: Optional event bus receiving combat events.
    """

    def __init__(self, rng: random.Random | None = None, events: EventBus | None = None) -> None:
        self._rng = rng if rng is not None else random.Random()
        self._events = events if events is not None else EventBus()

    # ── Per-tick entry point ───────────────────────────────────

    def act(
        self,
        combatant: Combatant,
        allied: Fleet,
        enemy: Fleet,
        tick_interval_ms: float,
    ) -> list[Combatant]:
        """Take one turn: select targets, move, attack.

        Ships destroyed earlier in the same tick still complete their turn,
        so both sides of a tick fire simultaneously. Projectiles shot down
        before their turn do not detonate; the rest detonate on this turn.

        Returns:
            Projectiles launched this turn, to be inserted at the head of
            the allied fleet once the tick's action pass is over.
        """
        if combatant.is_projectile and combatant.is_dead:
            return []

        combatant.lifetime += 1
        has_target = self.select_target(combatant, enemy)

        if combatant.is_projectile:
            if not has_target:
                self._fizzle(combatant)
                return []
        elif has_target:
            self.move_to_target(combatant, enemy, tick_interval_ms)
        return self.attack(combatant, allied, enemy, tick_interval_ms)

    # ── Targeting ──────────────────────────────────────────────

    def select_target(self, combatant: Combatant, enemy: Fleet) -> bool:
        """Pick a target for every weapon and return whether a primary target exists.

        Weapon 0's target becomes the combatant's primary target. Weapons keep
        their current target unless a candidate scores strictly higher, so
        calling this again without fleet changes is a no-op.
        """
        if combatant.is_projectile:
            return enemy.get_live(combatant.target_cid) is not None

        for i, state in enumerate(combatant.weapons):
            weapon = state.weapon

            if i != 0 and weapon.logic is AcquisitionLogic.ORDER_TARGET_ONLY:
                state.target_cid = combatant.target_cid
                state.target_priority = combatant.target_priority
                continue

            candidates = [
                e for e in enemy.active
                if not e.is_dead and weapon.can_engage(e.target_types)
            ]
            in_range = [e for e in candidates if weapon.range >= combatant.distance_to(e)]
            options = list(in_range or candidates)

            # Shuffle so equal priorities don't always resolve to list order.
            self._rng.shuffle(options)

            if weapon.logic is AcquisitionLogic.BEST_TARGET_IN_RANGE:
                options = [e for e in options if e.cid != combatant.target_cid]

            if enemy.get_live(state.target_cid) is None:
                state.clear_target()

            for option in options:
                priority = self.target_priority(combatant, option)
                if priority > state.target_priority:
                    state.target_cid = option.cid
                    state.target_priority = priority
                    log.debug("%s weapon[%d] prioritizing %s (priority %.1f)",
                              combatant.label, i, option.label, priority)
                    self._events.emit(TargetAcquired(
                        combatant_id=combatant.cid,
                        weapon_index=i,
                        target_id=option.cid,
                        priority=priority,
                    ))

            if i == 0:
                combatant.target_cid = state.target_cid
                combatant.target_priority = state.target_priority

        return enemy.get_live(combatant.target_cid) is not None

    @staticmethod
    def target_priority(combatant: Combatant, option: Combatant) -> float:
        """Base attack priority of the option plus this ship's AI bonuses for its tags."""
        attack_target = option.ship_type.attack_target
        bonuses = combatant.ship_type.priority_bonus
        bonus = sum(bonuses.get(tag, 0.0) for tag in attack_target.attack_target_types)
        return attack_target.attack_priority + bonus

    # ── Movement ───────────────────────────────────────────────

    @staticmethod
    def current_speed(combatant: Combatant, tick_interval_ms: float) -> float:
        """Top speed, ramped linearly over the ship's acceleration time."""
        speed = combatant.ship_type.speed
        ticks_to_max = 1000.0 * combatant.ship_type.accel_time / tick_interval_ms
        if combatant.lifetime >= ticks_to_max:
            return speed
        return speed * (combatant.lifetime / ticks_to_max)

    @staticmethod
    def all_weapons_can_hit(combatant: Combatant, target: Combatant) -> bool:
        """True if every weapon that has a target can reach ``target``.

        Weapons without a target are ignored.
        """
        distance = combatant.distance_to(target)
        return all(
            state.weapon.range >= distance
            for state in combatant.weapons
            if state.target_cid is not None
        )

    def move_to_target(self, combatant: Combatant, enemy: Fleet, tick_interval_ms: float) -> None:
        """Advance towards the primary target until all targeted weapons are in range.

        Never overshoots: the step is capped at the remaining distance.
        """
        target = enemy.get_live(combatant.target_cid)
        if target is None:
            return
        if self.all_weapons_can_hit(combatant, target):
            return

        velocity = self.current_speed(combatant, tick_interval_ms)
        step = min(combatant.distance_to(target), velocity * tick_interval_ms / 1000.0)
        combatant.position += step * combatant.direction
        log.debug("%s moved to %.1f", combatant.label, combatant.position)

    # ── Firing ─────────────────────────────────────────────────

    def attack(
        self,
        combatant: Combatant,
        allied: Fleet,
        enemy: Fleet,
        tick_interval_ms: float,
    ) -> list[Combatant]:
        """Fire every ready weapon that has a live target in range.

        A weapon still cooling down counts down by one tick and may go
        negative; the slack carries into the next reload. A ready weapon
        without a valid shot simply waits.

        A projectile skips cooldown and range: its warhead detonates on the
        live target right away.
        """
        if combatant.is_projectile:
            for state in combatant.weapons:
                target = enemy.get_live(state.target_cid)
                if target is not None:
                    self._detonate(combatant, state, target, allied)
            return []

        launched: list[Combatant] = []
        for i, state in enumerate(combatant.weapons):
            if state.cooldown_remaining_ms > 0:
                state.cooldown_remaining_ms -= tick_interval_ms
                continue

            target = enemy.get_live(state.target_cid)
            if target is None or state.weapon.range < combatant.distance_to(target):
                continue

            if state.weapon.is_projectile:
                launched.extend(self._launch(combatant, i, state, target))
            else:
                self._fire_direct(combatant, i, state, target)

            state.cooldown_remaining_ms += state.weapon.cooldown * 1000.0
        return launched

    def _fire_direct(self, combatant: Combatant, index: int, state: WeaponState, target: Combatant) -> None:
        weapon = state.weapon
        log.debug("%s firing [%d] %s at %s", combatant.label, index, weapon.name, target.label)
        dealt = self.take_damage(target, weapon.damage, weapon.armor_penetration)
        combatant.dealt += dealt
        self._events.emit(WeaponFired(
            combatant_id=combatant.cid,
            weapon_index=index,
            target_id=target.cid,
            dealt=dealt,
        ))

    def _launch(self, combatant: Combatant, index: int, state: WeaponState, target: Combatant) -> list[Combatant]:
        weapon = state.weapon
        per_missile = weapon.damage / weapon.salvo_size
        salvo = [
            Combatant.projectile(
                weapon.projectile,
                spawner=combatant,
                target_cid=target.cid,
                damage=per_missile,
                armor_penetration=weapon.armor_penetration,
            )
            for _ in range(weapon.salvo_size)
        ]
        log.debug("%s launched %d x %s at %s (%.1f each)",
                  combatant.label, weapon.salvo_size, weapon.projectile.name, target.label, per_missile)
        self._events.emit(ProjectileLaunched(
            combatant_id=combatant.cid,
            weapon_index=index,
            target_id=target.cid,
            salvo_size=weapon.salvo_size,
        ))
        return salvo

    def _detonate(self, projectile: Combatant, state: WeaponState, target: Combatant, allied: Fleet) -> None:
        warhead = state.weapon
        dealt = self.take_damage(target, warhead.damage, warhead.armor_penetration)
        spawner = allied.get(projectile.spawner_cid)
        if spawner is not None:
            spawner.dealt += dealt
        projectile.dead = True
        log.debug("%s detonated on %s for %.1f", projectile.label, target.label, dealt)
        self._events.emit(ProjectileDetonated(
            projectile_id=projectile.cid,
            spawner_id=projectile.spawner_cid,
            target_id=target.cid,
            dealt=dealt,
        ))

    def _fizzle(self, projectile: Combatant) -> None:
        """Remove a projectile whose target is gone. It deals no damage."""
        projectile.dead = True
        log.debug("%s lost its target and fizzled", projectile.label)
        self._events.emit(ProjectileDetonated(
            projectile_id=projectile.cid,
            spawner_id=projectile.spawner_cid,
            target_id=projectile.target_cid,
            dealt=0.0,
        ))

    # ── Damage ─────────────────────────────────────────────────

    def take_damage(self, combatant: Combatant, damage: float, armor_penetration: float) -> float:
        """Apply one hit to ``combatant``.

        Shields absorb first after flat mitigation; overflow spills onto the
        hull, scaled down by armor left after penetration. Overkill is never
        credited.

        Returns:
            Damage actually dealt across shields and hull.
        """
        combatant.tanked += damage
        dealt = 0.0

        if combatant.shields > 0:
            damage = max(0.0, damage - combatant.ship_type.mitigation)
            dealt += min(damage, combatant.shields)
            combatant.shields -= damage
            damage = 0.0
        if combatant.shields < 0:
            damage = -combatant.shields
            combatant.shields = 0.0

        if damage > 0:
            effective_armor = max(0.0, combatant.ship_type.armor - armor_penetration)
            hull_damage = damage / (1 + ARMOR_SCALE * effective_armor)
            combatant.hull -= hull_damage
            if combatant.hull < 0:
                dealt += max(0.0, hull_damage + combatant.hull)
            else:
                dealt += hull_damage

        log.debug("%s shields %.1f/%.1f, hull %.1f/%.1f",
                  combatant.label, combatant.shields, combatant.ship_type.shields,
                  combatant.hull, combatant.ship_type.hull)

        if combatant.hull <= 0 and not combatant.dead:
            combatant.dead = True
            log.debug("%s destroyed", combatant.label)
            self._events.emit(CombatantDestroyed(combatant_id=combatant.cid, side=combatant.side))
        return dealt
