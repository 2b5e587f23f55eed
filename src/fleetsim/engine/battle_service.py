"""Battle service — repeated tick-based battles between two fleets.

Tick order (must be preserved):
1. side A acts    — every combatant in list order (select, move, attack)
2. side B acts    — same, against side A
3. launch         — projectiles fired this tick are prepended to their fleet
4. prune          — dead combatants leave the active lists
5. finish check   — one side empty → other side wins; both → draw;
                    tick budget spent → timeout

Repetitions run strictly one after another: roster counters (dealt,
tanked, survived) accumulate across them and are averaged at the end.

Provides a deterministic tick function for testing.
"""

from __future__ import annotations

import logging
import random

from fleetsim.engine.combat_service import CombatService
from fleetsim.engine.statistics import summarize_fleet
from fleetsim.loaders.sim_config_loader import SimConfig
from fleetsim.models.battle import (
    BattlePhase,
    BattleState,
    Encounter,
    EngagementResult,
    Outcome,
    SideResult,
)
from fleetsim.models.catalog import Catalog
from fleetsim.models.combatant import Combatant
from fleetsim.models.fleet import Fleet
from fleetsim.util.events import EventBus, RepetitionFinished

log = logging.getLogger(__name__)


class BattleService:
    """Builds fleets from the catalog and runs engagements.

    Args:
        catalog: Ship and weapon definitions.
        config: Timing, repetitions and start positions.
        rng: Random source for target shuffling (defaults to one seeded
             from ``config.seed``).
        events: Optional event bus receiving combat and engagement events.
    """

    def __init__(
        self,
        catalog: Catalog,
        config: SimConfig | None = None,
        *,
        rng: random.Random | None = None,
        events: EventBus | None = None,
    ) -> None:
        self._catalog = catalog
        self._config = config if config is not None else SimConfig()
        self._events = events if events is not None else EventBus()
        if rng is None:
            rng = random.Random(self._config.seed)
        self._combat = CombatService(rng=rng, events=self._events)

    @property
    def combat(self) -> CombatService:
        return self._combat

    # ── Initializing ───────────────────────────────────────────

    def build_fleet(
        self,
        name: str,
        composition: dict[str, int],
        position: float,
        direction: int,
    ) -> Fleet:
        """Instantiate a fleet from ship counts by type name.

        Unknown type names are logged and skipped.
        """
        fleet = Fleet(name=name)
        for ship_name, count in composition.items():
            ship_type = self._catalog.get_ship(ship_name)
            if ship_type is None:
                log.warning("Unrecognized ship type %r in fleet %r; skipping", ship_name, name)
                continue
            for _ in range(count):
                fleet.add(Combatant.from_ship_type(
                    ship_type, side=name, position=position, direction=direction,
                ))
        log.info("Fleet %r: %d ships", name, len(fleet.roster))
        return fleet

    def create_battle(self, encounter: Encounter) -> BattleState:
        """Set up both fleets at their start positions, facing each other."""
        start = self._config.start_position
        side_a = self.build_fleet(encounter.side_a.name, encounter.side_a.fleet, start, -1)
        side_b = self.build_fleet(encounter.side_b.name, encounter.side_b.fleet, -start, 1)
        return BattleState(
            side_a=side_a,
            side_b=side_b,
            tick_interval_ms=self._config.tick_interval_ms,
            max_ticks=self._config.max_ticks,
        )

    # ── Deterministic tick (also used by tests) ────────────────

    def tick(self, battle: BattleState) -> None:
        """Execute one battle tick and check for a conclusion."""
        dt_ms = battle.tick_interval_ms
        side_a, side_b = battle.side_a, battle.side_b

        launched_a: list[Combatant] = []
        for combatant in list(side_a.active):
            launched_a.extend(self._combat.act(combatant, side_a, side_b, dt_ms))

        launched_b: list[Combatant] = []
        for combatant in list(side_b.active):
            launched_b.extend(self._combat.act(combatant, side_b, side_a, dt_ms))

        side_a.add_projectiles(launched_a)
        side_b.add_projectiles(launched_b)

        side_a.prune_dead()
        side_b.prune_dead()

        battle.tick += 1
        self._check_finished(battle)

    def _check_finished(self, battle: BattleState) -> None:
        """Mutual annihilation within one tick is a draw, not a win for either side."""
        a_gone = battle.side_a.is_annihilated
        b_gone = battle.side_b.is_annihilated

        if a_gone and b_gone:
            battle.outcome = Outcome.DRAW
        elif b_gone:
            battle.outcome = Outcome.SIDE_A
        elif a_gone:
            battle.outcome = Outcome.SIDE_B
        elif battle.tick >= battle.max_ticks:
            battle.outcome = Outcome.TIMEOUT

    # ── Repetitions ────────────────────────────────────────────

    def run_repetition(self, battle: BattleState) -> Outcome:
        """Run one battle until a side is annihilated or the tick budget runs out."""
        battle.phase = BattlePhase.RUNNING
        battle.tick = 0
        battle.outcome = None

        while battle.outcome is None:
            self.tick(battle)

        self._conclude(battle)
        return battle.outcome

    def _conclude(self, battle: BattleState) -> None:
        battle.phase = BattlePhase.CONCLUDED
        outcome = battle.outcome

        if outcome is Outcome.SIDE_A:
            battle.side_a.wins += 1
            winner = battle.side_a
        elif outcome is Outcome.SIDE_B:
            battle.side_b.wins += 1
            winner = battle.side_b
        else:
            battle.draws += 1
            winner = None

        for fleet in (battle.side_a, battle.side_b):
            for ship in fleet.survivors:
                ship.survived += 1

        battle.total_ticks += battle.tick

        if winner is not None:
            log.info("[rep %d] %s wins after %.1fs (%d survivors)",
                     battle.repetition, winner.name, battle.elapsed_s, len(winner.survivors))
        else:
            log.info("[rep %d] %s after %.1fs",
                     battle.repetition, "timeout" if outcome is Outcome.TIMEOUT else "draw",
                     battle.elapsed_s)

        self._events.emit(RepetitionFinished(
            repetition=battle.repetition,
            outcome=outcome.value,
            ticks=battle.tick,
        ))

    def reset(self, battle: BattleState) -> None:
        """Restore both fleets for the next repetition."""
        battle.phase = BattlePhase.RESETTING
        battle.side_a.reset()
        battle.side_b.reset()
        battle.tick = 0
        battle.outcome = None

    def run(self, encounter: Encounter, repetitions: int | None = None) -> EngagementResult:
        """Simulate ``encounter`` repeatedly and aggregate the results.

        Args:
            encounter: The two fleet compositions to pit against each other.
            repetitions: Overrides ``config.repetitions`` when given.

        Returns:
            Wins, draws, average duration and a report per side.
        """
        reps = repetitions if repetitions is not None else self._config.repetitions
        if reps < 1:
            raise ValueError(f"repetitions must be at least 1, got {reps}")

        log.info("Simulating %s (%d repetitions)", encounter.name, reps)
        battle = self.create_battle(encounter)

        for rep in range(reps):
            if rep > 0:
                self.reset(battle)
            battle.repetition = rep
            self.run_repetition(battle)

        battle.phase = BattlePhase.FINISHED
        return self._result(encounter, battle, reps)

    def _result(self, encounter: Encounter, battle: BattleState, reps: int) -> EngagementResult:
        average_duration_s = battle.total_ticks * battle.tick_interval_ms / (1000.0 * reps)
        result = EngagementResult(
            name=encounter.name,
            repetitions=reps,
            side_a=SideResult(
                name=battle.side_a.name,
                wins=battle.side_a.wins,
                report=summarize_fleet(battle.side_a, reps),
            ),
            side_b=SideResult(
                name=battle.side_b.name,
                wins=battle.side_b.wins,
                report=summarize_fleet(battle.side_b, reps),
            ),
            draws=battle.draws,
            average_duration_s=average_duration_s,
        )
        log.info("%s finished: %s %d wins, %s %d wins, %d draws, average %.1fs",
                 encounter.name, result.side_a.name, result.side_a.wins,
                 result.side_b.name, result.side_b.wins, result.draws, average_duration_s)
        return result
