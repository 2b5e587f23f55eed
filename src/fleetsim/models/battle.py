"""Battle state models — data containers for a running engagement.

The BattleState holds all mutable state for one engagement between two
fleets. Business logic is in engine/battle_service.py.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from fleetsim.models.fleet import Fleet
from fleetsim.models.report import FleetReport


class BattlePhase(Enum):
    """Lifecycle of an engagement."""

    INITIALIZING = "initializing"
    RUNNING = "running"
    CONCLUDED = "concluded"
    RESETTING = "resetting"
    FINISHED = "finished"


class Outcome(Enum):
    """How a single repetition ended."""

    SIDE_A = "side_a"
    SIDE_B = "side_b"
    DRAW = "draw"
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class SideConfig:
    """One side of an encounter: a display name and ship counts by type name."""

    name: str
    fleet: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class Encounter:
    """A named match-up between two fleet compositions."""

    name: str
    side_a: SideConfig
    side_b: SideConfig


@dataclass
class BattleState:
    """Mutable state container for an engagement.

    Attributes:
        side_a: Fleet that acts first each tick (starts at +start_position).
        side_b: Fleet that acts second (starts at -start_position).
        tick_interval_ms: Simulated time per tick.
        max_ticks: Tick budget for a single repetition.

        phase: Current lifecycle phase.
        repetition: Index of the repetition being simulated.
        tick: Ticks simulated in the current repetition.
        outcome: Result of the current repetition (set on conclusion).

        draws: Repetitions that ended without a winner.
        total_ticks: Ticks simulated across all repetitions.
    """

    side_a: Fleet
    side_b: Fleet
    tick_interval_ms: float
    max_ticks: int

    phase: BattlePhase = BattlePhase.INITIALIZING
    repetition: int = 0
    tick: int = 0
    outcome: Outcome | None = None

    draws: int = 0
    total_ticks: int = 0

    @property
    def elapsed_s(self) -> float:
        return self.tick * self.tick_interval_ms / 1000.0


@dataclass(frozen=True)
class SideResult:
    """Final numbers for one side of an engagement."""

    name: str
    wins: int
    report: FleetReport


@dataclass(frozen=True)
class EngagementResult:
    """Aggregated result of all repetitions of an encounter.

    Attributes:
        name: Encounter name.
        repetitions: Number of repetitions simulated.
        side_a: Result for the first side.
        side_b: Result for the second side.
        draws: Repetitions without a winner (mutual kill or timeout).
        average_duration_s: Mean simulated battle length; timeouts count
            as the full tick budget.
    """

    name: str
    repetitions: int
    side_a: SideResult
    side_b: SideResult
    draws: int
    average_duration_s: float
