"""Fleet report model — per-side summary of an engagement."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FleetReport:
    """Averaged performance of one fleet over all repetitions.

    Attributes:
        dealt: Damage dealt per repetition (rounded).
        tanked: Damage received per repetition (rounded).
        performance: dealt + tanked.
        supply: Total supply cost of the fleet composition.
        credits, metal, crystal: Total build costs.
        resources: credits + metal + crystal.
        survival_rate: Supply-weighted fraction of the fleet alive at the end.
        pps: Performance per supply (2 decimals, NaN for zero supply).
        ppr: Performance per resource (2 decimals, NaN for zero resources).
    """

    dealt: int
    tanked: int
    performance: int
    supply: float
    credits: float
    metal: float
    crystal: float
    resources: float
    survival_rate: float
    pps: float
    ppr: float
