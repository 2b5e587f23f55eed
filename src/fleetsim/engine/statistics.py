"""Statistics — per-fleet performance summary over all repetitions.

Performance is damage dealt plus damage tanked per repetition:
    performance = round(dealt / reps) + round(tanked / reps)

Cost efficiency:
    PPS = performance / supply        (performance per supply point)
    PPR = performance / resources     (performance per credit+metal+crystal)

A fleet with zero supply or zero resource cost has no meaningful ratio;
those come out as NaN rather than infinity.
"""

from __future__ import annotations

import logging
import math

from fleetsim.models.fleet import Fleet
from fleetsim.models.report import FleetReport

log = logging.getLogger(__name__)


def _ratio(numerator: float, denominator: float, what: str, fleet: str) -> float:
    if denominator == 0:
        log.warning("Fleet %r has zero %s; ratio is undefined", fleet, what)
        return math.nan
    return numerator / denominator


def summarize_fleet(fleet: Fleet, repetitions: int) -> FleetReport:
    """Build the report for ``fleet`` from its roster's accumulated counters.

    Args:
        fleet: Fleet whose roster has run ``repetitions`` battles.
        repetitions: Number of repetitions the counters accumulate over.

    Returns:
        The averaged :class:`FleetReport`.
    """
    if repetitions < 1:
        raise ValueError(f"repetitions must be at least 1, got {repetitions}")

    ships = fleet.roster
    dealt = round(sum(s.dealt for s in ships) / repetitions)
    tanked = round(sum(s.tanked for s in ships) / repetitions)
    supply = sum(s.ship_type.supply for s in ships)
    credits = sum(s.ship_type.credits for s in ships)
    metal = sum(s.ship_type.metal for s in ships)
    crystal = sum(s.ship_type.crystal for s in ships)
    resources = credits + metal + crystal
    performance = dealt + tanked

    surviving_supply = sum(s.ship_type.supply * s.survived / repetitions for s in ships)
    survival_rate = _ratio(surviving_supply, supply, "supply", fleet.name)

    pps = _ratio(performance, supply, "supply", fleet.name)
    ppr = _ratio(performance, resources, "resources", fleet.name)

    return FleetReport(
        dealt=dealt,
        tanked=tanked,
        performance=performance,
        supply=supply,
        credits=credits,
        metal=metal,
        crystal=crystal,
        resources=resources,
        survival_rate=survival_rate,
        pps=round(pps, 2) if not math.isnan(pps) else pps,
        ppr=round(ppr, 2) if not math.isnan(ppr) else ppr,
    )
