"""Test the per-fleet performance summary."""

import logging
import math

import pytest

from fleetsim.engine.statistics import summarize_fleet
from fleetsim.models.catalog import ShipType
from fleetsim.models.combatant import Combatant
from fleetsim.models.fleet import Fleet


def _ship(supply=5.0, credits=100.0, metal=50.0, crystal=18.0, dealt=0.0, tanked=0.0, survived=0):
    ship_type = ShipType(name="ship", hull=10.0, supply=supply,
                         credits=credits, metal=metal, crystal=crystal)
    ship = Combatant.from_ship_type(ship_type, side="A")
    ship.dealt = dealt
    ship.tanked = tanked
    ship.survived = survived
    return ship


class TestSummarizeFleet:

    def test_averages_over_repetitions(self):
        fleet = Fleet(name="A", roster=[
            _ship(supply=4.0, dealt=150.0, tanked=30.0, survived=2),
            _ship(supply=6.0, dealt=50.0, tanked=32.0, survived=1),
        ])

        report = summarize_fleet(fleet, repetitions=2)

        assert report.dealt == 100
        assert report.tanked == 31
        assert report.performance == 131
        assert report.supply == 10
        assert report.credits == 200
        assert report.metal == 100
        assert report.crystal == 36
        assert report.resources == 336
        assert report.survival_rate == pytest.approx(0.7)
        assert report.pps == pytest.approx(13.1)
        assert report.ppr == pytest.approx(0.39)

    def test_dealt_and_tanked_are_rounded_separately(self):
        fleet = Fleet(name="A", roster=[_ship(dealt=10.4, tanked=10.4)])
        report = summarize_fleet(fleet, repetitions=1)
        assert report.dealt == 10
        assert report.tanked == 10
        assert report.performance == 20

    def test_uses_roster_not_survivors(self):
        alive = _ship(dealt=10.0)
        dead = _ship(dealt=30.0)
        fleet = Fleet(name="A", roster=[alive, dead])
        dead.dead = True
        fleet.prune_dead()

        assert summarize_fleet(fleet, repetitions=1).dealt == 40

    def test_zero_supply_gives_nan(self, caplog):
        fleet = Fleet(name="free", roster=[_ship(supply=0.0, dealt=10.0)])
        with caplog.at_level(logging.WARNING):
            report = summarize_fleet(fleet, repetitions=1)

        assert math.isnan(report.pps)
        assert math.isnan(report.survival_rate)
        assert not math.isnan(report.ppr)
        assert "free" in caplog.text

    def test_zero_resources_gives_nan(self):
        fleet = Fleet(name="A", roster=[_ship(credits=0.0, metal=0.0, crystal=0.0, dealt=10.0)])
        report = summarize_fleet(fleet, repetitions=1)
        assert math.isnan(report.ppr)
        assert report.pps == pytest.approx(2.0)

    def test_empty_fleet(self):
        report = summarize_fleet(Fleet(name="empty"), repetitions=3)
        assert report.performance == 0
        assert report.supply == 0
        assert math.isnan(report.pps)

    def test_requires_a_repetition(self):
        with pytest.raises(ValueError):
            summarize_fleet(Fleet(name="A"), repetitions=0)
