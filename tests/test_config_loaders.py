"""Tests for the sim config and encounter loaders."""

import logging
from pathlib import Path

import pytest

from fleetsim.loaders.encounter_loader import load_encounters, parse_encounters
from fleetsim.loaders.sim_config_loader import SimConfig, load_sim_config

CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"


class TestSimConfig:

    def test_defaults(self):
        config = SimConfig()
        assert config.tick_interval_ms == 100.0
        assert config.duration_s == 600.0
        assert config.repetitions == 100
        assert config.start_position == 10_000.0
        assert config.seed is None
        assert config.max_ticks == 6000

    def test_max_ticks_follows_tick_interval(self):
        assert SimConfig(tick_interval_ms=50.0, duration_s=2.0).max_ticks == 40

    @pytest.mark.parametrize("kwargs", [
        {"tick_interval_ms": 0},
        {"duration_s": -1},
        {"repetitions": 0},
        {"catalog_level": -1},
    ])
    def test_rejects_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            SimConfig(**kwargs)

    def test_bundled_file_loads(self):
        config = load_sim_config(CONFIG_DIR / "sim.yaml")
        assert config.repetitions == 100
        assert config.tick_interval_ms == 100

    def test_missing_file_falls_back_to_defaults(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING):
            config = load_sim_config(tmp_path / "nope.yaml")
        assert config == SimConfig()
        assert "using defaults" in caplog.text

    def test_partial_file_keeps_defaults(self, tmp_path):
        path = tmp_path / "sim.yaml"
        path.write_text("repetitions: 7\nseed: 3\n")
        config = load_sim_config(path)
        assert config.repetitions == 7
        assert config.seed == 3
        assert config.duration_s == 600.0

    def test_unknown_keys_are_ignored(self, tmp_path, caplog):
        path = tmp_path / "sim.yaml"
        path.write_text("repetitions: 2\nwarp_factor: 9\n")
        with caplog.at_level(logging.WARNING):
            config = load_sim_config(path)
        assert config.repetitions == 2
        assert "warp_factor" in caplog.text

    def test_empty_file(self, tmp_path):
        path = tmp_path / "sim.yaml"
        path.write_text("")
        assert load_sim_config(path) == SimConfig()


class TestEncounters:

    def test_bundled_file_loads(self):
        encounters = load_encounters(CONFIG_DIR / "encounters.yaml")
        assert len(encounters) >= 1
        assert encounters[0].name == "LF vs LRC"
        assert encounters[0].side_a.fleet == {"trader_light_frigate": 6}

    def test_parse(self):
        encounters = parse_encounters({"encounters": [{
            "name": "duel",
            "side_a": {"name": "Red", "fleet": {"a": 2, "b": 0}},
            "side_b": {"name": "Blue", "fleet": {"c": 1}},
        }]})
        (duel,) = encounters
        assert duel.name == "duel"
        assert duel.side_a.name == "Red"
        assert duel.side_a.fleet == {"a": 2, "b": 0}
        assert duel.side_b.fleet == {"c": 1}

    def test_empty_document(self):
        assert parse_encounters({}) == []

    def test_side_without_fleet_is_empty(self):
        (encounter,) = parse_encounters({"encounters": [{
            "name": "lonely",
            "side_a": {"name": "A", "fleet": {"x": 1}},
            "side_b": {"name": "B"},
        }]})
        assert encounter.side_b.fleet == {}

    @pytest.mark.parametrize("side_a", [
        None,
        {"fleet": {"x": 1}},
        {"name": "A", "fleet": ["x"]},
        {"name": "A", "fleet": {"x": -1}},
        {"name": "A", "fleet": {"x": 1.5}},
    ])
    def test_invalid_side(self, side_a):
        with pytest.raises(ValueError):
            parse_encounters({"encounters": [{
                "name": "bad",
                "side_a": side_a,
                "side_b": {"name": "B", "fleet": {}},
            }]})

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_encounters(tmp_path / "missing.yaml")
