"""Simulation configuration — loads tunable constants from config/sim.yaml.

Provides a single ``SimConfig`` dataclass that is loaded once at startup
and then passed to the battle service.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

from fleetsim.util import constants

log = logging.getLogger(__name__)


@dataclass
class SimConfig:
    """All tunable simulation constants.

    Loaded from ``config/sim.yaml``.  Every field has a sensible default
    so the simulator can run even without the file.
    """

    # -- Timing ------------------------------------------------------
    tick_interval_ms: float = constants.TICK_INTERVAL_MS
    duration_s: float = constants.SIM_DURATION_S
    repetitions: int = constants.REPETITIONS

    # -- Battlefield -------------------------------------------------
    start_position: float = constants.START_POSITION

    # -- Randomness --------------------------------------------------
    seed: Optional[int] = None

    # -- Catalog -----------------------------------------------------
    catalog_path: str = constants.DEFAULT_CATALOG_PATH
    catalog_level: int = 0

    def __post_init__(self) -> None:
        if self.tick_interval_ms <= 0:
            raise ValueError(f"tick_interval_ms must be positive, got {self.tick_interval_ms}")
        if self.duration_s <= 0:
            raise ValueError(f"duration_s must be positive, got {self.duration_s}")
        if self.repetitions < 1:
            raise ValueError(f"repetitions must be at least 1, got {self.repetitions}")
        if self.catalog_level < 0:
            raise ValueError(f"catalog_level must not be negative, got {self.catalog_level}")

    @property
    def max_ticks(self) -> int:
        """Tick budget of a single repetition."""
        return int(self.duration_s * 1000 / self.tick_interval_ms)


def load_sim_config(path: str | Path = constants.DEFAULT_SIM_CONFIG_PATH) -> SimConfig:
    """Load simulation configuration from a YAML file.

    Missing keys fall back to dataclass defaults.  If the file does not
    exist, a warning is logged and pure defaults are returned.
    """
    p = Path(path)
    if not p.exists():
        log.warning("Sim config not found at %s, using defaults", p)
        return SimConfig()

    with p.open() as f:
        raw = yaml.safe_load(f) or {}

    log.info("Loaded sim config from %s (%d keys)", p, len(raw))

    unknown = sorted(k for k in raw if k not in SimConfig.__dataclass_fields__)
    if unknown:
        log.warning("Ignoring unknown sim config keys: %s", ", ".join(unknown))

    return SimConfig(**{
        k: v for k, v in raw.items()
        if k in SimConfig.__dataclass_fields__
    })
