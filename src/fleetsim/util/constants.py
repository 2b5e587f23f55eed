"""Simulation constants — timing, positions, damage scaling.

Timing and battlefield values are the SimConfig defaults (overridable in
config/sim.yaml); the damage and catalog values are fixed.
"""

# -- Timing --------------------------------------------------------------

TICK_INTERVAL_MS: float = 100.0
"""Simulated time per battle tick in milliseconds."""

SIM_DURATION_S: float = 600.0
"""Tick budget of a single repetition, in simulated seconds."""

REPETITIONS: int = 100
"""Independent battles simulated per encounter."""

# -- Battlefield ---------------------------------------------------------

START_POSITION: float = 10_000.0
"""Side A starts at +START_POSITION facing -1, side B at the negative."""

# -- Damage --------------------------------------------------------------

ARMOR_SCALE: float = 0.01
"""Hull damage is divided by (1 + ARMOR_SCALE * effective_armor)."""

# -- Catalog -------------------------------------------------------------

PROJECTILE_WEAPON_SUFFIXES: tuple[str, ...] = ("missile", "torpedo")
"""Weapons named with these suffixes spawn projectiles unless typed otherwise."""

DEFAULT_CATALOG_PATH = "config/catalog.yaml"
DEFAULT_SIM_CONFIG_PATH = "config/sim.yaml"
DEFAULT_ENCOUNTERS_PATH = "config/encounters.yaml"
