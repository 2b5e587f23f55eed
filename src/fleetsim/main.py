"""Fleet simulator entry point.

Loads all inputs and runs every configured encounter:
1. Load configuration (sim settings, catalog, encounters)
2. Create the battle service
3. Run each encounter for the configured repetitions
4. Print a results table per encounter

Usage:
    python -m fleetsim.main --encounters config/encounters.yaml
    # or via entry point:
    fleetsim -v --repetitions 10
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass, field, replace
from typing import Optional, Sequence

from fleetsim.engine.battle_service import BattleService
from fleetsim.loaders.catalog_loader import load_catalog
from fleetsim.loaders.encounter_loader import load_encounters
from fleetsim.loaders.errors import CatalogError
from fleetsim.loaders.sim_config_loader import SimConfig, load_sim_config
from fleetsim.models.battle import Encounter, EngagementResult
from fleetsim.models.catalog import Catalog
from fleetsim.util.constants import DEFAULT_ENCOUNTERS_PATH, DEFAULT_SIM_CONFIG_PATH
from fleetsim.util.format import render_result

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Container for all loaded configuration
# ---------------------------------------------------------------------------


@dataclass
class Configuration:
    """Holds all data loaded from config files."""

    sim: SimConfig = field(default_factory=SimConfig)
    catalog: Catalog = field(default_factory=Catalog)
    encounters: list[Encounter] = field(default_factory=list)


def load_configuration(
    config_path: str = DEFAULT_SIM_CONFIG_PATH,
    encounters_path: str = DEFAULT_ENCOUNTERS_PATH,
    catalog_path: str = "",
    overrides: Optional[dict] = None,
) -> Configuration:
    """Load sim settings, the catalog and the encounter list.

    Args:
        config_path: Path to the sim YAML.
        encounters_path: Path to the encounters YAML.
        catalog_path: Catalog directory or YAML file (default: from sim config).
        overrides: SimConfig fields replacing the loaded values.

    Returns:
        Populated :class:`Configuration`.
    """
    log.info("Loading configuration …")

    sim = load_sim_config(config_path)
    if overrides:
        sim = replace(sim, **overrides)
    if catalog_path:
        sim = replace(sim, catalog_path=catalog_path)

    catalog = load_catalog(sim.catalog_path, level=sim.catalog_level)
    log.info("  catalog:      %d units from %s", len(catalog.ships), sim.catalog_path)

    encounters = load_encounters(encounters_path)
    log.info("  encounters:   %d from %s", len(encounters), encounters_path)

    return Configuration(sim=sim, catalog=catalog, encounters=encounters)


def run_encounters(config: Configuration, only: Sequence[str] = ()) -> list[EngagementResult]:
    """Run every encounter (or only the named ones) and return their results."""
    results = []
    for encounter in config.encounters:
        if only and encounter.name not in only:
            continue
        # Fresh service per encounter so each starts from the configured seed.
        service = BattleService(config.catalog, config.sim)
        results.append(service.run(encounter))
    return results


# ===================================================================
# Entry points
# ===================================================================


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="fleetsim",
        description="Simulate repeated battles between two fleets and report cost efficiency.",
    )
    parser.add_argument("--config", default=DEFAULT_SIM_CONFIG_PATH, help="sim settings YAML")
    parser.add_argument("--encounters", default=DEFAULT_ENCOUNTERS_PATH, help="encounters YAML")
    parser.add_argument("--catalog", default="", help="entity directory or catalog YAML")
    parser.add_argument("--repetitions", type=int, help="override repetitions per encounter")
    parser.add_argument("--seed", type=int, help="seed for target shuffling")
    parser.add_argument("--encounter", action="append", default=[], metavar="NAME",
                        help="only run this encounter (repeatable)")
    parser.add_argument("-v", "--verbose", action="store_true", help="log the per-tick battle trace")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point for the simulator."""
    args = _parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    overrides = {}
    if args.repetitions is not None:
        overrides["repetitions"] = args.repetitions
    if args.seed is not None:
        overrides["seed"] = args.seed

    try:
        config = load_configuration(
            config_path=args.config,
            encounters_path=args.encounters,
            catalog_path=args.catalog,
            overrides=overrides,
        )
    except (CatalogError, FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    results = run_encounters(config, only=args.encounter)
    if not results:
        log.warning("No encounters to run")
    for result in results:
        print()
        print(render_result(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
