"""Encounter loader — parses encounters.yaml.

Each encounter names two sides and their fleet compositions:

    encounters:
      - name: LF vs LRC
        side_a: {name: LF, fleet: {trader_light_frigate: 6}}
        side_b: {name: LRC, fleet: {trader_long_range_cruiser: 5}}
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from fleetsim.models.battle import Encounter, SideConfig
from fleetsim.util.constants import DEFAULT_ENCOUNTERS_PATH


def _parse_side(raw: Any, context: str) -> SideConfig:
    if not isinstance(raw, dict):
        raise ValueError(f"{context} must be a mapping")
    name = raw.get("name")
    if not name:
        raise ValueError(f"{context} needs a name")
    fleet = raw.get("fleet") or {}
    if not isinstance(fleet, dict):
        raise ValueError(f"{context} fleet must map ship names to counts")
    counts: dict[str, int] = {}
    for ship_name, count in fleet.items():
        if not isinstance(count, int) or isinstance(count, bool) or count < 0:
            raise ValueError(f"{context}: count for {ship_name!r} must be a non-negative integer")
        counts[str(ship_name)] = count
    return SideConfig(name=str(name), fleet=counts)


def parse_encounters(data: dict[str, Any]) -> list[Encounter]:
    """Build Encounter objects from an already-parsed YAML document."""
    encounters: list[Encounter] = []
    for i, entry in enumerate(data.get("encounters") or []):
        if not isinstance(entry, dict):
            raise ValueError(f"encounter #{i} must be a mapping")
        name = entry.get("name") or f"encounter {i}"
        encounters.append(Encounter(
            name=str(name),
            side_a=_parse_side(entry.get("side_a"), f"{name} side_a"),
            side_b=_parse_side(entry.get("side_b"), f"{name} side_b"),
        ))
    return encounters


def load_encounters(path: str | Path = DEFAULT_ENCOUNTERS_PATH) -> list[Encounter]:
    """Load encounter definitions from a YAML file.

    Args:
        path: Path to the encounters YAML file.

    Returns:
        List of encounters in file order (may be empty).
    """
    path = Path(path)
    with path.open() as f:
        data = yaml.safe_load(f) or {}
    return parse_encounters(data)
