"""Fleet model — the combatants of one side.

A fleet keeps two views of its combatants:

* ``roster``: every ship present at battle start. Fixed for the whole
  engagement; used for statistics and reset.
* ``active``: the live list the battle loop iterates. Dead combatants are
  pruned from it each tick and launched projectiles are prepended to it.

All weak references (weapon targets, projectile spawners) are resolved
through ``get()``, which only knows the roster and live projectiles.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

from fleetsim.models.combatant import Combatant


@dataclass
class Fleet:
    """One side of an engagement.

    Attributes:
        name: Side name shown in reports.
        roster: All ships present at battle start.
        active: Combatants still taking part in the current repetition.
        wins: Repetitions this side has won.
    """

    name: str
    roster: list[Combatant] = field(default_factory=list)
    active: list[Combatant] = field(default_factory=list)
    wins: int = 0
    _index: dict[int, Combatant] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.roster and not self.active:
            self.active = list(self.roster)
        for combatant in self.roster + self.active:
            self._index[combatant.cid] = combatant

    # -- Membership ------------------------------------------------------

    def add(self, combatant: Combatant) -> None:
        """Add a ship to the roster and the active list."""
        self.roster.append(combatant)
        self.active.append(combatant)
        self._index[combatant.cid] = combatant

    def add_projectiles(self, projectiles: list[Combatant]) -> None:
        """Insert projectiles at the head of the active list, in launch order."""
        if not projectiles:
            return
        for projectile in projectiles:
            self._index[projectile.cid] = projectile
        self.active[:0] = projectiles

    def get(self, cid: int | None) -> Combatant | None:
        """Resolve a weak reference. Returns None for unknown or pruned ids."""
        if cid is None:
            return None
        return self._index.get(cid)

    def get_live(self, cid: int | None) -> Combatant | None:
        """Resolve a weak reference, treating dead combatants as missing."""
        combatant = self.get(cid)
        if combatant is None or combatant.is_dead:
            return None
        return combatant

    # -- Per-tick maintenance --------------------------------------------

    def prune_dead(self) -> list[Combatant]:
        """Remove dead combatants from the active list.

        Dead projectiles are also dropped from the index; dead ships stay
        reachable through the roster.

        Returns:
            The combatants removed this call.
        """
        removed = [c for c in self.active if c.is_dead]
        if not removed:
            return []
        self.active = [c for c in self.active if not c.is_dead]
        for combatant in removed:
            if combatant.is_projectile:
                self._index.pop(combatant.cid, None)
        return removed

    def reset(self) -> None:
        """Restore every roster ship and discard projectiles in flight."""
        for combatant in self.roster:
            combatant.reset()
        self.active = list(self.roster)
        self._index = {c.cid: c for c in self.roster}

    # -- Queries ---------------------------------------------------------

    @property
    def is_annihilated(self) -> bool:
        return not self.active

    @property
    def survivors(self) -> list[Combatant]:
        return [c for c in self.roster if not c.is_dead]

    def __iter__(self) -> Iterator[Combatant]:
        return iter(self.active)

    def __len__(self) -> int:
        return len(self.active)
