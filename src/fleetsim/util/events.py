"""Typed event bus — structured trace of what happens during a battle.

The combat and battle services emit these unconditionally; subscribers
decide what to keep. Nothing in the simulation depends on a subscriber.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable, TypeVar, Type

T = TypeVar("T")


# -- Combat events -------------------------------------------------------

@dataclass(frozen=True)
class TargetAcquired:
    """A weapon switched to a new target."""
    combatant_id: int
    weapon_index: int
    target_id: int
    priority: float


@dataclass(frozen=True)
class WeaponFired:
    """A direct-fire weapon hit its target."""
    combatant_id: int
    weapon_index: int
    target_id: int
    dealt: float


@dataclass(frozen=True)
class ProjectileLaunched:
    """A projectile weapon fired a salvo."""
    combatant_id: int
    weapon_index: int
    target_id: int
    salvo_size: int


@dataclass(frozen=True)
class ProjectileDetonated:
    """A projectile reached its target (dealt is 0 when it fizzled)."""
    projectile_id: int
    spawner_id: int | None
    target_id: int | None
    dealt: float


@dataclass(frozen=True)
class CombatantDestroyed:
    """A combatant's hull dropped to zero."""
    combatant_id: int
    side: str


# -- Engagement events ---------------------------------------------------

@dataclass(frozen=True)
class RepetitionFinished:
    """A single repetition has concluded."""
    repetition: int
    outcome: str
    ticks: int


# -- Event Bus -----------------------------------------------------------

Handler = Callable[[Any], None]


class EventBus:
    """Synchronous dispatch of battle events.

    Handlers subscribe to one event type with ``on`` or to every event with
    ``on_any`` (a full battle trace). Type handlers run before catch-all
    handlers, each group in subscription order.

    Usage:
        bus = EventBus()
        trace = []
        bus.on_any(trace.append)
        bus.on(CombatantDestroyed, lambda e: print(e.side, e.combatant_id))
    """

    def __init__(self) -> None:
        self._by_type: dict[type, list[Handler]] = defaultdict(list)
        self._catch_all: list[Handler] = []

    def on(self, event_type: Type[T], handler: Callable[[T], None]) -> None:
        self._by_type[event_type].append(handler)

    def on_any(self, handler: Handler) -> None:
        """Receive every emitted event, whatever its type."""
        self._catch_all.append(handler)

    def off(self, event_type: Type[T] | None, handler: Callable[[T], None]) -> None:
        """Unsubscribe ``handler``; pass ``None`` as the type for a catch-all handler."""
        handlers = self._catch_all if event_type is None else self._by_type.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event: object) -> None:
        for handler in (*self._by_type.get(type(event), ()), *self._catch_all):
            handler(event)

    def clear(self) -> None:
        self._by_type.clear()
        self._catch_all.clear()
