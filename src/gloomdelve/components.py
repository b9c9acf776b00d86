"""Component types attached to actors in the :class:`~gloomdelve.ecs.World`."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Set, Tuple


@dataclass
class Position:
    x: int
    y: int

    def as_tuple(self) -> Tuple[int, int]:
        return (self.x, self.y)


@dataclass
class PlayerPosition:
    """World resource caching the player's coordinates for fast lookup.

    Only MovementResolver (and world setup) writes it, at the same point the
    player's own Position changes.
    """

    x: int
    y: int

    def as_tuple(self) -> Tuple[int, int]:
        return (self.x, self.y)


@dataclass
class Vision:
    """Per-actor perception.

    ``visible`` must not be trusted while ``recompute`` is set; it is
    refreshed by the next visibility pass.
    """

    range: int = 8
    visible: Set[Tuple[int, int]] = field(default_factory=set)
    recompute: bool = True


@dataclass
class CombatStats:
    max_hp: int
    hp: int
    attack: int
    defense: int

    @classmethod
    def full(cls, max_hp: int, attack: int, defense: int) -> "CombatStats":
        return cls(max_hp=max_hp, hp=max_hp, attack=attack, defense=defense)


@dataclass
class Name:
    name: str


@dataclass
class Renderable:
    glyph: str
    fg: Tuple[int, int, int] = (255, 255, 255)
    bg: Tuple[int, int, int] = (0, 0, 0)


@dataclass
class Blocking:
    """Marks an actor whose tile others cannot enter or path through."""


@dataclass
class Player:
    """Role tag for the single player-controlled actor."""


@dataclass
class Monster:
    """Role tag for AI-driven actors."""
