from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .components import CombatStats, Name, Player, PlayerPosition, Position, Vision
from .ecs import World
from .map import Grid
from .message_log import MessageLog
from .spatial import SpatialIndex

logger = logging.getLogger(__name__)

Delta = Tuple[int, int]


class MoveKind(Enum):
    MOVED = "moved"
    BLOCKED = "blocked"
    ATTACKED = "attacked"


@dataclass(frozen=True)
class MoveOutcome:
    kind: MoveKind
    target: Optional[int] = None

    @property
    def consumed_turn(self) -> bool:
        return self.kind is not MoveKind.BLOCKED


BLOCKED = MoveOutcome(MoveKind.BLOCKED)
MOVED = MoveOutcome(MoveKind.MOVED)


class MovementResolver:
    """Applies an actor's intended displacement.

    Both player input and monster AI route through ``attempt_move`` so that
    occupancy, vision-dirty flags and the cached PlayerPosition resource stay
    consistent. This is the only place actor positions and PlayerPosition
    are written after world setup.
    """

    def __init__(self, world: World, grid: Grid, index: SpatialIndex) -> None:
        self.world = world
        self.grid = grid
        self.index = index

    def attempt_move(self, eid: int, delta: Delta) -> MoveOutcome:
        pos = self.world.get(eid, Position)
        if pos is None:
            logger.debug("Actor %d has no Position; move ignored", eid)
            return BLOCKED
        dx, dy = delta
        if dx == 0 and dy == 0:
            return BLOCKED

        tx, ty = pos.x + dx, pos.y + dy
        if not self.grid.in_bounds(tx, ty):
            logger.debug("Blocked move for %d: target (%d,%d) out of bounds", eid, tx, ty)
            return BLOCKED

        for occupant in self.index.occupants_at(tx, ty):
            if occupant != eid and self.world.has(occupant, CombatStats):
                self.attack_intent(eid, occupant)
                return MoveOutcome(MoveKind.ATTACKED, target=occupant)

        if self.index.is_blocked(tx, ty):
            logger.debug("Blocked move for %d: target (%d,%d) is blocked", eid, tx, ty)
            return BLOCKED

        logger.debug("Actor %d moves from (%d,%d) to (%d,%d)", eid, pos.x, pos.y, tx, ty)
        pos.x, pos.y = tx, ty
        vision = self.world.get(eid, Vision)
        if vision is not None:
            vision.recompute = True
        if self.world.has(eid, Player):
            cached = self.world.res(PlayerPosition)
            if cached is None:
                self.world.set_res(PlayerPosition(tx, ty))
            else:
                cached.x, cached.y = tx, ty
        return MOVED

    def attack_intent(self, attacker: int, target: int) -> None:
        """Record a melee attack intent. Damage is not applied."""
        text = self._attack_message(attacker, target)
        log = self.world.res(MessageLog)
        if log is not None:
            log.add(text, actor=attacker, target=target)
        else:
            logger.info(text)

    def _name_of(self, eid: int) -> str:
        name = self.world.get(eid, Name)
        return name.name if name is not None else "enemy"

    def _attack_message(self, attacker: int, target: int) -> str:
        if self.world.has(attacker, Player):
            return f"You slap {self._name_of(target)} in the face."
        if self.world.has(target, Player):
            return f"{self._name_of(attacker)} spits at you."
        return f"{self._name_of(attacker)} shoves {self._name_of(target)}."
