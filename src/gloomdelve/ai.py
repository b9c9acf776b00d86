from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .components import Monster, Player, PlayerPosition, Position, Vision
from .ecs import World
from .movement import MoveOutcome, MovementResolver
from .pathfinding import a_star
from .rng import RandomSource
from .spatial import SpatialIndex

logger = logging.getLogger(__name__)

DEFAULT_MELEE_RANGE = 1.5


class Behavior(Enum):
    ATTACK = "attack"
    CHASE = "chase"
    WANDER = "wander"
    HOLD = "hold"


@dataclass(frozen=True)
class AiDecision:
    actor: int
    behavior: Behavior
    outcome: Optional[MoveOutcome] = None


class MonsterAI:
    """Decides and applies one action per monster per turn.

    A monster that currently sees the player engages: melee when adjacent
    (diagonals included), otherwise one A* step toward the player. A monster
    that does not see the player wanders to a random open neighbour. All
    movement goes through the MovementResolver.

    Perception is whatever the last visibility pass left in ``Vision.visible``;
    a monster that moved earlier this turn acts on its old view until the next
    pass. Occupancy is likewise the snapshot from the last index rebuild.
    """

    def __init__(
        self,
        world: World,
        index: SpatialIndex,
        resolver: MovementResolver,
        rng: RandomSource,
        melee_range: float = DEFAULT_MELEE_RANGE,
    ) -> None:
        self.world = world
        self.index = index
        self.resolver = resolver
        self.rng = rng
        self.melee_range = melee_range

    def run(self) -> List[AiDecision]:
        player_pos = self.world.res(PlayerPosition)
        decisions: List[AiDecision] = []
        for eid, _monster, pos, vision in self.world.query(Monster, Position, Vision):
            decision = self.decide(eid, pos, vision, player_pos)
            logger.debug("Monster %d at (%d,%d): %s", eid, pos.x, pos.y, decision.behavior.value)
            decisions.append(decision)
        return decisions

    def decide(
        self,
        eid: int,
        pos: Position,
        vision: Vision,
        player_pos: Optional[PlayerPosition],
    ) -> AiDecision:
        if player_pos is not None and player_pos.as_tuple() in vision.visible:
            return self._engage(eid, pos, player_pos)
        return self._wander(eid, pos)

    def _engage(self, eid: int, pos: Position, player_pos: PlayerPosition) -> AiDecision:
        distance = math.hypot(pos.x - player_pos.x, pos.y - player_pos.y)
        if distance < self.melee_range:
            target = self._player_id()
            if target is not None:
                self.resolver.attack_intent(eid, target)
            return AiDecision(eid, Behavior.ATTACK)

        path = a_star(
            self.index.linear_index(pos.x, pos.y),
            self.index.linear_index(player_pos.x, player_pos.y),
            self.index,
        )
        if not path.success or len(path.steps) < 2:
            return AiDecision(eid, Behavior.HOLD)
        nx, ny = self.index.coord_of(path.steps[1])
        outcome = self.resolver.attempt_move(eid, (nx - pos.x, ny - pos.y))
        return AiDecision(eid, Behavior.CHASE, outcome)

    def _wander(self, eid: int, pos: Position) -> AiDecision:
        exits = self.index.available_exits(self.index.linear_index(pos.x, pos.y))
        if not exits:
            return AiDecision(eid, Behavior.HOLD)
        nidx, _cost = self.rng.choice(exits)
        nx, ny = self.index.coord_of(nidx)
        outcome = self.resolver.attempt_move(eid, (nx - pos.x, ny - pos.y))
        return AiDecision(eid, Behavior.WANDER, outcome)

    def _player_id(self) -> Optional[int]:
        found = self.world.query_one(Player)
        return found[0] if found else None
