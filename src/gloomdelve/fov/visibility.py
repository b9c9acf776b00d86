from __future__ import annotations

import logging
from typing import List, Set

from ..components import Player, Position, Vision
from ..ecs import World
from ..map import Coord, Grid
from .shadowcast import field_of_view

logger = logging.getLogger(__name__)


class ExplorationState:
    """
    Level-wide fog-of-war memory, tracked for the player only.

    - ``explored`` is monotonic: once a tile has been seen it stays explored.
    - ``currently_visible`` holds the player's most recent field of view.
    """

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self._explored: List[bool] = [False] * (width * height)
        self._visible: List[bool] = [False] * (width * height)

    def _idx(self, x: int, y: int) -> int:
        return y * self.width + x

    def is_explored(self, x: int, y: int) -> bool:
        return self._explored[self._idx(x, y)]

    def is_visible(self, x: int, y: int) -> bool:
        return self._visible[self._idx(x, y)]

    def explored_mask(self) -> List[bool]:
        return list(self._explored)

    def visible_mask(self) -> List[bool]:
        return list(self._visible)

    def explored_count(self) -> int:
        return sum(self._explored)

    def visible_count(self) -> int:
        return sum(self._visible)

    def apply_player_view(self, visible: Set[Coord]) -> None:
        """Replace the current view with ``visible``; called by VisibilityEngine only."""
        for i in range(len(self._visible)):
            self._visible[i] = False
        for x, y in visible:
            idx = self._idx(x, y)
            self._visible[idx] = True
            self._explored[idx] = True


class VisibilityEngine:
    """Recomputes field of view for actors whose vision is flagged dirty.

    Only the player's view feeds the level's ExplorationState; every other
    actor's visible set is private perception used by the AI.
    """

    def __init__(self, grid: Grid, exploration: ExplorationState) -> None:
        self.grid = grid
        self.exploration = exploration

    def recompute(self, position: Position, vision: Vision, is_player: bool = False) -> Set[Coord]:
        raw = field_of_view(position.as_tuple(), vision.range, self.grid)
        visible = {(x, y) for (x, y) in raw if self.grid.in_bounds(x, y)}
        vision.visible = visible
        vision.recompute = False
        if is_player:
            self.exploration.apply_player_view(visible)
        return visible

    def run(self, world: World) -> int:
        """Process every dirty Vision in the world; returns how many were recomputed."""
        updated = 0
        for eid, pos, vision in world.query(Position, Vision):
            if not vision.recompute:
                continue
            is_player = world.has(eid, Player)
            visible = self.recompute(pos, vision, is_player=is_player)
            logger.debug("Actor %d at (%d,%d) sees %d tiles", eid, pos.x, pos.y, len(visible))
            updated += 1
        return updated
