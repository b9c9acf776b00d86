from __future__ import annotations

import logging
import math
from typing import List, Tuple

from .components import Blocking, Position
from .ecs import World
from .exceptions import OutOfBoundsError
from .map import Coord, Grid

logger = logging.getLogger(__name__)

DIAGONAL_COST = math.sqrt(2.0)

# Orthogonal offsets first, then diagonals; exits are reported in this order.
_OFFSETS: Tuple[Tuple[int, int, float], ...] = (
    (-1, 0, 1.0), (1, 0, 1.0), (0, -1, 1.0), (0, 1, 1.0),
    (-1, -1, DIAGONAL_COST), (1, -1, DIAGONAL_COST),
    (-1, 1, DIAGONAL_COST), (1, 1, DIAGONAL_COST),
)


class SpatialIndex:
    """Per-tile blocking flags and occupant lists derived from actor positions.

    The index is rebuilt wholesale from the world; nothing updates it when a
    single actor moves, so readers within the same pass see the positions as
    they were at the last rebuild.
    """

    def __init__(self, grid: Grid) -> None:
        self.grid = grid
        n = grid.width * grid.height
        self._blocked: List[bool] = [False] * n
        self._occupants: List[List[int]] = [[] for _ in range(n)]
        self._reset_terrain()

    def _reset_terrain(self) -> None:
        w = self.grid.width
        for idx in range(len(self._blocked)):
            self._blocked[idx] = not self.grid.is_walkable(idx % w, idx // w)
            self._occupants[idx].clear()

    def rebuild(self, world: World) -> None:
        self._reset_terrain()
        count = 0
        for eid, pos in world.all_of(Position):
            idx = self._checked_index(pos.x, pos.y)
            self._occupants[idx].append(eid)
            if world.has(eid, Blocking):
                self._blocked[idx] = True
            count += 1
        logger.debug("SpatialIndex rebuilt with %d actors", count)

    # ---- Coordinate codecs ------------------------------------------------
    def linear_index(self, x: int, y: int) -> int:
        return self.grid.linear_index(x, y)

    def coord_of(self, idx: int) -> Coord:
        return self.grid.coord_of(idx)

    def _checked_index(self, x: int, y: int) -> int:
        if not self.grid.is_within(x, y):
            raise OutOfBoundsError(f"Occupancy lookup out of bounds: ({x}, {y})")
        return self.grid.linear_index(x, y)

    # ---- Queries ----------------------------------------------------------
    def is_blocked(self, x: int, y: int) -> bool:
        return self._blocked[self._checked_index(x, y)]

    def occupants_at(self, x: int, y: int) -> List[int]:
        return list(self._occupants[self._checked_index(x, y)])

    def available_exits(self, idx: int) -> List[Tuple[int, float]]:
        """Return (index, cost) for each unblocked interior neighbour of idx.

        Orthogonal steps cost 1, diagonal steps cost sqrt(2).
        """
        x, y = self.grid.coord_of(idx)
        exits: List[Tuple[int, float]] = []
        for dx, dy, cost in _OFFSETS:
            nx, ny = x + dx, y + dy
            if not self.grid.in_bounds(nx, ny):
                continue
            nidx = self.grid.linear_index(nx, ny)
            if self._blocked[nidx]:
                continue
            exits.append((nidx, cost))
        return exits
