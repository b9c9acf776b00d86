from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional

from ..exceptions import ConfigError
from ..map import Grid, Room, TileKind
from ..rng import RandomSource

logger = logging.getLogger(__name__)


@dataclass
class Dungeon:
    """A generated level: the carved grid plus its rooms in acceptance order."""

    grid: Grid
    rooms: List[Room] = field(default_factory=list)


class DungeonGenerator(ABC):
    """Abstract base for dungeon generators."""

    @abstractmethod
    def generate(self, width: int, height: int, rng: Optional[RandomSource] = None) -> Dungeon:
        """Generate a dungeon level."""
        raise NotImplementedError


class RoomsAndCorridorsGenerator(DungeonGenerator):
    """Rooms + L-shaped corridors generator.

    Makes ``max_rooms`` placement attempts. Every accepted room is joined to
    the room accepted just before it, so connectivity is pairwise-sequential
    and the rooms always form a single component. Attempts that overlap an
    existing room (touching counts) are discarded; generation never retries
    beyond the attempt budget, so it may return fewer rooms than requested,
    or none at all.
    """

    def __init__(
        self,
        max_rooms: int = 12,
        room_min_size: int = 6,
        room_max_size: int = 12,
    ) -> None:
        if max_rooms < 0:
            raise ConfigError(f"max_rooms must be >= 0, got {max_rooms}")
        if room_min_size <= 0:
            raise ConfigError(f"room_min_size must be positive, got {room_min_size}")
        if room_min_size > room_max_size:
            raise ConfigError(f"room_min_size ({room_min_size}) exceeds room_max_size ({room_max_size})")
        self.max_rooms = max_rooms
        self.room_min_size = room_min_size
        self.room_max_size = room_max_size

    def generate(self, width: int, height: int, rng: Optional[RandomSource] = None) -> Dungeon:
        if width <= 0 or height <= 0:
            raise ConfigError(f"Dungeon dimensions must be positive, got {width}x{height}")
        rng = rng or RandomSource()
        grid = Grid(width, height, fill=TileKind.WALL)
        rooms: List[Room] = []

        for attempt in range(self.max_rooms):
            w = rng.randint(self.room_min_size, self.room_max_size)
            h = rng.randint(self.room_min_size, self.room_max_size)
            # Inclusive rectangle x..x+w must stay off the outer ring.
            max_x = width - w - 2
            max_y = height - h - 2
            if max_x < 1 or max_y < 1:
                logger.debug("Attempt %d: %dx%d room does not fit in %dx%d grid", attempt, w, h, width, height)
                continue
            candidate = Room.from_size(rng.randint(1, max_x), rng.randint(1, max_y), w, h)
            if any(candidate.intersects(other) for other in rooms):
                logger.debug("Attempt %d: %s rejected (overlap)", attempt, candidate)
                continue

            grid.carve_rect(candidate.x0, candidate.y0, candidate.x1, candidate.y1, TileKind.FLOOR)
            if rooms:
                self._carve_corridor(grid, rooms[-1], candidate, rng)
            rooms.append(candidate)

        if not rooms:
            logger.warning("RoomsAndCorridorsGenerator: no rooms placed in %dx%d grid", width, height)
        else:
            logger.info("RoomsAndCorridorsGenerator: placed %d rooms in %d attempts", len(rooms), self.max_rooms)
        return Dungeon(grid=grid, rooms=rooms)

    @staticmethod
    def _carve_corridor(grid: Grid, prev: Room, new: Room, rng: RandomSource) -> None:
        px, py = prev.center()
        nx, ny = new.center()
        if rng.coin_flip():
            grid.carve_h_line(px, nx, py)
            grid.carve_v_line(py, ny, nx)
        else:
            grid.carve_v_line(py, ny, px)
            grid.carve_h_line(px, nx, ny)
