from __future__ import annotations

import logging
from typing import Iterator, List, Optional, Sequence, Tuple

from ..exceptions import OutOfBoundsError
from .tiles import TILE_PROPERTIES, TileKind, is_opaque_tile, is_walkable_tile, tile_for_glyph

logger = logging.getLogger(__name__)

Coord = Tuple[int, int]


class Grid:
    """Row-major 2D tile field shared by generation, vision and movement.

    Tiles are addressed either as (x, y) or by linear index ``y * width + x``.
    Two bounds predicates exist:

    - ``is_within`` is the raw array check (0 <= x < width, 0 <= y < height).
    - ``in_bounds`` is the strict interior check that excludes the outer wall
      ring. Movement, vision filtering and pathing all use this one.

    The grid is only written while the dungeon is being carved.
    """

    __slots__ = ("_w", "_h", "_tiles")

    def __init__(self, width: int, height: int, fill: TileKind = TileKind.WALL) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("Grid dimensions must be positive")
        self._w = int(width)
        self._h = int(height)
        self._tiles: List[TileKind] = [fill] * (self._w * self._h)
        logger.debug("Initialized Grid %dx%d filled with %s", self._w, self._h, fill.name)

    @property
    def width(self) -> int:
        return self._w

    @property
    def height(self) -> int:
        return self._h

    def __len__(self) -> int:
        return len(self._tiles)

    # ---- Coordinate codecs ------------------------------------------------
    def linear_index(self, x: int, y: int) -> int:
        return y * self._w + x

    def coord_of(self, idx: int) -> Coord:
        return idx % self._w, idx // self._w

    # ---- Bounds -----------------------------------------------------------
    def is_within(self, x: int, y: int) -> bool:
        return 0 <= x < self._w and 0 <= y < self._h

    def in_bounds(self, x: int, y: int) -> bool:
        """Strict interior test: points on the outer ring are out of bounds."""
        return 0 < x < self._w - 1 and 0 < y < self._h - 1

    # ---- Tile access ------------------------------------------------------
    def get(self, x: int, y: int) -> TileKind:
        if not self.is_within(x, y):
            raise OutOfBoundsError(f"Coordinates out of bounds: ({x}, {y}) for grid {self._w}x{self._h}")
        return self._tiles[y * self._w + x]

    def tile_at(self, idx: int) -> TileKind:
        if not 0 <= idx < len(self._tiles):
            raise OutOfBoundsError(f"Tile index {idx} out of range for grid {self._w}x{self._h}")
        return self._tiles[idx]

    def set(self, x: int, y: int, kind: TileKind) -> None:
        if not self.is_within(x, y):
            raise OutOfBoundsError(f"Coordinates out of bounds: ({x}, {y}) for grid {self._w}x{self._h}")
        self._tiles[y * self._w + x] = kind

    def is_walkable(self, x: int, y: int) -> bool:
        """Safe walkability check; off-grid coordinates are never walkable."""
        if not self.is_within(x, y):
            return False
        return is_walkable_tile(self._tiles[y * self._w + x])

    def is_opaque(self, x: int, y: int) -> bool:
        """Safe opacity check; off-grid coordinates block sight."""
        if not self.is_within(x, y):
            return True
        return is_opaque_tile(self._tiles[y * self._w + x])

    def tiles(self) -> Sequence[TileKind]:
        return tuple(self._tiles)

    def coords_of_kind(self, kind: TileKind) -> Iterator[Coord]:
        for idx, tile in enumerate(self._tiles):
            if tile is kind:
                yield self.coord_of(idx)

    def first_of_kind(self, kind: TileKind) -> Optional[Coord]:
        return next(self.coords_of_kind(kind), None)

    # ---- Carving helpers --------------------------------------------------
    def carve_rect(self, x0: int, y0: int, x1: int, y1: int, kind: TileKind = TileKind.FLOOR) -> None:
        for y in range(y0, y1 + 1):
            for x in range(x0, x1 + 1):
                self.set(x, y, kind)

    def carve_h_line(self, x1: int, x2: int, y: int, kind: TileKind = TileKind.FLOOR) -> None:
        if x2 < x1:
            x1, x2 = x2, x1
        for x in range(x1, x2 + 1):
            self.set(x, y, kind)

    def carve_v_line(self, y1: int, y2: int, x: int, kind: TileKind = TileKind.FLOOR) -> None:
        if y2 < y1:
            y1, y2 = y2, y1
        for y in range(y1, y2 + 1):
            self.set(x, y, kind)

    # ---- ASCII import/export (tests and tooling) --------------------------
    @classmethod
    def from_lines(cls, lines: Sequence[str]) -> "Grid":
        """Create a Grid from ASCII rows ('#' wall, '.' floor)."""
        if not lines:
            raise ValueError("lines must not be empty")
        width = len(lines[0])
        if width == 0:
            raise ValueError("line width must be positive")
        for i, row in enumerate(lines):
            if len(row) != width:
                raise ValueError(f"All rows must have equal width; row 0 has {width}, row {i} has {len(row)}")
        grid = cls(width, len(lines))
        for y, row in enumerate(lines):
            for x, ch in enumerate(row):
                grid.set(x, y, tile_for_glyph(ch))
        return grid

    def to_lines(self) -> List[str]:
        rows: List[str] = []
        for y in range(self._h):
            start = y * self._w
            rows.append("".join(TILE_PROPERTIES[t].glyph for t in self._tiles[start:start + self._w]))
        return rows

    def __repr__(self) -> str:
        return f"Grid(width={self._w}, height={self._h})"
