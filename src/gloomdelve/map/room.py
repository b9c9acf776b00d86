from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Room:
    """Axis-aligned rectangle with inclusive corners (x0, y0)-(x1, y1)."""

    x0: int
    y0: int
    x1: int
    y1: int

    @classmethod
    def from_size(cls, x: int, y: int, width: int, height: int) -> "Room":
        return cls(x, y, x + width, y + height)

    def intersects(self, other: "Room") -> bool:
        """Overlap test, inclusive on all edges (touching rooms intersect)."""
        return self.x0 <= other.x1 and self.x1 >= other.x0 and self.y0 <= other.y1 and self.y1 >= other.y0

    def center(self) -> Tuple[int, int]:
        return ((self.x0 + self.x1) // 2, (self.y0 + self.y1) // 2)

    def contains(self, x: int, y: int) -> bool:
        return self.x0 <= x <= self.x1 and self.y0 <= y <= self.y1
