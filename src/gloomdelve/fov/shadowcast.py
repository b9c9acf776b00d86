"""Recursive shadowcasting field of view.

The eight octants around the origin are scanned row by row; opaque tiles
cast shadows (slope intervals) that hide the tiles behind them in later rows.
Opaque tiles themselves are reported as visible so walls can be drawn.
"""

from __future__ import annotations

import logging
from typing import Protocol, Set

from ..map import Coord

logger = logging.getLogger(__name__)


class OpacityMap(Protocol):
    def is_opaque(self, x: int, y: int) -> bool: ...


# Octant transforms: (xx, xy, yx, yy) per column.
_MULT = (
    (1, 0, 0, -1, -1, 0, 0, 1),
    (0, 1, -1, 0, 0, -1, 1, 0),
    (0, 1, 1, 0, 0, -1, -1, 0),
    (1, 0, 0, 1, -1, 0, 0, -1),
)


def field_of_view(origin: Coord, radius: int, opacity: OpacityMap) -> Set[Coord]:
    """Return every coordinate visible from ``origin`` within ``radius``.

    Distance is circular (dx*dx + dy*dy <= radius*radius). The result may
    contain points outside the map; callers filter to their own bounds.
    """
    if radius < 0:
        raise ValueError("radius must be >= 0")
    ox, oy = origin
    visible: Set[Coord] = {(ox, oy)}
    for octant in range(8):
        _cast_light(
            opacity, ox, oy, 1, 1.0, 0.0, radius,
            _MULT[0][octant], _MULT[1][octant], _MULT[2][octant], _MULT[3][octant],
            visible,
        )
    logger.debug("FOV from (%d,%d) radius %d -> %d tiles", ox, oy, radius, len(visible))
    return visible


def _cast_light(
    opacity: OpacityMap,
    cx: int,
    cy: int,
    row: int,
    start: float,
    end: float,
    radius: int,
    xx: int,
    xy: int,
    yx: int,
    yy: int,
    visible: Set[Coord],
) -> None:
    if start < end:
        return
    radius_sq = radius * radius
    for j in range(row, radius + 1):
        dx, dy = -j - 1, -j
        blocked = False
        new_start = start
        while dx <= 0:
            dx += 1
            mx = cx + dx * xx + dy * xy
            my = cy + dx * yx + dy * yy
            l_slope = (dx - 0.5) / (dy + 0.5)
            r_slope = (dx + 0.5) / (dy - 0.5)
            if start < r_slope:
                continue
            if end > l_slope:
                break
            if dx * dx + dy * dy <= radius_sq:
                visible.add((mx, my))
            if blocked:
                if opacity.is_opaque(mx, my):
                    new_start = r_slope
                    continue
                blocked = False
                start = new_start
            elif opacity.is_opaque(mx, my) and j < radius:
                blocked = True
                _cast_light(opacity, cx, cy, j + 1, start, l_slope, radius, xx, xy, yx, yy, visible)
                new_start = r_slope
        if blocked:
            break
