"""A* search over the spatial index.

Exits come from :meth:`SpatialIndex.available_exits`: the eight neighbours
of a tile that are inside the map interior and not blocked, with cost 1 for
orthogonal and sqrt(2) for diagonal steps. The goal tile is always accepted
as an exit even when blocked, since the usual goal (the player) blocks its
own tile.

Public API
----------
``a_star(start, end, index)`` → :class:`NavigationPath`
"""

from __future__ import annotations

import heapq
import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List

from .spatial import DIAGONAL_COST, SpatialIndex

logger = logging.getLogger(__name__)

DEFAULT_MAX_STEPS = 65536


@dataclass
class NavigationPath:
    """Result of a search. ``steps`` runs from start to end inclusive."""

    success: bool = False
    steps: List[int] = field(default_factory=list)
    cost: float = 0.0


def _distance(index: SpatialIndex, a: int, b: int) -> float:
    ax, ay = index.coord_of(a)
    bx, by = index.coord_of(b)
    return math.hypot(ax - bx, ay - by)


def _neighbours(index: SpatialIndex, idx: int, end: int):
    exits = index.available_exits(idx)
    if any(n == end for n, _ in exits):
        return exits
    ex, ey = index.coord_of(end)
    x, y = index.coord_of(idx)
    dx, dy = ex - x, ey - y
    if max(abs(dx), abs(dy)) == 1 and index.grid.in_bounds(ex, ey):
        exits = exits + [(end, DIAGONAL_COST if dx and dy else 1.0)]
    return exits


def a_star(start: int, end: int, index: SpatialIndex, max_steps: int = DEFAULT_MAX_STEPS) -> NavigationPath:
    """Shortest path from ``start`` to ``end`` (linear tile indices).

    Returns an unsuccessful, empty path when the goal cannot be reached or the
    search expands more than ``max_steps`` nodes.
    """
    if start == end:
        return NavigationPath(success=True, steps=[start], cost=0.0)

    open_set: List[tuple[float, int, int]] = [(0.0, 0, start)]
    g_score: Dict[int, float] = {start: 0.0}
    came_from: Dict[int, int] = {}
    closed: set[int] = set()
    counter = 0
    expanded = 0

    while open_set:
        _f, _tie, current = heapq.heappop(open_set)
        if current in closed:
            continue
        if current == end:
            steps = [end]
            node = end
            while node in came_from:
                node = came_from[node]
                steps.append(node)
            steps.reverse()
            logger.debug("A* %d -> %d found %d steps (cost %.3f)", start, end, len(steps), g_score[end])
            return NavigationPath(success=True, steps=steps, cost=g_score[end])

        closed.add(current)
        expanded += 1
        if expanded > max_steps:
            logger.debug("A* %d -> %d gave up after %d expansions", start, end, expanded)
            break

        for nxt, step_cost in _neighbours(index, current, end):
            if nxt in closed:
                continue
            new_g = g_score[current] + step_cost
            if new_g < g_score.get(nxt, math.inf):
                g_score[nxt] = new_g
                came_from[nxt] = current
                counter += 1
                heapq.heappush(open_set, (new_g + _distance(index, nxt, end), counter, nxt))

    return NavigationPath()
