"""Headless presentation helpers.

Reads the state the core exposes to a renderer (tile kinds, the explored and
visible masks, actor positions and glyphs) and produces plain text frames.
"""

from __future__ import annotations

from typing import List

from .components import Position, Renderable
from .game import Game
from .map import TILE_PROPERTIES

UNEXPLORED = " "


def render_ascii(game: Game, reveal: bool = False) -> List[str]:
    """Return one string per map row.

    Explored tiles show their glyph, unexplored tiles are blank unless
    ``reveal`` is set. Actors are drawn only where the player currently sees.
    """
    grid = game.grid
    explored = game.exploration.explored_mask()
    visible = game.exploration.visible_mask()
    rows: List[List[str]] = []
    for y in range(grid.height):
        row = []
        for x in range(grid.width):
            if reveal or explored[grid.linear_index(x, y)]:
                row.append(TILE_PROPERTIES[grid.get(x, y)].glyph)
            else:
                row.append(UNEXPLORED)
        rows.append(row)

    # Player last so it is never hidden under another glyph.
    drawn = sorted(
        game.world.query(Position, Renderable),
        key=lambda item: item[0] == game.player,
    )
    for eid, pos, renderable in drawn:
        if reveal or visible[grid.linear_index(pos.x, pos.y)] or eid == game.player:
            rows[pos.y][pos.x] = renderable.glyph
    return ["".join(r) for r in rows]
