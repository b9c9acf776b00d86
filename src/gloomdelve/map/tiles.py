from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict


class TileKind(Enum):
    """Tile types placed in the dungeon grid."""

    WALL = 0
    FLOOR = 1


@dataclass(frozen=True)
class TileProperties:
    walkable: bool
    opaque: bool
    glyph: str


# Per-kind behaviour lives in this table so new kinds only need a new row.
TILE_PROPERTIES: Dict[TileKind, TileProperties] = {
    TileKind.WALL: TileProperties(walkable=False, opaque=True, glyph="#"),
    TileKind.FLOOR: TileProperties(walkable=True, opaque=False, glyph="."),
}


def is_walkable_tile(kind: TileKind) -> bool:
    """Return True if actors may stand on the given tile kind."""
    return TILE_PROPERTIES[kind].walkable


def is_opaque_tile(kind: TileKind) -> bool:
    """Return True if the tile kind blocks line of sight."""
    return TILE_PROPERTIES[kind].opaque


def tile_for_glyph(ch: str) -> TileKind:
    for kind, props in TILE_PROPERTIES.items():
        if props.glyph == ch:
            return kind
    raise ValueError(f"No tile kind uses glyph {ch!r}")
