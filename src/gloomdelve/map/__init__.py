from .grid import Coord, Grid
from .room import Room
from .tiles import TILE_PROPERTIES, TileKind, TileProperties, is_opaque_tile, is_walkable_tile

__all__ = [
    "Coord",
    "Grid",
    "Room",
    "TILE_PROPERTIES",
    "TileKind",
    "TileProperties",
    "is_opaque_tile",
    "is_walkable_tile",
]
