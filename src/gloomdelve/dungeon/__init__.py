from .generator import Dungeon, DungeonGenerator, RoomsAndCorridorsGenerator

__all__ = ["Dungeon", "DungeonGenerator", "RoomsAndCorridorsGenerator"]
