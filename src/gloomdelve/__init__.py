"""
Gloomdelve package root.

The simulation core of a turn-based dungeon crawler: procedural dungeon
generation, per-actor field of view with a fog-of-war memory, occupancy
tracking, movement/melee resolution and monster AI. Rendering and raw input
handling live outside this package; the core only exposes the state they
need to read and a single "take a turn" entry point.
"""

__version__ = "0.3.0"

__all__ = ["__version__"]
