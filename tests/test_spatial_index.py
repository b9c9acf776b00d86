import math

import pytest

from gloomdelve.components import Blocking, Position
from gloomdelve.ecs import World
from gloomdelve.exceptions import OutOfBoundsError
from gloomdelve.map import Grid
from gloomdelve.spatial import SpatialIndex


def test_terrain_blocks_before_any_actor(open_room):
    index = SpatialIndex(open_room)
    index.rebuild(World())
    assert index.is_blocked(0, 0)
    assert not index.is_blocked(2, 2)
    assert index.occupants_at(2, 2) == []


def test_rebuild_marks_blocking_actors_and_occupants(open_room):
    w = World()
    blocker = w.spawn(Position(2, 2), Blocking())
    ghost = w.spawn(Position(3, 2))
    shared = w.spawn(Position(3, 2))
    index = SpatialIndex(open_room)
    index.rebuild(w)

    # Occupancy consistency: blocking actor tiles are blocked, others follow terrain only.
    assert index.is_blocked(2, 2)
    assert not index.is_blocked(3, 2)
    assert index.occupants_at(2, 2) == [blocker]
    assert index.occupants_at(3, 2) == [ghost, shared]


def test_rebuild_resets_previous_state(open_room):
    w = World()
    e = w.spawn(Position(2, 2), Blocking())
    index = SpatialIndex(open_room)
    index.rebuild(w)
    w.get(e, Position).x = 4
    # Stale until the next rebuild.
    assert index.is_blocked(2, 2)
    assert index.occupants_at(4, 2) == []
    index.rebuild(w)
    assert not index.is_blocked(2, 2)
    assert index.is_blocked(4, 2)
    assert index.occupants_at(4, 2) == [e]


def test_out_of_grid_lookup_fails_fast(open_room):
    index = SpatialIndex(open_room)
    with pytest.raises(OutOfBoundsError):
        index.is_blocked(7, 1)
    with pytest.raises(OutOfBoundsError):
        index.occupants_at(-1, 1)


def test_exit_costs_orthogonal_one_diagonal_sqrt2(open_room):
    index = SpatialIndex(open_room)
    index.rebuild(World())
    idx = index.linear_index(3, 2)
    exits = dict(index.available_exits(idx))
    assert len(exits) == 8
    for nidx, cost in exits.items():
        nx, ny = index.coord_of(nidx)
        if nx == 3 or ny == 2:
            assert cost == 1.0
        else:
            assert cost == pytest.approx(math.sqrt(2))
            assert cost == pytest.approx(1.4142, abs=1e-4)


def test_exits_skip_ring_walls_and_blocked_tiles(open_room):
    w = World()
    w.spawn(Position(2, 1), Blocking())
    index = SpatialIndex(open_room)
    index.rebuild(w)
    exits = {index.coord_of(i) for i, _ in index.available_exits(index.linear_index(1, 1))}
    assert exits == {(1, 2), (2, 2)}


def test_exits_skip_interior_walls():
    grid = Grid.from_lines(
        [
            "#####",
            "#.#.#",
            "#...#",
            "#####",
        ]
    )
    index = SpatialIndex(grid)
    index.rebuild(World())
    exits = {index.coord_of(i) for i, _ in index.available_exits(index.linear_index(1, 1))}
    assert exits == {(1, 2), (2, 2)}
