import pytest

from gloomdelve.components import (
    Blocking,
    CombatStats,
    Monster,
    Name,
    Player,
    PlayerPosition,
    Position,
    Vision,
)
from gloomdelve.ecs import World
from gloomdelve.map import Grid
from gloomdelve.message_log import MessageLog
from gloomdelve.movement import MoveKind, MovementResolver
from gloomdelve.spatial import SpatialIndex


@pytest.fixture
def scene(open_room):
    w = World()
    log = MessageLog()
    w.set_res(log)
    player = w.spawn(
        Position(1, 1),
        Player(),
        Name("Player"),
        Blocking(),
        Vision(range=4, recompute=False),
        CombatStats.full(30, 5, 2),
    )
    w.set_res(PlayerPosition(1, 1))
    goblin = w.spawn(Position(3, 1), Monster(), Name("Goblin"), Blocking(), CombatStats.full(10, 3, 1))
    index = SpatialIndex(open_room)
    index.rebuild(w)
    resolver = MovementResolver(w, open_room, index)
    return w, index, resolver, player, goblin, log


def test_move_onto_free_floor(scene):
    w, _index, resolver, player, _goblin, _log = scene
    outcome = resolver.attempt_move(player, (1, 0))
    assert outcome.kind is MoveKind.MOVED
    assert outcome.consumed_turn
    assert w.get(player, Position).as_tuple() == (2, 1)
    assert w.get(player, Vision).recompute is True
    assert w.res(PlayerPosition).as_tuple() == (2, 1)


def test_diagonal_move(scene):
    w, _index, resolver, player, _goblin, _log = scene
    assert resolver.attempt_move(player, (1, 1)).kind is MoveKind.MOVED
    assert w.get(player, Position).as_tuple() == (2, 2)


def test_attack_preempts_movement(scene):
    w, index, resolver, player, goblin, log = scene
    w.get(player, Position).x = 2
    w.res(PlayerPosition).x = 2
    index.rebuild(w)

    outcome = resolver.attempt_move(player, (1, 0))
    assert outcome.kind is MoveKind.ATTACKED
    assert outcome.target == goblin
    assert outcome.consumed_turn
    assert w.get(player, Position).as_tuple() == (2, 1)
    assert w.get(player, Vision).recompute is False
    assert log.recent_lines(1) == ["You slap Goblin in the face."]
    # No damage is applied.
    assert w.get(goblin, CombatStats).hp == 10


def test_blocked_by_outer_ring_changes_nothing(scene):
    w, _index, resolver, player, _goblin, _log = scene
    cached = w.res(PlayerPosition)
    for delta in [(-1, 0), (0, -1), (-1, -1), (-5, 0)]:
        outcome = resolver.attempt_move(player, delta)
        assert outcome.kind is MoveKind.BLOCKED
        assert not outcome.consumed_turn
        assert w.get(player, Position).as_tuple() == (1, 1)
        assert w.get(player, Vision).recompute is False
        assert w.res(PlayerPosition) is cached
        assert cached.as_tuple() == (1, 1)


def test_blocked_by_non_fighting_blocker(scene):
    w, index, resolver, player, _goblin, log = scene
    w.spawn(Position(1, 2), Blocking(), Name("Boulder"))
    index.rebuild(w)
    assert resolver.attempt_move(player, (0, 1)).kind is MoveKind.BLOCKED
    assert w.get(player, Position).as_tuple() == (1, 1)
    assert len(log) == 0


def test_non_blocking_occupant_can_be_shared(scene):
    w, index, resolver, player, _goblin, _log = scene
    marker = w.spawn(Position(1, 2), Name("Puddle"))
    index.rebuild(w)
    assert resolver.attempt_move(player, (0, 1)).kind is MoveKind.MOVED
    index.rebuild(w)
    assert index.occupants_at(1, 2) == [player, marker]


def test_interior_wall_blocks():
    grid = Grid.from_lines(
        [
            "#####",
            "#.#.#",
            "#####",
        ]
    )
    w = World()
    e = w.spawn(Position(1, 1), Vision(recompute=False))
    index = SpatialIndex(grid)
    index.rebuild(w)
    resolver = MovementResolver(w, grid, index)
    assert resolver.attempt_move(e, (1, 0)).kind is MoveKind.BLOCKED
    assert w.get(e, Vision).recompute is False


def test_zero_delta_and_missing_position_are_blocked(scene):
    w, _index, resolver, player, _goblin, _log = scene
    assert resolver.attempt_move(player, (0, 0)).kind is MoveKind.BLOCKED
    nowhere = w.spawn(Name("Nowhere"))
    assert resolver.attempt_move(nowhere, (1, 0)).kind is MoveKind.BLOCKED


def test_monster_move_does_not_touch_player_cache(scene):
    w, _index, resolver, _player, goblin, _log = scene
    assert resolver.attempt_move(goblin, (0, 1)).kind is MoveKind.MOVED
    assert w.get(goblin, Position).as_tuple() == (3, 2)
    assert w.res(PlayerPosition).as_tuple() == (1, 1)


def test_occupancy_is_stale_until_rebuild(scene):
    w, index, resolver, player, _goblin, _log = scene
    resolver.attempt_move(player, (1, 0))
    assert index.occupants_at(1, 1) == [player]
    assert index.occupants_at(2, 1) == []
    index.rebuild(w)
    assert index.occupants_at(2, 1) == [player]


def test_monster_bumping_player_is_an_attack(scene):
    w, index, resolver, player, goblin, log = scene
    w.get(goblin, Position).x = 2
    index.rebuild(w)
    outcome = resolver.attempt_move(goblin, (-1, 0))
    assert outcome.kind is MoveKind.ATTACKED
    assert outcome.target == player
    assert log.recent_lines(1) == ["Goblin spits at you."]
