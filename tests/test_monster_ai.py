import pytest

from gloomdelve.ai import Behavior, MonsterAI
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
from gloomdelve.fov import ExplorationState, VisibilityEngine
from gloomdelve.map import Grid
from gloomdelve.message_log import MessageLog
from gloomdelve.movement import MoveKind, MovementResolver
from gloomdelve.rng import RandomSource
from gloomdelve.spatial import SpatialIndex

HALL = [
    "############",
    "#..........#",
    "#..........#",
    "#..........#",
    "#..........#",
    "#..........#",
    "############",
]


def build(lines, player_at, monster_at, seed=7):
    grid = Grid.from_lines(lines)
    w = World()
    w.set_res(MessageLog())
    player = w.spawn(Position(*player_at), Player(), Name("Player"), Blocking(), CombatStats.full(30, 5, 2))
    w.set_res(PlayerPosition(*player_at))
    monster = w.spawn(
        Position(*monster_at),
        Monster(),
        Name("Goblin"),
        Blocking(),
        Vision(range=8),
        CombatStats.full(10, 3, 1),
    )
    index = SpatialIndex(grid)
    index.rebuild(w)
    VisibilityEngine(grid, ExplorationState(grid.width, grid.height)).run(w)
    resolver = MovementResolver(w, grid, index)
    ai = MonsterAI(w, index, resolver, RandomSource(seed))
    return w, ai, player, monster


def test_chases_visible_player_along_shortest_path():
    w, ai, _player, monster = build(HALL, (2, 3), (8, 3))
    assert (2, 3) in w.get(monster, Vision).visible

    [decision] = ai.run()
    assert decision.behavior is Behavior.CHASE
    assert decision.outcome.kind is MoveKind.MOVED
    assert w.get(monster, Position).as_tuple() == (7, 3)
    assert w.get(monster, Vision).recompute is True


def test_attacks_when_adjacent_including_diagonal():
    w, ai, player, monster = build(HALL, (2, 3), (3, 4))
    [decision] = ai.run()
    assert decision.behavior is Behavior.ATTACK
    assert decision.outcome is None
    assert w.get(monster, Position).as_tuple() == (3, 4)
    assert w.get(player, CombatStats).hp == 30
    assert w.res(MessageLog).recent_lines(1) == ["Goblin spits at you."]


def test_two_tiles_away_is_not_melee():
    w, ai, _player, monster = build(HALL, (2, 3), (4, 3))
    [decision] = ai.run()
    assert decision.behavior is Behavior.CHASE
    assert w.get(monster, Position).as_tuple() == (3, 3)


def test_wanders_when_player_not_seen():
    w, ai, _player, monster = build(HALL, (2, 3), (8, 3))
    vision = w.get(monster, Vision)
    vision.visible = set()

    [decision] = ai.run()
    assert decision.behavior is Behavior.WANDER
    assert decision.outcome.kind is MoveKind.MOVED
    x, y = w.get(monster, Position).as_tuple()
    assert max(abs(x - 8), abs(y - 3)) == 1


def test_stale_vision_is_used_until_next_pass():
    w, ai, _player, monster = build(HALL, (2, 3), (8, 3))
    ai.run()
    # Moved this turn; its view is flagged dirty but still holds the old set.
    vision = w.get(monster, Vision)
    assert vision.recompute is True
    assert (2, 3) in vision.visible


def test_wander_is_reproducible_for_a_seed():
    first = build(HALL, (2, 3), (8, 3), seed=99)
    second = build(HALL, (2, 3), (8, 3), seed=99)
    for w, ai, _p, m in (first, second):
        w.get(m, Vision).visible = set()
        ai.run()
    assert first[0].get(first[3], Position) == second[0].get(second[3], Position)


def test_holds_when_boxed_in():
    lines = [
        "#######",
        "#.#...#",
        "#######",
    ]
    w, ai, _player, monster = build(lines, (4, 1), (1, 1))
    assert (4, 1) not in w.get(monster, Vision).visible
    [decision] = ai.run()
    assert decision.behavior is Behavior.HOLD
    assert w.get(monster, Position).as_tuple() == (1, 1)


def test_holds_when_no_path():
    lines = [
        "#########",
        "#...#...#",
        "#...#...#",
        "#########",
    ]
    w, ai, _player, monster = build(lines, (6, 1), (2, 1))
    # Pretend the monster saw the player last pass; the wall leaves no route.
    w.get(monster, Vision).visible.add((6, 1))
    [decision] = ai.run()
    assert decision.behavior is Behavior.HOLD
    assert w.get(monster, Position).as_tuple() == (2, 1)


def test_non_monsters_are_ignored():
    w, ai, _player, monster = build(HALL, (2, 3), (8, 3))
    w.remove(monster, Monster)
    assert ai.run() == []


@pytest.mark.parametrize("melee_range", [1.0, 1.5])
def test_melee_range_is_configurable(melee_range):
    w, ai, _player, _monster = build(HALL, (2, 3), (3, 4))
    ai.melee_range = melee_range
    [decision] = ai.run()
    expected = Behavior.ATTACK if melee_range > 1.4143 else Behavior.CHASE
    assert decision.behavior is expected
