from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from .ai import AiDecision, MonsterAI
from .components import (
    Blocking,
    CombatStats,
    Monster,
    Name,
    Player,
    PlayerPosition,
    Position,
    Renderable,
    Vision,
)
from .config import MonsterKind, Settings
from .dungeon import Dungeon, RoomsAndCorridorsGenerator
from .ecs import World
from .fov import ExplorationState, VisibilityEngine
from .map import Coord, Grid, Room, TileKind
from .message_log import MessageLog
from .movement import Delta, MoveOutcome, MovementResolver
from .rng import RandomSource
from .spatial import SpatialIndex

logger = logging.getLogger(__name__)

PLAYER_COLOR = (255, 255, 0)
MONSTER_COLOR = (0, 100, 0)


class TurnState(Enum):
    """Whether the last input consumed a turn (RUNNING) or not (PAUSED)."""

    PAUSED = "paused"
    RUNNING = "running"


@dataclass
class TurnReport:
    turn: int
    player_outcome: MoveOutcome
    decisions: List[AiDecision] = field(default_factory=list)


class Game:
    """Owns one level and its actors and runs the turn pipeline.

    Per turn: the player's intent goes through the MovementResolver, then
    ``run_systems`` rebuilds occupancy, recomputes dirty vision, lets every
    monster act and rebuilds occupancy again for the presentation layer.
    """

    def __init__(self, dungeon: Dungeon, settings: Settings, rng: RandomSource) -> None:
        self.settings = settings
        self.rng = rng
        self.dungeon = dungeon
        self.grid: Grid = dungeon.grid
        self.rooms: List[Room] = list(dungeon.rooms)
        self.world = World()
        self.index = SpatialIndex(self.grid)
        self.exploration = ExplorationState(self.grid.width, self.grid.height)
        self.visibility = VisibilityEngine(self.grid, self.exploration)
        self.resolver = MovementResolver(self.world, self.grid, self.index)
        self.ai = MonsterAI(self.world, self.index, self.resolver, rng, melee_range=settings.ai.melee_range)
        self.log = MessageLog()
        self.world.set_res(self.log)
        self.turn = 0
        self.player: int = -1
        self._last_outcome: Optional[MoveOutcome] = None

    @classmethod
    def new(cls, settings: Optional[Settings] = None, rng: Optional[RandomSource] = None) -> "Game":
        """Generate a level, spawn the actors and run the pre-first-turn passes."""
        settings = settings or Settings()
        rng = rng or RandomSource(settings.seed)
        d = settings.dungeon
        generator = RoomsAndCorridorsGenerator(
            max_rooms=d.max_rooms,
            room_min_size=d.room_min_size,
            room_max_size=d.room_max_size,
        )
        dungeon = generator.generate(d.width, d.height, rng)
        game = cls(dungeon, settings, rng)
        game.populate()
        logger.info(
            "Game created: %dx%d, %d rooms, %d monsters",
            game.grid.width,
            game.grid.height,
            len(game.rooms),
            game.world.count(Monster),
        )
        return game

    # ---- Setup ------------------------------------------------------------
    def populate(self) -> None:
        px, py = self._player_spawn_point()
        self.player = self.spawn_player(px, py)
        for n, room in enumerate(self.rooms[1:], start=1):
            kind = self.rng.choice(self.settings.actors.monster_kinds)
            self.spawn_monster(*room.center(), kind=kind, number=n)
        self.index.rebuild(self.world)
        self.visibility.run(self.world)

    def _player_spawn_point(self) -> Coord:
        if self.rooms:
            return self.rooms[0].center()
        floor = self.grid.first_of_kind(TileKind.FLOOR)
        if floor is not None:
            logger.warning("No rooms generated; spawning player on first floor tile %s", floor)
            return floor
        center = (self.grid.width // 2, self.grid.height // 2)
        logger.warning("No rooms or floor generated; spawning player at grid center %s", center)
        return center

    def spawn_player(self, x: int, y: int) -> int:
        stats = self.settings.actors.player_stats
        eid = self.world.spawn(
            Position(x, y),
            Player(),
            Name("Player"),
            Blocking(),
            Vision(range=self.settings.actors.player_vision_range),
            CombatStats.full(stats.max_hp, stats.attack, stats.defense),
            Renderable("@", fg=PLAYER_COLOR),
        )
        self.world.set_res(PlayerPosition(x, y))
        logger.debug("Spawned player %d at (%d,%d)", eid, x, y)
        return eid

    def spawn_monster(self, x: int, y: int, kind: MonsterKind, number: int = 0) -> int:
        eid = self.world.spawn(
            Position(x, y),
            Monster(),
            Name(f"{kind.name} #{number}" if number else kind.name),
            Blocking(),
            Vision(range=self.settings.actors.monster_vision_range),
            CombatStats.full(kind.max_hp, kind.attack, kind.defense),
            Renderable(kind.glyph, fg=MONSTER_COLOR),
        )
        logger.debug("Spawned %s %d at (%d,%d)", kind.name, eid, x, y)
        return eid

    # ---- Turn pipeline ----------------------------------------------------
    @property
    def player_position(self) -> Tuple[int, int]:
        cached = self.world.res(PlayerPosition)
        return cached.as_tuple() if cached is not None else (-1, -1)

    def player_turn(self, delta: Delta) -> TurnState:
        """Translate a movement/attack intent into a turn outcome."""
        self.log.turn = self.turn + 1
        outcome = self.resolver.attempt_move(self.player, delta)
        self._last_outcome = outcome
        return TurnState.RUNNING if outcome.consumed_turn else TurnState.PAUSED

    def run_systems(self) -> List[AiDecision]:
        self.turn += 1
        self.log.turn = self.turn
        self.index.rebuild(self.world)
        self.visibility.run(self.world)
        decisions = self.ai.run()
        self.index.rebuild(self.world)
        return decisions

    def step(self, delta: Delta) -> Optional[TurnReport]:
        """Run a full turn for ``delta``; returns None when no turn was taken."""
        state = self.player_turn(delta)
        if state is TurnState.PAUSED:
            return None
        decisions = self.run_systems()
        return TurnReport(turn=self.turn, player_outcome=self._last_outcome, decisions=decisions)
