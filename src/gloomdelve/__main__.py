from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List, Tuple

from . import __version__
from .config import Settings
from .exceptions import ConfigError
from .game import Game
from .logging_config import configure_logging
from .render import render_ascii

logger = logging.getLogger(__name__)

DIRECTIONS: Dict[str, Tuple[int, int]] = {
    "n": (0, -1),
    "s": (0, 1),
    "e": (1, 0),
    "w": (-1, 0),
    "ne": (1, -1),
    "nw": (-1, -1),
    "se": (1, 1),
    "sw": (-1, 1),
}


def parse_moves(raw: str) -> List[Tuple[int, int]]:
    moves: List[Tuple[int, int]] = []
    for token in raw.split(","):
        token = token.strip().lower()
        if not token:
            continue
        if token not in DIRECTIONS:
            raise argparse.ArgumentTypeError(
                f"unknown direction {token!r}; expected one of {', '.join(sorted(DIRECTIONS))}"
            )
        moves.append(DIRECTIONS[token])
    return moves


def _verbosity_level(verbosity: int) -> int:
    if verbosity == 1:
        return logging.INFO
    if verbosity >= 2:
        return logging.DEBUG
    return logging.WARNING


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gloomdelve",
        description="Gloomdelve - headless turn runner for the dungeon simulation core",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--settings",
        dest="settings_path",
        type=Path,
        default=None,
        help="Path to a user settings YAML file to load/override defaults.",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for generation and AI (overrides settings)")
    parser.add_argument(
        "--moves",
        type=parse_moves,
        default=[],
        help="Comma-separated player moves, e.g. 'e,e,ne,s' (n, s, e, w, ne, nw, se, sw)",
    )
    parser.add_argument("--reveal", action="store_true", help="Print the whole map, not just explored tiles")
    parser.add_argument("--messages", type=int, default=10, help="Number of recent messages to print")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity (-v, -vv)")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(_verbosity_level(args.verbose))

    try:
        settings = Settings.load(user_path=args.settings_path)
    except ConfigError as exc:
        logger.error("Invalid configuration: %s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return 2
    if args.seed is not None:
        settings.seed = args.seed

    game = Game.new(settings)
    taken = 0
    for delta in args.moves:
        if game.step(delta) is not None:
            taken += 1

    for line in render_ascii(game, reveal=args.reveal):
        print(line)
    print(f"turn {game.turn} | moves taken {taken}/{len(args.moves)} | player at {game.player_position}")
    for line in game.log.recent_lines(args.messages):
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
