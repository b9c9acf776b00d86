"""Root logging setup for the gloomdelve CLI.

Library modules only create ``logging.getLogger(__name__)`` loggers; the
host calls :func:`configure_logging` once. Turn-by-turn detail (moves, AI
decisions, FOV sizes) is at DEBUG, level creation and message-log lines at
INFO, degenerate levels and ignored settings at WARNING.
"""

import logging
import os

ENV_LOG_LEVEL = "GLOOMDELVE_LOG_LEVEL"


def resolve_level(default_level: int = logging.INFO) -> int:
    """Return the level named by GLOOMDELVE_LOG_LEVEL, else ``default_level``.

    The env var wins over the CLI's ``-v`` count; unknown names are ignored.
    """
    level_name = os.getenv(ENV_LOG_LEVEL)
    if level_name:
        level = getattr(logging, level_name.strip().upper(), None)
        if isinstance(level, int):
            return level
    return default_level


def configure_logging(default_level: int = logging.INFO) -> None:
    """Configure the root logger with gloomdelve's line format."""
    logging.basicConfig(
        level=resolve_level(default_level),
        format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
    )
