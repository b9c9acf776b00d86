from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Any, Sequence

logger = logging.getLogger(__name__)


@dataclass
class RandomSource:
    """
    A thin wrapper around random.Random to:
    - centralize RNG handling for generation and AI
    - support optional deterministic seeding for tests and replays
    """

    seed: int | None = None

    def __post_init__(self) -> None:
        if self.seed is not None:
            self._rng = random.Random(self.seed)
            logger.debug("Initialized RandomSource with deterministic seed=%s", self.seed)
        else:
            self._rng = random.Random()
            logger.debug("Initialized RandomSource with non-deterministic seed")

    def randint(self, a: int, b: int) -> int:
        """Inclusive on both ends, like random.randint."""
        return self._rng.randint(a, b)

    def random(self) -> float:
        return self._rng.random()

    def coin_flip(self) -> bool:
        return self._rng.random() < 0.5

    def choice(self, seq: Sequence[Any]) -> Any:
        if not seq:
            raise ValueError("RandomSource.choice() received an empty sequence")
        return seq[self._rng.randrange(0, len(seq))]


__all__ = ["RandomSource"]
