from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LogMessage:
    """A single game message.

    Attributes:
        turn: Turn counter at the time the message was written.
        text: Human-readable message.
        actor: Id of the acting actor, if any.
        target: Id of the target actor, if any.
    """

    turn: int
    text: str
    actor: Optional[int] = None
    target: Optional[int] = None


class MessageLog:
    """In-memory game message log, held as a World resource.

    Keeps a finite history (capacity) to avoid unbounded growth; the
    presentation layer reads the most recent lines.
    """

    def __init__(self, capacity: int = 200) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._capacity = capacity
        self._messages: List[LogMessage] = []
        self.turn = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[LogMessage]:
        return iter(list(self._messages))

    def add(self, text: str, *, actor: Optional[int] = None, target: Optional[int] = None) -> LogMessage:
        msg = LogMessage(turn=self.turn, text=text, actor=actor, target=target)
        self._messages.append(msg)
        if len(self._messages) > self._capacity:
            del self._messages[0:len(self._messages) - self._capacity]
        logger.info("[turn %d] %s", self.turn, text)
        return msg

    def recent(self, n: int) -> List[LogMessage]:
        if n <= 0:
            return []
        return self._messages[-n:]

    def recent_lines(self, n: int) -> List[str]:
        return [m.text for m in self.recent(n)]

    def clear(self) -> None:
        self._messages.clear()
