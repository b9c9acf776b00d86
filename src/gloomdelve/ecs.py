"""
gloomdelve.ecs: actor store.

Actors are ints handed out by an arena. Components are plain objects stored
in one table per component type, keyed by actor id. Systems ask for the set
of component types they need and get back only the actors holding all of
them::

    w = World()
    e = w.spawn()
    w.add(e, Position(5, 3))
    w.add(e, Vision(range=8))

    for eid, pos, vision in w.query(Position, Vision):
        ...

Singleton state that is not tied to an actor (the cached player position,
the message log) lives in the resource slots.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, List, Optional, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class World:
    def __init__(self) -> None:
        self._next_id = 0
        self._alive: List[int] = []
        self._tables: Dict[type, Dict[int, Any]] = {}
        self._resources: Dict[type, Any] = {}

    # -- Actors --

    def spawn(self, *components: Any) -> int:
        """Allocate a new actor id, optionally attaching components."""
        self._next_id += 1
        eid = self._next_id
        self._alive.append(eid)
        for comp in components:
            self.add(eid, comp)
        logger.debug("Spawned actor %d with %d components", eid, len(components))
        return eid

    def entities(self) -> List[int]:
        return list(self._alive)

    def __contains__(self, eid: int) -> bool:
        return eid in self._alive

    # -- Components --

    def add(self, eid: int, comp: Any) -> None:
        self._tables.setdefault(type(comp), {})[eid] = comp

    def get(self, eid: int, comp_type: Type[T]) -> Optional[T]:
        return self._tables.get(comp_type, {}).get(eid)

    def has(self, eid: int, comp_type: type) -> bool:
        return eid in self._tables.get(comp_type, {})

    def remove(self, eid: int, comp_type: type) -> None:
        table = self._tables.get(comp_type)
        if table and eid in table:
            del table[eid]

    # -- Queries --

    def query(self, *types: type) -> Iterator[tuple]:
        """Yield (eid, comp1, comp2, ...) for actors that have ALL types.

        Actors are visited in ascending id order so every system pass sees
        the population in the same, stable order.
        """
        if not types:
            return
        tables = [self._tables.get(t, {}) for t in types]
        smallest = min(tables, key=len)
        for eid in sorted(smallest):
            if all(eid in table for table in tables):
                yield (eid, *(table[eid] for table in tables))

    def query_one(self, *types: type) -> Optional[tuple]:
        """Return first match or None."""
        for result in self.query(*types):
            return result
        return None

    def all_of(self, comp_type: Type[T]) -> Iterator[tuple[int, T]]:
        """Yield (eid, component) for every actor with this type."""
        table = self._tables.get(comp_type, {})
        for eid in sorted(table):
            yield eid, table[eid]

    def count(self, comp_type: type) -> int:
        return len(self._tables.get(comp_type, {}))

    # -- Resources (singletons, not tied to actors) --

    def set_res(self, resource: Any) -> None:
        self._resources[type(resource)] = resource

    def res(self, res_type: Type[T]) -> Optional[T]:
        return self._resources.get(res_type)
