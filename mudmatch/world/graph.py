"""Graph accessor protocol and the in-memory implementation.

The matcher only ever reads the graph through ``WorldGraph``. Hosts own
the graph and may back it with anything (see ``mudmatch.database`` for
a SQLAlchemy implementation).
"""

from __future__ import annotations

import logging
from typing import Iterable, Protocol, runtime_checkable

from mudmatch.world.schemas import Entity, WorldTemplate

logger = logging.getLogger(__name__)


@runtime_checkable
class WorldGraph(Protocol):
    """Read-only accessor for the containment graph."""

    def get(self, entity_id: int | None) -> Entity | None:
        """Return the entity with this id, or None if it doesn't exist."""
        ...

    def is_valid(self, entity_id: int | None) -> bool:
        """Check whether an id refers to an existing entity."""
        ...

    def contents(self, entity_id: int) -> list[int]:
        """Ordered ids of non-exit entities located in ``entity_id``."""
        ...

    def exits(self, entity_id: int) -> list[int]:
        """Ordered ids of exits leading out of ``entity_id``."""
        ...

    def players(self) -> list[int]:
        """Ids of every player entity."""
        ...


class InMemoryWorld:
    """Dict-backed world graph.

    Contents and exit lists keep insertion order, which is also the
    scan order the matcher sees.

    Usage:
        world = InMemoryWorld()
        world.add(Entity(id=0, name="Lobby", type=EntityType.ROOM))
        world.add(Entity(id=1, name="Bob", type=EntityType.PLAYER, location=0))
    """

    def __init__(
        self,
        entities: Iterable[Entity] = (),
        master_room: int | None = None,
    ) -> None:
        self.master_room = master_room
        self._entities: dict[int, Entity] = {}
        self._contents: dict[int, list[int]] = {}
        self._exits: dict[int, list[int]] = {}
        for entity in entities:
            self.add(entity)

    @classmethod
    def from_template(cls, template: WorldTemplate) -> InMemoryWorld:
        """Build a world from a validated template."""
        return cls(template.entities, master_room=template.master_room)

    def __len__(self) -> int:
        return len(self._entities)

    def __iter__(self):
        return iter(self._entities.values())

    # =========================================================================
    # WorldGraph
    # =========================================================================

    def get(self, entity_id: int | None) -> Entity | None:
        if entity_id is None:
            return None
        return self._entities.get(entity_id)

    def is_valid(self, entity_id: int | None) -> bool:
        return entity_id is not None and entity_id in self._entities

    def contents(self, entity_id: int) -> list[int]:
        return list(self._contents.get(entity_id, []))

    def exits(self, entity_id: int) -> list[int]:
        return list(self._exits.get(entity_id, []))

    def players(self) -> list[int]:
        return [e.id for e in self._entities.values() if e.is_player]

    # =========================================================================
    # Mutation (host side)
    # =========================================================================

    def add(self, entity: Entity) -> Entity:
        """Add an entity, appending it to its location's list.

        Raises:
            ValueError: If the id is already taken.
        """
        if entity.id in self._entities:
            raise ValueError(f"Entity #{entity.id} already exists")
        self._entities[entity.id] = entity
        self._link(entity)
        return entity

    def move(self, entity_id: int, location: int | None) -> Entity:
        """Move an entity to a new location (appended last).

        Raises:
            KeyError: If the entity doesn't exist.
        """
        entity = self._entities[entity_id]
        self._unlink(entity)
        moved = entity.model_copy(update={"location": location})
        self._entities[entity_id] = moved
        self._link(moved)
        logger.debug("Moved #%d to %s", entity_id, location)
        return moved

    def remove(self, entity_id: int) -> None:
        """Remove an entity. References to it elsewhere become dangling."""
        entity = self._entities.pop(entity_id)
        self._unlink(entity)

    def _index_for(self, entity: Entity) -> dict[int, list[int]]:
        return self._exits if entity.is_exit else self._contents

    def _link(self, entity: Entity) -> None:
        if entity.location is not None:
            self._index_for(entity).setdefault(entity.location, []).append(entity.id)

    def _unlink(self, entity: Entity) -> None:
        if entity.location is None:
            return
        members = self._index_for(entity).get(entity.location, [])
        if entity.id in members:
            members.remove(entity.id)
