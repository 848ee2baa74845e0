"""Pydantic schemas for the containment graph.

This module contains the data models shared by every graph backend:
- EntityType: bitset type tag tested by intersection
- Entity: one addressable object (room, thing, exit, player, generic proxy)
- WorldTemplate: the on-disk description of a whole world
"""

from __future__ import annotations

import re
from enum import IntFlag
from typing import Annotated

from pydantic import BaseModel, Field, PlainSerializer, PlainValidator, field_validator


# =============================================================================
# Enums
# =============================================================================


class EntityType(IntFlag):
    """Type tag of an entity.

    A proxy-capable object is THING | GENERIC, so it still passes a THING
    filter while being recognizable as a proxy candidate.
    """

    ROOM = 1
    THING = 2
    EXIT = 4
    PLAYER = 8
    GENERIC = 16

    @classmethod
    def parse(cls, value: EntityType | int | str) -> EntityType:
        """Parse a type tag from an enum, an int bitmask, or a name list.

        Args:
            value: ``EntityType``, integer mask, or names joined by ``|``/``,``
                (e.g. ``"thing|generic"``).

        Returns:
            The combined EntityType.

        Raises:
            ValueError: If a name is unknown or the string is empty.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, int):
            return cls(value)
        if not isinstance(value, str):
            raise ValueError(f"Invalid entity type: {value!r}")

        parts = [p for p in re.split(r"[|,\s]+", value.strip()) if p]
        if not parts:
            raise ValueError("Entity type must not be empty")

        result = cls(0)
        for part in parts:
            try:
                result |= cls[part.upper()]
            except KeyError:
                raise ValueError(f"Unknown entity type: {part!r}") from None
        return result

    def label(self) -> str:
        """Lowercase ``|``-joined member names (e.g. ``thing|generic``)."""
        return "|".join(m.name.lower() for m in EntityType if m & self)


EntityTypeField = Annotated[
    EntityType,
    PlainValidator(EntityType.parse),
    PlainSerializer(lambda t: t.label(), return_type=str),
]


# =============================================================================
# Entity
# =============================================================================


class Entity(BaseModel):
    """An addressable object in the containment graph.

    For exits, ``location`` is the room the exit leads out of and
    ``destination`` is where it goes. Exit names carry their aliases
    as a ``;``-separated list ("North;n;no").
    """

    id: int = Field(ge=0)
    name: str
    type: EntityTypeField
    location: int | None = Field(default=None)
    destination: int | None = Field(default=None, description="Exits only")
    zone: int | None = Field(default=None, description="Zone master room")
    parent: int | None = Field(default=None, description="Attribute inheritance parent")
    owner: int | None = Field(default=None)
    aliases: list[str] = Field(default_factory=list)
    flags: set[str] = Field(default_factory=set)
    attributes: dict[str, str] = Field(default_factory=dict)
    created: int | None = Field(default=None, description="Creation stamp for #id:stamp")

    @field_validator("flags", mode="before")
    @classmethod
    def _upper_flags(cls, value: object) -> object:
        if isinstance(value, (list, set, tuple, frozenset)):
            return {str(v).upper() for v in value}
        return value

    @property
    def display_name(self) -> str:
        """Name without the exit alias list."""
        if self.is_exit:
            return self.name.split(";", 1)[0]
        return self.name

    @property
    def is_room(self) -> bool:
        return bool(self.type & EntityType.ROOM)

    @property
    def is_exit(self) -> bool:
        return bool(self.type & EntityType.EXIT)

    @property
    def is_player(self) -> bool:
        return bool(self.type & EntityType.PLAYER)

    @property
    def is_generic(self) -> bool:
        return bool(self.type & EntityType.GENERIC)

    def has_flag(self, flag: str) -> bool:
        """Check whether the entity carries a flag (case-insensitive)."""
        return flag.upper() in self.flags


# =============================================================================
# World Template
# =============================================================================


class WorldTemplate(BaseModel):
    """A whole world as stored in a YAML or JSON file.

    Entity order is significant: it is the order of every contents
    and exit list built from the template.
    """

    name: str = Field(default="world")
    master_room: int | None = Field(default=None)
    entities: list[Entity] = Field(default_factory=list)

    @field_validator("entities")
    @classmethod
    def _unique_ids(cls, value: list[Entity]) -> list[Entity]:
        seen: set[int] = set()
        for entity in value:
            if entity.id in seen:
                raise ValueError(f"Duplicate entity id #{entity.id}")
            seen.add(entity.id)
        return value
