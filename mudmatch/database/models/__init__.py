"""Database models package."""

from mudmatch.database.models.base import Base, TimestampMixin
from mudmatch.database.models.objects import ObjectAttribute, WorldObject

__all__ = [
    "Base",
    "TimestampMixin",
    "WorldObject",
    "ObjectAttribute",
]
