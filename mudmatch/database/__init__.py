"""Database-backed world graph.

- models: SQLAlchemy models (WorldObject, ObjectAttribute)
- world: DatabaseWorld accessor and template import
- connection: engine and session management from settings
"""

from mudmatch.database.world import DatabaseWorld, import_world, to_entity

__all__ = [
    "DatabaseWorld",
    "import_world",
    "to_entity",
]
