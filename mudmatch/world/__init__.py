"""World module: the containment graph the matcher reads.

- schemas: Pydantic models (EntityType, Entity, WorldTemplate)
- graph: WorldGraph accessor protocol and InMemoryWorld
- loader: YAML/JSON world files
"""

from mudmatch.world.graph import InMemoryWorld, WorldGraph
from mudmatch.world.loader import WorldLoadError, load_world_from_file, read_world_template
from mudmatch.world.schemas import Entity, EntityType, WorldTemplate

__all__ = [
    # Schemas
    "Entity",
    "EntityType",
    "WorldTemplate",
    # Graph
    "WorldGraph",
    "InMemoryWorld",
    # Loading
    "WorldLoadError",
    "load_world_from_file",
    "read_world_template",
]
