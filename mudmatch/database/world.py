"""SQLAlchemy-backed world graph."""

import logging

from sqlalchemy.orm import Session

from mudmatch.database.models.objects import ObjectAttribute, WorldObject
from mudmatch.world.schemas import Entity, EntityType, WorldTemplate

logger = logging.getLogger(__name__)


class WorldImportError(Exception):
    """Error during world import."""

    pass


def to_entity(obj: WorldObject) -> Entity:
    """Convert a database row to an Entity."""
    return Entity(
        id=obj.id,
        name=obj.name,
        type=EntityType(obj.type_mask),
        location=obj.location_id,
        destination=obj.destination_id,
        zone=obj.zone_id,
        parent=obj.parent_id,
        owner=obj.owner_id,
        aliases=list(obj.aliases or []),
        flags=set(obj.flags or []),
        attributes={attr.name: attr.value for attr in obj.attributes},
        created=obj.created_stamp,
    )


class DatabaseWorld:
    """WorldGraph reading from the ``world_objects`` table.

    Contents and exits are ordered by ``position`` then id.
    """

    def __init__(self, db: Session, master_room: int | None = None) -> None:
        """Initialize with a database session.

        Args:
            db: SQLAlchemy database session.
            master_room: Room whose exits count as global, if any.
        """
        self.db = db
        self.master_room = master_room

    def _row(self, entity_id: int | None) -> WorldObject | None:
        if entity_id is None:
            return None
        return self.db.get(WorldObject, entity_id)

    def get(self, entity_id: int | None) -> Entity | None:
        obj = self._row(entity_id)
        return to_entity(obj) if obj is not None else None

    def is_valid(self, entity_id: int | None) -> bool:
        return self._row(entity_id) is not None

    def _located_in(self, entity_id: int, exits: bool) -> list[int]:
        exit_bit = WorldObject.type_mask.op("&")(int(EntityType.EXIT))
        condition = exit_bit != 0 if exits else exit_bit == 0
        rows = (
            self.db.query(WorldObject.id)
            .filter(WorldObject.location_id == entity_id, condition)
            .order_by(WorldObject.position, WorldObject.id)
            .all()
        )
        return [row.id for row in rows]

    def contents(self, entity_id: int) -> list[int]:
        return self._located_in(entity_id, exits=False)

    def exits(self, entity_id: int) -> list[int]:
        return self._located_in(entity_id, exits=True)

    def players(self) -> list[int]:
        player_bit = WorldObject.type_mask.op("&")(int(EntityType.PLAYER))
        rows = (
            self.db.query(WorldObject.id)
            .filter(player_bit != 0)
            .order_by(WorldObject.id)
            .all()
        )
        return [row.id for row in rows]


def import_world(db: Session, template: WorldTemplate) -> dict[str, int]:
    """Persist a world template.

    Template order becomes the ``position`` of each object within its
    location, so the scan order is preserved.

    Args:
        db: Database session.
        template: Validated world template.

    Returns:
        Dict with counts: objects and attributes created.

    Raises:
        WorldImportError: If any of the template ids are already stored.
    """
    ids = [entity.id for entity in template.entities]
    existing = sorted(
        row.id for row in db.query(WorldObject.id).filter(WorldObject.id.in_(ids)).all()
    )
    if existing:
        shown = ", ".join(f"#{i}" for i in existing[:10])
        more = f" and {len(existing) - 10} more" if len(existing) > 10 else ""
        raise WorldImportError(f"Objects already in the database: {shown}{more}")

    results = {"objects": 0, "attributes": 0}
    positions: dict[int | None, int] = {}

    for entity in template.entities:
        position = positions.get(entity.location, 0)
        positions[entity.location] = position + 1

        obj = WorldObject(
            id=entity.id,
            name=entity.name,
            type_mask=int(entity.type),
            location_id=entity.location,
            destination_id=entity.destination,
            zone_id=entity.zone,
            parent_id=entity.parent,
            owner_id=entity.owner,
            position=position,
            aliases=list(entity.aliases),
            flags=sorted(entity.flags),
            created_stamp=entity.created,
        )
        for name, value in entity.attributes.items():
            obj.attributes.append(ObjectAttribute(name=name, value=value))
            results["attributes"] += 1
        db.add(obj)
        results["objects"] += 1

    db.flush()
    logger.info(
        "Imported %d objects (%d attributes) from %s",
        results["objects"],
        results["attributes"],
        template.name,
    )
    return results
