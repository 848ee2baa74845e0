"""Tests for the SQLAlchemy-backed world graph."""

import pytest
from sqlalchemy.orm import Session

from mudmatch.database.models.objects import ObjectAttribute, WorldObject
from mudmatch.database.world import DatabaseWorld, WorldImportError, import_world, to_entity
from mudmatch.resolver import EntityResolver
from mudmatch.world.graph import InMemoryWorld, WorldGraph
from mudmatch.world.schemas import EntityType, WorldTemplate
from tests.factories import (
    ALICE,
    BLUE_BALL,
    BOB,
    LANTERN,
    MASTER_ROOM,
    NORTH,
    RED_BALL,
    TELEPORT,
    TOWN_SQUARE,
    create_world_object,
)


def town_template(town: InMemoryWorld) -> WorldTemplate:
    return WorldTemplate(name="town", master_room=MASTER_ROOM, entities=list(town))


class TestWorldObject:
    """Tests for the WorldObject model."""

    def test_create(self, db_session: Session):
        obj = create_world_object(
            db_session,
            10,
            "chest",
            location_id=0,
            attributes={"LOCK": "#1"},
        )

        assert obj.id == 10
        assert obj.created_at is not None
        assert [a.name for a in obj.attributes] == ["LOCK"]
        assert obj.attributes[0].owner_object is obj

    def test_to_entity(self, db_session: Session):
        obj = create_world_object(
            db_session,
            11,
            "fountain",
            EntityType.THING | EntityType.GENERIC,
            aliases=["well"],
            flags=["DARK"],
            created_stamp=7,
        )

        entity = to_entity(obj)

        assert entity.type == EntityType.THING | EntityType.GENERIC
        assert entity.aliases == ["well"]
        assert entity.has_flag("dark")
        assert entity.created == 7


class TestImportWorld:
    """Tests for import_world."""

    def test_counts(self, db_session: Session, town: InMemoryWorld):
        counts = import_world(db_session, town_template(town))

        assert counts == {"objects": 10, "attributes": 0}
        assert db_session.query(WorldObject).count() == 10

    def test_attributes(self, db_session: Session):
        template = WorldTemplate(
            entities=[
                {"id": 0, "name": "Room", "type": "room", "attributes": {"GENERIC`#1": "2", "LOCK": ""}},
            ]
        )

        counts = import_world(db_session, template)

        assert counts["attributes"] == 2
        assert db_session.query(ObjectAttribute).count() == 2

    def test_existing_ids_refused(self, db_session: Session, town: InMemoryWorld):
        """Importing over stored objects fails before anything is added."""
        import_world(db_session, town_template(town))

        with pytest.raises(WorldImportError, match="#0, #1"):
            import_world(db_session, town_template(town))

        assert db_session.query(WorldObject).count() == 10


class TestDatabaseWorld:
    """Tests for DatabaseWorld."""

    def test_is_a_world_graph(self, db_session: Session):
        assert isinstance(DatabaseWorld(db_session), WorldGraph)

    def test_mirrors_in_memory_world(self, db_session: Session, town: InMemoryWorld):
        """Imported worlds read back in the same order."""
        import_world(db_session, town_template(town))
        world = DatabaseWorld(db_session, master_room=MASTER_ROOM)

        assert world.contents(TOWN_SQUARE) == [ALICE, BOB, BLUE_BALL, LANTERN]
        assert world.contents(ALICE) == [RED_BALL]
        assert world.exits(TOWN_SQUARE) == [NORTH]
        assert world.exits(MASTER_ROOM) == [TELEPORT]
        assert world.players() == [ALICE, BOB]

    def test_get(self, db_session: Session, town: InMemoryWorld):
        import_world(db_session, town_template(town))
        world = DatabaseWorld(db_session)

        assert world.get(BOB).aliases == ["Bobby"]
        assert world.get(RED_BALL).created == 100
        assert world.get(999) is None
        assert world.get(None) is None
        assert not world.is_valid(999)

    def test_resolves(self, db_session: Session, town: InMemoryWorld, monkeypatch):
        """The resolver works the same on the database graph."""
        monkeypatch.setattr("mudmatch.resolver.resolver.settings.master_room", 999)
        import_world(db_session, town_template(town))
        world = DatabaseWorld(db_session, master_room=MASTER_ROOM)
        resolver = EntityResolver(world)

        assert resolver.master_room == MASTER_ROOM

        assert resolver.resolve(ALICE, "2nd ball").entity_id == BLUE_BALL
        assert resolver.resolve(ALICE, "ball").ambiguous
        assert resolver.resolve(ALICE, "tb", flags=["everything", "global"]).entity_id == TELEPORT
