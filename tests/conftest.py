"""Core test fixtures for mudmatch tests."""

import pytest
from sqlalchemy.orm import Session, sessionmaker

from mudmatch.database.connection import make_engine
from mudmatch.database.models.base import Base
from mudmatch.resolver import EntityResolver, ListNotifier
from mudmatch.world.graph import InMemoryWorld
from tests.factories import (
    ALICE,
    BLUE_BALL,
    BOB,
    LANTERN,
    LIBRARY,
    MASTER_ROOM,
    NORTH,
    RED_BALL,
    TELEPORT,
    TOWN_SQUARE,
    create_exit,
    create_player,
    create_room,
    create_thing,
)


@pytest.fixture(scope="session")
def engine():
    """Create SQLite in-memory engine for fast tests."""
    engine = make_engine("sqlite:///:memory:")

    # Import all models to ensure they're registered with Base
    from mudmatch.database.models import objects  # noqa: F401

    Base.metadata.create_all(bind=engine)
    return engine


@pytest.fixture(scope="function")
def db_session(engine) -> Session:
    """Create a fresh database session for each test.

    Uses a transaction that rolls back after each test for isolation.
    """
    connection = engine.connect()
    transaction = connection.begin()
    session_factory = sessionmaker(bind=connection)
    session = session_factory()

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture
def town() -> InMemoryWorld:
    """A small town.

    Town Square (#0): Alice (#1), Bob (#3), blue ball (#5), Lantern (#8),
    exit North;n;no (#6) to the Library (#7).
    Alice carries the red ball (#4). The Master Room (#2) holds the
    global exit Teleport Booth;tb (#30).
    """
    world = InMemoryWorld(master_room=MASTER_ROOM)
    create_room(world, TOWN_SQUARE, "Town Square")
    create_room(world, MASTER_ROOM, "Master Room")
    create_room(world, LIBRARY, "Library")
    create_player(world, ALICE, "Alice", TOWN_SQUARE)
    create_player(world, BOB, "Bob", TOWN_SQUARE, aliases=["Bobby"])
    create_thing(world, RED_BALL, "red ball", ALICE, owner=ALICE, created=100)
    create_thing(world, BLUE_BALL, "blue ball", TOWN_SQUARE, owner=BOB)
    create_thing(world, LANTERN, "Lantern", TOWN_SQUARE, owner=ALICE)
    create_exit(world, NORTH, "North;n;no", TOWN_SQUARE, destination=LIBRARY)
    create_exit(world, TELEPORT, "Teleport Booth;tb", MASTER_ROOM)
    return world


@pytest.fixture
def notifier() -> ListNotifier:
    """Notifier that keeps messages for assertions."""
    return ListNotifier()


@pytest.fixture
def resolver(town: InMemoryWorld, notifier: ListNotifier) -> EntityResolver:
    """Resolver over the town with default collaborators."""
    return EntityResolver(town, notifier=notifier, master_room=MASTER_ROOM)
