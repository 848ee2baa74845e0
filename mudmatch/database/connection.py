"""Database connection and session management."""

from contextlib import contextmanager
from typing import Generator

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import Session, sessionmaker

from mudmatch.config import settings
from mudmatch.database.models.base import Base


def make_engine(url: str, echo: bool = False) -> Engine:
    """Create an engine for a world database.

    SQLite connections get foreign keys switched on, so deleting an
    object also deletes its attributes.
    """
    if not url.startswith("sqlite"):
        return create_engine(url, echo=echo, pool_pre_ping=True)

    engine = create_engine(url, echo=echo, connect_args={"check_same_thread": False})

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


# Create engine
engine = make_engine(settings.database_url, echo=settings.debug)

# Create session factory
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


def init_db(bind: Engine | None = None) -> None:
    """Create the world tables if they don't exist yet."""
    Base.metadata.create_all(bind=bind or engine)


@contextmanager
def get_db_session() -> Generator[Session, None, None]:
    """Get a database session with automatic cleanup.

    Usage:
        with get_db_session() as db:
            world = DatabaseWorld(db)
    """
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
