"""World file commands."""

from pathlib import Path
from typing import Optional

import typer
from sqlalchemy.exc import SQLAlchemyError

from mudmatch.cli.display import display_entities, display_error, display_success
from mudmatch.database.connection import get_db_session, init_db
from mudmatch.database.world import WorldImportError, import_world
from mudmatch.world.loader import WorldLoadError, read_world_template
from mudmatch.world.schemas import Entity

app = typer.Typer(help="World file commands")


def _read_template(world_file: Path):
    try:
        return read_world_template(world_file)
    except (WorldLoadError, FileNotFoundError) as e:
        display_error(str(e))
        raise typer.Exit(1)


@app.command()
def inspect(
    world_file: Path = typer.Argument(..., help="World file (.yaml, .yml, .json)"),
    location: Optional[int] = typer.Option(
        None, "--location", "-l", help="Only list entities located here"
    ),
) -> None:
    """List the entities of a world file in scan order."""
    template = _read_template(world_file)

    entities: list[Entity] = template.entities
    title = template.name
    if location is not None:
        entities = [e for e in entities if e.location == location]
        title = f"{template.name} - in #{location}"

    display_entities(entities, title=title)


@app.command(name="import")
def import_(
    world_file: Path = typer.Argument(..., help="World file (.yaml, .yml, .json)"),
) -> None:
    """Import a world file into the configured database."""
    template = _read_template(world_file)

    try:
        with get_db_session() as db:
            init_db(db.get_bind())
            counts = import_world(db, template)
    except (WorldImportError, SQLAlchemyError) as e:
        display_error(str(e))
        raise typer.Exit(1)

    display_success(
        f"Imported {counts['objects']} objects ({counts['attributes']} attributes)"
    )
