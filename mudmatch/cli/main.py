"""Main CLI application."""

from pathlib import Path
from typing import List, Optional

import typer

from mudmatch.cli.commands import world
from mudmatch.cli.display import console, display_error, display_info, display_result
from mudmatch.config import settings
from mudmatch.observability import NullHook, RichConsoleObserver
from mudmatch.resolver import EntityResolver, ListNotifier, MatchFlag, expand_flags
from mudmatch.world.loader import WorldLoadError, load_world_from_file
from mudmatch.world.schemas import EntityType

# Create main app
app = typer.Typer(
    name="mudmatch",
    help="Match object names the way a MUSH does",
    add_completion=False,
)

# Add sub-commands
app.add_typer(world.app, name="world")


@app.command()
def resolve(
    world_file: Path = typer.Argument(..., help="World file (.yaml, .yml, .json)"),
    token: str = typer.Argument(..., help="What the actor typed"),
    actor: int = typer.Option(..., "--actor", "-a", help="Id of the acting entity"),
    root: Optional[int] = typer.Option(
        None, "--root", "-r", help="Match relative to this entity instead of the actor"
    ),
    type_filter: Optional[str] = typer.Option(
        None, "--type", "-t", help="Preferred type(s), e.g. 'thing' or 'thing|exit'"
    ),
    preset: Optional[str] = typer.Option(
        None, "--preset", "-p", help="Flag preset (everything, nearby, objects, ...)"
    ),
    flag: List[str] = typer.Option(
        [], "--flag", "-f", help="Extra match flag (exact, control, type, ...)"
    ),
    noisy: bool = typer.Option(False, "--noisy", help="Report failures to the actor"),
    last: bool = typer.Option(False, "--last", help="Take the last match when ambiguous"),
    trace: bool = typer.Option(
        settings.trace, "--trace/--no-trace", help="Show how the token was matched"
    ),
) -> None:
    """Resolve TOKEN as typed by --actor against a world file."""
    try:
        graph = load_world_from_file(world_file)
        flags = expand_flags([preset or settings.default_preset, *flag])
        types = EntityType.parse(type_filter) if type_filter else None
    except (WorldLoadError, FileNotFoundError, ValueError) as e:
        display_error(str(e))
        raise typer.Exit(1)

    if noisy and root is not None:
        display_error("--root can't be combined with --noisy")
        raise typer.Exit(1)

    notifier = ListNotifier()
    resolver = EntityResolver(
        graph,
        notifier=notifier,
        hook=RichConsoleObserver(console=console) if trace else NullHook(),
    )

    if noisy:
        result = resolver.resolve_noisy(
            actor, token, types, flags | MatchFlag.LAST if last else flags
        )
    elif root is not None:
        result = resolver.resolve_relative_to(
            actor, root, token, types, flags | MatchFlag.LAST if last else flags
        )
    elif last:
        result = resolver.resolve_last(actor, token, types, flags)
    else:
        result = resolver.resolve(actor, token, types, flags)

    for message in notifier.messages_for(actor):
        display_info(message)
    display_result(result, graph.get(result.entity_id))

    if not result.found:
        raise typer.Exit(1)


@app.callback()
def main() -> None:
    """mudmatch - resolve names typed by players to objects."""
    pass


if __name__ == "__main__":
    app()
