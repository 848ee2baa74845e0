"""Rich display helpers for CLI output."""

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from mudmatch.resolver.context import MatchOutcome, ResolutionResult
from mudmatch.world.schemas import Entity


# Shared console instance
console = Console()

OUTCOME_STYLES = {
    MatchOutcome.FOUND: "bold green",
    MatchOutcome.AMBIGUOUS: "bold yellow",
    MatchOutcome.NOT_FOUND: "bold red",
    MatchOutcome.PERMISSION_DENIED: "bold magenta",
}


def display_error(message: str) -> None:
    """Display error message.

    Args:
        message: Error message.
    """
    console.print(f"[bold red]Error:[/bold red] {escape(message)}")


def display_success(message: str) -> None:
    """Display success message.

    Args:
        message: Success message.
    """
    console.print(f"[bold green]{escape(message)}[/bold green]")


def display_info(message: str) -> None:
    """Display info message.

    Args:
        message: Info message.
    """
    console.print(f"[dim]{escape(message)}[/dim]")


def display_result(result: ResolutionResult, entity: Entity | None = None) -> None:
    """Display the outcome of a resolution.

    Args:
        result: Resolution result.
        entity: The matched entity, if any.
    """
    style = OUTCOME_STYLES.get(result.reason, "white")
    line = f"[{style}]{result.outcome.value}[/{style}]"
    if result.reason != result.outcome:
        line += f" [dim]({result.reason.value})[/dim]"
    if entity is not None:
        line += f" #{entity.id} [cyan]{escape(entity.display_name)}[/cyan] [dim]{entity.type.label()}[/dim]"
    if result.ordinal:
        line += f" [dim]ordinal {result.ordinal}[/dim]"
    console.print(line)


def display_entities(entities: list[Entity], title: str = "Entities") -> None:
    """Display a table of entities.

    Args:
        entities: Entities to list, in scan order.
        title: Table title.
    """
    if not entities:
        console.print("[dim]No entities found.[/dim]")
        return

    table = Table(title=escape(title), box=box.ROUNDED)
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("Name", style="white")
    table.add_column("Type", style="green")
    table.add_column("Location", justify="right")
    table.add_column("Aliases", style="dim")
    table.add_column("Flags", style="yellow")

    for entity in entities:
        table.add_row(
            f"#{entity.id}",
            escape(entity.name),
            entity.type.label(),
            f"#{entity.location}" if entity.location is not None else "",
            escape(", ".join(entity.aliases)),
            escape(" ".join(sorted(entity.flags))),
        )

    console.print(table)
