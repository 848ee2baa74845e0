"""Rich console observer for real-time resolution visibility.

Uses the Rich library to show how a token travels through qualifier
parsing, candidate groups and arbitration.
"""

from rich.console import Console
from rich.markup import escape

from mudmatch.observability.events import (
    CandidateEvent,
    GroupScanEvent,
    QualifierEvent,
    ResolutionEndEvent,
    ResolutionStartEvent,
    ShortCircuitEvent,
)


class RichConsoleObserver:
    """Pretty console output using Rich."""

    # Outcome colors
    OUTCOME_STYLES = {
        "found": "green",
        "ambiguous": "yellow",
        "not_found": "red",
        "permission_denied": "magenta",
    }

    def __init__(
        self,
        console: Console | None = None,
        show_candidates: bool = True,
        show_empty_groups: bool = False,
        indent: str = "  ",
    ) -> None:
        """Initialize the console observer.

        Args:
            console: Rich Console instance. Creates new one if not provided.
            show_candidates: Show each name match.
            show_empty_groups: Also list groups that had no members.
            indent: Indentation string for nested output.
        """
        self.console = console or Console()
        self.show_candidates = show_candidates
        self.show_empty_groups = show_empty_groups
        self.indent = indent

    def on_resolution_start(self, event: ResolutionStartEvent) -> None:
        type_str = f" [dim]type={event.type_filter}[/]" if event.type_filter else ""
        self.console.print(
            f"[bold]match[/] [cyan]{escape(repr(event.token))}[/] for #{event.actor} "
            f"relative to #{event.root}{type_str}"
        )

    def on_short_circuit(self, event: ShortCircuitEvent) -> None:
        self.console.print(f"{self.indent}[blue]>[/] {event.kind} -> #{event.entity_id}")

    def on_qualifier(self, event: QualifierEvent) -> None:
        if event.residual == event.original and not event.ordinal:
            return
        ordinal_str = f", ordinal {event.ordinal}" if event.ordinal else ""
        self.console.print(
            f"{self.indent}[magenta]#[/] qualifiers: {escape(repr(event.residual))}{ordinal_str}"
        )

    def on_candidate(self, event: CandidateEvent) -> None:
        if not self.show_candidates:
            return
        kind = "exact" if event.full else "partial"
        mark = "[green]+[/]" if event.accepted else "[dim]-[/]"
        self.console.print(
            f"{self.indent}{self.indent}{mark} #{event.entity_id} {kind} (count {event.count})"
        )

    def on_group_scan(self, event: GroupScanEvent) -> None:
        if not event.size and not self.show_empty_groups:
            return
        stop = "" if event.signal == "continue" else f" [yellow]{event.signal}[/]"
        self.console.print(
            f"{self.indent}[cyan]@[/] {event.group}: {event.scanned}/{event.size}{stop}"
        )

    def on_resolution_end(self, event: ResolutionEndEvent) -> None:
        style = self.OUTCOME_STYLES.get(event.reason, "white")
        target = f" #{event.entity_id}" if event.entity_id is not None else ""
        self.console.print(
            f"{self.indent}-> [{style}]{event.reason}[/]{target} ({event.duration_ms:.2f}ms)"
        )
