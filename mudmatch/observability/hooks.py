"""Observability hook protocol and implementations.

The ResolutionHook protocol defines the interface for receiving events
from the resolver. Implementations can render to console, record events
for tests, or aggregate metrics.
"""

from typing import Protocol, runtime_checkable

from mudmatch.observability.events import (
    CandidateEvent,
    GroupScanEvent,
    QualifierEvent,
    ResolutionEndEvent,
    ResolutionStartEvent,
    ShortCircuitEvent,
)


@runtime_checkable
class ResolutionHook(Protocol):
    """Protocol for observability hooks.

    Implement this protocol to receive events from the resolver.
    """

    def on_resolution_start(self, event: ResolutionStartEvent) -> None:
        """Called when a resolution call begins."""
        ...

    def on_short_circuit(self, event: ShortCircuitEvent) -> None:
        """Called when a fixed token decides the call."""
        ...

    def on_qualifier(self, event: QualifierEvent) -> None:
        """Called after qualifier parsing."""
        ...

    def on_candidate(self, event: CandidateEvent) -> None:
        """Called for each name/identifier match."""
        ...

    def on_group_scan(self, event: GroupScanEvent) -> None:
        """Called when a candidate group has been scanned."""
        ...

    def on_resolution_end(self, event: ResolutionEndEvent) -> None:
        """Called when a resolution call completes."""
        ...


class NullHook:
    """No-op hook for when observability is disabled.

    This is the default hook - it does nothing but satisfies the protocol.
    Using this avoids null checks throughout the code.
    """

    def on_resolution_start(self, event: ResolutionStartEvent) -> None:
        pass

    def on_short_circuit(self, event: ShortCircuitEvent) -> None:
        pass

    def on_qualifier(self, event: QualifierEvent) -> None:
        pass

    def on_candidate(self, event: CandidateEvent) -> None:
        pass

    def on_group_scan(self, event: GroupScanEvent) -> None:
        pass

    def on_resolution_end(self, event: ResolutionEndEvent) -> None:
        pass


class RecordingHook(NullHook):
    """Keeps every event in order. Handy in tests."""

    def __init__(self) -> None:
        self.events: list[object] = []

    def on_resolution_start(self, event: ResolutionStartEvent) -> None:
        self.events.append(event)

    def on_short_circuit(self, event: ShortCircuitEvent) -> None:
        self.events.append(event)

    def on_qualifier(self, event: QualifierEvent) -> None:
        self.events.append(event)

    def on_candidate(self, event: CandidateEvent) -> None:
        self.events.append(event)

    def on_group_scan(self, event: GroupScanEvent) -> None:
        self.events.append(event)

    def on_resolution_end(self, event: ResolutionEndEvent) -> None:
        self.events.append(event)

    def of_type(self, event_type: type) -> list:
        return [e for e in self.events if isinstance(e, event_type)]


class CompositeHook:
    """Combines multiple hooks into one.

    Events are dispatched to all hooks in order.
    """

    def __init__(self, hooks: list[ResolutionHook]) -> None:
        """Initialize with a list of hooks.

        Args:
            hooks: List of hooks to dispatch events to.
        """
        self.hooks = hooks

    def on_resolution_start(self, event: ResolutionStartEvent) -> None:
        for hook in self.hooks:
            hook.on_resolution_start(event)

    def on_short_circuit(self, event: ShortCircuitEvent) -> None:
        for hook in self.hooks:
            hook.on_short_circuit(event)

    def on_qualifier(self, event: QualifierEvent) -> None:
        for hook in self.hooks:
            hook.on_qualifier(event)

    def on_candidate(self, event: CandidateEvent) -> None:
        for hook in self.hooks:
            hook.on_candidate(event)

    def on_group_scan(self, event: GroupScanEvent) -> None:
        for hook in self.hooks:
            hook.on_group_scan(event)

    def on_resolution_end(self, event: ResolutionEndEvent) -> None:
        for hook in self.hooks:
            hook.on_resolution_end(event)
