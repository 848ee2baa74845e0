"""Tests for observability hooks and the console observer."""

from io import StringIO

import pytest
from rich.console import Console

from mudmatch.observability import (
    CandidateEvent,
    CompositeHook,
    GroupScanEvent,
    NullHook,
    QualifierEvent,
    RecordingHook,
    ResolutionEndEvent,
    ResolutionHook,
    ResolutionStartEvent,
    RichConsoleObserver,
    ShortCircuitEvent,
)
from mudmatch.resolver import EntityResolver
from mudmatch.world.graph import InMemoryWorld
from tests.factories import ALICE, MASTER_ROOM


@pytest.fixture
def output() -> StringIO:
    return StringIO()


@pytest.fixture
def observer(output: StringIO) -> RichConsoleObserver:
    console = Console(file=output, force_terminal=False, width=120)
    return RichConsoleObserver(console=console)


class TestHookProtocol:
    """Tests for hook implementations."""

    @pytest.mark.parametrize("hook_type", [NullHook, RecordingHook, RichConsoleObserver])
    def test_implements_protocol(self, hook_type):
        assert isinstance(hook_type(), ResolutionHook)

    def test_composite_dispatches_to_all(self):
        """Every hook gets every event, in order."""
        first, second = RecordingHook(), RecordingHook()
        composite = CompositeHook([first, second])
        event = ShortCircuitEvent(kind="me", entity_id=1)

        composite.on_short_circuit(event)
        composite.on_group_scan(GroupScanEvent(group="root_contents", scanned=1, size=1, signal="continue"))

        assert first.events == second.events
        assert first.events[0] is event

    def test_recording_hook_filters_by_type(self):
        hook = RecordingHook()
        hook.on_candidate(CandidateEvent(entity_id=4, full=True, accepted=True, count=1))
        hook.on_qualifier(QualifierEvent(original="my ball", residual="ball", ordinal=0, flags=0))

        assert len(hook.of_type(CandidateEvent)) == 1
        assert hook.of_type(ResolutionEndEvent) == []


class TestRichConsoleObserver:
    """Tests for RichConsoleObserver output."""

    def test_start_and_end(self, observer, output):
        observer.on_resolution_start(
            ResolutionStartEvent(actor=1, root=1, token="ball", flags=0, type_filter="thing")
        )
        observer.on_resolution_end(
            ResolutionEndEvent(
                token="ball",
                outcome="found",
                reason="found",
                entity_id=4,
                duration_ms=0.5,
            )
        )

        text = output.getvalue()
        assert "'ball'" in text
        assert "type=thing" in text
        assert "found #4" in text

    def test_candidates_can_be_hidden(self, output):
        console = Console(file=output, force_terminal=False)
        observer = RichConsoleObserver(console=console, show_candidates=False)

        observer.on_candidate(CandidateEvent(entity_id=4, full=False, accepted=True, count=1))

        assert output.getvalue() == ""

    def test_empty_groups_hidden_by_default(self, observer, output):
        observer.on_group_scan(GroupScanEvent(group="root_proxies", scanned=0, size=0, signal="continue"))
        observer.on_group_scan(GroupScanEvent(group="neighbor_contents", scanned=2, size=4, signal="terminate"))

        text = output.getvalue()
        assert "root_proxies" not in text
        assert "neighbor_contents: 2/4 terminate" in text

    def test_unchanged_qualifiers_not_shown(self, observer, output):
        observer.on_qualifier(QualifierEvent(original="ball", residual="ball", ordinal=0, flags=0))

        assert output.getvalue() == ""

    def test_traces_a_resolution(self, town: InMemoryWorld, observer, output):
        """The observer renders a whole resolution."""
        resolver = EntityResolver(town, hook=observer, master_room=MASTER_ROOM)

        resolver.resolve(ALICE, "2nd ball")

        text = output.getvalue()
        assert "ordinal 2" in text
        assert "found #5" in text
