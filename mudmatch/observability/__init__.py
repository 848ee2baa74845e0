"""Observability module for resolution tracing.

Provides hooks and observers for visibility into qualifier parsing,
candidate scanning and arbitration.
"""

from mudmatch.observability.events import (
    CandidateEvent,
    GroupScanEvent,
    QualifierEvent,
    ResolutionEndEvent,
    ResolutionStartEvent,
    ShortCircuitEvent,
)
from mudmatch.observability.hooks import (
    CompositeHook,
    NullHook,
    RecordingHook,
    ResolutionHook,
)
from mudmatch.observability.console_observer import RichConsoleObserver

__all__ = [
    # Events
    "ResolutionStartEvent",
    "ShortCircuitEvent",
    "QualifierEvent",
    "CandidateEvent",
    "GroupScanEvent",
    "ResolutionEndEvent",
    # Hooks
    "ResolutionHook",
    "NullHook",
    "RecordingHook",
    "CompositeHook",
    # Observers
    "RichConsoleObserver",
]
