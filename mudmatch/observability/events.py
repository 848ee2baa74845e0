"""Event dataclasses for observability hooks.

These events are emitted by the resolver at key points to provide
visibility into how a token was matched.
"""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class ResolutionStartEvent:
    """Emitted when a resolution call begins."""

    actor: int | None
    root: int | None
    token: str
    flags: int
    type_filter: str | None = None
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class ShortCircuitEvent:
    """Emitted when a fixed token ("me", "here", a player, #id) decides the call."""

    kind: str  # "me", "here", "player", "absolute"
    entity_id: int
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class QualifierEvent:
    """Emitted after English qualifiers are stripped."""

    original: str
    residual: str
    ordinal: int
    flags: int


@dataclass
class CandidateEvent:
    """Emitted for each candidate that matched by name or identifier."""

    entity_id: int
    full: bool
    accepted: bool  # Became the best match
    count: int


@dataclass
class GroupScanEvent:
    """Emitted when a candidate group has been scanned."""

    group: str
    scanned: int
    size: int
    signal: str


@dataclass
class ResolutionEndEvent:
    """Emitted when a resolution call completes."""

    token: str
    outcome: str
    reason: str
    entity_id: int | None
    duration_ms: float
    timestamp: datetime = field(default_factory=datetime.now)
