"""Per-call resolution state and result types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, Field

from mudmatch.resolver.flags import MatchFlag
from mudmatch.world.schemas import EntityType


class ScanSignal(Enum):
    """Control signal returned for each evaluated candidate."""

    CONTINUE = "continue"  # Look at the next candidate in this group
    STOP_GROUP = "stop_group"  # Skip the rest of this group
    TERMINATE = "terminate"  # Stop enumerating altogether


class MatchOutcome(str, Enum):
    """Outcome of a resolution call."""

    FOUND = "found"
    AMBIGUOUS = "ambiguous"
    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"  # Internal reason only


@dataclass
class ResolutionContext:
    """Mutable state of a single resolution call.

    Created on entry, threaded through every stage by reference and
    dropped on exit. Nothing in here outlives the call.
    """

    actor: int | None
    root: int | None
    token: str
    type_filter: EntityType | None
    flags: MatchFlag
    root_valid: bool = False
    location: int | None = None  # Root's room (root itself if it is a room)
    absolute: int | None = None  # Token read as a literal identifier
    name: str = ""  # Token after qualifiers are stripped
    ordinal: int = 0  # Nth candidate wanted, 0 = none
    match: int | None = None  # Candidate under evaluation
    best_match: int | None = None
    ambiguous_seed: bool = False  # A player lookup was ambiguous
    count: int = 0
    right_type: int = 0
    exact: bool = False
    permission_denied: bool = False
    done: bool = False

    def has(self, flag: MatchFlag) -> bool:
        """Check whether any of the given flags is active."""
        return bool(self.flags & flag)

    def type_admits(self, entity_type: EntityType) -> bool:
        """True if no filter is set or the type intersects it."""
        return self.type_filter is None or bool(entity_type & self.type_filter)


class ResolutionResult(BaseModel):
    """Result of resolving a token."""

    outcome: MatchOutcome = Field(default=MatchOutcome.NOT_FOUND)
    entity_id: int | None = Field(default=None)

    # Why the result is what it is; PERMISSION_DENIED only shows up here
    reason: MatchOutcome = Field(default=MatchOutcome.NOT_FOUND)

    token: str = Field(default="")
    ordinal: int = Field(default=0)

    @property
    def found(self) -> bool:
        return self.outcome == MatchOutcome.FOUND

    @property
    def ambiguous(self) -> bool:
        return self.outcome == MatchOutcome.AMBIGUOUS
