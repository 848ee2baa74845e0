"""Resolver module: matching typed names to entities.

Resolution pipeline:
- qualifiers: "my", "this here", "toward", "2nd" adjectives
- candidates: ordered candidate groups around the root
- evaluator: per-candidate type/permission/name checks
- arbitration: best match, ties, ambiguity, ordinals
- resolver: fixed tokens and the public entry points
"""

from mudmatch.resolver.collaborators import (
    AttributeProxySource,
    ListNotifier,
    LoggingNotifier,
    MatchCollaborators,
    ObjidParser,
    WorldPermissions,
    WorldPlayerDirectory,
    check_alias,
    string_match,
)
from mudmatch.resolver.context import (
    MatchOutcome,
    ResolutionContext,
    ResolutionResult,
    ScanSignal,
)
from mudmatch.resolver.flags import PRESET_FLAGS, MatchFlag, MatchPreset, expand_flags
from mudmatch.resolver.qualifiers import QualifierParse, ordinal_suffix, parse_qualifiers
from mudmatch.resolver.resolver import (
    MSG_AMBIGUOUS,
    MSG_NOT_FOUND,
    MSG_PERMISSION_DENIED,
    EntityResolver,
)

__all__ = [
    # Entry point
    "EntityResolver",
    # Results
    "MatchOutcome",
    "ResolutionResult",
    "ResolutionContext",
    "ScanSignal",
    # Flags
    "MatchFlag",
    "MatchPreset",
    "PRESET_FLAGS",
    "expand_flags",
    # Qualifiers
    "QualifierParse",
    "parse_qualifiers",
    "ordinal_suffix",
    # Collaborators
    "MatchCollaborators",
    "WorldPermissions",
    "WorldPlayerDirectory",
    "AttributeProxySource",
    "ObjidParser",
    "ListNotifier",
    "LoggingNotifier",
    "check_alias",
    "string_match",
    # Messages
    "MSG_AMBIGUOUS",
    "MSG_NOT_FOUND",
    "MSG_PERMISSION_DENIED",
]
