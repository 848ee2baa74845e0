"""Matching flags and the preset expansion table.

Base flags select where to look and how strict to be. Presets are named
bundles of base flags; they are expanded once per call by ``expand_flags``
before any matching starts, so the matcher itself only ever sees base flags.
"""

from __future__ import annotations

from enum import Enum, IntFlag
from typing import Iterable, Union


class MatchFlag(IntFlag):
    """Base matching flags."""

    NONE = 0
    CHECK_KEYS = 1 << 0  # Prefer objects whose lock the actor passes
    GLOBAL = 1 << 1  # Match exits in the master room
    REMOTES = 1 << 2  # Match exits in the zone master room
    NEAR = 1 << 3  # Only match things nearby
    CONTROL = 1 << 4  # Only match objects the actor controls
    ME = 1 << 5  # Match "me"
    HERE = 1 << 6  # Match "here"
    ABSOLUTE = 1 << 7  # Match any #dbref
    PMATCH = 1 << 8  # Match <player> or *<player>
    PLAYER = 1 << 9  # Match *<player>
    NEIGHBOR = 1 << 10  # Match something in the root's location
    POSSESSION = 1 << 11  # Match something in the root's inventory
    EXIT = 1 << 12  # Match an exit in the root's location
    CARRIED_EXIT = 1 << 13  # Match an exit in the room the root is
    CONTAINER = 1 << 14  # Match the name of the root's location
    REMOTE_CONTENTS = 1 << 15  # Same as POSSESSION, survives "here"/"this"
    ENGLISH = 1 << 16  # Parse "my 2nd flower"
    TYPE = 1 << 17  # Only match objects of the given type(s)
    EXACT = 1 << 18  # Full-name matching only, no partial names
    CONTENTS = 1 << 19  # Only match objects located inside the root
    NOISY = 1 << 20  # Notify the actor on failure
    LAST = 1 << 21  # Return the last match instead of ambiguous


class MatchPreset(str, Enum):
    """Named flag bundles."""

    EVERYTHING = "everything"
    NEARBY = "nearby"
    OBJECTS = "objects"
    NEAR_THINGS = "near_things"
    REMOTE = "remote"
    LIMITED = "limited"
    OBJ_CONTENTS = "obj_contents"


_EVERYTHING = (
    MatchFlag.ME
    | MatchFlag.HERE
    | MatchFlag.ABSOLUTE
    | MatchFlag.PLAYER
    | MatchFlag.NEIGHBOR
    | MatchFlag.POSSESSION
    | MatchFlag.EXIT
    | MatchFlag.ENGLISH
)
_OBJECTS = (
    MatchFlag.ME
    | MatchFlag.ABSOLUTE
    | MatchFlag.PLAYER
    | MatchFlag.NEIGHBOR
    | MatchFlag.POSSESSION
)

PRESET_FLAGS: dict[MatchPreset, MatchFlag] = {
    MatchPreset.EVERYTHING: _EVERYTHING,
    MatchPreset.NEARBY: _EVERYTHING | MatchFlag.NEAR,
    MatchPreset.OBJECTS: _OBJECTS,
    MatchPreset.NEAR_THINGS: _OBJECTS | MatchFlag.NEAR,
    MatchPreset.REMOTE: (
        MatchFlag.ABSOLUTE
        | MatchFlag.PLAYER
        | MatchFlag.REMOTE_CONTENTS
        | MatchFlag.EXIT
        | MatchFlag.REMOTES
    ),
    MatchPreset.LIMITED: MatchFlag.ABSOLUTE | MatchFlag.PLAYER | MatchFlag.NEIGHBOR,
    MatchPreset.OBJ_CONTENTS: (
        MatchFlag.POSSESSION
        | MatchFlag.PLAYER
        | MatchFlag.ABSOLUTE
        | MatchFlag.ENGLISH
        | MatchFlag.CONTENTS
    ),
}

FlagSpec = Union[MatchFlag, MatchPreset, str, Iterable[Union[MatchFlag, MatchPreset, str]]]


def _expand_one(item: MatchFlag | MatchPreset | str) -> MatchFlag:
    if isinstance(item, MatchFlag):
        return item
    if isinstance(item, MatchPreset):
        return PRESET_FLAGS[item]
    if isinstance(item, str):
        key = item.strip().lower().replace("-", "_")
        try:
            return PRESET_FLAGS[MatchPreset(key)]
        except ValueError:
            pass
        try:
            return MatchFlag[key.upper()]
        except KeyError:
            raise ValueError(f"Unknown match flag or preset: {item!r}") from None
    raise ValueError(f"Invalid match flag specification: {item!r}")


def expand_flags(spec: FlagSpec) -> MatchFlag:
    """Expand a flag specification into a set of base flags.

    Args:
        spec: A MatchFlag, a preset (enum or name), a flag name, or an
            iterable of any of those.

    Returns:
        The union of every base flag named.

    Raises:
        ValueError: If a name is neither a preset nor a flag.

    Examples:
        >>> expand_flags("nearby") == PRESET_FLAGS[MatchPreset.NEARBY]
        True
        >>> expand_flags(["objects", "exact"]) & MatchFlag.EXACT
        <MatchFlag.EXACT: 262144>
    """
    if isinstance(spec, (MatchFlag, MatchPreset, str)):
        return _expand_one(spec)

    result = MatchFlag.NONE
    for item in spec:
        result |= _expand_one(item)
    return result
