"""English qualifier parsing.

Handles the small fixed grammar in front of an object name:

    adj-phrase --> adj | adj count | count
    adj        --> "my", "me"                  (inventory only)
               --> "here", "this", "this here" (neighbors only)
               --> "toward"                    (exits only)
    count      --> 1st, 2nd, 3rd, 4th, ... 11th, 12th, 13th, 21st, ...

A restriction narrows the scope flags. A count turns the search into
"the Nth match". Anything that doesn't parse is left as literal text.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from mudmatch.resolver.flags import MatchFlag

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Restriction:
    """A restriction adjective and its effect on the scope flags."""

    prefixes: tuple[str, ...]
    requires: MatchFlag  # Only recognized if one of these is set
    clears: MatchFlag


# Priority order; at most one applies
RESTRICTIONS: tuple[Restriction, ...] = (
    Restriction(
        prefixes=("this here ",),
        requires=MatchFlag.NEIGHBOR,
        clears=MatchFlag.POSSESSION | MatchFlag.EXIT,
    ),
    Restriction(
        prefixes=("here ", "this "),
        requires=MatchFlag.NEIGHBOR,
        clears=(
            MatchFlag.POSSESSION
            | MatchFlag.EXIT
            | MatchFlag.REMOTE_CONTENTS
            | MatchFlag.CONTAINER
        ),
    ),
    Restriction(
        prefixes=("my ", "me "),
        requires=MatchFlag.POSSESSION,
        clears=(
            MatchFlag.NEIGHBOR
            | MatchFlag.EXIT
            | MatchFlag.CONTAINER
            | MatchFlag.REMOTE_CONTENTS
        ),
    ),
    Restriction(
        prefixes=("toward ",),
        requires=MatchFlag.EXIT | MatchFlag.CARRIED_EXIT,
        clears=(
            MatchFlag.NEIGHBOR
            | MatchFlag.POSSESSION
            | MatchFlag.CONTAINER
            | MatchFlag.REMOTE_CONTENTS
        ),
    ),
)


@dataclass(frozen=True)
class QualifierParse:
    """Residual name, narrowed flags, and the ordinal (0 = none)."""

    text: str
    flags: MatchFlag
    ordinal: int = 0


def ordinal_suffix(count: int) -> str:
    """Return the English suffix for a count.

    Examples:
        >>> [ordinal_suffix(n) for n in (1, 2, 3, 4, 11, 12, 13, 21, 22)]
        ['st', 'nd', 'rd', 'th', 'th', 'th', 'th', 'st', 'nd']
    """
    if 10 < count < 14:
        return "th"
    last = count % 10
    if last == 1:
        return "st"
    if last == 2:
        return "nd"
    if last == 3:
        return "rd"
    return "th"


def _apply_restriction(text: str, flags: MatchFlag) -> tuple[str, MatchFlag]:
    lowered = text.lower()
    for restriction in RESTRICTIONS:
        if not flags & restriction.requires:
            continue
        for prefix in restriction.prefixes:
            if lowered.startswith(prefix):
                return text[len(prefix):], flags & ~restriction.clears
    return text, flags


def _parse_count(word: str) -> int:
    """Parse "2nd"-style words; returns 0 when the word isn't a count."""
    digits = len(word) - len(word.lstrip("0123456789"))
    suffix = word[digits:]
    if digits == 0 or not suffix:
        return 0
    count = int(word[:digits])
    if count < 1 or suffix.lower() != ordinal_suffix(count):
        return 0
    return count


def parse_qualifiers(text: str, flags: MatchFlag) -> QualifierParse:
    """Strip restriction and count adjectives from the front of a name.

    Args:
        text: The token as typed.
        flags: Active match flags.

    Returns:
        QualifierParse with the residual name, the narrowed flags, and the
        ordinal. If nothing but qualifiers was typed, the original text and
        flags come back untouched. A malformed count ("0th", "12nd") leaves
        the text at the count, with any restriction still applied.
    """
    name, narrowed = _apply_restriction(text, flags)
    name = name.lstrip(" ")

    if not name:
        # Just "toward" or "my" with no object name
        return QualifierParse(text=text, flags=flags)

    if not name[0].isdigit():
        return QualifierParse(text=name, flags=narrowed)

    word, sep, rest = name.partition(" ")
    rest = rest.lstrip(" ")
    if not sep or not rest:
        # Count without a noun
        return QualifierParse(text=name, flags=narrowed)

    count = _parse_count(word)
    if not count:
        return QualifierParse(text=name, flags=narrowed)

    logger.debug("Parsed ordinal %d from %r", count, text)
    return QualifierParse(text=rest, flags=narrowed, ordinal=count)
