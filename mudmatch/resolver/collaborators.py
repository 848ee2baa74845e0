"""External collaborators consumed by the matcher.

The matcher doesn't decide who may see, control or reach what, and it
doesn't know how players are looked up or how feedback is delivered.
Those are injected through ``MatchCollaborators``. The defaults here read
everything from a ``WorldGraph``:

- controls: self, owner, or WIZARD
- could_doit: LOCK attribute listing allowed ``#id``s (empty = unlocked)
- nearby: same location or direct containment, LONG_FINGERS reaches anywhere
- can_interact: DARK entities are only matchable by their controllers
- players: exact name/alias lookup, unique-prefix partial lookup
- proxies: attributes named ``GENERIC`#id`` with an integer weight
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Iterator, Protocol, runtime_checkable

from mudmatch.world.graph import WorldGraph

logger = logging.getLogger(__name__)

DBREF_PATTERN = re.compile(r"#(\d+)")
OBJID_PATTERN = re.compile(r"#(\d+)(?::(\d+))?")

PROXY_ATTRIBUTE_PREFIX = "GENERIC`"

# Parent chains deeper than this are treated as cycles
MAX_PARENT_DEPTH = 10


# =============================================================================
# Protocols
# =============================================================================


class InteractionCheck(Protocol):
    def __call__(self, target: int, actor: int | None) -> bool:
        """May ``actor`` perceive/match ``target``?"""
        ...


class ControlCheck(Protocol):
    def __call__(self, actor: int | None, target: int) -> bool:
        """Does ``actor`` control ``target``?"""
        ...


class LockCheck(Protocol):
    def __call__(self, actor: int | None, target: int) -> bool:
        """Does ``actor`` pass ``target``'s basic lock?"""
        ...


class ProximityCheck(Protocol):
    def __call__(self, actor: int | None, target: int) -> bool:
        """Is ``target`` within reach of ``actor``?"""
        ...


class AliasMatcher(Protocol):
    def __call__(self, token: str, alias_list: str) -> bool:
        """Does ``token`` equal one of the ``;``-separated aliases?"""
        ...


class IdentifierParser(Protocol):
    def __call__(self, token: str) -> int | None:
        """Read a token as a literal object identifier, or None."""
        ...


@runtime_checkable
class PlayerDirectory(Protocol):
    """Player-name lookup."""

    def lookup(self, name: str) -> int | None:
        """Exact (case-insensitive) name or alias lookup."""
        ...

    def lookup_partial(self, actor: int | None, name: str) -> list[int]:
        """All players ``actor`` could mean by a partial name."""
        ...


@runtime_checkable
class ProxySource(Protocol):
    """Attribute-keyed references from a container to proxy candidates."""

    def proxies(self, container: int) -> Iterator[tuple[int, int]]:
        """Yield ``(entity_id, weight)`` pairs in attribute order."""
        ...


@runtime_checkable
class Notifier(Protocol):
    """Feedback channel back to the actor."""

    def notify(self, actor: int, message: str) -> None:
        ...


# =============================================================================
# String helpers
# =============================================================================


def check_alias(token: str, alias_list: str) -> bool:
    """Case-insensitive match of ``token`` against a ``;``-separated list.

    Examples:
        >>> check_alias("n", "North;n;no")
        True
        >>> check_alias("nor", "North;n;no")
        False
    """
    wanted = token.strip().lower()
    if not wanted:
        return False
    return any(alias.strip().lower() == wanted for alias in alias_list.split(";"))


def string_match(name: str, sub: str) -> bool:
    """True if ``sub`` is a case-insensitive prefix of any word in ``name``.

    Examples:
        >>> string_match("Big Red Ball", "red b")
        True
        >>> string_match("Big Red Ball", "ed")
        False
    """
    if not sub:
        return False
    src = name.lower()
    sub = sub.lower()
    i, n = 0, len(src)
    while i < n:
        if src.startswith(sub, i):
            return True
        while i < n and src[i].isalnum():
            i += 1
        while i < n and not src[i].isalnum():
            i += 1
    return False


def parse_dbref(text: str) -> int | None:
    """Parse ``#123`` into 123; anything else is None."""
    m = DBREF_PATTERN.fullmatch(text.strip())
    return int(m.group(1)) if m else None


def parse_weight(text: str) -> int:
    """Parse a leading integer; non-numbers weigh 0."""
    m = re.match(r"\s*([+-]?\d+)", text)
    return int(m.group(1)) if m else 0


# =============================================================================
# Default implementations
# =============================================================================


class ObjidParser:
    """Reads ``#id`` and ``#id:stamp`` tokens.

    With a stamp, the id only counts if the entity exists and was
    created at that stamp, so recycled ids don't match stale references.
    """

    def __init__(self, world: WorldGraph) -> None:
        self.world = world

    def __call__(self, token: str) -> int | None:
        m = OBJID_PATTERN.fullmatch(token.strip())
        if not m:
            return None
        entity_id = int(m.group(1))
        stamp = m.group(2)
        if stamp is None:
            return entity_id
        entity = self.world.get(entity_id)
        if entity is None or entity.created != int(stamp):
            return None
        return entity_id


class WorldPermissions:
    """Permission and proximity predicates read from entity flags/attributes."""

    def __init__(self, world: WorldGraph) -> None:
        self.world = world

    def controls(self, actor: int | None, target: int) -> bool:
        who = self.world.get(actor)
        what = self.world.get(target)
        if who is None or what is None:
            return False
        if who.id == what.id or who.has_flag("WIZARD"):
            return True
        return what.owner is not None and what.owner == who.id

    def could_doit(self, actor: int | None, target: int) -> bool:
        what = self.world.get(target)
        if what is None:
            return False
        lock = what.attributes.get("LOCK", "").strip()
        if not lock:
            return True
        allowed = {int(m) for m in re.findall(r"#(\d+)", lock)}
        return actor in allowed

    def nearby(self, actor: int | None, target: int) -> bool:
        who = self.world.get(actor)
        what = self.world.get(target)
        if who is None or what is None:
            return False
        if who.has_flag("LONG_FINGERS"):
            return True
        if who.location == what.id or what.location == who.id:
            return True
        return who.location is not None and who.location == what.location

    def can_interact(self, target: int, actor: int | None) -> bool:
        what = self.world.get(target)
        if what is None:
            return False
        if what.has_flag("DARK"):
            return self.controls(actor, target)
        return True


class WorldPlayerDirectory:
    """Looks players up by name or alias."""

    def __init__(self, world: WorldGraph) -> None:
        self.world = world

    def lookup(self, name: str) -> int | None:
        wanted = name.strip().lower()
        if not wanted:
            return None
        for player_id in self.world.players():
            player = self.world.get(player_id)
            if player is None:
                continue
            if player.name.lower() == wanted:
                return player_id
            if any(alias.lower() == wanted for alias in player.aliases):
                return player_id
        return None

    def lookup_partial(self, actor: int | None, name: str) -> list[int]:
        wanted = name.strip().lower()
        if not wanted:
            return []
        found = []
        for player_id in self.world.players():
            player = self.world.get(player_id)
            if player is not None and player.name.lower().startswith(wanted):
                found.append(player_id)
        return found


class AttributeProxySource:
    """Proxy references stored as ``GENERIC`#id`` attributes.

    The attribute value is the signed weight. Attributes are inherited
    through the parent chain; a child's attribute hides the parent's
    attribute of the same name.
    """

    def __init__(self, world: WorldGraph) -> None:
        self.world = world

    def proxies(self, container: int) -> Iterator[tuple[int, int]]:
        seen: set[str] = set()
        current = self.world.get(container)
        depth = 0
        while current is not None and depth < MAX_PARENT_DEPTH:
            for attr_name, value in current.attributes.items():
                key = attr_name.upper()
                if not key.startswith(PROXY_ATTRIBUTE_PREFIX) or key in seen:
                    continue
                seen.add(key)
                target = parse_dbref(attr_name[len(PROXY_ATTRIBUTE_PREFIX):])
                if target is None:
                    logger.debug("Ignoring malformed proxy attribute %s on #%d", attr_name, current.id)
                    continue
                yield target, parse_weight(value)
            current = self.world.get(current.parent)
            depth += 1


class ListNotifier:
    """Collects notifications in memory."""

    def __init__(self) -> None:
        self.messages: list[tuple[int, str]] = []

    def notify(self, actor: int, message: str) -> None:
        self.messages.append((actor, message))

    def messages_for(self, actor: int) -> list[str]:
        return [msg for who, msg in self.messages if who == actor]


class LoggingNotifier:
    """Writes notifications to the log."""

    def notify(self, actor: int, message: str) -> None:
        logger.info("notify #%d: %s", actor, message)


# =============================================================================
# Bundle
# =============================================================================


def _allow(*_args: object) -> bool:
    return True


@dataclass
class MatchCollaborators:
    """Everything the matcher consults but doesn't own."""

    can_interact: InteractionCheck = field(default=_allow)
    controls: ControlCheck = field(default=_allow)
    could_doit: LockCheck = field(default=_allow)
    nearby: ProximityCheck = field(default=_allow)
    alias_matcher: AliasMatcher = field(default=check_alias)
    identifier_parser: IdentifierParser = field(default=parse_dbref)
    players: PlayerDirectory | None = None
    proxies: ProxySource | None = None

    @classmethod
    def for_world(cls, world: WorldGraph, **overrides: Callable | object) -> MatchCollaborators:
        """Build the default collaborators backed by ``world``.

        Args:
            world: Graph the predicates read.
            **overrides: Replace individual collaborators.
        """
        permissions = WorldPermissions(world)
        defaults = {
            "can_interact": permissions.can_interact,
            "controls": permissions.controls,
            "could_doit": permissions.could_doit,
            "nearby": permissions.nearby,
            "alias_matcher": check_alias,
            "identifier_parser": ObjidParser(world),
            "players": WorldPlayerDirectory(world),
            "proxies": AttributeProxySource(world),
        }
        defaults.update(overrides)
        return cls(**defaults)
