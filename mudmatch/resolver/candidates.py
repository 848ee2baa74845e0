"""Candidate enumeration.

Produces the groups of candidates to scan, in a fixed priority:

1. the root's contents, then the root's proxy candidates
2. the root's location's contents, then that location's proxies
3. exits: zone master room, master room, then the location's own
4. the root's location itself
5. exits of the root, when the root is a room ("carried" exits)

Groups are produced lazily so nothing is read from the graph after
the scan terminates.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Sequence

from mudmatch.resolver.collaborators import ProxySource
from mudmatch.resolver.context import ResolutionContext
from mudmatch.resolver.flags import MatchFlag
from mudmatch.world.graph import WorldGraph
from mudmatch.world.schemas import EntityType


class GroupKind(str, Enum):
    """Where a group of candidates came from."""

    ROOT_CONTENTS = "root_contents"
    ROOT_PROXIES = "root_proxies"
    NEIGHBOR_CONTENTS = "neighbor_contents"
    NEIGHBOR_PROXIES = "neighbor_proxies"
    ZONE_EXITS = "zone_exits"
    GLOBAL_EXITS = "global_exits"
    LOCATION_EXITS = "location_exits"
    CONTAINER = "container"
    CARRIED_EXITS = "carried_exits"


@dataclass(frozen=True)
class CandidateGroup:
    """An ordered run of candidate ids scanned as one unit."""

    kind: GroupKind
    members: Sequence[int]


def proxy_candidates(
    world: WorldGraph,
    proxies: ProxySource | None,
    container: int,
) -> list[int]:
    """Proxy candidates of a container that may take part in matching.

    Only positive-weight references to existing GENERIC entities count.
    """
    if proxies is None:
        return []
    members = []
    for entity_id, weight in proxies.proxies(container):
        if weight <= 0:
            continue
        entity = world.get(entity_id)
        if entity is None or not entity.is_generic:
            continue
        members.append(entity_id)
    return members


def enumerate_groups(
    ctx: ResolutionContext,
    world: WorldGraph,
    proxies: ProxySource | None = None,
    master_room: int | None = None,
) -> Iterator[CandidateGroup]:
    """Yield candidate groups for ``ctx`` in priority order.

    Flags are read as each group comes up, so the generator must be
    consumed after qualifier parsing has narrowed them.
    """
    root = ctx.root
    loc = ctx.location
    loc_entity = world.get(loc)
    exits_allowed = ctx.type_admits(EntityType.EXIT) or not ctx.has(MatchFlag.TYPE)
    remote_blocked = ctx.has(MatchFlag.NEAR | MatchFlag.CONTENTS)

    if ctx.root_valid and ctx.has(MatchFlag.POSSESSION | MatchFlag.REMOTE_CONTENTS):
        yield CandidateGroup(GroupKind.ROOT_CONTENTS, world.contents(root))
        yield CandidateGroup(GroupKind.ROOT_PROXIES, proxy_candidates(world, proxies, root))

    if (
        loc_entity is not None
        and ctx.has(MatchFlag.NEIGHBOR)
        and not ctx.has(MatchFlag.CONTENTS)
        and loc != root
    ):
        yield CandidateGroup(GroupKind.NEIGHBOR_CONTENTS, world.contents(loc))
        yield CandidateGroup(GroupKind.NEIGHBOR_PROXIES, proxy_candidates(world, proxies, loc))

    if exits_allowed and loc_entity is not None and loc_entity.is_room and ctx.has(MatchFlag.EXIT):
        if ctx.has(MatchFlag.REMOTES) and not remote_blocked:
            zone = world.get(loc_entity.zone)
            if zone is not None and zone.is_room:
                yield CandidateGroup(GroupKind.ZONE_EXITS, world.exits(zone.id))
        if ctx.has(MatchFlag.GLOBAL) and not remote_blocked and world.is_valid(master_room):
            yield CandidateGroup(GroupKind.GLOBAL_EXITS, world.exits(master_room))
        yield CandidateGroup(GroupKind.LOCATION_EXITS, world.exits(loc))

    if ctx.has(MatchFlag.CONTAINER) and not ctx.has(MatchFlag.CONTENTS) and ctx.root_valid:
        yield CandidateGroup(GroupKind.CONTAINER, [loc] if loc is not None else [])

    if exits_allowed and ctx.has(MatchFlag.CARRIED_EXIT) and ctx.root_valid:
        root_entity = world.get(root)
        if (
            root_entity is not None
            and root_entity.is_room
            and (loc != root or not ctx.has(MatchFlag.EXIT))
        ):
            yield CandidateGroup(GroupKind.CARRIED_EXITS, world.exits(root))
