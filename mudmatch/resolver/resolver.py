"""EntityResolver: turns what an actor typed into an entity.

    token --> "me" | "here" | "#dbref" | "*player" | adj-phrase name | name

1. Fixed tokens are tried first and return immediately:
   "me", "here", player names, literal identifiers.
2. With ENGLISH, qualifiers are stripped ("my 2nd flower").
3. Candidate groups are scanned (inventory, neighbors, exits,
   container, carried exits) and every match goes to arbitration.
4. The arbitration state is reduced to one outcome:
   a. a single exact match, or no exact but a single partial: found
   b. several equally good matches: ambiguous
   c. nothing: not found (permission denied if a control check failed)
"""

from __future__ import annotations

import logging
import time
from typing import Union

from mudmatch.config import settings
from mudmatch.observability.events import (
    GroupScanEvent,
    QualifierEvent,
    ResolutionEndEvent,
    ResolutionStartEvent,
    ShortCircuitEvent,
)
from mudmatch.observability.hooks import NullHook, ResolutionHook
from mudmatch.resolver.arbitration import Arbiter
from mudmatch.resolver.candidates import enumerate_groups
from mudmatch.resolver.collaborators import LoggingNotifier, MatchCollaborators, Notifier
from mudmatch.resolver.context import (
    MatchOutcome,
    ResolutionContext,
    ResolutionResult,
    ScanSignal,
)
from mudmatch.resolver.evaluator import MatchEvaluator
from mudmatch.resolver.flags import (
    PRESET_FLAGS,
    FlagSpec,
    MatchFlag,
    MatchPreset,
    expand_flags,
)
from mudmatch.resolver.qualifiers import parse_qualifiers
from mudmatch.world.graph import WorldGraph
from mudmatch.world.schemas import EntityType

logger = logging.getLogger(__name__)

# Feedback sent by the noisy entry points
MSG_AMBIGUOUS = "I don't know which one you mean!"
MSG_PERMISSION_DENIED = "Permission denied."
MSG_NOT_FOUND = "I can't see that here."

TypeSpec = Union[EntityType, str, None]


class EntityResolver:
    """Resolves tokens typed by an actor to entity ids.

    The resolver holds no per-call state; every call builds its own
    ResolutionContext, so one instance can serve any number of actors.

    Usage:
        resolver = EntityResolver(world)
        result = resolver.resolve(actor_id, "2nd sword", "thing", "nearby")
        if result.found:
            entity = world.get(result.entity_id)
        elif result.ambiguous:
            ...
    """

    def __init__(
        self,
        world: WorldGraph,
        collaborators: MatchCollaborators | None = None,
        notifier: Notifier | None = None,
        hook: ResolutionHook | None = None,
        master_room: int | None = None,
        lookup_token: str | None = None,
    ) -> None:
        """Initialize EntityResolver.

        Args:
            world: Graph to read.
            collaborators: Predicates and lookups; defaults read ``world``.
            notifier: Feedback channel for the noisy entry points.
            hook: Observability hook.
            master_room: Room whose exits GLOBAL matches. Defaults to the
                world's own master room, then to settings.
            lookup_token: Player sigil. Defaults to settings.
        """
        self.world = world
        self.collaborators = collaborators or MatchCollaborators.for_world(world)
        self.notifier = notifier or LoggingNotifier()
        self.hook = hook or NullHook()
        if master_room is None:
            master_room = getattr(world, "master_room", None)
        self.master_room = settings.master_room if master_room is None else master_room
        self.lookup_token = lookup_token or settings.lookup_token
        self.arbiter = Arbiter(world, self.collaborators)
        self.evaluator = MatchEvaluator(world, self.collaborators, self.arbiter, self.hook)

    # =========================================================================
    # Entry points
    # =========================================================================

    def resolve(
        self,
        actor: int | None,
        token: str,
        type_filter: TypeSpec = None,
        flags: FlagSpec = MatchPreset.EVERYTHING,
    ) -> ResolutionResult:
        """Resolve ``token`` relative to the actor itself.

        Returns:
            ResolutionResult: FOUND with an id, AMBIGUOUS, or NOT_FOUND.
        """
        return self._resolve(actor, actor, token, type_filter, expand_flags(flags))

    def resolve_relative_to(
        self,
        actor: int | None,
        root: int | None,
        token: str,
        type_filter: TypeSpec = None,
        flags: FlagSpec = MatchPreset.EVERYTHING,
    ) -> ResolutionResult:
        """Resolve ``token`` for ``actor`` as seen from ``root``."""
        return self._resolve(actor, root, token, type_filter, expand_flags(flags))

    def resolve_noisy(
        self,
        actor: int | None,
        token: str,
        type_filter: TypeSpec = None,
        flags: FlagSpec = MatchPreset.EVERYTHING,
    ) -> ResolutionResult:
        """Resolve and tell the actor why it failed.

        Ambiguous and permission failures come back as NOT_FOUND; the
        ``reason`` field keeps the distinction.
        """
        result = self._resolve(
            actor, actor, token, type_filter, expand_flags(flags) | MatchFlag.NOISY
        )
        if result.found:
            return result
        return result.model_copy(update={"outcome": MatchOutcome.NOT_FOUND, "entity_id": None})

    def resolve_last(
        self,
        actor: int | None,
        token: str,
        type_filter: TypeSpec = None,
        flags: FlagSpec = MatchPreset.EVERYTHING,
    ) -> ResolutionResult:
        """Resolve, taking the last candidate seen instead of giving up as ambiguous."""
        return self._resolve(
            actor, actor, token, type_filter, expand_flags(flags) | MatchFlag.LAST
        )

    def match_controlled(self, actor: int | None, token: str) -> ResolutionResult:
        """Noisy match of anything the actor can name and controls."""
        return self.resolve_noisy(
            actor, token, None, PRESET_FLAGS[MatchPreset.EVERYTHING] | MatchFlag.CONTROL
        )

    # =========================================================================
    # Resolution
    # =========================================================================

    def _new_context(
        self,
        actor: int | None,
        root: int | None,
        token: str,
        type_filter: EntityType | None,
        flags: MatchFlag,
    ) -> ResolutionContext:
        root_entity = self.world.get(root)
        if root_entity is None:
            location = None
        elif root_entity.is_room:
            location = root
        else:
            location = root_entity.location

        return ResolutionContext(
            actor=actor,
            root=root,
            token=token,
            type_filter=type_filter,
            flags=flags,
            root_valid=root_entity is not None,
            location=location,
            absolute=self.collaborators.identifier_parser(token),
            name=token,
        )

    def _resolve(
        self,
        actor: int | None,
        root: int | None,
        token: str,
        type_filter: TypeSpec,
        flags: MatchFlag,
    ) -> ResolutionResult:
        start = time.perf_counter()
        type_filter = EntityType.parse(type_filter) if type_filter is not None else None
        ctx = self._new_context(actor, root, token, type_filter, flags)

        self.hook.on_resolution_start(
            ResolutionStartEvent(
                actor=actor,
                root=root,
                token=token,
                flags=int(flags),
                type_filter=type_filter.label() if type_filter is not None else None,
            )
        )

        if ctx.has(MatchFlag.NEAR | MatchFlag.CONTENTS) and not ctx.root_valid:
            # Nothing can be near, or inside, an invalid root
            outcome, entity_id, reason = MatchOutcome.NOT_FOUND, None, MatchOutcome.NOT_FOUND
        else:
            entity_id = self._match_fixed_tokens(ctx)
            if entity_id is not None:
                outcome, reason = MatchOutcome.FOUND, MatchOutcome.FOUND
            else:
                self._scan(ctx)
                outcome, entity_id, reason = self.arbiter.reduce(ctx)

        if outcome != MatchOutcome.FOUND and ctx.has(MatchFlag.NOISY):
            self._notify_failure(actor, reason)

        duration_ms = (time.perf_counter() - start) * 1000
        logger.debug("Resolved %r for #%s: %s %s", token, actor, reason.value, entity_id)
        self.hook.on_resolution_end(
            ResolutionEndEvent(
                token=token,
                outcome=outcome.value,
                reason=reason.value,
                entity_id=entity_id,
                duration_ms=duration_ms,
            )
        )
        return ResolutionResult(
            outcome=outcome,
            entity_id=entity_id,
            reason=reason,
            token=token,
            ordinal=ctx.ordinal,
        )

    def _notify_failure(self, actor: int | None, reason: MatchOutcome) -> None:
        if not self.world.is_valid(actor):
            return
        if reason == MatchOutcome.AMBIGUOUS:
            message = MSG_AMBIGUOUS
        elif reason == MatchOutcome.PERMISSION_DENIED:
            message = MSG_PERMISSION_DENIED
        else:
            message = MSG_NOT_FOUND
        self.notifier.notify(actor, message)

    # =========================================================================
    # Fixed tokens
    # =========================================================================

    def _type_ok(self, ctx: ResolutionContext, entity_id: int) -> bool:
        entity = self.world.get(entity_id)
        return entity is not None and (
            ctx.type_admits(entity.type) or not ctx.has(MatchFlag.TYPE)
        )

    def _controls_ok(self, ctx: ResolutionContext, entity_id: int) -> bool:
        return not ctx.has(MatchFlag.CONTROL) or self.collaborators.controls(ctx.actor, entity_id)

    def _contents_ok(self, ctx: ResolutionContext, entity_id: int | None) -> bool:
        if not ctx.has(MatchFlag.CONTENTS):
            return True
        entity = self.world.get(entity_id)
        return entity is not None and entity.location == ctx.root

    def _reachable(self, ctx: ResolutionContext, entity_id: int) -> bool:
        if not ctx.has(MatchFlag.NEAR):
            return True
        return self.collaborators.nearby(ctx.actor, entity_id) or self.collaborators.controls(
            ctx.actor, entity_id
        )

    def _accept_fixed(self, ctx: ResolutionContext, kind: str, entity_id: int) -> int | None:
        """Return ``entity_id`` if the actor may have it, else note the denial."""
        if not self._controls_ok(ctx, entity_id):
            ctx.permission_denied = True
            return None
        logger.debug("Fixed token %s matched #%d", kind, entity_id)
        self.hook.on_short_circuit(ShortCircuitEvent(kind=kind, entity_id=entity_id))
        return entity_id

    def _match_fixed_tokens(self, ctx: ResolutionContext) -> int | None:
        token = ctx.token
        lowered = token.lower()
        root_entity = self.world.get(ctx.root)
        local_only = ctx.has(MatchFlag.CONTENTS)

        if (
            root_entity is not None
            and ctx.has(MatchFlag.ME)
            and not local_only
            and lowered == "me"
            and self._type_ok(ctx, root_entity.id)
        ):
            found = self._accept_fixed(ctx, "me", root_entity.id)
            if found is not None:
                return found

        here = None if root_entity is None or root_entity.is_room else root_entity.location
        if (
            ctx.has(MatchFlag.HERE)
            and not local_only
            and lowered == "here"
            and self.world.is_valid(here)
            and self._type_ok(ctx, here)
        ):
            found = self._accept_fixed(ctx, "here", here)
            if found is not None:
                return found

        wants_player = ctx.has(MatchFlag.PMATCH) or (
            ctx.has(MatchFlag.PLAYER) and token.startswith(self.lookup_token)
        )
        if wants_player and (
            ctx.type_admits(EntityType.PLAYER) or not ctx.has(MatchFlag.TYPE)
        ):
            player, ambiguous = self._match_player(ctx, token)
            if self._contents_ok(ctx, player):
                if player is not None:
                    if self._reachable(ctx, player):
                        found = self._accept_fixed(ctx, "player", player)
                        if found is not None:
                            return found
                elif ambiguous:
                    ctx.ambiguous_seed = True

        absolute = ctx.absolute
        if (
            self.world.is_valid(absolute)
            and ctx.has(MatchFlag.ABSOLUTE)
            and self._type_ok(ctx, absolute)
            and self._contents_ok(ctx, absolute)
            and self._reachable(ctx, absolute)
        ):
            found = self._accept_fixed(ctx, "absolute", absolute)
            if found is not None:
                return found

        return None

    def _match_player(self, ctx: ResolutionContext, token: str) -> tuple[int | None, bool]:
        """Look a player up by name, falling back to a partial lookup.

        Returns:
            ``(player_id, ambiguous)``; the flag is set when the partial
            lookup found several players.
        """
        directory = self.collaborators.players
        if directory is None:
            return None, False

        name = token[len(self.lookup_token):] if token.startswith(self.lookup_token) else token
        name = name.lstrip()

        player = directory.lookup(name)
        if player is not None:
            return player, False
        if ctx.has(MatchFlag.EXACT) or not self.world.is_valid(ctx.actor):
            return None, False

        matches = directory.lookup_partial(ctx.actor, name)
        if len(matches) == 1:
            return matches[0], False
        return None, len(matches) > 1

    # =========================================================================
    # Candidate scan
    # =========================================================================

    def _scan(self, ctx: ResolutionContext) -> None:
        if ctx.has(MatchFlag.ENGLISH):
            parsed = parse_qualifiers(ctx.token, ctx.flags)
            ctx.name = parsed.text
            ctx.flags = parsed.flags
            ctx.ordinal = parsed.ordinal
            self.hook.on_qualifier(
                QualifierEvent(
                    original=ctx.token,
                    residual=parsed.text,
                    ordinal=parsed.ordinal,
                    flags=int(parsed.flags),
                )
            )

        groups = enumerate_groups(
            ctx,
            self.world,
            proxies=self.collaborators.proxies,
            master_room=self.master_room,
        )
        for group in groups:
            if ctx.done:
                break
            signal = ScanSignal.CONTINUE
            scanned = 0
            for candidate in group.members:
                scanned += 1
                signal = self.evaluator.evaluate(ctx, candidate)
                if signal is not ScanSignal.CONTINUE:
                    break
            self.hook.on_group_scan(
                GroupScanEvent(
                    group=group.kind.value,
                    scanned=scanned,
                    size=len(group.members),
                    signal=signal.value,
                )
            )
            if signal is ScanSignal.TERMINATE:
                break

