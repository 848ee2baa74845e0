"""Per-candidate match evaluation."""

from __future__ import annotations

from mudmatch.observability.events import CandidateEvent
from mudmatch.observability.hooks import NullHook, ResolutionHook
from mudmatch.resolver.arbitration import Arbiter
from mudmatch.resolver.collaborators import MatchCollaborators, string_match
from mudmatch.resolver.context import ResolutionContext, ScanSignal
from mudmatch.resolver.flags import MatchFlag
from mudmatch.world.graph import WorldGraph
from mudmatch.world.schemas import Entity


class MatchEvaluator:
    """Decides whether a single candidate matches the token.

    Checks, in order: type filter, literal identifier, interaction
    permission, exact name/alias, partial name. A match is handed to
    the Arbiter; anything else just moves on to the next candidate.
    """

    def __init__(
        self,
        world: WorldGraph,
        collaborators: MatchCollaborators,
        arbiter: Arbiter,
        hook: ResolutionHook | None = None,
    ) -> None:
        self.world = world
        self.collaborators = collaborators
        self.arbiter = arbiter
        self.hook = hook or NullHook()

    def is_exact(self, name: str, entity: Entity) -> bool:
        """Exact match by alias, or by full name for non-exits."""
        if entity.is_exit:
            alias_matcher = self.collaborators.alias_matcher
            if alias_matcher(name, entity.name):
                return True
            return bool(entity.aliases) and alias_matcher(name, ";".join(entity.aliases))

        wanted = name.lower()
        if any(alias.lower() == wanted for alias in entity.aliases):
            return True
        return entity.name.lower() == wanted

    def evaluate(self, ctx: ResolutionContext, candidate: int) -> ScanSignal:
        """Evaluate one candidate against ``ctx``.

        Returns:
            STOP_GROUP for a dangling reference (the rest of that list
            can't be trusted), TERMINATE once the ordinal target is hit,
            CONTINUE otherwise.
        """
        if ctx.done:
            return ScanSignal.TERMINATE

        entity = self.world.get(candidate)
        if entity is None:
            return ScanSignal.STOP_GROUP

        ctx.match = candidate

        if not ctx.type_admits(entity.type) and ctx.has(MatchFlag.TYPE):
            return ScanSignal.CONTINUE

        if candidate == ctx.absolute:
            return self._record(ctx, full=True)

        if not self.collaborators.can_interact(candidate, ctx.actor):
            return ScanSignal.CONTINUE

        if self.is_exact(ctx.name, entity):
            return self._record(ctx, full=True)

        if (
            not ctx.has(MatchFlag.EXACT)
            and (not ctx.exact or ctx.best_match is None)
            and not entity.is_exit
            and string_match(entity.name, ctx.name)
        ):
            return self._record(ctx, full=False)

        return ScanSignal.CONTINUE

    def _record(self, ctx: ResolutionContext, full: bool) -> ScanSignal:
        candidate = ctx.match
        signal = self.arbiter.record(ctx, full)
        self.hook.on_candidate(
            CandidateEvent(
                entity_id=candidate,
                full=full,
                accepted=ctx.best_match == candidate,
                count=ctx.count,
            )
        )
        return signal
