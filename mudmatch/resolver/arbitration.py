"""Arbitration between matching candidates.

Every candidate the evaluator accepts is handed to ``Arbiter.record``,
which keeps the best match so far:

- without an ordinal, exact matches beat partial ones, ties are broken
  by type and (optionally) lock, and the counters decide ambiguity
- with an ordinal, candidates are simply counted and the Nth one wins
"""

from __future__ import annotations

import logging

from mudmatch.resolver.collaborators import MatchCollaborators
from mudmatch.resolver.context import MatchOutcome, ResolutionContext, ScanSignal
from mudmatch.resolver.flags import MatchFlag
from mudmatch.world.graph import WorldGraph

logger = logging.getLogger(__name__)


class Arbiter:
    """Keeps the best match of a resolution call."""

    def __init__(self, world: WorldGraph, collaborators: MatchCollaborators) -> None:
        self.world = world
        self.collaborators = collaborators

    def _is_right_type(self, ctx: ResolutionContext, entity_id: int) -> bool:
        entity = self.world.get(entity_id)
        return (
            ctx.type_filter is not None
            and entity is not None
            and bool(entity.type & ctx.type_filter)
        )

    def choose_best(
        self,
        ctx: ResolutionContext,
        current: int | None,
        candidate: int,
    ) -> int:
        """Pick between the best match so far and a new candidate.

        The one that alone has the requested type wins; failing that, with
        CHECK_KEYS, the one whose lock alone the actor passes; failing that,
        the newer candidate.
        """
        if current is None or not self.world.is_valid(current):
            return candidate

        if ctx.type_filter is not None:
            current_ok = self._is_right_type(ctx, current)
            candidate_ok = self._is_right_type(ctx, candidate)
            if current_ok and not candidate_ok:
                return current
            if candidate_ok and not current_ok:
                return candidate

        if ctx.has(MatchFlag.CHECK_KEYS):
            could_doit = self.collaborators.could_doit
            current_key = could_doit(ctx.actor, current)
            candidate_key = could_doit(ctx.actor, candidate)
            if candidate_key and not current_key:
                return candidate
            if current_key and not candidate_key:
                return current

        return candidate

    def record(self, ctx: ResolutionContext, full: bool) -> ScanSignal:
        """Record ``ctx.match`` as a full (exact) or partial match.

        Returns:
            TERMINATE once the ordinal target is reached, CONTINUE otherwise.
        """
        candidate = ctx.match
        if candidate is None:
            return ScanSignal.CONTINUE

        if ctx.has(MatchFlag.CONTROL) and not self.collaborators.controls(ctx.actor, candidate):
            ctx.permission_denied = True
            return ScanSignal.CONTINUE

        if ctx.ordinal:
            ctx.count += 1
            if ctx.count == ctx.ordinal:
                ctx.best_match = candidate
                ctx.done = True
                return ScanSignal.TERMINATE
            return ScanSignal.CONTINUE

        ctx.best_match = self.choose_best(ctx, ctx.best_match, candidate)
        if ctx.best_match != candidate:
            # The earlier match won on type or lock
            return ScanSignal.CONTINUE

        if full:
            if ctx.exact:
                ctx.count += 1
            else:
                # First exact match; earlier partial matches no longer count
                ctx.exact = True
                ctx.count = 1
                ctx.right_type = 0
        else:
            ctx.count += 1

        if self._is_right_type(ctx, ctx.best_match):
            ctx.right_type += 1
        return ScanSignal.CONTINUE

    def reduce(self, ctx: ResolutionContext) -> tuple[MatchOutcome, int | None, MatchOutcome]:
        """Reduce the final state to ``(outcome, entity_id, reason)``."""
        best = ctx.best_match if self.world.is_valid(ctx.best_match) else None

        if ctx.ordinal:
            outcome = MatchOutcome.FOUND if best is not None else MatchOutcome.NOT_FOUND
        elif ctx.count > 1 and ctx.right_type != 1 and not ctx.has(MatchFlag.LAST):
            outcome = MatchOutcome.AMBIGUOUS
        elif best is not None:
            outcome = MatchOutcome.FOUND
        elif ctx.ambiguous_seed:
            outcome = MatchOutcome.AMBIGUOUS
        else:
            outcome = MatchOutcome.NOT_FOUND

        entity_id = best if outcome == MatchOutcome.FOUND else None
        reason = outcome
        if outcome == MatchOutcome.NOT_FOUND and ctx.permission_denied:
            reason = MatchOutcome.PERMISSION_DENIED

        logger.debug(
            "Reduced %r: %s (count=%d right_type=%d exact=%s)",
            ctx.name,
            reason.value,
            ctx.count,
            ctx.right_type,
            ctx.exact,
        )
        return outcome, entity_id, reason
