"""
Legality Checker - Can this card's action be used right now?

Stages, in order (first failure rejects):
0. Default eligibility: the card is phased in and not being paid as a cost
1. Casting speed, unless a flash grant still needs its targets
2. Timing and activator, unless the action comes from a play effect
3. Zone
4. Aggregate gates (status, presence, life, loyalty, boast, mana, SVar)
5. Per-turn and per-game activation caps

A rejection is an ordinary outcome, not an error. Only expression
failures (a cap or operand that cannot be evaluated) raise.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from ..engine_core.action import Action
from ..engine_core.expression import ExpressionError, ExpressionEvaluator
from ..engine_core.interfaces import ExpressionSurface
from ..engine_core.state import Card, GameState
from ..restriction_schema.restriction_set import RestrictionSet
from .activator import check_activator_restrictions
from .context import EvaluationContext
from .limits import check_activation_limits
from .other import check_other_restrictions, first_failing_gate
from .timing import check_casting_speed, check_timing_restrictions
from .zone import check_zone_restrictions

logger = logging.getLogger(__name__)

PLAY_EFFECT_SVAR = "IsCastFromPlayEffect"

STAGES = ["default", "casting_speed", "timing", "activator", "zone", "other", "limits"]


def check_default_eligibility(card: Card) -> bool:
    """Phased-out cards and cards being paid as a cost can do nothing."""
    return not (card.phased_out or card.used_to_pay)


def is_play_effect(action: Action) -> bool:
    """Actions granted by a play effect skip timing and activator checks."""
    return action.has_svar(PLAY_EFFECT_SVAR)


@dataclass
class LegalityReport:
    """
    Per-stage verdicts for one action.

    A stage maps to None when it was skipped (casting speed under a
    flash grant, timing/activator for play effects), could not run
    because the card was not eligible at all, or could not be evaluated
    after an earlier stage had already failed.
    """
    verdict: bool
    stages: dict[str, bool | None] = field(default_factory=dict)
    failed_stage: str | None = None
    failed_gate: str | None = None
    activator_defaulted: bool = False


@dataclass
class LegalityChecker:
    """
    Evaluates one RestrictionSet against a game state.

    Usage:
        checker = LegalityChecker(restrictions, game_state)
        if checker.can_play(card, action):
            ...
        report = checker.explain(card, action)  # for UI hints
    """
    restrictions: RestrictionSet
    game_state: GameState
    evaluator: ExpressionSurface = field(default_factory=ExpressionEvaluator)

    def context(self, card: Card, action: Action) -> EvaluationContext:
        return EvaluationContext.create(
            self.restrictions, self.game_state, card, action, self.evaluator
        )

    def can_play(self, card: Card, action: Action) -> bool:
        """The full legality check, in stage order."""
        if not check_default_eligibility(card):
            return self._reject(card, action, "default")

        ctx = self.context(card, action)
        game = self.game_state

        if not game.any_with_flash_needs_targeting(action, card, ctx.activator):
            if not check_casting_speed(ctx):
                return self._reject(card, action, "casting_speed")

        if not is_play_effect(action):
            if not check_timing_restrictions(ctx):
                return self._reject(card, action, "timing")
            if not check_activator_restrictions(ctx):
                return self._reject(card, action, "activator")

        if not check_zone_restrictions(ctx):
            return self._reject(card, action, "zone")

        if not check_other_restrictions(ctx):
            return self._reject(card, action, "other")

        if not check_activation_limits(ctx):
            return self._reject(card, action, "limits")

        return True

    def explain(self, card: Card, action: Action) -> LegalityReport:
        """
        Run every stage without stopping and report each verdict.

        The overall verdict always equals can_play(). An ineligible card
        stops the report at stage 0. Past the first failure, a stage whose
        expressions cannot be evaluated is reported as None instead of
        raising, since can_play() never reaches it.
        """
        stages: dict[str, bool | None] = {name: None for name in STAGES}
        stages["default"] = check_default_eligibility(card)
        if not stages["default"]:
            return LegalityReport(verdict=False, stages=stages, failed_stage="default")

        ctx = self.context(card, action)
        failed_gate = None

        def run(name: str, check) -> None:
            failed_before = any(stages[s] is False for s in STAGES)
            try:
                stages[name] = check(ctx)
            except ExpressionError:
                if not failed_before:
                    raise
                logger.debug("%s stage not evaluable after an earlier failure", name)

        def other(ctx: EvaluationContext) -> bool:
            nonlocal failed_gate
            failed_gate = first_failing_gate(ctx)
            return failed_gate is None

        if not self.game_state.any_with_flash_needs_targeting(action, card, ctx.activator):
            run("casting_speed", check_casting_speed)
        if not is_play_effect(action):
            run("timing", check_timing_restrictions)
            run("activator", check_activator_restrictions)
        run("zone", check_zone_restrictions)
        run("other", other)
        run("limits", check_activation_limits)

        failed_stage = next((name for name in STAGES if stages[name] is False), None)
        return LegalityReport(
            verdict=failed_stage is None,
            stages=stages,
            failed_stage=failed_stage,
            failed_gate=failed_gate,
            activator_defaulted=ctx.activator_defaulted,
        )

    # Category predicates, for callers that want one stage only

    def check_zone(self, card: Card, action: Action) -> bool:
        return check_zone_restrictions(self.context(card, action))

    def check_timing(self, card: Card, action: Action) -> bool:
        return check_timing_restrictions(self.context(card, action))

    def check_activator(self, card: Card, action: Action) -> bool:
        return check_activator_restrictions(self.context(card, action))

    def check_other(self, card: Card, action: Action) -> bool:
        return check_other_restrictions(self.context(card, action))

    def check_limits(self, card: Card, action: Action) -> bool:
        return check_activation_limits(self.context(card, action))

    def _reject(self, card: Card, action: Action, stage: str) -> bool:
        logger.debug("%s (%s) rejected at %s stage", card.name, action.action_id, stage)
        return False


def can_play(
    restrictions: RestrictionSet,
    game_state: GameState,
    card: Card,
    action: Action,
) -> bool:
    """
    Convenience function for a single check.

    Creates a LegalityChecker and runs it.
    """
    checker = LegalityChecker(restrictions=restrictions, game_state=game_state)
    return checker.can_play(card, action)
