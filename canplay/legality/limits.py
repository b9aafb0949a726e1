"""
Activation Limits - Per-turn and per-game caps.

Cap expressions are resolved on every check (they may depend on the
board) and the resolved value is cached on the action's counters.
A cap of -1 means unlimited.
"""

from __future__ import annotations

from .context import EvaluationContext

UNLIMITED = -1


def _under_cap(count: int, cap: int) -> bool:
    return cap == UNLIMITED or count < cap


def check_activation_limits(ctx: EvaluationContext) -> bool:
    """Check the per-turn cap, then the per-game cap."""
    restrictions = ctx.restrictions
    counters = ctx.action.counters

    if restrictions.limit_to_check is not None:
        counters.activation_limit = ctx.evaluator.calculate_amount(
            restrictions.limit_to_check, ctx.expressions()
        )
        if not _under_cap(counters.activations_this_turn, counters.activation_limit):
            return False

    if restrictions.game_limit_to_check is not None:
        counters.game_activation_limit = ctx.evaluator.calculate_amount(
            restrictions.game_limit_to_check, ctx.expressions()
        )
        if not _under_cap(counters.activations_this_game, counters.game_activation_limit):
            return False

    return True
