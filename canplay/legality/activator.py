"""
Activator Evaluator - Is this player allowed to use the action?
"""

from __future__ import annotations

from .context import EvaluationContext


def check_activator_restrictions(ctx: EvaluationContext) -> bool:
    """
    Check the declared activator pattern.

    A spell offered under a "may play" grant to the activator is legal
    for them whatever the pattern says.
    """
    card = ctx.card
    action = ctx.action
    activator = ctx.activator

    if action.is_spell:
        option = card.may_play_option(action.may_play)
        if option is not None and option.player_id == activator.player_id:
            return True

    pattern = ctx.restrictions.activator
    if pattern is None:
        return True

    return ctx.evaluator.is_valid_player(activator, pattern, ctx.expressions())
