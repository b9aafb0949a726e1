"""
Timing Evaluator - Whose turn, which phase, and at what speed.
"""

from __future__ import annotations

from .context import EvaluationContext

FLASH = "Flash"


def check_timing_restrictions(ctx: EvaluationContext) -> bool:
    """Check the turn-owner and phase restrictions."""
    restrictions = ctx.restrictions
    game = ctx.game_state
    activator = ctx.activator

    if restrictions.player_turn and not game.is_player_turn(activator):
        return False

    if restrictions.opponent_turn and not game.is_opponent(activator, game.turn_player):
        return False

    if restrictions.phases and game.phase not in restrictions.phases:
        return False

    return True


def check_casting_speed(ctx: EvaluationContext) -> bool:
    """
    Check normal casting speed.

    Instants, cards with flash and anything marked InstantSpeed may be
    used at any time. Other spells, and abilities marked SorcerySpeed,
    need the activator to be able to act at sorcery speed.
    """
    restrictions = ctx.restrictions
    card = ctx.card

    if restrictions.instant_speed:
        return True

    if ctx.action.is_spell:
        if card.is_instant or card.has_keyword(FLASH):
            return True
    elif not restrictions.sorcery_speed:
        return True

    return ctx.game_state.can_cast_sorcery(ctx.activator)
