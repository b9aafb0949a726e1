"""
Aggregate Evaluator - Every restriction that is not zone, timing or activator.

Each gate is a function of the EvaluationContext returning True when
it passes. check_other_restrictions() runs them in order and stops at
the first failure; GATES keeps that order for diagnostics.
"""

from __future__ import annotations
from typing import Callable

from ..engine_core.state import ZoneType
from ..restriction_schema.restriction_set import LifeTotalSource, StatusGate
from .context import EvaluationContext

INSTANT_SPEED_LOYALTY = "CARDNAME's loyalty abilities can be activated at instant speed."
TWICE_EACH_TURN_LOYALTY = (
    "CARDNAME's loyalty abilities can be activated twice each turn rather than only once"
)
MAY_ACTIVATE_LOYALTY_ONCE = "May activate CARDNAME's loyalty abilities once"
BOAST_TWICE = (
    "Creatures you control can boast twice during each of your turns rather than once."
)

LEGENDARY_SORCERY_SUPPORT = "Creature.Legendary,Planeswalker.Legendary"


def game_type_gate(ctx: EvaluationContext) -> bool:
    game_types = ctx.restrictions.game_types
    return not game_types or ctx.game_state.game_type in game_types


def legendary_sorcery_gate(ctx: EvaluationContext) -> bool:
    """A legendary sorcery needs a legendary creature or planeswalker."""
    card = ctx.card
    if not (card.is_sorcery and card.is_legendary):
        return True
    controller = ctx.game_state.get_player(card.controller_id) or ctx.activator
    battlefield = ctx.game_state.cards_in(ZoneType.BATTLEFIELD, ctx.activator)
    support = ctx.evaluator.valid_cards(
        battlefield,
        LEGENDARY_SORCERY_SUPPORT,
        ctx.expressions(activator=controller),
    )
    return len(support) > 0


def aftermath_gate(ctx: EvaluationContext) -> bool:
    """Aftermath halves are only cast from the graveyard."""
    if not ctx.action.aftermath:
        return True
    return ctx.card.is_in_zone(ZoneType.GRAVEYARD)


def hand_size_gate(ctx: EvaluationContext) -> bool:
    required = ctx.restrictions.cards_in_hand
    if required is None:
        return True
    return len(ctx.game_state.cards_in(ZoneType.HAND, ctx.activator)) == required


def chosen_color_gate(ctx: EvaluationContext) -> bool:
    color = ctx.restrictions.color_to_check
    if color is None:
        return True
    return ctx.host.has_chosen_color(color)


def status_gates(ctx: EvaluationContext) -> bool:
    """Hellbent, threshold, metalcraft, delirium, desert, blessing."""
    game = ctx.game_state
    activator = ctx.activator
    checks = {
        StatusGate.HELLBENT: game.has_hellbent,
        StatusGate.THRESHOLD: game.has_threshold,
        StatusGate.METALCRAFT: game.has_metalcraft,
        StatusGate.DELIRIUM: game.has_delirium,
        StatusGate.DESERT: game.has_desert,
        StatusGate.BLESSING: game.has_blessing,
    }
    for gate, check in checks.items():
        if ctx.restrictions.requires(gate) and not check(activator):
            return False
    return True


def surge_gate(ctx: EvaluationContext) -> bool:
    if not ctx.action.surged:
        return True
    return ctx.game_state.has_surge(ctx.activator)


def spectacle_gate(ctx: EvaluationContext) -> bool:
    if not ctx.action.spectacle:
        return True
    return ctx.game_state.opponent_lost_life_this_turn(ctx.activator) > 0


def prowl_gate(ctx: EvaluationContext) -> bool:
    """Legal if the activator has prowl for any of the card's creature types."""
    if not ctx.action.prowl:
        return True
    return any(ctx.activator.has_prowl(t) for t in ctx.card.creature_types)


def presence_gate(ctx: EvaluationContext) -> bool:
    """Count matching cards and compare the count."""
    restrictions = ctx.restrictions
    if restrictions.is_present is None:
        return True

    if restrictions.present_defined is not None:
        cards = ctx.evaluator.defined_cards(
            restrictions.present_defined, ctx.expressions(source=ctx.host)
        )
    else:
        cards = ctx.game_state.cards_in(restrictions.present_zone)

    matching = ctx.evaluator.valid_cards(cards, restrictions.is_present, ctx.expressions())
    right = ctx.evaluator.calculate_amount(
        restrictions.present_compare.operand, ctx.expressions()
    )
    return restrictions.present_compare.holds(len(matching), right)


def life_total_gate(ctx: EvaluationContext) -> bool:
    restrictions = ctx.restrictions
    if restrictions.life_total is None:
        return True

    if restrictions.life_total == LifeTotalSource.OPPONENT_SMALLEST:
        life = ctx.game_state.opponents_smallest_life_total(ctx.activator)
    else:
        life = ctx.activator.life

    right = ctx.evaluator.calculate_amount(
        restrictions.life_amount.operand, ctx.expressions(source=ctx.host)
    )
    return restrictions.life_amount.holds(life, right)


def loyalty_gate(ctx: EvaluationContext) -> bool:
    """
    Loyalty abilities: sorcery speed unless granted otherwise, and once
    per turn plus any extra activations granted by keywords.
    """
    if not ctx.action.pw_ability:
        return True
    card = ctx.card

    if not card.has_keyword(INSTANT_SPEED_LOYALTY) and not ctx.game_state.can_cast_sorcery(
        ctx.activator
    ):
        return False

    ceiling = 1
    if card.has_keyword(TWICE_EACH_TURN_LOYALTY):
        ceiling += 1
    ceiling += card.keyword_count(MAY_ACTIVATE_LOYALTY_ONCE)

    return card.planeswalker_activations < ceiling


def boast_gate(ctx: EvaluationContext) -> bool:
    if not ctx.action.boast:
        return True
    limit = 2 if ctx.activator.has_keyword(BOAST_TWICE) else 1
    return ctx.action.activations_this_turn < limit


def mana_reentrancy_gate(ctx: EvaluationContext) -> bool:
    """A mana ability cannot be activated while paying its own cost."""
    if not ctx.action.mana_ability:
        return True
    return not any(
        entry.ability is ctx.action for entry in ctx.game_state.cost_payment_stack
    )


def svar_gate(ctx: EvaluationContext) -> bool:
    """
    Compare an SVar against an operand, once for the card and once for
    the action's host. Both must pass; they can differ for copies and
    animated cards.
    """
    restrictions = ctx.restrictions
    if restrictions.svar_to_check is None or restrictions.svar_compare is None:
        return True
    comparison = restrictions.svar_compare

    for source in (ctx.card, ctx.host):
        expressions = ctx.expressions(source=source)
        left = ctx.evaluator.calculate_amount(restrictions.svar_to_check, expressions)
        right = ctx.evaluator.calculate_amount(comparison.operand, expressions)
        if not comparison.holds(left, right):
            return False
    return True


GATES: list[tuple[str, Callable[[EvaluationContext], bool]]] = [
    ("game_type", game_type_gate),
    ("legendary_sorcery", legendary_sorcery_gate),
    ("aftermath", aftermath_gate),
    ("hand_size", hand_size_gate),
    ("chosen_color", chosen_color_gate),
    ("status", status_gates),
    ("surge", surge_gate),
    ("spectacle", spectacle_gate),
    ("prowl", prowl_gate),
    ("presence", presence_gate),
    ("life_total", life_total_gate),
    ("loyalty", loyalty_gate),
    ("boast", boast_gate),
    ("mana_reentrancy", mana_reentrancy_gate),
    ("svar", svar_gate),
]


def first_failing_gate(ctx: EvaluationContext) -> str | None:
    """Name of the first gate that fails, or None if all pass."""
    for name, gate in GATES:
        if not gate(ctx):
            return name
    return None


def check_other_restrictions(ctx: EvaluationContext) -> bool:
    """Check every aggregate gate, stopping at the first failure."""
    return first_failing_gate(ctx) is None
