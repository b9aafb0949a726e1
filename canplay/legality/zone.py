"""
Zone Evaluator - Is the card somewhere it may be used from?

Most spells implicitly assume "castable from hand". Casting from any
other zone needs a "may play" grant, and the grant is checked
narrowly so it cannot legalize unrelated actions.
"""

from __future__ import annotations

from ..engine_core.state import ZoneType
from .alternate_state import needs_alternate_view, resolve_alternate_view
from .carve_outs import (
    is_aftermath_graveyard_cast,
    is_aftermath_zone_mismatch,
    is_hidden_agenda_reveal,
)
from .context import EvaluationContext


def check_zone_restrictions(ctx: EvaluationContext) -> bool:
    """
    Check the zone the card was last seen in.

    Order:
    1. Bestow casts are checked against an Aura snapshot of the card
    2. Card already in the required zone (or no zone required): legal
    3. Otherwise only a spell cast from outside the hand-default,
       backed by a grant to the activator, can still be legal
    """
    card = ctx.card
    action = ctx.action
    activator = ctx.activator
    required = ctx.restrictions.zone
    card_zone = card.zone

    if action.is_spell and action.bestow:
        # Already on the battlefield: nothing left to cast
        if card.is_in_zone(ZoneType.BATTLEFIELD):
            return False
        if needs_alternate_view(card, action):
            ctx.view = resolve_alternate_view(card)

    if required is None or card_zone == required:
        return True

    if is_hidden_agenda_reveal(card_zone, action):
        return True

    if (
        not action.is_spell
        or card_zone == ZoneType.BATTLEFIELD
        or required != ZoneType.HAND
    ):
        return False

    if card_zone == ZoneType.STACK:
        return False

    option = card.may_play_option(action.may_play)
    if option is None or option.player_id != activator.player_id:
        return False

    # Casting from hand never needs permission; anywhere else the grant
    # (or another grant to the same player) has to allow the zone.
    if not option.grants_zone_permissions and card_zone is not None and card_zone != ZoneType.HAND:
        has_other_grantor = any(
            o.grants_zone_permissions for o in card.may_play_for(activator.player_id)
        )
        if is_aftermath_graveyard_cast(card_zone, action):
            return True
        if not has_other_grantor:
            return False

    grant_host = ctx.game_state.get_card(option.host_card_id)
    filters = ctx.expressions(source=grant_host or card)

    if option.affected is not None:
        if not ctx.evaluator.is_valid_card(ctx.subject, option.affected, filters):
            return False

    if option.valid_sa is not None:
        if not ctx.evaluator.is_valid_action(action, option.valid_sa, filters):
            return False

    # TODO: generalize once another alternate cast needs a zone of its own
    if is_aftermath_zone_mismatch(ctx.restrictions, action):
        return False

    return True
