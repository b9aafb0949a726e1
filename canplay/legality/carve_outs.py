"""
Carve-outs - Narrow rules exceptions to the zone checks.

Each exception is a named predicate so it can be tested (and one day
removed) on its own.
"""

from __future__ import annotations

from ..engine_core.action import Action
from ..engine_core.state import ZoneType
from ..restriction_schema.restriction_set import RestrictionSet

HIDDEN_AGENDA = "HiddenAgenda"


def is_hidden_agenda_reveal(card_zone: ZoneType | None, action: Action) -> bool:
    """A conspiracy with hidden agenda may be revealed from the command zone at any time."""
    return card_zone == ZoneType.COMMAND and action.has_param(HIDDEN_AGENDA)


def is_aftermath_graveyard_cast(card_zone: ZoneType | None, action: Action) -> bool:
    """
    Aftermath halves are cast from the graveyard.

    A grant that does not itself allow casting from the graveyard is
    still enough for an aftermath half that is already there.
    """
    return card_zone == ZoneType.GRAVEYARD and action.aftermath


def is_aftermath_zone_mismatch(restrictions: RestrictionSet, action: Action) -> bool:
    """An aftermath half with a resolved printing may only be cast from the graveyard."""
    return (
        restrictions.zone != ZoneType.GRAVEYARD
        and action.aftermath
        and action.card_state is not None
    )
