"""
Alternate-State Resolver - "As if already transformed" card snapshots.

Some casts present the card differently from how it sits in its zone.
A bestowed creature card is cast as an Aura, so filters that look at
the card ("Affected$ Aura", "Enchantment.YouOwn") must see the Aura.

resolve_alternate_view() returns an independent copy; the original
card is never touched and the copy is never cached.
"""

from __future__ import annotations
from dataclasses import replace

from ..engine_core.action import Action
from ..engine_core.state import Card, ZoneType

ENCHANT_CREATURE = "Enchant creature"


def needs_alternate_view(card: Card, action: Action) -> bool:
    """
    True if the action has to be checked against a transformed copy.

    Only bestow casts qualify, and only while the card is neither
    bestowed already nor on the battlefield.
    """
    if not (action.is_spell and action.bestow):
        return False
    if card.is_in_zone(ZoneType.BATTLEFIELD):
        return False
    return not card.bestowed


def resolve_alternate_view(card: Card) -> Card:
    """
    Snapshot of `card` as a bestowed Aura.

    The copy loses the creature type and its creature subtypes, becomes
    an Aura enchantment with "Enchant creature", and is marked as a
    last-known-information copy.
    """
    keywords = list(card.keywords)
    if ENCHANT_CREATURE not in keywords:
        keywords.append(ENCHANT_CREATURE)

    return replace(
        card,
        types=(card.types - {"Creature"}) | {"Enchantment"},
        subtypes=(card.subtypes - card.creature_types) | {"Aura"},
        keywords=keywords,
        chosen_colors=list(card.chosen_colors),
        svars=dict(card.svars),
        may_play=list(card.may_play),
        remembered=list(card.remembered),
        imprinted=list(card.imprinted),
        bestowed=True,
        lki=True,
    )
