"""
Tests for alternate-state snapshots.
"""

from ..engine_core.action import Action
from ..engine_core.state import ZoneType
from ..legality.alternate_state import (
    ENCHANT_CREATURE,
    needs_alternate_view,
    resolve_alternate_view,
)


class TestNeedsAlternateView:
    """Tests for when a snapshot is needed."""

    def test_bestow_from_hand(self, alice, add_card):
        """A bestow cast from hand needs the Aura view."""
        card = add_card("Nyxborn", types={"Creature", "Enchantment"})
        assert needs_alternate_view(card, Action.cast(card, alice, bestow=True))

    def test_normal_cast(self, alice, creature):
        """A normal cast never does."""
        assert not needs_alternate_view(creature, Action.cast(creature, alice))

    def test_already_bestowed_or_on_battlefield(self, alice, add_card):
        """Cards already bestowed or on the battlefield are left alone."""
        bestowed = add_card("Nyxborn", types={"Enchantment"}, bestowed=True)
        assert not needs_alternate_view(bestowed, Action.cast(bestowed, alice, bestow=True))

        on_field = add_card("Nyxborn", zone=ZoneType.BATTLEFIELD, types={"Creature"})
        assert not needs_alternate_view(on_field, Action.cast(on_field, alice, bestow=True))


class TestResolveAlternateView:
    """Tests for the Aura snapshot itself."""

    def test_becomes_aura(self, add_card):
        """The snapshot is an Aura with no creature types."""
        card = add_card(
            "Nyxborn", types={"Creature", "Enchantment"}, subtypes={"Spirit"}, keywords=["Flying"]
        )
        view = resolve_alternate_view(card)

        assert not view.is_creature
        assert view.has_type("Enchantment")
        assert view.has_type("Aura")
        assert not view.has_type("Spirit")
        assert view.has_keyword(ENCHANT_CREATURE)
        assert view.has_keyword("Flying")
        assert view.bestowed
        assert view.lki

    def test_original_untouched(self, add_card):
        """Resolving a snapshot never changes the card."""
        card = add_card("Nyxborn", types={"Creature", "Enchantment"}, subtypes={"Spirit"})
        view = resolve_alternate_view(card)
        view.keywords.append("Extra")
        view.svars["Y"] = "1"

        assert card.is_creature
        assert card.subtypes == {"Spirit"}
        assert "Extra" not in card.keywords
        assert ENCHANT_CREATURE not in card.keywords
        assert not card.has_svar("Y")
        assert not card.bestowed

    def test_fresh_copy_each_time(self, add_card):
        """Snapshots are not cached."""
        card = add_card("Nyxborn", types={"Creature", "Enchantment"})
        assert resolve_alternate_view(card) is not resolve_alternate_view(card)
