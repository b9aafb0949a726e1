"""
Tests for the expression evaluator.

Tests:
- Comparison operators
- Card filters and player patterns
- Amount expressions and SVars
- Defined card references
"""

import pytest

from ..engine_core.action import Action
from ..engine_core.expression import ExpressionError, calculate_amount, compare
from ..engine_core.interfaces import CardQueries, ExpressionSurface, GameQueries
from ..engine_core.state import ZoneType


class TestCompare:
    """Tests for 2-character comparison operators."""

    @pytest.mark.parametrize(
        "op, left, right, expected",
        [
            ("EQ", 2, 2, True),
            ("EQ", 1, 2, False),
            ("NE", 1, 2, True),
            ("NE", 2, 2, False),
            ("LT", 1, 2, True),
            ("LT", 2, 2, False),
            ("LE", 2, 2, True),
            ("LE", 3, 2, False),
            ("GT", 3, 2, True),
            ("GT", 2, 2, False),
            ("GE", 2, 2, True),
            ("GE", 1, 2, False),
        ],
    )
    def test_operators(self, op, left, right, expected):
        """Each operator is correct, including at equal values."""
        assert compare(left, op, right) is expected

    def test_reads_first_two_characters(self):
        """A full comparison string can be passed as the operator."""
        assert compare(2, "GE2", 2)

    def test_unknown_operator_raises(self):
        """An unknown operator is an expression error."""
        with pytest.raises(ExpressionError):
            compare(1, "XX", 1)


class TestCardFilters:
    """Tests for card filter matching."""

    def test_type_and_controller(self, add_card, evaluator, expr_context):
        """Type plus YouCtrl matches only the activator's cards."""
        mine = add_card("Gravecrawler", zone=ZoneType.BATTLEFIELD, types={"Creature"}, subtypes={"Zombie"})
        theirs = add_card(
            "Walking Corpse", owner="bob", zone=ZoneType.BATTLEFIELD,
            types={"Creature"}, subtypes={"Zombie"},
        )
        ctx = expr_context()

        assert evaluator.is_valid_card(mine, "Creature.Zombie+YouCtrl", ctx)
        assert not evaluator.is_valid_card(theirs, "Creature.Zombie+YouCtrl", ctx)
        assert evaluator.is_valid_card(theirs, "Creature.OppCtrl", ctx)

    def test_alternatives(self, add_card, evaluator, expr_context):
        """Comma-separated alternatives match if any does."""
        walker = add_card("Jace", types={"Planeswalker"}, supertypes={"Legendary"})
        ctx = expr_context()

        assert evaluator.is_valid_card(walker, "Creature.Legendary,Planeswalker.Legendary", ctx)
        assert not evaluator.is_valid_card(walker, "Creature.Legendary", ctx)

    def test_negated_type(self, add_card, evaluator, expr_context):
        """A 'non' prefix negates the following type."""
        land = add_card("Forest", types={"Land"})
        ctx = expr_context()

        assert evaluator.is_valid_card(land, "nonCreature", ctx)
        assert evaluator.is_valid_card(land, "Permanent.nonToken", ctx)

    def test_other_excludes_source(self, add_card, evaluator, expr_context):
        """'Other' never matches the card the filter belongs to."""
        source = add_card("Lord", types={"Creature"})
        other = add_card("Follower", types={"Creature"})
        ctx = expr_context(source=source)

        assert evaluator.valid_cards([source, other], "Creature.Other", ctx) == [other]


class TestPlayerPatterns:
    """Tests for player patterns."""

    def test_you_and_opponent(self, add_card, alice, bob, evaluator, expr_context):
        """'You' and 'Opponent' are relative to the source's controller."""
        card = add_card("Relic")
        ctx = expr_context(source=card)

        assert evaluator.is_valid_player(alice, "You", ctx)
        assert not evaluator.is_valid_player(bob, "You", ctx)
        assert evaluator.is_valid_player(bob, "Opponent", ctx)
        assert evaluator.is_valid_player(bob, "Player", ctx)

    def test_active_player(self, alice, bob, evaluator, expr_context):
        """'Player.Active' is the turn player."""
        ctx = expr_context()
        assert evaluator.is_valid_player(alice, "Player.Active", ctx)
        assert not evaluator.is_valid_player(bob, "Player.Active", ctx)

    def test_unknown_property_raises(self, alice, evaluator, expr_context):
        """Unknown player properties are expression errors."""
        with pytest.raises(ExpressionError):
            evaluator.is_valid_player(alice, "Player.Monarch", expr_context())


class TestAmounts:
    """Tests for amount expressions."""

    def test_literal(self, game, sorcery):
        """Integer literals evaluate to themselves."""
        assert calculate_amount("3", game, sorcery) == 3
        assert calculate_amount("-1", game, sorcery) == -1

    def test_svar_on_card(self, game, add_card):
        """A name resolves through the card's SVars."""
        card = add_card("Scaling Spell", svars={"Y": "Count$CardsInYourHand"})
        add_card("Filler")
        assert calculate_amount("Y", game, card) == 2

    def test_svar_on_action(self, game, sorcery):
        """Action SVars are consulted after the card's."""
        action = Action.cast(sorcery, svars={"Z": "4"})
        assert calculate_amount("Z", game, sorcery, action=action) == 4

    def test_x_paid(self, game, sorcery):
        """X falls back to the announced value."""
        action = Action.cast(sorcery, x_paid=5)
        assert calculate_amount("X", game, sorcery, action=action) == 5
        assert calculate_amount("Count$xPaid", game, sorcery, action=action) == 5

    def test_x_unpaid(self, game, sorcery):
        """Without an announced X, both spellings read 0."""
        action = Action.cast(sorcery)
        assert calculate_amount("X", game, sorcery, action=action) == 0
        assert calculate_amount("Count$xPaid", game, sorcery, action=action) == 0
        assert calculate_amount("X", game, sorcery) == 0

    def test_count_valid(self, game, add_card, alice):
        """Count$Valid counts matching battlefield cards."""
        source = add_card("Counter", zone=ZoneType.BATTLEFIELD, types={"Artifact"})
        add_card("Bear", zone=ZoneType.BATTLEFIELD, types={"Creature"})
        add_card("Wolf", owner="bob", zone=ZoneType.BATTLEFIELD, types={"Creature"})

        assert calculate_amount("Count$Valid Creature", game, source) == 2
        assert calculate_amount("Count$Valid Creature.YouCtrl", game, source, activator=alice) == 1

    def test_life_counts(self, game, sorcery, bob):
        """Life total counts read the controller and opponents."""
        bob.life = 7
        assert calculate_amount("Count$YourLifeTotal", game, sorcery) == 20
        assert calculate_amount("Count$OppSmallestLifeTotal", game, sorcery) == 7

    def test_unknown_expression_raises(self, game, sorcery):
        """Unknown names are expression errors, not zero."""
        with pytest.raises(ExpressionError):
            calculate_amount("Mystery", game, sorcery)

    def test_self_referencing_svar_raises(self, game, add_card):
        """An SVar that refers to itself cannot be evaluated."""
        card = add_card("Loop", svars={"A": "B", "B": "A"})
        with pytest.raises(ExpressionError):
            calculate_amount("A", game, card)


class TestDefinedCards:
    """Tests for defined card references."""

    def test_remembered(self, add_card, evaluator, expr_context):
        """Remembered resolves IDs still on the table."""
        target = add_card("Target")
        source = add_card("Rememberer", remembered=[target.card_id, "gone"])
        assert evaluator.defined_cards("Remembered", expr_context(source=source)) == [target]

    def test_enchanted(self, add_card, evaluator, expr_context):
        """Enchanted resolves the attached card."""
        host = add_card("Host", zone=ZoneType.BATTLEFIELD, types={"Creature"})
        aura = add_card("Aura", zone=ZoneType.BATTLEFIELD, attached_to=host.card_id)
        assert evaluator.defined_cards("Enchanted", expr_context(source=aura)) == [host]

    def test_unknown_reference_raises(self, sorcery, evaluator, expr_context):
        """Unknown references are expression errors."""
        with pytest.raises(ExpressionError):
            evaluator.defined_cards("Targeted", expr_context(source=sorcery))


class TestQuerySurfaces:
    """The reference model provides every query the legality core makes."""

    def test_reference_model_conforms(self, game, sorcery, evaluator):
        """GameState, Card and ExpressionEvaluator satisfy the protocols."""
        assert isinstance(game, GameQueries)
        assert isinstance(sorcery, CardQueries)
        assert isinstance(evaluator, ExpressionSurface)
