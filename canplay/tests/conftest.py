"""
Pytest fixtures for Canplay tests.
"""

import pytest

from ..engine_core.action import Action
from ..engine_core.expression import ExpressionContext, ExpressionEvaluator
from ..engine_core.state import Card, GameState, PhaseType, Player, ZoneType
from ..restriction_schema import RestrictionSet
from ..legality.context import EvaluationContext


@pytest.fixture
def alice() -> Player:
    return Player(player_id="alice", name="Alice")


@pytest.fixture
def bob() -> Player:
    return Player(player_id="bob", name="Bob")


@pytest.fixture
def game(alice: Player, bob: Player) -> GameState:
    """Two-player game, Alice's first main phase, empty stack."""
    return GameState(
        game_id="test_game",
        players=[alice, bob],
        phase=PhaseType.MAIN1,
        turn_player_id="alice",
    )


@pytest.fixture
def add_card(game: GameState):
    """
    Factory that creates a card and puts it on the table.

    Usage:
        bear = add_card("Grizzly Bears", types={"Creature"}, zone=ZoneType.BATTLEFIELD)
    """
    counter = {"n": 0}

    def _add(name, owner="alice", zone=ZoneType.HAND, types=(), subtypes=(), supertypes=(), **kwargs):
        counter["n"] += 1
        card = Card(
            card_id=f"{name.lower().replace(' ', '_')}_{counter['n']}",
            name=name,
            owner_id=owner,
            zone=zone,
            types=frozenset(types),
            subtypes=frozenset(subtypes),
            supertypes=frozenset(supertypes),
            **kwargs,
        )
        game.cards.append(card)
        return card

    return _add


@pytest.fixture
def sorcery(add_card) -> Card:
    """A plain sorcery in Alice's hand."""
    return add_card("Divination", types={"Sorcery"})


@pytest.fixture
def creature(add_card) -> Card:
    """A creature card in Alice's hand."""
    return add_card("Grizzly Bears", types={"Creature"}, subtypes={"Bear"})


@pytest.fixture
def evaluator() -> ExpressionEvaluator:
    return ExpressionEvaluator()


@pytest.fixture
def expr_context(game: GameState, alice: Player):
    """Factory for expression contexts with Alice as the activator."""
    def _make(source=None, action=None, activator=None):
        return ExpressionContext(
            game_state=game,
            activator=activator or alice,
            source=source,
            action=action,
        )
    return _make


@pytest.fixture
def make_context(game: GameState):
    """Factory for evaluation contexts over the shared game."""
    def _make(card, action=None, restrictions=None):
        if action is None:
            action = Action.cast(card, game.get_player(card.controller_id))
        return EvaluationContext.create(restrictions or RestrictionSet(), game, card, action)
    return _make
