"""
Expression Evaluator for restriction parameters.

Evaluates the small string languages used in card scripts:

- Card filters:    "Creature.Legendary,Planeswalker.Legendary"
                   "Creature.Zombie+YouCtrl", "Card.Other+nonToken"
- Player patterns: "You", "Opponent", "Player", "Player.Active"
- Action filters:  "Spell", "Spell.Creature", "Activated"
- Amounts:         "3", "X" (SVar lookup), "Count$CardsInYourHand",
                   "Count$Valid Creature.YouCtrl", "Count$xPaid"
- Defined cards:   "Self", "Remembered", "Imprinted", "Enchanted"
- Comparisons:     2-character operator tokens EQ NE LT LE GT GE

Comma separates alternatives; a filter matches if any alternative
matches. Inside an alternative, "." separates the type from its
properties and "+" joins properties.

Anything that cannot be evaluated raises ExpressionError.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, TYPE_CHECKING
import re

from .state import ZoneType

if TYPE_CHECKING:
    from .state import GameState, Card, Player
    from .action import Action


_INTEGER = re.compile(r"[+-]?\d+")


class ExpressionError(Exception):
    """Raised when an expression cannot be evaluated."""

    def __init__(self, expression: str, reason: str):
        self.expression = expression
        self.reason = reason
        super().__init__(f"Cannot evaluate {expression!r}: {reason}")


def compare(left: int, operator: str, right: int) -> bool:
    """
    Compare two integers with a 2-character operator token.

    Only the first two characters of `operator` are read, so a full
    comparison string such as "GE2" may be passed directly.
    """
    op = operator[:2].upper()
    if op == "EQ":
        return left == right
    elif op == "NE":
        return left != right
    elif op == "LT":
        return left < right
    elif op == "LE":
        return left <= right
    elif op == "GT":
        return left > right
    elif op == "GE":
        return left >= right
    raise ExpressionError(operator, "unknown comparison operator")


@dataclass
class ExpressionContext:
    """
    Context for evaluating expressions.

    Provides access to:
    - Current game state
    - The player asking (who "You" is for card filters)
    - The card the expression belongs to
    - The action being evaluated, for X and action SVars
    """
    game_state: GameState
    activator: Player | None
    source: Card | None
    action: Action | None = None

    @property
    def controller(self) -> Player | None:
        """Controller of the source card."""
        if self.source is None:
            return self.activator
        return self.game_state.get_player(self.source.controller_id)


class ExpressionEvaluator:
    """
    Evaluates card script expressions against a game state.

    Stateless; one instance can serve every check.
    """

    # ------------------------------------------------------------------
    # Card filters
    # ------------------------------------------------------------------

    def is_valid_card(
        self, card: Card, restrictions: str | Iterable[str], context: ExpressionContext
    ) -> bool:
        """True if `card` matches any alternative of the filter."""
        return any(
            self._card_matches(card, alternative, context)
            for alternative in _alternatives(restrictions)
        )

    def valid_cards(
        self, cards: Iterable[Card], restrictions: str | Iterable[str], context: ExpressionContext
    ) -> list[Card]:
        """Filter a card list."""
        alternatives = _alternatives(restrictions)
        return [
            c for c in cards
            if any(self._card_matches(c, alt, context) for alt in alternatives)
        ]

    def _card_matches(self, card: Card, alternative: str, context: ExpressionContext) -> bool:
        type_part, _, prop_part = alternative.partition(".")
        if not self._card_has_type(card, type_part):
            return False
        if not prop_part:
            return True
        return all(
            self._card_has_property(card, prop, context)
            for prop in prop_part.split("+")
            if prop
        )

    def _card_has_type(self, card: Card, type_name: str) -> bool:
        if type_name.startswith("non") and type_name[3:4].isupper():
            return not self._card_has_type(card, type_name[3:])
        if type_name in ("Card", "Any"):
            return True
        if type_name == "Permanent":
            return card.is_permanent
        return card.has_type(type_name)

    def _card_has_property(self, card: Card, prop: str, context: ExpressionContext) -> bool:
        if prop.startswith("non") and prop[3:4].isupper():
            return not self._card_has_property(card, prop[3:], context)

        activator = context.activator
        if prop == "YouCtrl":
            return activator is not None and card.controller_id == activator.player_id
        if prop == "YouOwn":
            return activator is not None and card.owner_id == activator.player_id
        if prop in ("OppCtrl", "YouDontCtrl"):
            if activator is None:
                return False
            controller = context.game_state.get_player(card.controller_id)
            return context.game_state.is_opponent(activator, controller)
        if prop == "Other":
            return context.source is None or card.card_id != context.source.card_id
        if prop == "Self":
            return context.source is not None and card.card_id == context.source.card_id
        if prop == "Token":
            return card.token
        if prop == "Legendary":
            return card.is_legendary
        return card.has_type(prop) or card.has_keyword(prop)

    # ------------------------------------------------------------------
    # Player patterns
    # ------------------------------------------------------------------

    def is_valid_player(
        self, player: Player, restrictions: str | Iterable[str], context: ExpressionContext
    ) -> bool:
        """
        True if `player` matches any alternative of the pattern.

        "You" and "Opponent" are relative to the controller of the
        context's source card.
        """
        for alternative in _alternatives(restrictions):
            base, _, prop_part = alternative.partition(".")
            props = [base] if base != "Player" else []
            props.extend(p for p in prop_part.split("+") if p)
            if all(self._player_has_property(player, p, context) for p in props):
                return True
        return False

    def _player_has_property(self, player: Player, prop: str, context: ExpressionContext) -> bool:
        game = context.game_state
        controller = context.controller
        if prop == "You":
            return controller is not None and player.player_id == controller.player_id
        if prop in ("Opponent", "OppCtrl"):
            return controller is not None and game.is_opponent(controller, player)
        if prop in ("Active", "ActivePlayer"):
            return game.is_player_turn(player)
        if prop == "NonActive":
            return not game.is_player_turn(player)
        raise ExpressionError(prop, "unknown player property")

    # ------------------------------------------------------------------
    # Action filters
    # ------------------------------------------------------------------

    def is_valid_action(
        self, action: Action, restrictions: str | Iterable[str], context: ExpressionContext
    ) -> bool:
        """True if `action` matches any alternative of the filter."""
        for alternative in _alternatives(restrictions):
            base, _, prop_part = alternative.partition(".")
            if base == "Spell" and not action.is_spell:
                continue
            if base == "Activated" and action.is_spell:
                continue
            if all(
                self._action_has_property(action, prop, context)
                for prop in prop_part.split("+")
                if prop
            ):
                return True
        return False

    def _action_has_property(self, action: Action, prop: str, context: ExpressionContext) -> bool:
        if prop.startswith("non") and prop[3:4].isupper():
            return not self._action_has_property(action, prop[3:], context)
        if prop == "Aftermath":
            return action.aftermath
        if prop == "Bestow":
            return action.bestow
        if prop == "Loyalty":
            return action.pw_ability
        if prop == "ManaAbility":
            return action.mana_ability
        return self._card_has_type(action.host, prop) or self._card_has_property(
            action.host, prop, context
        )

    # ------------------------------------------------------------------
    # Amounts
    # ------------------------------------------------------------------

    def calculate_amount(self, expr: str, context: ExpressionContext) -> int:
        """
        Evaluate an amount expression to an integer.

        Resolution order:
        1. Integer literal
        2. Number$N / Count$...
        3. SVar on the source card, then on the action
        4. X bound to the action's announced value
        """
        return self._calculate(expr, context, seen=set())

    def _calculate(self, expr: str, context: ExpressionContext, seen: set[str]) -> int:
        expr = expr.strip()

        if _INTEGER.fullmatch(expr):
            return int(expr)

        if expr.startswith("Number$"):
            value = expr[len("Number$"):]
            if not _INTEGER.fullmatch(value):
                raise ExpressionError(expr, "Number$ needs an integer")
            return int(value)

        if expr.startswith("Count$"):
            return self._count(expr[len("Count$"):], context)

        if expr in seen:
            raise ExpressionError(expr, "SVar refers to itself")

        svar = None
        if context.source is not None:
            svar = context.source.get_svar(expr)
        if svar is None and context.action is not None:
            svar = context.action.get_svar(expr)
        if svar is not None:
            return self._calculate(svar, context, seen | {expr})

        if expr == "X":
            return self._count("xPaid", context)

        raise ExpressionError(expr, "not a number, known count or SVar")

    def _count(self, what: str, context: ExpressionContext) -> int:
        game = context.game_state
        controller = context.controller

        if what == "xPaid":
            if context.action is None or context.action.x_paid is None:
                return 0
            return context.action.x_paid

        if what.startswith("Valid "):
            cards = game.cards_in(ZoneType.BATTLEFIELD)
            return len(self.valid_cards(cards, what[len("Valid "):], context))

        if controller is None:
            raise ExpressionError(what, "count needs a controlling player")

        if what == "CardsInYourHand":
            return len(game.cards_in(ZoneType.HAND, controller))
        if what == "InYourGraveyard":
            return len(game.cards_in(ZoneType.GRAVEYARD, controller))
        if what == "YourLifeTotal":
            return controller.life
        if what == "OppSmallestLifeTotal":
            return game.opponents_smallest_life_total(controller)

        raise ExpressionError(f"Count${what}", "unknown count")

    # ------------------------------------------------------------------
    # Defined cards
    # ------------------------------------------------------------------

    def defined_cards(self, defined: str, context: ExpressionContext) -> list[Card]:
        """Resolve a defined-card reference relative to the source card."""
        source = context.source
        game = context.game_state
        if source is None:
            return []

        if defined == "Self":
            return [source]
        if defined == "Remembered":
            return _existing(game, source.remembered)
        if defined == "Imprinted":
            return _existing(game, source.imprinted)
        if defined == "Enchanted":
            return _existing(game, [source.attached_to] if source.attached_to else [])

        raise ExpressionError(defined, "unknown defined reference")


def _alternatives(restrictions: str | Iterable[str]) -> list[str]:
    if isinstance(restrictions, str):
        restrictions = restrictions.split(",")
    return [r.strip() for r in restrictions if r.strip()]


def _existing(game: GameState, card_ids: list[str]) -> list[Card]:
    cards = []
    for card_id in card_ids:
        card = game.get_card(card_id)
        if card is not None:
            cards.append(card)
    return cards


# Convenience function
def calculate_amount(
    expr: str,
    game_state: GameState,
    source: Card,
    action: Action | None = None,
    activator: Player | None = None,
) -> int:
    """
    Evaluate an amount expression for a card.

    Args:
        expr: Amount expression ("3", "X", "Count$CardsInYourHand", ...)
        game_state: Current game state
        source: Card the expression belongs to
        action: Optional action supplying X and action SVars
        activator: Optional player for "YouCtrl"-style filters

    Returns:
        Evaluated integer
    """
    context = ExpressionContext(
        game_state=game_state,
        activator=activator,
        source=source,
        action=action,
    )
    return ExpressionEvaluator().calculate_amount(expr, context)
