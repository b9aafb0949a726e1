"""
Evaluation Context - Everything one legality check needs.

Built fresh for every check and dropped afterwards. Holds the card,
the action, the resolved activator, the restrictions and the game,
plus the alternate-state snapshot if the zone stage made one.
"""

from __future__ import annotations
from dataclasses import dataclass
import logging

from ..engine_core.action import Action
from ..engine_core.expression import ExpressionContext, ExpressionEvaluator
from ..engine_core.interfaces import ExpressionSurface
from ..engine_core.state import Card, GameState, Player
from ..restriction_schema.restriction_set import RestrictionSet

logger = logging.getLogger(__name__)


@dataclass
class EvaluationContext:
    """
    Context for one legality check.

    `activator` is never None: an action without an activating player
    is checked as if its card's controller were activating it.
    """
    card: Card
    action: Action
    activator: Player
    game_state: GameState
    restrictions: RestrictionSet
    evaluator: ExpressionSurface
    activator_defaulted: bool = False

    # Alternate-state snapshot used for attribute checks, if one was made
    view: Card | None = None

    @classmethod
    def create(
        cls,
        restrictions: RestrictionSet,
        game_state: GameState,
        card: Card,
        action: Action,
        evaluator: ExpressionSurface | None = None,
    ) -> EvaluationContext:
        """
        Build a context, defaulting an unset activator to the controller.

        An unset activator is a caller defect; it is logged and the
        check carries on with the controller.
        """
        activator = action.activating_player
        defaulted = False
        if activator is None:
            activator = game_state.get_player(card.controller_id)
            defaulted = True
            logger.warning(
                "%s did not have an activator set; defaulting to controller %s",
                card.name,
                card.controller_id,
            )
            if activator is None:
                raise ValueError(
                    f"Card {card.card_id} has no activator and its controller "
                    f"{card.controller_id!r} is not at the table"
                )

        return cls(
            card=card,
            action=action,
            activator=activator,
            game_state=game_state,
            restrictions=restrictions,
            evaluator=evaluator or ExpressionEvaluator(),
            activator_defaulted=defaulted,
        )

    @property
    def subject(self) -> Card:
        """The card attribute checks look at: the snapshot if there is one."""
        return self.view if self.view is not None else self.card

    @property
    def host(self) -> Card:
        return self.action.host

    def expressions(
        self, source: Card | None = None, activator: Player | None = None
    ) -> ExpressionContext:
        """Expression context for `source` (defaults to the card)."""
        return ExpressionContext(
            game_state=self.game_state,
            activator=activator or self.activator,
            source=source or self.card,
            action=self.action,
        )
