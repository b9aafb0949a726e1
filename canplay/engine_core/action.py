"""
Action System - Candidate actions and their activation counters.

An Action is something a player wants to do with a card:
1. Cast it as a spell (possibly through an alternate cast: bestow,
   aftermath, surge, spectacle, prowl)
2. Activate one of its abilities (loyalty, boast, mana, ...)

Actions are created by the host engine and handed to the legality
core, which only reads them (apart from caching resolved caps on the
counters).
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING
import uuid

if TYPE_CHECKING:
    from .state import Card, Player
    from .play_option import CardPlayOption


class ActionKind(Enum):
    """Whether the action puts the card on the stack or activates an ability."""
    SPELL = "spell"
    ACTIVATED = "activated"


@dataclass
class ActivationCounters:
    """
    How often an action has been used, plus its resolved caps.

    The counts are maintained by the host engine when the action
    actually resolves. The caps are filled in by the legality core
    the first time it resolves a cap expression.
    """
    activations_this_turn: int = 0
    activations_this_game: int = 0
    activation_limit: int | None = None
    game_activation_limit: int | None = None


@dataclass(eq=False)
class Action:
    """
    A candidate spell or ability.

    Equality is identity: two abilities with the same text on the
    same card are still different abilities.
    """
    kind: ActionKind
    host: Card
    action_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    activating_player: Player | None = None

    params: dict[str, str] = field(default_factory=dict)
    svars: dict[str, str] = field(default_factory=dict)

    # The grant this action was offered under, if any
    may_play: CardPlayOption | None = None

    # Alternate casts and ability kinds
    bestow: bool = False
    aftermath: bool = False
    surged: bool = False
    spectacle: bool = False
    prowl: bool = False
    boast: bool = False
    pw_ability: bool = False
    mana_ability: bool = False

    card_state: str | None = None  # Alternate printing the spell is cast as
    x_paid: int | None = None

    counters: ActivationCounters = field(default_factory=ActivationCounters)

    @property
    def is_spell(self) -> bool:
        return self.kind == ActionKind.SPELL

    @property
    def activations_this_turn(self) -> int:
        return self.counters.activations_this_turn

    @property
    def activations_this_game(self) -> int:
        return self.counters.activations_this_game

    def has_param(self, name: str) -> bool:
        return name in self.params

    def has_svar(self, name: str) -> bool:
        return name in self.svars

    def get_svar(self, name: str) -> str | None:
        return self.svars.get(name)

    @classmethod
    def cast(cls, card: Card, player: Player | None = None, **kwargs) -> Action:
        """Factory for casting a card as a spell."""
        return cls(kind=ActionKind.SPELL, host=card, activating_player=player, **kwargs)

    @classmethod
    def activate(cls, card: Card, player: Player | None = None, **kwargs) -> Action:
        """Factory for activating an ability of a card."""
        return cls(kind=ActionKind.ACTIVATED, host=card, activating_player=player, **kwargs)


@dataclass
class CostPaymentEntry:
    """An ability whose cost is currently being paid."""
    ability: Action
    payer_id: str | None = None
