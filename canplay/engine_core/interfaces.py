"""
Query surfaces consumed by the legality core.

The reference model in state.py and the evaluator in expression.py
implement these. A host engine can plug in its own objects as long
as they provide the same methods; nothing here is ever mutated by
the legality checks.
"""

from __future__ import annotations
from typing import Iterable, Protocol, TYPE_CHECKING, runtime_checkable

if TYPE_CHECKING:
    from .action import Action, CostPaymentEntry
    from .expression import ExpressionContext
    from .play_option import CardPlayOption
    from .state import Card, GameType, PhaseType, Player, ZoneType


@runtime_checkable
class CardQueries(Protocol):
    """What the core asks of a card."""
    card_id: str
    controller_id: str | None
    zone: ZoneType | None
    phased_out: bool
    used_to_pay: bool
    bestowed: bool
    lki: bool
    planeswalker_activations: int

    @property
    def is_sorcery(self) -> bool: ...

    @property
    def is_instant(self) -> bool: ...

    @property
    def is_legendary(self) -> bool: ...

    @property
    def creature_types(self) -> frozenset[str]: ...

    def is_in_zone(self, zone: ZoneType) -> bool: ...

    def has_keyword(self, keyword: str) -> bool: ...

    def keyword_count(self, keyword: str) -> int: ...

    def has_chosen_color(self, color: str) -> bool: ...

    def may_play_option(self, grant: CardPlayOption | None) -> CardPlayOption | None: ...

    def may_play_for(self, player_id: str) -> list[CardPlayOption]: ...


@runtime_checkable
class GameQueries(Protocol):
    """What the core asks of the game."""
    phase: PhaseType
    game_type: GameType
    cost_payment_stack: list[CostPaymentEntry]

    def get_player(self, player_id: str | None) -> Player | None: ...

    def is_player_turn(self, player: Player) -> bool: ...

    def is_opponent(self, player: Player, other: Player | None) -> bool: ...

    @property
    def turn_player(self) -> Player | None: ...

    def cards_in(self, zone: ZoneType, player: Player | None = None) -> list[Card]: ...

    def can_cast_sorcery(self, player: Player) -> bool: ...

    def any_with_flash_needs_targeting(self, action: Action, card: Card, player: Player) -> bool: ...

    def has_threshold(self, player: Player) -> bool: ...

    def has_metalcraft(self, player: Player) -> bool: ...

    def has_delirium(self, player: Player) -> bool: ...

    def has_hellbent(self, player: Player) -> bool: ...

    def has_desert(self, player: Player) -> bool: ...

    def has_blessing(self, player: Player) -> bool: ...

    def has_surge(self, player: Player) -> bool: ...

    def opponent_lost_life_this_turn(self, player: Player) -> int: ...

    def opponents_smallest_life_total(self, player: Player) -> int: ...


@runtime_checkable
class ExpressionSurface(Protocol):
    """Filter matching and amount evaluation."""

    def is_valid_card(
        self, card: Card, restrictions: str | Iterable[str], context: ExpressionContext
    ) -> bool: ...

    def valid_cards(
        self, cards: Iterable[Card], restrictions: str | Iterable[str], context: ExpressionContext
    ) -> list[Card]: ...

    def is_valid_player(
        self, player: Player, restrictions: str | Iterable[str], context: ExpressionContext
    ) -> bool: ...

    def is_valid_action(
        self, action: Action, restrictions: str | Iterable[str], context: ExpressionContext
    ) -> bool: ...

    def calculate_amount(self, expr: str, context: ExpressionContext) -> int: ...

    def defined_cards(self, defined: str, context: ExpressionContext) -> list[Card]: ...
