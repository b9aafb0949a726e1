"""
Engine Core - Read-only model of the table the legality checks run against.

Provides:
1. GameState, Player, Card and the zone/phase/game-type enums
2. Candidate actions and their activation counters
3. "May play" grants
4. The expression evaluator for filters and amounts
"""

from .state import Card, GameState, GameType, PhaseType, Player, ZoneType
from .action import Action, ActionKind, ActivationCounters, CostPaymentEntry
from .play_option import CardPlayOption
from .interfaces import CardQueries, ExpressionSurface, GameQueries
from .expression import (
    ExpressionContext,
    ExpressionError,
    ExpressionEvaluator,
    calculate_amount,
    compare,
)

__all__ = [
    "Card",
    "GameState",
    "GameType",
    "PhaseType",
    "Player",
    "ZoneType",
    "Action",
    "ActionKind",
    "ActivationCounters",
    "CostPaymentEntry",
    "CardPlayOption",
    "CardQueries",
    "GameQueries",
    "ExpressionSurface",
    "ExpressionContext",
    "ExpressionError",
    "ExpressionEvaluator",
    "calculate_amount",
    "compare",
]
