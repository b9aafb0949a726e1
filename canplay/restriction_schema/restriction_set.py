"""
Restriction Set - Typed restriction parameters for one spell or ability.

A RestrictionSet is built once by the builder (builder.py) from the
string-keyed parameters of a card script and is read-only afterwards.

Every field defaults to "unrestricted". An unset field never causes a
rejection on its own.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum

from ..engine_core.expression import compare
from ..engine_core.state import GameType, PhaseType, ZoneType


class CompareOp(str, Enum):
    """Relational operators, encoded as 2-character tokens."""
    EQ = "EQ"
    NE = "NE"
    LT = "LT"
    LE = "LE"
    GT = "GT"
    GE = "GE"


@dataclass(frozen=True)
class Comparison:
    """
    An operator plus a right-hand operand.

    The operand is an amount expression: a literal ("2"), an SVar name
    ("X") or a count ("Count$CardsInYourHand").
    """
    op: CompareOp
    operand: str

    @classmethod
    def parse(cls, value: str) -> Comparison:
        """Parse "GE2" into Comparison(GE, "2")."""
        value = str(value).strip()
        if len(value) < 3:
            raise ValueError(f"Comparison needs an operator and an operand: {value!r}")
        try:
            op = CompareOp(value[:2].upper())
        except ValueError:
            raise ValueError(f"Unknown comparison operator in {value!r}") from None
        return cls(op=op, operand=value[2:])

    def holds(self, left: int, right: int) -> bool:
        return compare(left, self.op.value, right)

    def __str__(self) -> str:
        return f"{self.op.value}{self.operand}"


class StatusGate(Enum):
    """Derived player status an ability can require."""
    THRESHOLD = "Threshold"
    METALCRAFT = "Metalcraft"
    DELIRIUM = "Delirium"
    HELLBENT = "Hellbent"
    DESERT = "Desert"
    BLESSING = "Blessing"


class LifeTotalSource(str, Enum):
    """Whose life total a life condition reads."""
    YOU = "You"
    OPPONENT_SMALLEST = "OpponentSmallest"


@dataclass(frozen=True)
class RestrictionSet:
    """
    All restrictions on when, where and by whom an action may be used.

    Groups:
    - Zone: where the card must be
    - Timing: whose turn, which phases, casting speed
    - Activator: who may use it
    - Limits: per-turn and per-game caps (amount expressions)
    - Status gates and conditions: hand size, chosen color,
      presence of other cards, life totals, SVar comparisons
    """
    # Zone
    zone: ZoneType | None = None

    # Timing
    player_turn: bool = False
    opponent_turn: bool = False
    phases: frozenset[PhaseType] = frozenset()
    sorcery_speed: bool = False
    instant_speed: bool = False

    # Activator
    activator: str | None = None  # None: any player

    # Limits
    limit_to_check: str | None = None
    game_limit_to_check: str | None = None
    game_types: frozenset[GameType] = frozenset()

    # Status gates
    status_gates: frozenset[StatusGate] = frozenset()
    cards_in_hand: int | None = None
    color_to_check: str | None = None

    # Presence condition
    is_present: str | None = None
    present_compare: Comparison = field(default_factory=lambda: Comparison(CompareOp.GE, "1"))
    present_zone: ZoneType = ZoneType.BATTLEFIELD
    present_defined: str | None = None

    # Life total condition
    life_total: LifeTotalSource | None = None
    life_amount: Comparison = field(default_factory=lambda: Comparison(CompareOp.GE, "1"))

    # SVar condition
    svar_to_check: str | None = None
    svar_compare: Comparison | None = None

    def requires(self, gate: StatusGate) -> bool:
        return gate in self.status_gates

    @property
    def is_unrestricted(self) -> bool:
        """True if every field still has its default."""
        return self == RestrictionSet()
