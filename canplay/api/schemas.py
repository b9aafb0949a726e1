"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between rules tooling (deck editors,
card-script linters, AI opponents) and the legality engine. A request
carries a full table snapshot; nothing is stored between calls.

Error Codes:
- VALIDATION_ERROR: Restriction parameters or the snapshot are malformed
- EXPRESSION_ERROR: An amount or filter expression could not be evaluated
- UNKNOWN_CARD: The card to check is not in the snapshot
- UNKNOWN_PLAYER: A referenced player is not at the table
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field

from ..engine_core.state import GameType, PhaseType, ZoneType


# =============================================================================
# Enums
# =============================================================================

class ErrorCode(str, Enum):
    """Structured error codes."""
    VALIDATION_ERROR = "VALIDATION_ERROR"
    EXPRESSION_ERROR = "EXPRESSION_ERROR"
    UNKNOWN_CARD = "UNKNOWN_CARD"
    UNKNOWN_PLAYER = "UNKNOWN_PLAYER"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ActionKindInfo(str, Enum):
    """What the action does with the card."""
    SPELL = "spell"
    ACTIVATED = "activated"


# =============================================================================
# Table Snapshot
# =============================================================================

class PlayOptionInfo(BaseModel):
    """A "may play" grant attached to a card."""
    player_id: str = Field(..., description="Player who may use the grant")
    host_card_id: Optional[str] = Field(None, description="Card whose static created it")
    grants_zone_permissions: bool = Field(
        True, description="Whether the grant itself allows the card's current zone"
    )
    params: dict[str, str] = Field(
        default_factory=dict, description="Filters, e.g. Affected and ValidSA"
    )


class CardInfo(BaseModel):
    """A card on the table."""
    card_id: str
    name: str
    owner_id: str
    controller_id: Optional[str] = Field(None, description="Defaults to the owner")
    types: list[str] = Field(default_factory=list)
    supertypes: list[str] = Field(default_factory=list)
    subtypes: list[str] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)
    zone: Optional[ZoneType] = None
    phased_out: bool = False
    used_to_pay: bool = False
    token: bool = False
    chosen_colors: list[str] = Field(default_factory=list)
    svars: dict[str, str] = Field(default_factory=dict)
    planeswalker_activations: int = Field(0, ge=0)
    bestowed: bool = False
    may_play: list[PlayOptionInfo] = Field(default_factory=list)
    remembered: list[str] = Field(default_factory=list)
    imprinted: list[str] = Field(default_factory=list)
    attached_to: Optional[str] = None


class PlayerInfo(BaseModel):
    """A player at the table."""
    player_id: str
    name: str
    life: int = 20
    keywords: list[str] = Field(default_factory=list)
    spells_cast_this_turn: int = Field(0, ge=0)
    life_lost_this_turn: int = Field(0, ge=0)
    prowl_types: list[str] = Field(
        default_factory=list, description="Creature types that dealt combat damage this turn"
    )
    has_city_blessing: bool = False


class TableSnapshot(BaseModel):
    """Complete table state at the moment of the check."""
    game_id: str = "snapshot"
    players: list[PlayerInfo] = Field(..., min_length=1)
    cards: list[CardInfo] = Field(default_factory=list)
    phase: PhaseType = PhaseType.MAIN1
    turn_player_id: Optional[str] = None
    turn_number: int = Field(1, ge=1)
    game_type: GameType = GameType.CONSTRUCTED
    paying_costs: list[str] = Field(
        default_factory=list, description="Action IDs whose costs are being paid"
    )
    flash_targeting: list[str] = Field(
        default_factory=list,
        description="Action IDs whose flash grant needs targets chosen first",
    )


class ActionInfo(BaseModel):
    """The spell or ability being checked."""
    kind: ActionKindInfo = ActionKindInfo.SPELL
    action_id: Optional[str] = Field(None, description="Generated when omitted")
    activating_player_id: Optional[str] = Field(
        None, description="Defaults to the card's controller"
    )
    params: dict[str, str] = Field(default_factory=dict)
    svars: dict[str, str] = Field(default_factory=dict)
    may_play_index: Optional[int] = Field(
        None, ge=0, description="Index into the card's may_play grants"
    )

    bestow: bool = False
    aftermath: bool = False
    surged: bool = False
    spectacle: bool = False
    prowl: bool = False
    boast: bool = False
    pw_ability: bool = False
    mana_ability: bool = False

    card_state: Optional[str] = None
    x_paid: Optional[int] = None
    activations_this_turn: int = Field(0, ge=0)
    activations_this_game: int = Field(0, ge=0)


# =============================================================================
# Request Models
# =============================================================================

class ParseRequest(BaseModel):
    """Request to parse script parameters into a restriction set."""
    params: dict[str, Any] = Field(..., description="Card script parameters")
    strict: bool = Field(True, description="Reject semantically invalid sets")


class CheckRequest(BaseModel):
    """Request to check one action against a table snapshot."""
    table: TableSnapshot
    card_id: str = Field(..., description="Card the action belongs to")
    action: ActionInfo = Field(default_factory=ActionInfo)
    params: dict[str, Any] = Field(
        default_factory=dict, description="Restriction parameters of the action"
    )


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class ComparisonInfo(BaseModel):
    """A comparison such as GE2."""
    op: str
    operand: str


class RestrictionInfo(BaseModel):
    """A parsed restriction set, with defaults filled in."""
    zone: Optional[ZoneType] = None
    player_turn: bool = False
    opponent_turn: bool = False
    phases: list[PhaseType] = Field(default_factory=list)
    sorcery_speed: bool = False
    instant_speed: bool = False
    activator: Optional[str] = None
    limit_to_check: Optional[str] = None
    game_limit_to_check: Optional[str] = None
    game_types: list[GameType] = Field(default_factory=list)
    status_gates: list[str] = Field(default_factory=list)
    cards_in_hand: Optional[int] = None
    color_to_check: Optional[str] = None
    is_present: Optional[str] = None
    present_compare: ComparisonInfo
    present_zone: ZoneType
    present_defined: Optional[str] = None
    life_total: Optional[str] = None
    life_amount: ComparisonInfo
    svar_to_check: Optional[str] = None
    svar_compare: Optional[ComparisonInfo] = None


class ParseResponse(BaseModel):
    """Response from parsing restriction parameters."""
    restrictions: RestrictionInfo
    unrestricted: bool = Field(..., description="True if nothing is restricted")
    warnings: list[str] = Field(default_factory=list)


class CheckResponse(BaseModel):
    """Legality verdict with per-stage detail."""
    legal: bool
    stages: dict[str, Optional[bool]] = Field(
        ..., description="Verdict per stage; null when the stage was skipped"
    )
    failed_stage: Optional[str] = None
    failed_gate: Optional[str] = Field(None, description="First failing aggregate gate")
    activator_defaulted: bool = Field(
        False, description="The action had no activator and the controller was used"
    )


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
