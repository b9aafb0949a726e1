"""
Restriction Builder - String-keyed script parameters to a RestrictionSet.

Card scripts carry restrictions as a flat mapping:

    {"ActivationZone": "Graveyard", "SorcerySpeed": "True",
     "IsPresent": "Creature.Zombie+YouCtrl", "PresentCompare": "GE2"}

The mapping is validated with a pydantic model (unknown keys are
ignored, since the same mapping also carries effect parameters) and
then frozen into a RestrictionSet.
"""

from __future__ import annotations
import logging
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from ..engine_core.state import GameType, PhaseType, ZoneType
from .restriction_set import Comparison, LifeTotalSource, RestrictionSet, StatusGate
from .validation import RestrictionValidationError, validate_restrictions

logger = logging.getLogger(__name__)


class RestrictionParams(BaseModel):
    """Raw restriction parameters, keyed by their script names."""

    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        frozen=True,
        arbitrary_types_allowed=True,
    )

    activation: frozenset[StatusGate] = Field(frozenset(), alias="Activation")
    activation_zone: Optional[ZoneType] = Field(None, alias="ActivationZone")

    sorcery_speed: bool = Field(False, alias="SorcerySpeed")
    instant_speed: bool = Field(False, alias="InstantSpeed")
    player_turn: bool = Field(False, alias="PlayerTurn")
    opponent_turn: bool = Field(False, alias="OpponentTurn")
    activation_phases: frozenset[PhaseType] = Field(frozenset(), alias="ActivationPhases")
    activation_game_types: frozenset[GameType] = Field(frozenset(), alias="ActivationGameTypes")

    activator: Optional[str] = Field(None, alias="Activator")
    activation_limit: Optional[str] = Field(None, alias="ActivationLimit")
    game_activation_limit: Optional[str] = Field(None, alias="GameActivationLimit")

    activation_cards_in_hand: Optional[int] = Field(None, alias="ActivationCardsInHand")
    activation_chosen_color: Optional[str] = Field(None, alias="ActivationChosenColor")

    is_present: Optional[str] = Field(None, alias="IsPresent")
    is_not_present: Optional[str] = Field(None, alias="IsNotPresent")
    present_compare: Optional[Comparison] = Field(None, alias="PresentCompare")
    present_zone: Optional[ZoneType] = Field(None, alias="PresentZone")
    present_defined: Optional[str] = Field(None, alias="PresentDefined")

    activation_life_total: Optional[LifeTotalSource] = Field(None, alias="ActivationLifeTotal")
    activation_life_amount: Optional[Comparison] = Field(None, alias="ActivationLifeAmount")

    check_svar: Optional[str] = Field(None, alias="CheckSVar")
    svar_compare: Optional[Comparison] = Field(None, alias="SVarCompare")

    @field_validator(
        "sorcery_speed", "instant_speed", "player_turn", "opponent_turn", mode="before"
    )
    @classmethod
    def parse_flag(cls, value: Any) -> bool:
        # Flags count as set whenever the key is present
        return True

    @field_validator("activation", mode="before")
    @classmethod
    def parse_status_gates(cls, value: Any) -> frozenset[StatusGate]:
        gates = set()
        for part in str(value).split(","):
            part = part.strip()
            if part:
                gates.add(StatusGate(part))
        return frozenset(gates)

    @field_validator("activation_zone", "present_zone", mode="before")
    @classmethod
    def parse_zone(cls, value: Any) -> ZoneType:
        if isinstance(value, ZoneType):
            return value
        return ZoneType.smart_value_of(str(value))

    @field_validator("activation_phases", mode="before")
    @classmethod
    def parse_phases(cls, value: Any) -> frozenset[PhaseType]:
        return PhaseType.parse_range(str(value))

    @field_validator("activation_game_types", mode="before")
    @classmethod
    def parse_game_types(cls, value: Any) -> frozenset[GameType]:
        return GameType.list_value_of(str(value))

    @field_validator("present_compare", "activation_life_amount", "svar_compare", mode="before")
    @classmethod
    def parse_comparison(cls, value: Any) -> Comparison:
        if isinstance(value, Comparison):
            return value
        return Comparison.parse(str(value))

    @field_validator(
        "activator",
        "activation_limit",
        "game_activation_limit",
        "activation_chosen_color",
        "is_present",
        "is_not_present",
        "present_defined",
        "check_svar",
        mode="before",
    )
    @classmethod
    def parse_text(cls, value: Any) -> str:
        text = str(value).strip()
        if not text:
            raise ValueError("must not be empty")
        return text

    def to_restriction_set(self) -> RestrictionSet:
        """Freeze the parameters into a RestrictionSet."""
        kwargs: dict[str, Any] = {}

        if self.is_present is not None:
            kwargs["is_present"] = self.is_present
            if self.present_compare is not None:
                kwargs["present_compare"] = self.present_compare
        if self.present_zone is not None:
            kwargs["present_zone"] = self.present_zone
        if self.is_not_present is not None:
            kwargs["is_present"] = self.is_not_present
            kwargs["present_compare"] = Comparison.parse("EQ0")

        if self.activation_life_total is not None:
            kwargs["life_total"] = self.activation_life_total
            if self.activation_life_amount is not None:
                kwargs["life_amount"] = self.activation_life_amount

        return RestrictionSet(
            zone=self.activation_zone,
            player_turn=self.player_turn,
            opponent_turn=self.opponent_turn,
            phases=self.activation_phases,
            sorcery_speed=self.sorcery_speed,
            instant_speed=self.instant_speed,
            activator=self.activator,
            limit_to_check=self.activation_limit,
            game_limit_to_check=self.game_activation_limit,
            game_types=self.activation_game_types,
            status_gates=self.activation,
            cards_in_hand=self.activation_cards_in_hand,
            color_to_check=self.activation_chosen_color,
            present_defined=self.present_defined,
            svar_to_check=self.check_svar,
            svar_compare=self.svar_compare,
            **kwargs,
        )


def build_restrictions(params: Mapping[str, Any], strict: bool = True) -> RestrictionSet:
    """
    Build a RestrictionSet from script parameters.

    Args:
        params: Card script parameters (restriction and other keys mixed)
        strict: Also reject sets that fail semantic validation

    Returns:
        The frozen RestrictionSet

    Raises:
        RestrictionValidationError: listing every problem found
    """
    try:
        parsed = RestrictionParams.model_validate(dict(params))
    except PydanticValidationError as e:
        raise RestrictionValidationError([_format_error(err) for err in e.errors()]) from e

    restrictions = parsed.to_restriction_set()

    result = validate_restrictions(restrictions)
    for warning in result.warnings:
        logger.warning("Restriction warning: %s", warning)
    if strict and not result.valid:
        raise RestrictionValidationError(result.errors)

    return restrictions


def _format_error(error: dict[str, Any]) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()))
    return f"{location}: {error.get('msg', 'invalid value')}"
