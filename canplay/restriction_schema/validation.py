"""
Restriction Validation - Semantic checks on a finished RestrictionSet.

Validates that:
1. Numeric fields are in range
2. Paired fields come together (CheckSVar needs SVarCompare)
3. Flags do not contradict each other
4. Comparison operands are present
"""

from __future__ import annotations
from dataclasses import dataclass

from .restriction_set import RestrictionSet


class RestrictionValidationError(Exception):
    """Raised when restriction parameters cannot be turned into a RestrictionSet."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(f"Restriction validation failed with {len(errors)} error(s)")


@dataclass
class ValidationResult:
    """Result of validation, with errors and warnings."""
    valid: bool
    errors: list[str]
    warnings: list[str]


def validate_restrictions(restrictions: RestrictionSet) -> ValidationResult:
    """
    Validate a RestrictionSet.

    Errors describe sets that can never be evaluated; warnings describe
    sets that evaluate fine but can never (or always) pass.
    """
    errors: list[str] = []
    warnings: list[str] = []

    if restrictions.cards_in_hand is not None and restrictions.cards_in_hand < 0:
        errors.append("ActivationCardsInHand must be >= 0")

    if restrictions.svar_to_check and restrictions.svar_compare is None:
        errors.append(f"CheckSVar '{restrictions.svar_to_check}' has no SVarCompare")
    if restrictions.svar_compare is not None and not restrictions.svar_to_check:
        warnings.append("SVarCompare given without CheckSVar - ignored")

    if restrictions.is_present is not None and not restrictions.present_compare.operand:
        errors.append("PresentCompare has no operand")
    if restrictions.life_total is not None and not restrictions.life_amount.operand:
        errors.append("ActivationLifeAmount has no operand")

    for name, limit in (
        ("ActivationLimit", restrictions.limit_to_check),
        ("GameActivationLimit", restrictions.game_limit_to_check),
    ):
        if limit is not None and not limit.strip():
            errors.append(f"{name} is empty")

    # Contradictions
    if restrictions.player_turn and restrictions.opponent_turn:
        warnings.append("PlayerTurn and OpponentTurn together can never be satisfied")
    if restrictions.sorcery_speed and restrictions.instant_speed:
        warnings.append("SorcerySpeed is ignored when InstantSpeed is set")
    if restrictions.present_defined and restrictions.is_present is None:
        warnings.append("PresentDefined given without IsPresent - ignored")

    return ValidationResult(
        valid=len(errors) == 0,
        errors=errors,
        warnings=warnings,
    )
