"""Restriction schema - typed restriction parameters and their builder."""

from .restriction_set import (
    CompareOp,
    Comparison,
    LifeTotalSource,
    RestrictionSet,
    StatusGate,
)
from .builder import RestrictionParams, build_restrictions
from .validation import RestrictionValidationError, ValidationResult, validate_restrictions

__all__ = [
    "CompareOp",
    "Comparison",
    "LifeTotalSource",
    "RestrictionSet",
    "StatusGate",
    "RestrictionParams",
    "build_restrictions",
    "RestrictionValidationError",
    "ValidationResult",
    "validate_restrictions",
]
