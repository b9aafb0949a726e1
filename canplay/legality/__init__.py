"""
Legality - Decide whether a card's action may be used right now.

Provides:
1. LegalityChecker / can_play() - the full staged check
2. explain() reports - per-stage verdicts for UI hints and debugging
3. The individual stage predicates, usable on their own
"""

from .checker import (
    LegalityChecker,
    LegalityReport,
    can_play,
    check_default_eligibility,
)
from .context import EvaluationContext
from .alternate_state import needs_alternate_view, resolve_alternate_view
from .zone import check_zone_restrictions
from .timing import check_casting_speed, check_timing_restrictions
from .activator import check_activator_restrictions
from .other import GATES, check_other_restrictions, first_failing_gate
from .limits import UNLIMITED, check_activation_limits

__all__ = [
    "LegalityChecker",
    "LegalityReport",
    "can_play",
    "check_default_eligibility",
    "EvaluationContext",
    "needs_alternate_view",
    "resolve_alternate_view",
    "check_zone_restrictions",
    "check_casting_speed",
    "check_timing_restrictions",
    "check_activator_restrictions",
    "GATES",
    "check_other_restrictions",
    "first_failing_gate",
    "UNLIMITED",
    "check_activation_limits",
]
