"""
Tests for building and validating restriction sets.

Tests:
- Script parameters to RestrictionSet
- Defaults for presence and life conditions
- Structural and semantic validation errors
"""

import pytest

from ..engine_core.state import GameType, PhaseType, ZoneType
from ..restriction_schema import (
    CompareOp,
    Comparison,
    LifeTotalSource,
    RestrictionSet,
    RestrictionValidationError,
    StatusGate,
    build_restrictions,
    validate_restrictions,
)


class TestBuildRestrictions:
    """Tests for build_restrictions()."""

    def test_empty_params_are_unrestricted(self):
        """No restriction keys gives the default set."""
        restrictions = build_restrictions({})
        assert restrictions.is_unrestricted
        assert restrictions == RestrictionSet()

    def test_unknown_keys_ignored(self):
        """Effect parameters in the same mapping are ignored."""
        restrictions = build_restrictions({"AB": "Draw", "NumCards": "2"})
        assert restrictions.is_unrestricted

    def test_zone_and_timing(self):
        """Zone, flags and phases are parsed."""
        restrictions = build_restrictions({
            "ActivationZone": "Graveyard",
            "SorcerySpeed": "True",
            "PlayerTurn": "True",
            "ActivationPhases": "Upkeep,Main1",
        })
        assert restrictions.zone == ZoneType.GRAVEYARD
        assert restrictions.sorcery_speed
        assert restrictions.player_turn
        assert not restrictions.opponent_turn
        assert restrictions.phases == {PhaseType.UPKEEP, PhaseType.MAIN1}

    def test_phase_range(self):
        """Phase ranges expand to every step in between."""
        restrictions = build_restrictions({"ActivationPhases": "BeginCombat->EndCombat"})
        assert PhaseType.COMBAT_DECLARE_BLOCKERS in restrictions.phases
        assert PhaseType.MAIN1 not in restrictions.phases
        assert len(restrictions.phases) == 6

    def test_presence_defaults(self):
        """IsPresent defaults to GE1 on the battlefield."""
        restrictions = build_restrictions({"IsPresent": "Creature.Zombie+YouCtrl"})
        assert restrictions.is_present == "Creature.Zombie+YouCtrl"
        assert restrictions.present_compare == Comparison(CompareOp.GE, "1")
        assert restrictions.present_zone == ZoneType.BATTLEFIELD

    def test_presence_compare(self):
        """PresentCompare and PresentZone override the defaults."""
        restrictions = build_restrictions({
            "IsPresent": "Card.YouOwn",
            "PresentCompare": "LE3",
            "PresentZone": "Graveyard",
        })
        assert restrictions.present_compare == Comparison(CompareOp.LE, "3")
        assert restrictions.present_zone == ZoneType.GRAVEYARD

    def test_is_not_present(self):
        """IsNotPresent means a count of exactly zero."""
        restrictions = build_restrictions({"IsNotPresent": "Creature.OppCtrl"})
        assert restrictions.is_present == "Creature.OppCtrl"
        assert restrictions.present_compare == Comparison(CompareOp.EQ, "0")

    def test_life_condition(self):
        """Life conditions default to GE1."""
        restrictions = build_restrictions({"ActivationLifeTotal": "OpponentSmallest"})
        assert restrictions.life_total == LifeTotalSource.OPPONENT_SMALLEST
        assert restrictions.life_amount == Comparison(CompareOp.GE, "1")

        restrictions = build_restrictions({
            "ActivationLifeTotal": "You",
            "ActivationLifeAmount": "LE5",
        })
        assert restrictions.life_amount == Comparison(CompareOp.LE, "5")

    def test_status_gates_and_game_types(self):
        """Activation gates and game types are parsed as sets."""
        restrictions = build_restrictions({
            "Activation": "Threshold,Hellbent",
            "ActivationGameTypes": "Commander,Planechase",
        })
        assert restrictions.requires(StatusGate.THRESHOLD)
        assert restrictions.requires(StatusGate.HELLBENT)
        assert not restrictions.requires(StatusGate.METALCRAFT)
        assert restrictions.game_types == {GameType.COMMANDER, GameType.PLANECHASE}

    def test_limits_and_svar(self):
        """Limits and SVar checks are kept as expressions."""
        restrictions = build_restrictions({
            "ActivationLimit": "1",
            "GameActivationLimit": "X",
            "CheckSVar": "Y",
            "SVarCompare": "GE2",
        })
        assert restrictions.limit_to_check == "1"
        assert restrictions.game_limit_to_check == "X"
        assert restrictions.svar_to_check == "Y"
        assert str(restrictions.svar_compare) == "GE2"


class TestBuilderErrors:
    """Tests for malformed parameters."""

    @pytest.mark.parametrize(
        "params",
        [
            {"ActivationZone": "Moon"},
            {"ActivationPhases": "Teatime"},
            {"PresentCompare": "XX2", "IsPresent": "Card"},
            {"ActivationCardsInHand": "many"},
            {"ActivationLifeTotal": "Everyone"},
            {"Activation": "Madness"},
        ],
    )
    def test_bad_values_rejected(self, params):
        """Unparseable values raise RestrictionValidationError."""
        with pytest.raises(RestrictionValidationError) as exc_info:
            build_restrictions(params)
        assert exc_info.value.errors

    def test_svar_without_compare(self):
        """CheckSVar needs SVarCompare."""
        with pytest.raises(RestrictionValidationError) as exc_info:
            build_restrictions({"CheckSVar": "X"})
        assert any("SVarCompare" in e for e in exc_info.value.errors)

    def test_lenient_build(self):
        """Semantic errors are tolerated when not strict."""
        restrictions = build_restrictions({"ActivationCardsInHand": "-1"}, strict=False)
        assert restrictions.cards_in_hand == -1


class TestValidateRestrictions:
    """Tests for semantic validation."""

    def test_valid_set(self):
        """The default set is valid with no warnings."""
        result = validate_restrictions(RestrictionSet())
        assert result.valid
        assert result.errors == []
        assert result.warnings == []

    def test_negative_hand_size(self):
        """A negative hand size is an error."""
        result = validate_restrictions(RestrictionSet(cards_in_hand=-1))
        assert not result.valid

    def test_contradictory_turn_flags(self):
        """Both turn flags together is only a warning."""
        result = validate_restrictions(RestrictionSet(player_turn=True, opponent_turn=True))
        assert result.valid
        assert len(result.warnings) == 1
