"""
Tests for the timing evaluator and the casting-speed check.
"""

from ..engine_core.action import Action
from ..engine_core.state import PhaseType, ZoneType
from ..legality.timing import check_casting_speed, check_timing_restrictions
from ..restriction_schema import RestrictionSet


class TestTurnRestrictions:
    """Tests for whose turn it must be."""

    def test_own_turn(self, game, sorcery, make_context):
        """Own-turn restriction accepts on the activator's turn only."""
        restrictions = RestrictionSet(player_turn=True)
        assert check_timing_restrictions(make_context(sorcery, restrictions=restrictions))

        game.turn_player_id = "bob"
        assert not check_timing_restrictions(make_context(sorcery, restrictions=restrictions))

    def test_opponent_turn(self, game, sorcery, make_context):
        """Opponent-turn restriction accepts on any opponent's turn."""
        restrictions = RestrictionSet(opponent_turn=True)
        assert not check_timing_restrictions(make_context(sorcery, restrictions=restrictions))

        game.turn_player_id = "bob"
        assert check_timing_restrictions(make_context(sorcery, restrictions=restrictions))

    def test_unrestricted(self, game, sorcery, make_context):
        """No timing restriction accepts in any phase of any turn."""
        game.turn_player_id = "bob"
        game.phase = PhaseType.END_OF_TURN
        assert check_timing_restrictions(make_context(sorcery))


class TestPhaseRestrictions:
    """Tests for phase lists."""

    def test_phase_membership(self, game, sorcery, make_context):
        """The current phase must be one of the listed phases."""
        restrictions = RestrictionSet(phases=PhaseType.parse_range("Upkeep"))
        assert not check_timing_restrictions(make_context(sorcery, restrictions=restrictions))

        game.phase = PhaseType.UPKEEP
        assert check_timing_restrictions(make_context(sorcery, restrictions=restrictions))


class TestCastingSpeed:
    """Tests for normal casting speed."""

    def test_sorcery_needs_main_phase(self, game, sorcery, make_context):
        """Sorceries need the activator's main phase."""
        assert check_casting_speed(make_context(sorcery))

        game.phase = PhaseType.COMBAT_BEGIN
        assert not check_casting_speed(make_context(sorcery))

    def test_sorcery_needs_own_turn(self, game, sorcery, make_context):
        """Sorceries cannot be cast on an opponent's turn."""
        game.turn_player_id = "bob"
        assert not check_casting_speed(make_context(sorcery))

    def test_sorcery_needs_empty_stack(self, game, add_card, sorcery, make_context):
        """Sorceries cannot be cast while something is on the stack."""
        add_card("Pending", owner="bob", zone=ZoneType.STACK, types={"Instant"})
        assert not check_casting_speed(make_context(sorcery))

    def test_instant_and_flash(self, game, add_card, make_context):
        """Instants and flash cards may be cast at any time."""
        game.turn_player_id = "bob"
        bolt = add_card("Lightning Bolt", types={"Instant"})
        ambusher = add_card("Ambush Viper", types={"Creature"}, keywords=["Flash"])
        assert check_casting_speed(make_context(bolt))
        assert check_casting_speed(make_context(ambusher))

    def test_instant_speed_flag(self, game, sorcery, make_context):
        """InstantSpeed lifts sorcery timing."""
        game.turn_player_id = "bob"
        restrictions = RestrictionSet(instant_speed=True, sorcery_speed=True)
        assert check_casting_speed(make_context(sorcery, restrictions=restrictions))

    def test_abilities(self, game, alice, add_card, make_context):
        """Abilities need sorcery timing only when marked SorcerySpeed."""
        relic = add_card("Relic", zone=ZoneType.BATTLEFIELD, types={"Artifact"})
        action = Action.activate(relic, alice)
        game.turn_player_id = "bob"

        assert check_casting_speed(make_context(relic, action))
        assert not check_casting_speed(
            make_context(relic, action, RestrictionSet(sorcery_speed=True))
        )
