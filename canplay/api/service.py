"""
API Service - Business logic layer between API and engine.

The service:
1. Turns script parameters into restriction sets
2. Rebuilds engine objects from a table snapshot
3. Runs the legality check and reports every stage

This layer is framework-agnostic (used by the FastAPI app and the CLI).
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Mapping
import logging

from ..engine_core.action import Action, ActionKind, ActivationCounters, CostPaymentEntry
from ..engine_core.expression import ExpressionEvaluator
from ..engine_core.play_option import CardPlayOption
from ..engine_core.state import Card, GameState, PhaseType, Player
from ..legality.checker import LegalityChecker, LegalityReport
from ..restriction_schema import RestrictionSet, build_restrictions, validate_restrictions
from .schemas import (
    ActionInfo,
    ActionKindInfo,
    CardInfo,
    CheckRequest,
    CheckResponse,
    ComparisonInfo,
    ParseRequest,
    ParseResponse,
    PlayerInfo,
    RestrictionInfo,
    TableSnapshot,
)

logger = logging.getLogger(__name__)


class UnknownCardError(LookupError):
    """The snapshot has no card with the requested ID."""


class UnknownPlayerError(LookupError):
    """A player ID in the request is not at the table."""


@dataclass
class LegalityService:
    """
    Main legality service.

    Usage:
        service = LegalityService()

        # Parse script parameters
        response = service.parse_restrictions(ParseRequest(params={...}))

        # Check an action against a snapshot
        response = service.check(CheckRequest(table=..., card_id="c1"))
    """
    evaluator: ExpressionEvaluator = field(default_factory=ExpressionEvaluator)

    def parse_restrictions(self, request: ParseRequest) -> ParseResponse:
        """
        Parse and validate restriction parameters.

        Raises RestrictionValidationError on malformed parameters.
        """
        restrictions = build_restrictions(request.params, strict=request.strict)
        result = validate_restrictions(restrictions)
        return ParseResponse(
            restrictions=restriction_info(restrictions),
            unrestricted=restrictions.is_unrestricted,
            warnings=result.warnings,
        )

    def check(self, request: CheckRequest) -> CheckResponse:
        """
        Check one action against a table snapshot.

        Raises:
            RestrictionValidationError: malformed restriction parameters
            UnknownCardError / UnknownPlayerError: dangling references
            ExpressionError: an expression could not be evaluated
        """
        report = self.explain(
            table=request.table,
            card_id=request.card_id,
            action_info=request.action,
            params=request.params,
        )
        return CheckResponse(
            legal=report.verdict,
            stages=report.stages,
            failed_stage=report.failed_stage,
            failed_gate=report.failed_gate,
            activator_defaulted=report.activator_defaulted,
        )

    def explain(
        self,
        table: TableSnapshot,
        card_id: str,
        action_info: ActionInfo,
        params: Mapping[str, Any],
    ) -> LegalityReport:
        restrictions = build_restrictions(params)
        game_state = to_game_state(table)

        card = game_state.get_card(card_id)
        if card is None:
            raise UnknownCardError(f"Card not found: {card_id}")

        action = to_action(action_info, card, game_state)
        if action.action_id in table.paying_costs:
            game_state.cost_payment_stack.append(
                CostPaymentEntry(ability=action, payer_id=card.controller_id)
            )

        checker = LegalityChecker(
            restrictions=restrictions,
            game_state=game_state,
            evaluator=self.evaluator,
        )
        report = checker.explain(card, action)
        logger.info(
            "Checked %s on %s: %s",
            action.kind.value,
            card.name,
            "legal" if report.verdict else f"rejected at {report.failed_stage}",
        )
        return report


# =============================================================================
# Conversion Helpers
# =============================================================================

def to_player(info: PlayerInfo) -> Player:
    return Player(
        player_id=info.player_id,
        name=info.name,
        life=info.life,
        keywords=list(info.keywords),
        spells_cast_this_turn=info.spells_cast_this_turn,
        life_lost_this_turn=info.life_lost_this_turn,
        prowl_types=set(info.prowl_types),
        has_city_blessing=info.has_city_blessing,
    )


def to_card(info: CardInfo) -> Card:
    return Card(
        card_id=info.card_id,
        name=info.name,
        owner_id=info.owner_id,
        controller_id=info.controller_id,
        types=frozenset(info.types),
        supertypes=frozenset(info.supertypes),
        subtypes=frozenset(info.subtypes),
        keywords=list(info.keywords),
        zone=info.zone,
        phased_out=info.phased_out,
        used_to_pay=info.used_to_pay,
        token=info.token,
        chosen_colors=list(info.chosen_colors),
        svars=dict(info.svars),
        planeswalker_activations=info.planeswalker_activations,
        bestowed=info.bestowed,
        may_play=[
            CardPlayOption(
                player_id=o.player_id,
                host_card_id=o.host_card_id,
                grants_zone_permissions=o.grants_zone_permissions,
                params=dict(o.params),
            )
            for o in info.may_play
        ],
        remembered=list(info.remembered),
        imprinted=list(info.imprinted),
        attached_to=info.attached_to,
    )


def to_game_state(table: TableSnapshot) -> GameState:
    """Rebuild a GameState, checking every player reference."""
    players = [to_player(p) for p in table.players]
    known = {p.player_id for p in players}

    if table.turn_player_id is not None and table.turn_player_id not in known:
        raise UnknownPlayerError(f"Turn player not at the table: {table.turn_player_id}")

    cards = []
    for info in table.cards:
        for player_id in (info.owner_id, info.controller_id):
            if player_id is not None and player_id not in known:
                raise UnknownPlayerError(
                    f"Card {info.card_id} references unknown player {player_id}"
                )
        cards.append(to_card(info))

    return GameState(
        game_id=table.game_id,
        players=players,
        cards=cards,
        phase=table.phase,
        turn_player_id=table.turn_player_id,
        turn_number=table.turn_number,
        game_type=table.game_type,
        flash_targeting_actions=set(table.flash_targeting),
    )


def to_action(info: ActionInfo, card: Card, game_state: GameState) -> Action:
    """Rebuild the action, resolving its activator and grant against the table."""
    activator = None
    if info.activating_player_id is not None:
        activator = game_state.get_player(info.activating_player_id)
        if activator is None:
            raise UnknownPlayerError(f"Player not found: {info.activating_player_id}")

    grant = None
    if info.may_play_index is not None:
        if info.may_play_index >= len(card.may_play):
            raise ValueError(
                f"Card {card.card_id} has no may_play grant at index {info.may_play_index}"
            )
        grant = card.may_play[info.may_play_index]

    kind = ActionKind.SPELL if info.kind == ActionKindInfo.SPELL else ActionKind.ACTIVATED
    kwargs: dict[str, Any] = {}
    if info.action_id is not None:
        kwargs["action_id"] = info.action_id

    return Action(
        kind=kind,
        host=card,
        activating_player=activator,
        params=dict(info.params),
        svars=dict(info.svars),
        may_play=grant,
        bestow=info.bestow,
        aftermath=info.aftermath,
        surged=info.surged,
        spectacle=info.spectacle,
        prowl=info.prowl,
        boast=info.boast,
        pw_ability=info.pw_ability,
        mana_ability=info.mana_ability,
        card_state=info.card_state,
        x_paid=info.x_paid,
        counters=ActivationCounters(
            activations_this_turn=info.activations_this_turn,
            activations_this_game=info.activations_this_game,
        ),
        **kwargs,
    )


def restriction_info(restrictions: RestrictionSet) -> RestrictionInfo:
    def comparison(c):
        return ComparisonInfo(op=c.op.value, operand=c.operand) if c is not None else None

    return RestrictionInfo(
        zone=restrictions.zone,
        player_turn=restrictions.player_turn,
        opponent_turn=restrictions.opponent_turn,
        phases=sorted(restrictions.phases, key=list(PhaseType).index),
        sorcery_speed=restrictions.sorcery_speed,
        instant_speed=restrictions.instant_speed,
        activator=restrictions.activator,
        limit_to_check=restrictions.limit_to_check,
        game_limit_to_check=restrictions.game_limit_to_check,
        game_types=sorted(restrictions.game_types, key=lambda g: g.value),
        status_gates=sorted(g.value for g in restrictions.status_gates),
        cards_in_hand=restrictions.cards_in_hand,
        color_to_check=restrictions.color_to_check,
        is_present=restrictions.is_present,
        present_compare=comparison(restrictions.present_compare),
        present_zone=restrictions.present_zone,
        present_defined=restrictions.present_defined,
        life_total=restrictions.life_total.value if restrictions.life_total else None,
        life_amount=comparison(restrictions.life_amount),
        svar_to_check=restrictions.svar_to_check,
        svar_compare=comparison(restrictions.svar_compare),
    )
