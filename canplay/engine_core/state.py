"""
Game State - Reference in-memory model of a card game table.

This is the read-only query surface the legality core consumes:
- Zones, phases and game types
- Cards (with last-known zone, types, keywords, SVars, grants)
- Players (life, keywords, per-turn bookkeeping)
- Derived player status (threshold, metalcraft, delirium, ...)

The legality core never mutates any of this. Hosts with their own
engine only need to expose the same methods (see interfaces.py).
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:
    from .action import Action, CostPaymentEntry
    from .play_option import CardPlayOption


class ZoneType(Enum):
    """Named regions that hold cards."""
    HAND = "Hand"
    LIBRARY = "Library"
    GRAVEYARD = "Graveyard"
    BATTLEFIELD = "Battlefield"
    EXILE = "Exile"
    STACK = "Stack"
    COMMAND = "Command"
    SIDEBOARD = "Sideboard"

    @classmethod
    def smart_value_of(cls, value: str) -> ZoneType:
        """Parse a zone name case-insensitively ("hand", "Hand", "HAND")."""
        normalized = value.strip().lower()
        for zone in cls:
            if zone.value.lower() == normalized or zone.name.lower() == normalized:
                return zone
        raise ValueError(f"Unknown zone: {value!r}")


class PhaseType(Enum):
    """Steps and phases of a turn, in turn order."""
    UNTAP = "Untap"
    UPKEEP = "Upkeep"
    DRAW = "Draw"
    MAIN1 = "Main1"
    COMBAT_BEGIN = "BeginCombat"
    COMBAT_DECLARE_ATTACKERS = "DeclareAttackers"
    COMBAT_DECLARE_BLOCKERS = "DeclareBlockers"
    COMBAT_FIRST_STRIKE_DAMAGE = "FirstStrikeDamage"
    COMBAT_DAMAGE = "CombatDamage"
    COMBAT_END = "EndCombat"
    MAIN2 = "Main2"
    END_OF_TURN = "EndOfTurn"
    CLEANUP = "Cleanup"

    @property
    def is_main(self) -> bool:
        return self in (PhaseType.MAIN1, PhaseType.MAIN2)

    @classmethod
    def smart_value_of(cls, value: str) -> PhaseType:
        normalized = value.strip().replace(" ", "").lower()
        for phase in cls:
            if phase.value.lower() == normalized or phase.name.lower() == normalized:
                return phase
        raise ValueError(f"Unknown phase: {value!r}")

    @classmethod
    def parse_range(cls, value: str) -> frozenset[PhaseType]:
        """
        Parse a phase list.

        Accepts comma-separated names and inclusive ranges:
            "Upkeep"                  -> {UPKEEP}
            "Main1,Main2"             -> {MAIN1, MAIN2}
            "BeginCombat->EndCombat"  -> every combat step
        """
        order = list(cls)
        result: set[PhaseType] = set()
        for part in value.split(","):
            part = part.strip()
            if not part:
                continue
            if "->" in part:
                start_name, end_name = part.split("->", 1)
                start = order.index(cls.smart_value_of(start_name))
                end = order.index(cls.smart_value_of(end_name))
                if end < start:
                    raise ValueError(f"Phase range runs backwards: {part!r}")
                result.update(order[start:end + 1])
            else:
                result.add(cls.smart_value_of(part))
        return frozenset(result)


class GameType(Enum):
    """Game variants an ability may be restricted to."""
    CONSTRUCTED = "Constructed"
    SEALED = "Sealed"
    DRAFT = "Draft"
    COMMANDER = "Commander"
    PLANECHASE = "Planechase"
    ARCHENEMY = "Archenemy"
    VANGUARD = "Vanguard"
    GAUNTLET = "Gauntlet"

    @classmethod
    def list_value_of(cls, value: str) -> frozenset[GameType]:
        result = set()
        for part in value.split(","):
            part = part.strip().lower()
            if not part:
                continue
            for game_type in cls:
                if game_type.value.lower() == part:
                    result.add(game_type)
                    break
            else:
                raise ValueError(f"Unknown game type: {part!r}")
        return frozenset(result)


@dataclass
class Card:
    """
    A card instance on the table.

    `zone` is the last zone the card was seen in. A card copy made
    for evaluation purposes carries `lki=True`.
    """
    card_id: str  # Unique instance ID
    name: str
    owner_id: str
    controller_id: str | None = None  # Defaults to owner

    types: frozenset[str] = frozenset()  # Creature, Sorcery, Artifact...
    supertypes: frozenset[str] = frozenset()  # Legendary, Basic...
    subtypes: frozenset[str] = frozenset()  # Zombie, Aura, Desert...
    keywords: list[str] = field(default_factory=list)

    zone: ZoneType | None = None
    phased_out: bool = False
    used_to_pay: bool = False  # Being consumed as part of a cost
    token: bool = False

    chosen_colors: list[str] = field(default_factory=list)
    svars: dict[str, str] = field(default_factory=dict)
    planeswalker_activations: int = 0  # Loyalty abilities activated this turn

    bestowed: bool = False
    lki: bool = False

    may_play: list[CardPlayOption] = field(default_factory=list)
    remembered: list[str] = field(default_factory=list)
    imprinted: list[str] = field(default_factory=list)
    attached_to: str | None = None

    def __post_init__(self):
        if self.controller_id is None:
            self.controller_id = self.owner_id

    def __hash__(self):
        return hash(self.card_id)

    def __eq__(self, other):
        if not isinstance(other, Card):
            return False
        return self.card_id == other.card_id

    def is_in_zone(self, zone: ZoneType) -> bool:
        return self.zone == zone

    def has_type(self, type_name: str) -> bool:
        """Check core types, supertypes and subtypes."""
        return (
            type_name in self.types
            or type_name in self.supertypes
            or type_name in self.subtypes
        )

    @property
    def is_creature(self) -> bool:
        return "Creature" in self.types

    @property
    def is_sorcery(self) -> bool:
        return "Sorcery" in self.types

    @property
    def is_instant(self) -> bool:
        return "Instant" in self.types

    @property
    def is_legendary(self) -> bool:
        return "Legendary" in self.supertypes

    @property
    def is_permanent(self) -> bool:
        return not (self.is_instant or self.is_sorcery)

    @property
    def creature_types(self) -> frozenset[str]:
        """Subtypes that are creature types (Kindred cards carry them too)."""
        if self.is_creature or "Kindred" in self.types or "Tribal" in self.types:
            return self.subtypes
        return frozenset()

    def has_keyword(self, keyword: str) -> bool:
        return keyword in self.keywords

    def keyword_count(self, keyword: str) -> int:
        return sum(1 for k in self.keywords if k == keyword)

    def has_chosen_color(self, color: str) -> bool:
        return color.lower() in (c.lower() for c in self.chosen_colors)

    def has_svar(self, name: str) -> bool:
        return name in self.svars

    def get_svar(self, name: str) -> str | None:
        return self.svars.get(name)

    def may_play_option(self, grant: CardPlayOption | None) -> CardPlayOption | None:
        """Return the grant if it still applies to this card."""
        if grant is None:
            return None
        for option in self.may_play:
            if option is grant or option == grant:
                return option
        return None

    def may_play_for(self, player_id: str) -> list[CardPlayOption]:
        """All grants that let `player_id` play this card."""
        return [o for o in self.may_play if o.player_id == player_id]


@dataclass
class Player:
    """A participant at the table."""
    player_id: str
    name: str
    life: int = 20
    keywords: list[str] = field(default_factory=list)

    # Per-turn bookkeeping maintained by the host engine
    spells_cast_this_turn: int = 0
    life_lost_this_turn: int = 0
    prowl_types: set[str] = field(default_factory=set)  # Types that dealt combat damage

    has_city_blessing: bool = False

    def __hash__(self):
        return hash(self.player_id)

    def __eq__(self, other):
        if not isinstance(other, Player):
            return False
        return self.player_id == other.player_id

    def has_keyword(self, keyword: str) -> bool:
        return keyword in self.keywords

    def has_prowl(self, creature_type: str) -> bool:
        return creature_type in self.prowl_types


@dataclass
class GameState:
    """
    Complete table state at a point in time.

    Cards are kept in a flat list and located by their `zone`.
    Battlefield cards belong to their controller, every other zone
    to the owner.
    """
    game_id: str
    players: list[Player] = field(default_factory=list)
    cards: list[Card] = field(default_factory=list)

    phase: PhaseType = PhaseType.MAIN1
    turn_player_id: str | None = None
    turn_number: int = 1
    game_type: GameType = GameType.CONSTRUCTED

    # Abilities currently paying costs (mana abilities may not pay for themselves)
    cost_payment_stack: list[CostPaymentEntry] = field(default_factory=list)

    # Action IDs whose flash-granting static needs targets to be known first
    flash_targeting_actions: set[str] = field(default_factory=set)

    metadata: dict[str, Any] = field(default_factory=dict)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_player(self, player_id: str | None) -> Player | None:
        """Get player by ID."""
        for p in self.players:
            if p.player_id == player_id:
                return p
        return None

    def get_card(self, card_id: str | None) -> Card | None:
        for c in self.cards:
            if c.card_id == card_id:
                return c
        return None

    @property
    def turn_player(self) -> Player | None:
        return self.get_player(self.turn_player_id)

    def is_player_turn(self, player: Player) -> bool:
        return self.turn_player_id == player.player_id

    def is_opponent(self, player: Player, other: Player | None) -> bool:
        """Every other player at the table is an opponent."""
        return other is not None and other.player_id != player.player_id

    def opponents_of(self, player: Player) -> list[Player]:
        return [p for p in self.players if self.is_opponent(player, p)]

    def cards_in(self, zone: ZoneType, player: Player | None = None) -> list[Card]:
        """Cards in a zone, optionally only those belonging to `player`."""
        cards = [c for c in self.cards if c.zone == zone]
        if player is None:
            return cards
        if zone == ZoneType.BATTLEFIELD:
            return [c for c in cards if c.controller_id == player.player_id]
        return [c for c in cards if c.owner_id == player.player_id]

    @property
    def stack_is_empty(self) -> bool:
        return not self.cards_in(ZoneType.STACK)

    # ------------------------------------------------------------------
    # Timing
    # ------------------------------------------------------------------

    def can_cast_sorcery(self, player: Player) -> bool:
        """Own turn, a main phase, and nothing waiting on the stack."""
        return (
            self.is_player_turn(player)
            and self.phase.is_main
            and self.stack_is_empty
        )

    def any_with_flash_needs_targeting(self, action: Action, card: Card, player: Player) -> bool:
        return action.action_id in self.flash_targeting_actions

    # ------------------------------------------------------------------
    # Derived player status
    # ------------------------------------------------------------------

    def has_threshold(self, player: Player) -> bool:
        return len(self.cards_in(ZoneType.GRAVEYARD, player)) >= 7

    def has_metalcraft(self, player: Player) -> bool:
        artifacts = [
            c for c in self.cards_in(ZoneType.BATTLEFIELD, player)
            if "Artifact" in c.types
        ]
        return len(artifacts) >= 3

    def has_delirium(self, player: Player) -> bool:
        card_types = set()
        for c in self.cards_in(ZoneType.GRAVEYARD, player):
            card_types.update(c.types)
        return len(card_types) >= 4

    def has_hellbent(self, player: Player) -> bool:
        return not self.cards_in(ZoneType.HAND, player)

    def has_desert(self, player: Player) -> bool:
        for zone in (ZoneType.BATTLEFIELD, ZoneType.GRAVEYARD):
            if any("Desert" in c.subtypes for c in self.cards_in(zone, player)):
                return True
        return False

    def has_blessing(self, player: Player) -> bool:
        return player.has_city_blessing

    def has_surge(self, player: Player) -> bool:
        return player.spells_cast_this_turn > 0

    def opponent_lost_life_this_turn(self, player: Player) -> int:
        return sum(p.life_lost_this_turn for p in self.opponents_of(player))

    def opponents_smallest_life_total(self, player: Player) -> int:
        opponents = self.opponents_of(player)
        if not opponents:
            return player.life
        return min(p.life for p in opponents)

    def _copy_with(self, **kwargs) -> GameState:
        """Create a copy with some fields replaced."""
        return replace(self, **kwargs)
