"""
Play Options - "May play" grants.

A grant lets a player cast a card outside its normal zone or
activator rules ("You may cast cards exiled with ~", flashback-style
effects, ...). Grants are created by static abilities in the host
engine; the legality core only reads them.
"""

from __future__ import annotations
from dataclasses import dataclass, field


@dataclass(eq=False)
class CardPlayOption:
    """
    A single permission to play a card.

    Attributes:
        player_id: Who may use the permission.
        host_card_id: The card whose static ability created it.
        grants_zone_permissions: True if the grant itself lets the card be
            cast from its current zone. False means the grant only changes
            *how* it is cast (e.g. without paying its mana cost) and some
            other effect must make the zone legal.
        params: Extra filters. "Affected" restricts which cards, "ValidSA"
            restricts which spells of the card.
    """
    player_id: str
    host_card_id: str | None = None
    grants_zone_permissions: bool = True
    params: dict[str, str] = field(default_factory=dict)

    @property
    def affected(self) -> str | None:
        return self.params.get("Affected")

    @property
    def valid_sa(self) -> str | None:
        return self.params.get("ValidSA")
