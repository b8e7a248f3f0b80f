"""
Players and per-player state.

Player is the immutable identity created at game start.
PlayerState is the per-player record the reducer replaces on every
placing, trading and conquering action.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from .objectives import ObjectiveCard


class PlayerColor(Enum):
    RED = "red"
    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"
    BLACK = "black"
    PURPLE = "purple"


class PlayerType(Enum):
    HUMAN = "human"
    BOT = "bot"


@dataclass(frozen=True)
class Player:
    """Player identity. Never changes during a game."""
    id: str
    name: str
    color: PlayerColor = PlayerColor.RED
    kind: PlayerType = PlayerType.HUMAN

    @property
    def is_human(self) -> bool:
        return self.kind == PlayerType.HUMAN


class CardSymbol(Enum):
    """Symbols printed on territory cards."""
    INFANTRY = "infantry"
    CAVALRY = "cavalry"
    ARTILLERY = "artillery"


@dataclass(frozen=True)
class TerritoryCard:
    """
    A territory card.

    Each card is bound to one territory; the territory name doubles as the
    card identifier used by TradeCards.
    """
    territory: str
    symbol: CardSymbol

    @property
    def card_id(self) -> str:
        return self.territory


@dataclass(frozen=True)
class PlayerState:
    """
    Mutable-by-replacement state for a single player.

    - bonus_troops: troops available to PlaceTroops (>= 0)
    - territory_cards: held cards
    - objective: private win condition
    - eliminated_by: the player whose attack took their last territory
    """
    player_id: str
    bonus_troops: int = 0
    territory_cards: frozenset[TerritoryCard] = field(default_factory=frozenset)
    objective: ObjectiveCard | None = None
    eliminated_by: str | None = None

    def __post_init__(self):
        if self.bonus_troops < 0:
            raise ValueError(f"bonus_troops must be >= 0, got {self.bonus_troops}")
        if not isinstance(self.territory_cards, frozenset):
            object.__setattr__(self, "territory_cards", frozenset(self.territory_cards))

    def find_card(self, card_id: str) -> TerritoryCard | None:
        """Get a held card by identifier."""
        for card in self.territory_cards:
            if card.card_id == card_id:
                return card
        return None

    def with_bonus_troops(self, bonus_troops: int) -> PlayerState:
        return replace(self, bonus_troops=bonus_troops)

    def with_cards_added(self, cards: Iterable[TerritoryCard]) -> PlayerState:
        return replace(self, territory_cards=self.territory_cards | frozenset(cards))

    def with_cards_removed(self, cards: Iterable[TerritoryCard]) -> PlayerState:
        return replace(self, territory_cards=self.territory_cards - frozenset(cards))

    def with_objective(self, objective: ObjectiveCard | None) -> PlayerState:
        return replace(self, objective=objective)

    def with_eliminated_by(self, player_id: str | None) -> PlayerState:
        return replace(self, eliminated_by=player_id)
