"""
Action System - the closed set of player-issued commands.

Actions are:
- Immutable values
- Validated and applied by the reducer
- Exhaustive: every ActionType has exactly one action class and one handler

There is no other way to change a game.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Iterable, Union


class ActionType(Enum):
    """Types of actions in the system."""
    PLACE_TROOPS = "place_troops"
    REINFORCE = "reinforce"
    ATTACK = "attack"
    TRADE_CARDS = "trade_cards"
    END_TURN = "end_turn"


@dataclass(frozen=True)
class PlaceTroops:
    """Place bonus troops on an owned territory."""
    action_type: ClassVar[ActionType] = ActionType.PLACE_TROOPS
    player_id: str
    troops: int
    territory: str


@dataclass(frozen=True)
class Reinforce:
    """Move troops between two adjacent owned territories."""
    action_type: ClassVar[ActionType] = ActionType.REINFORCE
    player_id: str
    from_territory: str
    to_territory: str
    troops: int


@dataclass(frozen=True)
class Attack:
    """Attack defender_id's territory `to_territory` from `from_territory`."""
    action_type: ClassVar[ActionType] = ActionType.ATTACK
    player_id: str
    defender_id: str
    from_territory: str
    to_territory: str
    troops: int


@dataclass(frozen=True)
class TradeCards:
    """Trade a set of territory cards (identified by territory name) for troops."""
    action_type: ClassVar[ActionType] = ActionType.TRADE_CARDS
    player_id: str
    cards: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self):
        if not isinstance(self.cards, frozenset):
            object.__setattr__(self, "cards", frozenset(self.cards))


@dataclass(frozen=True)
class EndTurn:
    """End the current player's turn."""
    action_type: ClassVar[ActionType] = ActionType.END_TURN

    @property
    def player_id(self) -> None:
        return None


GameAction = Union[PlaceTroops, Reinforce, Attack, TradeCards, EndTurn]

ACTION_CLASSES: dict[ActionType, type] = {
    ActionType.PLACE_TROOPS: PlaceTroops,
    ActionType.REINFORCE: Reinforce,
    ActionType.ATTACK: Attack,
    ActionType.TRADE_CARDS: TradeCards,
    ActionType.END_TURN: EndTurn,
}


# Factories, mirroring how callers usually build actions


def place_troops(player_id: str, troops: int, territory: str) -> PlaceTroops:
    return PlaceTroops(player_id=player_id, troops=troops, territory=territory)


def reinforce(player_id: str, from_territory: str, to_territory: str, troops: int) -> Reinforce:
    return Reinforce(
        player_id=player_id,
        from_territory=from_territory,
        to_territory=to_territory,
        troops=troops,
    )


def attack(
    player_id: str,
    defender_id: str,
    from_territory: str,
    to_territory: str,
    troops: int,
) -> Attack:
    return Attack(
        player_id=player_id,
        defender_id=defender_id,
        from_territory=from_territory,
        to_territory=to_territory,
        troops=troops,
    )


def trade_cards(player_id: str, cards: Iterable[str]) -> TradeCards:
    return TradeCards(player_id=player_id, cards=frozenset(cards))


def end_turn() -> EndTurn:
    return EndTurn()
