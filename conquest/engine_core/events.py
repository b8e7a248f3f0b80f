"""
Game events for notifications and logging.
Events describe what happened during action processing.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any

from .combat import BattleResult


@dataclass(frozen=True)
class GameEvent:
    """Base event class. All events have a type and payload."""
    type: str
    payload: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "payload": self.payload}


# ===== Event Type Constants =====

TROOPS_PLACED = "troops_placed"
TROOPS_MOVED = "troops_moved"
BATTLE_RESOLVED = "battle_resolved"
TERRITORY_CONQUERED = "territory_conquered"
PLAYER_ELIMINATED = "player_eliminated"
CARDS_TRADED = "cards_traded"
CARD_DRAWN = "card_drawn"
REINFORCEMENTS_ASSIGNED = "reinforcements_assigned"
TURN_CHANGED = "turn_changed"
PHASE_CHANGED = "phase_changed"
GAME_OVER = "game_over"


# ===== Event Factory Functions =====

def troops_placed(player_id: str, territory: str, troops: int, total: int) -> GameEvent:
    return GameEvent(TROOPS_PLACED, {
        "player_id": player_id,
        "territory": territory,
        "troops": troops,
        "total": total,
    })


def troops_moved(player_id: str, from_territory: str, to_territory: str, troops: int) -> GameEvent:
    return GameEvent(TROOPS_MOVED, {
        "player_id": player_id,
        "from_territory": from_territory,
        "to_territory": to_territory,
        "troops": troops,
    })


def battle_resolved(result: BattleResult) -> GameEvent:
    return GameEvent(BATTLE_RESOLVED, result.to_dict())


def territory_conquered(player_id: str, territory: str, previous_owner: str, troops: int) -> GameEvent:
    return GameEvent(TERRITORY_CONQUERED, {
        "player_id": player_id,
        "territory": territory,
        "previous_owner": previous_owner,
        "troops": troops,
    })


def player_eliminated(player_id: str, eliminated_by: str, cards_transferred: int) -> GameEvent:
    return GameEvent(PLAYER_ELIMINATED, {
        "player_id": player_id,
        "eliminated_by": eliminated_by,
        "cards_transferred": cards_transferred,
    })


def cards_traded(
    player_id: str,
    cards: list[str],
    bonus: int,
    territory_bonus: dict[str, int],
) -> GameEvent:
    return GameEvent(CARDS_TRADED, {
        "player_id": player_id,
        "cards": cards,
        "bonus": bonus,
        "territory_bonus": territory_bonus,
    })


def card_drawn(player_id: str, territory: str | None) -> GameEvent:
    """territory is None when the deck was exhausted and nothing was drawn."""
    return GameEvent(CARD_DRAWN, {
        "player_id": player_id,
        "territory": territory,
        "drawn": territory is not None,
    })


def reinforcements_assigned(player_id: str, troops: int, continents: list[str]) -> GameEvent:
    return GameEvent(REINFORCEMENTS_ASSIGNED, {
        "player_id": player_id,
        "troops": troops,
        "continents": continents,
    })


def turn_changed(previous_player: str, player_id: str, phase: str) -> GameEvent:
    return GameEvent(TURN_CHANGED, {
        "previous_player": previous_player,
        "player_id": player_id,
        "phase": phase,
    })


def phase_changed(old_phase: str, new_phase: str) -> GameEvent:
    return GameEvent(PHASE_CHANGED, {
        "old_phase": old_phase,
        "new_phase": new_phase,
    })


def game_over(winner_id: str, objective: str | None) -> GameEvent:
    return GameEvent(GAME_OVER, {
        "winner_id": winner_id,
        "objective": objective,
    })
