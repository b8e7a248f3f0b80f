"""
Game State - the full immutable snapshot the engine operates on.

Design principles:
- Immutable: every mutation returns a new state
- Owned by the engine; callers only ever see snapshots
- Serializable: to_dict() gives a transport-ready view

EngineState holds per-turn scratch data that is deliberately kept out
of the snapshot.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Any

from .board import Board
from .combat import BattleResult
from .errors import NotFoundError
from .player import Player, PlayerState, TerritoryCard
from .turn import TurnManager, TurnPhase


@dataclass(frozen=True)
class GameState:
    """
    Complete game state at a point in time.

    All state changes go through the reducer.
    """
    board: Board
    player_states: tuple[PlayerState, ...]
    turn_manager: TurnManager

    # Territory card supply, top of the deck first
    deck: tuple[TerritoryCard, ...] = ()
    # Global number of card trades, drives the escalating trade bonus
    trades_completed: int = 0
    # Most recent attack this turn
    last_battle: BattleResult | None = None

    def __post_init__(self):
        if not isinstance(self.player_states, tuple):
            object.__setattr__(self, "player_states", tuple(self.player_states))
        if not isinstance(self.deck, tuple):
            object.__setattr__(self, "deck", tuple(self.deck))

    @property
    def phase(self) -> TurnPhase:
        return self.turn_manager.phase

    @property
    def players(self) -> tuple[Player, ...]:
        return self.turn_manager.players

    @property
    def current_player(self) -> Player:
        return self.turn_manager.current_player

    def find_player(self, player_id: str) -> Player | None:
        for player in self.turn_manager.players:
            if player.id == player_id:
                return player
        return None

    def player(self, player_id: str) -> Player:
        """Get player identity by ID, raising NotFoundError if unknown."""
        player = self.find_player(player_id)
        if player is None:
            raise NotFoundError(f"Player {player_id!r} does not exist")
        return player

    def find_player_state(self, player_id: str) -> PlayerState | None:
        for ps in self.player_states:
            if ps.player_id == player_id:
                return ps
        return None

    def player_state(self, player_id: str) -> PlayerState:
        """Get player state by ID, raising NotFoundError if unknown."""
        ps = self.find_player_state(player_id)
        if ps is None:
            raise NotFoundError(f"Player {player_id!r} does not exist")
        return ps

    def with_board(self, board: Board) -> GameState:
        return replace(self, board=board)

    def with_player_state(self, player_state: PlayerState) -> GameState:
        """Return new state with updated player state."""
        return replace(self, player_states=tuple(
            player_state if ps.player_id == player_state.player_id else ps
            for ps in self.player_states
        ))

    def with_turn_manager(self, turn_manager: TurnManager) -> GameState:
        return replace(self, turn_manager=turn_manager)

    def _copy_with(self, **kwargs) -> GameState:
        """Create a copy with some fields replaced."""
        return replace(self, **kwargs)

    def to_dict(self) -> dict[str, Any]:
        """Transport-ready view of the snapshot (objectives stay private)."""
        return {
            "phase": self.phase.value,
            "current_player": self.current_player.id,
            "players": [
                {
                    "id": p.id,
                    "name": p.name,
                    "color": p.color.value,
                    "kind": p.kind.value,
                }
                for p in self.players
            ],
            "player_states": [
                {
                    "player_id": ps.player_id,
                    "bonus_troops": ps.bonus_troops,
                    "card_count": len(ps.territory_cards),
                }
                for ps in self.player_states
            ],
            "territories": [
                {
                    "name": t.name,
                    "continent": c.name,
                    "owner": t.owner_id,
                    "troops": t.troops,
                    "neighbors": sorted(t.neighbors),
                }
                for c in self.board.continents
                for t in c.territories
            ],
            "continents": [
                {
                    "name": c.name,
                    "bonus_troops": c.bonus_troops,
                    "territories": list(c.territory_names),
                }
                for c in self.board.continents
            ],
            "deck_size": len(self.deck),
            "trades_completed": self.trades_completed,
            "last_battle": self.last_battle.to_dict() if self.last_battle else None,
        }


@dataclass(frozen=True)
class EngineState:
    """Per-turn scratch data, reset at every EndTurn."""
    territory_conquered_this_turn: bool = False
