"""
Turn Manager - player order, current player and phase.

MainPhase is not split into reinforce/attack/fortify values; those
sub-steps are enforced by which actions each phase accepts.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum

from .player import Player


class TurnPhase(Enum):
    SETUP = "SetupPhase"
    MAIN = "MainPhase"


@dataclass(frozen=True)
class TurnManager:
    players: tuple[Player, ...]
    current_player_index: int = 0
    phase: TurnPhase = TurnPhase.SETUP

    def __post_init__(self):
        if not isinstance(self.players, tuple):
            object.__setattr__(self, "players", tuple(self.players))
        if not self.players:
            raise ValueError("TurnManager needs at least one player")
        if not 0 <= self.current_player_index < len(self.players):
            raise ValueError(
                f"current_player_index {self.current_player_index} out of range "
                f"for {len(self.players)} players"
            )

    @property
    def current_player(self) -> Player:
        return self.players[self.current_player_index]

    @property
    def num_players(self) -> int:
        return len(self.players)

    @property
    def next_player_index(self) -> int:
        return (self.current_player_index + 1) % len(self.players)

    def advance(self) -> TurnManager:
        """Return new turn manager pointing at the next player (cyclic)."""
        return replace(self, current_player_index=self.next_player_index)

    def with_phase(self, phase: TurnPhase) -> TurnManager:
        return replace(self, phase=phase)
