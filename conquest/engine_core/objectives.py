"""
Objective Cards - private win conditions.

Each variant knows how to evaluate itself against a GameState.
check_victory() is run by the reducer after every EndTurn.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .turn import TurnPhase

if TYPE_CHECKING:
    from .state import GameState


@dataclass(frozen=True)
class ObjectiveCard(ABC):
    """Base class for objective cards."""

    @abstractmethod
    def is_satisfied(self, state: GameState, player_id: str) -> bool:
        """Whether player_id has met this objective in state."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable text shown to the holder."""
        pass


@dataclass(frozen=True)
class ConquerTerritories(ObjectiveCard):
    """Control num_territories territories with at least min_troops troops each."""
    num_territories: int
    min_troops: int = 1

    def is_satisfied(self, state: GameState, player_id: str) -> bool:
        qualifying = [
            t for t in state.board.territories_owned_by(player_id)
            if t.troops >= self.min_troops
        ]
        return len(qualifying) >= self.num_territories

    @property
    def description(self) -> str:
        if self.min_troops > 1:
            return (
                f"Conquer {self.num_territories} territories and hold each "
                f"with at least {self.min_troops} troops"
            )
        return f"Conquer {self.num_territories} territories"


@dataclass(frozen=True)
class ConquerContinents(ObjectiveCard):
    """
    Control full continents.

    Every continent in `named` must be owned, and at least `count`
    continents in total (the extra ones are of the player's choice).
    """
    count: int
    named: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self):
        if not isinstance(self.named, frozenset):
            object.__setattr__(self, "named", frozenset(self.named))

    def is_satisfied(self, state: GameState, player_id: str) -> bool:
        owned = {c.name for c in state.board.continents_owned_by(player_id)}
        if not self.named <= owned:
            return False
        return len(owned) >= max(self.count, len(self.named))

    @property
    def description(self) -> str:
        if not self.named:
            return f"Conquer {self.count} continents"
        names = " and ".join(sorted(self.named))
        extra = self.count - len(self.named)
        if extra > 0:
            return f"Conquer {names} plus {extra} continent(s) of your choice"
        return f"Conquer {names}"


@dataclass(frozen=True)
class EliminatePlayer(ObjectiveCard):
    """
    Destroy every army of target_id.

    Only the holder's own attack counts: a target knocked out by somebody
    else leaves the card unfulfilled.
    """
    target_id: str

    def is_satisfied(self, state: GameState, player_id: str) -> bool:
        if self.target_id == player_id:
            return False
        target = state.find_player_state(self.target_id)
        if target is None or target.eliminated_by != player_id:
            return False
        return state.board.count_owned_by(self.target_id) == 0

    @property
    def description(self) -> str:
        return f"Eliminate player {self.target_id}"


def check_victory(state: GameState, first_player_id: str | None = None) -> str | None:
    """
    Return the id of a player whose objective is satisfied, or None.

    Only evaluated in MainPhase. Players without territory are out of the
    game and skipped. Evaluation starts at first_player_id (the player who
    just ended their turn) and proceeds in turn order.
    """
    if state.turn_manager.phase != TurnPhase.MAIN:
        return None

    players = list(state.turn_manager.players)
    if first_player_id is not None:
        ids = [p.id for p in players]
        if first_player_id in ids:
            start = ids.index(first_player_id)
            players = players[start:] + players[:start]

    for player in players:
        player_state = state.find_player_state(player.id)
        if player_state is None or player_state.objective is None:
            continue
        if state.board.count_owned_by(player.id) == 0:
            continue
        if player_state.objective.is_satisfied(state, player.id):
            return player.id
    return None
