"""
Pytest fixtures for Conquest tests.
"""

import pytest

from ..engine_core import (
    GameEngine,
    GameState,
    Player,
    PlayerColor,
    PlayerType,
    TurnManager,
    TurnPhase,
)
from ..games.classic import build_classic_board


@pytest.fixture
def player1() -> Player:
    return Player("1", "Alice", PlayerColor.RED, PlayerType.HUMAN)


@pytest.fixture
def player2() -> Player:
    return Player("2", "Bob", PlayerColor.BLUE, PlayerType.HUMAN)


@pytest.fixture
def player3() -> Player:
    return Player("3", "Carol", PlayerColor.GREEN, PlayerType.BOT)


@pytest.fixture
def classic_board():
    """Unowned classic board."""
    return build_classic_board()


@pytest.fixture
def engine(player1, player2) -> GameEngine:
    """
    Two-player engine in SetupPhase.

    The first territory on the map is owned by player 1 with 3 troops and
    player 1 has 5 bonus troops. Everything else is unowned.
    """
    engine = GameEngine([player1, player2], seed=42)
    state = engine.get_game_state()
    head = state.board.territories[0]
    board = state.board.with_territories(head.with_owner(player1, 3))
    player_state = state.player_state("1").with_bonus_troops(5)

    engine.set_game_state(state._copy_with(
        board=board,
        turn_manager=TurnManager(
            players=(player1, player2),
            current_player_index=0,
            phase=TurnPhase.SETUP,
        ),
    ).with_player_state(player_state))
    return engine


@pytest.fixture
def main_phase_state(engine) -> GameState:
    """The fixture engine's state switched to MainPhase."""
    state = engine.get_game_state()
    return state.with_turn_manager(state.turn_manager.with_phase(TurnPhase.MAIN))
