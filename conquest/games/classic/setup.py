"""
Classic Game Setup - Creates initial game state.

This module handles:
- Building the classic board
- Initial troop pools by player count
- Dealing objectives
- Shuffling the territory deck
- Dealing territories round-robin

Shuffles take an injected random.Random so setup is reproducible.
"""

from __future__ import annotations
import random
from typing import Sequence

from ...engine_core.board import Board
from ...engine_core.player import Player, PlayerState
from ...engine_core.rules import RulesConfig
from ...engine_core.state import GameState
from ...engine_core.turn import TurnManager, TurnPhase
from .board import build_classic_board
from .cards import shuffled_deck
from .objectives import deal_objectives


def create_game_state(
    players: Sequence[Player],
    board: Board | None = None,
    rules: RulesConfig | None = None,
    rng: random.Random | None = None,
) -> GameState:
    """
    Set up a new game in SetupPhase.

    Args:
        players: Players in turn order (2-6 with the default rules)
        board: Board to play on (defaults to the classic map, unowned)
        rules: Rule constants
        rng: Source of randomness for the objective and card shuffles

    Returns:
        Initial GameState with every territory unowned
    """
    rules = rules or RulesConfig()
    rng = rng or random.Random()
    board = board or build_classic_board()

    initial_troops = rules.initial_troops_for(len(players))
    objectives = deal_objectives(players, rng)

    player_states = tuple(
        PlayerState(
            player_id=p.id,
            bonus_troops=initial_troops,
            objective=objectives[p.id],
        )
        for p in players
    )

    return GameState(
        board=board,
        player_states=player_states,
        turn_manager=TurnManager(players=tuple(players), phase=TurnPhase.SETUP),
        deck=shuffled_deck(board, rng),
    )


def deal_territories(state: GameState, rng: random.Random | None = None) -> GameState:
    """
    Distribute every territory round-robin in a shuffled order.

    Each dealt territory gets one troop, taken from its owner's pool.
    """
    if any(t.is_owned for t in state.board.territories):
        raise ValueError("Territories have already been dealt")

    names = list(state.board.territory_names)
    (rng or random.Random()).shuffle(names)
    players = state.turn_manager.players

    dealt = []
    counts = {p.id: 0 for p in players}
    for i, name in enumerate(names):
        owner = players[i % len(players)]
        dealt.append(state.board.territory(name).with_owner(owner, 1))
        counts[owner.id] += 1

    new_state = state.with_board(state.board.with_territories(*dealt))
    for player in players:
        player_state = new_state.player_state(player.id)
        if player_state.bonus_troops < counts[player.id]:
            raise ValueError(
                f"Player {player.id} has {player_state.bonus_troops} troops, "
                f"needs {counts[player.id]} to cover dealt territories"
            )
        new_state = new_state.with_player_state(
            player_state.with_bonus_troops(player_state.bonus_troops - counts[player.id])
        )
    return new_state
