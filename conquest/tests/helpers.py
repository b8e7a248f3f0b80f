"""
Test helpers for building board positions.
"""

from ..engine_core import GameEngine, GameState, Player, TurnManager, TurnPhase


def fixed_dice(*values):
    """Dice roller handing out `values` in order, `count` at a time."""
    queue = list(values)

    def roll(count):
        if len(queue) < count:
            raise AssertionError(f"Test dice exhausted: wanted {count}, have {queue}")
        taken = queue[:count]
        del queue[:count]
        return taken

    return roll


def assign(state: GameState, player: Player, troops: int, *names: str) -> GameState:
    """Give `names` to player with `troops` troops each."""
    board = state.board
    return state.with_board(board.with_territories(*[
        board.territory(name).with_owner(player, troops) for name in names
    ]))


def set_bonus(state: GameState, **bonus_by_player: int) -> GameState:
    """set_bonus(state, p1=3) sets player "1"'s bonus troops (keys are p<id>)."""
    for key, troops in bonus_by_player.items():
        player_id = key[1:]
        state = state.with_player_state(
            state.player_state(player_id).with_bonus_troops(troops)
        )
    return state


def set_turn(state: GameState, phase: TurnPhase, current_index: int = 0) -> GameState:
    return state.with_turn_manager(TurnManager(
        players=state.turn_manager.players,
        current_player_index=current_index,
        phase=phase,
    ))


def load(engine: GameEngine, state: GameState) -> GameEngine:
    engine.set_game_state(state)
    return engine
