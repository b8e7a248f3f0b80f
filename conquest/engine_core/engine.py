"""
GameEngine - the authoritative owner of one game's state.

Wraps the Reducer with a current-state cell that is replaced wholesale after
every accepted action. Callers only ever receive immutable snapshots.
"""

from __future__ import annotations
import logging
import random
from typing import Sequence

from .action import GameAction
from .board import Board
from .combat import DiceRoller, random_dice_roller
from .errors import GameError, GameOverError
from .events import GameEvent
from .player import Player, PlayerState
from .reducer import Reducer
from .rules import RulesConfig
from .state import EngineState, GameState
from .turn import TurnManager

logger = logging.getLogger(__name__)


class GameEngine:
    """
    Processes one GameAction at a time against a single GameState.

    The plain constructor builds an unowned board in SetupPhase with every
    player at zero bonus troops and a shuffled territory deck; use new_game()
    for a dealt game with objectives and troop pools.
    """

    def __init__(
        self,
        players: Sequence[Player],
        board: Board | None = None,
        rules: RulesConfig | None = None,
        seed: int | None = None,
        roll_dice: DiceRoller | None = None,
    ):
        if not players:
            raise ValueError("A game needs at least one player")
        ids = [p.id for p in players]
        if len(set(ids)) != len(ids):
            raise ValueError(f"Duplicate player ids: {ids}")

        self.rules = rules or RulesConfig()
        self.rng = random.Random(seed)
        self.reducer = Reducer(
            rules=self.rules,
            roll_dice=roll_dice or random_dice_roller(self.rng, self.rules.dice_sides),
        )

        from ..games.classic.cards import shuffled_deck
        if board is None:
            from ..games.classic.board import build_classic_board
            board = build_classic_board()

        self._state = GameState(
            board=board,
            deck=shuffled_deck(board, self.rng),
            player_states=tuple(PlayerState(player_id=p.id) for p in players),
            turn_manager=TurnManager(players=tuple(players)),
        )
        self._engine_state = EngineState()
        self._last_events: list[GameEvent] = []
        self._winner_id: str | None = None

    @classmethod
    def new_game(
        cls,
        players: Sequence[Player],
        rules: RulesConfig | None = None,
        seed: int | None = None,
        roll_dice: DiceRoller | None = None,
        deal: bool = True,
    ) -> GameEngine:
        """
        Create an engine for a fresh classic game.

        Builds the board, initial troop pools, objectives and deck, then
        deals territories round-robin unless deal is False.
        """
        from ..games.classic.setup import create_game_state, deal_territories

        engine = cls(players, rules=rules, seed=seed, roll_dice=roll_dice)
        state = create_game_state(players, rules=engine.rules, rng=engine.rng)
        if deal:
            state = deal_territories(state, engine.rng)
        engine.set_game_state(state)
        logger.info(
            "New game for %s (dealt=%s)", ", ".join(p.id for p in players), deal
        )
        return engine

    # =========================================================================
    # Public API
    # =========================================================================

    def process_action(self, action: GameAction) -> GameState:
        """
        Validate and apply one action.

        Returns:
            The new authoritative snapshot

        Raises:
            InvalidActionError / NotFoundError: the action was rejected;
                state is unchanged
            GameOverError: the game has been won. The winning EndTurn's
                state is committed first; every later call raises again.
        """
        if self._winner_id is not None:
            raise GameOverError(self._winner_id)

        try:
            result = self.reducer.apply(self._state, action, self._engine_state)
        except GameError as e:
            logger.info("Rejected %s: %s", type(action).__name__, e)
            raise

        previous_player = self._state.current_player.id
        self._state = result.new_state
        self._engine_state = result.engine_state
        self._last_events = result.events
        logger.debug("Applied %r", action)

        if self._state.current_player.id != previous_player:
            logger.info(
                "Turn passed from %s to %s (%s)",
                previous_player,
                self._state.current_player.id,
                self._state.phase.value,
            )

        if result.winner_id is not None:
            self._winner_id = result.winner_id
            logger.info("Game over, winner: %s", result.winner_id)
            raise GameOverError(result.winner_id)

        return self._state

    def get_game_state(self) -> GameState:
        """Current snapshot. Immutable, safe to hand out."""
        return self._state

    def set_game_state(
        self,
        state: GameState,
        engine_state: EngineState | None = None,
    ) -> None:
        """
        Replace the authoritative state wholesale.

        Used for recovery, replay and tests. Clears the game-over flag and
        the last events; engine_state is kept unless given.
        """
        self._state = state
        if engine_state is not None:
            self._engine_state = engine_state
        self._last_events = []
        self._winner_id = None

    @property
    def engine_state(self) -> EngineState:
        return self._engine_state

    @property
    def last_events(self) -> list[GameEvent]:
        """Events produced by the most recent accepted action."""
        return list(self._last_events)

    @property
    def winner_id(self) -> str | None:
        return self._winner_id

    @property
    def is_over(self) -> bool:
        return self._winner_id is not None
