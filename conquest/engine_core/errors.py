"""
Engine errors.

Every rejected action raises one of these, synchronously, from
GameEngine.process_action(). None of them leave the state modified.

- InvalidActionError: a rule precondition was violated
- NotFoundError: the action references an unknown player or territory
- GameOverError: terminal signal, an objective has been completed
"""

from __future__ import annotations


class GameError(Exception):
    """Base class for everything the engine raises."""


class InvalidActionError(GameError):
    """The submitted action violates a rule precondition."""


class NotFoundError(InvalidActionError):
    """The action references a player, territory or card that does not exist."""


class GameOverError(GameError):
    """
    Raised when a player's objective is satisfied.

    Not a failure: the caller must stop accepting actions for this game
    and announce the winner.
    """

    def __init__(self, winner_id: str):
        super().__init__(f"Game over: player {winner_id} completed their objective")
        self.winner_id = winner_id
