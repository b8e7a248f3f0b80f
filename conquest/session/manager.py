"""
Session Manager - Creates and manages game sessions.

LIFECYCLE:
1. A player creates a lobby (session in LOBBY state)
2. Other players join or leave while the lobby is open
3. The lobby is started -> a GameEngine is created and territories dealt
4. During the game:
   - Clients submit (action, parameters) messages
   - The session serializes them: one action at a time per game
   - Engine validates and updates the authoritative state
   - Resulting events become broadcast notifications
5. Game ends (objective completed) or is abandoned -> session removed

Sessions are in-memory only. No persistence.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping
import logging
import threading
import time
import uuid

from ..engine_core.action import EndTurn, GameAction
from ..engine_core.engine import GameEngine
from ..engine_core.errors import GameOverError, InvalidActionError
from ..engine_core.player import Player, PlayerColor, PlayerType
from ..engine_core.rules import RulesConfig
from ..engine_core.state import GameState
from ..engine_core.turn import TurnPhase
from .protocol import (
    GameStateSnapshot,
    Notification,
    notifications_for,
    parse_action,
)

logger = logging.getLogger(__name__)


MIN_PLAYERS = 2
MAX_PLAYERS = 6


class SessionError(Exception):
    """Lobby or session misuse (full lobby, already started, unknown member)."""


class SessionNotFoundError(SessionError):
    """No session with the requested id."""


class SessionState(Enum):
    """State of a game session."""
    LOBBY = "lobby"  # Waiting for players
    ACTIVE = "active"  # Game in progress
    GAME_OVER = "game_over"  # Someone completed their objective
    ABANDONED = "abandoned"  # Ended before a winner


@dataclass
class SubmitResult:
    """Outcome of one submitted action."""
    state: GameState
    notifications: list[Notification] = field(default_factory=list)
    winner_id: str | None = None

    @property
    def game_over(self) -> bool:
        return self.winner_id is not None


@dataclass
class GameSession:
    """
    One game: its lobby, and once started, its engine.

    The lock makes submit_action the single serialized entry point into the
    engine, so concurrent requests for the same game are applied one by one.
    """
    session_id: str
    name: str
    created_at: float
    max_players: int = MAX_PLAYERS

    state: SessionState = SessionState.LOBBY
    players: list[Player] = field(default_factory=list)
    engine: GameEngine | None = None
    winner_id: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def is_active(self) -> bool:
        """Check if session is still open or in progress."""
        return self.state in {SessionState.LOBBY, SessionState.ACTIVE}

    @property
    def is_full(self) -> bool:
        return len(self.players) >= self.max_players

    def find_player(self, player_id: str) -> Player | None:
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    # -------------------------------------------------------------------------
    # Lobby
    # -------------------------------------------------------------------------

    def add_player(
        self,
        player_id: str,
        name: str,
        kind: PlayerType = PlayerType.HUMAN,
    ) -> Player:
        """Join the lobby. Colors are handed out in join order."""
        with self._lock:
            if self.state != SessionState.LOBBY:
                raise SessionError(f"Session {self.session_id} is no longer accepting players")
            if self.find_player(player_id) is not None:
                raise SessionError(f"Player {player_id} already joined {self.session_id}")
            if self.is_full:
                raise SessionError(f"Session {self.session_id} is full ({self.max_players} players)")

            taken = {p.color for p in self.players}
            color = next(c for c in PlayerColor if c not in taken)
            player = Player(id=player_id, name=name, color=color, kind=kind)
            self.players.append(player)
            return player

    def remove_player(self, player_id: str) -> None:
        with self._lock:
            if self.state != SessionState.LOBBY:
                raise SessionError(f"Cannot leave {self.session_id} after the game started")
            player = self.find_player(player_id)
            if player is None:
                raise SessionError(f"Player {player_id} is not in {self.session_id}")
            self.players.remove(player)

    def start(
        self,
        rules: RulesConfig | None = None,
        seed: int | None = None,
    ) -> GameState:
        """Create the engine and deal a new game."""
        with self._lock:
            if self.state != SessionState.LOBBY:
                raise SessionError(f"Session {self.session_id} was already started")
            if len(self.players) < MIN_PLAYERS:
                raise SessionError(
                    f"Need at least {MIN_PLAYERS} players to start, have {len(self.players)}"
                )
            self.engine = GameEngine.new_game(
                self.players,
                rules=rules or RulesConfig(enforce_turn_order=True),
                seed=seed,
            )
            self.state = SessionState.ACTIVE
            return self.engine.get_game_state()

    # -------------------------------------------------------------------------
    # Play
    # -------------------------------------------------------------------------

    def game_state(self) -> GameState:
        if self.engine is None:
            raise SessionError(f"Session {self.session_id} has not started")
        return self.engine.get_game_state()

    def snapshot(self) -> GameStateSnapshot:
        return GameStateSnapshot(game_id=self.session_id, state=self.game_state().to_dict())

    def submit_action(
        self,
        player_id: str,
        action: str | GameAction,
        parameters: Mapping[str, str] | None = None,
    ) -> SubmitResult:
        """
        Apply one action for player_id.

        `action` is either a GameAction or a wire action name, in which case
        `parameters` are parsed into one.

        Raises:
            SessionError: session not started
            GameOverError: the game already has a winner
            InvalidActionError / NotFoundError: the engine rejected the action
        """
        with self._lock:
            if self.state == SessionState.GAME_OVER:
                raise GameOverError(self.winner_id)
            if self.state != SessionState.ACTIVE or self.engine is None:
                raise SessionError(f"Session {self.session_id} is not in progress")
            if self.find_player(player_id) is None:
                raise SessionError(f"Player {player_id} is not in {self.session_id}")

            if isinstance(action, str):
                action = parse_action(action, parameters, player_id)

            current = self.engine.get_game_state().current_player.id
            if current != player_id:
                raise InvalidActionError(f"Not {player_id}'s turn (current player: {current})")

            notifications: list[Notification] = []
            winner_id = self._process(action, notifications)
            if winner_id is None:
                winner_id = self._skip_eliminated(notifications)

            return SubmitResult(
                state=self.engine.get_game_state(),
                notifications=notifications,
                winner_id=winner_id,
            )

    def _process(self, action: GameAction, notifications: list[Notification]) -> str | None:
        """Run one action through the engine, collecting notifications."""
        try:
            self.engine.process_action(action)
        except GameOverError as e:
            # The winning EndTurn is committed; its events include game_over
            notifications.extend(notifications_for(
                self.session_id, self.engine.last_events, self.engine.get_game_state()
            ))
            self.state = SessionState.GAME_OVER
            self.winner_id = e.winner_id
            logger.info("Session %s won by %s", self.session_id, e.winner_id)
            return e.winner_id

        notifications.extend(notifications_for(
            self.session_id, self.engine.last_events, self.engine.get_game_state()
        ))
        return None

    def _skip_eliminated(self, notifications: list[Notification]) -> str | None:
        """End the turn of every current player that no longer owns territory."""
        for _ in range(len(self.players)):
            state = self.engine.get_game_state()
            if state.phase != TurnPhase.MAIN:
                return None
            current = state.current_player.id
            if state.board.count_owned_by(current) > 0:
                return None
            logger.info("Skipping eliminated player %s in %s", current, self.session_id)
            winner_id = self._process(EndTurn(), notifications)
            if winner_id is not None:
                return winner_id
        return None


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Lobby lifecycle: create, join, leave, start
    - Track active sessions
    - Route actions to the right session
    - Clean up ended sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(self, default_rules: RulesConfig | None = None):
        self._sessions: dict[str, GameSession] = {}
        self._lock = threading.Lock()
        self.default_rules = default_rules

    def create_session(
        self,
        name: str,
        max_players: int = MAX_PLAYERS,
        creator: Player | None = None,
    ) -> GameSession:
        """
        Create a new lobby.

        Args:
            name: Display name of the game
            max_players: Lobby size (2-6)
            creator: Optional first member of the lobby

        Returns:
            New GameSession in LOBBY state
        """
        if not MIN_PLAYERS <= max_players <= MAX_PLAYERS:
            raise SessionError(
                f"max_players must be between {MIN_PLAYERS} and {MAX_PLAYERS}, got {max_players}"
            )

        session = GameSession(
            session_id=str(uuid.uuid4()),
            name=name,
            created_at=time.time(),
            max_players=max_players,
        )
        if creator is not None:
            session.add_player(creator.id, creator.name, creator.kind)

        with self._lock:
            self._sessions[session.session_id] = session
        logger.info("Created session %s (%s)", session.session_id, name)
        return session

    def get_session(self, session_id: str) -> GameSession | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def require_session(self, session_id: str) -> GameSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(f"Session {session_id} not found")
        return session

    def join_session(
        self,
        session_id: str,
        player_id: str,
        name: str,
        kind: PlayerType = PlayerType.HUMAN,
    ) -> Player:
        player = self.require_session(session_id).add_player(player_id, name, kind)
        logger.info("Player %s joined session %s", player_id, session_id)
        return player

    def leave_session(self, session_id: str, player_id: str) -> None:
        """Leave a lobby. An emptied lobby is removed."""
        session = self.require_session(session_id)
        session.remove_player(player_id)
        logger.info("Player %s left session %s", player_id, session_id)
        if not session.players:
            self.end_session(session_id, reason="empty")

    def start_session(
        self,
        session_id: str,
        seed: int | None = None,
    ) -> GameState:
        session = self.require_session(session_id)
        state = session.start(rules=self.default_rules, seed=seed)
        logger.info(
            "Started session %s with %d players", session_id, len(session.players)
        )
        return state

    def submit_action(
        self,
        session_id: str,
        player_id: str,
        action: str | GameAction,
        parameters: Mapping[str, str] | None = None,
    ) -> SubmitResult:
        """Forward an action to its session."""
        return self.require_session(session_id).submit_action(player_id, action, parameters)

    def end_session(self, session_id: str, reason: str = "completed") -> bool:
        """
        End a session and remove it from memory.

        Returns:
            True if a session was removed
        """
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        if session.state != SessionState.GAME_OVER:
            session.state = SessionState.ABANDONED
        logger.info("Ended session %s (%s)", session_id, reason)
        return True

    def list_sessions(self, include_started: bool = False) -> list[GameSession]:
        """Lobbies open for joining, or every active session."""
        sessions = list(self._sessions.values())
        if include_started:
            return [s for s in sessions if s.is_active()]
        return [s for s in sessions if s.state == SessionState.LOBBY]

    def list_active_sessions(self) -> list[str]:
        """List IDs of active sessions."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> int:
        """
        Remove finished sessions older than max_age.

        Returns:
            Number of sessions removed
        """
        current_time = time.time()
        stale = [
            sid for sid, session in list(self._sessions.items())
            if current_time - session.created_at > max_age_seconds
            and not session.is_active()
        ]
        for session_id in stale:
            self.end_session(session_id, reason="stale")
        return len(stale)
