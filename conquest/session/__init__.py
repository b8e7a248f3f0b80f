"""
Session Module - Manages in-memory game sessions.

A session represents one game:
- Created as a lobby players can join
- Started into a running GameEngine
- Serializes submitted actions, one at a time
- Destroyed when the game ends

Sessions are EPHEMERAL:
- No persistence to database
- Ends cleanly when the game completes
"""

from .manager import (
    SessionManager,
    GameSession,
    SessionState,
    SessionError,
    SessionNotFoundError,
    SubmitResult,
)
from .protocol import ProtocolError, parse_action, notifications_for

__all__ = [
    "SessionManager",
    "GameSession",
    "SessionState",
    "SessionError",
    "SessionNotFoundError",
    "SubmitResult",
    "ProtocolError",
    "parse_action",
    "notifications_for",
]
