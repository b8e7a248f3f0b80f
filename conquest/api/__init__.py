"""
API Module - Client interface.

Exposes the engine via REST API. A client:
1. Creates or joins a lobby
2. Starts the game
3. Submits actions and reads the game state
4. Listens for notifications over a WebSocket

All state is session-scoped. No persistent user accounts required.
"""

from .schemas import (
    # Requests
    CreateSessionRequest,
    JoinSessionRequest,
    StartSessionRequest,
    ActionRequest,
    # Responses
    SessionResponse,
    GameStateResponse,
    ActionResponse,
    ErrorResponse,
    ErrorCode,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "CreateSessionRequest",
    "JoinSessionRequest",
    "StartSessionRequest",
    "ActionRequest",
    # Responses
    "SessionResponse",
    "GameStateResponse",
    "ActionResponse",
    "ErrorResponse",
    "ErrorCode",
    # Service
    "APIService",
    "create_app",
]
