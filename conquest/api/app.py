"""
FastAPI Application - REST API for game clients.

Endpoints:
    GET    /api/v1/health                          Health check
    POST   /api/v1/sessions                        Create a lobby
    GET    /api/v1/sessions                        List open lobbies
    GET    /api/v1/sessions/{id}                   Get session status
    DELETE /api/v1/sessions/{id}                   End session
    POST   /api/v1/sessions/{id}/players           Join a lobby
    DELETE /api/v1/sessions/{id}/players/{pid}     Leave a lobby
    POST   /api/v1/sessions/{id}/start             Start the game
    GET    /api/v1/sessions/{id}/state             Get game state
    POST   /api/v1/sessions/{id}/actions           Submit an action
    WS     /api/v1/sessions/{id}/ws                Notifications

Actions are processed one at a time per session. Every accepted action
is broadcast to the session's WebSocket listeners as notifications.

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Annotated, Optional, Union
import json
import logging
import os

from fastapi import FastAPI, Query, WebSocket, WebSocketDisconnect
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from .. import __version__
from ..engine_core.errors import GameError, GameOverError, NotFoundError
from ..session import SessionError, SessionNotFoundError
from ..session.protocol import GameActionResult
from .service import APIService
from .schemas import (
    ActionRequest,
    ActionResponse,
    CreateSessionRequest,
    EndSessionResponse,
    ErrorCode,
    ErrorResponse,
    GameStateResponse,
    HealthResponse,
    JoinSessionRequest,
    SessionListResponse,
    SessionResponse,
    StartSessionRequest,
)

logger = logging.getLogger(__name__)

# Environment configuration
CONQUEST_ENV = os.getenv("CONQUEST_ENV", "development")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")
CONQUEST_SEED = os.getenv("CONQUEST_SEED", None)


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="Conquest Engine API",
        description="""
Territory-conquest game server.

## Game Flow

1. `POST /sessions` creates a lobby, `POST /sessions/{id}/players` joins it
2. `POST /sessions/{id}/start` deals territories and opens SetupPhase
3. `POST /sessions/{id}/actions` submits one action at a time
4. A completed objective ends the game (`game_over=true`)

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Session does not exist |
| `LOBBY_ERROR` | Lobby full, already started, unknown member |
| `INVALID_ACTION` | The action breaks a game rule |
| `NOT_FOUND` | Unknown player or territory |
| `GAME_OVER` | The game already has a winner |
| `VALIDATION_ERROR` | Malformed request body or query |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService(
        default_seed=int(CONQUEST_SEED) if CONQUEST_SEED else None,
    )

    # WebSocket connections
    ws_connections: dict[str, list[WebSocket]] = {}

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(),
        )

    @app.exception_handler(SessionError)
    async def session_error_handler(request, exc: SessionError):
        if isinstance(exc, SessionNotFoundError):
            return make_error_response(ErrorCode.SESSION_NOT_FOUND, str(exc), status_code=404)
        return make_error_response(ErrorCode.LOBBY_ERROR, str(exc), status_code=409)

    @app.exception_handler(GameError)
    async def game_error_handler(request, exc: GameError):
        if isinstance(exc, GameOverError):
            return make_error_response(
                ErrorCode.GAME_OVER,
                str(exc),
                status_code=409,
                details={"winner_id": exc.winner_id},
            )
        if isinstance(exc, NotFoundError):
            return make_error_response(ErrorCode.NOT_FOUND, str(exc), status_code=404)
        return make_error_response(ErrorCode.INVALID_ACTION, str(exc))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request, exc: RequestValidationError):
        return make_error_response(
            ErrorCode.VALIDATION_ERROR,
            "Invalid request",
            status_code=422,
            details={"errors": jsonable_encoder(exc.errors())},
        )

    async def broadcast_to_session(session_id: str, message: dict):
        """Send a notification to every socket listening on session_id."""
        if session_id in ws_connections:
            dead_connections = []
            for ws in ws_connections[session_id]:
                try:
                    await ws.send_json(message)
                except (WebSocketDisconnect, RuntimeError):
                    logger.debug("Dropping closed WebSocket for %s", session_id)
                    dead_connections.append(ws)
            for ws in dead_connections:
                ws_connections[session_id].remove(ws)

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=SessionResponse,
        responses={409: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Create a new lobby",
    )
    async def create_session(body: CreateSessionRequest) -> SessionResponse:
        """Create a lobby, optionally joining its creator."""
        return api_service.create_session(body)

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List sessions",
    )
    async def list_sessions(
        include_started: Annotated[bool, Query(description="Include games in progress")] = False,
    ) -> SessionListResponse:
        """List open lobbies (or every active session)."""
        sessions = api_service.list_sessions(include_started=include_started)
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get session status",
    )
    async def get_session(session_id: str) -> SessionResponse:
        return api_service.get_session(session_id)

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="End a game session",
    )
    async def end_session(
        session_id: str,
        reason: Annotated[str, Query(description="Reason for ending")] = "user_ended",
    ) -> EndSessionResponse:
        """Abandon a lobby or game and drop it from memory."""
        success = api_service.end_session(session_id, reason)
        return EndSessionResponse(success=success, session_id=session_id)

    @app.post(
        "/api/v1/sessions/{session_id}/players",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Join a lobby",
    )
    async def join_session(session_id: str, body: JoinSessionRequest) -> SessionResponse:
        return api_service.join_session(session_id, body)

    @app.delete(
        "/api/v1/sessions/{session_id}/players/{player_id}",
        responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Leave a lobby",
    )
    async def leave_session(session_id: str, player_id: str) -> Union[SessionResponse, EndSessionResponse]:
        """Leave a lobby. Returns the ended session when the lobby is now empty."""
        response = api_service.leave_session(session_id, player_id)
        if response is None:
            return EndSessionResponse(success=True, session_id=session_id)
        return response

    @app.post(
        "/api/v1/sessions/{session_id}/start",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Start the game",
    )
    async def start_session(
        session_id: str,
        body: Optional[StartSessionRequest] = None,
    ) -> GameStateResponse:
        """Deal territories and objectives, then open SetupPhase."""
        state = api_service.start_session(session_id, body or StartSessionRequest())
        await broadcast_to_session(session_id, {
            "type": "game_state",
            "payload": state.model_dump(),
        })
        return state

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/sessions/{session_id}/state",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Get current game state",
    )
    async def get_game_state(
        session_id: str,
        player_id: Annotated[Optional[str], Query(description="Include this player's cards")] = None,
    ) -> GameStateResponse:
        return api_service.get_game_state(session_id, player_id)

    @app.post(
        "/api/v1/sessions/{session_id}/actions",
        response_model=ActionResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Action rejected"},
            404: {"model": ErrorResponse, "description": "Unknown session, player or territory"},
            409: {"model": ErrorResponse, "description": "Game over or not started"},
        },
        tags=["Game"],
        summary="Submit a game action",
    )
    async def submit_action(session_id: str, body: ActionRequest) -> ActionResponse:
        """
        Submit one action.

        **Request Body:**
        ```json
        {
            "player_id": "1",
            "action": "attack",
            "parameters": {"defender_id": "2", "from": "Alaska",
                           "to": "Kamchatka", "troops": "3"}
        }
        ```
        """
        response = api_service.submit_action(session_id, body)
        for notification in response.notifications:
            await broadcast_to_session(session_id, notification)
        return response

    # =========================================================================
    # WebSocket Endpoint
    # =========================================================================

    async def handle_ws_action(websocket: WebSocket, session_id: str, payload):
        """Apply an action sent over the socket; only the sender gets the result."""
        try:
            request = ActionRequest.model_validate(payload or {})
            response = api_service.submit_action(session_id, request)
        except (ValidationError, SessionError, GameError) as e:
            logger.info("WebSocket action rejected in %s: %s", session_id, e)
            await websocket.send_json(
                GameActionResult(game_id=session_id, success=False, message=str(e)).to_dict()
            )
            return

        await websocket.send_json(
            GameActionResult(game_id=session_id, success=True, message=response.message).to_dict()
        )
        for notification in response.notifications:
            await broadcast_to_session(session_id, notification)

    @app.websocket("/api/v1/sessions/{session_id}/ws")
    async def websocket_endpoint(websocket: WebSocket, session_id: str):
        """
        WebSocket for real-time notifications.

        Messages from server:
        - game_state, turn_changed, territory_update, battle_result,
          troop_movement, tris_played, game_over
        - game_action_result: outcome of this client's own action
        - error: Invalid message

        Messages from client:
        - ping: Keep-alive
        - action: {"type": "action", "payload": <ActionRequest>}
        """
        await websocket.accept()
        ws_connections.setdefault(session_id, []).append(websocket)

        try:
            session = api_service.session_manager.get_session(session_id)
            if session is not None and session.engine is not None:
                await websocket.send_json(session.snapshot().to_dict())

            while True:
                data = await websocket.receive_text()
                try:
                    message = json.loads(data)
                except json.JSONDecodeError:
                    await websocket.send_json({
                        "type": "error",
                        "payload": {"message": "Invalid JSON"},
                    })
                    continue
                if not isinstance(message, dict):
                    continue
                if message.get("type") == "ping":
                    await websocket.send_json({"type": "pong"})
                elif message.get("type") == "action":
                    await handle_ws_action(websocket, session_id, message.get("payload"))

        except WebSocketDisconnect:
            logger.debug("WebSocket closed for %s", session_id)
        finally:
            if websocket in ws_connections.get(session_id, []):
                ws_connections[session_id].remove(websocket)

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/api/v1/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Liveness probe."""
        return HealthResponse(
            status="healthy",
            service="conquest-engine",
            version=__version__,
        )

    @app.get("/", tags=["System"])
    async def root():
        """Service name, version and where to find the docs."""
        return {
            "name": "Conquest Engine API",
            "version": __version__,
            "environment": CONQUEST_ENV,
            "docs": "/api/docs",
            "health": "/api/v1/health",
        }

    return app


# For running directly: uvicorn conquest.api.app:app
app = create_app()
