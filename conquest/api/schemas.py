"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between game clients and the engine.
All responses include explicit types for OpenAPI schema generation.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has ended
- LOBBY_ERROR: Lobby misuse (full, already started, unknown member)
- INVALID_ACTION: The action violates a game rule
- NOT_FOUND: The action references an unknown player or territory
- GAME_OVER: The game already has a winner
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class SessionStatus(str, Enum):
    """Session status values."""
    LOBBY = "lobby"
    ACTIVE = "active"
    GAME_OVER = "game_over"
    ABANDONED = "abandoned"


class PlayerKind(str, Enum):
    HUMAN = "human"
    BOT = "bot"


class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    LOBBY_ERROR = "LOBBY_ERROR"
    INVALID_ACTION = "INVALID_ACTION"
    NOT_FOUND = "NOT_FOUND"
    GAME_OVER = "GAME_OVER"
    VALIDATION_ERROR = "VALIDATION_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class LobbyPlayerInfo(BaseModel):
    """A lobby member."""
    player_id: str
    name: str
    color: str
    kind: PlayerKind = PlayerKind.HUMAN

    model_config = {"from_attributes": True}


class PlayerInfo(BaseModel):
    """Player information for display."""
    player_id: str
    name: str
    color: str
    kind: PlayerKind = PlayerKind.HUMAN
    is_current_turn: bool = False
    bonus_troops: int = 0
    card_count: int = 0
    territory_count: int = 0


class TerritoryInfo(BaseModel):
    """One territory on the board."""
    name: str
    continent: str
    owner: Optional[str] = None
    troops: int = 0
    neighbors: list[str] = Field(default_factory=list)


class ContinentInfo(BaseModel):
    name: str
    bonus_troops: int
    territories: list[str] = Field(default_factory=list)
    owner: Optional[str] = Field(None, description="Player owning every territory, if any")


class CardInfo(BaseModel):
    """A territory card."""
    territory: str
    symbol: str


class BattleInfo(BaseModel):
    """Outcome of the most recent attack."""
    attacker_id: str
    defender_id: str
    from_territory: str
    to_territory: str
    attacker_dice: list[int]
    defender_dice: list[int]
    attacker_losses: int
    defender_losses: int
    conquered: bool
    troops_moved: int = 0


# =============================================================================
# Request Models
# =============================================================================

class JoinSessionRequest(BaseModel):
    """Request to join a lobby."""
    player_id: str = Field(..., min_length=1, description="Unique player id")
    name: str = Field(..., min_length=1, description="Display name")
    kind: PlayerKind = Field(PlayerKind.HUMAN, description="human or bot")


class CreateSessionRequest(BaseModel):
    """Request to create a new lobby."""
    name: str = Field("Conquest", description="Display name of the game")
    max_players: int = Field(6, ge=2, le=6, description="Lobby size")
    creator: Optional[JoinSessionRequest] = Field(
        None, description="Player joining the lobby on creation"
    )


class StartSessionRequest(BaseModel):
    """Request to start a lobby's game."""
    random_seed: Optional[int] = Field(None, description="Seed for reproducible games")


class ActionRequest(BaseModel):
    """
    A game action as sent on the wire.

    Examples:
        {"player_id": "1", "action": "place_troops",
         "parameters": {"territory": "Alaska", "troops": "3"}}
        {"player_id": "1", "action": "end_turn"}
    """
    player_id: str = Field(..., description="Issuing player")
    action: str = Field(..., description="place_troops, reinforce, attack, trade_cards, end_turn")
    parameters: dict[str, str] = Field(default_factory=dict)


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class SessionResponse(BaseModel):
    """Response containing session information."""
    session_id: str
    name: str
    status: SessionStatus
    max_players: int
    players: list[LobbyPlayerInfo] = Field(default_factory=list)
    current_turn_player_id: Optional[str] = None
    winner_id: Optional[str] = None
    created_at: float = 0.0
    api_version: str = "v1"


class GameStateResponse(BaseModel):
    """Complete game state for display."""
    session_id: str
    status: SessionStatus
    phase: str
    current_turn_player_id: str
    players: list[PlayerInfo] = Field(default_factory=list)
    territories: list[TerritoryInfo] = Field(default_factory=list)
    continents: list[ContinentInfo] = Field(default_factory=list)
    deck_size: int = 0
    trades_completed: int = 0
    last_battle: Optional[BattleInfo] = None
    winner_id: Optional[str] = None
    your_cards: list[CardInfo] = Field(
        default_factory=list, description="Only filled for the requesting player"
    )
    your_objective: Optional[str] = None
    api_version: str = "v1"


class ActionResponse(BaseModel):
    """Response to a submitted action."""
    success: bool
    message: str = ""
    game_over: bool = False
    winner_id: Optional[str] = None
    notifications: list[dict[str, Any]] = Field(default_factory=list)
    game_state: Optional[GameStateResponse] = None
    api_version: str = "v1"


class SessionListResponse(BaseModel):
    """Response listing sessions."""
    sessions: list[SessionResponse]
    count: int


class EndSessionResponse(BaseModel):
    """Response after ending a session."""
    success: bool
    session_id: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
