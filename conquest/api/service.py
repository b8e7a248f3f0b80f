"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to session manager calls
2. Converts engine snapshots into response schemas
3. Hides private information (cards, objectives) from other players

Player ids are taken at face value: whoever names a player sees that
player's hand and acts for them. Authenticating the caller is left to the
transport in front of this layer.

This layer is framework-agnostic. Errors propagate as SessionError /
GameError; the app maps them to HTTP responses.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from ..engine_core.player import PlayerType
from ..engine_core.state import GameState
from ..session import GameSession, SessionManager, SessionState
from .schemas import (
    ActionRequest,
    ActionResponse,
    BattleInfo,
    CardInfo,
    ContinentInfo,
    CreateSessionRequest,
    GameStateResponse,
    JoinSessionRequest,
    LobbyPlayerInfo,
    PlayerInfo,
    SessionResponse,
    SessionStatus,
    StartSessionRequest,
    TerritoryInfo,
)


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()
        lobby = service.create_session(CreateSessionRequest(name="Friday"))
        service.join_session(lobby.session_id, JoinSessionRequest(player_id="2", name="Bob"))
        service.start_session(lobby.session_id, StartSessionRequest())
        response = service.submit_action(lobby.session_id, request)
    """
    session_manager: SessionManager = field(default_factory=SessionManager)
    default_seed: int | None = None

    # -------------------------------------------------------------------------
    # Lobby
    # -------------------------------------------------------------------------

    def create_session(self, request: CreateSessionRequest) -> SessionResponse:
        session = self.session_manager.create_session(
            name=request.name,
            max_players=request.max_players,
        )
        if request.creator is not None:
            self.session_manager.join_session(
                session.session_id,
                request.creator.player_id,
                request.creator.name,
                PlayerType(request.creator.kind.value),
            )
        return self._session_to_response(session)

    def get_session(self, session_id: str) -> SessionResponse:
        return self._session_to_response(self.session_manager.require_session(session_id))

    def join_session(self, session_id: str, request: JoinSessionRequest) -> SessionResponse:
        self.session_manager.join_session(
            session_id,
            request.player_id,
            request.name,
            PlayerType(request.kind.value),
        )
        return self.get_session(session_id)

    def leave_session(self, session_id: str, player_id: str) -> SessionResponse | None:
        """Returns None when the lobby emptied and was removed."""
        self.session_manager.leave_session(session_id, player_id)
        session = self.session_manager.get_session(session_id)
        return self._session_to_response(session) if session else None

    def start_session(self, session_id: str, request: StartSessionRequest) -> GameStateResponse:
        seed = request.random_seed if request.random_seed is not None else self.default_seed
        self.session_manager.start_session(session_id, seed=seed)
        return self.get_game_state(session_id)

    def list_sessions(self, include_started: bool = False) -> list[SessionResponse]:
        return [
            self._session_to_response(s)
            for s in self.session_manager.list_sessions(include_started=include_started)
        ]

    def end_session(self, session_id: str, reason: str = "user_ended") -> bool:
        return self.session_manager.end_session(session_id, reason)

    # -------------------------------------------------------------------------
    # Game
    # -------------------------------------------------------------------------

    def get_game_state(self, session_id: str, player_id: str | None = None) -> GameStateResponse:
        """
        Get the current game state.

        Cards and objective are only included for player_id. The caller is
        not checked against player_id here.
        """
        session = self.session_manager.require_session(session_id)
        return self._state_to_response(session, session.game_state(), player_id)

    def submit_action(self, session_id: str, request: ActionRequest) -> ActionResponse:
        session = self.session_manager.require_session(session_id)
        result = session.submit_action(request.player_id, request.action, request.parameters)

        if result.game_over:
            message = f"Game over, winner: {result.winner_id}"
        else:
            message = f"{request.action} applied"

        return ActionResponse(
            success=True,
            message=message,
            game_over=result.game_over,
            winner_id=result.winner_id,
            notifications=[n.to_dict() for n in result.notifications],
            game_state=self._state_to_response(session, result.state, request.player_id),
        )

    # -------------------------------------------------------------------------
    # Conversion
    # -------------------------------------------------------------------------

    def _session_to_response(self, session: GameSession) -> SessionResponse:
        current = None
        if session.engine is not None and session.state == SessionState.ACTIVE:
            current = session.engine.get_game_state().current_player.id
        return SessionResponse(
            session_id=session.session_id,
            name=session.name,
            status=SessionStatus(session.state.value),
            max_players=session.max_players,
            players=[
                LobbyPlayerInfo(
                    player_id=p.id,
                    name=p.name,
                    color=p.color.value,
                    kind=p.kind.value,
                )
                for p in session.players
            ],
            current_turn_player_id=current,
            winner_id=session.winner_id,
            created_at=session.created_at,
        )

    def _state_to_response(
        self,
        session: GameSession,
        state: GameState,
        player_id: str | None,
    ) -> GameStateResponse:
        board = state.board
        players = []
        for player in state.players:
            ps = state.player_state(player.id)
            players.append(PlayerInfo(
                player_id=player.id,
                name=player.name,
                color=player.color.value,
                kind=player.kind.value,
                is_current_turn=player.id == state.current_player.id,
                bonus_troops=ps.bonus_troops,
                card_count=len(ps.territory_cards),
                territory_count=board.count_owned_by(player.id),
            ))

        continents = []
        for continent in board.continents:
            owners = {t.owner_id for t in continent.territories}
            owner = owners.pop() if len(owners) == 1 else None
            continents.append(ContinentInfo(
                name=continent.name,
                bonus_troops=continent.bonus_troops,
                territories=list(continent.territory_names),
                owner=owner,
            ))

        your_cards: list[CardInfo] = []
        your_objective = None
        own = state.find_player_state(player_id) if player_id else None
        if own is not None:
            your_cards = [
                CardInfo(territory=c.territory, symbol=c.symbol.value)
                for c in sorted(own.territory_cards, key=lambda c: c.territory)
            ]
            your_objective = own.objective.description if own.objective else None

        last_battle = None
        if state.last_battle is not None:
            last_battle = BattleInfo(**state.last_battle.to_dict())

        return GameStateResponse(
            session_id=session.session_id,
            status=SessionStatus(session.state.value),
            phase=state.phase.value,
            current_turn_player_id=state.current_player.id,
            players=players,
            territories=[
                TerritoryInfo(
                    name=t.name,
                    continent=c.name,
                    owner=t.owner_id,
                    troops=t.troops,
                    neighbors=sorted(t.neighbors),
                )
                for c in board.continents
                for t in c.territories
            ],
            continents=continents,
            deck_size=len(state.deck),
            trades_completed=state.trades_completed,
            last_battle=last_battle,
            winner_id=session.winner_id,
            your_cards=your_cards,
            your_objective=your_objective,
        )
