"""
Wire protocol - inbound action messages and outbound notifications.

Inbound: clients send (action name, {str: str} parameters); parse_action
turns that into a GameAction for the engine.

Outbound: engine events are translated into the notification catalog the
clients render (state snapshots, territory updates, battle results, turn
changes, trade bonuses and the final game-over announcement).
"""

from __future__ import annotations
from dataclasses import dataclass, asdict, field
from typing import Any, ClassVar, Mapping

from ..engine_core import events as ev
from ..engine_core.action import (
    ActionType,
    GameAction,
    Attack,
    EndTurn,
    PlaceTroops,
    Reinforce,
    TradeCards,
)
from ..engine_core.errors import InvalidActionError
from ..engine_core.events import GameEvent
from ..engine_core.state import GameState


class ProtocolError(InvalidActionError):
    """An inbound message could not be turned into an action."""


def _normalize(name: str) -> str:
    return name.replace("_", "").replace("-", "").lower()


# "PlaceTroops", "place_troops" and "place-troops" all name the same action
ACTION_NAMES: dict[str, ActionType] = {_normalize(t.value): t for t in ActionType}


def _require(parameters: Mapping[str, str], key: str) -> str:
    value = parameters.get(key)
    if value is None or str(value).strip() == "":
        raise ProtocolError(f"Missing parameter '{key}'")
    return str(value).strip()


def _require_int(parameters: Mapping[str, str], key: str) -> int:
    raw = _require(parameters, key)
    try:
        return int(raw)
    except ValueError:
        raise ProtocolError(f"Parameter '{key}' must be an integer, got {raw!r}") from None


def parse_action(
    action: str,
    parameters: Mapping[str, str] | None,
    player_id: str,
) -> GameAction:
    """
    Map a wire message to a GameAction.

    Parameters by action:
        place_troops: territory, troops
        reinforce:    from, to, troops
        attack:       defender_id, from, to, troops
        trade_cards:  cards (comma-separated territory names)
        end_turn:     none

    Raises:
        ProtocolError: unknown action, missing or malformed parameter
    """
    parameters = parameters or {}
    action_type = ACTION_NAMES.get(_normalize(action or ""))
    if action_type is None:
        known = ", ".join(t.value for t in ActionType)
        raise ProtocolError(f"Unknown action {action!r} (expected one of: {known})")

    if action_type == ActionType.PLACE_TROOPS:
        return PlaceTroops(
            player_id=player_id,
            troops=_require_int(parameters, "troops"),
            territory=_require(parameters, "territory"),
        )
    if action_type == ActionType.REINFORCE:
        return Reinforce(
            player_id=player_id,
            from_territory=_require(parameters, "from"),
            to_territory=_require(parameters, "to"),
            troops=_require_int(parameters, "troops"),
        )
    if action_type == ActionType.ATTACK:
        return Attack(
            player_id=player_id,
            defender_id=_require(parameters, "defender_id"),
            from_territory=_require(parameters, "from"),
            to_territory=_require(parameters, "to"),
            troops=_require_int(parameters, "troops"),
        )
    if action_type == ActionType.TRADE_CARDS:
        raw = parameters.get("cards") or ""
        cards = [c.strip() for c in str(raw).split(",") if c.strip()]
        return TradeCards(player_id=player_id, cards=frozenset(cards))
    return EndTurn()


# =============================================================================
# Notifications
# =============================================================================

@dataclass(frozen=True)
class Notification:
    """Base for outbound messages. `type` names the message on the wire."""
    type: ClassVar[str] = "notification"
    game_id: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "payload": asdict(self)}


@dataclass(frozen=True)
class GameStateSnapshot(Notification):
    type: ClassVar[str] = "game_state"
    state: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class TurnChanged(Notification):
    type: ClassVar[str] = "turn_changed"
    player_id: str = ""
    phase: str = ""


@dataclass(frozen=True)
class TerritoryUpdate(Notification):
    type: ClassVar[str] = "territory_update"
    territory: str = ""
    owner: str | None = None
    troops: int = 0


@dataclass(frozen=True)
class BattleResult(Notification):
    type: ClassVar[str] = "battle_result"
    attacker_id: str = ""
    defender_id: str = ""
    from_territory: str = ""
    to_territory: str = ""
    attacker_dice: tuple[int, ...] = ()
    defender_dice: tuple[int, ...] = ()
    attacker_losses: int = 0
    defender_losses: int = 0
    conquered: bool = False


@dataclass(frozen=True)
class TroopMovement(Notification):
    type: ClassVar[str] = "troop_movement"
    from_territory: str = ""
    to_territory: str = ""
    troops: int = 0


@dataclass(frozen=True)
class TrisPlayed(Notification):
    type: ClassVar[str] = "tris_played"
    player_id: str = ""
    bonus: int = 0


@dataclass(frozen=True)
class GameOver(Notification):
    type: ClassVar[str] = "game_over"
    winner_id: str = ""
    winner_name: str = ""


@dataclass(frozen=True)
class GameActionResult(Notification):
    type: ClassVar[str] = "game_action_result"
    success: bool = True
    message: str = ""


def _territory_update(game_id: str, state: GameState, name: str) -> TerritoryUpdate:
    territory = state.board.territory(name)
    return TerritoryUpdate(
        game_id=game_id,
        territory=name,
        owner=territory.owner_id,
        troops=territory.troops,
    )


def notifications_for(
    game_id: str,
    events: list[GameEvent],
    state: GameState,
) -> list[Notification]:
    """
    Translate engine events into broadcast notifications.

    Territory updates carry values read from `state`, the snapshot after
    the action. Private events (card draws, assigned reinforcements) are
    not broadcast.
    """
    out: list[Notification] = []
    for event in events:
        p = event.payload
        if event.type == ev.TROOPS_PLACED:
            out.append(_territory_update(game_id, state, p["territory"]))
        elif event.type == ev.TROOPS_MOVED:
            out.append(TroopMovement(
                game_id=game_id,
                from_territory=p["from_territory"],
                to_territory=p["to_territory"],
                troops=p["troops"],
            ))
            out.append(_territory_update(game_id, state, p["from_territory"]))
            out.append(_territory_update(game_id, state, p["to_territory"]))
        elif event.type == ev.BATTLE_RESOLVED:
            out.append(BattleResult(
                game_id=game_id,
                attacker_id=p["attacker_id"],
                defender_id=p["defender_id"],
                from_territory=p["from_territory"],
                to_territory=p["to_territory"],
                attacker_dice=tuple(p["attacker_dice"]),
                defender_dice=tuple(p["defender_dice"]),
                attacker_losses=p["attacker_losses"],
                defender_losses=p["defender_losses"],
                conquered=p["conquered"],
            ))
            out.append(_territory_update(game_id, state, p["from_territory"]))
            out.append(_territory_update(game_id, state, p["to_territory"]))
        elif event.type == ev.CARDS_TRADED:
            out.append(TrisPlayed(game_id=game_id, player_id=p["player_id"], bonus=p["bonus"]))
            for name in p["territory_bonus"]:
                out.append(_territory_update(game_id, state, name))
        elif event.type == ev.TURN_CHANGED:
            out.append(TurnChanged(game_id=game_id, player_id=p["player_id"], phase=p["phase"]))
        elif event.type == ev.GAME_OVER:
            winner = state.find_player(p["winner_id"])
            out.append(GameOver(
                game_id=game_id,
                winner_id=p["winner_id"],
                winner_name=winner.name if winner else "",
            ))
    return out
