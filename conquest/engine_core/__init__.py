"""
Engine Core - Deterministic rule engine for territory-conquest games.

The engine is the runtime that:
1. Holds the authoritative GameState
2. Validates player actions against the rules
3. Applies actions via the reducer
4. Resolves combat and troop bonuses
5. Detects victory
"""

from .errors import GameError, InvalidActionError, NotFoundError, GameOverError
from .rules import RulesConfig, DEFAULT_RULES
from .player import (
    Player,
    PlayerColor,
    PlayerType,
    PlayerState,
    CardSymbol,
    TerritoryCard,
)
from .board import Territory, Continent, Board
from .turn import TurnPhase, TurnManager
from .objectives import (
    ObjectiveCard,
    ConquerTerritories,
    ConquerContinents,
    EliminatePlayer,
    check_victory,
)
from .state import GameState, EngineState
from .action import (
    ActionType,
    GameAction,
    PlaceTroops,
    Reinforce,
    Attack,
    TradeCards,
    EndTurn,
)
from .combat import BattleResult, DiceRoller, random_dice_roller, resolve_attack
from .events import GameEvent
from .reducer import Reducer, ActionResult, apply_action
from .engine import GameEngine

__all__ = [
    "GameError",
    "InvalidActionError",
    "NotFoundError",
    "GameOverError",
    "RulesConfig",
    "DEFAULT_RULES",
    "Player",
    "PlayerColor",
    "PlayerType",
    "PlayerState",
    "CardSymbol",
    "TerritoryCard",
    "Territory",
    "Continent",
    "Board",
    "TurnPhase",
    "TurnManager",
    "ObjectiveCard",
    "ConquerTerritories",
    "ConquerContinents",
    "EliminatePlayer",
    "check_victory",
    "GameState",
    "EngineState",
    "ActionType",
    "GameAction",
    "PlaceTroops",
    "Reinforce",
    "Attack",
    "TradeCards",
    "EndTurn",
    "BattleResult",
    "DiceRoller",
    "random_dice_roller",
    "resolve_attack",
    "GameEvent",
    "Reducer",
    "ActionResult",
    "apply_action",
    "GameEngine",
]
