"""
Reducer - Applies actions to game state.

The reducer is the single point of state transition.
All state changes must go through Reducer.apply().

Design principles:
- Pure: (state, engine_state, action) -> ActionResult
- Validates before applying; a rejected action raises and changes nothing
- Every ActionType has exactly one handler
- Delegates dice to the combat resolver and troop economics to the
  bonus calculator
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from .action import ActionType, ACTION_CLASSES, GameAction
from .bonus import (
    is_valid_tris,
    owned_territory_card_bonus,
    reinforcement,
    trade_bonus,
)
from .combat import DiceRoller, random_dice_roller, resolve_attack
from .errors import InvalidActionError, NotFoundError
from .events import (
    GameEvent,
    battle_resolved,
    card_drawn,
    cards_traded,
    game_over,
    phase_changed,
    player_eliminated,
    reinforcements_assigned,
    territory_conquered,
    troops_moved,
    troops_placed,
    turn_changed,
)
from .objectives import check_victory
from .rules import RulesConfig
from .state import EngineState, GameState
from .turn import TurnPhase

logger = logging.getLogger(__name__)


# Phase rules: which action types are allowed in which phases
PHASE_ALLOWED_ACTIONS = {
    TurnPhase.SETUP: frozenset({ActionType.PLACE_TROOPS, ActionType.END_TURN}),
    TurnPhase.MAIN: frozenset(ActionType),
}


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Contains:
    - The new snapshot and scratch state
    - Events describing what happened
    - The winner, when an EndTurn completed someone's objective
    """
    new_state: GameState
    engine_state: EngineState
    events: list[GameEvent] = field(default_factory=list)
    winner_id: str | None = None

    @property
    def game_over(self) -> bool:
        return self.winner_id is not None


@dataclass
class Reducer:
    """
    Reducer applies actions to game state.

    Stateless - all state is passed in and returned.
    Rules and dice source are injected.
    """
    rules: RulesConfig = field(default_factory=RulesConfig)
    roll_dice: DiceRoller = field(default_factory=random_dice_roller)

    def apply(
        self,
        state: GameState,
        action: GameAction,
        engine_state: EngineState | None = None,
    ) -> ActionResult:
        """
        Apply an action to the game state.

        Raises:
            InvalidActionError: a precondition failed
            NotFoundError: an unknown player or territory was referenced
        """
        engine_state = engine_state or EngineState()
        self._validate_action(state, action)
        handler = self._get_handler(action.action_type)
        return handler(state, engine_state, action)

    def _validate_action(self, state: GameState, action: GameAction) -> None:
        """Check the action kind and that it is allowed in the current phase."""
        action_type = getattr(action, "action_type", None)
        if not isinstance(action_type, ActionType):
            raise InvalidActionError(f"Unknown action: {action!r}")
        if not isinstance(action, ACTION_CLASSES[action_type]):
            raise InvalidActionError(
                f"Action {type(action).__name__} does not match type {action_type.value}"
            )

        phase = state.phase
        if action_type not in PHASE_ALLOWED_ACTIONS[phase]:
            allowed = ", ".join(sorted(a.value for a in PHASE_ALLOWED_ACTIONS[phase]))
            raise InvalidActionError(
                f"Action '{action_type.value}' is not allowed in phase "
                f"'{phase.value}'. Allowed actions: {allowed}"
            )

        if self.rules.enforce_turn_order and action.player_id is not None:
            state.player(action.player_id)
            if action.player_id != state.current_player.id:
                raise InvalidActionError(
                    f"Not {action.player_id}'s turn "
                    f"(current player: {state.current_player.id})"
                )

    def _get_handler(self, action_type: ActionType):
        """Get the handler function for an action type."""
        handlers = {
            ActionType.PLACE_TROOPS: self._handle_place_troops,
            ActionType.REINFORCE: self._handle_reinforce,
            ActionType.ATTACK: self._handle_attack,
            ActionType.TRADE_CARDS: self._handle_trade_cards,
            ActionType.END_TURN: self._handle_end_turn,
        }
        return handlers[action_type]

    # =========================================================================
    # Handlers
    # =========================================================================

    def _handle_place_troops(self, state, engine_state, action) -> ActionResult:
        """
        Place bonus troops on an owned territory.

        Validates:
        - Player exists
        - troops > 0
        - Territory exists and is owned by the player
        - Player has enough bonus troops
        """
        player_state = state.player_state(action.player_id)

        if action.troops <= 0:
            raise InvalidActionError(
                f"Must place a positive number of troops, got {action.troops}"
            )

        territory = state.board.find_territory(action.territory)
        if territory is None:
            raise NotFoundError(f"Territory {action.territory!r} does not exist")
        if not territory.is_owned_by(action.player_id):
            raise InvalidActionError(
                f"Player {action.player_id} does not own {action.territory}"
            )
        if player_state.bonus_troops < action.troops:
            raise InvalidActionError(
                f"Player {action.player_id} has {player_state.bonus_troops} bonus "
                f"troops, cannot place {action.troops}"
            )

        new_territory = territory.with_troops(territory.troops + action.troops)
        new_state = state.with_board(
            state.board.with_territories(new_territory)
        ).with_player_state(
            player_state.with_bonus_troops(player_state.bonus_troops - action.troops)
        )

        return ActionResult(new_state, engine_state, [
            troops_placed(action.player_id, territory.name, action.troops, new_territory.troops),
        ])

    def _handle_reinforce(self, state, engine_state, action) -> ActionResult:
        """
        Move troops between two adjacent owned territories.

        No per-turn limit: a player may reinforce as often as they like.
        """
        state.player(action.player_id)

        if action.troops <= 0:
            raise InvalidActionError(
                f"Must move a positive number of troops, got {action.troops}"
            )
        if action.from_territory == action.to_territory:
            raise InvalidActionError("Source and destination must differ")

        source = state.board.territory(action.from_territory)
        target = state.board.territory(action.to_territory)

        if not source.is_adjacent_to(target):
            raise InvalidActionError(
                f"{source.name} is not adjacent to {target.name}"
            )
        for territory in (source, target):
            if not territory.is_owned_by(action.player_id):
                raise InvalidActionError(
                    f"Player {action.player_id} does not own {territory.name}"
                )
        if source.troops <= action.troops:
            raise InvalidActionError(
                f"{source.name} has {source.troops} troops, cannot move "
                f"{action.troops} and keep at least 1 behind"
            )

        new_board = state.board.with_territories(
            source.with_troops(source.troops - action.troops),
            target.with_troops(target.troops + action.troops),
        )
        return ActionResult(state.with_board(new_board), engine_state, [
            troops_moved(action.player_id, source.name, target.name, action.troops),
        ])

    def _handle_attack(self, state, engine_state, action) -> ActionResult:
        """
        Attack an adjacent enemy territory.

        Validates that defender_id is the actual owner of the target, then
        delegates the roll to the combat resolver.
        """
        attacker = state.player(action.player_id)
        state.player(action.defender_id)

        if action.defender_id == action.player_id:
            raise InvalidActionError(f"Player {action.player_id} cannot attack themselves")

        target = state.board.territory(action.to_territory)
        if target.owner_id != action.defender_id:
            raise InvalidActionError(
                f"{target.name} is owned by {target.owner_id}, not {action.defender_id}"
            )

        new_board, result = resolve_attack(
            state.board,
            attacker,
            action.from_territory,
            action.to_territory,
            action.troops,
            self.roll_dice,
            self.rules,
        )
        new_state = state._copy_with(board=new_board, last_battle=result)
        events = [battle_resolved(result)]

        if result.conquered:
            engine_state = EngineState(territory_conquered_this_turn=True)
            events.append(territory_conquered(
                attacker.id, target.name, action.defender_id, result.troops_moved,
            ))
            if new_board.count_owned_by(action.defender_id) == 0:
                new_state, event = self._eliminate(new_state, action.defender_id, attacker.id)
                events.append(event)

        return ActionResult(new_state, engine_state, events)

    def _handle_trade_cards(self, state, engine_state, action) -> ActionResult:
        """
        Trade three territory cards for bonus troops.

        The base bonus follows the global trade schedule. Each traded card
        showing a territory the trader owns adds troops directly to it.
        """
        player_state = state.player_state(action.player_id)

        if len(action.cards) != 3:
            raise InvalidActionError(
                f"Exactly 3 cards must be traded, got {len(action.cards)}"
            )

        cards = []
        for card_id in sorted(action.cards):
            card = player_state.find_card(card_id)
            if card is None:
                raise InvalidActionError(
                    f"Player {action.player_id} does not hold card {card_id!r}"
                )
            cards.append(card)

        if not is_valid_tris(cards):
            symbols = ", ".join(c.symbol.value for c in cards)
            raise InvalidActionError(f"Cards do not form a valid set: {symbols}")

        bonus = trade_bonus(cards, state.trades_completed, self.rules)
        territory_bonus = owned_territory_card_bonus(
            cards, state.board, action.player_id, self.rules
        )

        new_board = state.board
        if territory_bonus:
            new_board = new_board.with_territories(*[
                new_board.territory(name).with_troops(new_board.territory(name).troops + extra)
                for name, extra in territory_bonus.items()
            ])

        new_player_state = player_state.with_cards_removed(cards).with_bonus_troops(
            player_state.bonus_troops + bonus
        )
        new_state = state._copy_with(
            board=new_board,
            deck=state.deck + tuple(cards),
            trades_completed=state.trades_completed + 1,
        ).with_player_state(new_player_state)

        return ActionResult(new_state, engine_state, [
            cards_traded(action.player_id, [c.card_id for c in cards], bonus, territory_bonus),
        ])

    def _handle_end_turn(self, state, engine_state, action) -> ActionResult:
        """
        End the current turn.

        SetupPhase: advance; switch to MainPhase once every territory is
        owned and every initial troop placed.
        MainPhase: draw a card if a territory was conquered, advance, assign
        the next player's reinforcements, then evaluate objectives.
        """
        turn_manager = state.turn_manager
        acting = turn_manager.current_player
        events: list[GameEvent] = []

        if turn_manager.phase == TurnPhase.SETUP:
            if self._setup_complete(state):
                new_state = state.with_turn_manager(
                    turn_manager.with_phase(TurnPhase.MAIN).advance()
                )
                events.append(phase_changed(TurnPhase.SETUP.value, TurnPhase.MAIN.value))
                events.append(turn_changed(
                    acting.id, new_state.current_player.id, TurnPhase.MAIN.value,
                ))
                new_state, event = self._assign_reinforcements(new_state)
                events.append(event)
            else:
                new_state = state.with_turn_manager(turn_manager.advance())
                events.append(turn_changed(
                    acting.id, new_state.current_player.id, TurnPhase.SETUP.value,
                ))
            return ActionResult(new_state, EngineState(), events)

        new_state = state
        if engine_state.territory_conquered_this_turn:
            new_state, event = self._draw_card(new_state, acting.id)
            events.append(event)

        new_state = new_state._copy_with(
            turn_manager=turn_manager.advance(),
            last_battle=None,
        )
        events.append(turn_changed(
            acting.id, new_state.current_player.id, TurnPhase.MAIN.value,
        ))
        new_state, event = self._assign_reinforcements(new_state)
        events.append(event)

        winner_id = check_victory(new_state, acting.id)
        if winner_id is not None:
            objective = new_state.player_state(winner_id).objective
            events.append(game_over(winner_id, objective.description if objective else None))

        return ActionResult(new_state, EngineState(), events, winner_id=winner_id)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _setup_complete(self, state: GameState) -> bool:
        return state.board.all_owned and all(
            ps.bonus_troops == 0 for ps in state.player_states
        )

    def _assign_reinforcements(self, state: GameState) -> tuple[GameState, GameEvent]:
        """Assign the turn-start bonus to the current player."""
        player_id = state.current_player.id
        troops = reinforcement(state.board, player_id, self.rules)
        continents = [c.name for c in state.board.continents_owned_by(player_id)]
        player_state = state.player_state(player_id)
        new_state = state.with_player_state(player_state.with_bonus_troops(troops))
        return new_state, reinforcements_assigned(player_id, troops, continents)

    def _draw_card(self, state: GameState, player_id: str) -> tuple[GameState, GameEvent]:
        """Draw the top territory card; an exhausted deck draws nothing."""
        if not state.deck:
            logger.info("Deck exhausted, %s draws no card", player_id)
            return state, card_drawn(player_id, None)
        card, rest = state.deck[0], state.deck[1:]
        player_state = state.player_state(player_id)
        new_state = state._copy_with(deck=rest).with_player_state(
            player_state.with_cards_added([card])
        )
        return new_state, card_drawn(player_id, card.territory)

    def _eliminate(
        self,
        state: GameState,
        eliminated_id: str,
        attacker_id: str,
    ) -> tuple[GameState, GameEvent]:
        """Hand the eliminated player's cards over to the attacker and record who took them out."""
        eliminated = state.player_state(eliminated_id)
        cards = eliminated.territory_cards
        attacker = state.player_state(attacker_id)
        new_state = state.with_player_state(
            eliminated.with_cards_removed(cards).with_eliminated_by(attacker_id)
        ).with_player_state(
            attacker.with_cards_added(cards)
        )
        return new_state, player_eliminated(eliminated_id, attacker_id, len(cards))


def apply_action(
    state: GameState,
    action: GameAction,
    engine_state: EngineState | None = None,
    rules: RulesConfig | None = None,
    roll_dice: DiceRoller | None = None,
) -> ActionResult:
    """
    Convenience function to apply an action.

    Creates a Reducer and applies the action.
    """
    reducer = Reducer(
        rules=rules or RulesConfig(),
        roll_dice=roll_dice or random_dice_roller(),
    )
    return reducer.apply(state, action, engine_state)
