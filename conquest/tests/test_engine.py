"""
Tests for the game engine (action processing).

Tests:
- Each action's effect and every precondition
- Phase gating and turn advance
- Card draws after a conquest
- Victory and the terminal game-over signal
"""

import pytest

from ..engine_core import (
    Attack,
    CardSymbol,
    ConquerTerritories,
    EliminatePlayer,
    EndTurn,
    GameEngine,
    GameOverError,
    InvalidActionError,
    NotFoundError,
    PlaceTroops,
    Reinforce,
    RulesConfig,
    TerritoryCard,
    TradeCards,
    TurnPhase,
)
from ..engine_core import events as ev
from ..engine_core.bonus import reinforcement
from ..games.classic import build_deck
from .helpers import assign, fixed_dice, load, set_bonus, set_turn

INF, CAV, ART = CardSymbol.INFANTRY, CardSymbol.CAVALRY, CardSymbol.ARTILLERY


def owned_name(engine, player_id):
    state = engine.get_game_state()
    return next(t.name for t in state.board.territories if t.is_owned_by(player_id))


@pytest.fixture
def front(engine, main_phase_state, player1, player2):
    """
    MainPhase, player 1 to act with no bonus troops.

    Alaska (player 1, 4 troops) borders Kamchatka (player 2, 1 troop).
    Player 2 also holds Peru.
    """
    state = assign(main_phase_state, player1, 4, "Alaska")
    state = assign(state, player2, 1, "Kamchatka", "Peru")
    return load(engine, set_bonus(state, p1=0))


class TestPlaceTroops:
    """Tests for PlaceTroops."""

    def test_places_troops_and_reduces_bonus(self, engine):
        """5 bonus, 3 placed on a 3-troop territory -> 6 troops, 2 bonus left."""
        name = owned_name(engine, "1")
        state = engine.process_action(PlaceTroops("1", 3, name))

        assert state.board.territory(name).troops == 6
        assert state.player_state("1").bonus_troops == 2

    def test_fails_if_too_many_troops(self, engine, main_phase_state):
        load(engine, set_bonus(main_phase_state, p1=2))
        with pytest.raises(InvalidActionError):
            engine.process_action(PlaceTroops("1", 3, owned_name(engine, "1")))

    @pytest.mark.parametrize("troops", [0, -1])
    def test_fails_if_zero_or_negative(self, engine, troops):
        with pytest.raises(InvalidActionError):
            engine.process_action(PlaceTroops("1", troops, owned_name(engine, "1")))

    def test_fails_if_territory_not_owned(self, engine):
        unowned = next(t.name for t in engine.get_game_state().board.territories if not t.is_owned)
        with pytest.raises(InvalidActionError):
            engine.process_action(PlaceTroops("1", 2, unowned))

    def test_fails_on_foreign_territory(self, engine, player2):
        load(engine, assign(engine.get_game_state(), player2, 1, "Peru"))
        with pytest.raises(InvalidActionError):
            engine.process_action(PlaceTroops("1", 2, "Peru"))

    def test_fails_if_territory_does_not_exist(self, engine):
        with pytest.raises(NotFoundError):
            engine.process_action(PlaceTroops("1", 2, "NonExistentTerritory"))

    def test_fails_if_player_does_not_exist(self, engine):
        """Unknown players are NotFound, which is also an InvalidActionError."""
        with pytest.raises(NotFoundError):
            engine.process_action(PlaceTroops("999", 2, owned_name(engine, "1")))
        with pytest.raises(InvalidActionError):
            engine.process_action(PlaceTroops("999", 2, owned_name(engine, "1")))

    def test_rejection_leaves_state_untouched(self, engine):
        before = engine.get_game_state()
        with pytest.raises(InvalidActionError):
            engine.process_action(PlaceTroops("1", 99, owned_name(engine, "1")))
        assert engine.get_game_state() is before

    def test_emits_event(self, engine):
        engine.process_action(PlaceTroops("1", 2, "Alaska"))
        assert engine.last_events[0].type == ev.TROOPS_PLACED
        assert engine.last_events[0].payload["total"] == 5

    def test_rejects_non_actions(self, engine):
        with pytest.raises(InvalidActionError):
            engine.process_action("place_troops")


class TestStartTurnBonus:
    """Tests for turn-start reinforcements."""

    def test_bonus_is_territories_div_three_min_three(self, engine, main_phase_state, player1):
        """Alaska plus 8 Asian territories -> 9 // 3 = 3."""
        asia = main_phase_state.board.continent("Asia").territory_names
        state = assign(main_phase_state, player1, 1, *asia[:8])
        load(engine, set_turn(state, TurnPhase.MAIN, current_index=1))

        state = engine.process_action(EndTurn())
        assert state.current_player.id == "1"
        assert state.player_state("1").bonus_troops == 3

        state = engine.process_action(PlaceTroops("1", 1, "Alaska"))
        assert state.player_state("1").bonus_troops == 2

    def test_bonus_includes_continent_if_fully_owned(self, engine, main_phase_state, player1):
        """Alaska plus Europe -> 8 territories (3) + Europe (5)."""
        europe = main_phase_state.board.continent("Europe").territory_names
        state = assign(main_phase_state, player1, 1, *europe)
        load(engine, set_turn(state, TurnPhase.MAIN, current_index=1))

        state = engine.process_action(EndTurn())
        assert state.player_state("1").bonus_troops == 8

        state = engine.process_action(PlaceTroops("1", 1, "Alaska"))
        assert state.player_state("1").bonus_troops == 7

    def test_end_turn_assigns_next_players_bonus(self, engine, main_phase_state, player2):
        asia = main_phase_state.board.continent("Asia").territory_names
        state = assign(main_phase_state, player2, 1, *asia[:9])
        load(engine, set_bonus(state, p2=10))

        state = engine.process_action(EndTurn())
        assert state.current_player.id == "2"
        # Assigned, not added to the leftover 10
        assert state.player_state("2").bonus_troops == 3

    def test_end_turn_bonus_counts_continents(self, engine, main_phase_state, player2):
        oceania = main_phase_state.board.continent("Oceania").territory_names
        load(engine, assign(main_phase_state, player2, 1, *oceania))

        state = engine.process_action(EndTurn())
        assert state.player_state("2").bonus_troops == 3 + 2
        assert any(e.type == ev.REINFORCEMENTS_ASSIGNED for e in engine.last_events)


class TestReinforce:
    """Tests for Reinforce."""

    @pytest.fixture
    def pair(self, engine, main_phase_state, player1):
        """Adjacent Alaska (4) and Northwest Territory (2), both player 1."""
        state = assign(main_phase_state, player1, 4, "Alaska")
        state = assign(state, player1, 2, "Northwest Territory")
        return load(engine, set_bonus(state, p1=0))

    def test_moves_troops_between_adjacent_territories(self, pair):
        state = pair.process_action(Reinforce("1", "Alaska", "Northwest Territory", 1))
        assert state.board.territory("Alaska").troops == 3
        assert state.board.territory("Northwest Territory").troops == 3

    def test_can_be_used_more_than_once_per_turn(self, pair):
        pair.process_action(Reinforce("1", "Alaska", "Northwest Territory", 1))
        state = pair.process_action(Reinforce("1", "Alaska", "Northwest Territory", 1))
        assert state.board.territory("Alaska").troops == 2
        assert state.board.territory("Northwest Territory").troops == 4

    def test_fails_if_not_adjacent(self, pair, player1):
        load(pair, assign(pair.get_game_state(), player1, 2, "Argentina"))
        with pytest.raises(InvalidActionError):
            pair.process_action(Reinforce("1", "Alaska", "Argentina", 2))

    def test_fails_if_not_owned(self, pair, player2):
        load(pair, assign(pair.get_game_state(), player2, 2, "Alberta"))
        with pytest.raises(InvalidActionError):
            pair.process_action(Reinforce("1", "Alaska", "Alberta", 1))

    def test_fails_if_source_would_be_emptied(self, pair):
        with pytest.raises(InvalidActionError):
            pair.process_action(Reinforce("1", "Alaska", "Northwest Territory", 4))

    @pytest.mark.parametrize("troops", [0, -2])
    def test_fails_if_non_positive(self, pair, troops):
        with pytest.raises(InvalidActionError):
            pair.process_action(Reinforce("1", "Alaska", "Northwest Territory", troops))

    def test_fails_on_same_territory(self, pair):
        with pytest.raises(InvalidActionError):
            pair.process_action(Reinforce("1", "Alaska", "Alaska", 1))

    def test_fails_on_unknown_territory(self, pair):
        with pytest.raises(NotFoundError):
            pair.process_action(Reinforce("1", "Alaska", "Atlantis", 1))

    def test_not_allowed_in_setup(self, pair):
        load(pair, set_turn(pair.get_game_state(), TurnPhase.SETUP))
        with pytest.raises(InvalidActionError):
            pair.process_action(Reinforce("1", "Alaska", "Northwest Territory", 1))


class TestAttack:
    """Tests for Attack."""

    def test_conquest_transfers_ownership(self, front):
        front.reducer.roll_dice = fixed_dice(6, 6, 6, 1)
        state = front.process_action(Attack("1", "2", "Alaska", "Kamchatka", 3))

        kamchatka = state.board.territory("Kamchatka")
        assert kamchatka.owner_id == "1"
        assert kamchatka.troops == 3
        assert state.board.territory("Alaska").troops == 1
        assert front.engine_state.territory_conquered_this_turn
        assert state.last_battle.conquered
        assert state.last_battle.defender_losses == 1

    def test_defender_holds(self, front, player2):
        load(front, assign(front.get_game_state(), player2, 2, "Kamchatka"))
        front.reducer.roll_dice = fixed_dice(1, 6, 5)
        state = front.process_action(Attack("1", "2", "Alaska", "Kamchatka", 1))

        assert state.board.territory("Alaska").troops == 3
        assert state.board.territory("Kamchatka").owner_id == "2"
        assert not front.engine_state.territory_conquered_this_turn

    def test_tie_goes_to_attacker(self, front, player2):
        load(front, assign(front.get_game_state(), player2, 2, "Kamchatka"))
        front.reducer.roll_dice = fixed_dice(3, 3, 3)
        state = front.process_action(Attack("1", "2", "Alaska", "Kamchatka", 1))

        assert state.board.territory("Kamchatka").troops == 1
        assert state.board.territory("Alaska").troops == 4

    def test_fails_if_troops_not_less_than_source(self, front):
        with pytest.raises(InvalidActionError):
            front.process_action(Attack("1", "2", "Alaska", "Kamchatka", 4))
        with pytest.raises(InvalidActionError):
            front.process_action(Attack("1", "2", "Alaska", "Kamchatka", 5))

    def test_fails_if_defender_is_not_owner(self, front):
        with pytest.raises(InvalidActionError):
            front.process_action(Attack("1", "2", "Alaska", "Northwest Territory", 1))

    def test_fails_if_defender_unknown(self, front):
        with pytest.raises(NotFoundError):
            front.process_action(Attack("1", "9", "Alaska", "Kamchatka", 1))

    def test_fails_if_not_adjacent(self, front):
        with pytest.raises(InvalidActionError):
            front.process_action(Attack("1", "2", "Alaska", "Peru", 1))

    def test_fails_on_own_territory(self, front):
        with pytest.raises(InvalidActionError):
            front.process_action(Attack("1", "1", "Alaska", "Alaska", 1))

    def test_not_allowed_in_setup(self, front):
        load(front, set_turn(front.get_game_state(), TurnPhase.SETUP))
        with pytest.raises(InvalidActionError):
            front.process_action(Attack("1", "2", "Alaska", "Kamchatka", 1))

    def test_elimination_hands_over_cards(self, front):
        state = front.get_game_state()
        board = state.board.with_territories(state.board.territory("Peru").with_owner(None, 0))
        cards = [TerritoryCard("Japan", INF), TerritoryCard("Siam", CAV)]
        state = state.with_board(board).with_player_state(
            state.player_state("2").with_cards_added(cards)
        )
        load(front, state)
        front.reducer.roll_dice = fixed_dice(6, 6, 6, 1)

        state = front.process_action(Attack("1", "2", "Alaska", "Kamchatka", 3))

        assert state.player_state("2").territory_cards == frozenset()
        assert state.player_state("1").territory_cards == frozenset(cards)
        eliminated = [e for e in front.last_events if e.type == ev.PLAYER_ELIMINATED]
        assert eliminated[0].payload["cards_transferred"] == 2


class TestCardDraw:
    """Tests for the territory card drawn at EndTurn."""

    @pytest.fixture
    def with_deck(self, front):
        state = front.get_game_state()
        return load(front, state._copy_with(deck=build_deck(state.board)))

    def test_conquest_draws_one_card(self, with_deck):
        top = with_deck.get_game_state().deck[0]
        with_deck.reducer.roll_dice = fixed_dice(6, 6, 6, 1)
        with_deck.process_action(Attack("1", "2", "Alaska", "Kamchatka", 3))
        state = with_deck.process_action(EndTurn())

        assert state.player_state("1").territory_cards == frozenset({top})
        assert len(state.deck) == 41

    def test_no_conquest_no_card(self, with_deck):
        state = with_deck.process_action(EndTurn())
        assert state.player_state("1").territory_cards == frozenset()
        assert len(state.deck) == 42

    def test_only_one_card_per_turn(self, with_deck, player1, player2):
        state = assign(with_deck.get_game_state(), player1, 4, "Northwest Territory")
        load(with_deck, assign(state, player2, 1, "Alberta"))
        with_deck.reducer.roll_dice = fixed_dice(6, 6, 6, 1, 6, 6, 6, 1)

        with_deck.process_action(Attack("1", "2", "Alaska", "Kamchatka", 3))
        with_deck.process_action(Attack("1", "2", "Northwest Territory", "Alberta", 3))
        state = with_deck.process_action(EndTurn())
        assert len(state.player_state("1").territory_cards) == 1

    def test_empty_deck_draws_nothing(self, front):
        load(front, front.get_game_state()._copy_with(deck=()))
        front.reducer.roll_dice = fixed_dice(6, 6, 6, 1)
        front.process_action(Attack("1", "2", "Alaska", "Kamchatka", 3))
        state = front.process_action(EndTurn())

        assert state.player_state("1").territory_cards == frozenset()
        drawn = [e for e in front.last_events if e.type == ev.CARD_DRAWN]
        assert drawn[0].payload["drawn"] is False

    def test_fresh_engine_deals_cards_for_conquest(self, player1, player2):
        engine = GameEngine([player1, player2], roll_dice=fixed_dice(6, 6, 6, 1))
        state = assign(engine.get_game_state(), player1, 5, "Alaska")
        load(engine, set_turn(assign(state, player2, 1, "Kamchatka"), TurnPhase.MAIN))
        assert len(engine.get_game_state().deck) == 42

        engine.process_action(Attack("1", "2", "Alaska", "Kamchatka", 3))
        state = engine.process_action(EndTurn())

        assert len(state.player_state("1").territory_cards) == 1
        assert len(state.deck) == 41

    def test_flag_reset_after_end_turn(self, front):
        front.reducer.roll_dice = fixed_dice(6, 6, 6, 1)
        front.process_action(Attack("1", "2", "Alaska", "Kamchatka", 3))
        front.process_action(EndTurn())
        assert not front.engine_state.territory_conquered_this_turn


class TestTradeCards:
    """Tests for TradeCards."""

    HAND = [
        TerritoryCard("Alaska", INF),
        TerritoryCard("Peru", CAV),
        TerritoryCard("Japan", ART),
    ]

    @pytest.fixture
    def holding(self, engine, main_phase_state):
        state = main_phase_state.with_player_state(
            main_phase_state.player_state("1").with_bonus_troops(0).with_cards_added(self.HAND)
        )
        held = {card.territory for card in self.HAND}
        state = state._copy_with(deck=tuple(c for c in state.deck if c.territory not in held))
        return load(engine, state)

    def test_valid_trade(self, holding):
        state = holding.process_action(TradeCards("1", {"Alaska", "Peru", "Japan"}))
        ps = state.player_state("1")

        assert ps.bonus_troops == 4
        assert ps.territory_cards == frozenset()
        assert state.trades_completed == 1
        # Traded cards go to the bottom of the deck
        assert set(state.deck[-3:]) == set(self.HAND)

    def test_owned_card_territory_gets_two_troops(self, holding):
        state = holding.process_action(TradeCards("1", {"Alaska", "Peru", "Japan"}))
        assert state.board.territory("Alaska").troops == 3 + 2
        assert state.board.territory("Japan").troops == 0

    def test_bonus_escalates(self, holding):
        holding.process_action(TradeCards("1", {"Alaska", "Peru", "Japan"}))
        state = holding.get_game_state()
        more = [TerritoryCard("Siam", INF), TerritoryCard("Egypt", INF), TerritoryCard("Ural", INF)]
        load(holding, state.with_player_state(state.player_state("1").with_cards_added(more)))

        state = holding.process_action(TradeCards("1", {"Siam", "Egypt", "Ural"}))
        assert state.player_state("1").bonus_troops == 4 + 6

    @pytest.mark.parametrize("cards", [set(), {"Alaska", "Peru"}, {"Alaska", "Peru", "Japan", "Siam"}])
    def test_fails_unless_three_cards(self, holding, cards):
        with pytest.raises(InvalidActionError):
            holding.process_action(TradeCards("1", cards))

    def test_fails_if_card_not_held(self, holding):
        with pytest.raises(InvalidActionError):
            holding.process_action(TradeCards("1", {"Alaska", "Peru", "Siam"}))

    def test_invalid_combination_leaves_hand_untouched(self, holding):
        state = holding.get_game_state()
        hand = [TerritoryCard("Alaska", INF), TerritoryCard("Peru", INF), TerritoryCard("Japan", CAV)]
        load(holding, state.with_player_state(
            state.player_state("1").with_cards_removed(self.HAND).with_cards_added(hand)
        ))
        before = holding.get_game_state()

        with pytest.raises(InvalidActionError):
            holding.process_action(TradeCards("1", {"Alaska", "Peru", "Japan"}))

        assert holding.get_game_state() is before
        assert holding.get_game_state().player_state("1").territory_cards == frozenset(hand)

    def test_emits_trade_event(self, holding):
        holding.process_action(TradeCards("1", {"Alaska", "Peru", "Japan"}))
        event = holding.last_events[0]
        assert event.type == ev.CARDS_TRADED
        assert event.payload["bonus"] == 4
        assert event.payload["territory_bonus"] == {"Alaska": 2}


class TestEndTurn:
    """Tests for EndTurn and phase transitions."""

    def test_setup_advances_player(self, engine):
        state = engine.process_action(EndTurn())
        assert state.current_player.id == "2"
        assert state.phase == TurnPhase.SETUP

    def test_setup_completes_into_main_phase(self, engine, player1, player2):
        names = engine.get_game_state().board.territory_names
        state = assign(engine.get_game_state(), player1, 1, *names[0::2])
        state = assign(state, player2, 1, *names[1::2])
        load(engine, set_bonus(state, p1=0, p2=0))

        state = engine.process_action(EndTurn())
        assert state.phase == TurnPhase.MAIN
        assert state.current_player.id == "2"
        assert state.player_state("2").bonus_troops == reinforcement(state.board, "2")
        assert [e.type for e in engine.last_events][:2] == [ev.PHASE_CHANGED, ev.TURN_CHANGED]

    def test_setup_waits_for_troops_to_be_placed(self, engine, player1, player2):
        names = engine.get_game_state().board.territory_names
        state = assign(engine.get_game_state(), player1, 1, *names[0::2])
        state = assign(state, player2, 1, *names[1::2])
        load(engine, set_bonus(state, p1=0, p2=1))

        state = engine.process_action(EndTurn())
        assert state.phase == TurnPhase.SETUP

    def test_main_phase_cycles_players(self, front):
        assert front.process_action(EndTurn()).current_player.id == "2"
        assert front.process_action(EndTurn()).current_player.id == "1"

    def test_last_battle_cleared(self, front):
        front.reducer.roll_dice = fixed_dice(6, 1)
        front.process_action(Attack("1", "2", "Alaska", "Kamchatka", 1))
        assert front.get_game_state().last_battle is not None

        state = front.process_action(EndTurn())
        assert state.last_battle is None


class TestGameOver:
    """Tests for victory detection."""

    def win_with(self, engine, objective):
        state = engine.get_game_state()
        load(engine, state.with_player_state(state.player_state("1").with_objective(objective)))

    def test_objective_met_raises_game_over(self, front, player1):
        load(front, assign(front.get_game_state(), player1, 1, "Northwest Territory"))
        self.win_with(front, ConquerTerritories(2, 1))

        with pytest.raises(GameOverError) as exc_info:
            front.process_action(EndTurn())
        assert exc_info.value.winner_id == "1"

    def test_winning_state_is_committed(self, front):
        self.win_with(front, ConquerTerritories(1))
        with pytest.raises(GameOverError):
            front.process_action(EndTurn())

        assert front.get_game_state().current_player.id == "2"
        assert front.winner_id == "1"
        assert front.last_events[-1].type == ev.GAME_OVER

    def test_no_further_actions_after_game_over(self, front):
        self.win_with(front, ConquerTerritories(1))
        with pytest.raises(GameOverError):
            front.process_action(EndTurn())
        before = front.get_game_state()

        with pytest.raises(GameOverError) as exc_info:
            front.process_action(EndTurn())
        assert exc_info.value.winner_id == "1"
        assert front.get_game_state() is before

    def test_set_game_state_clears_game_over(self, front):
        self.win_with(front, ConquerTerritories(1))
        with pytest.raises(GameOverError):
            front.process_action(EndTurn())

        state = front.get_game_state()
        front.set_game_state(state.with_player_state(state.player_state("1").with_objective(None)))
        assert not front.is_over
        front.process_action(EndTurn())

    def test_unmet_objective_does_not_end_game(self, front):
        self.win_with(front, ConquerTerritories(30))
        state = front.process_action(EndTurn())
        assert state.current_player.id == "2"
        assert not front.is_over

    def test_not_checked_when_setup_completes(self, engine, player1, player2):
        names = engine.get_game_state().board.territory_names
        state = assign(engine.get_game_state(), player1, 1, *names[0::2])
        state = assign(state, player2, 1, *names[1::2])
        load(engine, set_bonus(state, p1=0, p2=0))
        self.win_with(engine, ConquerTerritories(1))

        state = engine.process_action(EndTurn())
        assert state.phase == TurnPhase.MAIN

        # Checked at the end of the first MainPhase turn
        with pytest.raises(GameOverError):
            engine.process_action(EndTurn())

    def test_elimination_objective(self, player1, player2, player3):
        engine = GameEngine([player1, player2, player3], roll_dice=fixed_dice(6, 1))
        state = assign(engine.get_game_state(), player1, 2, "Alaska")
        state = assign(state, player2, 1, "Peru")
        state = assign(state, player3, 1, "Kamchatka")
        state = set_turn(state, TurnPhase.MAIN)
        load(engine, state.with_player_state(
            state.player_state("1").with_objective(EliminatePlayer("3"))
        ))

        engine.process_action(Attack("1", "3", "Alaska", "Kamchatka", 1))
        with pytest.raises(GameOverError) as exc_info:
            engine.process_action(EndTurn())
        assert exc_info.value.winner_id == "1"


class TestTurnOrder:
    """Tests for optional turn-order enforcement."""

    def test_other_players_rejected(self, engine, player1, player2):
        strict = GameEngine([player1, player2], rules=RulesConfig(enforce_turn_order=True))
        state = assign(engine.get_game_state(), player2, 1, "Peru")
        load(strict, set_bonus(state, p2=3))

        with pytest.raises(InvalidActionError):
            strict.process_action(PlaceTroops("2", 1, "Peru"))
        strict.process_action(PlaceTroops("1", 1, "Alaska"))

    def test_tolerant_by_default(self, engine, player2):
        state = assign(engine.get_game_state(), player2, 1, "Peru")
        load(engine, set_bonus(state, p2=3))
        state = engine.process_action(PlaceTroops("2", 1, "Peru"))
        assert state.board.territory("Peru").troops == 2


class TestNewGame:
    """Tests for GameEngine.new_game."""

    def test_deals_a_full_board(self, player1, player2):
        engine = GameEngine.new_game([player1, player2], seed=1)
        state = engine.get_game_state()

        assert state.phase == TurnPhase.SETUP
        assert state.current_player.id == "1"
        assert state.board.all_owned
        assert all(t.troops == 1 for t in state.board.territories)
        for player_id in ("1", "2"):
            assert state.board.count_owned_by(player_id) == 21
            assert state.player_state(player_id).bonus_troops == 40 - 21
            assert state.player_state(player_id).objective is not None
        assert len(state.deck) == 42

    def test_seed_is_reproducible(self, player1, player2):
        a = GameEngine.new_game([player1, player2], seed=5).get_game_state()
        b = GameEngine.new_game([player1, player2], seed=5).get_game_state()
        assert a == b

    def test_setup_rounds_lead_into_main_phase(self, player1, player2):
        engine = GameEngine.new_game([player1, player2], seed=3)

        for player_id in ("1", "2"):
            state = engine.get_game_state()
            assert state.current_player.id == player_id
            name = state.board.territories_owned_by(player_id)[0].name
            engine.process_action(PlaceTroops(player_id, state.player_state(player_id).bonus_troops, name))
            engine.process_action(EndTurn())

        state = engine.get_game_state()
        assert state.phase == TurnPhase.MAIN
        assert state.current_player.id == "1"
        assert state.player_state("1").bonus_troops == reinforcement(state.board, "1")

    def test_duplicate_player_ids_rejected(self, player1):
        with pytest.raises(ValueError):
            GameEngine([player1, player1])
