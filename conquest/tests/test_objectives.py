"""
Tests for objective cards and victory detection.
"""

import random

import pytest

from ..engine_core import (
    ConquerContinents,
    ConquerTerritories,
    EliminatePlayer,
    ObjectiveCard,
    TurnPhase,
    check_victory,
)
from ..games.classic import build_objective_deck, deal_objectives
from .helpers import assign, set_turn


@pytest.fixture
def state(engine, player1, player2):
    """MainPhase, player 1 owns Oceania (2 troops each), player 2 owns Peru."""
    state = engine.get_game_state()
    state = assign(
        state, player1, 2,
        "Indonesia", "New Guinea", "Western Australia", "Eastern Australia",
    )
    state = assign(state, player2, 1, "Peru")
    return set_turn(state, TurnPhase.MAIN)


def with_objective(state, player_id, objective):
    return state.with_player_state(state.player_state(player_id).with_objective(objective))


class TestConquerTerritories:

    def test_count(self, state):
        # Alaska (fixture, 3 troops) + 4 in Oceania
        assert ConquerTerritories(5).is_satisfied(state, "1")
        assert not ConquerTerritories(6).is_satisfied(state, "1")

    def test_min_troops(self, state):
        """Alaska has 3 troops, Oceania 2 each."""
        assert ConquerTerritories(5, min_troops=2).is_satisfied(state, "1")
        assert not ConquerTerritories(2, min_troops=3).is_satisfied(state, "1")


class TestConquerContinents:

    def test_named(self, state):
        assert ConquerContinents(1, frozenset({"Oceania"})).is_satisfied(state, "1")
        assert not ConquerContinents(1, frozenset({"Asia"})).is_satisfied(state, "1")

    def test_needs_extra_continent(self, state, player1):
        objective = ConquerContinents(2, frozenset({"Oceania"}))
        assert not objective.is_satisfied(state, "1")

        state = assign(state, player1, 1, "Venezuela", "Peru", "Brazil", "Argentina")
        assert objective.is_satisfied(state, "1")

    def test_description(self):
        objective = ConquerContinents(3, frozenset({"Europe", "Oceania"}))
        assert objective.description == "Conquer Europe and Oceania plus 1 continent(s) of your choice"


class TestEliminatePlayer:

    def test_satisfied_when_holder_took_last_territory(self, state, player1):
        objective = EliminatePlayer("2")
        assert not objective.is_satisfied(state, "1")

        state = assign(state, player1, 1, "Peru")
        state = state.with_player_state(state.player_state("2").with_eliminated_by("1"))
        assert objective.is_satisfied(state, "1")

    def test_someone_else_eliminating_target_does_not_count(self, state, player1):
        state = assign(state, player1, 1, "Peru")
        state = state.with_player_state(state.player_state("2").with_eliminated_by("3"))
        assert not EliminatePlayer("2").is_satisfied(state, "1")

    def test_own_elimination_never_satisfied(self, state):
        assert not EliminatePlayer("1").is_satisfied(state, "1")

    def test_unknown_target_never_satisfied(self, state):
        assert not EliminatePlayer("99").is_satisfied(state, "1")


def test_objective_card_is_abstract():
    with pytest.raises(TypeError):
        ObjectiveCard()


class TestCheckVictory:

    def test_no_objectives_no_winner(self, state):
        assert check_victory(state) is None

    def test_winner_found(self, state):
        state = with_objective(state, "1", ConquerTerritories(5))
        assert check_victory(state) == "1"

    def test_not_checked_in_setup(self, state):
        state = with_objective(state, "1", ConquerTerritories(5))
        state = set_turn(state, TurnPhase.SETUP)
        assert check_victory(state) is None

    def test_acting_player_checked_first(self, state):
        state = with_objective(state, "1", ConquerTerritories(1))
        state = with_objective(state, "2", ConquerTerritories(1))
        assert check_victory(state, "2") == "2"
        assert check_victory(state, "1") == "1"

    def test_players_without_territory_skipped(self, engine, player1):
        state = set_turn(engine.get_game_state(), TurnPhase.MAIN)
        # Player 2 owns nothing, so even a trivial objective does not count
        state = with_objective(state, "2", ConquerTerritories(0))
        assert check_victory(state) is None


class TestObjectiveDeck:

    def test_two_players_have_no_elimination_cards(self, player1, player2):
        deck = build_objective_deck([player1, player2])
        assert not any(isinstance(c, EliminatePlayer) for c in deck)

    def test_three_players_get_elimination_cards(self, player1, player2, player3):
        deck = build_objective_deck([player1, player2, player3])
        targets = {c.target_id for c in deck if isinstance(c, EliminatePlayer)}
        assert targets == {"1", "2", "3"}

    @pytest.mark.parametrize("seed", range(20))
    def test_nobody_gets_own_elimination(self, seed, player1, player2, player3):
        dealt = deal_objectives([player1, player2, player3], random.Random(seed))
        assert set(dealt) == {"1", "2", "3"}
        for player_id, objective in dealt.items():
            if isinstance(objective, EliminatePlayer):
                assert objective.target_id != player_id

    def test_dealt_without_replacement(self, player1, player2, player3):
        dealt = deal_objectives([player1, player2, player3], random.Random(1))
        objectives = list(dealt.values())
        assert len(set(objectives)) == len(objectives)
