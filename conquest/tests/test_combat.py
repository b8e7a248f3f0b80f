"""
Tests for the combat resolver.

Dice are injected so every outcome is deterministic.
"""

import random

import pytest

from ..engine_core import InvalidActionError, random_dice_roller, resolve_attack
from ..engine_core.combat import attacker_dice_count, compare_dice, defender_dice_count
from .helpers import fixed_dice


@pytest.fixture
def front(classic_board, player1, player2):
    """Alaska (player 1, 4 troops) facing Kamchatka (player 2, 2 troops)."""
    return classic_board.with_territories(
        classic_board.territory("Alaska").with_owner(player1, 4),
        classic_board.territory("Kamchatka").with_owner(player2, 2),
        classic_board.territory("Alberta").with_owner(player1, 2),
        classic_board.territory("Yakutsk").with_owner(player2, 1),
    )


class TestDiceRules:
    """Tests for dice counts and comparison."""

    @pytest.mark.parametrize("troops,expected", [(1, 1), (2, 2), (3, 3), (7, 3)])
    def test_attacker_dice_capped_at_three(self, troops, expected):
        assert attacker_dice_count(troops) == expected

    @pytest.mark.parametrize("troops,expected", [(1, 1), (2, 2), (5, 2)])
    def test_defender_dice_capped_at_two(self, troops, expected):
        assert defender_dice_count(troops) == expected

    def test_ties_go_to_attacker(self):
        assert compare_dice([4], [4]) == (0, 1)

    def test_pairs_sorted_descending(self):
        """6 beats 5, 1 loses to 3; the extra attacker die is unused."""
        assert compare_dice([1, 6, 2], [3, 5]) == (1, 1)

    def test_only_min_pairs_compared(self):
        assert compare_dice([6, 6, 6], [1]) == (0, 1)


class TestResolveAttack:
    """Tests for resolve_attack."""

    def test_defender_loses_troops(self, front, player1):
        board, result = resolve_attack(
            front, player1, "Alaska", "Kamchatka", 3, fixed_dice(6, 5, 1, 4, 3)
        )
        assert result.attacker_dice == (6, 5, 1)
        assert result.defender_dice == (4, 3)
        assert (result.attacker_losses, result.defender_losses) == (0, 2)
        assert result.conquered
        assert board.territory("Kamchatka").owner_id == "1"

    def test_split_losses(self, front, player1):
        """6 beats 5, 2 loses to 3."""
        board, result = resolve_attack(
            front, player1, "Alaska", "Kamchatka", 3, fixed_dice(6, 2, 1, 5, 3)
        )
        assert (result.attacker_losses, result.defender_losses) == (1, 1)
        # Kamchatka had 2, lost 1 -> not conquered
        assert not result.conquered
        assert board.territory("Kamchatka").troops == 1
        assert board.territory("Alaska").troops == 3

    def test_conquest_leaves_source_garrison(self, front, player1):
        board, result = resolve_attack(
            front, player1, "Alaska", "Kamchatka", 3, fixed_dice(6, 6, 6, 1, 1)
        )
        assert result.conquered
        assert result.troops_moved == 3
        assert board.territory("Kamchatka").troops == 3
        assert board.territory("Alaska").troops == 1

    def test_attacker_loses(self, front, player1):
        board, result = resolve_attack(
            front, player1, "Alaska", "Kamchatka", 1, fixed_dice(2, 6, 1)
        )
        assert (result.attacker_losses, result.defender_losses) == (1, 0)
        assert board.territory("Alaska").troops == 3
        assert board.territory("Kamchatka").owner_id == "2"

    def test_troops_must_leave_one_behind(self, front, player1):
        with pytest.raises(InvalidActionError):
            resolve_attack(front, player1, "Alaska", "Kamchatka", 4, fixed_dice())

    def test_zero_troops_rejected(self, front, player1):
        with pytest.raises(InvalidActionError):
            resolve_attack(front, player1, "Alaska", "Kamchatka", 0, fixed_dice())

    def test_not_adjacent_rejected(self, front, player1):
        with pytest.raises(InvalidActionError):
            resolve_attack(front, player1, "Alberta", "Kamchatka", 1, fixed_dice())

    def test_own_territory_rejected(self, front, player1):
        with pytest.raises(InvalidActionError):
            resolve_attack(front, player1, "Alaska", "Alberta", 1, fixed_dice())

    def test_unowned_target_rejected(self, front, player1):
        with pytest.raises(InvalidActionError):
            resolve_attack(front, player1, "Alaska", "Northwest Territory", 1, fixed_dice())

    def test_source_must_be_owned(self, front, player2):
        with pytest.raises(InvalidActionError):
            resolve_attack(front, player2, "Alaska", "Alberta", 1, fixed_dice())

    def test_bad_roller_output_rejected(self, front, player1):
        with pytest.raises(ValueError):
            resolve_attack(front, player1, "Alaska", "Kamchatka", 1, lambda n: [7] * n)


class TestRandomDice:
    """Tests for the default dice roller."""

    def test_seeded_roller_is_reproducible(self):
        a = random_dice_roller(random.Random(3))
        b = random_dice_roller(random.Random(3))
        assert [a(3) for _ in range(5)] == [b(3) for _ in range(5)]

    def test_values_in_range(self):
        roll = random_dice_roller(random.Random(0))
        values = [v for _ in range(200) for v in roll(3)]
        assert min(values) >= 1
        assert max(values) <= 6
