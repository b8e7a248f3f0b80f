"""
Combat Resolver - dice-based battle between two adjacent territories.

One Attack action resolves one roll:
- Attacker rolls one die per committed troop, up to 3
- Defender rolls one die per troop, up to 2
- Dice are sorted descending and compared pairwise
- Higher die wins the pair, ties go to the attacker
- The loser of each pair loses one troop

When the defending territory reaches 0 troops it changes hands and
the surviving committed troops move in.

Dice come from an injected roller so resolution is reproducible.
"""

from __future__ import annotations
from dataclasses import dataclass
import random
from typing import Callable

from .board import Board
from .errors import InvalidActionError
from .player import Player
from .rules import RulesConfig, DEFAULT_RULES


# roll_dice(count) -> list of count values in 1..sides
DiceRoller = Callable[[int], list[int]]


def random_dice_roller(rng: random.Random | None = None, sides: int = 6) -> DiceRoller:
    """Create a dice roller backed by a (seedable) random.Random."""
    source = rng or random.Random()

    def roll(count: int) -> list[int]:
        return [source.randint(1, sides) for _ in range(count)]

    return roll


@dataclass(frozen=True)
class BattleResult:
    """Outcome of a single attack roll."""
    attacker_id: str
    defender_id: str
    from_territory: str
    to_territory: str
    attacker_dice: tuple[int, ...]
    defender_dice: tuple[int, ...]
    attacker_losses: int
    defender_losses: int
    conquered: bool
    troops_moved: int = 0

    def to_dict(self) -> dict:
        return {
            "attacker_id": self.attacker_id,
            "defender_id": self.defender_id,
            "from_territory": self.from_territory,
            "to_territory": self.to_territory,
            "attacker_dice": list(self.attacker_dice),
            "defender_dice": list(self.defender_dice),
            "attacker_losses": self.attacker_losses,
            "defender_losses": self.defender_losses,
            "conquered": self.conquered,
            "troops_moved": self.troops_moved,
        }


def attacker_dice_count(committed_troops: int, rules: RulesConfig = DEFAULT_RULES) -> int:
    return max(0, min(rules.max_attack_dice, committed_troops))


def defender_dice_count(defending_troops: int, rules: RulesConfig = DEFAULT_RULES) -> int:
    return max(0, min(rules.max_defense_dice, defending_troops))


def compare_dice(attacker_dice: list[int], defender_dice: list[int]) -> tuple[int, int]:
    """
    Compare dice pairwise after sorting each side descending.

    Returns:
        (attacker_losses, defender_losses)
    """
    attack = sorted(attacker_dice, reverse=True)
    defense = sorted(defender_dice, reverse=True)
    attacker_losses = 0
    defender_losses = 0
    for a, d in zip(attack, defense):
        if a >= d:
            defender_losses += 1
        else:
            attacker_losses += 1
    return attacker_losses, defender_losses


def _roll(roll_dice: DiceRoller, count: int, sides: int) -> list[int]:
    values = list(roll_dice(count))
    if len(values) != count:
        raise ValueError(f"Dice roller returned {len(values)} dice, expected {count}")
    for value in values:
        if not 1 <= value <= sides:
            raise ValueError(f"Die value {value} outside 1..{sides}")
    return sorted(values, reverse=True)


def resolve_attack(
    board: Board,
    attacker: Player,
    from_name: str,
    to_name: str,
    troops: int,
    roll_dice: DiceRoller,
    rules: RulesConfig = DEFAULT_RULES,
) -> tuple[Board, BattleResult]:
    """
    Resolve one attack roll and return the updated board.

    Validates:
    - Source is owned by the attacker
    - Target is adjacent and not owned by the attacker
    - 1 <= troops <= source troops - 1

    Raises:
        InvalidActionError on any violated precondition
        NotFoundError if a territory does not exist
    """
    source = board.territory(from_name)
    target = board.territory(to_name)

    if not source.is_owned_by(attacker.id):
        raise InvalidActionError(
            f"Player {attacker.id} does not own attacking territory {from_name}"
        )
    if target.is_owned_by(attacker.id):
        raise InvalidActionError(
            f"Player {attacker.id} cannot attack their own territory {to_name}"
        )
    if not target.is_owned:
        raise InvalidActionError(f"Territory {to_name} has no owner to attack")
    if not source.is_adjacent_to(to_name):
        raise InvalidActionError(f"{from_name} is not adjacent to {to_name}")
    if troops < 1:
        raise InvalidActionError(f"Must attack with at least 1 troop, got {troops}")
    if troops >= source.troops:
        raise InvalidActionError(
            f"Cannot attack with {troops} troops from {from_name}: "
            f"at most {source.troops - 1} may attack"
        )

    attack_dice = _roll(roll_dice, attacker_dice_count(troops, rules), rules.dice_sides)
    defense_dice = _roll(roll_dice, defender_dice_count(target.troops, rules), rules.dice_sides)
    attacker_losses, defender_losses = compare_dice(attack_dice, defense_dice)

    source_troops = source.troops - attacker_losses
    target_troops = target.troops - defender_losses
    conquered = target_troops <= 0

    troops_moved = 0
    if conquered:
        troops_moved = troops - attacker_losses
        new_source = source.with_troops(source_troops - troops_moved)
        new_target = target.with_owner(attacker, troops_moved)
    else:
        new_source = source.with_troops(source_troops)
        new_target = target.with_troops(target_troops)

    result = BattleResult(
        attacker_id=attacker.id,
        defender_id=target.owner_id,
        from_territory=from_name,
        to_territory=to_name,
        attacker_dice=tuple(attack_dice),
        defender_dice=tuple(defense_dice),
        attacker_losses=attacker_losses,
        defender_losses=defender_losses,
        conquered=conquered,
        troops_moved=troops_moved,
    )
    return board.with_territories(new_source, new_target), result
