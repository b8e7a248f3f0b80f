"""
Rules configuration - tunable constants of the ruleset.

The defaults reproduce the classic game. A RulesConfig is handed to the
Reducer; nothing else in the core hard-codes these numbers.
"""

from __future__ import annotations
from dataclasses import dataclass, field


# Initial troop pool per player count
DEFAULT_INITIAL_TROOPS = {
    2: 40,
    3: 35,
    4: 30,
    5: 25,
    6: 20,
}


@dataclass(frozen=True)
class RulesConfig:
    """Rule constants used by the bonus calculator, combat and reducer."""

    # Reinforcement: max(min_reinforcement, territories // territories_per_troop)
    min_reinforcement: int = 3
    territories_per_troop: int = 3

    # Dice
    dice_sides: int = 6
    max_attack_dice: int = 3
    max_defense_dice: int = 2

    # Card trades: escalating global schedule, then +increment per extra trade
    trade_bonus_schedule: tuple[int, ...] = (4, 6, 8, 10, 12, 15)
    trade_bonus_increment: int = 5
    # Troops placed on each traded card's territory owned by the trader
    owned_territory_card_bonus: int = 2

    initial_troops: dict[int, int] = field(
        default_factory=lambda: dict(DEFAULT_INITIAL_TROOPS)
    )

    # When set, only the current player may act
    enforce_turn_order: bool = False

    def initial_troops_for(self, num_players: int) -> int:
        """Initial troop pool for a game with num_players players."""
        if num_players not in self.initial_troops:
            supported = ", ".join(str(n) for n in sorted(self.initial_troops))
            raise ValueError(
                f"Unsupported player count {num_players} (supported: {supported})"
            )
        return self.initial_troops[num_players]


DEFAULT_RULES = RulesConfig()
