"""
Bonus Calculator - reinforcement, continent and card-trade bonuses.

All functions are pure.
"""

from __future__ import annotations
from typing import Iterable

from .board import Board
from .player import TerritoryCard
from .rules import RulesConfig, DEFAULT_RULES


def territory_reinforcement(territory_count: int, rules: RulesConfig = DEFAULT_RULES) -> int:
    """max(3, territories // 3)"""
    return max(rules.min_reinforcement, territory_count // rules.territories_per_troop)


def continent_bonus(board: Board, player_id: str) -> int:
    """Sum of bonuses of every continent fully owned by player_id."""
    return sum(c.bonus_troops for c in board.continents_owned_by(player_id))


def reinforcement(board: Board, player_id: str, rules: RulesConfig = DEFAULT_RULES) -> int:
    """Turn-start bonus: territory reinforcement plus continent bonuses."""
    return (
        territory_reinforcement(board.count_owned_by(player_id), rules)
        + continent_bonus(board, player_id)
    )


def is_valid_tris(cards: Iterable[TerritoryCard]) -> bool:
    """
    Check whether cards form a tradeable set.

    Valid: exactly three cards, either three of a kind or one of each symbol.
    """
    cards = list(cards)
    if len(cards) != 3:
        return False
    if len({c.card_id for c in cards}) != 3:
        return False
    symbols = {c.symbol for c in cards}
    return len(symbols) == 1 or len(symbols) == 3


def trade_value(trades_completed: int, rules: RulesConfig = DEFAULT_RULES) -> int:
    """
    Bonus for the next trade, given how many trades happened in the game.

    Follows rules.trade_bonus_schedule, then grows by
    rules.trade_bonus_increment per trade.
    """
    schedule = rules.trade_bonus_schedule
    if trades_completed < len(schedule):
        return schedule[trades_completed]
    extra = trades_completed - len(schedule) + 1
    return schedule[-1] + extra * rules.trade_bonus_increment


def trade_bonus(
    cards: Iterable[TerritoryCard],
    trades_completed: int,
    rules: RulesConfig = DEFAULT_RULES,
) -> int:
    """Base bonus for trading cards; 0 unless they form a valid tris."""
    if not is_valid_tris(cards):
        return 0
    return trade_value(trades_completed, rules)


def owned_territory_card_bonus(
    cards: Iterable[TerritoryCard],
    board: Board,
    player_id: str,
    rules: RulesConfig = DEFAULT_RULES,
) -> dict[str, int]:
    """
    Extra troops for traded cards showing a territory the trader owns.

    Returns:
        territory name -> troops to add directly to that territory
    """
    bonus = {}
    for card in cards:
        territory = board.find_territory(card.territory)
        if territory is not None and territory.is_owned_by(player_id):
            bonus[territory.name] = rules.owned_territory_card_bonus
    return bonus
