"""
Classic - the standard world map ruleset.

This module contains:
- The 42-territory world map
- Territory card deck
- Objective deck
- Game setup (initial pools, objectives, territory deal)
"""

from .board import CLASSIC_LAYOUT, CLASSIC_EDGES, build_classic_board
from .cards import build_deck, shuffled_deck
from .objectives import BASE_OBJECTIVES, build_objective_deck, deal_objectives
from .setup import create_game_state, deal_territories

__all__ = [
    "CLASSIC_LAYOUT",
    "CLASSIC_EDGES",
    "build_classic_board",
    "build_deck",
    "shuffled_deck",
    "BASE_OBJECTIVES",
    "build_objective_deck",
    "deal_objectives",
    "create_game_state",
    "deal_territories",
]
