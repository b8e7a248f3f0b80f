"""
Classic territory card deck.

One card per territory. Symbols are assigned in map order, cycling
infantry, cavalry, artillery, so every symbol appears 14 times on the
classic map.
"""

from __future__ import annotations
import itertools
import random

from ...engine_core.board import Board
from ...engine_core.player import CardSymbol, TerritoryCard


SYMBOL_CYCLE = (CardSymbol.INFANTRY, CardSymbol.CAVALRY, CardSymbol.ARTILLERY)


def build_deck(board: Board) -> tuple[TerritoryCard, ...]:
    """Unshuffled deck, one card per territory in map order."""
    return tuple(
        TerritoryCard(territory=name, symbol=symbol)
        for name, symbol in zip(board.territory_names, itertools.cycle(SYMBOL_CYCLE))
    )


def shuffled_deck(board: Board, rng: random.Random | None = None) -> tuple[TerritoryCard, ...]:
    cards = list(build_deck(board))
    (rng or random.Random()).shuffle(cards)
    return tuple(cards)
