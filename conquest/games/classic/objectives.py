"""
Classic objective deck.

Contains:
- Continent pairs, some with an extra continent of the player's choice
- 24 territories
- 18 territories with at least 2 troops each
- One "eliminate" card per player (only dealt with 3 or more players)

With two players an elimination card would be the same as conquering the
whole world, so those cards are left out.
"""

from __future__ import annotations
import random
from typing import Sequence

from ...engine_core.objectives import (
    ObjectiveCard,
    ConquerContinents,
    ConquerTerritories,
    EliminatePlayer,
)
from ...engine_core.player import Player
from .board import AFRICA, ASIA, EUROPE, NORTH_AMERICA, OCEANIA, SOUTH_AMERICA


MIN_PLAYERS_FOR_ELIMINATION = 3


BASE_OBJECTIVES: tuple[ObjectiveCard, ...] = (
    ConquerContinents(2, frozenset({NORTH_AMERICA, AFRICA})),
    ConquerContinents(2, frozenset({NORTH_AMERICA, OCEANIA})),
    ConquerContinents(2, frozenset({ASIA, SOUTH_AMERICA})),
    ConquerContinents(2, frozenset({ASIA, AFRICA})),
    ConquerContinents(3, frozenset({EUROPE, SOUTH_AMERICA})),
    ConquerContinents(3, frozenset({EUROPE, OCEANIA})),
    ConquerTerritories(24),
    ConquerTerritories(18, min_troops=2),
)


def build_objective_deck(players: Sequence[Player]) -> list[ObjectiveCard]:
    """Objective cards available for a game with these players."""
    deck = list(BASE_OBJECTIVES)
    if len(players) >= MIN_PLAYERS_FOR_ELIMINATION:
        deck.extend(EliminatePlayer(p.id) for p in players)
    return deck


def deal_objectives(
    players: Sequence[Player],
    rng: random.Random | None = None,
) -> dict[str, ObjectiveCard]:
    """
    Deal one objective per player, without replacement.

    Nobody is dealt their own elimination.

    Returns:
        player id -> objective
    """
    deck = build_objective_deck(players)
    (rng or random.Random()).shuffle(deck)

    dealt: dict[str, ObjectiveCard] = {}
    for player in players:
        for i, card in enumerate(deck):
            if isinstance(card, EliminatePlayer) and card.target_id == player.id:
                continue
            dealt[player.id] = deck.pop(i)
            break
        else:
            raise ValueError(f"Objective deck exhausted dealing to {player.id}")
    return dealt
