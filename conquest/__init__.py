"""
Conquest - Territory Conquest Game Engine

A deterministic rule engine for a Risk-like strategy game.
Provides:
- Board, player and turn state management
- Action validation and application
- Dice combat and troop bonus economics
- Objective-based victory detection
- An in-memory session layer and REST API
"""

__version__ = "0.1.0"
