"""
Games module - Map and deck definitions.

Each ruleset has its own subpackage with:
- Board layout and adjacency
- Territory card deck
- Objective deck
- Game setup
"""
