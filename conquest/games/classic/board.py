"""
Classic world map - 42 territories in 6 continents.

Adjacency is listed once per pair; Board.build makes it symmetric.
"""

from __future__ import annotations

from ...engine_core.board import Board


NORTH_AMERICA = "North America"
SOUTH_AMERICA = "South America"
EUROPE = "Europe"
AFRICA = "Africa"
ASIA = "Asia"
OCEANIA = "Oceania"


# continent -> (bonus troops, territories)
CLASSIC_LAYOUT: dict[str, tuple[int, tuple[str, ...]]] = {
    NORTH_AMERICA: (5, (
        "Alaska",
        "Northwest Territory",
        "Greenland",
        "Alberta",
        "Ontario",
        "Quebec",
        "Western United States",
        "Eastern United States",
        "Central America",
    )),
    SOUTH_AMERICA: (2, (
        "Venezuela",
        "Peru",
        "Brazil",
        "Argentina",
    )),
    EUROPE: (5, (
        "Iceland",
        "Great Britain",
        "Scandinavia",
        "Ukraine",
        "Northern Europe",
        "Western Europe",
        "Southern Europe",
    )),
    AFRICA: (3, (
        "North Africa",
        "Egypt",
        "East Africa",
        "Congo",
        "South Africa",
        "Madagascar",
    )),
    ASIA: (7, (
        "Ural",
        "Siberia",
        "Yakutsk",
        "Kamchatka",
        "Irkutsk",
        "Mongolia",
        "Japan",
        "Afghanistan",
        "China",
        "Middle East",
        "India",
        "Siam",
    )),
    OCEANIA: (2, (
        "Indonesia",
        "New Guinea",
        "Western Australia",
        "Eastern Australia",
    )),
}


CLASSIC_EDGES: tuple[tuple[str, str], ...] = (
    # North America
    ("Alaska", "Northwest Territory"),
    ("Alaska", "Alberta"),
    ("Northwest Territory", "Alberta"),
    ("Northwest Territory", "Ontario"),
    ("Northwest Territory", "Greenland"),
    ("Greenland", "Ontario"),
    ("Greenland", "Quebec"),
    ("Alberta", "Ontario"),
    ("Alberta", "Western United States"),
    ("Ontario", "Quebec"),
    ("Ontario", "Western United States"),
    ("Ontario", "Eastern United States"),
    ("Quebec", "Eastern United States"),
    ("Western United States", "Eastern United States"),
    ("Western United States", "Central America"),
    ("Eastern United States", "Central America"),
    # South America
    ("Venezuela", "Peru"),
    ("Venezuela", "Brazil"),
    ("Peru", "Brazil"),
    ("Peru", "Argentina"),
    ("Brazil", "Argentina"),
    # Europe
    ("Iceland", "Great Britain"),
    ("Iceland", "Scandinavia"),
    ("Great Britain", "Scandinavia"),
    ("Great Britain", "Northern Europe"),
    ("Great Britain", "Western Europe"),
    ("Scandinavia", "Northern Europe"),
    ("Scandinavia", "Ukraine"),
    ("Northern Europe", "Ukraine"),
    ("Northern Europe", "Western Europe"),
    ("Northern Europe", "Southern Europe"),
    ("Western Europe", "Southern Europe"),
    ("Southern Europe", "Ukraine"),
    # Africa
    ("North Africa", "Egypt"),
    ("North Africa", "East Africa"),
    ("North Africa", "Congo"),
    ("Egypt", "East Africa"),
    ("East Africa", "Congo"),
    ("East Africa", "South Africa"),
    ("East Africa", "Madagascar"),
    ("Congo", "South Africa"),
    ("South Africa", "Madagascar"),
    # Asia
    ("Ural", "Siberia"),
    ("Ural", "China"),
    ("Ural", "Afghanistan"),
    ("Siberia", "Yakutsk"),
    ("Siberia", "Irkutsk"),
    ("Siberia", "Mongolia"),
    ("Siberia", "China"),
    ("Yakutsk", "Kamchatka"),
    ("Yakutsk", "Irkutsk"),
    ("Kamchatka", "Irkutsk"),
    ("Kamchatka", "Mongolia"),
    ("Kamchatka", "Japan"),
    ("Irkutsk", "Mongolia"),
    ("Mongolia", "China"),
    ("Mongolia", "Japan"),
    ("Afghanistan", "China"),
    ("Afghanistan", "India"),
    ("Afghanistan", "Middle East"),
    ("China", "India"),
    ("China", "Siam"),
    ("Middle East", "India"),
    ("India", "Siam"),
    # Oceania
    ("Indonesia", "New Guinea"),
    ("Indonesia", "Western Australia"),
    ("New Guinea", "Western Australia"),
    ("New Guinea", "Eastern Australia"),
    ("Western Australia", "Eastern Australia"),
    # Intercontinental
    ("Alaska", "Kamchatka"),
    ("Greenland", "Iceland"),
    ("Central America", "Venezuela"),
    ("Brazil", "North Africa"),
    ("Western Europe", "North Africa"),
    ("Southern Europe", "North Africa"),
    ("Southern Europe", "Egypt"),
    ("Southern Europe", "Middle East"),
    ("Ukraine", "Ural"),
    ("Ukraine", "Afghanistan"),
    ("Ukraine", "Middle East"),
    ("Egypt", "Middle East"),
    ("East Africa", "Middle East"),
    ("Siam", "Indonesia"),
)


def build_classic_board() -> Board:
    """Unowned classic board, every territory at 0 troops."""
    return Board.build(CLASSIC_LAYOUT, CLASSIC_EDGES)
