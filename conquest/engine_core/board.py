"""
Board Model - territories, continents and adjacency.

Design principles:
- Immutable: every update returns a new Board
- Territories reference neighbors by name, resolved through the board
- Continents own their territories; the board indexes them by name

Territory names are globally unique and every territory belongs to
exactly one continent.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Iterable

from .errors import NotFoundError
from .player import Player


@dataclass(frozen=True)
class Territory:
    """
    A single territory.

    owner is None only before the game starts. An owned territory
    holds at least one troop.
    """
    name: str
    neighbors: frozenset[str] = field(default_factory=frozenset)
    owner: Player | None = None
    troops: int = 0

    def __post_init__(self):
        if not isinstance(self.neighbors, frozenset):
            object.__setattr__(self, "neighbors", frozenset(self.neighbors))
        if self.troops < 0:
            raise ValueError(f"{self.name}: troops must be >= 0, got {self.troops}")

    @property
    def owner_id(self) -> str | None:
        return self.owner.id if self.owner else None

    @property
    def is_owned(self) -> bool:
        return self.owner is not None

    def is_owned_by(self, player_id: str) -> bool:
        return self.owner is not None and self.owner.id == player_id

    def is_adjacent_to(self, other: str | Territory) -> bool:
        name = other.name if isinstance(other, Territory) else other
        return name in self.neighbors

    def with_troops(self, troops: int) -> Territory:
        return replace(self, troops=troops)

    def with_owner(self, owner: Player | None, troops: int) -> Territory:
        return replace(self, owner=owner, troops=troops)


@dataclass(frozen=True)
class Continent:
    """A group of territories worth bonus_troops when fully owned by one player."""
    name: str
    territories: tuple[Territory, ...]
    bonus_troops: int

    def __post_init__(self):
        if not isinstance(self.territories, tuple):
            object.__setattr__(self, "territories", tuple(self.territories))

    @property
    def territory_names(self) -> tuple[str, ...]:
        return tuple(t.name for t in self.territories)

    def is_owned_by(self, player_id: str) -> bool:
        """True when player_id owns every member territory."""
        return bool(self.territories) and all(
            t.is_owned_by(player_id) for t in self.territories
        )

    def with_territories(self, updates: dict[str, Territory]) -> Continent:
        """Return new continent with member territories replaced by name."""
        return replace(
            self,
            territories=tuple(updates.get(t.name, t) for t in self.territories),
        )


@dataclass(frozen=True)
class Board:
    """
    The full board: continents, and through them every territory.

    Territories are addressable directly by name via an index built
    when the board is created.
    """
    continents: tuple[Continent, ...]
    _index: dict[str, Territory] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if not isinstance(self.continents, tuple):
            object.__setattr__(self, "continents", tuple(self.continents))
        index: dict[str, Territory] = {}
        for continent in self.continents:
            for territory in continent.territories:
                if territory.name in index:
                    raise ValueError(f"Duplicate territory name: {territory.name}")
                index[territory.name] = territory
        object.__setattr__(self, "_index", index)

    @classmethod
    def build(
        cls,
        layout: dict[str, tuple[int, Iterable[str]]],
        edges: Iterable[tuple[str, str]],
    ) -> Board:
        """
        Build an unowned board from a layout and an undirected edge list.

        Args:
            layout: continent name -> (bonus troops, member territory names)
            edges: pairs of adjacent territory names; adjacency is made symmetric

        Returns:
            Board with every territory unowned and 0 troops
        """
        members = {name: list(names) for name, (_, names) in layout.items()}
        known = {t for names in members.values() for t in names}

        neighbors: dict[str, set[str]] = {t: set() for t in known}
        for a, b in edges:
            for name in (a, b):
                if name not in known:
                    raise ValueError(f"Edge references unknown territory: {name}")
            if a == b:
                raise ValueError(f"Territory {a} cannot neighbor itself")
            neighbors[a].add(b)
            neighbors[b].add(a)

        continents = tuple(
            Continent(
                name=name,
                territories=tuple(
                    Territory(name=t, neighbors=frozenset(neighbors[t]))
                    for t in members[name]
                ),
                bonus_troops=bonus,
            )
            for name, (bonus, _) in layout.items()
        )
        return cls(continents=continents)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def territories(self) -> tuple[Territory, ...]:
        """All territories in continent order."""
        return tuple(t for c in self.continents for t in c.territories)

    @property
    def territory_names(self) -> tuple[str, ...]:
        return tuple(self._index)

    def has_territory(self, name: str) -> bool:
        return name in self._index

    def find_territory(self, name: str) -> Territory | None:
        return self._index.get(name)

    def territory(self, name: str) -> Territory:
        """Get a territory by name, raising NotFoundError if missing."""
        territory = self._index.get(name)
        if territory is None:
            raise NotFoundError(f"Territory {name!r} does not exist")
        return territory

    def continent(self, name: str) -> Continent:
        for continent in self.continents:
            if continent.name == name:
                return continent
        raise NotFoundError(f"Continent {name!r} does not exist")

    def continent_of(self, territory_name: str) -> Continent:
        for continent in self.continents:
            if territory_name in continent.territory_names:
                return continent
        raise NotFoundError(f"Territory {territory_name!r} does not exist")

    def neighbors(self, name: str) -> tuple[Territory, ...]:
        """Neighbor territories of name, resolved through the board."""
        territory = self.territory(name)
        return tuple(
            self._index[n] for n in sorted(territory.neighbors) if n in self._index
        )

    def are_adjacent(self, a: str, b: str) -> bool:
        return self.territory(a).is_adjacent_to(b)

    def territories_owned_by(self, player_id: str) -> tuple[Territory, ...]:
        return tuple(t for t in self.territories if t.is_owned_by(player_id))

    def count_owned_by(self, player_id: str) -> int:
        return sum(1 for t in self._index.values() if t.is_owned_by(player_id))

    def continents_owned_by(self, player_id: str) -> tuple[Continent, ...]:
        return tuple(c for c in self.continents if c.is_owned_by(player_id))

    @property
    def all_owned(self) -> bool:
        return all(t.is_owned for t in self._index.values())

    # -------------------------------------------------------------------------
    # Updates
    # -------------------------------------------------------------------------

    def with_territories(self, *territories: Territory) -> Board:
        """
        Return a new board with territories replaced by name.

        Continent membership is preserved. Raises NotFoundError if any
        name is not on the board.
        """
        updates = {}
        for territory in territories:
            if territory.name not in self._index:
                raise NotFoundError(f"Territory {territory.name!r} does not exist")
            updates[territory.name] = territory
        return Board(
            continents=tuple(c.with_territories(updates) for c in self.continents)
        )
