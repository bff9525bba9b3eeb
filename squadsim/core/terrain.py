"""Terrain: a sparse grid of movement costs."""

from __future__ import annotations

import math

from squadsim.core.constants import FATIGUE_COST_PLAIN, FATIGUE_COST_SWAMP
from squadsim.core.enums import TerrainType

WALL_COST = math.inf

_KIND_COST: dict[TerrainType, float] = {
    TerrainType.PLAIN: FATIGUE_COST_PLAIN,
    TerrainType.SWAMP: FATIGUE_COST_SWAMP,
    TerrainType.WALL: WALL_COST,
}


def _coerce_kind(kind: TerrainType | str | int) -> TerrainType | None:
    if isinstance(kind, TerrainType):
        return kind
    if isinstance(kind, str):
        return TerrainType.__members__.get(kind.upper())
    try:
        return TerrainType(kind)
    except ValueError:
        return None


class Terrain:
    """Movement-cost map with a default cost and per-cell overrides.

    Only overridden cells are stored, so a 100x100 swamp with a handful of
    walls costs a handful of dict entries.
    """

    __slots__ = ("width", "height", "default_cost", "_overrides")

    def __init__(
        self,
        width: int = 50,
        height: int = 50,
        default: TerrainType | str = TerrainType.PLAIN,
    ) -> None:
        self.width = width
        self.height = height
        kind = _coerce_kind(default)
        self.default_cost: float = FATIGUE_COST_SWAMP if kind == TerrainType.SWAMP else FATIGUE_COST_PLAIN
        self._overrides: dict[tuple[int, int], float] = {}

    # -- access --

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get_cost(self, x: int, y: int) -> float:
        return self._overrides.get((x, y), self.default_cost)

    def set_terrain(self, x: int, y: int, kind: TerrainType | str) -> None:
        """Override a cell.  Unknown kinds reset it to the default cost."""
        resolved = _coerce_kind(kind)
        cost = _KIND_COST[resolved] if resolved is not None else self.default_cost
        self._overrides[(x, y)] = cost

    def is_walkable(self, x: int, y: int) -> bool:
        if not self.in_bounds(x, y):
            return False
        return self.get_cost(x, y) != WALL_COST

    def is_wall(self, x: int, y: int) -> bool:
        return self.in_bounds(x, y) and self.get_cost(x, y) == WALL_COST

    def walls(self) -> list[tuple[int, int]]:
        """In-bounds wall cells, sorted by (y, x)."""
        cells = [c for c, cost in self._overrides.items() if cost == WALL_COST and self.in_bounds(*c)]
        return sorted(cells, key=lambda c: (c[1], c[0]))

    # -- export --

    def kind_at(self, x: int, y: int) -> TerrainType:
        cost = self.get_cost(x, y)
        if cost == WALL_COST:
            return TerrainType.WALL
        if cost == FATIGUE_COST_SWAMP:
            return TerrainType.SWAMP
        return TerrainType.PLAIN

    def to_grid(self) -> list[list[int]]:
        """Dense rows (``grid[y][x]``) of TerrainType codes for rendering."""
        return [
            [int(self.kind_at(x, y)) for x in range(self.width)]
            for y in range(self.height)
        ]

    # -- copy --

    def clone(self) -> Terrain:
        new = Terrain.__new__(Terrain)
        new.width = self.width
        new.height = self.height
        new.default_cost = self.default_cost
        new._overrides = dict(self._overrides)
        return new

    def __repr__(self) -> str:
        return f"Terrain({self.width}x{self.height}, default_cost={self.default_cost}, overrides={len(self._overrides)})"
