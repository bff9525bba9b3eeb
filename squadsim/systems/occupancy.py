"""Occupancy index: which living actor stands on which cell."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from squadsim.core.models import Actor


class OccupancyIndex:
    """Cell -> actor map rebuilt wholesale from the roster.

    The engine never patches this incrementally; it calls ``rebuild`` at the
    start of each tick and again after every single actor has acted.
    """

    __slots__ = ("_cells",)

    def __init__(self) -> None:
        self._cells: dict[tuple[int, int], Actor] = {}

    def rebuild(self, actors: Iterable[Actor]) -> None:
        self._cells.clear()
        for actor in actors:
            if actor.alive:
                self._cells[(actor.pos.x, actor.pos.y)] = actor

    def occupant(self, x: int, y: int) -> Actor | None:
        return self._cells.get((x, y))

    def is_occupied(self, x: int, y: int, ignore: Actor | None = None) -> bool:
        """True if a living actor other than *ignore* holds the cell.

        An occupant that died since the last rebuild no longer blocks.
        """
        occupant = self._cells.get((x, y))
        return occupant is not None and occupant is not ignore and occupant.alive

    def cells(self) -> set[tuple[int, int]]:
        return set(self._cells)

    def clear(self) -> None:
        self._cells.clear()

    def __len__(self) -> int:
        return len(self._cells)

    def __contains__(self, cell: tuple[int, int]) -> bool:
        return cell in self._cells
