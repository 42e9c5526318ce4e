from __future__ import annotations

from typing import List

from ..exceptions import NoPlacementCandidate
from .level import Cell, Level
from .tiles import Tile


def is_dead_end(level: Level, x: int, y: int) -> bool:
    """A passable cell with exactly one passable axis neighbour.

    Out-of-bounds neighbours count as wall.
    """
    if not level.is_passable(x, y):
        return False
    return len(level.open_neighbors(x, y)) == 1


def find_dead_ends(level: Level, tile: Tile = Tile.FLOOR) -> List[Cell]:
    """Dead-end cells currently holding ``tile``, in row-major order."""
    return [(x, y) for x, y in level.cells_of(tile) if is_dead_end(level, x, y)]


def require_dead_ends(level: Level, tile: Tile = Tile.FLOOR) -> List[Cell]:
    cells = find_dead_ends(level, tile)
    if not cells:
        raise NoPlacementCandidate(f"{level!r} has no dead ends to place on")
    return cells
