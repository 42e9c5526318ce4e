from __future__ import annotations

from collections import deque
from typing import Set

from ..exceptions import IterationCapExceeded
from .level import Cell, Level


def flood_fill(level: Level, start: Cell) -> Set[Cell]:
    """Breadth-first flood fill over passable cells (everything but WALL).

    Returns the set of cells reachable from ``start``, including ``start``
    itself. An impassable or out-of-bounds start yields an empty set.
    """
    if not level.is_passable(*start):
        return set()
    cap = level.width * level.height
    seen = {start}
    q = deque([start])
    iterations = 0
    while q:
        iterations += 1
        if iterations > cap:
            raise IterationCapExceeded(f"Flood fill exceeded {cap} iterations on {level!r}")
        x, y = q.popleft()
        for nx, ny in level.open_neighbors(x, y):
            if (nx, ny) not in seen:
                seen.add((nx, ny))
                q.append((nx, ny))
    return seen


def is_reachable(level: Level, start: Cell, goal: Cell) -> bool:
    if start == goal:
        return level.is_passable(*start)
    return goal in flood_fill(level, start)


def open_adjacency_count(level: Level) -> int:
    """Number of distinct passable-passable axis adjacencies on the level."""
    count = 0
    for x, y in level.passable_cells():
        # Count each edge once from its left/top end
        if level.is_passable(x + 1, y):
            count += 1
        if level.is_passable(x, y + 1):
            count += 1
    return count
