from __future__ import annotations

import logging
import random
from typing import List, Optional, Tuple

from ..exceptions import IterationCapExceeded
from .geometry import AXIS_STEPS
from .level import Cell, Level
from .tiles import Tile

logger = logging.getLogger(__name__)


class MazeCarver:
    """Randomized depth-first ("recursive backtracker") maze carver.

    Algorithm:
    - Start from a random cell, carve it and push it on a stack.
    - Look two cells away in each axis direction for cells still WALL.
    - If any exist, pick one uniformly, carve it plus the cell in between, push it.
    - Otherwise pop. Stop when the stack is empty.

    Moving in steps of two keeps corridors exactly one cell wide with a wall
    between parallel corridors, and every carved cell hangs off the DFS tree,
    so the result is a perfect maze (connected, no cycles) by construction.
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()

    def carve(self, width: int, height: int, start: Optional[Cell] = None) -> Level:
        level = Level(width, height)
        if start is None:
            start = (self.rng.randrange(width), self.rng.randrange(height))
        sx, sy = start
        level.set(sx, sy, Tile.FLOOR)
        stack: List[Cell] = [start]

        # Each lattice cell is pushed once and popped once
        cap = 2 * width * height + 1
        iterations = 0
        while stack:
            iterations += 1
            if iterations > cap:
                raise IterationCapExceeded(f"Maze carving exceeded {cap} iterations")
            cx, cy = stack[-1]
            candidates = self._uncarved_neighbors(level, cx, cy)
            if not candidates:
                stack.pop()
                continue
            (nx, ny), (bx, by) = self.rng.choice(candidates)
            level.set(bx, by, Tile.FLOOR)
            level.set(nx, ny, Tile.FLOOR)
            stack.append((nx, ny))

        logger.debug("Carved %dx%d maze from %s in %d iterations", width, height, start, iterations)
        return level

    @staticmethod
    def _uncarved_neighbors(level: Level, x: int, y: int) -> List[Tuple[Cell, Cell]]:
        """Return (target, between) pairs for lattice neighbours not yet carved."""
        out = []
        for dx, dy in AXIS_STEPS:
            nx, ny = x + 2 * dx, y + 2 * dy
            if level.in_bounds(nx, ny) and level.get(nx, ny) is Tile.WALL:
                out.append(((nx, ny), (x + dx, y + dy)))
        return out
