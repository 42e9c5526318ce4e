from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Optional

from ..exceptions import NoPlacementCandidate
from .dead_ends import require_dead_ends
from .geometry import Position
from .level import Cell, Level
from .reachability import flood_fill
from .tiles import Tile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StairPair:
    """A STAIR_DOWN on level k linked to the STAIR_UP on level k+1.

    The two ends are not spatially aligned; the pair is a graph edge keyed
    by level adjacency.
    """

    down: Position
    up: Position

    def __post_init__(self) -> None:
        if self.up.level != self.down.level + 1:
            raise ValueError(f"Stair pair must join adjacent levels, got {self.down} -> {self.up}")

    def other_end(self, pos: Position) -> Optional[Position]:
        if pos == self.down:
            return self.up
        if pos == self.up:
            return self.down
        return None


class StairLinker:
    """Commits stair and goal cells on dead ends of a carved level.

    Candidates are tried in random order and each must be reachable from the
    level's reference point before it is committed. A level where no
    candidate qualifies raises NoPlacementCandidate so the caller can recarve.
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()

    def place(
        self,
        level: Level,
        tile: Tile,
        reference: Optional[Cell] = None,
        avoid: Optional[Cell] = None,
        min_distance: int = 0,
    ) -> Cell:
        """Turn one FLOOR dead end into ``tile`` and return its cell.

        ``reference`` of None means the placed cell is itself the level's
        entry point. ``avoid``/``min_distance`` keep the cell at least that
        Manhattan distance away from another cell (the spawn, for the goal).
        """
        candidates = require_dead_ends(level)
        self.rng.shuffle(candidates)
        reachable = flood_fill(level, reference) if reference is not None else None
        rejected = 0
        for cx, cy in candidates:
            if reachable is not None and (cx, cy) not in reachable:
                rejected += 1
                continue
            if avoid is not None and abs(cx - avoid[0]) + abs(cy - avoid[1]) < min_distance:
                rejected += 1
                continue
            level.set(cx, cy, tile)
            logger.debug("Placed %s at (%d,%d) after %d rejections", tile.name, cx, cy, rejected)
            return cx, cy
        raise NoPlacementCandidate(
            f"No dead end on {level!r} qualifies for {tile.name} ({len(candidates)} rejected)"
        )
