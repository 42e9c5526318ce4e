from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from ..exceptions import IterationCapExceeded
from .geometry import Position
from .tiles import Tile
from .world import World

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Route:
    """An immutable walk through the level stack.

    ``steps`` excludes ``start``, so ``len(route)`` is the number of moves.
    A route with no steps is "stuck" unless the start already is the goal.
    """

    start: Position
    steps: Tuple[Position, ...] = ()
    reaches_goal: bool = False

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self) -> Iterator[Position]:
        return iter(self.steps)

    def __bool__(self) -> bool:
        return bool(self.steps)

    @property
    def end(self) -> Position:
        return self.steps[-1] if self.steps else self.start

    def positions(self) -> Tuple[Position, ...]:
        return (self.start,) + self.steps

    def transitions(self) -> int:
        """Number of stair edges taken (consecutive positions on different levels)."""
        walk = self.positions()
        return sum(1 for a, b in zip(walk, walk[1:]) if a.level != b.level)

    def advance(self) -> "Route":
        """The remaining route after taking the first step."""
        if not self.steps:
            return self
        return Route(self.steps[0], self.steps[1:], self.reaches_goal)


def _neighbors(world: World, pos: Position) -> Iterator[Position]:
    level = world.level(pos.level)
    for nx, ny in level.open_neighbors(pos.x, pos.y):
        yield Position(pos.level, nx, ny)
    linked = world.linked_stair(pos)
    if linked is not None:
        yield linked


def _unwind(parents: Dict[Position, Optional[Position]], end: Position) -> Tuple[Position, ...]:
    out: List[Position] = []
    cur: Optional[Position] = end
    while cur is not None:
        out.append(cur)
        cur = parents[cur]
    out.reverse()
    # Drop the start cell
    return tuple(out[1:])


def find_route(world: World, start: Optional[Position] = None) -> Route:
    """Breadth-first search over (level, x, y) for the shortest route to the goal.

    In-level moves go onto any non-WALL cell; a linked stair adds one edge to
    its other end on the adjacent level. All edges cost one step, so the first
    GOAL dequeued is the nearest. If no goal is reachable, the route leads to
    the nearest stair on the start level instead; if there is none either the
    route is empty.
    """
    if start is None:
        start = world.player
    if start is None:
        raise ValueError("find_route needs a start position or a placed player")
    if not world.terrain(start).is_passable:
        logger.warning("Route requested from impassable cell %s", start)
        return Route(start)

    cap = world.level_count * world.width * world.height
    parents: Dict[Position, Optional[Position]] = {start: None}
    q = deque([start])
    nearest_stair: Optional[Position] = None
    iterations = 0
    while q:
        iterations += 1
        if iterations > cap:
            raise IterationCapExceeded(f"Route search exceeded {cap} iterations")
        cur = q.popleft()
        tile = world.terrain(cur)
        if tile is Tile.GOAL:
            route = Route(start, _unwind(parents, cur), reaches_goal=True)
            logger.debug("Route to goal %s: %d steps, %d transitions", cur, len(route), route.transitions())
            return route
        if tile.is_stair and nearest_stair is None and cur.level == start.level and cur != start:
            nearest_stair = cur
        for nxt in _neighbors(world, cur):
            if nxt not in parents:
                parents[nxt] = cur
                q.append(nxt)

    if nearest_stair is not None:
        route = Route(start, _unwind(parents, nearest_stair))
        logger.info("Goal unreachable from %s; falling back to stair %s (%d steps)", start, nearest_stair, len(route))
        return route
    logger.warning("No goal or stair reachable from %s", start)
    return Route(start)
