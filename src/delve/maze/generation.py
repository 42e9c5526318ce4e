from __future__ import annotations

import logging
import random
from typing import Optional, Tuple

from ..exceptions import GenerationFailed, NoPlacementCandidate
from ..rng import RNGManager
from .carver import MazeCarver
from .geometry import Position
from .level import Cell, Level
from .pathfinding import find_route
from .stairs import StairLinker
from .tiles import Tile
from .world import World

logger = logging.getLogger(__name__)

# Spawn and goal sharing a level must be at least this far apart
MIN_GOAL_DISTANCE = 3


class WorldGenerator:
    """Builds a solvable stack of maze levels.

    Per level: carve a perfect maze, then commit the spawn (start level only),
    the level's entry stair, its other stair and, on the top level, the goal.
    A level that cannot host its features is recarved up to
    ``max_level_attempts`` times. After all levels are linked, a cross-level
    route from spawn to goal must exist; otherwise the whole stack is rolled
    again, up to ``max_world_attempts`` times.

    Every carve draws its own RNG from (generation, world attempt, level,
    level attempt), so output depends only on the master seed.
    """

    def __init__(
        self,
        rngm: RNGManager,
        level_count: int,
        width: int,
        height: int,
        start_level: int = 0,
        max_level_attempts: int = 32,
        max_world_attempts: int = 32,
    ) -> None:
        if level_count < 1:
            raise ValueError("level_count must be >= 1")
        if not 0 <= start_level < level_count:
            raise ValueError(f"start_level {start_level} outside 0..{level_count - 1}")
        self.rngm = rngm
        self.level_count = level_count
        self.width = width
        self.height = height
        self.start_level = start_level
        self.max_level_attempts = max_level_attempts
        self.max_world_attempts = max_world_attempts

    @property
    def goal_level(self) -> int:
        return self.level_count - 1

    def generate(self, generation: int = 0) -> World:
        logger.info(
            "Generating %d levels (%dx%d), start level %d, generation %d",
            self.level_count,
            self.width,
            self.height,
            self.start_level,
            generation,
        )
        for world_attempt in range(self.max_world_attempts):
            levels = []
            spawn: Optional[Position] = None
            goal: Optional[Position] = None
            for index in range(self.level_count):
                level, spawn_cell, goal_cell = self._build_level(index, generation, world_attempt)
                levels.append(level)
                if spawn_cell is not None:
                    spawn = Position(index, *spawn_cell)
                if goal_cell is not None:
                    goal = Position(index, *goal_cell)

            world = World(levels, spawn=spawn, goal=goal)
            world.player = spawn
            world.underfoot = Tile.FLOOR
            route = find_route(world, spawn)
            if route.reaches_goal:
                logger.info(
                    "World ready after %d attempt(s): spawn %s, goal %s, solution %d steps",
                    world_attempt + 1,
                    spawn,
                    goal,
                    len(route),
                )
                return world
            logger.warning("World attempt %d has no spawn-to-goal route; rerolling", world_attempt + 1)
        raise GenerationFailed(f"No solvable world after {self.max_world_attempts} attempts")

    def _build_level(
        self, index: int, generation: int, world_attempt: int
    ) -> Tuple[Level, Optional[Cell], Optional[Cell]]:
        for attempt in range(self.max_level_attempts):
            rng = self.rngm.context_rng("level_layout", generation, world_attempt, index, attempt)
            level = MazeCarver(rng).carve(self.width, self.height)
            try:
                spawn, goal = self._furnish(level, index, rng)
            except NoPlacementCandidate as exc:
                logger.warning("Level %d attempt %d: %s; recarving", index, attempt + 1, exc)
                continue
            return level, spawn, goal
        raise GenerationFailed(f"Level {index} could not be furnished in {self.max_level_attempts} attempts")

    def _furnish(self, level: Level, index: int, rng: random.Random) -> Tuple[Optional[Cell], Optional[Cell]]:
        linker = StairLinker(rng)
        needs_up = index > 0
        needs_down = index < self.goal_level
        spawn: Optional[Cell] = None

        if index == self.start_level:
            spawn = rng.choice(level.cells_of(Tile.FLOOR))
            level.set(*spawn, Tile.PLAYER)
            reference = spawn
        elif index > self.start_level:
            # Reached from below, so the up-stair is where the player arrives
            reference = linker.place(level, Tile.STAIR_UP)
            needs_up = False
        else:
            reference = linker.place(level, Tile.STAIR_DOWN)
            needs_down = False

        if needs_up:
            linker.place(level, Tile.STAIR_UP, reference)
        if needs_down:
            linker.place(level, Tile.STAIR_DOWN, reference)

        goal = None
        if index == self.goal_level:
            goal = linker.place(
                level,
                Tile.GOAL,
                reference,
                avoid=spawn,
                min_distance=MIN_GOAL_DISTANCE if spawn is not None else 0,
            )
        return spawn, goal
