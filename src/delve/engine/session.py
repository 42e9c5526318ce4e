from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..config import GenerationSettings
from ..exceptions import DelveError, StuckNoPath
from ..maze.generation import WorldGenerator
from ..maze.geometry import Direction, Position
from ..maze.pathfinding import Route, find_route
from ..maze.tiles import Tile
from ..maze.world import World
from ..rng import RNGManager, Seed
from .events import SessionEvent

logger = logging.getLogger(__name__)

Listener = Callable[[SessionEvent, "Session"], None]


class Session:
    """Owns one generated world and the player's place in it.

    A presentation shell reads snapshots and the player position and forwards
    intents (move, activate stair, regenerate); it never mutates the grid
    directly. Manual movement is validated by adjacency and a non-WALL check
    only; routes are computed on request (hint) or by the traversal
    controller.
    """

    def __init__(self, world: World, generator: Optional[WorldGenerator] = None, generation: int = 0) -> None:
        if world.player is None:
            raise DelveError("Session needs a world with a placed player")
        self._listeners: List[Listener] = []
        self._generator = generator
        self.generation = generation
        self.world = world
        self.won = False
        self.last_route: Optional[Route] = None
        logger.info("Session ready: %r, player at %s", world, world.player)

    @classmethod
    def generate_all(
        cls,
        level_count: int,
        width: int,
        height: int,
        seed: Seed = None,
        start_level: int = 0,
        max_level_attempts: int = 32,
        max_world_attempts: int = 32,
    ) -> "Session":
        generator = WorldGenerator(
            RNGManager(seed),
            level_count=level_count,
            width=width,
            height=height,
            start_level=start_level,
            max_level_attempts=max_level_attempts,
            max_world_attempts=max_world_attempts,
        )
        return cls(generator.generate(0), generator=generator)

    @classmethod
    def from_settings(cls, settings: GenerationSettings) -> "Session":
        return cls.generate_all(
            settings.level_count,
            settings.width,
            settings.height,
            seed=settings.seed,
            start_level=settings.start_level,
            max_level_attempts=settings.max_level_attempts,
            max_world_attempts=settings.max_world_attempts,
        )

    def regenerate(self) -> None:
        """Replace the world with a fresh one from the same master seed."""
        if self._generator is None:
            raise DelveError("Session was built from a fixed world and cannot regenerate")
        self.generation += 1
        self.world = self._generator.generate(self.generation)
        self.won = False
        self.last_route = None
        logger.info("Regenerated world (generation %d), player at %s", self.generation, self.world.player)
        self._emit(SessionEvent.REGENERATED)

    # ---- Events ----------------------------------------------------------
    def add_listener(self, listener: Listener) -> None:
        """Subscribe to session events (movement, level change, goal, regeneration)."""
        self._listeners.append(listener)

    def _emit(self, event: SessionEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event, self)
            except Exception:
                logger.exception("Listener errored on %s", event)

    # ---- Read-only state -------------------------------------------------
    @property
    def position(self) -> Position:
        return self.world.player

    @property
    def current_level(self) -> int:
        return self.world.player.level

    @property
    def level_count(self) -> int:
        return self.world.level_count

    @property
    def underfoot(self) -> Tile:
        return self.world.underfoot

    def snapshot(self, level: Optional[int] = None) -> Tuple[Tuple[Tile, ...], ...]:
        return self.world.snapshot(self.current_level if level is None else level)

    def status(self) -> Dict[str, Any]:
        """Summary for a HUD; floors are 1-based for display."""
        return {
            "floor": self.current_level + 1,
            "floors": self.level_count,
            "position": (self.position.x, self.position.y),
            "on_stair": self.underfoot.is_stair,
            "won": self.won,
            "generation": self.generation,
        }

    # ---- Intents ---------------------------------------------------------
    def can_move(self, direction: Direction) -> bool:
        target = self.position.shifted(direction.dx, direction.dy)
        return self.world.level(target.level).is_passable(target.x, target.y)

    def move(self, direction: Direction) -> bool:
        """Single manual step. Returns True if the player moved."""
        if self.won:
            logger.debug("Move ignored; goal already reached")
            return False
        if not self.can_move(direction):
            logger.debug("Blocked move %s from %s", direction.name, self.position)
            return False
        self._enter(self.position.shifted(direction.dx, direction.dy))
        return True

    def activate_stair(self) -> bool:
        """Take the stair under the player, if any. Returns True on a level change."""
        if self.won:
            return False
        target = self.world.linked_stair(self.position)
        if target is None:
            logger.debug("No linked stair under player at %s", self.position)
            return False
        self._enter(target)
        return True

    def travel(self, target: Position) -> None:
        """Apply one route step: an adjacent cell or the far end of the current stair."""
        here = self.position
        if target.level != here.level:
            if self.world.linked_stair(here) != target:
                raise DelveError(f"{target} is not linked to the stair at {here}")
        elif here.manhattan(target) != 1 or not self.world.terrain(target).is_passable:
            raise DelveError(f"Cannot step from {here} to {target}")
        self._enter(target)

    def hint(self, strict: bool = False) -> Route:
        """Fresh shortest route from the player (goal, else nearest stair).

        With ``strict`` an empty route away from the goal raises StuckNoPath,
        telling the caller to regenerate.
        """
        self.last_route = find_route(self.world, self.position)
        if strict and not self.last_route and not self.won:
            raise StuckNoPath(f"Nothing reachable from {self.position}")
        return self.last_route

    def _enter(self, target: Position) -> None:
        previous = self.position
        self.world.place_player(target)
        if target.level != previous.level:
            logger.info("Player changed level %d -> %d at %s", previous.level, target.level, target)
            self._emit(SessionEvent.LEVEL_CHANGED)
        else:
            logger.debug("Player moved to %s", target)
            self._emit(SessionEvent.PLAYER_MOVED)
        if self.underfoot is Tile.GOAL:
            self.won = True
            logger.info("Goal reached at %s", target)
            self._emit(SessionEvent.GOAL_REACHED)
