"""
Maze generation and pathfinding.

Carving, dead-end scanning, stair linking, reachability and the cross-level
route search. Everything here is pure state plus functions over it; the
player-facing operations live in delve.engine.
"""
from .carver import MazeCarver
from .dead_ends import find_dead_ends, is_dead_end
from .generation import WorldGenerator
from .geometry import Direction, Position
from .level import Level
from .pathfinding import Route, find_route
from .reachability import flood_fill, is_reachable
from .stairs import StairLinker, StairPair
from .tiles import Tile
from .world import World

__all__ = [
    "Direction",
    "Level",
    "MazeCarver",
    "Position",
    "Route",
    "StairLinker",
    "StairPair",
    "Tile",
    "World",
    "WorldGenerator",
    "find_dead_ends",
    "find_route",
    "flood_fill",
    "is_dead_end",
    "is_reachable",
]
