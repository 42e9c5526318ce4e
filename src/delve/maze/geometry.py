from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


@dataclass(frozen=True)
class Position:
    """A cell in the level stack: (level, x, y)."""

    level: int
    x: int
    y: int

    @property
    def cell(self) -> Tuple[int, int]:
        return (self.x, self.y)

    def shifted(self, dx: int, dy: int) -> "Position":
        return Position(self.level, self.x + dx, self.y + dy)

    def manhattan(self, other: "Position") -> int:
        return abs(self.x - other.x) + abs(self.y - other.y)


class Direction(Enum):
    NORTH = (0, -1)
    EAST = (1, 0)
    SOUTH = (0, 1)
    WEST = (-1, 0)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]


# Ordered for deterministic traversal
AXIS_STEPS: Tuple[Tuple[int, int], ...] = tuple(d.value for d in Direction)
