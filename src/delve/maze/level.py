from __future__ import annotations

from typing import Iterator, List, Optional, Sequence, Tuple

from ..exceptions import OutOfBounds
from .geometry import AXIS_STEPS
from .tiles import Tile

Cell = Tuple[int, int]


class Level:
    """
    One floor of the maze stack: a fixed-size grid of tiles.

    Every cell starts as WALL. All tile access through get()/set() is
    bounds-checked and raises OutOfBounds rather than clamping.
    Coordinates are (x, y) with (0, 0) at top-left; tiles are stored [y][x].
    """

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("Level width/height must be > 0")
        self.width = width
        self.height = height
        self._tiles: List[List[Tile]] = [[Tile.WALL for _ in range(width)] for _ in range(height)]

    # ---- Safety / Bounds -------------------------------------------------
    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, x: int, y: int) -> Tile:
        if not self.in_bounds(x, y):
            raise OutOfBounds(x, y, self.width, self.height)
        return self._tiles[y][x]

    def set(self, x: int, y: int, tile: Tile) -> None:
        if not self.in_bounds(x, y):
            raise OutOfBounds(x, y, self.width, self.height)
        self._tiles[y][x] = tile

    # ---- Query -----------------------------------------------------------
    def is_passable(self, x: int, y: int) -> bool:
        return self.in_bounds(x, y) and self._tiles[y][x].is_passable

    def neighbors4(self, x: int, y: int) -> Iterator[Cell]:
        for dx, dy in AXIS_STEPS:
            nx, ny = x + dx, y + dy
            if self.in_bounds(nx, ny):
                yield nx, ny

    def open_neighbors(self, x: int, y: int) -> List[Cell]:
        return [(nx, ny) for nx, ny in self.neighbors4(x, y) if self._tiles[ny][nx].is_passable]

    def cells(self) -> Iterator[Cell]:
        for y in range(self.height):
            for x in range(self.width):
                yield x, y

    def cells_of(self, *tiles: Tile) -> List[Cell]:
        wanted = set(tiles)
        return [(x, y) for x, y in self.cells() if self._tiles[y][x] in wanted]

    def passable_cells(self) -> List[Cell]:
        return [(x, y) for x, y in self.cells() if self._tiles[y][x].is_passable]

    def find(self, tile: Tile) -> Optional[Cell]:
        for x, y in self.cells():
            if self._tiles[y][x] is tile:
                return x, y
        return None

    # ---- Export / Compare -----------------------------------------------
    def snapshot(self) -> Tuple[Tuple[Tile, ...], ...]:
        """Hashable, read-only copy of the tile matrix, rows first."""
        return tuple(tuple(row) for row in self._tiles)

    def to_str_lines(self) -> List[str]:
        return ["".join(t.glyph for t in row) for row in self._tiles]

    def copy(self) -> "Level":
        clone = Level(self.width, self.height)
        clone._tiles = [row[:] for row in self._tiles]
        return clone

    @classmethod
    def from_ascii(cls, rows: Sequence[str]) -> "Level":
        """Build a level from glyph rows (see Tile.glyph) for tests/tools."""
        if not rows:
            raise ValueError("rows must not be empty")
        width = len(rows[0])
        for r in rows:
            if len(r) != width:
                raise ValueError("All rows must be same width")
        level = cls(width, len(rows))
        for y, row in enumerate(rows):
            for x, ch in enumerate(row):
                level._tiles[y][x] = Tile.from_glyph(ch)
        return level

    def __repr__(self) -> str:
        return f"Level({self.width}x{self.height})"
