from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from .geometry import Position
from .level import Level
from .stairs import StairPair
from .tiles import Tile


class World:
    """The generated level stack plus the player marker.

    Levels share one width/height. Index 0 is the bottom of the stack; the
    STAIR_DOWN on level k leads to the STAIR_UP on level k+1. Grid contents
    are fixed after generation except for the PLAYER cell and the VISITED
    trail; the tile under the player is kept in ``underfoot``.
    """

    def __init__(self, levels: Sequence[Level], spawn: Optional[Position] = None, goal: Optional[Position] = None):
        if not levels:
            raise ValueError("World needs at least one level")
        sizes = {(lv.width, lv.height) for lv in levels}
        if len(sizes) != 1:
            raise ValueError(f"All levels must share one size, got {sorted(sizes)}")
        self.levels: List[Level] = list(levels)
        self.spawn = spawn
        self.goal = goal
        self.player: Optional[Position] = None
        self.underfoot: Tile = Tile.FLOOR

    @property
    def width(self) -> int:
        return self.levels[0].width

    @property
    def height(self) -> int:
        return self.levels[0].height

    @property
    def level_count(self) -> int:
        return len(self.levels)

    def level(self, index: int) -> Level:
        return self.levels[index]

    def contains(self, pos: Position) -> bool:
        return 0 <= pos.level < len(self.levels) and self.levels[pos.level].in_bounds(pos.x, pos.y)

    def tile_at(self, pos: Position) -> Tile:
        return self.levels[pos.level].get(pos.x, pos.y)

    def terrain(self, pos: Position) -> Tile:
        """Tile at ``pos`` with the player marker resolved to what lies beneath it."""
        if pos == self.player:
            return self.underfoot
        return self.tile_at(pos)

    # ---- Stairs ----------------------------------------------------------
    def stair_pair(self, lower: int) -> Optional[StairPair]:
        """The pair joining ``lower`` and ``lower + 1``, if both ends still exist."""
        if not (0 <= lower < len(self.levels) - 1):
            return None
        down = self._find_terrain(lower, Tile.STAIR_DOWN)
        up = self._find_terrain(lower + 1, Tile.STAIR_UP)
        if down is None or up is None:
            return None
        return StairPair(down=down, up=up)

    def stair_pairs(self) -> List[StairPair]:
        pairs = []
        for k in range(len(self.levels) - 1):
            pair = self.stair_pair(k)
            if pair is not None:
                pairs.append(pair)
        return pairs

    def linked_stair(self, pos: Position) -> Optional[Position]:
        """The far end of the stair at ``pos``, or None if ``pos`` is not a linked stair."""
        tile = self.terrain(pos)
        if tile is Tile.STAIR_DOWN:
            pair = self.stair_pair(pos.level)
        elif tile is Tile.STAIR_UP:
            pair = self.stair_pair(pos.level - 1)
        else:
            return None
        return pair.other_end(pos) if pair else None

    def _find_terrain(self, index: int, tile: Tile) -> Optional[Position]:
        if self.player is not None and self.player.level == index and self.underfoot is tile:
            return self.player
        cell = self.levels[index].find(tile)
        return Position(index, *cell) if cell else None

    # ---- Player ----------------------------------------------------------
    def place_player(self, pos: Position, trail: bool = True) -> None:
        """Move the PLAYER marker to ``pos``, restoring the cell it leaves.

        Plain floor left behind becomes VISITED when ``trail`` is set; stairs
        and the goal are always restored as they were.
        """
        if self.player is not None:
            left = self.underfoot
            if trail and left in (Tile.FLOOR, Tile.VISITED):
                left = Tile.VISITED
            self.levels[self.player.level].set(self.player.x, self.player.y, left)
        self.underfoot = self.tile_at(pos)
        self.levels[pos.level].set(pos.x, pos.y, Tile.PLAYER)
        self.player = pos

    # ---- Export ----------------------------------------------------------
    def snapshot(self, index: int) -> Tuple[Tuple[Tile, ...], ...]:
        return self.levels[index].snapshot()

    def to_str_lines(self, index: int) -> List[str]:
        return self.levels[index].to_str_lines()

    @classmethod
    def from_ascii(cls, floors: Sequence[Sequence[str]]) -> "World":
        """Build a world from per-level glyph rows.

        ``@`` marks the player (standing on floor) and becomes the spawn;
        ``G`` marks the goal.
        """
        levels = [Level.from_ascii(rows) for rows in floors]
        world = cls(levels)
        for index, level in enumerate(levels):
            goal = level.find(Tile.GOAL)
            if goal is not None:
                world.goal = Position(index, *goal)
            player = level.find(Tile.PLAYER)
            if player is not None:
                world.player = world.spawn = Position(index, *player)
                world.underfoot = Tile.FLOOR
        return world

    def __repr__(self) -> str:
        return f"World({len(self.levels)} levels, {self.width}x{self.height})"
