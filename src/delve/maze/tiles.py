from enum import Enum, auto


class Tile(Enum):
    """Maze cell states.

    - WALL: impassable
    - FLOOR: carved corridor
    - PLAYER: the single cell holding the player
    - GOAL: the exit of the whole stack (one per world)
    - STAIR_UP / STAIR_DOWN: ends of a stair pair; STAIR_DOWN on level k links
      to STAIR_UP on level k+1
    - VISITED: trail left behind the player, passable like FLOOR
    """

    WALL = auto()
    FLOOR = auto()
    PLAYER = auto()
    GOAL = auto()
    STAIR_UP = auto()
    STAIR_DOWN = auto()
    VISITED = auto()

    @property
    def is_passable(self) -> bool:
        return self is not Tile.WALL

    @property
    def is_stair(self) -> bool:
        return self in (Tile.STAIR_UP, Tile.STAIR_DOWN)

    @property
    def glyph(self) -> str:
        """Single-character form used by ASCII dumps and tests."""
        return _GLYPHS[self]

    @classmethod
    def from_glyph(cls, ch: str) -> "Tile":
        try:
            return _BY_GLYPH[ch]
        except KeyError:
            raise ValueError(f"Unknown tile glyph: {ch!r}") from None


_GLYPHS = {
    Tile.WALL: "#",
    Tile.FLOOR: ".",
    Tile.PLAYER: "@",
    Tile.GOAL: "G",
    Tile.STAIR_UP: "<",
    Tile.STAIR_DOWN: ">",
    Tile.VISITED: ",",
}
_BY_GLYPH = {v: k for k, v in _GLYPHS.items()}
