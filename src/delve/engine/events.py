from enum import Enum, auto


class SessionEvent(Enum):
    """Events emitted by Session to notify a presentation shell."""

    PLAYER_MOVED = auto()
    LEVEL_CHANGED = auto()
    GOAL_REACHED = auto()
    REGENERATED = auto()
