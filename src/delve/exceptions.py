class DelveError(Exception):
    """Base exception for the delve maze engine."""


class OutOfBounds(DelveError, IndexError):
    """Raised when a cell coordinate lies outside a level's grid."""

    def __init__(self, x: int, y: int, width: int, height: int) -> None:
        super().__init__(f"Cell out of bounds: ({x},{y}) not in [0,{width})x[0,{height})")
        self.x = x
        self.y = y


class NoPlacementCandidate(DelveError):
    """Raised when a level offers no valid dead end for a stair or the goal."""


class StuckNoPath(DelveError):
    """Raised when neither the goal nor a stair can be reached from the player."""


class GenerationFailed(StuckNoPath):
    """Raised when generation retries are exhausted without a solvable world."""


class IterationCapExceeded(DelveError, RuntimeError):
    """Raised when a search runs past its iteration cap (a broken invariant)."""


class ConfigError(DelveError, ValueError):
    """Raised when settings from a file, the environment or flags are invalid."""
