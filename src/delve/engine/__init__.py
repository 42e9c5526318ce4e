from .events import SessionEvent
from .loop import AutoPlayLoop, LoopConfig
from .session import Session
from .traversal import Phase, TraversalController, TraversalState, advance

__all__ = [
    "AutoPlayLoop",
    "LoopConfig",
    "Phase",
    "Session",
    "SessionEvent",
    "TraversalController",
    "TraversalState",
    "advance",
]
