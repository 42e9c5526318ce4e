"""
delve: multi-level maze generation and pathfinding.

Carves a stack of perfect mazes, links adjacent levels with stair pairs and
finds shortest routes through the stack. Rendering and input belong to
whatever shell drives a delve.engine.Session.
"""
from importlib.metadata import PackageNotFoundError, version

__all__ = ["__version__"]

try:
    __version__ = version("delve")
except PackageNotFoundError:  # pragma: no cover - during tests without packaging
    __version__ = "0.0.0"
