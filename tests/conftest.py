import sys
from pathlib import Path

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from delve.maze.world import World  # noqa: E402

# Three floors joined by one stair pair each; the shortest route is 8 steps.
TOWER = [
    ["#####", "#@.>#", "#####"],
    ["#####", "#<.>#", "#####"],
    ["#####", "#<.G#", "#####"],
]


@pytest.fixture
def tower() -> World:
    return World.from_ascii(TOWER)


@pytest.fixture
def sealed_tower() -> World:
    # Goal walled off on the top floor
    floors = [list(rows) for rows in TOWER]
    floors[2] = ["#####", "#<#G#", "#####"]
    return World.from_ascii(floors)
