from __future__ import annotations

import pytest

from delve.exceptions import DelveError, OutOfBounds
from delve.maze.level import Level
from delve.maze.tiles import Tile


def test_new_level_is_solid_wall():
    level = Level(7, 4)
    assert all(level.get(x, y) is Tile.WALL for x, y in level.cells())
    assert level.passable_cells() == []


def test_get_set_are_bounds_checked():
    level = Level(5, 5)
    level.set(2, 3, Tile.FLOOR)
    assert level.get(2, 3) is Tile.FLOOR

    for x, y in [(-1, 0), (0, -1), (5, 0), (0, 5)]:
        with pytest.raises(OutOfBounds):
            level.get(x, y)
        with pytest.raises(OutOfBounds):
            level.set(x, y, Tile.FLOOR)


def test_out_of_bounds_is_an_index_error():
    level = Level(3, 3)
    with pytest.raises(IndexError):
        level.get(3, 3)
    with pytest.raises(DelveError):
        level.get(-1, 0)


def test_invalid_dimensions_rejected():
    with pytest.raises(ValueError):
        Level(0, 5)


def test_snapshot_is_idempotent_and_detached():
    level = Level.from_ascii(["#.#", "...", "#.#"])
    first = level.snapshot()
    assert level.snapshot() == first
    level.set(0, 0, Tile.FLOOR)
    assert level.snapshot() != first
    assert first[0][0] is Tile.WALL


def test_ascii_round_trip_and_queries():
    rows = ["#####", "#<.>#", "#.#G#", "#####"]
    level = Level.from_ascii(rows)
    assert level.to_str_lines() == rows
    assert (level.width, level.height) == (5, 4)
    assert level.find(Tile.GOAL) == (3, 2)
    assert level.find(Tile.PLAYER) is None
    assert level.cells_of(Tile.STAIR_UP, Tile.STAIR_DOWN) == [(1, 1), (3, 1)]
    assert sorted(level.open_neighbors(2, 1)) == [(1, 1), (3, 1)]
    assert not level.is_passable(-1, 1)


def test_from_ascii_rejects_ragged_rows_and_unknown_glyphs():
    with pytest.raises(ValueError):
        Level.from_ascii(["###", "##"])
    with pytest.raises(ValueError):
        Level.from_ascii(["#?#"])


def test_copy_is_independent():
    level = Level.from_ascii(["...", "..."])
    clone = level.copy()
    clone.set(0, 0, Tile.WALL)
    assert level.get(0, 0) is Tile.FLOOR
