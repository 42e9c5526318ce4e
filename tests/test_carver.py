from __future__ import annotations

import random

import pytest

from delve.exceptions import IterationCapExceeded
from delve.maze.carver import MazeCarver
from delve.maze.reachability import flood_fill, open_adjacency_count
from delve.maze.tiles import Tile


@pytest.mark.parametrize("width,height", [(10, 10), (42, 24), (15, 9), (5, 5)])
@pytest.mark.parametrize("seed", range(6))
def test_carved_level_is_a_perfect_maze(width, height, seed):
    level = MazeCarver(random.Random(seed)).carve(width, height)
    floors = level.passable_cells()
    assert floors

    # Connected
    assert flood_fill(level, floors[0]) == set(floors)
    # Acyclic: a connected graph with n nodes and n-1 edges is a tree
    assert open_adjacency_count(level) == len(floors) - 1


def test_corridors_are_one_cell_wide():
    level = MazeCarver(random.Random(3)).carve(21, 21)
    for x in range(level.width - 1):
        for y in range(level.height - 1):
            block = [level.get(x, y), level.get(x + 1, y), level.get(x, y + 1), level.get(x + 1, y + 1)]
            assert not all(t is Tile.FLOOR for t in block)


def test_every_lattice_cell_carved_from_odd_start():
    level = MazeCarver(random.Random(9)).carve(9, 9, start=(1, 1))
    for y in range(9):
        for x in range(9):
            if x % 2 == 1 and y % 2 == 1:
                assert level.get(x, y) is Tile.FLOOR
            if x % 2 == 0 and y % 2 == 0:
                assert level.get(x, y) is Tile.WALL
    # The outer ring stays solid when carving starts on the odd lattice
    for i in range(9):
        assert level.get(i, 0) is Tile.WALL
        assert level.get(i, 8) is Tile.WALL
        assert level.get(0, i) is Tile.WALL
        assert level.get(8, i) is Tile.WALL


def test_carving_is_deterministic_per_rng_seed():
    a = MazeCarver(random.Random(123)).carve(21, 15)
    b = MazeCarver(random.Random(123)).carve(21, 15)
    c = MazeCarver(random.Random(124)).carve(21, 15)
    assert a.snapshot() == b.snapshot()
    assert a.snapshot() != c.snapshot()


def test_runaway_carve_hits_iteration_cap(monkeypatch):
    # A neighbour scan that never runs dry simulates a broken WALL check
    monkeypatch.setattr(MazeCarver, "_uncarved_neighbors", staticmethod(lambda level, x, y: [((x, y), (x, y))]))
    with pytest.raises(IterationCapExceeded):
        MazeCarver(random.Random(0)).carve(7, 7, start=(1, 1))
