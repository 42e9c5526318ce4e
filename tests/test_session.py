from __future__ import annotations

import pytest

from delve.config import GenerationSettings
from delve.engine.events import SessionEvent
from delve.engine.session import Session
from delve.exceptions import DelveError, StuckNoPath
from delve.maze.geometry import Direction, Position
from delve.maze.tiles import Tile
from delve.maze.world import World


def _player_cells(session: Session):
    world = session.world
    return [(i, c) for i in range(world.level_count) for c in world.level(i).cells_of(Tile.PLAYER)]


def test_blocked_move_leaves_player_in_place(tower):
    session = Session(tower)
    before = session.snapshot()
    assert session.move(Direction.NORTH) is False
    assert session.move(Direction.WEST) is False
    assert session.position == Position(0, 1, 1)
    assert session.snapshot() == before


def test_move_leaves_visited_trail(tower):
    session = Session(tower)
    assert session.move(Direction.EAST)
    assert session.position == Position(0, 2, 1)
    assert tower.level(0).get(2, 1) is Tile.PLAYER
    assert tower.level(0).get(1, 1) is Tile.VISITED
    assert _player_cells(session) == [(0, (2, 1))]


def test_stairs_restored_when_left(tower):
    session = Session(tower)
    session.move(Direction.EAST)
    session.move(Direction.EAST)
    assert session.underfoot is Tile.STAIR_DOWN
    assert session.status()["on_stair"] is True

    assert session.activate_stair()
    assert session.position == Position(1, 1, 1)
    assert session.underfoot is Tile.STAIR_UP
    assert tower.level(0).get(3, 1) is Tile.STAIR_DOWN
    assert _player_cells(session) == [(1, (1, 1))]

    # And back down again
    assert session.activate_stair()
    assert session.position == Position(0, 3, 1)
    assert tower.level(1).get(1, 1) is Tile.STAIR_UP


def test_activate_stair_off_a_stair_does_nothing(tower):
    session = Session(tower)
    assert session.activate_stair() is False
    assert session.position == Position(0, 1, 1)


def test_reaching_goal_wins_and_freezes_movement(tower):
    session = Session(tower)
    events = []
    session.add_listener(lambda event, s: events.append(event))

    for _ in range(2):
        session.move(Direction.EAST)
    session.activate_stair()
    for _ in range(2):
        session.move(Direction.EAST)
    session.activate_stair()
    session.move(Direction.EAST)
    assert not session.won
    session.move(Direction.EAST)

    assert session.won
    assert session.position == tower.goal
    assert events.count(SessionEvent.LEVEL_CHANGED) == 2
    assert events[-1] is SessionEvent.GOAL_REACHED
    assert session.move(Direction.WEST) is False
    assert session.activate_stair() is False
    assert session.status()["won"] is True
    assert session.status()["floor"] == 3


def test_listener_errors_do_not_break_movement(tower):
    session = Session(tower)

    def broken(event, s):
        raise RuntimeError("boom")

    session.add_listener(broken)
    assert session.move(Direction.EAST)
    assert session.position == Position(0, 2, 1)


def test_travel_validates_each_step(tower):
    session = Session(tower)
    with pytest.raises(DelveError):
        session.travel(Position(0, 3, 1))
    with pytest.raises(DelveError):
        session.travel(Position(0, 1, 0))
    with pytest.raises(DelveError):
        session.travel(Position(1, 1, 1))
    session.travel(Position(0, 2, 1))
    session.travel(Position(0, 3, 1))
    session.travel(Position(1, 1, 1))
    assert session.current_level == 1


def test_hint_records_last_route(tower):
    session = Session(tower)
    route = session.hint()
    assert session.last_route is route
    assert route.reaches_goal
    assert len(route) == 8


def test_status_and_snapshot(tower):
    session = Session(tower)
    assert session.status() == {
        "floor": 1,
        "floors": 3,
        "position": (1, 1),
        "on_stair": False,
        "won": False,
        "generation": 0,
    }
    assert session.snapshot() == session.snapshot()
    assert session.snapshot(2) == tower.snapshot(2)


def test_fixed_world_cannot_regenerate(tower):
    with pytest.raises(DelveError):
        Session(tower).regenerate()


def test_world_without_player_rejected():
    with pytest.raises(DelveError):
        Session(World.from_ascii([["#.G"]]))


def test_generate_all_and_regenerate():
    session = Session.generate_all(3, 21, 15, seed=5)
    assert session.current_level == 0
    assert session.hint().reaches_goal
    first = [session.snapshot(i) for i in range(3)]

    events = []
    session.add_listener(lambda event, s: events.append(event))
    session.regenerate()
    assert session.generation == 1
    assert events == [SessionEvent.REGENERATED]
    assert session.last_route is None
    assert [session.snapshot(i) for i in range(3)] != first
    assert session.hint().reaches_goal


def test_from_settings_uses_every_field():
    settings = GenerationSettings(level_count=4, width=15, height=11, seed="abc", start_level=1)
    session = Session.from_settings(settings)
    assert session.level_count == 4
    assert session.current_level == 1
    assert (session.world.width, session.world.height) == (15, 11)
    assert session.world.goal.level == 3


def test_strict_hint_raises_when_stuck(tower):
    tower.level(0).set(3, 1, Tile.WALL)
    session = Session(tower)
    assert len(session.hint()) == 0
    with pytest.raises(StuckNoPath):
        session.hint(strict=True)
