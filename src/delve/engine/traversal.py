from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from ..maze.pathfinding import Route
from .session import Session

logger = logging.getLogger(__name__)


class Phase(Enum):
    """Traversal phases.

    LEVEL_TRANSITION never rests in a TraversalState: the stair step replans
    in the same tick, so callers see PATH_COMPUTED for that tick.
    """

    IDLE = auto()
    PATH_COMPUTED = auto()
    STEPPING = auto()
    LEVEL_TRANSITION = auto()
    GOAL_REACHED = auto()
    PATH_EXHAUSTED = auto()

    @property
    def is_terminal(self) -> bool:
        return self in (Phase.GOAL_REACHED, Phase.PATH_EXHAUSTED)


@dataclass(frozen=True)
class TraversalState:
    phase: Phase = Phase.IDLE
    route: Optional[Route] = None


def plan(session: Session) -> TraversalState:
    """Compute a fresh route from the player's position."""
    route = session.hint()
    if session.won or (route.reaches_goal and not route):
        return TraversalState(Phase.GOAL_REACHED, route)
    if not route:
        logger.warning("Planning from %s found nothing to walk to", session.position)
        return TraversalState(Phase.PATH_EXHAUSTED, route)
    return TraversalState(Phase.PATH_COMPUTED, route)


def advance(session: Session, state: TraversalState) -> TraversalState:
    """One tick of automated traversal.

    Consumes a single route position. Crossing to another level makes the
    remaining route stale, so the player is moved onto the linked stair and a
    new route is planned in the same tick (LEVEL_TRANSITION -> PATH_COMPUTED).
    Terminal phases are returned unchanged.
    """
    if state.phase.is_terminal:
        return state
    if state.phase is Phase.IDLE or state.route is None:
        return plan(session)
    route = state.route
    if not route:
        logger.info("Route exhausted at %s without reaching the goal", session.position)
        return TraversalState(Phase.PATH_EXHAUSTED, route)

    target = route.steps[0]
    from_level = session.current_level
    session.travel(target)
    remaining = route.advance()
    if session.won:
        return TraversalState(Phase.GOAL_REACHED, remaining)
    if target.level != from_level:
        logger.debug("%s: level %d -> %d, replanning", Phase.LEVEL_TRANSITION.name, from_level, target.level)
        return plan(session)
    return TraversalState(Phase.STEPPING, remaining)


class TraversalController:
    """Stateful wrapper around advance() for a tick source to drive."""

    def __init__(self, session: Session) -> None:
        self.session = session
        self.state = TraversalState()
        self.ticks = 0
        self.level_transitions = 0

    @property
    def phase(self) -> Phase:
        return self.state.phase

    @property
    def route(self) -> Optional[Route]:
        return self.state.route

    @property
    def finished(self) -> bool:
        return self.state.phase.is_terminal

    def tick(self) -> Phase:
        if self.finished:
            return self.phase
        level_before = self.session.current_level
        self.state = advance(self.session, self.state)
        self.ticks += 1
        if self.session.current_level != level_before:
            self.level_transitions += 1
        if self.finished:
            logger.info("Traversal finished with %s after %d ticks", self.phase.name, self.ticks)
        return self.phase

    def run(self, max_ticks: Optional[int] = None) -> Phase:
        """Tick until a terminal phase (or ``max_ticks``)."""
        while not self.finished:
            if max_ticks is not None and self.ticks >= max_ticks:
                break
            self.tick()
        return self.phase
