from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Optional

from .traversal import Phase, TraversalController

logger = logging.getLogger(__name__)


@dataclass
class LoopConfig:
    """Configuration for the headless auto-play loop.

    Attributes:
        tick_rate: Target ticks per second. If 0 or None, ticks as fast as possible.
        max_steps: If provided and > 0, the loop stops after this many ticks.
    """

    tick_rate: float = 30.0
    max_steps: Optional[int] = None


class AutoPlayLoop:
    """A tick source for TraversalController, independent of any renderer.

    Stops on its own when the controller reaches a terminal phase or after
    ``max_steps`` ticks.
    """

    def __init__(self, controller: TraversalController, config: Optional[LoopConfig] = None) -> None:
        self.controller = controller
        self.config = config or LoopConfig()
        self._running: bool = False
        self._step: int = 0
        self._last_time: Optional[float] = None

    @property
    def running(self) -> bool:
        return self._running

    @property
    def step(self) -> int:
        return self._step

    @property
    def phase(self) -> Phase:
        return self.controller.phase

    def start(self) -> None:
        """Start the loop state. Safe to call multiple times."""
        if self._running:
            logger.debug("AutoPlayLoop.start() called while already running")
            return
        self._running = True
        self._step = 0
        self._last_time = time.perf_counter()
        logger.info("AutoPlayLoop started (tick_rate=%s, max_steps=%s)", self.config.tick_rate, self.config.max_steps)

    def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        logger.info("AutoPlayLoop stopped at step=%s (%s)", self._step, self.phase.name)

    def update(self, dt: float) -> None:
        """Advance the controller by one tick."""
        if not self._running:
            logger.debug("update() called while not running; ignored")
            return
        self._step += 1
        phase = self.controller.tick()
        logger.debug("Tick #%d (dt=%.4f) -> %s at %s", self._step, dt, phase.name, self.controller.session.position)

        if phase.is_terminal:
            self.stop()
        elif self.config.max_steps is not None and self._step >= self.config.max_steps:
            self.stop()

    def run(self) -> Phase:
        """Blocking loop until stopped; throttled to tick_rate if configured."""
        self.start()
        target_dt = 0.0
        if self.config.tick_rate and self.config.tick_rate > 0:
            target_dt = 1.0 / float(self.config.tick_rate)

        while self._running:
            now = time.perf_counter()
            dt = 0.0 if self._last_time is None else now - self._last_time
            self._last_time = now

            self.update(dt)

            if target_dt > 0 and self._running:
                remaining = target_dt - (time.perf_counter() - now)
                if remaining > 0:
                    time.sleep(remaining)

        logger.info("Loop complete (steps=%d)", self._step)
        return self.phase
