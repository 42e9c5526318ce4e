from __future__ import annotations

import argparse
import json
import logging
from typing import Any, Dict, List, Optional

from . import __version__
from .config import build_settings
from .engine.loop import AutoPlayLoop, LoopConfig
from .engine.session import Session
from .engine.traversal import Phase, TraversalController
from .exceptions import ConfigError, StuckNoPath
from .logging_config import configure_logging

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="delve",
        description="Generate a multi-level maze, solve it and optionally auto-play the solution",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", default=None, help="YAML settings file")
    parser.add_argument("--levels", type=int, default=None, help="Number of levels")
    parser.add_argument("--width", type=int, default=None, help="Grid width")
    parser.add_argument("--height", type=int, default=None, help="Grid height")
    parser.add_argument("--seed", default=None, help="Master seed (int or string)")
    parser.add_argument("--start-level", type=int, default=None, help="Level index holding the spawn")
    parser.add_argument("--auto", action="store_true", help="Walk the solution with the traversal controller")
    parser.add_argument("--max-steps", type=int, default=None, help="Stop auto-play after N ticks")
    parser.add_argument("--tick-rate", type=float, default=0.0, help="Auto-play ticks per second (0 = unthrottled)")
    parser.add_argument("--json", action="store_true", help="Print a JSON summary instead of ASCII")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity (-v, -vv)")
    return parser.parse_args(argv)


def _log_level(verbosity: int) -> int:
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return logging.WARNING


def _summarize(session: Session) -> Dict[str, Any]:
    world = session.world
    route = session.hint()
    return {
        "levels": [world.to_str_lines(i) for i in range(world.level_count)],
        "spawn": [world.spawn.level, world.spawn.x, world.spawn.y],
        "goal": [world.goal.level, world.goal.x, world.goal.y],
        "route": {
            "length": len(route),
            "transitions": route.transitions(),
            "reaches_goal": route.reaches_goal,
        },
    }


def _print_ascii(summary: Dict[str, Any]) -> None:
    floors = summary["levels"]
    for index, rows in enumerate(floors):
        print(f"Floor {index + 1}/{len(floors)}")
        for row in rows:
            print(row)
        print()
    route = summary["route"]
    print(
        f"Route: {route['length']} steps, {route['transitions']} stair transitions, "
        f"reaches goal: {'yes' if route['reaches_goal'] else 'no'}"
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(_log_level(args.verbose))

    try:
        settings = build_settings(
            args.config,
            overrides={
                "level_count": args.levels,
                "width": args.width,
                "height": args.height,
                "seed": args.seed,
                "start_level": args.start_level,
            },
        )
    except ConfigError as exc:
        logger.error("Invalid settings: %s", exc)
        return 2

    try:
        session = Session.from_settings(settings)
    except StuckNoPath as exc:
        logger.error("Generation failed: %s", exc)
        return 1

    summary = _summarize(session)
    if not args.json:
        _print_ascii(summary)

    ok = summary["route"]["reaches_goal"]
    if args.auto:
        controller = TraversalController(session)
        loop = AutoPlayLoop(controller, LoopConfig(tick_rate=args.tick_rate, max_steps=args.max_steps))
        phase = loop.run()
        summary["auto"] = {
            "phase": phase.name,
            "ticks": controller.ticks,
            "level_transitions": controller.level_transitions,
            "final_floor": session.current_level + 1,
        }
        ok = phase is Phase.GOAL_REACHED
        if not args.json:
            print(
                f"Auto-play: {phase.name} after {controller.ticks} ticks "
                f"({controller.level_transitions} level changes), floor {session.current_level + 1}"
            )

    if args.json:
        print(json.dumps(summary, indent=2, sort_keys=True))
    return 0 if ok else 1
