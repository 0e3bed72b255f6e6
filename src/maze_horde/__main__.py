from __future__ import annotations

import argparse
import logging
import random
import sys
from typing import Any, Sequence

from .__about__ import __version__
from .config import DEFAULT_CONFIG, load_config, settings_from_config
from .gameplay.session import LevelSession
from .gameplay.state import TICKS_PER_SECOND, frames_to_ms, ms_to_frames
from .level_blueprints import render_ascii
from .localization import TranslatingNotifier, set_language
from .logging_setup import setup_logging
from .models import FogState
from .world_grid import Direction

logger = logging.getLogger("maze_horde")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="maze_horde",
        description="Run a headless maze level with a random-walk player.",
    )
    parser.add_argument("--level", type=int, default=1)
    parser.add_argument("--ticks", type=int, default=600, help="simulation ticks to run")
    parser.add_argument(
        "--seconds", type=float, default=None, help="simulated seconds to run (overrides --ticks)"
    )
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--size", type=int, default=None, help="override the maze size")
    parser.add_argument("--show-maze", action="store_true", help="print the maze and exit")
    parser.add_argument("--log-level", default=None)
    parser.add_argument("--language", default=None)
    parser.add_argument("--no-config", action="store_true", help="ignore the user config file")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def run(args: argparse.Namespace) -> int:
    config: dict[str, Any]
    if args.no_config:
        config = dict(DEFAULT_CONFIG)
    else:
        config, _ = load_config()
    if args.size is not None:
        config = {**config, "maze": {**config.get("maze", {}), "size": args.size}}

    setup_logging(args.log_level or config.get("logging", {}).get("level", "INFO"))
    set_language(args.language or config.get("language"))

    settings = settings_from_config(config, args.level, seed=args.seed)
    session = LevelSession(settings, notifier=TranslatingNotifier(), effects=FogState())

    if args.show_maze:
        ctx = session.ctx
        print(render_ascii(ctx.grid, marks={ctx.start_pos: "S", ctx.goal_pos: "G"}))
        return 0

    ticks_per_second = int(
        config.get("simulation", {}).get("ticks_per_second", TICKS_PER_SECOND)
    )
    frame_ms = frames_to_ms(1, ticks_per_second)
    ticks = args.ticks
    if args.seconds is not None:
        ticks = ms_to_frames(int(args.seconds * 1000), ticks_per_second)
    walker = random.Random(args.seed)
    directions = list(Direction)
    session.start()
    logger.info(
        "Level %d on a %dx%d maze with %d agent(s)",
        settings.level,
        settings.maze_size,
        settings.maze_size,
        len(session.entities),
    )
    hits = 0
    try:
        for _ in range(ticks):
            if session.ctx.won:
                break
            direction = walker.choice(directions)
            session.move_player(direction.dx, direction.dz)
            report = session.tick(frame_ms)
            if report.collisions:
                hits += 1
                session.respawn_player()
    finally:
        session.teardown()

    logger.info(
        "Finished after %d tick(s): won=%s, hits=%d, moves=%d, max combo=%d",
        session.ctx.tick,
        session.ctx.won,
        hits,
        session.score.moves,
        session.combo.max_combo,
    )
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    return run(args)


if __name__ == "__main__":
    sys.exit(main())
