from __future__ import annotations

import random
from dataclasses import dataclass, field

from ..level_blueprints import ENTRANCE_CELL, exit_cell, generate_maze
from ..models import LevelSettings, Notifier, NullNotifier, ScreenEffects
from ..world_grid import Grid, GridPos
from .scheduler import TimerScheduler

TICKS_PER_SECOND = 60


def frames_to_ms(frames: int, ticks_per_second: int = TICKS_PER_SECOND) -> int:
    if frames <= 0:
        return 0
    return max(1, int(round((1000 / max(1, ticks_per_second)) * frames)))


def ms_to_frames(ms: int, ticks_per_second: int = TICKS_PER_SECOND) -> int:
    if ms <= 0:
        return 0
    return max(1, int(round((max(1, ticks_per_second) / 1000) * ms)))


@dataclass
class SimulationContext:
    """Everything one level session shares between its components."""

    settings: LevelSettings
    grid: Grid
    rng: random.Random
    scheduler: TimerScheduler
    notifier: Notifier = field(default_factory=NullNotifier)
    effects: ScreenEffects | None = None
    player_pos: GridPos = (0, 0)
    start_pos: GridPos = (0, 0)
    goal_pos: GridPos = ENTRANCE_CELL
    paused: bool = False
    running: bool = True
    won: bool = False
    time_freeze_active: bool = False
    light_boost_active: bool = False
    level_time_s: float = 0.0
    tick: int = 0
    torn_down: bool = False

    @property
    def level(self) -> int:
        return self.settings.level

    @property
    def maze_size(self) -> int:
        return self.grid.size

    @property
    def now_ms(self) -> int:
        return self.scheduler.now_ms

    def events_allowed(self) -> bool:
        """Fire-time guard shared by every difficulty event."""
        return not self.paused and self.running and not self.won and not self.torn_down

    def teardown(self) -> None:
        """Cancel every outstanding timer; later calls are no-ops."""
        if self.torn_down:
            return
        self.scheduler.cancel_all()
        self.running = False
        self.torn_down = True


def create_context(
    settings: LevelSettings,
    *,
    notifier: Notifier | None = None,
    effects: ScreenEffects | None = None,
    rng: random.Random | None = None,
    grid: Grid | None = None,
) -> SimulationContext:
    """Build a context with a freshly generated maze (unless one is given).

    The player starts in the bottom-right cell and heads for the top-left.
    """
    if rng is None:
        rng = random.Random(settings.seed)
    if grid is None:
        grid = generate_maze(settings.maze_size, rng)
    start = exit_cell(grid.size)
    return SimulationContext(
        settings=settings,
        grid=grid,
        rng=rng,
        scheduler=TimerScheduler(),
        notifier=notifier or NullNotifier(),
        effects=effects,
        player_pos=start,
        start_pos=start,
        goal_pos=ENTRANCE_CELL,
    )


__all__ = [
    "TICKS_PER_SECOND",
    "frames_to_ms",
    "ms_to_frames",
    "SimulationContext",
    "create_context",
]
