from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field

from ..entities import GridAgent, PlayerMarker
from ..models import LevelSettings, Notifier, ScreenEffects
from ..world_grid import Grid, manhattan
from .entity_manager import EntityManager
from .events import EventScheduler
from .scoring import ComboTracker
from .state import SimulationContext, create_context

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FrameReport:
    tick: int
    frame_ms: int
    spawned: tuple[GridAgent, ...] = ()
    collisions: tuple[GridAgent, ...] = ()
    darkness_active: bool = False
    paused: bool = False


@dataclass(frozen=True)
class MoveResult:
    moved: bool
    reached_goal: bool = False
    event: str | None = None
    combo: int = 0
    bonus: int = 0


@dataclass
class LevelScore:
    kills: int = 0
    kill_points: int = 0
    moves: int = 0
    events: list[str] = field(default_factory=list)


class LevelSession:
    """One level from generation to teardown; the host loop calls ``tick``.

    Per tick: clamp the frame, advance wall-clock timers, drain one spawn
    batch, update agents, then poll collisions. Fresh spawns are therefore
    collision-eligible in the tick they appear.
    """

    def __init__(
        self,
        settings: LevelSettings,
        *,
        notifier: Notifier | None = None,
        effects: ScreenEffects | None = None,
        rng: random.Random | None = None,
        grid: Grid | None = None,
    ) -> None:
        self.ctx: SimulationContext = create_context(
            settings, notifier=notifier, effects=effects, rng=rng, grid=grid
        )
        self.player = PlayerMarker(self.ctx)
        self.entities = EntityManager(self.ctx)
        self.events = EventScheduler(self.ctx, self.entities)
        self.combo = ComboTracker(self.ctx.scheduler)
        self.score = LevelScore()
        self.started = False

    @property
    def torn_down(self) -> bool:
        return self.ctx.torn_down

    def start(self, *, populate: bool = True) -> None:
        if self.started:
            return
        self.started = True
        if populate:
            self.entities.populate_level()
        if self.events.schedule_darkness_cycle():
            logger.debug("Darkness cycle armed for level %d", self.ctx.level)

    def clamp_frame(self, frame_ms: float) -> int:
        return int(round(min(max(frame_ms, 0.0), self.ctx.settings.max_frame_ms)))

    def tick(self, frame_ms: float) -> FrameReport:
        ctx = self.ctx
        if ctx.torn_down:
            return FrameReport(tick=ctx.tick, frame_ms=0)
        step_ms = self.clamp_frame(frame_ms)
        ctx.tick += 1
        # Timers keep running while paused; their guards decide.
        ctx.scheduler.advance(step_ms)
        if ctx.torn_down or ctx.paused or not ctx.running:
            return FrameReport(
                tick=ctx.tick,
                frame_ms=step_ms,
                darkness_active=self.events.darkness_active,
                paused=ctx.paused,
            )
        ctx.level_time_s += step_ms / 1000
        spawned = self.entities.drain_spawn_queue()
        self.entities.update_all(step_ms / 1000)
        hits = self.entities.colliding_agents()
        return FrameReport(
            tick=ctx.tick,
            frame_ms=step_ms,
            spawned=tuple(spawned),
            collisions=tuple(hits),
            darkness_active=self.events.darkness_active,
        )

    def move_player(self, dx: int, dz: int) -> MoveResult:
        ctx = self.ctx
        if ctx.paused or not ctx.running or ctx.won:
            return MoveResult(moved=False)
        before = manhattan(ctx.player_pos, ctx.goal_pos)
        if not self.player.try_move(dx, dz):
            return MoveResult(moved=False)
        self.score.moves += 1
        after = manhattan(ctx.player_pos, ctx.goal_pos)
        bonus = self.combo.register_move(before, after)

        if ctx.player_pos == ctx.goal_pos:
            ctx.won = True
            ctx.notifier.notify("events.level_complete", level=ctx.level)
            logger.info("Level %d complete after %d moves", ctx.level, self.score.moves)
            return MoveResult(moved=True, reached_goal=True, combo=self.combo.combo, bonus=bonus)

        event = self.events.roll_random_event()
        if event is not None:
            self.score.events.append(event)
        return MoveResult(moved=True, event=event, combo=self.combo.combo, bonus=bonus)

    def kill(self, agent: GridAgent) -> int:
        reward = self.entities.kill(agent)
        if reward:
            self.score.kills += 1
            self.score.kill_points += reward
        return reward

    def respawn_player(self) -> int:
        """Put the player back on the start cell and push campers away."""
        self.player.place(*self.ctx.start_pos)
        return self.entities.clear_safe_zone(self.ctx.start_pos)

    def pause(self) -> None:
        self.ctx.paused = True

    def resume(self) -> None:
        self.ctx.paused = False

    def teardown(self) -> None:
        """Cancel every timer and retire every agent. Idempotent."""
        if self.ctx.torn_down:
            return
        self.events.reset()
        self.combo.reset()
        self.entities.dispose()
        self.ctx.teardown()
        logger.debug("Level %d torn down", self.ctx.level)


__all__ = ["FrameReport", "MoveResult", "LevelScore", "LevelSession"]
