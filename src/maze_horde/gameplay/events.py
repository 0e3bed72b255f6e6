"""Difficulty events: the darkness cycle and per-move random events.

Darkness is owned by a dedicated repeating timer. The per-move random
picker never arms it, so the two mechanisms cannot race on the same timer.
Every callback re-checks its guards when it fires.
"""

from __future__ import annotations

import logging

from .. import difficulty
from .entity_manager import EntityManager
from .state import SimulationContext

logger = logging.getLogger(__name__)

DARKNESS_CYCLE_TIMER = "darkness_cycle"
DARKNESS_END_TIMER = "darkness_end"
HORDE_CHECK_TIMER = "horde_check"
DARKNESS_PULSE_TIMER = "darkness_pulse"
SURGE_TIMER = "zombie_surge"

ZOMBIE_SURGE = "zombie_surge"
BONUS_TIME = "bonus_time"
RANDOM_EVENT_POOL: tuple[str, ...] = (ZOMBIE_SURGE, BONUS_TIME)


class EventScheduler:
    def __init__(self, ctx: SimulationContext, entities: EntityManager) -> None:
        self.ctx = ctx
        self.entities = entities
        self.timings = ctx.settings.timings
        self.darkness_active = False
        self.darkness_started_ms: int | None = None
        self.darkness_count = 0
        self.surge_active = False
        self.current_event: str | None = None
        self._base_fog: float | None = None
        self._pulse_direction = 1

    # --- darkness -----------------------------------------------------------

    def schedule_darkness_cycle(self) -> bool:
        """Arm the recurring darkness timer when the level allows it."""
        if not difficulty.darkness_enabled(self.ctx.level):
            return False
        self.ctx.scheduler.schedule_interval(
            DARKNESS_CYCLE_TIMER,
            self.timings.darkness_interval_ms,
            self._on_darkness_timer,
            first_delay_ms=self.timings.darkness_first_delay_ms,
        )
        return True

    def _on_darkness_timer(self) -> None:
        if not self.ctx.events_allowed():
            logger.debug("Darkness suppressed (paused=%s, running=%s, won=%s)",
                         self.ctx.paused, self.ctx.running, self.ctx.won)
            return
        self.trigger_darkness()

    def trigger_darkness(self) -> bool:
        if self.darkness_active:
            return False
        ctx = self.ctx
        scheduler = ctx.scheduler
        self.darkness_active = True
        self.darkness_started_ms = scheduler.now_ms
        self.darkness_count += 1
        self.entities.reset_horde_latch()

        effects = ctx.effects
        if effects is not None:
            if self._base_fog is None:
                self._base_fog = effects.fog_density
            effects.fog_density = self._base_fog * self.timings.darkness_fog_multiplier
            effects.lock_fog_density(True)
            self._pulse_direction = 1
            scheduler.schedule_interval(
                DARKNESS_PULSE_TIMER, self.timings.pulse_interval_ms, self._pulse
            )

        if difficulty.horde_enabled(ctx.level):
            scheduler.schedule_once(
                HORDE_CHECK_TIMER, self.timings.horde_check_delay_ms, self._on_horde_check
            )
        scheduler.schedule_once(
            DARKNESS_END_TIMER, self.timings.darkness_duration_ms, self.end_darkness
        )
        ctx.notifier.notify("events.darkness_start")
        logger.info("Darkness falls at %d ms (cycle %d)", scheduler.now_ms, self.darkness_count)
        return True

    def _pulse(self) -> None:
        effects = self.ctx.effects
        if not self.darkness_active or effects is None or self._base_fog is None:
            self.ctx.scheduler.cancel(DARKNESS_PULSE_TIMER)
            return
        current = effects.fog_density
        if current > self._base_fog * self.timings.pulse_max_multiplier:
            self._pulse_direction = -1
        if current < self._base_fog * self.timings.pulse_min_multiplier:
            self._pulse_direction = 1
        effects.fog_density = current + self.timings.pulse_step * self._pulse_direction

    def _on_horde_check(self) -> None:
        if not self.darkness_active or self.ctx.torn_down:
            return
        if self.entities.horde_spawned:
            return
        self.entities.spawn_zombie_horde()

    def end_darkness(self) -> bool:
        if not self.darkness_active:
            return False
        ctx = self.ctx
        self.darkness_active = False
        self.darkness_started_ms = None
        for name in (HORDE_CHECK_TIMER, DARKNESS_PULSE_TIMER, DARKNESS_END_TIMER):
            ctx.scheduler.cancel(name)
        self._restore_fog()
        ctx.notifier.notify("events.darkness_end")
        logger.info("Light returns at %d ms", ctx.scheduler.now_ms)
        return True

    def _restore_fog(self) -> None:
        effects = self.ctx.effects
        if effects is None:
            return
        if self._base_fog is not None:
            effects.fog_density = self._base_fog
        effects.lock_fog_density(False)

    # --- random events ------------------------------------------------------

    def roll_random_event(self) -> str | None:
        """Per-move roll; returns the event that fired, if any."""
        ctx = self.ctx
        if not difficulty.random_events_enabled(ctx.level) or not ctx.events_allowed():
            return None
        if ctx.rng.random() >= self.timings.random_event_chance:
            return None
        event = ctx.rng.choice(RANDOM_EVENT_POOL)
        self.current_event = event
        if event == ZOMBIE_SURGE:
            self.trigger_zombie_surge()
        else:
            self.trigger_bonus_time()
        return event

    def trigger_zombie_surge(self) -> int:
        affected = self.entities.begin_surge()
        self.surge_active = True
        self.ctx.scheduler.schedule_once(
            SURGE_TIMER, self.timings.surge_duration_ms, self.end_zombie_surge
        )
        self.ctx.notifier.notify("events.surge_start", count=affected)
        logger.info("Zombie surge: %d zombie(s) chasing", affected)
        return affected

    def end_zombie_surge(self) -> None:
        if not self.surge_active:
            return
        self.surge_active = False
        self.ctx.scheduler.cancel(SURGE_TIMER)
        self.entities.end_surge()
        if not self.ctx.torn_down:
            self.ctx.notifier.notify("events.surge_end")
        logger.info("Zombie surge over")

    def trigger_bonus_time(self) -> float:
        seconds = self.timings.bonus_seconds
        self.ctx.level_time_s = max(0.0, self.ctx.level_time_s - seconds)
        self.ctx.notifier.notify("events.bonus_time", seconds=seconds)
        return self.ctx.level_time_s

    # --- lifecycle ------------------------------------------------------------

    def reset(self) -> None:
        """Cancel every event timer and put ambient state back."""
        scheduler = self.ctx.scheduler
        for name in (
            DARKNESS_CYCLE_TIMER,
            DARKNESS_END_TIMER,
            HORDE_CHECK_TIMER,
            DARKNESS_PULSE_TIMER,
            SURGE_TIMER,
        ):
            scheduler.cancel(name)
        if self.darkness_active:
            self._restore_fog()
        if self.surge_active:
            self.entities.end_surge()
        self.darkness_active = False
        self.darkness_started_ms = None
        self.surge_active = False
        self.current_event = None


__all__ = [
    "EventScheduler",
    "RANDOM_EVENT_POOL",
    "DARKNESS_CYCLE_TIMER",
    "DARKNESS_END_TIMER",
    "HORDE_CHECK_TIMER",
    "DARKNESS_PULSE_TIMER",
    "SURGE_TIMER",
]
