from __future__ import annotations

import logging

from .. import difficulty
from .scheduler import TimerScheduler

logger = logging.getLogger(__name__)

COMBO_WINDOW_MS = 2_000
COMBO_GRACE_MS = 3_000
COMBO_DECAY_MS = 3_000
COMBO_COOLDOWN_MS = 1_000

COMBO_DECAY_TIMER = "combo_decay"
COMBO_COOLDOWN_TIMER = "combo_cooldown"


class ComboTracker:
    """Move-streak counter toward the goal, decayed by scheduler timers."""

    def __init__(self, scheduler: TimerScheduler) -> None:
        self.scheduler = scheduler
        self.combo = 0
        self.max_combo = 0
        self.extra_score = 0
        self.can_build = True
        self.last_move_ms: int | None = None

    @property
    def multiplier(self) -> float:
        return difficulty.combo_multiplier(self.combo)

    def register_move(self, distance_before: int, distance_after: int) -> int:
        """Update the streak for one player move; returns the bonus earned."""
        now = self.scheduler.now_ms
        since_last = None if self.last_move_ms is None else now - self.last_move_ms

        if distance_after < distance_before:
            if self.can_build and since_last is not None and since_last <= COMBO_WINDOW_MS:
                self.combo += 1
                self.max_combo = max(self.max_combo, self.combo)
            elif since_last is not None and since_last <= COMBO_GRACE_MS:
                pass
            else:
                self.combo = max(1, self.combo)
                self.max_combo = max(self.max_combo, self.combo)
                self.can_build = True
        elif distance_after > distance_before:
            self.combo = max(0, self.combo - 1)

        self.last_move_ms = now
        self.scheduler.schedule_once(COMBO_DECAY_TIMER, COMBO_DECAY_MS, self._decay)

        bonus = difficulty.combo_bonus(self.combo)
        self.extra_score += bonus
        return bonus

    def _decay(self) -> None:
        if self.combo <= 0:
            return
        self.combo -= 1
        self.can_build = False
        self.scheduler.schedule_once(COMBO_COOLDOWN_TIMER, COMBO_COOLDOWN_MS, self._end_cooldown)
        logger.debug("Combo decayed to %d", self.combo)

    def _end_cooldown(self) -> None:
        self.can_build = True

    def reset(self) -> None:
        self.combo = 0
        self.can_build = True
        self.last_move_ms = None
        self.scheduler.cancel(COMBO_DECAY_TIMER)
        self.scheduler.cancel(COMBO_COOLDOWN_TIMER)


__all__ = ["ComboTracker"]
