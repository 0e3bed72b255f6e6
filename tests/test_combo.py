from __future__ import annotations

import pytest

from maze_horde import difficulty
from maze_horde.gameplay.scheduler import TimerScheduler
from maze_horde.gameplay.scoring import ComboTracker
from maze_horde.models import HordeConfig


def test_combo_builds_within_window_and_drops_on_retreat() -> None:
    scheduler = TimerScheduler()
    combo = ComboTracker(scheduler)

    combo.register_move(10, 9)
    assert combo.combo == 1
    scheduler.advance(500)
    combo.register_move(9, 8)
    assert combo.combo == 2
    combo.register_move(8, 9)
    assert combo.combo == 1
    assert combo.max_combo == 2


def test_combo_decays_then_cools_down() -> None:
    scheduler = TimerScheduler()
    combo = ComboTracker(scheduler)
    combo.register_move(10, 9)

    scheduler.advance(3000)
    assert combo.combo == 0
    assert combo.can_build is False

    scheduler.advance(1000)
    assert combo.can_build is True


def test_combo_bonus_and_multiplier_tiers() -> None:
    scheduler = TimerScheduler()
    combo = ComboTracker(scheduler)
    combo.combo = 10
    combo.last_move_ms = 0

    assert combo.register_move(5, 4) == 5
    assert combo.multiplier == pytest.approx(1.25)
    assert combo.extra_score == 5

    combo.reset()
    assert combo.combo == 0
    assert len(scheduler) == 0


def test_difficulty_tables() -> None:
    assert difficulty.maze_size_for_level(1) == 15
    assert difficulty.maze_size_for_level(100) == 45
    assert difficulty.zombie_move_interval(1) == 82
    assert difficulty.zombie_move_interval(20) == 12
    assert difficulty.horde_config(5) == HordeConfig(1, 5, 3)
    assert difficulty.horde_config(100) == HordeConfig(1, 25, 15)
    assert difficulty.combo_multiplier(4) == 1.0
    assert difficulty.combo_multiplier(50) == 3.0
    assert difficulty.combo_bonus(10) == 0
    assert difficulty.combo_bonus(15) == 8
