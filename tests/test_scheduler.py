from __future__ import annotations

import pytest

from maze_horde.gameplay.scheduler import TimerScheduler


def test_once_timer_fires_exactly_once() -> None:
    scheduler = TimerScheduler()
    fired: list[int] = []

    scheduler.schedule_once("ping", 100, lambda: fired.append(scheduler.now_ms))

    assert scheduler.advance(99) == 0
    assert scheduler.advance(1) == 1
    assert scheduler.advance(500) == 0
    assert fired == [100]
    assert "ping" not in scheduler


def test_interval_timer_catches_up_in_order() -> None:
    scheduler = TimerScheduler()
    fired: list[tuple[str, int]] = []

    scheduler.schedule_interval("tick", 50, lambda: fired.append(("tick", scheduler.now_ms)))
    scheduler.schedule_once("mid", 75, lambda: fired.append(("mid", scheduler.now_ms)))

    assert scheduler.advance(160) == 4
    assert fired == [("tick", 50), ("mid", 75), ("tick", 100), ("tick", 150)]
    assert scheduler.now_ms == 160


def test_first_delay_overrides_interval() -> None:
    scheduler = TimerScheduler()
    fired: list[int] = []

    scheduler.schedule_interval("cycle", 100, lambda: fired.append(scheduler.now_ms), first_delay_ms=10)
    scheduler.advance(250)

    assert fired == [10, 110, 210]


def test_rearming_a_name_replaces_previous_timer() -> None:
    scheduler = TimerScheduler()
    fired: list[str] = []

    first = scheduler.schedule_once("decay", 100, lambda: fired.append("first"))
    second = scheduler.schedule_once("decay", 300, lambda: fired.append("second"))
    scheduler.advance(1000)

    assert first.cancelled is True
    assert not second.active
    assert fired == ["second"]


def test_cancel_is_safe_to_repeat() -> None:
    scheduler = TimerScheduler()
    handle = scheduler.schedule_interval("pulse", 10, lambda: None)

    assert scheduler.cancel("pulse") is True
    assert scheduler.cancel("pulse") is False
    handle.cancel()
    assert scheduler.cancel("missing") is False
    assert len(scheduler) == 0


def test_callback_may_cancel_its_own_interval() -> None:
    scheduler = TimerScheduler()
    fired: list[int] = []

    def _tick() -> None:
        fired.append(scheduler.now_ms)
        if len(fired) == 2:
            scheduler.cancel("self")

    scheduler.schedule_interval("self", 10, _tick)
    scheduler.advance(100)

    assert fired == [10, 20]


def test_cancel_all_clears_everything() -> None:
    scheduler = TimerScheduler()
    scheduler.schedule_once("a", 10, lambda: None)
    scheduler.schedule_interval("b", 10, lambda: None)

    assert scheduler.cancel_all() == 2
    assert scheduler.pending_names() == []
    assert scheduler.advance(100) == 0
    assert scheduler.cancel_all() == 0


def test_invalid_arguments_raise() -> None:
    scheduler = TimerScheduler()

    with pytest.raises(ValueError):
        scheduler.schedule_once("a", -1, lambda: None)
    with pytest.raises(ValueError):
        scheduler.schedule_interval("b", 0, lambda: None)
    with pytest.raises(ValueError):
        scheduler.schedule_interval("c", 10, lambda: None, first_delay_ms=-5)
    with pytest.raises(ValueError):
        scheduler.advance(-1)


def test_callback_errors_propagate_without_corrupting_state() -> None:
    scheduler = TimerScheduler()

    def _boom() -> None:
        raise RuntimeError("boom")

    scheduler.schedule_once("boom", 10, _boom)
    scheduler.schedule_once("later", 50, lambda: None)

    with pytest.raises(RuntimeError):
        scheduler.advance(20)

    assert "boom" not in scheduler
    assert scheduler.pending_names() == ["later"]
    assert scheduler.advance(100) == 1
