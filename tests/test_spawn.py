from __future__ import annotations

import logging
import random

import pytest

from maze_horde.gameplay.spawn import (
    SpawnQueue,
    build_horde_tasks,
    find_horde_spawn_positions,
    horde_distance_tiers,
    pick_spawn_cell,
)
from maze_horde.models import HordeConfig, SpawnKind, SpawnTask
from maze_horde.world_grid import manhattan


def _make_tasks(count: int) -> list[SpawnTask]:
    return [SpawnTask(kind=SpawnKind.ZOMBIE, x=i, z=0) for i in range(count)]


def test_queue_drains_fifo_in_batches() -> None:
    queue: SpawnQueue[SpawnTask] = SpawnQueue(lambda task: task, batch_size=2)
    tasks = _make_tasks(5)

    assert queue.enqueue(tasks) == 5
    assert queue.drain_one_batch() == tasks[:2]
    assert queue.drain_one_batch() == tasks[2:4]
    assert len(queue) == 1
    assert queue.drain_one_batch() == tasks[4:]
    assert not queue
    assert queue.drain_one_batch() == []


def test_queue_skips_tasks_that_produce_nothing() -> None:
    queue: SpawnQueue[int] = SpawnQueue(lambda task: None if task.x == 0 else task.x)
    queue.enqueue(_make_tasks(2))

    assert queue.drain_one_batch() == [1]
    assert len(queue) == 0


def test_queue_rejects_empty_batches() -> None:
    with pytest.raises(ValueError):
        SpawnQueue(lambda task: task, batch_size=0)


def test_queue_clear_reports_dropped() -> None:
    queue: SpawnQueue[SpawnTask] = SpawnQueue(lambda task: task)
    queue.enqueue(_make_tasks(3))

    assert queue.clear() == 3
    assert queue.pending() == []


def test_distance_tiers_never_drop_below_last_tier() -> None:
    assert horde_distance_tiers(15) == (5, 2, 2)
    assert horde_distance_tiers(30) == (10, 5, 2)
    assert horde_distance_tiers(4) == (2, 2, 2)


def test_horde_positions_respect_first_tier_when_possible() -> None:
    positions = find_horde_spawn_positions(7, 15, (14, 14), random.Random(1))

    assert len(positions) == 7
    assert len(set(positions)) == 7
    assert all(manhattan(p, (14, 14)) >= 5 for p in positions)


def test_horde_positions_relax_tiers_and_report_shortfall(
    caplog: pytest.LogCaptureFixture,
) -> None:
    caplog.set_level(logging.DEBUG, logger="maze_horde.gameplay.spawn")

    positions = find_horde_spawn_positions(200, 12, (0, 0), random.Random(2))

    assert 0 < len(positions) <= 144
    assert len(set(positions)) == len(positions)
    assert all(manhattan(p, (0, 0)) >= 2 for p in positions)
    assert "relaxed to tier 2" in caplog.text
    assert "relaxed to tier 3" in caplog.text
    assert "Partial horde spawn" in caplog.text


def test_horde_positions_can_come_back_empty(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING, logger="maze_horde.gameplay.spawn")

    assert find_horde_spawn_positions(3, 1, (0, 0), random.Random(0)) == []
    assert find_horde_spawn_positions(0, 15, (0, 0), random.Random(0)) == []
    assert "Could not find any horde spawn positions" in caplog.text


def test_build_horde_tasks_orders_kinds_and_tags_zombies() -> None:
    positions = [(i, 0) for i in range(9)]
    tasks = build_horde_tasks(positions, HordeConfig(boss_count=1, zombie_count=5, dog_count=3))

    kinds = [task.kind for task in tasks]
    assert kinds == [SpawnKind.BOSS] + [SpawnKind.ZOMBIE] * 5 + [SpawnKind.DOG] * 3
    assert [task.tag for task in tasks[1:6]] == [1, 2, 3, 0, 1]
    assert tasks[0].tag is None
    assert (tasks[-1].x, tasks[-1].z) == (8, 0)


def test_build_horde_tasks_truncates_to_positions() -> None:
    tasks = build_horde_tasks([(3, 3), (4, 4)], HordeConfig(1, 4, 2))

    assert [task.kind for task in tasks] == [SpawnKind.BOSS, SpawnKind.ZOMBIE]


def test_pick_spawn_cell_honours_distance_and_occupancy() -> None:
    rng = random.Random(4)
    occupied = {(9, 9)}

    cell = pick_spawn_cell(10, rng, avoid=(0, 0), min_distance=6, occupied=occupied)

    assert cell is not None
    assert cell not in occupied
    assert manhattan(cell, (0, 0)) >= 6


def test_pick_spawn_cell_falls_back_then_gives_up() -> None:
    rng = random.Random(5)
    every_cell = {(x, z) for x in range(3) for z in range(3)}
    free = (2, 1)

    cell = pick_spawn_cell(
        3, rng, avoid=(0, 0), min_distance=10, occupied=every_cell - {free}
    )
    assert cell == free

    assert pick_spawn_cell(3, rng, avoid=(0, 0), min_distance=0, occupied=every_cell) is None
