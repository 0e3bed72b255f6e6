from __future__ import annotations

import logging
import random
from collections import deque
from typing import Callable, Generic, Iterable, TypeVar

from ..models import HordeConfig, SpawnKind, SpawnTask
from ..world_grid import GridPos, manhattan

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_BATCH_SIZE = 2
DEFAULT_HORDE_ATTEMPTS = 200
DEFAULT_PLACEMENT_ATTEMPTS = 50
# Fresh horde points may not share a cell.
MIN_INTER_SPAWN_DISTANCE = 1
# Last tier only keeps the spawn off the player.
DESPERATE_MIN_DISTANCE = 2

__all__ = [
    "DEFAULT_BATCH_SIZE",
    "SpawnQueue",
    "horde_distance_tiers",
    "find_horde_spawn_positions",
    "pick_spawn_cell",
    "build_horde_tasks",
]


class SpawnQueue(Generic[T]):
    """FIFO of SpawnTasks drained a fixed number per tick.

    ``spawn`` turns one task into an agent; the queue never constructs
    anything on its own.
    """

    def __init__(
        self,
        spawn: Callable[[SpawnTask], T | None],
        *,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> None:
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1 (got {batch_size})")
        self._spawn = spawn
        self.batch_size = batch_size
        self._tasks: deque[SpawnTask] = deque()

    def __len__(self) -> int:
        return len(self._tasks)

    def __bool__(self) -> bool:
        return bool(self._tasks)

    def pending(self) -> list[SpawnTask]:
        return list(self._tasks)

    def enqueue(self, tasks: Iterable[SpawnTask]) -> int:
        before = len(self._tasks)
        self._tasks.extend(tasks)
        added = len(self._tasks) - before
        if added:
            logger.debug("Queued %d spawn task(s), %d pending", added, len(self._tasks))
        return added

    def drain_one_batch(self) -> list[T]:
        """Materialize up to ``batch_size`` tasks; empty queue is a no-op."""
        spawned: list[T] = []
        for _ in range(min(self.batch_size, len(self._tasks))):
            task = self._tasks.popleft()
            result = self._spawn(task)
            if result is not None:
                spawned.append(result)
        if spawned:
            logger.debug("Spawned %d agent(s), %d pending", len(spawned), len(self._tasks))
        return spawned

    def clear(self) -> int:
        dropped = len(self._tasks)
        self._tasks.clear()
        return dropped


def horde_distance_tiers(maze_size: int) -> tuple[int, int, int]:
    """Minimum player distance per tier: generous, roughly half, just off the player.

    No tier is looser than the last one, so small mazes never spawn on the player.
    """
    return (
        max(maze_size // 3, DESPERATE_MIN_DISTANCE),
        max(maze_size // 6, DESPERATE_MIN_DISTANCE),
        DESPERATE_MIN_DISTANCE,
    )


def _try_add_position(
    positions: list[GridPos],
    maze_size: int,
    player: GridPos,
    min_distance: int,
    rng: random.Random,
) -> bool:
    candidate = (rng.randrange(maze_size), rng.randrange(maze_size))
    if manhattan(candidate, player) < min_distance:
        return False
    if any(manhattan(candidate, p) < MIN_INTER_SPAWN_DISTANCE for p in positions):
        return False
    positions.append(candidate)
    return True


def find_horde_spawn_positions(
    count: int,
    maze_size: int,
    player: GridPos,
    rng: random.Random,
    *,
    attempts: int = DEFAULT_HORDE_ATTEMPTS,
) -> list[GridPos]:
    """Pick up to ``count`` distinct cells away from the player.

    Each tier gets its own bounded attempt budget and only runs while the
    previous tiers left the request short. Fewer positions than requested
    (possibly none) is a valid outcome.
    """
    positions: list[GridPos] = []
    if count <= 0:
        return positions
    for tier, min_distance in enumerate(horde_distance_tiers(maze_size), start=1):
        if len(positions) >= count:
            break
        if tier > 1:
            logger.debug(
                "Horde placement relaxed to tier %d (min distance %d), %d/%d found",
                tier,
                min_distance,
                len(positions),
                count,
            )
        tries = 0
        while len(positions) < count and tries < attempts:
            _try_add_position(positions, maze_size, player, min_distance, rng)
            tries += 1

    if not positions:
        logger.warning("Could not find any horde spawn positions (wanted %d)", count)
    elif len(positions) < count:
        logger.warning("Partial horde spawn: found %d/%d positions", len(positions), count)
    return positions


def pick_spawn_cell(
    maze_size: int,
    rng: random.Random,
    *,
    avoid: GridPos,
    min_distance: int,
    occupied: set[GridPos],
    forbidden: Iterable[GridPos] = (),
    attempts: int = DEFAULT_PLACEMENT_ATTEMPTS,
) -> GridPos | None:
    """Random free cell at least ``min_distance`` from ``avoid``.

    After ``attempts`` misses the distance rule is dropped and the first free
    cell (other than ``avoid`` and ``forbidden``) in a shuffled scan is taken.
    Returns None only when every cell is taken.
    """
    blocked = set(occupied)
    blocked.update(forbidden)
    for _ in range(attempts):
        cell = (rng.randrange(maze_size), rng.randrange(maze_size))
        if cell in blocked:
            continue
        if manhattan(cell, avoid) < min_distance:
            continue
        return cell

    cells = [(x, z) for z in range(maze_size) for x in range(maze_size)]
    rng.shuffle(cells)
    for cell in cells:
        if cell not in blocked and cell != avoid:
            logger.debug("Placement fell back to relaxed cell %s", cell)
            return cell
    logger.warning("No free cell left in %dx%d maze", maze_size, maze_size)
    return None


def build_horde_tasks(positions: list[GridPos], config: HordeConfig) -> list[SpawnTask]:
    """Bosses first, then zombies (tagged by corner), then dogs.

    When there are fewer positions than the config asks for, the later
    kinds are the ones cut short.
    """
    tasks: list[SpawnTask] = []
    plan = (
        [SpawnKind.BOSS] * config.boss_count
        + [SpawnKind.ZOMBIE] * config.zombie_count
        + [SpawnKind.DOG] * config.dog_count
    )
    for index, (kind, (x, z)) in enumerate(zip(plan, positions)):
        tag = index % 4 if kind is SpawnKind.ZOMBIE else None
        tasks.append(SpawnTask(kind=kind, x=x, z=z, tag=tag))
    return tasks
