from __future__ import annotations

import random

from maze_horde.entities import (
    GridAgent,
    Zombie,
    ZombieDog,
    check_collision,
    colliding,
    first_collision,
)
from maze_horde.gameplay.state import create_context
from maze_horde.level_blueprints import generate_maze
from maze_horde.models import LevelSettings
from maze_horde.world_grid import Direction, Grid


def _make_corridor_grid() -> Grid:
    # Row 0 is open left to right; (1, 0) and (1, 1) share a closed wall.
    grid = Grid(3)
    grid.carve(0, 0, Direction.EAST)
    grid.carve(1, 0, Direction.EAST)
    grid.carve(0, 0, Direction.SOUTH)
    return grid


def test_same_cell_and_open_neighbour_collide() -> None:
    grid = _make_corridor_grid()

    assert check_collision(grid, (1, 0), (1, 0))
    assert check_collision(grid, (0, 0), (1, 0))
    assert check_collision(grid, (0, 0), (0, 1))


def test_no_collision_through_walls_or_diagonals() -> None:
    grid = _make_corridor_grid()

    assert not check_collision(grid, (1, 0), (1, 1))
    assert not check_collision(grid, (0, 0), (1, 1))
    assert not check_collision(grid, (0, 0), (2, 0))


def test_collision_is_symmetric() -> None:
    grid = generate_maze(10, random.Random(11))
    cells = [(x, z) for x, z, _ in grid]

    for a in cells:
        for b in cells:
            if abs(a[0] - b[0]) + abs(a[1] - b[1]) > 1:
                continue
            assert check_collision(grid, a, b) == check_collision(grid, b, a)


def test_zombie_and_dog_are_blocked_by_the_same_wall() -> None:
    grid = _make_corridor_grid()
    ctx = create_context(LevelSettings(level=2, maze_size=10), grid=grid, rng=random.Random(0))
    zombie = Zombie(ctx, 1, 1)
    dog = ZombieDog(ctx, 1, 1)

    assert zombie.check_collision(1, 0) is False
    assert dog.check_collision(1, 0) is False
    zombie.teleport(0, 1)
    dog.teleport(0, 1)
    assert zombie.check_collision(0, 0) is True
    assert dog.check_collision(0, 0) is True


def test_colliding_skips_disposed_agents() -> None:
    grid = _make_corridor_grid()
    ctx = create_context(LevelSettings(), grid=grid, rng=random.Random(0))
    gone = GridAgent(ctx, 0, 0, move_interval=1)
    near = GridAgent(ctx, 1, 0, move_interval=1)
    far = GridAgent(ctx, 2, 2, move_interval=1)
    gone.dispose()

    agents = [gone, near, far]

    assert colliding(grid, (0, 0), agents) == [near]
    assert first_collision(grid, (0, 0), agents) is near
    assert first_collision(grid, (2, 0), [gone, far]) is None
