from __future__ import annotations

import numpy as np
import pytest

from maze_horde.world_grid import (
    MAX_MAZE_SIZE,
    MIN_MAZE_SIZE,
    Direction,
    Grid,
    can_step_to,
    clamp_maze_size,
    direction_for_delta,
    manhattan,
)


def test_grid_rejects_sizes_below_one() -> None:
    with pytest.raises(ValueError):
        Grid(0)


def test_cell_lookup_out_of_range_raises() -> None:
    grid = Grid(3)

    with pytest.raises(ValueError):
        grid.cell(3, 0)
    with pytest.raises(ValueError):
        grid.cell(-1, 1)


def test_carve_opens_both_sides_of_the_shared_wall() -> None:
    grid = Grid(3)

    grid.carve(1, 1, Direction.EAST)
    grid.carve(1, 1, Direction.NORTH)

    assert grid.cell(1, 1).right is False
    assert grid.cell(2, 1).left is False
    assert grid.cell(1, 1).top is False
    assert grid.cell(1, 0).bottom is False
    assert grid.walls_symmetric()
    assert grid.open_wall_pair_count() == 2


def test_close_restores_both_sides() -> None:
    grid = Grid(2)
    grid.carve(0, 0, Direction.SOUTH)

    grid.close(0, 0, Direction.SOUTH)

    assert grid.cell(0, 0).bottom is True
    assert grid.cell(0, 1).top is True
    assert grid.open_wall_pair_count() == 0


def test_can_step_to_requires_bounds_and_open_wall() -> None:
    grid = Grid(3)
    grid.carve(0, 0, Direction.WEST)  # boundary opening
    grid.carve(0, 0, Direction.EAST)

    assert can_step_to(grid, 0, 0, 1, 0) is True
    assert can_step_to(grid, 1, 0, -1, 0) is True
    assert can_step_to(grid, 0, 0, 0, 1) is False
    # The outward opening never lets anything leave the grid.
    assert can_step_to(grid, 0, 0, -1, 0) is False
    # Only unit orthogonal steps are legal.
    assert can_step_to(grid, 0, 0, 1, 1) is False
    assert can_step_to(grid, 0, 0, 2, 0) is False


def test_direction_for_delta() -> None:
    assert direction_for_delta(0, -1) is Direction.NORTH
    assert direction_for_delta(-1, 0) is Direction.WEST
    assert Direction.EAST.opposite is Direction.WEST

    with pytest.raises(ValueError):
        direction_for_delta(1, 1)


def test_wall_array_layout() -> None:
    grid = Grid(4)
    grid.carve(2, 1, Direction.SOUTH)

    flags = grid.wall_array()

    assert flags.shape == (4, 4, 4)
    assert flags.dtype == np.bool_
    # [z, x, side] with sides ordered top, right, bottom, left
    assert not flags[1, 2, 2]
    assert not flags[2, 2, 0]
    assert int(np.count_nonzero(~flags)) == 2


def test_clamp_maze_size_and_manhattan() -> None:
    assert clamp_maze_size(3) == MIN_MAZE_SIZE
    assert clamp_maze_size(500) == MAX_MAZE_SIZE
    assert clamp_maze_size(21) == 21
    assert manhattan((0, 0), (3, 4)) == 7
