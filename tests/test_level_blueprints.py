from __future__ import annotations

import random

import pytest

from maze_horde.level_blueprints import (
    ENTRANCE_CELL,
    exit_cell,
    generate_maze,
    is_perfect_maze,
    is_solvable,
    path_distances,
    reachable_cells,
    render_ascii,
)
from maze_horde.world_grid import Direction, Grid


@pytest.mark.parametrize("size", [1, 2, 5, 10, 15, 31, 60])
def test_generated_maze_is_perfect(size: int) -> None:
    grid = generate_maze(size, random.Random(size))

    assert grid.open_wall_pair_count() == size * size - 1
    assert grid.walls_symmetric()
    assert is_perfect_maze(grid)


@pytest.mark.parametrize("seed", range(5))
def test_every_cell_reachable_from_entrance(seed: int) -> None:
    grid = generate_maze(12, random.Random(seed))

    cells = reachable_cells(grid, ENTRANCE_CELL)

    assert len(cells) == 144
    assert is_solvable(grid, (3, 7), (11, 0))


def test_fifteen_maze_connects_entrance_and_exit() -> None:
    grid = generate_maze(15, random.Random(2024))

    assert is_solvable(grid, (0, 0), (14, 14))
    assert grid.cell(0, 0).left is False
    assert grid.cell(14, 14).right is False


def test_same_seed_gives_same_maze() -> None:
    first = generate_maze(10, random.Random(99)).wall_array()
    second = generate_maze(10, random.Random(99)).wall_array()

    assert (first == second).all()


def test_single_cell_maze_trivially_validates() -> None:
    grid = generate_maze(1, random.Random(0))

    assert is_solvable(grid, (0, 0), (0, 0))
    assert exit_cell(1) == ENTRANCE_CELL


def test_is_solvable_detects_hand_made_dead_end() -> None:
    grid = Grid(3)
    grid.carve(0, 0, Direction.EAST)
    grid.carve(1, 0, Direction.EAST)

    assert is_solvable(grid, (0, 0), (2, 0)) is True
    assert is_solvable(grid, (0, 0), (2, 2)) is False

    grid.carve(2, 0, Direction.SOUTH)
    grid.carve(2, 1, Direction.SOUTH)

    assert is_solvable(grid, (0, 0), (2, 2)) is True
    assert is_solvable(grid, (0, 0), (5, 5)) is False
    assert is_perfect_maze(grid) is False


def test_path_distances_follow_open_walls() -> None:
    grid = Grid(3)
    grid.carve(0, 0, Direction.EAST)
    grid.carve(1, 0, Direction.SOUTH)

    distances = path_distances(grid, (0, 0))

    assert distances == {(0, 0): 0, (1, 0): 1, (1, 1): 2}


def test_render_ascii_marks_cells() -> None:
    grid = generate_maze(4, random.Random(1))

    text = render_ascii(grid, marks={(0, 0): "G", (3, 3): "S"})
    lines = text.splitlines()

    assert len(lines) == 2 * 4 + 1
    assert lines[1].startswith(" ")  # entrance opening on the left
    assert " G " in lines[1]
    assert " S " in lines[7]
    assert lines[7].endswith(" ")  # exit opening on the right
