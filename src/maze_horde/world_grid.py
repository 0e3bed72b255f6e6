"""Logical maze grid: cells with four wall flags and the step-legality test."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator

import numpy as np

MIN_MAZE_SIZE = 10
MAX_MAZE_SIZE = 60

GridPos = tuple[int, int]


class Direction(Enum):
    NORTH = (0, -1, "top", "bottom")
    EAST = (1, 0, "right", "left")
    SOUTH = (0, 1, "bottom", "top")
    WEST = (-1, 0, "left", "right")

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dz(self) -> int:
        return self.value[1]

    @property
    def wall(self) -> str:
        return self.value[2]

    @property
    def opposite_wall(self) -> str:
        return self.value[3]

    @property
    def opposite(self) -> "Direction":
        return _OPPOSITES[self]


_OPPOSITES = {
    Direction.NORTH: Direction.SOUTH,
    Direction.SOUTH: Direction.NORTH,
    Direction.EAST: Direction.WEST,
    Direction.WEST: Direction.EAST,
}
_BY_DELTA = {(d.dx, d.dz): d for d in Direction}

# Column order of Grid.wall_array()
WALL_ORDER = ("top", "right", "bottom", "left")


def direction_for_delta(dx: int, dz: int) -> Direction:
    """Return the direction for a unit orthogonal step."""
    try:
        return _BY_DELTA[(dx, dz)]
    except KeyError:
        raise ValueError(f"Not a unit orthogonal step: ({dx}, {dz})") from None


def clamp_maze_size(size: int) -> int:
    return max(MIN_MAZE_SIZE, min(MAX_MAZE_SIZE, int(size)))


@dataclass
class Cell:
    top: bool = True
    right: bool = True
    bottom: bool = True
    left: bool = True

    def has_wall(self, direction: Direction) -> bool:
        return bool(getattr(self, direction.wall))

    def open_count(self) -> int:
        return sum(1 for name in WALL_ORDER if not getattr(self, name))


class Grid:
    """Square N x N maze addressed as (x, z); rows are indexed by z."""

    def __init__(self, size: int) -> None:
        if size < 1:
            raise ValueError(f"Maze size must be >= 1 (got {size})")
        self.size = int(size)
        self._rows: list[list[Cell]] = [
            [Cell() for _ in range(self.size)] for _ in range(self.size)
        ]

    def __iter__(self) -> Iterator[tuple[int, int, Cell]]:
        for z, row in enumerate(self._rows):
            for x, cell in enumerate(row):
                yield x, z, cell

    def in_bounds(self, x: int, z: int) -> bool:
        return 0 <= x < self.size and 0 <= z < self.size

    def cell(self, x: int, z: int) -> Cell:
        if not self.in_bounds(x, z):
            raise ValueError(f"Cell ({x}, {z}) outside {self.size}x{self.size} grid")
        return self._rows[z][x]

    def carve(self, x: int, z: int, direction: Direction) -> None:
        """Open the wall pair between (x, z) and its neighbour.

        On the boundary only the outward wall is opened (entrance/exit).
        """
        setattr(self.cell(x, z), direction.wall, False)
        nx, nz = x + direction.dx, z + direction.dz
        if self.in_bounds(nx, nz):
            setattr(self._rows[nz][nx], direction.opposite_wall, False)

    def close(self, x: int, z: int, direction: Direction) -> None:
        setattr(self.cell(x, z), direction.wall, True)
        nx, nz = x + direction.dx, z + direction.dz
        if self.in_bounds(nx, nz):
            setattr(self._rows[nz][nx], direction.opposite_wall, True)

    def open_neighbors(self, x: int, z: int) -> list[GridPos]:
        cell = self.cell(x, z)
        result: list[GridPos] = []
        for direction in Direction:
            nx, nz = x + direction.dx, z + direction.dz
            if self.in_bounds(nx, nz) and not cell.has_wall(direction):
                result.append((nx, nz))
        return result

    def wall_array(self) -> np.ndarray:
        """Return wall flags as a (size, size, 4) bool array indexed [z, x, side]."""
        flags = np.ones((self.size, self.size, 4), dtype=bool)
        for x, z, cell in self:
            flags[z, x] = [getattr(cell, name) for name in WALL_ORDER]
        return flags

    def open_wall_pair_count(self) -> int:
        """Count open internal edges (each shared wall counted once)."""
        flags = self.wall_array()
        # right edges of all but the last column, bottom edges of all but the last row
        horizontal = np.count_nonzero(~flags[:, :-1, 1])
        vertical = np.count_nonzero(~flags[:-1, :, 2])
        return int(horizontal + vertical)

    def walls_symmetric(self) -> bool:
        flags = self.wall_array()
        east_west = np.array_equal(flags[:, :-1, 1], flags[:, 1:, 3])
        north_south = np.array_equal(flags[:-1, :, 2], flags[1:, :, 0])
        return bool(east_west and north_south)


def can_step_to(grid: Grid, x: int, z: int, dx: int, dz: int) -> bool:
    """Single legality test for every mover: in bounds and no wall on the way."""
    nx, nz = x + dx, z + dz
    if not grid.in_bounds(nx, nz) or not grid.in_bounds(x, z):
        return False
    direction = _BY_DELTA.get((dx, dz))
    if direction is None:
        return False
    return not grid.cell(x, z).has_wall(direction)


def manhattan(a: GridPos, b: GridPos) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


__all__ = [
    "MIN_MAZE_SIZE",
    "MAX_MAZE_SIZE",
    "WALL_ORDER",
    "GridPos",
    "Direction",
    "Cell",
    "Grid",
    "direction_for_delta",
    "clamp_maze_size",
    "can_step_to",
    "manhattan",
]
