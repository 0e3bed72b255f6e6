# Perfect-maze generator and connectivity validation.

from __future__ import annotations

import random
from collections import deque

from .world_grid import Direction, Grid, GridPos

ENTRANCE_CELL: GridPos = (0, 0)


def exit_cell(size: int) -> GridPos:
    return size - 1, size - 1


def _unvisited_neighbors(
    grid: Grid, visited: list[list[bool]], x: int, z: int
) -> list[Direction]:
    found: list[Direction] = []
    for direction in Direction:
        nx, nz = x + direction.dx, z + direction.dz
        if grid.in_bounds(nx, nz) and not visited[nz][nx]:
            found.append(direction)
    return found


def generate_maze(size: int, rng: random.Random | None = None) -> Grid:
    """Build a perfect maze with randomized depth-first backtracking.

    Every cell starts closed. The walk knocks down one wall pair per newly
    visited cell, so the open edges form a spanning tree of size*size - 1
    edges. Afterwards the outward left wall of the top-left cell and the
    outward right wall of the bottom-right cell are opened.
    """
    rng = rng or random.Random()
    grid = Grid(size)
    visited = [[False] * size for _ in range(size)]

    x, z = rng.randrange(size), rng.randrange(size)
    visited[z][x] = True
    stack: list[GridPos] = [(x, z)]

    while stack:
        candidates = _unvisited_neighbors(grid, visited, x, z)
        if candidates:
            direction = rng.choice(candidates)
            grid.carve(x, z, direction)
            x, z = x + direction.dx, z + direction.dz
            visited[z][x] = True
            stack.append((x, z))
        else:
            x, z = stack.pop()

    grid.carve(*ENTRANCE_CELL, Direction.WEST)
    grid.carve(*exit_cell(size), Direction.EAST)
    return grid


def reachable_cells(grid: Grid, start: GridPos) -> set[GridPos]:
    """Breadth-first flood through open walls."""
    if not grid.in_bounds(*start):
        return set()
    seen = {start}
    queue = deque([start])
    while queue:
        x, z = queue.popleft()
        for neighbor in grid.open_neighbors(x, z):
            if neighbor not in seen:
                seen.add(neighbor)
                queue.append(neighbor)
    return seen


def is_solvable(grid: Grid, start: GridPos, goal: GridPos) -> bool:
    """Return True if goal can be reached from start following open walls."""
    if not grid.in_bounds(*start) or not grid.in_bounds(*goal):
        return False
    if start == goal:
        return True
    seen = {start}
    queue = deque([start])
    while queue:
        x, z = queue.popleft()
        for neighbor in grid.open_neighbors(x, z):
            if neighbor == goal:
                return True
            if neighbor not in seen:
                seen.add(neighbor)
                queue.append(neighbor)
    return False


def path_distances(grid: Grid, start: GridPos) -> dict[GridPos, int]:
    """Step count along open walls from start to every reachable cell."""
    distances = {start: 0}
    queue = deque([start])
    while queue:
        current = queue.popleft()
        for neighbor in grid.open_neighbors(*current):
            if neighbor not in distances:
                distances[neighbor] = distances[current] + 1
                queue.append(neighbor)
    return distances


def is_perfect_maze(grid: Grid) -> bool:
    """Fully connected with exactly size*size - 1 open wall pairs."""
    total = grid.size * grid.size
    if grid.open_wall_pair_count() != total - 1:
        return False
    if not grid.walls_symmetric():
        return False
    return len(reachable_cells(grid, ENTRANCE_CELL)) == total


def render_ascii(grid: Grid, *, marks: dict[GridPos, str] | None = None) -> str:
    """Draw the grid with +--+ corners, | walls and optional one-char marks."""
    marks = marks or {}
    lines: list[str] = []
    top = "+"
    for x in range(grid.size):
        top += ("---" if grid.cell(x, 0).top else "   ") + "+"
    lines.append(top)
    for z in range(grid.size):
        row = "|" if grid.cell(0, z).left else " "
        bottom = "+"
        for x in range(grid.size):
            cell = grid.cell(x, z)
            mark = marks.get((x, z), " ")
            row += f" {mark} " + ("|" if cell.right else " ")
            bottom += ("---" if cell.bottom else "   ") + "+"
        lines.append(row)
        lines.append(bottom)
    return "\n".join(lines)


__all__ = [
    "ENTRANCE_CELL",
    "exit_cell",
    "generate_maze",
    "reachable_cells",
    "is_solvable",
    "path_distances",
    "is_perfect_maze",
    "render_ascii",
]
