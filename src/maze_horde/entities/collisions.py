from __future__ import annotations

from typing import Iterable, TYPE_CHECKING, TypeVar

from ..world_grid import Grid, GridPos, can_step_to

if TYPE_CHECKING:  # pragma: no cover - typing-only imports
    from .agent import GridAgent

AgentT = TypeVar("AgentT", bound="GridAgent")


def check_collision(grid: Grid, a: GridPos, b: GridPos) -> bool:
    """Same cell, or orthogonal neighbours with the shared wall open.

    Uses the same wall test as movement, so a hit can never happen through
    a wall that would also stop a step.
    """
    ax, az = a
    bx, bz = b
    dx, dz = bx - ax, bz - az
    if dx == 0 and dz == 0:
        return True
    if abs(dx) + abs(dz) != 1:
        return False
    return can_step_to(grid, ax, az, dx, dz)


def colliding(
    grid: Grid, position: GridPos, agents: Iterable[AgentT]
) -> list[AgentT]:
    return [
        agent
        for agent in agents
        if not agent.disposed and check_collision(grid, agent.position, position)
    ]


def first_collision(
    grid: Grid, position: GridPos, agents: Iterable[AgentT]
) -> AgentT | None:
    for agent in agents:
        if agent.disposed:
            continue
        if check_collision(grid, agent.position, position):
            return agent
    return None


__all__ = ["check_collision", "colliding", "first_collision"]
