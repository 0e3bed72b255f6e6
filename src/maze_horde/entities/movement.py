from __future__ import annotations

import random
from typing import Callable, TYPE_CHECKING

from ..world_grid import Direction, GridPos

if TYPE_CHECKING:  # pragma: no cover - typing-only imports
    from .agent import GridAgent

# Patrol strategies take the agent and report whether it moved.
MovementStrategy = Callable[["GridAgent"], bool]

Territory = tuple[int, int, int, int]  # min_x, min_z, max_x, max_z


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def _try_axis(agent: "GridAgent", axis: str, delta: int) -> bool:
    step = _sign(delta)
    if step == 0:
        return False
    if axis == "x":
        return agent.step(step, 0)
    return agent.step(0, step)


def chase_step(agent: "GridAgent", target: GridPos) -> bool:
    """Greedy one-cell step toward target.

    The axis with the larger distance goes first (z on ties); when it is
    blocked the other axis is tried once. No search, so a dead end relative
    to the target leaves the agent standing still.
    """
    dx = target[0] - agent.grid_x
    dz = target[1] - agent.grid_z
    if dx == 0 and dz == 0:
        return False
    if abs(dx) > abs(dz):
        return _try_axis(agent, "x", dx) or _try_axis(agent, "z", dz)
    return _try_axis(agent, "z", dz) or _try_axis(agent, "x", dx)


def flee_step(agent: "GridAgent", threat: GridPos) -> bool:
    """Mirror of chase_step on the negated delta; ties try x first."""
    dx = agent.grid_x - threat[0]
    dz = agent.grid_z - threat[1]
    if dx == 0 and dz == 0:
        # Standing on the threat: any open direction is away.
        for direction in Direction:
            if agent.step(direction.dx, direction.dz):
                return True
        return False
    if abs(dz) > abs(dx):
        return _try_axis(agent, "z", dz) or _try_axis(agent, "x", dx)
    return _try_axis(agent, "x", dx) or _try_axis(agent, "z", dz)


def _inside(territory: Territory | None, x: int, z: int) -> bool:
    if territory is None:
        return True
    min_x, min_z, max_x, max_z = territory
    return min_x <= x <= max_x and min_z <= z <= max_z


def wander_step(
    agent: "GridAgent",
    rng: random.Random | None = None,
    territory: Territory | None = None,
) -> bool:
    """Take one random legal step, staying inside territory when given."""
    rng = rng or agent.rng
    options = [
        direction
        for direction in Direction
        if agent.can_step_to(direction.dx, direction.dz)
        and _inside(territory, agent.grid_x + direction.dx, agent.grid_z + direction.dz)
    ]
    if not options:
        return False
    direction = rng.choice(options)
    return agent.step(direction.dx, direction.dz)


def waypoint_patrol_step(agent: "GridAgent") -> bool:
    """Walk a closed loop of waypoints, advancing on arrival."""
    waypoints: list[GridPos] = getattr(agent, "waypoints", [])
    if not waypoints:
        return wander_step(agent)
    index = getattr(agent, "waypoint_index", 0) % len(waypoints)
    if agent.position == waypoints[index]:
        index = (index + 1) % len(waypoints)
    agent.waypoint_index = index
    return chase_step(agent, waypoints[index])


def territory_wander_step(agent: "GridAgent") -> bool:
    return wander_step(agent, territory=getattr(agent, "territory", None))


def corridor_patrol_step(agent: "GridAgent") -> bool:
    """Keep the current heading; reverse at a wall, then try turning 90 degrees."""
    heading: Direction = getattr(agent, "heading", Direction.EAST)
    if agent.step(heading.dx, heading.dz):
        return True
    reverse = heading.opposite
    if agent.step(reverse.dx, reverse.dz):
        agent.heading = reverse
        return True
    turns = [d for d in Direction if d not in (heading, reverse)]
    agent.rng.shuffle(turns)
    for direction in turns:
        if agent.step(direction.dx, direction.dz):
            agent.heading = direction
            return True
    return False


def territory_around(center: GridPos, radius: int, size: int) -> Territory:
    cx, cz = center
    return (
        max(0, cx - radius),
        max(0, cz - radius),
        min(size - 1, cx + radius),
        min(size - 1, cz + radius),
    )


def territory_waypoints(territory: Territory) -> list[GridPos]:
    """Corners of the territory followed by its center."""
    min_x, min_z, max_x, max_z = territory
    return [
        (min_x, min_z),
        (max_x, min_z),
        (max_x, max_z),
        (min_x, max_z),
        ((min_x + max_x) // 2, (min_z + max_z) // 2),
    ]


__all__ = [
    "MovementStrategy",
    "Territory",
    "chase_step",
    "flee_step",
    "wander_step",
    "waypoint_patrol_step",
    "territory_wander_step",
    "corridor_patrol_step",
    "territory_around",
    "territory_waypoints",
]
