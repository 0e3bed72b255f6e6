from __future__ import annotations

from typing import TYPE_CHECKING

try:
    from typing import Self
except ImportError:  # pragma: no cover - Python 3.10 fallback
    from typing_extensions import Self

from .. import difficulty
from ..world_grid import GridPos
from .agent import AgentState, GridAgent
from .movement import (
    MovementStrategy,
    chase_step,
    flee_step,
    territory_around,
    territory_waypoints,
    territory_wander_step,
    waypoint_patrol_step,
    wander_step,
)

if TYPE_CHECKING:  # pragma: no cover - typing-only imports
    from ..gameplay.state import SimulationContext

MAX_ALERT = 100.0
INVESTIGATE_ALERT = 30.0
CONFUSED_ALERT = 20.0
CHASE_INTERVAL_RATIO = 0.7


class Zombie(GridAgent):
    kind = "zombie"

    def __init__(
        self: Self,
        ctx: "SimulationContext",
        x: int,
        z: int,
        *,
        move_interval: int | None = None,
        chase_range: int | None = None,
        kill_reward: int | None = None,
        horde: bool = False,
        movement_strategy: MovementStrategy | None = None,
    ) -> None:
        level = ctx.level
        base = move_interval if move_interval is not None else difficulty.zombie_move_interval(level)
        super().__init__(
            ctx,
            x,
            z,
            move_interval=base,
            move_variance=0 if horde else max(1, base // 2),
            chase_range=(
                chase_range if chase_range is not None else difficulty.zombie_chase_range(level)
            ),
            kill_reward=(
                kill_reward if kill_reward is not None else difficulty.zombie_kill_reward(level)
            ),
        )
        self.horde = horde
        self.alert = 0.0
        self.alert_decay = difficulty.zombie_alert_decay(level)
        self.last_known: GridPos | None = None
        self.territory = territory_around(
            (self.grid_x, self.grid_z),
            difficulty.zombie_patrol_range(level, ctx.maze_size),
            ctx.maze_size,
        )
        self.waypoints = territory_waypoints(self.territory)
        self.waypoint_index = 0
        self._saved_chase_range: int | None = None
        if movement_strategy is None:
            if ctx.rng.random() < difficulty.zombie_patrol_chance(level):
                movement_strategy = waypoint_patrol_step
            else:
                movement_strategy = territory_wander_step
        self.movement_strategy = movement_strategy

    @property
    def surging(self) -> bool:
        return self._saved_chase_range is not None

    def current_interval(self) -> int:
        if self.state is AgentState.CHASING:
            return max(1, int(self.move_interval * CHASE_INTERVAL_RATIO))
        return self.move_interval

    def observe(self) -> None:
        player = self.ctx.player_pos
        distance = self.distance_to(player)

        if self.ctx.light_boost_active and distance <= self.chase_range + 2:
            self.state = AgentState.FLEEING
            self.target = player
            self.alert = 0.0
            return

        if self.horde or self.surging or distance <= self.chase_range:
            self.alert = MAX_ALERT
            self.state = AgentState.CHASING
            self.target = player
            self.last_known = player
        elif distance <= self.chase_range + 2 and self.alert > 50:
            self.alert = min(self.alert + 10, MAX_ALERT)
            if self.last_known is not None:
                self.state = AgentState.CHASING
                self.target = self.last_known
        else:
            self.alert = max(0.0, self.alert - self.alert_decay)
            if self.alert > INVESTIGATE_ALERT and self.last_known is not None:
                self.state = AgentState.CHASING
                self.target = self.last_known
                if self.position == self.last_known:
                    self.last_known = None
                    self.alert = CONFUSED_ALERT
            else:
                self.state = AgentState.PATROL
                self.target = None

    def behave(self) -> None:
        if self.state is AgentState.FLEEING and self.target is not None:
            flee_step(self, self.target)
        elif self.state is AgentState.CHASING and self.target is not None:
            if not chase_step(self, self.target):
                wander_step(self)
        else:
            self.movement_strategy(self)

    def begin_surge(self, chase_range: int) -> None:
        if self._saved_chase_range is None:
            self._saved_chase_range = self.chase_range
        self.chase_range = chase_range
        self.alert = MAX_ALERT
        self.state = AgentState.CHASING
        self.target = self.ctx.player_pos

    def end_surge(self) -> None:
        if self._saved_chase_range is None:
            return
        self.chase_range = self._saved_chase_range
        self._saved_chase_range = None
        if not self.horde:
            self.state = AgentState.PATROL
            self.target = None


def make_horde_zombie(ctx: "SimulationContext", x: int, z: int) -> Zombie:
    base = difficulty.zombie_move_interval(ctx.level)
    return Zombie(
        ctx,
        x,
        z,
        move_interval=max(10, int(base * 0.7)),
        chase_range=ctx.maze_size,
        horde=True,
    )


__all__ = ["Zombie", "make_horde_zombie"]
