from __future__ import annotations

from typing import TYPE_CHECKING

try:
    from typing import Self
except ImportError:  # pragma: no cover - Python 3.10 fallback
    from typing_extensions import Self

from .. import difficulty
from ..world_grid import Direction
from .agent import AgentState, GridAgent
from .movement import MovementStrategy, chase_step, corridor_patrol_step, flee_step

if TYPE_CHECKING:  # pragma: no cover - typing-only imports
    from ..gameplay.state import SimulationContext

DOG_ACTIVE_INTERVAL_RATIO = 0.5
DOG_TRACKING_SLACK = 2
DOG_LOSE_INTEREST_ALERT = 20.0


class ZombieDog(GridAgent):
    """Fast corridor guard: runs straight lines until something is in range."""

    kind = "zombie_dog"

    def __init__(
        self: Self,
        ctx: "SimulationContext",
        x: int,
        z: int,
        *,
        move_interval: int | None = None,
        chase_range: int | None = None,
        horde: bool = False,
        movement_strategy: MovementStrategy = corridor_patrol_step,
    ) -> None:
        level = ctx.level
        base = (
            move_interval
            if move_interval is not None
            else difficulty.zombie_dog_move_interval(level)
        )
        super().__init__(
            ctx,
            x,
            z,
            move_interval=base,
            move_variance=0 if horde else int(base * 0.3),
            chase_range=(
                chase_range
                if chase_range is not None
                else difficulty.zombie_dog_chase_range(level)
            ),
            kill_reward=difficulty.zombie_dog_kill_reward(level),
        )
        self.horde = horde
        self.alert = 0.0
        self.heading: Direction = ctx.rng.choice(list(Direction))
        self.movement_strategy = movement_strategy

    def current_interval(self) -> int:
        if self.state is AgentState.PATROL:
            return self.move_interval
        return max(1, int(self.move_interval * DOG_ACTIVE_INTERVAL_RATIO))

    def observe(self) -> None:
        player = self.ctx.player_pos
        distance = self.distance_to(player)

        if self.ctx.light_boost_active and distance <= self.chase_range + 2:
            self.state = AgentState.FLEEING
            self.target = player
            self.alert = 0.0
            return
        if self.state is AgentState.FLEEING:
            self.state = AgentState.PATROL
            self.target = None

        if distance <= self.chase_range:
            self.alert = 100.0
            self.state = AgentState.CHASING
            self.target = player
        elif distance <= self.chase_range + DOG_TRACKING_SLACK + 1 and self.alert > 40:
            self.alert = max(self.alert - 0.5, 0.0)
            if self.target is not None:
                self.state = AgentState.CHASING
        else:
            self.alert = max(self.alert - 2, 0.0)
            if self.alert < DOG_LOSE_INTEREST_ALERT:
                self.state = AgentState.PATROL
                self.target = None

    def behave(self) -> None:
        if self.state is AgentState.FLEEING and self.target is not None:
            flee_step(self, self.target)
        elif self.state is AgentState.CHASING and self.target is not None:
            chase_step(self, self.target)
        else:
            self.movement_strategy(self)


def make_horde_dog(ctx: "SimulationContext", x: int, z: int) -> ZombieDog:
    base = difficulty.zombie_dog_move_interval(ctx.level)
    return ZombieDog(
        ctx,
        x,
        z,
        move_interval=max(8, int(base * 0.8)),
        chase_range=ctx.maze_size,
        horde=True,
    )


__all__ = ["ZombieDog", "make_horde_dog"]
