"""Boss-tier agents.

Boss zombies, bigfoots and monsters share one behaviour: chase the player
inside an aggression radius, flee from a light boost inside it, and wander
otherwise. They differ only by the values in their ``EliteProfile``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

try:
    from typing import Self
except ImportError:  # pragma: no cover - Python 3.10 fallback
    from typing_extensions import Self

from .. import difficulty
from .agent import AgentState, GridAgent
from .movement import chase_step, flee_step, wander_step

if TYPE_CHECKING:  # pragma: no cover - typing-only imports
    from ..gameplay.state import SimulationContext

# Bigfoots follow their cell more tightly than the default interpolation.
BIGFOOT_LERP_RATE = 5.0


@dataclass(frozen=True)
class EliteProfile:
    kind: str
    kill_reward: int
    move_interval: int
    aggression_radius: int
    lerp_rate: float = 10.0


def boss_zombie_profile(level: int, maze_size: int) -> EliteProfile:
    return EliteProfile(
        kind="boss_zombie",
        kill_reward=difficulty.boss_kill_reward(level),
        move_interval=difficulty.boss_move_interval(level),
        aggression_radius=maze_size * 2,
    )


def bigfoot_profile(level: int, maze_size: int) -> EliteProfile:
    return EliteProfile(
        kind="bigfoot",
        kill_reward=difficulty.BIGFOOT_KILL_REWARD,
        move_interval=difficulty.bigfoot_move_interval(level),
        aggression_radius=maze_size * 2,
        lerp_rate=BIGFOOT_LERP_RATE,
    )


def monster_profile(level: int, maze_size: int) -> EliteProfile:
    return EliteProfile(
        kind="monster",
        kill_reward=difficulty.MONSTER_KILL_REWARD,
        move_interval=difficulty.monster_move_interval(level),
        aggression_radius=difficulty.MONSTER_CHASE_RANGE,
    )


class EliteAgent(GridAgent):
    def __init__(
        self: Self,
        ctx: "SimulationContext",
        x: int,
        z: int,
        profile: EliteProfile,
        *,
        persistent: bool = False,
        horde: bool = False,
    ) -> None:
        super().__init__(
            ctx,
            x,
            z,
            move_interval=profile.move_interval,
            chase_range=profile.aggression_radius,
            kill_reward=profile.kill_reward,
            lerp_rate=profile.lerp_rate,
        )
        self.profile = profile
        self.kind = profile.kind
        self.persistent = persistent
        self.horde = horde

    @property
    def aggression_radius(self) -> int:
        return self.chase_range

    def observe(self) -> None:
        player = self.ctx.player_pos
        distance = self.distance_to(player)
        if distance > self.chase_range:
            self.state = AgentState.PATROL
            self.target = None
        elif self.ctx.light_boost_active:
            self.state = AgentState.FLEEING
            self.target = player
        else:
            self.state = AgentState.CHASING
            self.target = player

    def behave(self) -> None:
        if self.state is AgentState.FLEEING and self.target is not None:
            flee_step(self, self.target)
        elif self.state is AgentState.CHASING and self.target is not None:
            chase_step(self, self.target)
        else:
            wander_step(self)


class BossZombie(EliteAgent):
    def __init__(self: Self, ctx: "SimulationContext", x: int, z: int, **kwargs) -> None:
        super().__init__(ctx, x, z, boss_zombie_profile(ctx.level, ctx.maze_size), **kwargs)


class BigfootBoss(EliteAgent):
    def __init__(self: Self, ctx: "SimulationContext", x: int, z: int, **kwargs) -> None:
        super().__init__(ctx, x, z, bigfoot_profile(ctx.level, ctx.maze_size), **kwargs)


class Monster(EliteAgent):
    def __init__(self: Self, ctx: "SimulationContext", x: int, z: int, **kwargs) -> None:
        super().__init__(ctx, x, z, monster_profile(ctx.level, ctx.maze_size), **kwargs)


__all__ = [
    "EliteProfile",
    "EliteAgent",
    "BossZombie",
    "BigfootBoss",
    "Monster",
    "boss_zombie_profile",
    "bigfoot_profile",
    "monster_profile",
]
