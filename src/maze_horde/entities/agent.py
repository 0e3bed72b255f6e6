from __future__ import annotations

import math
import random
from enum import Enum
from typing import TYPE_CHECKING

import pygame

try:
    from typing import Self
except ImportError:  # pragma: no cover - Python 3.10 fallback
    from typing_extensions import Self

from ..world_grid import GridPos, can_step_to, manhattan
from .collisions import check_collision

if TYPE_CHECKING:  # pragma: no cover - typing-only imports
    from ..gameplay.state import SimulationContext

# Render position snaps when it lags the logical target by more than this many cells.
DIVERGENCE_SNAP_CELLS = 3.0
DEFAULT_LERP_RATE = 10.0


class AgentState(str, Enum):
    PATROL = "patrol"
    CHASING = "chasing"
    FLEEING = "fleeing"


class GridAgent(pygame.sprite.Sprite):
    """Roaming entity with an authoritative grid cell and a derived render position.

    Movement is gated by a tick counter: ``update`` adds the elapsed ticks
    and runs one ``behave`` step whenever the counter reaches the current
    interval. The render position only follows the published target and
    never feeds back into the logic.
    """

    kind = "agent"
    persistent = False

    def __init__(
        self: Self,
        ctx: "SimulationContext",
        x: int,
        z: int,
        *,
        move_interval: int,
        move_variance: int = 0,
        chase_range: int = 0,
        kill_reward: int = 0,
        lerp_rate: float = DEFAULT_LERP_RATE,
    ) -> None:
        super().__init__()
        if move_interval < 1:
            raise ValueError(f"move_interval must be >= 1 (got {move_interval})")
        self.ctx = ctx
        self.grid_x = int(x)
        self.grid_z = int(z)
        self.base_interval = int(move_interval)
        self.move_variance = max(0, int(move_variance))
        self.move_interval = self._roll_interval()
        self.move_counter = 0
        self.state = AgentState.PATROL
        self.target: GridPos | None = None
        self.chase_range = chase_range
        self.kill_reward = kill_reward
        self.lerp_rate = lerp_rate
        self.disposed = False
        self.dead = False
        self.tag: int | None = None
        self.moves_made = 0
        # Manager frame of the last update; None until first seen.
        self.last_update_frame: int | None = None
        self.target_pos = self._world_pos(self.grid_x, self.grid_z)
        self.render_pos = pygame.math.Vector2(self.target_pos)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(({self.grid_x}, {self.grid_z}), "
            f"state={self.state.value}, disposed={self.disposed})"
        )

    @property
    def rng(self) -> random.Random:
        return self.ctx.rng

    @property
    def position(self) -> GridPos:
        return self.grid_x, self.grid_z

    def distance_to(self, pos: GridPos) -> int:
        return manhattan(self.position, pos)

    def distance_to_player(self) -> int:
        return self.distance_to(self.ctx.player_pos)

    def _world_pos(self, x: int, z: int) -> pygame.math.Vector2:
        cell_size = self.ctx.settings.cell_size
        return pygame.math.Vector2((x + 0.5) * cell_size, (z + 0.5) * cell_size)

    def _roll_interval(self) -> int:
        if self.move_variance <= 0:
            return self.base_interval
        return self.base_interval + self.ctx.rng.randrange(self.move_variance)

    def current_interval(self) -> int:
        """Ticks between behaviour steps in the current state."""
        return self.move_interval

    def can_step_to(self, dx: int, dz: int) -> bool:
        return can_step_to(self.ctx.grid, self.grid_x, self.grid_z, dx, dz)

    def step(self, dx: int, dz: int) -> bool:
        if not self.can_step_to(dx, dz):
            return False
        self.grid_x += dx
        self.grid_z += dz
        self.target_pos = self._world_pos(self.grid_x, self.grid_z)
        self.moves_made += 1
        return True

    def teleport(self, x: int, z: int) -> None:
        """Relocate and snap the render position in the same call."""
        self.grid_x = int(x)
        self.grid_z = int(z)
        self.target_pos = self._world_pos(self.grid_x, self.grid_z)
        self.render_pos = pygame.math.Vector2(self.target_pos)
        self.target = None

    def check_collision(self, px: int, pz: int) -> bool:
        return check_collision(self.ctx.grid, self.position, (px, pz))

    def observe(self) -> None:
        """Per-update look at the player; runs even when no step is due."""

    def behave(self) -> None:
        """One decision step; subclasses pick chase/flee/patrol here."""

    def update(self, dt: float = 0.0, ticks: int = 1) -> None:
        if self.disposed:
            return
        self.observe()
        self.move_counter += ticks
        # Overshoot carries into the next interval.
        while not self.disposed and self.move_counter >= self.current_interval():
            self.move_counter -= self.current_interval()
            self.move_interval = self._roll_interval()
            self.behave()
        self.interpolate(dt)

    def interpolate(self, dt: float) -> None:
        """Ease the render position toward the target; dt is in seconds."""
        delta = self.target_pos - self.render_pos
        distance = delta.length()
        if not math.isfinite(distance) or distance > (
            DIVERGENCE_SNAP_CELLS * self.ctx.settings.cell_size
        ):
            self.render_pos = pygame.math.Vector2(self.target_pos)
            return
        factor = min(max(dt, 0.0) * self.lerp_rate, 1.0)
        self.render_pos += delta * factor

    def dispose(self) -> None:
        """Retire from every owning group. Safe to call repeatedly."""
        if self.disposed:
            return
        self.disposed = True
        self.kill()


__all__ = ["AgentState", "GridAgent", "DIVERGENCE_SNAP_CELLS"]
