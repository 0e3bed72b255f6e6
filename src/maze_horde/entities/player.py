from __future__ import annotations

from typing import TYPE_CHECKING

try:
    from typing import Self
except ImportError:  # pragma: no cover - Python 3.10 fallback
    from typing_extensions import Self

from ..world_grid import GridPos, can_step_to, direction_for_delta

if TYPE_CHECKING:  # pragma: no cover - typing-only imports
    from ..gameplay.state import SimulationContext


class PlayerMarker:
    """Player's logical cell; publishes every committed move to the context."""

    def __init__(self: Self, ctx: "SimulationContext") -> None:
        self.ctx = ctx
        self.moves = 0

    @property
    def position(self) -> GridPos:
        return self.ctx.player_pos

    def can_step_to(self, dx: int, dz: int) -> bool:
        x, z = self.ctx.player_pos
        return can_step_to(self.ctx.grid, x, z, dx, dz)

    def try_move(self, dx: int, dz: int) -> bool:
        """Commit a unit step if no wall blocks it; other deltas raise ValueError."""
        direction = direction_for_delta(dx, dz)
        if not self.can_step_to(direction.dx, direction.dz):
            return False
        x, z = self.ctx.player_pos
        self.ctx.player_pos = (x + dx, z + dz)
        self.moves += 1
        return True

    def place(self, x: int, z: int) -> None:
        if not self.ctx.grid.in_bounds(x, z):
            raise ValueError(f"Player cell ({x}, {z}) is outside the maze")
        self.ctx.player_pos = (x, z)


__all__ = ["PlayerMarker"]
