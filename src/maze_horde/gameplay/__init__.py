"""Level session, timers, events and agent bookkeeping."""

# ruff: noqa: F401

from .entity_manager import EntityManager
from .events import EventScheduler
from .scheduler import TimerHandle, TimerScheduler
from .scoring import ComboTracker
from .session import FrameReport, LevelSession, MoveResult
from .spawn import SpawnQueue, find_horde_spawn_positions
from .state import SimulationContext, create_context

__all__ = [
    "EntityManager",
    "EventScheduler",
    "TimerHandle",
    "TimerScheduler",
    "ComboTracker",
    "FrameReport",
    "LevelSession",
    "MoveResult",
    "SpawnQueue",
    "find_horde_spawn_positions",
    "SimulationContext",
    "create_context",
]
