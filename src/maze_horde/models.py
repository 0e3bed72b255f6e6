"""Dataclasses and collaborator interfaces shared across the simulation core."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol, runtime_checkable


class SpawnKind(str, Enum):
    BOSS = "boss"
    ZOMBIE = "zombie"
    DOG = "dog"


@dataclass(frozen=True)
class SpawnTask:
    """Deferred instruction to materialize one agent at a grid cell."""

    kind: SpawnKind
    x: int
    z: int
    tag: int | None = None


@dataclass(frozen=True)
class HordeConfig:
    boss_count: int
    zombie_count: int
    dog_count: int

    @property
    def total(self) -> int:
        return self.boss_count + self.zombie_count + self.dog_count


@dataclass(frozen=True)
class EventTimings:
    """Wall-clock durations (ms) and tuning for difficulty events."""

    darkness_first_delay_ms: int = 60_000
    darkness_interval_ms: int = 180_000
    darkness_duration_ms: int = 20_000
    horde_check_delay_ms: int = 1_000
    pulse_interval_ms: int = 50
    random_event_chance: float = 0.05
    surge_duration_ms: int = 4_000
    bonus_seconds: int = 10
    darkness_fog_multiplier: float = 2.5
    pulse_min_multiplier: float = 2.0
    pulse_max_multiplier: float = 3.0
    pulse_step: float = 0.002


@dataclass(frozen=True)
class LevelSettings:
    level: int = 1
    maze_size: int = 15
    timings: EventTimings = field(default_factory=EventTimings)
    spawn_batch_size: int = 2
    horde_attempts: int = 200
    max_frame_ms: int = 50
    cell_size: float = 4.0
    seed: int | None = None


@runtime_checkable
class Notifier(Protocol):
    """Fire-and-forget UI feedback; return values are ignored."""

    def notify(self, key: str, **params: Any) -> None: ...


@runtime_checkable
class ScreenEffects(Protocol):
    """Ambient screen state the event scheduler may drive."""

    fog_density: float

    def lock_fog_density(self, locked: bool) -> None: ...


class NullNotifier:
    def notify(self, key: str, **params: Any) -> None:
        return None


@dataclass
class FogState:
    """In-memory ScreenEffects used by the headless runner and tests."""

    fog_density: float = 0.05
    density_locked: bool = False

    def lock_fog_density(self, locked: bool) -> None:
        self.density_locked = locked


__all__ = [
    "SpawnKind",
    "SpawnTask",
    "HordeConfig",
    "EventTimings",
    "LevelSettings",
    "Notifier",
    "ScreenEffects",
    "NullNotifier",
    "FogState",
]
