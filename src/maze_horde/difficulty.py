"""Level-scaled difficulty rules (counts, cadences, ranges, rewards)."""

from __future__ import annotations

import math

from .models import HordeConfig
from .world_grid import clamp_maze_size

DEFAULT_BASE_MAZE_SIZE = 15
MAX_LEVEL_MAZE_SIZE = 45

RANDOM_EVENTS_MIN_LEVEL = 3
DARKNESS_MIN_LEVEL = 5
HORDE_MIN_LEVEL = 5
PERSISTENT_BOSS_MIN_LEVEL = 6
ZOMBIE_DOG_MIN_LEVEL = 2

ZOMBIE_BASE_INTERVAL = 90
ZOMBIE_MIN_INTERVAL = 12
ZOMBIE_SPEED_SCALING = 8
ZOMBIE_MAX_COUNT = 50
DOG_MAX_COUNT = 30
MONSTER_MAX_COUNT = 5
PERSISTENT_BOSS_MAX_COUNT = 6

HORDE_MAX_ZOMBIES = 25
HORDE_MAX_DOGS = 15

BIGFOOT_KILL_REWARD = 500
MONSTER_KILL_REWARD = 50
MONSTER_CHASE_RANGE = 8

# Combo tiers: threshold -> score multiplier
COMBO_TIERS: tuple[tuple[int, float], ...] = (
    (50, 3.0),
    (35, 2.0),
    (20, 1.5),
    (10, 1.25),
    (5, 1.1),
)


def maze_size_for_level(level: int, base_size: int = DEFAULT_BASE_MAZE_SIZE) -> int:
    # One extra cell roughly every two levels, capped for performance.
    size = min(base_size + level // 2, MAX_LEVEL_MAZE_SIZE)
    return clamp_maze_size(size)


def zombie_count(level: int) -> int:
    return max(0, min(level, ZOMBIE_MAX_COUNT))


def zombie_dog_count(level: int) -> int:
    if level < ZOMBIE_DOG_MIN_LEVEL:
        return 0
    return min(int(level * 0.8), DOG_MAX_COUNT)


def monster_count(level: int) -> int:
    return min(level // 2 + 1, MONSTER_MAX_COUNT)


def persistent_boss_count(level: int) -> int:
    if level < PERSISTENT_BOSS_MIN_LEVEL:
        return 0
    return min((level - 1) // 5, PERSISTENT_BOSS_MAX_COUNT)


def zombie_move_interval(level: int) -> int:
    return max(ZOMBIE_BASE_INTERVAL - level * ZOMBIE_SPEED_SCALING, ZOMBIE_MIN_INTERVAL)


def zombie_dog_move_interval(level: int) -> int:
    return max(45 - level * 5, 10)


def boss_move_interval(level: int) -> int:
    return max(20 - level, 10)


def bigfoot_move_interval(level: int) -> int:
    return max(int(30 - level * 1.5), 15)


def monster_move_interval(level: int) -> int:
    return max(30 - level, 15)


def zombie_chase_range(level: int) -> int:
    return min(4 + level // 2, 12)


def zombie_dog_chase_range(level: int) -> int:
    return min(5 + int(level * 0.6), 14)


def zombie_patrol_range(level: int, maze_size: int) -> int:
    return math.ceil(maze_size / 3) + level // 3


def zombie_patrol_chance(level: int) -> float:
    return 0.4 + level * 0.06


def zombie_alert_decay(level: int) -> float:
    if level >= 5:
        return 0.3
    if level >= 3:
        return 0.5
    return 1.0


def zombie_kill_reward(level: int) -> int:
    return max(100 - (level - 1) * 5, 20)


def zombie_dog_kill_reward(level: int) -> int:
    return max(60 - (level - 1) * 3, 15)


def boss_kill_reward(level: int) -> int:
    return max(150 - (level - 1) * 6, 50)


def horde_config(level: int) -> HordeConfig:
    extra_zombies = int((level - 5) * 0.8)
    extra_dogs = int((level - 5) * 0.6)
    return HordeConfig(
        boss_count=1,
        zombie_count=max(0, min(5 + extra_zombies, HORDE_MAX_ZOMBIES)),
        dog_count=max(0, min(3 + extra_dogs, HORDE_MAX_DOGS)),
    )


def random_events_enabled(level: int) -> bool:
    return level >= RANDOM_EVENTS_MIN_LEVEL


def darkness_enabled(level: int) -> bool:
    return level >= DARKNESS_MIN_LEVEL


def horde_enabled(level: int) -> bool:
    return level >= HORDE_MIN_LEVEL


def combo_multiplier(combo: int) -> float:
    for threshold, multiplier in COMBO_TIERS:
        if combo >= threshold:
            return multiplier
    return 1.0


def combo_bonus(combo: int) -> int:
    if combo > 10:
        return 5 + ((combo - 10) // 5) * 3
    return 0


__all__ = [
    "DEFAULT_BASE_MAZE_SIZE",
    "RANDOM_EVENTS_MIN_LEVEL",
    "DARKNESS_MIN_LEVEL",
    "HORDE_MIN_LEVEL",
    "BIGFOOT_KILL_REWARD",
    "MONSTER_KILL_REWARD",
    "MONSTER_CHASE_RANGE",
    "maze_size_for_level",
    "zombie_count",
    "zombie_dog_count",
    "monster_count",
    "persistent_boss_count",
    "zombie_move_interval",
    "zombie_dog_move_interval",
    "boss_move_interval",
    "bigfoot_move_interval",
    "monster_move_interval",
    "zombie_chase_range",
    "zombie_dog_chase_range",
    "zombie_patrol_range",
    "zombie_patrol_chance",
    "zombie_alert_decay",
    "zombie_kill_reward",
    "zombie_dog_kill_reward",
    "boss_kill_reward",
    "horde_config",
    "random_events_enabled",
    "darkness_enabled",
    "horde_enabled",
    "combo_multiplier",
    "combo_bonus",
]
