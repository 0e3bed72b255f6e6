import json
import logging
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, Tuple

from platformdirs import user_config_dir

from .difficulty import maze_size_for_level
from .gameplay.state import TICKS_PER_SECOND
from .models import EventTimings, LevelSettings
from .world_grid import clamp_maze_size

APP_NAME = "MazeHorde"

logger = logging.getLogger(__name__)

# Defaults for all configurable options
DEFAULT_CONFIG: Dict[str, Any] = {
    "maze": {"base_size": 15, "size": None},
    "events": {
        "darkness_first_delay_ms": 60_000,
        "darkness_interval_ms": 180_000,
        "darkness_duration_ms": 20_000,
        "horde_check_delay_ms": 1_000,
        "pulse_interval_ms": 50,
        "random_event_chance": 0.05,
        "surge_duration_ms": 4_000,
        "bonus_seconds": 10,
    },
    "spawn": {"batch_size": 2, "horde_attempts": 200},
    "simulation": {"max_frame_ms": 50, "ticks_per_second": TICKS_PER_SECOND},
    "language": "en",
    "logging": {"level": "INFO"},
}


def user_config_path() -> Path:
    """Return the platform-specific config file path."""
    return Path(user_config_dir(APP_NAME, APP_NAME)) / "config.json"


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Deep-merge dictionaries, with override winning on conflicts."""
    merged: Dict[str, Any] = deepcopy(base)
    for key, val in override.items():
        if isinstance(val, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], val)
        else:
            merged[key] = val
    return merged


def load_config(path: Path | None = None) -> Tuple[Dict[str, Any], Path]:
    """Load config from disk, falling back to defaults on errors."""
    config_path = path or user_config_path()
    config: Dict[str, Any] = deepcopy(DEFAULT_CONFIG)

    try:
        if config_path.exists():
            loaded = json.loads(config_path.read_text(encoding="utf-8"))
            if isinstance(loaded, dict):
                config = _deep_merge(config, loaded)
            else:
                logger.warning("Ignoring non-object config in %s", config_path)
    except (OSError, ValueError) as exc:
        logger.warning("Failed to load config (%s): %s", config_path, exc)

    return config, config_path


def save_config(config: Dict[str, Any], path: Path | None = None) -> None:
    """Persist config to disk, creating parent dirs as needed."""
    config_path = path or user_config_path()
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(json.dumps(config, indent=2), encoding="utf-8")
    except OSError as exc:
        logger.warning("Failed to save config (%s): %s", config_path, exc)


def settings_from_config(
    config: Dict[str, Any], level: int, *, seed: int | None = None
) -> LevelSettings:
    """Freeze the relevant config sections into per-level settings."""
    merged = _deep_merge(DEFAULT_CONFIG, config)
    maze = merged["maze"]
    events = merged["events"]
    spawn = merged["spawn"]
    simulation = merged["simulation"]

    size = maze.get("size")
    if size is None:
        size = maze_size_for_level(level, int(maze["base_size"]))

    timings = EventTimings(
        darkness_first_delay_ms=int(events["darkness_first_delay_ms"]),
        darkness_interval_ms=int(events["darkness_interval_ms"]),
        darkness_duration_ms=int(events["darkness_duration_ms"]),
        horde_check_delay_ms=int(events["horde_check_delay_ms"]),
        pulse_interval_ms=int(events["pulse_interval_ms"]),
        random_event_chance=float(events["random_event_chance"]),
        surge_duration_ms=int(events["surge_duration_ms"]),
        bonus_seconds=int(events["bonus_seconds"]),
    )
    return LevelSettings(
        level=max(1, int(level)),
        maze_size=clamp_maze_size(int(size)),
        timings=timings,
        spawn_batch_size=max(1, int(spawn["batch_size"])),
        horde_attempts=max(1, int(spawn["horde_attempts"])),
        max_frame_ms=max(1, int(simulation["max_frame_ms"])),
        seed=seed,
    )
