"""Grid-maze simulation core: maze generation, roaming agents and timed events."""

from .__about__ import __version__

__all__ = ["__version__"]
