"""Root logger configuration for the headless runner."""

from __future__ import annotations

import logging
import sys


def setup_logging(level: str = "INFO") -> int:
    """Send all records to stdout in a compact one-line format.

    Returns the numeric level that was applied.
    """
    numeric_level = getattr(logging, str(level).upper(), None)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric_level)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)-5s] %(name)-32s | %(message)s",
            datefmt="%H:%M:%S",
        )
    )

    root = logging.getLogger()
    root.setLevel(numeric_level)
    root.handlers.clear()
    root.addHandler(handler)
    return numeric_level
