"""Named, cancellable wall-clock timers driven by the host loop.

Nothing here sleeps: the host advances the clock by the clamped frame delta
and every due callback runs synchronously inside ``advance``.
"""

from __future__ import annotations

import logging
from itertools import count
from typing import Callable

logger = logging.getLogger(__name__)

TimerCallback = Callable[[], None]


class TimerHandle:
    """One armed timer. ``interval_ms`` is None for one-shot timers."""

    __slots__ = (
        "name",
        "due_ms",
        "interval_ms",
        "callback",
        "cancelled",
        "fire_count",
        "_seq",
        "_scheduler",
    )

    def __init__(
        self,
        scheduler: "TimerScheduler",
        name: str,
        due_ms: int,
        callback: TimerCallback,
        *,
        interval_ms: int | None,
        seq: int,
    ) -> None:
        self._scheduler = scheduler
        self.name = name
        self.due_ms = due_ms
        self.interval_ms = interval_ms
        self.callback = callback
        self.cancelled = False
        self.fire_count = 0
        self._seq = seq

    @property
    def active(self) -> bool:
        return not self.cancelled and self._scheduler.get(self.name) is self

    def cancel(self) -> None:
        """Stop this timer. Safe to call any number of times."""
        if self.cancelled:
            return
        self.cancelled = True
        self._scheduler._forget(self)

    def __repr__(self) -> str:
        kind = "interval" if self.interval_ms is not None else "once"
        return (
            f"TimerHandle({self.name!r}, {kind}, due={self.due_ms}, "
            f"cancelled={self.cancelled})"
        )


class TimerScheduler:
    """Registry of named timers; arming a name replaces its previous timer."""

    def __init__(self, now_ms: int = 0) -> None:
        self.now_ms = now_ms
        self._timers: dict[str, TimerHandle] = {}
        self._seq = count()

    def __len__(self) -> int:
        return len(self._timers)

    def __contains__(self, name: str) -> bool:
        return name in self._timers

    def get(self, name: str) -> TimerHandle | None:
        return self._timers.get(name)

    def pending_names(self) -> list[str]:
        return sorted(self._timers)

    def schedule_once(
        self, name: str, delay_ms: int, callback: TimerCallback
    ) -> TimerHandle:
        if delay_ms < 0:
            raise ValueError(f"Timer delay must be >= 0 (got {delay_ms})")
        return self._arm(name, self.now_ms + delay_ms, callback, interval_ms=None)

    def schedule_interval(
        self,
        name: str,
        interval_ms: int,
        callback: TimerCallback,
        *,
        first_delay_ms: int | None = None,
    ) -> TimerHandle:
        if interval_ms <= 0:
            raise ValueError(f"Timer interval must be > 0 (got {interval_ms})")
        first = interval_ms if first_delay_ms is None else first_delay_ms
        if first < 0:
            raise ValueError(f"Timer delay must be >= 0 (got {first})")
        return self._arm(name, self.now_ms + first, callback, interval_ms=interval_ms)

    def cancel(self, name: str) -> bool:
        handle = self._timers.get(name)
        if handle is None:
            return False
        handle.cancel()
        return True

    def cancel_all(self) -> int:
        handles = list(self._timers.values())
        for handle in handles:
            handle.cancel()
        if handles:
            logger.debug("Cancelled %d timer(s): %s", len(handles), [h.name for h in handles])
        return len(handles)

    def advance(self, dt_ms: int) -> int:
        """Move the clock forward, firing due timers in due order.

        Returns the number of callbacks that ran.
        """
        if dt_ms < 0:
            raise ValueError(f"Cannot advance clock backwards ({dt_ms} ms)")
        target = self.now_ms + dt_ms
        fired = 0
        while True:
            handle = self._next_due(target)
            if handle is None:
                break
            self.now_ms = max(self.now_ms, handle.due_ms)
            if handle.interval_ms is None:
                self._forget(handle)
            else:
                handle.due_ms += handle.interval_ms
            handle.fire_count += 1
            fired += 1
            handle.callback()
        self.now_ms = target
        return fired

    def _next_due(self, target: int) -> TimerHandle | None:
        due = [h for h in self._timers.values() if h.due_ms <= target]
        if not due:
            return None
        return min(due, key=lambda h: (h.due_ms, h._seq))

    def _arm(
        self,
        name: str,
        due_ms: int,
        callback: TimerCallback,
        *,
        interval_ms: int | None,
    ) -> TimerHandle:
        previous = self._timers.get(name)
        if previous is not None:
            previous.cancel()
        handle = TimerHandle(
            self,
            name,
            due_ms,
            callback,
            interval_ms=interval_ms,
            seq=next(self._seq),
        )
        self._timers[name] = handle
        logger.debug("Armed %r", handle)
        return handle

    def _forget(self, handle: TimerHandle) -> None:
        if self._timers.get(handle.name) is handle:
            del self._timers[handle.name]


__all__ = ["TimerCallback", "TimerHandle", "TimerScheduler"]
