from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pytest


@dataclass
class RecordingNotifier:
    """Notifier that keeps every (key, params) pair it receives."""

    messages: list[tuple[str, dict[str, Any]]] = field(default_factory=list)

    def notify(self, key: str, **params: Any) -> None:
        self.messages.append((key, dict(params)))

    def keys(self) -> list[str]:
        return [key for key, _ in self.messages]


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()
