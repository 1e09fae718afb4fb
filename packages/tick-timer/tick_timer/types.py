"""Shared type aliases and records for timer scheduling."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

TimerId = int
TimerCallback = Callable[[], None]


@dataclass(slots=True)
class ScheduledCall:
    """One live entry on a TimerClock.

    ``period_ms`` is None for one-shot calls. ``due_ms`` is rewritten each
    time a repeating call fires.
    """

    timer_id: TimerId
    due_ms: float
    callback: TimerCallback
    period_ms: float | None = None

    @property
    def repeating(self) -> bool:
        return self.period_ms is not None
