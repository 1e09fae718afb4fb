"""tick-timer - Virtual clock, revocable timer slots and a real-time driver."""
from __future__ import annotations

from tick_timer.clock import TimerClock
from tick_timer.loop import TimerLoop
from tick_timer.timer import RevocableTimer
from tick_timer.types import ScheduledCall, TimerCallback, TimerId

__all__ = [
    "TimerClock",
    "TimerLoop",
    "RevocableTimer",
    "ScheduledCall",
    "TimerCallback",
    "TimerId",
]
