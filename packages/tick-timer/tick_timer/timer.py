"""RevocableTimer - a single owned timer slot on a TimerClock."""

from __future__ import annotations

import logging

from tick_timer.clock import TimerClock
from tick_timer.types import TimerCallback, TimerId

logger = logging.getLogger(__name__)


class RevocableTimer:
    """Holds at most one outstanding callback and guarantees it never fires
    after ``cancel()``.

    Starting a new phase cancels whatever the slot held before. The wrapped
    callback checks that the slot still owns the same timer id, so a stale
    firing (replaced or cancelled in the same clock advance) is dropped.
    """

    def __init__(self, clock: TimerClock, name: str = "") -> None:
        self._clock = clock
        self._name = name
        self._timer_id: TimerId | None = None
        self._cancelled = False

    @property
    def clock(self) -> TimerClock:
        return self._clock

    @property
    def name(self) -> str:
        return self._name

    @property
    def active(self) -> bool:
        """True while a callback is scheduled in this slot."""
        return self._timer_id is not None

    @property
    def cancelled(self) -> bool:
        """True if the most recent phase ended by cancellation."""
        return self._cancelled

    def start_once(self, delay_ms: float, callback: TimerCallback) -> None:
        self.cancel()
        self._cancelled = False
        timer_id = self._clock.call_later(delay_ms, lambda: self._fire_once(timer_id, callback))
        self._timer_id = timer_id

    def start_repeating(self, period_ms: float, callback: TimerCallback) -> None:
        self.cancel()
        self._cancelled = False
        timer_id = self._clock.call_every(period_ms, lambda: self._fire_repeating(timer_id, callback))
        self._timer_id = timer_id

    def cancel(self) -> bool:
        """Revoke the outstanding callback. Returns False if the slot was idle."""
        if self._timer_id is None:
            return False
        self._clock.cancel(self._timer_id)
        self._timer_id = None
        self._cancelled = True
        logger.debug("timer %r cancelled", self._name)
        return True

    def _fire_once(self, timer_id: TimerId, callback: TimerCallback) -> None:
        if self._cancelled or self._timer_id != timer_id:
            return
        # Cleared before the callback so it may start the next phase.
        self._timer_id = None
        callback()

    def _fire_repeating(self, timer_id: TimerId, callback: TimerCallback) -> None:
        if self._cancelled or self._timer_id != timer_id:
            return
        callback()

    def __repr__(self) -> str:
        state = "active" if self.active else ("cancelled" if self._cancelled else "idle")
        return f"RevocableTimer({self._name!r}, {state})"
