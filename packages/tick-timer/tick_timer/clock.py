"""TimerClock - virtual millisecond clock that owns every scheduled callback."""

from __future__ import annotations

import heapq
import itertools
import logging

from tick_timer.types import ScheduledCall, TimerCallback, TimerId

logger = logging.getLogger(__name__)

# Upper bound for run_until_idle so a repeating timer cannot spin forever.
_IDLE_HORIZON_MS = 60 * 60 * 1000.0


class TimerClock:
    """Keeps virtual time and fires callbacks when it is advanced past them.

    Entries are ordered by ``(due_ms, registration order)``. Cancelled entries
    are dropped from the live table immediately and skipped lazily when they
    surface on the heap.
    """

    def __init__(self, start_ms: float = 0.0) -> None:
        self._now_ms = float(start_ms)
        self._ids = itertools.count(1)
        self._seq = itertools.count()
        self._live: dict[TimerId, ScheduledCall] = {}
        self._heap: list[tuple[float, int, TimerId]] = []

    @property
    def now_ms(self) -> float:
        return self._now_ms

    def call_later(self, delay_ms: float, callback: TimerCallback) -> TimerId:
        """Schedule a one-shot callback. Negative delays fire at the current time."""
        delay_ms = max(0.0, float(delay_ms))
        return self._schedule(ScheduledCall(
            timer_id=next(self._ids),
            due_ms=self._now_ms + delay_ms,
            callback=callback,
        ))

    def call_every(self, period_ms: float, callback: TimerCallback) -> TimerId:
        """Schedule a repeating callback; the first call is one period from now."""
        if period_ms <= 0:
            raise ValueError("period_ms must be positive")
        period_ms = float(period_ms)
        return self._schedule(ScheduledCall(
            timer_id=next(self._ids),
            due_ms=self._now_ms + period_ms,
            callback=callback,
            period_ms=period_ms,
        ))

    def cancel(self, timer_id: TimerId) -> bool:
        """Drop a scheduled callback. Returns False if it was not pending."""
        return self._live.pop(timer_id, None) is not None

    def is_pending(self, timer_id: TimerId) -> bool:
        return timer_id in self._live

    def pending(self) -> int:
        """Number of live (not cancelled, not yet fired one-shot) callbacks."""
        return len(self._live)

    def next_due(self) -> float | None:
        """Due time of the earliest live callback, or None when idle."""
        self._discard_dead()
        if not self._heap:
            return None
        return self._heap[0][0]

    def advance(self, ms: float) -> int:
        """Move time forward by ``ms`` and fire everything that falls due."""
        if ms < 0:
            raise ValueError("cannot advance a clock backwards")
        return self.advance_to(self._now_ms + ms)

    def advance_to(self, when_ms: float) -> int:
        """Move time forward to ``when_ms``. Returns the number of callbacks fired."""
        if when_ms < self._now_ms:
            raise ValueError(
                f"cannot advance to {when_ms}, clock is already at {self._now_ms}"
            )
        fired = 0
        while True:
            self._discard_dead()
            if not self._heap or self._heap[0][0] > when_ms:
                break
            due_ms, _, timer_id = heapq.heappop(self._heap)
            entry = self._live[timer_id]
            self._now_ms = due_ms
            if entry.repeating:
                entry.due_ms = due_ms + entry.period_ms
                heapq.heappush(self._heap, (entry.due_ms, next(self._seq), timer_id))
            else:
                del self._live[timer_id]
            entry.callback()
            fired += 1
        self._now_ms = when_ms
        return fired

    def run_until_idle(self, limit_ms: float = _IDLE_HORIZON_MS) -> int:
        """Fire pending callbacks in order until none remain or ``limit_ms`` passes.

        Time stops at the last fired callback rather than at the horizon.
        """
        horizon = self._now_ms + limit_ms
        fired = 0
        while True:
            due = self.next_due()
            if due is None or due > horizon:
                break
            fired += self.advance_to(due)
        return fired

    def clear(self) -> None:
        """Cancel everything without firing."""
        if self._live:
            logger.debug("clearing %d pending timer(s)", len(self._live))
        self._live.clear()
        self._heap.clear()

    def _schedule(self, entry: ScheduledCall) -> TimerId:
        self._live[entry.timer_id] = entry
        heapq.heappush(self._heap, (entry.due_ms, next(self._seq), entry.timer_id))
        return entry.timer_id

    def _discard_dead(self) -> None:
        heap = self._heap
        while heap:
            due_ms, _, timer_id = heap[0]
            entry = self._live.get(timer_id)
            # Stale heap rows: cancelled, or superseded by a repeat reschedule.
            if entry is not None and entry.due_ms == due_ms:
                return
            heapq.heappop(heap)
