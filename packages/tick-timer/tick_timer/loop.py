"""TimerLoop - fixed-timestep driver that advances a TimerClock in real time."""

from __future__ import annotations

import logging
import time
from typing import Callable

from tick_timer.clock import TimerClock

logger = logging.getLogger(__name__)

Hook = Callable[[TimerClock], None]


class TimerLoop:
    def __init__(self, clock: TimerClock | None = None, fps: int = 60) -> None:
        if fps <= 0:
            raise ValueError("fps must be positive")
        self._clock = clock if clock is not None else TimerClock()
        self._fps = fps
        self._frame_ms = 1000.0 / fps
        self._frame_number = 0
        self._frame_hooks: list[Hook] = []
        self._start_hooks: list[Hook] = []
        self._stop_hooks: list[Hook] = []
        self._stop_requested: bool = False

    @property
    def clock(self) -> TimerClock:
        return self._clock

    @property
    def fps(self) -> int:
        return self._fps

    @property
    def frame_ms(self) -> float:
        return self._frame_ms

    @property
    def frame_number(self) -> int:
        return self._frame_number

    def add_frame_hook(self, hook: Hook) -> None:
        """Register a callback run after the clock advances on every frame."""
        self._frame_hooks.append(hook)

    def on_start(self, hook: Hook) -> None:
        self._start_hooks.append(hook)

    def on_stop(self, hook: Hook) -> None:
        self._stop_hooks.append(hook)

    def request_stop(self) -> None:
        self._stop_requested = True

    def _frame(self) -> None:
        self._frame_number += 1
        self._clock.advance(self._frame_ms)
        for hook in self._frame_hooks:
            hook(self._clock)
            if self._stop_requested:
                break

    def step(self) -> None:
        self._stop_requested = False
        self._frame()

    def run(self, n: int) -> None:
        self._stop_requested = False
        for hook in self._start_hooks:
            hook(self._clock)

        for _ in range(n):
            self._frame()
            if self._stop_requested:
                break

        for hook in self._stop_hooks:
            hook(self._clock)

    def run_forever(self, stop_when_idle: bool = False) -> None:
        """Pace frames against the wall clock until stopped.

        With ``stop_when_idle`` the loop also ends once the clock has no
        pending callbacks left.
        """
        self._stop_requested = False
        for hook in self._start_hooks:
            hook(self._clock)

        dt = self._frame_ms / 1000.0
        while not self._stop_requested:
            start = time.monotonic()
            self._frame()
            if self._stop_requested:
                break
            if stop_when_idle and self._clock.pending() == 0:
                logger.debug("timer loop idle after %d frames", self._frame_number)
                break
            elapsed = time.monotonic() - start
            sleep_time = dt - elapsed
            if sleep_time > 0:
                time.sleep(sleep_time)

        for hook in self._stop_hooks:
            hook(self._clock)
