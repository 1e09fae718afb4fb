"""RevealScheduler - grows a prefix of a fixed text one character per tick."""
from __future__ import annotations

import logging
import math
from typing import Callable

from tick_signal import Handler, SignalBus
from tick_timer import RevocableTimer, TimerClock

from tick_reveal.config import RevealConfig

logger = logging.getLogger(__name__)

REVEAL_COMPLETE = "reveal-complete"


class RevealScheduler:
    """Simulates incremental generation of ``full_text``.

    Inputs change only through explicit calls (``set_text``,
    ``set_streaming``, ``set_ms_per_character`` or ``update``). Each call
    compares the requested state to the current one and drives a single
    transition. ``reveal-complete`` is emitted once per run, and only when
    the run reaches the end on its own; an external stop snaps to the full
    text silently.
    """

    def __init__(
        self,
        clock: TimerClock,
        text: str = "",
        *,
        streaming: bool = False,
        ms_per_character: float | None = None,
        show_cursor: bool | None = None,
        config: RevealConfig | None = None,
        signals: SignalBus | None = None,
    ) -> None:
        self.config: RevealConfig = config if config is not None else RevealConfig()
        self.signals: SignalBus = signals if signals is not None else SignalBus()
        self.show_cursor: bool = (
            show_cursor if show_cursor is not None else self.config.show_cursor
        )
        self._timer = RevocableTimer(clock, name="reveal")
        self._ms_per_character = self._clamp_rate(
            ms_per_character if ms_per_character is not None else self.config.ms_per_character
        )
        self._full_text = text
        self._revealed_count = len(text)
        self._streaming = False
        self._runs = 0
        if streaming:
            self.set_streaming(True)

    # --- State ---

    @property
    def full_text(self) -> str:
        return self._full_text

    @property
    def revealed_count(self) -> int:
        return self._revealed_count

    @property
    def revealed_text(self) -> str:
        return self._full_text[: self._revealed_count]

    @property
    def streaming(self) -> bool:
        return self._streaming

    @property
    def ms_per_character(self) -> float:
        return self._ms_per_character

    @property
    def runs(self) -> int:
        """Number of reveal runs started so far."""
        return self._runs

    @property
    def display_text(self) -> str | None:
        """Revealed prefix, or None when nothing is showing yet (fallback content)."""
        return self.revealed_text or None

    @property
    def cursor_visible(self) -> bool:
        return self._streaming and self.show_cursor

    @property
    def live_politeness(self) -> str:
        return "polite" if self._streaming else "off"

    @property
    def timer_active(self) -> bool:
        return self._timer.active

    # --- Transitions ---

    def update(
        self,
        text: str | None = None,
        streaming: bool | None = None,
        ms_per_character: float | None = None,
    ) -> None:
        """Apply any subset of the inputs at once; None leaves an input unchanged.

        The rate is applied first so a restart triggered by the same call
        already runs at the new cadence.
        """
        if ms_per_character is not None:
            self.set_ms_per_character(ms_per_character)

        new_text = self._full_text if text is None else str(text)
        new_streaming = self._streaming if streaming is None else bool(streaming)
        text_changed = new_text != self._full_text
        self._full_text = new_text

        if new_streaming and (text_changed or not self._streaming):
            self._begin_run()
        elif not new_streaming:
            if self._streaming:
                self._stop_early()
            else:
                self._revealed_count = len(new_text)

    def set_text(self, text: str) -> None:
        self.update(text=text)

    def set_streaming(self, streaming: bool) -> None:
        self.update(streaming=streaming)

    def start(self, text: str | None = None) -> None:
        """Begin streaming, optionally with a new text."""
        if text is None:
            self.update(streaming=True)
        else:
            self.update(text=text, streaming=True)

    def stop(self) -> None:
        self.update(streaming=False)

    def set_ms_per_character(self, ms_per_character: float) -> None:
        rate = self._clamp_rate(ms_per_character)
        if rate == self._ms_per_character:
            return
        self._ms_per_character = rate
        if self._streaming and self._timer.active:
            # Re-arm at the new cadence; progress is kept.
            self._timer.start_repeating(rate, self._tick)

    def dispose(self) -> None:
        """Cancel the outstanding tick without emitting anything."""
        if self._timer.cancel():
            logger.debug("reveal disposed mid-run at %d/%d", self._revealed_count, len(self._full_text))
        self._streaming = False

    def on_complete(self, handler: Handler) -> Callable[[], None]:
        return self.signals.subscribe(REVEAL_COMPLETE, handler)

    # --- Internal ---

    def _clamp_rate(self, value: float) -> float:
        floor = max(self.config.min_ms_per_character, 1e-3)
        try:
            rate = float(value)
        except (TypeError, ValueError):
            return max(float(self.config.ms_per_character), floor)
        if not math.isfinite(rate):
            return max(float(self.config.ms_per_character), floor)
        if rate < floor:
            return floor
        return rate

    def _begin_run(self) -> None:
        self._timer.cancel()
        self._runs += 1
        self._revealed_count = 0
        self._streaming = True
        logger.debug("reveal run %d: %d chars at %sms/char", self._runs, len(self._full_text), self._ms_per_character)
        if not self._full_text:
            self._finish()
            return
        self._timer.start_repeating(self._ms_per_character, self._tick)

    def _tick(self) -> None:
        if self._revealed_count < len(self._full_text):
            self._revealed_count += 1
        if self._revealed_count >= len(self._full_text):
            self._finish()

    def _finish(self) -> None:
        self._timer.cancel()
        self._streaming = False
        logger.debug("reveal run %d complete", self._runs)
        self.signals.emit(REVEAL_COMPLETE, text=self._full_text)

    def _stop_early(self) -> None:
        self._timer.cancel()
        self._streaming = False
        logger.debug(
            "reveal run %d stopped at %d/%d", self._runs, self._revealed_count, len(self._full_text)
        )
        self._revealed_count = len(self._full_text)
