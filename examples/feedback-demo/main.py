"""Feedback demo - streaming text, staged progress and a toast in the terminal.

All three schedulers share one TimerClock, driven in real time by a
TimerLoop. Each frame prints the state a presentation layer would read.

Run:
    python main.py --speed 30 --log-level DEBUG
"""
from __future__ import annotations

import argparse
import sys

from observability import configure_logging
from tick_notify import DISMISSED, NotificationLifecycle
from tick_reveal import REVEAL_COMPLETE, RevealScheduler
from tick_signal import SignalBus
from tick_stages import STAGE_CANCEL, STAGE_COMPLETE, STAGE_REFRESH, StageConfig, StageTracker
from tick_timer import TimerClock, TimerLoop

DEFAULT_TEXT = (
    "Found three optimization opportunities: cache the embeddings, "
    "batch the requests, and drop the unused index."
)

STAGES = [
    {"id": "analyze", "label": "Analyzing", "status": "active", "estimatedDuration": 2},
    {"id": "process", "label": "Processing", "status": "pending", "estimatedDuration": 3},
    {"id": "generate", "label": "Generating", "status": "pending", "estimatedDuration": 40},
]


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="tick-feedback terminal demo")
    p.add_argument("--text", default=DEFAULT_TEXT, help="Text to reveal")
    p.add_argument("--speed", type=float, default=25, help="Milliseconds per character (default: 25)")
    p.add_argument("--stage-ms", type=float, default=600, help="Milliseconds per stage (default: 600)")
    p.add_argument("--toast-ms", type=float, default=1500, help="Toast auto-dismiss in ms (default: 1500)")
    p.add_argument("--fps", type=int, default=30, help="Frames per second (default: 30)")
    p.add_argument("--log-level", default="WARNING", help="Logging level (e.g. DEBUG, INFO)")
    args = p.parse_args(argv)
    args.fps = max(1, min(240, args.fps))
    return args


def _bar(percent: int, width: int = 20) -> str:
    filled = round(width * percent / 100)
    return "[" + "#" * filled + "-" * (width - filled) + "]"


class Demo:
    """Wires the schedulers together: stages -> reveal -> toast."""

    def __init__(self, args: argparse.Namespace) -> None:
        self.clock = TimerClock()
        self.loop = TimerLoop(self.clock, fps=args.fps)
        self.bus = SignalBus()
        self.text = args.text
        self.toast_ms = args.toast_ms
        self.toast: NotificationLifecycle | None = None

        self.tracker = StageTracker(
            self.clock,
            STAGES,
            show_eta=True,
            cancellable=True,
            config=StageConfig(variant="linear"),
            signals=self.bus,
        )
        self.reveal = RevealScheduler(self.clock, ms_per_character=args.speed, signals=self.bus)

        self.bus.subscribe(STAGE_COMPLETE, self._on_stages_done)
        self.bus.subscribe(REVEAL_COMPLETE, self._on_reveal_done)
        self.bus.subscribe(DISMISSED, self._on_toast_gone)
        self.bus.subscribe(STAGE_REFRESH, self._on_refresh)
        self.bus.subscribe(STAGE_CANCEL, self._on_cancel)

        self._stage_step = 0
        self._stage_ms = args.stage_ms

    def _advance_stages(self) -> None:
        stages = self.tracker.stages
        if self._stage_step >= len(stages):
            return
        current = stages[self._stage_step]
        self.tracker.mark(current.id, "completed")
        self._stage_step += 1
        if self._stage_step < len(stages):
            self.tracker.mark(stages[self._stage_step].id, "active")
            self.tracker.set_current_index(self._stage_step)
            self.clock.call_later(self._stage_ms, self._advance_stages)

    def start(self) -> None:
        self.tracker.attach()
        self.clock.call_later(self._stage_ms, self._advance_stages)

    def request_cancel(self) -> None:
        """Ctrl+C while stages run asks the tracker to cancel."""
        if self.tracker.cancel_available:
            self.tracker.cancel()

    def _on_refresh(self, signal_name: str, data: dict) -> None:
        sys.stdout.write(f"        refresh: {data['percentage']}% {data['eta']}\n")

    def _on_cancel(self, signal_name: str, data: dict) -> None:
        sys.stdout.write(f"        cancelled at {self.tracker.percentage}%\n")
        self.loop.request_stop()

    def _on_stages_done(self, signal_name: str, data: dict) -> None:
        self.tracker.dispose()
        self.reveal.start(self.text)

    def _on_reveal_done(self, signal_name: str, data: dict) -> None:
        self.toast = NotificationLifecycle(
            self.clock,
            kind="ai",
            title="AI Analysis Complete",
            message=f"{len(data['text'])} characters generated",
            duration_ms=self.toast_ms,
            ai_generated=True,
            confidence=0.92,
            signals=self.bus,
        )

    def _on_toast_gone(self, signal_name: str, data: dict) -> None:
        self.loop.request_stop()

    def render(self, clock: TimerClock) -> None:
        t = self.tracker
        line = f"{clock.now_ms / 1000:6.2f}s {_bar(t.percentage)} {t.percentage:3d}% {t.display_message:<12}"
        if t.eta_visible:
            line += f" {t.eta_text}"
        if self.reveal.streaming or self.reveal.revealed_count:
            cursor = "|" if self.reveal.cursor_visible else ""
            line = f"{clock.now_ms / 1000:6.2f}s > {self.reveal.revealed_text}{cursor}"
        if self.toast is not None and self.toast.visible:
            state = "exiting" if self.toast.exiting else f"{self.toast.remaining_ms or 0:.0f}ms"
            line = f"{line}\n        [{self.toast.role}] {self.toast.title} ({self.toast.confidence_percent}%) {state}"
        sys.stdout.write("\x1b[2K\r" + line.replace("\n", "\n\x1b[2K") + "\n")
        sys.stdout.flush()

    def dispose(self) -> None:
        self.tracker.dispose()
        self.reveal.dispose()
        if self.toast is not None:
            self.toast.dispose()
        self.clock.clear()


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(level=args.log_level)

    demo = Demo(args)
    demo.loop.add_frame_hook(demo.render)
    demo.start()
    try:
        demo.loop.run_forever()
    except KeyboardInterrupt:
        demo.request_cancel()
        return 130
    finally:
        demo.dispose()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
