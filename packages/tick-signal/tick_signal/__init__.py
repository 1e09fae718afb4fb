"""tick-signal - Observer registration for feedback schedulers."""
from __future__ import annotations

from tick_signal.bus import Handler, SignalBus

__all__ = ["SignalBus", "Handler"]
