"""tick-reveal - Character-by-character text reveal for simulated streaming."""
from __future__ import annotations

from tick_reveal.config import RevealConfig
from tick_reveal.scheduler import REVEAL_COMPLETE, RevealScheduler

__all__ = ["RevealConfig", "RevealScheduler", "REVEAL_COMPLETE"]
