"""Reveal configuration dataclass."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RevealConfig:
    """Immutable defaults for a RevealScheduler.

    Attributes:
        ms_per_character: Delay between character ticks.
        min_ms_per_character: Floor applied to any requested rate.
        show_cursor: Whether a cursor is shown while streaming.
    """

    ms_per_character: float = 20
    min_ms_per_character: float = 1
    show_cursor: bool = True
