"""Stage tracker configuration dataclass."""
from __future__ import annotations

from dataclasses import dataclass

VARIANTS = ("linear", "circular", "steps")
SIZES = ("small", "medium", "large")


@dataclass(frozen=True)
class StageConfig:
    """Immutable defaults for a StageTracker.

    Attributes:
        default_duration_seconds: Estimate used for stages without one.
        refresh_ms: Period of the refresh signal while attached.
        show_eta: Whether the time-remaining text is meant to be shown.
        cancellable: Whether a cancel control is offered.
        variant: One of "linear", "circular", "steps".
        size: One of "small", "medium", "large".
    """

    default_duration_seconds: float = 30
    refresh_ms: float = 1000
    show_eta: bool = False
    cancellable: bool = False
    variant: str = "steps"
    size: str = "medium"
