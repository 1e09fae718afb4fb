"""Completion ratio and time-remaining math over a stage sequence."""
from __future__ import annotations

import math
from typing import Sequence

from tick_stages.types import Stage, StageStatus

DEFAULT_STAGE_SECONDS = 30


def completed_count(stages: Sequence[Stage]) -> int:
    return sum(1 for s in stages if s.status is StageStatus.COMPLETED)


def completion_ratio(stages: Sequence[Stage]) -> float:
    """Fraction of stages completed; 0.0 for an empty sequence."""
    if not stages:
        return 0.0
    return completed_count(stages) / len(stages)


def percentage(stages: Sequence[Stage]) -> int:
    return _round_half_up(completion_ratio(stages) * 100)


def remaining_seconds(
    stages: Sequence[Stage], default_seconds: float = DEFAULT_STAGE_SECONDS
) -> float:
    """Sum of estimates from the first not-yet-counted stage to the end.

    The completed stages are assumed to lead the sequence: the sum starts at
    index ``completed_count``, not at the first non-completed stage.
    """
    start = completed_count(stages)
    total = 0.0
    for stage in stages[start:]:
        seconds = stage.estimated_duration_seconds
        # A zero estimate counts as absent.
        total += seconds if seconds else default_seconds
    return total


def format_eta(total_seconds: float) -> str:
    if total_seconds < 60:
        return f"~{_format_number(total_seconds)}s remaining"
    return f"~{math.ceil(total_seconds / 60)}m remaining"


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)
