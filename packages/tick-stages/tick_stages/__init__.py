"""tick-stages - Multi-stage progress tracking with time-remaining estimates."""
from __future__ import annotations

from tick_stages.config import StageConfig
from tick_stages.eta import completion_ratio, format_eta, percentage, remaining_seconds
from tick_stages.tracker import (
    STAGE_CANCEL,
    STAGE_CHANGE,
    STAGE_COMPLETE,
    STAGE_REFRESH,
    StageTracker,
)
from tick_stages.types import CircularGeometry, Stage, StageStatus, StageView

__all__ = [
    "Stage",
    "StageStatus",
    "StageView",
    "CircularGeometry",
    "StageConfig",
    "StageTracker",
    "completion_ratio",
    "percentage",
    "remaining_seconds",
    "format_eta",
    "STAGE_CANCEL",
    "STAGE_CHANGE",
    "STAGE_COMPLETE",
    "STAGE_REFRESH",
]
