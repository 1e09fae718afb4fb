"""Stage records and status enum."""
from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Mapping


class StageStatus(Enum):
    """Caller-supplied status of one stage."""

    PENDING = "pending"
    ACTIVE = "active"
    COMPLETED = "completed"
    ERROR = "error"

    @classmethod
    def coerce(cls, value: object) -> StageStatus:
        """Map a status or status string to a member; unknown values are PENDING."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.PENDING


@dataclass(frozen=True)
class Stage:
    """One named phase of a multi-step operation.

    ``estimated_duration_seconds`` is None when the caller gave no estimate;
    the tracker substitutes its configured default.
    """

    id: str
    label: str
    status: StageStatus = StageStatus.PENDING
    estimated_duration_seconds: float | None = None
    description: str = ""

    def with_status(self, status: StageStatus | str) -> Stage:
        return replace(self, status=StageStatus.coerce(status))

    def normalized(self) -> Stage:
        """Copy with a coerced status and a finite, non-negative estimate or None."""
        status = StageStatus.coerce(self.status)
        duration = _coerce_duration(self.estimated_duration_seconds)
        if status is self.status and duration == self.estimated_duration_seconds:
            return self
        return replace(self, status=status, estimated_duration_seconds=duration)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], index: int = 0) -> Stage:
        """Build a Stage from loosely-typed data.

        Accepts ``estimatedDuration`` as an alias of
        ``estimated_duration_seconds``. Missing ids fall back to the 1-based
        position and missing labels to the id.
        """
        stage_id = str(data.get("id") or index + 1)
        duration = data.get("estimated_duration_seconds", data.get("estimatedDuration"))
        return cls(
            id=stage_id,
            label=str(data.get("label") or stage_id),
            status=StageStatus.coerce(data.get("status", StageStatus.PENDING)),
            estimated_duration_seconds=_coerce_duration(duration),
            description=str(data.get("description") or ""),
        )


@dataclass(frozen=True, slots=True)
class StageView:
    """Per-stage state a presentation layer reads for the steps variant.

    ``marker`` is "check", "cross", "spinner" or the 1-based position as a
    string. ``connector`` describes the link to the next stage and is None
    for the last stage or a pending/error stage.
    """

    index: int
    stage: Stage
    marker: str
    connector: str | None


@dataclass(frozen=True, slots=True)
class CircularGeometry:
    diameter: int
    stroke_width: int
    radius: float
    circumference: float
    dash_offset: float


def _coerce_duration(value: object) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(seconds) or seconds < 0:
        return None
    return seconds
