"""StageTracker - progress, time remaining and cancel signal for a StageSet."""
from __future__ import annotations

import logging
import math
from typing import Any, Iterable, Mapping

from tick_signal import SignalBus
from tick_timer import RevocableTimer, TimerClock

from tick_stages import eta
from tick_stages.config import SIZES, VARIANTS, StageConfig
from tick_stages.types import CircularGeometry, Stage, StageStatus, StageView

logger = logging.getLogger(__name__)

STAGE_CANCEL = "stage-cancel"
STAGE_CHANGE = "stage-change"
STAGE_COMPLETE = "stage-complete"
STAGE_REFRESH = "stage-refresh"

# diameter, stroke width
_CIRCLE_SIZES = {"small": (64, 4), "medium": (96, 6), "large": (128, 8)}


class StageTracker:
    """Owns an ordered StageSet and derives everything a progress display reads.

    Stage statuses are trusted caller data: the tracker never moves a stage
    between statuses on its own, and ``cancel()`` only notifies the owner.
    All derived values are recomputed on every read.
    """

    def __init__(
        self,
        clock: TimerClock,
        stages: Iterable[Stage | Mapping[str, Any]] = (),
        current_index: int = 0,
        *,
        status_message: str = "",
        show_eta: bool | None = None,
        cancellable: bool | None = None,
        variant: str | None = None,
        size: str | None = None,
        config: StageConfig | None = None,
        signals: SignalBus | None = None,
    ) -> None:
        self.config: StageConfig = config if config is not None else StageConfig()
        self.signals: SignalBus = signals if signals is not None else SignalBus()
        self.status_message = status_message
        self.show_eta = show_eta if show_eta is not None else self.config.show_eta
        self.cancellable = cancellable if cancellable is not None else self.config.cancellable
        self.variant = _pick(variant, VARIANTS, self.config.variant, "steps")
        self.size = _pick(size, SIZES, self.config.size, "medium")
        self._refresh = RevocableTimer(clock, name="stage-refresh")
        self._stages: tuple[Stage, ...] = _normalize(stages)
        self._current_index = _coerce_index(current_index)
        self._complete_announced = self.outcome == "success"

    # --- StageSet ---

    @property
    def stages(self) -> tuple[Stage, ...]:
        return self._stages

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def current_stage(self) -> Stage | None:
        if 0 <= self._current_index < len(self._stages):
            return self._stages[self._current_index]
        return None

    def set_stages(self, stages: Iterable[Stage | Mapping[str, Any]]) -> None:
        self._stages = _normalize(stages)
        self._after_stages_changed()

    def set_current_index(self, index: int) -> None:
        index = _coerce_index(index)
        previous = self._current_index
        if index == previous:
            return
        self._current_index = index
        self.signals.emit(STAGE_CHANGE, index=index, previous=previous)

    def mark(self, stage_id: str, status: StageStatus | str) -> bool:
        """Replace one stage's status. Unknown ids are ignored (returns False)."""
        for i, stage in enumerate(self._stages):
            if stage.id == stage_id:
                updated = stage.with_status(status)
                if updated == stage:
                    return True
                self._stages = self._stages[:i] + (updated,) + self._stages[i + 1 :]
                self._after_stages_changed()
                return True
        logger.debug("mark ignored unknown stage id %r", stage_id)
        return False

    # --- Derived progress ---

    @property
    def completed_count(self) -> int:
        return eta.completed_count(self._stages)

    @property
    def completion_ratio(self) -> float:
        return eta.completion_ratio(self._stages)

    @property
    def percentage(self) -> int:
        return eta.percentage(self._stages)

    @property
    def remaining_seconds(self) -> float:
        return eta.remaining_seconds(self._stages, self.config.default_duration_seconds)

    @property
    def eta_text(self) -> str:
        return eta.format_eta(self.remaining_seconds)

    @property
    def has_error(self) -> bool:
        return any(s.status is StageStatus.ERROR for s in self._stages)

    @property
    def is_complete(self) -> bool:
        return bool(self._stages) and self.completed_count == len(self._stages)

    @property
    def outcome(self) -> str:
        """Severity branch: error wins over success, otherwise running."""
        if self.has_error:
            return "error"
        if self.is_complete:
            return "success"
        return "running"

    @property
    def eta_visible(self) -> bool:
        return self.show_eta and self.outcome == "running"

    @property
    def cancel_available(self) -> bool:
        return self.cancellable and self.outcome == "running"

    @property
    def display_message(self) -> str:
        if self.status_message:
            return self.status_message
        stage = self.current_stage
        if stage is not None and stage.label:
            return stage.label
        return "Processing..."

    def stage_views(self) -> list[StageView]:
        views = []
        last = len(self._stages) - 1
        for index, stage in enumerate(self._stages):
            connector = None
            if index < last:
                if stage.status is StageStatus.COMPLETED:
                    connector = "completed"
                elif stage.status is StageStatus.ACTIVE:
                    connector = "active"
            views.append(StageView(
                index=index,
                stage=stage,
                marker=_marker(stage, index),
                connector=connector,
            ))
        return views

    def circular_geometry(self) -> CircularGeometry:
        diameter, stroke = _CIRCLE_SIZES[self.size]
        radius = (diameter - stroke) / 2
        circumference = radius * 2 * math.pi
        offset = circumference - (self.percentage / 100) * circumference
        return CircularGeometry(
            diameter=diameter,
            stroke_width=stroke,
            radius=radius,
            circumference=circumference,
            dash_offset=offset,
        )

    # --- Timing ---

    @property
    def attached(self) -> bool:
        return self._refresh.active

    def attach(self) -> None:
        """Start the periodic refresh signal."""
        self._refresh.start_repeating(max(self.config.refresh_ms, 1), self._on_refresh)

    def cancel(self) -> None:
        """Notify the owner that the user asked to cancel. Stage data is untouched."""
        self._refresh.cancel()
        logger.debug("stage tracker cancel requested at %d%%", self.percentage)
        self.signals.emit(STAGE_CANCEL)

    def dispose(self) -> None:
        self._refresh.cancel()

    # --- Internal ---

    def _on_refresh(self) -> None:
        self.signals.emit(STAGE_REFRESH, eta=self.eta_text, percentage=self.percentage)

    def _after_stages_changed(self) -> None:
        if self.outcome != "success":
            self._complete_announced = False
            return
        if not self._complete_announced:
            self._complete_announced = True
            logger.debug("all %d stages completed", len(self._stages))
            self.signals.emit(STAGE_COMPLETE)


def _normalize(stages: Iterable[Stage | Mapping[str, Any]]) -> tuple[Stage, ...]:
    out: list[Stage] = []
    seen: set[str] = set()
    for index, item in enumerate(stages or ()):
        if isinstance(item, Stage):
            stage = item.normalized()
        elif isinstance(item, Mapping):
            stage = Stage.from_mapping(item, index)
        else:
            logger.debug("ignoring malformed stage entry %r", item)
            continue
        if stage.id in seen:
            logger.debug("ignoring duplicate stage id %r", stage.id)
            continue
        seen.add(stage.id)
        out.append(stage)
    return tuple(out)


def _coerce_index(index: int) -> int:
    try:
        return max(0, int(index))
    except (TypeError, ValueError, OverflowError):
        return 0


def _pick(value: str | None, allowed: tuple[str, ...], configured: str, fallback: str) -> str:
    if value in allowed:
        return value
    if configured in allowed:
        return configured
    return fallback


def _marker(stage: Stage, index: int) -> str:
    if stage.status is StageStatus.COMPLETED:
        return "check"
    if stage.status is StageStatus.ERROR:
        return "cross"
    if stage.status is StageStatus.ACTIVE:
        return "spinner"
    return str(index + 1)
