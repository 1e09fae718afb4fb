"""Tests for StageTracker."""
import math

import pytest

from tick_stages import (
    STAGE_CANCEL,
    STAGE_CHANGE,
    STAGE_COMPLETE,
    STAGE_REFRESH,
    Stage,
    StageConfig,
    StageStatus,
    StageTracker,
)
from tick_timer import TimerClock


def _three(first="completed", second="active", third="pending"):
    return [
        {"id": "analyze", "label": "Analyzing", "status": first},
        {"id": "process", "label": "Processing", "status": second},
        {"id": "generate", "label": "Generating", "status": third},
    ]


def _record(tracker, *names):
    received = []
    for name in names:
        tracker.signals.subscribe(name, lambda n, d: received.append((n, d)))
    return received


class TestStageTrackerProgress:
    def test_empty_tracker(self):
        tracker = StageTracker(TimerClock())
        assert tracker.completion_ratio == 0
        assert tracker.percentage == 0
        assert not tracker.is_complete
        assert tracker.outcome == "running"
        assert tracker.current_stage is None
        assert tracker.display_message == "Processing..."

    def test_one_of_three_completed(self):
        tracker = StageTracker(TimerClock(), _three(), current_index=1)
        assert tracker.completion_ratio == pytest.approx(1 / 3)
        assert tracker.percentage == 33
        assert tracker.current_stage.label == "Processing"
        assert tracker.outcome == "running"

    def test_error_flips_outcome_without_changing_ratio(self):
        tracker = StageTracker(TimerClock(), _three(), current_index=1)
        before = tracker.completion_ratio

        tracker.mark("generate", "error")

        assert tracker.completion_ratio == before
        assert tracker.has_error
        assert tracker.outcome == "error"

    def test_all_completed_is_success(self):
        tracker = StageTracker(TimerClock(), _three("completed", "completed", "completed"))
        assert tracker.is_complete
        assert tracker.outcome == "success"

    def test_error_wins_over_success(self):
        stages = [Stage("a", "A", StageStatus.COMPLETED), Stage("a2", "B", StageStatus.ERROR)]
        tracker = StageTracker(TimerClock(), stages)
        assert tracker.outcome == "error"

    def test_eta_text(self):
        stages = [
            Stage("a", "A", StageStatus.COMPLETED, 10),
            Stage("b", "B", StageStatus.ACTIVE, 20),
            Stage("c", "C", StageStatus.PENDING, 25),
        ]
        tracker = StageTracker(TimerClock(), stages)
        assert tracker.eta_text == "~45s remaining"

    def test_eta_uses_config_default(self):
        tracker = StageTracker(
            TimerClock(),
            _three(),
            config=StageConfig(default_duration_seconds=60),
        )
        # Two remaining stages at 60s each.
        assert tracker.remaining_seconds == 120
        assert tracker.eta_text == "~2m remaining"

    def test_eta_recomputed_on_read(self):
        tracker = StageTracker(TimerClock(), _three())
        assert tracker.eta_text == "~1m remaining"
        tracker.mark("process", "completed")
        assert tracker.eta_text == "~30s remaining"


class TestStageTrackerVisibility:
    def test_eta_visible_only_while_running(self):
        tracker = StageTracker(TimerClock(), _three(), show_eta=True)
        assert tracker.eta_visible

        tracker.mark("generate", "error")
        assert not tracker.eta_visible

    def test_eta_hidden_when_disabled(self):
        tracker = StageTracker(TimerClock(), _three())
        assert not tracker.eta_visible

    def test_cancel_available_gating(self):
        tracker = StageTracker(TimerClock(), _three(), cancellable=True)
        assert tracker.cancel_available
        tracker.set_stages(_three("completed", "completed", "completed"))
        assert not tracker.cancel_available

    def test_display_message_precedence(self):
        tracker = StageTracker(TimerClock(), _three(), current_index=2)
        assert tracker.display_message == "Generating"
        tracker.status_message = "Almost there"
        assert tracker.display_message == "Almost there"

    def test_out_of_range_index(self):
        tracker = StageTracker(TimerClock(), _three(), current_index=7)
        assert tracker.current_stage is None
        assert tracker.display_message == "Processing..."

    def test_negative_index_clamped(self):
        tracker = StageTracker(TimerClock(), _three(), current_index=-3)
        assert tracker.current_index == 0

    @pytest.mark.parametrize("bad_index", [float("inf"), float("-inf"), float("nan"), "two"])
    def test_non_integral_index_falls_back_to_zero(self, bad_index):
        tracker = StageTracker(TimerClock(), _three(), current_index=bad_index)
        assert tracker.current_index == 0

        tracker.set_current_index(2)
        tracker.set_current_index(bad_index)
        assert tracker.current_index == 0


class TestStageTrackerViews:
    def test_markers_and_connectors(self):
        tracker = StageTracker(TimerClock(), [
            {"id": "1", "label": "A", "status": "completed"},
            {"id": "2", "label": "B", "status": "active"},
            {"id": "3", "label": "C", "status": "error"},
            {"id": "4", "label": "D", "status": "pending"},
        ])
        views = tracker.stage_views()
        assert [v.marker for v in views] == ["check", "spinner", "cross", "4"]
        assert [v.connector for v in views] == ["completed", "active", None, None]

    def test_last_stage_has_no_connector(self):
        tracker = StageTracker(TimerClock(), _three("completed", "completed", "completed"))
        assert tracker.stage_views()[-1].connector is None

    @pytest.mark.parametrize("size, diameter, stroke", [
        ("small", 64, 4),
        ("medium", 96, 6),
        ("large", 128, 8),
    ])
    def test_circular_geometry(self, size, diameter, stroke):
        tracker = StageTracker(TimerClock(), _three("completed", "pending", "pending"), size=size)
        geo = tracker.circular_geometry()
        radius = (diameter - stroke) / 2
        circumference = radius * 2 * math.pi
        assert geo.diameter == diameter
        assert geo.stroke_width == stroke
        assert geo.radius == radius
        assert geo.circumference == pytest.approx(circumference)
        assert geo.dash_offset == pytest.approx(circumference * (1 - 0.33))

    def test_invalid_variant_and_size_fall_back(self):
        tracker = StageTracker(TimerClock(), variant="spiral", size="huge")
        assert tracker.variant == "steps"
        assert tracker.size == "medium"

    def test_variant_from_config(self):
        tracker = StageTracker(TimerClock(), config=StageConfig(variant="circular"))
        assert tracker.variant == "circular"


class TestStageTrackerInputs:
    def test_malformed_entries_ignored(self):
        tracker = StageTracker(TimerClock(), [
            {"id": "a", "label": "A", "status": "completed"},
            "not a stage",
            42,
            {"id": "b", "label": "B", "status": "bogus"},
        ])
        assert [s.id for s in tracker.stages] == ["a", "b"]
        assert tracker.stages[1].status is StageStatus.PENDING

    def test_duplicate_ids_keep_first(self):
        tracker = StageTracker(TimerClock(), [
            Stage("a", "first"),
            Stage("a", "second"),
        ])
        assert len(tracker.stages) == 1
        assert tracker.stages[0].label == "first"

    def test_string_status_on_stage_is_coerced(self):
        tracker = StageTracker(TimerClock(), [Stage("a", "A", status="completed")])
        assert tracker.stages[0].status is StageStatus.COMPLETED
        assert tracker.is_complete

    @pytest.mark.parametrize("bad", [float("nan"), float("inf"), -50, "1e400", "inf"])
    def test_bad_estimate_on_stage_uses_default(self, bad):
        tracker = StageTracker(TimerClock(), [
            Stage("a", "A", StageStatus.COMPLETED, bad),
            Stage("b", "B", StageStatus.ACTIVE, bad),
        ])
        assert tracker.stages[1].estimated_duration_seconds is None
        assert tracker.remaining_seconds == 30
        assert tracker.eta_text == "~30s remaining"

    @pytest.mark.parametrize("bad", ["inf", "1e400", "nan", -5])
    def test_bad_estimate_in_mapping_uses_default(self, bad):
        tracker = StageTracker(TimerClock(), [{"id": "a", "estimated_duration_seconds": bad}])
        assert tracker.eta_text == "~30s remaining"

    def test_mark_unknown_id_ignored(self):
        tracker = StageTracker(TimerClock(), _three())
        before = tracker.stages
        assert tracker.mark("nope", "completed") is False
        assert tracker.stages == before

    def test_multiple_active_stages_are_trusted(self):
        tracker = StageTracker(TimerClock(), _three("active", "active", "active"))
        assert tracker.completion_ratio == 0
        assert [v.marker for v in tracker.stage_views()] == ["spinner"] * 3


class TestStageTrackerSignals:
    def test_cancel_emits_without_mutating(self):
        tracker = StageTracker(TimerClock(), _three(), cancellable=True)
        received = _record(tracker, STAGE_CANCEL)
        before = tracker.stages

        tracker.cancel()

        assert received == [(STAGE_CANCEL, {})]
        assert tracker.stages == before

    def test_stage_change_on_index_change(self):
        tracker = StageTracker(TimerClock(), _three(), current_index=0)
        received = _record(tracker, STAGE_CHANGE)

        tracker.set_current_index(1)
        tracker.set_current_index(1)

        assert received == [(STAGE_CHANGE, {"index": 1, "previous": 0})]

    def test_stage_complete_emitted_once(self):
        tracker = StageTracker(TimerClock(), _three())
        received = _record(tracker, STAGE_COMPLETE)

        tracker.mark("process", "completed")
        assert received == []
        tracker.mark("generate", "completed")
        assert received == [(STAGE_COMPLETE, {})]

        tracker.set_stages(tracker.stages)
        assert len(received) == 1

    def test_stage_complete_rearms_after_regression(self):
        tracker = StageTracker(TimerClock(), _three("completed", "completed", "completed"))
        received = _record(tracker, STAGE_COMPLETE)

        tracker.mark("generate", "active")
        tracker.mark("generate", "completed")
        assert received == [(STAGE_COMPLETE, {})]

    def test_refresh_signal_while_attached(self):
        clock = TimerClock()
        tracker = StageTracker(clock, _three(), config=StageConfig(refresh_ms=1000))
        received = _record(tracker, STAGE_REFRESH)

        tracker.attach()
        assert tracker.attached
        clock.advance(3000)

        assert len(received) == 3
        assert received[0] == (STAGE_REFRESH, {"eta": "~1m remaining", "percentage": 33})

    def test_cancel_stops_refresh_timer(self):
        clock = TimerClock()
        tracker = StageTracker(clock, _three())
        received = _record(tracker, STAGE_REFRESH)
        tracker.attach()
        clock.advance(1000)

        tracker.cancel()
        clock.advance(5000)

        assert len(received) == 1
        assert clock.pending() == 0

    def test_dispose_leaves_no_timer(self):
        clock = TimerClock()
        tracker = StageTracker(clock, _three())
        tracker.attach()
        tracker.dispose()
        assert not tracker.attached
        assert clock.pending() == 0
