"""NotificationLifecycle - visible, countdown, exiting, removed."""
from __future__ import annotations

import logging
import math

from tick_signal import SignalBus
from tick_timer import RevocableTimer, TimerClock

from tick_notify.config import NotificationConfig
from tick_notify.types import NotificationKind

logger = logging.getLogger(__name__)

DISMISSED = "dismissed"
NOTIFICATION_ACTION = "notification-action"

_DISMISS_KEYS = frozenset({"Escape", "Esc"})


class NotificationLifecycle:
    """Drives one transient message from display to removal.

    Two timer slots: the auto-dismiss countdown and the exit grace period.
    A dismiss request moves the notification into ``exiting``; the grace
    timer then hides it and emits ``dismissed`` exactly once. ``dispose()``
    revokes both timers and emits nothing.
    """

    def __init__(
        self,
        clock: TimerClock,
        *,
        kind: NotificationKind | str = NotificationKind.INFO,
        title: str = "",
        message: str = "",
        duration_ms: float | None = None,
        dismissible: bool | None = None,
        action_label: str = "",
        ai_generated: bool = False,
        confidence: float | None = None,
        streaming: bool = False,
        config: NotificationConfig | None = None,
        signals: SignalBus | None = None,
    ) -> None:
        self.config: NotificationConfig = config if config is not None else NotificationConfig()
        self.signals: SignalBus = signals if signals is not None else SignalBus()
        self.kind = NotificationKind.coerce(kind)
        self.title = title
        self.message = message
        self.action_label = action_label
        self.ai_generated = ai_generated
        self.confidence = _coerce_confidence(confidence)
        self.streaming = streaming
        self.dismissible = dismissible if dismissible is not None else self.config.dismissible
        self._clock = clock
        self._duration_ms = _non_negative(
            duration_ms if duration_ms is not None else self.config.duration_ms
        )
        self._auto = RevocableTimer(clock, name="notification-auto-dismiss")
        self._exit = RevocableTimer(clock, name="notification-exit")
        self._visible = True
        self._exiting = False
        self._disposed = False
        self._countdown_started_ms = clock.now_ms
        if self._duration_ms > 0:
            self._auto.start_once(self._duration_ms, self._on_auto_dismiss)

    # --- State ---

    @property
    def visible(self) -> bool:
        return self._visible

    @property
    def exiting(self) -> bool:
        return self._exiting

    @property
    def duration_ms(self) -> float:
        return self._duration_ms

    @property
    def removed(self) -> bool:
        return not self._visible

    @property
    def remaining_ms(self) -> float | None:
        """Time left on the auto-dismiss countdown; None when none is running."""
        if not self._auto.active:
            return None
        elapsed = self._clock.now_ms - self._countdown_started_ms
        return max(0.0, self._duration_ms - elapsed)

    @property
    def countdown_visible(self) -> bool:
        return self._duration_ms > 0 and not self.streaming

    @property
    def role(self) -> str:
        if self.kind in (NotificationKind.ERROR, NotificationKind.WARNING):
            return "alert"
        return "status"

    @property
    def live_politeness(self) -> str:
        return "assertive" if self.kind is NotificationKind.ERROR else "polite"

    @property
    def confidence_percent(self) -> int | None:
        if self.confidence is None:
            return None
        return math.floor(self.confidence * 100 + 0.5)

    # --- Requests ---

    def dismiss(self) -> bool:
        """Start the exit sequence. Returns False if already exiting or removed."""
        if self._disposed or self._exiting or not self._visible:
            return False
        self._auto.cancel()
        self._exiting = True
        logger.debug("notification %r exiting", self.title or self.kind.value)
        self._exit.start_once(_non_negative(self.config.exit_grace_ms), self._on_exit_done)
        return True

    def escape(self) -> bool:
        """User close request; honored only when dismissible."""
        if not self.dismissible:
            return False
        return self.dismiss()

    def handle_key(self, key: str) -> bool:
        if key in _DISMISS_KEYS:
            return self.escape()
        return False

    def trigger_action(self) -> bool:
        if self._disposed or not self._visible:
            return False
        self.signals.emit(
            NOTIFICATION_ACTION, kind=self.kind.value, ai_generated=self.ai_generated
        )
        return True

    def dispose(self) -> None:
        """Owner teardown: revoke every timer without emitting ``dismissed``."""
        self._auto.cancel()
        self._exit.cancel()
        if not self._disposed:
            logger.debug("notification %r disposed", self.title or self.kind.value)
        self._disposed = True

    # --- Internal ---

    def _on_auto_dismiss(self) -> None:
        self.dismiss()

    def _on_exit_done(self) -> None:
        self._visible = False
        self._exiting = False
        logger.debug("notification %r removed", self.title or self.kind.value)
        self.signals.emit(DISMISSED)


def _non_negative(value: float) -> float:
    try:
        value = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(value) or value < 0:
        return 0.0
    return value


def _coerce_confidence(value: float | None) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        value = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    return min(1.0, max(0.0, value))
