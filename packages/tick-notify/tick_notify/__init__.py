"""tick-notify - Lifecycle of transient notifications."""
from __future__ import annotations

from tick_notify.config import NotificationConfig
from tick_notify.lifecycle import DISMISSED, NOTIFICATION_ACTION, NotificationLifecycle
from tick_notify.types import NotificationKind

__all__ = [
    "NotificationConfig",
    "NotificationKind",
    "NotificationLifecycle",
    "DISMISSED",
    "NOTIFICATION_ACTION",
]
