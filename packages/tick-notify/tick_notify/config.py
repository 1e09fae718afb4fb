"""Notification configuration dataclass."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class NotificationConfig:
    """Immutable defaults for a NotificationLifecycle.

    Attributes:
        duration_ms: Auto-dismiss countdown. 0 disables auto-dismiss.
        exit_grace_ms: Delay between the dismiss decision and removal.
        dismissible: Whether escape/close requests from the user are honored.
    """

    duration_ms: float = 5000
    exit_grace_ms: float = 200
    dismissible: bool = True
