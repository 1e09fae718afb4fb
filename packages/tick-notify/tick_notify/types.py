"""Notification kind enum."""
from __future__ import annotations

from enum import Enum


class NotificationKind(Enum):
    """Severity/variant of a transient notification."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
    AI = "ai"

    @classmethod
    def coerce(cls, value: object) -> NotificationKind:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.INFO
