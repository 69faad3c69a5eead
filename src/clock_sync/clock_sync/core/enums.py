from __future__ import annotations

from enum import Enum


class ClockAction(str, Enum):
    """Attendance transition requested by the user."""

    CLOCK_IN = "clockIn"
    CLOCK_OUT = "clockOut"

    @property
    def verb(self) -> str:
        return "in" if self is ClockAction.CLOCK_IN else "out"


class ClockState(str, Enum):
    """Per-action controller state; REJECTED marks a failed validation."""

    IDLE = "idle"
    CAPTURING = "capturing"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    QUEUED_OFFLINE = "queued_offline"
    REJECTED = "rejected"


class AttendanceStatus(str, Enum):
    """Status stored by the attendance service for a work day."""

    PRESENT = "present"
    LATE = "late"
    ABSENT = "absent"


class NoticeLevel(str, Enum):
    """User-visible message category (matches Flask flash categories)."""

    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    DANGER = "danger"
