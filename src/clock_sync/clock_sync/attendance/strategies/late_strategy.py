from __future__ import annotations

from datetime import datetime

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Late clock-in."""

    def __init__(self, scheduled_start_minutes: int):
        self._start = scheduled_start_minutes

    def decide_clock_in(self, *, now: datetime) -> StatusDecision:
        late_by = now.hour * 60 + now.minute - self._start
        return StatusDecision(status=AttendanceStatus.LATE, note=f"Late by {late_by} min")
