from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.constants import LATE_WINDOW_MINUTES, SCHEDULED_START_MINUTES
from .strategies.base import AttendanceStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.present_strategy import PresentStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    scheduled_start_minutes: int = SCHEDULED_START_MINUTES
    late_window_minutes: int = LATE_WINDOW_MINUTES

    def for_clock_in(self, *, now: datetime) -> AttendanceStrategy:
        minutes = now.hour * 60 + now.minute
        if minutes <= self.scheduled_start_minutes + self.late_window_minutes:
            return PresentStrategy()
        return LateStrategy(self.scheduled_start_minutes)
