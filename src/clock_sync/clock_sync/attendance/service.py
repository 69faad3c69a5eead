from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..data.cache import AttendanceViewCache
from ..data.source import AttendanceDataSource
from .model import AttendanceRecord, Employee


class AttendanceService:
    def __init__(self, source: AttendanceDataSource, cache: AttendanceViewCache):
        self._source = source
        self._cache = cache

    def list_active_employees(self) -> Sequence[Employee]:
        return [e for e in self._source.fetch_employees() if e.active]

    def list_attendance(self, day: date, employee_id: Optional[str] = None) -> Sequence[AttendanceRecord]:
        return self._cache.get_or_load(
            day,
            employee_id,
            lambda: self._source.fetch_attendance(day, employee_id),
        )
