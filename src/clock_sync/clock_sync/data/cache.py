from __future__ import annotations

import threading
from datetime import date
from typing import Callable, Optional, Sequence

from ..attendance.model import AttendanceRecord

CacheKey = tuple[date, Optional[str]]


class AttendanceViewCache:
    """Cached attendance listings keyed by (day, employee_id).

    ``employee_id=None`` is the whole-day listing.
    """

    def __init__(self):
        self._entries: dict[CacheKey, Sequence[AttendanceRecord]] = {}
        self._lock = threading.Lock()

    def get_or_load(
        self,
        day: date,
        employee_id: Optional[str],
        loader: Callable[[], Sequence[AttendanceRecord]],
    ) -> Sequence[AttendanceRecord]:
        key = (day, employee_id)
        with self._lock:
            if key in self._entries:
                return self._entries[key]
        records = list(loader())
        with self._lock:
            self._entries[key] = records
        return records

    def invalidate(self, employee_id: str, day: date) -> None:
        with self._lock:
            self._entries.pop((day, employee_id), None)
            self._entries.pop((day, None), None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: CacheKey) -> bool:
        return key in self._entries
