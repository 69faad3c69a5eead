from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..attendance.model import AttendanceRecord, Employee
from ..clock.model import ClockEvent
from ..core.enums import ClockAction


class AttendanceDataSource(Protocol):
    """Capabilities the service needs from the attendance backend.

    Implementations raise ``RemoteServiceError`` for every failed call.
    """

    def fetch_employees(self) -> Sequence[Employee]:
        raise NotImplementedError

    def fetch_attendance(self, day: date, employee_id: Optional[str] = None) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def submit_clock(self, event: ClockEvent) -> dict:
        raise NotImplementedError

    def request_otp(self, employee_id: str) -> str:
        raise NotImplementedError

    def verify_otp(self, code: str, action: ClockAction) -> dict:
        raise NotImplementedError


class CacheInvalidator(Protocol):
    def invalidate(self, employee_id: str, day: date) -> None:
        raise NotImplementedError
