from __future__ import annotations

import logging
import secrets
import threading
from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta
from typing import Callable, Iterable, Optional, Sequence

from ..attendance.factory import AttendanceStrategyFactory
from ..attendance.model import AttendanceRecord, Employee
from ..clock.model import ClockEvent
from ..common.datetime_utils import now_utc, parse_iso_datetime
from ..core.constants import OTP_EXPIRY_MINUTES, OTP_LENGTH
from ..core.enums import ClockAction
from ..core.exceptions import RemoteServiceError

logger = logging.getLogger(__name__)

DEFAULT_EMPLOYEES = (
    Employee(employee_id="1", name="Jane Wanjiku", department="Finance"),
    Employee(employee_id="2", name="Brian Otieno", department="Operations"),
    Employee(employee_id="3", name="Grace Achieng", department="Operations"),
    Employee(employee_id="4", name="Peter Kamau", department="Sales"),
    Employee(employee_id="42", name="Amina Hassan", department="Engineering"),
)


@dataclass
class OtpCode:
    employee_id: str
    code: str
    expires_at: datetime
    used: bool = False


class MockAttendanceDataSource:
    """In-memory stand-in for the attendance service.

    Applies the same clock rules as the real service, deduplicates clock
    submissions by idempotency key and can be switched offline to simulate
    outages.
    """

    def __init__(
        self,
        employees: Iterable[Employee] = DEFAULT_EMPLOYEES,
        *,
        strategy_factory: Optional[AttendanceStrategyFactory] = None,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._employees = {e.employee_id: e for e in employees}
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._clock = clock
        self._records: dict[tuple[str, date], AttendanceRecord] = {}
        self._responses: dict[str, dict] = {}
        self._otps: dict[str, OtpCode] = {}
        self._next_id = 1
        self._lock = threading.Lock()
        self.online = True
        self.calls: list[ClockEvent] = []

    def fetch_employees(self) -> Sequence[Employee]:
        self._ensure_online()
        return list(self._employees.values())

    def fetch_attendance(self, day: date, employee_id: Optional[str] = None) -> Sequence[AttendanceRecord]:
        self._ensure_online()
        with self._lock:
            return [
                r
                for (emp_id, work_date), r in sorted(self._records.items())
                if work_date == day and (employee_id is None or emp_id == employee_id)
            ]

    def submit_clock(self, event: ClockEvent) -> dict:
        self.calls.append(event)
        self._ensure_online()
        with self._lock:
            if event.idempotency_key and event.idempotency_key in self._responses:
                return self._responses[event.idempotency_key]
            location = event.location.to_payload() if event.location else None
            response = self._apply_clock(event.employee_id, event.action, parse_iso_datetime(event.timestamp), location)
            if event.idempotency_key:
                self._responses[event.idempotency_key] = response
            return response

    def request_otp(self, employee_id: str) -> str:
        self._ensure_online()
        with self._lock:
            self._get_employee(employee_id)
            low = 10 ** (OTP_LENGTH - 1)
            code = str(low + secrets.randbelow(9 * low))
            self._otps[code] = OtpCode(
                employee_id=employee_id,
                code=code,
                expires_at=self._clock() + timedelta(minutes=OTP_EXPIRY_MINUTES),
            )
            return code

    def verify_otp(self, code: str, action: ClockAction) -> dict:
        self._ensure_online()
        with self._lock:
            otp = self._otps.get(code)
            if otp is None:
                raise RemoteServiceError("400: Invalid OTP code", status_code=400)
            now = self._clock()
            if now > otp.expires_at:
                raise RemoteServiceError("400: OTP code has expired", status_code=400)
            if otp.used:
                raise RemoteServiceError("400: OTP code has already been used", status_code=400)

            response = self._apply_clock(otp.employee_id, action, now, None)
            otp.used = True
            return {"success": True, "employeeId": otp.employee_id, "attendance": response}

    def _apply_clock(self, employee_id: str, action: ClockAction, moment: datetime, location: Optional[dict]) -> dict:
        employee = self._get_employee(employee_id)
        key = (employee_id, moment.date())
        existing = self._records.get(key)

        if action is ClockAction.CLOCK_IN:
            if existing is not None and existing.clock_in_time is not None:
                raise RemoteServiceError("400: Already clocked in for today", status_code=400)
            decision = self._factory.for_clock_in(now=moment).decide_clock_in(now=moment)
            record = AttendanceRecord(
                record_id=str(self._next_id),
                employee_id=employee_id,
                work_date=moment.date(),
                clock_in_time=moment,
                clock_out_time=None,
                status=decision.status,
                department=employee.department,
                geo_location=location,
                notes=decision.note or f"Self-logged via app: {action.value}",
            )
            self._next_id += 1
        else:
            if existing is None or existing.clock_in_time is None or existing.clock_out_time is not None:
                raise RemoteServiceError("400: Cannot clock out without clocking in first", status_code=400)
            hours = (moment - existing.clock_in_time).total_seconds() / 3600
            record = replace(
                existing,
                clock_out_time=moment,
                hours_worked=round(hours, 2),
                geo_location=location or existing.geo_location,
            )
            logger.debug("Employee %s worked %.2f hours", employee_id, hours)

        self._records[key] = record
        return record.to_dict()

    def _get_employee(self, employee_id: str) -> Employee:
        employee = self._employees.get(str(employee_id))
        if employee is None:
            raise RemoteServiceError("404: Employee not found", status_code=404)
        return employee

    def _ensure_online(self) -> None:
        if not self.online:
            raise RemoteServiceError("No response from server. Please check your connection.")
