from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional, Sequence

import requests

from ..attendance.model import AttendanceRecord, Employee
from ..clock.model import ClockEvent
from ..common.datetime_utils import parse_iso_date, parse_iso_datetime
from ..core.constants import DEFAULT_SUBMIT_TIMEOUT_SECONDS
from ..core.enums import AttendanceStatus, ClockAction
from ..core.exceptions import RemoteServiceError

logger = logging.getLogger(__name__)


class HttpAttendanceDataSource:
    """JSON-over-HTTP client for the external attendance service."""

    def __init__(
        self,
        base_url: str,
        *,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_SUBMIT_TIMEOUT_SECONDS,
    ):
        self._base_url = base_url.rstrip("/")
        self._session = session or requests.Session()
        self._timeout = float(timeout)

    def fetch_employees(self) -> Sequence[Employee]:
        data = self._request("GET", "/employees/active")
        if not isinstance(data, list):
            raise RemoteServiceError("Malformed response: expected a list of employees")
        return [_employee_from_json(item) for item in data]

    def fetch_attendance(self, day: date, employee_id: Optional[str] = None) -> Sequence[AttendanceRecord]:
        params = {"date": day.strftime("%Y-%m-%d")}
        if employee_id:
            params["employeeId"] = employee_id
        data = self._request("GET", "/attendance", params=params)
        if not isinstance(data, list):
            raise RemoteServiceError("Malformed response: expected a list of attendance records")
        return [_record_from_json(item) for item in data]

    def submit_clock(self, event: ClockEvent) -> dict:
        headers = {"Idempotency-Key": event.idempotency_key} if event.idempotency_key else None
        data = self._request("POST", "/attendance/clock", json=event.to_payload(), headers=headers)
        return data if isinstance(data, dict) else {"result": data}

    def request_otp(self, employee_id: str) -> str:
        data = self._request("POST", "/attendance/otp", json={"employeeId": employee_id})
        if not isinstance(data, dict) or not data.get("otp"):
            raise RemoteServiceError("Malformed response: missing otp")
        return str(data["otp"])

    def verify_otp(self, code: str, action: ClockAction) -> dict:
        data = self._request("POST", "/attendance/verify-otp", json={"code": code, "action": action.value})
        if not isinstance(data, dict):
            raise RemoteServiceError("Malformed response: expected an object")
        return data

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self._base_url}{path}"
        try:
            resp = self._session.request(method, url, timeout=self._timeout, **kwargs)
        except requests.RequestException as e:
            logger.warning("API request error (%s %s): %s", method, path, e)
            raise RemoteServiceError(f"No response from server: {e}") from e

        if not resp.ok:
            text = resp.text or resp.reason
            raise RemoteServiceError(f"{resp.status_code}: {text}", status_code=resp.status_code)

        if not resp.content:
            return {}
        try:
            return resp.json()
        except ValueError as e:
            raise RemoteServiceError("Malformed response from attendance service", status_code=resp.status_code) from e


def _employee_from_json(item: dict) -> Employee:
    try:
        department = item.get("department")
        if isinstance(department, dict):
            department = department.get("name")
        return Employee(
            employee_id=str(item["id"]),
            name=str(item.get("name") or item["id"]),
            department=department,
            active=bool(item.get("active", True)),
        )
    except (KeyError, TypeError, AttributeError) as e:
        raise RemoteServiceError(f"Malformed employee: {item!r}") from e


def _record_from_json(item: dict) -> AttendanceRecord:
    try:
        clock_in = item.get("clockInTime")
        clock_out = item.get("clockOutTime")
        clock_in_dt = parse_iso_datetime(clock_in) if clock_in else None
        department = item.get("department")
        employee = item.get("employee")
        if department is None and isinstance(employee, dict):
            department = employee.get("department")
        if isinstance(department, dict):
            department = department.get("name")

        raw_date = item.get("date")
        if raw_date:
            work_date = parse_iso_date(str(raw_date)[:10])
        elif clock_in_dt is not None:
            work_date = clock_in_dt.date()
        else:
            raise KeyError("date")

        return AttendanceRecord(
            record_id=str(item["id"]),
            employee_id=str(item["employeeId"]),
            work_date=work_date,
            clock_in_time=clock_in_dt,
            clock_out_time=parse_iso_datetime(clock_out) if clock_out else None,
            status=AttendanceStatus(item.get("status", "absent")),
            hours_worked=float(item.get("hoursWorked") or 0),
            department=department,
            geo_location=item.get("geoLocation"),
            notes=item.get("notes"),
        )
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise RemoteServiceError(f"Malformed attendance record: {item!r}") from e
