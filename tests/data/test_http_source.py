from __future__ import annotations

import json
from datetime import date

import pytest
import requests

from src.clock_sync.clock_sync.clock.model import ClockEvent, Location
from src.clock_sync.clock_sync.core.enums import AttendanceStatus, ClockAction
from src.clock_sync.clock_sync.core.exceptions import RemoteServiceError
from src.clock_sync.clock_sync.data.http_source import HttpAttendanceDataSource


def _response(status: int, body=None, *, raw: bytes | None = None) -> requests.Response:
    resp = requests.Response()
    resp.status_code = status
    resp.reason = "Internal Server Error" if status >= 500 else "OK"
    resp._content = raw if raw is not None else json.dumps(body).encode("utf-8")
    resp.encoding = "utf-8"
    return resp


class FakeSession:
    def __init__(self, *responses):
        self._responses = list(responses)
        self.calls: list[dict] = []

    def request(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        item = self._responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


def _event() -> ClockEvent:
    return ClockEvent(
        employee_id="42",
        action=ClockAction.CLOCK_OUT,
        timestamp="2026-02-02T17:05:00.000Z",
        location=Location(-1.29, 36.82),
        idempotency_key="abc123",
    )


def test_submit_clock_posts_payload_with_idempotency_key():
    session = FakeSession(_response(200, {"id": "7"}))
    source = HttpAttendanceDataSource("http://svc/api/", session=session, timeout=12)

    body = source.submit_clock(_event())

    call = session.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == "http://svc/api/attendance/clock"
    assert call["timeout"] == 12
    assert call["headers"] == {"Idempotency-Key": "abc123"}
    assert call["json"] == {
        "employeeId": "42",
        "action": "clockOut",
        "timestamp": "2026-02-02T17:05:00.000Z",
        "location": {"lat": -1.29, "lng": 36.82},
    }
    assert body == {"id": "7"}


def test_non_2xx_raises_with_status_and_text():
    session = FakeSession(_response(500, raw=b"database down"))
    source = HttpAttendanceDataSource("http://svc/api", session=session)

    with pytest.raises(RemoteServiceError) as exc:
        source.submit_clock(_event())

    assert exc.value.status_code == 500
    assert str(exc.value) == "500: database down"


def test_network_error_raises_remote_service_error():
    session = FakeSession(requests.ConnectionError("connection refused"))
    source = HttpAttendanceDataSource("http://svc/api", session=session)

    with pytest.raises(RemoteServiceError, match="No response"):
        source.submit_clock(_event())


def test_malformed_json_raises_remote_service_error():
    session = FakeSession(_response(200, raw=b"<html>oops</html>"))
    source = HttpAttendanceDataSource("http://svc/api", session=session)

    with pytest.raises(RemoteServiceError, match="Malformed"):
        source.submit_clock(_event())


def test_empty_success_body_is_accepted():
    session = FakeSession(_response(204, raw=b""))
    source = HttpAttendanceDataSource("http://svc/api", session=session)

    assert source.submit_clock(_event()) == {}


def test_fetch_attendance_parses_records():
    payload = [
        {
            "id": 1,
            "employeeId": 42,
            "date": "2026-02-02T00:00:00.000Z",
            "clockInTime": "2026-02-02T08:20:00.000Z",
            "clockOutTime": None,
            "status": "late",
            "hoursWorked": "0",
            "employee": {"department": {"name": "Engineering"}},
        }
    ]
    session = FakeSession(_response(200, payload))
    source = HttpAttendanceDataSource("http://svc/api", session=session)

    records = source.fetch_attendance(date(2026, 2, 2), "42")

    assert session.calls[0]["params"] == {"date": "2026-02-02", "employeeId": "42"}
    assert len(records) == 1
    rec = records[0]
    assert rec.employee_id == "42"
    assert rec.work_date == date(2026, 2, 2)
    assert rec.status is AttendanceStatus.LATE
    assert rec.clock_in_time.hour == 8
    assert rec.clock_out_time is None
    assert rec.department == "Engineering"


def test_fetch_employees_flattens_department():
    payload = [{"id": 3, "name": "Grace", "department": {"name": "Operations"}}]
    source = HttpAttendanceDataSource("http://svc/api", session=FakeSession(_response(200, payload)))

    employees = source.fetch_employees()

    assert employees[0].employee_id == "3"
    assert employees[0].department == "Operations"
    assert employees[0].active is True


def test_malformed_record_raises():
    source = HttpAttendanceDataSource("http://svc/api", session=FakeSession(_response(200, [{"id": 1}])))

    with pytest.raises(RemoteServiceError):
        source.fetch_attendance(date(2026, 2, 2))


def test_verify_otp_sends_code_and_action():
    session = FakeSession(_response(200, {"success": True}))
    source = HttpAttendanceDataSource("http://svc/api", session=session)

    assert source.verify_otp("123456", ClockAction.CLOCK_IN) == {"success": True}
    assert session.calls[0]["json"] == {"code": "123456", "action": "clockIn"}


def test_request_otp_requires_code_in_body():
    source = HttpAttendanceDataSource("http://svc/api", session=FakeSession(_response(200, {})))

    with pytest.raises(RemoteServiceError):
        source.request_otp("42")
