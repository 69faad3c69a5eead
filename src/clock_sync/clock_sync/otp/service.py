from __future__ import annotations

from typing import Optional

from ..common.datetime_utils import now_utc
from ..common.validators import require_clock_action, require_non_empty, require_otp_code
from ..core.constants import OTP_LENGTH
from ..core.enums import ClockAction
from ..core.exceptions import RemoteServiceError, ValidationError
from ..data.source import AttendanceDataSource, CacheInvalidator


class OtpService:
    """Self-service clocking with a one-time code issued by the attendance service."""

    def __init__(self, source: AttendanceDataSource, *, invalidator: Optional[CacheInvalidator] = None):
        self._source = source
        self._invalidator = invalidator

    def request_otp(self, employee_id: Optional[str]) -> str:
        employee_id = require_non_empty(employee_id, "Please enter an employee ID")
        return self._source.request_otp(employee_id)

    def verify_otp(self, code: Optional[str], action: ClockAction | str) -> dict:
        code = require_otp_code(code, OTP_LENGTH)
        action = require_clock_action(action)
        try:
            result = self._source.verify_otp(code, action)
        except RemoteServiceError as e:
            if e.status_code == 400:
                raise ValidationError(_strip_status(str(e))) from e
            raise

        employee_id = result.get("employeeId")
        if self._invalidator is not None and employee_id:
            self._invalidator.invalidate(str(employee_id), now_utc().date())
        return result


def _strip_status(message: str) -> str:
    head, sep, tail = message.partition(": ")
    return tail if sep and head.isdigit() else message
