from __future__ import annotations

import logging
from typing import Optional

from ..common.datetime_utils import parse_iso_datetime
from ..core.exceptions import RemoteServiceError
from ..data.source import AttendanceDataSource, CacheInvalidator
from .model import ClockEvent, SubmissionResult

logger = logging.getLogger(__name__)


class SubmissionClient:
    """Sends one ClockEvent to the attendance service; never raises on failure."""

    def __init__(self, source: AttendanceDataSource, *, invalidator: Optional[CacheInvalidator] = None):
        self._source = source
        self._invalidator = invalidator

    def submit(self, event: ClockEvent) -> SubmissionResult:
        try:
            body = self._source.submit_clock(event)
        except RemoteServiceError as e:
            logger.info(
                "Clock submission failed: %s",
                e,
                extra={"employee_id": event.employee_id, "action": event.action.value},
            )
            return SubmissionResult(ok=False, error=str(e))
        except Exception as e:
            logger.exception(
                "Unexpected error submitting clock event",
                extra={"employee_id": event.employee_id, "action": event.action.value},
            )
            return SubmissionResult(ok=False, error=f"Unexpected error: {e}")

        if self._invalidator is not None:
            day = parse_iso_datetime(event.timestamp).date()
            self._invalidator.invalidate(event.employee_id, day)
        return SubmissionResult(ok=True, body=body)
