from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.service import AttendanceService
from .clock.capture import EventCapture
from .clock.location import LocationProvider, build_location_provider
from .clock.notifier import FlashNotifier, Notifier
from .clock.queue import OfflineEventQueue
from .clock.service import ClockActionController
from .clock.submission import SubmissionClient
from .core import constants
from .data.cache import AttendanceViewCache
from .data.http_source import HttpAttendanceDataSource
from .data.mock_source import MockAttendanceDataSource
from .data.source import AttendanceDataSource
from .otp.service import OtpService
from .qr.service import CheckinQrService
from .stats.service import AttendanceStatsService


@dataclass(frozen=True)
class Container:
    source: AttendanceDataSource
    cache: AttendanceViewCache
    notifier: Notifier

    capture: EventCapture
    submission_client: SubmissionClient
    offline_queue: OfflineEventQueue
    clock_controller: ClockActionController

    attendance_service: AttendanceService
    otp_service: OtpService
    stats_service: AttendanceStatsService
    qr_service: CheckinQrService


def build_data_source(settings) -> AttendanceDataSource:
    kind = str(getattr(settings, "DATA_SOURCE", "http")).lower()
    if kind == "mock":
        return MockAttendanceDataSource()
    return HttpAttendanceDataSource(
        getattr(settings, "ATTENDANCE_API_URL"),
        timeout=float(getattr(settings, "SUBMIT_TIMEOUT_SECONDS", constants.DEFAULT_SUBMIT_TIMEOUT_SECONDS)),
    )


def build_container(
    *,
    settings,
    source: Optional[AttendanceDataSource] = None,
    notifier: Optional[Notifier] = None,
    location_provider: Optional[LocationProvider] = None,
) -> Container:
    source = source or build_data_source(settings)
    notifier = notifier or FlashNotifier()
    cache = AttendanceViewCache()

    max_retries = getattr(settings, "CLOCK_MAX_RETRIES", None)

    capture = EventCapture(
        notifier,
        location_provider=location_provider or build_location_provider(settings),
        location_timeout=float(
            getattr(settings, "LOCATION_TIMEOUT_SECONDS", constants.DEFAULT_LOCATION_TIMEOUT_SECONDS)
        ),
    )
    submission_client = SubmissionClient(source, invalidator=cache)
    offline_queue = OfflineEventQueue(
        submission_client,
        notifier,
        warning_threshold=int(getattr(settings, "SYNC_WARNING_THRESHOLD", constants.DEFAULT_SYNC_WARNING_THRESHOLD)),
        max_retries=int(max_retries) if max_retries else None,
    )
    clock_controller = ClockActionController(capture, submission_client, offline_queue, notifier)

    return Container(
        source=source,
        cache=cache,
        notifier=notifier,
        capture=capture,
        submission_client=submission_client,
        offline_queue=offline_queue,
        clock_controller=clock_controller,
        attendance_service=AttendanceService(source, cache),
        otp_service=OtpService(source, invalidator=cache),
        stats_service=AttendanceStatsService(
            work_start_hour=int(getattr(settings, "WORK_START_HOUR", constants.DEFAULT_WORK_START_HOUR))
        ),
        qr_service=CheckinQrService(
            capture,
            company_id=str(getattr(settings, "COMPANY_ID", "JAHAZII_COMPANY")),
            expires_in=int(getattr(settings, "QR_EXPIRES_IN", constants.DEFAULT_QR_EXPIRES_IN)),
        ),
    )
