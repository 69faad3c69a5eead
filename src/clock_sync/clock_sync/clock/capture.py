from __future__ import annotations

import logging
import uuid
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from typing import Callable, Optional

from ..common.datetime_utils import now_utc, to_iso8601
from ..common.validators import require_clock_action, require_non_empty
from ..core.constants import DEFAULT_LOCATION_TIMEOUT_SECONDS
from ..core.enums import ClockAction, NoticeLevel
from ..core.exceptions import DomainError
from .location import LocationProvider, UnavailableLocationProvider
from .model import ClockEvent, Location
from .notifier import Notifier

logger = logging.getLogger(__name__)


class EventCapture:
    """Reads the clock and, optionally, the device position.

    A location failure never fails the capture: the event goes out with
    ``location=None`` and the user gets a non-blocking warning.

    A timed-out provider call keeps running on its worker thread; providers
    that do I/O must carry their own timeout no longer than
    ``location_timeout`` (``build_location_provider`` wires the same value).
    """

    def __init__(
        self,
        notifier: Notifier,
        *,
        location_provider: Optional[LocationProvider] = None,
        location_timeout: float = DEFAULT_LOCATION_TIMEOUT_SECONDS,
        clock: Callable = now_utc,
        key_factory: Callable[[], str] = lambda: uuid.uuid4().hex,
    ):
        self._notifier = notifier
        self._provider = location_provider or UnavailableLocationProvider()
        self._timeout = float(location_timeout)
        self._clock = clock
        self._key_factory = key_factory
        self._executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="geolocation")
        self.current_location: Optional[Location] = None

    def capture(
        self,
        employee_id: Optional[str],
        action: ClockAction | str,
        *,
        use_location: bool = False,
        provider: Optional[LocationProvider] = None,
    ) -> ClockEvent:
        employee_id = require_non_empty(employee_id, "Please select an employee")
        action = require_clock_action(action)

        location = self.locate(provider) if use_location else None

        return ClockEvent(
            employee_id=employee_id,
            action=action,
            timestamp=to_iso8601(self._clock()),
            location=location,
            idempotency_key=self._key_factory(),
        )

    def locate(self, provider: Optional[LocationProvider] = None) -> Optional[Location]:
        """Ask the provider for coordinates within the timeout, or return None."""
        provider = provider or self._provider
        future = self._executor.submit(provider.locate)
        try:
            location = future.result(timeout=self._timeout)
        except FutureTimeout:
            future.cancel()
            self._warn(f"Timed out after {self._timeout:g} seconds")
            return None
        except DomainError as e:
            self._warn(str(e))
            return None
        except Exception as e:
            logger.exception("Location provider %s crashed", type(provider).__name__)
            self._warn(f"Position unavailable ({type(e).__name__})")
            return None

        self.current_location = location
        return location

    def reset(self) -> None:
        self.current_location = None

    def _warn(self, reason: str) -> None:
        logger.warning("Location capture failed: %s", reason)
        self._notifier.notify(NoticeLevel.WARNING, "Location Error", f"Failed to get location: {reason}")
