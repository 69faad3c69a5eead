from __future__ import annotations

import logging
from typing import Optional

from ..core.enums import ClockAction, ClockState, NoticeLevel
from ..core.exceptions import ValidationError
from .capture import EventCapture
from .location import LocationProvider
from .model import ClockOutcome
from .notifier import Notifier
from .queue import OfflineEventQueue
from .submission import SubmissionClient

logger = logging.getLogger(__name__)


class ClockActionController:
    """Capture -> submit -> (enqueue on failure), then drain opportunistically.

    Every path ends with exactly one definitive user message; nothing here
    raises to the caller.
    """

    def __init__(
        self,
        capture: EventCapture,
        client: SubmissionClient,
        queue: OfflineEventQueue,
        notifier: Notifier,
    ):
        self._capture = capture
        self._client = client
        self._queue = queue
        self._notifier = notifier
        self.state = ClockState.IDLE

    @property
    def queue(self) -> OfflineEventQueue:
        return self._queue

    @property
    def current_location(self):
        return self._capture.current_location

    def handle_clock_action(
        self,
        employee_id: Optional[str],
        action: ClockAction | str,
        *,
        use_location: bool = False,
        provider: Optional[LocationProvider] = None,
    ) -> ClockOutcome:
        try:
            self.state = ClockState.CAPTURING
            try:
                event = self._capture.capture(employee_id, action, use_location=use_location, provider=provider)
            except ValidationError as e:
                self._notifier.notify(NoticeLevel.DANGER, "Error", str(e))
                return ClockOutcome(state=ClockState.REJECTED, message=str(e))

            self.state = ClockState.SUBMITTING
            result = self._client.submit(event)

            if not result.ok:
                backlog = len(self._queue)
                self._queue.enqueue(event)
                self.state = ClockState.QUEUED_OFFLINE
                message = f"Clock {event.action.verb} saved locally and will sync later."
                self._notifier.notify(NoticeLevel.INFO, "Offline", message)
                # the event just queued waits for the next pass
                drain = self._drain(limit=backlog)
                return ClockOutcome(state=ClockState.QUEUED_OFFLINE, message=message, event=event, drain=drain)

            self.state = ClockState.SUCCEEDED
            message = f"Employee has been clocked {event.action.verb} successfully."
            self._notifier.notify(NoticeLevel.SUCCESS, "Success", message)
            self._capture.reset()
            logger.info(
                "Clock event submitted",
                extra={"employee_id": event.employee_id, "action": event.action.value},
            )

            drain = self._drain()
            return ClockOutcome(state=ClockState.SUCCEEDED, message=message, event=event, drain=drain)
        finally:
            self.state = ClockState.IDLE

    def _drain(self, limit: Optional[int] = None):
        if limit == 0 or not len(self._queue) or self._queue.is_syncing:
            return None
        return self._queue.drain(limit=limit)

    def sync(self):
        """Explicit drain requested by the user."""
        return self._queue.drain()
