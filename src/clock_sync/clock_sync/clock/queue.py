from __future__ import annotations

import logging
import threading
from typing import Optional

from ..core.constants import DEFAULT_SYNC_WARNING_THRESHOLD
from ..core.enums import ClockAction, NoticeLevel
from .model import ClockEvent, DrainReport, QueuedEvent
from .notifier import Notifier
from .submission import SubmissionClient

logger = logging.getLogger(__name__)


class OfflineEventQueue:
    """In-memory FIFO of clock events waiting to be resubmitted.

    Lives as long as the owning controller; nothing is persisted. Events are
    only removed after a successful resubmission, or moved to
    ``dead_letters`` when ``max_retries`` is set and reached.
    """

    def __init__(
        self,
        client: SubmissionClient,
        notifier: Notifier,
        *,
        warning_threshold: int = DEFAULT_SYNC_WARNING_THRESHOLD,
        max_retries: Optional[int] = None,
    ):
        if max_retries is not None and max_retries < 1:
            raise ValueError("max_retries must be positive or None")
        self._client = client
        self._notifier = notifier
        self._warning_threshold = int(warning_threshold)
        self._max_retries = max_retries
        self._items: list[QueuedEvent] = []
        self.dead_letters: list[QueuedEvent] = []
        self._lock = threading.Lock()
        self._syncing = False

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    @property
    def is_syncing(self) -> bool:
        return self._syncing

    def enqueue(self, event: ClockEvent) -> QueuedEvent:
        item = QueuedEvent(event=event)
        with self._lock:
            self._items.append(item)
        logger.info(
            "Queued offline clock event",
            extra={"employee_id": event.employee_id, "action": event.action.value},
        )
        return item

    def snapshot(self) -> list[QueuedEvent]:
        with self._lock:
            return [QueuedEvent(event=i.event, retry_count=i.retry_count) for i in self._items]

    def clear(self) -> None:
        with self._lock:
            self._items.clear()
            self.dead_letters.clear()

    def drain(self, *, limit: Optional[int] = None) -> DrainReport:
        """Resubmit queued events, oldest first.

        ``limit`` caps the pass to the first ``limit`` events in the queue.
        """
        with self._lock:
            if self._syncing:
                return DrainReport(skipped=True)
            if not self._items:
                return DrainReport()
            self._syncing = True
            pending = list(self._items) if limit is None else self._items[:limit]

        report = DrainReport()
        try:
            for item in pending:
                result = self._client.submit(item.event)
                if result.ok:
                    self._remove(item)
                    report.recovered.append(item)
                    self._notifier.notify(
                        NoticeLevel.SUCCESS,
                        "Synced",
                        f"Offline {_label(item.action)} for employee {item.employee_id} "
                        f"synced: clocked {item.action.verb}.",
                    )
                    continue

                item.retry_count += 1
                logger.warning(
                    "Resubmission failed: %s",
                    result.error,
                    extra={
                        "employee_id": item.employee_id,
                        "action": item.action.value,
                        "retry_count": item.retry_count,
                    },
                )
                if self._max_retries is not None and item.retry_count >= self._max_retries:
                    self._remove(item)
                    self.dead_letters.append(item)
                    report.dead_lettered.append(item)
                    self._notifier.notify(
                        NoticeLevel.WARNING,
                        "Sync Failed",
                        f"Gave up syncing {_label(item.action)} for employee {item.employee_id} "
                        f"after {item.retry_count} attempts.",
                    )
                    continue

                report.failed.append(item)
                if item.retry_count == self._warning_threshold:
                    self._notifier.notify(
                        NoticeLevel.WARNING,
                        "Sync Warning",
                        f"Having trouble syncing {_label(item.action)} for employee {item.employee_id}. "
                        "We'll keep trying.",
                    )
        finally:
            with self._lock:
                self._syncing = False
        return report

    def _remove(self, item: QueuedEvent) -> None:
        with self._lock:
            self._items = [i for i in self._items if i is not item]


def _label(action: ClockAction) -> str:
    return "clock-in" if action is ClockAction.CLOCK_IN else "clock-out"
