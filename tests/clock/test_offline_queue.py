from __future__ import annotations

from datetime import date

from src.clock_sync.clock_sync.clock.model import ClockEvent
from src.clock_sync.clock_sync.clock.queue import OfflineEventQueue
from src.clock_sync.clock_sync.clock.submission import SubmissionClient
from src.clock_sync.clock_sync.core.enums import ClockAction, NoticeLevel
from src.clock_sync.clock_sync.core.exceptions import RemoteServiceError


class FakeSource:
    def __init__(self):
        self.failing_keys: set[str] = set()
        self.fail_all = False
        self.calls: list[str] = []

    def submit_clock(self, event: ClockEvent) -> dict:
        self.calls.append(event.idempotency_key)
        if self.fail_all or event.idempotency_key in self.failing_keys:
            raise RemoteServiceError("500: Internal Server Error", status_code=500)
        return {"ok": True}


class FakeInvalidator:
    def __init__(self):
        self.calls: list[tuple[str, date]] = []

    def invalidate(self, employee_id: str, day: date) -> None:
        self.calls.append((employee_id, day))


def _event(key: str, action=ClockAction.CLOCK_IN, employee_id="42") -> ClockEvent:
    return ClockEvent(
        employee_id=employee_id,
        action=action,
        timestamp="2026-02-02T08:55:00.000Z",
        idempotency_key=key,
    )


def _queue(source, notifier, **kwargs):
    return OfflineEventQueue(SubmissionClient(source), notifier, **kwargs)


def test_enqueue_starts_at_zero_retries(notifier):
    queue = _queue(FakeSource(), notifier)

    item = queue.enqueue(_event("a"))

    assert item.retry_count == 0
    assert len(queue) == 1


def test_drain_empty_queue_is_noop(notifier):
    source = FakeSource()
    queue = _queue(source, notifier)

    report = queue.drain()

    assert source.calls == []
    assert report.attempted == 0
    assert len(queue) == 0


def test_drain_partial_failure_keeps_failed_with_incremented_retry(notifier):
    source = FakeSource()
    source.failing_keys = {"b"}
    queue = _queue(source, notifier)
    for key in ("a", "b", "c"):
        queue.enqueue(_event(key))

    report = queue.drain()

    assert source.calls == ["a", "b", "c"]
    assert [i.event.idempotency_key for i in report.recovered] == ["a", "c"]
    remaining = queue.snapshot()
    assert len(remaining) == 1
    assert remaining[0].event.idempotency_key == "b"
    assert remaining[0].retry_count == 1


def test_recovered_event_notice_names_action(notifier):
    queue = _queue(FakeSource(), notifier)
    queue.enqueue(_event("a", action=ClockAction.CLOCK_OUT))

    queue.drain()

    assert "clocked out" in notifier.messages(NoticeLevel.SUCCESS)[0]


def test_second_drain_after_full_recovery_is_noop(notifier):
    source = FakeSource()
    queue = _queue(source, notifier)
    queue.enqueue(_event("a"))
    queue.enqueue(_event("b"))

    queue.drain()
    calls_after_first = list(source.calls)
    report = queue.drain()

    assert report.attempted == 0
    assert source.calls == calls_after_first
    assert len(queue) == 0


def test_sync_warning_emitted_once_at_threshold(notifier):
    source = FakeSource()
    source.fail_all = True
    queue = _queue(source, notifier, warning_threshold=3)
    queue.enqueue(_event("a"))

    for _ in range(5):
        queue.drain()

    warnings = notifier.messages(NoticeLevel.WARNING)
    assert len(warnings) == 1
    assert "trouble syncing" in warnings[0]
    assert queue.snapshot()[0].retry_count == 5


def test_events_are_kept_forever_without_max_retries(notifier):
    source = FakeSource()
    source.fail_all = True
    queue = _queue(source, notifier)
    queue.enqueue(_event("a"))

    for _ in range(10):
        queue.drain()

    assert len(queue) == 1
    assert queue.dead_letters == []


def test_max_retries_moves_event_to_dead_letters(notifier):
    source = FakeSource()
    source.fail_all = True
    queue = _queue(source, notifier, max_retries=2)
    queue.enqueue(_event("a"))

    queue.drain()
    report = queue.drain()

    assert len(queue) == 0
    assert [i.event.idempotency_key for i in report.dead_lettered] == ["a"]
    assert queue.dead_letters[0].retry_count == 2


def test_drain_preserves_fifo_order_with_new_enqueues(notifier):
    source = FakeSource()
    source.fail_all = True
    queue = _queue(source, notifier)
    queue.enqueue(_event("a"))
    queue.drain()
    queue.enqueue(_event("b"))

    assert [i.event.idempotency_key for i in queue.snapshot()] == ["a", "b"]


def test_overlapping_drain_is_skipped(notifier):
    class ReentrantSource(FakeSource):
        def __init__(self):
            super().__init__()
            self.queue = None
            self.inner_report = None

        def submit_clock(self, event):
            if self.inner_report is None:
                self.inner_report = self.queue.drain()
            return super().submit_clock(event)

    source = ReentrantSource()
    queue = _queue(source, notifier)
    source.queue = queue
    queue.enqueue(_event("a"))

    queue.drain()

    assert source.inner_report.skipped is True
    assert source.calls == ["a"]
    assert not queue.is_syncing


def test_successful_resubmission_invalidates_cached_views(notifier):
    invalidator = FakeInvalidator()
    queue = OfflineEventQueue(SubmissionClient(FakeSource(), invalidator=invalidator), notifier)
    queue.enqueue(_event("a"))

    queue.drain()

    assert invalidator.calls == [("42", date(2026, 2, 2))]


def test_drain_continues_past_unexpected_errors(notifier):
    class FlakySource(FakeSource):
        def submit_clock(self, event):
            if event.idempotency_key == "a":
                self.calls.append("a")
                raise RuntimeError("socket closed")
            return super().submit_clock(event)

    source = FlakySource()
    queue = _queue(source, notifier)
    for key in ("a", "b"):
        queue.enqueue(_event(key))

    report = queue.drain()

    assert source.calls == ["a", "b"]
    assert [i.event.idempotency_key for i in report.failed] == ["a"]
    assert [i.event.idempotency_key for i in report.recovered] == ["b"]
    assert queue.snapshot()[0].retry_count == 1


def test_drain_limit_leaves_newer_events_untouched(notifier):
    source = FakeSource()
    queue = _queue(source, notifier)
    for key in ("a", "b", "c"):
        queue.enqueue(_event(key))

    report = queue.drain(limit=2)

    assert source.calls == ["a", "b"]
    assert report.attempted == 2
    assert [(i.event.idempotency_key, i.retry_count) for i in queue.snapshot()] == [("c", 0)]
