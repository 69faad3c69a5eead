from __future__ import annotations

from datetime import date

import pytest

from src.clock_sync.clock_sync.clock.capture import EventCapture
from src.clock_sync.clock_sync.clock.location import ReportedLocationProvider
from src.clock_sync.clock_sync.clock.model import ClockEvent
from src.clock_sync.clock_sync.clock.queue import OfflineEventQueue
from src.clock_sync.clock_sync.clock.service import ClockActionController
from src.clock_sync.clock_sync.clock.submission import SubmissionClient
from src.clock_sync.clock_sync.core.enums import ClockAction, ClockState, NoticeLevel
from src.clock_sync.clock_sync.core.exceptions import RemoteServiceError


class ScriptedSource:
    """Answers clock submissions with a scripted list of HTTP statuses."""

    def __init__(self, statuses=None, default: int = 200):
        self.statuses = list(statuses or [])
        self.default = default
        self.events: list[ClockEvent] = []

    def submit_clock(self, event: ClockEvent) -> dict:
        self.events.append(event)
        status = self.statuses.pop(0) if self.statuses else self.default
        if status >= 300:
            raise RemoteServiceError(f"{status}: error", status_code=status)
        return {"success": True}


class FakeInvalidator:
    def __init__(self):
        self.calls: list[tuple[str, date]] = []

    def invalidate(self, employee_id: str, day: date) -> None:
        self.calls.append((employee_id, day))


@pytest.fixture
def build(notifier, fixed_now):
    def _build(source, invalidator=None, **queue_kwargs):
        client = SubmissionClient(source, invalidator=invalidator)
        queue = OfflineEventQueue(client, notifier, **queue_kwargs)
        capture = EventCapture(notifier, clock=lambda: fixed_now)
        return ClockActionController(capture, client, queue, notifier)

    return _build


def test_empty_employee_rejected_without_network_call(build, notifier):
    source = ScriptedSource()
    controller = build(source)

    outcome = controller.handle_clock_action("", ClockAction.CLOCK_IN)

    assert outcome.state is ClockState.REJECTED
    assert outcome.event is None
    assert source.events == []
    assert len(controller.queue) == 0
    assert notifier.notices[0].level is NoticeLevel.DANGER
    assert "select an employee" in notifier.notices[0].message
    assert controller.state is ClockState.IDLE


def test_successful_clock_in_invalidates_cache_and_leaves_queue_empty(build, notifier):
    invalidator = FakeInvalidator()
    controller = build(ScriptedSource([200]), invalidator)

    outcome = controller.handle_clock_action("42", ClockAction.CLOCK_IN)

    assert outcome.state is ClockState.SUCCEEDED
    assert len(controller.queue) == 0
    assert "clocked in" in outcome.message
    assert "clocked in" in notifier.messages(NoticeLevel.SUCCESS)[0]
    assert invalidator.calls == [("42", date(2026, 2, 2))]
    assert controller.state is ClockState.IDLE


def test_failed_clock_out_is_queued_locally(build, notifier):
    controller = build(ScriptedSource([500]))

    outcome = controller.handle_clock_action("42", ClockAction.CLOCK_OUT)

    assert outcome.state is ClockState.QUEUED_OFFLINE
    queued = controller.queue.snapshot()
    assert len(queued) == 1
    assert queued[0].employee_id == "42"
    assert queued[0].action is ClockAction.CLOCK_OUT
    assert queued[0].retry_count == 0
    assert "saved locally" in notifier.messages(NoticeLevel.INFO)[0]


def test_queued_event_keeps_original_timestamp(build):
    controller = build(ScriptedSource([500]))

    outcome = controller.handle_clock_action("42", ClockAction.CLOCK_IN)

    assert controller.queue.snapshot()[0].event == outcome.event


def test_next_successful_action_drains_queue(build, notifier):
    source = ScriptedSource(default=500)
    controller = build(source)
    for employee in ("1", "2", "3", "4"):
        controller.handle_clock_action(employee, ClockAction.CLOCK_IN)
    # each failed action also retried the events queued before it
    assert [i.retry_count for i in controller.queue.snapshot()] == [3, 2, 1, 0]

    # "4" clocks out successfully, then the queue drains: 1 ok, 2 fails, 3 and 4 ok.
    source.default = 200
    source.statuses = [200, 200, 500]
    outcome = controller.handle_clock_action("4", ClockAction.CLOCK_OUT)

    assert outcome.state is ClockState.SUCCEEDED
    assert outcome.drain is not None
    remaining = controller.queue.snapshot()
    assert [i.employee_id for i in remaining] == ["2"]
    assert remaining[0].retry_count == 3
    assert len(outcome.drain.recovered) == 3


def test_failed_action_retries_only_the_earlier_backlog(build):
    source = ScriptedSource([500])
    controller = build(source)
    controller.handle_clock_action("1", ClockAction.CLOCK_IN)

    source.statuses = [500, 500]
    outcome = controller.handle_clock_action("2", ClockAction.CLOCK_IN)

    assert outcome.state is ClockState.QUEUED_OFFLINE
    assert [(i.employee_id, i.retry_count) for i in controller.queue.snapshot()] == [("1", 1), ("2", 0)]
    assert [e.employee_id for e in source.events] == ["1", "2", "1"]
    assert len(outcome.drain.failed) == 1


def test_failed_action_can_recover_the_backlog(build, notifier):
    source = ScriptedSource([500])
    controller = build(source)
    controller.handle_clock_action("1", ClockAction.CLOCK_IN)

    source.statuses = [500, 200]
    outcome = controller.handle_clock_action("2", ClockAction.CLOCK_IN)

    assert [i.employee_id for i in controller.queue.snapshot()] == ["2"]
    assert [i.employee_id for i in outcome.drain.recovered] == ["1"]


def test_unexpected_source_error_is_queued_not_raised(build, notifier):
    class BrokenSource:
        def submit_clock(self, event):
            raise RuntimeError("connection pool exhausted")

    controller = build(BrokenSource())

    outcome = controller.handle_clock_action("42", ClockAction.CLOCK_IN)

    assert outcome.state is ClockState.QUEUED_OFFLINE
    assert controller.queue.snapshot()[0].event == outcome.event
    assert "saved locally" in notifier.messages(NoticeLevel.INFO)[0]
    assert controller.state is ClockState.IDLE


def test_non_finite_location_does_not_poison_the_queue(build):
    source = ScriptedSource([500])
    controller = build(source)

    outcome = controller.handle_clock_action(
        "42",
        ClockAction.CLOCK_IN,
        use_location=True,
        provider=ReportedLocationProvider({"lat": "nan", "lng": "0"}),
    )

    assert outcome.state is ClockState.QUEUED_OFFLINE
    assert outcome.event.location is None
    assert controller.queue.snapshot()[0].to_dict()["location"] is None


def test_denied_location_still_completes_clock_action(build, notifier):
    source = ScriptedSource([200])
    controller = build(source)

    outcome = controller.handle_clock_action(
        "42",
        ClockAction.CLOCK_IN,
        use_location=True,
        provider=ReportedLocationProvider(None),
    )

    assert outcome.state is ClockState.SUCCEEDED
    assert source.events[0].location is None
    assert source.events[0].to_payload()["location"] is None
    assert notifier.notices[0].level is NoticeLevel.WARNING
    assert notifier.notices[-1].level is NoticeLevel.SUCCESS


def test_success_resets_current_location(build):
    controller = build(ScriptedSource([200]))

    controller.handle_clock_action(
        "42",
        ClockAction.CLOCK_IN,
        use_location=True,
        provider=ReportedLocationProvider({"lat": 1, "lng": 2}),
    )

    assert controller.current_location is None


def test_every_action_ends_with_one_definitive_message(build, notifier):
    controller = build(ScriptedSource([200, 500]))

    controller.handle_clock_action("", "clockIn")
    controller.handle_clock_action("1", "clockIn")
    controller.handle_clock_action("2", "clockIn")

    levels = [n.level for n in notifier.notices]
    assert levels == [NoticeLevel.DANGER, NoticeLevel.SUCCESS, NoticeLevel.INFO]
