from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core.enums import ClockAction, ClockState, NoticeLevel


@dataclass(frozen=True)
class Location:
    latitude: float
    longitude: float

    def to_payload(self) -> dict:
        return {"lat": self.latitude, "lng": self.longitude}


@dataclass(frozen=True)
class ClockEvent:
    """One intended attendance transition, captured once and never mutated."""

    employee_id: str
    action: ClockAction
    timestamp: str
    location: Optional[Location] = None
    idempotency_key: str = ""

    def to_payload(self) -> dict:
        return {
            "employeeId": self.employee_id,
            "action": self.action.value,
            "timestamp": self.timestamp,
            "location": self.location.to_payload() if self.location else None,
        }


@dataclass
class QueuedEvent:
    """A ClockEvent that failed submission, plus retry bookkeeping."""

    event: ClockEvent
    retry_count: int = 0

    @property
    def employee_id(self) -> str:
        return self.event.employee_id

    @property
    def action(self) -> ClockAction:
        return self.event.action

    def to_dict(self) -> dict:
        data = self.event.to_payload()
        data["idempotencyKey"] = self.event.idempotency_key
        data["retryCount"] = self.retry_count
        return data


@dataclass(frozen=True)
class SubmissionResult:
    ok: bool
    error: Optional[str] = None
    body: object = None


@dataclass
class DrainReport:
    recovered: list[QueuedEvent] = field(default_factory=list)
    failed: list[QueuedEvent] = field(default_factory=list)
    dead_lettered: list[QueuedEvent] = field(default_factory=list)
    skipped: bool = False

    @property
    def attempted(self) -> int:
        return len(self.recovered) + len(self.failed) + len(self.dead_lettered)


@dataclass(frozen=True)
class ClockOutcome:
    state: ClockState
    message: str
    event: Optional[ClockEvent] = None
    drain: Optional[DrainReport] = None


@dataclass(frozen=True)
class Notice:
    level: NoticeLevel
    title: str
    message: str
