from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from ..attendance.model import AttendanceRecord, Employee
from ..common.datetime_utils import format_hhmm
from ..common.rounding import round_half_up
from ..core.constants import DEFAULT_WORK_START_HOUR, LATE_ATTENDANCE_WEIGHT
from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class LatenessStats:
    avg_lateness_minutes: int
    max_lateness_minutes: int
    lateness_rate: int


@dataclass(frozen=True)
class DepartmentAttendance:
    name: str
    present: int
    late: int
    absent: int
    total: int
    percentage: int


@dataclass(frozen=True)
class AttendanceSummary:
    total: int
    present: int
    late: int
    absent: int
    attendance_rate: int
    average_clock_in: str
    lateness: LatenessStats
    departments: list[DepartmentAttendance]

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "present": self.present,
            "late": self.late,
            "absent": self.absent,
            "attendanceRate": self.attendance_rate,
            "avgCheckIn": self.average_clock_in,
            "avgLateness": f"{self.lateness.avg_lateness_minutes} min",
            "maxLateness": f"{self.lateness.max_lateness_minutes} min",
            "latenessRate": self.lateness.lateness_rate,
            "departments": [d.__dict__ for d in self.departments],
        }


class AttendanceStatsService:
    """Dashboard aggregations over a day's attendance records."""

    def __init__(self, *, work_start_hour: int = DEFAULT_WORK_START_HOUR, late_weight: float = LATE_ATTENDANCE_WEIGHT):
        self._work_start_minutes = int(work_start_hour) * 60
        self._late_weight = float(late_weight)

    def summarize(
        self,
        records: Sequence[AttendanceRecord],
        employees: Optional[Iterable[Employee]] = None,
    ) -> AttendanceSummary:
        counts = self.status_counts(records)
        return AttendanceSummary(
            total=len(records),
            present=counts[AttendanceStatus.PRESENT],
            late=counts[AttendanceStatus.LATE],
            absent=counts[AttendanceStatus.ABSENT],
            attendance_rate=self.attendance_rate(records),
            average_clock_in=self.average_clock_in(records),
            lateness=self.lateness(records),
            departments=self.departments(records, employees or []),
        )

    def status_counts(self, records: Sequence[AttendanceRecord]) -> dict[AttendanceStatus, int]:
        counts = {status: 0 for status in AttendanceStatus}
        for r in records:
            counts[r.status] += 1
        return counts

    def attendance_rate(self, records: Sequence[AttendanceRecord]) -> int:
        """Present counts fully, late counts at a reduced weight."""
        if not records:
            return 0
        counts = self.status_counts(records)
        effective = counts[AttendanceStatus.PRESENT] + counts[AttendanceStatus.LATE] * self._late_weight
        return round_half_up(effective / len(records) * 100)

    def lateness(self, records: Sequence[AttendanceRecord]) -> LatenessStats:
        late = [r for r in records if r.status == AttendanceStatus.LATE and r.clock_in_time]
        if not late:
            return LatenessStats(avg_lateness_minutes=0, max_lateness_minutes=0, lateness_rate=0)

        durations = [
            r.clock_in_time.hour * 60 + r.clock_in_time.minute - self._work_start_minutes
            for r in late
        ]
        return LatenessStats(
            avg_lateness_minutes=round_half_up(sum(durations) / len(durations)),
            max_lateness_minutes=max(durations),
            lateness_rate=round_half_up(len(late) / len(records) * 100),
        )

    def average_clock_in(self, records: Sequence[AttendanceRecord]) -> str:
        times = [r.clock_in_time for r in records if r.clock_in_time]
        if not times:
            return "N/A"
        total = sum(t.hour * 60 + t.minute for t in times)
        return format_hhmm(total // len(times))

    def departments(
        self,
        records: Sequence[AttendanceRecord],
        employees: Iterable[Employee],
    ) -> list[DepartmentAttendance]:
        totals: dict[str, int] = {}
        for emp in employees:
            if emp.department:
                totals[emp.department] = totals.get(emp.department, 0) + 1

        tallies = {name: {status: 0 for status in AttendanceStatus} for name in totals}
        for r in records:
            if r.department in tallies:
                tallies[r.department][r.status] += 1

        out = []
        for name, total in totals.items():
            t = tallies[name]
            present = t[AttendanceStatus.PRESENT]
            late = t[AttendanceStatus.LATE]
            out.append(
                DepartmentAttendance(
                    name=name,
                    present=present,
                    late=late,
                    absent=t[AttendanceStatus.ABSENT],
                    total=total,
                    percentage=round_half_up((present + late) / total * 100) if total else 0,
                )
            )
        return out
