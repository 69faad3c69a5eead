from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class Employee:
    employee_id: str
    name: str
    department: Optional[str] = None
    active: bool = True

    def to_dict(self) -> dict:
        return {
            "id": self.employee_id,
            "name": self.name,
            "department": self.department,
            "active": self.active,
        }


@dataclass(frozen=True)
class AttendanceRecord:
    """One employee's attendance for one work day."""

    record_id: str
    employee_id: str
    work_date: date
    clock_in_time: Optional[datetime]
    clock_out_time: Optional[datetime]
    status: AttendanceStatus
    hours_worked: float = 0.0
    department: Optional[str] = None
    geo_location: Optional[dict] = None
    notes: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.record_id,
            "employeeId": self.employee_id,
            "date": self.work_date.strftime("%Y-%m-%d"),
            "clockInTime": self.clock_in_time.isoformat() if self.clock_in_time else None,
            "clockOutTime": self.clock_out_time.isoformat() if self.clock_out_time else None,
            "status": self.status.value,
            "hoursWorked": self.hours_worked,
            "department": self.department,
            "geoLocation": self.geo_location,
            "notes": self.notes,
        }
