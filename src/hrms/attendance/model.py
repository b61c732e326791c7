from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance row per (employee, calendar day)."""

    attendance_id: int
    employee_id: int
    work_date: date
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime]
    status: AttendanceStatus
    overridden_by: Optional[int] = None
    override_reason: Optional[str] = None

    @property
    def is_overridden(self) -> bool:
        return self.overridden_by is not None

    @property
    def duration_hours(self) -> Optional[float]:
        if self.check_in_time is None or self.check_out_time is None:
            return None
        return (self.check_out_time - self.check_in_time).total_seconds() / 3600


@dataclass(frozen=True)
class MonthlyStats:
    """Read-model: status counts for one employee in one calendar month."""

    present: int = 0
    absent: int = 0
    half_day: int = 0
    leave: int = 0
    total: int = 0

    def as_dict(self) -> dict:
        return {
            "present": self.present,
            "absent": self.absent,
            "halfDay": self.half_day,
            "leave": self.leave,
            "total": self.total,
        }
