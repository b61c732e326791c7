from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_employee(
        self,
        employee_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        """Records ordered by work_date descending, optionally bounded (inclusive)."""

        raise NotImplementedError

    def upsert_checkin(
        self,
        *,
        employee_id: int,
        work_date: date,
        check_in_time: datetime,
        status: AttendanceStatus,
    ) -> AttendanceRecord:
        """Clears any admin override on the day; the status is derived again at check-out."""
        raise NotImplementedError

    def update_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        status: AttendanceStatus,
    ) -> AttendanceRecord:
        raise NotImplementedError

    def upsert_override(
        self,
        *,
        employee_id: int,
        work_date: date,
        status: AttendanceStatus,
        overridden_by: int,
        override_reason: Optional[str],
    ) -> AttendanceRecord:
        """Admin-only escape hatch; leaves check-in/out untouched."""

        raise NotImplementedError

    def upsert_status(self, *, employee_id: int, work_date: date, status: AttendanceStatus) -> AttendanceRecord:
        """Create a bare record with ``status`` or overwrite the status of the existing one."""

        raise NotImplementedError
