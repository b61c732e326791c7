from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..audit.service import record_action
from ..common.datetime_utils import month_bounds, now_local, parse_year_month
from ..common.validators import optional_text
from ..core.constants import ATTENDANCE_ENTITY
from ..core.enums import AttendanceStatus, AuditAction
from ..core.exceptions import (
    AlreadyCheckedIn,
    AlreadyCheckedOut,
    MustCheckInFirst,
    NoCheckInFound,
    NotFoundError,
    ValidationError,
)
from ..database.unit_of_work import UnitOfWorkFactory
from .model import AttendanceRecord, MonthlyStats
from .status import status_for

logger = logging.getLogger(__name__)


class AttendanceService:
    """Use cases: daily check-in/out, admin override, history and monthly stats."""

    def __init__(self, uow_factory: UnitOfWorkFactory, *, clock: Callable[[], datetime] = now_local):
        self._uow = uow_factory
        self._clock = clock

    @staticmethod
    def _require_employee(uow, employee_id: int) -> None:
        if not uow.employees.get_by_id(int(employee_id)):
            raise NotFoundError("Employee not found")

    def check_in(self, employee_id: int, *, now: Optional[datetime] = None) -> AttendanceRecord:
        now = now or self._clock()
        today = now.date()

        with self._uow() as uow:
            self._require_employee(uow, employee_id)

            existing = uow.attendance.get_for_employee_and_date(int(employee_id), today)
            if existing and existing.check_in_time is not None:
                raise AlreadyCheckedIn("Already checked in today")

            # PRESENT is provisional and any admin override is cleared; the final
            # status is derived from the hours at check-out.
            record = uow.attendance.upsert_checkin(
                employee_id=int(employee_id),
                work_date=today,
                check_in_time=now,
                status=AttendanceStatus.PRESENT,
            )
            uow.commit()

        logger.info("Employee %s checked in at %s", employee_id, now.isoformat())
        return record

    def check_out(self, employee_id: int, *, now: Optional[datetime] = None) -> AttendanceRecord:
        now = now or self._clock()
        today = now.date()

        with self._uow() as uow:
            self._require_employee(uow, employee_id)

            record = uow.attendance.get_for_employee_and_date(int(employee_id), today)
            if not record:
                raise NoCheckInFound("No check-in record found for today. Please check in first")
            if record.check_in_time is None:
                raise MustCheckInFirst("Must check in before checking out", current_status=record.status.value)
            if record.check_out_time is not None:
                raise AlreadyCheckedOut("Already checked out today")
            if now < record.check_in_time:
                raise ValidationError("Check-out time cannot be earlier than check-in time")

            status = status_for(replace(record, check_out_time=now))
            updated = uow.attendance.update_checkout(
                attendance_id=record.attendance_id,
                check_out_time=now,
                status=status,
            )
            uow.commit()

        logger.info("Employee %s checked out at %s (%s)", employee_id, now.isoformat(), status.value)
        return updated

    def override(
        self,
        *,
        employee_id: int,
        work_date: date,
        status: AttendanceStatus,
        reason: Optional[str],
        admin_user_id: int,
    ) -> AttendanceRecord:
        """Set a day's status regardless of check-in/out data. Admin only."""

        status = AttendanceStatus(status)
        reason = optional_text(reason)

        with self._uow() as uow:
            self._require_employee(uow, employee_id)

            previous = uow.attendance.get_for_employee_and_date(int(employee_id), work_date)
            record = uow.attendance.upsert_override(
                employee_id=int(employee_id),
                work_date=work_date,
                status=status,
                overridden_by=int(admin_user_id),
                override_reason=reason,
            )
            record_action(
                uow.audit,
                action=AuditAction.OVERRIDE,
                actor_user_id=admin_user_id,
                entity_type=ATTENDANCE_ENTITY,
                entity_id=record.attendance_id,
                reason=reason or "Attendance override",
                changes={
                    "previousStatus": previous.status.value if previous else None,
                    "newStatus": status.value,
                    "date": work_date.isoformat(),
                },
            )
            uow.commit()

        logger.info(
            "Attendance for employee %s on %s overridden to %s by user %s",
            employee_id,
            work_date.isoformat(),
            status.value,
            admin_user_id,
        )
        return record

    def today(self, employee_id: int, *, now: Optional[datetime] = None) -> Optional[AttendanceRecord]:
        today = (now or self._clock()).date()
        with self._uow() as uow:
            self._require_employee(uow, employee_id)
            return uow.attendance.get_for_employee_and_date(int(employee_id), today)

    def record_for(self, employee_id: int, work_date: date) -> AttendanceRecord:
        with self._uow() as uow:
            self._require_employee(uow, employee_id)
            record = uow.attendance.get_for_employee_and_date(int(employee_id), work_date)
        if not record:
            raise NotFoundError("Attendance record not found")
        return record

    def history(
        self,
        employee_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        if start_date and end_date and start_date > end_date:
            raise ValidationError("Start date must be on or before end date")

        with self._uow() as uow:
            self._require_employee(uow, employee_id)
            return uow.attendance.list_for_employee(int(employee_id), start_date=start_date, end_date=end_date)

    def monthly_stats(self, employee_id: int, year_month: str) -> MonthlyStats:
        year, month = parse_year_month(year_month)
        start, end = month_bounds(year, month)
        records = self.history(employee_id, start_date=start, end_date=end)

        counts = {status: 0 for status in AttendanceStatus}
        for r in records:
            counts[r.status] += 1

        return MonthlyStats(
            present=counts[AttendanceStatus.PRESENT],
            absent=counts[AttendanceStatus.ABSENT],
            half_day=counts[AttendanceStatus.HALF_DAY],
            leave=counts[AttendanceStatus.LEAVE],
            total=len(records),
        )
