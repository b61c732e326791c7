from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..core.exceptions import NotFoundError
from ..database.mysql_base import fetchall, fetchone
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = (
    "attendance_id, employee_id, work_date, check_in_time, check_out_time, "
    "status, overridden_by, override_reason"
)


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        check_in_time=r.get("check_in_time"),
        check_out_time=r.get("check_out_time"),
        status=AttendanceStatus(r["status"]),
        overridden_by=r.get("overridden_by"),
        override_reason=r.get("override_reason"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, cur):
        self._cur = cur

    def _get_by_id(self, attendance_id: int) -> AttendanceRecord:
        self._cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
        r = fetchone(self._cur)
        if not r:
            raise NotFoundError("Attendance record not found")
        return _to_record(r)

    def _require(self, employee_id: int, work_date: date) -> AttendanceRecord:
        rec = self.get_for_employee_and_date(employee_id, work_date)
        if rec is None:
            raise NotFoundError("Attendance record not found")
        return rec

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        self._cur.execute(
            f"SELECT {_COLUMNS} FROM attendance_records WHERE employee_id=%s AND work_date=%s",
            (int(employee_id), work_date),
        )
        r = fetchone(self._cur)
        return _to_record(r) if r else None

    def list_for_employee(
        self,
        employee_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["employee_id=%s"]
        params: list[object] = [int(employee_id)]
        if start_date is not None:
            clauses.append("work_date>=%s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("work_date<=%s")
            params.append(end_date)

        where = " AND ".join(clauses)
        self._cur.execute(
            f"SELECT {_COLUMNS} FROM attendance_records WHERE {where} ORDER BY work_date DESC",
            tuple(params),
        )
        return [_to_record(r) for r in fetchall(self._cur)]

    def upsert_checkin(
        self,
        *,
        employee_id: int,
        work_date: date,
        check_in_time: datetime,
        status: AttendanceStatus,
    ) -> AttendanceRecord:
        self._cur.execute(
            """
            INSERT INTO attendance_records(employee_id, work_date, check_in_time, status)
            VALUES(%s,%s,%s,%s) AS new
            ON DUPLICATE KEY UPDATE
                check_in_time=new.check_in_time,
                status=new.status,
                overridden_by=NULL,
                override_reason=NULL
            """,
            (int(employee_id), work_date, check_in_time, status.value),
        )
        return self._require(employee_id, work_date)

    def update_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        status: AttendanceStatus,
    ) -> AttendanceRecord:
        self._cur.execute(
            "UPDATE attendance_records SET check_out_time=%s, status=%s WHERE attendance_id=%s",
            (check_out_time, status.value, int(attendance_id)),
        )
        return self._get_by_id(attendance_id)

    def upsert_override(
        self,
        *,
        employee_id: int,
        work_date: date,
        status: AttendanceStatus,
        overridden_by: int,
        override_reason: Optional[str],
    ) -> AttendanceRecord:
        self._cur.execute(
            """
            INSERT INTO attendance_records(employee_id, work_date, status, overridden_by, override_reason)
            VALUES(%s,%s,%s,%s,%s) AS new
            ON DUPLICATE KEY UPDATE
                status=new.status,
                overridden_by=new.overridden_by,
                override_reason=new.override_reason
            """,
            (int(employee_id), work_date, status.value, int(overridden_by), override_reason),
        )
        return self._require(employee_id, work_date)

    def upsert_status(self, *, employee_id: int, work_date: date, status: AttendanceStatus) -> AttendanceRecord:
        self._cur.execute(
            """
            INSERT INTO attendance_records(employee_id, work_date, status)
            VALUES(%s,%s,%s) AS new
            ON DUPLICATE KEY UPDATE status=new.status
            """,
            (int(employee_id), work_date, status.value),
        )
        return self._require(employee_id, work_date)
