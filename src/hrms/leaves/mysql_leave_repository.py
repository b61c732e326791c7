from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Iterable, Optional, Sequence

from ..core.enums import LeaveStatus, LeaveType
from ..core.exceptions import NotFoundError
from ..database.mysql_base import duplicate_key_as, fetchall, fetchone
from .model import LeaveApproval, LeaveRequest, PendingLeave
from .repository import LeaveRepository

_COLUMNS = "r.leave_id, r.employee_id, r.leave_type, r.start_date, r.end_date, r.reason, r.status, r.created_at"


def _to_leave(r: dict, approvals: Sequence[LeaveApproval] = ()) -> LeaveRequest:
    return LeaveRequest(
        leave_id=int(r["leave_id"]),
        employee_id=int(r["employee_id"]),
        leave_type=LeaveType(r["leave_type"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        reason=r.get("reason"),
        status=LeaveStatus(r["status"]),
        created_at=r["created_at"],
        approvals=tuple(approvals),
    )


def _to_approval(r: dict) -> LeaveApproval:
    return LeaveApproval(
        approval_id=int(r["approval_id"]),
        leave_id=int(r["leave_id"]),
        approved_by=int(r["approved_by"]),
        comments=r.get("comments"),
        created_at=r["created_at"],
        approver_name=r.get("approver_name"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, cur):
        self._cur = cur

    def _approvals_for(self, leave_ids: Sequence[int]) -> dict[int, list[LeaveApproval]]:
        out: dict[int, list[LeaveApproval]] = defaultdict(list)
        if not leave_ids:
            return out

        placeholders = ",".join(["%s"] * len(leave_ids))
        self._cur.execute(
            f"""
            SELECT a.approval_id, a.leave_id, a.approved_by, a.comments, a.created_at,
                   CONCAT(e.first_name, ' ', e.last_name) AS approver_name
            FROM leave_approvals a
            JOIN employees e ON e.employee_id = a.approved_by
            WHERE a.leave_id IN ({placeholders})
            ORDER BY a.created_at
            """,
            tuple(int(i) for i in leave_ids),
        )
        for r in fetchall(self._cur):
            out[int(r["leave_id"])].append(_to_approval(r))
        return out

    def create_leave(
        self,
        *,
        employee_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        reason: Optional[str],
    ) -> int:
        self._cur.execute(
            """
            INSERT INTO leave_requests(employee_id, leave_type, start_date, end_date, reason, status)
            VALUES(%s,%s,%s,%s,%s,%s)
            """,
            (int(employee_id), leave_type.value, start_date, end_date, reason, LeaveStatus.PENDING.value),
        )
        return int(self._cur.lastrowid)

    def get_by_id(self, leave_id: int, *, for_update: bool = False) -> Optional[LeaveRequest]:
        lock = " FOR UPDATE" if for_update else ""
        self._cur.execute(f"SELECT {_COLUMNS} FROM leave_requests r WHERE r.leave_id=%s{lock}", (int(leave_id),))
        r = fetchone(self._cur)
        if not r:
            return None
        approvals = self._approvals_for([int(r["leave_id"])])
        return _to_leave(r, approvals.get(int(r["leave_id"]), ()))

    def find_overlapping(
        self,
        *,
        employee_id: int,
        start_date: date,
        end_date: date,
        statuses: Iterable[LeaveStatus],
    ) -> Optional[LeaveRequest]:
        status_values = [LeaveStatus(s).value for s in statuses]
        placeholders = ",".join(["%s"] * len(status_values))
        self._cur.execute(
            f"""
            SELECT {_COLUMNS}
            FROM leave_requests r
            WHERE r.employee_id=%s
              AND r.status IN ({placeholders})
              AND r.start_date <= %s
              AND r.end_date >= %s
            ORDER BY r.start_date
            LIMIT 1
            """,
            (int(employee_id), *status_values, end_date, start_date),
        )
        r = fetchone(self._cur)
        return _to_leave(r) if r else None

    def list_for_employee(self, employee_id: int) -> Sequence[LeaveRequest]:
        self._cur.execute(
            f"""
            SELECT {_COLUMNS}
            FROM leave_requests r
            WHERE r.employee_id=%s
            ORDER BY r.created_at DESC, r.leave_id DESC
            """,
            (int(employee_id),),
        )
        rows = fetchall(self._cur)
        approvals = self._approvals_for([int(r["leave_id"]) for r in rows])
        return [_to_leave(r, approvals.get(int(r["leave_id"]), ())) for r in rows]

    def list_pending(self) -> Sequence[PendingLeave]:
        self._cur.execute(
            f"""
            SELECT {_COLUMNS}, e.first_name, e.last_name, u.email
            FROM leave_requests r
            JOIN employees e ON e.employee_id = r.employee_id
            JOIN users u ON u.user_id = e.user_id
            WHERE r.status=%s
            ORDER BY r.created_at DESC, r.leave_id DESC
            """,
            (LeaveStatus.PENDING.value,),
        )
        return [
            PendingLeave(
                leave=_to_leave(r),
                employee_name=f"{r['first_name']} {r['last_name']}".strip(),
                employee_email=r["email"],
            )
            for r in fetchall(self._cur)
        ]

    def transition_status(self, *, leave_id: int, from_status: LeaveStatus, to_status: LeaveStatus) -> bool:
        self._cur.execute(
            "UPDATE leave_requests SET status=%s WHERE leave_id=%s AND status=%s",
            (to_status.value, int(leave_id), from_status.value),
        )
        return self._cur.rowcount > 0

    def add_approval(self, *, leave_id: int, approved_by: int, comments: Optional[str]) -> LeaveApproval:
        with duplicate_key_as("This approver has already approved the leave request"):
            self._cur.execute(
                "INSERT INTO leave_approvals(leave_id, approved_by, comments) VALUES(%s,%s,%s)",
                (int(leave_id), int(approved_by), comments),
            )
        approval_id = int(self._cur.lastrowid)
        self._cur.execute(
            "SELECT approval_id, leave_id, approved_by, comments, created_at FROM leave_approvals WHERE approval_id=%s",
            (approval_id,),
        )
        r = fetchone(self._cur)
        if not r:
            raise NotFoundError("Leave approval not found")
        return _to_approval(r)
