"""Leave approval as one unit of work.

Approving a leave touches two aggregates: the leave request (status and
approval receipt) and the attendance ledger (one LEAVE row per day in the
range). All of it, plus the audit entry, commits together or not at all.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..audit.service import record_action
from ..common.datetime_utils import iter_days
from ..core.constants import LEAVE_ENTITY
from ..core.enums import AttendanceStatus, AuditAction, LeaveStatus
from ..core.exceptions import ApproverNotAnEmployee, InvalidStateTransition, NotFoundError
from ..database.unit_of_work import UnitOfWorkFactory
from .model import LeaveRequest

logger = logging.getLogger(__name__)


class LeaveAttendanceSynchronizer:
    def __init__(self, uow_factory: UnitOfWorkFactory):
        self._uow = uow_factory

    def approve(self, *, leave_id: int, approver_user_id: int, comment: Optional[str] = None) -> LeaveRequest:
        with self._uow() as uow:
            # Row lock: a concurrent approval waits here, then sees APPROVED.
            leave = uow.leaves.get_by_id(int(leave_id), for_update=True)
            if not leave:
                raise NotFoundError("Leave request not found")
            if leave.status != LeaveStatus.PENDING:
                raise InvalidStateTransition(
                    f"Cannot approve a {leave.status.value} leave request",
                    current_status=leave.status.value,
                )

            approver = uow.employees.get_by_user_id(int(approver_user_id))
            if not approver:
                raise ApproverNotAnEmployee("Approver is not an employee")

            if not uow.leaves.transition_status(
                leave_id=leave.leave_id,
                from_status=LeaveStatus.PENDING,
                to_status=LeaveStatus.APPROVED,
            ):
                logger.warning("Leave %s changed state during approval", leave.leave_id)
                raise InvalidStateTransition("Leave request was already processed")

            uow.leaves.add_approval(leave_id=leave.leave_id, approved_by=approver.employee_id, comments=comment)

            for day in iter_days(leave.start_date, leave.end_date):
                uow.attendance.upsert_status(
                    employee_id=leave.employee_id,
                    work_date=day,
                    status=AttendanceStatus.LEAVE,
                )

            record_action(
                uow.audit,
                action=AuditAction.APPROVE,
                actor_user_id=approver_user_id,
                entity_type=LEAVE_ENTITY,
                entity_id=leave.leave_id,
                reason="Leave request approved",
                changes={"status": LeaveStatus.APPROVED.value, "comments": comment},
            )

            updated = uow.leaves.get_by_id(leave.leave_id)
            uow.commit()

        logger.info(
            "Leave %s approved by user %s; %s attendance day(s) marked LEAVE",
            leave.leave_id,
            approver_user_id,
            leave.days,
        )
        return updated
