from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..audit.service import record_action
from ..common.validators import optional_text, require_non_empty
from ..core.constants import LEAVE_ENTITY
from ..core.enums import AuditAction, LeaveStatus, LeaveType
from ..core.exceptions import (
    InvalidDateRange,
    InvalidStateTransition,
    NotFoundError,
    OverlappingLeaveRequest,
    ValidationError,
)
from ..database.unit_of_work import UnitOfWorkFactory
from .model import LeaveRequest, PendingLeave
from .synchronizer import LeaveAttendanceSynchronizer

logger = logging.getLogger(__name__)

# Requests in these states block new overlapping requests.
BLOCKING_STATUSES = (LeaveStatus.PENDING, LeaveStatus.APPROVED)


class LeaveService:
    """Use cases for the leave request workflow.

    PENDING -> APPROVED | REJECTED, both terminal. Approval is delegated to
    LeaveAttendanceSynchronizer because it also rewrites attendance.
    """

    def __init__(self, uow_factory: UnitOfWorkFactory, *, synchronizer: Optional[LeaveAttendanceSynchronizer] = None):
        self._uow = uow_factory
        self._synchronizer = synchronizer or LeaveAttendanceSynchronizer(uow_factory)

    @staticmethod
    def _parse_leave_type(value) -> LeaveType:
        try:
            return LeaveType(str(value).strip().upper())
        except ValueError:
            allowed = ", ".join(t.value for t in LeaveType)
            raise ValidationError(f"Leave type must be one of: {allowed}")

    def apply(
        self,
        *,
        employee_id: int,
        leave_type,
        start_date: date,
        end_date: date,
        reason: Optional[str] = None,
    ) -> LeaveRequest:
        leave_type = self._parse_leave_type(leave_type)
        if start_date > end_date:
            raise InvalidDateRange("Start date must be on or before end date")

        with self._uow() as uow:
            # Lock the employee row so concurrent applications serialize on the overlap check.
            if not uow.employees.get_by_id(int(employee_id), for_update=True):
                raise NotFoundError("Employee not found")

            clash = uow.leaves.find_overlapping(
                employee_id=int(employee_id),
                start_date=start_date,
                end_date=end_date,
                statuses=BLOCKING_STATUSES,
            )
            if clash:
                raise OverlappingLeaveRequest(
                    "You already have a leave request that overlaps with these dates "
                    f"({clash.start_date.isoformat()} to {clash.end_date.isoformat()}, {clash.status.value})"
                )

            leave_id = uow.leaves.create_leave(
                employee_id=int(employee_id),
                leave_type=leave_type,
                start_date=start_date,
                end_date=end_date,
                reason=optional_text(reason),
            )
            leave = uow.leaves.get_by_id(leave_id)
            uow.commit()

        logger.info(
            "Employee %s applied for %s leave %s..%s (leave %s)",
            employee_id,
            leave_type.value,
            start_date.isoformat(),
            end_date.isoformat(),
            leave_id,
        )
        return leave

    def get(self, leave_id: int) -> LeaveRequest:
        with self._uow() as uow:
            leave = uow.leaves.get_by_id(int(leave_id))
        if not leave:
            raise NotFoundError("Leave request not found")
        return leave

    def list_mine(self, employee_id: int) -> Sequence[LeaveRequest]:
        with self._uow() as uow:
            return uow.leaves.list_for_employee(int(employee_id))

    def list_pending(self) -> Sequence[PendingLeave]:
        with self._uow() as uow:
            return uow.leaves.list_pending()

    def approve(self, *, leave_id: int, approver_user_id: int, comment: Optional[str] = None) -> LeaveRequest:
        return self._synchronizer.approve(
            leave_id=leave_id,
            approver_user_id=approver_user_id,
            comment=optional_text(comment),
        )

    def reject(self, *, leave_id: int, approver_user_id: int, reason: str) -> LeaveRequest:
        reason = require_non_empty(reason, "Rejection reason")

        with self._uow() as uow:
            leave = uow.leaves.get_by_id(int(leave_id), for_update=True)
            if not leave:
                raise NotFoundError("Leave request not found")
            if leave.status != LeaveStatus.PENDING:
                raise InvalidStateTransition(
                    f"Cannot reject a {leave.status.value} leave request",
                    current_status=leave.status.value,
                )

            if not uow.leaves.transition_status(
                leave_id=leave.leave_id,
                from_status=LeaveStatus.PENDING,
                to_status=LeaveStatus.REJECTED,
            ):
                logger.warning("Leave %s changed state during rejection", leave.leave_id)
                raise InvalidStateTransition("Leave request was already processed")

            record_action(
                uow.audit,
                action=AuditAction.REJECT,
                actor_user_id=approver_user_id,
                entity_type=LEAVE_ENTITY,
                entity_id=leave.leave_id,
                reason=reason,
                changes={"status": LeaveStatus.REJECTED.value},
            )
            updated = uow.leaves.get_by_id(leave.leave_id)
            uow.commit()

        logger.info("Leave %s rejected by user %s", leave.leave_id, approver_user_id)
        return updated
