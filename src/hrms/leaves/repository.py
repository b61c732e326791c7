from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import LeaveStatus, LeaveType
from .model import LeaveApproval, LeaveRequest, PendingLeave


class LeaveRepository(Protocol):
    def create_leave(
        self,
        *,
        employee_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        reason: Optional[str],
    ) -> int:
        raise NotImplementedError

    def get_by_id(self, leave_id: int, *, for_update: bool = False) -> Optional[LeaveRequest]:
        """Return the request with its approvals.

        ``for_update`` locks the row until the unit of work ends.
        """

        raise NotImplementedError

    def find_overlapping(
        self,
        *,
        employee_id: int,
        start_date: date,
        end_date: date,
        statuses: Iterable[LeaveStatus],
    ) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int) -> Sequence[LeaveRequest]:
        """Newest first, approvals nested."""

        raise NotImplementedError

    def list_pending(self) -> Sequence[PendingLeave]:
        raise NotImplementedError

    def transition_status(self, *, leave_id: int, from_status: LeaveStatus, to_status: LeaveStatus) -> bool:
        """Conditional update; False when the row was not in ``from_status``."""

        raise NotImplementedError

    def add_approval(self, *, leave_id: int, approved_by: int, comments: Optional[str]) -> LeaveApproval:
        raise NotImplementedError
