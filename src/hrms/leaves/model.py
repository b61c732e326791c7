from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import LeaveStatus, LeaveType


@dataclass(frozen=True)
class LeaveApproval:
    """Immutable receipt written when a leave request is approved."""

    approval_id: int
    leave_id: int
    approved_by: int
    comments: Optional[str]
    created_at: datetime
    approver_name: Optional[str] = None


@dataclass(frozen=True)
class LeaveRequest:
    leave_id: int
    employee_id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    reason: Optional[str]
    status: LeaveStatus
    created_at: datetime
    approvals: tuple[LeaveApproval, ...] = ()

    def overlaps(self, start_date: date, end_date: date) -> bool:
        return self.start_date <= end_date and self.end_date >= start_date

    @property
    def days(self) -> int:
        return (self.end_date - self.start_date).days + 1


@dataclass(frozen=True)
class PendingLeave:
    """Read-model for the admin queue (joined with the employee identity)."""

    leave: LeaveRequest
    employee_name: str
    employee_email: str
