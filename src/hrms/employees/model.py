from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class Employee:
    """Domain entity: a person tracked for attendance, leave and payroll.

    At most one Employee exists per User.
    """

    employee_id: int
    user_id: int
    first_name: str
    last_name: str
    department: Optional[str] = None
    designation: Optional[str] = None
    phone: Optional[str] = None
    joining_date: Optional[date] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
