from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import Employee


class EmployeeRepository(Protocol):
    def get_by_id(self, employee_id: int, *, for_update: bool = False) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_user_id(self, user_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def create_employee(
        self,
        *,
        user_id: int,
        first_name: str,
        last_name: str,
        department: Optional[str] = None,
        designation: Optional[str] = None,
        phone: Optional[str] = None,
        joining_date: Optional[date] = None,
    ) -> int:
        raise NotImplementedError

    def update_profile(
        self,
        *,
        employee_id: int,
        department: Optional[str],
        designation: Optional[str],
        phone: Optional[str],
    ) -> bool:
        raise NotImplementedError

    def list_all(self) -> Sequence[Employee]:
        raise NotImplementedError
