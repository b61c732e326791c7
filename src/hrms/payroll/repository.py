from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from .model import PayrollRecord


class PayrollRepository(Protocol):
    def create_payroll(
        self,
        *,
        employee_id: int,
        month: date,
        base_salary: Decimal,
        allowances: Decimal,
        deductions: Decimal,
        net_salary: Decimal,
        effective_date: date,
    ) -> int:
        raise NotImplementedError

    def get_for_month(self, employee_id: int, month: date) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int) -> Sequence[PayrollRecord]:
        raise NotImplementedError
