from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal


@dataclass(frozen=True)
class PayrollRecord:
    """One salary record per employee per month (``month`` is the 1st)."""

    payroll_id: int
    employee_id: int
    month: date
    base_salary: Decimal
    allowances: Decimal
    deductions: Decimal
    net_salary: Decimal
    effective_date: date
