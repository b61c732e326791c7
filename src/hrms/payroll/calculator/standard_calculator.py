from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from .base import PayrollCalculator

_CENTS = Decimal("0.01")


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: base + allowances - deductions, rounded to cents."""

    def net_salary(self, *, base_salary: Decimal, allowances: Decimal, deductions: Decimal) -> Decimal:
        return (base_salary + allowances - deductions).quantize(_CENTS, rounding=ROUND_HALF_UP)
