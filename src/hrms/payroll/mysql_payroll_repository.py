from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ..database.mysql_base import duplicate_key_as, fetchall, fetchone
from .model import PayrollRecord
from .repository import PayrollRepository

_COLUMNS = "payroll_id, employee_id, month, base_salary, allowances, deductions, net_salary, effective_date"


def _to_payroll(r: dict) -> PayrollRecord:
    return PayrollRecord(
        payroll_id=int(r["payroll_id"]),
        employee_id=int(r["employee_id"]),
        month=r["month"],
        base_salary=Decimal(r["base_salary"]),
        allowances=Decimal(r["allowances"]),
        deductions=Decimal(r["deductions"]),
        net_salary=Decimal(r["net_salary"]),
        effective_date=r["effective_date"],
    )


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, cur):
        self._cur = cur

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
        with duplicate_key_as(f"Payroll already exists for this employee in {month:%Y-%m}"):
            self._cur.execute(
                """
                INSERT INTO payroll_records(
                    employee_id, month, base_salary, allowances, deductions, net_salary, effective_date
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (int(employee_id), month, base_salary, allowances, deductions, net_salary, effective_date),
            )
        return int(self._cur.lastrowid)

    def get_for_month(self, employee_id: int, month: date) -> Optional[PayrollRecord]:
        self._cur.execute(
            f"SELECT {_COLUMNS} FROM payroll_records WHERE employee_id=%s AND month=%s",
            (int(employee_id), month),
        )
        r = fetchone(self._cur)
        return _to_payroll(r) if r else None

    def list_for_employee(self, employee_id: int) -> Sequence[PayrollRecord]:
        self._cur.execute(
            f"SELECT {_COLUMNS} FROM payroll_records WHERE employee_id=%s ORDER BY month DESC",
            (int(employee_id),),
        )
        return [_to_payroll(r) for r in fetchall(self._cur)]
