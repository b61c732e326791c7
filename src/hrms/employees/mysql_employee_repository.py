from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.mysql_base import duplicate_key_as, fetchall, fetchone
from .model import Employee
from .repository import EmployeeRepository

_COLUMNS = "employee_id, user_id, first_name, last_name, department, designation, phone, joining_date"


def _to_employee(r: dict) -> Employee:
    return Employee(
        employee_id=int(r["employee_id"]),
        user_id=int(r["user_id"]),
        first_name=r["first_name"],
        last_name=r["last_name"],
        department=r.get("department"),
        designation=r.get("designation"),
        phone=r.get("phone"),
        joining_date=r.get("joining_date"),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, cur):
        self._cur = cur

    def get_by_id(self, employee_id: int, *, for_update: bool = False) -> Optional[Employee]:
        lock = " FOR UPDATE" if for_update else ""
        self._cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s{lock}", (int(employee_id),))
        r = fetchone(self._cur)
        return _to_employee(r) if r else None

    def get_by_user_id(self, user_id: int) -> Optional[Employee]:
        self._cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE user_id=%s", (int(user_id),))
        r = fetchone(self._cur)
        return _to_employee(r) if r else None

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
        with duplicate_key_as("User already has an employee profile"):
            self._cur.execute(
                """
                INSERT INTO employees(user_id, first_name, last_name, department, designation, phone, joining_date)
                VALUES(%s,%s,%s,%s,%s,%s,COALESCE(%s, CURRENT_DATE))
                """,
                (int(user_id), first_name, last_name, department, designation, phone, joining_date),
            )
        return int(self._cur.lastrowid)

    def update_profile(
        self,
        *,
        employee_id: int,
        department: Optional[str],
        designation: Optional[str],
        phone: Optional[str],
    ) -> bool:
        self._cur.execute(
            """
            UPDATE employees
            SET department=%s, designation=%s, phone=%s
            WHERE employee_id=%s
            """,
            (department, designation, phone, int(employee_id)),
        )
        return self._cur.rowcount > 0

    def list_all(self) -> Sequence[Employee]:
        self._cur.execute(f"SELECT {_COLUMNS} FROM employees ORDER BY last_name, first_name")
        return [_to_employee(r) for r in fetchall(self._cur)]
