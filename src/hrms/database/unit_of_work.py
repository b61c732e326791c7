from __future__ import annotations

from typing import Callable, Protocol

from ..attendance.mysql_attendance_repository import MySQLAttendanceRepository
from ..attendance.repository import AttendanceRepository
from ..audit.mysql_audit_repository import MySQLAuditRepository
from ..audit.repository import AuditRepository
from ..employees.mysql_employee_repository import MySQLEmployeeRepository
from ..employees.repository import EmployeeRepository
from ..leaves.mysql_leave_repository import MySQLLeaveRepository
from ..leaves.repository import LeaveRepository
from ..payroll.mysql_payroll_repository import MySQLPayrollRepository
from ..payroll.repository import PayrollRepository
from ..users.mysql_user_repository import MySQLUserRepository
from ..users.repository import UserRepository
from .connection import DatabaseConnection


class UnitOfWork(Protocol):
    """One atomic unit against the store.

    Usage::

        with uow_factory() as uow:
            ...
            uow.commit()

    Leaving the block without ``commit()`` (or by exception) rolls back.
    """

    users: UserRepository
    employees: EmployeeRepository
    attendance: AttendanceRepository
    leaves: LeaveRepository
    audit: AuditRepository
    payroll: PayrollRepository

    def __enter__(self) -> "UnitOfWork":
        raise NotImplementedError

    def __exit__(self, exc_type, exc, tb) -> None:
        raise NotImplementedError

    def commit(self) -> None:
        raise NotImplementedError

    def rollback(self) -> None:
        raise NotImplementedError


UnitOfWorkFactory = Callable[[], UnitOfWork]


class MySQLUnitOfWork(UnitOfWork):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory
        self._conn = None
        self._cur = None
        self._committed = False

    def __enter__(self) -> "MySQLUnitOfWork":
        self._conn = self._conn_factory.connect()
        self._conn.start_transaction()
        self._cur = self._conn.cursor(dictionary=True, buffered=True)
        self._committed = False

        self.users = MySQLUserRepository(self._cur)
        self.employees = MySQLEmployeeRepository(self._cur)
        self.attendance = MySQLAttendanceRepository(self._cur)
        self.leaves = MySQLLeaveRepository(self._cur)
        self.audit = MySQLAuditRepository(self._cur)
        self.payroll = MySQLPayrollRepository(self._cur)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if exc_type is not None or not self._committed:
                self.rollback()
        finally:
            try:
                self._cur.close()
            finally:
                self._conn.close()
                self._conn = None
                self._cur = None

    def commit(self) -> None:
        self._conn.commit()
        self._committed = True

    def rollback(self) -> None:
        if self._conn is not None:
            self._conn.rollback()


def mysql_uow_factory(conn_factory: DatabaseConnection) -> UnitOfWorkFactory:
    def factory() -> UnitOfWork:
        return MySQLUnitOfWork(conn_factory)

    return factory
