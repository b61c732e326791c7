from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.service import AttendanceService
from .audit.service import AuditService
from .database.connection import DBConfig, DatabaseConnection
from .database.unit_of_work import UnitOfWorkFactory, mysql_uow_factory
from .employees.service import EmployeeService
from .leaves.service import LeaveService
from .leaves.synchronizer import LeaveAttendanceSynchronizer
from .payroll.calculator.standard_calculator import StandardPayrollCalculator
from .payroll.service import PayrollService
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    uow_factory: UnitOfWorkFactory

    auth_service: AuthService
    audit_service: AuditService
    user_service: UserService
    employee_service: EmployeeService
    attendance_service: AttendanceService
    leave_service: LeaveService
    payroll_service: PayrollService


def build_container(*, db_config: Optional[dict] = None, uow_factory: Optional[UnitOfWorkFactory] = None) -> Container:
    """Wire services to a unit-of-work factory.

    Pass ``db_config`` for MySQL, or ``uow_factory`` to supply another store.
    """

    if uow_factory is None:
        if db_config is None:
            raise ValueError("build_container needs db_config or uow_factory")
        uow_factory = mysql_uow_factory(DatabaseConnection(DBConfig.from_dict(db_config)))

    return Container(
        uow_factory=uow_factory,
        auth_service=AuthService(uow_factory),
        audit_service=AuditService(uow_factory),
        user_service=UserService(uow_factory),
        employee_service=EmployeeService(uow_factory),
        attendance_service=AttendanceService(uow_factory),
        leave_service=LeaveService(uow_factory, synchronizer=LeaveAttendanceSynchronizer(uow_factory)),
        payroll_service=PayrollService(uow_factory, calculator=StandardPayrollCalculator()),
    )
