from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..audit.service import record_action
from ..common.datetime_utils import parse_year_month
from ..common.validators import require_non_negative_amount
from ..core.constants import PAYROLL_ENTITY
from ..core.enums import AuditAction
from ..core.exceptions import ConflictError, NotFoundError
from ..database.unit_of_work import UnitOfWorkFactory
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import PayrollRecord

logger = logging.getLogger(__name__)


class PayrollService:
    def __init__(self, uow_factory: UnitOfWorkFactory, *, calculator: Optional[PayrollCalculator] = None):
        self._uow = uow_factory
        self._calculator = calculator or StandardPayrollCalculator()

    def create(
        self,
        *,
        employee_id: int,
        base_salary,
        effective_date: date,
        actor_user_id: int,
        allowances=0,
        deductions=0,
    ) -> PayrollRecord:
        base = require_non_negative_amount(base_salary, "Base salary")
        allow = require_non_negative_amount(allowances, "Allowances")
        deduct = require_non_negative_amount(deductions, "Deductions")
        net = self._calculator.net_salary(base_salary=base, allowances=allow, deductions=deduct)
        month = effective_date.replace(day=1)

        with self._uow() as uow:
            if not uow.employees.get_by_id(int(employee_id)):
                raise NotFoundError("Employee not found")
            if uow.payroll.get_for_month(int(employee_id), month):
                raise ConflictError(f"Payroll already exists for this employee in {month:%Y-%m}")

            payroll_id = uow.payroll.create_payroll(
                employee_id=int(employee_id),
                month=month,
                base_salary=base,
                allowances=allow,
                deductions=deduct,
                net_salary=net,
                effective_date=effective_date,
            )
            record_action(
                uow.audit,
                action=AuditAction.CREATE,
                actor_user_id=actor_user_id,
                entity_type=PAYROLL_ENTITY,
                entity_id=payroll_id,
                reason="Payroll created",
                changes={
                    "baseSalary": base,
                    "allowances": allow,
                    "deductions": deduct,
                    "netSalary": net,
                },
            )
            record = uow.payroll.get_for_month(int(employee_id), month)
            uow.commit()

        logger.info("Payroll %s created for employee %s (%s)", payroll_id, employee_id, f"{month:%Y-%m}")
        return record

    def list_for_employee(self, employee_id: int) -> Sequence[PayrollRecord]:
        with self._uow() as uow:
            return uow.payroll.list_for_employee(int(employee_id))

    def for_month(self, employee_id: int, year_month: str) -> PayrollRecord:
        year, month = parse_year_month(year_month)
        with self._uow() as uow:
            record = uow.payroll.get_for_month(int(employee_id), date(year, month, 1))
        if not record:
            raise NotFoundError(f"No payroll record for {year_month}")
        return record
