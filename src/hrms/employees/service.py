from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..audit.service import record_action
from ..common.validators import optional_text
from ..core.constants import EMPLOYEE_ENTITY
from ..core.enums import AuditAction
from ..core.exceptions import NotFoundError
from ..database.unit_of_work import UnitOfWorkFactory
from .model import Employee

logger = logging.getLogger(__name__)


class EmployeeService:
    def __init__(self, uow_factory: UnitOfWorkFactory):
        self._uow = uow_factory

    def get(self, employee_id: int) -> Employee:
        with self._uow() as uow:
            employee = uow.employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def get_for_user(self, user_id: int) -> Employee:
        with self._uow() as uow:
            employee = uow.employees.get_by_user_id(int(user_id))
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def list_all(self) -> Sequence[Employee]:
        with self._uow() as uow:
            return uow.employees.list_all()

    def update_profile(
        self,
        *,
        employee_id: int,
        actor_user_id: int,
        department: Optional[str] = None,
        designation: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> Employee:
        with self._uow() as uow:
            before = uow.employees.get_by_id(int(employee_id))
            if not before:
                raise NotFoundError("Employee not found")

            after = {
                "department": optional_text(department) if department is not None else before.department,
                "designation": optional_text(designation) if designation is not None else before.designation,
                "phone": optional_text(phone) if phone is not None else before.phone,
            }
            uow.employees.update_profile(employee_id=before.employee_id, **after)
            record_action(
                uow.audit,
                action=AuditAction.UPDATE,
                actor_user_id=actor_user_id,
                entity_type=EMPLOYEE_ENTITY,
                entity_id=before.employee_id,
                reason="Employee profile updated",
                changes={
                    "before": {
                        "department": before.department,
                        "designation": before.designation,
                        "phone": before.phone,
                    },
                    "after": after,
                },
            )
            employee = uow.employees.get_by_id(before.employee_id)
            uow.commit()

        logger.info("Employee %s profile updated by user %s", employee_id, actor_user_id)
        return employee
