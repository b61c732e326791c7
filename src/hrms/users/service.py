from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..audit.service import record_action
from ..common.validators import optional_text, require_min_length, require_non_empty
from ..core.constants import EMPLOYEE_ENTITY, MIN_PASSWORD_LENGTH, USER_ENTITY
from ..core.enums import AuditAction, Role
from ..core.exceptions import AuthenticationError, ConflictError, NotFoundError, ValidationError
from ..database.unit_of_work import UnitOfWorkFactory
from ..employees.model import Employee
from .model import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: int
    email: str
    role: Role
    employee_id: Optional[int]
    full_name: str


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, uow_factory: UnitOfWorkFactory):
        self._uow = uow_factory

    def authenticate(self, email: str, password: str) -> SessionUser:
        email = (email or "").strip().lower()
        with self._uow() as uow:
            user = uow.users.get_by_email(email)
            if not user or not user.is_active:
                raise AuthenticationError("Invalid email or password")

            try:
                ok = check_password_hash(user.password_hash, password or "")
            except (TypeError, ValueError):
                # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
                ok = False
            if not ok:
                raise AuthenticationError("Invalid email or password")

            employee = uow.employees.get_by_user_id(user.user_id)

        return SessionUser(
            user_id=user.user_id,
            email=user.email,
            role=user.role,
            employee_id=employee.employee_id if employee else None,
            full_name=employee.full_name if employee else user.email,
        )


class UserService:
    """Use case: create accounts. A User and its Employee are created together."""

    def __init__(self, uow_factory: UnitOfWorkFactory):
        self._uow = uow_factory

    def register_employee(
        self,
        *,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        role: Role = Role.EMPLOYEE,
        department: Optional[str] = None,
        designation: Optional[str] = None,
        phone: Optional[str] = None,
        actor_user_id: Optional[int] = None,
    ) -> Employee:
        email = require_non_empty(email, "Email").lower()
        first_name = require_non_empty(first_name, "First name")
        last_name = require_non_empty(last_name, "Last name")
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        role = Role(role)

        with self._uow() as uow:
            if uow.users.get_by_email(email):
                raise ConflictError("Email is already registered")

            user_id = uow.users.create_user(
                email=email,
                password_hash=generate_password_hash(password),
                role=role,
            )
            employee_id = uow.employees.create_employee(
                user_id=user_id,
                first_name=first_name,
                last_name=last_name,
                department=optional_text(department),
                designation=optional_text(designation),
                phone=optional_text(phone),
            )
            if actor_user_id is not None:
                record_action(
                    uow.audit,
                    action=AuditAction.CREATE,
                    actor_user_id=actor_user_id,
                    entity_type=EMPLOYEE_ENTITY,
                    entity_id=employee_id,
                    reason="Employee account created",
                    changes={"email": email, "role": role.value},
                )
            employee = uow.employees.get_by_id(employee_id)
            uow.commit()

        logger.info("Created %s account %s (employee %s)", role.value, email, employee_id)
        return employee

    def set_active(self, *, user_id: int, is_active: bool, actor_user_id: int) -> User:
        """Enable or disable login for an account. Admins cannot disable themselves."""

        if int(user_id) == int(actor_user_id) and not is_active:
            raise ValidationError("You cannot deactivate your own account")

        with self._uow() as uow:
            before = uow.users.get_by_id(int(user_id))
            if not before:
                raise NotFoundError("User not found")

            uow.users.set_active(before.user_id, is_active=bool(is_active))
            record_action(
                uow.audit,
                action=AuditAction.UPDATE,
                actor_user_id=actor_user_id,
                entity_type=USER_ENTITY,
                entity_id=before.user_id,
                reason="Account activated" if is_active else "Account deactivated",
                changes={"before": {"is_active": before.is_active}, "after": {"is_active": bool(is_active)}},
            )
            user = uow.users.get_by_id(before.user_id)
            uow.commit()

        logger.info("User %s is_active=%s set by user %s", user_id, bool(is_active), actor_user_id)
        return user
