"""Capability checks shared by every entry point.

Services assume the caller already authorized the action; controllers call
these helpers before invoking any core operation.
"""

from __future__ import annotations

from typing import Optional, Protocol

from ..core.enums import Role
from ..core.exceptions import AuthorizationError


class Principal(Protocol):
    user_id: int
    role: Role
    employee_id: Optional[int]


def is_admin(principal: Principal) -> bool:
    return Role(principal.role) == Role.ADMIN


def require_role(principal: Principal, *roles: Role) -> None:
    if Role(principal.role) not in roles:
        raise AuthorizationError("You do not have permission to perform this action")


def require_ownership_or_admin(principal: Principal, employee_id: int) -> None:
    if is_admin(principal):
        return
    if principal.employee_id is None or int(principal.employee_id) != int(employee_id):
        raise AuthorizationError("You can only access your own records")
