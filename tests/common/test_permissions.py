from dataclasses import dataclass
from typing import Optional

import pytest

from hrms.common.permissions import is_admin, require_ownership_or_admin, require_role
from hrms.core.enums import Role
from hrms.core.exceptions import AuthorizationError


@dataclass
class _P:
    user_id: int
    role: Role
    employee_id: Optional[int]


def test_admin_can_access_anything():
    admin = _P(1, Role.ADMIN, None)
    assert is_admin(admin)
    require_role(admin, Role.ADMIN)
    require_ownership_or_admin(admin, 77)


def test_employee_limited_to_own_records():
    emp = _P(2, Role.EMPLOYEE, 10)
    require_ownership_or_admin(emp, 10)
    with pytest.raises(AuthorizationError):
        require_ownership_or_admin(emp, 11)
    with pytest.raises(AuthorizationError):
        require_role(emp, Role.ADMIN)


def test_role_accepts_plain_strings():
    assert is_admin(_P(1, "ADMIN", None))
    with pytest.raises(AuthorizationError):
        require_ownership_or_admin(_P(3, "EMPLOYEE", None), 1)
