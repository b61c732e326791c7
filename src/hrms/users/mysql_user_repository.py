from __future__ import annotations

from typing import Optional

from ..core.enums import Role
from ..database.mysql_base import duplicate_key_as, fetchone
from .model import User
from .repository import UserRepository


def _to_user(r: dict) -> User:
    return User(
        user_id=int(r["user_id"]),
        email=r["email"],
        password_hash=r["password_hash"],
        role=Role(r["role"]),
        is_active=bool(r.get("is_active", 1)),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, cur):
        self._cur = cur

    def get_by_id(self, user_id: int) -> Optional[User]:
        self._cur.execute(
            "SELECT user_id, email, password_hash, role, is_active FROM users WHERE user_id=%s",
            (int(user_id),),
        )
        r = fetchone(self._cur)
        return _to_user(r) if r else None

    def get_by_email(self, email: str) -> Optional[User]:
        self._cur.execute(
            "SELECT user_id, email, password_hash, role, is_active FROM users WHERE email=%s",
            (email,),
        )
        r = fetchone(self._cur)
        return _to_user(r) if r else None

    def create_user(self, *, email: str, password_hash: str, role: Role) -> int:
        with duplicate_key_as("Email is already registered"):
            self._cur.execute(
                "INSERT INTO users(email, password_hash, role) VALUES(%s,%s,%s)",
                (email, password_hash, Role(role).value),
            )
        return int(self._cur.lastrowid)

    def set_active(self, user_id: int, *, is_active: bool) -> bool:
        self._cur.execute(
            "UPDATE users SET is_active=%s WHERE user_id=%s",
            (1 if is_active else 0, int(user_id)),
        )
        return self._cur.rowcount > 0
