from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

from werkzeug.security import generate_password_hash

from ..core.enums import Role
from .connection import DBConfig, DatabaseConnection
from .unit_of_work import MySQLUnitOfWork

logger = logging.getLogger(__name__)

DEMO_ACCOUNTS = (
    # email, password, role, first name, last name, department, designation
    ("admin@hrms.local", "admin123", Role.ADMIN, "Admin", "Demo", "HR", "HR Manager"),
    ("employee@hrms.local", "employee123", Role.EMPLOYEE, "Jane", "Doe", "Engineering", "Developer"),
)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema files (handles ';' inside quotes and '--' comments).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    lines = [ln for ln in sql.splitlines() if not ln.lstrip().startswith("--")]
    for ch in "\n".join(lines):
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
            buf.append(ch)
            continue

        if ch == '"' and not in_single:
            in_double = not in_double
            buf.append(ch)
            continue

        if ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = DatabaseConnection(target).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)

    schema_path = Path(schema_path)
    sql = _strip_create_db_and_use(schema_path.read_text(encoding="utf-8"))

    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def ensure_demo_users(db_config: dict) -> None:
    """Create the demo admin and employee accounts if they are missing.

    The admin also gets an employee profile so it can approve leave requests.
    """

    with MySQLUnitOfWork(DatabaseConnection(DBConfig.from_dict(db_config))) as uow:
        for email, password, role, first_name, last_name, department, designation in DEMO_ACCOUNTS:
            user = uow.users.get_by_email(email)
            user_id = user.user_id if user else uow.users.create_user(
                email=email,
                password_hash=generate_password_hash(password),
                role=role,
            )
            if not uow.employees.get_by_user_id(user_id):
                uow.employees.create_employee(
                    user_id=user_id,
                    first_name=first_name,
                    last_name=last_name,
                    department=department,
                    designation=designation,
                )
                logger.info("Demo account %s ready", email)
        uow.commit()


def list_tables(db_config: dict) -> list[str]:
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
