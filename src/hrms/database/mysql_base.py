from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from ..core.exceptions import DuplicateRecord


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def is_duplicate_key(err: IntegrityError) -> bool:
    return getattr(err, "errno", None) == errorcode.ER_DUP_ENTRY


@contextmanager
def duplicate_key_as(message: str) -> Iterator[None]:
    """Translate a unique-key violation inside the block into DuplicateRecord."""

    try:
        yield
    except IntegrityError as err:
        if is_duplicate_key(err):
            raise DuplicateRecord(message) from err
        raise
