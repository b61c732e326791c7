from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import AuditAction
from ..database.mysql_base import fetchall
from .model import AuditLogEntry
from .repository import AuditRepository


class MySQLAuditRepository(AuditRepository):
    def __init__(self, cur):
        self._cur = cur

    def append(
        self,
        *,
        action: AuditAction,
        actor_user_id: int,
        entity_type: str,
        entity_id: int,
        reason: Optional[str] = None,
        changes: Optional[str] = None,
    ) -> int:
        self._cur.execute(
            """
            INSERT INTO audit_logs(action, actor_user_id, entity_type, entity_id, reason, changes)
            VALUES(%s,%s,%s,%s,%s,%s)
            """,
            (action.value, int(actor_user_id), entity_type, int(entity_id), reason, changes),
        )
        return int(self._cur.lastrowid)

    def list_for_entity(self, *, entity_type: str, entity_id: int) -> Sequence[AuditLogEntry]:
        self._cur.execute(
            """
            SELECT audit_id, action, actor_user_id, entity_type, entity_id, reason, changes, created_at
            FROM audit_logs
            WHERE entity_type=%s AND entity_id=%s
            ORDER BY created_at, audit_id
            """,
            (entity_type, int(entity_id)),
        )
        return [
            AuditLogEntry(
                audit_id=int(r["audit_id"]),
                action=AuditAction(r["action"]),
                actor_user_id=int(r["actor_user_id"]),
                entity_type=r["entity_type"],
                entity_id=int(r["entity_id"]),
                reason=r.get("reason"),
                changes=r.get("changes"),
                created_at=r["created_at"],
            )
            for r in fetchall(self._cur)
        ]
