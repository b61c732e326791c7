from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import AuditAction
from .model import AuditLogEntry


class AuditRepository(Protocol):
    """Append-only audit trail. There is no update or delete."""

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
        raise NotImplementedError

    def list_for_entity(self, *, entity_type: str, entity_id: int) -> Sequence[AuditLogEntry]:
        raise NotImplementedError
