from __future__ import annotations

import json
from typing import Any, Optional, Sequence

from ..core.constants import AUDITED_ENTITIES
from ..core.enums import AuditAction
from ..core.exceptions import ValidationError
from ..database.unit_of_work import UnitOfWorkFactory
from .model import AuditLogEntry
from .repository import AuditRepository


def serialize_changes(changes: Optional[dict[str, Any]]) -> Optional[str]:
    if changes is None:
        return None
    return json.dumps(changes, default=str, sort_keys=True)


def record_action(
    audit: AuditRepository,
    *,
    action: AuditAction,
    actor_user_id: int,
    entity_type: str,
    entity_id: int,
    reason: Optional[str] = None,
    changes: Optional[dict[str, Any]] = None,
) -> int:
    """Append one audit entry through the caller's unit of work."""

    return audit.append(
        action=action,
        actor_user_id=int(actor_user_id),
        entity_type=entity_type,
        entity_id=int(entity_id),
        reason=reason,
        changes=serialize_changes(changes),
    )


class AuditService:
    """Read side of the audit trail (admin only)."""

    def __init__(self, uow_factory: UnitOfWorkFactory):
        self._uow = uow_factory

    def for_entity(self, entity_type: str, entity_id: int) -> Sequence[AuditLogEntry]:
        if entity_type not in AUDITED_ENTITIES:
            raise ValidationError(f"Entity type must be one of: {', '.join(AUDITED_ENTITIES)}")
        with self._uow() as uow:
            return uow.audit.list_for_entity(entity_type=entity_type, entity_id=int(entity_id))
