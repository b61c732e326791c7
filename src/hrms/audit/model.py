from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AuditAction


@dataclass(frozen=True)
class AuditLogEntry:
    """Append-only record of a mutating action.

    ``changes`` holds the JSON-serialized before/after payload.
    """

    audit_id: int
    action: AuditAction
    actor_user_id: int
    entity_type: str
    entity_id: int
    reason: Optional[str]
    changes: Optional[str]
    created_at: datetime
