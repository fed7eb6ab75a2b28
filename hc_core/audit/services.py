# hc_core/audit/services.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from django.db import transaction
from django.utils import timezone

from hc_core.audit.models import AuditLogEntry


@dataclass(frozen=True)
class AuditRecord:
    id: UUID
    tenant_id: UUID
    actor_user_id: str
    actor_role: str
    action: str
    entity_type: str
    entity_id: UUID
    occurred_at: datetime
    details: Dict[str, Any]
    origin: str | None


class AuditService:
    """
    Central audit writer.
    Append-only: there is no update or delete path.
    """

    @staticmethod
    @transaction.atomic
    def append(
        *,
        tenant_id: UUID,
        actor_user_id: str,
        actor_role: str,
        action: str,
        entity_type: str,
        entity_id: UUID,
        details: Optional[Dict[str, Any]] = None,
        occurred_at: datetime | None = None,
        origin: str | None = None,
    ) -> AuditRecord:
        if origin:
            origin = origin[: AuditLogEntry._meta.get_field("origin").max_length]

        entry = AuditLogEntry.objects.create(
            tenant_id=tenant_id,
            actor_user_id=actor_user_id,
            actor_role=actor_role,
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            details=details or {},
            occurred_at=occurred_at or timezone.now(),
            origin=origin,
        )

        return AuditRecord(
            id=entry.id,
            tenant_id=entry.tenant_id,
            actor_user_id=entry.actor_user_id,
            actor_role=entry.actor_role,
            action=entry.action,
            entity_type=entry.entity_type,
            entity_id=entry.entity_id,
            occurred_at=entry.occurred_at,
            details=entry.details,
            origin=entry.origin,
        )
