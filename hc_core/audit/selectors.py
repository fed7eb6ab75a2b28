# hc_core/audit/selectors.py
from __future__ import annotations

from uuid import UUID

from django.db.models import QuerySet

from hc_core.audit.models import AuditLogEntry


def audit_entries_qs(*, tenant_id: UUID) -> QuerySet[AuditLogEntry]:
    return AuditLogEntry.objects.filter(tenant_id=tenant_id).order_by("-occurred_at")


def entity_ids_with_action(*, entity_type: str, action: str, entity_ids) -> set[UUID]:
    return set(
        AuditLogEntry.objects.filter(
            entity_type=entity_type,
            action=action,
            entity_id__in=list(entity_ids),
        ).values_list("entity_id", flat=True)
    )
