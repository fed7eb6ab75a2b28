# hc_core/audit/api/views.py
from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import generics

from hc_core.audit.api.serializers import AuditLogEntrySerializer
from hc_core.audit.filters import AuditLogEntryFilter
from hc_core.audit.models import AuditLogEntry
from hc_core.audit.selectors import audit_entries_qs
from hc_core.iam import guard
from hc_core.iam.identity import from_request
from hc_core.iam.selectors import resolve_role


@extend_schema(tags=["Audit"])
class AuditLogListView(generics.ListAPIView):
    """
    Audit timeline for the caller's tenant. Tenant admins only.
    """
    serializer_class = AuditLogEntrySerializer
    filterset_class = AuditLogEntryFilter
    ordering_fields = ["occurred_at"]
    queryset = AuditLogEntry.objects.none()

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return AuditLogEntry.objects.none()

        identity = guard.require_identity(from_request(self.request))
        guard.require(
            identity,
            guard.GuardAction.READ_AUDIT_LOG,
            tenant_id=identity.tenant_id,
            resolved_role=resolve_role(identity),
        )
        return audit_entries_qs(tenant_id=identity.tenant_id)
