# hc_core/audit/api/serializers.py
from rest_framework import serializers

from hc_core.audit.models import AuditLogEntry


class AuditLogEntrySerializer(serializers.ModelSerializer):
    timestamp = serializers.DateTimeField(source="occurred_at", read_only=True)

    class Meta:
        model = AuditLogEntry
        fields = [
            "id",
            "tenant_id",
            "actor_user_id",
            "actor_role",
            "action",
            "entity_type",
            "entity_id",
            "timestamp",
            "details",
            "origin",
        ]
        read_only_fields = fields
