# hc_core/visits/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from hc_core.visits.models import Visit


class VisitSerializer(serializers.ModelSerializer):
    class Meta:
        model = Visit
        fields = [
            "id",
            "tenant_id",
            "shift_id",
            "patient_id",
            "nurse_id",
            "status",
            "kardex",
            "vitals",
            "medications",
            "tasks",
            "submitted_at",
            "reviewed_at",
            "reviewed_by",
            "rejection_reason",
            "approved_at",
            "approved_by",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class VisitTransitionResultSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    visit_id = serializers.UUIDField()
    status = serializers.CharField()
    message = serializers.CharField()
    warnings = serializers.ListField(child=serializers.CharField())


class RejectVisitSerializer(serializers.Serializer):
    # blank is let through; the service owns the "reason required" rule
    reason = serializers.CharField(allow_blank=True, required=False, default="")


class VisitSummarySerializer(serializers.Serializer):
    visit_id = serializers.UUIDField()
    visit_date = serializers.DateTimeField()
    nurse_name = serializers.CharField()
    duration_minutes = serializers.IntegerField(allow_null=True)
    overall_status = serializers.CharField()
    key_activities = serializers.ListField(child=serializers.CharField())
    next_visit_date = serializers.DateTimeField(allow_null=True)
