# hc_core/audit/filters.py
import django_filters

from hc_core.audit.models import AuditAction, AuditLogEntry


class AuditLogEntryFilter(django_filters.FilterSet):
    entity_id = django_filters.UUIDFilter()
    action = django_filters.ChoiceFilter(choices=AuditAction.choices)
    actor_user_id = django_filters.CharFilter()
    occurred_after = django_filters.IsoDateTimeFilter(field_name="occurred_at", lookup_expr="gte")
    occurred_before = django_filters.IsoDateTimeFilter(field_name="occurred_at", lookup_expr="lt")

    class Meta:
        model = AuditLogEntry
        fields = ["entity_type", "entity_id", "action", "actor_user_id"]
