# hc_core/audit/admin.py
from django.contrib import admin

from hc_core.audit.models import AuditLogEntry


@admin.register(AuditLogEntry)
class AuditLogEntryAdmin(admin.ModelAdmin):
    list_display = ("occurred_at", "action", "entity_type", "entity_id", "actor_user_id", "actor_role", "tenant_id")
    list_filter = ("action", "entity_type", "tenant_id")
    search_fields = ("actor_user_id", "entity_id")
    ordering = ("-occurred_at",)

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
