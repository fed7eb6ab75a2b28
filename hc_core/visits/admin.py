# hc_core/visits/admin.py
from django.contrib import admin

from hc_core.visits.models import Visit


@admin.register(Visit)
class VisitAdmin(admin.ModelAdmin):
    """
    Read-only: visit rows change only through the lifecycle endpoints.
    """
    list_display = ("id", "patient_id", "nurse_id", "status", "submitted_at", "approved_at", "created_at")
    list_filter = ("status", "tenant_id")
    search_fields = ("nurse_id",)
    ordering = ("-created_at",)

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
