# hc_core/shifts/admin.py
from django.contrib import admin

from hc_core.shifts.models import Shift


@admin.register(Shift)
class ShiftAdmin(admin.ModelAdmin):
    list_display = ("id", "patient", "nurse_id", "status", "scheduled_at", "completed_at", "visit_id")
    list_filter = ("tenant_id", "status")
    search_fields = ("nurse_id",)
    readonly_fields = ("visit_id", "created_at", "updated_at")
    ordering = ("-scheduled_at",)
