# hc_core/iam/admin.py
from __future__ import annotations

from django.contrib import admin

from hc_core.iam.models import Nurse


@admin.register(Nurse)
class NurseAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "tenant", "role", "is_active")
    list_filter = ("tenant", "role", "is_active")
    search_fields = ("id", "name", "email")
    ordering = ("tenant", "name")
