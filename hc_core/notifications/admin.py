# hc_core/notifications/admin.py
from django.contrib import admin

from hc_core.notifications.models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ("recipient_user_id", "type", "entity_id", "is_read", "created_at")
    list_filter = ("type", "is_read", "tenant_id")
    search_fields = ("recipient_user_id", "message")
    ordering = ("-created_at",)
