# hc_core/notifications/models.py
from __future__ import annotations

from django.db import models
from django.utils import timezone

from hc_core.common.models import TenantScopedModel


class NotificationType(models.TextChoices):
    VISIT_PENDING_REVIEW = "VISIT_PENDING_REVIEW", "Visit pending review"
    VISIT_REJECTED = "VISIT_REJECTED", "Visit rejected"
    VISIT_APPROVED = "VISIT_APPROVED", "Visit approved"
    VISIT_AVAILABLE_FOR_FAMILY = "VISIT_AVAILABLE_FOR_FAMILY", "Visit available for family"


class Notification(TenantScopedModel):
    """
    In-app delivery record per recipient.
    Recipients are identity provider subjects (staff or family viewers).
    """
    recipient_user_id = models.CharField(max_length=128, db_index=True)

    type = models.CharField(max_length=32, choices=NotificationType.choices, db_index=True)
    message = models.TextField()

    entity_type = models.CharField(max_length=64, default="Visit")
    entity_id = models.UUIDField(null=True, blank=True, db_index=True)

    is_read = models.BooleanField(default=False, db_index=True)
    read_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "notifications_notification"
        indexes = [
            models.Index(fields=["tenant_id", "recipient_user_id", "is_read"]),
        ]

    def mark_read(self) -> None:
        if not self.is_read:
            self.is_read = True
            self.read_at = timezone.now()
