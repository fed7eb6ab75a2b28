# hc_core/audit/models.py
import uuid

from django.db import models
from django.utils import timezone


class AuditAction(models.TextChoices):
    VISIT_CREATED = "VISIT_CREATED", "Visit created"
    VISIT_SUBMITTED = "VISIT_SUBMITTED", "Visit submitted"
    VISIT_REJECTED = "VISIT_REJECTED", "Visit rejected"
    VISIT_APPROVED = "VISIT_APPROVED", "Visit approved"


class AuditLogEntry(models.Model):
    """
    Immutable audit record.
    One row per visit status transition; the compliance timeline.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    tenant_id = models.UUIDField(db_index=True)

    actor_user_id = models.CharField(max_length=128, db_index=True)
    actor_role = models.CharField(max_length=32)  # display label: "Nurse" / "Admin"

    action = models.CharField(max_length=32, choices=AuditAction.choices, db_index=True)
    entity_type = models.CharField(max_length=64, db_index=True)  # e.g. "Visit"
    entity_id = models.UUIDField(db_index=True)

    occurred_at = models.DateTimeField(default=timezone.now, db_index=True)
    details = models.JSONField(default=dict, blank=True)
    origin = models.CharField(max_length=64, null=True, blank=True)

    class Meta:
        db_table = "audit_log_entry"
        indexes = [
            models.Index(fields=["tenant_id", "occurred_at"]),
            models.Index(fields=["entity_type", "entity_id"]),
            models.Index(fields=["tenant_id", "action"]),
        ]

    def __str__(self) -> str:
        return f"{self.action} {self.entity_type}:{self.entity_id}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValueError("AuditLogEntry is immutable; updates are not allowed.")
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValueError("AuditLogEntry is immutable; deletes are not allowed.")
