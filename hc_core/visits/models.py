# hc_core/visits/models.py
from __future__ import annotations

from django.db import models
from django.db.models import F, Q

from hc_core.common.models import TenantScopedModel


class VisitStatus(models.TextChoices):
    DRAFT = "DRAFT", "Draft"
    SUBMITTED = "SUBMITTED", "Submitted"
    REJECTED = "REJECTED", "Rejected"
    APPROVED = "APPROVED", "Approved"


def empty_kardex() -> dict:
    return {"general_observations": ""}


class Visit(TenantScopedModel):
    """
    Clinical documentation for one completed Shift.

    The primary key IS the shift id, so there can never be two visits for a
    shift. Rows are written only through the lifecycle service: creation is a
    forced insert and every later change is a conditional UPDATE on status.
    Instance save() after creation and delete() are refused.
    """
    # no default: the id is always supplied from the shift
    id = models.UUIDField(primary_key=True, editable=False)

    shift_id = models.UUIDField(unique=True, editable=False)
    patient_id = models.UUIDField(db_index=True)
    nurse_id = models.CharField(max_length=128, db_index=True)

    status = models.CharField(
        max_length=16,
        choices=VisitStatus.choices,
        default=VisitStatus.DRAFT,
        db_index=True,
    )

    kardex = models.JSONField(default=empty_kardex, blank=True)
    vitals = models.JSONField(null=True, blank=True)
    medications = models.JSONField(default=list, blank=True)
    tasks = models.JSONField(default=list, blank=True)

    submitted_at = models.DateTimeField(null=True, blank=True)
    reviewed_at = models.DateTimeField(null=True, blank=True)
    reviewed_by = models.CharField(max_length=128, null=True, blank=True)
    rejection_reason = models.TextField(null=True, blank=True)
    approved_at = models.DateTimeField(null=True, blank=True)
    approved_by = models.CharField(max_length=128, null=True, blank=True)

    class Meta:
        db_table = "visits_visit"
        constraints = [
            models.CheckConstraint(
                condition=Q(id=F("shift_id")),
                name="ck_visit_id_equals_shift_id",
            ),
        ]
        indexes = [
            models.Index(fields=["tenant_id", "status"]),
            models.Index(fields=["tenant_id", "patient_id", "status"]),
            models.Index(fields=["tenant_id", "nurse_id"]),
        ]

    def __str__(self) -> str:
        return f"Visit({self.id}, {self.status})"

    @property
    def general_observations(self) -> str:
        return str((self.kardex or {}).get("general_observations") or "")

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValueError("Visit rows change only through conditional lifecycle updates.")
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValueError("Visits are never deleted.")
