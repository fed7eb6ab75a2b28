# hc_core/shifts/models.py
from django.db import models

from hc_core.common.models import TenantScopedModel
from hc_core.patients.models import Patient


class ShiftStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    ASSIGNED = "ASSIGNED", "Assigned"
    IN_PROGRESS = "IN_PROGRESS", "In Progress"
    COMPLETED = "COMPLETED", "Completed"
    CANCELLED = "CANCELLED", "Cancelled"


UPCOMING_STATUSES = (ShiftStatus.PENDING, ShiftStatus.ASSIGNED)


class Shift(TenantScopedModel):
    """
    Scheduled caregiver assignment.
    Owned by scheduling; the visit workflow only reads it and writes the
    visit back-reference once.
    """
    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name="shifts")

    # identity provider subject of the assigned nurse
    nurse_id = models.CharField(max_length=128, null=True, blank=True, db_index=True)

    status = models.CharField(
        max_length=16,
        choices=ShiftStatus.choices,
        default=ShiftStatus.PENDING,
        db_index=True,
    )

    scheduled_at = models.DateTimeField(null=True, blank=True)
    started_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    visit_id = models.UUIDField(null=True, blank=True)

    class Meta:
        db_table = "shifts_shift"
        indexes = [
            models.Index(fields=["tenant_id", "status"]),
            models.Index(fields=["tenant_id", "patient", "scheduled_at"]),
            models.Index(fields=["tenant_id", "nurse_id"]),
        ]

    def __str__(self) -> str:
        return f"Shift({self.patient_id}, {self.status})"
