# hc_core/iam/models.py
from __future__ import annotations

from django.db import models

from hc_core.common.models import TimeStampedModel


class NurseRole(models.TextChoices):
    ADMIN = "ADMIN", "Admin"
    NURSE = "NURSE", "Nurse"
    COORDINATOR = "COORDINATOR", "Coordinator"


class Nurse(TimeStampedModel):
    """
    Staff member of a tenant.

    `id` is the subject of the identity provider's token, so the staff
    directory and the token agree on who a caller is without a local user row.
    """
    id = models.CharField(primary_key=True, max_length=128)

    tenant = models.ForeignKey(
        "tenants.Tenant",
        on_delete=models.PROTECT,
        related_name="staff",
    )

    name = models.CharField(max_length=255)
    email = models.EmailField(blank=True, default="")

    role = models.CharField(
        max_length=16,
        choices=NurseRole.choices,
        default=NurseRole.NURSE,
        db_index=True,
    )
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "iam_nurse"
        indexes = [
            models.Index(fields=["tenant", "role"]),
        ]

    def __str__(self) -> str:
        return f"{self.name} [{self.role}]"
