# hc_core/patients/models.py
from django.db import models

from hc_core.common.models import TenantScopedModel


class Patient(TenantScopedModel):
    """
    Home-care patient.
    Read-only collaborator for the visit workflow: supplies the tenant and the
    family viewers who receive approved visit summaries.
    """
    full_name = models.CharField(max_length=255)
    phone = models.CharField(max_length=32, blank=True)
    address = models.CharField(max_length=255, blank=True)
    date_of_birth = models.DateField(null=True, blank=True)

    # external user ids (identity provider subjects) of family viewers
    family_members = models.JSONField(default=list, blank=True)

    class Meta:
        db_table = "patients_patient"
        indexes = [
            models.Index(fields=["tenant_id", "full_name"]),
        ]

    def __str__(self) -> str:
        return self.full_name
