# hc_core/iam/selectors.py
from __future__ import annotations

from typing import Iterable
from uuid import UUID

from hc_core.iam.models import Nurse, NurseRole


def get_staff_role(*, user_id: str, tenant_id: UUID) -> str | None:
    """
    Role of an active staff member in the given tenant, or None.
    A staff record in another tenant resolves to None.
    """
    return (
        Nurse.objects.filter(id=user_id, tenant_id=tenant_id, is_active=True)
        .values_list("role", flat=True)
        .first()
    )


def list_tenant_admin_ids(*, tenant_id: UUID) -> list[str]:
    return list(
        Nurse.objects.filter(tenant_id=tenant_id, role=NurseRole.ADMIN, is_active=True)
        .order_by("id")
        .values_list("id", flat=True)
    )


def get_nurse_names(*, user_ids: Iterable[str]) -> dict[str, str]:
    ids = {uid for uid in user_ids if uid}
    if not ids:
        return {}
    return dict(Nurse.objects.filter(id__in=ids).values_list("id", "name"))


def resolve_role(identity) -> str:
    """
    Staff-directory role for the caller in their token tenant.
    Empty string when there is no active record, so the guard never falls
    back to token claims.
    """
    if not identity.is_complete:
        return ""
    return get_staff_role(user_id=identity.user_id, tenant_id=identity.tenant_id) or ""
