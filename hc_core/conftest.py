# hc_core/conftest.py
from datetime import timedelta

import pytest
from django.conf import settings
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from hc_core.iam.identity import CallerIdentity
from hc_core.iam.models import Nurse, NurseRole
from hc_core.patients.models import Patient
from hc_core.shifts.models import Shift, ShiftStatus
from hc_core.tenants.models import Tenant

ADMIN_ID = "admin-1"
NURSE_ID = "nurse-1"
OTHER_NURSE_ID = "nurse-2"
FAMILY_ID = "family-1"


def identity_for(user_id, tenant, *roles, origin="10.0.0.1"):
    return CallerIdentity(
        user_id=user_id,
        tenant_id=tenant.id if tenant is not None else None,
        roles=frozenset(roles),
        origin=origin,
    )


def bearer(user_id, tenant, *roles):
    """
    Access token shaped like the identity provider's: sub + tenant + groups.
    DRF test client requires HTTP_ prefix.
    """
    token = AccessToken()
    token["sub"] = user_id
    token[settings.HC_TENANT_CLAIM] = str(tenant.id)
    token[settings.HC_ROLES_CLAIM] = list(roles)
    return {"HTTP_AUTHORIZATION": f"Bearer {token}"}


@pytest.fixture
def tenant(db):
    return Tenant.objects.create(code="test-agency", name="Test Agency")


@pytest.fixture
def other_tenant(db):
    return Tenant.objects.create(code="other-agency", name="Other Agency")


@pytest.fixture
def admin(db, tenant):
    return Nurse.objects.create(id=ADMIN_ID, tenant=tenant, name="Ana Admin", role=NurseRole.ADMIN)


@pytest.fixture
def nurse(db, tenant):
    return Nurse.objects.create(id=NURSE_ID, tenant=tenant, name="Nora Nurse", role=NurseRole.NURSE)


@pytest.fixture
def other_nurse(db, tenant):
    return Nurse.objects.create(id=OTHER_NURSE_ID, tenant=tenant, name="Otto Nurse", role=NurseRole.NURSE)


@pytest.fixture
def patient(db, tenant):
    return Patient.objects.create(tenant_id=tenant.id, full_name="Pedro Paciente", family_members=[FAMILY_ID])


@pytest.fixture
def completed_shift(db, tenant, nurse, patient):
    end = timezone.now() - timedelta(days=1)
    return Shift.objects.create(
        tenant_id=tenant.id,
        patient=patient,
        nurse_id=nurse.id,
        status=ShiftStatus.COMPLETED,
        scheduled_at=end - timedelta(minutes=90),
        started_at=end - timedelta(minutes=85),
        completed_at=end,
    )


@pytest.fixture
def nurse_identity(tenant, nurse):
    return identity_for(nurse.id, tenant, "NURSE")


@pytest.fixture
def admin_identity(tenant, admin):
    return identity_for(admin.id, tenant, "ADMIN")


@pytest.fixture
def family_identity(tenant):
    return identity_for(FAMILY_ID, tenant)


@pytest.fixture
def api_client():
    return APIClient()
