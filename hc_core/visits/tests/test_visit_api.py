import uuid

import pytest
from django.urls import reverse

from hc_core.audit.models import AuditAction, AuditLogEntry
from hc_core.conftest import ADMIN_ID, FAMILY_ID, NURSE_ID, OTHER_NURSE_ID, bearer
from hc_core.notifications.models import Notification, NotificationType
from hc_core.visits.models import Visit, VisitStatus


pytestmark = pytest.mark.django_db


def _url(name, **kwargs):
    return reverse(f"visits:{name}", kwargs=kwargs)


def test_full_workflow_over_http(api_client, tenant, admin, nurse, patient, completed_shift):
    nurse_auth = bearer(NURSE_ID, tenant, "NURSE")
    admin_auth = bearer(ADMIN_ID, tenant, "ADMIN")
    sid = completed_shift.id

    r = api_client.post(_url("visit-create-draft", shift_id=sid), **nurse_auth)
    assert r.status_code == 201, r.content
    assert r.json() == {
        "success": True,
        "visit_id": str(sid),
        "status": "DRAFT",
        "message": "Visit draft created successfully",
        "warnings": [],
    }

    r = api_client.post(_url("visit-submit", shift_id=sid), **nurse_auth)
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "validation_error"

    r = api_client.patch(
        _url("visit-documentation", shift_id=sid),
        {"kardex": {"general_observations": "Stable and alert"}, "vitals": {"sys": 118, "dia": 76, "spo2": 98, "hr": 66}},
        format="json",
        **nurse_auth,
    )
    assert r.status_code == 200, r.content

    r = api_client.post(_url("visit-submit", shift_id=sid), **nurse_auth)
    assert r.status_code == 200
    assert r.json()["status"] == "SUBMITTED"

    r = api_client.post(_url("visit-reject", shift_id=sid), {"reason": "missing signature"}, format="json", **admin_auth)
    assert r.status_code == 200
    assert r.json()["status"] == "REJECTED"

    r = api_client.post(_url("visit-submit", shift_id=sid), **nurse_auth)
    assert r.json()["status"] == "SUBMITTED"

    r = api_client.post(_url("visit-approve", shift_id=sid), **admin_auth)
    assert r.status_code == 200
    assert r.json()["status"] == "APPROVED"

    r = api_client.post(_url("visit-reject", shift_id=sid), {"reason": "late"}, format="json", **admin_auth)
    assert r.status_code == 409
    assert r.json()["error"]["code"] == "invalid_state_transition"

    r = api_client.get(_url("family-visit-summaries", patient_id=patient.id), **bearer(FAMILY_ID, tenant))
    assert r.status_code == 200
    body = r.json()
    assert len(body) == 1
    assert body[0]["visit_id"] == str(sid)
    assert body[0]["overall_status"] == "Stable"
    assert body[0]["key_activities"] == ["Vitals checked"]
    assert "kardex" not in body[0]

    assert Visit.objects.get(id=sid).status == VisitStatus.APPROVED
    assert Notification.objects.filter(type=NotificationType.VISIT_AVAILABLE_FOR_FAMILY).count() == 1


def test_duplicate_create_is_conflict(api_client, tenant, nurse, completed_shift):
    auth = bearer(NURSE_ID, tenant, "NURSE")
    api_client.post(_url("visit-create-draft", shift_id=completed_shift.id), **auth)

    r = api_client.post(_url("visit-create-draft", shift_id=completed_shift.id), **auth)

    assert r.status_code == 409
    err = r.json()["error"]
    assert err["code"] == "duplicate_resource"
    assert err["request_id"]


def test_oversized_forwarded_for_still_records_audit_entry(api_client, tenant, nurse, completed_shift):
    r = api_client.post(
        _url("visit-create-draft", shift_id=completed_shift.id),
        HTTP_X_FORWARDED_FOR="x" * 300 + ", 10.0.0.1",
        **bearer(NURSE_ID, tenant, "NURSE"),
    )

    assert r.status_code == 201, r.content
    assert r.json()["warnings"] == []
    entry = AuditLogEntry.objects.get(entity_id=completed_shift.id)
    assert entry.action == AuditAction.VISIT_CREATED
    assert entry.origin == "127.0.0.1"


def test_wrong_nurse_gets_403(api_client, tenant, nurse, other_nurse, completed_shift):
    r = api_client.post(
        _url("visit-create-draft", shift_id=completed_shift.id),
        **bearer(OTHER_NURSE_ID, tenant, "NURSE"),
    )
    assert r.status_code == 403
    assert r.json()["error"]["code"] == "unauthorized"


def test_unknown_shift_is_404(api_client, tenant, nurse):
    r = api_client.post(_url("visit-create-draft", shift_id=uuid.uuid4()), **bearer(NURSE_ID, tenant))
    assert r.status_code == 404
    assert r.json()["error"]["code"] == "not_found"


def test_get_visit_for_assigned_nurse(api_client, tenant, nurse, completed_shift):
    auth = bearer(NURSE_ID, tenant)
    api_client.post(_url("visit-create-draft", shift_id=completed_shift.id), **auth)

    r = api_client.get(_url("visit-detail", shift_id=completed_shift.id), **auth)

    assert r.status_code == 200
    assert r.json()["id"] == str(completed_shift.id)
    assert r.json()["kardex"] == {"general_observations": ""}


def test_documentation_validation_errors_are_enveloped(api_client, tenant, nurse, completed_shift):
    auth = bearer(NURSE_ID, tenant)
    api_client.post(_url("visit-create-draft", shift_id=completed_shift.id), **auth)

    r = api_client.patch(
        _url("visit-documentation", shift_id=completed_shift.id),
        {"vitals": {"sys": 120, "dia": 80, "spo2": 140, "hr": 60}},
        format="json",
        **auth,
    )

    assert r.status_code == 400
    err = r.json()["error"]
    assert err["code"] == "validation_error"
    assert "spo2" in err["details"]["vitals"]


def test_anonymous_request_is_rejected(api_client, completed_shift):
    r = api_client.post(_url("visit-create-draft", shift_id=completed_shift.id))
    assert r.status_code == 401
    assert r.json()["error"]["code"] == "not_authenticated"
