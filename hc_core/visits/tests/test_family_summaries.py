import uuid
from datetime import timedelta

import pytest
from django.utils import timezone

from hc_core.common.exceptions import NotFound, Unauthorized
from hc_core.conftest import FAMILY_ID, identity_for
from hc_core.patients.models import Patient
from hc_core.shifts.models import Shift, ShiftStatus
from hc_core.visits.models import Visit
from hc_core.visits.services.lifecycle import VisitLifecycleService
from hc_core.visits.services.summaries import list_approved_summaries_for_family, overall_status


pytestmark = pytest.mark.django_db


def _approved_visit(shift, nurse_identity, admin_identity, *, kardex=None, vitals=None, medications=(), tasks=()):
    VisitLifecycleService.create_draft(identity=nurse_identity, shift_id=shift.id)
    Visit.objects.filter(id=shift.id).update(
        kardex=kardex or {"general_observations": "Patient is stable", "internal_notes": "SECRET NOTE"},
        vitals=vitals,
        medications=list(medications),
        tasks=list(tasks),
    )
    VisitLifecycleService.submit(identity=nurse_identity, shift_id=shift.id)
    VisitLifecycleService.approve(identity=admin_identity, shift_id=shift.id)


def test_unlisted_family_member_is_unauthorized_until_added(
    completed_shift, patient, tenant, nurse_identity, admin_identity
):
    _approved_visit(
        completed_shift,
        nurse_identity,
        admin_identity,
        vitals={"sys": 120, "dia": 80, "spo2": 98, "hr": 70},
        tasks=[{"task_description": "a", "completed_at": "09:00"}, {"task_description": "b", "completed_at": "09:10"}],
    )
    outsider = identity_for("family-9", tenant)

    with pytest.raises(Unauthorized):
        list_approved_summaries_for_family(identity=outsider, patient_id=patient.id)

    Patient.objects.filter(id=patient.id).update(family_members=[FAMILY_ID, "family-9"])
    summaries = list_approved_summaries_for_family(identity=outsider, patient_id=patient.id)

    assert len(summaries) == 1
    s = summaries[0]
    assert s.visit_id == completed_shift.id
    assert s.nurse_name == "Nora Nurse"
    assert s.duration_minutes == 90
    assert s.overall_status == "Stable"
    assert s.key_activities == ("Vitals checked", "2 tasks completed")
    assert s.visit_date == completed_shift.scheduled_at
    assert "SECRET NOTE" not in repr(s.as_dict())


def test_only_approved_visits_are_listed_most_recent_first(
    completed_shift, patient, tenant, nurse, nurse_identity, admin_identity, family_identity
):
    older = completed_shift
    newer = Shift.objects.create(
        tenant_id=tenant.id,
        patient=patient,
        nurse_id=nurse.id,
        status=ShiftStatus.COMPLETED,
        scheduled_at=older.scheduled_at + timedelta(days=1),
        completed_at=older.completed_at + timedelta(days=1),
    )
    draft_only = Shift.objects.create(
        tenant_id=tenant.id,
        patient=patient,
        nurse_id=nurse.id,
        status=ShiftStatus.COMPLETED,
        scheduled_at=older.scheduled_at + timedelta(days=2),
        completed_at=older.completed_at + timedelta(days=2),
    )
    upcoming = Shift.objects.create(
        tenant_id=tenant.id,
        patient=patient,
        nurse_id=nurse.id,
        status=ShiftStatus.ASSIGNED,
        scheduled_at=timezone.now() + timedelta(days=3),
    )

    _approved_visit(older, nurse_identity, admin_identity)
    _approved_visit(
        newer,
        nurse_identity,
        admin_identity,
        kardex={"general_observations": "Some confusion in the evening"},
        medications=[{"medication_name": "x", "intended_dosage": "1", "dosage_given": "1", "time": "10:00"}],
    )
    VisitLifecycleService.create_draft(identity=nurse_identity, shift_id=draft_only.id)

    summaries = list_approved_summaries_for_family(identity=family_identity, patient_id=patient.id)

    assert [s.visit_id for s in summaries] == [newer.id, older.id]
    assert summaries[0].overall_status == "Monitored"
    assert summaries[0].key_activities == ("Medications administered",)
    assert all(s.next_visit_date == upcoming.scheduled_at for s in summaries)


def test_no_approved_visits_returns_empty_list(patient, family_identity):
    assert list_approved_summaries_for_family(identity=family_identity, patient_id=patient.id) == []


def test_missing_nurse_record_falls_back_to_unknown(completed_shift, patient, nurse, nurse_identity, admin_identity, family_identity):
    _approved_visit(completed_shift, nurse_identity, admin_identity)
    nurse.delete()

    summaries = list_approved_summaries_for_family(identity=family_identity, patient_id=patient.id)
    assert summaries[0].nurse_name == "Unknown Nurse"


def test_unknown_patient_is_not_found(family_identity):
    with pytest.raises(NotFound):
        list_approved_summaries_for_family(identity=family_identity, patient_id=uuid.uuid4())


def test_family_of_other_tenant_is_unauthorized(patient, other_tenant):
    with pytest.raises(Unauthorized):
        list_approved_summaries_for_family(identity=identity_for(FAMILY_ID, other_tenant), patient_id=patient.id)


@pytest.mark.parametrize(
    "observations,label",
    [
        ("Patient is stable", "Stable"),
        ("Stable overnight, eating well", "Stable"),
        ("STABLE", "Stable"),
        ("Some confusion in the evening", "Monitored"),
        ("", "Monitored"),
    ],
)
def test_overall_status_matches_stable_in_any_case(observations, label):
    visit = Visit(kardex={"general_observations": observations})
    assert overall_status(visit) == label
