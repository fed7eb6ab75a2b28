import pytest

from hc_core.audit.models import AuditLogEntry
from hc_core.common.exceptions import InvalidStateTransition, Unauthorized, ValidationError
from hc_core.conftest import identity_for
from hc_core.visits.models import Visit, VisitStatus
from hc_core.visits.services.lifecycle import VisitLifecycleService


pytestmark = pytest.mark.django_db


VITALS = {"sys": 120, "dia": 80, "spo2": 97, "hr": 72, "temperature": 36.6}


@pytest.fixture
def draft(completed_shift, nurse_identity):
    VisitLifecycleService.create_draft(identity=nurse_identity, shift_id=completed_shift.id)
    return Visit.objects.get(id=completed_shift.id)


def test_save_documentation_merges_kardex_and_replaces_lists(draft, nurse_identity):
    VisitLifecycleService.save_documentation(
        identity=nurse_identity,
        shift_id=draft.id,
        data={"kardex": {"general_observations": "Stable", "pain_level": 2}},
    )
    result = VisitLifecycleService.save_documentation(
        identity=nurse_identity,
        shift_id=draft.id,
        data={
            "kardex": {"internal_notes": "family asked about diet"},
            "vitals": VITALS,
            "medications": [
                {
                    "medication_name": "Metformin",
                    "intended_dosage": "500mg",
                    "dosage_given": "500mg",
                    "time": "08:00",
                    "route": "oral",
                }
            ],
            "tasks": [{"task_description": "Wound dressing", "completed_at": "08:30"}],
        },
    )

    assert result.status == VisitStatus.DRAFT
    draft.refresh_from_db()
    assert draft.kardex == {
        "general_observations": "Stable",
        "pain_level": 2,
        "internal_notes": "family asked about diet",
    }
    assert draft.vitals == VITALS
    assert draft.medications[0]["medication_name"] == "Metformin"
    assert len(draft.tasks) == 1
    # edits are not transitions
    assert AuditLogEntry.objects.filter(entity_id=draft.id).count() == 1


@pytest.mark.parametrize(
    "payload",
    [
        {"vitals": {**VITALS, "spo2": 101}},
        {"vitals": {**VITALS, "hr": 0}},
        {"vitals": {"sys": 120}},
        {"kardex": {"pain_level": 11}},
        {"medications": [{"medication_name": "x"}]},
        {},
    ],
)
def test_invalid_documentation_is_rejected(draft, nurse_identity, payload):
    with pytest.raises(ValidationError):
        VisitLifecycleService.save_documentation(identity=nurse_identity, shift_id=draft.id, data=payload)

    draft.refresh_from_db()
    assert draft.vitals is None


def test_only_assigned_nurse_can_edit(draft, tenant, other_nurse):
    with pytest.raises(Unauthorized):
        VisitLifecycleService.save_documentation(
            identity=identity_for(other_nurse.id, tenant),
            shift_id=draft.id,
            data={"kardex": {"general_observations": "x"}},
        )


def test_submitted_visit_is_not_editable(draft, nurse_identity):
    VisitLifecycleService.save_documentation(
        identity=nurse_identity,
        shift_id=draft.id,
        data={"kardex": {"general_observations": "Comfortable"}},
    )
    VisitLifecycleService.submit(identity=nurse_identity, shift_id=draft.id)

    with pytest.raises(InvalidStateTransition):
        VisitLifecycleService.save_documentation(
            identity=nurse_identity,
            shift_id=draft.id,
            data={"kardex": {"general_observations": "changed"}},
        )

    draft.refresh_from_db()
    assert draft.kardex["general_observations"] == "Comfortable"
