# hc_core/visits/services/summaries.py
"""
Family-facing visit summaries.

Family viewers only ever see this redacted shape: no kardex text, no vitals
values, no medication names. Only approved visits are listed.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import UUID

from hc_core.common.exceptions import NotFound
from hc_core.iam import guard
from hc_core.iam.identity import CallerIdentity
from hc_core.shifts.models import Shift
from hc_core.visits.gateway import VisitGateway
from hc_core.visits.models import Visit

UNKNOWN_NURSE = "Unknown Nurse"


@dataclass(frozen=True)
class VisitSummary:
    visit_id: UUID
    visit_date: datetime
    nurse_name: str
    duration_minutes: int | None
    overall_status: str
    key_activities: tuple[str, ...]
    next_visit_date: datetime | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "visit_id": str(self.visit_id),
            "visit_date": self.visit_date,
            "nurse_name": self.nurse_name,
            "duration_minutes": self.duration_minutes,
            "overall_status": self.overall_status,
            "key_activities": list(self.key_activities),
            "next_visit_date": self.next_visit_date,
        }


def overall_status(visit: Visit) -> str:
    return "Stable" if "stable" in visit.general_observations.lower() else "Monitored"


def key_activities(visit: Visit) -> tuple[str, ...]:
    out: list[str] = []
    if visit.vitals:
        out.append("Vitals checked")
    if visit.medications:
        out.append("Medications administered")
    if visit.tasks:
        out.append(f"{len(visit.tasks)} tasks completed")
    return tuple(out)


def duration_minutes(shift: Shift | None) -> int | None:
    if shift is None or shift.completed_at is None:
        return None
    start = shift.scheduled_at or shift.started_at
    if start is None:
        return None
    return round((shift.completed_at - start).total_seconds() / 60)


def list_approved_summaries_for_family(
    *,
    identity: CallerIdentity,
    patient_id: UUID,
) -> list[VisitSummary]:
    guard.require_identity(identity)

    patient = VisitGateway.get_patient(patient_id=patient_id)
    if patient is None:
        raise NotFound("Patient not found", details={"patient_id": str(patient_id)})

    guard.require(
        identity,
        guard.GuardAction.READ_FAMILY_SUMMARY,
        tenant_id=patient.tenant_id,
        assigned_user_ids=patient.family_members or [],
    )

    visits = VisitGateway.list_approved_visits(tenant_id=patient.tenant_id, patient_id=patient.id)
    if not visits:
        return []

    shifts = VisitGateway.get_shifts(shift_ids=[v.shift_id for v in visits])
    names = VisitGateway.get_nurse_names(user_ids=[v.nurse_id for v in visits])
    upcoming = VisitGateway.next_scheduled_shift(tenant_id=patient.tenant_id, patient_id=patient.id)
    next_visit_date = upcoming.scheduled_at if upcoming else None

    summaries = []
    for visit in visits:
        shift = shifts.get(visit.shift_id)
        summaries.append(
            VisitSummary(
                visit_id=visit.id,
                visit_date=(shift.scheduled_at if shift and shift.scheduled_at else visit.created_at),
                nurse_name=names.get(visit.nurse_id) or UNKNOWN_NURSE,
                duration_minutes=duration_minutes(shift),
                overall_status=overall_status(visit),
                key_activities=key_activities(visit),
                next_visit_date=next_visit_date,
            )
        )

    summaries.sort(key=lambda s: s.visit_date, reverse=True)
    return summaries
