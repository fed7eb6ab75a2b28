# hc_core/visits/services/lifecycle.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from django.conf import settings
from django.utils import timezone

from hc_core.audit.models import AuditAction
from hc_core.common.exceptions import InvalidStateTransition, NotFound, ValidationError
from hc_core.iam import guard
from hc_core.iam.identity import CallerIdentity
from hc_core.notifications.models import NotificationType
from hc_core.shifts.models import ShiftStatus
from hc_core.visits.gateway import VisitGateway
from hc_core.visits.models import Visit, empty_kardex
from hc_core.visits.services.documentation import validate_documentation
from hc_core.visits.services import summaries
from hc_core.visits.services.effects import (
    AuditIntent,
    NotificationIntent,
    ShiftLinkIntent,
    SideEffect,
    dispatch,
)
from hc_core.visits.transitions import EDITABLE_STATUSES, VisitEvent, next_status

logger = logging.getLogger(__name__)

ENTITY_VISIT = "Visit"

# audit role labels
ROLE_LABEL_NURSE = "Nurse"
ROLE_LABEL_ADMIN = "Admin"


@dataclass(frozen=True)
class VisitTransitionResult:
    visit_id: UUID
    status: str
    message: str
    success: bool = True
    warnings: tuple[str, ...] = ()
    effects: tuple[SideEffect, ...] = field(default=(), repr=False, compare=False)

    def as_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "visit_id": str(self.visit_id),
            "status": str(self.status),
            "message": self.message,
            "warnings": list(self.warnings),
        }


def _load_visit(visit_id: UUID) -> Visit:
    visit = VisitGateway.get_visit(visit_id=visit_id)
    if visit is None:
        raise NotFound("Visit not found", details={"visit_id": str(visit_id)})
    return visit


def _stale(visit: Visit, event: str) -> InvalidStateTransition:
    # the row moved between our read and the conditional write
    logger.info("Lost race on visit %s (%s from %s)", visit.id, event, visit.status)
    return InvalidStateTransition(
        f"Visit {visit.id} changed while processing {str(event).lower()}; reload and retry.",
        details={"visit_id": str(visit.id), "expected_status": str(visit.status)},
    )


def _finish(
    *,
    visit_id: UUID,
    status: str,
    message: str,
    effects: list[SideEffect],
) -> VisitTransitionResult:
    warnings = dispatch(effects)
    if warnings:
        logger.warning("Visit %s -> %s committed with %d failed side effects", visit_id, status, len(warnings))
    return VisitTransitionResult(
        visit_id=visit_id,
        status=status,
        message=message,
        warnings=warnings,
        effects=tuple(effects),
    )


class VisitLifecycleService:
    """
    Visit workflow: draft -> submitted -> rejected/approved.

    Each operation: authorize, load, check the transition, make one
    conditional write, then dispatch the audit entry and notifications.
    The conditional write is the commit point; nothing after it can undo
    the status change.
    """

    @staticmethod
    def create_draft(*, identity: CallerIdentity, shift_id: UUID) -> VisitTransitionResult:
        guard.require_identity(identity)

        shift = VisitGateway.get_shift(shift_id=shift_id)
        if shift is None:
            raise NotFound("Shift not found", details={"shift_id": str(shift_id)})

        guard.require(
            identity,
            guard.GuardAction.CREATE_VISIT,
            tenant_id=shift.tenant_id,
            assigned_user_ids=[shift.nurse_id],
        )

        if shift.status != ShiftStatus.COMPLETED:
            raise InvalidStateTransition(
                f"Cannot create visit from shift with status: {shift.status}. Shift must be COMPLETED.",
                details={"shift_id": str(shift.id), "shift_status": shift.status},
            )

        status = next_status(None, VisitEvent.CREATE)
        visit = VisitGateway.insert_visit_for_shift(
            shift=shift,
            status=status,
            kardex=empty_kardex(),
            vitals=None,
            medications=[],
            tasks=[],
        )
        logger.info("Visit %s created (DRAFT) by %s", visit.id, identity.user_id)

        effects: list[SideEffect] = [
            ShiftLinkIntent(shift_id=shift.id, visit_id=visit.id),
            AuditIntent(
                tenant_id=visit.tenant_id,
                actor_user_id=identity.user_id,
                actor_role=ROLE_LABEL_NURSE,
                action=AuditAction.VISIT_CREATED,
                entity_type=ENTITY_VISIT,
                entity_id=visit.id,
                details={
                    "previous_status": None,
                    "new_status": status,
                    "shift_id": str(shift.id),
                    "patient_id": str(shift.patient_id),
                },
                origin=identity.origin,
            ),
        ]
        return _finish(visit_id=visit.id, status=status, message="Visit draft created successfully", effects=effects)

    @staticmethod
    def save_documentation(
        *,
        identity: CallerIdentity,
        shift_id: UUID,
        data: dict[str, Any],
    ) -> VisitTransitionResult:
        """
        Replace the documentation sections present in `data`.
        Kardex keys are merged into the stored kardex; vitals and the
        medication/task lists are replaced as a whole.
        """
        guard.require_identity(identity)
        visit = _load_visit(shift_id)

        guard.require(
            identity,
            guard.GuardAction.EDIT_VISIT,
            tenant_id=visit.tenant_id,
            assigned_user_ids=[visit.nurse_id],
        )

        if visit.status not in EDITABLE_STATUSES:
            raise InvalidStateTransition(
                f"Cannot edit visit with status: {visit.status}. Visit must be DRAFT or REJECTED.",
                details={"visit_id": str(visit.id), "current_status": visit.status},
            )

        sections = validate_documentation(data)
        changes: dict[str, Any] = {}
        if "kardex" in sections:
            changes["kardex"] = {**(visit.kardex or empty_kardex()), **sections["kardex"]}
        for key in ("vitals", "medications", "tasks"):
            if key in sections:
                changes[key] = sections[key]

        if not VisitGateway.conditional_update(
            visit_id=visit.id,
            tenant_id=visit.tenant_id,
            expected_statuses=[visit.status],
            changes=changes,
        ):
            raise _stale(visit, "edit")

        logger.info("Visit %s documentation saved (%s)", visit.id, ",".join(sorted(changes)))
        return VisitTransitionResult(visit_id=visit.id, status=visit.status, message="Visit documentation saved")

    @staticmethod
    def submit(*, identity: CallerIdentity, shift_id: UUID) -> VisitTransitionResult:
        guard.require_identity(identity)
        visit = _load_visit(shift_id)

        guard.require(
            identity,
            guard.GuardAction.SUBMIT_VISIT,
            tenant_id=visit.tenant_id,
            assigned_user_ids=[visit.nurse_id],
        )

        new_status = next_status(visit.status, VisitEvent.SUBMIT)

        if not visit.general_observations.strip():
            raise ValidationError(
                "Cannot submit visit: KARDEX general observations are required",
                details={"field": "kardex.general_observations"},
            )

        # read before the commit point so a failing lookup aborts cleanly
        admin_ids = VisitGateway.list_tenant_admin_ids(tenant_id=visit.tenant_id)

        now = timezone.now()
        if not VisitGateway.conditional_update(
            visit_id=visit.id,
            tenant_id=visit.tenant_id,
            expected_statuses=[visit.status],
            changes={"status": new_status, "submitted_at": now},
        ):
            raise _stale(visit, VisitEvent.SUBMIT)

        logger.info("Visit %s %s -> %s by %s", visit.id, visit.status, new_status, identity.user_id)

        effects: list[SideEffect] = [
            AuditIntent(
                tenant_id=visit.tenant_id,
                actor_user_id=identity.user_id,
                actor_role=ROLE_LABEL_NURSE,
                action=AuditAction.VISIT_SUBMITTED,
                entity_type=ENTITY_VISIT,
                entity_id=visit.id,
                details={"previous_status": visit.status, "new_status": new_status},
                origin=identity.origin,
            ),
        ]
        if admin_ids:
            effects.append(
                NotificationIntent(
                    tenant_id=visit.tenant_id,
                    recipient_user_ids=tuple(admin_ids),
                    type=NotificationType.VISIT_PENDING_REVIEW,
                    message=f"New visit submitted for review by {visit.nurse_id}",
                    entity_type=ENTITY_VISIT,
                    entity_id=visit.id,
                )
            )
        else:
            logger.warning("No active admins in tenant %s to review visit %s", visit.tenant_id, visit.id)

        return _finish(visit_id=visit.id, status=new_status, message="Visit submitted for admin review", effects=effects)

    @staticmethod
    def _require_admin(identity: CallerIdentity) -> str:
        guard.require_identity(identity)
        role = VisitGateway.resolve_role(identity=identity)
        guard.require(
            identity,
            guard.GuardAction.REVIEW_VISIT,
            tenant_id=identity.tenant_id,
            resolved_role=role,
        )
        return role

    @staticmethod
    def reject(*, identity: CallerIdentity, shift_id: UUID, reason: str | None) -> VisitTransitionResult:
        role = VisitLifecycleService._require_admin(identity)
        visit = _load_visit(shift_id)

        guard.require(
            identity,
            guard.GuardAction.REVIEW_VISIT,
            tenant_id=visit.tenant_id,
            resolved_role=role,
        )

        new_status = next_status(visit.status, VisitEvent.REJECT)

        reason = (reason or "").strip()
        if not reason:
            raise ValidationError("Rejection reason is required", details={"field": "reason"})

        now = timezone.now()
        if not VisitGateway.conditional_update(
            visit_id=visit.id,
            tenant_id=visit.tenant_id,
            expected_statuses=[visit.status],
            changes={
                "status": new_status,
                "rejection_reason": reason,
                "reviewed_at": now,
                "reviewed_by": identity.user_id,
            },
        ):
            raise _stale(visit, VisitEvent.REJECT)

        logger.info("Visit %s %s -> %s by %s", visit.id, visit.status, new_status, identity.user_id)

        effects: list[SideEffect] = [
            AuditIntent(
                tenant_id=visit.tenant_id,
                actor_user_id=identity.user_id,
                actor_role=ROLE_LABEL_ADMIN,
                action=AuditAction.VISIT_REJECTED,
                entity_type=ENTITY_VISIT,
                entity_id=visit.id,
                details={"previous_status": visit.status, "new_status": new_status, "reason": reason},
                origin=identity.origin,
            ),
            NotificationIntent(
                tenant_id=visit.tenant_id,
                recipient_user_ids=(visit.nurse_id,),
                type=NotificationType.VISIT_REJECTED,
                message=f"Your visit has been rejected: {reason}",
                entity_type=ENTITY_VISIT,
                entity_id=visit.id,
            ),
        ]
        return _finish(visit_id=visit.id, status=new_status, message="Visit rejected and returned to nurse", effects=effects)

    @staticmethod
    def approve(*, identity: CallerIdentity, shift_id: UUID) -> VisitTransitionResult:
        role = VisitLifecycleService._require_admin(identity)
        visit = _load_visit(shift_id)

        guard.require(
            identity,
            guard.GuardAction.REVIEW_VISIT,
            tenant_id=visit.tenant_id,
            resolved_role=role,
        )

        new_status = next_status(visit.status, VisitEvent.APPROVE)

        patient = VisitGateway.get_patient(patient_id=visit.patient_id)
        family_ids = _family_recipients(visit, patient)

        now = timezone.now()
        if not VisitGateway.conditional_update(
            visit_id=visit.id,
            tenant_id=visit.tenant_id,
            expected_statuses=[visit.status],
            changes={
                "status": new_status,
                "approved_at": now,
                "approved_by": identity.user_id,
                "reviewed_at": now,
                "reviewed_by": identity.user_id,
            },
        ):
            raise _stale(visit, VisitEvent.APPROVE)

        logger.info(
            "Visit %s %s -> %s by %s (%d family recipients)",
            visit.id,
            visit.status,
            new_status,
            identity.user_id,
            len(family_ids),
        )

        effects: list[SideEffect] = [
            AuditIntent(
                tenant_id=visit.tenant_id,
                actor_user_id=identity.user_id,
                actor_role=ROLE_LABEL_ADMIN,
                action=AuditAction.VISIT_APPROVED,
                entity_type=ENTITY_VISIT,
                entity_id=visit.id,
                details={"previous_status": visit.status, "new_status": new_status},
                origin=identity.origin,
            ),
            NotificationIntent(
                tenant_id=visit.tenant_id,
                recipient_user_ids=(visit.nurse_id,),
                type=NotificationType.VISIT_APPROVED,
                message="Your visit has been approved",
                entity_type=ENTITY_VISIT,
                entity_id=visit.id,
            ),
        ]
        if family_ids:
            effects.append(
                NotificationIntent(
                    tenant_id=visit.tenant_id,
                    recipient_user_ids=family_ids,
                    type=NotificationType.VISIT_AVAILABLE_FOR_FAMILY,
                    message=f"New visit summary available for {patient.full_name}",
                    entity_type=ENTITY_VISIT,
                    entity_id=visit.id,
                )
            )

        return _finish(
            visit_id=visit.id,
            status=new_status,
            message="Visit approved and now visible to family",
            effects=effects,
        )

    @staticmethod
    def get_visit(*, identity: CallerIdentity, shift_id: UUID) -> Visit:
        guard.require_identity(identity)
        visit = _load_visit(shift_id)

        role = VisitGateway.resolve_role(identity=identity)
        guard.require(
            identity,
            guard.GuardAction.READ_VISIT,
            tenant_id=visit.tenant_id,
            assigned_user_ids=[visit.nurse_id],
            resolved_role=role,
        )
        return visit

    @staticmethod
    def list_approved_summaries_for_family(
        *,
        identity: CallerIdentity,
        patient_id: UUID,
    ) -> list[summaries.VisitSummary]:
        return summaries.list_approved_summaries_for_family(identity=identity, patient_id=patient_id)


def _family_recipients(visit: Visit, patient) -> tuple[str, ...]:
    if patient is None:
        logger.warning("Patient %s for visit %s not found; no family notifications", visit.patient_id, visit.id)
        return ()
    if str(patient.tenant_id) != str(visit.tenant_id):
        logger.warning("Patient %s is outside tenant %s; no family notifications", patient.id, visit.tenant_id)
        return ()

    members = list(dict.fromkeys(m for m in (patient.family_members or []) if m))
    cap = settings.HC_MAX_FAMILY_RECIPIENTS
    if len(members) > cap:
        logger.warning(
            "Patient %s has %d family members; notifying the first %d",
            patient.id,
            len(members),
            cap,
        )
        members = members[:cap]
    return tuple(members)
