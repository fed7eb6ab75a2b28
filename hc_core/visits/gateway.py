# hc_core/visits/gateway.py
"""
Store access for the visit workflow.

Point lookups, the guarded insert of a new visit, and conditional updates
keyed on the visit's current status. Store failures surface as
PersistenceError; business outcomes (missing row, lost race) are returned
to the caller to decide on.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterable
from uuid import UUID

from django.db import DatabaseError, IntegrityError, transaction
from django.utils import timezone

from hc_core.common.exceptions import DuplicateResource, PersistenceError
from hc_core.iam import selectors as staff
from hc_core.iam.identity import CallerIdentity
from hc_core.patients.models import Patient
from hc_core.shifts.models import UPCOMING_STATUSES, Shift
from hc_core.visits.models import Visit, VisitStatus

logger = logging.getLogger(__name__)

DUPLICATE_VISIT_MSG = "Visit already exists for this shift. Each shift can have only one visit."


@contextmanager
def _store_errors(op: str):
    try:
        yield
    except DatabaseError as exc:
        logger.error("Store failure during %s: %s", op, exc.__class__.__name__)
        raise PersistenceError(f"Data store error during {op}.") from exc


class VisitGateway:
    @staticmethod
    def get_shift(*, shift_id: UUID) -> Shift | None:
        with _store_errors("get_shift"):
            return Shift.objects.filter(id=shift_id).first()

    @staticmethod
    def get_visit(*, visit_id: UUID) -> Visit | None:
        with _store_errors("get_visit"):
            return Visit.objects.filter(id=visit_id).first()

    @staticmethod
    def get_patient(*, patient_id: UUID) -> Patient | None:
        with _store_errors("get_patient"):
            return Patient.objects.filter(id=patient_id).first()

    @staticmethod
    def insert_visit_for_shift(*, shift: Shift, **fields: Any) -> Visit:
        """
        Insert the visit for `shift`, keyed by the shift id.

        Forced INSERT inside a savepoint: if a visit with this id already
        exists the database refuses the row and DuplicateResource is raised,
        so two concurrent creations cannot both succeed.
        """
        visit = Visit(
            id=shift.id,
            shift_id=shift.id,
            tenant_id=shift.tenant_id,
            patient_id=shift.patient_id,
            nurse_id=shift.nurse_id,
            **fields,
        )
        try:
            with transaction.atomic():
                visit.save(force_insert=True)
        except IntegrityError as exc:
            raise DuplicateResource(DUPLICATE_VISIT_MSG, details={"visit_id": str(shift.id)}) from exc
        except DatabaseError as exc:
            raise PersistenceError("Data store error during insert_visit_for_shift.") from exc
        return visit

    @staticmethod
    def link_shift_to_visit(*, shift_id: UUID, visit_id: UUID) -> bool:
        """
        Write the shift's visit back-reference once. Returns False when it
        was already set.
        """
        with _store_errors("link_shift_to_visit"):
            updated = Shift.objects.filter(id=shift_id, visit_id__isnull=True).update(
                visit_id=visit_id,
                updated_at=timezone.now(),
            )
        return updated == 1

    @staticmethod
    def conditional_update(
        *,
        visit_id: UUID,
        tenant_id: UUID,
        expected_statuses: Iterable[str],
        changes: dict[str, Any],
    ) -> bool:
        """
        UPDATE visit SET ... WHERE id = ? AND tenant_id = ? AND status IN (...).

        Returns False when no row matched (status moved underneath us).
        """
        changes = {**changes, "updated_at": timezone.now()}
        with _store_errors("conditional_update"):
            updated = Visit.objects.filter(
                id=visit_id,
                tenant_id=tenant_id,
                status__in=list(expected_statuses),
            ).update(**changes)
        return updated == 1

    @staticmethod
    def list_approved_visits(*, tenant_id: UUID, patient_id: UUID) -> list[Visit]:
        with _store_errors("list_approved_visits"):
            return list(
                Visit.objects.filter(
                    tenant_id=tenant_id,
                    patient_id=patient_id,
                    status=VisitStatus.APPROVED,
                )
            )

    @staticmethod
    def get_shifts(*, shift_ids: Iterable[UUID]) -> dict[UUID, Shift]:
        ids = list(shift_ids)
        if not ids:
            return {}
        with _store_errors("get_shifts"):
            return {s.id: s for s in Shift.objects.filter(id__in=ids)}

    @staticmethod
    def next_scheduled_shift(*, tenant_id: UUID, patient_id: UUID, after=None) -> Shift | None:
        after = after or timezone.now()
        with _store_errors("next_scheduled_shift"):
            return (
                Shift.objects.filter(
                    tenant_id=tenant_id,
                    patient_id=patient_id,
                    status__in=UPCOMING_STATUSES,
                    scheduled_at__gte=after,
                )
                .order_by("scheduled_at")
                .first()
            )

    @staticmethod
    def resolve_role(*, identity: CallerIdentity) -> str:
        with _store_errors("resolve_role"):
            return staff.resolve_role(identity)

    @staticmethod
    def list_tenant_admin_ids(*, tenant_id: UUID) -> list[str]:
        with _store_errors("list_tenant_admin_ids"):
            return staff.list_tenant_admin_ids(tenant_id=tenant_id)

    @staticmethod
    def get_nurse_names(*, user_ids: Iterable[str]) -> dict[str, str]:
        with _store_errors("get_nurse_names"):
            return staff.get_nurse_names(user_ids=user_ids)
