# hc_core/visits/management/commands/backfill_visit_audit.py
from __future__ import annotations

from contextlib import nullcontext

from django.core.management.base import BaseCommand
from django.db import transaction

from hc_core.audit.models import AuditAction
from hc_core.audit.selectors import entity_ids_with_action
from hc_core.audit.services import AuditService
from hc_core.visits.models import Visit, VisitStatus
from hc_core.visits.services.lifecycle import ENTITY_VISIT, ROLE_LABEL_ADMIN, ROLE_LABEL_NURSE


def expected_entries(visit: Visit) -> list[dict]:
    """
    Audit entries a visit's current state implies.
    Earlier reviewers are not kept on the row, so a reconstructed rejection
    is attributed to the last reviewer.

    At most one entry per action is implied. Presence is checked per
    (visit, action), so after a reject/resubmit cycle a missing second
    VISIT_SUBMITTED or VISIT_REJECTED entry is not restored.
    """
    entries = [
        {
            "action": AuditAction.VISIT_CREATED,
            "actor_user_id": visit.nurse_id,
            "actor_role": ROLE_LABEL_NURSE,
            "occurred_at": visit.created_at,
            "details": {"previous_status": None, "new_status": VisitStatus.DRAFT},
        }
    ]
    if visit.submitted_at:
        entries.append(
            {
                "action": AuditAction.VISIT_SUBMITTED,
                "actor_user_id": visit.nurse_id,
                "actor_role": ROLE_LABEL_NURSE,
                "occurred_at": visit.submitted_at,
                "details": {"previous_status": None, "new_status": VisitStatus.SUBMITTED},
            }
        )
    if visit.rejection_reason:
        entries.append(
            {
                "action": AuditAction.VISIT_REJECTED,
                "actor_user_id": visit.reviewed_by or "",
                "actor_role": ROLE_LABEL_ADMIN,
                "occurred_at": visit.reviewed_at or visit.updated_at,
                "details": {
                    "previous_status": VisitStatus.SUBMITTED,
                    "new_status": VisitStatus.REJECTED,
                    "reason": visit.rejection_reason,
                },
            }
        )
    if visit.status == VisitStatus.APPROVED:
        entries.append(
            {
                "action": AuditAction.VISIT_APPROVED,
                "actor_user_id": visit.approved_by or "",
                "actor_role": ROLE_LABEL_ADMIN,
                "occurred_at": visit.approved_at or visit.updated_at,
                "details": {"previous_status": VisitStatus.SUBMITTED, "new_status": VisitStatus.APPROVED},
            }
        )
    return entries


class Command(BaseCommand):
    help = "Backfill visit audit entries from current visit state. Only inserts missing entries."

    def add_arguments(self, parser):
        parser.add_argument("--dry-run", action="store_true", help="Print counts only; do not write.")
        parser.add_argument("--tenant-id", type=str, default=None, help="Optional tenant UUID filter.")
        parser.add_argument("--limit", type=int, default=None, help="Optional limit visits scanned.")

    def handle(self, *args, **opts):
        dry = opts["dry_run"]

        qs = Visit.objects.all().order_by("created_at")
        if opts["tenant_id"]:
            qs = qs.filter(tenant_id=opts["tenant_id"])
        if opts["limit"]:
            qs = qs[: opts["limit"]]

        visits = list(qs)
        ids = [v.id for v in visits]
        present = {
            action: entity_ids_with_action(entity_type=ENTITY_VISIT, action=action, entity_ids=ids)
            for action in AuditAction.values
        }

        created_count = 0
        with nullcontext() if dry else transaction.atomic():
            for visit in visits:
                for entry in expected_entries(visit):
                    if visit.id in present[str(entry["action"])]:
                        continue
                    created_count += 1
                    if dry:
                        continue
                    AuditService.append(
                        tenant_id=visit.tenant_id,
                        actor_user_id=entry["actor_user_id"],
                        actor_role=entry["actor_role"],
                        action=entry["action"],
                        entity_type=ENTITY_VISIT,
                        entity_id=visit.id,
                        details={**entry["details"], "backfilled": True},
                        occurred_at=entry["occurred_at"],
                    )

        self.stdout.write(f"Visits examined: {len(visits)}")
        if dry:
            self.stdout.write(f"DRY RUN: audit entries that would be created: {created_count}")
        else:
            self.stdout.write(f"Audit entries created: {created_count}")
