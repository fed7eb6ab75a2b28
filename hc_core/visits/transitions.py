# hc_core/visits/transitions.py
"""
Visit state machine.

Every allowed move is one entry in `_TRANSITIONS`; anything missing is
refused. APPROVED has no outgoing entry.
"""
from __future__ import annotations

from django.db import models

from hc_core.common.exceptions import InvalidStateTransition
from hc_core.visits.models import VisitStatus


class VisitEvent(models.TextChoices):
    CREATE = "CREATE", "Create"
    SUBMIT = "SUBMIT", "Submit"
    REJECT = "REJECT", "Reject"
    APPROVE = "APPROVE", "Approve"


_TRANSITIONS: dict[tuple[str | None, str], str] = {
    (None, VisitEvent.CREATE): VisitStatus.DRAFT,
    (VisitStatus.DRAFT, VisitEvent.SUBMIT): VisitStatus.SUBMITTED,
    (VisitStatus.REJECTED, VisitEvent.SUBMIT): VisitStatus.SUBMITTED,
    (VisitStatus.SUBMITTED, VisitEvent.REJECT): VisitStatus.REJECTED,
    (VisitStatus.SUBMITTED, VisitEvent.APPROVE): VisitStatus.APPROVED,
}

# documentation can be edited while the nurse still owns the visit
EDITABLE_STATUSES = (VisitStatus.DRAFT, VisitStatus.REJECTED)


def source_statuses(event: str) -> list[str]:
    return [src for (src, ev) in _TRANSITIONS if ev == event and src is not None]


def next_status(current: str | None, event: str) -> str:
    try:
        return _TRANSITIONS[(current, event)]
    except KeyError:
        allowed = ", ".join(source_statuses(event)) or "none"
        raise InvalidStateTransition(
            f"Cannot {str(event).lower()} visit with status: {current}. Allowed from: {allowed}",
            details={"current_status": current, "event": str(event)},
        ) from None


def is_terminal(status: str) -> bool:
    return not any(src == status for (src, _ev) in _TRANSITIONS)
