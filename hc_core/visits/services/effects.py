# hc_core/visits/services/effects.py
"""
Secondary effects of a visit transition.

A transition returns the writes it implies beyond the visit row as
intents; `dispatch` applies them after the primary write has committed.

Delivery policy: each intent gets one attempt per request, in its own
savepoint. A failed intent is logged and reported back as a warning; the
primary transition stands. Missing audit rows are restored later by the
`backfill_visit_audit` command.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Protocol
from uuid import UUID

from django.db import transaction

from hc_core.audit.services import AuditService
from hc_core.notifications.services import NotificationService, NotificationTarget
from hc_core.visits.gateway import VisitGateway

logger = logging.getLogger(__name__)


class SideEffect(Protocol):
    def apply(self) -> None: ...

    def describe(self) -> str: ...


@dataclass(frozen=True)
class AuditIntent:
    tenant_id: UUID
    actor_user_id: str
    actor_role: str
    action: str
    entity_type: str
    entity_id: UUID
    details: dict[str, Any] = field(default_factory=dict)
    origin: str | None = None

    def apply(self) -> None:
        AuditService.append(
            tenant_id=self.tenant_id,
            actor_user_id=self.actor_user_id,
            actor_role=self.actor_role,
            action=self.action,
            entity_type=self.entity_type,
            entity_id=self.entity_id,
            details=self.details,
            origin=self.origin,
        )

    def describe(self) -> str:
        return f"audit {self.action}"


@dataclass(frozen=True)
class NotificationIntent:
    tenant_id: UUID
    recipient_user_ids: tuple[str, ...]
    type: str
    message: str
    entity_type: str
    entity_id: UUID

    def apply(self) -> None:
        target = NotificationTarget(
            tenant_id=self.tenant_id,
            type=self.type,
            message=self.message,
            entity_type=self.entity_type,
            entity_id=self.entity_id,
        )
        if len(self.recipient_user_ids) == 1:
            NotificationService.send(target=target, recipient_user_id=self.recipient_user_ids[0])
        else:
            NotificationService.send_many(target=target, recipient_user_ids=self.recipient_user_ids)

    def describe(self) -> str:
        return f"notify {self.type} ({len(self.recipient_user_ids)} recipients)"


@dataclass(frozen=True)
class ShiftLinkIntent:
    shift_id: UUID
    visit_id: UUID

    def apply(self) -> None:
        if not VisitGateway.link_shift_to_visit(shift_id=self.shift_id, visit_id=self.visit_id):
            logger.info("Shift %s already linked to a visit", self.shift_id)

    def describe(self) -> str:
        return "link shift to visit"


def dispatch(effects: Iterable[SideEffect]) -> tuple[str, ...]:
    """
    Apply every effect once. Returns warnings for the ones that failed.
    """
    warnings: list[str] = []
    for effect in effects:
        try:
            with transaction.atomic():
                effect.apply()
        except Exception:
            logger.exception("Secondary effect failed: %s", effect.describe())
            warnings.append(f"{effect.describe()} failed")
    return tuple(warnings)
