# hc_core/notifications/services.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable
from uuid import UUID

from django.conf import settings
from django.db import transaction

from hc_core.notifications.models import Notification


@dataclass(frozen=True)
class NotificationTarget:
    tenant_id: UUID
    type: str
    message: str
    entity_type: str
    entity_id: UUID


class NotificationService:
    @staticmethod
    @transaction.atomic
    def send(*, target: NotificationTarget, recipient_user_id: str) -> Notification:
        return Notification.objects.create(
            tenant_id=target.tenant_id,
            recipient_user_id=recipient_user_id,
            type=target.type,
            message=target.message,
            entity_type=target.entity_type,
            entity_id=target.entity_id,
        )

    @staticmethod
    @transaction.atomic
    def send_many(
        *,
        target: NotificationTarget,
        recipient_user_ids: Iterable[str],
        batch_size: int | None = None,
    ) -> list[Notification]:
        """
        One unread notification per recipient, written in batches.
        Duplicate ids are collapsed; order of first appearance is kept.
        """
        recipients = list(dict.fromkeys(uid for uid in recipient_user_ids if uid))
        objs = [
            Notification(
                tenant_id=target.tenant_id,
                recipient_user_id=uid,
                type=target.type,
                message=target.message,
                entity_type=target.entity_type,
                entity_id=target.entity_id,
            )
            for uid in recipients
        ]
        return Notification.objects.bulk_create(
            objs,
            batch_size=batch_size or settings.HC_NOTIFICATION_BATCH_SIZE,
        )
