# hc_core/notifications/selectors.py
from __future__ import annotations

from uuid import UUID

from django.db.models import QuerySet

from hc_core.notifications.models import Notification


def inbox_qs(*, tenant_id: UUID, user_id: str) -> QuerySet[Notification]:
    return Notification.objects.filter(tenant_id=tenant_id, recipient_user_id=user_id)
