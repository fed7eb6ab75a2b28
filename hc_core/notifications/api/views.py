# hc_core/notifications/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema, extend_schema_view
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from hc_core.common.exceptions import NotFound
from hc_core.iam import guard
from hc_core.iam.identity import CallerIdentity, from_request
from hc_core.notifications.api.serializers import NotificationSerializer
from hc_core.notifications.models import Notification
from hc_core.notifications.selectors import inbox_qs


@extend_schema_view(
    list=extend_schema(
        tags=["Notifications"],
        parameters=[
            OpenApiParameter(
                name="is_read",
                type=OpenApiTypes.BOOL,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Only read (true) or unread (false) notifications.",
            ),
        ],
    ),
    mark_read=extend_schema(tags=["Notifications"], request=None),
)
class NotificationViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """
    The caller's own inbox.
    """
    serializer_class = NotificationSerializer
    queryset = Notification.objects.none()
    lookup_value_regex = "[0-9a-fA-F-]{36}"

    def identity(self) -> CallerIdentity:
        return guard.require_identity(from_request(self.request))

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return Notification.objects.none()

        ident = self.identity()
        qs = inbox_qs(tenant_id=ident.tenant_id, user_id=ident.user_id)
        is_read = self.request.query_params.get("is_read")
        if is_read in ("true", "false"):
            qs = qs.filter(is_read=(is_read == "true"))
        return qs.order_by("-created_at")

    @action(methods=["POST"], detail=True, url_path="mark-read")
    def mark_read(self, request, pk=None):
        ident = self.identity()
        notif = inbox_qs(tenant_id=ident.tenant_id, user_id=ident.user_id).filter(id=pk).first()
        if notif is None:
            raise NotFound("Notification not found")
        notif.mark_read()
        notif.save(update_fields=["is_read", "read_at", "updated_at"])
        return Response(NotificationSerializer(notif).data, status=status.HTTP_200_OK)
