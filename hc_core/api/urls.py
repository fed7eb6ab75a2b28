# hc_core/api/urls.py
from __future__ import annotations

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from hc_core.audit.api.views import AuditLogListView
from hc_core.notifications.api.views import NotificationViewSet

router = DefaultRouter()
router.register(r"notifications", NotificationViewSet, basename="notifications")

urlpatterns = [
    path("", include(("hc_core.visits.api.urls", "visits"), namespace="visits")),
    path("audit-log/", AuditLogListView.as_view(), name="audit-log"),
    path("", include(router.urls)),
]
