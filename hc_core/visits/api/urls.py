# hc_core/visits/api/urls.py
from __future__ import annotations

from django.urls import path

from hc_core.visits.api.views import (
    ApproveVisitView,
    CreateVisitDraftView,
    FamilyVisitSummariesView,
    RejectVisitView,
    SubmitVisitView,
    VisitDetailView,
    VisitDocumentationView,
)

app_name = "visits"

urlpatterns = [
    path("shifts/<uuid:shift_id>/visit/", CreateVisitDraftView.as_view(), name="visit-create-draft"),
    path("visits/<uuid:shift_id>/", VisitDetailView.as_view(), name="visit-detail"),
    path("visits/<uuid:shift_id>/documentation/", VisitDocumentationView.as_view(), name="visit-documentation"),
    path("visits/<uuid:shift_id>/submit/", SubmitVisitView.as_view(), name="visit-submit"),
    path("visits/<uuid:shift_id>/reject/", RejectVisitView.as_view(), name="visit-reject"),
    path("visits/<uuid:shift_id>/approve/", ApproveVisitView.as_view(), name="visit-approve"),
    path(
        "patients/<uuid:patient_id>/visit-summaries/",
        FamilyVisitSummariesView.as_view(),
        name="family-visit-summaries",
    ),
]
