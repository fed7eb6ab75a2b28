# hc_core/visits/api/views.py
from __future__ import annotations

from uuid import UUID

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from hc_core.iam.identity import from_request
from hc_core.visits.api.serializers import (
    RejectVisitSerializer,
    VisitSerializer,
    VisitSummarySerializer,
    VisitTransitionResultSerializer,
)
from hc_core.visits.services.documentation import DocumentationSerializer
from hc_core.visits.services.lifecycle import VisitLifecycleService


class CreateVisitDraftView(APIView):
    @extend_schema(
        tags=["Visits"],
        request=None,
        responses={201: VisitTransitionResultSerializer},
    )
    def post(self, request, shift_id: UUID):
        result = VisitLifecycleService.create_draft(identity=from_request(request), shift_id=shift_id)
        return Response(result.as_dict(), status=status.HTTP_201_CREATED)


class VisitDetailView(APIView):
    @extend_schema(tags=["Visits"], responses={200: VisitSerializer})
    def get(self, request, shift_id: UUID):
        visit = VisitLifecycleService.get_visit(identity=from_request(request), shift_id=shift_id)
        return Response(VisitSerializer(visit).data, status=status.HTTP_200_OK)


class VisitDocumentationView(APIView):
    @extend_schema(
        tags=["Visits"],
        request=DocumentationSerializer,
        responses={200: VisitTransitionResultSerializer},
    )
    def patch(self, request, shift_id: UUID):
        result = VisitLifecycleService.save_documentation(
            identity=from_request(request),
            shift_id=shift_id,
            data=request.data,
        )
        return Response(result.as_dict(), status=status.HTTP_200_OK)


class SubmitVisitView(APIView):
    @extend_schema(tags=["Visits"], request=None, responses={200: VisitTransitionResultSerializer})
    def post(self, request, shift_id: UUID):
        result = VisitLifecycleService.submit(identity=from_request(request), shift_id=shift_id)
        return Response(result.as_dict(), status=status.HTTP_200_OK)


class RejectVisitView(APIView):
    @extend_schema(
        tags=["Visits"],
        request=RejectVisitSerializer,
        responses={200: VisitTransitionResultSerializer},
    )
    def post(self, request, shift_id: UUID):
        ser = RejectVisitSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        result = VisitLifecycleService.reject(
            identity=from_request(request),
            shift_id=shift_id,
            reason=ser.validated_data["reason"],
        )
        return Response(result.as_dict(), status=status.HTTP_200_OK)


class ApproveVisitView(APIView):
    @extend_schema(tags=["Visits"], request=None, responses={200: VisitTransitionResultSerializer})
    def post(self, request, shift_id: UUID):
        result = VisitLifecycleService.approve(identity=from_request(request), shift_id=shift_id)
        return Response(result.as_dict(), status=status.HTTP_200_OK)


class FamilyVisitSummariesView(APIView):
    """
    Approved visit summaries for a patient's family viewers.
    """

    @extend_schema(tags=["Family"], responses={200: VisitSummarySerializer(many=True)})
    def get(self, request, patient_id: UUID):
        summaries = VisitLifecycleService.list_approved_summaries_for_family(
            identity=from_request(request),
            patient_id=patient_id,
        )
        data = VisitSummarySerializer([s.as_dict() for s in summaries], many=True).data
        return Response(data, status=status.HTTP_200_OK)
