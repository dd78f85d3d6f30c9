"""
Core app views — **Thin Views**.

Each view delegates to the corresponding service in ``core.services``.
"""

from __future__ import annotations

from django.urls import reverse
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from core.domain.access import require_operation
from core.permissions_constants import Operations
from core.store import get_record_store

from .serializers import DashboardStatsSerializer, SystemConstantsSerializer
from .services import DashboardAggregationService, SystemConstantsService


def dashboard_redirect() -> Response:
    """Answer an empty search with a redirect to the dashboard."""
    return Response(
        status=status.HTTP_302_FOUND,
        headers={"Location": reverse("core:dashboard-stats")},
    )


class DashboardStatsView(APIView):
    """
    **GET /api/core/dashboard/**

    Record counts for the staff dashboard.  Gated like search.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Dashboard statistics",
        responses={
            200: OpenApiResponse(response=DashboardStatsSerializer, description="Dashboard stats."),
            403: OpenApiResponse(description="Role may not use the dashboard."),
        },
        tags=["Dashboard"],
    )
    def get(self, request: Request) -> Response:
        require_operation(request.user, Operations.SEARCH)
        data = DashboardAggregationService(get_record_store()).get_stats()
        return Response(DashboardStatsSerializer(data).data, status=status.HTTP_200_OK)


class SystemConstantsView(APIView):
    """
    **GET /api/core/constants/**

    Public configuration data: case statuses, roles and the access policy.
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(
        summary="System constants",
        responses={200: OpenApiResponse(response=SystemConstantsSerializer, description="System constants.")},
        tags=["System"],
    )
    def get(self, request: Request) -> Response:
        data = SystemConstantsService.get_constants()
        return Response(SystemConstantsSerializer(data).data, status=status.HTTP_200_OK)
