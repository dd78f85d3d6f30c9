"""
Registry app views.

Thin views: validate ``?q=``, pass the Access Gate, delegate to the
registry services and serialise the result.  An empty query performs no
search and redirects to the dashboard.
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from core.domain.access import require_operation
from core.domain.exceptions import NotFound
from core.permissions_constants import Operations
from core.store import get_record_store
from core.views import dashboard_redirect

from .serializers import (
    CertificateSerializer,
    CitizenSerializer,
    SearchQuerySerializer,
    VehicleSerializer,
)
from .services import CitizenRegistryService, VehicleRegistryService

_Q_PARAMETER = OpenApiParameter(
    name="q",
    type=str,
    location=OpenApiParameter.QUERY,
    description="Search term. Empty → 302 redirect to the dashboard.",
)


class CitizenSearchView(APIView):
    """
    **GET /api/citizens/search/?q=<term>**

    Search citizens by national id or name (max 20 results).
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Search citizens",
        parameters=[_Q_PARAMETER],
        responses={
            200: OpenApiResponse(response=CitizenSerializer(many=True), description="Matching citizens."),
            302: OpenApiResponse(description="Empty query; redirected to the dashboard."),
            403: OpenApiResponse(description="Role may not search."),
        },
        tags=["Registry"],
    )
    def get(self, request: Request) -> Response:
        require_operation(request.user, Operations.SEARCH)
        params = SearchQuerySerializer(data=request.query_params)
        params.is_valid(raise_exception=True)

        results = CitizenRegistryService(get_record_store()).search(params.validated_data.get("q"))
        if results is None:
            return dashboard_redirect()
        return Response(CitizenSerializer(results, many=True).data, status=status.HTTP_200_OK)


class VehicleSearchView(APIView):
    """
    **GET /api/vehicles/search/?q=<term>**

    Search vehicles by licence plate (max 20 results).
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Search vehicles",
        parameters=[_Q_PARAMETER],
        responses={
            200: OpenApiResponse(response=VehicleSerializer(many=True), description="Matching vehicles."),
            302: OpenApiResponse(description="Empty query; redirected to the dashboard."),
            403: OpenApiResponse(description="Role may not search."),
        },
        tags=["Registry"],
    )
    def get(self, request: Request) -> Response:
        require_operation(request.user, Operations.SEARCH)
        params = SearchQuerySerializer(data=request.query_params)
        params.is_valid(raise_exception=True)

        results = VehicleRegistryService(get_record_store()).search(params.validated_data.get("q"))
        if results is None:
            return dashboard_redirect()
        return Response(VehicleSerializer(results, many=True).data, status=status.HTTP_200_OK)


class MyCertificateView(APIView):
    """
    **GET /api/citizens/me/certificate/**

    Background certificate for the citizen linked to the authenticated
    user through ``User.national_id``.  Any authenticated user may fetch
    their own certificate.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="My background certificate",
        responses={
            200: OpenApiResponse(response=CertificateSerializer, description="Certificate."),
            404: OpenApiResponse(description="No citizen record linked to this account."),
        },
        tags=["Registry"],
    )
    def get(self, request: Request) -> Response:
        national_id = getattr(request.user, "national_id", "")
        if not national_id:
            raise NotFound("No citizen record is linked to your account.")
        data = CitizenRegistryService(get_record_store()).certificate(national_id)
        return Response(CertificateSerializer(data).data, status=status.HTTP_200_OK)
