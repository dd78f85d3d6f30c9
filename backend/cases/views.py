"""
Cases app ViewSets.

Architecture: Views are intentionally thin.
Every view follows the strict four-step pattern:

    1. Ask the Access Gate whether the actor's role permits the operation.
    2. Parse / validate input via a serializer.
    3. Delegate to ``CaseLifecycleService``.
    4. Serialize the result and return a DRF ``Response``.

Domain exceptions raised by the gate or the service are rendered by
``core.domain.exception_handler``.
"""

from __future__ import annotations

import logging

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response

from core.domain.access import require_operation
from core.permissions_constants import Operations
from core.store import get_record_store
from core.views import dashboard_redirect
from registry.serializers import SearchQuerySerializer

from .serializers import CaseCreateSerializer, CaseSerializer
from .services import CaseLifecycleService

logger = logging.getLogger(__name__)


class CaseViewSet(viewsets.ViewSet):
    """
    Central ViewSet for the cases app.

    Uses ``viewsets.ViewSet`` (not ``ModelViewSet``) so every action is
    explicitly defined.  Cases are addressed by their public ``case_id``.

    Permission Strategy
    -------------------
    ``IsAuthenticated`` rejects anonymous callers (401).  Role checks go
    through ``core.domain.access.require_operation`` before the service
    runs (403).
    """

    permission_classes = [IsAuthenticated]
    lookup_field = "case_id"
    lookup_value_regex = r"[^/]+"

    def _service(self) -> CaseLifecycleService:
        return CaseLifecycleService(get_record_store())

    @extend_schema(
        summary="Open a new case",
        request=CaseCreateSerializer,
        responses={
            201: OpenApiResponse(response=CaseSerializer, description="Case created."),
            400: OpenApiResponse(description="Missing defendant or description."),
            403: OpenApiResponse(description="Role may not create cases."),
            409: OpenApiResponse(description="No free case id could be allocated."),
        },
        tags=["Cases"],
    )
    def create(self, request: Request) -> Response:
        """POST /api/cases/"""
        actor = require_operation(request.user, Operations.CREATE)
        serializer = CaseCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        case = self._service().create(
            defendant_id=data["defendant_id"],
            internal_roll=data.get("internal_roll"),
            description=data["description"],
            creator_id=actor.external_id,
        )
        return Response(CaseSerializer(case).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        summary="Retrieve a case",
        responses={
            200: OpenApiResponse(response=CaseSerializer, description="Case detail."),
            404: OpenApiResponse(description="Case not found."),
        },
        tags=["Cases"],
    )
    def retrieve(self, request: Request, case_id: str = None) -> Response:
        """GET /api/cases/{case_id}/"""
        require_operation(request.user, Operations.SEARCH)
        case = self._service().get(case_id)
        return Response(CaseSerializer(case).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Permanently delete a case",
        description="Irreversible. Restricted to staff and admin roles.",
        responses={
            204: OpenApiResponse(description="Case destroyed."),
            403: OpenApiResponse(description="Role may not destroy cases."),
            404: OpenApiResponse(description="Case not found."),
        },
        tags=["Recycle Bin"],
    )
    def destroy(self, request: Request, case_id: str = None) -> Response:
        """DELETE /api/cases/{case_id}/"""
        actor = require_operation(request.user, Operations.DESTROY)
        self._service().destroy(case_id, performed_by=actor.external_id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        summary="Move a case to the recycle bin",
        request=None,
        responses={
            204: OpenApiResponse(description="Case archived (or already archived)."),
            403: OpenApiResponse(description="Role may not archive cases."),
            404: OpenApiResponse(description="Case not found."),
        },
        tags=["Recycle Bin"],
    )
    @action(detail=True, methods=["post"], url_path="archive")
    def archive(self, request: Request, case_id: str = None) -> Response:
        """POST /api/cases/{case_id}/archive/"""
        actor = require_operation(request.user, Operations.ARCHIVE)
        self._service().archive(case_id, performed_by=actor.external_id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        summary="Restore a case from the recycle bin",
        request=None,
        responses={
            204: OpenApiResponse(description="Case restored (or was not archived)."),
            403: OpenApiResponse(description="Role may not restore cases."),
            404: OpenApiResponse(description="Case not found."),
        },
        tags=["Recycle Bin"],
    )
    @action(detail=True, methods=["post"], url_path="restore")
    def restore(self, request: Request, case_id: str = None) -> Response:
        """POST /api/cases/{case_id}/restore/"""
        actor = require_operation(request.user, Operations.RESTORE)
        self._service().restore(case_id, performed_by=actor.external_id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        summary="Search active cases",
        parameters=[
            OpenApiParameter(
                name="q",
                type=str,
                location=OpenApiParameter.QUERY,
                description="Substring of case id or internal roll. Empty → 302 to the dashboard.",
            ),
        ],
        responses={
            200: OpenApiResponse(response=CaseSerializer(many=True), description="Up to 20 matching cases."),
            302: OpenApiResponse(description="Empty query; redirected to the dashboard."),
            403: OpenApiResponse(description="Role may not search."),
        },
        tags=["Cases"],
    )
    @action(detail=False, methods=["get"], url_path="search")
    def search(self, request: Request) -> Response:
        """GET /api/cases/search/?q=<term>"""
        require_operation(request.user, Operations.SEARCH)
        params = SearchQuerySerializer(data=request.query_params)
        params.is_valid(raise_exception=True)

        results = self._service().search(params.validated_data.get("q"))
        if results is None:
            return dashboard_redirect()
        return Response(CaseSerializer(results, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="List the recycle bin",
        responses={
            200: OpenApiResponse(response=CaseSerializer(many=True), description="Archived cases, newest first."),
            403: OpenApiResponse(description="Role may not view the recycle bin."),
        },
        tags=["Recycle Bin"],
    )
    @action(detail=False, methods=["get"], url_path="trash")
    def trash(self, request: Request) -> Response:
        """GET /api/cases/trash/"""
        require_operation(request.user, Operations.LIST_ARCHIVED)
        cases = self._service().list_archived()
        return Response(CaseSerializer(cases, many=True).data, status=status.HTTP_200_OK)
