"""
Accounts app views.

All views follow the **Thin View** pattern: validate input via
serializers, delegate to the service layer, and return the result
wrapped in a DRF ``Response``.

View Map
--------
- ``DiscordAuthorizeView`` — GET  /auth/discord/
- ``DiscordCallbackView``  — POST /auth/discord/callback/
- ``LogoutView``           — POST /auth/logout/
- ``MeView``               — GET  /me/
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import (
    AuthorizeUrlSerializer,
    DiscordCallbackSerializer,
    LogoutSerializer,
    TokenResponseSerializer,
    UserDetailSerializer,
)
from .services import AuthenticationService, DiscordIdentityService


class DiscordAuthorizeView(APIView):
    """
    GET /api/accounts/auth/discord/

    Public.  Returns the Discord consent URL the client should open.
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(
        summary="Discord consent URL",
        responses={200: AuthorizeUrlSerializer},
        tags=["Auth"],
    )
    def get(self, request: Request) -> Response:
        url, state = DiscordIdentityService().authorize_url()
        return Response(
            AuthorizeUrlSerializer({"authorize_url": url, "state": state}).data,
            status=status.HTTP_200_OK,
        )


class DiscordCallbackView(APIView):
    """
    POST /api/accounts/auth/discord/callback/

    Public.  Exchanges the OAuth ``code`` for a local session expressed as
    a JWT pair.

    Flow:
        1. Validate input via ``DiscordCallbackSerializer``.
        2. ``DiscordIdentityService.authenticate()`` checks the signed
           ``state`` and upserts the user.
        3. ``AuthenticationService.generate_tokens()`` issues the pair.
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(
        summary="Complete Discord sign-in",
        request=DiscordCallbackSerializer,
        responses={
            200: TokenResponseSerializer,
            400: OpenApiResponse(description="Missing code, or a state this server did not issue."),
            502: OpenApiResponse(description="Discord rejected or did not answer."),
        },
        tags=["Auth"],
    )
    def post(self, request: Request) -> Response:
        serializer = DiscordCallbackSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = serializer.validated_data
        user = DiscordIdentityService().authenticate(data["code"], data["state"])
        tokens = AuthenticationService.generate_tokens(user)
        return Response(
            TokenResponseSerializer({**tokens, "user": user}).data,
            status=status.HTTP_200_OK,
        )


class LogoutView(APIView):
    """POST /api/accounts/auth/logout/ — revoke a refresh token."""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Log out",
        request=LogoutSerializer,
        responses={
            205: OpenApiResponse(description="Refresh token revoked."),
            400: OpenApiResponse(description="Token invalid or already revoked."),
        },
        tags=["Auth"],
    )
    def post(self, request: Request) -> Response:
        serializer = LogoutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        AuthenticationService.logout(serializer.validated_data["refresh"])
        return Response(status=status.HTTP_205_RESET_CONTENT)


class MeView(APIView):
    """GET /api/accounts/me/ — the authenticated user's profile."""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Current user",
        responses={200: UserDetailSerializer},
        tags=["Auth"],
    )
    def get(self, request: Request) -> Response:
        return Response(UserDetailSerializer(request.user).data, status=status.HTTP_200_OK)
