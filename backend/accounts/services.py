"""
Accounts Service Layer.

Identity Provider Adapter and token issuance.  Views stay thin: they
validate the request, call a service method and wrap the result in a DRF
``Response``.

Architecture
------------
- ``DiscordIdentityService`` — builds the OAuth authorize URL, exchanges
  an authorization code for a Discord profile and upserts the local user.
- ``AuthenticationService``  — JWT issuance (with a ``role`` claim) and
  refresh-token revocation.

Sign-in sequence::

    client ──code──▶ callback view ──▶ DiscordIdentityService.authenticate()
                                          │  POST /oauth2/token
                                          │  GET  /users/@me
                                          ▼
                                       upsert_user() ──▶ AuthenticationService.generate_tokens()
"""

from __future__ import annotations

import logging
import secrets
from typing import Any
from urllib.parse import urlencode

import httpx
from django.conf import settings
from django.core import signing
from django.db import IntegrityError, transaction
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from core.domain.exceptions import IdentityProviderError, ValidationError

from .models import User, default_role

logger = logging.getLogger(__name__)

DISCORD_AUTHORIZE_URL = "https://discord.com/oauth2/authorize"
DISCORD_TOKEN_URL = "https://discord.com/api/oauth2/token"
DISCORD_PROFILE_URL = "https://discord.com/api/users/@me"
DISCORD_SCOPES = ("identify", "guilds")
DISCORD_TIMEOUT = 10
DISCORD_STATE_SALT = "accounts.discord.state"
DISCORD_STATE_MAX_AGE = 600


# ═══════════════════════════════════════════════════════════════════
#  Identity Provider Adapter (Discord)
# ═══════════════════════════════════════════════════════════════════


class DiscordIdentityService:
    """
    OAuth2 authorization-code flow against Discord.

    Credentials come from ``DISCORD_CLIENT_ID``, ``DISCORD_CLIENT_SECRET``
    and ``DISCORD_CALLBACK_URL``.  Every outbound call uses ``httpx`` with
    a fixed timeout; transport errors and non-2xx answers surface as
    ``IdentityProviderError``.
    """

    def __init__(
        self,
        client_id: str | None = None,
        client_secret: str | None = None,
        redirect_uri: str | None = None,
    ) -> None:
        self.client_id = client_id or settings.DISCORD_CLIENT_ID
        self.client_secret = client_secret or settings.DISCORD_CLIENT_SECRET
        self.redirect_uri = redirect_uri or settings.DISCORD_CALLBACK_URL

    def authorize_url(self) -> tuple[str, str]:
        """
        Return ``(url, state)`` for redirecting the browser to Discord.

        ``state`` is a signed, timestamped nonce.  The client hands it back
        to the callback, which rejects anything this server did not issue
        in the last ``DISCORD_STATE_MAX_AGE`` seconds.
        """
        state = signing.dumps(secrets.token_urlsafe(16), salt=DISCORD_STATE_SALT)
        query = urlencode({
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": " ".join(DISCORD_SCOPES),
            "state": state,
        })
        return f"{DISCORD_AUTHORIZE_URL}?{query}", state

    def exchange_code(self, code: str) -> str:
        """
        Trade an authorization code for a Discord access token.

        Raises:
            IdentityProviderError: Discord is unreachable or rejected the code.
        """
        payload = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": self.redirect_uri,
        }
        data = self._call("POST", DISCORD_TOKEN_URL, data=payload)
        access_token = data.get("access_token")
        if not access_token:
            raise IdentityProviderError("Discord did not return an access token.")
        return access_token

    def fetch_profile(self, access_token: str) -> dict[str, Any]:
        """Return the ``/users/@me`` payload for ``access_token``."""
        profile = self._call(
            "GET",
            DISCORD_PROFILE_URL,
            headers={"Authorization": f"Bearer {access_token}"},
        )
        if not profile.get("id") or not profile.get("username"):
            raise IdentityProviderError("Discord profile is missing id or username.")
        return profile

    @staticmethod
    def verify_state(state: str) -> None:
        """
        Check that ``state`` came from ``authorize_url()`` and is still fresh.

        Raises:
            ValidationError: The state is missing, tampered with or expired.
        """
        if not state:
            raise ValidationError(
                "The OAuth state is required.",
                errors={"state": ["This field may not be blank."]},
            )
        try:
            signing.loads(state, salt=DISCORD_STATE_SALT, max_age=DISCORD_STATE_MAX_AGE)
        except signing.SignatureExpired as exc:
            raise ValidationError(
                "The OAuth state has expired.",
                errors={"state": ["Sign-in took too long, start again."]},
            ) from exc
        except signing.BadSignature as exc:
            logger.warning("Rejected Discord callback with a forged state")
            raise ValidationError(
                "The OAuth state does not match.",
                errors={"state": ["Invalid state."]},
            ) from exc

    def authenticate(self, code: str, state: str) -> User:
        """Complete the sign-in for ``code`` and return the local user."""
        self.verify_state(state)
        if not code:
            raise ValidationError(
                "An authorization code is required.",
                errors={"code": ["This field may not be blank."]},
            )
        profile = self.fetch_profile(self.exchange_code(code))
        return self.upsert_user(profile)

    @staticmethod
    def upsert_user(profile: dict[str, Any]) -> User:
        """
        Create or refresh the local user for a Discord profile.

        Lookup is by ``discord_id`` only.  Existing users get ``username``
        and ``avatar`` refreshed and keep their role; new users receive
        ``DEFAULT_USER_ROLE``.
        """
        discord_id = str(profile["id"])
        username = _available_username(profile["username"], discord_id)
        avatar = profile.get("avatar") or ""

        try:
            with transaction.atomic():
                user, created = User.objects.select_for_update().get_or_create(
                    discord_id=discord_id,
                    defaults={
                        "username": username,
                        "avatar": avatar,
                        "role": default_role(),
                    },
                )
                if not created:
                    user.username = username
                    user.avatar = avatar
                    user.save(update_fields=["username", "avatar"])
        except IntegrityError:
            try:
                # Lost a race with a parallel first sign-in of the same account.
                user, created = User.objects.get(discord_id=discord_id), False
            except User.DoesNotExist:
                # The clash was on the username, claimed after the availability check.
                username = f"{profile['username']}-{discord_id}"
                user, created = User.objects.get_or_create(
                    discord_id=discord_id,
                    defaults={
                        "username": username,
                        "avatar": avatar,
                        "role": default_role(),
                    },
                )

        if created:
            user.set_unusable_password()
            user.save(update_fields=["password"])
            logger.info("Registered Discord user %s as %s (%s)", discord_id, username, user.role)
        else:
            logger.info("Discord user %s signed in", discord_id)
        return user

    @staticmethod
    def _call(method: str, url: str, **kwargs) -> dict[str, Any]:
        try:
            with httpx.Client(timeout=DISCORD_TIMEOUT) as client:
                response = client.request(method, url, **kwargs)
                response.raise_for_status()
                return response.json()
        except httpx.TimeoutException as exc:
            logger.warning("Discord timeout on %s %s", method, url)
            raise IdentityProviderError("Discord did not answer in time.") from exc
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "Discord answered %s on %s %s", exc.response.status_code, method, url,
            )
            raise IdentityProviderError("Discord rejected the sign-in.") from exc
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Discord call %s %s failed: %s", method, url, exc)
            raise IdentityProviderError("Discord is unavailable.") from exc


def _available_username(wanted: str, discord_id: str) -> str:
    """Keep the Discord name unless another local account already owns it."""
    taken = (
        User.objects.filter(username=wanted)
        .exclude(discord_id=discord_id)
        .exists()
    )
    return f"{wanted}-{discord_id}" if taken else wanted


# ═══════════════════════════════════════════════════════════════════
#  Authentication Service
# ═══════════════════════════════════════════════════════════════════


class AuthenticationService:
    """JWT issuance and revocation."""

    @staticmethod
    def generate_tokens(user: User) -> dict[str, str]:
        """
        Issue a JWT access/refresh token pair for the given user.

        The ``role`` claim lets clients render role-specific UI without a
        separate ``/me/`` call.  The server never trusts it: the Access
        Gate reads the role from the database user.
        """
        refresh = RefreshToken.for_user(user)
        refresh["role"] = user.role
        refresh["discord_id"] = user.discord_id
        return {
            "access": str(refresh.access_token),
            "refresh": str(refresh),
        }

    @staticmethod
    def logout(refresh: str) -> None:
        """
        Blacklist a refresh token.

        Raises:
            ValidationError: The token is malformed, expired or already revoked.
        """
        try:
            RefreshToken(refresh).blacklist()
        except TokenError as exc:
            raise ValidationError(
                "Invalid or expired refresh token.",
                errors={"refresh": [str(exc)]},
            ) from exc
