"""
Root conftest.py — shared fixtures for the entire test suite.

Provides:
  - ``api_client`` fixture returning a DRF ``APIClient``.
  - ``create_user`` factory fixture for creating portal users.
  - ``auth_header`` fixture for authenticated requests (JWT).
  - ``memory_store`` fixture with an empty in-process Record Store.
"""

from __future__ import annotations

import pytest
from rest_framework.test import APIClient

from core.permissions_constants import Roles


@pytest.fixture()
def api_client() -> APIClient:
    """Unauthenticated DRF test client."""
    return APIClient()


@pytest.fixture()
def create_user(db):
    """
    Factory fixture that creates a user signed in through Discord.

    Usage::

        def test_something(create_user):
            officer = create_user()
            admin = create_user(role=Roles.ADMIN, national_id="11.111.111-1")
    """
    from accounts.models import User

    _counter = 0

    def _factory(
        *,
        username: str | None = None,
        discord_id: str | None = None,
        role: str = Roles.OFFICER,
        national_id: str = "",
        **kwargs,
    ) -> User:
        nonlocal _counter
        _counter += 1
        if username is None:
            username = f"testuser{_counter}"
        if discord_id is None:
            discord_id = f"{100000000000000000 + _counter}"

        user = User.objects.create_user(
            username=username,
            discord_id=discord_id,
            role=role,
            national_id=national_id,
            **kwargs,
        )
        return user

    return _factory


@pytest.fixture()
def auth_header(create_user):
    """
    Returns a helper that creates a user and returns an ``Authorization``
    header dict with a valid JWT access token.

    Usage::

        def test_protected(auth_header, api_client):
            header = auth_header(role=Roles.STAFF)
            api_client.credentials(HTTP_AUTHORIZATION=header["Authorization"])
    """
    from rest_framework_simplejwt.tokens import AccessToken

    def _make(*, role: str = Roles.OFFICER, **user_kwargs) -> dict[str, str]:
        user = create_user(role=role, **user_kwargs)
        token = AccessToken.for_user(user)
        return {"Authorization": f"Bearer {token}"}

    return _make


@pytest.fixture()
def memory_store():
    """A fresh, empty ``MemoryRecordStore``."""
    from core.store import MemoryRecordStore

    return MemoryRecordStore()
