"""
Smoke tests — verify that Django boots, URL routing resolves, the
Record Store backend is wired in, and the OpenAPI schema renders.
"""

from __future__ import annotations

import pytest
from django.apps import apps
from django.urls import resolve, reverse


# ════════════════════════════════════════════════════════════════════
#  URL Routing Smoke Tests
# ════════════════════════════════════════════════════════════════════

class TestURLRouting:
    """Ensure all app URL names reverse to the documented paths."""

    EXPECTED_URLS = [
        # (url_name, kwargs, expected_path)
        ("accounts:discord-authorize", {}, "/api/accounts/auth/discord/"),
        ("accounts:discord-callback", {}, "/api/accounts/auth/discord/callback/"),
        ("accounts:token-refresh", {}, "/api/accounts/auth/token/refresh/"),
        ("accounts:logout", {}, "/api/accounts/auth/logout/"),
        ("accounts:me", {}, "/api/accounts/me/"),
        ("core:dashboard-stats", {}, "/api/core/dashboard/"),
        ("core:system-constants", {}, "/api/core/constants/"),
        ("registry:citizen-search", {}, "/api/citizens/search/"),
        ("registry:vehicle-search", {}, "/api/vehicles/search/"),
        ("registry:my-certificate", {}, "/api/citizens/me/certificate/"),
        ("case-list", {}, "/api/cases/"),
        ("case-search", {}, "/api/cases/search/"),
        ("case-trash", {}, "/api/cases/trash/"),
        ("case-detail", {"case_id": "2024-53201"}, "/api/cases/2024-53201/"),
        ("case-archive", {"case_id": "2024-53201"}, "/api/cases/2024-53201/archive/"),
        ("case-restore", {"case_id": "2024-53201"}, "/api/cases/2024-53201/restore/"),
    ]

    @pytest.mark.parametrize("url_name,kwargs,expected_path", EXPECTED_URLS)
    def test_url_reverses(self, url_name: str, kwargs: dict, expected_path: str):
        assert reverse(url_name, kwargs=kwargs) == expected_path

    def test_search_is_not_swallowed_by_detail_route(self):
        assert resolve("/api/cases/search/").url_name == "case-search"
        assert resolve("/api/cases/trash/").url_name == "case-trash"


class TestWiring:

    def test_record_store_is_built_at_startup(self):
        from core.store import OrmRecordStore

        assert isinstance(apps.get_app_config("core").record_store, OrmRecordStore)

    def test_memory_backend_is_selectable(self, settings):
        from core.store import MemoryRecordStore, build_record_store

        settings.RECORD_STORE_BACKEND = "core.store.MemoryRecordStore"
        assert isinstance(build_record_store(), MemoryRecordStore)

    @pytest.mark.django_db
    def test_openapi_schema_renders(self, api_client):
        resp = api_client.get(reverse("schema"))
        assert resp.status_code == 200
