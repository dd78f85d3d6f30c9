"""
Integration tests for the registry endpoints.

Endpoints under test:
    GET /api/citizens/search/?q=
    GET /api/vehicles/search/?q=
    GET /api/citizens/me/certificate/
"""

from __future__ import annotations

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from accounts.models import User
from core.permissions_constants import Roles
from registry.models import Citizen, Vehicle


class TestRegistryEndpoints(TestCase):

    @classmethod
    def setUpTestData(cls):
        Citizen.objects.create(
            national_id="12.345.678-9",
            full_name="Ana Rojas",
            background=["Speeding ticket (2022)"],
        )
        Citizen.objects.create(national_id="9.876.543-2", full_name="Luis Rojas")
        Vehicle.objects.create(plate="ABCD-12", model="Sedan", color="Red", owner_national_id="12.345.678-9")

        cls.officer = User.objects.create_user(
            username="registry_officer", discord_id="5001", role=Roles.OFFICER,
        )
        cls.judge = User.objects.create_user(
            username="registry_judge", discord_id="5002", role=Roles.JUDGE,
            national_id="12.345.678-9",
        )

    def setUp(self):
        self.client = APIClient()

    def _login(self, user):
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {AccessToken.for_user(user)}")

    def test_citizen_search(self):
        self._login(self.officer)
        resp = self.client.get(reverse("registry:citizen-search"), {"q": "rojas"})
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(
            sorted(c["national_id"] for c in resp.data),
            ["12.345.678-9", "9.876.543-2"],
        )

    def test_vehicle_search(self):
        self._login(self.officer)
        resp = self.client.get(reverse("registry:vehicle-search"), {"q": "abcd"})
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data[0]["plate"], "ABCD-12")
        self.assertEqual(resp.data[0]["owner_national_id"], "12.345.678-9")

    def test_empty_query_redirects_to_dashboard(self):
        self._login(self.officer)
        for name in ("registry:citizen-search", "registry:vehicle-search"):
            resp = self.client.get(reverse(name), {"q": "  "})
            self.assertEqual(resp.status_code, status.HTTP_302_FOUND)
            self.assertEqual(resp["Location"], reverse("core:dashboard-stats"))

    def test_search_requires_authentication(self):
        resp = self.client.get(reverse("registry:citizen-search"), {"q": "rojas"})
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_judge_may_not_search(self):
        self._login(self.judge)
        resp = self.client.get(reverse("registry:citizen-search"), {"q": "rojas"})
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_certificate_for_linked_citizen(self):
        self._login(self.judge)
        resp = self.client.get(reverse("registry:my-certificate"))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["full_name"], "Ana Rojas")
        self.assertTrue(resp.data["has_background"])

    def test_certificate_without_linked_citizen(self):
        self._login(self.officer)
        resp = self.client.get(reverse("registry:my-certificate"))
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
