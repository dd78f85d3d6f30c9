"""
Registry app serializers.

Response-only serializers over the plain record dicts returned by the
Record Store, plus the query-parameter serializer shared by the search
endpoints.
"""

from __future__ import annotations

from rest_framework import serializers


class SearchQuerySerializer(serializers.Serializer):
    """
    ``?q=`` for the search endpoints.

    A missing or blank ``q`` is valid: the view answers it with a redirect
    to the dashboard instead of running a query.
    """

    q = serializers.CharField(
        required=False,
        allow_blank=True,
        max_length=100,
        help_text="Case-insensitive substring to look for.",
    )


class CitizenSerializer(serializers.Serializer):
    national_id = serializers.CharField(read_only=True)
    full_name = serializers.CharField(read_only=True)
    birth_date = serializers.CharField(read_only=True, allow_blank=True)
    background = serializers.ListField(child=serializers.CharField(), read_only=True)
    created_at = serializers.DateTimeField(read_only=True)


class VehicleSerializer(serializers.Serializer):
    plate = serializers.CharField(read_only=True)
    model = serializers.CharField(read_only=True)
    color = serializers.CharField(read_only=True, allow_blank=True)
    owner_national_id = serializers.CharField(read_only=True, allow_blank=True)


class CertificateSerializer(serializers.Serializer):
    """Background certificate for the citizen linked to the current user."""

    national_id = serializers.CharField(read_only=True)
    full_name = serializers.CharField(read_only=True)
    background = serializers.ListField(child=serializers.CharField(), read_only=True)
    has_background = serializers.BooleanField(read_only=True)
    issued_at = serializers.DateTimeField(read_only=True)
