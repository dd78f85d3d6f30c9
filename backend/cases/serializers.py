"""
Cases app serializers.

Request and response serializers for the Cases API.  Field-level
validation only; lifecycle rules live in ``services.py``.  Response
serializers read the plain record dicts returned by the Record Store.
"""

from __future__ import annotations

from rest_framework import serializers

from .models import CaseStatus


class CaseCreateSerializer(serializers.Serializer):
    """
    Body of ``POST /api/cases/``.

    The creating officer is taken from the authenticated user, never from
    the payload.
    """

    defendant_id = serializers.CharField(
        max_length=20,
        help_text="National id of the defendant. Unknown ids get a placeholder citizen.",
    )
    internal_roll = serializers.CharField(
        max_length=100,
        required=False,
        allow_blank=True,
        default="",
        help_text="Optional free-form secondary reference.",
    )
    description = serializers.CharField(
        help_text="What the case is about.",
    )


class CaseSerializer(serializers.Serializer):
    """Read representation of a case record."""

    case_id = serializers.CharField(read_only=True)
    internal_roll = serializers.CharField(read_only=True, allow_blank=True)
    description = serializers.CharField(read_only=True)
    status = serializers.ChoiceField(choices=CaseStatus.choices, read_only=True)
    defendant_id = serializers.CharField(read_only=True)
    assigned_officer_id = serializers.CharField(read_only=True, allow_blank=True)
    deleted = serializers.BooleanField(read_only=True)
    created_at = serializers.DateTimeField(read_only=True)
    updated_at = serializers.DateTimeField(read_only=True)
