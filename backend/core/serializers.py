"""
Core app serializers.

**Response-only** serializers for the aggregated endpoints served by the
core app.  They work exclusively with plain Python dicts produced by the
service layer.
"""

from __future__ import annotations

from rest_framework import serializers


class DashboardStatsSerializer(serializers.Serializer):
    total_citizens = serializers.IntegerField(help_text="Citizens on record.")
    total_vehicles = serializers.IntegerField(help_text="Registered vehicles.")
    active_cases = serializers.IntegerField(help_text="Cases not in the recycle bin.")
    archived_cases = serializers.IntegerField(help_text="Cases in the recycle bin.")


class ChoiceItemSerializer(serializers.Serializer):
    """``{"value": "OPEN", "label": "Open"}``"""

    value = serializers.CharField()
    label = serializers.CharField()


class SystemConstantsSerializer(serializers.Serializer):
    case_statuses = ChoiceItemSerializer(many=True)
    roles = serializers.ListField(child=serializers.CharField())
    operation_roles = serializers.DictField(
        child=serializers.ListField(child=serializers.CharField()),
        help_text="Operation → roles allowed to perform it.",
    )
