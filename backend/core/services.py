"""
Core app services — **Service Layer**.

Cross-app aggregation for the dashboard and the system constants
consumed by the frontend.  Other apps are reached through the Record
Store or, for choice enums, imported lazily inside methods so that no
import cycle can form at module load time.
"""

from __future__ import annotations

from typing import Any

from core.permissions_constants import OPERATION_ROLES, Roles
from core.store import RecordStore


class DashboardAggregationService:
    """Counts shown on the staff dashboard."""

    def __init__(self, store: RecordStore) -> None:
        self.store = store

    def get_stats(self) -> dict[str, Any]:
        return {
            "total_citizens": self.store.count("citizens", {}),
            "total_vehicles": self.store.count("vehicles", {}),
            "active_cases": self.store.count("cases", {"deleted": False}),
            "archived_cases": self.store.count("cases", {"deleted": True}),
        }


class SystemConstantsService:
    """
    Choice enumerations and the access policy, so the frontend can build
    dropdowns and hide actions the current role cannot perform.
    """

    @staticmethod
    def get_constants() -> dict[str, Any]:
        from cases.models import CaseStatus

        return {
            "case_statuses": SystemConstantsService._choices_to_list(CaseStatus),
            "roles": list(Roles.ALL),
            "operation_roles": {
                operation: sorted(roles)
                for operation, roles in OPERATION_ROLES.items()
            },
        }

    @staticmethod
    def _choices_to_list(choices_class: Any) -> list[dict[str, str]]:
        """Convert a Django ``TextChoices`` class to ``[{value, label}]``."""
        return [
            {"value": value, "label": label}
            for value, label in choices_class.choices
        ]
