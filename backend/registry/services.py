"""
Registry Service Layer.

Citizen and vehicle lookups.  Views stay thin: they validate the query
parameters, call one of these services and serialise the returned records.

Architecture
------------
- ``CitizenRegistryService`` — citizen search, lookup, placeholder
  creation and the background certificate.
- ``VehicleRegistryService`` — plate search.

Both services receive the process ``RecordStore`` at construction time and
never touch the ORM directly.
"""

from __future__ import annotations

import logging
from typing import Any

from django.utils import timezone

from core.constants import SEARCH_RESULT_LIMIT, UNKNOWN_CITIZEN_NAME
from core.domain.exceptions import DuplicateIdentifier, NotFound, ValidationError
from core.store import ANY, RecordStore

logger = logging.getLogger(__name__)


def normalise_query(query: str | None) -> str:
    """Strip a raw ``?q=`` value; ``None`` becomes the empty string."""
    return (query or "").strip()


class CitizenRegistryService:
    """Citizen records behind the ``citizens`` collection."""

    COLLECTION = "citizens"

    def __init__(self, store: RecordStore) -> None:
        self.store = store

    def search(self, query: str | None) -> list[dict[str, Any]] | None:
        """
        Citizens whose national id or full name contains ``query``.

        Returns ``None`` (no search performed) for an empty query.
        """
        query = normalise_query(query)
        if not query:
            return None
        return self.store.find_many(
            self.COLLECTION,
            {ANY: [
                {"national_id__icontains": query},
                {"full_name__icontains": query},
            ]},
            limit=SEARCH_RESULT_LIMIT,
        )

    def get(self, national_id: str) -> dict[str, Any]:
        citizen = self.store.find_one(self.COLLECTION, {"national_id": national_id})
        if citizen is None:
            raise NotFound(f"No citizen with national id '{national_id}'.")
        return citizen

    def ensure_exists(self, national_id: str) -> tuple[dict[str, Any], bool]:
        """
        Return ``(citizen, created)``, creating a placeholder if needed.

        The placeholder carries ``UNKNOWN_CITIZEN_NAME`` and an empty
        background.  If a concurrent request registers the same citizen
        between the lookup and the insert, the existing record wins.
        """
        if not national_id:
            raise ValidationError(
                "A defendant national id is required.",
                errors={"defendant_id": ["This field may not be blank."]},
            )

        citizen = self.store.find_one(self.COLLECTION, {"national_id": national_id})
        if citizen is not None:
            return citizen, False

        try:
            citizen = self.store.insert(self.COLLECTION, {
                "national_id": national_id,
                "full_name": UNKNOWN_CITIZEN_NAME,
                "background": [],
            })
        except DuplicateIdentifier:
            return self.get(national_id), False

        logger.info("Created placeholder citizen %s", national_id)
        return citizen, True

    def certificate(self, national_id: str) -> dict[str, Any]:
        """
        Build the background certificate for a citizen.

        Raises:
            NotFound: If no citizen carries ``national_id``.
        """
        citizen = self.get(national_id)
        background = list(citizen.get("background") or [])
        return {
            "national_id": citizen["national_id"],
            "full_name": citizen["full_name"],
            "background": background,
            "has_background": bool(background),
            "issued_at": timezone.now(),
        }


class VehicleRegistryService:
    """Vehicle records behind the ``vehicles`` collection."""

    COLLECTION = "vehicles"

    def __init__(self, store: RecordStore) -> None:
        self.store = store

    def search(self, query: str | None) -> list[dict[str, Any]] | None:
        """Vehicles whose plate contains ``query``; ``None`` when empty."""
        query = normalise_query(query)
        if not query:
            return None
        return self.store.find_many(
            self.COLLECTION,
            {"plate__icontains": query},
            limit=SEARCH_RESULT_LIMIT,
        )
