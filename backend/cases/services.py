"""
Cases app Service Layer.

This module is the **single source of truth** for the case lifecycle.
Views must remain thin: validate input via serializers, pass the Access
Gate, call a service method, and return the result wrapped in a DRF
``Response``.

Lifecycle Overview
------------------

    create ──▶ [deleted=False] ──archive──▶ [deleted=True] ──destroy──▶ (gone)
                     ▲                            │
                     └───────────restore──────────┘

* ``archive`` / ``restore`` only flip the ``deleted`` flag and refresh
  ``updated_at``.  Re-applying the current state is a no-op success, so
  both are safe to retry.
* ``destroy`` removes the record for good; no tombstone is kept.
* ``create`` draws a ``<year>-<5 digits>`` identifier and redraws on a
  collision, at most ``CASE_ID_MAX_ATTEMPTS`` times.  Identifiers stay
  reserved while a case sits in the recycle bin.

The service receives the ``RecordStore`` at construction time and is
unaware of which backend it talks to.
"""

from __future__ import annotations

import logging
import random
from typing import Any, Callable

from django.utils import timezone

from core.constants import (
    CASE_ID_MAX_ATTEMPTS,
    CASE_ID_SUFFIX_MAX,
    CASE_ID_SUFFIX_MIN,
    SEARCH_RESULT_LIMIT,
)
from core.domain.exceptions import DuplicateIdentifier, NotFound, ValidationError
from core.store import ANY, RecordStore
from registry.services import CitizenRegistryService, normalise_query

from .models import CaseStatus

logger = logging.getLogger(__name__)


class CaseLifecycleService:
    """
    Creation, soft-deletion, restoration and destruction of cases.

    Parameters
    ----------
    store : RecordStore
        The process Record Store.
    clock : callable, optional
        Returns the current aware datetime.  Defaults to ``timezone.now``.
    rng : random.Random, optional
        Source of identifier suffixes.  Tests pass a seeded or stubbed
        generator to force collisions.
    """

    COLLECTION = "cases"

    def __init__(
        self,
        store: RecordStore,
        *,
        clock: Callable[[], Any] = timezone.now,
        rng: random.Random | None = None,
    ) -> None:
        self.store = store
        self._now = clock
        self._rng = rng or random.Random()

    # ── Identifiers ─────────────────────────────────────────────────

    def generate_case_id(self) -> str:
        """Draw a fresh ``YYYY-NNNNN`` identifier for the current year."""
        year = self._now().year
        suffix = self._rng.randint(CASE_ID_SUFFIX_MIN, CASE_ID_SUFFIX_MAX)
        return f"{year}-{suffix}"

    # ── Creation ────────────────────────────────────────────────────

    def create(
        self,
        defendant_id: str,
        internal_roll: str | None,
        description: str,
        creator_id: str,
    ) -> dict[str, Any]:
        """
        Open a new case against ``defendant_id``.

        The defendant citizen is created with placeholder data when it is
        not on record yet.  Citizen creation and case insertion share one
        ``store.atomic()`` block.

        Returns
        -------
        dict
            The persisted case with ``status=OPEN`` and ``deleted=False``.

        Raises
        ------
        ValidationError
            ``defendant_id`` or ``description`` is empty.
        DuplicateIdentifier
            No free identifier was found within ``CASE_ID_MAX_ATTEMPTS``
            draws.
        """
        defendant_id = (defendant_id or "").strip()
        description = (description or "").strip()

        errors: dict[str, list[str]] = {}
        if not defendant_id:
            errors["defendant_id"] = ["This field may not be blank."]
        if not description:
            errors["description"] = ["This field may not be blank."]
        if errors:
            raise ValidationError("Missing required case fields.", errors=errors)

        with self.store.atomic():
            CitizenRegistryService(self.store).ensure_exists(defendant_id)

            for attempt in range(1, CASE_ID_MAX_ATTEMPTS + 1):
                case_id = self.generate_case_id()
                # Archived cases keep their id reserved, so no deleted filter.
                if self.store.find_one(self.COLLECTION, {"case_id": case_id}) is not None:
                    logger.warning(
                        "Case id %s already taken (attempt %d/%d)",
                        case_id, attempt, CASE_ID_MAX_ATTEMPTS,
                    )
                    continue
                try:
                    case = self.store.insert(self.COLLECTION, {
                        "case_id": case_id,
                        "internal_roll": (internal_roll or "").strip(),
                        "description": description,
                        "status": CaseStatus.OPEN,
                        "defendant_id": defendant_id,
                        "assigned_officer_id": creator_id or "",
                        "deleted": False,
                    })
                except DuplicateIdentifier:
                    logger.warning(
                        "Case id %s claimed concurrently (attempt %d/%d)",
                        case_id, attempt, CASE_ID_MAX_ATTEMPTS,
                    )
                    continue

                logger.info(
                    "Case %s opened by %s against defendant %s",
                    case_id, creator_id, defendant_id,
                )
                return case

            raise DuplicateIdentifier(
                f"Could not allocate a unique case id after "
                f"{CASE_ID_MAX_ATTEMPTS} attempts.",
                collection=self.COLLECTION,
            )

    # ── Recycle bin transitions ─────────────────────────────────────

    def archive(self, case_id: str, *, performed_by: str | None = None) -> None:
        """Move a case to the recycle bin.  No-op if it is already there."""
        self._set_deleted(case_id, True, performed_by)

    def restore(self, case_id: str, *, performed_by: str | None = None) -> None:
        """Take a case out of the recycle bin.  No-op if it is not there."""
        self._set_deleted(case_id, False, performed_by)

    def destroy(self, case_id: str, *, performed_by: str | None = None) -> None:
        """
        Permanently remove a case.

        Raises
        ------
        NotFound
            No case carries ``case_id``.  Do not retry after this.
        """
        try:
            self.store.delete(self.COLLECTION, case_id)
        except NotFound:
            raise NotFound(f"Case '{case_id}' does not exist.") from None
        logger.info("Case %s destroyed by %s", case_id, performed_by)

    def _set_deleted(self, case_id: str, deleted: bool, performed_by: str | None) -> None:
        transition = "archived" if deleted else "restored"
        with self.store.atomic():
            case = self.get(case_id)
            if case["deleted"] == deleted:
                logger.debug("Case %s already %s", case_id, transition)
                return
            try:
                self.store.update(self.COLLECTION, case_id, {
                    "deleted": deleted,
                    "updated_at": self._now(),
                })
            except NotFound:
                raise NotFound(f"Case '{case_id}' does not exist.") from None
        logger.info("Case %s %s by %s", case_id, transition, performed_by)

    # ── Reads ───────────────────────────────────────────────────────

    def get(self, case_id: str) -> dict[str, Any]:
        case = self.store.find_one(self.COLLECTION, {"case_id": case_id})
        if case is None:
            raise NotFound(f"Case '{case_id}' does not exist.")
        return case

    def search(self, query: str | None) -> list[dict[str, Any]] | None:
        """
        Active cases whose id or internal roll contains ``query``.

        Returns ``None`` when the query is empty: no search is performed,
        which is different from a search that matched nothing.
        """
        query = normalise_query(query)
        if not query:
            return None
        return self.store.find_many(
            self.COLLECTION,
            {
                "deleted": False,
                ANY: [
                    {"case_id__icontains": query},
                    {"internal_roll__icontains": query},
                ],
            },
            limit=SEARCH_RESULT_LIMIT,
            order_by="-created_at",
        )

    def list_archived(self) -> list[dict[str, Any]]:
        """Cases in the recycle bin, most recently archived first."""
        return self.store.find_many(
            self.COLLECTION,
            {"deleted": True},
            order_by="-updated_at",
        )
