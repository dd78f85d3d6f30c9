"""
Unit tests for ``CaseLifecycleService``.

Each test runs against both Record Store backends; the lifecycle must
behave identically on either.
"""

from __future__ import annotations

import re
from datetime import timedelta

import pytest
from django.utils import timezone

from core.constants import CASE_ID_MAX_ATTEMPTS, SEARCH_RESULT_LIMIT, UNKNOWN_CITIZEN_NAME
from core.domain.exceptions import DuplicateIdentifier, NotFound, ValidationError
from core.store import MemoryRecordStore, OrmRecordStore
from cases.services import CaseLifecycleService

CASE_ID_PATTERN = re.compile(r"^\d{4}-\d{5}$")


@pytest.fixture(params=["orm", "memory"])
def store(request, db):
    if request.param == "orm":
        return OrmRecordStore()
    return MemoryRecordStore()


class SteppingClock:
    """Returns a strictly increasing aware datetime on every call."""

    def __init__(self):
        self.current = timezone.now()

    def __call__(self):
        self.current += timedelta(seconds=1)
        return self.current


class ScriptedRandom:
    """Yields the given suffixes in order, repeating the last one."""

    def __init__(self, *suffixes):
        self.suffixes = list(suffixes)
        self.calls = 0

    def randint(self, low, high):
        self.calls += 1
        if len(self.suffixes) > 1:
            return self.suffixes.pop(0)
        return self.suffixes[0]


@pytest.fixture()
def service(store):
    return CaseLifecycleService(store, clock=SteppingClock())


def _open(service, defendant_id="12.345.678-9", description="Theft", **kwargs):
    return service.create(
        defendant_id=defendant_id,
        internal_roll=kwargs.pop("internal_roll", None),
        description=description,
        creator_id=kwargs.pop("creator_id", "42"),
    )


class TestCreate:

    def test_new_case_is_open_and_active(self, service):
        case = _open(service)
        assert case["status"] == "OPEN"
        assert case["deleted"] is False
        assert CASE_ID_PATTERN.match(case["case_id"])
        assert case["case_id"].startswith(f"{timezone.now().year}-")
        assert case["assigned_officer_id"] == "42"

    def test_unknown_defendant_gets_one_placeholder_citizen(self, service, store):
        _open(service)
        citizens = store.find_many("citizens", {})
        assert len(citizens) == 1
        assert citizens[0]["national_id"] == "12.345.678-9"
        assert citizens[0]["full_name"] == UNKNOWN_CITIZEN_NAME
        assert store.count("cases", {}) == 1

    def test_known_defendant_is_reused(self, service, store):
        store.insert("citizens", {"national_id": "12.345.678-9", "full_name": "Ana Rojas"})
        _open(service)
        _open(service, description="Fraud")
        assert store.count("citizens", {}) == 1
        assert store.find_one("citizens", {"national_id": "12.345.678-9"})["full_name"] == "Ana Rojas"

    @pytest.mark.parametrize(
        "defendant_id,description,field",
        [("", "Theft", "defendant_id"), ("12.345.678-9", "   ", "description")],
    )
    def test_missing_required_fields(self, service, store, defendant_id, description, field):
        with pytest.raises(ValidationError) as exc_info:
            _open(service, defendant_id=defendant_id, description=description)
        assert field in exc_info.value.errors
        assert store.count("citizens", {}) == 0

    @staticmethod
    def _occupy(store, suffix, deleted=False):
        year = timezone.now().year
        store.insert("citizens", {"national_id": "1-9", "full_name": "Taken"})
        store.insert("cases", {
            "case_id": f"{year}-{suffix}",
            "description": "Old",
            "defendant_id": "1-9",
            "deleted": deleted,
        })
        return year

    def test_collision_draws_a_new_identifier(self, store):
        year = self._occupy(store, 11111)
        rng = ScriptedRandom(11111, 22222)
        service = CaseLifecycleService(store, clock=SteppingClock(), rng=rng)

        case = _open(service)
        assert case["case_id"] == f"{year}-22222"
        assert rng.calls == 2

    def test_archived_case_keeps_its_identifier_reserved(self, store):
        year = self._occupy(store, 11111, deleted=True)
        service = CaseLifecycleService(store, clock=SteppingClock(), rng=ScriptedRandom(11111, 33333))

        assert _open(service)["case_id"] == f"{year}-33333"

    def test_collisions_are_bounded(self, store):
        self._occupy(store, 11111)
        rng = ScriptedRandom(11111)
        service = CaseLifecycleService(store, clock=SteppingClock(), rng=rng)

        with pytest.raises(DuplicateIdentifier):
            _open(service)
        assert rng.calls == CASE_ID_MAX_ATTEMPTS
        assert store.count("cases", {}) == 1

    @staticmethod
    def _reject_case_inserts(monkeypatch, store, times=None):
        """Make the store raise ``DuplicateIdentifier`` on case inserts."""
        real_insert = store.insert
        rejected = []

        def insert(collection, record):
            if collection == "cases" and (times is None or len(rejected) < times):
                rejected.append(record["case_id"])
                raise DuplicateIdentifier(collection=collection, key=record["case_id"])
            return real_insert(collection, record)

        monkeypatch.setattr(store, "insert", insert)
        return rejected

    def test_collision_at_insert_time_draws_a_new_identifier(self, store, monkeypatch):
        year = timezone.now().year
        rejected = self._reject_case_inserts(monkeypatch, store, times=1)
        rng = ScriptedRandom(11111, 22222)
        service = CaseLifecycleService(store, clock=SteppingClock(), rng=rng)

        case = _open(service)
        assert rejected == [f"{year}-11111"]
        assert case["case_id"] == f"{year}-22222"
        assert rng.calls == 2
        assert store.count("cases", {}) == 1

    def test_failed_create_rolls_back_placeholder_citizen(self, db, monkeypatch):
        store = OrmRecordStore()
        rejected = self._reject_case_inserts(monkeypatch, store)
        service = CaseLifecycleService(store, clock=SteppingClock(), rng=ScriptedRandom(11111))

        with pytest.raises(DuplicateIdentifier):
            _open(service)
        assert len(rejected) == CASE_ID_MAX_ATTEMPTS
        assert store.count("citizens", {}) == 0
        assert store.count("cases", {}) == 0


class TestRecycleBin:

    def test_archive_then_restore(self, service):
        case = _open(service)
        service.archive(case["case_id"])
        archived = service.get(case["case_id"])
        assert archived["deleted"] is True

        service.restore(case["case_id"])
        restored = service.get(case["case_id"])
        assert restored["deleted"] is False
        assert restored["updated_at"] >= archived["updated_at"] >= case["updated_at"]

    def test_archive_is_idempotent(self, service):
        case = _open(service)
        service.archive(case["case_id"])
        first = service.get(case["case_id"])
        service.archive(case["case_id"])
        second = service.get(case["case_id"])
        assert second == first

    def test_restore_active_case_is_a_noop(self, service):
        case = _open(service)
        service.restore(case["case_id"])
        assert service.get(case["case_id"])["updated_at"] == case["updated_at"]

    @pytest.mark.parametrize("operation", ["archive", "restore", "destroy"])
    def test_unknown_case(self, service, operation):
        with pytest.raises(NotFound):
            getattr(service, operation)("2024-00000")

    def test_list_archived_newest_first(self, service):
        first = _open(service)
        second = _open(service, description="Fraud")
        third = _open(service, description="Arson")
        service.archive(second["case_id"])
        service.archive(first["case_id"])

        archived = [c["case_id"] for c in service.list_archived()]
        assert archived == [first["case_id"], second["case_id"]]
        assert third["case_id"] not in archived


class TestSearch:

    @pytest.mark.parametrize("query", ["", "   ", None])
    def test_empty_query_performs_no_search(self, service, query):
        _open(service)
        assert service.search(query) is None

    def test_matches_identifier_and_internal_roll(self, service):
        by_roll = _open(service, internal_roll="RIT-778-2024")
        other = _open(service, description="Fraud")

        assert [c["case_id"] for c in service.search("rit-778")] == [by_roll["case_id"]]
        assert other["case_id"] in [c["case_id"] for c in service.search(other["case_id"])]

    def test_archived_cases_are_hidden(self, service):
        case = _open(service)
        service.archive(case["case_id"])
        assert service.search(case["case_id"]) == []

    def test_results_are_capped(self, service):
        for n in range(SEARCH_RESULT_LIMIT + 5):
            _open(service, internal_roll=f"ROLL-{n}")
        assert len(service.search("roll")) == SEARCH_RESULT_LIMIT


class TestFullLifecycle:

    def test_create_archive_restore_destroy(self, service, store):
        case = _open(service, defendant_id="12.345.678-9", description="Theft")
        case_id = case["case_id"]
        placeholder = store.find_one("citizens", {"national_id": "12.345.678-9"})
        assert placeholder["full_name"] == UNKNOWN_CITIZEN_NAME
        assert case["status"] == "OPEN"

        service.archive(case_id)
        assert case_id in [c["case_id"] for c in service.list_archived()]
        assert service.search(case_id) == []

        service.restore(case_id)
        assert case_id not in [c["case_id"] for c in service.list_archived()]
        assert case_id in [c["case_id"] for c in service.search(case_id)]

        service.destroy(case_id, performed_by="staff-1")
        assert service.search(case_id) == []
        assert service.list_archived() == []
        with pytest.raises(NotFound):
            service.destroy(case_id)
