"""
core.store — The Record Store.

Services never talk to the ORM directly.  They receive a ``RecordStore``
at construction time and use its five-verb contract::

    find_one(collection, filter)                   -> dict | None
    find_many(collection, filter, limit, order_by) -> list[dict]
    insert(collection, record)                     -> dict
    update(collection, key, partial)               -> None
    delete(collection, key)                        -> None

Two interchangeable backends ship with the project:

- ``OrmRecordStore``    — relational, Django ORM (SQLite / PostgreSQL).
- ``MemoryRecordStore`` — in-process document store (dicts guarded by a
  re-entrant lock).

Records are plain dicts keyed by model attname (``defendant_id``, not
``defendant``).  Both backends validate every inserted record against the
Django model definition, so the schema lives in exactly one place.

Filters
-------
A filter is a dict of Django-style lookups.  Supported lookups are exact
(``{"deleted": False}``) and ``icontains``
(``{"plate__icontains": "ab"}``).  The special key ``"any"`` holds a list of
alternative sub-filters joined with OR::

    {"deleted": False,
     "any": [{"case_id__icontains": q}, {"internal_roll__icontains": q}]}

The backend used by the running process is chosen with the
``RECORD_STORE_BACKEND`` setting and built once by ``CoreConfig.ready()``.
"""

from __future__ import annotations

import copy
import itertools
import logging
import threading
from contextlib import contextmanager
from typing import Any, Iterator

from django.apps import apps
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError, IntegrityError, models, transaction
from django.db.models import Q
from django.utils import timezone
from django.utils.module_loading import import_string

from core.domain.exceptions import (
    DuplicateIdentifier,
    NotFound,
    StoreUnavailable,
    ValidationError,
)

logger = logging.getLogger(__name__)

Record = dict[str, Any]
Filter = dict[str, Any]

#: Key holding OR-alternatives inside a filter.
ANY = "any"

#: collection name → (model label, natural key field)
COLLECTIONS: dict[str, tuple[str, str]] = {
    "citizens": ("registry.Citizen", "national_id"),
    "vehicles": ("registry.Vehicle", "plate"),
    "cases": ("cases.Case", "case_id"),
}


def _resolve(collection: str) -> tuple[type[models.Model], str]:
    try:
        label, key_field = COLLECTIONS[collection]
    except KeyError:
        raise ValueError(f"Unknown collection '{collection}'.") from None
    return apps.get_model(label), key_field


def _to_record(instance: models.Model) -> Record:
    return {
        field.attname: getattr(instance, field.attname)
        for field in instance._meta.concrete_fields
    }


def _check_field_names(model: type[models.Model], partial: Record) -> None:
    attnames = {field.attname for field in model._meta.concrete_fields}
    unknown = sorted(set(partial) - attnames)
    if unknown:
        raise ValidationError(
            f"Unknown field(s): {', '.join(unknown)}.",
            errors={name: ["Unknown field."] for name in unknown},
        )


def _validation_error(exc: DjangoValidationError, collection: str) -> ValidationError:
    errors = exc.message_dict if hasattr(exc, "error_dict") else {"__all__": exc.messages}
    fields = ", ".join(sorted(errors))
    return ValidationError(f"Invalid {collection} record ({fields}).", errors=errors)


class RecordStore:
    """Abstract Record Store.  See the module docstring for the contract."""

    def find_one(self, collection: str, filter: Filter) -> Record | None:
        raise NotImplementedError

    def find_many(
        self,
        collection: str,
        filter: Filter,
        limit: int | None = None,
        order_by: str | None = None,
    ) -> list[Record]:
        raise NotImplementedError

    def insert(self, collection: str, record: Record) -> Record:
        raise NotImplementedError

    def update(self, collection: str, key: str, partial: Record) -> None:
        raise NotImplementedError

    def delete(self, collection: str, key: str) -> None:
        raise NotImplementedError

    def count(self, collection: str, filter: Filter) -> int:
        return len(self.find_many(collection, filter))

    @contextmanager
    def atomic(self) -> Iterator[None]:
        yield

    @staticmethod
    def _check_key_immutable(key_field: str, key: str, partial: Record) -> None:
        if key_field in partial and partial[key_field] != key:
            raise ValidationError(
                f"'{key_field}' cannot be changed once assigned.",
                errors={key_field: ["This field is immutable."]},
            )


# ════════════════════════════════════════════════════════════════════
#  Relational backend (Django ORM)
# ════════════════════════════════════════════════════════════════════


def _to_q(filter: Filter) -> Q:
    q = Q()
    for lookup, value in filter.items():
        if lookup == ANY:
            alternatives = Q()
            for sub_filter in value:
                alternatives |= _to_q(sub_filter)
            q &= alternatives
        else:
            q &= Q(**{lookup: value})
    return q


@contextmanager
def _database_errors(operation: str, collection: str) -> Iterator[None]:
    """Translate driver-level failures into ``StoreUnavailable``."""
    try:
        yield
    except IntegrityError:
        raise
    except DatabaseError as exc:
        logger.exception("Record store %s on '%s' failed", operation, collection)
        raise StoreUnavailable() from exc


class OrmRecordStore(RecordStore):
    """Record Store backed by the Django ORM and the configured database."""

    def find_one(self, collection: str, filter: Filter) -> Record | None:
        model, _ = _resolve(collection)
        with _database_errors("find_one", collection):
            instance = model._default_manager.filter(_to_q(filter)).first()
        return _to_record(instance) if instance is not None else None

    def find_many(
        self,
        collection: str,
        filter: Filter,
        limit: int | None = None,
        order_by: str | None = None,
    ) -> list[Record]:
        model, _ = _resolve(collection)
        qs = model._default_manager.filter(_to_q(filter))
        if order_by:
            qs = qs.order_by(order_by)
        if limit is not None:
            qs = qs[:limit]
        with _database_errors("find_many", collection):
            return [_to_record(instance) for instance in qs]

    def count(self, collection: str, filter: Filter) -> int:
        model, _ = _resolve(collection)
        with _database_errors("count", collection):
            return model._default_manager.filter(_to_q(filter)).count()

    def insert(self, collection: str, record: Record) -> Record:
        model, key_field = _resolve(collection)
        instance = model(**record)
        with _database_errors("insert", collection):
            try:
                instance.full_clean(validate_unique=False)
            except DjangoValidationError as exc:
                raise _validation_error(exc, collection) from exc
            try:
                # Savepoint so a collision does not poison an outer transaction.
                with transaction.atomic():
                    instance.save(force_insert=True)
            except IntegrityError as exc:
                raise DuplicateIdentifier(
                    collection=collection, key=record.get(key_field),
                ) from exc
        return _to_record(instance)

    def update(self, collection: str, key: str, partial: Record) -> None:
        model, key_field = _resolve(collection)
        self._check_key_immutable(key_field, key, partial)
        _check_field_names(model, partial)
        with _database_errors("update", collection):
            rows = model._default_manager.filter(**{key_field: key})
            instance = rows.first()
            if instance is None:
                raise NotFound(f"No {collection} record with {key_field}='{key}'.")
            for attname, value in partial.items():
                setattr(instance, attname, value)
            try:
                instance.full_clean(validate_unique=False)
            except DjangoValidationError as exc:
                raise _validation_error(exc, collection) from exc
            # QuerySet.update() so auto_now fields keep the values we pass.
            rows.update(**partial)

    def delete(self, collection: str, key: str) -> None:
        model, key_field = _resolve(collection)
        with _database_errors("delete", collection):
            deleted, _ = model._default_manager.filter(**{key_field: key}).delete()
        if not deleted:
            raise NotFound(f"No {collection} record with {key_field}='{key}'.")

    @contextmanager
    def atomic(self) -> Iterator[None]:
        with transaction.atomic():
            yield


# ════════════════════════════════════════════════════════════════════
#  Document backend (in-process)
# ════════════════════════════════════════════════════════════════════


def _matches(record: Record, filter: Filter) -> bool:
    for lookup, expected in filter.items():
        if lookup == ANY:
            if not any(_matches(record, sub_filter) for sub_filter in expected):
                return False
            continue
        field, _, operator = lookup.partition("__")
        value = record.get(field)
        if operator in ("", "exact"):
            if value != expected:
                return False
        elif operator == "icontains":
            if value is None or str(expected).lower() not in str(value).lower():
                return False
        else:
            raise ValueError(f"Unsupported lookup '{lookup}'.")
    return True


class MemoryRecordStore(RecordStore):
    """
    Document-style Record Store kept in process memory.

    Each collection is a ``{natural_key: record}`` dict.  Schema validation
    reuses the Django model field definitions (``clean_fields``) without
    touching the database; uniqueness and references are checked against
    the in-memory collections.  ``atomic()`` serialises callers on a lock
    but does not roll back.
    """

    def __init__(self) -> None:
        self._collections: dict[str, dict[str, Record]] = {
            name: {} for name in COLLECTIONS
        }
        self._lock = threading.RLock()
        self._ids = itertools.count(1)

    def find_one(self, collection: str, filter: Filter) -> Record | None:
        with self._lock:
            for record in self._records(collection):
                if _matches(record, filter):
                    return copy.deepcopy(record)
        return None

    def find_many(
        self,
        collection: str,
        filter: Filter,
        limit: int | None = None,
        order_by: str | None = None,
    ) -> list[Record]:
        with self._lock:
            found = [
                copy.deepcopy(record)
                for record in self._records(collection)
                if _matches(record, filter)
            ]
        if order_by:
            field = order_by.lstrip("-")
            found.sort(key=lambda record: record[field], reverse=order_by.startswith("-"))
        return found[:limit] if limit is not None else found

    def insert(self, collection: str, record: Record) -> Record:
        model, key_field = _resolve(collection)
        document, relations = self._clean(collection, model, record)
        with self._lock:
            self._check_references(collection, relations, document)
            self._check_unique(collection, model, document)
            now = timezone.now()
            document["id"] = next(self._ids)
            for field in model._meta.concrete_fields:
                if getattr(field, "auto_now", False) or getattr(field, "auto_now_add", False):
                    document[field.attname] = now
            self._collections[collection][document[key_field]] = document
            return copy.deepcopy(document)

    def update(self, collection: str, key: str, partial: Record) -> None:
        model, key_field = _resolve(collection)
        self._check_key_immutable(key_field, key, partial)
        _check_field_names(model, partial)
        with self._lock:
            document = self._collections[collection].get(key)
            if document is None:
                raise NotFound(f"No {collection} record with {key_field}='{key}'.")
            merged, relations = self._clean(collection, model, {**document, **partial})
            self._check_references(collection, relations, merged)
            document.update(copy.deepcopy(partial))

    def delete(self, collection: str, key: str) -> None:
        _, key_field = _resolve(collection)
        with self._lock:
            if self._collections[collection].pop(key, None) is None:
                raise NotFound(f"No {collection} record with {key_field}='{key}'.")

    @contextmanager
    def atomic(self) -> Iterator[None]:
        with self._lock:
            yield

    # ── Private helpers ─────────────────────────────────────────────

    @staticmethod
    def _clean(collection: str, model: type[models.Model], record: Record) -> tuple[Record, list]:
        """Validate ``record`` against the model without touching the database."""
        instance = model(**record)
        relations = [field for field in model._meta.concrete_fields if field.is_relation]
        try:
            instance.clean_fields(exclude=[field.name for field in relations])
        except DjangoValidationError as exc:
            raise _validation_error(exc, collection) from exc
        return _to_record(instance), relations

    def _records(self, collection: str) -> list[Record]:
        _resolve(collection)
        return list(self._collections[collection].values())

    def _check_unique(self, collection: str, model: type[models.Model], document: Record) -> None:
        unique_fields = [
            field.attname for field in model._meta.concrete_fields
            if field.unique and not field.primary_key
        ]
        for existing in self._collections[collection].values():
            for attname in unique_fields:
                if document[attname] is not None and existing[attname] == document[attname]:
                    raise DuplicateIdentifier(collection=collection, key=document[attname])

    def _check_references(self, collection: str, relations: list, document: Record) -> None:
        for field in relations:
            value = document[field.attname]
            if value is None:
                continue
            target = next(
                (
                    name for name, (label, key_field) in COLLECTIONS.items()
                    if apps.get_model(label) is field.related_model
                    and key_field == field.target_field.attname
                ),
                None,
            )
            if target is None or value not in self._collections[target]:
                raise ValidationError(
                    f"Invalid {collection} record ({field.name}).",
                    errors={field.name: [f"'{value}' does not exist."]},
                )


def build_record_store() -> RecordStore:
    """Instantiate the backend named by ``settings.RECORD_STORE_BACKEND``."""
    from django.conf import settings

    backend_path = getattr(settings, "RECORD_STORE_BACKEND", "core.store.OrmRecordStore")
    store = import_string(backend_path)()
    logger.info("Record store backend: %s", backend_path)
    return store


def get_record_store() -> RecordStore:
    """Return the store built for this process by ``CoreConfig.ready()``."""
    return apps.get_app_config("core").record_store
