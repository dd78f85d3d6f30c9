"""
Unit tests for ``core.domain.exception_handler.domain_exception_handler``.
"""

from __future__ import annotations

import pytest
from rest_framework.exceptions import NotAuthenticated

from core.domain.exception_handler import domain_exception_handler
from core.domain.exceptions import (
    Conflict,
    DomainError,
    DuplicateIdentifier,
    Forbidden,
    IdentityProviderError,
    NotFound,
    StoreUnavailable,
    ValidationError,
)

CONTEXT = {"view": "TestView"}


@pytest.mark.parametrize(
    "exc,status_code",
    [
        (Forbidden("no"), 403),
        (NotFound("gone"), 404),
        (DuplicateIdentifier(collection="cases", key="2024-12345"), 409),
        (Conflict("busy"), 409),
        (ValidationError("bad"), 400),
        (DomainError("rule"), 400),
        (IdentityProviderError("discord down"), 502),
        (StoreUnavailable("connection refused"), 503),
    ],
)
def test_status_mapping(exc, status_code):
    response = domain_exception_handler(exc, CONTEXT)
    assert response.status_code == status_code


def test_domain_message_is_returned():
    response = domain_exception_handler(NotFound("Case '2024-12345' does not exist."), CONTEXT)
    assert response.data == {"detail": "Case '2024-12345' does not exist."}


def test_validation_errors_are_included():
    exc = ValidationError("Missing.", errors={"description": ["This field may not be blank."]})
    response = domain_exception_handler(exc, CONTEXT)
    assert response.data["errors"] == {"description": ["This field may not be blank."]}


def test_store_failure_does_not_leak_details():
    response = domain_exception_handler(StoreUnavailable("password=hunter2 host=db"), CONTEXT)
    assert "hunter2" not in str(response.data)
    assert response.data == {"detail": "Internal failure. Please try again later."}


def test_duplicate_identifier_default_message():
    exc = DuplicateIdentifier(collection="citizens", key="12.345.678-9")
    assert str(exc) == "Identifier already in use: '12.345.678-9' in citizens."


def test_drf_exceptions_use_default_handler():
    response = domain_exception_handler(NotAuthenticated(), CONTEXT)
    assert response.status_code == 401


def test_unknown_exceptions_propagate():
    assert domain_exception_handler(RuntimeError("boom"), CONTEXT) is None
