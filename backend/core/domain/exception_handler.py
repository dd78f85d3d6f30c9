"""
core.domain.exception_handler — renders service-layer failures as HTTP.

Services raise the exceptions in ``core.domain.exceptions`` and never
build responses themselves; this handler turns them into JSON bodies with
the matching status code.  It is wired through DRF::

    REST_FRAMEWORK = {
        "EXCEPTION_HANDLER": "core.domain.exception_handler.domain_exception_handler",
    }
"""

from __future__ import annotations

import logging

from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_default_handler

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

logger = logging.getLogger(__name__)

# Walked in order, so subclasses precede their bases.
_STATUS_MAP: dict[type, int] = {
    Forbidden:           403,
    NotFound:            404,
    DuplicateIdentifier: 409,
    Conflict:            409,
    ValidationError:     400,
    DomainError:         400,
}

_STORE_UNAVAILABLE_DETAIL = "Internal failure. Please try again later."
_IDENTITY_PROVIDER_DETAIL = "Could not complete sign-in with the identity provider."


def domain_exception_handler(exc: Exception, context: dict) -> Response | None:
    """
    Map an exception raised inside a view to a ``Response``.

    DRF's own exceptions (authentication, throttling, serializer errors)
    keep their default rendering.  Infrastructure failures answer with a
    fixed body so that driver messages never reach the client.  Anything
    else is returned as ``None`` and becomes a 500.
    """
    response = drf_default_handler(exc, context)
    if response is not None:
        return response

    view = context.get("view", "unknown")

    if isinstance(exc, StoreUnavailable):
        logger.error("Record store failure in %s: %s", view, exc, exc_info=exc)
        return Response({"detail": _STORE_UNAVAILABLE_DETAIL}, status=503)

    if isinstance(exc, IdentityProviderError):
        logger.error("Identity provider failure in %s: %s", view, exc)
        return Response({"detail": _IDENTITY_PROVIDER_DETAIL}, status=502)

    status_code = next(
        (code for exc_class, code in _STATUS_MAP.items() if isinstance(exc, exc_class)),
        None,
    )
    if status_code is None:
        return None

    logger.warning("%s in %s: %s", type(exc).__name__, view, exc)
    body: dict = {"detail": str(exc)}
    if isinstance(exc, ValidationError) and exc.errors:
        body["errors"] = exc.errors
    return Response(body, status=status_code)
