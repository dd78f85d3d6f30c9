"""
core.domain.exceptions — Domain-specific exception hierarchy.

These exceptions represent business-rule violations and infrastructure
failures raised inside service layers.  They are deliberately **not** DRF
exceptions so that the domain layer stays framework-agnostic.  The global
DRF exception handler (``core.domain.exception_handler``) maps them to
HTTP responses.

Mapping cheatsheet
------------------
┌───────────────────────┬──────────────────────────────┬──────┐
│ Domain Exception      │ Meaning                      │ Code │
├───────────────────────┼──────────────────────────────┼──────┤
│ DomainError           │ generic business-rule error  │ 400  │
│ ValidationError       │ missing / empty field        │ 400  │
│ Forbidden             │ access-gate denial           │ 403  │
│ NotFound              │ unknown record               │ 404  │
│ Conflict              │ state conflict               │ 409  │
│ DuplicateIdentifier   │ identifier collision         │ 409  │
│ IdentityProviderError │ OAuth exchange failed        │ 502  │
│ StoreUnavailable      │ Record Store failure         │ 503  │
└───────────────────────┴──────────────────────────────┴──────┘

Recommended usage inside a service::

    from core.domain.exceptions import NotFound

    if record is None:
        raise NotFound(f"Case '{case_id}' does not exist.")
"""

from __future__ import annotations


class DomainError(Exception):
    """
    Base class for all domain / business-rule errors.

    Catch this at the view boundary and convert to a 400 Bad Request.
    """

    def __init__(self, message: str = "A business rule was violated.") -> None:
        self.message = message
        super().__init__(self.message)


class ValidationError(DomainError):
    """
    A required field is missing or empty, or a record does not match the
    schema enforced at the store boundary.

    ``errors`` optionally carries a ``{field: [messages]}`` mapping.
    Maps to HTTP 400.
    """

    def __init__(
        self,
        message: str = "The submitted data is invalid.",
        *,
        errors: dict[str, list[str]] | None = None,
    ) -> None:
        super().__init__(message)
        self.errors = errors or {}


class Forbidden(DomainError):
    """
    The actor's role does not permit the requested operation.

    Maps to HTTP 403.
    """

    def __init__(self, message: str = "You do not have permission to perform this action.") -> None:
        super().__init__(message)


class NotFound(DomainError):
    """
    The requested record does not exist.

    Maps to HTTP 404.
    """

    def __init__(self, message: str = "The requested resource was not found.") -> None:
        super().__init__(message)


class Conflict(DomainError):
    """
    The operation conflicts with the current state of the store.

    Maps to HTTP 409.
    """

    def __init__(self, message: str = "The operation conflicts with the current state.") -> None:
        super().__init__(message)


class DuplicateIdentifier(Conflict):
    """
    A unique identifier (case id, national id, plate) is already taken.

    Raised by the store on a uniqueness violation and by the case
    lifecycle when identifier regeneration is exhausted.  Maps to HTTP 409.
    """

    def __init__(
        self,
        message: str | None = None,
        *,
        collection: str | None = None,
        key: str | None = None,
    ) -> None:
        if message is None:
            message = "Identifier already in use"
            if collection and key:
                message += f": '{key}' in {collection}"
            message += "."
        super().__init__(message)
        self.collection = collection
        self.key = key


class IdentityProviderError(Exception):
    """
    The external OAuth provider rejected the code or could not be reached.

    Maps to HTTP 502.
    """

    def __init__(self, message: str = "The identity provider request failed.") -> None:
        self.message = message
        super().__init__(self.message)


class StoreUnavailable(Exception):
    """
    The underlying Record Store failed (connection lost, database error).

    Not a ``DomainError``: it is never the caller's fault.  Surfaced
    unchanged to the view layer, logged with its traceback, and rendered
    as a generic 503 without internal details.
    """

    def __init__(self, message: str = "The record store is unavailable.") -> None:
        self.message = message
        super().__init__(self.message)
