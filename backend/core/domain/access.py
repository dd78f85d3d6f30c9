"""
core.domain.access — The Access Gate.

Maps an authenticated actor's role to the lifecycle operations it may
perform.  The gate is a pure policy lookup over
``core.permissions_constants.OPERATION_ROLES``; it keeps no state and never
touches the Record Store.

Architecture overview
---------------------

    ┌─────────┐      ┌──────────────┐      ┌────────────────────┐
    │  View   │─────▶│ Access Gate  │─────▶│ App service        │
    │ (thin)  │      │ (this module)│      │ (lifecycle logic)  │
    └─────────┘      └──────────────┘      └────────────────────┘

The gate decides **before** the service is invoked, so a denied request
never reaches the store.

Usage in a view::

    from core.domain.access import require_operation
    from core.permissions_constants import Operations

    actor = require_operation(request.user, Operations.DESTROY)
    CaseLifecycleService(store).destroy(case_id)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from core.domain.exceptions import Forbidden
from core.permissions_constants import OPERATION_ROLES

if TYPE_CHECKING:
    from accounts.models import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Actor:
    """An authenticated identity attempting an operation."""

    external_id: str
    role: str | None

    @classmethod
    def from_user(cls, user: User | Any) -> Actor | None:
        """
        Build an ``Actor`` from a Django user.

        Returns ``None`` for anonymous users so the gate can deny them.
        """
        if user is None or not getattr(user, "is_authenticated", False):
            return None
        external_id = getattr(user, "discord_id", None) or str(user.pk)
        return cls(external_id=external_id, role=getattr(user, "role", None))


def permit(role: str | None, operation: str) -> bool:
    """
    Return ``True`` when ``role`` may perform ``operation``.

    Unknown roles, unknown operations and ``None`` (unauthenticated) are
    always denied.
    """
    if not role:
        return False
    return role in OPERATION_ROLES.get(operation, frozenset())


def require_operation(user: User | Any, operation: str) -> Actor:
    """
    Guard that raises ``Forbidden`` unless the user's role permits the
    operation.

    Args:
        user:      ``request.user`` (may be anonymous).
        operation: One of ``core.permissions_constants.Operations``.

    Returns:
        The ``Actor`` for the user, for services that record who acted.

    Raises:
        core.domain.exceptions.Forbidden: If the gate denies the request.
    """
    actor = Actor.from_user(user)
    role = actor.role if actor else None
    if not permit(role, operation):
        logger.warning(
            "Access gate denied '%s' for actor=%s role=%s",
            operation,
            actor.external_id if actor else "anonymous",
            role,
        )
        raise Forbidden(
            f"Role '{role}' is not permitted to {operation.replace('_', ' ')}."
        )
    return actor
