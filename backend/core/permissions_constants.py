"""
Permissions Constants — **Single Source of Truth**

Every role name and gated operation referenced in code (views, services,
``core.domain.access``, tests) MUST use one of the constants defined here.

Organisation
------------
- ``Roles`` — the role values stored on ``accounts.User.role``.
- ``Operations`` — the actions the Access Gate can permit or deny.
- ``OPERATION_ROLES`` — the canonical policy: which roles may perform
  which operation.  Destruction is irreversible, so it sits behind a
  different (higher) tier than archive / restore.

Changing who may do what requires editing ``OPERATION_ROLES`` only.
"""


# ════════════════════════════════════════════════════════════════════
#  Roles
# ════════════════════════════════════════════════════════════════════

class Roles:
    """Role values carried by an authenticated actor."""

    OFFICER = "officer"
    """Court officer ("funcionario"): day-to-day case handling."""

    STAFF = "staff"
    """Portal staff: everything, including permanent deletion."""

    ADMIN = "admin"
    """Administrator: may purge the recycle bin."""

    JUDGE = "judge"
    """Judge: authenticated, but holds no lifecycle permissions."""

    ALL = (OFFICER, STAFF, ADMIN, JUDGE)


# ════════════════════════════════════════════════════════════════════
#  Operations
# ════════════════════════════════════════════════════════════════════

class Operations:
    """Operations checked by the Access Gate."""

    SEARCH = "search"
    CREATE = "create"
    ARCHIVE = "archive"
    RESTORE = "restore"
    LIST_ARCHIVED = "list_archived"
    DESTROY = "destroy"

    ALL = (SEARCH, CREATE, ARCHIVE, RESTORE, LIST_ARCHIVED, DESTROY)


# ════════════════════════════════════════════════════════════════════
#  Policy
# ════════════════════════════════════════════════════════════════════

_CASE_HANDLERS = frozenset({Roles.STAFF, Roles.OFFICER})
_PURGERS = frozenset({Roles.STAFF, Roles.ADMIN})

OPERATION_ROLES: dict[str, frozenset[str]] = {
    Operations.SEARCH: _CASE_HANDLERS,
    Operations.CREATE: _CASE_HANDLERS,
    Operations.ARCHIVE: _CASE_HANDLERS,
    Operations.RESTORE: _CASE_HANDLERS,
    Operations.LIST_ARCHIVED: _CASE_HANDLERS,
    Operations.DESTROY: _PURGERS,
}
