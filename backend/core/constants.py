"""
Core constants — **Single Source of Truth** for project-wide magic numbers.

Any business rule that references a numeric constant or a placeholder
value should import it from here instead of hardcoding.
"""

# ── Case identifiers ────────────────────────────────────────────────
# Case ids read "<year>-<suffix>", e.g. "2024-53201".
CASE_ID_SUFFIX_MIN: int = 10_000
CASE_ID_SUFFIX_MAX: int = 99_999

# How many fresh identifiers ``create`` may draw before giving up with
# ``DuplicateIdentifier``.
CASE_ID_MAX_ATTEMPTS: int = 5

# ── Search ──────────────────────────────────────────────────────────
SEARCH_RESULT_LIMIT: int = 20

# ── Placeholder citizen ─────────────────────────────────────────────
# Created on the fly when a case names a defendant nobody registered yet.
UNKNOWN_CITIZEN_NAME: str = "Unknown Citizen"
