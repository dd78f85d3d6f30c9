"""
Cases app models.

A case is the only record with a lifecycle: it is created by an
authorised actor, moves in and out of the recycle bin through the
``deleted`` flag, and is removed for good only by an explicit destroy.
"""

from django.core.validators import RegexValidator
from django.db import models

from core.models import TimeStampedModel


# ────────────────────────────────────────────────────────────────────
# Choice enumerations
# ────────────────────────────────────────────────────────────────────

class CaseStatus(models.TextChoices):
    OPEN = "OPEN", "Open"
    CLOSED = "CLOSED", "Closed"
    ARCHIVED = "ARCHIVED", "Archived"


case_id_validator = RegexValidator(
    regex=r"^\d{4}-\d{5}$",
    message="Case id must look like YYYY-NNNNN.",
)


# ────────────────────────────────────────────────────────────────────
# Models
# ────────────────────────────────────────────────────────────────────

class Case(TimeStampedModel):
    """
    A judicial case.

    * ``case_id`` is assigned once at creation (``<year>-<5 digits>``) and
      is unique across every case, including the ones in the recycle bin.
    * ``defendant`` references a citizen by national id; the lifecycle
      creates a placeholder citizen when none exists.
    * ``deleted`` marks a case as archived (soft-deleted).  Archived cases
      are hidden from search and listed in the recycle bin.
    """

    case_id = models.CharField(
        max_length=10,
        unique=True,
        validators=[case_id_validator],
        verbose_name="Case ID",
    )
    internal_roll = models.CharField(
        max_length=100,
        blank=True,
        default="",
        verbose_name="Internal Roll",
        help_text="Free-form secondary reference.",
    )
    description = models.TextField(
        verbose_name="Description",
    )
    status = models.CharField(
        max_length=10,
        choices=CaseStatus.choices,
        default=CaseStatus.OPEN,
        verbose_name="Status",
        db_index=True,
    )
    defendant = models.ForeignKey(
        "registry.Citizen",
        to_field="national_id",
        on_delete=models.PROTECT,
        related_name="cases",
        verbose_name="Defendant",
    )
    assigned_officer_id = models.CharField(
        max_length=64,
        blank=True,
        default="",
        verbose_name="Assigned Officer",
        help_text="External identity of the officer who opened the case.",
    )
    deleted = models.BooleanField(
        default=False,
        db_index=True,
        verbose_name="In Recycle Bin",
    )

    class Meta:
        verbose_name = "Case"
        verbose_name_plural = "Cases"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["deleted", "updated_at"], name="case_deleted_updated_idx"),
        ]

    def __str__(self):
        return f"Case {self.case_id}"
