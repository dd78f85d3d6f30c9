"""
Registry app models.

Citizens and vehicles known to the portal.  A citizen is identified by
their national id (the "RUT"); cases reference defendants through it.
Vehicles point at their owner loosely, by national id, so a vehicle can
be registered before its owner is.
"""

from django.db import models


class Citizen(models.Model):
    """
    A person on record.

    ``background`` holds the criminal-background entries printed on the
    record certificate.  Placeholder citizens created by the case
    lifecycle carry the name ``"Unknown Citizen"`` and an empty background.
    """

    national_id = models.CharField(
        max_length=20,
        unique=True,
        db_index=True,
        verbose_name="National ID",
    )
    full_name = models.CharField(
        max_length=255,
        verbose_name="Full Name",
    )
    birth_date = models.CharField(
        max_length=20,
        blank=True,
        default="",
        verbose_name="Birth Date",
    )
    background = models.JSONField(
        default=list,
        blank=True,
        verbose_name="Background Entries",
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name="Created At",
    )

    class Meta:
        verbose_name = "Citizen"
        verbose_name_plural = "Citizens"
        ordering = ["full_name"]

    def __str__(self):
        return f"{self.full_name} ({self.national_id})"


class Vehicle(models.Model):
    """A registered vehicle, looked up by licence plate."""

    plate = models.CharField(
        max_length=15,
        unique=True,
        db_index=True,
        verbose_name="Licence Plate",
    )
    model = models.CharField(
        max_length=100,
        verbose_name="Model",
    )
    color = models.CharField(
        max_length=50,
        blank=True,
        default="",
        verbose_name="Color",
    )
    owner_national_id = models.CharField(
        max_length=20,
        blank=True,
        default="",
        db_index=True,
        verbose_name="Owner National ID",
    )

    class Meta:
        verbose_name = "Vehicle"
        verbose_name_plural = "Vehicles"
        ordering = ["plate"]

    def __str__(self):
        return f"{self.plate} — {self.model}"
