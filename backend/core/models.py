"""
Core app models.

Only abstract bases live here; concrete records belong to ``registry``
and ``cases``.
"""

from django.db import models


class TimeStampedModel(models.Model):
    """
    Adds ``created_at`` / ``updated_at``.

    ``updated_at`` is refreshed by ``save()`` only.  Record Store updates
    go through ``QuerySet.update()`` and must set it explicitly.
    """

    created_at = models.DateTimeField(auto_now_add=True, verbose_name="Created At")
    updated_at = models.DateTimeField(auto_now=True, verbose_name="Updated At")

    class Meta:
        abstract = True
