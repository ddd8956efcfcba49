"""
Core app models.

Provides abstract base models shared across the project.
"""

from django.db import models


class TimeStampedModel(models.Model):
    """
    Abstract base model that provides ``created_at`` and a nullable
    ``updated_at`` stamp for every concrete child model.

    ``updated_at`` stays empty until a service explicitly changes the
    row, so "never modified" is distinguishable from "modified at
    creation time".
    """

    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name="Created At",
    )
    updated_at = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name="Updated At",
    )

    class Meta:
        abstract = True
