"""
core.domain.transactions — Helpers for safe check-and-mutate sequences.

Provides utilities that wrap ``select_for_update`` into reusable patterns
so that every app's service layer follows the same concurrency-safe
approach: lock the row, re-read it, check the precondition, mutate.

Usage::

    from django.db import transaction
    from core.domain.transactions import lock_for_update

    with transaction.atomic():
        complaint = lock_for_update(Complaint, complaint_id)
        ...
"""

from __future__ import annotations

from typing import Any, TypeVar

from django.db import models

from core.domain.exceptions import NotFound

M = TypeVar("M", bound=models.Model)


def lock_for_update(model_class: type[M], pk: Any, *, label: str | None = None) -> M:
    """
    Acquire a row-level lock on the given model instance.

    Convenience wrapper around ``select_for_update().get(pk=pk)``
    that must be called inside an ``atomic()`` block.

    Args:
        model_class: The Django model class.
        pk:          Primary key value.
        label:       Optional human name used in the ``NotFound`` message.

    Returns:
        The locked model instance.

    Raises:
        NotFound: If no row with that PK exists.
    """
    try:
        return model_class.objects.select_for_update().get(pk=pk)
    except model_class.DoesNotExist:
        raise NotFound(f"{label or model_class.__name__} with pk={pk} does not exist.")
