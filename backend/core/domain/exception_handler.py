"""
core.domain.exception_handler — DRF-compatible global exception handler.

Maps domain exceptions from ``core.domain.exceptions`` to proper
DRF ``Response`` objects so that views don't need per-endpoint
try/except boilerplate.

Registered in ``settings.py``::

    REST_FRAMEWORK = {
        ...
        'EXCEPTION_HANDLER': 'core.domain.exception_handler.domain_exception_handler',
    }

Response body::

    {"detail": "<human readable message>", "code": "<machine readable kind>"}
"""

from __future__ import annotations

import logging

from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_default_handler

from core.domain.exceptions import (
    Conflict,
    DomainError,
    InvalidTransition,
    NotFound,
    PermissionDenied,
    TechnicianOverloaded,
)

logger = logging.getLogger(__name__)

# Domain exception → HTTP status code
_STATUS_MAP: dict[type, int] = {
    PermissionDenied:  403,
    NotFound:          404,
    Conflict:          409,  # InvalidTransition, TechnicianOverloaded, ...
    DomainError:       400,  # catch-all base class last
}


def _error_payload(exc: DomainError) -> dict:
    """
    ``{"detail", "code"}`` plus any structured context the exception
    carries (transition endpoints, the technician's open workload).
    """
    payload = {"detail": str(exc), "code": exc.code}
    if isinstance(exc, InvalidTransition) and exc.current and exc.target:
        payload["current"] = exc.current
        payload["target"] = exc.target
    if isinstance(exc, TechnicianOverloaded) and exc.open_count is not None:
        payload["open_count"] = exc.open_count
    return payload


def domain_exception_handler(exc: Exception, context: dict) -> Response | None:
    """
    DRF exception handler that also handles ``core.domain.exceptions``.

    The default DRF handler is called first.  If it returns ``None``
    (meaning DRF doesn't recognise the exception), we check whether
    it's one of our domain exceptions and return an appropriate response.
    Anything else, database errors included, propagates as a 500.
    """
    response = drf_default_handler(exc, context)
    if response is not None:
        return response

    if not isinstance(exc, DomainError):
        return None

    status_code = next(
        code for exc_class, code in _STATUS_MAP.items() if isinstance(exc, exc_class)
    )
    view = context.get("view")
    logger.warning(
        "Rejected %s in %s: %s",
        exc.code,
        type(view).__name__ if view is not None else "unknown view",
        exc,
    )
    return Response(_error_payload(exc), status=status_code)
