"""
Tests for ``core.domain.exception_handler.domain_exception_handler``:
every domain error maps to its HTTP status with a ``{"detail", "code"}``
body, and DRF's own exceptions are left to DRF.
"""

from __future__ import annotations

import pytest
from rest_framework.exceptions import ValidationError

from core.domain.exception_handler import domain_exception_handler
from core.domain.exceptions import (
    Conflict,
    DomainError,
    EditWindowExpired,
    InvalidScore,
    InvalidTransition,
    NotFound,
    NotResolvedYet,
    PermissionDenied,
    PreconditionNotMet,
    TechnicianOverloaded,
)


@pytest.mark.parametrize(
    "exc, expected_status, expected_code",
    [
        (DomainError("bad"), 400, "domain_error"),
        (InvalidScore(), 400, "invalid_score"),
        (PermissionDenied(), 403, "forbidden"),
        (NotFound(), 404, "not_found"),
        (Conflict(), 409, "conflict"),
        (PreconditionNotMet(), 409, "precondition_not_met"),
        (TechnicianOverloaded(open_count=1), 409, "technician_overloaded"),
        (NotResolvedYet(), 409, "not_resolved_yet"),
        (EditWindowExpired(), 409, "edit_window_expired"),
    ],
)
def test_domain_errors_map_to_http_status(exc, expected_status, expected_code):
    response = domain_exception_handler(exc, {"view": None})
    assert response.status_code == expected_status
    assert response.data["code"] == expected_code
    assert response.data["detail"] == str(exc)


def test_invalid_transition_carries_current_and_target():
    exc = InvalidTransition(current="fixed", target="pending")
    response = domain_exception_handler(exc, {"view": None})
    assert response.status_code == 409
    assert response.data["current"] == "fixed"
    assert response.data["target"] == "pending"
    assert "from 'fixed' to 'pending'" in response.data["detail"]


def test_drf_validation_error_is_left_to_drf():
    response = domain_exception_handler(ValidationError({"score": ["bad"]}), {"view": None})
    assert response.status_code == 400
    assert "code" not in response.data


def test_unknown_exception_propagates():
    assert domain_exception_handler(RuntimeError("boom"), {"view": None}) is None


def test_overloaded_response_reports_open_count():
    response = domain_exception_handler(TechnicianOverloaded(open_count=3), {"view": None})
    assert response.status_code == 409
    assert response.data["open_count"] == 3
