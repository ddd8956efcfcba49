"""
Smoke tests — verify that Django boots, URL routing resolves, and
the core domain modules are importable.

These tests do NOT require real data; they just prove the plumbing
works.
"""

from __future__ import annotations

import pytest
from django.urls import resolve, reverse


# ════════════════════════════════════════════════════════════════════
#  URL Routing Smoke Tests
# ════════════════════════════════════════════════════════════════════

class TestURLRouting:
    """Ensure all top-level app URL namespaces resolve without 404."""

    EXPECTED_URLS = [
        # (url_name, expected_path)
        ("complaints:complaint-list",        "/api/complaints/"),
        ("complaints:complaint-stats",       "/api/complaints/stats/"),
        ("complaints:complaint-map",         "/api/complaints/map/"),
        ("complaints:complaint-nearby",      "/api/complaints/nearby/"),
        ("complaints:complaint-available",   "/api/complaints/available/"),
        ("departments:department-list",      "/api/departments/"),
        ("departments:route-list",           "/api/routes/"),
        ("accounts:register",                "/api/accounts/auth/register/"),
        ("accounts:login",                   "/api/accounts/auth/login/"),
        ("accounts:me",                      "/api/accounts/me/"),
        ("accounts:badge-list",              "/api/accounts/badges/"),
        ("accounts:user-list",               "/api/accounts/users/"),
        ("accounts:user-statistics",         "/api/accounts/users/statistics/"),
        ("accounts:user-bulk-role",          "/api/accounts/users/bulk-role/"),
        ("core:system-constants",            "/api/core/constants/"),
        ("schema",                           "/api/schema/"),
    ]

    @pytest.mark.parametrize("url_name,expected_path", EXPECTED_URLS)
    def test_url_reverses(self, url_name: str, expected_path: str):
        assert reverse(url_name) == expected_path

    @pytest.mark.parametrize("url_name,expected_path", EXPECTED_URLS)
    def test_path_resolves_to_view(self, url_name: str, expected_path: str):
        match = resolve(expected_path)
        assert match.func is not None

    def test_nested_comment_route(self):
        assert reverse(
            "complaints:complaint-comment-list", kwargs={"complaint_pk": 7},
        ) == "/api/complaints/7/comments/"


# ════════════════════════════════════════════════════════════════════
#  Core Domain Module Import Tests
# ════════════════════════════════════════════════════════════════════

class TestCoreDomainImports:
    """Verify that shared domain utility modules are importable."""

    def test_import_exceptions(self):
        from core.domain.exceptions import (
            Conflict,
            DomainError,
            InvalidTransition,
            NotFound,
            PermissionDenied,
            PreconditionNotMet,
            TechnicianOverloaded,
        )
        # Ensure they form an inheritance chain
        assert issubclass(InvalidTransition, Conflict)
        assert issubclass(PreconditionNotMet, Conflict)
        assert issubclass(TechnicianOverloaded, Conflict)
        assert issubclass(Conflict, DomainError)
        assert issubclass(PermissionDenied, DomainError)
        assert issubclass(NotFound, DomainError)

    def test_import_transactions(self):
        from core.domain.transactions import lock_for_update
        assert callable(lock_for_update)

    def test_import_access(self):
        from core.domain.access import (
            check_complaint_permission,
            get_user_role_name,
            scope_complaints,
        )
        assert callable(check_complaint_permission)
        assert callable(get_user_role_name)
        assert callable(scope_complaints)


# ════════════════════════════════════════════════════════════════════
#  Exception Behaviour Tests
# ════════════════════════════════════════════════════════════════════

class TestDomainExceptions:
    """Unit tests for domain exception classes."""

    def test_domain_error_message(self):
        from core.domain.exceptions import DomainError
        err = DomainError("test message")
        assert str(err) == "test message"

    def test_invalid_transition_structured(self):
        from core.domain.exceptions import InvalidTransition
        err = InvalidTransition(
            current="fixed",
            target="pending",
            reason="Fixed is terminal",
        )
        assert "fixed" in str(err)
        assert "pending" in str(err)
        assert "Fixed is terminal" in str(err)
        assert err.current == "fixed"
        assert err.target == "pending"

    def test_invalid_transition_plain_message(self):
        from core.domain.exceptions import InvalidTransition
        err = InvalidTransition("Cannot reopen complaint.")
        assert str(err) == "Cannot reopen complaint."

    def test_overloaded_default_message(self):
        from core.domain.exceptions import TechnicianOverloaded
        err = TechnicianOverloaded(open_count=2)
        assert "pending work" in str(err)
        assert err.open_count == 2


# ════════════════════════════════════════════════════════════════════
#  Public endpoints
# ════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestPublicEndpoints:

    def test_constants_endpoint(self, api_client):
        response = api_client.get(reverse("core:system-constants"))
        assert response.status_code == 200
        assert response.data["points_per_complaint"] == 5
        assert response.data["required_technician_photos"] == 2
        assert [s["value"] for s in response.data["complaint_statuses"]] == [
            "pending", "in_progress", "fixed",
        ]

    def test_badges_endpoint(self, api_client):
        response = api_client.get(reverse("accounts:badge-list"))
        assert response.status_code == 200
        assert response.data[-1] == {"name": "Diamond", "threshold": 150}

    def test_complaints_require_authentication(self, api_client):
        response = api_client.get(reverse("complaints:complaint-list"))
        assert response.status_code == 401
