"""
Unit tests for the role → capability → scope matrix in
``core.domain.access``.

Complaints are represented by lightweight stand-ins: the access layer
only reads ``reporter_id``, ``assigned_technician_id`` and
``department_id`` from them.
"""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from core.domain.access import (
    capability_scope,
    check_complaint_permission,
    get_user_role_name,
    require_capability,
    require_complaint_permission,
)
from core.domain.exceptions import PermissionDenied
from core.permissions_constants import AdminCapabilities, ComplaintCapabilities, Roles, Scope


def _user(pk: int, role: str, department_id: int | None = None, is_superuser: bool = False):
    return SimpleNamespace(
        pk=pk,
        role=role,
        department_id=department_id,
        is_superuser=is_superuser,
        is_authenticated=True,
    )


def _complaint(reporter_id=1, technician_id=None, department_id=None):
    return SimpleNamespace(
        reporter_id=reporter_id,
        assigned_technician_id=technician_id,
        department_id=department_id,
    )


CITIZEN = _user(1, Roles.CITIZEN)
OTHER_CITIZEN = _user(2, Roles.CITIZEN)
TECHNICIAN = _user(10, Roles.TECHNICIAN, department_id=100)
MANAGER = _user(20, Roles.DEPARTMENT_MANAGER, department_id=100)
ADMIN = _user(30, Roles.ADMIN)


class TestRoleResolution:

    def test_superuser_is_admin_regardless_of_role_field(self):
        root = _user(99, Roles.CITIZEN, is_superuser=True)
        assert get_user_role_name(root) == Roles.ADMIN

    def test_anonymous_user_has_no_role(self):
        anonymous = SimpleNamespace(is_authenticated=False)
        assert get_user_role_name(anonymous) is None
        assert capability_scope(anonymous, ComplaintCapabilities.VIEW) is None


class TestComplaintScopes:

    def test_citizen_sees_only_own_complaints(self):
        own = _complaint(reporter_id=CITIZEN.pk)
        assert check_complaint_permission(CITIZEN, ComplaintCapabilities.VIEW, own)
        assert not check_complaint_permission(OTHER_CITIZEN, ComplaintCapabilities.VIEW, own)

    def test_citizen_cannot_change_status_even_on_own_complaint(self):
        own = _complaint(reporter_id=CITIZEN.pk)
        assert not check_complaint_permission(CITIZEN, ComplaintCapabilities.CHANGE_STATUS, own)

    def test_technician_limited_to_assigned_complaints(self):
        mine = _complaint(technician_id=TECHNICIAN.pk, department_id=100)
        colleague = _complaint(technician_id=11, department_id=100)
        assert check_complaint_permission(TECHNICIAN, ComplaintCapabilities.CHANGE_STATUS, mine)
        assert not check_complaint_permission(TECHNICIAN, ComplaintCapabilities.CHANGE_STATUS, colleague)
        assert not check_complaint_permission(TECHNICIAN, ComplaintCapabilities.ASSIGN, mine)

    def test_manager_limited_to_own_department(self):
        inside = _complaint(department_id=100)
        outside = _complaint(department_id=200)
        unrouted = _complaint(department_id=None)
        assert check_complaint_permission(MANAGER, ComplaintCapabilities.ASSIGN, inside)
        assert not check_complaint_permission(MANAGER, ComplaintCapabilities.ASSIGN, outside)
        assert not check_complaint_permission(MANAGER, ComplaintCapabilities.ASSIGN, unrouted)

    def test_manager_without_department_has_no_reach(self):
        orphan = _user(21, Roles.DEPARTMENT_MANAGER, department_id=None)
        assert not check_complaint_permission(
            orphan, ComplaintCapabilities.VIEW, _complaint(department_id=None),
        )

    def test_admin_reaches_every_complaint(self):
        for capability in (
            ComplaintCapabilities.VIEW,
            ComplaintCapabilities.CHANGE_STATUS,
            ComplaintCapabilities.ASSIGN,
            ComplaintCapabilities.PURGE,
        ):
            assert capability_scope(ADMIN, capability) == Scope.ANY

    def test_only_citizens_submit_and_rate(self):
        assert capability_scope(CITIZEN, ComplaintCapabilities.SUBMIT) == Scope.ANY
        for user in (TECHNICIAN, MANAGER, ADMIN):
            assert capability_scope(user, ComplaintCapabilities.SUBMIT) is None
            assert capability_scope(user, ComplaintCapabilities.RATE) is None


class TestRaisingGuards:

    def test_require_complaint_permission_uses_custom_message(self):
        with pytest.raises(PermissionDenied, match="assigned to you"):
            require_complaint_permission(
                TECHNICIAN,
                ComplaintCapabilities.UPLOAD_PHOTOS,
                _complaint(technician_id=11),
                message="Complaint not assigned to you.",
            )

    def test_require_capability_rejects_non_admin_route_management(self):
        with pytest.raises(PermissionDenied):
            require_capability(MANAGER, AdminCapabilities.MANAGE_ROUTES)
        require_capability(ADMIN, AdminCapabilities.MANAGE_ROUTES)
