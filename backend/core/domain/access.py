"""
core.domain.access — Capability checks and complaint scoping.

This module is the single interpreter of
``core.permissions_constants.ROLE_CAPABILITIES``.  Every service asks
the same question through the same function,
``check_complaint_permission(user, capability, complaint)``, instead of
branching on role names.

Architecture overview
---------------------
    ┌─────────┐      ┌────────────────┐      ┌──────────────────┐
    │  View   │─────▶│  App service   │─────▶│ core.domain      │
    │ (thin)  │      │ (owns logic)   │      │   .access        │
    └─────────┘      └────────────────┘      │ (matrix lookup)  │
                                             └──────────────────┘

Usage in an app's service layer::

    from core.domain.access import require_complaint_permission
    from core.permissions_constants import ComplaintCapabilities

    require_complaint_permission(
        user, ComplaintCapabilities.CHANGE_STATUS, complaint,
        message="You can only update complaints assigned to you.",
    )
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

from django.db.models import QuerySet

from core.domain.exceptions import PermissionDenied
from core.permissions_constants import (
    ROLE_CAPABILITIES,
    ComplaintCapabilities,
    Roles,
    Scope,
)

if TYPE_CHECKING:
    from accounts.models import User

# (user, complaint) -> bool
ScopeCheck = Callable[[Any, Any], bool]
# (queryset, user) -> queryset
ScopeFilter = Callable[[QuerySet, Any], QuerySet]


def _same_department(user: Any, complaint: Any) -> bool:
    department_id = getattr(user, "department_id", None)
    return department_id is not None and complaint.department_id == department_id


_SCOPE_CHECKS: dict[str, ScopeCheck] = {
    Scope.ANY: lambda user, complaint: True,
    Scope.OWN: lambda user, complaint: complaint.reporter_id == user.pk,
    Scope.ASSIGNED: lambda user, complaint: complaint.assigned_technician_id == user.pk,
    Scope.DEPARTMENT: _same_department,
}

_SCOPE_FILTERS: dict[str, ScopeFilter] = {
    Scope.ANY: lambda qs, user: qs,
    Scope.OWN: lambda qs, user: qs.filter(reporter=user),
    Scope.ASSIGNED: lambda qs, user: qs.filter(assigned_technician=user),
    Scope.DEPARTMENT: lambda qs, user: (
        qs.filter(department_id=user.department_id)
        if getattr(user, "department_id", None) is not None
        else qs.none()
    ),
}


def get_user_role_name(user: User) -> str | None:
    """
    Return the role identifier for a user, or ``None`` if unknown.

    Superusers are always treated as admins.
    """
    if not getattr(user, "is_authenticated", False):
        return None
    if user.is_superuser:
        return Roles.ADMIN
    return getattr(user, "role", None) or None


def capability_scope(user: User, capability: str) -> str | None:
    """Return the scope the user's role grants for ``capability``."""
    role = get_user_role_name(user)
    if role is None:
        return None
    return ROLE_CAPABILITIES.get(role, {}).get(capability)


def has_capability(user: User, capability: str) -> bool:
    """True if the user's role grants ``capability`` on at least some complaints."""
    return capability_scope(user, capability) is not None


def require_capability(user: User, capability: str, message: str = "") -> None:
    """
    Guard that raises ``PermissionDenied`` when the user's role does not
    grant ``capability`` at all.
    """
    if not has_capability(user, capability):
        raise PermissionDenied(
            message or f"Your role is not permitted to perform '{capability}'."
        )


def check_complaint_permission(user: User, capability: str, complaint: Any) -> bool:
    """
    The single allow/deny decision for an operation on one complaint.

    Args:
        user:       The acting user.
        capability: One of ``ComplaintCapabilities``.
        complaint:  The complaint the operation targets.

    Returns:
        ``True`` when the role grants the capability *and* the complaint
        falls inside the granted scope.
    """
    scope = capability_scope(user, capability)
    if scope is None:
        return False
    return _SCOPE_CHECKS[scope](user, complaint)


def require_complaint_permission(
    user: User,
    capability: str,
    complaint: Any,
    message: str = "",
) -> None:
    """Raising form of ``check_complaint_permission``."""
    if not check_complaint_permission(user, capability, complaint):
        raise PermissionDenied(
            message or "You do not have permission to perform this action on this complaint."
        )


def scope_complaints(
    queryset: QuerySet,
    user: User,
    capability: str = ComplaintCapabilities.VIEW,
) -> QuerySet:
    """
    Narrow a complaint queryset to the rows the user may exercise
    ``capability`` on.  Users without the capability get an empty
    queryset.
    """
    scope = capability_scope(user, capability)
    if scope is None:
        return queryset.none()
    return _SCOPE_FILTERS[scope](queryset, user)
