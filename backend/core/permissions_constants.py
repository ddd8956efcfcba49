"""
Permissions Constants — **Single Source of Truth**

Every role name, capability and scope referenced in code (services,
views, serializers, tests) MUST use one of the constants defined here.

The four account roles overlap in authority over the same complaints
(an admin and a department manager can both move a complaint forward).
Instead of a role switch duplicated in every handler, authority is
declared once in ``ROLE_CAPABILITIES``: each role maps a *capability*
to the *scope* of complaints it may exercise that capability on.
``core.domain.access`` is the only code that interprets the matrix.
"""


class Roles:
    """Account role identifiers (stored on ``accounts.User.role``)."""

    CITIZEN = "citizen"
    TECHNICIAN = "technician"
    DEPARTMENT_MANAGER = "department_manager"
    ADMIN = "admin"


class ComplaintCapabilities:
    """Named operations that can be performed on complaints."""

    SUBMIT = "submit"
    VIEW = "view"
    CHANGE_STATUS = "change_status"
    ASSIGN = "assign"
    RATE = "rate"
    COMMENT = "comment"
    UPLOAD_PHOTOS = "upload_photos"
    PURGE = "purge"


class AdminCapabilities:
    """Operations on reference data and staff accounts."""

    MANAGE_ROUTES = "manage_routes"
    MANAGE_STAFF = "manage_staff"


class Scope:
    """Subset of complaints a capability applies to."""

    ANY = "any"
    OWN = "own"                # complaint.reporter == user
    ASSIGNED = "assigned"      # complaint.assigned_technician == user
    DEPARTMENT = "department"  # complaint.department == user.department


# ════════════════════════════════════════════════════════════════════
#  Role → capability → scope matrix
# ════════════════════════════════════════════════════════════════════

ROLE_CAPABILITIES: dict[str, dict[str, str]] = {
    Roles.CITIZEN: {
        ComplaintCapabilities.SUBMIT: Scope.ANY,
        ComplaintCapabilities.VIEW: Scope.OWN,
        ComplaintCapabilities.RATE: Scope.OWN,
        ComplaintCapabilities.COMMENT: Scope.OWN,
    },
    Roles.TECHNICIAN: {
        ComplaintCapabilities.VIEW: Scope.ASSIGNED,
        ComplaintCapabilities.CHANGE_STATUS: Scope.ASSIGNED,
        ComplaintCapabilities.COMMENT: Scope.ASSIGNED,
        ComplaintCapabilities.UPLOAD_PHOTOS: Scope.ASSIGNED,
    },
    Roles.DEPARTMENT_MANAGER: {
        ComplaintCapabilities.VIEW: Scope.DEPARTMENT,
        ComplaintCapabilities.CHANGE_STATUS: Scope.DEPARTMENT,
        ComplaintCapabilities.ASSIGN: Scope.DEPARTMENT,
        ComplaintCapabilities.COMMENT: Scope.DEPARTMENT,
    },
    Roles.ADMIN: {
        ComplaintCapabilities.VIEW: Scope.ANY,
        ComplaintCapabilities.CHANGE_STATUS: Scope.ANY,
        ComplaintCapabilities.ASSIGN: Scope.ANY,
        ComplaintCapabilities.COMMENT: Scope.ANY,
        ComplaintCapabilities.PURGE: Scope.ANY,
        AdminCapabilities.MANAGE_ROUTES: Scope.ANY,
        AdminCapabilities.MANAGE_STAFF: Scope.ANY,
    },
}
