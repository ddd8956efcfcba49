"""
Accounts Service Layer.

This module is the **single source of truth** for all business logic
within the ``accounts`` app.  Views must remain *thin*: they validate
input through serializers, call a service method, and return the
result wrapped in a DRF ``Response``.

Architecture
------------
- ``UserRegistrationService``  — citizen self-registration.
- ``AuthenticationService``    — username/email login + JWT issuance.
- ``CurrentUserService``       — "Me" endpoint helpers.
- ``StaffManagementService``   — admin creation of staff accounts and
                                 role management of existing ones.
- ``GamificationService``      — points, badge tiers and scoreboards.
"""

from __future__ import annotations

import logging
from typing import Any

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.db.models import Count, Q, QuerySet
from rest_framework_simplejwt.tokens import RefreshToken

from core.constants import BADGE_TIERS
from core.domain.access import require_capability
from core.domain.exceptions import Conflict, DomainError, NotFound, PermissionDenied
from core.domain.transactions import lock_for_update
from core.permissions_constants import AdminCapabilities

from .models import UserRole

User = get_user_model()

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
#  Registration Service
# ═══════════════════════════════════════════════════════════════════


class UserRegistrationService:
    """
    Self-registration creates a citizen account with zero points and
    the floor badge tier.
    """

    @staticmethod
    def register_user(validated_data: dict[str, Any]) -> User:
        """
        Create a new citizen account.

        Parameters
        ----------
        validated_data : dict
            Cleaned data from ``RegisterRequestSerializer`` containing
            ``username``, ``password``, ``email`` and optionally
            ``first_name`` / ``last_name``.

        Returns
        -------
        User
            The newly created (and saved) ``User`` instance.

        Raises
        ------
        core.domain.exceptions.Conflict
            If the username or email is already taken.
        """
        validated_data.pop("password_confirm", None)
        password = validated_data.pop("password")

        conflicts = []
        if User.objects.filter(username=validated_data.get("username")).exists():
            conflicts.append("username")
        if User.objects.filter(email__iexact=validated_data.get("email")).exists():
            conflicts.append("email")
        if conflicts:
            raise Conflict(
                f"The following field(s) already exist: {', '.join(conflicts)}."
            )

        try:
            with transaction.atomic():
                user = User.objects.create_user(
                    password=password,
                    role=UserRole.CITIZEN,
                    points=0,
                    badge_level=GamificationService.compute_badge(0),
                    **validated_data,
                )
        except IntegrityError:
            raise Conflict(
                "A user with one of the provided unique fields already exists."
            )

        logger.info("Registered citizen account %s", user.username)
        return user


# ═══════════════════════════════════════════════════════════════════
#  Authentication Service
# ═══════════════════════════════════════════════════════════════════


class AuthenticationService:
    """JWT token generation for authenticated users."""

    @staticmethod
    def generate_tokens(user: User) -> dict[str, str]:
        """
        Issue a JWT access/refresh token pair for the given user.

        Returns
        -------
        dict
            ``{"access": "<token>", "refresh": "<token>"}``.
        """
        refresh = RefreshToken.for_user(user)
        return {
            "access": str(refresh.access_token),
            "refresh": str(refresh),
        }


# ═══════════════════════════════════════════════════════════════════
#  Current User Service
# ═══════════════════════════════════════════════════════════════════


class CurrentUserService:
    """Helpers for the ``/me/`` endpoint."""

    @staticmethod
    def get_profile(user: User) -> User:
        return User.objects.select_related("department").get(pk=user.pk)

    @staticmethod
    def update_profile(user: User, validated_data: dict[str, Any]) -> User:
        """
        Update the user's own name and email.

        Role, points, badge and department are never writable here.

        Raises
        ------
        Conflict
            If the new email is taken by another account.
        """
        email = validated_data.get("email")
        if email and User.objects.filter(email__iexact=email).exclude(pk=user.pk).exists():
            raise Conflict("The following field(s) already exist: email.")

        for field in ("first_name", "last_name", "email"):
            if field in validated_data:
                setattr(user, field, validated_data[field])
        user.save(update_fields=[f for f in ("first_name", "last_name", "email") if f in validated_data])
        return user


# ═══════════════════════════════════════════════════════════════════
#  Staff Management Service
# ═══════════════════════════════════════════════════════════════════


class StaffManagementService:
    """
    Admin-only account management: creating technicians and department
    managers, and changing, removing or counting existing accounts.
    """

    STAFF_ROLES = (UserRole.TECHNICIAN, UserRole.DEPARTMENT_MANAGER)

    @staticmethod
    def create_staff(validated_data: dict[str, Any], performed_by: User) -> User:
        """
        Create a staff account bound to an active department.

        Parameters
        ----------
        validated_data : dict
            ``username``, ``email``, ``password``, ``department_id`` and
            optionally ``role`` (defaults to technician), ``first_name``,
            ``last_name``.
        performed_by : User
            Must hold the ``manage_staff`` capability.

        Raises
        ------
        PermissionDenied
            The requester is not an admin.
        NotFound
            The department does not exist or is inactive.
        Conflict
            Username or email already taken.
        DomainError
            The requested role is not a staff role.
        """
        from departments.models import Department

        require_capability(
            performed_by,
            AdminCapabilities.MANAGE_STAFF,
            message="Only administrators can create staff accounts.",
        )

        data = dict(validated_data)
        role = data.pop("role", UserRole.TECHNICIAN)
        if role not in StaffManagementService.STAFF_ROLES:
            raise DomainError(f"'{role}' is not a staff role.")

        department_id = data.pop("department_id")
        department = Department.objects.filter(pk=department_id, is_active=True).first()
        if department is None:
            raise NotFound(f"Department with id {department_id} not found.")

        if User.objects.filter(
            Q(username=data.get("username")) | Q(email__iexact=data.get("email"))
        ).exists():
            raise Conflict("A user with this username or email already exists.")

        password = data.pop("password")
        try:
            with transaction.atomic():
                user = User.objects.create_user(
                    password=password,
                    role=role,
                    department=department,
                    points=0,
                    badge_level=GamificationService.compute_badge(0),
                    **data,
                )
        except IntegrityError:
            raise Conflict("A user with this username or email already exists.")

        logger.info(
            "Staff account %s (%s) created in %s by %s",
            user.username, role, department.name, performed_by.username,
        )
        return user

    @staticmethod
    def list_technicians(department_id: int | None = None) -> QuerySet[User]:
        qs = User.objects.filter(role=UserRole.TECHNICIAN, is_active=True).select_related("department")
        if department_id is not None:
            qs = qs.filter(department_id=department_id)
        return qs.order_by("username")

    # ── Existing accounts ──────────────────────────────────────────

    MANAGEABLE_ROLES = (UserRole.CITIZEN, UserRole.TECHNICIAN, UserRole.DEPARTMENT_MANAGER)

    _ORDERING = {
        "username": "username",
        "email": "email",
        "role": "role",
        "points": "points",
        "department": "department__name",
    }

    @staticmethod
    def list_users(performed_by: User, filters: dict[str, Any]) -> QuerySet[User]:
        """
        Admin directory of accounts.

        Parameters
        ----------
        filters : dict
            Optional ``role``, ``department`` (PK), ``q`` (username, name
            or email substring), ``ordering`` (one of ``username``,
            ``email``, ``role``, ``points``, ``department``; prefix
            ``-`` for descending).
        """
        require_capability(
            performed_by,
            AdminCapabilities.MANAGE_STAFF,
            message="Only administrators can browse user accounts.",
        )
        qs = User.objects.select_related("department")
        if filters.get("role"):
            qs = qs.filter(role=filters["role"])
        if filters.get("department") is not None:
            qs = qs.filter(department_id=filters["department"])
        search = (filters.get("q") or "").strip()
        if search:
            qs = qs.filter(
                Q(username__icontains=search)
                | Q(first_name__icontains=search)
                | Q(last_name__icontains=search)
                | Q(email__icontains=search)
            )

        ordering = filters.get("ordering") or "username"
        descending = ordering.startswith("-")
        field = StaffManagementService._ORDERING.get(ordering.lstrip("-"), "username")
        return qs.order_by(f"-{field}" if descending else field, "id")

    @staticmethod
    def _open_assignment_count(user: User) -> int:
        from complaints.models import Complaint, ComplaintStatus

        return Complaint.objects.filter(
            assigned_technician=user,
            status__in=ComplaintStatus.open_values(),
        ).count()

    @staticmethod
    def _apply_role(user: User, role: str, department) -> None:
        if user.is_superuser or user.role == UserRole.ADMIN:
            raise PermissionDenied("Administrator accounts cannot be changed here.")

        if user.role == UserRole.TECHNICIAN and (
            role != UserRole.TECHNICIAN or user.department_id != getattr(department, "pk", None)
        ):
            open_count = StaffManagementService._open_assignment_count(user)
            if open_count:
                raise Conflict(
                    f"User '{user.username}' still holds {open_count} open complaint(s)."
                )

        user.role = role
        user.department = department
        user.save(update_fields=["role", "department"])

    @staticmethod
    def _resolve_role_target(role: str, department_id: int | None):
        """Validate a role change and return the department it binds to."""
        from departments.models import Department

        if role not in StaffManagementService.MANAGEABLE_ROLES:
            raise DomainError(f"'{role}' cannot be granted through role management.")
        if role == UserRole.CITIZEN:
            return None
        if department_id is None:
            raise DomainError("Staff roles require a department.")
        department = Department.objects.filter(pk=department_id, is_active=True).first()
        if department is None:
            raise NotFound(f"Department with id {department_id} not found.")
        return department

    @staticmethod
    @transaction.atomic
    def update_role(
        user_id: int,
        role: str,
        department_id: int | None,
        performed_by: User,
    ) -> User:
        """
        Change one account's role and department.

        Citizens carry no department; technicians and department
        managers must be bound to an active one.

        Raises
        ------
        PermissionDenied
            The requester is not an admin, or the target is an admin.
        NotFound
            Unknown user or department.
        DomainError
            The role is not grantable, or a staff role has no department.
        Conflict
            A technician with open complaints would leave the role or
            their department.
        """
        require_capability(
            performed_by,
            AdminCapabilities.MANAGE_STAFF,
            message="Only administrators can change user roles.",
        )
        department = StaffManagementService._resolve_role_target(role, department_id)
        user = lock_for_update(User, user_id, label="User")
        previous_role = user.role
        StaffManagementService._apply_role(user, role, department)

        logger.info(
            "User %s changed from %s to %s (department=%s) by %s",
            user.username, previous_role, role,
            department.name if department else None, performed_by.username,
        )
        return user

    @staticmethod
    @transaction.atomic
    def bulk_update_roles(
        user_ids: list[int],
        role: str,
        department_id: int | None,
        performed_by: User,
    ) -> int:
        """
        Apply the same role change to several accounts.

        All or nothing: if any account is missing or refused, no account
        is changed.  Returns the number of accounts updated.
        """
        require_capability(
            performed_by,
            AdminCapabilities.MANAGE_STAFF,
            message="Only administrators can change user roles.",
        )
        department = StaffManagementService._resolve_role_target(role, department_id)

        ids = sorted(set(user_ids))
        users = list(User.objects.select_for_update().filter(pk__in=ids).order_by("pk"))
        if not users or len(users) != len(ids):
            missing = sorted(set(ids) - {user.pk for user in users})
            raise NotFound(f"Users not found: {missing or ids}.")

        for user in users:
            StaffManagementService._apply_role(user, role, department)

        logger.info(
            "%d users changed to %s (department=%s) by %s",
            len(users), role, department.name if department else None, performed_by.username,
        )
        return len(users)

    @staticmethod
    @transaction.atomic
    def delete_user(user_id: int, performed_by: User) -> None:
        """
        Remove an account.

        The user's own complaints (with their ratings, comments and
        photos) go with them; complaints they were assigned to are left
        unassigned, and comments they wrote elsewhere keep their author
        name.

        Raises
        ------
        PermissionDenied
            The requester is not an admin, or the target is an admin.
        NotFound
            Unknown user.
        Conflict
            The user is a technician with open complaints.
        """
        require_capability(
            performed_by,
            AdminCapabilities.MANAGE_STAFF,
            message="Only administrators can delete user accounts.",
        )
        user = lock_for_update(User, user_id, label="User")
        if user.is_superuser or user.role == UserRole.ADMIN:
            raise PermissionDenied("Administrator accounts cannot be deleted here.")

        if user.role == UserRole.TECHNICIAN:
            open_count = StaffManagementService._open_assignment_count(user)
            if open_count:
                raise Conflict(
                    f"Cannot delete technician '{user.username}' with {open_count} open complaint(s)."
                )

        username = user.username
        user.delete()
        logger.info("User %s deleted by %s", username, performed_by.username)

    @staticmethod
    def role_statistics(performed_by: User) -> dict[str, Any]:
        """
        Account counters: ``total``, one count per role, and
        ``by_department`` (staff per department name).
        """
        require_capability(
            performed_by,
            AdminCapabilities.MANAGE_STAFF,
            message="Only administrators can view account statistics.",
        )
        counts = User.objects.aggregate(
            total=Count("id"),
            citizens=Count("id", filter=Q(role=UserRole.CITIZEN)),
            technicians=Count("id", filter=Q(role=UserRole.TECHNICIAN)),
            department_managers=Count("id", filter=Q(role=UserRole.DEPARTMENT_MANAGER)),
            admins=Count("id", filter=Q(role=UserRole.ADMIN)),
        )
        by_department = (
            User.objects
            .filter(department__isnull=False)
            .values("department__name")
            .annotate(count=Count("id"))
            .order_by("department__name")
        )
        counts["by_department"] = [
            {"department": row["department__name"], "count": row["count"]}
            for row in by_department
        ]
        return counts


# ═══════════════════════════════════════════════════════════════════
#  Gamification Service
# ═══════════════════════════════════════════════════════════════════


class GamificationService:
    """
    Points-to-badge mapping and the public scoreboards.

    Badge tiers are the static ordered table ``core.constants.BADGE_TIERS``.
    """

    @staticmethod
    def compute_badge(points: int) -> str:
        """
        Return the label of the highest tier whose threshold is at or
        below ``points``.

        Tiers are scanned in ascending threshold order and the last
        qualifying one wins; below the lowest threshold the floor tier
        (the first one) is returned.  Pure function.

        >>> GamificationService.compute_badge(0)
        'Bronze'
        >>> GamificationService.compute_badge(30)
        'Silver'
        """
        badge = BADGE_TIERS[0][0]
        for name, threshold in sorted(BADGE_TIERS, key=lambda tier: tier[1]):
            if points >= threshold:
                badge = name
        return badge

    @staticmethod
    def badge_tiers() -> list[dict[str, Any]]:
        return [
            {"name": name, "threshold": threshold}
            for name, threshold in sorted(BADGE_TIERS, key=lambda tier: tier[1])
        ]

    @staticmethod
    @transaction.atomic
    def award(account_id: int, delta: int) -> str:
        """
        Add ``delta`` points to the account and recompute its badge.

        The account row is locked for the read-modify-write so
        concurrent submissions by the same reporter never lose points.

        Parameters
        ----------
        account_id : int
            PK of the account to credit.
        delta : int
            Non-negative number of points to add.

        Returns
        -------
        str
            The (possibly unchanged) badge label.
        """
        if delta < 0:
            raise DomainError("Points can only be awarded, never deducted.")

        account = lock_for_update(User, account_id, label="User")
        previous_badge = account.badge_level
        account.points += delta
        account.badge_level = GamificationService.compute_badge(account.points)
        account.save(update_fields=["points", "badge_level"])

        if account.badge_level != previous_badge:
            logger.info(
                "User %s promoted from %s to %s (%d points)",
                account.username, previous_badge, account.badge_level, account.points,
            )
        return account.badge_level

    @staticmethod
    def citizen_scoreboard() -> QuerySet[User]:
        """Citizens ordered by points, highest first."""
        return (
            User.objects
            .filter(role=UserRole.CITIZEN, is_active=True)
            .order_by("-points", "username")
        )

    @staticmethod
    def technician_scoreboard() -> QuerySet[User]:
        """
        Technicians annotated with ``completed_count`` (Fixed) and
        ``open_count`` (Pending + InProgress), ordered by completed
        descending then open ascending.
        """
        from complaints.models import ComplaintStatus

        return (
            User.objects
            .filter(role=UserRole.TECHNICIAN)
            .select_related("department")
            .annotate(
                completed_count=Count(
                    "assigned_complaints",
                    filter=Q(assigned_complaints__status=ComplaintStatus.FIXED),
                ),
                open_count=Count(
                    "assigned_complaints",
                    filter=Q(assigned_complaints__status__in=ComplaintStatus.open_values()),
                ),
            )
            .order_by("-completed_count", "open_count", "username")
        )
