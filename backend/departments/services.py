"""
Departments Service Layer.

- ``RoutingService``        — problem-type → department lookup.
- ``DepartmentQueryService`` — read access to departments and their staff.
- ``RouteAdminService``      — admin maintenance of the routing table.
"""

from __future__ import annotations

import logging
from typing import Any

from django.db import IntegrityError, transaction
from django.db.models import QuerySet

from core.domain.access import require_capability
from core.domain.exceptions import Conflict, NotFound
from core.permissions_constants import AdminCapabilities

from .models import Department, ProblemTypeRoute

logger = logging.getLogger(__name__)


class RoutingService:
    """Read side of the routing table."""

    @staticmethod
    def route(problem_type: str) -> Department | None:
        """
        Return the department responsible for ``problem_type``.

        Only active routes match, and matching is exact on the stored
        label.  An unmapped or deactivated type yields ``None``; that is
        not an error, the complaint simply stays unrouted.
        """
        route = (
            ProblemTypeRoute.objects
            .select_related("department")
            .filter(problem_type=problem_type, is_active=True)
            .first()
        )
        if route is None:
            logger.info("No active route for problem type %r", problem_type)
            return None
        return route.department


class DepartmentQueryService:

    @staticmethod
    def list_departments(include_inactive: bool = False) -> QuerySet[Department]:
        qs = Department.objects.all()
        if not include_inactive:
            qs = qs.filter(is_active=True)
        return qs

    @staticmethod
    def get_department(department_id: int) -> Department:
        try:
            return Department.objects.get(pk=department_id)
        except Department.DoesNotExist:
            raise NotFound(f"Department with id {department_id} not found.")

    @staticmethod
    def list_technicians(department_id: int) -> QuerySet:
        from accounts.services import StaffManagementService

        DepartmentQueryService.get_department(department_id)
        return StaffManagementService.list_technicians(department_id)


class RouteAdminService:
    """
    Admin-only maintenance of ``ProblemTypeRoute`` rows.

    Routes are never deleted; deactivating one removes it from routing.
    """

    @staticmethod
    def list_routes() -> QuerySet[ProblemTypeRoute]:
        return ProblemTypeRoute.objects.select_related("department").all()

    @staticmethod
    @transaction.atomic
    def create_route(validated_data: dict[str, Any], performed_by) -> ProblemTypeRoute:
        """
        Add a routing-table entry.

        Raises
        ------
        PermissionDenied
            The requester is not an admin.
        Conflict
            A route for the same problem type already exists.
        """
        require_capability(
            performed_by,
            AdminCapabilities.MANAGE_ROUTES,
            message="Only administrators can manage problem-type routes.",
        )
        problem_type = validated_data["problem_type"].strip()
        if ProblemTypeRoute.objects.filter(problem_type=problem_type).exists():
            raise Conflict(f"A route for '{problem_type}' already exists.")

        try:
            with transaction.atomic():
                route = ProblemTypeRoute.objects.create(
                    problem_type=problem_type,
                    department=validated_data["department"],
                    is_active=validated_data.get("is_active", True),
                )
        except IntegrityError:
            raise Conflict(f"A route for '{problem_type}' already exists.")

        logger.info(
            "Route %s -> %s created by %s",
            route.problem_type, route.department.name, performed_by.username,
        )
        return route

    @staticmethod
    @transaction.atomic
    def update_route(route_id: int, validated_data: dict[str, Any], performed_by) -> ProblemTypeRoute:
        """
        Re-point a route to another department and/or toggle it.

        The problem-type label itself is immutable.
        """
        require_capability(
            performed_by,
            AdminCapabilities.MANAGE_ROUTES,
            message="Only administrators can manage problem-type routes.",
        )
        try:
            route = ProblemTypeRoute.objects.select_for_update().get(pk=route_id)
        except ProblemTypeRoute.DoesNotExist:
            raise NotFound(f"Route with id {route_id} not found.")

        update_fields = []
        if "department" in validated_data:
            route.department = validated_data["department"]
            update_fields.append("department")
        if "is_active" in validated_data:
            route.is_active = validated_data["is_active"]
            update_fields.append("is_active")
        if update_fields:
            route.save(update_fields=update_fields)
            logger.info(
                "Route %s updated by %s: department=%s active=%s",
                route.problem_type, performed_by.username, route.department.name, route.is_active,
            )
        return route
