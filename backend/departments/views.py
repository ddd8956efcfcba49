"""
Departments app ViewSets.

Thin views: validate input, delegate to ``departments.services``,
serialise the result.
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response

from accounts.serializers import TechnicianSerializer

from .serializers import (
    DepartmentSerializer,
    ProblemTypeRouteCreateSerializer,
    ProblemTypeRouteSerializer,
    ProblemTypeRouteUpdateSerializer,
)
from .services import DepartmentQueryService, RouteAdminService


class DepartmentViewSet(viewsets.ViewSet):
    """
    GET /api/departments/                   — active departments.
    GET /api/departments/{id}/              — one department.
    GET /api/departments/{id}/technicians/  — its active technicians.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="List departments",
        responses={200: DepartmentSerializer(many=True)},
        tags=["Departments"],
    )
    def list(self, request: Request) -> Response:
        qs = DepartmentQueryService.list_departments()
        return Response(DepartmentSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Retrieve department",
        responses={
            200: DepartmentSerializer,
            404: OpenApiResponse(description="Department not found."),
        },
        tags=["Departments"],
    )
    def retrieve(self, request: Request, pk: int = None) -> Response:
        department = DepartmentQueryService.get_department(pk)
        return Response(DepartmentSerializer(department).data, status=status.HTTP_200_OK)

    @action(detail=True, methods=["get"], url_path="technicians")
    @extend_schema(
        summary="List technicians of a department",
        responses={
            200: TechnicianSerializer(many=True),
            404: OpenApiResponse(description="Department not found."),
        },
        tags=["Departments"],
    )
    def technicians(self, request: Request, pk: int = None) -> Response:
        qs = DepartmentQueryService.list_technicians(pk)
        return Response(TechnicianSerializer(qs, many=True).data, status=status.HTTP_200_OK)


class ProblemTypeRouteViewSet(viewsets.ViewSet):
    """
    GET   /api/routes/        — the routing table.
    POST  /api/routes/        — add a route (admin).
    PATCH /api/routes/{id}/   — re-point or toggle a route (admin).
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="List problem-type routes",
        responses={200: ProblemTypeRouteSerializer(many=True)},
        tags=["Routing"],
    )
    def list(self, request: Request) -> Response:
        qs = RouteAdminService.list_routes()
        return Response(ProblemTypeRouteSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Create problem-type route",
        request=ProblemTypeRouteCreateSerializer,
        responses={
            201: ProblemTypeRouteSerializer,
            403: OpenApiResponse(description="Requires the admin role."),
            409: OpenApiResponse(description="Route already exists."),
        },
        tags=["Routing"],
    )
    def create(self, request: Request) -> Response:
        serializer = ProblemTypeRouteCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        route = RouteAdminService.create_route(serializer.validated_data, request.user)
        return Response(ProblemTypeRouteSerializer(route).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        summary="Update problem-type route",
        request=ProblemTypeRouteUpdateSerializer,
        responses={
            200: ProblemTypeRouteSerializer,
            403: OpenApiResponse(description="Requires the admin role."),
            404: OpenApiResponse(description="Route not found."),
        },
        tags=["Routing"],
    )
    def partial_update(self, request: Request, pk: int = None) -> Response:
        serializer = ProblemTypeRouteUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        route = RouteAdminService.update_route(pk, serializer.validated_data, request.user)
        return Response(ProblemTypeRouteSerializer(route).data, status=status.HTTP_200_OK)
