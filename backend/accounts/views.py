"""
Accounts app views.

All views follow the **Thin View** pattern: validate input via
serializers, delegate to the service layer, and return the result
wrapped in a DRF ``Response``.  **No business logic** resides here.

View Map
--------
- ``RegisterView``             — POST /auth/register/
- ``LoginView``                — POST /auth/login/
- ``MeView``                   — GET / PATCH /me/
- ``BadgeTierListView``        — GET /badges/
- ``TechnicianViewSet``        — GET/POST /technicians/
- ``CitizenScoreboardView``    — GET /scoreboard/citizens/
- ``TechnicianScoreboardView`` — GET /scoreboard/technicians/
- ``UserAdminViewSet``         — /users/ (admin role management)
"""

from __future__ import annotations

from drf_spectacular.utils import (
    OpenApiParameter,
    OpenApiResponse,
    extend_schema,
)
from rest_framework import generics, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import (
    BadgeTierSerializer,
    BulkRoleUpdateSerializer,
    CitizenScoreSerializer,
    CustomTokenObtainPairSerializer,
    MeUpdateSerializer,
    RegisterRequestSerializer,
    RoleStatisticsSerializer,
    RoleUpdateSerializer,
    StaffCreateSerializer,
    TechnicianScoreSerializer,
    TechnicianSerializer,
    UserAdminFilterSerializer,
    UserDetailSerializer,
)
from .services import (
    CurrentUserService,
    GamificationService,
    StaffManagementService,
    UserRegistrationService,
)


# ═══════════════════════════════════════════════════════════════════
#  Authentication Views
# ═══════════════════════════════════════════════════════════════════


class RegisterView(generics.CreateAPIView):
    """
    POST /api/accounts/auth/register/

    Public endpoint.  Creates a citizen account with 0 points and the
    floor badge.

    Request body  → ``RegisterRequestSerializer``
    Response body → ``UserDetailSerializer`` (201 Created)
    """

    permission_classes = [AllowAny]
    serializer_class = RegisterRequestSerializer

    @extend_schema(
        summary="Register a citizen account",
        responses={
            201: OpenApiResponse(response=UserDetailSerializer, description="Account created."),
            400: OpenApiResponse(description="Validation error."),
            409: OpenApiResponse(description="Username or email already taken."),
        },
        tags=["Accounts"],
    )
    def create(self, request: Request, *args, **kwargs) -> Response:
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = UserRegistrationService.register_user(serializer.validated_data)
        response_serializer = UserDetailSerializer(user)
        return Response(response_serializer.data, status=status.HTTP_201_CREATED)


class LoginView(APIView):
    """
    POST /api/accounts/auth/login/

    Public endpoint.  Authenticates by username or email plus password
    and returns a JWT pair together with the user profile.
    """

    permission_classes = [AllowAny]

    @extend_schema(
        summary="Log in",
        request=CustomTokenObtainPairSerializer,
        responses={
            200: OpenApiResponse(description="Access/refresh tokens and the user profile."),
            400: OpenApiResponse(description="Invalid credentials."),
        },
        tags=["Accounts"],
    )
    def post(self, request: Request) -> Response:
        serializer = CustomTokenObtainPairSerializer(
            data=request.data,
            context={"request": request},
        )
        serializer.is_valid(raise_exception=True)

        payload = serializer.validated_data  # contains 'access' and 'refresh'
        payload["user"] = UserDetailSerializer(serializer.user).data

        return Response(payload, status=status.HTTP_200_OK)


# ═══════════════════════════════════════════════════════════════════
#  Current User ("Me") View
# ═══════════════════════════════════════════════════════════════════


class MeView(APIView):
    """
    GET  /api/accounts/me/  → Retrieve current user profile.
    PATCH /api/accounts/me/ → Update own name / email.

    The profile carries the user's points and badge level.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Current user profile",
        responses={200: UserDetailSerializer},
        tags=["Accounts"],
    )
    def get(self, request: Request) -> Response:
        user = CurrentUserService.get_profile(request.user)
        return Response(UserDetailSerializer(user).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Update current user profile",
        request=MeUpdateSerializer,
        responses={
            200: UserDetailSerializer,
            409: OpenApiResponse(description="Email already taken."),
        },
        tags=["Accounts"],
    )
    def patch(self, request: Request) -> Response:
        serializer = MeUpdateSerializer(
            instance=request.user,
            data=request.data,
            partial=True,
        )
        serializer.is_valid(raise_exception=True)
        user = CurrentUserService.update_profile(request.user, serializer.validated_data)
        return Response(UserDetailSerializer(user).data, status=status.HTTP_200_OK)


# ═══════════════════════════════════════════════════════════════════
#  Gamification Views
# ═══════════════════════════════════════════════════════════════════


class BadgeTierListView(APIView):
    """GET /api/accounts/badges/ — the ordered badge table."""

    permission_classes = [AllowAny]

    @extend_schema(
        summary="Badge tiers",
        responses={200: BadgeTierSerializer(many=True)},
        tags=["Gamification"],
    )
    def get(self, request: Request) -> Response:
        data = GamificationService.badge_tiers()
        return Response(BadgeTierSerializer(data, many=True).data, status=status.HTTP_200_OK)


class CitizenScoreboardView(APIView):
    """GET /api/accounts/scoreboard/citizens/"""

    permission_classes = [AllowAny]

    @extend_schema(
        summary="Citizen scoreboard",
        description="Citizens ranked by points, highest first.",
        responses={200: CitizenScoreSerializer(many=True)},
        tags=["Gamification"],
    )
    def get(self, request: Request) -> Response:
        qs = GamificationService.citizen_scoreboard()
        return Response(CitizenScoreSerializer(qs, many=True).data, status=status.HTTP_200_OK)


class TechnicianScoreboardView(APIView):
    """GET /api/accounts/scoreboard/technicians/"""

    permission_classes = [AllowAny]

    @extend_schema(
        summary="Technician scoreboard",
        description=(
            "Technicians ranked by completed (Fixed) complaints descending, "
            "then by open (Pending + In Progress) complaints ascending."
        ),
        responses={200: TechnicianScoreSerializer(many=True)},
        tags=["Gamification"],
    )
    def get(self, request: Request) -> Response:
        qs = GamificationService.technician_scoreboard()
        return Response(TechnicianScoreSerializer(qs, many=True).data, status=status.HTTP_200_OK)


# ═══════════════════════════════════════════════════════════════════
#  Staff
# ═══════════════════════════════════════════════════════════════════


class TechnicianViewSet(viewsets.ViewSet):
    """
    GET  /api/accounts/technicians/  — active technicians (optionally per department).
    POST /api/accounts/technicians/  — admin creates a technician or
                                       department-manager account.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="List technicians",
        parameters=[
            OpenApiParameter(name="department", type=int, location=OpenApiParameter.QUERY, description="Filter by department PK."),
        ],
        responses={200: TechnicianSerializer(many=True)},
        tags=["Staff"],
    )
    def list(self, request: Request) -> Response:
        department = request.query_params.get("department")
        department_id = int(department) if department and department.isdigit() else None
        qs = StaffManagementService.list_technicians(department_id)
        return Response(TechnicianSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Create a staff account",
        description="Admin only. The account is bound to an active department.",
        request=StaffCreateSerializer,
        responses={
            201: OpenApiResponse(response=UserDetailSerializer, description="Staff account created."),
            403: OpenApiResponse(description="Requires the admin role."),
            404: OpenApiResponse(description="Department not found."),
            409: OpenApiResponse(description="Username or email already taken."),
        },
        tags=["Staff"],
    )
    def create(self, request: Request) -> Response:
        serializer = StaffCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = StaffManagementService.create_staff(serializer.validated_data, request.user)
        return Response(UserDetailSerializer(user).data, status=status.HTTP_201_CREATED)


# ═══════════════════════════════════════════════════════════════════
#  User Administration
# ═══════════════════════════════════════════════════════════════════


class UserAdminViewSet(viewsets.ViewSet):
    """
    Admin management of existing accounts.

    GET    /api/accounts/users/              — directory with filters.
    DELETE /api/accounts/users/{id}/         — remove an account.
    PATCH  /api/accounts/users/{id}/role/    — change role and department.
    POST   /api/accounts/users/bulk-role/    — same change for many accounts.
    GET    /api/accounts/users/statistics/   — account counters.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="List user accounts",
        parameters=[UserAdminFilterSerializer],
        responses={
            200: UserDetailSerializer(many=True),
            403: OpenApiResponse(description="Requires the admin role."),
        },
        tags=["User Administration"],
    )
    def list(self, request: Request) -> Response:
        filter_serializer = UserAdminFilterSerializer(data=request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        qs = StaffManagementService.list_users(request.user, filter_serializer.validated_data)
        return Response(UserDetailSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Delete a user account",
        responses={
            204: OpenApiResponse(description="Deleted."),
            403: OpenApiResponse(description="Requires the admin role, or the target is an admin."),
            404: OpenApiResponse(description="User not found."),
            409: OpenApiResponse(description="Technician still holds open complaints."),
        },
        tags=["User Administration"],
    )
    def destroy(self, request: Request, pk: int = None) -> Response:
        StaffManagementService.delete_user(pk, request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        summary="Change a user's role",
        request=RoleUpdateSerializer,
        responses={
            200: UserDetailSerializer,
            400: OpenApiResponse(description="Role not grantable or department missing."),
            403: OpenApiResponse(description="Requires the admin role, or the target is an admin."),
            404: OpenApiResponse(description="User or department not found."),
            409: OpenApiResponse(description="Technician still holds open complaints."),
        },
        tags=["User Administration"],
    )
    @action(detail=True, methods=["patch"], url_path="role")
    def role(self, request: Request, pk: int = None) -> Response:
        serializer = RoleUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = StaffManagementService.update_role(
            pk,
            serializer.validated_data["role"],
            serializer.validated_data["department_id"],
            request.user,
        )
        return Response(UserDetailSerializer(user).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Change the role of several users",
        request=BulkRoleUpdateSerializer,
        responses={
            200: OpenApiResponse(description='{"updated": <count>}'),
            404: OpenApiResponse(description="One or more users not found."),
        },
        tags=["User Administration"],
    )
    @action(detail=False, methods=["post"], url_path="bulk-role")
    def bulk_role(self, request: Request) -> Response:
        serializer = BulkRoleUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        updated = StaffManagementService.bulk_update_roles(
            serializer.validated_data["user_ids"],
            serializer.validated_data["role"],
            serializer.validated_data["department_id"],
            request.user,
        )
        return Response({"updated": updated}, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Account statistics",
        responses={200: RoleStatisticsSerializer},
        tags=["User Administration"],
    )
    @action(detail=False, methods=["get"], url_path="statistics")
    def statistics(self, request: Request) -> Response:
        data = StaffManagementService.role_statistics(request.user)
        return Response(RoleStatisticsSerializer(data).data, status=status.HTTP_200_OK)
