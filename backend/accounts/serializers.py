"""
Accounts app serializers.

Contains all Request and Response serializers for the accounts API.
Serializers handle field definitions, read/write constraints, and
basic validation.  **No business logic** lives here — all domain
rules are delegated to ``services.py``.
"""

from __future__ import annotations

from typing import Any

from django.contrib.auth import authenticate, get_user_model
from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from .models import UserRole

User = get_user_model()


# ═══════════════════════════════════════════════════════════════════
#  Authentication Serializers
# ═══════════════════════════════════════════════════════════════════


class RegisterRequestSerializer(serializers.ModelSerializer):
    """
    Validates citizen registration data.

    The ``password`` field is write-only and is hashed by the service
    layer before persisting.
    """

    password = serializers.CharField(
        write_only=True,
        min_length=8,
        style={"input_type": "password"},
        help_text="Minimum 8 characters.",
    )
    password_confirm = serializers.CharField(
        write_only=True,
        style={"input_type": "password"},
        help_text="Must match 'password'.",
    )

    class Meta:
        model = User
        fields = [
            "username",
            "password",
            "password_confirm",
            "email",
            "first_name",
            "last_name",
        ]
        extra_kwargs = {
            "email": {"required": True},
        }

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:
        if attrs["password"] != attrs["password_confirm"]:
            raise serializers.ValidationError(
                {"password_confirm": "Passwords do not match."}
            )
        attrs.pop("password_confirm")
        return attrs


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    """
    SimpleJWT serializer that:

    1. Accepts ``identifier`` (username or email) + ``password``.
    2. Resolves the user via ``UsernameOrEmailBackend``.
    3. Injects ``role`` and ``badge_level`` claims into the token.
    """

    username_field = "identifier"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields.pop(self.username_field, None)
        self.fields["identifier"] = serializers.CharField(
            help_text="Username or email.",
        )

    @classmethod
    def get_token(cls, user) -> Any:
        token = super().get_token(user)
        token["role"] = user.role
        token["badge_level"] = user.badge_level
        return token

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:
        user = authenticate(
            request=self.context.get("request"),
            identifier=attrs.get("identifier"),
            password=attrs.get("password"),
        )

        if user is None:
            raise serializers.ValidationError(
                {"detail": "Invalid credentials."},
                code="authentication",
            )

        if not user.is_active:
            raise serializers.ValidationError(
                {"detail": "User account is disabled."},
                code="authentication",
            )

        refresh = self.get_token(user)
        data = {
            "access": str(refresh.access_token),
            "refresh": str(refresh),
        }
        self.user = user
        return data


# ═══════════════════════════════════════════════════════════════════
#  User Serializers
# ═══════════════════════════════════════════════════════════════════


class UserDetailSerializer(serializers.ModelSerializer):
    """
    Full read-only profile: identity, role, gamification state and
    department affiliation.
    """

    department_name = serializers.CharField(
        source="department.name",
        read_only=True,
        default=None,
    )

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "email",
            "first_name",
            "last_name",
            "role",
            "points",
            "badge_level",
            "department",
            "department_name",
            "date_joined",
        ]
        read_only_fields = fields


class MeUpdateSerializer(serializers.ModelSerializer):
    """Fields a user may change on their own profile."""

    class Meta:
        model = User
        fields = ["first_name", "last_name", "email"]
        extra_kwargs = {"email": {"validators": []}}


class StaffCreateSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=8)
    first_name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    last_name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    department_id = serializers.IntegerField()
    role = serializers.ChoiceField(
        choices=[UserRole.TECHNICIAN, UserRole.DEPARTMENT_MANAGER],
        default=UserRole.TECHNICIAN,
    )


class TechnicianSerializer(serializers.ModelSerializer):
    department_name = serializers.CharField(source="department.name", read_only=True, default=None)

    class Meta:
        model = User
        fields = ["id", "username", "first_name", "last_name", "email", "department", "department_name"]
        read_only_fields = fields


# ═══════════════════════════════════════════════════════════════════
#  User Administration Serializers
# ═══════════════════════════════════════════════════════════════════

_MANAGEABLE_ROLE_CHOICES = [
    UserRole.CITIZEN,
    UserRole.TECHNICIAN,
    UserRole.DEPARTMENT_MANAGER,
]


class UserAdminFilterSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=UserRole.choices, required=False)
    department = serializers.IntegerField(required=False, min_value=1)
    q = serializers.CharField(required=False, allow_blank=True, max_length=100)
    ordering = serializers.ChoiceField(
        choices=[
            prefix + field
            for field in ("username", "email", "role", "points", "department")
            for prefix in ("", "-")
        ],
        required=False,
    )


class RoleUpdateSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=_MANAGEABLE_ROLE_CHOICES)
    department_id = serializers.IntegerField(required=False, allow_null=True, default=None)


class BulkRoleUpdateSerializer(RoleUpdateSerializer):
    user_ids = serializers.ListField(
        child=serializers.IntegerField(min_value=1),
        min_length=1,
    )


class DepartmentHeadcountSerializer(serializers.Serializer):
    department = serializers.CharField()
    count = serializers.IntegerField()


class RoleStatisticsSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    citizens = serializers.IntegerField()
    technicians = serializers.IntegerField()
    department_managers = serializers.IntegerField()
    admins = serializers.IntegerField()
    by_department = DepartmentHeadcountSerializer(many=True)


# ═══════════════════════════════════════════════════════════════════
#  Gamification Serializers
# ═══════════════════════════════════════════════════════════════════


class BadgeTierSerializer(serializers.Serializer):
    name = serializers.CharField()
    threshold = serializers.IntegerField()


class CitizenScoreSerializer(serializers.ModelSerializer):
    display_name = serializers.CharField(read_only=True)

    class Meta:
        model = User
        fields = ["id", "username", "display_name", "points", "badge_level"]
        read_only_fields = fields


class TechnicianScoreSerializer(serializers.ModelSerializer):
    """Row of the technician scoreboard."""

    display_name = serializers.CharField(read_only=True)
    department_name = serializers.SerializerMethodField()
    completed_count = serializers.IntegerField(read_only=True)
    open_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "display_name",
            "department_name",
            "completed_count",
            "open_count",
        ]
        read_only_fields = fields

    def get_department_name(self, obj) -> str:
        return obj.department.name if obj.department_id else "Unassigned"
