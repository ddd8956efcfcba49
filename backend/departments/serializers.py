"""
Departments app serializers.
"""

from __future__ import annotations

from rest_framework import serializers

from .models import Department, ProblemTypeRoute


class DepartmentSerializer(serializers.ModelSerializer):
    class Meta:
        model = Department
        fields = ["id", "name", "description", "email", "is_active"]
        read_only_fields = fields


class ProblemTypeRouteSerializer(serializers.ModelSerializer):
    """Read representation of a routing-table entry."""

    department_name = serializers.CharField(source="department.name", read_only=True)

    class Meta:
        model = ProblemTypeRoute
        fields = ["id", "problem_type", "department", "department_name", "is_active"]
        read_only_fields = fields


class ProblemTypeRouteCreateSerializer(serializers.Serializer):
    problem_type = serializers.CharField(max_length=50)
    department = serializers.PrimaryKeyRelatedField(queryset=Department.objects.all())
    is_active = serializers.BooleanField(default=True)

    def validate_problem_type(self, value: str) -> str:
        if not value.strip():
            raise serializers.ValidationError("Problem type must not be blank.")
        return value


class ProblemTypeRouteUpdateSerializer(serializers.Serializer):
    department = serializers.PrimaryKeyRelatedField(
        queryset=Department.objects.all(),
        required=False,
    )
    is_active = serializers.BooleanField(required=False)
