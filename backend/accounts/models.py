"""
Accounts app models.

A custom ``User`` extending Django's ``AbstractUser`` with the civic
roles, the gamification state (points and badge) and an optional
department affiliation for technicians and department managers.
"""

from django.contrib.auth.models import AbstractUser
from django.db import models

from core.constants import BADGE_TIERS
from core.permissions_constants import Roles


class UserRole(models.TextChoices):
    CITIZEN = Roles.CITIZEN, "Citizen"
    TECHNICIAN = Roles.TECHNICIAN, "Technician"
    DEPARTMENT_MANAGER = Roles.DEPARTMENT_MANAGER, "Department Manager"
    ADMIN = Roles.ADMIN, "Admin"


class User(AbstractUser):
    """
    Custom user model for the CivicFix complaint system.

    Login is supported via ``username`` or ``email`` together with the
    password (see ``accounts.backends.UsernameOrEmailBackend``).

    Citizens accumulate ``points`` for every submitted complaint;
    ``badge_level`` always holds the highest badge tier whose threshold
    is at or below ``points`` and is only ever written by
    ``GamificationService.award``.
    """

    email = models.EmailField(
        unique=True,
        verbose_name="Email Address",
    )
    role = models.CharField(
        max_length=32,
        choices=UserRole.choices,
        default=UserRole.CITIZEN,
        db_index=True,
        verbose_name="Role",
    )
    points = models.PositiveIntegerField(
        default=0,
        verbose_name="Points",
    )
    badge_level = models.CharField(
        max_length=50,
        default=BADGE_TIERS[0][0],
        verbose_name="Badge Level",
    )
    department = models.ForeignKey(
        "departments.Department",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="staff",
        verbose_name="Department",
        help_text="Set for technicians and department managers.",
    )

    REQUIRED_FIELDS = ["email"]

    class Meta:
        verbose_name = "User"
        verbose_name_plural = "Users"

    def __str__(self):
        return f"{self.username} ({self.get_role_display()})"

    @property
    def display_name(self) -> str:
        return self.get_full_name() or self.username
