from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ("username", "email", "first_name", "last_name",
                    "role", "department", "points", "badge_level", "is_active")
    search_fields = ("username", "email", "first_name", "last_name")
    list_filter = ("is_active", "role", "department")
    readonly_fields = ("points", "badge_level")
    fieldsets = BaseUserAdmin.fieldsets + (
        ("CivicFix", {"fields": ("role", "department", "points", "badge_level")}),
    )
    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        ("CivicFix", {"fields": ("email", "first_name", "last_name", "role", "department")}),
    )
