from django.contrib import admin

from .models import Department, ProblemTypeRoute


class ProblemTypeRouteInline(admin.TabularInline):
    model = ProblemTypeRoute
    extra = 0


@admin.register(Department)
class DepartmentAdmin(admin.ModelAdmin):
    list_display = ("name", "email", "is_active")
    list_filter = ("is_active",)
    search_fields = ("name",)
    inlines = [ProblemTypeRouteInline]


@admin.register(ProblemTypeRoute)
class ProblemTypeRouteAdmin(admin.ModelAdmin):
    list_display = ("problem_type", "department", "is_active")
    list_filter = ("is_active", "department")
    search_fields = ("problem_type",)
