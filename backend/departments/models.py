"""
Departments app models.

A ``Department`` is the organisational unit responsible for fixing a
class of problems.  ``ProblemTypeRoute`` is the routing table that maps
a complaint's problem-type label to its responsible department.
"""

from django.db import models


class Department(models.Model):
    name = models.CharField(
        max_length=100,
        unique=True,
        verbose_name="Name",
    )
    description = models.CharField(
        max_length=500,
        blank=True,
        default="",
        verbose_name="Description",
    )
    email = models.EmailField(
        max_length=50,
        verbose_name="Contact Email",
    )
    is_active = models.BooleanField(
        default=True,
        verbose_name="Active",
    )

    class Meta:
        verbose_name = "Department"
        verbose_name_plural = "Departments"
        ordering = ["name"]

    def __str__(self):
        return self.name


class ProblemTypeRoute(models.Model):
    """
    Routing-table entry: problem-type label → department.

    Labels are matched exactly.  An inactive route is treated exactly
    like a missing one, so routes are toggled rather than deleted.
    """

    problem_type = models.CharField(
        max_length=50,
        unique=True,
        verbose_name="Problem Type",
    )
    department = models.ForeignKey(
        Department,
        on_delete=models.PROTECT,
        related_name="routes",
        verbose_name="Department",
    )
    is_active = models.BooleanField(
        default=True,
        verbose_name="Active",
    )

    class Meta:
        verbose_name = "Problem Type Route"
        verbose_name_plural = "Problem Type Routes"
        ordering = ["problem_type"]

    def __str__(self):
        state = "" if self.is_active else " (inactive)"
        return f"{self.problem_type} → {self.department}{state}"
