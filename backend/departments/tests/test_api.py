"""
Integration tests — department directory and route administration.

Endpoints under test:
    GET    /api/departments/
    GET    /api/departments/{id}/technicians/
    GET    /api/routes/
    POST   /api/routes/
    PATCH  /api/routes/{id}/
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from accounts.models import UserRole
from departments.models import Department, ProblemTypeRoute

User = get_user_model()


class TestDepartmentDirectory(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.public_works = Department.objects.get(name="Public Works")
        cls.citizen = User.objects.create_user(
            username="dir_citizen", email="dir_citizen@example.com", password="x-Pass-123",
        )
        User.objects.create_user(
            username="pw_tech", email="pw_tech@example.com", password="x-Pass-123",
            role=UserRole.TECHNICIAN, department=cls.public_works,
        )
        Department.objects.create(name="Archived", email="archived@city.gov", is_active=False)

    def setUp(self):
        self.client = APIClient()
        self.client.force_authenticate(user=self.citizen)

    def test_list_shows_only_active_departments(self):
        response = self.client.get(reverse("departments:department-list"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        names = [row["name"] for row in response.data]
        self.assertIn("Public Works", names)
        self.assertNotIn("Archived", names)

    def test_department_technicians(self):
        url = reverse("departments:department-technicians", kwargs={"pk": self.public_works.pk})
        response = self.client.get(url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row["username"] for row in response.data], ["pw_tech"])

    def test_unknown_department_is_404(self):
        url = reverse("departments:department-detail", kwargs={"pk": 9999})
        self.assertEqual(self.client.get(url).status_code, status.HTTP_404_NOT_FOUND)


class TestRouteAdministration(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.utilities = Department.objects.get(name="Utilities")
        cls.admin = User.objects.create_user(
            username="route_admin", email="route_admin@city.gov", password="x-Pass-123",
            role=UserRole.ADMIN,
        )
        cls.manager = User.objects.create_user(
            username="route_manager", email="route_manager@city.gov", password="x-Pass-123",
            role=UserRole.DEPARTMENT_MANAGER, department=cls.utilities,
        )

    def setUp(self):
        self.client = APIClient()
        self.list_url = reverse("departments:route-list")

    def test_routing_table_is_readable_by_staff(self):
        self.client.force_authenticate(user=self.manager)
        response = self.client.get(self.list_url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), ProblemTypeRoute.objects.count())

    def test_admin_creates_route(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(
            self.list_url,
            {"problem_type": "Fire Hydrant", "department": self.utilities.pk},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, msg=response.data)
        self.assertTrue(
            ProblemTypeRoute.objects.filter(problem_type="Fire Hydrant", department=self.utilities).exists()
        )

    def test_duplicate_route_conflicts(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(
            self.list_url,
            {"problem_type": "Pothole", "department": self.utilities.pk},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_manager_cannot_create_route(self):
        self.client.force_authenticate(user=self.manager)
        response = self.client.post(
            self.list_url,
            {"problem_type": "Fire Hydrant", "department": self.utilities.pk},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_deactivates_route(self):
        route = ProblemTypeRoute.objects.get(problem_type="Sewer Lids")
        self.client.force_authenticate(user=self.admin)

        response = self.client.patch(
            reverse("departments:route-detail", kwargs={"pk": route.pk}),
            {"is_active": False},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        route.refresh_from_db()
        self.assertFalse(route.is_active)
