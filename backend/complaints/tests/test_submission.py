"""
Tests for complaint intake: routing, auto-assignment, the system audit
comment and the points award.
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from accounts.models import UserRole
from complaints.models import AssignmentRecord, Comment, Complaint, ComplaintStatus
from complaints.services import ComplaintSubmissionService
from core.domain.exceptions import PermissionDenied

User = get_user_model()


class TestComplaintSubmission(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.citizen = User.objects.create_user(
            username="reporter", email="reporter@example.com", password="x-Pass-123",
            points=8, badge_level="Bronze",
        )

    def _submit(self, problem_type: str) -> Complaint:
        return ComplaintSubmissionService.submit(
            self.citizen,
            {
                "problem_type": problem_type,
                "description": "Deep hole on the right lane",
                "latitude": 40.7128,
                "longitude": -74.0060,
                "address": "1 Main St",
            },
        )

    def test_mapped_type_is_routed_with_one_active_record(self):
        complaint = self._submit("Pothole")

        self.assertEqual(complaint.status, ComplaintStatus.PENDING)
        self.assertEqual(complaint.department.name, "Public Works")
        self.assertIsNone(complaint.assigned_technician)
        self.assertIsNone(complaint.updated_at)

        records = AssignmentRecord.objects.filter(complaint=complaint)
        self.assertEqual(records.count(), 1)
        record = records.get()
        self.assertTrue(record.is_active)
        self.assertEqual(record.department.name, "Public Works")
        self.assertIsNone(record.technician)
        self.assertEqual(record.assigned_by, self.citizen)
        self.assertEqual(record.note, "Auto-assigned based on problem type")

    def test_mapped_type_adds_exactly_one_system_comment(self):
        complaint = self._submit("Pothole")

        comments = Comment.objects.filter(complaint=complaint)
        self.assertEqual(comments.count(), 1)
        comment = comments.get()
        self.assertTrue(comment.is_system)
        self.assertIsNone(comment.author)
        self.assertEqual(comment.author_name, "System")
        self.assertEqual(
            comment.content, "Complaint automatically assigned to Public Works department",
        )
        self.assertTrue(comment.visible_to_reporter)

    def test_unmapped_type_stays_unrouted(self):
        complaint = self._submit("Graffiti")

        self.assertIsNone(complaint.department)
        self.assertFalse(AssignmentRecord.objects.filter(complaint=complaint).exists())
        self.assertFalse(Comment.objects.filter(complaint=complaint).exists())

    def test_points_awarded_regardless_of_routing(self):
        self._submit("Graffiti")
        self.citizen.refresh_from_db()
        self.assertEqual(self.citizen.points, 13)

        self._submit("Pothole")
        self.citizen.refresh_from_db()
        self.assertEqual(self.citizen.points, 18)

    def test_badge_recomputed_after_award(self):
        User.objects.filter(pk=self.citizen.pk).update(points=27)
        self.citizen.refresh_from_db()

        self._submit("Streetlight")

        self.citizen.refresh_from_db()
        self.assertEqual(self.citizen.points, 32)
        self.assertEqual(self.citizen.badge_level, "Silver")

    def test_staff_cannot_submit(self):
        technician = User.objects.create_user(
            username="tech", email="tech@example.com", password="x-Pass-123",
            role=UserRole.TECHNICIAN,
        )
        with self.assertRaises(PermissionDenied):
            ComplaintSubmissionService.submit(
                technician, {"problem_type": "Pothole", "latitude": 1.0, "longitude": 1.0},
            )
        self.assertFalse(Complaint.objects.exists())


class TestComplaintSubmissionEndpoint(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.citizen = User.objects.create_user(
            username="api_reporter", email="api_reporter@example.com", password="x-Pass-123",
        )

    def setUp(self):
        self.client = APIClient()
        self.client.force_authenticate(user=self.citizen)
        self.url = reverse("complaints:complaint-list")

    def test_post_creates_routed_complaint(self):
        response = self.client.post(
            self.url,
            {"problem_type": "Traffic Signal", "latitude": 35.7, "longitude": 51.4},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, msg=response.data)
        self.assertEqual(response.data["status"], ComplaintStatus.PENDING)
        self.assertEqual(response.data["department_name"], "Traffic Management")
        self.assertEqual(response.data["reporter"], self.citizen.pk)

    def test_client_cannot_choose_status_or_department(self):
        response = self.client.post(
            self.url,
            {
                "problem_type": "Graffiti",
                "latitude": 35.7,
                "longitude": 51.4,
                "status": ComplaintStatus.FIXED,
                "department": 1,
            },
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, msg=response.data)
        complaint = Complaint.objects.get(pk=response.data["id"])
        self.assertEqual(complaint.status, ComplaintStatus.PENDING)
        self.assertIsNone(complaint.department)

    def test_invalid_coordinates_rejected(self):
        response = self.client.post(
            self.url,
            {"problem_type": "Pothole", "latitude": 123.0, "longitude": 51.4},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("latitude", response.data)
        self.assertFalse(Complaint.objects.exists())
