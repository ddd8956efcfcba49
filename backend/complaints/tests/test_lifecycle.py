"""
Tests for ``ComplaintLifecycleService.transition``: the state table,
who may move which complaint, the technician photo precondition, and
the audit trail.
"""

from __future__ import annotations

import tempfile

from django.contrib.auth import get_user_model
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase, override_settings

from accounts.models import UserRole
from complaints.models import Comment, Complaint, ComplaintStatus, PhotoType, TechnicianPhoto
from complaints.services import ComplaintLifecycleService
from core.domain.exceptions import (
    InvalidTransition,
    NotFound,
    PermissionDenied,
    PreconditionNotMet,
)
from departments.models import Department

User = get_user_model()


def _photo(complaint, technician, photo_type=PhotoType.WORK_IN_PROGRESS):
    return TechnicianPhoto.objects.create(
        complaint=complaint,
        technician=technician,
        photo_type=photo_type,
        image=SimpleUploadedFile("work.png", b"not-really-a-png", content_type="image/png"),
    )


@override_settings(MEDIA_ROOT=tempfile.mkdtemp(prefix="civicfix-media-"))
class TestComplaintLifecycle(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.public_works = Department.objects.get(name="Public Works")
        cls.utilities = Department.objects.get(name="Utilities")
        cls.citizen = User.objects.create_user(
            username="lc_citizen", email="lc_citizen@example.com", password="x-Pass-123",
        )
        cls.technician = User.objects.create_user(
            username="lc_tech", email="lc_tech@example.com", password="x-Pass-123",
            role=UserRole.TECHNICIAN, department=cls.public_works,
        )
        cls.other_technician = User.objects.create_user(
            username="lc_tech2", email="lc_tech2@example.com", password="x-Pass-123",
            role=UserRole.TECHNICIAN, department=cls.public_works,
        )
        cls.manager = User.objects.create_user(
            username="lc_manager", email="lc_manager@example.com", password="x-Pass-123",
            role=UserRole.DEPARTMENT_MANAGER, department=cls.public_works,
        )
        cls.admin = User.objects.create_user(
            username="lc_admin", email="lc_admin@example.com", password="x-Pass-123",
            role=UserRole.ADMIN,
        )

    def setUp(self):
        self.complaint = Complaint.objects.create(
            reporter=self.citizen,
            problem_type="Pothole",
            latitude=1.0,
            longitude=1.0,
            department=self.public_works,
            assigned_technician=self.technician,
        )

    # ── State table ─────────────────────────────────────────────────

    def test_pending_to_in_progress_records_audit_comment(self):
        result = ComplaintLifecycleService.transition(
            self.complaint.pk, ComplaintStatus.IN_PROGRESS, self.manager,
        )

        self.assertEqual(result.status, ComplaintStatus.IN_PROGRESS)
        self.assertIsNotNone(result.updated_at)
        comment = Comment.objects.get(complaint=self.complaint)
        self.assertEqual(comment.content, "Status changed from Pending to In Progress")
        self.assertEqual(comment.author, self.manager)
        self.assertEqual(comment.author_role, UserRole.DEPARTMENT_MANAGER)

    def test_pending_to_fixed_directly(self):
        ComplaintLifecycleService.transition(self.complaint.pk, ComplaintStatus.FIXED, self.admin)
        self.complaint.refresh_from_db()
        self.assertEqual(self.complaint.status, ComplaintStatus.FIXED)

    def test_in_progress_to_pending_is_invalid(self):
        Complaint.objects.filter(pk=self.complaint.pk).update(status=ComplaintStatus.IN_PROGRESS)

        with self.assertRaises(InvalidTransition) as ctx:
            ComplaintLifecycleService.transition(self.complaint.pk, ComplaintStatus.PENDING, self.admin)

        self.assertEqual(ctx.exception.current, ComplaintStatus.IN_PROGRESS)
        self.assertEqual(ctx.exception.target, ComplaintStatus.PENDING)
        self.complaint.refresh_from_db()
        self.assertEqual(self.complaint.status, ComplaintStatus.IN_PROGRESS)
        self.assertFalse(Comment.objects.filter(complaint=self.complaint).exists())

    def test_fixed_is_terminal(self):
        Complaint.objects.filter(pk=self.complaint.pk).update(status=ComplaintStatus.FIXED)

        for target in ComplaintStatus.values:
            with self.subTest(target=target):
                with self.assertRaises(InvalidTransition):
                    ComplaintLifecycleService.transition(self.complaint.pk, target, self.admin)

        self.complaint.refresh_from_db()
        self.assertEqual(self.complaint.status, ComplaintStatus.FIXED)
        self.assertIsNone(self.complaint.updated_at)

    def test_same_state_request_is_invalid(self):
        with self.assertRaises(InvalidTransition):
            ComplaintLifecycleService.transition(self.complaint.pk, ComplaintStatus.PENDING, self.admin)

    def test_unknown_complaint_is_not_found(self):
        with self.assertRaises(NotFound):
            ComplaintLifecycleService.transition(999_999, ComplaintStatus.FIXED, self.admin)

    # ── Authority ───────────────────────────────────────────────────

    def test_citizen_cannot_change_status(self):
        with self.assertRaises(PermissionDenied):
            ComplaintLifecycleService.transition(
                self.complaint.pk, ComplaintStatus.IN_PROGRESS, self.citizen,
            )

    def test_unassigned_technician_cannot_change_status(self):
        with self.assertRaises(PermissionDenied):
            ComplaintLifecycleService.transition(
                self.complaint.pk, ComplaintStatus.IN_PROGRESS, self.other_technician,
            )

    def test_manager_outside_department_cannot_change_status(self):
        outsider = User.objects.create_user(
            username="lc_outsider", email="lc_outsider@example.com", password="x-Pass-123",
            role=UserRole.DEPARTMENT_MANAGER, department=self.utilities,
        )
        with self.assertRaises(PermissionDenied):
            ComplaintLifecycleService.transition(
                self.complaint.pk, ComplaintStatus.IN_PROGRESS, outsider,
            )

    def test_permission_checked_before_transition_validity(self):
        Complaint.objects.filter(pk=self.complaint.pk).update(status=ComplaintStatus.FIXED)
        with self.assertRaises(PermissionDenied):
            ComplaintLifecycleService.transition(
                self.complaint.pk, ComplaintStatus.PENDING, self.citizen,
            )

    # ── Technician photo precondition ───────────────────────────────

    def test_technician_fixed_with_one_photo_fails(self):
        _photo(self.complaint, self.technician)

        with self.assertRaises(PreconditionNotMet):
            ComplaintLifecycleService.transition(
                self.complaint.pk, ComplaintStatus.FIXED, self.technician,
            )
        self.complaint.refresh_from_db()
        self.assertEqual(self.complaint.status, ComplaintStatus.PENDING)

    def test_technician_fixed_with_two_photos_succeeds(self):
        _photo(self.complaint, self.technician)
        _photo(self.complaint, self.technician, PhotoType.FIXED)

        result = ComplaintLifecycleService.transition(
            self.complaint.pk, ComplaintStatus.FIXED, self.technician,
        )

        self.assertEqual(result.status, ComplaintStatus.FIXED)

    def test_technician_may_start_work_without_photos(self):
        result = ComplaintLifecycleService.transition(
            self.complaint.pk, ComplaintStatus.IN_PROGRESS, self.technician,
        )
        self.assertEqual(result.status, ComplaintStatus.IN_PROGRESS)

    def test_photo_precondition_only_applies_to_technicians(self):
        result = ComplaintLifecycleService.transition(
            self.complaint.pk, ComplaintStatus.FIXED, self.manager,
        )
        self.assertEqual(result.status, ComplaintStatus.FIXED)
