"""
Integration tests — the full complaint journey over HTTP, authenticated
with real JWT access tokens:

    citizen submits → auto-routed → manager assigns a technician →
    technician uploads work photos and fixes → citizen rates →
    scoreboards reflect the outcome.
"""

from __future__ import annotations

import io
import tempfile

from django.contrib.auth import get_user_model
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase, override_settings
from django.urls import reverse
from PIL import Image
from rest_framework import status
from rest_framework.test import APIClient

from accounts.models import UserRole
from complaints.models import AssignmentRecord, ComplaintStatus, PhotoType
from departments.models import Department

User = get_user_model()

_PASSWORD = "Fl0w!Pass-2024"


def _png() -> SimpleUploadedFile:
    buffer = io.BytesIO()
    Image.new("RGB", (4, 4), color=(10, 120, 10)).save(buffer, format="PNG")
    return SimpleUploadedFile("evidence.png", buffer.getvalue(), content_type="image/png")


@override_settings(MEDIA_ROOT=tempfile.mkdtemp(prefix="civicfix-media-"))
class TestComplaintFlow(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.public_works = Department.objects.get(name="Public Works")
        cls.manager = User.objects.create_user(
            username="pw_manager", email="pw_manager@city.gov", password=_PASSWORD,
            role=UserRole.DEPARTMENT_MANAGER, department=cls.public_works,
        )
        cls.technician = User.objects.create_user(
            username="pw_tech", email="pw_tech@city.gov", password=_PASSWORD,
            role=UserRole.TECHNICIAN, department=cls.public_works,
        )

    def _client_for(self, identifier: str) -> APIClient:
        client = APIClient()
        response = client.post(
            reverse("accounts:login"),
            {"identifier": identifier, "password": _PASSWORD},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, msg=response.data)
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.data['access']}")
        return client

    def test_full_journey(self):
        # ── Citizen registers and submits ───────────────────────────
        registration = APIClient().post(
            reverse("accounts:register"),
            {
                "username": "resident",
                "email": "resident@example.com",
                "password": _PASSWORD,
                "password_confirm": _PASSWORD,
            },
            format="json",
        )
        self.assertEqual(registration.status_code, status.HTTP_201_CREATED, msg=registration.data)

        citizen = self._client_for("resident@example.com")
        submitted = citizen.post(
            reverse("complaints:complaint-list"),
            {"problem_type": "Pothole", "latitude": 51.5, "longitude": -0.12, "address": "Baker St"},
            format="json",
        )
        self.assertEqual(submitted.status_code, status.HTTP_201_CREATED, msg=submitted.data)
        complaint_id = submitted.data["id"]
        self.assertEqual(submitted.data["department_name"], "Public Works")

        me = citizen.get(reverse("accounts:me"))
        self.assertEqual(me.data["points"], 5)

        # ── Manager assigns the technician ──────────────────────────
        manager = self._client_for("pw_manager")
        assigned = manager.post(
            reverse("complaints:complaint-assign", kwargs={"pk": complaint_id}),
            {"technician_id": self.technician.pk, "note": "Please check today"},
            format="json",
        )
        self.assertEqual(assigned.status_code, status.HTTP_201_CREATED, msg=assigned.data)
        self.assertEqual(assigned.data["department_name"], "Public Works")
        self.assertEqual(
            AssignmentRecord.objects.filter(complaint_id=complaint_id, is_active=True).count(), 1,
        )

        history = manager.get(reverse("complaints:complaint-assignments", kwargs={"pk": complaint_id}))
        self.assertEqual(len(history.data), 2)
        self.assertEqual(history.data[0]["technician"], self.technician.pk)

        # ── Rating before the fix is refused ────────────────────────
        rating_url = reverse("complaints:complaint-rating", kwargs={"pk": complaint_id})
        premature = citizen.post(rating_url, {"score": 5}, format="json")
        self.assertEqual(premature.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(premature.data["code"], "not_resolved_yet")

        # ── Technician works the complaint ──────────────────────────
        technician = self._client_for("pw_tech")
        photos_url = reverse("complaints:complaint-photo-list", kwargs={"complaint_pk": complaint_id})
        for photo_type in (PhotoType.WORK_IN_PROGRESS, PhotoType.FIXED):
            uploaded = technician.post(
                photos_url, {"photo_type": photo_type, "image": _png()}, format="multipart",
            )
            self.assertEqual(uploaded.status_code, status.HTTP_201_CREATED, msg=uploaded.data)

        fixed = technician.post(
            reverse("complaints:complaint-change-status", kwargs={"pk": complaint_id}),
            {"new_status": ComplaintStatus.FIXED},
            format="json",
        )
        self.assertEqual(fixed.status_code, status.HTTP_200_OK, msg=fixed.data)

        reopened = manager.post(
            reverse("complaints:complaint-change-status", kwargs={"pk": complaint_id}),
            {"new_status": ComplaintStatus.PENDING},
            format="json",
        )
        self.assertEqual(reopened.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(reopened.data["code"], "invalid_transition")

        # ── Citizen rates and reads the thread ──────────────────────
        rated = citizen.post(rating_url, {"score": 4, "comment": "Thanks"}, format="json")
        self.assertEqual(rated.status_code, status.HTTP_201_CREATED, msg=rated.data)

        comments_url = reverse("complaints:complaint-comment-list", kwargs={"complaint_pk": complaint_id})
        manager.post(comments_url, {"content": "Crew note", "visible_to_reporter": False}, format="json")
        thread = citizen.get(comments_url)
        contents = [row["content"] for row in thread.data]
        self.assertEqual(
            contents,
            [
                "Complaint automatically assigned to Public Works department",
                "Complaint assigned to Public Works department and technician pw_tech",
                "Status changed from Pending to In Progress",
                "Status changed from In Progress to Fixed",
            ],
        )

        # ── Scoreboard ──────────────────────────────────────────────
        board = APIClient().get(reverse("accounts:scoreboard-technicians"))
        row = next(r for r in board.data if r["username"] == "pw_tech")
        self.assertEqual(row["completed_count"], 1)
        self.assertEqual(row["open_count"], 0)

    def test_technician_with_open_work_cannot_take_more(self):
        citizen_user = User.objects.create_user(
            username="busy_street", email="busy_street@example.com", password=_PASSWORD,
        )
        citizen = self._client_for("busy_street")
        ids = [
            citizen.post(
                reverse("complaints:complaint-list"),
                {"problem_type": "Streetlight", "latitude": 1.0, "longitude": 1.0},
                format="json",
            ).data["id"]
            for _ in range(2)
        ]
        manager = self._client_for("pw_manager")
        first = manager.post(
            reverse("complaints:complaint-assign", kwargs={"pk": ids[0]}),
            {"technician_id": self.technician.pk},
            format="json",
        )
        second = manager.post(
            reverse("complaints:complaint-assign", kwargs={"pk": ids[1]}),
            {"technician_id": self.technician.pk},
            format="json",
        )

        self.assertEqual(first.status_code, status.HTTP_201_CREATED)
        self.assertEqual(second.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(second.data["code"], "technician_overloaded")
        citizen_user.refresh_from_db()
        self.assertEqual(citizen_user.points, 10)
