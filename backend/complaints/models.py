"""
Complaints app models.

Defines the ``Complaint`` aggregate and everything it owns:

- ``AssignmentRecord``  — append-only assignment ledger.
- ``Rating``            — the reporter's 1–5 verdict on a fixed complaint.
- ``Comment`` / ``CommentAttachment`` — discussion thread, which also
  carries the audit trail (status changes, assignments, routing).
- ``TechnicianPhoto``   — work evidence uploaded by the assigned technician.

All owned rows reference the complaint with ``on_delete=CASCADE`` so the
admin purge removes the whole aggregate in one delete.
"""

from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone

from core.constants import (
    MAX_COMMENT_LENGTH,
    RATING_COMMENT_MAX_LENGTH,
    RATING_EDIT_WINDOW,
    RATING_MAX,
    RATING_MIN,
)
from core.models import TimeStampedModel


class ComplaintStatus(models.TextChoices):
    """
    Lifecycle of a complaint.

    ``PENDING → IN_PROGRESS → FIXED``, with ``PENDING → FIXED`` allowed as a
    shortcut.  ``FIXED`` is terminal.
    """

    PENDING = "pending", "Pending"
    IN_PROGRESS = "in_progress", "In Progress"
    FIXED = "fixed", "Fixed"

    @classmethod
    def open_values(cls) -> list[str]:
        """Statuses that count as outstanding work for a technician."""
        return [cls.PENDING, cls.IN_PROGRESS]


class PhotoType(models.TextChoices):
    WORK_IN_PROGRESS = "work_in_progress", "Work in Progress"
    FIXED = "fixed", "Fixed"


class Complaint(TimeStampedModel):
    """
    A citizen's report of an infrastructure problem at a location.

    ``updated_at`` stays empty until the first status change or
    reassignment.  ``department`` is filled by the routing table at
    submission (or by a manual assignment); ``assigned_technician`` only
    by a manual assignment.
    """

    reporter = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="complaints",
        verbose_name="Reporter",
    )
    problem_type = models.CharField(
        max_length=50,
        db_index=True,
        verbose_name="Problem Type",
    )
    description = models.TextField(
        max_length=1000,
        blank=True,
        default="",
        verbose_name="Description",
    )
    photo = models.ImageField(
        upload_to="complaint_photos/%Y/%m/",
        blank=True,
        null=True,
        verbose_name="Photo",
    )
    latitude = models.FloatField(verbose_name="Latitude")
    longitude = models.FloatField(verbose_name="Longitude")
    address = models.CharField(
        max_length=255,
        blank=True,
        default="",
        verbose_name="Address",
    )
    status = models.CharField(
        max_length=20,
        choices=ComplaintStatus.choices,
        default=ComplaintStatus.PENDING,
        db_index=True,
        verbose_name="Status",
    )
    department = models.ForeignKey(
        "departments.Department",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="complaints",
        verbose_name="Department",
    )
    assigned_technician = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="assigned_complaints",
        verbose_name="Assigned Technician",
    )

    class Meta:
        verbose_name = "Complaint"
        verbose_name_plural = "Complaints"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["assigned_technician", "status"], name="complaint_tech_status_idx"),
            models.Index(fields=["department", "status"], name="complaint_dept_status_idx"),
        ]

    def __str__(self):
        return f"#{self.pk} {self.problem_type} [{self.get_status_display()}]"

    @property
    def is_fixed(self) -> bool:
        return self.status == ComplaintStatus.FIXED


# ════════════════════════════════════════════════════════════════════
#  Assignment ledger
# ════════════════════════════════════════════════════════════════════

class AssignmentRecordQuerySet(models.QuerySet):

    def active(self):
        return self.filter(is_active=True)

    def for_complaint(self, complaint):
        return self.filter(complaint=complaint)

    def current_for(self, complaint):
        """
        The derived "current assignment" of a complaint: its single
        active ledger row, or ``None`` if it was never assigned.
        """
        return self.active().for_complaint(complaint).first()


class AssignmentRecord(models.Model):
    """
    One entry of a complaint's assignment history.

    Rows are only ever appended; the sole mutation allowed on an existing
    row is flipping ``is_active`` to ``False`` when a newer assignment
    supersedes it.  A partial unique constraint guarantees at most one
    active row per complaint.
    """

    complaint = models.ForeignKey(
        Complaint,
        on_delete=models.CASCADE,
        related_name="assignments",
        verbose_name="Complaint",
    )
    department = models.ForeignKey(
        "departments.Department",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="assignment_records",
        verbose_name="Department",
    )
    technician = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="technician_assignments",
        verbose_name="Technician",
    )
    assigned_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="assignments_made",
        verbose_name="Assigned By",
    )
    note = models.CharField(
        max_length=500,
        blank=True,
        default="",
        verbose_name="Note",
    )
    assigned_at = models.DateTimeField(
        default=timezone.now,
        verbose_name="Assigned At",
    )
    is_active = models.BooleanField(
        default=True,
        verbose_name="Active",
    )

    objects = AssignmentRecordQuerySet.as_manager()

    class Meta:
        verbose_name = "Assignment Record"
        verbose_name_plural = "Assignment Records"
        ordering = ["-assigned_at", "-id"]
        constraints = [
            models.UniqueConstraint(
                fields=["complaint"],
                condition=Q(is_active=True),
                name="unique_active_assignment_per_complaint",
            ),
        ]

    def __str__(self):
        target = self.technician or self.department or "unassigned"
        state = "active" if self.is_active else "inactive"
        return f"Complaint #{self.complaint_id} → {target} ({state})"


# ════════════════════════════════════════════════════════════════════
#  Rating
# ════════════════════════════════════════════════════════════════════

class Rating(models.Model):
    """
    The reporter's score for a fixed complaint.

    The edit window is measured from ``created_at``, which is never
    touched after insert; edits only stamp ``last_modified_at``.
    """

    complaint = models.OneToOneField(
        Complaint,
        on_delete=models.CASCADE,
        related_name="rating",
        verbose_name="Complaint",
    )
    reporter = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="ratings",
        verbose_name="Reporter",
    )
    score = models.PositiveSmallIntegerField(verbose_name="Score")
    comment = models.TextField(
        max_length=RATING_COMMENT_MAX_LENGTH,
        blank=True,
        default="",
        verbose_name="Comment",
    )
    created_at = models.DateTimeField(
        default=timezone.now,
        editable=False,
        verbose_name="Created At",
    )
    last_modified_at = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name="Last Modified At",
    )

    class Meta:
        verbose_name = "Rating"
        verbose_name_plural = "Ratings"
        constraints = [
            models.CheckConstraint(
                condition=Q(score__gte=RATING_MIN) & Q(score__lte=RATING_MAX),
                name="rating_score_in_range",
            ),
        ]

    def __str__(self):
        return f"Complaint #{self.complaint_id}: {self.score}/{RATING_MAX}"

    def is_editable(self, now=None) -> bool:
        """True while the rating is still inside its edit window."""
        now = now or timezone.now()
        return now - self.created_at < RATING_EDIT_WINDOW


# ════════════════════════════════════════════════════════════════════
#  Comments
# ════════════════════════════════════════════════════════════════════

class Comment(models.Model):
    """
    A message on a complaint's thread.

    Audit entries are comments too: routing notices are authored by
    nobody (``author=None``, ``author_role="system"``); status and
    assignment notices by the acting user.  Staff may hide a comment
    from the reporter with ``visible_to_reporter=False``.
    """

    SYSTEM_ROLE = "system"

    complaint = models.ForeignKey(
        Complaint,
        on_delete=models.CASCADE,
        related_name="comments",
        verbose_name="Complaint",
    )
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="complaint_comments",
        verbose_name="Author",
    )
    author_name = models.CharField(max_length=150, verbose_name="Author Name")
    author_role = models.CharField(max_length=32, verbose_name="Author Role")
    content = models.TextField(
        max_length=MAX_COMMENT_LENGTH,
        verbose_name="Content",
    )
    visible_to_reporter = models.BooleanField(
        default=True,
        verbose_name="Visible to Reporter",
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name="Created At",
    )

    class Meta:
        verbose_name = "Comment"
        verbose_name_plural = "Comments"
        ordering = ["created_at", "id"]

    def __str__(self):
        return f"[{self.author_name}] {self.content[:40]}"

    @property
    def is_system(self) -> bool:
        return self.author_role == self.SYSTEM_ROLE


class CommentAttachment(models.Model):
    comment = models.ForeignKey(
        Comment,
        on_delete=models.CASCADE,
        related_name="attachments",
        verbose_name="Comment",
    )
    file = models.FileField(
        upload_to="comment_attachments/%Y/%m/",
        verbose_name="File",
    )
    original_name = models.CharField(max_length=255, verbose_name="Original Name")
    content_type = models.CharField(max_length=100, verbose_name="Content Type")
    size = models.PositiveIntegerField(default=0, verbose_name="Size (bytes)")
    uploaded_at = models.DateTimeField(auto_now_add=True, verbose_name="Uploaded At")

    class Meta:
        verbose_name = "Comment Attachment"
        verbose_name_plural = "Comment Attachments"
        ordering = ["id"]

    def __str__(self):
        return self.original_name


# ════════════════════════════════════════════════════════════════════
#  Technician work photos
# ════════════════════════════════════════════════════════════════════

class TechnicianPhoto(models.Model):
    """
    Work evidence for a complaint.  A technician needs at least
    ``REQUIRED_TECHNICIAN_PHOTOS`` of these before marking it fixed.
    """

    complaint = models.ForeignKey(
        Complaint,
        on_delete=models.CASCADE,
        related_name="technician_photos",
        verbose_name="Complaint",
    )
    technician = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="uploaded_photos",
        verbose_name="Technician",
    )
    photo_type = models.CharField(
        max_length=20,
        choices=PhotoType.choices,
        verbose_name="Photo Type",
    )
    image = models.ImageField(
        upload_to="technician_photos/%Y/%m/",
        verbose_name="Image",
    )
    uploaded_at = models.DateTimeField(auto_now_add=True, verbose_name="Uploaded At")

    class Meta:
        verbose_name = "Technician Photo"
        verbose_name_plural = "Technician Photos"
        ordering = ["uploaded_at", "id"]

    def __str__(self):
        return f"Complaint #{self.complaint_id} – {self.get_photo_type_display()}"
