import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("departments", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Complaint",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created At")),
                ("updated_at", models.DateTimeField(blank=True, null=True, verbose_name="Updated At")),
                ("problem_type", models.CharField(db_index=True, max_length=50, verbose_name="Problem Type")),
                ("description", models.TextField(blank=True, default="", max_length=1000, verbose_name="Description")),
                ("photo", models.ImageField(blank=True, null=True, upload_to="complaint_photos/%Y/%m/", verbose_name="Photo")),
                ("latitude", models.FloatField(verbose_name="Latitude")),
                ("longitude", models.FloatField(verbose_name="Longitude")),
                ("address", models.CharField(blank=True, default="", max_length=255, verbose_name="Address")),
                (
                    "status",
                    models.CharField(
                        choices=[("pending", "Pending"), ("in_progress", "In Progress"), ("fixed", "Fixed")],
                        db_index=True,
                        default="pending",
                        max_length=20,
                        verbose_name="Status",
                    ),
                ),
                (
                    "assigned_technician",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="assigned_complaints",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Assigned Technician",
                    ),
                ),
                (
                    "department",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="complaints",
                        to="departments.department",
                        verbose_name="Department",
                    ),
                ),
                (
                    "reporter",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="complaints",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Reporter",
                    ),
                ),
            ],
            options={
                "verbose_name": "Complaint",
                "verbose_name_plural": "Complaints",
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["assigned_technician", "status"], name="complaint_tech_status_idx"),
                    models.Index(fields=["department", "status"], name="complaint_dept_status_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="AssignmentRecord",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("note", models.CharField(blank=True, default="", max_length=500, verbose_name="Note")),
                ("assigned_at", models.DateTimeField(default=django.utils.timezone.now, verbose_name="Assigned At")),
                ("is_active", models.BooleanField(default=True, verbose_name="Active")),
                (
                    "assigned_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="assignments_made",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Assigned By",
                    ),
                ),
                (
                    "complaint",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="assignments",
                        to="complaints.complaint",
                        verbose_name="Complaint",
                    ),
                ),
                (
                    "department",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="assignment_records",
                        to="departments.department",
                        verbose_name="Department",
                    ),
                ),
                (
                    "technician",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="technician_assignments",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Technician",
                    ),
                ),
            ],
            options={
                "verbose_name": "Assignment Record",
                "verbose_name_plural": "Assignment Records",
                "ordering": ["-assigned_at", "-id"],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("is_active", True)),
                        fields=("complaint",),
                        name="unique_active_assignment_per_complaint",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Rating",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("score", models.PositiveSmallIntegerField(verbose_name="Score")),
                ("comment", models.TextField(blank=True, default="", max_length=1000, verbose_name="Comment")),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now, editable=False, verbose_name="Created At")),
                ("last_modified_at", models.DateTimeField(blank=True, null=True, verbose_name="Last Modified At")),
                (
                    "complaint",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="rating",
                        to="complaints.complaint",
                        verbose_name="Complaint",
                    ),
                ),
                (
                    "reporter",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="ratings",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Reporter",
                    ),
                ),
            ],
            options={
                "verbose_name": "Rating",
                "verbose_name_plural": "Ratings",
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("score__gte", 1), ("score__lte", 5)),
                        name="rating_score_in_range",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Comment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("author_name", models.CharField(max_length=150, verbose_name="Author Name")),
                ("author_role", models.CharField(max_length=32, verbose_name="Author Role")),
                ("content", models.TextField(max_length=1000, verbose_name="Content")),
                ("visible_to_reporter", models.BooleanField(default=True, verbose_name="Visible to Reporter")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created At")),
                (
                    "author",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="complaint_comments",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Author",
                    ),
                ),
                (
                    "complaint",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="comments",
                        to="complaints.complaint",
                        verbose_name="Complaint",
                    ),
                ),
            ],
            options={
                "verbose_name": "Comment",
                "verbose_name_plural": "Comments",
                "ordering": ["created_at", "id"],
            },
        ),
        migrations.CreateModel(
            name="CommentAttachment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("file", models.FileField(upload_to="comment_attachments/%Y/%m/", verbose_name="File")),
                ("original_name", models.CharField(max_length=255, verbose_name="Original Name")),
                ("content_type", models.CharField(max_length=100, verbose_name="Content Type")),
                ("size", models.PositiveIntegerField(default=0, verbose_name="Size (bytes)")),
                ("uploaded_at", models.DateTimeField(auto_now_add=True, verbose_name="Uploaded At")),
                (
                    "comment",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="attachments",
                        to="complaints.comment",
                        verbose_name="Comment",
                    ),
                ),
            ],
            options={
                "verbose_name": "Comment Attachment",
                "verbose_name_plural": "Comment Attachments",
                "ordering": ["id"],
            },
        ),
        migrations.CreateModel(
            name="TechnicianPhoto",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "photo_type",
                    models.CharField(
                        choices=[("work_in_progress", "Work in Progress"), ("fixed", "Fixed")],
                        max_length=20,
                        verbose_name="Photo Type",
                    ),
                ),
                ("image", models.ImageField(upload_to="technician_photos/%Y/%m/", verbose_name="Image")),
                ("uploaded_at", models.DateTimeField(auto_now_add=True, verbose_name="Uploaded At")),
                (
                    "complaint",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="technician_photos",
                        to="complaints.complaint",
                        verbose_name="Complaint",
                    ),
                ),
                (
                    "technician",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="uploaded_photos",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Technician",
                    ),
                ),
            ],
            options={
                "verbose_name": "Technician Photo",
                "verbose_name_plural": "Technician Photos",
                "ordering": ["uploaded_at", "id"],
            },
        ),
    ]
