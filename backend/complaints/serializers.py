"""
Complaints app serializers.

Request serializers validate shape only (types, ranges, choices).
Workflow rules such as transition validity, the workload gate and the
rating window live in ``services.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from core.constants import (
    MAX_COMMENT_LENGTH,
    NEARBY_DEFAULT_RADIUS_M,
    RATING_COMMENT_MAX_LENGTH,
    RATING_MAX,
    RATING_MIN,
)

from .models import (
    AssignmentRecord,
    Comment,
    CommentAttachment,
    Complaint,
    ComplaintStatus,
    PhotoType,
    Rating,
    TechnicianPhoto,
)


# ═══════════════════════════════════════════════════════════════════
#  Query-parameter serializers
# ═══════════════════════════════════════════════════════════════════


class ComplaintFilterSerializer(serializers.Serializer):
    """
    Validates query-parameter filters for ``GET /api/complaints/``.

    Query Parameters
    ----------------
    ``status``         : str   — one of ``ComplaintStatus`` values
    ``department``     : int   — department PK
    ``technician``     : int   — assigned technician PK
    ``created_after``  : date  — ISO 8601 date
    ``created_before`` : date  — ISO 8601 date
    ``q``              : str   — free-text search
    """

    status = serializers.ChoiceField(choices=ComplaintStatus.choices, required=False)
    department = serializers.IntegerField(required=False, min_value=1)
    technician = serializers.IntegerField(required=False, min_value=1)
    created_after = serializers.DateField(required=False)
    created_before = serializers.DateField(required=False)
    q = serializers.CharField(required=False, allow_blank=True, max_length=200)

    def validate(self, attrs):
        after, before = attrs.get("created_after"), attrs.get("created_before")
        if after and before and after > before:
            raise serializers.ValidationError(
                {"created_before": "Must not be earlier than 'created_after'."}
            )
        return attrs


class ComplaintMapFilterSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=ComplaintStatus.choices, required=False)
    date_from = serializers.DateField(required=False)
    date_to = serializers.DateField(required=False)
    department = serializers.IntegerField(required=False, min_value=1)


class NearbyQuerySerializer(serializers.Serializer):
    latitude = serializers.FloatField(min_value=-90, max_value=90)
    longitude = serializers.FloatField(min_value=-180, max_value=180)
    radius = serializers.IntegerField(
        required=False,
        min_value=1,
        max_value=5000,
        default=NEARBY_DEFAULT_RADIUS_M,
        help_text="Search radius in metres.",
    )


# ═══════════════════════════════════════════════════════════════════
#  Complaint serializers
# ═══════════════════════════════════════════════════════════════════


class ComplaintCreateSerializer(serializers.ModelSerializer):
    """
    Citizen intake form.  Status, department and technician are never
    client-supplied; the service sets them.
    """

    latitude = serializers.FloatField(min_value=-90, max_value=90)
    longitude = serializers.FloatField(min_value=-180, max_value=180)

    class Meta:
        model = Complaint
        fields = ["problem_type", "description", "photo", "latitude", "longitude", "address"]
        extra_kwargs = {
            "description": {"required": False},
            "address": {"required": False},
            "photo": {"required": False},
        }

    def validate_problem_type(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Problem type is required.")
        return value


class ComplaintListSerializer(serializers.ModelSerializer):
    status_display = serializers.CharField(source="get_status_display", read_only=True)
    reporter_name = serializers.CharField(source="reporter.display_name", read_only=True)
    department_name = serializers.CharField(source="department.name", read_only=True, default=None)
    technician_name = serializers.CharField(
        source="assigned_technician.display_name", read_only=True, default=None,
    )

    class Meta:
        model = Complaint
        fields = [
            "id",
            "problem_type",
            "status",
            "status_display",
            "address",
            "latitude",
            "longitude",
            "reporter",
            "reporter_name",
            "department",
            "department_name",
            "assigned_technician",
            "technician_name",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class RatingSerializer(serializers.ModelSerializer):
    reporter_name = serializers.CharField(source="reporter.display_name", read_only=True)
    is_editable = serializers.SerializerMethodField()

    class Meta:
        model = Rating
        fields = [
            "id",
            "complaint",
            "reporter",
            "reporter_name",
            "score",
            "comment",
            "created_at",
            "last_modified_at",
            "is_editable",
        ]
        read_only_fields = fields

    def get_is_editable(self, obj: Rating) -> bool:
        return obj.is_editable()


class ComplaintDetailSerializer(ComplaintListSerializer):
    reporter_badge = serializers.CharField(source="reporter.badge_level", read_only=True)
    technician_photo_count = serializers.SerializerMethodField()
    rating = serializers.SerializerMethodField()

    class Meta(ComplaintListSerializer.Meta):
        fields = ComplaintListSerializer.Meta.fields + [
            "description",
            "photo",
            "reporter_badge",
            "technician_photo_count",
            "rating",
        ]
        read_only_fields = fields

    def get_technician_photo_count(self, obj: Complaint) -> int:
        return obj.technician_photos.count()

    def get_rating(self, obj: Complaint) -> dict | None:
        rating = getattr(obj, "rating", None)
        return RatingSerializer(rating).data if rating is not None else None


class ComplaintStatsSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    pending = serializers.IntegerField()
    in_progress = serializers.IntegerField()
    fixed = serializers.IntegerField()
    unrouted = serializers.IntegerField()


class NearbyComplaintSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    problem_type = serializers.CharField()
    status = serializers.CharField()
    address = serializers.CharField()
    latitude = serializers.FloatField()
    longitude = serializers.FloatField()
    created_at = serializers.DateTimeField()
    reporter = serializers.CharField()
    distance_m = serializers.FloatField()


# ═══════════════════════════════════════════════════════════════════
#  Workflow payloads
# ═══════════════════════════════════════════════════════════════════


class StatusTransitionSerializer(serializers.Serializer):
    new_status = serializers.ChoiceField(choices=ComplaintStatus.choices)


class AssignmentRequestSerializer(serializers.Serializer):
    """
    Payload for ``POST /api/complaints/{id}/assign/``.

    Both keys are optional; omitting both unassigns the complaint.
    A department manager's ``department_id`` is ignored.
    """

    department_id = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    technician_id = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    note = serializers.CharField(required=False, allow_blank=True, max_length=500, default="")


class AssignmentRecordSerializer(serializers.ModelSerializer):
    department_name = serializers.CharField(source="department.name", read_only=True, default=None)
    technician_name = serializers.CharField(source="technician.display_name", read_only=True, default=None)
    assigned_by_name = serializers.CharField(source="assigned_by.display_name", read_only=True, default=None)

    class Meta:
        model = AssignmentRecord
        fields = [
            "id",
            "complaint",
            "department",
            "department_name",
            "technician",
            "technician_name",
            "assigned_by",
            "assigned_by_name",
            "note",
            "assigned_at",
            "is_active",
        ]
        read_only_fields = fields


class RatingRequestSerializer(serializers.Serializer):
    # Range is enforced by RatingService so an out-of-range score
    # surfaces as the dedicated domain error.
    score = serializers.IntegerField(help_text=f"Integer from {RATING_MIN} to {RATING_MAX}.")
    comment = serializers.CharField(
        required=False, allow_blank=True, default="", max_length=RATING_COMMENT_MAX_LENGTH,
    )


# ═══════════════════════════════════════════════════════════════════
#  Comments & photos
# ═══════════════════════════════════════════════════════════════════


class CommentAttachmentSerializer(serializers.ModelSerializer):
    class Meta:
        model = CommentAttachment
        fields = ["id", "file", "original_name", "content_type", "size", "uploaded_at"]
        read_only_fields = fields


class CommentSerializer(serializers.ModelSerializer):
    attachments = CommentAttachmentSerializer(many=True, read_only=True)
    is_system = serializers.BooleanField(read_only=True)

    class Meta:
        model = Comment
        fields = [
            "id",
            "complaint",
            "author",
            "author_name",
            "author_role",
            "content",
            "visible_to_reporter",
            "is_system",
            "created_at",
            "attachments",
        ]
        read_only_fields = fields


class CommentCreateSerializer(serializers.Serializer):
    """
    ``content`` is trimmed and length-checked by ``CommentService``;
    attachments are read from ``request.FILES`` under ``attachments``.
    """

    content = serializers.CharField(max_length=MAX_COMMENT_LENGTH * 2, trim_whitespace=False)
    visible_to_reporter = serializers.BooleanField(required=False, default=True)


class TechnicianPhotoSerializer(serializers.ModelSerializer):
    technician_name = serializers.CharField(source="technician.display_name", read_only=True, default=None)

    class Meta:
        model = TechnicianPhoto
        fields = ["id", "complaint", "technician", "technician_name", "photo_type", "image", "uploaded_at"]
        read_only_fields = fields


class TechnicianPhotoUploadSerializer(serializers.Serializer):
    photo_type = serializers.ChoiceField(choices=PhotoType.choices, default=PhotoType.WORK_IN_PROGRESS)
    image = serializers.ImageField()
