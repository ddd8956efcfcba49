"""
Core app serializers.

**Response-only** serializers for the system constants endpoint.  They
work with the plain dict produced by ``SystemConstantsService`` and
never touch models directly.
"""

from __future__ import annotations

from rest_framework import serializers


class ChoiceItemSerializer(serializers.Serializer):
    """
    A single key-label pair representing one choice/enum option.

    Example::

        {"value": "in_progress", "label": "In Progress"}
    """

    value = serializers.CharField(
        help_text="Machine-readable value to send in API requests.",
    )
    label = serializers.CharField(
        help_text="Human-readable display label for the UI.",
    )


class BadgeTierSerializer(serializers.Serializer):
    name = serializers.CharField(help_text="Badge label.")
    threshold = serializers.IntegerField(help_text="Points needed to reach the tier.")


class SystemConstantsSerializer(serializers.Serializer):
    """
    Top-level response serializer for ``GET /api/core/constants/``.

    Response shape::

        {
            "complaint_statuses": [{"value": "pending", "label": "Pending"}, ...],
            "photo_types": [...],
            "roles": [...],
            "badge_tiers": [{"name": "Bronze", "threshold": 10}, ...],
            "points_per_complaint": 5,
            "rating_min": 1,
            "rating_max": 5,
            "rating_edit_window_hours": 24,
            "required_technician_photos": 2,
            "max_comment_length": 1000,
            "max_comment_attachments": 3
        }
    """

    complaint_statuses = ChoiceItemSerializer(many=True)
    photo_types = ChoiceItemSerializer(many=True)
    roles = ChoiceItemSerializer(many=True)
    badge_tiers = BadgeTierSerializer(many=True)
    points_per_complaint = serializers.IntegerField()
    rating_min = serializers.IntegerField()
    rating_max = serializers.IntegerField()
    rating_edit_window_hours = serializers.IntegerField()
    required_technician_photos = serializers.IntegerField()
    max_comment_length = serializers.IntegerField()
    max_comment_attachments = serializers.IntegerField()
