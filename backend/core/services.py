"""
Core app services — **Service Layer**.

Cross-app read-only helpers.  Models from other apps are resolved
lazily inside methods (``apps.get_model`` or a local import) so the
core app never creates import cycles at load time.
"""

from __future__ import annotations

from typing import Any

from core.constants import (
    BADGE_TIERS,
    MAX_COMMENT_ATTACHMENTS,
    MAX_COMMENT_LENGTH,
    POINTS_PER_COMPLAINT,
    RATING_EDIT_WINDOW,
    RATING_MAX,
    RATING_MIN,
    REQUIRED_TECHNICIAN_PHOTOS,
)


# ════════════════════════════════════════════════════════════════════
#  System Constants Service
# ════════════════════════════════════════════════════════════════════

class SystemConstantsService:
    """
    Gathers the complaint enumerations, roles and gamification rules
    into a single dict for the frontend.

    This service is **stateless**: it does not depend on the requesting
    user.
    """

    @staticmethod
    def get_constants() -> dict[str, Any]:
        """Return all system constants as a dict."""
        from accounts.models import UserRole
        from complaints.models import ComplaintStatus, PhotoType

        to_list = SystemConstantsService._choices_to_list

        return {
            "complaint_statuses": to_list(ComplaintStatus),
            "photo_types": to_list(PhotoType),
            "roles": to_list(UserRole),
            "badge_tiers": [
                {"name": name, "threshold": threshold}
                for name, threshold in BADGE_TIERS
            ],
            "points_per_complaint": POINTS_PER_COMPLAINT,
            "rating_min": RATING_MIN,
            "rating_max": RATING_MAX,
            "rating_edit_window_hours": int(RATING_EDIT_WINDOW.total_seconds() // 3600),
            "required_technician_photos": REQUIRED_TECHNICIAN_PHOTOS,
            "max_comment_length": MAX_COMMENT_LENGTH,
            "max_comment_attachments": MAX_COMMENT_ATTACHMENTS,
        }

    @staticmethod
    def _choices_to_list(
        choices_class: type,
    ) -> list[dict[str, str]]:
        """
        Convert a Django ``TextChoices`` class to a list of
        ``{"value": ..., "label": ...}`` dicts.
        """
        return [
            {"value": str(value), "label": str(label)}
            for value, label in choices_class.choices
        ]
