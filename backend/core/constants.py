"""
Core constants — **Single Source of Truth** for project-wide magic numbers.

Any business rule that references a numeric constant or a static
reference table should import it from here instead of hardcoding.  This
avoids drift between apps that use the same value.
"""

from datetime import timedelta

# ── Gamification ────────────────────────────────────────────────────
# Points credited to the reporter for every submitted complaint,
# regardless of whether the complaint could be routed.
POINTS_PER_COMPLAINT: int = 5

# Ordered (label, points_required) badge table.  Thresholds are strictly
# increasing; the first entry is also the floor tier for accounts whose
# points are still below it.
BADGE_TIERS: tuple[tuple[str, int], ...] = (
    ("Bronze", 10),
    ("Silver", 30),
    ("Gold", 60),
    ("Platinum", 100),
    ("Diamond", 150),
)

# ── Ratings ─────────────────────────────────────────────────────────
RATING_MIN: int = 1
RATING_MAX: int = 5
RATING_COMMENT_MAX_LENGTH: int = 1000

# Edits are allowed while ``now - rating.created_at < RATING_EDIT_WINDOW``.
# The anchor is the original creation time, never the last edit.
RATING_EDIT_WINDOW: timedelta = timedelta(hours=24)

# ── Technician work evidence ────────────────────────────────────────
# A technician may only mark a complaint Fixed once this many photos
# (work-in-progress + completion) have been uploaded for it.
REQUIRED_TECHNICIAN_PHOTOS: int = 2

# ── Routing ─────────────────────────────────────────────────────────
AUTO_ASSIGN_NOTE: str = "Auto-assigned based on problem type"
SYSTEM_AUTHOR_NAME: str = "System"

# ── Comments ────────────────────────────────────────────────────────
MAX_COMMENT_LENGTH: int = 1000
MAX_COMMENT_ATTACHMENTS: int = 3
ALLOWED_ATTACHMENT_TYPES: frozenset[str] = frozenset({
    "image/jpeg",
    "image/png",
    "image/gif",
    "application/pdf",
})

# ── Map / proximity search ──────────────────────────────────────────
NEARBY_DEFAULT_RADIUS_M: int = 200
NEARBY_MAX_RESULTS: int = 10
# Rough conversion: one degree of latitude ≈ 111 km.
METERS_PER_DEGREE: float = 111_000.0
