"""
Complaints app Service Layer.

This module is the **single source of truth** for all business logic
in the ``complaints`` app.  Views must remain thin: validate input via
serializers, call a service method, and return the result wrapped in
a DRF ``Response``.

Architecture
------------
- ``ComplaintQueryService``       — scoped listing, detail, counters,
                                    map feed and proximity search.
- ``ComplaintSubmissionService``  — intake: routing, auto-assignment,
                                    points award.
- ``ComplaintLifecycleService``   — the status state machine.
- ``AssignmentService``           — manual (re)assignment behind the
                                    workload gate; assignment history.
- ``RatingService``               — the reporter's rating with its
                                    24-hour edit window.
- ``TechnicianPhotoService``      — work-evidence uploads.
- ``CommentService``              — discussion thread + attachments.
- ``ComplaintPurgeService``       — admin hard delete of the aggregate.

Status State-Machine Overview
-----------------------------
::

    PENDING ──────────▶ IN_PROGRESS ──────────▶ FIXED
       │                                          ▲
       └──────────────────────────────────────────┘

``FIXED`` is terminal.  Same-state requests are rejected like any
other transition missing from ``ALLOWED_TRANSITIONS``.

Every check-and-mutate sequence runs inside ``transaction.atomic`` with
the complaint row locked, so a rejected request never leaves a partial
write behind and concurrent requests on the same complaint serialise.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Iterable

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Count, Q, QuerySet
from django.utils import timezone

from accounts.services import GamificationService
from core.constants import (
    ALLOWED_ATTACHMENT_TYPES,
    AUTO_ASSIGN_NOTE,
    MAX_COMMENT_ATTACHMENTS,
    MAX_COMMENT_LENGTH,
    METERS_PER_DEGREE,
    NEARBY_DEFAULT_RADIUS_M,
    NEARBY_MAX_RESULTS,
    POINTS_PER_COMPLAINT,
    RATING_MAX,
    RATING_MIN,
    REQUIRED_TECHNICIAN_PHOTOS,
    SYSTEM_AUTHOR_NAME,
)
from core.domain.access import (
    capability_scope,
    get_user_role_name,
    require_capability,
    require_complaint_permission,
    scope_complaints,
)
from core.domain.exceptions import (
    Conflict,
    DomainError,
    EditWindowExpired,
    InvalidScore,
    InvalidTransition,
    NotFound,
    NotResolvedYet,
    PermissionDenied,
    PreconditionNotMet,
    TechnicianOverloaded,
)
from core.domain.transactions import lock_for_update
from core.permissions_constants import ComplaintCapabilities, Roles, Scope
from departments.models import Department
from departments.services import RoutingService

from .models import (
    AssignmentRecord,
    Comment,
    CommentAttachment,
    Complaint,
    ComplaintStatus,
    Rating,
    TechnicianPhoto,
)

User = get_user_model()

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
#  Valid transition map
# ═══════════════════════════════════════════════════════════════════

#: Maps each status to the set of statuses it may move to.  Anything
#: not listed (including staying in place) is an invalid transition.
ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    ComplaintStatus.PENDING: frozenset({ComplaintStatus.IN_PROGRESS, ComplaintStatus.FIXED}),
    ComplaintStatus.IN_PROGRESS: frozenset({ComplaintStatus.FIXED}),
    ComplaintStatus.FIXED: frozenset(),
}


def _status_label(value: str) -> str:
    try:
        return ComplaintStatus(value).label
    except ValueError:
        return value


def _add_audit_comment(complaint: Complaint, actor: Any, content: str) -> Comment:
    """Append an audit entry authored by ``actor`` to the complaint thread."""
    return Comment.objects.create(
        complaint=complaint,
        author=actor,
        author_name=actor.display_name,
        author_role=get_user_role_name(actor) or "",
        content=content,
        visible_to_reporter=True,
    )


def _add_system_comment(complaint: Complaint, content: str) -> Comment:
    return Comment.objects.create(
        complaint=complaint,
        author=None,
        author_name=SYSTEM_AUTHOR_NAME,
        author_role=Comment.SYSTEM_ROLE,
        content=content,
        visible_to_reporter=True,
    )


# ═══════════════════════════════════════════════════════════════════
#  Complaint Query Service
# ═══════════════════════════════════════════════════════════════════


class ComplaintQueryService:
    """
    Read side of the complaints app.

    Every list is first narrowed with ``scope_complaints`` so a user
    only ever sees the complaints their role grants ``view`` on.
    """

    @staticmethod
    def _base_queryset() -> QuerySet[Complaint]:
        return Complaint.objects.select_related(
            "reporter", "department", "assigned_technician", "rating",
        )

    @staticmethod
    def get_filtered_queryset(
        requesting_user: Any,
        filters: dict[str, Any],
    ) -> QuerySet[Complaint]:
        """
        Build a role-scoped, filtered queryset of complaints.

        Parameters
        ----------
        requesting_user : User
            From ``request.user``.
        filters : dict
            Cleaned query-parameter dict from ``ComplaintFilterSerializer``.
            Supported keys:
            - ``status``         : str  (``ComplaintStatus`` value)
            - ``department``     : int  (department PK)
            - ``technician``     : int  (user PK)
            - ``created_after``  : date
            - ``created_before`` : date
            - ``q``              : str  (free text over problem type,
              description, address and reporter name)

        Returns
        -------
        QuerySet[Complaint]
            Newest first.
        """
        qs = scope_complaints(ComplaintQueryService._base_queryset(), requesting_user)

        if filters.get("status"):
            qs = qs.filter(status=filters["status"])
        if filters.get("department") is not None:
            qs = qs.filter(department_id=filters["department"])
        if filters.get("technician") is not None:
            qs = qs.filter(assigned_technician_id=filters["technician"])
        if filters.get("created_after"):
            qs = qs.filter(created_at__date__gte=filters["created_after"])
        if filters.get("created_before"):
            qs = qs.filter(created_at__date__lte=filters["created_before"])

        search = (filters.get("q") or "").strip()
        if search:
            qs = qs.filter(
                Q(problem_type__icontains=search)
                | Q(description__icontains=search)
                | Q(address__icontains=search)
                | Q(reporter__username__icontains=search)
                | Q(reporter__first_name__icontains=search)
                | Q(reporter__last_name__icontains=search)
            )

        return qs.order_by("-created_at", "-id")

    @staticmethod
    def get_complaint_detail(requesting_user: Any, complaint_id: int) -> Complaint:
        """
        Fetch one complaint the user may view.

        Raises
        ------
        NotFound
            No complaint with that PK.
        PermissionDenied
            The complaint is outside the user's view scope.
        """
        try:
            complaint = ComplaintQueryService._base_queryset().get(pk=complaint_id)
        except Complaint.DoesNotExist:
            raise NotFound(f"Complaint with id {complaint_id} not found.")
        require_complaint_permission(
            requesting_user,
            ComplaintCapabilities.VIEW,
            complaint,
            message="You do not have access to this complaint.",
        )
        return complaint

    @staticmethod
    def available_work(technician: Any) -> QuerySet[Complaint]:
        """
        Pending complaints routed to the technician's department that no
        technician holds yet, newest first.

        A technician outside any department gets an empty queue.

        Raises
        ------
        PermissionDenied
            The requester is not a technician.
        """
        if get_user_role_name(technician) != Roles.TECHNICIAN:
            raise PermissionDenied("Only technicians have an available-work queue.")
        if technician.department_id is None:
            return Complaint.objects.none()
        return (
            ComplaintQueryService._base_queryset()
            .filter(
                department_id=technician.department_id,
                assigned_technician__isnull=True,
                status=ComplaintStatus.PENDING,
            )
            .order_by("-created_at", "-id")
        )

    @staticmethod
    def get_stats(requesting_user: Any) -> dict[str, int]:
        """
        Status counters over the user's visible complaints.

        Returns ``{"total", "pending", "in_progress", "fixed", "unrouted"}``.
        """
        qs = scope_complaints(Complaint.objects.all(), requesting_user)
        counts = qs.aggregate(
            total=Count("id"),
            pending=Count("id", filter=Q(status=ComplaintStatus.PENDING)),
            in_progress=Count("id", filter=Q(status=ComplaintStatus.IN_PROGRESS)),
            fixed=Count("id", filter=Q(status=ComplaintStatus.FIXED)),
            unrouted=Count("id", filter=Q(department__isnull=True)),
        )
        return counts

    @staticmethod
    def get_map_features(
        requesting_user: Any,
        filters: dict[str, Any],
    ) -> dict[str, Any]:
        """
        GeoJSON ``FeatureCollection`` of the user's visible complaints.

        Parameters
        ----------
        filters : dict
            Optional ``status``, ``date_from``, ``date_to`` (inclusive
            dates on ``created_at``) and ``department``.

        Coordinates follow GeoJSON order: ``[longitude, latitude]``.
        """
        qs = scope_complaints(
            Complaint.objects.select_related("reporter", "department"),
            requesting_user,
        )
        if filters.get("status"):
            qs = qs.filter(status=filters["status"])
        if filters.get("date_from"):
            qs = qs.filter(created_at__date__gte=filters["date_from"])
        if filters.get("date_to"):
            qs = qs.filter(created_at__date__lte=filters["date_to"])
        if filters.get("department") is not None:
            qs = qs.filter(department_id=filters["department"])

        features = [
            {
                "type": "Feature",
                "geometry": {
                    "type": "Point",
                    "coordinates": [complaint.longitude, complaint.latitude],
                },
                "properties": {
                    "id": complaint.pk,
                    "status": complaint.status,
                    "problem_type": complaint.problem_type,
                    "department": complaint.department.name if complaint.department_id else None,
                    "reporter": complaint.reporter.display_name,
                    "badge": complaint.reporter.badge_level,
                    "created_at": complaint.created_at.isoformat(),
                    "photo_url": complaint.photo.url if complaint.photo else None,
                },
            }
            for complaint in qs.order_by("-created_at")
        ]
        return {"type": "FeatureCollection", "features": features}

    @staticmethod
    def find_nearby(
        latitude: float,
        longitude: float,
        radius_m: int = NEARBY_DEFAULT_RADIUS_M,
        limit: int = NEARBY_MAX_RESULTS,
    ) -> list[dict[str, Any]]:
        """
        Complaints within a bounding box around a point, nearest first.

        Lets a citizen spot an existing report before filing a duplicate,
        so it is not scoped to the caller's own complaints and returns
        only public summary fields.  The box is ``radius_m`` wide in each
        direction; distances use an equirectangular approximation.
        """
        lat_range = radius_m / METERS_PER_DEGREE
        cos_lat = max(math.cos(math.radians(latitude)), 1e-6)
        lng_range = radius_m / (METERS_PER_DEGREE * cos_lat)

        candidates = (
            Complaint.objects
            .select_related("reporter")
            .filter(
                latitude__gte=latitude - lat_range,
                latitude__lte=latitude + lat_range,
                longitude__gte=longitude - lng_range,
                longitude__lte=longitude + lng_range,
            )
        )

        results = []
        for complaint in candidates:
            d_lat = complaint.latitude - latitude
            d_lng = (complaint.longitude - longitude) * cos_lat
            results.append({
                "id": complaint.pk,
                "problem_type": complaint.problem_type,
                "status": complaint.status,
                "address": complaint.address,
                "latitude": complaint.latitude,
                "longitude": complaint.longitude,
                "created_at": complaint.created_at,
                "reporter": complaint.reporter.display_name,
                "distance_m": round(math.hypot(d_lat, d_lng) * METERS_PER_DEGREE, 1),
            })

        results.sort(key=lambda row: row["distance_m"])
        return results[:limit]


# ═══════════════════════════════════════════════════════════════════
#  Complaint Submission Service
# ═══════════════════════════════════════════════════════════════════


class ComplaintSubmissionService:

    @staticmethod
    @transaction.atomic
    def submit(reporter: Any, validated_data: dict[str, Any]) -> Complaint:
        """
        File a new complaint.

        Parameters
        ----------
        reporter : User
            The citizen filing the report.
        validated_data : dict
            Cleaned data from ``ComplaintCreateSerializer``:
            ``problem_type``, ``latitude``, ``longitude`` and optionally
            ``description``, ``address``, ``photo``.

        Returns
        -------
        Complaint
            The saved complaint, status ``PENDING``.

        Steps
        -----
        1. Create the complaint.
        2. Look the problem type up in the routing table.  On a hit,
           attach the department, append an active ledger row attributed
           to the reporter and a system audit comment.  A miss leaves
           the complaint unrouted.
        3. Credit ``POINTS_PER_COMPLAINT`` to the reporter, whatever the
           routing outcome.

        Raises
        ------
        PermissionDenied
            The user's role may not submit complaints.
        """
        require_capability(
            reporter,
            ComplaintCapabilities.SUBMIT,
            message="Only citizens can submit complaints.",
        )

        complaint = Complaint.objects.create(
            reporter=reporter,
            status=ComplaintStatus.PENDING,
            **validated_data,
        )

        department = RoutingService.route(complaint.problem_type)
        if department is not None:
            complaint.department = department
            complaint.save(update_fields=["department"])
            AssignmentRecord.objects.create(
                complaint=complaint,
                department=department,
                technician=None,
                assigned_by=reporter,
                note=AUTO_ASSIGN_NOTE,
                is_active=True,
            )
            _add_system_comment(
                complaint,
                f"Complaint automatically assigned to {department.name} department",
            )

        GamificationService.award(reporter.pk, POINTS_PER_COMPLAINT)

        logger.info(
            "Complaint %d (%s) submitted by %s, routed to %s",
            complaint.pk, complaint.problem_type, reporter.username,
            department.name if department else "nobody",
        )
        return complaint


# ═══════════════════════════════════════════════════════════════════
#  Complaint Lifecycle Service
# ═══════════════════════════════════════════════════════════════════


class ComplaintLifecycleService:
    """
    The validated gateway through the status state machine.

    Check order for every request: complaint exists → actor may change
    its status → transition is in ``ALLOWED_TRANSITIONS`` → (technician
    marking fixed) enough work photos exist.
    """

    @staticmethod
    @transaction.atomic
    def transition(complaint_id: int, requested_status: str, actor: Any) -> Complaint:
        """
        Move a complaint to ``requested_status``.

        Parameters
        ----------
        complaint_id : int
            PK of the complaint.
        requested_status : str
            Target ``ComplaintStatus`` value.
        actor : User
            The user requesting the change.

        Returns
        -------
        Complaint
            The updated complaint, ``updated_at`` stamped.

        Raises
        ------
        NotFound
            No complaint with that PK.
        PermissionDenied
            Citizens; technicians on complaints not assigned to them;
            department managers outside their department.
        InvalidTransition
            The move is not in the state table (e.g. leaving ``FIXED``).
        PreconditionNotMet
            A technician marks the complaint fixed with fewer than
            ``REQUIRED_TECHNICIAN_PHOTOS`` work photos on record.
        """
        complaint = lock_for_update(Complaint, complaint_id, label="Complaint")

        require_complaint_permission(
            actor,
            ComplaintCapabilities.CHANGE_STATUS,
            complaint,
            message="You are not allowed to change the status of this complaint.",
        )

        current = complaint.status
        if requested_status not in ALLOWED_TRANSITIONS.get(current, frozenset()):
            raise InvalidTransition(
                current=current,
                target=requested_status,
                reason=(
                    f"'{_status_label(current)}' cannot move to "
                    f"'{_status_label(requested_status)}'"
                ),
            )

        if (
            requested_status == ComplaintStatus.FIXED
            and get_user_role_name(actor) == Roles.TECHNICIAN
        ):
            photo_count = complaint.technician_photos.count()
            if photo_count < REQUIRED_TECHNICIAN_PHOTOS:
                raise PreconditionNotMet(
                    f"Upload at least {REQUIRED_TECHNICIAN_PHOTOS} work photos "
                    f"before marking this complaint fixed ({photo_count} on record)."
                )

        return ComplaintLifecycleService._apply(complaint, requested_status, actor)

    @staticmethod
    def _apply(complaint: Complaint, new_status: str, actor: Any) -> Complaint:
        """Write an already-validated transition and its audit comment."""
        old_status = complaint.status
        complaint.status = new_status
        complaint.updated_at = timezone.now()
        complaint.save(update_fields=["status", "updated_at"])

        _add_audit_comment(
            complaint,
            actor,
            f"Status changed from {_status_label(old_status)} to {_status_label(new_status)}",
        )

        logger.info(
            "Complaint %d transitioned %s -> %s by %s",
            complaint.pk, old_status, new_status, actor.username,
        )
        return complaint


# ═══════════════════════════════════════════════════════════════════
#  Assignment Service
# ═══════════════════════════════════════════════════════════════════


class AssignmentService:
    """
    Manual (re)assignment of complaints, guarded by the workload gate.

    The assignment ledger is append-only: a new assignment deactivates
    the previous active row and inserts a fresh one, so the full history
    stays queryable.
    """

    @staticmethod
    @transaction.atomic
    def assign(
        complaint_id: int,
        actor: Any,
        department_id: int | None = None,
        technician_id: int | None = None,
        note: str = "",
    ) -> AssignmentRecord:
        """
        Assign a complaint to a department and/or technician.

        Passing neither is an explicit unassignment and is still
        recorded in the ledger.

        Parameters
        ----------
        complaint_id : int
        actor : User
            Admin (any complaint) or department manager (own department;
            the department is always pinned to the manager's own).
        department_id : int, optional
        technician_id : int, optional
            Must reference an account with the technician role.
        note : str

        Returns
        -------
        AssignmentRecord
            The new active ledger row.

        Raises
        ------
        NotFound
            Complaint, department or technician does not exist.
        PermissionDenied
            The actor may not assign this complaint. A department manager
            naming a technician from another department is also denied.
        TechnicianOverloaded
            The technician still holds Pending or In Progress complaints.
            Raised before any ledger write.
        """
        complaint = lock_for_update(Complaint, complaint_id, label="Complaint")

        require_complaint_permission(
            actor,
            ComplaintCapabilities.ASSIGN,
            complaint,
            message="You are not allowed to assign this complaint.",
        )

        department_scoped = (
            capability_scope(actor, ComplaintCapabilities.ASSIGN) == Scope.DEPARTMENT
        )
        if department_scoped:
            department_id = actor.department_id

        department = None
        if department_id is not None:
            try:
                department = Department.objects.get(pk=department_id)
            except Department.DoesNotExist:
                raise NotFound(f"Department with id {department_id} not found.")

        technician = None
        if technician_id is not None:
            technician = (
                User.objects
                .select_for_update()
                .filter(pk=technician_id, role=Roles.TECHNICIAN)
                .first()
            )
            if technician is None:
                raise NotFound(f"Technician with id {technician_id} not found.")
            if department_scoped and technician.department_id != actor.department_id:
                raise PermissionDenied("You can only assign technicians from your own department.")

            # workload gate: counted with the technician row locked
            open_count = Complaint.objects.filter(
                assigned_technician=technician,
                status__in=ComplaintStatus.open_values(),
            ).count()
            if open_count > 0:
                raise TechnicianOverloaded(open_count=open_count)

        AssignmentRecord.objects.filter(complaint=complaint, is_active=True).update(is_active=False)
        record = AssignmentRecord.objects.create(
            complaint=complaint,
            department=department,
            technician=technician,
            assigned_by=actor,
            note=note or "",
            is_active=True,
        )

        complaint.department = department
        complaint.assigned_technician = technician
        complaint.updated_at = timezone.now()
        complaint.save(update_fields=["department", "assigned_technician", "updated_at"])

        _add_audit_comment(complaint, actor, AssignmentService._describe(department, technician))

        logger.info(
            "Complaint %d assigned to department=%s technician=%s by %s",
            complaint.pk,
            department.name if department else None,
            technician.username if technician else None,
            actor.username,
        )
        return record

    @staticmethod
    def _describe(department: Department | None, technician: Any) -> str:
        if department is None and technician is None:
            return "Complaint unassigned"
        parts = []
        if department is not None:
            parts.append(f"{department.name} department")
        if technician is not None:
            parts.append(f"technician {technician.display_name}")
        return "Complaint assigned to " + " and ".join(parts)

    @staticmethod
    def history(complaint_id: int, requesting_user: Any) -> QuerySet[AssignmentRecord]:
        """The complaint's assignment ledger, newest first."""
        complaint = ComplaintQueryService.get_complaint_detail(requesting_user, complaint_id)
        return (
            AssignmentRecord.objects
            .for_complaint(complaint)
            .select_related("department", "technician", "assigned_by")
            .order_by("-assigned_at", "-id")
        )


# ═══════════════════════════════════════════════════════════════════
#  Rating Service
# ═══════════════════════════════════════════════════════════════════


class RatingService:

    @staticmethod
    @transaction.atomic
    def rate(
        complaint_id: int,
        reporter: Any,
        score: int,
        comment: str = "",
    ) -> tuple[Rating, bool]:
        """
        Create or edit the reporter's rating of a fixed complaint.

        Checks, in order: score range → complaint exists → the caller
        reported it → it is fixed.  With no prior rating a new one is
        inserted; otherwise the existing one is edited, but only while
        ``now - created_at < RATING_EDIT_WINDOW``.

        Returns
        -------
        tuple[Rating, bool]
            The rating and ``True`` if it was just created.

        Raises
        ------
        InvalidScore
            ``score`` outside ``[RATING_MIN, RATING_MAX]``.
        NotFound
            No complaint with that PK.
        PermissionDenied
            The caller is not the complaint's reporter.
        NotResolvedYet
            The complaint is not fixed.
        EditWindowExpired
            A rating exists and is older than the edit window.
        """
        if not isinstance(score, int) or isinstance(score, bool) or not RATING_MIN <= score <= RATING_MAX:
            raise InvalidScore(f"Rating must be between {RATING_MIN} and {RATING_MAX}.")

        complaint = lock_for_update(Complaint, complaint_id, label="Complaint")

        require_complaint_permission(
            reporter,
            ComplaintCapabilities.RATE,
            complaint,
            message="You can only rate your own complaints.",
        )

        if complaint.status != ComplaintStatus.FIXED:
            raise NotResolvedYet()

        now = timezone.now()
        existing = Rating.objects.select_for_update().filter(complaint=complaint).first()
        if existing is None:
            rating = Rating.objects.create(
                complaint=complaint,
                reporter=reporter,
                score=score,
                comment=comment or "",
                created_at=now,
            )
            logger.info("Complaint %d rated %d by %s", complaint.pk, score, reporter.username)
            return rating, True

        if not existing.is_editable(now):
            raise EditWindowExpired()

        existing.score = score
        existing.comment = comment or ""
        existing.last_modified_at = now
        existing.save(update_fields=["score", "comment", "last_modified_at"])
        logger.info("Complaint %d rating changed to %d by %s", complaint.pk, score, reporter.username)
        return existing, False

    @staticmethod
    def get_rating(complaint_id: int, requesting_user: Any) -> Rating:
        complaint = ComplaintQueryService.get_complaint_detail(requesting_user, complaint_id)
        try:
            return Rating.objects.select_related("reporter").get(complaint=complaint)
        except Rating.DoesNotExist:
            raise NotFound("This complaint has not been rated yet.")


# ═══════════════════════════════════════════════════════════════════
#  Technician Photo Service
# ═══════════════════════════════════════════════════════════════════


class TechnicianPhotoService:

    @staticmethod
    @transaction.atomic
    def upload(
        complaint_id: int,
        technician: Any,
        photo_type: str,
        image: Any,
    ) -> TechnicianPhoto:
        """
        Record a work photo for a complaint assigned to ``technician``.

        The first photo on a ``PENDING`` complaint moves it to
        ``IN_PROGRESS`` (with the usual status audit comment).

        Raises
        ------
        NotFound
            No complaint with that PK.
        PermissionDenied
            The complaint is not assigned to this technician.
        Conflict
            The complaint is already fixed.
        """
        complaint = lock_for_update(Complaint, complaint_id, label="Complaint")

        require_complaint_permission(
            technician,
            ComplaintCapabilities.UPLOAD_PHOTOS,
            complaint,
            message="Complaint not found or not assigned to you.",
        )
        if complaint.is_fixed:
            raise Conflict("Photos cannot be added to a fixed complaint.")

        photo = TechnicianPhoto.objects.create(
            complaint=complaint,
            technician=technician,
            photo_type=photo_type,
            image=image,
        )
        logger.info(
            "Technician %s uploaded a %s photo for complaint %d",
            technician.username, photo_type, complaint.pk,
        )

        if complaint.status == ComplaintStatus.PENDING:
            ComplaintLifecycleService._apply(complaint, ComplaintStatus.IN_PROGRESS, technician)

        return photo

    @staticmethod
    def list_photos(complaint_id: int, requesting_user: Any) -> QuerySet[TechnicianPhoto]:
        complaint = ComplaintQueryService.get_complaint_detail(requesting_user, complaint_id)
        return complaint.technician_photos.select_related("technician")


# ═══════════════════════════════════════════════════════════════════
#  Comment Service
# ═══════════════════════════════════════════════════════════════════


class CommentService:
    """
    The complaint discussion thread.

    Citizens always post visible comments and only ever read visible
    ones; staff may post internal notes hidden from the reporter.
    """

    @staticmethod
    @transaction.atomic
    def add_comment(
        complaint_id: int,
        author: Any,
        content: str,
        visible_to_reporter: bool = True,
        attachments: Iterable[Any] = (),
    ) -> Comment:
        """
        Post a comment, with up to ``MAX_COMMENT_ATTACHMENTS`` files.

        Files beyond the limit, empty files and files whose content type
        is not in ``ALLOWED_ATTACHMENT_TYPES`` are skipped, not rejected.

        Raises
        ------
        NotFound
            No complaint with that PK.
        PermissionDenied
            The author may not comment on this complaint.
        DomainError
            Content is blank or longer than ``MAX_COMMENT_LENGTH``.
        """
        try:
            complaint = Complaint.objects.get(pk=complaint_id)
        except Complaint.DoesNotExist:
            raise NotFound(f"Complaint with id {complaint_id} not found.")

        require_complaint_permission(
            author,
            ComplaintCapabilities.COMMENT,
            complaint,
            message="You can only comment on complaints you are involved with.",
        )

        content = (content or "").strip()
        if not content or len(content) > MAX_COMMENT_LENGTH:
            raise DomainError(
                f"Content must be between 1 and {MAX_COMMENT_LENGTH} characters."
            )

        role = get_user_role_name(author) or ""
        comment = Comment.objects.create(
            complaint=complaint,
            author=author,
            author_name=author.display_name,
            author_role=role,
            content=content,
            visible_to_reporter=visible_to_reporter or role == Roles.CITIZEN,
        )

        for upload in list(attachments)[:MAX_COMMENT_ATTACHMENTS]:
            content_type = (getattr(upload, "content_type", "") or "").lower()
            size = getattr(upload, "size", 0) or 0
            if size <= 0 or content_type not in ALLOWED_ATTACHMENT_TYPES:
                logger.info(
                    "Skipped attachment %r (%s) on comment %d",
                    getattr(upload, "name", ""), content_type, comment.pk,
                )
                continue
            CommentAttachment.objects.create(
                comment=comment,
                file=upload,
                original_name=upload.name,
                content_type=content_type,
                size=size,
            )

        return comment

    @staticmethod
    def list_comments(complaint_id: int, requesting_user: Any) -> QuerySet[Comment]:
        complaint = ComplaintQueryService.get_complaint_detail(requesting_user, complaint_id)
        qs = complaint.comments.prefetch_related("attachments").order_by("created_at", "id")
        if get_user_role_name(requesting_user) == Roles.CITIZEN:
            qs = qs.filter(visible_to_reporter=True)
        return qs


# ═══════════════════════════════════════════════════════════════════
#  Purge Service
# ═══════════════════════════════════════════════════════════════════


class ComplaintPurgeService:

    @staticmethod
    @transaction.atomic
    def purge(complaint_id: int, actor: Any) -> None:
        """
        Hard-delete a complaint together with its comments, rating,
        assignment ledger and technician photos.  Admin only.
        """
        complaint = lock_for_update(Complaint, complaint_id, label="Complaint")
        require_complaint_permission(
            actor,
            ComplaintCapabilities.PURGE,
            complaint,
            message="Only administrators can delete complaints.",
        )
        pk = complaint.pk
        complaint.delete()
        logger.info("Complaint %d purged by %s", pk, actor.username)
