"""
Complaints app ViewSets.

Architecture: Views are intentionally thin.
Every view follows the strict three-step pattern:

    1. Parse / validate input via a serializer.
    2. Delegate all business logic to the appropriate service class.
    3. Serialize the result and return a DRF ``Response``.

Permission checks, status validation and the workload gate live in
``complaints.services``.

ViewSets
--------
- ``ComplaintViewSet``        — list / submit / detail / purge plus the
                                workflow actions (status, assign, rate)
                                and the read-only feeds (stats, map,
                                nearby).
- ``CommentViewSet``          — nested under complaints.
- ``TechnicianPhotoViewSet``  — nested under complaints.
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response

from .serializers import (
    AssignmentRecordSerializer,
    AssignmentRequestSerializer,
    CommentCreateSerializer,
    CommentSerializer,
    ComplaintCreateSerializer,
    ComplaintDetailSerializer,
    ComplaintFilterSerializer,
    ComplaintListSerializer,
    ComplaintMapFilterSerializer,
    ComplaintStatsSerializer,
    NearbyComplaintSerializer,
    NearbyQuerySerializer,
    RatingRequestSerializer,
    RatingSerializer,
    StatusTransitionSerializer,
    TechnicianPhotoSerializer,
    TechnicianPhotoUploadSerializer,
)
from .services import (
    AssignmentService,
    CommentService,
    ComplaintLifecycleService,
    ComplaintPurgeService,
    ComplaintQueryService,
    ComplaintSubmissionService,
    RatingService,
    TechnicianPhotoService,
)


# ═══════════════════════════════════════════════════════════════════
#  Complaint ViewSet
# ═══════════════════════════════════════════════════════════════════


class ComplaintViewSet(viewsets.ViewSet):
    """
    Central ViewSet for complaints.

    Uses ``viewsets.ViewSet`` (not ``ModelViewSet``) so every action is
    explicitly defined.

    Endpoints
    ---------
    Standard:
        GET    /api/complaints/                 → list (role-scoped)
        POST   /api/complaints/                 → submit (citizens)
        GET    /api/complaints/{id}/            → retrieve
        DELETE /api/complaints/{id}/            → purge (admin)

    Workflow Actions:
        POST   /api/complaints/{id}/status/       → status transition
        POST   /api/complaints/{id}/assign/       → (re)assign
        GET    /api/complaints/{id}/assignments/  → assignment history
        GET    /api/complaints/{id}/rating/       → read rating
        POST   /api/complaints/{id}/rating/       → create / edit rating

    Feeds:
        GET    /api/complaints/available/         → technician work queue
        GET    /api/complaints/stats/             → status counters
        GET    /api/complaints/map/               → GeoJSON feed
        GET    /api/complaints/nearby/            → proximity search
    """

    permission_classes = [IsAuthenticated]
    parser_classes = [JSONParser, MultiPartParser, FormParser]

    @extend_schema(
        summary="List complaints",
        parameters=[ComplaintFilterSerializer],
        responses={200: ComplaintListSerializer(many=True)},
        tags=["Complaints"],
    )
    def list(self, request: Request) -> Response:
        filter_serializer = ComplaintFilterSerializer(data=request.query_params)
        if not filter_serializer.is_valid():
            return Response(filter_serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        queryset = ComplaintQueryService.get_filtered_queryset(
            request.user, filter_serializer.validated_data,
        )
        return Response(ComplaintListSerializer(queryset, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Submit a complaint",
        request=ComplaintCreateSerializer,
        responses={
            201: ComplaintDetailSerializer,
            400: OpenApiResponse(description="Validation error."),
            403: OpenApiResponse(description="Only citizens can submit complaints."),
        },
        tags=["Complaints"],
    )
    def create(self, request: Request) -> Response:
        serializer = ComplaintCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        complaint = ComplaintSubmissionService.submit(request.user, serializer.validated_data)
        return Response(
            ComplaintDetailSerializer(complaint, context={"request": request}).data,
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(
        summary="Retrieve complaint",
        responses={
            200: ComplaintDetailSerializer,
            403: OpenApiResponse(description="Outside your view scope."),
            404: OpenApiResponse(description="Complaint not found."),
        },
        tags=["Complaints"],
    )
    def retrieve(self, request: Request, pk: int = None) -> Response:
        complaint = ComplaintQueryService.get_complaint_detail(request.user, pk)
        return Response(
            ComplaintDetailSerializer(complaint, context={"request": request}).data,
            status=status.HTTP_200_OK,
        )

    @extend_schema(
        summary="Delete complaint (admin)",
        responses={
            204: OpenApiResponse(description="Complaint and everything it owns deleted."),
            403: OpenApiResponse(description="Admin only."),
            404: OpenApiResponse(description="Complaint not found."),
        },
        tags=["Complaints"],
    )
    def destroy(self, request: Request, pk: int = None) -> Response:
        ComplaintPurgeService.purge(pk, request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    # ── Workflow @actions ─────────────────────────────────────────────

    @extend_schema(
        summary="Change complaint status",
        request=StatusTransitionSerializer,
        responses={
            200: ComplaintDetailSerializer,
            403: OpenApiResponse(description="Not allowed to change this complaint."),
            409: OpenApiResponse(description="Invalid transition or missing work photos."),
        },
        tags=["Complaints - Workflow"],
    )
    @action(detail=True, methods=["post"], url_path="status")
    def change_status(self, request: Request, pk: int = None) -> Response:
        serializer = StatusTransitionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        complaint = ComplaintLifecycleService.transition(
            pk, serializer.validated_data["new_status"], request.user,
        )
        return Response(
            ComplaintDetailSerializer(complaint, context={"request": request}).data,
            status=status.HTTP_200_OK,
        )

    @extend_schema(
        summary="Assign complaint",
        request=AssignmentRequestSerializer,
        responses={
            201: AssignmentRecordSerializer,
            403: OpenApiResponse(description="Not allowed to assign this complaint."),
            404: OpenApiResponse(description="Complaint, department or technician not found."),
            409: OpenApiResponse(description="Technician has pending work."),
        },
        tags=["Complaints - Workflow"],
    )
    @action(detail=True, methods=["post"], url_path="assign")
    def assign(self, request: Request, pk: int = None) -> Response:
        serializer = AssignmentRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        record = AssignmentService.assign(
            pk,
            request.user,
            department_id=data.get("department_id"),
            technician_id=data.get("technician_id"),
            note=data.get("note", ""),
        )
        return Response(AssignmentRecordSerializer(record).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        summary="Assignment history",
        responses={200: AssignmentRecordSerializer(many=True)},
        tags=["Complaints - Workflow"],
    )
    @action(detail=True, methods=["get"], url_path="assignments")
    def assignments(self, request: Request, pk: int = None) -> Response:
        records = AssignmentService.history(pk, request.user)
        return Response(AssignmentRecordSerializer(records, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        methods=["GET"],
        summary="Read complaint rating",
        responses={
            200: RatingSerializer,
            404: OpenApiResponse(description="Complaint not found or not rated yet."),
        },
        tags=["Complaints - Rating"],
    )
    @extend_schema(
        methods=["POST"],
        summary="Rate a fixed complaint",
        request=RatingRequestSerializer,
        responses={
            200: OpenApiResponse(response=RatingSerializer, description="Rating edited."),
            201: OpenApiResponse(response=RatingSerializer, description="Rating created."),
            400: OpenApiResponse(description="Score out of range."),
            403: OpenApiResponse(description="Not your complaint."),
            409: OpenApiResponse(description="Not fixed yet, or edit window expired."),
        },
        tags=["Complaints - Rating"],
    )
    @action(detail=True, methods=["get", "post"], url_path="rating")
    def rating(self, request: Request, pk: int = None) -> Response:
        if request.method == "GET":
            rating = RatingService.get_rating(pk, request.user)
            return Response(RatingSerializer(rating).data, status=status.HTTP_200_OK)

        serializer = RatingRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        rating, created = RatingService.rate(
            pk,
            request.user,
            serializer.validated_data["score"],
            serializer.validated_data.get("comment", ""),
        )
        return Response(
            RatingSerializer(rating).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )

    # ── Feeds ─────────────────────────────────────────────────────────

    @extend_schema(
        summary="Available work",
        description=(
            "Pending, unassigned complaints routed to the calling technician's "
            "department, newest first."
        ),
        responses={
            200: ComplaintListSerializer(many=True),
            403: OpenApiResponse(description="Only technicians have a work queue."),
        },
        tags=["Complaints"],
    )
    @action(detail=False, methods=["get"], url_path="available")
    def available(self, request: Request) -> Response:
        queryset = ComplaintQueryService.available_work(request.user)
        return Response(ComplaintListSerializer(queryset, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Complaint counters",
        responses={200: ComplaintStatsSerializer},
        tags=["Complaints"],
    )
    @action(detail=False, methods=["get"], url_path="stats")
    def stats(self, request: Request) -> Response:
        data = ComplaintQueryService.get_stats(request.user)
        return Response(ComplaintStatsSerializer(data).data, status=status.HTTP_200_OK)

    @extend_schema(
        summary="GeoJSON map feed",
        parameters=[ComplaintMapFilterSerializer],
        responses={200: OpenApiResponse(description="GeoJSON FeatureCollection.")},
        tags=["Complaints"],
    )
    @action(detail=False, methods=["get"], url_path="map")
    def map(self, request: Request) -> Response:
        filter_serializer = ComplaintMapFilterSerializer(data=request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        collection = ComplaintQueryService.get_map_features(
            request.user, filter_serializer.validated_data,
        )
        return Response(collection, status=status.HTTP_200_OK)

    @extend_schema(
        summary="Complaints near a point",
        parameters=[NearbyQuerySerializer],
        responses={200: NearbyComplaintSerializer(many=True)},
        tags=["Complaints"],
    )
    @action(detail=False, methods=["get"], url_path="nearby")
    def nearby(self, request: Request) -> Response:
        query = NearbyQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        rows = ComplaintQueryService.find_nearby(
            query.validated_data["latitude"],
            query.validated_data["longitude"],
            query.validated_data["radius"],
        )
        return Response(NearbyComplaintSerializer(rows, many=True).data, status=status.HTTP_200_OK)


# ═══════════════════════════════════════════════════════════════════
#  Nested: Comments
# ═══════════════════════════════════════════════════════════════════


class CommentViewSet(viewsets.ViewSet):
    """
    GET  /api/complaints/{complaint_pk}/comments/  → thread (citizens see
                                                     visible comments only)
    POST /api/complaints/{complaint_pk}/comments/  → post, multipart with
                                                     up to three
                                                     ``attachments`` files
    """

    permission_classes = [IsAuthenticated]
    parser_classes = [JSONParser, MultiPartParser, FormParser]

    @extend_schema(
        summary="List comments",
        responses={200: CommentSerializer(many=True)},
        tags=["Complaints - Comments"],
    )
    def list(self, request: Request, complaint_pk: int = None) -> Response:
        comments = CommentService.list_comments(complaint_pk, request.user)
        return Response(
            CommentSerializer(comments, many=True, context={"request": request}).data,
            status=status.HTTP_200_OK,
        )

    @extend_schema(
        summary="Post a comment",
        request=CommentCreateSerializer,
        responses={
            201: CommentSerializer,
            400: OpenApiResponse(description="Content empty or too long."),
            403: OpenApiResponse(description="Not allowed to comment here."),
        },
        tags=["Complaints - Comments"],
    )
    def create(self, request: Request, complaint_pk: int = None) -> Response:
        serializer = CommentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        comment = CommentService.add_comment(
            complaint_pk,
            request.user,
            serializer.validated_data["content"],
            visible_to_reporter=serializer.validated_data["visible_to_reporter"],
            attachments=request.FILES.getlist("attachments"),
        )
        return Response(
            CommentSerializer(comment, context={"request": request}).data,
            status=status.HTTP_201_CREATED,
        )


# ═══════════════════════════════════════════════════════════════════
#  Nested: Technician photos
# ═══════════════════════════════════════════════════════════════════


class TechnicianPhotoViewSet(viewsets.ViewSet):
    """
    GET  /api/complaints/{complaint_pk}/photos/  → work photos
    POST /api/complaints/{complaint_pk}/photos/  → upload (assigned technician)
    """

    permission_classes = [IsAuthenticated]
    parser_classes = [MultiPartParser, FormParser]

    @extend_schema(
        summary="List technician photos",
        responses={200: TechnicianPhotoSerializer(many=True)},
        tags=["Complaints - Photos"],
    )
    def list(self, request: Request, complaint_pk: int = None) -> Response:
        photos = TechnicianPhotoService.list_photos(complaint_pk, request.user)
        return Response(
            TechnicianPhotoSerializer(photos, many=True, context={"request": request}).data,
            status=status.HTTP_200_OK,
        )

    @extend_schema(
        summary="Upload a technician photo",
        request=TechnicianPhotoUploadSerializer,
        responses={
            201: TechnicianPhotoSerializer,
            403: OpenApiResponse(description="Complaint not assigned to you."),
            409: OpenApiResponse(description="Complaint already fixed."),
        },
        tags=["Complaints - Photos"],
    )
    def create(self, request: Request, complaint_pk: int = None) -> Response:
        serializer = TechnicianPhotoUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        photo = TechnicianPhotoService.upload(
            complaint_pk,
            request.user,
            serializer.validated_data["photo_type"],
            serializer.validated_data["image"],
        )
        return Response(
            TechnicianPhotoSerializer(photo, context={"request": request}).data,
            status=status.HTTP_201_CREATED,
        )
