"""
Complaints app URL configuration.

All routes are registered under the ``/api/`` prefix
(included from ``civicfix.urls``).

Route Hierarchy
---------------
  ── Complaint CRUD ──────────────────────────────────────────────
  GET    /api/complaints/                         → list (role-scoped)
  POST   /api/complaints/                         → submit
  GET    /api/complaints/{id}/                    → retrieve
  DELETE /api/complaints/{id}/                    → purge (admin)

  ── Workflow @actions ───────────────────────────────────────────
  POST   /api/complaints/{id}/status/             → status transition
  POST   /api/complaints/{id}/assign/             → (re)assign
  GET    /api/complaints/{id}/assignments/        → assignment history
  GET    /api/complaints/{id}/rating/             → read rating
  POST   /api/complaints/{id}/rating/             → create / edit rating

  ── Feeds ───────────────────────────────────────────────────────
  GET    /api/complaints/stats/                   → counters
  GET    /api/complaints/map/                     → GeoJSON
  GET    /api/complaints/nearby/                  → proximity search

  ── Nested ──────────────────────────────────────────────────────
  GET    /api/complaints/{complaint_pk}/comments/ → thread
  POST   /api/complaints/{complaint_pk}/comments/ → post comment
  GET    /api/complaints/{complaint_pk}/photos/   → work photos
  POST   /api/complaints/{complaint_pk}/photos/   → upload work photo
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter
from rest_framework_nested.routers import NestedDefaultRouter

from .views import CommentViewSet, ComplaintViewSet, TechnicianPhotoViewSet

app_name = "complaints"

# ── Primary Router ──────────────────────────────────────────────────
router = DefaultRouter()
router.register(
    prefix=r"complaints",
    viewset=ComplaintViewSet,
    basename="complaint",
)

# ── Nested Routers (under /complaints/{complaint_pk}/) ──────────────
complaints_router = NestedDefaultRouter(
    parent_router=router,
    parent_prefix=r"complaints",
    lookup="complaint",
)
complaints_router.register(
    prefix=r"comments",
    viewset=CommentViewSet,
    basename="complaint-comment",
)
complaints_router.register(
    prefix=r"photos",
    viewset=TechnicianPhotoViewSet,
    basename="complaint-photo",
)

urlpatterns = [
    path("", include(router.urls)),
    path("", include(complaints_router.urls)),
]
