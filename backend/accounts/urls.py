"""
Accounts app URL configuration.

Included in the project-level ``urls.py`` as::

    path('api/accounts/', include('accounts.urls')),

Endpoint Map
------------
Authentication
    POST   /auth/register/              → RegisterView
    POST   /auth/login/                 → LoginView
    POST   /auth/token/refresh/         → TokenRefreshView (SimpleJWT)

Current User Profile ("Me")
    GET    /me/                         → MeView  (retrieve)
    PATCH  /me/                         → MeView  (partial update)

Gamification
    GET    /badges/                     → BadgeTierListView
    GET    /scoreboard/citizens/        → CitizenScoreboardView
    GET    /scoreboard/technicians/     → TechnicianScoreboardView

Staff
    GET    /technicians/                → TechnicianViewSet.list
    POST   /technicians/                → TechnicianViewSet.create

User Administration (admin)
    GET    /users/                      → UserAdminViewSet.list
    DELETE /users/{id}/                 → UserAdminViewSet.destroy
    PATCH  /users/{id}/role/            → UserAdminViewSet.role
    POST   /users/bulk-role/            → UserAdminViewSet.bulk_role
    GET    /users/statistics/           → UserAdminViewSet.statistics
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter
from rest_framework_simplejwt.views import TokenRefreshView

from .views import (
    BadgeTierListView,
    CitizenScoreboardView,
    LoginView,
    MeView,
    RegisterView,
    TechnicianScoreboardView,
    TechnicianViewSet,
    UserAdminViewSet,
)

app_name = "accounts"

router = DefaultRouter()
router.register(r"technicians", TechnicianViewSet, basename="technician")
router.register(r"users", UserAdminViewSet, basename="user")

urlpatterns = [
    # ── Authentication ───────────────────────────────────────────────
    path("auth/register/", RegisterView.as_view(), name="register"),
    path("auth/login/", LoginView.as_view(), name="login"),
    path(
        "auth/token/refresh/",
        TokenRefreshView.as_view(),
        name="token-refresh",
    ),

    # ── Current User (Me) ───────────────────────────────────────────
    path("me/", MeView.as_view(), name="me"),

    # ── Gamification ─────────────────────────────────────────────────
    path("badges/", BadgeTierListView.as_view(), name="badge-list"),
    path("scoreboard/citizens/", CitizenScoreboardView.as_view(), name="scoreboard-citizens"),
    path("scoreboard/technicians/", TechnicianScoreboardView.as_view(), name="scoreboard-technicians"),

    # ── Router-registered viewsets (technicians/, users/) ───────────
    path("", include(router.urls)),
]
