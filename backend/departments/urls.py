"""
Departments app URL configuration.

Endpoint summary
----------------
GET    /api/departments/
GET    /api/departments/{id}/
GET    /api/departments/{id}/technicians/
GET    /api/routes/
POST   /api/routes/
PATCH  /api/routes/{id}/
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import DepartmentViewSet, ProblemTypeRouteViewSet

app_name = "departments"

router = DefaultRouter()
router.register(r"departments", DepartmentViewSet, basename="department")
router.register(r"routes", ProblemTypeRouteViewSet, basename="route")

urlpatterns = [
    path("", include(router.urls)),
]
