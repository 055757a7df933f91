"""API routes for Cohortly.

Versioned REST endpoints live under /api/v1/; the OpenAPI schema and
interactive documentation are served alongside.
"""
from django.urls import path, include
from rest_framework.routers import DefaultRouter
from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularSwaggerView,
    SpectacularRedocView,
)


from .views import TargetViewSet, SubmissionViewSet, admissions_stats

router = DefaultRouter()
router.register(r"api/v1/targets", TargetViewSet, basename="targets")
router.register(r"api/v1/submissions", SubmissionViewSet, basename="submissions")

urlpatterns = [
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),
    path("redoc/", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
    path("api/v1/admissions/stats/", admissions_stats, name="admissions-stats"),
    path("", include(router.urls)),
]
