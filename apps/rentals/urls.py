"""URL routing for the rentals admin API."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import MietfachViewSet, PackageTrackingViewSet

router = DefaultRouter()
router.register(r"mietfaecher", MietfachViewSet, basename="mietfach")
router.register(r"package-tracking", PackageTrackingViewSet, basename="package-tracking")

urlpatterns = [
    path("", include(router.urls)),
]
