"""URL routing for the store settings and trial admin API."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import StoreSettingsView, TrialAdminViewSet

router = DefaultRouter()
router.register(r"trials", TrialAdminViewSet, basename="trial")

urlpatterns = [
    path("store-settings/", StoreSettingsView.as_view(), name="store-settings"),
    path("", include(router.urls)),
]
