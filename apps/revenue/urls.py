"""URL routing for the revenue and dashboard admin API."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import DashboardView, RevenueViewSet

router = DefaultRouter()
router.register(r"revenue", RevenueViewSet, basename="revenue")

urlpatterns = [
    path("dashboard/", DashboardView.as_view(), name="admin-dashboard"),
    path("", include(router.urls)),
]
