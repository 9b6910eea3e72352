"""URL routing for the vendor administration API."""

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import PendingBookingAdminViewSet, VendorAdminViewSet

router = DefaultRouter()
router.register(r"vendors", VendorAdminViewSet, basename="admin-vendor")
router.register(r"pending-bookings", PendingBookingAdminViewSet, basename="pending-booking")

urlpatterns = [
    path("", include(router.urls)),
]
