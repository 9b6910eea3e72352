"""URL routing for the FAQ API (/api/faq/)."""

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import FAQViewSet

router = DefaultRouter()
router.register(r"", FAQViewSet, basename="faq")

urlpatterns = [path("", include(router.urls))]
