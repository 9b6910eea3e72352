"""URL routing for the email template admin API."""

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import EmailTemplateViewSet

router = DefaultRouter()
router.register(r'', EmailTemplateViewSet, basename='email-template')

urlpatterns = [path('', include(router.urls))]
