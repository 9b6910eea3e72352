"""URL configuration for housnkuh project.

The `urlpatterns` list routes URLs to views. It includes both Django admin
and application‑level routers provided by Django Rest Framework and each app.
"""
from django.conf import settings  # type: ignore
from django.conf.urls.static import static  # type: ignore
from django.contrib import admin  # type: ignore
from django.urls import path, include  # type: ignore
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView  # type: ignore

urlpatterns = [
    path('admin/', admin.site.urls),
    # Public and vendor API
    path('api/vendor-auth/', include('apps.users.urls')),
    path('api/pricing/', include('apps.pricing.urls')),
    path('api/faq/', include('apps.faq.urls')),
    # Administrator API
    path('api/auth/', include('apps.users.auth_urls', namespace='auth')),
    path('api/admin/email-templates/', include('apps.notifications.urls')),
    path('api/admin/', include('apps.rentals.urls')),
    path('api/admin/', include('apps.users.api.urls')),
    path('api/admin/', include('apps.trials.urls')),
    path('api/admin/', include('apps.revenue.urls')),
    # API schema
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
]

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
