"""Admin and vendor API for store settings and trials."""

from __future__ import annotations

from django.shortcuts import get_object_or_404  # type: ignore
from rest_framework import status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.users.api.permissions import IsPlatformAdmin, IsVendor
from apps.users.models import CustomUser

from . import services
from .models import StoreSettings
from .serializers import StoreSettingsSerializer, TrialStatusSerializer


class StoreSettingsView(APIView):
    """GET/PUT /api/admin/store-settings/"""

    permission_classes = [IsPlatformAdmin]

    def get(self, request):  # type: ignore
        return Response(StoreSettingsSerializer(StoreSettings.load()).data)

    def put(self, request):  # type: ignore
        serializer = StoreSettingsSerializer(
            StoreSettings.load(),
            data=request.data,
            partial=True,
            context={"request": request},
        )
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data, status=status.HTTP_200_OK)


class TrialAdminViewSet(viewsets.ViewSet):
    """
    Probemonat-Verwaltung.

    Endpoints:
    - POST /api/admin/trials/{user_id}/activate/ - Probemonat manuell starten
    - POST /api/admin/trials/activate-preregistered/ - alle Vorregistrierten aktivieren
    - POST /api/admin/trials/update-statuses/ - Statusprüfung sofort ausführen
    - GET  /api/admin/trials/statistics/ - Anzahl je Registrierungsstatus
    """

    permission_classes = [IsPlatformAdmin]

    @action(detail=True, methods=["post"])
    def activate(self, request, pk=None):  # type: ignore
        user = get_object_or_404(CustomUser, pk=pk)
        try:
            services.activate_trial(user)
        except services.TrialError as exc:
            return Response({"success": False, "message": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(
            {
                "success": True,
                "message": f"Probemonat für {user.email} aktiviert",
                "trial_start_date": user.trial_start_date,
                "trial_end_date": user.trial_end_date,
            },
            status=status.HTTP_200_OK,
        )

    @action(detail=False, methods=["post"], url_path="activate-preregistered")
    def activate_preregistered(self, request):  # type: ignore
        try:
            result = services.activate_preregistered_vendors()
        except services.TrialError as exc:
            return Response({"success": False, "message": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response({"success": True, **result.to_dict()}, status=status.HTTP_200_OK)

    @action(detail=False, methods=["post"], url_path="update-statuses")
    def update_statuses(self, request):  # type: ignore
        return Response({"success": True, **services.update_trial_statuses()}, status=status.HTTP_200_OK)

    @action(detail=False, methods=["get"])
    def statistics(self, request):  # type: ignore
        return Response(services.trial_statistics(), status=status.HTTP_200_OK)


class VendorTrialStatusView(APIView):
    """GET /api/vendor-auth/trial-status/"""

    permission_classes = [IsVendor]

    def get(self, request):  # type: ignore
        data = TrialStatusSerializer(services.trial_status(request.user)).data
        return Response(data, status=status.HTTP_200_OK)
