"""Admin API for Mietfächer and package tracking."""

from __future__ import annotations

from rest_framework import mixins, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.users.api.permissions import IsPlatformAdmin

from .models import Mietfach, PackageTracking
from .serializers import (
    AvailabilityRequestSerializer,
    AvailableMietfaecherQuerySerializer,
    BatchAvailabilityRequestSerializer,
    MietfachSerializer,
    PackageStatusUpdateSerializer,
    PackageTrackingSerializer,
)
from .services import (
    PackageTrackingError,
    advance_package_status,
    check_availability,
    check_batch_availability,
    find_available_mietfaecher,
)


class MietfachViewSet(viewsets.ModelViewSet):
    """
    Mietfach-Verwaltung.

    Endpoints:
    - GET/POST /api/admin/mietfaecher/
    - GET/PUT/PATCH/DELETE /api/admin/mietfaecher/{id}/
    - POST /api/admin/mietfaecher/{id}/availability/ - Zeitraum prüfen
    - POST /api/admin/mietfaecher/availability/batch/ - mehrere Mietfächer prüfen
    - GET  /api/admin/mietfaecher/available/?start=&end=&typ= - freie Mietfächer
    """

    queryset = Mietfach.objects.all()
    serializer_class = MietfachSerializer
    permission_classes = [IsPlatformAdmin]
    filterset_fields = ["typ", "verfuegbar"]

    def destroy(self, request, *args, **kwargs):  # type: ignore
        mietfach = self.get_object()
        if mietfach.contract_services.exists():
            return Response(
                {"detail": "Mietfach ist einem Vertrag zugeordnet und kann nicht gelöscht werden."},
                status=status.HTTP_409_CONFLICT,
            )
        return super().destroy(request, *args, **kwargs)

    @action(detail=True, methods=["post"], url_path="availability")
    def availability(self, request, pk=None):  # type: ignore
        mietfach = self.get_object()
        serializer = AvailabilityRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = check_availability(
            mietfach,
            serializer.validated_data["start"],
            serializer.validated_data["end"],
            exclude_contract_id=serializer.validated_data.get("exclude_contract_id"),
        )
        return Response(result.to_dict(), status=status.HTTP_200_OK)

    @action(detail=False, methods=["post"], url_path="availability/batch")
    def batch_availability(self, request):  # type: ignore
        serializer = BatchAvailabilityRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        ids = serializer.validated_data["mietfach_ids"]
        existing = set(Mietfach.objects.filter(pk__in=ids).values_list("pk", flat=True))
        missing = sorted(set(ids) - existing)
        if missing:
            return Response(
                {"mietfach_ids": [f"Mietfach nicht gefunden: {', '.join(map(str, missing))}"]},
                status=status.HTTP_400_BAD_REQUEST,
            )
        results = check_batch_availability(ids, serializer.validated_data["start"], serializer.validated_data["end"])
        return Response(
            {
                "all_available": all(result.available for result in results.values()),
                "results": [results[mietfach_id].to_dict() for mietfach_id in ids],
            },
            status=status.HTTP_200_OK,
        )

    @action(detail=False, methods=["get"], url_path="available")
    def available(self, request):  # type: ignore
        serializer = AvailableMietfaecherQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        queryset = find_available_mietfaecher(
            serializer.validated_data["start"],
            serializer.validated_data["end"],
            serializer.validated_data.get("typ"),
        )
        data = MietfachSerializer(queryset, many=True).data
        return Response({"count": len(data), "results": data}, status=status.HTTP_200_OK)


class PackageTrackingViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet,
):
    """Paketverfolgung für Lager- und Versandservice."""

    queryset = PackageTracking.objects.select_related("vertrag", "vertrag__user").all()
    serializer_class = PackageTrackingSerializer
    permission_classes = [IsPlatformAdmin]
    filterset_fields = ["status", "package_typ", "vertrag"]

    @action(detail=True, methods=["post", "patch"], url_path="status")
    def update_status(self, request, pk=None):  # type: ignore
        tracking = self.get_object()
        serializer = PackageStatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            tracking = advance_package_status(
                tracking,
                serializer.validated_data["status"],
                admin=request.user,
                notizen=serializer.validated_data["notizen"],
                tracking_nummer=serializer.validated_data["tracking_nummer"],
            )
        except PackageTrackingError as exc:
            return Response({"status": [str(exc)]}, status=status.HTTP_400_BAD_REQUEST)
        return Response(self.get_serializer(tracking).data, status=status.HTTP_200_OK)
