"""API views for housnkuh administrators: vendors and pending bookings."""

from __future__ import annotations

from django.shortcuts import get_object_or_404  # type: ignore
from rest_framework import mixins, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.rentals.serializers import (
    ConfirmPendingBookingSerializer,
    RejectPendingBookingSerializer,
    VertragSerializer,
)
from apps.rentals.services import (
    MietfachConflictError,
    NoPendingBookingError,
    PendingBookingError,
    confirm_pending_booking,
    reject_pending_booking,
)
from apps.users.models import CustomUser, PendingBooking

from .permissions import IsPlatformAdmin
from .serializers import AdminPendingBookingSerializer, VendorDetailSerializer, VendorListSerializer


class VendorAdminViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.UpdateModelMixin,
    viewsets.GenericViewSet,
):
    """
    ViewSet for administrators to manage vendor accounts.

    Endpoints:
    - GET /api/admin/vendors/ - list vendors (filter: registration_status, contact_status, is_publicly_visible)
    - GET /api/admin/vendors/{id}/ - vendor details with address
    - PATCH /api/admin/vendors/{id}/ - change public visibility or verify status
    """

    queryset = CustomUser.objects.vendors().select_related("vendor_profile").prefetch_related("addresses")
    permission_classes = [IsPlatformAdmin]
    filterset_fields = ["registration_status", "contact_status", "is_publicly_visible"]

    def get_serializer_class(self) -> type:  # type: ignore
        if self.action == "list":
            return VendorListSerializer
        return VendorDetailSerializer


class PendingBookingAdminViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """
    Admin queue of bookings waiting for Mietfach assignment.

    Endpoints:
    - GET  /api/admin/pending-bookings/ - open bookings, oldest first
    - POST /api/admin/pending-bookings/{user_id}/confirm/ - assign Mietfächer and create the contract
    - POST /api/admin/pending-bookings/{user_id}/reject/ - reject the booking
    """

    queryset = (
        PendingBooking.objects.filter(status=PendingBooking.Status.PENDING)
        .select_related("user", "user__vendor_profile")
        .order_by("created_at")
    )
    serializer_class = AdminPendingBookingSerializer
    permission_classes = [IsPlatformAdmin]

    @action(detail=True, methods=["post"])
    def confirm(self, request, pk=None):  # type: ignore
        """
        Confirm the vendor's pending booking.

        POST /api/admin/pending-bookings/{user_id}/confirm/
        Body: assigned_mietfaecher, price_adjustments ({mietfach_id: price}), scheduled_start_date
        """
        user = get_object_or_404(CustomUser, pk=pk)
        serializer = ConfirmPendingBookingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            confirmation = confirm_pending_booking(
                user,
                request.user,
                mietfach_ids=serializer.validated_data["assigned_mietfaecher"],
                price_adjustments=serializer.validated_data["price_adjustments"],
                scheduled_start=serializer.validated_data.get("scheduled_start_date"),
            )
        except NoPendingBookingError as exc:
            return Response({"success": False, "message": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        except PendingBookingError as exc:
            return Response({"success": False, "message": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except MietfachConflictError as exc:
            return Response(
                {
                    "success": False,
                    "message": str(exc),
                    "conflicts": [result.to_dict() for result in exc.results],
                },
                status=status.HTTP_409_CONFLICT,
            )

        return Response(
            {
                "success": True,
                "message": "Buchung bestätigt und Vertrag erstellt",
                "contract": VertragSerializer(confirmation.contract).data,
                "email_sent": confirmation.email_sent,
            },
            status=status.HTTP_201_CREATED,
        )

    @action(detail=True, methods=["post"])
    def reject(self, request, pk=None):  # type: ignore
        user = get_object_or_404(CustomUser, pk=pk)
        serializer = RejectPendingBookingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            reject_pending_booking(user, request.user, serializer.validated_data["reason"])
        except PendingBookingError as exc:
            return Response({"success": False, "message": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        return Response({"success": True, "message": "Buchung abgelehnt"}, status=status.HTTP_200_OK)
