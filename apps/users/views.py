"""Vendor-facing API views: profile, image upload, public pages, contracts and bookings."""

from __future__ import annotations

import logging
import os
import uuid

from django.core.files.storage import default_storage  # type: ignore
from django.http import Http404  # type: ignore
from django.shortcuts import get_object_or_404  # type: ignore
from django.utils.decorators import method_decorator  # type: ignore
from django_ratelimit.decorators import ratelimit  # type: ignore
from rest_framework import generics, status  # type: ignore
from rest_framework.parsers import FormParser, MultiPartParser  # type: ignore
from rest_framework.permissions import AllowAny  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.rentals.models import Vertrag
from apps.rentals.serializers import VertragSerializer
from apps.trials.services import TrialError, cancel_trial_booking

from .api.permissions import IsVendor
from .auth_views import rate_limited_response
from .models import User
from .serializers import (
    AdditionalBookingSerializer,
    ImageUploadSerializer,
    PendingBookingSerializer,
    PublicVendorSerializer,
    VendorAccountSerializer,
)
from .services import RegistrationError, create_additional_booking

logger = logging.getLogger(__name__)

TRIAL_RATE = "25/15m"


class VendorProfileView(APIView):
    """GET/PUT /api/vendor-auth/profile/{user_id}/ - nur das eigene Profil."""

    permission_classes = [IsVendor]

    def _check_owner(self, request, user_id: int) -> Response | None:
        if request.user.pk != user_id:
            return Response({"success": False, "message": "Zugriff verweigert"}, status=status.HTTP_403_FORBIDDEN)
        return None

    def get(self, request, user_id: int):  # type: ignore
        denied = self._check_owner(request, user_id)
        if denied:
            return denied
        return Response({"success": True, "profile": VendorAccountSerializer(request.user).data})

    def put(self, request, user_id: int):  # type: ignore
        denied = self._check_owner(request, user_id)
        if denied:
            return denied
        serializer = VendorAccountSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        return Response(
            {
                "success": True,
                "message": "Profil erfolgreich aktualisiert",
                "profile": VendorAccountSerializer(user).data,
            },
            status=status.HTTP_200_OK,
        )


class VendorImageUploadView(APIView):
    """POST /api/vendor-auth/upload-image/ (multipart, Feld ``image``)."""

    permission_classes = [IsVendor]
    parser_classes = [MultiPartParser, FormParser]

    def post(self, request):  # type: ignore
        serializer = ImageUploadSerializer(data=request.data)
        if not serializer.is_valid():
            message = serializer.errors["image"][0]
            return Response({"success": False, "message": str(message)}, status=status.HTTP_400_BAD_REQUEST)

        image = serializer.validated_data["image"]
        extension = os.path.splitext(image.name)[1].lower()
        name = default_storage.save(f"vendor-images/vendor-{uuid.uuid4().hex}{extension}", image)
        url = default_storage.url(name)
        logger.info(f"Vendor image uploaded by {request.user.email}: {name}")
        return Response({"success": True, "image_url": url}, status=status.HTTP_201_CREATED)


class PublicVendorListView(generics.ListAPIView):
    serializer_class = PublicVendorSerializer
    permission_classes = [AllowAny]

    def get_queryset(self):  # type: ignore
        return User.objects.public_vendors().select_related("vendor_profile").prefetch_related("addresses")


class PublicVendorDetailView(generics.RetrieveAPIView):
    serializer_class = PublicVendorSerializer
    permission_classes = [AllowAny]

    def get_queryset(self):  # type: ignore
        return User.objects.public_vendors().select_related("vendor_profile")

    def retrieve(self, request, *args, **kwargs):  # type: ignore
        try:
            return super().retrieve(request, *args, **kwargs)
        except Http404:
            return Response(
                {"success": False, "message": "Direktvermarkter nicht gefunden"},
                status=status.HTTP_404_NOT_FOUND,
            )


class VendorContractListView(generics.ListAPIView):
    serializer_class = VertragSerializer
    permission_classes = [IsVendor]

    def get_queryset(self):  # type: ignore
        return Vertrag.objects.filter(user=self.request.user).prefetch_related("services__mietfach")


@method_decorator(ratelimit(key="ip", rate=TRIAL_RATE, method="POST", block=False), name="post")
class TrialCancelView(APIView):
    """POST /api/vendor-auth/contracts/{id}/trial-cancel/"""

    permission_classes = [IsVendor]

    def post(self, request, pk: int):  # type: ignore
        limited = rate_limited_response(request)
        if limited:
            return limited
        contract = get_object_or_404(Vertrag, pk=pk, user=request.user)
        try:
            contract = cancel_trial_booking(contract, reason=str(request.data.get("reason", "")))
        except TrialError as exc:
            return Response({"success": False, "message": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(
            {
                "success": True,
                "message": "Probemonat-Buchung erfolgreich gekündigt",
                "contract": VertragSerializer(contract).data,
            },
            status=status.HTTP_200_OK,
        )


class AdditionalBookingView(APIView):
    """POST /api/vendor-auth/additional-booking/ - weitere Pakete anfragen."""

    permission_classes = [IsVendor]

    def post(self, request):  # type: ignore
        serializer = AdditionalBookingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            pending = create_additional_booking(
                request.user,
                serializer.validated_data["package_data"],
                serializer.validated_data["comments"],
            )
        except RegistrationError as exc:
            return Response({"success": False, "message": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(
            {"success": True, "pending_booking": PendingBookingSerializer(pending).data},
            status=status.HTTP_201_CREATED,
        )
