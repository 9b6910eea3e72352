"""Views for vendor registration, e-mail confirmation and login."""

from __future__ import annotations

import logging

from django.utils.decorators import method_decorator  # type: ignore
from django_ratelimit.decorators import ratelimit  # type: ignore
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import RefreshToken  # type: ignore

from apps.trials.models import StoreSettings

from .auth_serializers import (
    AdminLoginSerializer,
    PreregistrationSerializer,
    ValidateStepSerializer,
    VendorLoginSerializer,
    VendorRegistrationSerializer,
)
from .serializers import AdminSummarySerializer, VendorSummarySerializer
from .services import RegistrationError, confirm_vendor_email, preregister_vendor, register_vendor

logger = logging.getLogger(__name__)

RATE_LIMITED = "Zu viele Anfragen. Bitte versuchen Sie es später erneut."
AUTH_RATE = "5/15m"
REGISTRATION_RATE = "10/15m"


def _tokens_for_user(user) -> dict[str, str]:
    refresh = RefreshToken.for_user(user)
    return {"refresh": str(refresh), "access": str(refresh.access_token)}


def rate_limited_response(request) -> Response | None:
    if getattr(request, "limited", False):
        logger.warning(f"Rate limit exceeded for IP: {request.META.get('REMOTE_ADDR')} on {request.path}")
        return Response({"success": False, "message": RATE_LIMITED}, status=status.HTTP_429_TOO_MANY_REQUESTS)
    return None


class ValidateStepView(APIView):
    """Prüft die Felder eines Schritts des Registrierungs-Assistenten."""

    permission_classes = [AllowAny]

    def post(self, request):  # type: ignore
        serializer = ValidateStepSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        errors = serializer.errors_for_step()
        return Response({"valid": not errors, "errors": errors}, status=status.HTTP_200_OK)


@method_decorator(ratelimit(key="ip", rate=REGISTRATION_RATE, method="POST", block=False), name="post")
class VendorRegisterView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):  # type: ignore
        limited = rate_limited_response(request)
        if limited:
            return limited
        serializer = VendorRegistrationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        try:
            result = register_vendor(
                email=data["email"],
                password=data["password"],
                name=data["name"],
                phone=data["phone"],
                unternehmen=data["unternehmen"],
                comments=data["comments"],
                address=serializer.address(),
                package_data=data["package_data"],
            )
        except RegistrationError as exc:
            return Response({"success": False, "message": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(
            {
                "success": True,
                "message": "Account erstellt. Bitte bestätigen Sie Ihre E-Mail-Adresse.",
                "user_id": result.user.pk,
                "email_sent": result.email_sent,
                "price_breakdown": result.pending_booking.price_breakdown,
            },
            status=status.HTTP_201_CREATED,
        )


@method_decorator(ratelimit(key="ip", rate=REGISTRATION_RATE, method="POST", block=False), name="post")
class VendorPreregisterView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):  # type: ignore
        limited = rate_limited_response(request)
        if limited:
            return limited
        store = StoreSettings.load()
        if store.is_store_open():
            return Response(
                {
                    "success": False,
                    "message": "Der Store ist bereits eröffnet. Bitte nutzen Sie die reguläre Registrierung.",
                },
                status=status.HTTP_400_BAD_REQUEST,
            )
        serializer = PreregistrationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        try:
            result = preregister_vendor(
                email=data["email"],
                password=data["password"],
                name=data["name"],
                phone=data["phone"],
                unternehmen=data["unternehmen"],
                beschreibung=data["beschreibung"],
                address=serializer.address(),
                opening_date=store.opening_date if store.store_opening_enabled else None,
            )
        except RegistrationError as exc:
            return Response({"success": False, "message": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(
            {
                "success": True,
                "message": "Vorregistrierung erfolgreich. Ihr Probemonat beginnt mit der Eröffnung.",
                "user_id": result.user.pk,
                "email_sent": result.email_sent,
                "opening_date": store.opening_date if store.store_opening_enabled else None,
                "days_until_opening": store.days_until_opening(),
            },
            status=status.HTTP_201_CREATED,
        )


class ConfirmEmailView(APIView):
    permission_classes = [AllowAny]

    def get(self, request, token: str):  # type: ignore
        try:
            confirm_vendor_email(token)
        except RegistrationError as exc:
            return Response({"success": False, "message": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(
            {
                "success": True,
                "message": "E-Mail-Adresse erfolgreich bestätigt. Sie können sich jetzt anmelden.",
            },
            status=status.HTTP_200_OK,
        )


@method_decorator(ratelimit(key="ip", rate=AUTH_RATE, method="POST", block=False), name="post")
class VendorLoginView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):  # type: ignore
        limited = rate_limited_response(request)
        if limited:
            return limited
        serializer = VendorLoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.validated_data["user"]
        data = {
            "success": True,
            "user": VendorSummarySerializer(user).data,
            "tokens": _tokens_for_user(user),
        }
        return Response(data, status=status.HTTP_200_OK)


@method_decorator(ratelimit(key="ip", rate=AUTH_RATE, method="POST", block=False), name="post")
class AdminLoginView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):  # type: ignore
        limited = rate_limited_response(request)
        if limited:
            return limited
        serializer = AdminLoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.validated_data["user"]
        data = {
            "success": True,
            "user": AdminSummarySerializer(user).data,
            "tokens": _tokens_for_user(user),
        }
        return Response(data, status=status.HTTP_200_OK)
