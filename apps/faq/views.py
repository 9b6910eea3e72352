"""FAQ API: public list for the website, full management for administrators."""

from __future__ import annotations

import logging

from django.db import transaction  # type: ignore
from rest_framework import status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.permissions import AllowAny  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.users.api.permissions import IsPlatformAdmin

from .models import FAQ
from .serializers import FAQReorderSerializer, FAQSerializer, PublicFAQSerializer

logger = logging.getLogger(__name__)


class FAQViewSet(viewsets.ModelViewSet):
    """
    Endpoints:
    - GET    /api/faq/public/ - aktive FAQs nach Kategorie und Reihenfolge (öffentlich)
    - GET    /api/faq/admin/ - alle FAQs
    - GET/POST /api/faq/, GET/PUT/DELETE /api/faq/{id}/
    - PATCH  /api/faq/{id}/toggle/ - aktiv/inaktiv umschalten
    - POST   /api/faq/reorder/ - {"faqs": [{"id": 1, "order": 2}, ...]}
    """

    queryset = FAQ.objects.order_by("category", "order", "id")
    serializer_class = FAQSerializer
    permission_classes = [IsPlatformAdmin]
    filterset_fields = ["category", "is_active"]
    pagination_class = None

    def get_permissions(self):  # type: ignore
        if self.action == "public":
            return [AllowAny()]
        return super().get_permissions()

    @action(detail=False, methods=["get"])
    def public(self, request):  # type: ignore
        faqs = self.get_queryset().filter(is_active=True)
        return Response({"success": True, "faqs": PublicFAQSerializer(faqs, many=True).data})

    @action(detail=False, methods=["get"])
    def admin(self, request):  # type: ignore
        faqs = self.filter_queryset(self.get_queryset())
        return Response({"success": True, "faqs": FAQSerializer(faqs, many=True).data})

    @action(detail=True, methods=["patch"])
    def toggle(self, request, pk=None):  # type: ignore
        faq = self.get_object()
        faq.is_active = not faq.is_active
        faq.save(update_fields=["is_active", "updated_at"])
        return Response(
            {
                "success": True,
                "message": f"FAQ {'aktiviert' if faq.is_active else 'deaktiviert'}",
                "faq": FAQSerializer(faq).data,
            },
            status=status.HTTP_200_OK,
        )

    @action(detail=False, methods=["post"])
    def reorder(self, request):  # type: ignore
        serializer = FAQReorderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        with transaction.atomic():
            for item in serializer.validated_data["faqs"]:
                FAQ.objects.filter(pk=item["id"]).update(order=item["order"])
        logger.info(f"FAQ order updated for {len(serializer.validated_data['faqs'])} entries")
        return Response(
            {"success": True, "message": "FAQ-Reihenfolge erfolgreich aktualisiert"},
            status=status.HTTP_200_OK,
        )
