"""Admin API for email templates."""

from __future__ import annotations

from rest_framework import mixins, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.users.api.permissions import IsPlatformAdmin

from .defaults import VARIABLES_BY_TYPE
from .models import EmailTemplate
from .serializers import (
    EmailTemplateListSerializer,
    EmailTemplateSerializer,
    SendTestEmailSerializer,
    TemplatePreviewSerializer,
)
from .services import preview_data, render_email_template, send_test_email


class EmailTemplateViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.UpdateModelMixin,
    viewsets.GenericViewSet,
):
    """
    Verwaltung der E-Mail-Templates durch Administratoren.

    Endpoints:
    - GET  /api/admin/email-templates/ - Liste (Filter: category, is_active)
    - GET  /api/admin/email-templates/{id}/ - Template inkl. Inhalt
    - PUT  /api/admin/email-templates/{id}/ - bearbeiten (Version +1)
    - POST /api/admin/email-templates/preview/ - Vorschau rendern
    - POST /api/admin/email-templates/send-test/ - Test-Mail versenden
    - GET  /api/admin/email-templates/variables/{type}/ - verfügbare Variablen
    """

    queryset = EmailTemplate.objects.all()
    permission_classes = [IsPlatformAdmin]
    filterset_fields = ["category", "is_active", "type"]

    def get_serializer_class(self):  # type: ignore
        if self.action == "list":
            return EmailTemplateListSerializer
        return EmailTemplateSerializer

    @action(detail=False, methods=["post"], url_path="preview")
    def preview(self, request):  # type: ignore
        serializer = TemplatePreviewSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = preview_data(serializer.validated_data["template_data"])
        draft = EmailTemplate(
            subject=serializer.validated_data["subject"],
            html_body=serializer.validated_data["html_body"],
            text_body=serializer.validated_data.get("text_body", ""),
        )
        rendered = render_email_template(draft, data)
        return Response(
            {
                "subject": rendered.subject,
                "html_body": rendered.html_body,
                "text_body": rendered.text_body,
                "template_data": data,
            },
            status=status.HTTP_200_OK,
        )

    @action(detail=False, methods=["post"], url_path="send-test")
    def send_test(self, request):  # type: ignore
        serializer = SendTestEmailSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        recipient = serializer.validated_data["test_email"]
        sent = send_test_email(
            serializer.validated_data["template"],
            recipient,
            serializer.validated_data["template_data"],
        )
        if not sent:
            return Response(
                {"success": False, "message": "Fehler beim Versenden der Test-Email"},
                status=status.HTTP_502_BAD_GATEWAY,
            )
        return Response(
            {"success": True, "message": f"Test-Email erfolgreich an {recipient} gesendet"},
            status=status.HTTP_200_OK,
        )

    @action(detail=False, methods=["get"], url_path=r"variables/(?P<template_type>[\w-]+)")
    def variables(self, request, template_type=None):  # type: ignore
        variables = VARIABLES_BY_TYPE.get(template_type, VARIABLES_BY_TYPE["default"])
        return Response({"type": template_type, "variables": variables}, status=status.HTTP_200_OK)
