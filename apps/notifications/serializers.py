"""Serializers for email templates."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import EmailTemplate


class EmailTemplateListSerializer(serializers.ModelSerializer):
    """Listenansicht ohne HTML-/Text-Inhalt."""

    class Meta:
        model = EmailTemplate
        fields = [
            "id",
            "template_id",
            "name",
            "type",
            "subject",
            "variables",
            "description",
            "category",
            "is_active",
            "version",
            "last_modified",
            "modified_by",
        ]


class EmailTemplateSerializer(serializers.ModelSerializer):
    class Meta:
        model = EmailTemplate
        fields = EmailTemplateListSerializer.Meta.fields + ["html_body", "text_body"]
        read_only_fields = ["id", "template_id", "type", "version", "last_modified", "modified_by"]

    def update(self, instance, validated_data):  # type: ignore
        instance.version += 1
        request = self.context.get("request")
        if request is not None and request.user.is_authenticated:
            instance.modified_by = request.user.username or request.user.email
        return super().update(instance, validated_data)


class TemplatePreviewSerializer(serializers.Serializer):
    subject = serializers.CharField()
    html_body = serializers.CharField()
    text_body = serializers.CharField(required=False, allow_blank=True)
    template_data = serializers.DictField(required=False, default=dict)


class SendTestEmailSerializer(serializers.Serializer):
    template = serializers.PrimaryKeyRelatedField(queryset=EmailTemplate.objects.all())
    test_email = serializers.EmailField()
    template_data = serializers.DictField(required=False, default=dict)
