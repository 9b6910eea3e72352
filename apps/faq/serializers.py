"""Serializers for the FAQ API."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import FAQ, normalize_keywords


class FAQSerializer(serializers.ModelSerializer):
    category_display = serializers.CharField(source="get_category_display", read_only=True)
    keywords = serializers.ListField(child=serializers.CharField(max_length=100), required=False)

    class Meta:
        model = FAQ
        fields = [
            "id",
            "category",
            "category_display",
            "question",
            "answer",
            "keywords",
            "order",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]
        extra_kwargs = {
            "question": {"error_messages": {"max_length": "Frage darf maximal 500 Zeichen lang sein"}},
            "answer": {"error_messages": {"max_length": "Antwort darf maximal 5000 Zeichen lang sein"}},
        }

    def validate_keywords(self, value: list[str]) -> list[str]:
        return normalize_keywords(value)


class PublicFAQSerializer(serializers.ModelSerializer):
    class Meta:
        model = FAQ
        fields = ["id", "category", "question", "answer", "keywords", "order"]
        read_only_fields = fields


class FAQOrderSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    order = serializers.IntegerField()


class FAQReorderSerializer(serializers.Serializer):
    faqs = FAQOrderSerializer(many=True, allow_empty=False)

    def validate_faqs(self, value):  # type: ignore
        ids = [item["id"] for item in value]
        known = set(FAQ.objects.filter(pk__in=ids).values_list("pk", flat=True))
        missing = sorted(set(ids) - known)
        if missing:
            raise serializers.ValidationError(f"FAQ nicht gefunden: {', '.join(map(str, missing))}")
        return value
