"""Serializers for revenue figures and their query parameters."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import MonthlyRevenue
from .services import MAX_PROJECTION_MONTHS


class MonthlyRevenueSerializer(serializers.ModelSerializer):
    class Meta:
        model = MonthlyRevenue
        fields = [
            "id",
            "monat",
            "gesamteinnahmen",
            "anzahl_aktive_vertraege",
            "anzahl_probemonat_vertraege",
            "einnahmen_pro_mietfach",
            "updated_at",
        ]
        read_only_fields = fields


class RevenueMonthSerializer(serializers.Serializer):
    year = serializers.IntegerField(min_value=2020, max_value=2100)
    month = serializers.IntegerField(min_value=1, max_value=12)


class RevenueRangeSerializer(serializers.Serializer):
    """``start``/``end`` als ``YYYY-MM``."""

    start = serializers.DateField(input_formats=["%Y-%m"])
    end = serializers.DateField(input_formats=["%Y-%m"])

    def validate(self, attrs):  # type: ignore
        if attrs["end"] < attrs["start"]:
            raise serializers.ValidationError({"end": "Das Ende des Zeitraums liegt vor dem Beginn."})
        return attrs


class ProjectionQuerySerializer(serializers.Serializer):
    months = serializers.IntegerField(min_value=1, max_value=MAX_PROJECTION_MONTHS, default=6)
    include_trial = serializers.BooleanField(default=False)
