"""Serializers for store settings and trial status."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import StoreSettings


class StoreSettingsSerializer(serializers.ModelSerializer):
    is_store_open = serializers.BooleanField(read_only=True)
    days_until_opening = serializers.IntegerField(read_only=True, allow_null=True)

    class Meta:
        model = StoreSettings
        fields = [
            "store_opening_enabled",
            "opening_date",
            "is_store_open",
            "days_until_opening",
            "modified_by",
            "version",
            "last_modified",
        ]
        read_only_fields = ["modified_by", "version", "last_modified"]

    def validate(self, attrs):  # type: ignore
        enabled = attrs.get("store_opening_enabled", getattr(self.instance, "store_opening_enabled", False))
        opening_date = attrs.get("opening_date", getattr(self.instance, "opening_date", None))
        if enabled and not opening_date:
            raise serializers.ValidationError({"opening_date": "Bitte ein Eröffnungsdatum angeben."})
        return attrs

    def update(self, instance, validated_data):  # type: ignore
        instance.version += 1
        request = self.context.get("request")
        if request is not None and request.user.is_authenticated:
            instance.modified_by = request.user.email
        return super().update(instance, validated_data)


class TrialBookingSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    contract_number = serializers.CharField()
    status = serializers.CharField()
    scheduled_start_date = serializers.DateField()
    zahlungspflichtig_ab = serializers.DateField(allow_null=True)
    gekuendigt_in_probemonat = serializers.BooleanField()
    can_cancel = serializers.BooleanField()


class TrialStatusSerializer(serializers.Serializer):
    registration_status = serializers.CharField()
    trial_start_date = serializers.DateTimeField(allow_null=True)
    trial_end_date = serializers.DateTimeField(allow_null=True)
    days_remaining = serializers.IntegerField(allow_null=True)
    is_trial_active = serializers.BooleanField()
    trial_bookings = TrialBookingSerializer(many=True)
