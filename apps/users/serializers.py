"""Serializers for vendor profiles, public vendor pages and bookings."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.contrib.auth import get_user_model  # type: ignore
from rest_framework import serializers  # type: ignore

from apps.pricing.serializers import PackageSelectionSerializer

from .models import PHONE_VALIDATOR, Address, PendingBooking, VendorProfile
from .validators import PLZ_VALIDATOR

User = get_user_model()

WEEKDAYS = ("montag", "dienstag", "mittwoch", "donnerstag", "freitag", "samstag", "sonntag")


class VendorSummarySerializer(serializers.ModelSerializer):
    """Kurzprofil für Login-Antworten."""

    has_pending_booking = serializers.BooleanField(read_only=True)

    class Meta:
        model = User
        fields = [
            "id",
            "name",
            "email",
            "is_vendor",
            "is_full_account",
            "has_pending_booking",
            "registration_status",
        ]
        read_only_fields = fields


class AdminSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["id", "name", "email", "role", "is_staff"]
        read_only_fields = fields


class AddressSerializer(serializers.ModelSerializer):
    plz = serializers.CharField(validators=[PLZ_VALIDATOR])

    class Meta:
        model = Address
        fields = ["strasse", "hausnummer", "plz", "ort"]


class VendorProfileSerializer(serializers.ModelSerializer):
    class Meta:
        model = VendorProfile
        fields = [
            "unternehmen",
            "beschreibung",
            "profil_bild",
            "oeffnungszeiten",
            "kategorien",
            "tags",
            "slogan",
            "website",
            "social_media",
            "verify_status",
        ]
        read_only_fields = ["verify_status"]

    def validate_oeffnungszeiten(self, value):  # type: ignore
        if not isinstance(value, dict):
            raise serializers.ValidationError("Öffnungszeiten müssen je Wochentag angegeben werden.")
        unknown = set(value) - set(WEEKDAYS)
        if unknown:
            raise serializers.ValidationError(f"Unbekannte Wochentage: {', '.join(sorted(unknown))}")
        return {day: str(value.get(day, "")) for day in WEEKDAYS}

    def validate_social_media(self, value):  # type: ignore
        if not isinstance(value, dict):
            raise serializers.ValidationError("Ungültige Social-Media-Angaben.")
        return value


class VendorAccountSerializer(serializers.ModelSerializer):
    """Eigenes Profil eines Vendors (lesen und bearbeiten)."""

    phone = serializers.CharField(required=False, allow_blank=True, validators=[PHONE_VALIDATOR])
    adresse = AddressSerializer(required=False)
    profile = VendorProfileSerializer(source="vendor_profile", required=False)

    class Meta:
        model = User
        fields = [
            "id",
            "name",
            "email",
            "phone",
            "adresse",
            "profile",
            "registration_status",
            "is_publicly_visible",
        ]
        read_only_fields = ["id", "email", "registration_status", "is_publicly_visible"]

    def to_representation(self, instance):  # type: ignore
        data = super().to_representation(instance)
        address = instance.primary_address
        data["adresse"] = AddressSerializer(address).data if address else {
            "strasse": "",
            "hausnummer": "",
            "plz": "",
            "ort": "",
        }
        profile = getattr(instance, "vendor_profile", None)
        data["profile"] = VendorProfileSerializer(profile or VendorProfile()).data
        return data

    def update(self, instance, validated_data):  # type: ignore
        address_data = validated_data.pop("adresse", None)
        profile_data = validated_data.pop("vendor_profile", None)

        instance = super().update(instance, validated_data)

        if address_data:
            address = instance.primary_address
            if address is None:
                Address.objects.create(user=instance, name1=instance.name, **address_data)
            else:
                for key, value in address_data.items():
                    setattr(address, key, value)
                address.save()

        if profile_data:
            profile, _created = VendorProfile.objects.get_or_create(user=instance)
            for key, value in profile_data.items():
                setattr(profile, key, value)
            profile.save()
        return instance


class PublicVendorSerializer(serializers.ModelSerializer):
    """Öffentliches Direktvermarkter-Profil ohne Kontaktdaten."""

    unternehmen = serializers.CharField(source="vendor_profile.unternehmen", default="")
    beschreibung = serializers.CharField(source="vendor_profile.beschreibung", default="")
    profil_bild = serializers.CharField(source="vendor_profile.profil_bild", default="")
    oeffnungszeiten = serializers.JSONField(source="vendor_profile.oeffnungszeiten", default=dict)
    kategorien = serializers.JSONField(source="vendor_profile.kategorien", default=list)
    tags = serializers.JSONField(source="vendor_profile.tags", default=list)
    slogan = serializers.CharField(source="vendor_profile.slogan", default="")
    website = serializers.CharField(source="vendor_profile.website", default="")
    social_media = serializers.JSONField(source="vendor_profile.social_media", default=dict)
    verify_status = serializers.CharField(source="vendor_profile.verify_status", default="unverified")
    ort = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            "id",
            "name",
            "unternehmen",
            "beschreibung",
            "profil_bild",
            "oeffnungszeiten",
            "kategorien",
            "tags",
            "slogan",
            "website",
            "social_media",
            "verify_status",
            "ort",
            "created_at",
        ]
        read_only_fields = fields

    def get_ort(self, obj) -> str:  # type: ignore
        address = obj.primary_address
        return address.ort if address else ""


class ImageUploadSerializer(serializers.Serializer):
    image = serializers.ImageField(
        error_messages={
            "required": "Keine Datei hochgeladen",
            "invalid_image": "Nur Bilddateien sind erlaubt",
            "invalid": "Nur Bilddateien sind erlaubt",
        }
    )

    def validate_image(self, value):  # type: ignore
        if value.size > settings.HOUSNKUH_VENDOR_IMAGE_MAX_BYTES:
            raise serializers.ValidationError("Datei ist zu groß. Maximum 5MB erlaubt.")
        content_type = getattr(value, "content_type", "") or ""
        if content_type and not content_type.startswith("image/"):
            raise serializers.ValidationError("Nur Bilddateien sind erlaubt")
        return value


class AdditionalBookingSerializer(serializers.Serializer):
    package_data = PackageSelectionSerializer()
    comments = serializers.CharField(required=False, allow_blank=True, default="")

    def validate_package_data(self, value):  # type: ignore
        if not any(count > 0 for count in value["package_counts"].values()):
            raise serializers.ValidationError("Bitte wählen Sie mindestens ein Paket aus.")
        return value


class PendingBookingSerializer(serializers.ModelSerializer):
    class Meta:
        model = PendingBooking
        fields = [
            "id",
            "package_data",
            "price_breakdown",
            "comments",
            "status",
            "rejection_reason",
            "created_at",
            "processed_at",
        ]
        read_only_fields = fields
