"""Serializers for the vendor administration API."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.users.models import CustomUser, PendingBooking, VendorProfile


class VendorListSerializer(serializers.ModelSerializer):
    """Serializer for listing vendor accounts."""

    unternehmen = serializers.CharField(source="vendor_profile.unternehmen", default="", read_only=True)
    contact_status_display = serializers.CharField(source="get_contact_status_display", read_only=True)
    has_pending_booking = serializers.BooleanField(read_only=True)

    class Meta:
        model = CustomUser
        fields = [
            "id",
            "email",
            "name",
            "phone",
            "unternehmen",
            "contact_status",
            "contact_status_display",
            "newsletter_confirmed",
            "registration_status",
            "trial_start_date",
            "trial_end_date",
            "is_publicly_visible",
            "has_pending_booking",
            "created_at",
        ]
        read_only_fields = fields


class VendorDetailSerializer(VendorListSerializer):
    """Detailed serializer for a single vendor including address and profile."""

    adresse = serializers.SerializerMethodField()
    verify_status = serializers.ChoiceField(
        source="vendor_profile.verify_status",
        choices=VendorProfile.VerifyStatus.choices,
        required=False,
    )

    class Meta(VendorListSerializer.Meta):
        fields = VendorListSerializer.Meta.fields + ["adresse", "verify_status", "registration_date"]
        read_only_fields = [field for field in fields if field not in {"is_publicly_visible", "verify_status"}]

    def get_adresse(self, obj: CustomUser) -> dict[str, str] | None:
        address = obj.primary_address
        return address.as_dict() if address else None

    def update(self, instance, validated_data):  # type: ignore
        profile_data = validated_data.pop("vendor_profile", {})
        instance = super().update(instance, validated_data)
        if "verify_status" in profile_data:
            profile, _created = VendorProfile.objects.get_or_create(user=instance)
            profile.verify_status = profile_data["verify_status"]
            profile.save(update_fields=["verify_status", "updated_at"])
        return instance


class AdminPendingBookingSerializer(serializers.ModelSerializer):
    """Pending booking with the vendor's contact data for the admin queue."""

    user = serializers.SerializerMethodField()

    class Meta:
        model = PendingBooking
        fields = [
            "id",
            "user",
            "package_data",
            "price_breakdown",
            "comments",
            "status",
            "created_at",
        ]
        read_only_fields = fields

    def get_user(self, obj: PendingBooking) -> dict:
        user = obj.user
        address = user.primary_address
        profile = getattr(user, "vendor_profile", None)
        return {
            "id": user.pk,
            "name": user.name,
            "email": user.email,
            "phone": user.phone,
            "unternehmen": profile.unternehmen if profile else "",
            "contact_status": user.contact_status,
            "adresse": address.as_dict() if address else None,
        }
