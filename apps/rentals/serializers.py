"""Serializers for Mietfächer, contracts and package tracking."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Mietfach, PackageTracking, Vertrag, VertragService

DATE_ORDER_ERROR = "Das Enddatum muss nach dem Startdatum liegen."


class MietfachSerializer(serializers.ModelSerializer):
    typ_display = serializers.CharField(source="get_typ_display", read_only=True)
    list_price = serializers.DecimalField(max_digits=8, decimal_places=2, read_only=True, allow_null=True)

    class Meta:
        model = Mietfach
        fields = [
            "id",
            "bezeichnung",
            "typ",
            "typ_display",
            "beschreibung",
            "flaeche",
            "einheit",
            "preis",
            "list_price",
            "verfuegbar",
            "standort",
            "features",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]

    def validate_features(self, value):  # type: ignore
        if not isinstance(value, list):
            raise serializers.ValidationError("Ausstattung muss eine Liste sein.")
        return value


class DateRangeSerializer(serializers.Serializer):
    start = serializers.DateField()
    end = serializers.DateField()

    def validate(self, attrs):  # type: ignore
        if attrs["end"] <= attrs["start"]:
            raise serializers.ValidationError({"end": DATE_ORDER_ERROR})
        return attrs


class AvailabilityRequestSerializer(DateRangeSerializer):
    exclude_contract_id = serializers.IntegerField(required=False, allow_null=True)


class BatchAvailabilityRequestSerializer(DateRangeSerializer):
    mietfach_ids = serializers.ListField(child=serializers.IntegerField(min_value=1), allow_empty=False)


class AvailableMietfaecherQuerySerializer(DateRangeSerializer):
    typ = serializers.ChoiceField(choices=Mietfach.Typ.choices, required=False)


class VertragServiceSerializer(serializers.ModelSerializer):
    mietfach = MietfachSerializer(read_only=True)

    class Meta:
        model = VertragService
        fields = ["id", "mietfach", "mietbeginn", "mietende", "monatspreis"]


class VertragSerializer(serializers.ModelSerializer):
    contract_number = serializers.CharField(read_only=True)
    services = VertragServiceSerializer(many=True, read_only=True)
    gesamtpreis = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    can_cancel_trial = serializers.BooleanField(read_only=True)
    is_in_trial = serializers.BooleanField(read_only=True)

    class Meta:
        model = Vertrag
        fields = [
            "id",
            "contract_number",
            "status",
            "services",
            "package_configuration",
            "total_monthly_price",
            "contract_duration",
            "discount",
            "provisionssatz",
            "gesamtpreis",
            "scheduled_start_date",
            "actual_start_date",
            "availability_from",
            "availability_to",
            "ist_probemonat_buchung",
            "zahlungspflichtig_ab",
            "gekuendigt_in_probemonat",
            "probemonat_kuendigungsdatum",
            "is_in_trial",
            "can_cancel_trial",
            "lagerservice",
            "versandservice",
            "lagerservice_bestaetigt",
            "versandservice_aktiv",
            "created_at",
        ]
        read_only_fields = fields


class ConfirmPendingBookingSerializer(serializers.Serializer):
    assigned_mietfaecher = serializers.ListField(
        child=serializers.IntegerField(min_value=1),
        allow_empty=False,
        error_messages={"empty": "Mindestens ein Mietfach muss zugeordnet werden"},
    )
    price_adjustments = serializers.DictField(
        child=serializers.DecimalField(max_digits=8, decimal_places=2, min_value=0),
        required=False,
        default=dict,
    )
    scheduled_start_date = serializers.DateField(required=False, allow_null=True)

    def validate_price_adjustments(self, value):  # type: ignore
        adjustments = {}
        for key, price in value.items():
            try:
                adjustments[int(key)] = price
            except (TypeError, ValueError):
                raise serializers.ValidationError(f"Ungültige Mietfach-ID: {key}")
        return adjustments

    def validate(self, attrs):  # type: ignore
        unknown = set(attrs.get("price_adjustments", {})) - set(attrs["assigned_mietfaecher"])
        if unknown:
            raise serializers.ValidationError(
                {"price_adjustments": "Preisanpassungen nur für zugeordnete Mietfächer möglich."}
            )
        return attrs


class RejectPendingBookingSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default="")


class PackageTrackingSerializer(serializers.ModelSerializer):
    contract_number = serializers.CharField(source="vertrag.contract_number", read_only=True)
    vendor_email = serializers.EmailField(source="vertrag.user.email", read_only=True)

    class Meta:
        model = PackageTracking
        fields = [
            "id",
            "vertrag",
            "contract_number",
            "vendor_email",
            "package_typ",
            "status",
            "ankunft_datum",
            "einlagerung_datum",
            "versand_datum",
            "zustellung_datum",
            "bestaetigt_von",
            "notizen",
            "tracking_nummer",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "id",
            "status",
            "ankunft_datum",
            "einlagerung_datum",
            "versand_datum",
            "zustellung_datum",
            "bestaetigt_von",
            "created_at",
            "updated_at",
        ]

    def validate(self, attrs):  # type: ignore
        vertrag = attrs.get("vertrag")
        package_typ = attrs.get("package_typ")
        if vertrag is not None and package_typ and not getattr(vertrag, package_typ, False):
            raise serializers.ValidationError({"package_typ": "Diese Zusatzleistung ist im Vertrag nicht gebucht."})
        return attrs


class PackageStatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=PackageTracking.Status.choices)
    notizen = serializers.CharField(required=False, allow_blank=True, default="")
    tracking_nummer = serializers.CharField(required=False, allow_blank=True, default="")
