"""Serializers for the pricing API."""

from __future__ import annotations

from typing import Any

from rest_framework import serializers  # type: ignore

from . import catalog
from .services import PackageSelection, PriceCalculationError, calculate_price


class ZusatzleistungenField(serializers.DictField):
    child = serializers.BooleanField()


class PackageSelectionSerializer(serializers.Serializer):
    package_counts = serializers.DictField(child=serializers.IntegerField(min_value=0))
    rental_duration = serializers.IntegerField(
        min_value=catalog.MIN_RENTAL_MONTHS,
        max_value=catalog.MAX_RENTAL_MONTHS,
    )
    provision_type = serializers.ChoiceField(
        choices=[provision.id for provision in catalog.PROVISION_TYPES],
        default=catalog.BASIC_PROVISION,
    )
    zusatzleistungen = ZusatzleistungenField(required=False, default=dict)

    def validate_package_counts(self, value: dict[str, int]) -> dict[str, int]:
        unknown = [package_id for package_id in value if catalog.get_package(package_id) is None]
        if unknown:
            raise serializers.ValidationError(f"Unbekannte Pakete: {', '.join(sorted(unknown))}")
        return value

    def validate_zusatzleistungen(self, value: dict[str, bool]) -> dict[str, bool]:
        unknown = [service_id for service_id in value if catalog.get_zusatzleistung(service_id) is None]
        if unknown:
            raise serializers.ValidationError(f"Unbekannte Zusatzleistungen: {', '.join(sorted(unknown))}")
        return value

    def to_selection(self) -> PackageSelection:
        return PackageSelection.from_payload(self.validated_data)

    def calculate(self) -> dict[str, Any] | None:
        try:
            breakdown = calculate_price(self.to_selection())
        except PriceCalculationError as exc:
            raise serializers.ValidationError({"package_counts": str(exc)})
        return breakdown.to_dict() if breakdown else None


def serialize_catalog() -> dict[str, Any]:
    return {
        "packages": [
            {
                "id": package.id,
                "name": package.name,
                "description": package.description,
                "detail": package.detail,
                "category": package.category,
                "price": str(package.price) if package.price is not None else None,
                "price_display": package.price_display,
                "price_on_request": package.price_on_request,
            }
            for package in catalog.PACKAGE_OPTIONS
        ],
        "provision_types": [
            {
                "id": provision.id,
                "name": provision.name,
                "rate": provision.rate,
                "description": provision.description,
                "benefits": list(provision.benefits),
                "allows_zusatzleistungen": provision.allows_zusatzleistungen,
            }
            for provision in catalog.PROVISION_TYPES
        ],
        "zusatzleistungen": [
            {
                "id": service.id,
                "name": service.name,
                "description": service.description,
                "monthly_price": str(service.monthly_price),
            }
            for service in catalog.ZUSATZLEISTUNGEN
        ],
        "discount_tiers": [
            {"min_months": months, "rate": str(rate)} for months, rate in catalog.DISCOUNT_TIERS
        ],
        "rental_duration": {"min": catalog.MIN_RENTAL_MONTHS, "max": catalog.MAX_RENTAL_MONTHS},
    }
