from decimal import Decimal

import pytest

from apps.pricing import catalog
from apps.pricing.services import (
    PackageSelection,
    PriceCalculationError,
    calculate_price,
    normalize_selection,
)


def _selection(counts, duration=3, provision="basic", services=()):
    return PackageSelection(
        package_counts=counts,
        rental_duration=duration,
        provision_type=provision,
        zusatzleistungen=frozenset(services),
    )


@pytest.mark.parametrize(
    ("months", "expected"),
    [
        (1, Decimal("0")),
        (3, Decimal("0")),
        (5, Decimal("0")),
        (6, Decimal("0.05")),
        (11, Decimal("0.05")),
        (12, Decimal("0.10")),
        (24, Decimal("0.10")),
    ],
)
def test_discount_step_function(months, expected):
    assert catalog.discount_rate_for(months) == expected


def test_block_a_and_table_for_six_months():
    breakdown = calculate_price(_selection({"block-a": 2, "block-table": 1}, duration=6))

    assert breakdown.monthly_total == Decimal("110")
    assert breakdown.subtotal == Decimal("660")
    assert breakdown.discount_rate == Decimal("0.05")
    assert breakdown.discount_amount == Decimal("33")
    assert breakdown.total == Decimal("627")
    assert breakdown.provision_rate == 4
    assert not breakdown.requires_manual_quote


def test_empty_selection_returns_none():
    assert calculate_price(_selection({})) is None
    assert calculate_price(_selection({"block-a": 0, "block-b": 0})) is None


def test_only_on_request_packages_flag_manual_quote():
    breakdown = calculate_price(_selection({"block-other": 2}, duration=12))

    assert breakdown.monthly_total == Decimal("0")
    assert breakdown.total == Decimal("0")
    assert breakdown.requires_manual_quote
    assert breakdown.on_request_packages == ("block-other",)
    line = breakdown.package_lines[0]
    assert line.price_on_request
    assert line.unit_price is None


def test_on_request_package_is_not_summed_with_priced_packages():
    breakdown = calculate_price(_selection({"block-other": 1, "block-b": 1}))

    assert breakdown.monthly_total == Decimal("15")
    assert breakdown.requires_manual_quote


def test_zusatzleistungen_only_apply_to_premium():
    basic = calculate_price(_selection({"block-b": 1}, services=["lagerservice", "versandservice"]))
    premium = calculate_price(
        _selection({"block-b": 1}, provision="premium", services=["lagerservice", "versandservice"])
    )

    assert basic.zusatzleistungen_costs == Decimal("0")
    assert basic.monthly_total == Decimal("15")
    assert premium.zusatzleistungen_costs == Decimal("25")
    assert premium.monthly_total == Decimal("40")
    assert premium.provision_rate == 7


def test_normalize_strips_addons_and_zero_counts():
    normalized = normalize_selection(
        _selection({"block-a": 1, "block-b": 0}, services=["lagerservice"])
    )

    assert dict(normalized.package_counts) == {"block-a": 1}
    assert normalized.zusatzleistungen == frozenset()


@pytest.mark.parametrize("duration", [0, 25, -3])
def test_duration_out_of_range_is_rejected(duration):
    with pytest.raises(PriceCalculationError):
        calculate_price(_selection({"block-a": 1}, duration=duration))


def test_unknown_package_is_rejected():
    with pytest.raises(PriceCalculationError):
        calculate_price(_selection({"block-z": 1}))


def test_selection_from_booking_form_payload():
    selection = PackageSelection.from_payload(
        {
            "package_counts": {"block-cold": "2"},
            "rental_duration": "12",
            "provision_type": "premium",
            "zusatzleistungen": {"lagerservice": True, "versandservice": False},
        }
    )

    assert selection.package_counts == {"block-cold": 2}
    assert selection.rental_duration == 12
    assert selection.zusatzleistungen == frozenset({"lagerservice"})

    breakdown = calculate_price(selection)
    # (2 x 50 + 20) x 12 = 1440, minus 10 %
    assert breakdown.total == Decimal("1296")
