"""Tests for monthly revenue, projections and the dashboard overview."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from apps.rentals.models import Mietfach, Vertrag, VertragService
from apps.revenue import services, tasks
from apps.revenue.models import MonthlyRevenue
from apps.users.models import PendingBooking, User


def _vendor(email: str = "hof@example.com") -> User:
    return User.objects.create_user(email=email, password="Sicher!Pass1", name="Hof Müller", is_full_account=True)


def _contract(
    user: User,
    services_: list[tuple[Mietfach, Decimal]],
    start: date,
    end: date,
    *,
    status: str = Vertrag.Status.ACTIVE,
    paid_from: date | None = None,
) -> Vertrag:
    contract = Vertrag.objects.create(
        user=user,
        status=status,
        scheduled_start_date=start,
        availability_from=start,
        availability_to=end,
        total_monthly_price=sum((price for _, price in services_), Decimal("0.00")),
        ist_probemonat_buchung=paid_from is not None,
        zahlungspflichtig_ab=paid_from,
    )
    for mietfach, price in services_:
        VertragService.objects.create(
            vertrag=contract, mietfach=mietfach, mietbeginn=start, mietende=end, monatspreis=price
        )
    return contract


@pytest.fixture
def regal() -> Mietfach:
    return Mietfach.objects.create(bezeichnung="R-01", typ=Mietfach.Typ.REGAL)


@pytest.fixture
def tisch() -> Mietfach:
    return Mietfach.objects.create(bezeichnung="T-01", typ=Mietfach.Typ.VERKAUFSTISCH)


@pytest.fixture
def trial_contract(regal, tisch) -> Vertrag:
    # 6 months from 15.01. plus the free trial month, paid from 15.02.
    return _contract(
        _vendor(),
        [(regal, Decimal("35.00")), (tisch, Decimal("40.00"))],
        date(2026, 1, 15),
        date(2026, 8, 15),
        status=Vertrag.Status.SCHEDULED,
        paid_from=date(2026, 2, 15),
    )


def test_month_range_is_half_open() -> None:
    february = services.month_range(2026, 2)

    assert february.start_date == date(2026, 2, 1)
    assert february.end_date == date(2026, 3, 1)
    with pytest.raises(services.RevenueError):
        services.month_range(2026, 13)


def test_prorated_amount_counts_days_within_the_month() -> None:
    march = services.month_range(2026, 3)

    late_start = services.prorated_amount(Decimal("62.00"), date(2026, 3, 17), date(2026, 9, 1), march)
    not_started = services.prorated_amount(Decimal("62.00"), date(2026, 4, 1), date(2026, 9, 1), march)

    # 15 of 31 days
    assert late_start.rounded().amount == Decimal("30.00")
    assert not_started.amount == Decimal("0")


@pytest.mark.django_db
def test_trial_month_earns_nothing_and_counts_as_trial(trial_contract) -> None:
    january = services.summarize_month(2026, 1)

    assert january.gesamteinnahmen == Decimal("0.00")
    assert january.anzahl_aktive_vertraege == 0
    assert january.anzahl_probemonat_vertraege == 1
    assert [line.anzahl_probemonat_vertraege for line in january.einnahmen_pro_mietfach] == [1, 1]


@pytest.mark.django_db
def test_revenue_starts_prorated_at_paid_from(trial_contract) -> None:
    february = services.summarize_month(2026, 2)

    # 14 of 28 days
    assert february.gesamteinnahmen == Decimal("37.50")
    assert february.anzahl_aktive_vertraege == 1
    assert february.anzahl_probemonat_vertraege == 0
    assert {line.bezeichnung: line.einnahmen for line in february.einnahmen_pro_mietfach} == {
        "R-01": Decimal("17.50"),
        "T-01": Decimal("20.00"),
    }

    assert services.summarize_month(2026, 3).gesamteinnahmen == Decimal("75.00")
    # ends 15.08. exclusive: 14 of 31 days
    assert services.summarize_month(2026, 8).gesamteinnahmen == Decimal("33.87")
    assert services.summarize_month(2026, 9).anzahl_aktive_vertraege == 0


@pytest.mark.django_db
def test_include_trial_revenue_counts_from_booking_start(trial_contract) -> None:
    january = services.summarize_month(2026, 1, include_trial_revenue=True)

    # 17 of 31 days
    assert january.gesamteinnahmen == Decimal("41.13")
    assert january.anzahl_probemonat_vertraege == 1


@pytest.mark.django_db
def test_cancelled_contracts_earn_nothing_and_expired_ones_keep_history(regal, tisch) -> None:
    vendor = _vendor()
    _contract(vendor, [(regal, Decimal("35.00"))], date(2026, 1, 1), date(2026, 7, 1), status=Vertrag.Status.CANCELLED)
    _contract(vendor, [(tisch, Decimal("40.00"))], date(2025, 10, 1), date(2026, 2, 1), status=Vertrag.Status.EXPIRED)

    january = services.summarize_month(2026, 1)

    assert january.gesamteinnahmen == Decimal("40.00")
    assert [line.bezeichnung for line in january.einnahmen_pro_mietfach] == ["T-01"]


@pytest.mark.django_db
def test_calculate_monthly_revenue_overwrites_stored_month(regal) -> None:
    vendor = _vendor()
    _contract(vendor, [(regal, Decimal("35.00"))], date(2026, 1, 1), date(2026, 7, 1))

    first = services.calculate_monthly_revenue(2026, 3)
    _contract(_vendor("imker@example.com"), [(regal, Decimal("20.00"))], date(2026, 3, 1), date(2026, 4, 1))
    second = services.calculate_monthly_revenue(2026, 3)

    assert MonthlyRevenue.objects.count() == 1
    assert second.pk == first.pk
    assert second.gesamteinnahmen == Decimal("55.00")
    assert second.anzahl_aktive_vertraege == 2
    assert second.einnahmen_pro_mietfach[0]["einnahmen"] == "55.00"


@pytest.mark.django_db
def test_projections_cover_the_following_months(trial_contract) -> None:
    projections = services.project_revenue(2, today=date(2026, 1, 20))

    assert [projection.monat for projection in projections] == [date(2026, 2, 1), date(2026, 3, 1)]
    assert all(projection.is_projection for projection in projections)
    assert [projection.gesamteinnahmen for projection in projections] == [Decimal("37.50"), Decimal("75.00")]

    with pytest.raises(services.RevenueError):
        services.project_revenue(0)


@pytest.mark.django_db
def test_revenue_statistics_sum_stored_months(trial_contract) -> None:
    services.calculate_monthly_revenue(2026, 2)
    services.calculate_monthly_revenue(2026, 3)

    stats = services.revenue_statistics()

    assert stats["total_revenue"] == "112.50"
    assert stats["average_monthly_revenue"] == "56.25"
    assert stats["months_tracked"] == 2
    assert stats["total_active_contracts"] == 2


@pytest.mark.django_db
def test_revenue_statistics_without_data() -> None:
    stats = services.revenue_statistics()

    assert stats["total_revenue"] == "0.00"
    assert stats["months_tracked"] == 0


@pytest.mark.django_db
def test_task_stores_previous_and_current_month() -> None:
    calculated = tasks.calculate_monthly_revenue()

    assert len(calculated) == 2
    assert MonthlyRevenue.objects.count() == 2


@pytest.mark.django_db
def test_dashboard_overview_counts(trial_contract, regal, tisch) -> None:
    Mietfach.objects.create(bezeichnung="K-01", typ=Mietfach.Typ.KUEHLREGAL, verfuegbar=False)
    pending_vendor = _vendor("imker@example.com")
    PendingBooking.objects.create(user=pending_vendor, package_data={"package_counts": {"block-a": 1}})
    User.objects.create_user(email="leser@example.com", mail_newsletter=True, newsletter_confirmed=True)
    User.objects.create_user(email="neu@example.com", mail_newsletter=True)

    overview = services.dashboard_overview(today=date(2026, 3, 10))

    assert overview["newsletter"] == {"total": 1, "pending": 1}
    assert overview["vendors"]["total"] == 2
    assert overview["mietfaecher"] == {"total": 3, "verfuegbar": 2, "belegt": 2}
    assert overview["vertraege"]["total"] == 1
    assert overview["vertraege"]["by_status"]["scheduled"] == 1
    assert overview["vertraege"]["im_probemonat"] == 0
    assert overview["pending_bookings"] == 1
    assert overview["revenue"]["current_month"]["gesamteinnahmen"] == "75.00"
    assert overview["revenue"]["next_month"]["is_projection"] is True
    assert [vendor["email"] for vendor in overview["recent_vendors"]] == ["imker@example.com", "hof@example.com"]
