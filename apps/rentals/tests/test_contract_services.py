"""Tests for contract creation, availability and contract lifecycle services."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from apps.pricing import catalog
from apps.rentals.models import Mietfach, PackageTracking, Vertrag, VertragService
from apps.rentals.services import (
    MietfachConflictError,
    PackageTrackingError,
    PendingBookingError,
    advance_package_status,
    check_availability,
    confirm_pending_booking,
    find_available_mietfaecher,
    reject_pending_booking,
    update_contract_statuses,
)
from apps.users.models import PendingBooking, User

PACKAGE_DATA = {
    "package_counts": {"block-a": 2, "block-table": 1},
    "rental_duration": 6,
    "provision_type": "basic",
    "zusatzleistungen": {"lagerservice": False, "versandservice": False},
}


def _vendor(email: str = "hof@example.com", name: str = "Hof Müller") -> User:
    return User.objects.create_user(email=email, password="Sicher!Pass1", name=name, is_full_account=True)


def _pending(user: User, package_data: dict | None = None) -> PendingBooking:
    return PendingBooking.objects.create(user=user, package_data=package_data or PACKAGE_DATA)


def _contract(user: User, mietfach: Mietfach, start: date, end: date, status: str = Vertrag.Status.ACTIVE) -> Vertrag:
    contract = Vertrag.objects.create(
        user=user,
        status=status,
        scheduled_start_date=start,
        availability_from=start,
        availability_to=end,
        total_monthly_price=Decimal("35.00"),
    )
    VertragService.objects.create(
        vertrag=contract, mietfach=mietfach, mietbeginn=start, mietende=end, monatspreis=Decimal("35.00")
    )
    return contract


@pytest.fixture
def admin_user() -> User:
    return User.objects.create_user(email="admin@housnkuh.de", password="Admin!Pass1", role=User.RoleChoices.ADMIN)


@pytest.fixture
def regal() -> Mietfach:
    return Mietfach.objects.create(bezeichnung="R-01", typ=Mietfach.Typ.REGAL)


@pytest.fixture
def tisch() -> Mietfach:
    return Mietfach.objects.create(bezeichnung="T-01", typ=Mietfach.Typ.VERKAUFSTISCH)


@pytest.mark.django_db
def test_confirm_creates_scheduled_trial_contract(admin_user, regal, tisch, mailoutbox) -> None:
    vendor = _vendor()
    pending = _pending(vendor)

    confirmation = confirm_pending_booking(
        vendor,
        admin_user,
        mietfach_ids=[regal.pk, tisch.pk],
        scheduled_start=date(2026, 1, 15),
    )

    contract = confirmation.contract
    assert contract.status == Vertrag.Status.SCHEDULED
    assert contract.ist_probemonat_buchung is True
    assert contract.zahlungspflichtig_ab == date(2026, 2, 15)
    # six months plus the free trial month
    assert contract.availability_from == date(2026, 1, 15)
    assert contract.availability_to == date(2026, 8, 15)
    assert contract.contract_duration == 6
    assert contract.discount == Decimal("0.050")
    assert contract.provisionssatz == 4
    assert contract.total_monthly_price == Decimal("75.00")
    assert contract.services.count() == 2

    pending.refresh_from_db()
    assert pending.status == PendingBooking.Status.COMPLETED
    assert pending.processed_by == admin_user

    assert confirmation.email_sent is True
    assert len(mailoutbox) == 1
    assert contract.contract_number in mailoutbox[0].body
    assert "R-01" in mailoutbox[0].body


@pytest.mark.django_db
def test_confirm_uses_price_adjustments(admin_user, regal) -> None:
    vendor = _vendor()
    _pending(vendor)

    confirmation = confirm_pending_booking(
        vendor, admin_user, mietfach_ids=[regal.pk], price_adjustments={regal.pk: Decimal("29.50")}
    )

    service = confirmation.contract.services.get()
    assert service.monatspreis == Decimal("29.50")
    assert confirmation.contract.total_monthly_price == Decimal("29.50")


@pytest.mark.django_db
def test_confirm_requires_price_for_on_request_mietfach(admin_user) -> None:
    sonder = Mietfach.objects.create(bezeichnung="S-01", typ=Mietfach.Typ.SONSTIGES)
    vendor = _vendor()
    _pending(vendor)

    with pytest.raises(PendingBookingError):
        confirm_pending_booking(vendor, admin_user, mietfach_ids=[sonder.pk])

    assert Vertrag.objects.count() == 0
    assert vendor.has_pending_booking is True


@pytest.mark.django_db
def test_confirm_rejects_occupied_mietfach(admin_user, regal) -> None:
    other = _vendor(email="imker@example.com", name="Imkerei Berg")
    _contract(other, regal, date(2026, 1, 1), date(2026, 4, 1))
    vendor = _vendor()
    _pending(vendor)

    with pytest.raises(MietfachConflictError) as excinfo:
        confirm_pending_booking(vendor, admin_user, mietfach_ids=[regal.pk], scheduled_start=date(2026, 3, 1))

    result = excinfo.value.results[0]
    assert result.next_available == date(2026, 4, 1)
    assert result.conflicts[0].vendor_name == "Imkerei Berg"
    assert Vertrag.objects.filter(user=vendor).count() == 0
    assert vendor.has_pending_booking is True


@pytest.mark.django_db
def test_confirm_rejects_mietfach_out_of_service(admin_user, regal) -> None:
    regal.verfuegbar = False
    regal.save()
    vendor = _vendor()
    _pending(vendor)

    with pytest.raises(MietfachConflictError):
        confirm_pending_booking(vendor, admin_user, mietfach_ids=[regal.pk])


@pytest.mark.django_db
def test_confirm_without_pending_booking_fails(admin_user, regal) -> None:
    vendor = _vendor()

    with pytest.raises(PendingBookingError, match="Keine ausstehende Buchung"):
        confirm_pending_booking(vendor, admin_user, mietfach_ids=[regal.pk])


@pytest.mark.django_db
def test_confirm_requires_at_least_one_mietfach(admin_user) -> None:
    vendor = _vendor()
    _pending(vendor)

    with pytest.raises(PendingBookingError, match="Mindestens ein Mietfach"):
        confirm_pending_booking(vendor, admin_user, mietfach_ids=[])


@pytest.mark.django_db
def test_confirm_creates_tracking_for_booked_addons(admin_user, regal) -> None:
    vendor = _vendor()
    _pending(
        vendor,
        {**PACKAGE_DATA, "provision_type": "premium", "zusatzleistungen": {"lagerservice": True, "versandservice": False}},
    )

    contract = confirm_pending_booking(vendor, admin_user, mietfach_ids=[regal.pk]).contract

    assert contract.lagerservice is True
    assert contract.versandservice is False
    assert contract.provisionssatz == 7
    assert contract.lagerservice_monatlich == catalog.get_zusatzleistung("lagerservice").monthly_price
    assert contract.monthly_addons == Decimal("20")
    assert list(contract.package_trackings.values_list("package_typ", flat=True)) == ["lagerservice"]


@pytest.mark.django_db
def test_reject_marks_pending_booking_cancelled(admin_user, mailoutbox) -> None:
    vendor = _vendor()
    _pending(vendor)

    pending = reject_pending_booking(vendor, admin_user, "Kein Platz frei")

    assert pending.status == PendingBooking.Status.CANCELLED
    assert pending.rejection_reason == "Kein Platz frei"
    assert len(mailoutbox) == 1


@pytest.mark.django_db
def test_cancelled_contracts_do_not_block(regal) -> None:
    vendor = _vendor()
    _contract(vendor, regal, date(2026, 1, 1), date(2026, 4, 1), status=Vertrag.Status.CANCELLED)
    _contract(vendor, regal, date(2025, 1, 1), date(2025, 4, 1), status=Vertrag.Status.EXPIRED)

    assert check_availability(regal, date(2026, 2, 1), date(2026, 3, 1)).available is True


@pytest.mark.django_db
def test_scheduled_contracts_block(regal) -> None:
    vendor = _vendor()
    contract = _contract(vendor, regal, date(2026, 1, 1), date(2026, 4, 1), status=Vertrag.Status.SCHEDULED)

    result = check_availability(regal, date(2026, 2, 1), date(2026, 5, 1))
    assert result.available is False
    assert result.conflicts[0].booking_id == contract.pk

    excluded = check_availability(regal, date(2026, 2, 1), date(2026, 5, 1), exclude_contract_id=contract.pk)
    assert excluded.available is True


@pytest.mark.django_db
def test_find_available_mietfaecher_filters_busy_and_type(regal, tisch) -> None:
    Mietfach.objects.create(bezeichnung="R-02", typ=Mietfach.Typ.REGAL, verfuegbar=False)
    _contract(_vendor(), tisch, date(2026, 1, 1), date(2026, 6, 1))

    available = find_available_mietfaecher(date(2026, 2, 1), date(2026, 3, 1))
    assert [mietfach.bezeichnung for mietfach in available] == ["R-01"]

    later = find_available_mietfaecher(date(2026, 6, 1), date(2026, 7, 1), typ=Mietfach.Typ.VERKAUFSTISCH)
    assert [mietfach.bezeichnung for mietfach in later] == ["T-01"]


@pytest.mark.django_db
def test_update_contract_statuses(regal, tisch) -> None:
    vendor = _vendor()
    due = _contract(vendor, regal, date(2026, 3, 1), date(2026, 9, 1), status=Vertrag.Status.SCHEDULED)
    future = _contract(vendor, tisch, date(2026, 5, 1), date(2026, 9, 1), status=Vertrag.Status.SCHEDULED)
    ended = _contract(vendor, tisch, date(2025, 1, 1), date(2026, 3, 1), status=Vertrag.Status.ACTIVE)

    result = update_contract_statuses(today=date(2026, 3, 10))

    assert result == {"activated": 1, "expired": 1}
    due.refresh_from_db()
    future.refresh_from_db()
    ended.refresh_from_db()
    assert due.status == Vertrag.Status.ACTIVE
    assert due.actual_start_date == date(2026, 3, 1)
    assert future.status == Vertrag.Status.SCHEDULED
    assert ended.status == Vertrag.Status.EXPIRED


@pytest.mark.django_db
def test_package_status_moves_forward_only(admin_user, regal) -> None:
    contract = _contract(_vendor(), regal, date(2026, 1, 1), date(2026, 4, 1))
    contract.lagerservice = True
    contract.save()
    tracking = PackageTracking.objects.create(vertrag=contract, package_typ=PackageTracking.PackageTyp.LAGERSERVICE)

    tracking = advance_package_status(tracking, PackageTracking.Status.ANGEKOMMEN, admin=admin_user)
    assert tracking.ankunft_datum is not None
    contract.refresh_from_db()
    assert contract.lagerservice_bestaetigt is None

    tracking = advance_package_status(tracking, PackageTracking.Status.EINGELAGERT, admin=admin_user)
    contract.refresh_from_db()
    assert tracking.einlagerung_datum is not None
    assert contract.lagerservice_bestaetigt is not None

    with pytest.raises(PackageTrackingError):
        advance_package_status(tracking, PackageTracking.Status.ANGEKOMMEN)
