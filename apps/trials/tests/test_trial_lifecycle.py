"""Tests for store opening, trial activation and trial status updates."""

from __future__ import annotations

from datetime import timedelta

import pytest
from django.utils import timezone

from apps.rentals.models import Vertrag
from apps.trials import services, tasks
from apps.trials.models import StoreSettings
from apps.users.models import User


def _preregistered(email: str) -> User:
    return User.objects.create_user(
        email=email,
        password="Sicher!Pass1",
        is_full_account=True,
        registration_status=User.RegistrationStatus.PREREGISTERED,
    )


def _trial_vendor(email: str, ends_in: timedelta, **extra) -> User:
    now = timezone.now()
    return User.objects.create_user(
        email=email,
        password="Sicher!Pass1",
        is_full_account=True,
        registration_status=User.RegistrationStatus.TRIAL_ACTIVE,
        trial_start_date=now - timedelta(days=10),
        trial_end_date=now + ends_in,
        **extra,
    )


@pytest.mark.django_db
def test_store_settings_is_a_singleton() -> None:
    first = StoreSettings.load()
    second = StoreSettings(store_opening_enabled=True, opening_date=timezone.now())
    second.save()

    assert StoreSettings.objects.count() == 1
    assert second.pk == first.pk == 1
    stored = StoreSettings.load()
    assert stored.store_opening_enabled is True
    assert stored.created_at == first.created_at


@pytest.mark.django_db
def test_store_open_requires_enabled_flag_and_past_date() -> None:
    store = StoreSettings.load()
    assert not store.is_store_open()

    store.opening_date = timezone.now() - timedelta(hours=1)
    store.save()
    assert not store.is_store_open()

    store.store_opening_enabled = True
    store.save()
    assert store.is_store_open()
    assert store.days_until_opening() is None


@pytest.mark.django_db
def test_activate_preregistered_starts_trial_at_opening(mailoutbox) -> None:
    opening = timezone.now() - timedelta(days=2)
    StoreSettings.objects.create(store_opening_enabled=True, opening_date=opening)
    first = _preregistered("eins@example.com")
    second = _preregistered("zwei@example.com")
    untouched = User.objects.create_user(email="aktiv@example.com", is_full_account=True)

    result = services.activate_preregistered_vendors()

    assert result.activated == 2
    assert result.failed == 0
    for vendor in (first, second):
        vendor.refresh_from_db()
        assert vendor.registration_status == User.RegistrationStatus.TRIAL_ACTIVE
        assert vendor.trial_start_date == opening
        assert vendor.trial_end_date == opening + timedelta(days=30)
    untouched.refresh_from_db()
    assert untouched.registration_status == ""
    assert len(mailoutbox) == 2


@pytest.mark.django_db
def test_vendor_registered_after_opening_starts_trial_at_registration() -> None:
    opening = timezone.now() - timedelta(days=40)
    registered = timezone.now() - timedelta(hours=2)
    StoreSettings.objects.create(store_opening_enabled=True, opening_date=opening)
    late = _preregistered("spaet@example.com")
    late.registration_date = registered
    late.save()

    services.activate_preregistered_vendors()

    late.refresh_from_db()
    assert late.trial_start_date == registered
    assert late.trial_end_date == registered + timedelta(days=30)


@pytest.mark.django_db
def test_activate_preregistered_requires_open_store() -> None:
    StoreSettings.objects.create(store_opening_enabled=True, opening_date=timezone.now() + timedelta(days=5))
    _preregistered("eins@example.com")

    with pytest.raises(services.TrialError):
        services.activate_preregistered_vendors()

    assert tasks.activate_on_store_opening()["skipped"] is True


@pytest.mark.django_db
def test_manual_activation_only_for_preregistered() -> None:
    vendor = _preregistered("eins@example.com")

    services.activate_trial(vendor)

    vendor.refresh_from_db()
    assert vendor.registration_status == User.RegistrationStatus.TRIAL_ACTIVE
    assert vendor.trial_days_remaining == 30
    with pytest.raises(services.TrialError):
        services.activate_trial(vendor)


@pytest.mark.django_db
def test_update_trial_statuses_expires_and_warns_once(mailoutbox) -> None:
    expired = _trial_vendor("alt@example.com", timedelta(hours=-1))
    ending = _trial_vendor("bald@example.com", timedelta(days=5))
    running = _trial_vendor("neu@example.com", timedelta(days=20))

    result = services.update_trial_statuses()

    assert result == {"checked": 3, "expired": 1, "warned": 1}
    expired.refresh_from_db()
    ending.refresh_from_db()
    running.refresh_from_db()
    assert expired.registration_status == User.RegistrationStatus.TRIAL_EXPIRED
    assert ending.trial_warning_sent_at is not None
    assert running.trial_warning_sent_at is None
    assert {message.to[0] for message in mailoutbox} == {"alt@example.com", "bald@example.com"}

    again = services.update_trial_statuses()

    assert again == {"checked": 2, "expired": 0, "warned": 0}
    assert len(mailoutbox) == 2


@pytest.mark.django_db
def test_trial_warning_counts_days_from_the_given_time(mailoutbox) -> None:
    vendor = _trial_vendor("bald@example.com", timedelta(days=20))

    result = services.update_trial_statuses(now=vendor.trial_end_date - timedelta(days=3))

    assert result["warned"] == 1
    assert mailoutbox[0].subject == "Ihr Probemonat endet in 3 Tagen"


@pytest.mark.django_db
def test_trial_statistics_counts_per_status() -> None:
    _preregistered("eins@example.com")
    _trial_vendor("bald@example.com", timedelta(days=5))

    stats = services.trial_statistics()

    assert stats["preregistered"] == 1
    assert stats["trial_active"] == 1
    assert stats["total"] == 2


@pytest.mark.django_db
def test_cancel_trial_booking_after_trial_month_fails() -> None:
    vendor = _trial_vendor("bald@example.com", timedelta(days=5))
    today = timezone.localdate()
    contract = Vertrag.objects.create(
        user=vendor,
        status=Vertrag.Status.ACTIVE,
        scheduled_start_date=today - timedelta(days=40),
        availability_from=today - timedelta(days=40),
        availability_to=today + timedelta(days=50),
        ist_probemonat_buchung=True,
        zahlungspflichtig_ab=today - timedelta(days=10),
    )

    with pytest.raises(services.TrialError):
        services.cancel_trial_booking(contract)

    contract.refresh_from_db()
    assert contract.status == Vertrag.Status.ACTIVE
