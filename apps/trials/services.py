"""Trial (Probemonat) lifecycle services."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any

from django.conf import settings  # type: ignore
from django.db import transaction  # type: ignore
from django.utils import timezone  # type: ignore

from apps.notifications.services import (
    send_cancellation_confirmation_email,
    send_trial_activation_email,
    send_trial_ending_email,
    send_trial_expired_email,
)
from apps.rentals.models import Vertrag
from apps.users.models import CustomUser

from .models import StoreSettings

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from django.db.models import QuerySet  # type: ignore

logger = logging.getLogger(__name__)


class TrialError(Exception):
    """Raised when a trial cannot be activated or a trial booking cannot be cancelled."""


@dataclass
class TrialActivationResult:
    activated: int = 0
    failed: int = 0
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"activated": self.activated, "failed": self.failed, "errors": self.errors}


def _vendors() -> "QuerySet[CustomUser]":
    return CustomUser.objects.filter(role=CustomUser.RoleChoices.VENDOR)


def _start_trial(user: CustomUser, start: datetime) -> None:
    user.registration_status = CustomUser.RegistrationStatus.TRIAL_ACTIVE
    user.trial_start_date = start
    user.trial_end_date = start + timedelta(days=settings.HOUSNKUH_TRIAL_DAYS)
    user.trial_warning_sent_at = None
    user.save(update_fields=["registration_status", "trial_start_date", "trial_end_date", "trial_warning_sent_at"])
    logger.info(f"Trial activated for {user.email} until {user.trial_end_date.isoformat()}")
    send_trial_activation_email(user)


def activate_preregistered_vendors() -> TrialActivationResult:
    """Start the trial of every pre-registered vendor once the store has opened.

    The trial starts at the opening date, not at the time the job runs.
    Vendors who registered after the opening start at their registration.
    """

    store = StoreSettings.load()
    if not store.is_store_open():
        raise TrialError("Der Store ist noch nicht eröffnet.")

    result = TrialActivationResult()
    for vendor in _vendors().filter(registration_status=CustomUser.RegistrationStatus.PREREGISTERED):
        try:
            start = max(store.opening_date, vendor.registration_date or store.opening_date)
            _start_trial(vendor, start)
        except Exception as e:
            result.failed += 1
            result.errors.append(f"{vendor.email}: {e}")
            logger.error(f"Failed to activate trial for {vendor.email}: {e}", exc_info=True)
        else:
            result.activated += 1
    logger.info(f"Trial activation finished: {result.activated} activated, {result.failed} failed")
    return result


def activate_trial(user: CustomUser) -> CustomUser:
    """Manual activation by an administrator; the trial starts now."""

    if not user.is_vendor:
        raise TrialError("Der Benutzer ist kein Direktvermarkter.")
    if user.registration_status != CustomUser.RegistrationStatus.PREREGISTERED:
        raise TrialError(
            f"Probemonat kann nicht aktiviert werden - aktueller Status: {user.registration_status or 'keiner'}"
        )
    _start_trial(user, timezone.now())
    return user


def update_trial_statuses(now: datetime | None = None) -> dict[str, int]:
    """Expire finished trials and send one warning shortly before the end."""

    now = now or timezone.now()
    warning_window = timedelta(days=settings.HOUSNKUH_TRIAL_WARNING_DAYS)
    checked = expired = warned = 0

    active_trials = _vendors().filter(
        registration_status=CustomUser.RegistrationStatus.TRIAL_ACTIVE,
        trial_end_date__isnull=False,
    )
    for vendor in active_trials:
        checked += 1
        if now >= vendor.trial_end_date:
            vendor.registration_status = CustomUser.RegistrationStatus.TRIAL_EXPIRED
            vendor.save(update_fields=["registration_status"])
            expired += 1
            logger.info(f"Trial of {vendor.email} expired")
            send_trial_expired_email(vendor)
        elif vendor.trial_end_date - now <= warning_window and vendor.trial_warning_sent_at is None:
            days_remaining = vendor.trial_days_remaining_at(now) or 0
            if send_trial_ending_email(vendor, days_remaining):
                vendor.trial_warning_sent_at = now
                vendor.save(update_fields=["trial_warning_sent_at"])
                warned += 1

    return {"checked": checked, "expired": expired, "warned": warned}


def trial_statistics() -> dict[str, int]:
    counts = {status: 0 for status in CustomUser.RegistrationStatus.values}
    for row in _vendors().exclude(registration_status="").values_list("registration_status", flat=True):
        counts[row] = counts.get(row, 0) + 1
    counts["total"] = sum(counts.values())
    return counts


def trial_status(user: CustomUser) -> dict[str, Any]:
    trial_bookings = Vertrag.objects.filter(user=user, ist_probemonat_buchung=True).order_by("-created_at")
    return {
        "registration_status": user.registration_status,
        "trial_start_date": user.trial_start_date,
        "trial_end_date": user.trial_end_date,
        "days_remaining": user.trial_days_remaining,
        "is_trial_active": user.registration_status == CustomUser.RegistrationStatus.TRIAL_ACTIVE,
        "trial_bookings": [
            {
                "id": contract.pk,
                "contract_number": contract.contract_number,
                "status": contract.status,
                "scheduled_start_date": contract.scheduled_start_date,
                "zahlungspflichtig_ab": contract.zahlungspflichtig_ab,
                "gekuendigt_in_probemonat": contract.gekuendigt_in_probemonat,
                "can_cancel": contract.can_cancel_trial,
            }
            for contract in trial_bookings
        ],
    }


def cancel_trial_booking(contract: Vertrag, reason: str = "") -> Vertrag:
    """Cancel a trial booking free of charge while the trial month runs.

    The contract stops blocking its Mietfächer immediately.
    """

    with transaction.atomic():
        contract = Vertrag.objects.select_for_update().get(pk=contract.pk)
        if not contract.ist_probemonat_buchung:
            raise TrialError("Dieser Vertrag ist keine Probemonat-Buchung.")
        if contract.gekuendigt_in_probemonat or contract.status == Vertrag.Status.CANCELLED:
            raise TrialError("Dieser Vertrag wurde bereits gekündigt.")
        if contract.status not in Vertrag.BLOCKING_STATUSES:
            raise TrialError("Nur laufende oder geplante Verträge können gekündigt werden.")
        if contract.zahlungspflichtig_ab is None or timezone.localdate() >= contract.zahlungspflichtig_ab:
            raise TrialError("Der Probemonat ist bereits abgelaufen.")

        contract.status = Vertrag.Status.CANCELLED
        contract.gekuendigt_in_probemonat = True
        contract.probemonat_kuendigungsdatum = timezone.localdate()
        contract.save(update_fields=["status", "gekuendigt_in_probemonat", "probemonat_kuendigungsdatum", "updated_at"])

    logger.info(f"Trial booking {contract.contract_number} cancelled{f': {reason}' if reason else ''}")
    send_cancellation_confirmation_email(contract)
    return contract
