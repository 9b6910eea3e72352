"""Domain services for Mietfach availability and contract workflows."""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Iterable, Mapping

from django.db import transaction  # type: ignore
from django.db.models import F, Q  # type: ignore
from django.db.utils import NotSupportedError  # type: ignore
from django.utils import timezone  # type: ignore

from apps.notifications.services import send_booking_confirmation_email, send_booking_rejected_email
from apps.pricing import catalog
from apps.pricing.services import PackageSelection, PriceCalculationError, normalize_selection
from apps.users.models import PendingBooking
from shared.domain.dates import add_months
from shared.domain.value_objects import DateRange

from .domain.availability import AvailabilityResult, MietfachSchedule, Occupancy
from .models import Mietfach, PackageTracking, Vertrag, VertragService

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from apps.users.models import CustomUser

logger = logging.getLogger(__name__)


class MietfachConflictError(Exception):
    """Raised when a Mietfach is busy or out of service for the requested period."""

    def __init__(self, message: str, results: Iterable[AvailabilityResult] = ()):
        super().__init__(message)
        self.results = list(results)


class PendingBookingError(Exception):
    """Raised when a pending booking cannot be confirmed or rejected."""


class NoPendingBookingError(PendingBookingError):
    """Raised when the vendor has no open booking."""


class PackageTrackingError(Exception):
    """Raised on invalid package status transitions."""


def _lock_queryset_if_possible(queryset):
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection().in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset


# ============================================================================
# AVAILABILITY
# ============================================================================

def load_schedules(
    mietfach_ids: Iterable[int],
    *,
    exclude_contract_id: int | None = None,
) -> dict[int, MietfachSchedule]:
    """Occupancies of active and scheduled contracts, grouped per Mietfach."""

    ids = list(mietfach_ids)
    lines = VertragService.objects.filter(
        mietfach_id__in=ids,
        vertrag__status__in=Vertrag.BLOCKING_STATUSES,
    ).select_related("vertrag", "vertrag__user")
    if exclude_contract_id is not None:
        lines = lines.exclude(vertrag_id=exclude_contract_id)

    grouped: dict[int, list[Occupancy]] = defaultdict(list)
    for line in lines:
        grouped[line.mietfach_id].append(
            Occupancy(
                booking_id=line.vertrag_id,
                dates=line.dates,
                vendor_name=line.vertrag.user.display_name,
                status=line.vertrag.status,
            )
        )
    return {mietfach_id: MietfachSchedule.from_occupancies(mietfach_id, grouped[mietfach_id]) for mietfach_id in ids}


def check_availability(
    mietfach: Mietfach,
    start: date,
    end: date,
    *,
    exclude_contract_id: int | None = None,
) -> AvailabilityResult:
    """Check whether ``mietfach`` is free for ``[start, end)``."""

    schedule = load_schedules([mietfach.pk], exclude_contract_id=exclude_contract_id)[mietfach.pk]
    return schedule.check(DateRange(start, end))


def check_batch_availability(mietfach_ids: Iterable[int], start: date, end: date) -> dict[int, AvailabilityResult]:
    requested = DateRange(start, end)
    schedules = load_schedules(mietfach_ids)
    return {mietfach_id: schedule.check(requested) for mietfach_id, schedule in schedules.items()}


def find_available_mietfaecher(start: date, end: date, typ: str | None = None):
    """Mietfächer in service that no active or scheduled contract occupies during ``[start, end)``."""

    if start >= end:
        raise ValueError("end must be after start")
    overlapping_filter = Q(mietbeginn__lt=end) & Q(mietende__gt=start)
    busy_ids = VertragService.objects.filter(
        vertrag__status__in=Vertrag.BLOCKING_STATUSES,
    ).filter(overlapping_filter).values("mietfach_id")

    queryset = Mietfach.objects.filter(verfuegbar=True).exclude(pk__in=busy_ids)
    if typ:
        queryset = queryset.filter(typ=typ)
    return queryset.order_by("typ", "bezeichnung")


# ============================================================================
# PENDING BOOKINGS -> CONTRACTS
# ============================================================================

@dataclass
class BookingConfirmation:
    contract: Vertrag
    email_sent: bool
    availability: list[AvailabilityResult] = field(default_factory=list)


def _pending_booking_for(user: "CustomUser") -> PendingBooking:
    queryset = PendingBooking.objects.filter(user=user, status=PendingBooking.Status.PENDING).order_by("created_at")
    pending = _lock_queryset_if_possible(queryset).first()
    if pending is None:
        raise NoPendingBookingError("Keine ausstehende Buchung für diesen User gefunden")
    return pending


def _monthly_prices(mietfaecher: list[Mietfach], adjustments: Mapping[int, Decimal]) -> dict[int, Decimal]:
    prices = {}
    for mietfach in mietfaecher:
        price = adjustments.get(mietfach.pk, mietfach.list_price)
        if price is None:
            raise PendingBookingError(
                f"Für Mietfach {mietfach.bezeichnung} ist eine Preisanpassung erforderlich (Preis auf Anfrage)."
            )
        prices[mietfach.pk] = Decimal(price)
    return prices


def _create_contract(
    pending: PendingBooking,
    mietfach_ids: Iterable[int],
    price_adjustments: Mapping[int, Decimal],
    start: date,
) -> tuple[Vertrag, list[AvailabilityResult]]:
    try:
        selection = normalize_selection(PackageSelection.from_payload(pending.package_data or {}))
    except PriceCalculationError as exc:
        raise PendingBookingError(f"Ungültige Paketdaten: {exc}") from exc
    if not catalog.MIN_RENTAL_MONTHS <= selection.rental_duration <= catalog.MAX_RENTAL_MONTHS:
        raise PendingBookingError("Ungültige Mietdauer in der Buchung.")

    ids = sorted(set(mietfach_ids))
    # Lock the Mietfach rows so concurrent confirmations serialize on them.
    mietfaecher = list(_lock_queryset_if_possible(Mietfach.objects.filter(pk__in=ids).order_by("pk")))
    found = {mietfach.pk for mietfach in mietfaecher}
    missing = [str(mietfach_id) for mietfach_id in ids if mietfach_id not in found]
    if missing:
        raise PendingBookingError(f"Mietfach nicht gefunden: {', '.join(missing)}")

    out_of_service = [mietfach.bezeichnung for mietfach in mietfaecher if not mietfach.verfuegbar]
    if out_of_service:
        raise MietfachConflictError(f"Mietfach nicht verfügbar: {', '.join(out_of_service)}")

    window = Vertrag.rental_window(start, selection.rental_duration, trial=True)
    schedules = load_schedules(ids)
    results = [schedules[mietfach_id].check(window) for mietfach_id in ids]
    busy = [result for result in results if not result.available]
    if busy:
        busy_ids = {result.mietfach_id for result in busy}
        names = ", ".join(mietfach.bezeichnung for mietfach in mietfaecher if mietfach.pk in busy_ids)
        raise MietfachConflictError(f"Mietfach im gewünschten Zeitraum bereits belegt: {names}", busy)

    prices = _monthly_prices(mietfaecher, price_adjustments)
    provision = catalog.get_provision_type(selection.provision_type)
    contract = Vertrag.objects.create(
        user=pending.user,
        pending_booking=pending,
        package_configuration={**(pending.package_data or {}), "price_breakdown": pending.price_breakdown},
        total_monthly_price=sum(prices.values(), Decimal("0.00")),
        contract_duration=selection.rental_duration,
        discount=catalog.discount_rate_for(selection.rental_duration),
        provisionssatz=provision.rate,
        status=Vertrag.Status.SCHEDULED,
        scheduled_start_date=start,
        availability_from=window.start_date,
        availability_to=window.end_date,
        ist_probemonat_buchung=True,
        zahlungspflichtig_ab=add_months(start, 1),
        lagerservice="lagerservice" in selection.zusatzleistungen,
        versandservice="versandservice" in selection.zusatzleistungen,
    )
    VertragService.objects.bulk_create(
        [
            VertragService(
                vertrag=contract,
                mietfach=mietfach,
                mietbeginn=window.start_date,
                mietende=window.end_date,
                monatspreis=prices[mietfach.pk],
            )
            for mietfach in mietfaecher
        ]
    )
    if contract.lagerservice:
        PackageTracking.objects.create(vertrag=contract, package_typ=PackageTracking.PackageTyp.LAGERSERVICE)
    if contract.versandservice:
        PackageTracking.objects.create(vertrag=contract, package_typ=PackageTracking.PackageTyp.VERSANDSERVICE)
    return contract, results


def confirm_pending_booking(
    user: "CustomUser",
    admin: "CustomUser | None",
    *,
    mietfach_ids: Iterable[int],
    price_adjustments: Mapping[int, Decimal] | None = None,
    scheduled_start: date | None = None,
) -> BookingConfirmation:
    """Turn the vendor's pending booking into a scheduled trial contract.

    The availability check and all writes share one transaction; the
    confirmation email is sent after commit so a mail failure never rolls
    back the contract.
    """

    mietfach_ids = list(mietfach_ids)
    if not mietfach_ids:
        raise PendingBookingError("Mindestens ein Mietfach muss zugeordnet werden")
    start = scheduled_start or timezone.localdate()

    with transaction.atomic():
        pending = _pending_booking_for(user)
        contract, results = _create_contract(pending, mietfach_ids, price_adjustments or {}, start)
        pending.mark_processed(PendingBooking.Status.COMPLETED, admin)

    logger.info(
        f"Contract {contract.contract_number} created for {user.email} "
        f"({len(mietfach_ids)} Mietfächer, start {start.isoformat()})"
    )
    email_sent = send_booking_confirmation_email(contract)
    return BookingConfirmation(contract=contract, email_sent=email_sent, availability=results)


def reject_pending_booking(user: "CustomUser", admin: "CustomUser | None", reason: str = "") -> PendingBooking:
    with transaction.atomic():
        pending = _pending_booking_for(user)
        pending.mark_processed(PendingBooking.Status.CANCELLED, admin, reason)
    logger.info(f"Pending booking {pending.pk} of {user.email} rejected")
    send_booking_rejected_email(user, reason)
    return pending


# ============================================================================
# CONTRACT LIFECYCLE
# ============================================================================

def update_contract_statuses(today: date | None = None) -> dict[str, int]:
    """Activate contracts whose start date arrived, expire those whose window ended."""

    today = today or timezone.localdate()
    activated = Vertrag.objects.filter(
        status=Vertrag.Status.SCHEDULED,
        scheduled_start_date__lte=today,
    ).update(status=Vertrag.Status.ACTIVE, actual_start_date=F("scheduled_start_date"))
    expired = Vertrag.objects.filter(
        status=Vertrag.Status.ACTIVE,
        availability_to__lte=today,
    ).update(status=Vertrag.Status.EXPIRED)
    if activated or expired:
        logger.info(f"Contract statuses updated: {activated} activated, {expired} expired")
    return {"activated": activated, "expired": expired}


# ============================================================================
# PACKAGE TRACKING
# ============================================================================

def advance_package_status(
    tracking: PackageTracking,
    new_status: str,
    *,
    admin: "CustomUser | None" = None,
    notizen: str = "",
    tracking_nummer: str = "",
) -> PackageTracking:
    """Move a package forward in its status sequence and stamp the time."""

    with transaction.atomic():
        tracking = _lock_queryset_if_possible(PackageTracking.objects.filter(pk=tracking.pk)).get()
        if not tracking.can_transition_to(new_status):
            raise PackageTrackingError(f"Ungültiger Status-Übergang von {tracking.status} zu {new_status}")

        now = timezone.now()
        tracking.status = new_status
        timestamp_field = PackageTracking.TIMESTAMP_FIELDS.get(new_status)
        if timestamp_field:
            setattr(tracking, timestamp_field, now)
        if admin is not None:
            tracking.bestaetigt_von = admin
        if notizen:
            tracking.notizen = f"{tracking.notizen}\n{notizen}".strip()
        if tracking_nummer:
            tracking.tracking_nummer = tracking_nummer
        tracking.save()

        stored = PackageTracking.STATUS_SEQUENCE.index(new_status) >= PackageTracking.STATUS_SEQUENCE.index(
            PackageTracking.Status.EINGELAGERT
        )
        if tracking.package_typ == PackageTracking.PackageTyp.LAGERSERVICE and stored:
            Vertrag.objects.filter(pk=tracking.vertrag_id, lagerservice_bestaetigt__isnull=True).update(
                lagerservice_bestaetigt=now
            )
        if tracking.package_typ == PackageTracking.PackageTyp.VERSANDSERVICE and new_status == PackageTracking.Status.VERSANDT:
            Vertrag.objects.filter(pk=tracking.vertrag_id).update(versandservice_aktiv=True)

    logger.info(f"Package {tracking.pk} moved to {new_status}")
    return tracking
