"""Revenue calculation and the admin dashboard overview.

Revenue is derived from the contracts: each contract earns its
``total_monthly_price`` prorated by the days it runs within a calendar
month. Trial bookings earn nothing before ``zahlungspflichtig_ab``; in a
month where the trial month still runs the contract counts as a trial
contract instead of a paying one.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any

from django.db import transaction  # type: ignore
from django.db.models import Count, Sum  # type: ignore
from django.utils import timezone  # type: ignore

from apps.rentals.models import Mietfach, Vertrag, VertragService
from apps.trials.services import trial_statistics
from apps.users.models import CustomUser, PendingBooking
from shared.domain.dates import add_months
from shared.domain.value_objects import DateRange, Money

from .models import MonthlyRevenue

logger = logging.getLogger(__name__)

# Expired contracts still count for the months they ran.
REVENUE_STATUSES = (Vertrag.Status.ACTIVE, Vertrag.Status.SCHEDULED, Vertrag.Status.EXPIRED)
MAX_PROJECTION_MONTHS = 24


class RevenueError(Exception):
    """Raised for an invalid revenue period."""


@dataclass(frozen=True)
class MietfachRevenue:
    mietfach_id: int
    bezeichnung: str
    einnahmen: Decimal
    anzahl_vertraege: int
    anzahl_probemonat_vertraege: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "mietfach_id": self.mietfach_id,
            "bezeichnung": self.bezeichnung,
            "einnahmen": str(self.einnahmen),
            "anzahl_vertraege": self.anzahl_vertraege,
            "anzahl_probemonat_vertraege": self.anzahl_probemonat_vertraege,
        }


@dataclass(frozen=True)
class RevenueSummary:
    monat: date
    gesamteinnahmen: Decimal
    anzahl_aktive_vertraege: int
    anzahl_probemonat_vertraege: int
    einnahmen_pro_mietfach: tuple[MietfachRevenue, ...] = field(default_factory=tuple)
    is_projection: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "monat": self.monat.isoformat(),
            "gesamteinnahmen": str(self.gesamteinnahmen),
            "anzahl_aktive_vertraege": self.anzahl_aktive_vertraege,
            "anzahl_probemonat_vertraege": self.anzahl_probemonat_vertraege,
            "einnahmen_pro_mietfach": [line.to_dict() for line in self.einnahmen_pro_mietfach],
            "is_projection": self.is_projection,
        }


# ============================================================================
# CALCULATION
# ============================================================================

def month_range(year: int, month: int) -> DateRange:
    """Half-open range covering one calendar month."""
    if not 1 <= month <= 12:
        raise RevenueError(f"Ungültiger Monat: {month}")
    start = date(year, month, 1)
    return DateRange(start, add_months(start, 1))


def prorated_amount(monthly_price: Decimal, start: date, end: date, period: DateRange) -> Money:
    """``monthly_price`` for the days of ``[start, end)`` that fall into ``period``."""
    first = max(start, period.start_date)
    last = min(end, period.end_date)
    if first >= last or not monthly_price:
        return Money.zero()
    days_in_period = (period.end_date - period.start_date).days
    return Money(monthly_price * (last - first).days / days_in_period)


def is_paying_in(contract: Vertrag, period: DateRange) -> bool:
    """A trial booking pays in every month from the one containing ``zahlungspflichtig_ab``."""
    if not contract.ist_probemonat_buchung:
        return True
    return contract.zahlungspflichtig_ab is not None and contract.zahlungspflichtig_ab < period.end_date


def revenue_start(contract: Vertrag, *, include_trial: bool = False) -> date:
    if contract.ist_probemonat_buchung and contract.zahlungspflichtig_ab and not include_trial:
        return contract.zahlungspflichtig_ab
    return contract.availability_from


def contract_revenue(contract: Vertrag, period: DateRange, *, include_trial: bool = False) -> Money:
    start = revenue_start(contract, include_trial=include_trial)
    return prorated_amount(contract.total_monthly_price, start, contract.availability_to, period)


def contracts_in(period: DateRange) -> Iterable[Vertrag]:
    return (
        Vertrag.objects.filter(
            status__in=REVENUE_STATUSES,
            availability_from__lt=period.end_date,
            availability_to__gt=period.start_date,
        )
        .prefetch_related("services__mietfach")
        .order_by("pk")
    )


def _revenue_per_mietfach(
    paying: list[Vertrag], trials: list[Vertrag], period: DateRange
) -> tuple[MietfachRevenue, ...]:
    rows: dict[int, dict[str, Any]] = {}

    def row_for(service: VertragService) -> dict[str, Any]:
        return rows.setdefault(
            service.mietfach_id,
            {
                "bezeichnung": service.mietfach.bezeichnung,
                "einnahmen": Money.zero(),
                "anzahl_vertraege": 0,
                "anzahl_probemonat_vertraege": 0,
            },
        )

    for contract in paying:
        start = revenue_start(contract)
        for service in contract.services.all():
            row = row_for(service)
            row["einnahmen"] = row["einnahmen"] + prorated_amount(
                service.monatspreis, max(start, service.mietbeginn), service.mietende, period
            )
            row["anzahl_vertraege"] += 1
    for contract in trials:
        for service in contract.services.all():
            row_for(service)["anzahl_probemonat_vertraege"] += 1

    return tuple(
        MietfachRevenue(
            mietfach_id=mietfach_id,
            bezeichnung=row["bezeichnung"],
            einnahmen=row["einnahmen"].rounded().amount,
            anzahl_vertraege=row["anzahl_vertraege"],
            anzahl_probemonat_vertraege=row["anzahl_probemonat_vertraege"],
        )
        for mietfach_id, row in sorted(rows.items(), key=lambda item: item[1]["bezeichnung"])
    )


def summarize_month(
    year: int,
    month: int,
    *,
    include_trial_revenue: bool = False,
    is_projection: bool = False,
) -> RevenueSummary:
    """Revenue of one calendar month from the current contract data.

    With ``include_trial_revenue`` trial contracts contribute their price
    from the booking start, as if the trial month were paid.
    """

    period = month_range(year, month)
    paying: list[Vertrag] = []
    trials: list[Vertrag] = []
    for contract in contracts_in(period):
        (paying if is_paying_in(contract, period) else trials).append(contract)

    total = Money.zero()
    for contract in paying:
        total = total + contract_revenue(contract, period)
    if include_trial_revenue:
        for contract in trials:
            total = total + contract_revenue(contract, period, include_trial=True)

    return RevenueSummary(
        monat=period.start_date,
        gesamteinnahmen=total.rounded().amount,
        anzahl_aktive_vertraege=len(paying),
        anzahl_probemonat_vertraege=len(trials),
        einnahmen_pro_mietfach=_revenue_per_mietfach(paying, trials, period),
        is_projection=is_projection,
    )


# ============================================================================
# STORED FIGURES
# ============================================================================

@transaction.atomic
def calculate_monthly_revenue(year: int, month: int) -> MonthlyRevenue:
    """Calculate one month and store it; recalculating overwrites the stored row."""

    summary = summarize_month(year, month)
    revenue, created = MonthlyRevenue.objects.update_or_create(
        monat=summary.monat,
        defaults={
            "gesamteinnahmen": summary.gesamteinnahmen,
            "anzahl_aktive_vertraege": summary.anzahl_aktive_vertraege,
            "anzahl_probemonat_vertraege": summary.anzahl_probemonat_vertraege,
            "einnahmen_pro_mietfach": [line.to_dict() for line in summary.einnahmen_pro_mietfach],
        },
    )
    logger.info(
        f"Revenue for {summary.monat:%Y-%m} {'calculated' if created else 'recalculated'}: "
        f"{summary.gesamteinnahmen} EUR from {summary.anzahl_aktive_vertraege} contracts"
    )
    return revenue


def revenue_range(start: date, end: date):  # type: ignore
    """Stored months from the month of ``start`` through the month of ``end``."""
    if end < start:
        raise RevenueError("Das Ende des Zeitraums liegt vor dem Beginn.")
    return MonthlyRevenue.objects.filter(monat__gte=start.replace(day=1), monat__lte=end.replace(day=1))


def project_revenue(
    months: int = 6,
    *,
    include_trial_revenue: bool = False,
    today: date | None = None,
) -> list[RevenueSummary]:
    """Projections for the months following the current one.

    Scheduled contracts are assumed to start and trial bookings to convert
    into paid contracts once their trial month ends.
    """

    if not 1 <= months <= MAX_PROJECTION_MONTHS:
        raise RevenueError(f"Prognosen sind für 1 bis {MAX_PROJECTION_MONTHS} Monate möglich.")
    first = (today or timezone.localdate()).replace(day=1)
    projections = []
    for offset in range(1, months + 1):
        month_start = add_months(first, offset)
        projections.append(
            summarize_month(
                month_start.year,
                month_start.month,
                include_trial_revenue=include_trial_revenue,
                is_projection=True,
            )
        )
    return projections


def revenue_statistics() -> dict[str, Any]:
    totals = MonthlyRevenue.objects.aggregate(
        total=Sum("gesamteinnahmen"),
        contracts=Sum("anzahl_aktive_vertraege"),
        trial_contracts=Sum("anzahl_probemonat_vertraege"),
        months=Count("id"),
    )
    total = Money(totals["total"] or Decimal("0")).rounded().amount
    months = totals["months"] or 0
    average = Money(total / months).rounded().amount if months else Decimal("0.00")
    return {
        "total_revenue": str(total),
        "average_monthly_revenue": str(average),
        "months_tracked": months,
        "total_active_contracts": totals["contracts"] or 0,
        "total_trial_contracts": totals["trial_contracts"] or 0,
    }


# ============================================================================
# DASHBOARD
# ============================================================================

def dashboard_overview(today: date | None = None) -> dict[str, Any]:
    """Counters and current revenue for the admin start page."""

    today = today or timezone.localdate()
    newsletter = CustomUser.objects.filter(mail_newsletter=True)
    blocking = VertragService.objects.filter(
        vertrag__status__in=Vertrag.BLOCKING_STATUSES,
        mietbeginn__lte=today,
        mietende__gt=today,
    )
    contracts_by_status = {status: 0 for status in Vertrag.Status.values}
    for row in Vertrag.objects.values("status").annotate(count=Count("id")):
        contracts_by_status[row["status"]] = row["count"]
    running_trials = Vertrag.objects.filter(
        status__in=Vertrag.BLOCKING_STATUSES,
        ist_probemonat_buchung=True,
        zahlungspflichtig_ab__gt=today,
    ).count()
    next_month = add_months(today.replace(day=1), 1)

    return {
        "newsletter": {
            "total": newsletter.filter(newsletter_confirmed=True).count(),
            "pending": newsletter.filter(newsletter_confirmed=False).count(),
        },
        "vendors": {
            "total": CustomUser.objects.vendors().count(),
            "public": CustomUser.objects.public_vendors().count(),
            "registration_status": trial_statistics(),
        },
        "mietfaecher": {
            "total": Mietfach.objects.count(),
            "verfuegbar": Mietfach.objects.filter(verfuegbar=True).count(),
            "belegt": blocking.values("mietfach").distinct().count(),
        },
        "vertraege": {
            "total": sum(contracts_by_status.values()),
            "by_status": contracts_by_status,
            "im_probemonat": running_trials,
        },
        "pending_bookings": PendingBooking.objects.filter(status=PendingBooking.Status.PENDING).count(),
        "revenue": {
            "current_month": summarize_month(today.year, today.month).to_dict(),
            "next_month": summarize_month(next_month.year, next_month.month, is_projection=True).to_dict(),
        },
        "recent_vendors": [
            {
                "id": vendor.pk,
                "name": vendor.name,
                "email": vendor.email,
                "registration_status": vendor.registration_status,
                "registration_date": vendor.registration_date,
            }
            for vendor in CustomUser.objects.vendors().order_by("-created_at")[:5]
        ],
    }
