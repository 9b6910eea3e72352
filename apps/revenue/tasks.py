"""Celery tasks for revenue figures."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore
from django.utils import timezone  # type: ignore

from shared.domain.dates import add_months

from . import services

logger = logging.getLogger(__name__)


@shared_task(name="revenue.calculate_monthly_revenue")
def calculate_monthly_revenue() -> list[str]:
    """
    Einnahmen des Vormonats abschließen und den laufenden Monat aktualisieren.

    Returns:
        list: berechnete Monate als ``YYYY-MM``
    """
    current = timezone.localdate().replace(day=1)
    calculated = []
    for month_start in (add_months(current, -1), current):
        revenue = services.calculate_monthly_revenue(month_start.year, month_start.month)
        calculated.append(f"{revenue.monat:%Y-%m}")
    logger.info(f"Monthly revenue calculation finished: {', '.join(calculated)}")
    return calculated
