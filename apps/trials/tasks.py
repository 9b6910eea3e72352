"""Celery tasks for the trial lifecycle."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore

from . import services
from .models import StoreSettings

logger = logging.getLogger(__name__)


@shared_task(name="trials.update_trial_statuses")
def update_trial_statuses() -> dict[str, int]:
    """
    Tägliche Prüfung aller laufenden Probemonate.

    Abgelaufene Probemonate werden auf trial_expired gesetzt, Vendoren mit
    höchstens sieben Resttagen erhalten einmalig eine Erinnerung.
    """
    result = services.update_trial_statuses()
    logger.info(f"Trial status update finished: {result}")
    return result


@shared_task(name="trials.activate_on_store_opening")
def activate_on_store_opening() -> dict:
    """Stündlich: nach der Store-Eröffnung alle vorregistrierten Vendoren aktivieren."""
    if not StoreSettings.load().is_store_open():
        return {"activated": 0, "failed": 0, "errors": [], "skipped": True}
    return services.activate_preregistered_vendors().to_dict()
