"""Celery tasks for the rentals domain."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore

from .services import update_contract_statuses as run_contract_status_update

logger = logging.getLogger(__name__)


@shared_task(name="rentals.update_contract_statuses")
def update_contract_statuses() -> dict[str, int]:
    """
    Vertragsstatus täglich fortschreiben.

    Geplante Verträge mit erreichtem Startdatum werden aktiv, aktive Verträge
    mit abgelaufenem Belegungszeitraum laufen aus.

    Returns:
        dict: {"activated": ..., "expired": ...}
    """
    result = run_contract_status_update()
    logger.info(f"Contract status update finished: {result}")
    return result
