import os

from celery import Celery
from celery.schedules import crontab  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.dev")

app = Celery("housnkuh")

app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


# ============================================================================
# CELERY BEAT SCHEDULE (Periodic Tasks)
# ============================================================================

app.conf.beat_schedule = {
    # Probemonate prüfen: Ablauf und Warnung 7 Tage vorher - täglich 06:00
    "update-trial-statuses": {
        "task": "trials.update_trial_statuses",
        "schedule": crontab(minute=0, hour=6),
    },
    # Vorregistrierte Direktvermarkter zur Store-Eröffnung freischalten - stündlich
    "activate-on-store-opening": {
        "task": "trials.activate_on_store_opening",
        "schedule": crontab(minute=5),
    },
    # Verträge: scheduled -> active, active -> expired - täglich 00:15
    "update-contract-statuses": {
        "task": "rentals.update_contract_statuses",
        "schedule": crontab(minute=15, hour=0),
    },
    # Einnahmen: Vormonat abschließen, laufenden Monat aktualisieren - am 1. um 02:00
    "calculate-monthly-revenue": {
        "task": "revenue.calculate_monthly_revenue",
        "schedule": crontab(minute=0, hour=2, day_of_month=1),
    },
}

app.conf.timezone = "Europe/Berlin"
