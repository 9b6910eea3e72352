from __future__ import annotations

from django.core.management.base import BaseCommand  # type: ignore

from apps.notifications.services import ensure_default_templates


class Command(BaseCommand):
    help = "Legt fehlende Standard-E-Mail-Templates an"

    def handle(self, *args, **options):  # type: ignore
        created = ensure_default_templates()
        self.stdout.write(self.style.SUCCESS(f"{created} Templates angelegt"))
