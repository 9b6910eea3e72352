from __future__ import annotations

from django.core.management.base import BaseCommand  # type: ignore

from apps.faq.services import ensure_default_faqs


class Command(BaseCommand):
    help = "Legt fehlende Standard-FAQs an"

    def handle(self, *args, **options):  # type: ignore
        created = ensure_default_faqs()
        self.stdout.write(self.style.SUCCESS(f"{created} FAQs angelegt"))
