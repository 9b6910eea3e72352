"""FAQ entries grouped by category and ordered within each category."""

from __future__ import annotations

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class FAQ(models.Model):
    class Category(models.TextChoices):
        ALLGEMEIN = "Allgemein", _("Allgemein")
        REGISTRIERUNG = "Registrierung", _("Registrierung")
        BUCHUNGEN = "Buchungen", _("Buchungen")
        ZAHLUNGEN = "Zahlungen", _("Zahlungen")
        PRODUKTE = "Produkte", _("Produkte")
        SUPPORT = "Support", _("Support")

    category = models.CharField(
        _("Kategorie"),
        max_length=20,
        choices=Category.choices,
        default=Category.ALLGEMEIN,
    )
    question = models.CharField(_("Frage"), max_length=500)
    answer = models.TextField(_("Antwort"), max_length=5000)
    keywords = models.JSONField(_("Schlagwörter"), default=list, blank=True)
    order = models.IntegerField(_("Reihenfolge"), default=0)
    is_active = models.BooleanField(_("Aktiv"), default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("FAQ")
        verbose_name_plural = _("FAQs")
        ordering = ["category", "order"]
        indexes = [
            models.Index(fields=["category", "order"]),
            models.Index(fields=["is_active"]),
        ]

    def __str__(self) -> str:
        return f"[{self.category}] {self.question}"

    def save(self, *args, **kwargs):  # type: ignore
        self.question = self.question.strip()
        self.answer = self.answer.strip()
        self.keywords = normalize_keywords(self.keywords)
        super().save(*args, **kwargs)


def normalize_keywords(keywords) -> list[str]:  # type: ignore
    """Trimmed, lowercase keywords without empties or duplicates."""
    result: list[str] = []
    for keyword in keywords or []:
        value = str(keyword).strip().lower()
        if value and value not in result:
            result.append(value)
    return result
