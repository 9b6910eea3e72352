"""Stored monthly revenue figures."""

from __future__ import annotations

from decimal import Decimal

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class MonthlyRevenue(models.Model):
    """Einnahmen eines Kalendermonats, berechnet aus den Verträgen."""

    monat = models.DateField(_("Monat"), unique=True, help_text=_("Erster Tag des Monats"))
    gesamteinnahmen = models.DecimalField(
        _("Gesamteinnahmen"), max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    anzahl_aktive_vertraege = models.PositiveIntegerField(_("Zahlende Verträge"), default=0)
    anzahl_probemonat_vertraege = models.PositiveIntegerField(_("Verträge im Probemonat"), default=0)
    einnahmen_pro_mietfach = models.JSONField(_("Einnahmen je Mietfach"), default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Monatseinnahmen")
        verbose_name_plural = _("Monatseinnahmen")
        ordering = ["monat"]

    def __str__(self) -> str:
        return f"{self.monat:%m.%Y}: {self.gesamteinnahmen} €"
