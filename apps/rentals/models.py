"""Rental domain models for housnkuh."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from apps.pricing import catalog
from shared.domain.dates import add_months
from shared.domain.value_objects import DateRange


class Mietfach(models.Model):
    """Physischer Verkaufsplatz im Laden."""

    class Typ(models.TextChoices):
        REGAL = "regal", _("Regal (Lage A)")
        REGAL_B = "regal-b", _("Regal (Lage B)")
        KUEHLREGAL = "kuehlregal", _("Kühlregal")
        GEFRIERREGAL = "gefrierregal", _("Gefrierregal")
        VERKAUFSTISCH = "verkaufstisch", _("Verkaufstisch")
        SONSTIGES = "sonstiges", _("Sonstiges")
        SCHAUFENSTER = "schaufenster", _("Schaufenster")

    # Katalogpaket, dessen Listenpreis für den Typ gilt
    PACKAGE_FOR_TYP = {
        Typ.REGAL: "block-a",
        Typ.REGAL_B: "block-b",
        Typ.KUEHLREGAL: "block-cold",
        Typ.GEFRIERREGAL: "block-frozen",
        Typ.VERKAUFSTISCH: "block-table",
        Typ.SONSTIGES: "block-other",
        Typ.SCHAUFENSTER: "window-small",
    }

    bezeichnung = models.CharField(_("Bezeichnung"), max_length=100, unique=True)
    typ = models.CharField(_("Typ"), max_length=20, choices=Typ.choices)
    beschreibung = models.TextField(_("Beschreibung"), blank=True)
    flaeche = models.DecimalField(_("Fläche"), max_digits=8, decimal_places=2, default=Decimal("1.00"))
    einheit = models.CharField(_("Einheit"), max_length=10, default="m²")
    preis = models.DecimalField(
        _("Monatspreis"),
        max_digits=8,
        decimal_places=2,
        null=True,
        blank=True,
        help_text=_("Leer lassen, um den Katalogpreis des Typs zu verwenden."),
    )
    verfuegbar = models.BooleanField(_("Verfügbar"), default=True)
    standort = models.CharField(_("Standort"), max_length=200, blank=True)
    features = models.JSONField(_("Ausstattung"), default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Mietfach")
        verbose_name_plural = _("Mietfächer")
        ordering = ["bezeichnung"]
        indexes = [models.Index(fields=["typ", "verfuegbar"])]

    def __str__(self) -> str:
        return f"{self.bezeichnung} ({self.get_typ_display()})"

    @property
    def list_price(self) -> Decimal | None:
        """Monatspreis des Mietfachs, sonst Katalogpreis des Typs (None = auf Anfrage)."""
        if self.preis is not None:
            return self.preis
        package = catalog.get_package(self.PACKAGE_FOR_TYP.get(self.typ, ""))
        return package.price if package else None


class Vertrag(models.Model):
    """Mietvertrag eines Direktvermarkters über ein oder mehrere Mietfächer."""

    class Status(models.TextChoices):
        PENDING = "pending", _("Ausstehend")
        SCHEDULED = "scheduled", _("Geplant")
        ACTIVE = "active", _("Aktiv")
        CANCELLED = "cancelled", _("Gekündigt")
        EXPIRED = "expired", _("Abgelaufen")

    # Verträge in diesen Status belegen ihre Mietfächer
    BLOCKING_STATUSES = (Status.ACTIVE, Status.SCHEDULED)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="contracts",
    )
    pending_booking = models.ForeignKey(
        "users.PendingBooking",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="contracts",
    )
    package_configuration = models.JSONField(_("Paketkonfiguration"), default=dict, blank=True)
    total_monthly_price = models.DecimalField(
        _("Monatspreis gesamt"), max_digits=10, decimal_places=2, default=Decimal("0.00")
    )
    contract_duration = models.PositiveSmallIntegerField(_("Laufzeit (Monate)"), default=1)
    discount = models.DecimalField(
        _("Rabatt"),
        max_digits=4,
        decimal_places=3,
        default=Decimal("0.000"),
        help_text=_("Rabatt als Anteil, z.B. 0.050 für 5 %."),
    )
    provisionssatz = models.PositiveSmallIntegerField(_("Provision (%)"), default=4)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    scheduled_start_date = models.DateField(_("Geplanter Beginn"))
    actual_start_date = models.DateField(null=True, blank=True)
    availability_from = models.DateField(_("Belegt ab"))
    availability_to = models.DateField(_("Belegt bis"))

    ist_probemonat_buchung = models.BooleanField(_("Probemonat"), default=False)
    zahlungspflichtig_ab = models.DateField(_("Zahlungspflichtig ab"), null=True, blank=True)
    gekuendigt_in_probemonat = models.BooleanField(default=False)
    probemonat_kuendigungsdatum = models.DateField(null=True, blank=True)

    lagerservice = models.BooleanField(_("Lagerservice"), default=False)
    versandservice = models.BooleanField(_("Versandservice"), default=False)
    lagerservice_monatlich = models.DecimalField(
        max_digits=8, decimal_places=2, default=catalog.lagerservice_monthly_price
    )
    versandservice_monatlich = models.DecimalField(
        max_digits=8, decimal_places=2, default=catalog.versandservice_monthly_price
    )
    lagerservice_bestaetigt = models.DateTimeField(_("Lagerservice bestätigt"), null=True, blank=True)
    versandservice_aktiv = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Vertrag")
        verbose_name_plural = _("Verträge")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(availability_to__gt=models.F("availability_from")),
                name="vertrag_valid_availability_window",
            ),
        ]
        indexes = [
            models.Index(fields=["status", "scheduled_start_date"]),
            models.Index(fields=["user", "status"]),
        ]

    def __str__(self) -> str:
        return f"{self.contract_number} ({self.get_status_display()})"

    @staticmethod
    def rental_window(start: date, duration_months: int, *, trial: bool) -> DateRange:
        """Belegungszeitraum: Laufzeit ab Beginn, plus einen Monat bei Probemonat-Buchungen."""
        months = duration_months + (1 if trial else 0)
        return DateRange(start, add_months(start, months))

    @property
    def contract_number(self) -> str:
        year = (self.created_at or timezone.now()).year
        return f"K-{year}-{self.pk or 0:04d}"

    @property
    def monthly_addons(self) -> Decimal:
        total = Decimal("0.00")
        if self.lagerservice:
            total += self.lagerservice_monatlich
        if self.versandservice:
            total += self.versandservice_monatlich
        return total

    @property
    def gesamtpreis(self) -> Decimal:
        """Gesamtpreis über die Laufzeit nach Rabatt."""
        subtotal = (self.total_monthly_price + self.monthly_addons) * self.contract_duration
        return (subtotal * (Decimal("1") - self.discount)).quantize(Decimal("0.01"))

    @property
    def is_in_trial(self) -> bool:
        today = timezone.localdate()
        return bool(
            self.ist_probemonat_buchung
            and self.zahlungspflichtig_ab
            and self.scheduled_start_date <= today < self.zahlungspflichtig_ab
        )

    @property
    def can_cancel_trial(self) -> bool:
        return (
            self.ist_probemonat_buchung
            and not self.gekuendigt_in_probemonat
            and self.status in self.BLOCKING_STATUSES
            and self.zahlungspflichtig_ab is not None
            and timezone.localdate() < self.zahlungspflichtig_ab
        )


class VertragService(models.Model):
    """Zuordnung eines Mietfachs zu einem Vertrag."""

    vertrag = models.ForeignKey(Vertrag, on_delete=models.CASCADE, related_name="services")
    mietfach = models.ForeignKey(Mietfach, on_delete=models.PROTECT, related_name="contract_services")
    mietbeginn = models.DateField(_("Mietbeginn"))
    mietende = models.DateField(_("Mietende"))
    monatspreis = models.DecimalField(_("Monatspreis"), max_digits=8, decimal_places=2)

    class Meta:
        verbose_name = _("Vertragsposition")
        verbose_name_plural = _("Vertragspositionen")
        ordering = ["mietbeginn", "id"]
        indexes = [models.Index(fields=["mietfach", "mietbeginn", "mietende"])]

    def __str__(self) -> str:
        return f"{self.mietfach.bezeichnung}: {self.mietbeginn} - {self.mietende}"

    @property
    def dates(self) -> DateRange:
        return DateRange(self.mietbeginn, self.mietende)


class PackageTracking(models.Model):
    """Paketverfolgung für Lager- und Versandservice."""

    class PackageTyp(models.TextChoices):
        LAGERSERVICE = "lagerservice", _("Lagerservice")
        VERSANDSERVICE = "versandservice", _("Versandservice")

    class Status(models.TextChoices):
        ERWARTET = "erwartet", _("Erwartet")
        ANGEKOMMEN = "angekommen", _("Angekommen")
        EINGELAGERT = "eingelagert", _("Eingelagert")
        VERSANDT = "versandt", _("Versandt")
        ZUGESTELLT = "zugestellt", _("Zugestellt")

    STATUS_SEQUENCE = (
        Status.ERWARTET,
        Status.ANGEKOMMEN,
        Status.EINGELAGERT,
        Status.VERSANDT,
        Status.ZUGESTELLT,
    )
    TIMESTAMP_FIELDS = {
        Status.ANGEKOMMEN: "ankunft_datum",
        Status.EINGELAGERT: "einlagerung_datum",
        Status.VERSANDT: "versand_datum",
        Status.ZUGESTELLT: "zustellung_datum",
    }

    vertrag = models.ForeignKey(Vertrag, on_delete=models.CASCADE, related_name="package_trackings")
    package_typ = models.CharField(max_length=20, choices=PackageTyp.choices)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.ERWARTET)
    ankunft_datum = models.DateTimeField(null=True, blank=True)
    einlagerung_datum = models.DateTimeField(null=True, blank=True)
    versand_datum = models.DateTimeField(null=True, blank=True)
    zustellung_datum = models.DateTimeField(null=True, blank=True)
    bestaetigt_von = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="confirmed_packages",
    )
    notizen = models.TextField(blank=True)
    tracking_nummer = models.CharField(max_length=100, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Paketverfolgung")
        verbose_name_plural = _("Paketverfolgungen")
        ordering = ["-created_at"]
        indexes = [models.Index(fields=["status"]), models.Index(fields=["vertrag", "package_typ"])]

    def __str__(self) -> str:
        return f"{self.get_package_typ_display()} für {self.vertrag.contract_number}: {self.get_status_display()}"

    def can_transition_to(self, new_status: str) -> bool:
        if new_status not in self.STATUS_SEQUENCE:
            return False
        return self.STATUS_SEQUENCE.index(new_status) > self.STATUS_SEQUENCE.index(self.status)
