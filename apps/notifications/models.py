"""Email template model.

Templates are identified by a stable ``template_id`` slug that the sending
services look up. Subject and bodies use Django template syntax
(``{{ vendorName }}``) and are edited by administrators; every update bumps
``version``.
"""

from __future__ import annotations

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class EmailTemplate(models.Model):
    """Admin-editable transactional email."""

    class Category(models.TextChoices):
        VENDOR = "vendor", _("Vendor")
        ADMIN = "admin", _("Admin")
        SYSTEM = "system", _("System")
        NOTIFICATION = "notification", _("Benachrichtigung")

    class TemplateType(models.TextChoices):
        VENDOR_REGISTRATION_CONFIRMATION = "vendor_registration_confirmation", _("Vendor Registrierung")
        PREREGISTRATION_CONFIRMATION = "preregistration_confirmation", _("Vorregistrierung")
        BOOKING_CONFIRMATION = "booking_confirmation", _("Buchungsbestätigung")
        BOOKING_REJECTED = "booking_rejected", _("Buchung abgelehnt")
        TRIAL_ACTIVATION = "trial_activation", _("Probemonat gestartet")
        TRIAL_ENDING = "trial_ending", _("Probemonat endet bald")
        TRIAL_EXPIRED = "trial_expired", _("Probemonat abgelaufen")
        CANCELLATION_CONFIRMATION = "cancellation_confirmation", _("Kündigungsbestätigung")

    template_id = models.SlugField(_("Template-ID"), max_length=100, unique=True)
    name = models.CharField(_("Name"), max_length=200)
    type = models.CharField(_("Typ"), max_length=50, choices=TemplateType.choices)
    subject = models.CharField(_("Betreff"), max_length=300)
    html_body = models.TextField(_("HTML-Inhalt"))
    text_body = models.TextField(_("Text-Inhalt"), blank=True)
    variables = models.JSONField(_("Variablen"), default=list, blank=True)
    description = models.TextField(_("Beschreibung"), blank=True)
    category = models.CharField(max_length=20, choices=Category.choices, default=Category.VENDOR)
    is_active = models.BooleanField(_("Aktiv"), default=True)
    version = models.PositiveIntegerField(default=1)
    last_modified = models.DateTimeField(auto_now=True)
    modified_by = models.CharField(max_length=150, blank=True)

    class Meta:
        verbose_name = _("E-Mail-Template")
        verbose_name_plural = _("E-Mail-Templates")
        ordering = ["category", "name"]

    def __str__(self) -> str:
        return f"{self.name} (v{self.version})"
