"""User domain models for housnkuh.

Die Plattform kennt Direktvermarkter (Vendoren) und Administratoren.
Ein Vendor-Konto bündelt Kontaktdaten, die Hauptadresse, das öffentliche
Vendor-Profil, den Registrierungs- bzw. Probemonatsstatus und die noch nicht
bestätigten Paketbuchungen (``PendingBooking``). Newsletter-Abonnenten
existieren als unvollständige Konten (``is_full_account=False``) und werden
bei der Registrierung zu vollständigen Vendor-Konten erweitert.
"""

from __future__ import annotations

import secrets
from datetime import datetime, timedelta
from typing import Any

from django.conf import settings  # type: ignore
from django.contrib.auth.models import AbstractUser, BaseUserManager  # type: ignore
from django.core.validators import RegexValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from .validators import PLZ_VALIDATOR


PHONE_VALIDATOR = RegexValidator(
    regex=r"^\+?[\d\s/()-]{6,20}$",
    message=_("Bitte geben Sie eine gültige Telefonnummer ein."),
)


class CustomUserManager(BaseUserManager):
    """Manager that uses the e-mail address as login."""

    use_in_migrations = True

    def _create_user(self, email: str, password: str | None, **extra_fields: Any):
        if not email:
            raise ValueError("Eine E-Mail-Adresse ist erforderlich.")
        email = self.normalize_email(email).lower()

        user = self.model(email=email, **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_user(self, email: str, password: str | None = None, **extra_fields: Any):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        extra_fields.setdefault("role", CustomUser.RoleChoices.VENDOR)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email: str, password: str | None = None, **extra_fields: Any):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("role", CustomUser.RoleChoices.ADMIN)
        extra_fields.setdefault("contact_status", CustomUser.ContactStatus.ACTIVE)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Ein Superuser muss is_staff=True haben.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Ein Superuser muss is_superuser=True haben.")

        return self._create_user(email, password, **extra_fields)

    def vendors(self):
        return self.filter(role=CustomUser.RoleChoices.VENDOR, is_full_account=True)

    def public_vendors(self):
        """Nur aktive, bestätigte und öffentlich sichtbare Direktvermarkter."""
        return self.vendors().filter(
            contact_status=CustomUser.ContactStatus.ACTIVE,
            newsletter_confirmed=True,
            is_publicly_visible=True,
        )


class CustomUser(AbstractUser):
    """Konto eines Direktvermarkters oder Administrators."""

    class RoleChoices(models.TextChoices):
        VENDOR = "vendor", _("Direktvermarkter")
        ADMIN = "admin", _("Administrator")

    class ContactStatus(models.TextChoices):
        ACTIVE = "aktiv", _("Aktiv")
        INACTIVE = "inaktiv", _("Inaktiv")
        PENDING = "pending", _("Bestätigung ausstehend")

    class RegistrationStatus(models.TextChoices):
        PREREGISTERED = "preregistered", _("Vorregistriert")
        TRIAL_ACTIVE = "trial_active", _("Probemonat aktiv")
        TRIAL_EXPIRED = "trial_expired", _("Probemonat abgelaufen")
        ACTIVE = "active", _("Aktiv")
        CANCELLED = "cancelled", _("Gekündigt")

    username = models.CharField(
        _("Benutzername"),
        max_length=150,
        blank=True,
        help_text=_("Optional; bei Vendoren die E-Mail-Adresse."),
    )
    email = models.EmailField(_("E-Mail"), unique=True)
    name = models.CharField(_("Name"), max_length=200, blank=True)
    phone = models.CharField(
        _("Telefon"),
        max_length=30,
        blank=True,
        validators=[PHONE_VALIDATOR],
    )
    role = models.CharField(
        _("Rolle"),
        max_length=20,
        choices=RoleChoices.choices,
        default=RoleChoices.VENDOR,
    )

    # Kontakt / E-Mail-Bestätigung
    contact_status = models.CharField(
        _("Kontaktstatus"),
        max_length=20,
        choices=ContactStatus.choices,
        default=ContactStatus.PENDING,
    )
    newsletter_confirmed = models.BooleanField(_("E-Mail bestätigt"), default=False)
    mail_newsletter = models.BooleanField(_("Newsletter"), default=False)
    confirmation_token = models.CharField(max_length=64, blank=True, null=True, unique=True)
    token_expires = models.DateTimeField(null=True, blank=True)

    # Konto- und Registrierungsstatus
    is_full_account = models.BooleanField(_("Vollständiges Konto"), default=False)
    is_publicly_visible = models.BooleanField(_("Öffentlich sichtbar"), default=False)
    registration_status = models.CharField(
        _("Registrierungsstatus"),
        max_length=20,
        choices=RegistrationStatus.choices,
        blank=True,
    )
    registration_date = models.DateTimeField(null=True, blank=True)
    trial_start_date = models.DateTimeField(_("Probemonat Beginn"), null=True, blank=True)
    trial_end_date = models.DateTimeField(_("Probemonat Ende"), null=True, blank=True)
    trial_warning_sent_at = models.DateTimeField(null=True, blank=True)

    failed_login_attempts = models.PositiveIntegerField(default=0)
    locked_until = models.DateTimeField(_("Gesperrt bis"), null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = CustomUserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS: list[str] = []

    class Meta:
        verbose_name = _("Benutzer")
        verbose_name_plural = _("Benutzer")
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.email} ({self.get_role_display()})"

    # --- Domain helpers -----------------------------------------------------
    @property
    def is_vendor(self) -> bool:
        return self.role == self.RoleChoices.VENDOR

    @property
    def is_admin(self) -> bool:
        return self.role == self.RoleChoices.ADMIN or self.is_staff or self.is_superuser

    @property
    def display_name(self) -> str:
        return self.name or self.email

    @property
    def primary_address(self) -> "Address | None":
        return self.addresses.order_by("id").first()

    @property
    def has_pending_booking(self) -> bool:
        return self.pending_bookings.filter(status=PendingBooking.Status.PENDING).exists()

    def issue_confirmation_token(self) -> str:
        self.confirmation_token = secrets.token_hex(32)
        self.token_expires = timezone.now() + timedelta(hours=settings.HOUSNKUH_CONFIRMATION_TOKEN_HOURS)
        self.contact_status = self.ContactStatus.PENDING
        return self.confirmation_token

    def confirm_email(self) -> None:
        self.newsletter_confirmed = True
        self.contact_status = self.ContactStatus.ACTIVE
        self.confirmation_token = None
        self.token_expires = None
        self.save(update_fields=["newsletter_confirmed", "contact_status", "confirmation_token", "token_expires"])

    @property
    def trial_days_remaining(self) -> int | None:
        return self.trial_days_remaining_at(timezone.now())

    def trial_days_remaining_at(self, now: datetime) -> int | None:
        """Angefangene Tage bis zum Ende des Probemonats, gezählt ab ``now``."""
        if not self.trial_end_date:
            return None
        remaining = (self.trial_end_date - now).total_seconds()
        return max(0, int(-(-remaining // 86400)))

    @property
    def is_locked(self) -> bool:
        return bool(self.locked_until and self.locked_until > timezone.now())

    def lock(self, minutes: int = 15) -> None:
        self.locked_until = timezone.now() + timedelta(minutes=minutes)
        self.failed_login_attempts = 0
        self.save(update_fields=["locked_until", "failed_login_attempts"])

    def unlock(self) -> None:
        self.locked_until = None
        self.failed_login_attempts = 0
        self.save(update_fields=["locked_until", "failed_login_attempts"])

    def register_failed_attempt(self, threshold: int = 5) -> None:
        self.failed_login_attempts += 1
        if self.failed_login_attempts >= threshold:
            self.lock()
            return
        self.save(update_fields=["failed_login_attempts"])


class Address(models.Model):
    """Anschrift eines Vendors; die erste Adresse ist die Hauptadresse."""

    class AddressType(models.TextChoices):
        MAIN = "Hauptadresse", _("Hauptadresse")
        BILLING = "Rechnungsadresse", _("Rechnungsadresse")

    user = models.ForeignKey(CustomUser, on_delete=models.CASCADE, related_name="addresses")
    address_type = models.CharField(max_length=30, choices=AddressType.choices, default=AddressType.MAIN)
    strasse = models.CharField(_("Straße"), max_length=200)
    hausnummer = models.CharField(_("Hausnummer"), max_length=20)
    plz = models.CharField(_("PLZ"), max_length=5, validators=[PLZ_VALIDATOR])
    ort = models.CharField(_("Ort"), max_length=100)
    name1 = models.CharField(max_length=200, blank=True)
    name2 = models.CharField(max_length=200, blank=True)

    class Meta:
        verbose_name = _("Adresse")
        verbose_name_plural = _("Adressen")
        ordering = ["id"]

    def __str__(self) -> str:
        return f"{self.strasse} {self.hausnummer}, {self.plz} {self.ort}"

    def as_dict(self) -> dict[str, str]:
        return {"strasse": self.strasse, "hausnummer": self.hausnummer, "plz": self.plz, "ort": self.ort}


def default_opening_hours() -> dict[str, str]:
    return {day: "" for day in ("montag", "dienstag", "mittwoch", "donnerstag", "freitag", "samstag", "sonntag")}


def default_social_media() -> dict[str, str]:
    return {"facebook": "", "instagram": ""}


class VendorProfile(models.Model):
    """Öffentliches Profil eines Direktvermarkters."""

    class VerifyStatus(models.TextChoices):
        UNVERIFIED = "unverified", _("Nicht verifiziert")
        PENDING = "pending", _("In Prüfung")
        VERIFIED = "verified", _("Verifiziert")

    user = models.OneToOneField(CustomUser, on_delete=models.CASCADE, related_name="vendor_profile")
    unternehmen = models.CharField(_("Unternehmen"), max_length=200, blank=True)
    beschreibung = models.TextField(_("Beschreibung"), blank=True)
    profil_bild = models.CharField(_("Profilbild"), max_length=500, blank=True)
    oeffnungszeiten = models.JSONField(_("Öffnungszeiten"), default=default_opening_hours, blank=True)
    kategorien = models.JSONField(default=list, blank=True)
    tags = models.JSONField(default=list, blank=True)
    slogan = models.CharField(max_length=200, blank=True)
    website = models.URLField(blank=True)
    social_media = models.JSONField(default=default_social_media, blank=True)
    verify_status = models.CharField(
        max_length=20,
        choices=VerifyStatus.choices,
        default=VerifyStatus.UNVERIFIED,
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Vendor-Profil")
        verbose_name_plural = _("Vendor-Profile")

    def __str__(self) -> str:
        return self.unternehmen or self.user.display_name


class PendingBooking(models.Model):
    """Paketbuchung, die auf die Zuweisung realer Mietfächer durch einen Admin wartet."""

    class Status(models.TextChoices):
        PENDING = "pending", _("Ausstehend")
        COMPLETED = "completed", _("Abgeschlossen")
        CANCELLED = "cancelled", _("Abgelehnt")

    user = models.ForeignKey(CustomUser, on_delete=models.CASCADE, related_name="pending_bookings")
    package_data = models.JSONField(_("Paketdaten"))
    price_breakdown = models.JSONField(_("Preisberechnung"), null=True, blank=True)
    comments = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    rejection_reason = models.TextField(blank=True)
    processed_at = models.DateTimeField(null=True, blank=True)
    processed_by = models.ForeignKey(
        CustomUser,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="processed_bookings",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Ausstehende Buchung")
        verbose_name_plural = _("Ausstehende Buchungen")
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"Buchung #{self.pk} von {self.user.email} ({self.get_status_display()})"

    def mark_processed(self, status: str, admin: CustomUser | None = None, reason: str = "") -> None:
        self.status = status
        self.processed_by = admin
        self.processed_at = timezone.now()
        self.rejection_reason = reason
        self.save(update_fields=["status", "processed_by", "processed_at", "rejection_reason"])


User = CustomUser
