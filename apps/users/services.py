"""Vendor account services: registration, e-mail confirmation and bookings."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from django.db import transaction  # type: ignore
from django.utils import timezone  # type: ignore

from apps.notifications.services import send_preregistration_email, send_vendor_welcome_email
from apps.pricing.services import PackageSelection, calculate_price

from .models import Address, CustomUser, PendingBooking, VendorProfile

logger = logging.getLogger(__name__)

FULL_ACCOUNT_EXISTS = "Ein vollständiger Account mit dieser E-Mail existiert bereits. Bitte melden Sie sich an."
INVALID_CONFIRMATION = "Ungültiger oder abgelaufener Bestätigungs-Link"


class RegistrationError(Exception):
    """Raised when an account cannot be registered or confirmed."""


@dataclass
class RegistrationResult:
    user: CustomUser
    pending_booking: PendingBooking | None
    email_sent: bool
    upgraded: bool = False


def price_breakdown_for(package_data: dict[str, Any]) -> dict[str, Any] | None:
    """Server-side price calculation stored alongside the submitted package data."""
    breakdown = calculate_price(PackageSelection.from_payload(package_data))
    return breakdown.to_dict() if breakdown else None


def _save_account(
    *,
    email: str,
    password: str,
    name: str,
    phone: str,
    address: dict[str, str],
    unternehmen: str,
    beschreibung: str = "",
    **fields: Any,
) -> tuple[CustomUser, bool]:
    """Create the vendor account or upgrade a newsletter-only account with that email."""

    existing = CustomUser.objects.select_for_update().filter(email__iexact=email).first()
    if existing is not None and existing.is_full_account:
        raise RegistrationError(FULL_ACCOUNT_EXISTS)

    if existing is None:
        user = CustomUser(email=email.lower(), mail_newsletter=True)
        upgraded = False
    else:
        user = existing
        upgraded = True
        logger.info(f"Upgrading newsletter account {user.pk} to a vendor account")

    user.username = email.lower()
    user.name = name
    user.phone = phone
    user.role = CustomUser.RoleChoices.VENDOR
    user.is_full_account = True
    user.registration_date = timezone.now()
    for key, value in fields.items():
        setattr(user, key, value)
    user.set_password(password)
    user.save()

    user.addresses.filter(address_type=Address.AddressType.MAIN).delete()
    Address.objects.create(
        user=user,
        address_type=Address.AddressType.MAIN,
        name1=name,
        name2=unternehmen,
        **address,
    )
    profile, _created = VendorProfile.objects.get_or_create(user=user)
    if unternehmen and not profile.unternehmen:
        profile.unternehmen = unternehmen
    if beschreibung:
        profile.beschreibung = beschreibung
    profile.save()
    return user, upgraded


def register_vendor(
    *,
    email: str,
    password: str,
    name: str,
    address: dict[str, str],
    package_data: dict[str, Any],
    phone: str = "",
    unternehmen: str = "",
    comments: str = "",
) -> RegistrationResult:
    """Register a vendor together with the package booking from the wizard.

    The welcome email is sent after commit; a delivery failure is logged and
    reported through ``email_sent`` but keeps the account.
    """

    breakdown = price_breakdown_for(package_data)
    with transaction.atomic():
        user, upgraded = _save_account(
            email=email,
            password=password,
            name=name,
            phone=phone,
            address=address,
            unternehmen=unternehmen,
            registration_status=CustomUser.RegistrationStatus.PREREGISTERED,
        )
        user.issue_confirmation_token()
        user.save(update_fields=["confirmation_token", "token_expires", "contact_status"])
        pending = PendingBooking.objects.create(
            user=user,
            package_data=package_data,
            price_breakdown=breakdown,
            comments=comments,
        )

    logger.info(f"Vendor registered: {user.email} (pending booking {pending.pk})")
    email_sent = send_vendor_welcome_email(user, pending)
    if not email_sent:
        logger.warning(f"Welcome email to {user.email} could not be sent; account kept")
    return RegistrationResult(user=user, pending_booking=pending, email_sent=email_sent, upgraded=upgraded)


def preregister_vendor(
    *,
    email: str,
    password: str,
    name: str,
    address: dict[str, str],
    phone: str = "",
    unternehmen: str = "",
    beschreibung: str = "",
    opening_date=None,
) -> RegistrationResult:
    """Pre-registration before the store opens; the trial starts at the opening."""

    with transaction.atomic():
        user, upgraded = _save_account(
            email=email,
            password=password,
            name=name,
            phone=phone,
            address=address,
            unternehmen=unternehmen,
            beschreibung=beschreibung,
            registration_status=CustomUser.RegistrationStatus.PREREGISTERED,
            is_publicly_visible=False,
            contact_status=CustomUser.ContactStatus.ACTIVE,
        )

    logger.info(f"Vendor pre-registered: {user.email}")
    email_sent = send_preregistration_email(user, opening_date)
    return RegistrationResult(user=user, pending_booking=None, email_sent=email_sent, upgraded=upgraded)


def confirm_vendor_email(token: str) -> CustomUser:
    user = CustomUser.objects.filter(
        confirmation_token=token,
        token_expires__gt=timezone.now(),
    ).first()
    if not token or user is None:
        raise RegistrationError(INVALID_CONFIRMATION)
    user.confirm_email()
    logger.info(f"Email confirmed for {user.email}")
    return user


def create_additional_booking(user: CustomUser, package_data: dict[str, Any], comments: str = "") -> PendingBooking:
    """A further package selection by an existing vendor, queued for admin confirmation."""

    breakdown = price_breakdown_for(package_data)
    with transaction.atomic():
        locked = CustomUser.objects.select_for_update().get(pk=user.pk)
        if locked.has_pending_booking:
            raise RegistrationError("Es liegt bereits eine ausstehende Buchung vor.")
        pending = PendingBooking.objects.create(
            user=locked,
            package_data=package_data,
            price_breakdown=breakdown,
            comments=comments,
        )
    logger.info(f"Additional booking {pending.pk} created for {user.email}")
    return pending
