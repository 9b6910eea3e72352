"""Email services: template rendering and transactional mails."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING, Any

from django.conf import settings  # type: ignore
from django.core.mail import send_mail  # type: ignore
from django.template import Context, Template  # type: ignore
from django.template.loader import render_to_string  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.html import strip_tags  # type: ignore

from apps.pricing import catalog

from .defaults import DEFAULT_TEMPLATES, DEFAULTS_BY_ID
from .models import EmailTemplate

if TYPE_CHECKING:  # pragma: no cover
    from apps.rentals.models import Vertrag
    from apps.users.models import CustomUser, PendingBooking

logger = logging.getLogger(__name__)

TEST_SUBJECT_PREFIX = "[TEST] "


# ============================================================================
# SENDING
# ============================================================================

def send_email_notification(
    recipient_email: str,
    subject: str,
    template_name: str | None,
    context: dict,
    *,
    html_message: str | None = None,
    text_message: str | None = None,
) -> bool:
    """
    Universelle Funktion für den E-Mail-Versand.

    Args:
        recipient_email: E-Mail des Empfängers
        subject: Betreff
        template_name: Pfad zu einem Django-Template (optional)
        context: Kontext für das Rendern des Templates
        html_message: HTML-Version der Nachricht (optional)
        text_message: Textversion; ohne Angabe aus dem HTML erzeugt

    Returns:
        bool: True wenn die E-Mail erfolgreich versendet wurde
    """
    try:
        if html_message:
            text_message = text_message or strip_tags(html_message)
        elif template_name:
            html_message = render_to_string(template_name, context)
            text_message = text_message or strip_tags(html_message)
        else:
            text_message = text_message or context.get("message", "")
            html_message = None

        send_mail(
            subject=subject,
            message=text_message,
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[recipient_email],
            html_message=html_message,
            fail_silently=False,
        )

        logger.info(f"Email sent successfully to {recipient_email}: {subject}")
        return True

    except Exception as e:
        logger.error(f"Failed to send email to {recipient_email}: {e}", exc_info=True)
        return False


# ============================================================================
# TEMPLATES
# ============================================================================

@dataclass(frozen=True)
class RenderedEmail:
    subject: str
    html_body: str
    text_body: str


def base_context() -> dict[str, Any]:
    return {
        "siteName": settings.SITE_NAME,
        "siteUrl": settings.CLIENT_URL,
        "currentYear": str(timezone.now().year),
    }


def preview_data(overrides: dict[str, Any] | None = None, *, vendor_name: str = "Max Mustermann") -> dict[str, Any]:
    """Beispieldaten für Vorschau und Test-Mails, überschrieben durch ``overrides``."""
    data = {
        **base_context(),
        "vendorName": vendor_name,
        "trialEndDate": format_date(timezone.now() + timedelta(days=settings.HOUSNKUH_TRIAL_DAYS)),
        "contractNumber": "K-2025-0001",
    }
    data.update(overrides or {})
    return data


def render_string(source: str, data: dict[str, Any], *, html: bool = True) -> str:
    return Template(source).render(Context(data, autoescape=html)).strip()


def render_email_template(template: EmailTemplate, data: dict[str, Any]) -> RenderedEmail:
    subject = render_string(template.subject, data, html=False)
    html_body = render_string(template.html_body, data)
    if template.text_body:
        text_body = render_string(template.text_body, data, html=False)
    else:
        text_body = strip_tags(html_body)
    return RenderedEmail(subject=" ".join(subject.split()), html_body=html_body, text_body=text_body)


def _template_from_defaults(template_id: str) -> EmailTemplate:
    defaults = DEFAULTS_BY_ID[template_id]
    return EmailTemplate(**defaults)


def get_email_template(template_id: str) -> EmailTemplate:
    """Active template from the database, or the built-in default."""
    template = EmailTemplate.objects.filter(template_id=template_id, is_active=True).first()
    if template is None:
        template = _template_from_defaults(template_id)
    return template


def ensure_default_templates() -> int:
    """Create missing default templates; existing (possibly edited) rows stay untouched."""
    created = 0
    for defaults in DEFAULT_TEMPLATES:
        values = dict(defaults)
        template_id = values.pop("template_id")
        _, was_created = EmailTemplate.objects.get_or_create(template_id=template_id, defaults=values)
        created += int(was_created)
    if created:
        logger.info(f"Created {created} default email templates")
    return created


def send_templated_email(template_id: str, recipient_email: str, data: dict[str, Any]) -> bool:
    try:
        rendered = render_email_template(get_email_template(template_id), {**base_context(), **data})
    except Exception as e:
        logger.error(f"Failed to render email template {template_id}: {e}", exc_info=True)
        return False
    return send_email_notification(
        recipient_email=recipient_email,
        subject=rendered.subject,
        template_name=None,
        context=data,
        html_message=rendered.html_body,
        text_message=rendered.text_body,
    )


def send_test_email(template: EmailTemplate, recipient_email: str, data: dict[str, Any] | None = None) -> bool:
    rendered = render_email_template(template, preview_data(data, vendor_name="Test Vendor"))
    return send_email_notification(
        recipient_email=recipient_email,
        subject=f"{TEST_SUBJECT_PREFIX}{rendered.subject}",
        template_name=None,
        context={},
        html_message=rendered.html_body,
        text_message=rendered.text_body,
    )


def format_date(value: date | datetime | None) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        value = timezone.localtime(value) if timezone.is_aware(value) else value
    return value.strftime("%d.%m.%Y")


# ============================================================================
# VENDOR EMAILS
# ============================================================================

def confirmation_url(token: str) -> str:
    return f"{settings.CLIENT_URL.rstrip('/')}/vendor/confirm/{token}"


def package_lines_for_email(package_data: dict[str, Any], breakdown: dict[str, Any] | None) -> list[dict[str, Any]]:
    """Paketliste für Mails in der vom Formular übermittelten Reihenfolge."""
    priced = {line["id"]: line for line in (breakdown or {}).get("packages", [])}
    lines = []
    for package_id, count in package_data.get("package_counts", {}).items():
        if int(count) <= 0:
            continue
        package = catalog.get_package(package_id)
        line = priced.get(package_id, {})
        lines.append(
            {
                "id": package_id,
                "name": package.name if package else package_id,
                "count": int(count),
                "price_on_request": package.price_on_request if package else True,
                "line_total": line.get("line_total", ""),
            }
        )
    return lines


def send_vendor_welcome_email(user: "CustomUser", pending_booking: "PendingBooking") -> bool:
    """Willkommensmail mit Bestätigungslink und Paketübersicht."""
    package_data = pending_booking.package_data or {}
    breakdown = pending_booking.price_breakdown or {}
    provision = catalog.get_provision_type(package_data.get("provision_type", catalog.BASIC_PROVISION))
    booked_services = {line["id"] for line in breakdown.get("zusatzleistungen", [])}
    services = [service.name for service in catalog.ZUSATZLEISTUNGEN if service.id in booked_services]
    data = {
        "vendorName": user.display_name,
        "confirmationUrl": confirmation_url(user.confirmation_token or ""),
        "packages": package_lines_for_email(package_data, breakdown),
        "rentalDuration": package_data.get("rental_duration"),
        "provisionName": provision.name if provision else "",
        "provisionRate": provision.rate if provision else "",
        "zusatzleistungen": services,
        "monthlyTotal": breakdown.get("monthly_total", "0.00"),
        "total": breakdown.get("total", "0.00"),
        "discountPercent": breakdown.get("discount_percent", 0),
        "requiresManualQuote": breakdown.get("requires_manual_quote", False),
        "tokenHours": settings.HOUSNKUH_CONFIRMATION_TOKEN_HOURS,
    }
    return send_templated_email("vendor-welcome", user.email, data)


def send_preregistration_email(user: "CustomUser", opening_date: date | None) -> bool:
    data = {"vendorName": user.display_name, "openingDate": format_date(opening_date)}
    return send_templated_email("vendor-preregistration", user.email, data)


def send_booking_confirmation_email(contract: "Vertrag") -> bool:
    """Buchungsbestätigung nach Zuweisung der Mietfächer durch einen Admin."""
    user = contract.user
    mietfaecher = [
        {
            "bezeichnung": service.mietfach.bezeichnung,
            "typ": service.mietfach.get_typ_display(),
            "monatspreis": service.monatspreis,
            "mietbeginn": format_date(service.mietbeginn),
        }
        for service in contract.services.select_related("mietfach")
    ]
    data = {
        "vendorName": user.display_name,
        "contractNumber": contract.contract_number,
        "mietfaecher": mietfaecher,
        "startDate": format_date(contract.scheduled_start_date),
        "totalMonthlyPrice": contract.total_monthly_price,
        "isTrial": contract.ist_probemonat_buchung,
        "paidFrom": format_date(contract.zahlungspflichtig_ab),
    }
    return send_templated_email("booking-confirmation", user.email, data)


def send_booking_rejected_email(user: "CustomUser", reason: str = "") -> bool:
    data = {"vendorName": user.display_name, "reason": reason}
    return send_templated_email("booking-rejected", user.email, data)


def send_cancellation_confirmation_email(contract: "Vertrag") -> bool:
    data = {
        "vendorName": contract.user.display_name,
        "contractNumber": contract.contract_number,
        "cancellationDate": format_date(contract.probemonat_kuendigungsdatum),
    }
    return send_templated_email("cancellation-confirmation", contract.user.email, data)


# ============================================================================
# TRIAL EMAILS
# ============================================================================

def send_trial_activation_email(user: "CustomUser") -> bool:
    data = {
        "vendorName": user.display_name,
        "trialStartDate": format_date(user.trial_start_date),
        "trialEndDate": format_date(user.trial_end_date),
    }
    return send_templated_email("trial-activation", user.email, data)


def send_trial_ending_email(user: "CustomUser", days_remaining: int) -> bool:
    data = {
        "vendorName": user.display_name,
        "trialEndDate": format_date(user.trial_end_date),
        "daysRemaining": days_remaining,
    }
    return send_templated_email("trial-ending", user.email, data)


def send_trial_expired_email(user: "CustomUser") -> bool:
    data = {"vendorName": user.display_name, "trialEndDate": format_date(user.trial_end_date)}
    return send_templated_email("trial-expired", user.email, data)
