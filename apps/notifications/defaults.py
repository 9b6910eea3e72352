"""Built-in email templates and the variables each template type offers.

The database copies (``EmailTemplate``) are created from these defaults by
``services.ensure_default_templates`` and can then be edited by admins. When
a template row is missing the sending services fall back to the default
here, so mail still goes out on a fresh database.
"""

from __future__ import annotations

from .models import EmailTemplate

Type = EmailTemplate.TemplateType
Category = EmailTemplate.Category

_FOOTER_HTML = """
<p>Viele Grüße<br>Ihr {{ siteName }}-Team</p>
<p style="font-size:12px;color:#777">&copy; {{ currentYear }} {{ siteName }} &middot; <a href="{{ siteUrl }}">{{ siteUrl }}</a></p>
"""

_FOOTER_TEXT = """
Viele Grüße
Ihr {{ siteName }}-Team
{{ siteUrl }}
"""

DEFAULT_TEMPLATES: list[dict] = [
    {
        "template_id": "vendor-welcome",
        "name": "Vendor Registrierung Bestätigung",
        "type": Type.VENDOR_REGISTRATION_CONFIRMATION,
        "category": Category.VENDOR,
        "description": "Wird nach der Registrierung mit Paketbuchung versendet und enthält den Bestätigungslink.",
        "subject": "Willkommen bei {{ siteName }}: Bitte bestätigen Sie Ihre E-Mail-Adresse",
        "html_body": """
<h2>Hallo {{ vendorName }},</h2>
<p>vielen Dank für Ihre Registrierung als Direktvermarkter bei {{ siteName }}.</p>
<p>Bitte bestätigen Sie Ihre E-Mail-Adresse: <a href="{{ confirmationUrl }}">E-Mail-Adresse bestätigen</a></p>
<h3>Ihre Paketauswahl</h3>
<ul>
{% for package in packages %}<li>{{ package.count }} x {{ package.name }}: {% if package.price_on_request %}Preis auf Anfrage{% else %}{{ package.line_total }} &euro;/Monat{% endif %}</li>
{% endfor %}</ul>
<p>Mietdauer: {{ rentalDuration }} Monate<br>Provisionsmodell: {{ provisionName }} ({{ provisionRate }} %)</p>
{% if zusatzleistungen %}<p>Zusatzleistungen: {{ zusatzleistungen|join:", " }}</p>{% endif %}
<p>Monatlich: {{ monthlyTotal }} &euro;<br>Gesamt für {{ rentalDuration }} Monate: {{ total }} &euro;{% if discountPercent %} (inkl. {{ discountPercent }} % Rabatt){% endif %}</p>
{% if requiresManualQuote %}<p>Für Bereiche mit Preis auf Anfrage erstellen wir Ihnen ein individuelles Angebot.</p>{% endif %}
<p>Der Link ist {{ tokenHours }} Stunden gültig. Sobald wir Ihnen konkrete Mietfächer zugewiesen haben, erhalten Sie eine Buchungsbestätigung.</p>
""" + _FOOTER_HTML,
        "text_body": """Hallo {{ vendorName }},

vielen Dank für Ihre Registrierung als Direktvermarkter bei {{ siteName }}.
Bitte bestätigen Sie Ihre E-Mail-Adresse: {{ confirmationUrl }}

Ihre Paketauswahl:
{% for package in packages %}- {{ package.count }} x {{ package.name }}: {% if package.price_on_request %}Preis auf Anfrage{% else %}{{ package.line_total }} EUR/Monat{% endif %}
{% endfor %}
Mietdauer: {{ rentalDuration }} Monate
Provisionsmodell: {{ provisionName }} ({{ provisionRate }} %)
{% if zusatzleistungen %}Zusatzleistungen: {{ zusatzleistungen|join:", " }}
{% endif %}Monatlich: {{ monthlyTotal }} EUR
Gesamt: {{ total }} EUR{% if discountPercent %} (inkl. {{ discountPercent }} % Rabatt){% endif %}
{% if requiresManualQuote %}Für Bereiche mit Preis auf Anfrage erstellen wir Ihnen ein individuelles Angebot.
{% endif %}
Der Link ist {{ tokenHours }} Stunden gültig.
""" + _FOOTER_TEXT,
        "variables": [
            "vendorName", "confirmationUrl", "packages", "rentalDuration", "provisionName",
            "provisionRate", "zusatzleistungen", "monthlyTotal", "total", "discountPercent",
            "requiresManualQuote", "tokenHours", "siteName", "siteUrl", "currentYear",
        ],
    },
    {
        "template_id": "vendor-preregistration",
        "name": "Vorregistrierung Bestätigung",
        "type": Type.PREREGISTRATION_CONFIRMATION,
        "category": Category.VENDOR,
        "description": "Bestätigt die Vorregistrierung vor der Store-Eröffnung.",
        "subject": "Ihre Vorregistrierung bei {{ siteName }}",
        "html_body": """
<h2>Hallo {{ vendorName }},</h2>
<p>Ihre Vorregistrierung war erfolgreich. Ihr kostenloser Probemonat startet automatisch mit der Eröffnung
{% if openingDate %}am {{ openingDate }}{% else %}unseres Ladens{% endif %}.</p>
""" + _FOOTER_HTML,
        "text_body": """Hallo {{ vendorName }},

Ihre Vorregistrierung war erfolgreich. Ihr kostenloser Probemonat startet automatisch mit der Eröffnung{% if openingDate %} am {{ openingDate }}{% endif %}.
""" + _FOOTER_TEXT,
        "variables": ["vendorName", "openingDate", "siteName", "siteUrl", "currentYear"],
    },
    {
        "template_id": "booking-confirmation",
        "name": "Buchungsbestätigung",
        "type": Type.BOOKING_CONFIRMATION,
        "category": Category.VENDOR,
        "description": "Wird versendet, sobald ein Admin die Buchung bestätigt und Mietfächer zugewiesen hat.",
        "subject": "Ihre Buchung bei {{ siteName }} ist bestätigt ({{ contractNumber }})",
        "html_body": """
<h2>Hallo {{ vendorName }},</h2>
<p>Ihre Buchung wurde bestätigt. Vertragsnummer: <strong>{{ contractNumber }}</strong></p>
<ul>
{% for mietfach in mietfaecher %}<li>{{ mietfach.bezeichnung }} ({{ mietfach.typ }}): {{ mietfach.monatspreis }} &euro;/Monat, ab {{ mietfach.mietbeginn }}</li>
{% endfor %}</ul>
<p>Mietbeginn: {{ startDate }}<br>Monatlicher Gesamtpreis: {{ totalMonthlyPrice }} &euro;</p>
{% if isTrial %}<p>Der erste Monat ist Ihr kostenloser Probemonat. Zahlungspflichtig ab {{ paidFrom }}.</p>{% endif %}
""" + _FOOTER_HTML,
        "text_body": """Hallo {{ vendorName }},

Ihre Buchung wurde bestätigt. Vertragsnummer: {{ contractNumber }}

{% for mietfach in mietfaecher %}- {{ mietfach.bezeichnung }} ({{ mietfach.typ }}): {{ mietfach.monatspreis }} EUR/Monat, ab {{ mietfach.mietbeginn }}
{% endfor %}
Mietbeginn: {{ startDate }}
Monatlicher Gesamtpreis: {{ totalMonthlyPrice }} EUR
{% if isTrial %}Der erste Monat ist Ihr kostenloser Probemonat. Zahlungspflichtig ab {{ paidFrom }}.
{% endif %}""" + _FOOTER_TEXT,
        "variables": [
            "vendorName", "contractNumber", "mietfaecher", "startDate", "totalMonthlyPrice",
            "isTrial", "paidFrom", "siteName", "siteUrl", "currentYear",
        ],
    },
    {
        "template_id": "booking-rejected",
        "name": "Buchung abgelehnt",
        "type": Type.BOOKING_REJECTED,
        "category": Category.VENDOR,
        "description": "Information an den Vendor, wenn eine ausstehende Buchung abgelehnt wurde.",
        "subject": "Ihre Buchungsanfrage bei {{ siteName }}",
        "html_body": """
<h2>Hallo {{ vendorName }},</h2>
<p>leider können wir Ihre Buchungsanfrage derzeit nicht bestätigen.</p>
{% if reason %}<p>Begründung: {{ reason }}</p>{% endif %}
<p>Bei Fragen melden Sie sich gerne bei uns.</p>
""" + _FOOTER_HTML,
        "text_body": """Hallo {{ vendorName }},

leider können wir Ihre Buchungsanfrage derzeit nicht bestätigen.
{% if reason %}Begründung: {{ reason }}
{% endif %}""" + _FOOTER_TEXT,
        "variables": ["vendorName", "reason", "siteName", "siteUrl", "currentYear"],
    },
    {
        "template_id": "trial-activation",
        "name": "Probemonat gestartet",
        "type": Type.TRIAL_ACTIVATION,
        "category": Category.NOTIFICATION,
        "description": "Start des kostenlosen Probemonats.",
        "subject": "Ihr Probemonat bei {{ siteName }} hat begonnen",
        "html_body": """
<h2>Hallo {{ vendorName }},</h2>
<p>Ihr kostenloser Probemonat läuft vom {{ trialStartDate }} bis zum {{ trialEndDate }}.</p>
<p>Sie können innerhalb des Probemonats jederzeit kündigen.</p>
""" + _FOOTER_HTML,
        "text_body": """Hallo {{ vendorName }},

Ihr kostenloser Probemonat läuft vom {{ trialStartDate }} bis zum {{ trialEndDate }}.
""" + _FOOTER_TEXT,
        "variables": ["vendorName", "trialStartDate", "trialEndDate", "siteName", "siteUrl", "currentYear"],
    },
    {
        "template_id": "trial-ending",
        "name": "Probemonat endet bald",
        "type": Type.TRIAL_ENDING,
        "category": Category.NOTIFICATION,
        "description": "Erinnerung einige Tage vor Ende des Probemonats.",
        "subject": "Ihr Probemonat endet in {{ daysRemaining }} Tagen",
        "html_body": """
<h2>Hallo {{ vendorName }},</h2>
<p>Ihr Probemonat endet am {{ trialEndDate }} (noch {{ daysRemaining }} Tage).
Danach wird Ihre Buchung kostenpflichtig fortgesetzt, sofern Sie nicht kündigen.</p>
""" + _FOOTER_HTML,
        "text_body": """Hallo {{ vendorName }},

Ihr Probemonat endet am {{ trialEndDate }} (noch {{ daysRemaining }} Tage).
""" + _FOOTER_TEXT,
        "variables": ["vendorName", "trialEndDate", "daysRemaining", "siteName", "siteUrl", "currentYear"],
    },
    {
        "template_id": "trial-expired",
        "name": "Probemonat abgelaufen",
        "type": Type.TRIAL_EXPIRED,
        "category": Category.NOTIFICATION,
        "description": "Information nach Ablauf des Probemonats.",
        "subject": "Ihr Probemonat bei {{ siteName }} ist beendet",
        "html_body": """
<h2>Hallo {{ vendorName }},</h2>
<p>Ihr Probemonat ist am {{ trialEndDate }} abgelaufen. Vielen Dank, dass Sie {{ siteName }} getestet haben.</p>
""" + _FOOTER_HTML,
        "text_body": """Hallo {{ vendorName }},

Ihr Probemonat ist am {{ trialEndDate }} abgelaufen.
""" + _FOOTER_TEXT,
        "variables": ["vendorName", "trialEndDate", "siteName", "siteUrl", "currentYear"],
    },
    {
        "template_id": "cancellation-confirmation",
        "name": "Kündigungsbestätigung",
        "type": Type.CANCELLATION_CONFIRMATION,
        "category": Category.VENDOR,
        "description": "Bestätigung einer Kündigung im Probemonat.",
        "subject": "Bestätigung Ihrer Kündigung ({{ contractNumber }})",
        "html_body": """
<h2>Hallo {{ vendorName }},</h2>
<p>wir bestätigen die Kündigung Ihres Vertrags {{ contractNumber }} zum {{ cancellationDate }}.
Da die Kündigung im Probemonat erfolgt ist, entstehen Ihnen keine Kosten.</p>
""" + _FOOTER_HTML,
        "text_body": """Hallo {{ vendorName }},

wir bestätigen die Kündigung Ihres Vertrags {{ contractNumber }} zum {{ cancellationDate }}.
""" + _FOOTER_TEXT,
        "variables": ["vendorName", "contractNumber", "cancellationDate", "siteName", "siteUrl", "currentYear"],
    },
]

DEFAULTS_BY_ID = {template["template_id"]: template for template in DEFAULT_TEMPLATES}


_COMMON_VARIABLES = [
    {"name": "siteName", "description": "Name der Plattform", "example": "Housnkuh"},
    {"name": "siteUrl", "description": "URL der Plattform", "example": "https://housnkuh.de"},
    {"name": "currentYear", "description": "Aktuelles Jahr", "example": "2025"},
]

_VENDOR_NAME = {"name": "vendorName", "description": "Name des Vendors", "example": "Max Mustermann"}

VARIABLES_BY_TYPE: dict[str, list[dict[str, str]]] = {
    Type.VENDOR_REGISTRATION_CONFIRMATION: [
        _VENDOR_NAME,
        {"name": "confirmationUrl", "description": "Bestätigungs-URL", "example": "https://housnkuh.de/vendor/confirm/..."},
        {"name": "packages", "description": "Gebuchte Pakete (count, name, line_total)", "example": "2 x Verkaufsblock Lage A"},
        {"name": "monthlyTotal", "description": "Monatlicher Preis", "example": "110.00"},
        {"name": "total", "description": "Gesamtpreis der Laufzeit", "example": "627.00"},
        *_COMMON_VARIABLES,
    ],
    Type.BOOKING_CONFIRMATION: [
        _VENDOR_NAME,
        {"name": "contractNumber", "description": "Vertragsnummer", "example": "K-2025-0001"},
        {"name": "startDate", "description": "Startdatum", "example": "01.03.2025"},
        {"name": "mietfaecher", "description": "Zugewiesene Mietfächer", "example": "Regal A1"},
        {"name": "totalMonthlyPrice", "description": "Monatlicher Gesamtpreis", "example": "110.00"},
        *_COMMON_VARIABLES,
    ],
    Type.TRIAL_ENDING: [
        _VENDOR_NAME,
        {"name": "trialEndDate", "description": "Ende der Testphase", "example": "31.01.2025"},
        {"name": "daysRemaining", "description": "Verbleibende Tage", "example": "7"},
        *_COMMON_VARIABLES,
    ],
    "default": _COMMON_VARIABLES,
}
