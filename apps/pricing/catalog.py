"""Static catalog of rentable packages, provision tiers and add-on services."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal


class PackageCategory:
    STANDARD = "standard"
    COOLED = "cooled"
    PREMIUM = "premium"
    VISIBILITY = "visibility"


@dataclass(frozen=True)
class PackageOption:
    id: str
    name: str
    description: str
    detail: str
    category: str
    # None means "Preis auf Anfrage"
    price: Decimal | None

    @property
    def price_on_request(self) -> bool:
        return self.price is None

    @property
    def price_display(self) -> str:
        if self.price is None:
            return "auf Anfrage"
        return f"{self.price:.2f} €"


@dataclass(frozen=True)
class ProvisionType:
    id: str
    name: str
    rate: int
    description: str
    benefits: tuple[str, ...] = field(default_factory=tuple)

    @property
    def allows_zusatzleistungen(self) -> bool:
        return self.id == PREMIUM_PROVISION


@dataclass(frozen=True)
class Zusatzleistung:
    id: str
    name: str
    description: str
    monthly_price: Decimal


BASIC_PROVISION = "basic"
PREMIUM_PROVISION = "premium"

MIN_RENTAL_MONTHS = 1
MAX_RENTAL_MONTHS = 24

# (Mindestlaufzeit in Monaten, Rabatt) absteigend sortiert
DISCOUNT_TIERS: tuple[tuple[int, Decimal], ...] = (
    (12, Decimal("0.10")),
    (6, Decimal("0.05")),
)


PACKAGE_OPTIONS: tuple[PackageOption, ...] = (
    PackageOption(
        id="block-a",
        name="Verkaufsblock Lage A",
        description="Regal auf Augenhöhe, 80x39x67cm (2 Ebenen)",
        detail="Optimale Sichtbarkeit, beste Platzierung",
        category=PackageCategory.STANDARD,
        price=Decimal("35"),
    ),
    PackageOption(
        id="block-b",
        name="Verkaufsblock Lage B",
        description="Standard Regalfläche, 80x39x33,5cm (1 Ebene)",
        detail="Kostengünstige Option für Einsteiger",
        category=PackageCategory.STANDARD,
        price=Decimal("15"),
    ),
    PackageOption(
        id="block-cold",
        name="Verkaufsblock gekühlt",
        description="Gekühlter Bereich für temperaturempfindliche Produkte",
        detail="Für Frischeprodukte, konstante Kühlung",
        category=PackageCategory.COOLED,
        price=Decimal("50"),
    ),
    PackageOption(
        id="block-frozen",
        name="Verkaufsblock gefroren",
        description="Gefrierbereich für Tiefkühlprodukte",
        detail="Perfekt für Fleisch, Fisch und Tiefkühlprodukte",
        category=PackageCategory.COOLED,
        price=Decimal("60"),
    ),
    PackageOption(
        id="block-table",
        name="Verkaufstisch",
        description="Präsentationstisch für besondere Produkte",
        detail="Ideale Präsentationsfläche für Spezialprodukte",
        category=PackageCategory.PREMIUM,
        price=Decimal("40"),
    ),
    PackageOption(
        id="block-other",
        name="Flexibler Bereich",
        description="Anpassbarer Bereich für spezielle Anforderungen",
        detail="Flexible Nutzung je nach Produktart",
        category=PackageCategory.STANDARD,
        price=None,
    ),
    PackageOption(
        id="window-small",
        name="Schaufenster klein",
        description="Zusätzliche Außenwirkung, mehr Sichtbarkeit",
        detail="Zusätzliche Sichtbarkeit für deine Produkte",
        category=PackageCategory.VISIBILITY,
        price=Decimal("30"),
    ),
    PackageOption(
        id="window-large",
        name="Schaufenster groß",
        description="Maximale Außenwirkung, Premium-Platzierung",
        detail="Maximale Sichtbarkeit für deine Produkte",
        category=PackageCategory.VISIBILITY,
        price=Decimal("60"),
    ),
)

PROVISION_TYPES: tuple[ProvisionType, ...] = (
    ProvisionType(
        id=BASIC_PROVISION,
        name="Basismodell",
        rate=4,
        description="Verkauf deiner Produkte ohne Diebstahlschutz (Du trägst das Warenrisiko)",
        benefits=(
            "Verkauf über das Housnkuh-Kassensystem",
            "Tägliche Verkaufsübersicht",
            "Kartenzahlungsgebühren inklusive",
        ),
    ),
    ProvisionType(
        id=PREMIUM_PROVISION,
        name="Premium-Modell",
        rate=7,
        description="Umfassendes Paket mit Diebstahlschutz und zusätzlichen Marketing-Vorteilen",
        benefits=(
            "Verkauf über das Housnkuh-Kassensystem",
            "Tägliche Verkaufsübersicht",
            "Diebstahlschutz (Risiko wird von housnkuh getragen)",
            "Automatisierte Bestandsführung",
            "Priorität bei Marketing-Aktionen",
            "Kartenzahlungsgebühren inklusive",
        ),
    ),
)

ZUSATZLEISTUNGEN: tuple[Zusatzleistung, ...] = (
    Zusatzleistung(
        id="lagerservice",
        name="Lagerservice",
        description="Einlagerung deiner Ware im housnkuh-Lager, Nachfüllen durch unser Team",
        monthly_price=Decimal("20"),
    ),
    Zusatzleistung(
        id="versandservice",
        name="Versandservice",
        description="Annahme von Paketsendungen und Weiterleitung an den Verkaufsort",
        monthly_price=Decimal("5"),
    ),
)

_PACKAGES_BY_ID = {package.id: package for package in PACKAGE_OPTIONS}
_PROVISIONS_BY_ID = {provision.id: provision for provision in PROVISION_TYPES}
_ZUSATZLEISTUNGEN_BY_ID = {service.id: service for service in ZUSATZLEISTUNGEN}


def get_package(package_id: str) -> PackageOption | None:
    return _PACKAGES_BY_ID.get(package_id)


def get_provision_type(provision_id: str) -> ProvisionType | None:
    return _PROVISIONS_BY_ID.get(provision_id)


def get_zusatzleistung(service_id: str) -> Zusatzleistung | None:
    return _ZUSATZLEISTUNGEN_BY_ID.get(service_id)


def lagerservice_monthly_price() -> Decimal:
    return _ZUSATZLEISTUNGEN_BY_ID["lagerservice"].monthly_price


def versandservice_monthly_price() -> Decimal:
    return _ZUSATZLEISTUNGEN_BY_ID["versandservice"].monthly_price


def discount_rate_for(months: int) -> Decimal:
    """Rabatt als Anteil: 10 % ab 12 Monaten, 5 % ab 6 Monaten, sonst 0."""
    for min_months, rate in DISCOUNT_TIERS:
        if months >= min_months:
            return rate
    return Decimal("0")
