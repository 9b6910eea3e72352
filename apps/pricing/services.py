"""Price calculation for package bookings.

``calculate_price`` is a pure function: it maps a package selection (package
counts, Zusatzleistungen, rental duration, provision tier) to a
``PriceBreakdown``. Packages priced "auf Anfrage" contribute nothing to the
computed totals and are reported separately so the caller can show that a
manual quote is needed instead of a silently wrong sum.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Mapping

from shared.domain.value_objects import Money

from . import catalog


class PriceCalculationError(Exception):
    """Raised when a package selection cannot be priced."""


@dataclass(frozen=True)
class PackageSelection:
    package_counts: Mapping[str, int]
    rental_duration: int
    provision_type: str = catalog.BASIC_PROVISION
    zusatzleistungen: frozenset[str] = frozenset()

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "PackageSelection":
        """Build a selection from request/pending-booking data.

        Accepts ``zusatzleistungen`` either as a list of ids or as the
        ``{"lagerservice": true, ...}`` flag map the booking form submits.
        """
        raw_services = payload.get("zusatzleistungen") or []
        if isinstance(raw_services, Mapping):
            services = frozenset(key for key, enabled in raw_services.items() if enabled)
        else:
            services = frozenset(raw_services)
        try:
            duration = int(payload.get("rental_duration", 0))
            counts = {str(key): int(value) for key, value in (payload.get("package_counts") or {}).items()}
        except (TypeError, ValueError) as exc:
            raise PriceCalculationError("Ungültige Paketdaten.") from exc
        return cls(
            package_counts=counts,
            rental_duration=duration,
            provision_type=payload.get("provision_type") or catalog.BASIC_PROVISION,
            zusatzleistungen=services,
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "package_counts": dict(self.package_counts),
            "rental_duration": self.rental_duration,
            "provision_type": self.provision_type,
            "zusatzleistungen": {
                service.id: service.id in self.zusatzleistungen for service in catalog.ZUSATZLEISTUNGEN
            },
        }


@dataclass(frozen=True)
class PackageLine:
    package_id: str
    name: str
    count: int
    unit_price: Decimal | None
    line_total: Decimal

    @property
    def price_on_request(self) -> bool:
        return self.unit_price is None


@dataclass(frozen=True)
class PriceBreakdown:
    package_lines: tuple[PackageLine, ...]
    zusatzleistungen_lines: tuple[tuple[str, Decimal], ...]
    package_costs: Decimal
    zusatzleistungen_costs: Decimal
    monthly_total: Decimal
    rental_duration: int
    subtotal: Decimal
    discount_rate: Decimal
    discount_amount: Decimal
    total: Decimal
    provision_type: str
    provision_rate: int
    on_request_packages: tuple[str, ...] = field(default_factory=tuple)

    @property
    def requires_manual_quote(self) -> bool:
        return bool(self.on_request_packages)

    @property
    def discount_percent(self) -> int:
        return int(self.discount_rate * 100)

    def to_dict(self) -> dict[str, Any]:
        return {
            "packages": [
                {
                    "id": line.package_id,
                    "name": line.name,
                    "count": line.count,
                    "unit_price": str(line.unit_price) if line.unit_price is not None else None,
                    "line_total": str(line.line_total),
                    "price_on_request": line.price_on_request,
                }
                for line in self.package_lines
            ],
            "zusatzleistungen": [
                {"id": service_id, "monthly_price": str(price)}
                for service_id, price in self.zusatzleistungen_lines
            ],
            "package_costs": str(self.package_costs),
            "zusatzleistungen_costs": str(self.zusatzleistungen_costs),
            "monthly_total": str(self.monthly_total),
            "rental_duration": self.rental_duration,
            "subtotal": str(self.subtotal),
            "discount_rate": str(self.discount_rate),
            "discount_percent": self.discount_percent,
            "discount_amount": str(self.discount_amount),
            "total": str(self.total),
            "provision_type": self.provision_type,
            "provision_rate": self.provision_rate,
            "on_request_packages": list(self.on_request_packages),
            "requires_manual_quote": self.requires_manual_quote,
        }


def normalize_selection(selection: PackageSelection) -> PackageSelection:
    """Drop empty package counts and add-ons the provision tier does not allow."""

    provision = catalog.get_provision_type(selection.provision_type)
    if provision is None:
        raise PriceCalculationError(f"Unbekanntes Provisionsmodell: {selection.provision_type}")

    counts = {package_id: count for package_id, count in selection.package_counts.items() if count > 0}
    services = selection.zusatzleistungen if provision.allows_zusatzleistungen else frozenset()
    return PackageSelection(
        package_counts=counts,
        rental_duration=selection.rental_duration,
        provision_type=provision.id,
        zusatzleistungen=services,
    )


def _validate(selection: PackageSelection) -> None:
    if not catalog.MIN_RENTAL_MONTHS <= selection.rental_duration <= catalog.MAX_RENTAL_MONTHS:
        raise PriceCalculationError(
            f"Die Mietdauer muss zwischen {catalog.MIN_RENTAL_MONTHS} und "
            f"{catalog.MAX_RENTAL_MONTHS} Monaten liegen."
        )
    for package_id, count in selection.package_counts.items():
        if catalog.get_package(package_id) is None:
            raise PriceCalculationError(f"Unbekanntes Paket: {package_id}")
        if count < 0:
            raise PriceCalculationError(f"Ungültige Anzahl für Paket {package_id}.")
    for service_id in selection.zusatzleistungen:
        if catalog.get_zusatzleistung(service_id) is None:
            raise PriceCalculationError(f"Unbekannte Zusatzleistung: {service_id}")


def calculate_price(selection: PackageSelection) -> PriceBreakdown | None:
    """Compute the cost breakdown for a selection, or ``None`` if nothing is selected.

    Example: ``{"block-a": 2, "block-table": 1}`` for 6 months gives a
    monthly total of 110 €, subtotal 660 €, 5 % discount (33 €) and a
    total of 627 €.
    """

    _validate(selection)
    selection = normalize_selection(selection)
    if not selection.package_counts:
        return None

    provision = catalog.get_provision_type(selection.provision_type)

    package_costs = Money.zero()
    lines = []
    on_request = []
    for package_id, count in selection.package_counts.items():
        package = catalog.get_package(package_id)
        if package.price_on_request:
            on_request.append(package_id)
            line_total = Money.zero()
        else:
            line_total = Money(package.price) * count
            package_costs = package_costs + line_total
        lines.append(
            PackageLine(
                package_id=package_id,
                name=package.name,
                count=count,
                unit_price=package.price,
                line_total=line_total.rounded().amount,
            )
        )

    service_costs = Money.zero()
    service_lines = []
    for service in catalog.ZUSATZLEISTUNGEN:
        if service.id in selection.zusatzleistungen:
            service_costs = service_costs + Money(service.monthly_price)
            service_lines.append((service.id, service.monthly_price))

    monthly = package_costs + service_costs
    subtotal = monthly * selection.rental_duration
    discount_rate = catalog.discount_rate_for(selection.rental_duration)
    discount_amount = (subtotal * discount_rate).rounded()
    total = subtotal.rounded() - discount_amount

    return PriceBreakdown(
        package_lines=tuple(lines),
        zusatzleistungen_lines=tuple(service_lines),
        package_costs=package_costs.rounded().amount,
        zusatzleistungen_costs=service_costs.rounded().amount,
        monthly_total=monthly.rounded().amount,
        rental_duration=selection.rental_duration,
        subtotal=subtotal.rounded().amount,
        discount_rate=discount_rate,
        discount_amount=discount_amount.amount,
        total=total.amount,
        provision_type=provision.id,
        provision_rate=provision.rate,
        on_request_packages=tuple(on_request),
    )
