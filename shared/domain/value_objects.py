"""
Common Value Objects

Value objects used across multiple domains:
- Money: Represents monetary amounts in euro, rounded to cents
- DateRange: Represents a half-open range of dates (rental start to end)
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from shared.domain.base import ValueObject

CENT = Decimal('0.01')


@dataclass(frozen=True)
class Money(ValueObject):
    """
    Money value object

    Represents a non-negative monetary amount with currency.
    Immutable and supports the arithmetic the price calculation needs.
    """
    amount: Decimal
    currency: str = 'EUR'

    def __post_init__(self):
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, 'amount', Decimal(str(self.amount)))
        if self.amount < 0:
            raise ValueError("Amount cannot be negative")
        if self.currency != 'EUR':
            raise ValueError(f"Unsupported currency: {self.currency}")

    @classmethod
    def zero(cls) -> 'Money':
        return cls(Decimal('0'))

    def __add__(self, other: 'Money') -> 'Money':
        """Add two money objects"""
        if not isinstance(other, Money):
            raise TypeError("Can only add Money to Money")
        return Money(self.amount + other.amount, self.currency)

    def __sub__(self, other: 'Money') -> 'Money':
        """Subtract two money objects"""
        if not isinstance(other, Money):
            raise TypeError("Can only subtract Money from Money")
        return Money(self.amount - other.amount, self.currency)

    def __mul__(self, factor) -> 'Money':
        """Multiply money by a factor"""
        if not isinstance(factor, (int, Decimal)):
            raise TypeError("Can only multiply Money by int or Decimal")
        return Money(self.amount * factor, self.currency)

    def rounded(self) -> 'Money':
        return Money(self.amount.quantize(CENT, rounding=ROUND_HALF_UP), self.currency)

    def __str__(self):
        return f"{self.amount:,.2f} €"

    def __repr__(self):
        return f"Money({self.amount}, '{self.currency}')"


@dataclass(frozen=True)
class DateRange(ValueObject):
    """
    Date range value object

    Represents a range from start_date (inclusive) to end_date (exclusive).
    Used for rental periods and availability checks.
    """
    start_date: date
    end_date: date

    def __post_init__(self):
        if self.start_date >= self.end_date:
            raise ValueError(f"Start date ({self.start_date}) must be before end date ({self.end_date})")

    def overlaps_with(self, other: 'DateRange') -> bool:
        """
        Check if this range overlaps with another

        end_date is exclusive, so adjacent ranges don't overlap.

        Examples:
            - DateRange(01.03, 01.06) overlaps with DateRange(01.05, 01.08) -> True
            - DateRange(01.03, 01.06) overlaps with DateRange(01.06, 01.09) -> False (adjacent)
        """
        if not isinstance(other, DateRange):
            raise TypeError("Can only check overlap with another DateRange")

        # Overlap formula: start1 < end2 AND end1 > start2
        return (self.start_date < other.end_date and
                self.end_date > other.start_date)

    def __str__(self):
        return f"{self.start_date.strftime('%d.%m.%Y')} - {self.end_date.strftime('%d.%m.%Y')}"

    def __repr__(self):
        return f"DateRange({self.start_date}, {self.end_date})"
