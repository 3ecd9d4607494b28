"""
Common Value Objects

Value objects used across multiple domains:
- Money: Represents monetary amounts with currency
- TimeRange: Represents a half-open range of clock time within one day
"""

from dataclasses import dataclass
from datetime import time
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterator

from shared.domain.base import ValueObject

CENT = Decimal('0.01')


def minutes_of(value: time) -> int:
    """Minutes elapsed since midnight."""
    return value.hour * 60 + value.minute


def time_from_minutes(minutes: int) -> time:
    if not 0 <= minutes < 24 * 60:
        raise ValueError(f"{minutes} minutes is outside of a single day")
    return time(minutes // 60, minutes % 60)


@dataclass(frozen=True)
class Money(ValueObject):
    """
    Money value object

    Represents a monetary amount with currency.
    Immutable and supports arithmetic operations.
    """
    amount: Decimal
    currency: str = 'INR'

    def __post_init__(self):
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, 'amount', Decimal(str(self.amount)))
        if self.amount < 0:
            raise ValueError("Amount cannot be negative")
        if not self.currency or len(self.currency) != 3 or not self.currency.isupper():
            raise ValueError(f"Unsupported currency: {self.currency!r}")

    def __add__(self, other: 'Money') -> 'Money':
        """Add two money objects"""
        if not isinstance(other, Money):
            raise TypeError("Can only add Money to Money")
        if self.currency != other.currency:
            raise ValueError(f"Cannot add different currencies: {self.currency} and {other.currency}")
        return Money(self.amount + other.amount, self.currency)

    def __mul__(self, factor) -> 'Money':
        """Multiply money by a factor"""
        if not isinstance(factor, (int, Decimal)):
            raise TypeError("Can only multiply Money by int or Decimal")
        return Money(self.amount * factor, self.currency)

    def quantized(self) -> 'Money':
        """Round to whole cents."""
        return Money(self.amount.quantize(CENT, rounding=ROUND_HALF_UP), self.currency)

    def __str__(self):
        return f"{self.amount:,.2f} {self.currency}"

    def __repr__(self):
        return f"Money({self.amount}, '{self.currency}')"


@dataclass(frozen=True)
class TimeRange(ValueObject):
    """
    Time range value object

    Represents a range from start (inclusive) to end (exclusive) on the same
    calendar day. Used for booking windows, slots and operating hours.
    """
    start: time
    end: time

    def __post_init__(self):
        if self.start.second or self.start.microsecond or self.end.second or self.end.microsecond:
            raise ValueError("Time ranges are minute-granular")
        if self.start >= self.end:
            raise ValueError(f"Start time ({self.start}) must be before end time ({self.end})")

    @classmethod
    def from_minutes(cls, start: int, end: int) -> 'TimeRange':
        return cls(time_from_minutes(start), time_from_minutes(end))

    def overlaps_with(self, other: 'TimeRange') -> bool:
        """
        Check if this range overlaps with another

        Half-open intersection: adjacent ranges (12:00-15:00 and 15:00-18:00)
        do not overlap.
        """
        if not isinstance(other, TimeRange):
            raise TypeError("Can only check overlap with another TimeRange")
        return self.start < other.end and other.start < self.end

    def contains(self, other: 'TimeRange') -> bool:
        """True if ``other`` lies entirely within this range."""
        return self.start <= other.start and other.end <= self.end

    def is_aligned_to(self, unit_minutes: int) -> bool:
        return minutes_of(self.start) % unit_minutes == 0 and minutes_of(self.end) % unit_minutes == 0

    @property
    def minutes(self) -> int:
        return minutes_of(self.end) - minutes_of(self.start)

    @property
    def hours(self) -> Decimal:
        return Decimal(self.minutes) / Decimal(60)

    def split(self, width_minutes: int) -> Iterator['TimeRange']:
        """
        Tile the range with consecutive pieces of ``width_minutes``

        The last piece is shorter when the range is not an exact multiple.
        """
        if width_minutes <= 0:
            raise ValueError("Width must be positive")
        cursor = minutes_of(self.start)
        stop = minutes_of(self.end)
        while cursor < stop:
            piece_end = min(cursor + width_minutes, stop)
            yield TimeRange.from_minutes(cursor, piece_end)
            cursor = piece_end

    def __str__(self):
        return f"{self.start.strftime('%H:%M')}-{self.end.strftime('%H:%M')}"

    def __repr__(self):
        return f"TimeRange({self.start}, {self.end})"
