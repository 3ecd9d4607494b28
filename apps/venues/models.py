"""Venue catalog models for HallBook.

A venue is a bookable hall. The booking engine only needs its identity,
current pricing, capacity and the operating-hours policy that slots are cut
from; descriptive content lives elsewhere.
"""

from __future__ import annotations

from datetime import datetime, time
from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.exceptions import ValidationError  # type: ignore
from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.value_objects import Money, TimeRange, minutes_of


def _parse_clock(value: str) -> time:
    return datetime.strptime(value, "%H:%M").time()


def default_opening_time() -> time:
    return _parse_clock(settings.BOOKING_DEFAULT_OPENING_TIME)


def default_closing_time() -> time:
    return _parse_clock(settings.BOOKING_DEFAULT_CLOSING_TIME)


def default_slot_minutes() -> int:
    return settings.BOOKING_DEFAULT_SLOT_MINUTES


class Venue(models.Model):
    """A bookable hall with capacity, rates and operating hours."""

    name = models.CharField(max_length=255)
    capacity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    price_per_hour = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    price_per_day = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    location = models.CharField(max_length=255, blank=True)
    opening_time = models.TimeField(default=default_opening_time)
    closing_time = models.TimeField(default=default_closing_time)
    slot_minutes = models.PositiveSmallIntegerField(
        default=default_slot_minutes,
        help_text=_("Width of one listed availability slot, in minutes."),
    )
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Venue")
        verbose_name_plural = _("Venues")
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(opening_time__lt=models.F("closing_time")),
                name="venue_opening_before_closing",
            ),
        ]

    def __str__(self) -> str:
        return self.name

    def clean(self) -> None:
        unit = settings.BOOKING_UNIT_MINUTES
        if self.opening_time >= self.closing_time:
            raise ValidationError(_("Opening time must be before closing time."))
        if minutes_of(self.opening_time) % unit or minutes_of(self.closing_time) % unit:
            raise ValidationError(
                _("Operating hours must be aligned to %(unit)s minute units.") % {"unit": unit}
            )
        if not self.slot_minutes or self.slot_minutes % unit:
            raise ValidationError(
                _("Slot width must be a positive multiple of %(unit)s minutes.") % {"unit": unit}
            )

    @property
    def operating_hours(self) -> TimeRange:
        return TimeRange(self.opening_time, self.closing_time)

    @property
    def hourly_rate(self) -> Money:
        return Money(self.price_per_hour, settings.BOOKING_CURRENCY)
