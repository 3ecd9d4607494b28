"""Booking domain models for HallBook.

``Booking`` is the aggregate root of a reservation and records its domain
events until the surrounding unit of work commits. ``BookingUnit`` holds one
row per occupied booking unit; its unique constraint is what makes two
overlapping live bookings of a venue impossible at the database level.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.base import EventRecorder
from shared.domain.value_objects import Money, TimeRange

from .domain.events import BookingCancelled, BookingConfirmed, BookingExpired


class Booking(EventRecorder, models.Model):
    """A customer's claim on a venue for a time window of one day."""

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending payment")
        CONFIRMED = "confirmed", _("Confirmed")
        CANCELLED = "cancelled", _("Cancelled")

    class PaymentStatus(models.TextChoices):
        PENDING = "pending", _("Pending")
        COMPLETED = "completed", _("Completed")
        FAILED = "failed", _("Failed")

    class CancellationSource(models.TextChoices):
        CUSTOMER = "customer", _("Customer")
        OPERATOR = "operator", _("Operator")
        SYSTEM = "system", _("System")

    venue = models.ForeignKey(
        "venues.Venue",
        on_delete=models.PROTECT,
        related_name="bookings",
    )
    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="bookings",
    )
    booking_date = models.DateField()
    start_time = models.TimeField()
    end_time = models.TimeField()
    price_per_hour = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        help_text=_("Hourly rate of the venue at the moment of booking."),
    )
    total = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    currency = models.CharField(max_length=3, default="INR")
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
    )
    payment_status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
    )
    failed_payment_attempts = models.PositiveSmallIntegerField(default=0)
    idempotency_key = models.CharField(max_length=255, null=True, blank=True)
    expires_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text=_("Payment hold deadline; the system cancels the booking after it."),
    )
    confirmed_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    cancellation_source = models.CharField(
        max_length=20,
        choices=CancellationSource.choices,
        blank=True,
    )
    cancellation_reason = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["-booking_date", "-start_time"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(start_time__lt=models.F("end_time")),
                name="booking_start_before_end",
            ),
            models.UniqueConstraint(
                fields=["customer", "idempotency_key"],
                condition=models.Q(idempotency_key__isnull=False),
                name="booking_unique_idempotency_key",
            ),
        ]
        indexes = [
            models.Index(fields=["venue", "booking_date", "status"], name="bookings_bo_venue_i_5c3e1a_idx"),
            models.Index(fields=["customer", "booking_date"], name="bookings_bo_custome_8d2f4b_idx"),
            models.Index(fields=["status", "expires_at"], name="bookings_bo_status_a71c90_idx"),
        ]

    def __str__(self) -> str:
        return f"Booking #{self.pk} {self.venue_id} {self.booking_date} {self.time_range}"

    @property
    def time_range(self) -> TimeRange:
        return TimeRange(self.start_time, self.end_time)

    @property
    def total_money(self) -> Money:
        return Money(self.total, self.currency)

    @property
    def is_cancelled(self) -> bool:
        return self.status == self.Status.CANCELLED

    def matches_request(self, venue_id: int, booking_date, start_time, end_time) -> bool:
        """True when a replayed create asks for exactly this reservation."""
        return (
            self.venue_id == venue_id
            and self.booking_date == booking_date
            and self.start_time == start_time
            and self.end_time == end_time
        )

    def ends_at(self) -> datetime:
        return timezone.make_aware(datetime.combine(self.booking_date, self.end_time))

    def has_ended(self, now: datetime | None = None) -> bool:
        return (now or timezone.now()) >= self.ends_at()

    def is_hold_expired(self, now: datetime | None = None) -> bool:
        return bool(
            self.status == self.Status.PENDING
            and self.expires_at
            and (now or timezone.now()) >= self.expires_at
        )

    # State transitions. Callers save the booking and release its units.

    def mark_confirmed(self, payment_id: str) -> None:
        self.status = self.Status.CONFIRMED
        self.payment_status = self.PaymentStatus.COMPLETED
        self.confirmed_at = timezone.now()
        self.expires_at = None
        self.add_event(BookingConfirmed(
            aggregate_id=self.pk,
            booking_id=self.pk,
            venue_id=self.venue_id,
            customer_id=self.customer_id,
            payment_id=payment_id,
        ))

    def mark_cancelled(self, source: str, reason: str = "") -> None:
        old_status = self.status
        refund_due = self.payment_status == self.PaymentStatus.COMPLETED
        self.status = self.Status.CANCELLED
        if not refund_due:
            self.payment_status = self.PaymentStatus.FAILED
        self.cancellation_source = source
        self.cancellation_reason = reason[:255]
        self.cancelled_at = timezone.now()
        self.expires_at = None
        self.add_event(BookingCancelled(
            aggregate_id=self.pk,
            booking_id=self.pk,
            venue_id=self.venue_id,
            source=source,
            reason=self.cancellation_reason,
            old_status=old_status,
            refund_due=refund_due,
            refund_amount=self.total_money if refund_due else None,
        ))

    def mark_expired(self) -> None:
        self.mark_cancelled(self.CancellationSource.SYSTEM, "Payment hold expired.")
        self.add_event(BookingExpired(
            aggregate_id=self.pk,
            booking_id=self.pk,
            venue_id=self.venue_id,
        ))

    def mark_payment_failed(self) -> None:
        self.payment_status = self.PaymentStatus.FAILED

    def record_failed_payment(self) -> int:
        """Count a failed attempt made by the customer or an operator."""
        self.mark_payment_failed()
        self.failed_payment_attempts += 1
        return self.failed_payment_attempts


class BookingUnit(models.Model):
    """One occupied booking unit of a venue's day, owned by a live booking."""

    venue = models.ForeignKey(
        "venues.Venue",
        on_delete=models.CASCADE,
        related_name="occupied_units",
    )
    booking_date = models.DateField()
    starts_at = models.TimeField()
    booking = models.ForeignKey(
        Booking,
        on_delete=models.CASCADE,
        related_name="units",
    )

    class Meta:
        verbose_name = _("Occupied unit")
        verbose_name_plural = _("Occupied units")
        ordering = ["booking_date", "starts_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["venue", "booking_date", "starts_at"],
                name="booking_unit_unique_per_venue",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.venue_id} {self.booking_date} {self.starts_at:%H:%M}"
