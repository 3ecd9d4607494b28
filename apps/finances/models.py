"""Financial domain models for HallBook."""

from __future__ import annotations

from decimal import Decimal

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class PaymentRecord(models.Model):
    """Verified gateway payment of a booking; written once."""

    booking = models.OneToOneField(
        "bookings.Booking",
        on_delete=models.PROTECT,
        related_name="payment_record",
    )
    payment_id = models.CharField(max_length=100, unique=True)
    signature = models.CharField(max_length=128)
    amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    currency = models.CharField(max_length=3, default="INR")
    verified_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Payment record")
        verbose_name_plural = _("Payment records")
        ordering = ["-verified_at"]

    def __str__(self) -> str:
        return f"Payment {self.payment_id} for booking {self.booking_id}"


class PaymentAttempt(models.Model):
    """History of payment confirmations received from clients and the gateway."""

    class Outcome(models.TextChoices):
        CONFIRMED = "confirmed", _("Confirmed")
        REPLAYED = "replayed", _("Already confirmed")
        REJECTED = "rejected", _("Signature rejected")
        EXPIRED = "expired", _("Hold expired")
        INVALID_STATE = "invalid_state", _("Booking not payable")

    class Channel(models.TextChoices):
        CLIENT = "client", _("Client")
        WEBHOOK = "webhook", _("Gateway webhook")

    booking = models.ForeignKey(
        "bookings.Booking",
        on_delete=models.CASCADE,
        related_name="payment_attempts",
    )
    payment_id = models.CharField(max_length=100)
    outcome = models.CharField(max_length=20, choices=Outcome.choices)
    channel = models.CharField(max_length=20, choices=Channel.choices, default=Channel.CLIENT)
    remote_addr = models.GenericIPAddressField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Payment attempt")
        verbose_name_plural = _("Payment attempts")
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.outcome} {self.payment_id} for booking {self.booking_id}"
