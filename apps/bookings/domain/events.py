"""
Booking Domain Events

Events that represent things that have happened in the booking domain.
These are published after successful transaction commits.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional

from shared.domain.base import DomainEvent
from shared.domain.value_objects import Money, TimeRange


@dataclass(kw_only=True)
class BookingCreated(DomainEvent):
    """
    Event: A new booking was created (pending payment)

    Triggers:
    - Start of the payment hold window
    """
    booking_id: int
    venue_id: int
    customer_id: int
    booking_date: date
    time_range: TimeRange
    total: Money


@dataclass(kw_only=True)
class BookingConfirmed(DomainEvent):
    """
    Event: Booking payment verified (pending -> confirmed)

    Triggers:
    - Confirmation to the customer
    - Revenue analytics
    """
    booking_id: int
    venue_id: int
    customer_id: int
    payment_id: str


@dataclass(kw_only=True)
class BookingCancelled(DomainEvent):
    """
    Event: Booking was cancelled by its customer, an operator or the system

    Triggers:
    - Refund hand-off to the gateway when ``refund_due`` is set
    """
    booking_id: int
    venue_id: int
    source: str
    reason: str
    old_status: str
    refund_due: bool = False
    refund_amount: Optional[Money] = None


@dataclass(kw_only=True)
class BookingExpired(DomainEvent):
    """
    Event: Payment hold ran out without a verified payment

    The booking is cancelled by the system and its time range is free again.
    """
    booking_id: int
    venue_id: int


@dataclass(kw_only=True)
class PaymentVerificationFailed(DomainEvent):
    """Event: A payment proof did not match the gateway signature."""
    booking_id: int
    payment_id: str
    attempts: int
