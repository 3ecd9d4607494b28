"""
Booking Command Handlers

These are the use cases for the booking domain.
They orchestrate domain operations within transactions.

Commands:
- CreateBookingCommand: Reserve a venue time window (pending payment)
- CancelBookingCommand: Cancel a booking as its customer or an operator

Every command carries the authenticated ``actor`` explicitly; handlers never
look up a current user on their own.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Any, Optional
import logging

from django.conf import settings
from django.utils import timezone

from shared.application.uow import DjangoUnitOfWork
from shared.domain.exceptions import (
    AuthorizationError,
    IdempotencyConflict,
    InvalidStateError,
    ValidationError,
)
from apps.bookings.domain.events import BookingCreated
from apps.bookings.domain.slots import validate_booking_window
from apps.bookings.models import Booking
from apps.bookings.services import (
    get_booking,
    get_venue,
    insert_booking,
    release_units_for_booking,
    store_errors,
)
from apps.users.models import is_operator

logger = logging.getLogger(__name__)


# ===== Commands =====

@dataclass
class CreateBookingCommand:
    """
    Command to create a new booking

    ``idempotency_key`` is the client-supplied key; replaying a create with
    the same key returns the booking the first call produced.
    """
    actor: Any
    venue_id: int
    booking_date: date
    start_time: time
    end_time: time
    idempotency_key: Optional[str] = None


@dataclass
class CancelBookingCommand:
    """Command to cancel a booking"""
    actor: Any
    booking_id: int
    reason: str = ''


@dataclass
class CreateBookingResult:
    booking: Booking
    replayed: bool = False


# ===== Command Handlers =====

class CreateBookingHandler:
    """
    Handler for CreateBooking command

    Strategy:
    1. Replay the original booking when the idempotency key was seen before
    2. Validate the window against venue policy (no store access)
    3. Snapshot the hourly rate and compute the total
    4. Conflict-checked insert inside one transaction; the per-unit unique
       constraint rejects whichever concurrent writer comes second
    5. Publish BookingCreated after commit
    """

    def handle(self, command: CreateBookingCommand) -> CreateBookingResult:
        actor = command.actor
        if actor is None or not getattr(actor, 'is_authenticated', False):
            raise AuthorizationError("Authentication is required to book a venue.")

        key = (command.idempotency_key or '').strip() or None
        if key and len(key) > 255:
            raise ValidationError("Idempotency key is too long.", field="idempotency_key")

        with store_errors():
            if key:
                replay = self._find_replay(actor, key, command)
                if replay is not None:
                    return CreateBookingResult(replay, replayed=True)

            venue = get_venue(command.venue_id)
            if not venue.is_active:
                raise ValidationError(f"Venue {venue.pk} is not accepting bookings.", field="venue")

            time_range = validate_booking_window(
                venue.operating_hours,
                settings.BOOKING_UNIT_MINUTES,
                command.booking_date,
                command.start_time,
                command.end_time,
                timezone.localtime(),
            )
            rate = venue.hourly_rate
            total = (rate * time_range.hours).quantized()

            logger.info(
                f"Creating booking for venue {venue.pk}, customer {actor.pk}, "
                f"{command.booking_date} {time_range}"
            )

            with DjangoUnitOfWork() as uow:
                booking = Booking(
                    venue=venue,
                    customer=actor,
                    booking_date=command.booking_date,
                    start_time=time_range.start,
                    end_time=time_range.end,
                    price_per_hour=rate.amount,
                    total=total.amount,
                    currency=total.currency,
                    idempotency_key=key,
                    expires_at=timezone.now() + timedelta(minutes=settings.BOOKING_HOLD_MINUTES),
                )
                insert_booking(booking)

                booking.add_event(BookingCreated(
                    aggregate_id=booking.pk,
                    booking_id=booking.pk,
                    venue_id=venue.pk,
                    customer_id=actor.pk,
                    booking_date=booking.booking_date,
                    time_range=time_range,
                    total=total,
                ))
                uow.collect_events(booking)

        logger.info(f"Booking {booking.pk} created, total {total}")
        return CreateBookingResult(booking)

    def _find_replay(self, actor, key: str, command: CreateBookingCommand) -> Optional[Booking]:
        existing = Booking.objects.filter(customer=actor, idempotency_key=key).first()
        if existing is None:
            return None
        if not existing.matches_request(
            command.venue_id, command.booking_date, command.start_time, command.end_time
        ):
            raise IdempotencyConflict(idempotency_key=key)
        logger.info(f"Replaying booking {existing.pk} for idempotency key")
        return existing


class CancelBookingHandler:
    """Handler for cancelling booking and releasing its time range"""

    def handle(self, command: CancelBookingCommand) -> Booking:
        actor = command.actor
        logger.info(f"Cancelling booking {command.booking_id}, reason: {command.reason!r}")

        with store_errors(), DjangoUnitOfWork() as uow:
            booking = get_booking(command.booking_id, for_update=True)

            is_owner = actor is not None and booking.customer_id == getattr(actor, 'pk', None)
            if not is_owner and not is_operator(actor):
                raise AuthorizationError("Only the customer or an operator can cancel this booking.")

            if booking.is_cancelled:
                raise InvalidStateError(f"Booking {booking.pk} is already cancelled.", status=booking.status)

            if booking.has_ended():
                raise InvalidStateError(f"Booking {booking.pk} has already ended.", status=booking.status)

            source = (
                Booking.CancellationSource.CUSTOMER if is_owner
                else Booking.CancellationSource.OPERATOR
            )
            booking.mark_cancelled(source, command.reason)
            booking.save()
            release_units_for_booking(booking)
            uow.collect_events(booking)

        logger.info(f"Booking {booking.pk} cancelled by {booking.cancellation_source}")
        return booking


def expire_booking(booking: Booking) -> None:
    """Cancel a stale pending booking on behalf of the system."""
    booking.mark_expired()
    booking.save()
    release_units_for_booking(booking)


def expire_stale_bookings(now: Optional[datetime] = None) -> int:
    """
    Cancel pending bookings whose payment hold has run out

    Each booking is expired in its own transaction after re-reading it under
    lock, so a payment confirmed in the meantime wins.
    """
    now = now or timezone.now()
    stale_ids = list(
        Booking.objects.filter(
            status=Booking.Status.PENDING,
            expires_at__lte=now,
        ).values_list('pk', flat=True)
    )

    expired = 0
    for booking_id in stale_ids:
        try:
            with store_errors(), DjangoUnitOfWork() as uow:
                booking = get_booking(booking_id, for_update=True)
                if not booking.is_hold_expired(now):
                    continue
                expire_booking(booking)
                uow.collect_events(booking)
        except Exception as e:
            logger.error(f"Failed to expire booking {booking_id}: {e}", exc_info=True)
            continue
        expired += 1
        logger.info(f"Booking {booking_id} expired: payment hold ran out")

    return expired
