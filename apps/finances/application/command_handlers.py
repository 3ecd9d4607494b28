"""
Payment Command Handlers

Commands:
- ConfirmPaymentCommand: Apply a gateway payment proof to a booking

The attempt itself is always recorded, so the handler decides the outcome
inside the transaction and raises the resulting error only after the
booking's new state (failed attempt, expiry) has been committed.
"""

from dataclasses import dataclass
from typing import Any, Optional
import logging

import structlog
from django.conf import settings
from django.db import IntegrityError, transaction

from shared.application.uow import DjangoUnitOfWork
from shared.domain.exceptions import (
    AuthorizationError,
    EngineError,
    InvalidStateError,
    VerificationError,
)
from apps.bookings.application.command_handlers import expire_booking
from apps.bookings.domain.events import BookingCancelled, PaymentVerificationFailed
from apps.bookings.models import Booking
from apps.bookings.services import get_booking, release_units_for_booking, store_errors
from apps.finances.gateway import verify_signature
from apps.finances.models import PaymentAttempt, PaymentRecord
from apps.users.models import is_operator

logger = logging.getLogger(__name__)
security_logger = structlog.get_logger("apps.finances.security")


# ===== Commands =====

@dataclass
class ConfirmPaymentCommand:
    """
    Command to confirm payment for a booking

    ``actor`` is the authenticated caller for client confirmations and
    ``None`` for gateway webhooks, where the signature is the only proof.
    """
    booking_id: int
    payment_id: str
    signature: str
    actor: Any = None
    channel: str = PaymentAttempt.Channel.CLIENT
    remote_addr: Optional[str] = None


# ===== Command Handlers =====

class ConfirmPaymentHandler:
    """
    Handler for ConfirmPayment command

    pending + valid signature     -> confirmed/completed, PaymentRecord written
    pending + invalid signature   -> payment_status=failed, stays pending;
                                     cancelled after too many client failures
    pending + hold expired        -> cancelled by the system
    confirmed + same payment id   -> returned unchanged
    anything else                 -> InvalidStateError
    """

    def handle(self, command: ConfirmPaymentCommand) -> Booking:
        logger.info(
            f"Confirming payment {command.payment_id} for booking {command.booking_id} "
            f"via {command.channel}"
        )

        with store_errors(), DjangoUnitOfWork() as uow:
            booking = get_booking(command.booking_id, for_update=True)
            self._authorize(command, booking)

            outcome, error = self._apply(command, booking)

            PaymentAttempt.objects.create(
                booking=booking,
                payment_id=command.payment_id,
                outcome=outcome,
                channel=command.channel,
                remote_addr=command.remote_addr,
            )
            uow.collect_events(booking)

        if error is not None:
            raise error
        return booking

    def _authorize(self, command: ConfirmPaymentCommand, booking: Booking) -> None:
        if command.channel == PaymentAttempt.Channel.WEBHOOK:
            return
        actor = command.actor
        if actor is not None and booking.customer_id == getattr(actor, 'pk', None):
            return
        if is_operator(actor):
            return
        raise AuthorizationError("Only the customer or an operator can confirm this payment.")

    def _apply(self, command: ConfirmPaymentCommand, booking: Booking) -> tuple[str, Optional[EngineError]]:
        Outcome = PaymentAttempt.Outcome

        if booking.status == Booking.Status.CANCELLED:
            return Outcome.INVALID_STATE, InvalidStateError(
                f"Booking {booking.pk} is cancelled.", status=booking.status
            )

        signature_ok = verify_signature(booking, command.payment_id, command.signature)

        if booking.status == Booking.Status.CONFIRMED:
            record = PaymentRecord.objects.filter(booking=booking).first()
            if signature_ok and record is not None and record.payment_id == command.payment_id:
                logger.info(f"Payment {command.payment_id} already applied to booking {booking.pk}")
                return Outcome.REPLAYED, None
            return Outcome.INVALID_STATE, InvalidStateError(
                f"Booking {booking.pk} is already paid.", status=booking.status
            )

        if booking.is_hold_expired():
            expire_booking(booking)
            logger.info(f"Payment for booking {booking.pk} arrived after its hold expired")
            return Outcome.EXPIRED, InvalidStateError(
                f"Payment hold of booking {booking.pk} has expired.", status=booking.status
            )

        if not signature_ok:
            return Outcome.REJECTED, self._reject(command, booking)

        reused = InvalidStateError(f"Payment {command.payment_id} was already used for another booking.")
        if payment_id_taken(command.payment_id):
            return Outcome.INVALID_STATE, reused

        try:
            with transaction.atomic():
                PaymentRecord.objects.create(
                    booking=booking,
                    payment_id=command.payment_id,
                    signature=command.signature,
                    amount=booking.total,
                    currency=booking.currency,
                )
        except IntegrityError:
            # A concurrent confirmation recorded the same payment id first.
            logger.warning(f"Payment {command.payment_id} raced another booking for its record")
            return Outcome.INVALID_STATE, reused

        booking.mark_confirmed(command.payment_id)
        booking.save()
        logger.info(f"Booking {booking.pk} confirmed with payment {command.payment_id}")
        return Outcome.CONFIRMED, None

    def _reject(self, command: ConfirmPaymentCommand, booking: Booking) -> VerificationError:
        # Only owner or operator attempts count towards the auto-cancel;
        # webhook rejections are recorded and logged but never cancel.
        counted = command.channel == PaymentAttempt.Channel.CLIENT
        if counted:
            attempts = booking.record_failed_payment()
        else:
            booking.mark_payment_failed()
            attempts = booking.failed_payment_attempts

        security_logger.warning(
            "payment_signature_mismatch",
            booking_id=booking.pk,
            payment_id=command.payment_id,
            channel=str(command.channel),
            remote_addr=command.remote_addr,
            attempts=attempts,
        )
        booking.add_event(PaymentVerificationFailed(
            aggregate_id=booking.pk,
            booking_id=booking.pk,
            payment_id=command.payment_id,
            attempts=attempts,
        ))

        if counted and attempts >= settings.PAYMENT_MAX_FAILED_ATTEMPTS:
            booking.mark_cancelled(
                Booking.CancellationSource.SYSTEM,
                "Too many failed payment attempts.",
            )
            release_units_for_booking(booking)
            logger.info(f"Booking {booking.pk} cancelled after {attempts} failed payment attempts")

        booking.save()
        return VerificationError(attempts=attempts, booking_status=booking.status)


def payment_id_taken(payment_id: str) -> bool:
    return PaymentRecord.objects.filter(payment_id=payment_id).exists()


def log_refund_handoff(event: BookingCancelled) -> None:
    """Paid bookings that get cancelled are refunded by the gateway."""
    if not event.refund_due:
        return
    logger.info(
        f"Refund due for booking {event.booking_id}: {event.refund_amount} "
        f"(cancelled by {event.source}); handing off to payment gateway"
    )
