"""Tests for payment confirmation: signatures, retries, idempotency and expiry."""

from __future__ import annotations

from datetime import time, timedelta
from decimal import Decimal
from unittest import mock

import pytest
from django.test import override_settings
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.application.command_handlers import (
    CancelBookingCommand,
    CancelBookingHandler,
    CreateBookingCommand,
    CreateBookingHandler,
)
from apps.bookings.domain.events import BookingCancelled
from apps.bookings.models import Booking
from apps.finances.application.command_handlers import (
    ConfirmPaymentCommand,
    ConfirmPaymentHandler,
    log_refund_handoff,
)
from apps.finances.gateway import sign_payment, signature_payload, verify_signature
from apps.finances.models import PaymentAttempt, PaymentRecord
from apps.users.models import User
from apps.venues.models import Venue
from shared.domain.exceptions import InvalidStateError, Unavailable, VerificationError
from shared.domain.value_objects import Money


def _book(customer, venue, day, start=time(12, 0), end=time(15, 0)) -> Booking:
    return CreateBookingHandler().handle(
        CreateBookingCommand(
            actor=customer,
            venue_id=venue.pk,
            booking_date=day,
            start_time=start,
            end_time=end,
        )
    ).booking


def _confirm(booking, payment_id="pay_001", signature=None, actor=None):
    return ConfirmPaymentHandler().handle(
        ConfirmPaymentCommand(
            booking_id=booking.pk,
            payment_id=payment_id,
            signature=signature if signature is not None else sign_payment(booking, payment_id),
            actor=actor or booking.customer,
        )
    )


# ===== Gateway =====

@pytest.mark.django_db
def test_signature_covers_booking_amount_and_venue(customer, venue, tomorrow):
    booking = _book(customer, venue, tomorrow)

    assert signature_payload(booking, "pay_001") == f"{booking.pk}|pay_001|15000.00|{venue.pk}"
    signature = sign_payment(booking, "pay_001")
    assert verify_signature(booking, "pay_001", signature)
    assert verify_signature(booking, "pay_001", signature.upper())
    assert not verify_signature(booking, "pay_002", signature)
    assert not verify_signature(booking, "pay_001", sign_payment(booking, "pay_001", secret="other"))


@pytest.mark.django_db
def test_missing_secret_fails_closed(customer, venue, tomorrow, settings):
    booking = _book(customer, venue, tomorrow)
    settings.PAYMENT_GATEWAY_SECRET = ""

    with pytest.raises(Unavailable):
        verify_signature(booking, "pay_001", "0" * 64)


# ===== Handler =====

@pytest.mark.django_db
def test_valid_payment_confirms_booking(customer, venue, tomorrow):
    booking = _book(customer, venue, tomorrow)

    confirmed = _confirm(booking)

    assert confirmed.status == Booking.Status.CONFIRMED
    assert confirmed.payment_status == Booking.PaymentStatus.COMPLETED
    assert confirmed.confirmed_at is not None
    record = PaymentRecord.objects.get(booking=booking)
    assert record.payment_id == "pay_001"
    assert record.amount == Decimal("15000.00")
    assert list(PaymentAttempt.objects.values_list("outcome", flat=True)) == ["confirmed"]


@pytest.mark.django_db
def test_confirming_twice_is_idempotent(customer, venue, tomorrow):
    booking = _book(customer, venue, tomorrow)
    first = _confirm(booking)

    again = _confirm(booking)

    assert again.pk == first.pk
    assert again.status == Booking.Status.CONFIRMED
    assert again.confirmed_at == first.confirmed_at
    assert PaymentRecord.objects.count() == 1
    assert sorted(PaymentAttempt.objects.values_list("outcome", flat=True)) == ["confirmed", "replayed"]


@pytest.mark.django_db
def test_other_payment_for_confirmed_booking_is_invalid_state(customer, venue, tomorrow):
    booking = _book(customer, venue, tomorrow)
    _confirm(booking)

    with pytest.raises(InvalidStateError):
        _confirm(booking, payment_id="pay_999")

    assert PaymentRecord.objects.get().payment_id == "pay_001"


@pytest.mark.django_db
def test_bad_signature_leaves_booking_pending(customer, venue, tomorrow):
    booking = _book(customer, venue, tomorrow)

    with mock.patch("apps.finances.application.command_handlers.security_logger") as security_logger:
        with pytest.raises(VerificationError):
            _confirm(booking, signature="deadbeef")

    booking.refresh_from_db()
    assert booking.status == Booking.Status.PENDING
    assert booking.payment_status == Booking.PaymentStatus.FAILED
    assert booking.failed_payment_attempts == 1
    assert PaymentAttempt.objects.get().outcome == PaymentAttempt.Outcome.REJECTED
    security_logger.warning.assert_called_once()
    assert security_logger.warning.call_args.kwargs["booking_id"] == booking.pk

    retried = _confirm(booking)
    assert retried.status == Booking.Status.CONFIRMED
    assert retried.payment_status == Booking.PaymentStatus.COMPLETED


@pytest.mark.django_db
def test_too_many_bad_signatures_cancel_booking(customer, venue, tomorrow):
    booking = _book(customer, venue, tomorrow)

    for _ in range(3):
        with pytest.raises(VerificationError):
            _confirm(booking, signature="deadbeef")

    booking.refresh_from_db()
    assert booking.status == Booking.Status.CANCELLED
    assert booking.cancellation_source == Booking.CancellationSource.SYSTEM
    assert not booking.units.exists()
    with pytest.raises(InvalidStateError):
        _confirm(booking)


@pytest.mark.django_db
def test_webhook_rejections_never_cancel_booking(customer, venue, tomorrow):
    booking = _book(customer, venue, tomorrow)
    command = dict(
        booking_id=booking.pk,
        payment_id="pay_001",
        channel=PaymentAttempt.Channel.WEBHOOK,
        remote_addr="203.0.113.9",
    )

    with mock.patch("apps.finances.application.command_handlers.security_logger") as security_logger:
        for _ in range(5):
            with pytest.raises(VerificationError):
                ConfirmPaymentHandler().handle(ConfirmPaymentCommand(signature="00", **command))

    booking.refresh_from_db()
    assert booking.status == Booking.Status.PENDING
    assert booking.payment_status == Booking.PaymentStatus.FAILED
    assert booking.failed_payment_attempts == 0
    assert booking.units.count() == 3
    assert PaymentAttempt.objects.filter(outcome=PaymentAttempt.Outcome.REJECTED).count() == 5
    assert security_logger.warning.call_count == 5
    assert security_logger.warning.call_args.kwargs["channel"] == "webhook"
    assert security_logger.warning.call_args.kwargs["remote_addr"] == "203.0.113.9"

    confirmed = ConfirmPaymentHandler().handle(
        ConfirmPaymentCommand(signature=sign_payment(booking, "pay_001"), **command)
    )
    assert confirmed.status == Booking.Status.CONFIRMED


@pytest.mark.django_db
def test_client_rejection_logs_plain_channel(customer, venue, tomorrow):
    booking = _book(customer, venue, tomorrow)

    with mock.patch("apps.finances.application.command_handlers.security_logger") as security_logger:
        with pytest.raises(VerificationError):
            _confirm(booking, signature="deadbeef")

    assert security_logger.warning.call_args.kwargs["channel"] == "client"
    assert type(security_logger.warning.call_args.kwargs["channel"]) is str


@pytest.mark.django_db
def test_payment_id_recorded_concurrently_is_invalid_state(customer, venue, tomorrow):
    first = _book(customer, venue, tomorrow, start=time(9, 0), end=time(12, 0))
    second = _book(customer, venue, tomorrow)
    _confirm(first, payment_id="pay_shared")

    # The other confirmation commits its record after this one checked.
    with mock.patch("apps.finances.application.command_handlers.payment_id_taken", return_value=False):
        with pytest.raises(InvalidStateError):
            _confirm(second, payment_id="pay_shared")

    second.refresh_from_db()
    assert second.status == Booking.Status.PENDING
    assert PaymentRecord.objects.get().booking_id == first.pk
    assert PaymentAttempt.objects.get(booking=second).outcome == PaymentAttempt.Outcome.INVALID_STATE


@pytest.mark.django_db
def test_cancelled_booking_cannot_be_paid(customer, venue, tomorrow):
    booking = _book(customer, venue, tomorrow)
    CancelBookingHandler().handle(CancelBookingCommand(actor=customer, booking_id=booking.pk))

    with pytest.raises(InvalidStateError):
        _confirm(booking)

    assert not PaymentRecord.objects.exists()
    assert PaymentAttempt.objects.get().outcome == PaymentAttempt.Outcome.INVALID_STATE


@pytest.mark.django_db
def test_payment_after_hold_expiry_expires_booking(customer, venue, tomorrow):
    booking = _book(customer, venue, tomorrow)
    Booking.objects.filter(pk=booking.pk).update(expires_at=timezone.now() - timedelta(seconds=1))

    with pytest.raises(InvalidStateError):
        _confirm(booking)

    booking.refresh_from_db()
    assert booking.status == Booking.Status.CANCELLED
    assert booking.payment_status == Booking.PaymentStatus.FAILED
    assert booking.cancellation_source == Booking.CancellationSource.SYSTEM
    assert not booking.units.exists()
    assert PaymentAttempt.objects.get().outcome == PaymentAttempt.Outcome.EXPIRED


def test_refund_handoff_is_logged_only_for_paid_bookings():
    paid = BookingCancelled(
        booking_id=1,
        venue_id=1,
        source="operator",
        reason="",
        old_status="confirmed",
        refund_due=True,
        refund_amount=Money(Decimal("100.00")),
    )
    unpaid = BookingCancelled(booking_id=2, venue_id=1, source="customer", reason="", old_status="pending")

    with mock.patch("apps.finances.application.command_handlers.logger") as logger:
        log_refund_handoff(paid)
        log_refund_handoff(unpaid)

    logger.info.assert_called_once()
    assert "booking 1" in logger.info.call_args.args[0]


# ===== API =====

class PaymentAPITests(APITestCase):
    def setUp(self) -> None:
        self.customer = User.objects.create_user(email="payer@example.com", password="PayerPass123")
        self.stranger = User.objects.create_user(email="stranger@example.com", password="StrangerPass123")
        self.venue = Venue.objects.create(
            name="Rooftop Terrace",
            capacity=80,
            price_per_hour=Decimal("2500.00"),
            opening_time=time(9, 0),
            closing_time=time(21, 0),
            slot_minutes=180,
        )
        self.booking = _book(self.customer, self.venue, timezone.localdate() + timedelta(days=3))
        self.confirm_url = reverse("payment-confirm")
        self.webhook_url = reverse("payment-webhook")

    def _payload(self, payment_id: str = "pay_abc", signature: str | None = None) -> dict:
        return {
            "booking": self.booking.pk,
            "payment_id": payment_id,
            "signature": signature if signature is not None else sign_payment(self.booking, payment_id),
        }

    def test_owner_confirms_payment(self) -> None:
        self.client.force_authenticate(self.customer)

        response = self.client.post(self.confirm_url, self._payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["status"], "confirmed")
        self.assertEqual(response.data["payment_status"], "completed")

    def test_bad_signature_is_402(self) -> None:
        self.client.force_authenticate(self.customer)

        response = self.client.post(self.confirm_url, self._payload(signature="bad"), format="json")

        self.assertEqual(response.status_code, status.HTTP_402_PAYMENT_REQUIRED, response.data)
        self.assertEqual(response.data["code"], "payment_verification_failed")
        self.booking.refresh_from_db()
        self.assertEqual(self.booking.status, Booking.Status.PENDING)
        self.assertEqual(self.booking.payment_status, Booking.PaymentStatus.FAILED)

    def test_stranger_cannot_confirm(self) -> None:
        self.client.force_authenticate(self.stranger)

        response = self.client.post(self.confirm_url, self._payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN, response.data)
        self.booking.refresh_from_db()
        self.assertEqual(self.booking.status, Booking.Status.PENDING)

    def test_confirm_requires_authentication(self) -> None:
        response = self.client.post(self.confirm_url, self._payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_unknown_booking_is_404(self) -> None:
        self.client.force_authenticate(self.customer)
        payload = self._payload()
        payload["booking"] = 424242

        response = self.client.post(self.confirm_url, payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_webhook_confirms_without_authentication(self) -> None:
        response = self.client.post(self.webhook_url, self._payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data, {"booking": self.booking.pk, "status": "confirmed", "payment_status": "completed"})
        attempt = PaymentAttempt.objects.get()
        self.assertEqual(attempt.channel, PaymentAttempt.Channel.WEBHOOK)
        self.assertEqual(attempt.remote_addr, "127.0.0.1")

    def test_anonymous_bad_signatures_keep_booking_pending(self) -> None:
        for _ in range(3):
            response = self.client.post(self.webhook_url, self._payload(signature="00"), format="json")
            self.assertEqual(response.status_code, status.HTTP_402_PAYMENT_REQUIRED, response.data)

        self.booking.refresh_from_db()
        self.assertEqual(self.booking.status, Booking.Status.PENDING)
        self.assertEqual(self.booking.failed_payment_attempts, 0)
        self.assertEqual(self.booking.cancellation_source, "")

        self.client.force_authenticate(self.customer)
        response = self.client.post(self.confirm_url, self._payload(), format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["status"], "confirmed")

    def test_webhook_replay_is_idempotent(self) -> None:
        first = self.client.post(self.webhook_url, self._payload(), format="json")
        second = self.client.post(self.webhook_url, self._payload(), format="json")

        self.assertEqual(first.status_code, status.HTTP_200_OK)
        self.assertEqual(second.status_code, status.HTTP_200_OK)
        self.assertEqual(PaymentRecord.objects.count(), 1)

    @override_settings(PAYMENT_GATEWAY_SECRET="")
    def test_unconfigured_gateway_is_retryable(self) -> None:
        response = self.client.post(
            self.webhook_url,
            {"booking": self.booking.pk, "payment_id": "pay_abc", "signature": "0" * 64},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)
        self.assertEqual(response.data["code"], "unavailable")
        self.assertEqual(response["Retry-After"], "2")
