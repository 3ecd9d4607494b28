"""API views for payment confirmation.

Two entry points apply the same command: the booking owner (or an
operator) forwarding the gateway's proof from the checkout page, and the
gateway's own server-to-server webhook. The webhook is unauthenticated;
the HMAC signature over the booking and amount is the proof.
"""

from __future__ import annotations

import logging

from rest_framework import permissions  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.bookings.serializers import BookingSerializer
from shared.application.message_bus import message_bus

from .application.command_handlers import ConfirmPaymentCommand
from .models import PaymentAttempt
from .serializers import PaymentConfirmSerializer

logger = logging.getLogger(__name__)


class PaymentConfirmView(APIView):
    """Confirm payment of one's own booking."""

    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):  # type: ignore
        serializer = PaymentConfirmSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        booking = message_bus.handle_command(
            ConfirmPaymentCommand(
                booking_id=data["booking"],
                payment_id=data["payment_id"],
                signature=data["signature"],
                actor=request.user,
                channel=PaymentAttempt.Channel.CLIENT,
                remote_addr=request.META.get("REMOTE_ADDR"),
            )
        )
        return Response(BookingSerializer(booking, context={"request": request}).data)


class PaymentWebhookView(APIView):
    """Gateway callback with the payment verdict."""

    authentication_classes: list = []
    permission_classes = [permissions.AllowAny]

    def post(self, request):  # type: ignore
        serializer = PaymentConfirmSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        booking = message_bus.handle_command(
            ConfirmPaymentCommand(
                booking_id=data["booking"],
                payment_id=data["payment_id"],
                signature=data["signature"],
                channel=PaymentAttempt.Channel.WEBHOOK,
                remote_addr=request.META.get("REMOTE_ADDR"),
            )
        )
        return Response(
            {
                "booking": booking.pk,
                "status": booking.status,
                "payment_status": booking.payment_status,
            }
        )
