"""Payment gateway signature scheme.

The gateway signs ``"{booking_id}|{payment_id}|{total}|{venue_id}"`` with
HMAC-SHA256 over the shared secret and sends the hex digest along with the
payment id. The amount is rendered with two decimals.
"""

from __future__ import annotations

import hashlib
import hmac
import logging

from django.conf import settings  # type: ignore

from shared.domain.exceptions import Unavailable

logger = logging.getLogger(__name__)


def _secret(secret: str | None = None) -> bytes:
    value = secret if secret is not None else settings.PAYMENT_GATEWAY_SECRET
    if not value:
        logger.error("PAYMENT_GATEWAY_SECRET is not configured; refusing to verify payments")
        raise Unavailable("Payment verification is not configured.")
    return value.encode("utf-8")


def signature_payload(booking, payment_id: str) -> str:
    return f"{booking.pk}|{payment_id}|{booking.total:.2f}|{booking.venue_id}"


def sign_payment(booking, payment_id: str, secret: str | None = None) -> str:
    payload = signature_payload(booking, payment_id).encode("utf-8")
    return hmac.new(_secret(secret), payload, hashlib.sha256).hexdigest()


def verify_signature(booking, payment_id: str, signature: str, secret: str | None = None) -> bool:
    """Constant-time comparison of ``signature`` with the expected digest."""
    expected = sign_payment(booking, payment_id, secret)
    return hmac.compare_digest(expected, (signature or "").strip().lower())
