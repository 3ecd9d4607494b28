"""
Engine error taxonomy

Every failure the booking engine reports to its callers is one of these.
Each class carries a stable machine-readable ``code`` and the HTTP status
the API layer renders it with; nothing here knows about HTTP otherwise.
"""

from __future__ import annotations

from typing import Any


class EngineError(Exception):
    """Base class for all booking engine errors."""

    code = "engine_error"
    status_code = 500
    default_message = "Booking engine error."

    def __init__(self, message: str | None = None, **details: Any) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationError(EngineError):
    """Malformed or out-of-policy input; rejected before touching the store."""

    code = "validation_error"
    status_code = 400
    default_message = "Invalid booking request."


class NotFoundError(EngineError):
    code = "not_found"
    status_code = 404
    default_message = "Object not found."


class AuthorizationError(EngineError):
    code = "forbidden"
    status_code = 403
    default_message = "You are not allowed to perform this action."


class ConflictError(EngineError):
    """The store refused a write because it conflicts with existing data."""

    code = "conflict"
    status_code = 409
    default_message = "Conflicting reservation."


class SlotUnavailable(ConflictError):
    code = "slot_unavailable"
    default_message = "This slot is no longer available, please pick another one."


class IdempotencyConflict(ConflictError):
    code = "idempotency_conflict"
    default_message = "Idempotency key was already used for a different request."


class InvalidStateError(EngineError):
    code = "invalid_state"
    status_code = 409
    default_message = "Booking is not in a state that allows this action."


class VerificationError(EngineError):
    """Payment proof did not match what the gateway would have signed."""

    code = "payment_verification_failed"
    status_code = 402
    default_message = "Payment could not be verified."


class Unavailable(EngineError):
    """Store or transport failure; safe to retry with backoff."""

    code = "unavailable"
    status_code = 503
    default_message = "Booking storage is temporarily unavailable, please retry."
    retry_after = 2
