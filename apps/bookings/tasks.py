"""Celery tasks for the booking domain."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore

from .application.command_handlers import expire_stale_bookings

logger = logging.getLogger(__name__)


# ============================================================================
# PERIODIC TASKS (run by Celery Beat, see config/celery.py)
# ============================================================================

@shared_task(name="bookings.expire_pending_bookings")
def expire_pending_bookings() -> dict[str, int]:
    """
    Cancel pending bookings whose payment hold has run out.

    Runs every minute. Each expired booking is cancelled by the system with
    ``payment_status=failed`` and its time range becomes bookable again.

    Returns:
        dict: {"expired": number of bookings expired}
    """
    expired = expire_stale_bookings()
    if expired:
        logger.info(f"Expired {expired} pending bookings")
    return {"expired": expired}
