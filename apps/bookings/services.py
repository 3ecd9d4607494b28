"""Reservation store: conflict-checked writes and lookups for bookings."""

from __future__ import annotations

import logging
from collections import defaultdict
from contextlib import contextmanager
from datetime import date
from typing import TYPE_CHECKING, Dict, Iterator, List

from django.conf import settings  # type: ignore
from django.db import IntegrityError, OperationalError, transaction  # type: ignore
from django.db.utils import NotSupportedError  # type: ignore

from apps.venues.models import Venue
from shared.domain.exceptions import NotFoundError, SlotUnavailable, Unavailable
from shared.domain.value_objects import TimeRange, minutes_of, time_from_minutes

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from .models import Booking

logger = logging.getLogger(__name__)


@contextmanager
def store_errors() -> Iterator[None]:
    """Translate lock timeouts and lost connections into a retryable error."""

    try:
        yield
    except OperationalError as exc:
        logger.error(f"Reservation store unavailable: {exc}")
        raise Unavailable() from exc


def _lock_queryset_if_possible(queryset):
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection().in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset


def get_venue(venue_id: int) -> Venue:
    try:
        return Venue.objects.get(pk=venue_id)
    except (Venue.DoesNotExist, ValueError, TypeError):
        raise NotFoundError(f"Venue {venue_id} not found.", venue=venue_id)


def get_booking(booking_id: int, *, for_update: bool = False) -> "Booking":
    from .models import Booking  # Local import to prevent circular dependency

    queryset = Booking.objects.select_related("venue")
    if for_update:
        queryset = _lock_queryset_if_possible(queryset)
    try:
        return queryset.get(pk=booking_id)
    except (Booking.DoesNotExist, ValueError, TypeError):
        raise NotFoundError(f"Booking {booking_id} not found.", booking=booking_id)


def live_bookings(venue):
    """Bookings that still hold their time range."""

    from .models import Booking

    return Booking.objects.filter(venue=venue).exclude(status=Booking.Status.CANCELLED)


def ensure_venue_is_available(
    venue,
    booking_date: date,
    time_range: TimeRange,
    *,
    exclude_booking_id=None,
) -> None:
    """Raise ``SlotUnavailable`` if a live booking overlaps the requested range."""

    overlapping = live_bookings(venue).filter(
        booking_date=booking_date,
        start_time__lt=time_range.end,
        end_time__gt=time_range.start,
    )
    if exclude_booking_id is not None:
        overlapping = overlapping.exclude(pk=exclude_booking_id)

    overlapping = _lock_queryset_if_possible(overlapping)

    if overlapping.exists():
        raise SlotUnavailable(
            venue=venue.pk,
            booking_date=booking_date.isoformat(),
            time_range=str(time_range),
        )


def occupied_units(time_range: TimeRange, unit_minutes: int | None = None) -> List:
    """Start times of every booking unit covered by ``time_range``."""

    unit = unit_minutes or settings.BOOKING_UNIT_MINUTES
    return [
        time_from_minutes(minute)
        for minute in range(minutes_of(time_range.start), minutes_of(time_range.end), unit)
    ]


def insert_booking(booking: "Booking") -> "Booking":
    """
    Atomic conflict-checked insert

    Checks for overlaps, saves the booking and claims one ``BookingUnit`` per
    covered unit, all inside one savepoint. If a concurrent writer claimed
    any unit first, the unique constraint fires, the savepoint is rolled back
    (no booking row is left behind) and ``SlotUnavailable`` is raised.
    """
    from .models import BookingUnit

    time_range = booking.time_range
    try:
        with transaction.atomic():
            ensure_venue_is_available(booking.venue, booking.booking_date, time_range)
            booking.save()
            BookingUnit.objects.bulk_create(
                [
                    BookingUnit(
                        venue_id=booking.venue_id,
                        booking_date=booking.booking_date,
                        starts_at=starts_at,
                        booking=booking,
                    )
                    for starts_at in occupied_units(time_range)
                ]
            )
    except IntegrityError as exc:
        logger.info(
            f"Lost race for venue {booking.venue_id} on {booking.booking_date} {time_range}: {exc}"
        )
        booking.pk = None
        booking.clear_events()
        raise SlotUnavailable(
            venue=booking.venue_id,
            booking_date=booking.booking_date.isoformat(),
            time_range=str(time_range),
        ) from exc
    return booking


def release_units_for_booking(booking: "Booking") -> None:
    """Frees the time range held by a booking."""

    from .models import BookingUnit

    released, _ = BookingUnit.objects.filter(booking=booking).delete()
    logger.debug(f"Released {released} units of booking {booking.pk}")


def booked_ranges(venue, start_date: date, end_date: date) -> Dict[date, List[TimeRange]]:
    """Live booked ranges of a venue per date in ``[start_date, end_date]``, in one query."""

    ranges: Dict[date, List[TimeRange]] = defaultdict(list)
    rows = (
        live_bookings(venue)
        .filter(booking_date__gte=start_date, booking_date__lte=end_date)
        .values_list("booking_date", "start_time", "end_time")
    )
    for booking_date, start, end in rows:
        ranges[booking_date].append(TimeRange(start, end))
    return ranges
