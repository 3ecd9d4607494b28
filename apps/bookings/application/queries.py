"""
Booking Queries

Read projections of the reservation store. None of these write or lock;
availability is recomputed from the store on every call.
"""

from datetime import date, datetime, timedelta
from typing import Any, List, Optional

from django.conf import settings
from django.utils import timezone

from shared.domain.exceptions import AuthorizationError, ValidationError
from apps.bookings.domain.slots import TimeSlot, build_slots, has_free_slot
from apps.bookings.models import Booking
from apps.bookings.services import booked_ranges, get_venue, store_errors
from apps.users.models import is_operator


def _now(now: Optional[datetime]) -> datetime:
    return timezone.localtime(now) if now else timezone.localtime()


def _require_operator(actor: Any) -> None:
    if not is_operator(actor):
        raise AuthorizationError("Only operators can view these bookings.")


def available_slots(venue_id: int, on_date: date, *, now: Optional[datetime] = None) -> List[TimeSlot]:
    """
    Fixed-width slots of a venue's day, each flagged available or not

    A slot is available when no live booking overlaps it. For today's
    date, slots that have already started are reported unavailable even
    when nothing overlaps them, since they can no longer be booked.
    Slots of an inactive venue are all unavailable.
    """
    now = _now(now)
    if on_date < now.date():
        raise ValidationError("Date cannot be in the past.", field="date")

    with store_errors():
        venue = get_venue(venue_id)
        booked = booked_ranges(venue, on_date, on_date).get(on_date, [])

    slots = build_slots(
        venue.operating_hours,
        venue.slot_minutes,
        booked,
        not_before=now.time() if on_date == now.date() else None,
    )
    if not venue.is_active:
        slots = [TimeSlot(slot.start, slot.end, False) for slot in slots]
    return slots


def available_dates(venue_id: int, *, now: Optional[datetime] = None) -> List[date]:
    """Dates from today through the booking horizon with at least one free slot."""
    now = _now(now)
    today = now.date()
    last_day = today + timedelta(days=settings.BOOKING_HORIZON_DAYS - 1)

    with store_errors():
        venue = get_venue(venue_id)
        if not venue.is_active:
            return []
        booked = booked_ranges(venue, today, last_day)

    dates = []
    day = today
    while day <= last_day:
        slots = build_slots(
            venue.operating_hours,
            venue.slot_minutes,
            booked.get(day, []),
            not_before=now.time() if day == today else None,
        )
        if has_free_slot(slots):
            dates.append(day)
        day += timedelta(days=1)
    return dates


def list_for_customer(actor: Any, customer_id: Optional[int] = None):
    """
    Bookings of one customer, newest date first

    Customers only ever see their own bookings; operators may pass any
    ``customer_id`` or omit it to list every booking.
    """
    queryset = Booking.objects.select_related("venue").order_by("-booking_date", "-start_time")
    if is_operator(actor):
        if customer_id is not None:
            queryset = queryset.filter(customer_id=customer_id)
        return queryset

    if customer_id is not None and customer_id != actor.pk:
        raise AuthorizationError("Customers can only list their own bookings.")
    return queryset.filter(customer=actor)


def list_for_venue(actor: Any, venue_id: int):
    """All bookings of a venue for operators, newest date first."""
    _require_operator(actor)
    venue = get_venue(venue_id)
    return (
        Booking.objects.filter(venue=venue)
        .select_related("venue", "customer")
        .order_by("-booking_date", "-start_time")
    )


def booking_calendar(
    actor: Any,
    start: Optional[date] = None,
    end: Optional[date] = None,
    venue_id: Optional[int] = None,
):
    """Live bookings in a date window, in chronological order."""
    _require_operator(actor)
    if start and end and start > end:
        raise ValidationError("Calendar start must not be after its end.", field="start")

    queryset = (
        Booking.objects.exclude(status=Booking.Status.CANCELLED)
        .select_related("venue", "customer")
        .order_by("booking_date", "start_time", "venue_id")
    )
    if start:
        queryset = queryset.filter(booking_date__gte=start)
    if end:
        queryset = queryset.filter(booking_date__lte=end)
    if venue_id is not None:
        queryset = queryset.filter(venue=get_venue(venue_id))
    return queryset
