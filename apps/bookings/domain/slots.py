"""
Slot calculation

Pure functions that cut a venue's operating day into fixed-width slots and
check a requested time window against the booking policy. Nothing here
touches the database; callers pass in the booked ranges they loaded.
"""

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Iterable, List, Optional

from shared.domain.base import ValueObject
from shared.domain.exceptions import ValidationError
from shared.domain.value_objects import TimeRange


@dataclass(frozen=True)
class TimeSlot(ValueObject):
    """A candidate interval of a venue's day with its availability flag."""
    start: time
    end: time
    available: bool

    @property
    def time_range(self) -> TimeRange:
        return TimeRange(self.start, self.end)


def build_slots(
    operating_hours: TimeRange,
    slot_minutes: int,
    booked: Iterable[TimeRange],
    not_before: Optional[time] = None,
) -> List[TimeSlot]:
    """
    Tile the operating hours with slots of ``slot_minutes``

    A slot is available unless it overlaps one of the ``booked`` ranges
    (half-open, so back-to-back bookings do not collide). When ``not_before``
    is given (listing today's slots) slots starting earlier are reported as
    unavailable too, because they can no longer be booked.
    """
    booked = list(booked)
    slots = []
    for piece in operating_hours.split(slot_minutes):
        free = not any(piece.overlaps_with(other) for other in booked)
        if not_before is not None and piece.start <= not_before:
            free = False
        slots.append(TimeSlot(piece.start, piece.end, free))
    return slots


def has_free_slot(slots: Iterable[TimeSlot]) -> bool:
    return any(slot.available for slot in slots)


def validate_booking_window(
    operating_hours: TimeRange,
    unit_minutes: int,
    booking_date: date,
    start: time,
    end: time,
    now: datetime,
) -> TimeRange:
    """
    Check a requested ``[start, end)`` on ``booking_date`` against the policy

    ``now`` is the current local time. Returns the validated range; raises
    ``ValidationError`` with the offending field otherwise.
    """
    if booking_date < now.date():
        raise ValidationError("Booking date cannot be in the past.", field="booking_date")

    if start.second or start.microsecond or end.second or end.microsecond:
        raise ValidationError("Times must be given in whole minutes.", field="start_time")

    if start >= end:
        raise ValidationError("Start time must be before end time.", field="end_time")

    requested = TimeRange(start, end)

    if not requested.is_aligned_to(unit_minutes):
        raise ValidationError(
            f"Start and end must be aligned to {unit_minutes} minute units.",
            field="start_time",
        )

    if not operating_hours.contains(requested):
        raise ValidationError(
            f"Requested time {requested} is outside operating hours {operating_hours}.",
            field="start_time",
        )

    if booking_date == now.date() and start <= now.time():
        raise ValidationError("Start time has already passed.", field="start_time")

    return requested
