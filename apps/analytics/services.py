"""Aggregations over the reservation store.

Plain aggregate reads: no locks, no writes. Revenue only ever counts
confirmed bookings.
"""

from __future__ import annotations

from decimal import Decimal

from django.db.models import Count, Q, Sum  # type: ignore
from django.db.models.functions import ExtractMonth  # type: ignore

from apps.bookings.models import Booking
from shared.domain.value_objects import CENT


def _amount(value) -> Decimal:
    return (value or Decimal("0")).quantize(CENT)


def _confirmed():
    return Booking.objects.filter(status=Booking.Status.CONFIRMED)


def total_revenue() -> Decimal:
    return _amount(_confirmed().aggregate(total=Sum("total"))["total"])


def monthly_revenue(year: int) -> list[dict]:
    """Twelve buckets by booking month; months without revenue report zero."""

    rows = (
        _confirmed()
        .filter(booking_date__year=year)
        .annotate(month=ExtractMonth("booking_date"))
        .values("month")
        .annotate(revenue=Sum("total"))
        .order_by("month")
    )
    by_month = {row["month"]: row["revenue"] for row in rows}
    return [{"month": month, "revenue": _amount(by_month.get(month))} for month in range(1, 13)]


def revenue_by_venue() -> list[dict]:
    rows = (
        _confirmed()
        .values("venue_id", "venue__name")
        .annotate(revenue=Sum("total"))
        .order_by("-revenue", "venue_id")
    )
    return [
        {"venue_id": row["venue_id"], "venue_name": row["venue__name"], "revenue": _amount(row["revenue"])}
        for row in rows
    ]


def bookings_by_venue() -> list[dict]:
    rows = (
        Booking.objects.exclude(status=Booking.Status.CANCELLED)
        .values("venue_id", "venue__name")
        .annotate(count=Count("id"))
        .order_by("-count", "venue_id")
    )
    return [
        {"venue_id": row["venue_id"], "venue_name": row["venue__name"], "count": row["count"]}
        for row in rows
    ]


def payment_stats() -> dict:
    """Payment funnel over every booking."""

    PaymentStatus = Booking.PaymentStatus
    stats = Booking.objects.aggregate(
        total_payments=Count("id"),
        completed=Count("id", filter=Q(payment_status=PaymentStatus.COMPLETED)),
        pending=Count("id", filter=Q(payment_status=PaymentStatus.PENDING)),
        failed=Count("id", filter=Q(payment_status=PaymentStatus.FAILED)),
    )
    return stats
