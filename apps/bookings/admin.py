"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin

from .models import Booking, BookingUnit


class BookingUnitInline(admin.TabularInline):
    model = BookingUnit
    extra = 0
    fields = ("booking_date", "starts_at")
    readonly_fields = ("booking_date", "starts_at")
    can_delete = False


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "venue",
        "customer",
        "booking_date",
        "start_time",
        "end_time",
        "status",
        "payment_status",
        "total",
        "created_at",
    )
    list_filter = ("status", "payment_status", "cancellation_source", "booking_date")
    search_fields = ("venue__name", "customer__email", "idempotency_key")
    readonly_fields = (
        "price_per_hour",
        "total",
        "currency",
        "status",
        "payment_status",
        "failed_payment_attempts",
        "idempotency_key",
        "expires_at",
        "confirmed_at",
        "cancelled_at",
        "cancellation_source",
        "created_at",
        "updated_at",
    )
    inlines = [BookingUnitInline]
