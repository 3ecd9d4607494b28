"""Admin registrations for the venue catalog."""

from __future__ import annotations

from django.contrib import admin

from .models import Venue


@admin.register(Venue)
class VenueAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "location",
        "capacity",
        "price_per_hour",
        "price_per_day",
        "opening_time",
        "closing_time",
        "slot_minutes",
        "is_active",
    )
    list_filter = ("is_active",)
    search_fields = ("name", "location")
    readonly_fields = ("created_at", "updated_at")
