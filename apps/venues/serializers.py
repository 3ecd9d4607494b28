"""Serializers for the venue catalog."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from rest_framework import serializers  # type: ignore

from shared.domain.value_objects import minutes_of

from .models import Venue


class VenueSerializer(serializers.ModelSerializer):
    currency = serializers.SerializerMethodField()

    class Meta:
        model = Venue
        fields = [
            "id",
            "name",
            "capacity",
            "price_per_hour",
            "price_per_day",
            "currency",
            "location",
            "opening_time",
            "closing_time",
            "slot_minutes",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["created_at", "updated_at"]

    def get_currency(self, obj: Venue) -> str:
        return settings.BOOKING_CURRENCY

    def validate(self, attrs):  # type: ignore
        unit = settings.BOOKING_UNIT_MINUTES
        instance = self.instance
        opening = attrs.get("opening_time", getattr(instance, "opening_time", None))
        closing = attrs.get("closing_time", getattr(instance, "closing_time", None))
        slot_minutes = attrs.get("slot_minutes", getattr(instance, "slot_minutes", None))

        if opening is not None and closing is not None:
            if opening >= closing:
                raise serializers.ValidationError(
                    {"closing_time": "Closing time must be after opening time."}
                )
            if minutes_of(opening) % unit or minutes_of(closing) % unit:
                raise serializers.ValidationError(
                    {"opening_time": f"Operating hours must be aligned to {unit} minute units."}
                )
        if slot_minutes is not None and (slot_minutes <= 0 or slot_minutes % unit):
            raise serializers.ValidationError(
                {"slot_minutes": f"Slot width must be a positive multiple of {unit} minutes."}
            )
        return attrs
