"""Serializers for the booking domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Booking

TIME_FORMAT = "%H:%M"


class BookingCreateSerializer(serializers.Serializer):
    """Reservation request of a customer; policy checks happen in the engine."""

    venue = serializers.IntegerField(min_value=1)
    booking_date = serializers.DateField()
    start_time = serializers.TimeField()
    end_time = serializers.TimeField()

    def validate(self, attrs):  # type: ignore
        if attrs["start_time"] >= attrs["end_time"]:
            raise serializers.ValidationError({"end_time": "End time must be after start time."})
        return attrs


class BookingSerializer(serializers.ModelSerializer):
    venue_name = serializers.ReadOnlyField(source="venue.name")
    start_time = serializers.TimeField(format=TIME_FORMAT, read_only=True)
    end_time = serializers.TimeField(format=TIME_FORMAT, read_only=True)

    class Meta:
        model = Booking
        fields = [
            "id",
            "venue",
            "venue_name",
            "customer",
            "booking_date",
            "start_time",
            "end_time",
            "price_per_hour",
            "total",
            "currency",
            "status",
            "payment_status",
            "failed_payment_attempts",
            "expires_at",
            "confirmed_at",
            "cancelled_at",
            "cancellation_source",
            "cancellation_reason",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class BookingCancelSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, max_length=255, default="")


class TimeSlotSerializer(serializers.Serializer):
    start = serializers.TimeField(format=TIME_FORMAT)
    end = serializers.TimeField(format=TIME_FORMAT)
    available = serializers.BooleanField()


class SlotQuerySerializer(serializers.Serializer):
    date = serializers.DateField()


class CustomerQuerySerializer(serializers.Serializer):
    customer = serializers.IntegerField(min_value=1, required=False)


class CalendarQuerySerializer(serializers.Serializer):
    start = serializers.DateField(required=False)
    end = serializers.DateField(required=False)
    venue = serializers.IntegerField(min_value=1, required=False)
