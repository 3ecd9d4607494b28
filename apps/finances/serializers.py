"""Serializers for the finance domain (payments)."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore


class PaymentConfirmSerializer(serializers.Serializer):
    """Payment proof forwarded by the client or posted by the gateway."""

    booking = serializers.IntegerField(min_value=1)
    payment_id = serializers.CharField(max_length=100)
    signature = serializers.CharField(max_length=128)
