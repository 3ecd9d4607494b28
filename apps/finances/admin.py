"""Admin registrations for payments."""

from __future__ import annotations

from django.contrib import admin

from .models import PaymentAttempt, PaymentRecord


@admin.register(PaymentRecord)
class PaymentRecordAdmin(admin.ModelAdmin):
    list_display = ("payment_id", "booking", "amount", "currency", "verified_at")
    search_fields = ("payment_id", "booking__id")
    readonly_fields = ("booking", "payment_id", "signature", "amount", "currency", "verified_at")


@admin.register(PaymentAttempt)
class PaymentAttemptAdmin(admin.ModelAdmin):
    list_display = ("booking", "payment_id", "outcome", "channel", "remote_addr", "created_at")
    list_filter = ("outcome", "channel")
    search_fields = ("payment_id", "booking__id")
    readonly_fields = ("booking", "payment_id", "outcome", "channel", "remote_addr", "created_at")
