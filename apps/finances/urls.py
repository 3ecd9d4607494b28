"""URL routing for the finance domain."""

from __future__ import annotations

from django.urls import path  # type: ignore

from .views import PaymentConfirmView, PaymentWebhookView

urlpatterns = [
    path("confirm/", PaymentConfirmView.as_view(), name="payment-confirm"),
    path("webhook/", PaymentWebhookView.as_view(), name="payment-webhook"),
]
