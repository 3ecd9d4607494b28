"""URL routing for analytics endpoints."""

from django.urls import path  # type: ignore

from .views import (
    MonthlyRevenueView,
    PaymentStatsView,
    TotalRevenueView,
    VenueBookingCountView,
    VenueRevenueView,
)


urlpatterns = [
    # Do not prefix with 'analytics/' here; the namespace is defined in config.urls
    path('revenue/total/', TotalRevenueView.as_view(), name='analytics-revenue-total'),
    path('revenue/monthly/', MonthlyRevenueView.as_view(), name='analytics-revenue-monthly'),
    path('revenue/venues/', VenueRevenueView.as_view(), name='analytics-revenue-venues'),
    path('bookings/venues/', VenueBookingCountView.as_view(), name='analytics-bookings-venues'),
    path('payments/stats/', PaymentStatsView.as_view(), name='analytics-payment-stats'),
]
