"""URL routing for the booking domain."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import (
    BookingCalendarView,
    BookingViewSet,
    VenueAvailableDatesView,
    VenueBookingsView,
    VenueSlotsView,
)

router = DefaultRouter()
router.register(r"", BookingViewSet, basename="booking")

urlpatterns = [
    path("venues/<int:venue_id>/slots/", VenueSlotsView.as_view(), name="venue-slots"),
    path("venues/<int:venue_id>/dates/", VenueAvailableDatesView.as_view(), name="venue-available-dates"),
    path("venues/<int:venue_id>/", VenueBookingsView.as_view(), name="venue-bookings"),
    path("calendar/", BookingCalendarView.as_view(), name="booking-calendar"),
    path("", include(router.urls)),
]
