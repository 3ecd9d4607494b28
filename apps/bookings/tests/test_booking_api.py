"""Integration tests for booking API endpoints."""

from __future__ import annotations

from datetime import time, timedelta
from decimal import Decimal

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Booking
from apps.users.models import User
from apps.venues.models import Venue


class BookingAPITests(APITestCase):
    """Covers creation, conflicts, availability and cancellation of bookings."""

    def setUp(self) -> None:
        self.customer = User.objects.create_user(
            email="customer@example.com",
            password="CustomerPass123",
        )
        self.other = User.objects.create_user(
            email="other@example.com",
            password="OtherPass123",
        )
        self.operator = User.objects.create_operator(
            email="operator@example.com",
            password="OperatorPass123",
        )
        self.venue = Venue.objects.create(
            name="Lotus Banquet Hall",
            capacity=300,
            price_per_hour=Decimal("4000.00"),
            price_per_day=Decimal("30000.00"),
            location="Koramangala",
            opening_time=time(9, 0),
            closing_time=time(18, 0),
            slot_minutes=180,
        )
        self.day = timezone.localdate() + timedelta(days=2)
        self.client.force_authenticate(self.customer)
        self.list_url = reverse("booking-list")
        self.slots_url = reverse("venue-slots", kwargs={"venue_id": self.venue.id})

    def _payload(self, start: str, end: str) -> dict[str, str]:
        return {
            "venue": self.venue.id,
            "booking_date": str(self.day),
            "start_time": start,
            "end_time": end,
        }

    def _book(self, start: str, end: str, **extra):
        return self.client.post(self.list_url, self._payload(start, end), format="json", **extra)

    def test_customer_can_create_booking(self) -> None:
        response = self._book("15:00", "18:00")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["status"], "pending")
        self.assertEqual(response.data["payment_status"], "pending")
        self.assertEqual(Decimal(response.data["total"]), Decimal("12000.00"))
        self.assertEqual(response.data["start_time"], "15:00")
        booking = Booking.objects.get()
        self.assertEqual(booking.customer, self.customer)
        self.assertEqual(booking.venue, self.venue)

    def test_availability_scenario(self) -> None:
        self.assertEqual(self._book("12:00", "15:00").status_code, status.HTTP_201_CREATED)

        response = self.client.get(self.slots_url, {"date": str(self.day)})

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(
            [(s["start"], s["end"], s["available"]) for s in response.data["slots"]],
            [("09:00", "12:00", True), ("12:00", "15:00", False), ("15:00", "18:00", True)],
        )

    def test_slot_taken_then_next_slot_succeeds(self) -> None:
        self.assertEqual(self._book("12:00", "15:00").status_code, status.HTTP_201_CREATED)
        self.client.force_authenticate(self.other)

        conflict = self._book("12:00", "15:00")
        self.assertEqual(conflict.status_code, status.HTTP_409_CONFLICT, conflict.data)
        self.assertEqual(conflict.data["code"], "slot_unavailable")

        response = self._book("15:00", "18:00")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(Decimal(response.data["total"]), Decimal("12000.00"))
        self.assertEqual(Booking.objects.count(), 2)

    def test_misaligned_time_is_a_validation_error(self) -> None:
        response = self._book("09:30", "12:00")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(response.data["code"], "validation_error")
        self.assertEqual(response.data["errors"]["field"], "start_time")

    def test_end_before_start_is_rejected_by_serializer(self) -> None:
        response = self._book("15:00", "12:00")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertIn("end_time", response.data["errors"])

    def test_unknown_venue_is_404(self) -> None:
        payload = self._payload("09:00", "12:00")
        payload["venue"] = 9999

        response = self.client.post(self.list_url, payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND, response.data)
        self.assertEqual(response.data["code"], "not_found")

    def test_idempotency_key_replays_original(self) -> None:
        first = self._book("09:00", "12:00", HTTP_IDEMPOTENCY_KEY="order-42")
        replay = self._book("09:00", "12:00", HTTP_IDEMPOTENCY_KEY="order-42")
        misuse = self._book("12:00", "15:00", HTTP_IDEMPOTENCY_KEY="order-42")

        self.assertEqual(first.status_code, status.HTTP_201_CREATED, first.data)
        self.assertEqual(replay.status_code, status.HTTP_200_OK, replay.data)
        self.assertEqual(replay.data["id"], first.data["id"])
        self.assertEqual(misuse.status_code, status.HTTP_409_CONFLICT, misuse.data)
        self.assertEqual(misuse.data["code"], "idempotency_conflict")
        self.assertEqual(Booking.objects.count(), 1)

    def test_anonymous_cannot_book(self) -> None:
        self.client.force_authenticate(None)

        response = self._book("09:00", "12:00")

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_customer_can_cancel_booking(self) -> None:
        booking_id = self._book("12:00", "15:00").data["id"]

        cancel_url = reverse("booking-cancel", args=[booking_id])
        response = self.client.post(cancel_url, {"reason": "Plans changed"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["status"], "cancelled")
        self.assertEqual(response.data["cancellation_reason"], "Plans changed")
        slots = self.client.get(self.slots_url, {"date": str(self.day)}).data["slots"]
        self.assertTrue(all(slot["available"] for slot in slots))

        again = self.client.post(cancel_url, {}, format="json")
        self.assertEqual(again.status_code, status.HTTP_409_CONFLICT, again.data)
        self.assertEqual(again.data["code"], "invalid_state")

    def test_delete_cancels_booking(self) -> None:
        booking_id = self._book("12:00", "15:00").data["id"]

        response = self.client.delete(reverse("booking-detail", args=[booking_id]))

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        booking = Booking.objects.get(pk=booking_id)
        self.assertEqual(booking.status, Booking.Status.CANCELLED)

    def test_other_customer_cannot_cancel(self) -> None:
        booking_id = self._book("12:00", "15:00").data["id"]
        self.client.force_authenticate(self.other)

        response = self.client.delete(reverse("booking-detail", args=[booking_id]))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN, response.data)
        self.assertEqual(response.data["code"], "forbidden")

    def test_operator_can_cancel_any_booking(self) -> None:
        booking_id = self._book("12:00", "15:00").data["id"]
        self.client.force_authenticate(self.operator)

        response = self.client.post(reverse("booking-cancel", args=[booking_id]), {}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["cancellation_source"], "operator")

    def test_list_shows_only_own_bookings(self) -> None:
        own_id = self._book("09:00", "12:00").data["id"]
        self.client.force_authenticate(self.other)
        self._book("12:00", "15:00")
        self.client.force_authenticate(self.customer)

        response = self.client.get(self.list_url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item["id"] for item in response.data], [own_id])
        forbidden = self.client.get(self.list_url, {"customer": self.other.id})
        self.assertEqual(forbidden.status_code, status.HTTP_403_FORBIDDEN)

    def test_operator_lists_bookings_of_customer_and_venue(self) -> None:
        own_id = self._book("09:00", "12:00").data["id"]
        self.client.force_authenticate(self.operator)

        by_customer = self.client.get(self.list_url, {"customer": self.customer.id})
        by_venue = self.client.get(reverse("venue-bookings", kwargs={"venue_id": self.venue.id}))

        self.assertEqual([item["id"] for item in by_customer.data], [own_id])
        self.assertEqual(by_venue.status_code, status.HTTP_200_OK)
        self.assertEqual([item["id"] for item in by_venue.data], [own_id])

    def test_venue_bookings_are_operator_only(self) -> None:
        response = self.client.get(reverse("venue-bookings", kwargs={"venue_id": self.venue.id}))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_retrieve_other_customers_booking_is_hidden(self) -> None:
        booking_id = self._book("09:00", "12:00").data["id"]
        self.client.force_authenticate(self.other)

        response = self.client.get(reverse("booking-detail", args=[booking_id]))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_available_dates_are_public(self) -> None:
        self._book("09:00", "18:00")
        self.client.force_authenticate(None)

        response = self.client.get(reverse("venue-available-dates", kwargs={"venue_id": self.venue.id}))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertNotIn(str(self.day), response.data["dates"])
        self.assertIn(str(self.day + timedelta(days=1)), response.data["dates"])

    def test_slots_require_valid_date(self) -> None:
        missing = self.client.get(self.slots_url)
        past = self.client.get(self.slots_url, {"date": str(timezone.localdate() - timedelta(days=1))})

        self.assertEqual(missing.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(past.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(past.data["code"], "validation_error")

    def test_operator_calendar(self) -> None:
        self._book("15:00", "18:00")
        self._book("09:00", "12:00")
        self.client.force_authenticate(self.operator)

        response = self.client.get(
            reverse("booking-calendar"),
            {"start": str(self.day), "end": str(self.day)},
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual([item["start_time"] for item in response.data], ["09:00", "15:00"])
