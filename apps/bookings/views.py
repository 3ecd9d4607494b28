"""API views for the booking domain."""

from __future__ import annotations

from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.users.models import is_operator
from apps.users.permissions import IsOperator
from shared.application.message_bus import message_bus

from .application import queries
from .application.command_handlers import CancelBookingCommand, CreateBookingCommand
from .models import Booking
from .serializers import (
    BookingCancelSerializer,
    BookingCreateSerializer,
    BookingSerializer,
    CalendarQuerySerializer,
    CustomerQuerySerializer,
    SlotQuerySerializer,
    TimeSlotSerializer,
)

IDEMPOTENCY_HEADER = "Idempotency-Key"


class BookingViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Create, list, inspect and cancel bookings."""

    serializer_class = BookingSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_serializer_class(self):  # type: ignore
        if self.action == "create":
            return BookingCreateSerializer
        if self.action == "cancel":
            return BookingCancelSerializer
        return BookingSerializer

    def get_queryset(self):  # type: ignore
        user = self.request.user
        if self.action == "list":
            params = CustomerQuerySerializer(data=self.request.query_params)
            params.is_valid(raise_exception=True)
            return queries.list_for_customer(user, params.validated_data.get("customer"))
        qs = Booking.objects.select_related("venue")
        if is_operator(user):
            return qs
        return qs.filter(customer=user)

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        result = message_bus.handle_command(
            CreateBookingCommand(
                actor=request.user,
                venue_id=data["venue"],
                booking_date=data["booking_date"],
                start_time=data["start_time"],
                end_time=data["end_time"],
                idempotency_key=request.headers.get(IDEMPOTENCY_HEADER),
            )
        )
        read_serializer = BookingSerializer(result.booking, context=self.get_serializer_context())
        response_status = status.HTTP_200_OK if result.replayed else status.HTTP_201_CREATED
        return Response(read_serializer.data, status=response_status)

    def destroy(self, request, pk=None):  # type: ignore
        message_bus.handle_command(CancelBookingCommand(actor=request.user, booking_id=pk))
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = message_bus.handle_command(
            CancelBookingCommand(
                actor=request.user,
                booking_id=pk,
                reason=serializer.validated_data["reason"],
            )
        )
        return Response(BookingSerializer(booking, context=self.get_serializer_context()).data)


class VenueSlotsView(APIView):
    """Slots of a venue for one date with availability flags."""

    permission_classes = [permissions.AllowAny]

    def get(self, request, venue_id: int):  # type: ignore
        params = SlotQuerySerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        on_date = params.validated_data["date"]
        slots = queries.available_slots(venue_id, on_date)
        return Response(
            {
                "venue": venue_id,
                "date": on_date.isoformat(),
                "slots": TimeSlotSerializer(slots, many=True).data,
            }
        )


class VenueAvailableDatesView(APIView):
    """Dates within the booking horizon that still have a free slot."""

    permission_classes = [permissions.AllowAny]

    def get(self, request, venue_id: int):  # type: ignore
        dates = queries.available_dates(venue_id)
        return Response({"venue": venue_id, "dates": [day.isoformat() for day in dates]})


class VenueBookingsView(APIView):
    """Every booking of one venue, for operators."""

    permission_classes = [IsOperator]

    def get(self, request, venue_id: int):  # type: ignore
        bookings = queries.list_for_venue(request.user, venue_id)
        return Response(BookingSerializer(bookings, many=True).data)


class BookingCalendarView(APIView):
    """Live bookings in a date window, chronologically, for operators."""

    permission_classes = [IsOperator]

    def get(self, request):  # type: ignore
        params = CalendarQuerySerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        bookings = queries.booking_calendar(
            request.user,
            start=params.validated_data.get("start"),
            end=params.validated_data.get("end"),
            venue_id=params.validated_data.get("venue"),
        )
        return Response(BookingSerializer(bookings, many=True).data)
