"""API views for analytics.

Operator-only endpoints returning revenue and occupancy aggregates
computed from the reservation store at query time. Amounts are rendered
as decimal strings with two places, like every other amount in the API.
"""

from __future__ import annotations

from django.utils import timezone  # type: ignore
from rest_framework import serializers  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.bookings.services import store_errors
from apps.users.permissions import IsOperator

from . import services


class YearQuerySerializer(serializers.Serializer):
    year = serializers.IntegerField(min_value=1970, max_value=9999, required=False)


def _money(value) -> str:
    return f"{value:.2f}"


class OperatorAnalyticsView(APIView):
    permission_classes = [IsOperator]


class TotalRevenueView(OperatorAnalyticsView):
    def get(self, request, format=None):  # type: ignore
        with store_errors():
            total = services.total_revenue()
        return Response({"total": _money(total)})


class MonthlyRevenueView(OperatorAnalyticsView):
    def get(self, request, format=None):  # type: ignore
        params = YearQuerySerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        year = params.validated_data.get("year") or timezone.localdate().year
        with store_errors():
            buckets = services.monthly_revenue(year)
        return Response(
            [{"month": bucket["month"], "revenue": _money(bucket["revenue"])} for bucket in buckets]
        )


class VenueRevenueView(OperatorAnalyticsView):
    def get(self, request, format=None):  # type: ignore
        with store_errors():
            rows = services.revenue_by_venue()
        return Response([{**row, "revenue": _money(row["revenue"])} for row in rows])


class VenueBookingCountView(OperatorAnalyticsView):
    def get(self, request, format=None):  # type: ignore
        with store_errors():
            rows = services.bookings_by_venue()
        return Response(rows)


class PaymentStatsView(OperatorAnalyticsView):
    def get(self, request, format=None):  # type: ignore
        with store_errors():
            stats = services.payment_stats()
        return Response(stats)
