"""Venue catalog API views."""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import viewsets  # type: ignore
from rest_framework.filters import OrderingFilter, SearchFilter  # type: ignore

from apps.users.permissions import IsOperatorOrReadOnly

from .filters import VenueFilterSet
from .models import Venue
from .serializers import VenueSerializer


class VenueViewSet(viewsets.ModelViewSet):
    """Read access for everyone; operators maintain rates, capacity and hours."""

    queryset = Venue.objects.all()
    serializer_class = VenueSerializer
    permission_classes = [IsOperatorOrReadOnly]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    filterset_class = VenueFilterSet
    search_fields = ["name", "location"]
    ordering_fields = ["name", "capacity", "price_per_hour", "created_at"]
    http_method_names = ["get", "post", "put", "patch", "head", "options"]
