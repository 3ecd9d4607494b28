"""FilterSet definitions for venue listing."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import Venue


class VenueFilterSet(django_filters.FilterSet):
    location = django_filters.CharFilter(field_name="location", lookup_expr="icontains")
    min_capacity = django_filters.NumberFilter(field_name="capacity", lookup_expr="gte")
    price_max = django_filters.NumberFilter(field_name="price_per_hour", lookup_expr="lte")

    class Meta:
        model = Venue
        fields = ["is_active", "location"]
