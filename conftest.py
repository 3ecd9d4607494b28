"""Shared pytest fixtures."""

from __future__ import annotations

from datetime import time, timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from apps.users.models import User
from apps.venues.models import Venue


@pytest.fixture
def customer(db):
    return User.objects.create_user(email="customer@example.com", password="CustomerPass123")


@pytest.fixture
def other_customer(db):
    return User.objects.create_user(email="other@example.com", password="OtherPass123")


@pytest.fixture
def operator(db):
    return User.objects.create_operator(email="operator@example.com", password="OperatorPass123")


@pytest.fixture
def venue(db):
    return Venue.objects.create(
        name="Grand Hall",
        capacity=200,
        price_per_hour=Decimal("5000.00"),
        price_per_day=Decimal("40000.00"),
        location="MG Road",
        opening_time=time(9, 0),
        closing_time=time(18, 0),
        slot_minutes=180,
    )


@pytest.fixture
def tomorrow():
    return timezone.localdate() + timedelta(days=1)
