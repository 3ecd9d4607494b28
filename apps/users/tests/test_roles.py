"""Tests for customer/operator roles and role permissions."""

from __future__ import annotations

import pytest
from django.contrib.auth.models import AnonymousUser
from rest_framework.test import APIRequestFactory

from apps.users.models import User, is_operator
from apps.users.permissions import IsOperator, IsOperatorOrReadOnly

pytestmark = pytest.mark.django_db


def test_new_users_are_customers_with_email_login():
    user = User.objects.create_user(email="Someone@Example.COM", password="Secret123")

    assert user.role == User.RoleChoices.CUSTOMER
    assert user.email == "Someone@example.com"
    assert user.check_password("Secret123")
    assert not user.is_operator()


def test_operator_roles():
    operator = User.objects.create_operator(email="ops@example.com")
    staff = User.objects.create_user(email="staff@example.com", is_staff=True)
    admin = User.objects.create_superuser(email="root@example.com", password="RootPass123")

    assert operator.is_operator()
    assert staff.is_operator()
    assert admin.is_operator()
    assert not is_operator(AnonymousUser())
    assert not is_operator(None)


def test_operator_permissions():
    factory = APIRequestFactory()
    customer = User.objects.create_user(email="customer@example.com")
    operator = User.objects.create_operator(email="ops@example.com")

    read = factory.get("/")
    write = factory.post("/")

    read.user = AnonymousUser()
    write.user = customer
    assert IsOperatorOrReadOnly().has_permission(read, None)
    assert not IsOperatorOrReadOnly().has_permission(write, None)
    assert not IsOperator().has_permission(write, None)

    write.user = operator
    assert IsOperatorOrReadOnly().has_permission(write, None)
    assert IsOperator().has_permission(write, None)
