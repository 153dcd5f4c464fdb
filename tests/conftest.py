"""
Shared pytest fixtures: users with funded balances, an admin, and API clients
authenticated as either.
"""
from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from users.models import User


@pytest.fixture
def make_user(db):
    def _make(username="alice", balance="0.00", role="user", **kwargs):
        return User.objects.create_user(
            username=username,
            password="s3cret-pass!",
            balance=Decimal(balance),
            role=role,
            **kwargs,
        )
    return _make


@pytest.fixture
def investor(make_user):
    return make_user("alice", balance="1000.00")


@pytest.fixture
def admin_account(make_user):
    return make_user("boss", role="admin")


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def investor_client(investor):
    client = APIClient()
    client.force_authenticate(user=investor)
    return client


@pytest.fixture
def staff_client(admin_account):
    client = APIClient()
    client.force_authenticate(user=admin_account)
    return client
