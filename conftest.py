import datetime as dt
from decimal import Decimal

import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from afk.config import AfkConfig
from core.clock import FrozenClock


@pytest.fixture(autouse=True)
def _clear_throttle_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def user(django_user_model):
    return django_user_model.objects.create_user(email="afk@example.com", password="s3cret-pass!")


@pytest.fixture
def other_user(django_user_model):
    return django_user_model.objects.create_user(email="other@example.com", password="s3cret-pass!")


@pytest.fixture
def admin_user(django_user_model):
    return django_user_model.objects.create_superuser(email="admin@example.com", password="s3cret-pass!")


@pytest.fixture
def api(user):
    c = APIClient()
    c.force_authenticate(user=user)
    return c


@pytest.fixture
def admin_api(admin_user):
    c = APIClient()
    c.force_authenticate(user=admin_user)
    return c


@pytest.fixture
def clock():
    return FrozenClock(dt.datetime(2025, 10, 27, 10, 0, 0, tzinfo=dt.timezone.utc))


@pytest.fixture
def afk_config():
    return AfkConfig(
        enabled=True,
        coins_per_minute=Decimal("10"),
        max_coins_per_day=Decimal("100"),
        max_heartbeat_gap_seconds=120,
        min_heartbeat_interval_seconds=0,
        idle_timeout_seconds=300,
        reset_timezone="UTC",
    )
