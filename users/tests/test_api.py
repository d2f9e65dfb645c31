from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from core.models import AuditLog
from wallets import ledger
from wallets.models import Wallet

pytestmark = pytest.mark.django_db

User = get_user_model()


def test_register_returns_tokens_and_wallet():
    resp = APIClient().post(
        "/api/users/register/", {"email": "new@example.com", "password": "Blue-Horse-42!"}, format="json"
    )

    assert resp.status_code == 201
    assert {"access", "refresh"} <= set(resp.data)
    user = User.objects.get(email="new@example.com")
    assert Wallet.objects.filter(user=user).exists()
    assert AuditLog.objects.filter(action="auth.register", actor=user).exists()


def test_register_rejects_weak_password():
    resp = APIClient().post(
        "/api/users/register/", {"email": "weak@example.com", "password": "123"}, format="json"
    )

    assert resp.status_code == 400
    assert "password" in resp.data


def test_token_login(user):
    resp = APIClient().post(
        "/api/token/", {"email": "afk@example.com", "password": "s3cret-pass!"}, format="json"
    )

    assert resp.status_code == 200
    assert {"access", "refresh"} <= set(resp.data)


def test_token_login_bad_password(user):
    resp = APIClient().post(
        "/api/token/", {"email": "afk@example.com", "password": "wrong"}, format="json"
    )
    assert resp.status_code == 401


def test_jwt_access_token_authenticates(user):
    tokens = APIClient().post(
        "/api/token/", {"email": "afk@example.com", "password": "s3cret-pass!"}, format="json"
    ).data

    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['access']}")
    resp = client.get("/api/users/dashboard/")

    assert resp.status_code == 200
    assert resp.data["email"] == "afk@example.com"


def test_dashboard_shows_balance(api, user):
    ledger.credit(user.id, Decimal("3.30"), "seed")

    resp = api.get("/api/users/dashboard/")

    assert resp.data["balance"] == "3.30"
