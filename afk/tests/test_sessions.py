import datetime as dt
from dataclasses import replace
from decimal import Decimal

import pytest
from django.db import IntegrityError, transaction

from afk.exceptions import (
    AlreadyActiveError,
    FeatureDisabledError,
    HeartbeatTooSoonError,
    NoActiveSessionError,
)
from afk.models import AfkSession
from afk.sessions import REASON_DISABLED, REASON_IDLE, REASON_STOPPED, SessionManager
from core.models import AuditLog
from wallets import ledger
from wallets.models import Transaction

pytestmark = pytest.mark.django_db


@pytest.fixture
def manager(clock):
    return SessionManager(clock=clock)


def test_start_creates_active_session(manager, user, clock, afk_config):
    session = manager.start(user.id, afk_config)

    assert session.is_active
    assert session.started_at == clock.now()
    assert session.last_heartbeat_at == clock.now()
    assert session.session_coins_earned == Decimal("0")
    assert session.last_reset_date == dt.date(2025, 10, 27)


def test_second_start_conflicts(manager, user, afk_config):
    manager.start(user.id, afk_config)

    with pytest.raises(AlreadyActiveError):
        manager.start(user.id, afk_config)

    assert AfkSession.objects.filter(user=user, is_active=True).count() == 1


def test_database_refuses_second_active_session(manager, user, clock, afk_config):
    manager.start(user.id, afk_config)

    with pytest.raises(IntegrityError):
        with transaction.atomic():
            AfkSession.objects.create(
                user=user,
                started_at=clock.now(),
                last_heartbeat_at=clock.now(),
                is_active=True,
                last_reset_date=dt.date(2025, 10, 27),
            )


def test_start_when_disabled_creates_nothing(manager, user, afk_config):
    with pytest.raises(FeatureDisabledError):
        manager.start(user.id, replace(afk_config, enabled=False))

    assert not AfkSession.objects.filter(user=user).exists()


def test_users_do_not_share_sessions(manager, user, other_user, afk_config):
    manager.start(user.id, afk_config)
    manager.start(other_user.id, afk_config)

    assert AfkSession.objects.filter(is_active=True).count() == 2


def test_heartbeat_credits_elapsed_time(manager, user, clock, afk_config):
    manager.start(user.id, afk_config)
    clock.advance(60)

    result = manager.heartbeat(user.id, afk_config)

    assert result.coins_earned == Decimal("10.00")
    assert result.daily_coins_earned == Decimal("10.00")
    assert result.limit_reached is False
    assert ledger.balance(user.id) == Decimal("10.00")

    txn = Transaction.objects.get(user=user)
    assert txn.type == Transaction.TYPE_CREDIT
    assert txn.description == "afk_session"
    assert txn.metadata["source"] == "afk"
    assert txn.balance_after == Decimal("10.00")


def test_heartbeat_stops_at_daily_cap(manager, user, clock, afk_config):
    # an earlier session today already earned 95
    AfkSession.objects.create(
        user=user,
        started_at=clock.now() - dt.timedelta(hours=2),
        last_heartbeat_at=clock.now() - dt.timedelta(hours=1),
        is_active=False,
        session_coins_earned=Decimal("95"),
        daily_coins_earned=Decimal("95"),
        last_reset_date=dt.date(2025, 10, 27),
    )
    session = manager.start(user.id, afk_config)
    assert session.daily_coins_earned == Decimal("95.00")

    clock.advance(120)
    result = manager.heartbeat(user.id, afk_config)

    assert result.coins_earned == Decimal("5.00")
    assert result.limit_reached is True
    assert ledger.balance(user.id) == Decimal("5.00")

    clock.advance(60)
    result = manager.heartbeat(user.id, afk_config)
    assert result.coins_earned == Decimal("0.00")
    assert result.limit_reached is True
    assert Transaction.objects.filter(user=user).count() == 1


def test_duplicate_heartbeat_is_not_double_credited(manager, user, clock, afk_config):
    manager.start(user.id, afk_config)
    clock.advance(60)

    first = manager.heartbeat(user.id, afk_config)
    second = manager.heartbeat(user.id, afk_config)

    assert first.coins_earned == Decimal("10.00")
    assert second.coins_earned == Decimal("0.00")
    assert ledger.balance(user.id) == Decimal("10.00")


def test_heartbeat_too_soon_is_rejected(manager, user, clock, afk_config):
    config = replace(afk_config, min_heartbeat_interval_seconds=20)
    manager.start(user.id, config)
    clock.advance(60)
    manager.heartbeat(user.id, config)

    with pytest.raises(HeartbeatTooSoonError):
        manager.heartbeat(user.id, config)

    assert ledger.balance(user.id) == Decimal("10.00")
    assert AfkSession.objects.get(user=user, is_active=True).last_heartbeat_at == clock.now()


def test_long_gap_is_clamped(manager, user, clock, afk_config):
    manager.start(user.id, afk_config)
    clock.advance(10000)

    result = manager.heartbeat(user.id, afk_config)

    # 120s clamp at 10/min
    assert result.coins_earned == Decimal("20.00")
    assert AfkSession.objects.get(user=user, is_active=True).last_heartbeat_at == clock.now()


def test_clock_stepping_back_credits_nothing(manager, user, clock, afk_config):
    manager.start(user.id, afk_config)
    clock.advance(60)
    manager.heartbeat(user.id, afk_config)
    high_water = clock.now()

    clock.advance(-30)
    result = manager.heartbeat(user.id, afk_config)

    assert result.coins_earned == Decimal("0.00")
    session = AfkSession.objects.get(user=user, is_active=True)
    assert session.last_heartbeat_at == high_water
    assert session.last_heartbeat_at >= session.started_at


def test_heartbeat_without_session(manager, user, afk_config):
    with pytest.raises(NoActiveSessionError):
        manager.heartbeat(user.id, afk_config)


def test_rate_change_applies_from_next_heartbeat(manager, user, clock, afk_config):
    manager.start(user.id, afk_config)
    clock.advance(60)
    manager.heartbeat(user.id, afk_config)

    clock.advance(60)
    result = manager.heartbeat(user.id, replace(afk_config, coins_per_minute=Decimal("30")))

    assert result.coins_earned == Decimal("30.00")
    assert ledger.balance(user.id) == Decimal("40.00")


def test_disabled_mid_session_closes_without_credit(manager, user, clock, afk_config):
    manager.start(user.id, afk_config)
    clock.advance(60)

    with pytest.raises(FeatureDisabledError):
        manager.heartbeat(user.id, replace(afk_config, enabled=False))

    session = AfkSession.objects.get(user=user)
    assert session.is_active is False
    assert session.end_reason == REASON_DISABLED
    assert ledger.balance(user.id) == Decimal("0.00")


def test_stop_credits_final_window(manager, user, clock, afk_config):
    manager.start(user.id, afk_config)
    clock.advance(60)
    manager.heartbeat(user.id, afk_config)
    clock.advance(30)

    earned = manager.stop(user.id, afk_config)

    assert earned == Decimal("15.00")
    assert ledger.balance(user.id) == Decimal("15.00")
    session = AfkSession.objects.get(user=user)
    assert session.is_active is False
    assert session.end_reason == REASON_STOPPED
    assert session.ended_at == clock.now()


def test_stop_twice(manager, user, clock, afk_config):
    manager.start(user.id, afk_config)
    clock.advance(30)
    manager.stop(user.id, afk_config)

    with pytest.raises(NoActiveSessionError):
        manager.stop(user.id, afk_config)

    assert ledger.balance(user.id) == Decimal("5.00")


def test_heartbeat_after_stop(manager, user, clock, afk_config):
    manager.start(user.id, afk_config)
    manager.stop(user.id, afk_config)
    clock.advance(60)

    with pytest.raises(NoActiveSessionError):
        manager.heartbeat(user.id, afk_config)


def test_daily_counter_carries_into_new_session(manager, user, clock, afk_config):
    manager.start(user.id, afk_config)
    clock.advance(60)
    manager.stop(user.id, afk_config)

    clock.advance(hours=1)
    session = manager.start(user.id, afk_config)

    assert session.daily_coins_earned == Decimal("10.00")
    assert session.session_coins_earned == Decimal("0.00")


def test_new_day_resets_daily_counter_on_start(manager, user, clock, afk_config):
    manager.start(user.id, afk_config)
    clock.advance(120)
    manager.stop(user.id, afk_config)

    clock.advance(days=1)
    session = manager.start(user.id, afk_config)

    assert session.daily_coins_earned == Decimal("0.00")
    assert session.last_reset_date == dt.date(2025, 10, 28)


def test_midnight_rollover_during_session(manager, user, clock, afk_config):
    clock.set(dt.datetime(2025, 10, 27, 23, 59, 30, tzinfo=dt.timezone.utc))
    AfkSession.objects.create(
        user=user,
        started_at=clock.now() - dt.timedelta(hours=3),
        last_heartbeat_at=clock.now() - dt.timedelta(hours=2),
        is_active=False,
        daily_coins_earned=Decimal("100"),
        last_reset_date=dt.date(2025, 10, 27),
    )
    manager.start(user.id, afk_config)
    clock.advance(60)

    result = manager.heartbeat(user.id, afk_config)

    assert result.coins_earned == Decimal("10.00")
    assert result.daily_coins_earned == Decimal("10.00")
    session = AfkSession.objects.get(user=user, is_active=True)
    assert session.last_reset_date == dt.date(2025, 10, 28)


def test_reset_follows_configured_timezone(manager, user, clock, afk_config):
    # 12:00 UTC is already 01:00 the next day in Auckland
    clock.set(dt.datetime(2025, 10, 27, 12, 0, 0, tzinfo=dt.timezone.utc))
    session = manager.start(user.id, replace(afk_config, reset_timezone="Pacific/Auckland"))

    assert session.last_reset_date == dt.date(2025, 10, 28)


def test_daily_total_never_exceeds_cap(manager, user, clock, afk_config):
    manager.start(user.id, afk_config)
    for _ in range(30):
        clock.advance(47)
        manager.heartbeat(user.id, afk_config)

    session = AfkSession.objects.get(user=user, is_active=True)
    assert session.daily_coins_earned == Decimal("100.00")
    assert ledger.balance(user.id) == Decimal("100.00")


def test_status(manager, user, clock, afk_config):
    session, config = manager.status(user.id, afk_config)
    assert session is None
    assert config is afk_config

    manager.start(user.id, afk_config)
    session, _ = manager.status(user.id, afk_config)
    assert session.is_active


def test_force_terminate_is_audited(manager, user, clock, afk_config):
    manager.start(user.id, afk_config)
    clock.advance(60)

    earned = manager.force_terminate(user.id, "client closed", afk_config)

    assert earned == Decimal("10.00")
    entry = AuditLog.objects.get(action="afk.force_terminate")
    assert entry.actor is None
    assert entry.details["user_id"] == user.id
    assert entry.details["reason"] == "client closed"


def test_stop_is_not_audited(manager, user, clock, afk_config):
    manager.start(user.id, afk_config)
    manager.stop(user.id, afk_config)

    assert not AuditLog.objects.filter(action="afk.force_terminate").exists()


def test_reap_idle_closes_stale_sessions_only(manager, user, other_user, clock, afk_config):
    manager.start(user.id, afk_config)
    clock.advance(400)
    manager.start(other_user.id, afk_config)

    closed = manager.reap_idle(config=afk_config)

    assert closed == 1
    stale = AfkSession.objects.get(user=user)
    assert stale.is_active is False
    assert stale.end_reason == REASON_IDLE
    # only the clamped window is paid out
    assert ledger.balance(user.id) == Decimal("20.00")
    assert AfkSession.objects.get(user=other_user).is_active is True
    assert AuditLog.objects.filter(action="afk.force_terminate").count() == 1


def test_reap_idle_with_explicit_timeout(manager, user, clock, afk_config):
    manager.start(user.id, afk_config)
    clock.advance(100)

    assert manager.reap_idle(idle_timeout_seconds=300, config=afk_config) == 0
    assert manager.reap_idle(idle_timeout_seconds=60, config=afk_config) == 1
