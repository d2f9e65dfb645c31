import threading
from decimal import Decimal

import pytest
from django.db import connection

from afk.exceptions import AlreadyActiveError
from afk.models import AfkSession
from afk.sessions import SessionManager
from wallets import ledger
from wallets.exceptions import InsufficientBalanceError

pytestmark = pytest.mark.django_db(transaction=True)


def race(fn, workers=2):
    """Release `workers` threads into fn at once; collect (status, value) pairs."""
    barrier = threading.Barrier(workers)
    results = []
    lock = threading.Lock()

    def run():
        try:
            barrier.wait(timeout=10)
            outcome = ("ok", fn())
        except Exception as exc:
            outcome = ("err", exc)
        finally:
            connection.close()
        with lock:
            results.append(outcome)

    threads = [threading.Thread(target=run) for _ in range(workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=60)
    return results


def test_concurrent_starts_yield_one_session(user, clock, afk_config):
    manager = SessionManager(clock=clock)

    results = race(lambda: manager.start(user.id, afk_config))

    assert sorted(status for status, _ in results) == ["err", "ok"]
    errors = [value for status, value in results if status == "err"]
    assert isinstance(errors[0], AlreadyActiveError)
    assert AfkSession.objects.filter(user=user, is_active=True).count() == 1


def test_concurrent_heartbeats_credit_window_once(user, clock, afk_config):
    manager = SessionManager(clock=clock)
    manager.start(user.id, afk_config)
    clock.advance(60)

    results = race(lambda: manager.heartbeat(user.id, afk_config))

    assert all(status == "ok" for status, _ in results), results
    credited = sorted(value.coins_earned for _, value in results)
    assert credited == [Decimal("0.00"), Decimal("10.00")]
    assert ledger.balance(user.id) == Decimal("10.00")


def test_concurrent_debits_never_overdraw(user):
    ledger.credit(user.id, Decimal("10"), "seed")

    results = race(lambda: ledger.debit(user.id, Decimal("6"), "purchase"))

    assert sorted(status for status, _ in results) == ["err", "ok"]
    errors = [value for status, value in results if status == "err"]
    assert isinstance(errors[0], InsufficientBalanceError)
    assert ledger.balance(user.id) == Decimal("4.00")
