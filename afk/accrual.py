"""
Accrual policy: how many coins an elapsed AFK window is worth.

Pure computation. All inputs, including elapsed time, are supplied by the
caller; nothing here reads the clock or touches the database, so the daily
cap can be checked exhaustively in unit tests.
"""
from __future__ import annotations

from decimal import Decimal
from typing import NamedTuple

from wallets.units import ZERO, q

SECONDS_PER_MINUTE = Decimal(60)


class AccrualResult(NamedTuple):
    coins_to_credit: Decimal
    limit_reached: bool


def _d(value) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def compute(elapsed_seconds, coins_per_minute, daily_coins_earned_so_far, max_coins_per_day) -> AccrualResult:
    """
    Coins earned for elapsed_seconds at coins_per_minute, limited to what is
    left of today's budget. The result is rounded down to the coin unit here
    and only here; the ledger receives it as-is.
    """
    elapsed = max(ZERO, _d(elapsed_seconds))
    rate = max(ZERO, _d(coins_per_minute))
    so_far = max(ZERO, _d(daily_coins_earned_so_far))
    cap = max(ZERO, _d(max_coins_per_day))

    raw = elapsed * rate / SECONDS_PER_MINUTE
    remaining = max(ZERO, cap - so_far)
    coins = q(min(raw, remaining))

    return AccrualResult(coins, so_far + coins >= cap)
