from __future__ import annotations

from decimal import Decimal, ROUND_DOWN

# Smallest billable coin unit; balances and ledger amounts use 2dp.
COIN_UNIT = Decimal("0.01")
ZERO = Decimal("0.00")


def q(amount: Decimal | int | float | str) -> Decimal:
    """
    Quantize any numeric input to the smallest billable coin unit.
    """
    if isinstance(amount, Decimal):
        d = amount
    else:
        d = Decimal(str(amount))
    # Use ROUND_DOWN so accrual never credits more than was earned.
    return d.quantize(COIN_UNIT, rounding=ROUND_DOWN)
