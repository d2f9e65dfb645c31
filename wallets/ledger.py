"""
Ledger facade: the single path through which coin balances change.

Every caller (AFK accrual, redeem codes, admin adjustments) posts through
credit()/debit() so that each balance change is paired with exactly one
Transaction row whose balance_after equals the committed balance.
"""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import NamedTuple

from django.db import transaction as db_transaction

from .models import Transaction, Wallet
from .units import ZERO, q

logger = logging.getLogger(__name__)


class LedgerResult(NamedTuple):
    new_balance: Decimal
    transaction: Transaction


@db_transaction.atomic
def credit(user_id, amount, description: str, metadata: dict | None = None) -> LedgerResult:
    wallet = Wallet.lock_for_user(user_id)
    txn = wallet.credit(amount, description, metadata)
    logger.info("ledger credit user=%s amount=%s balance=%s txn=%s",
                user_id, txn.amount, txn.balance_after, txn.pk)
    return LedgerResult(txn.balance_after, txn)


@db_transaction.atomic
def debit(user_id, amount, description: str, metadata: dict | None = None) -> LedgerResult:
    wallet = Wallet.lock_for_user(user_id)
    txn = wallet.debit(amount, description, metadata)
    logger.info("ledger debit user=%s amount=%s balance=%s txn=%s",
                user_id, txn.amount, txn.balance_after, txn.pk)
    return LedgerResult(txn.balance_after, txn)


def balance(user_id) -> Decimal:
    w = Wallet.objects.filter(user_id=user_id).only("balance").first()
    return q(w.balance) if w else ZERO


def history(user_id):
    """Caller's ledger entries, most recent first."""
    return Transaction.objects.filter(user_id=user_id).order_by("-created_at", "-id")
