# wallets/models.py
from __future__ import annotations

from decimal import Decimal, InvalidOperation

from django.conf import settings
from django.db import models, transaction as db_transaction

from .exceptions import InsufficientBalanceError, InvalidAmountError, ImmutableTransactionError
from .units import q


def validate_amount(amount: Decimal | int | float | str) -> Decimal:
    """
    Ledger amounts must be positive and already expressed in coin units.
    Excess precision is rejected rather than rounded here.
    """
    try:
        d = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidAmountError(f"Amount {amount!r} is not a number.")
    if not d.is_finite() or d <= 0:
        raise InvalidAmountError("Amount must be > 0.")
    if q(d) != d:
        raise InvalidAmountError(f"Amount must have at most 2 decimal places (got {d}).")
    return q(d)


class Wallet(models.Model):
    """
    Coin balance of one account. balance is stored in coins (Decimal, 2dp)
    and only ever changes through credit()/debit().
    """
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="wallet"
    )
    balance = models.DecimalField(max_digits=14, decimal_places=2, default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.CheckConstraint(
                condition=models.Q(balance__gte=0), name="wallet_balance_non_negative"
            ),
        ]

    def __str__(self) -> str:
        return f"Wallet<{self.user_id}> bal={self.balance}"

    @classmethod
    def lock_for_user(cls, user_id) -> "Wallet":
        """
        Row-lock the user's wallet for the rest of the enclosing transaction.
        Every balance or AFK session mutation for a user goes through this lock.
        """
        wallet, _ = cls.objects.select_for_update().get_or_create(user_id=user_id)
        return wallet

    # -------------------------- mutation operations ------------------------ #
    # All ops are concurrency-safe via SELECT ... FOR UPDATE inside a DB txn.

    @db_transaction.atomic
    def credit(self, amount, description: str, metadata: dict | None = None) -> "Transaction":
        """
        Increase wallet balance by amount and append the ledger entry.
        """
        amt = validate_amount(amount)

        # Lock row
        w = Wallet.objects.select_for_update().get(pk=self.pk)
        w.balance = q(w.balance + amt)
        w.save(update_fields=["balance", "updated_at"])
        self.balance = w.balance

        return Transaction.objects.create(
            user_id=w.user_id,
            wallet=w,
            amount=amt,
            type=Transaction.TYPE_CREDIT,
            description=description,
            balance_after=w.balance,
            metadata=metadata or {},
        )

    @db_transaction.atomic
    def debit(self, amount, description: str, metadata: dict | None = None) -> "Transaction":
        """
        Charge the wallet by amount. The balance never goes below zero.
        """
        amt = validate_amount(amount)

        w = Wallet.objects.select_for_update().get(pk=self.pk)
        if q(w.balance) < amt:
            raise InsufficientBalanceError(
                f"Insufficient balance: {w.balance} available, {amt} requested."
            )

        w.balance = q(w.balance - amt)
        w.save(update_fields=["balance", "updated_at"])
        self.balance = w.balance

        return Transaction.objects.create(
            user_id=w.user_id,
            wallet=w,
            amount=amt,
            type=Transaction.TYPE_DEBIT,
            description=description,
            balance_after=w.balance,
            metadata=metadata or {},
        )


class TransactionQuerySet(models.QuerySet):
    """Bulk paths bypass Model.save/delete, so they are closed here too."""

    def update(self, **kwargs):
        raise ImmutableTransactionError("Ledger entries cannot be modified.")

    def delete(self):
        raise ImmutableTransactionError("Ledger entries cannot be deleted.")


class Transaction(models.Model):
    """
    Append-only ledger entry. 'amount' is always positive; the direction is
    captured in 'type'. balance_after snapshots the wallet at commit time.
    """

    TYPE_CREDIT = "credit"
    TYPE_DEBIT = "debit"

    TYPE_CHOICES = [
        (TYPE_CREDIT, "Credit"),
        (TYPE_DEBIT, "Debit"),
    ]

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="coin_transactions"
    )
    wallet = models.ForeignKey(Wallet, on_delete=models.PROTECT, related_name="transactions")
    type = models.CharField(max_length=10, choices=TYPE_CHOICES)
    amount = models.DecimalField(max_digits=14, decimal_places=2)
    description = models.CharField(max_length=255)
    balance_after = models.DecimalField(max_digits=14, decimal_places=2)
    metadata = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = TransactionQuerySet.as_manager()

    class Meta:
        indexes = [
            models.Index(fields=["user", "created_at"], name="idx_txn_user_created"),
        ]
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:
        return f"Txn<{self.type} {self.amount} u={self.user_id} after={self.balance_after}>"

    def save(self, *args, **kwargs):
        if self.pk is not None and not self._state.adding:
            raise ImmutableTransactionError("Ledger entries cannot be modified.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ImmutableTransactionError("Ledger entries cannot be deleted.")
