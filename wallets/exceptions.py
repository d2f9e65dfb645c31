from rest_framework import status

from core.exceptions import DomainError


class InvalidAmountError(DomainError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "invalid_amount"
    default_detail = "Amount must be > 0."


class InsufficientBalanceError(DomainError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "insufficient_balance"
    default_detail = "Insufficient balance."


class ImmutableTransactionError(RuntimeError):
    """Raised on any attempt to rewrite or remove a ledger entry."""
