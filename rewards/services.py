from __future__ import annotations

import logging

from django.db import transaction
from django.utils import timezone

from wallets import ledger
from .exceptions import InvalidRedeemCodeError
from .models import RedeemCode, Redemption

logger = logging.getLogger(__name__)


def redeem(user_id, code: str, now=None) -> ledger.LedgerResult:
    """
    Claim a redeem code once per user. Code usage, the redemption record and
    the ledger credit commit together or not at all.
    """
    code = (code or "").strip()
    now = now or timezone.now()

    with transaction.atomic():
        rc = RedeemCode.objects.select_for_update().filter(code=code).first()
        if rc is None:
            raise InvalidRedeemCodeError("Invalid code.")
        if rc.expires_at is not None and rc.expires_at < now:
            raise InvalidRedeemCodeError("Code expired.")
        if rc.max_uses is not None and rc.used_count >= rc.max_uses:
            raise InvalidRedeemCodeError("Code fully claimed.")
        if Redemption.objects.filter(user_id=user_id, code=rc).exists():
            raise InvalidRedeemCodeError("You already claimed this code.")

        rc.used_count += 1
        rc.save(update_fields=["used_count"])

        result = ledger.credit(
            user_id, rc.amount, f"Redeemed code {rc.code}", {"source": "redeem", "code": rc.code}
        )
        Redemption.objects.create(user_id=user_id, code=rc, transaction=result.transaction)

    logger.info("redeem code=%s user=%s amount=%s", rc.code, user_id, rc.amount)
    return result
