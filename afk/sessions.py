"""
AFK session lifecycle: start -> heartbeat* -> stop (or forced termination).

Every operation runs in one database transaction that first row-locks the
user's wallet (Wallet.lock_for_user). That lock is the per-user
serialization point: two requests for the same user (duplicate heartbeat
retries, a heartbeat racing a stop) execute one after the other, so the
second one always sees the last_heartbeat_at written by the first and the
same elapsed window is never credited twice. Different users never contend.

Elapsed time is always measured between two server-side instants
(last_heartbeat_at and clock.now()); the client never supplies a duration.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import NamedTuple, Optional, Tuple

from django.db import IntegrityError, transaction as db_transaction
from django.utils import timezone

from core.clock import SystemClock
from core.logging import make_audit_logger
from wallets import ledger
from wallets.models import Wallet
from wallets.units import ZERO

from . import accrual
from .config import AfkConfig, load_config
from .exceptions import (
    AlreadyActiveError,
    FeatureDisabledError,
    HeartbeatTooSoonError,
    NoActiveSessionError,
)
from .models import AfkSession

logger = logging.getLogger(__name__)

LEDGER_DESCRIPTION = "afk_session"

REASON_STOPPED = "stopped"
REASON_DISABLED = "afk disabled"
REASON_IDLE = "heartbeat timeout exceeded"


class HeartbeatResult(NamedTuple):
    coins_earned: Decimal
    daily_coins_earned: Decimal
    limit_reached: bool


class SessionManager:
    def __init__(self, clock=None):
        self.clock = clock or SystemClock()

    # ------------------------------------------------------------------ #
    # helpers
    # ------------------------------------------------------------------ #

    def _today(self, now: datetime, config: AfkConfig):
        return timezone.localdate(now, timezone=config.tz)

    def _active_for_update(self, user_id) -> AfkSession:
        session = (
            AfkSession.objects.select_for_update()
            .filter(user_id=user_id, is_active=True)
            .first()
        )
        if session is None:
            raise NoActiveSessionError()
        return session

    def _accrue(self, session: AfkSession, now: datetime, config: AfkConfig) -> accrual.AccrualResult:
        """
        Credit the window since the last accepted heartbeat, clamped to
        max_heartbeat_gap_seconds. Time beyond the clamp is dropped.
        """
        today = self._today(now, config)
        if today > session.last_reset_date:
            session.daily_coins_earned = ZERO
            session.last_reset_date = today

        elapsed = (now - session.last_heartbeat_at).total_seconds()
        elapsed = min(max(elapsed, 0.0), float(config.max_heartbeat_gap_seconds))

        result = accrual.compute(
            elapsed,
            config.coins_per_minute,
            session.daily_coins_earned,
            config.max_coins_per_day,
        )

        if result.coins_to_credit > 0:
            ledger.credit(
                session.user_id,
                result.coins_to_credit,
                LEDGER_DESCRIPTION,
                {"source": "afk", "session_id": session.pk},
            )
            session.session_coins_earned += result.coins_to_credit
            session.daily_coins_earned += result.coins_to_credit

        # never move backwards if the server clock stepped back
        session.last_heartbeat_at = max(now, session.last_heartbeat_at)
        return result

    def _close(self, session: AfkSession, now: datetime, reason: str) -> None:
        session.is_active = False
        session.ended_at = max(now, session.last_heartbeat_at)
        session.end_reason = reason[:64]

    # ------------------------------------------------------------------ #
    # operations
    # ------------------------------------------------------------------ #

    def start(self, user_id, config: Optional[AfkConfig] = None) -> AfkSession:
        config = config or load_config()
        if not config.enabled:
            raise FeatureDisabledError()

        with db_transaction.atomic():
            Wallet.lock_for_user(user_id)
            if AfkSession.objects.filter(user_id=user_id, is_active=True).exists():
                raise AlreadyActiveError()

            now = self.clock.now()
            today = self._today(now, config)

            # daily counter carries over from the latest session of the same day
            previous = AfkSession.objects.filter(user_id=user_id).order_by("-started_at", "-id").first()
            if previous is not None and previous.last_reset_date == today:
                daily = previous.daily_coins_earned
            else:
                daily = ZERO

            try:
                with db_transaction.atomic():
                    session = AfkSession.objects.create(
                        user_id=user_id,
                        started_at=now,
                        last_heartbeat_at=now,
                        is_active=True,
                        session_coins_earned=ZERO,
                        daily_coins_earned=daily,
                        last_reset_date=today,
                    )
            except IntegrityError:
                # unique active-session constraint; a concurrent start won
                raise AlreadyActiveError()

        logger.info("afk start user=%s session=%s daily=%s", user_id, session.pk, daily)
        return session

    def heartbeat(self, user_id, config: Optional[AfkConfig] = None) -> HeartbeatResult:
        config = config or load_config()

        with db_transaction.atomic():
            Wallet.lock_for_user(user_id)
            session = self._active_for_update(user_id)
            now = self.clock.now()

            if config.enabled:
                since_last = (now - session.last_heartbeat_at).total_seconds()
                if config.min_heartbeat_interval_seconds > 0 and since_last < config.min_heartbeat_interval_seconds:
                    raise HeartbeatTooSoonError(
                        f"Heartbeat {since_last:.0f}s after the previous one; "
                        f"minimum is {config.min_heartbeat_interval_seconds}s."
                    )
                result = self._accrue(session, now, config)
            else:
                # disabled mid-session: close without crediting the open window
                self._close(session, now, REASON_DISABLED)
            session.save()

        if not config.enabled:
            logger.info("afk session=%s closed for user=%s: AFK disabled", session.pk, user_id)
            raise FeatureDisabledError("AFK system has been disabled.")

        logger.info(
            "afk heartbeat user=%s session=%s credited=%s daily=%s limit=%s",
            user_id, session.pk, result.coins_to_credit, session.daily_coins_earned, result.limit_reached,
        )
        return HeartbeatResult(result.coins_to_credit, session.daily_coins_earned, result.limit_reached)

    def _finish(self, user_id, reason: str, config: AfkConfig, stale_before: Optional[datetime] = None):
        with db_transaction.atomic():
            Wallet.lock_for_user(user_id)
            session = self._active_for_update(user_id)
            if stale_before is not None and session.last_heartbeat_at >= stale_before:
                # heartbeat arrived while the reaper was deciding; keep it open
                return None

            now = self.clock.now()
            if config.enabled:
                self._accrue(session, now, config)
            self._close(session, now, reason)
            session.save()

            if reason != REASON_STOPPED:
                make_audit_logger()(
                    "afk.force_terminate",
                    user_id=user_id,
                    session_id=session.pk,
                    reason=reason,
                    coins_earned=str(session.session_coins_earned),
                )

        logger.info(
            "afk end user=%s session=%s reason=%s earned=%s",
            user_id, session.pk, reason, session.session_coins_earned,
        )
        return session

    def stop(self, user_id, config: Optional[AfkConfig] = None) -> Decimal:
        """
        Credit the remaining window and close the session. Returns the coins
        earned over the whole session. A second stop raises NoActiveSessionError.
        """
        session = self._finish(user_id, REASON_STOPPED, config or load_config())
        return session.session_coins_earned

    def force_terminate(self, user_id, reason: str, config: Optional[AfkConfig] = None) -> Decimal:
        """Stop on behalf of a client that went away, recording why."""
        session = self._finish(user_id, reason, config or load_config())
        logger.warning("afk force-terminated user=%s reason=%s", user_id, reason)
        return session.session_coins_earned

    def status(self, user_id, config: Optional[AfkConfig] = None) -> Tuple[Optional[AfkSession], AfkConfig]:
        config = config or load_config()
        session = AfkSession.objects.filter(user_id=user_id, is_active=True).first()
        return session, config

    def reap_idle(self, idle_timeout_seconds: Optional[int] = None, config: Optional[AfkConfig] = None) -> int:
        """
        Force-terminate sessions whose last heartbeat is older than the idle
        timeout. Returns the number of sessions closed.
        """
        config = config or load_config()
        timeout = idle_timeout_seconds if idle_timeout_seconds is not None else config.idle_timeout_seconds
        cutoff = self.clock.now() - timedelta(seconds=timeout)

        user_ids = list(
            AfkSession.objects.filter(is_active=True, last_heartbeat_at__lt=cutoff)
            .order_by("last_heartbeat_at")
            .values_list("user_id", flat=True)
        )

        closed = 0
        for user_id in user_ids:
            try:
                session = self._finish(user_id, REASON_IDLE, config, stale_before=cutoff)
            except NoActiveSessionError:
                # stopped by the client in the meantime
                continue
            if session is not None:
                closed += 1
                logger.warning("afk force-terminated user=%s reason=%s", user_id, REASON_IDLE)
        return closed
