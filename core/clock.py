from __future__ import annotations

from datetime import datetime, timedelta

from django.utils import timezone


class SystemClock:
    """Wall clock; the only place AFK code reads the current time."""

    def now(self) -> datetime:
        return timezone.now()


class FrozenClock:
    """Manually advanced clock for tests and replays."""

    def __init__(self, start: datetime | None = None):
        self._now = start or timezone.now()

    def now(self) -> datetime:
        return self._now

    def advance(self, seconds: float = 0, **kwargs) -> datetime:
        self._now = self._now + timedelta(seconds=seconds, **kwargs)
        return self._now

    def set(self, when: datetime) -> None:
        self._now = when
