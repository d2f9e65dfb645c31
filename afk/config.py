from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from zoneinfo import ZoneInfo

from django.conf import settings


@dataclass(frozen=True)
class AfkConfig:
    """
    Read-only snapshot of AFK configuration for a single operation.
    Admin-owned values come from the AfkSettings row; timing limits come
    from Django settings.
    """
    enabled: bool
    coins_per_minute: Decimal
    max_coins_per_day: Decimal
    max_heartbeat_gap_seconds: int = 150
    min_heartbeat_interval_seconds: int = 20
    idle_timeout_seconds: int = 300
    reset_timezone: str = "UTC"

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.reset_timezone)

    def public(self) -> dict:
        return {
            "enabled": self.enabled,
            "coinsPerMinute": str(self.coins_per_minute),
            "maxCoinsPerDay": str(self.max_coins_per_day),
            "minHeartbeatIntervalSeconds": self.min_heartbeat_interval_seconds,
            "maxHeartbeatGapSeconds": self.max_heartbeat_gap_seconds,
        }


def load_config() -> AfkConfig:
    from .models import AfkSettings

    row = AfkSettings.load()
    return AfkConfig(
        enabled=row.enabled,
        coins_per_minute=Decimal(str(row.coins_per_minute)),
        max_coins_per_day=Decimal(str(row.max_coins_per_day)),
        max_heartbeat_gap_seconds=settings.AFK_MAX_HEARTBEAT_GAP_SECONDS,
        min_heartbeat_interval_seconds=settings.AFK_MIN_HEARTBEAT_INTERVAL_SECONDS,
        idle_timeout_seconds=settings.AFK_IDLE_TIMEOUT_SECONDS,
        reset_timezone=settings.AFK_RESET_TIMEZONE,
    )
