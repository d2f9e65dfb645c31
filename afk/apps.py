from __future__ import annotations

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from django.apps import AppConfig
from django.conf import settings
from django.core.cache import caches
from django.core.checks import register, Warning, Error


class AfkAppConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "afk"
    verbose_name = "AFK coin sessions"


# ---------------------------------------------------------------------------
# System checks: surface config issues early with `manage.py check`
# ---------------------------------------------------------------------------
@register()
def afk_system_checks(app_configs, **kwargs):
    messages = []

    max_gap = int(getattr(settings, "AFK_MAX_HEARTBEAT_GAP_SECONDS", 0))
    min_interval = int(getattr(settings, "AFK_MIN_HEARTBEAT_INTERVAL_SECONDS", 0))
    idle_timeout = int(getattr(settings, "AFK_IDLE_TIMEOUT_SECONDS", 0))

    # 1) Heartbeat timing sanity
    if max_gap <= 0:
        messages.append(
            Error(
                "AFK_MAX_HEARTBEAT_GAP_SECONDS must be positive.",
                id="afk.E001",
                hint="Use 2-3x the client heartbeat interval (e.g. 150 for a 50s client).",
            )
        )
    elif max_gap <= min_interval:
        messages.append(
            Warning(
                "AFK_MAX_HEARTBEAT_GAP_SECONDS is not larger than AFK_MIN_HEARTBEAT_INTERVAL_SECONDS.",
                id="afk.W001",
                hint="Every accepted heartbeat would be clamped; raise the gap or lower the minimum interval.",
            )
        )

    if 0 < idle_timeout < max_gap:
        messages.append(
            Warning(
                "AFK_IDLE_TIMEOUT_SECONDS is shorter than AFK_MAX_HEARTBEAT_GAP_SECONDS.",
                id="afk.W002",
                hint="The reaper would close sessions that can still legitimately heartbeat.",
            )
        )

    # 2) Daily reset boundary
    tz_name = getattr(settings, "AFK_RESET_TIMEZONE", "UTC")
    try:
        ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        messages.append(
            Error(
                f"AFK_RESET_TIMEZONE {tz_name!r} is not a valid IANA time zone.",
                id="afk.E002",
                hint="Use e.g. 'UTC' or 'Europe/Berlin'.",
            )
        )

    # 3) Throttle state should be shared across workers in production
    try:
        cache = caches["default"]
        backend_path = f"{cache.__class__.__module__}.{cache.__class__.__name__}"
        if not settings.DEBUG and "django_redis" not in backend_path:
            messages.append(
                Warning(
                    "Non-Redis cache backend detected outside DEBUG.",
                    id="afk.W003",
                    hint="Heartbeat throttling keeps its counters in the Django cache. Set REDIS_URL.",
                )
            )
    except Exception as e:  # pragma: no cover
        messages.append(
            Warning(
                f"Could not inspect cache backend: {e}",
                id="afk.W004",
                hint="Ensure CACHES['default'] is configured.",
            )
        )

    return messages
