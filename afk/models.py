# afk/models.py
from __future__ import annotations

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models


class AfkSettings(models.Model):
    """
    Admin-owned AFK configuration. Single row (pk=1); read per operation as
    an AfkConfig snapshot, so changes apply from the next call onwards.
    """
    SINGLETON_PK = 1

    enabled = models.BooleanField(default=True)
    coins_per_minute = models.DecimalField(
        max_digits=10, decimal_places=2, default=1, validators=[MinValueValidator(0)]
    )
    max_coins_per_day = models.DecimalField(
        max_digits=12, decimal_places=2, default=100, validators=[MinValueValidator(0)]
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "AFK settings"
        verbose_name_plural = "AFK settings"

    def __str__(self):
        state = "on" if self.enabled else "off"
        return f"AFK {state}: {self.coins_per_minute}/min, cap {self.max_coins_per_day}/day"

    def save(self, *args, **kwargs):
        self.pk = self.SINGLETON_PK
        super().save(*args, **kwargs)

    @classmethod
    def load(cls) -> "AfkSettings":
        obj, _ = cls.objects.get_or_create(
            pk=cls.SINGLETON_PK,
            defaults={
                "enabled": settings.AFK_DEFAULT_ENABLED,
                "coins_per_minute": settings.AFK_DEFAULT_COINS_PER_MINUTE,
                "max_coins_per_day": settings.AFK_DEFAULT_MAX_COINS_PER_DAY,
            },
        )
        return obj


class AfkSession(models.Model):
    """
    One AFK earning session. Closed sessions stay as history (is_active=False);
    the latest row carries the user's daily counter into the next session.
    """
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="afk_sessions"
    )
    started_at = models.DateTimeField()
    last_heartbeat_at = models.DateTimeField()
    is_active = models.BooleanField(default=True)

    session_coins_earned = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    daily_coins_earned = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    last_reset_date = models.DateField()

    ended_at = models.DateTimeField(null=True, blank=True)
    end_reason = models.CharField(max_length=64, blank=True)

    class Meta:
        ordering = ("-started_at", "-id")
        constraints = [
            models.UniqueConstraint(
                fields=["user"],
                condition=models.Q(is_active=True),
                name="afk_one_active_session_per_user",
            ),
            models.CheckConstraint(
                condition=models.Q(last_heartbeat_at__gte=models.F("started_at")),
                name="afk_heartbeat_after_start",
            ),
            models.CheckConstraint(
                condition=models.Q(session_coins_earned__gte=0) & models.Q(daily_coins_earned__gte=0),
                name="afk_counters_non_negative",
            ),
        ]
        indexes = [
            models.Index(fields=["user", "started_at"], name="idx_afk_user_started"),
            models.Index(fields=["is_active", "last_heartbeat_at"], name="idx_afk_active_heartbeat"),
        ]

    def __str__(self):
        state = "active" if self.is_active else (self.end_reason or "closed")
        return f"AfkSession<{self.user_id}> {state} earned={self.session_coins_earned}"
