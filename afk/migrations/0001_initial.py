import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="AfkSettings",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("enabled", models.BooleanField(default=True)),
                ("coins_per_minute", models.DecimalField(decimal_places=2, default=1, max_digits=10, validators=[django.core.validators.MinValueValidator(0)])),
                ("max_coins_per_day", models.DecimalField(decimal_places=2, default=100, max_digits=12, validators=[django.core.validators.MinValueValidator(0)])),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "AFK settings",
                "verbose_name_plural": "AFK settings",
            },
        ),
        migrations.CreateModel(
            name="AfkSession",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("started_at", models.DateTimeField()),
                ("last_heartbeat_at", models.DateTimeField()),
                ("is_active", models.BooleanField(default=True)),
                ("session_coins_earned", models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ("daily_coins_earned", models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ("last_reset_date", models.DateField()),
                ("ended_at", models.DateTimeField(blank=True, null=True)),
                ("end_reason", models.CharField(blank=True, max_length=64)),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="afk_sessions", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ("-started_at", "-id"),
                "indexes": [
                    models.Index(fields=["user", "started_at"], name="idx_afk_user_started"),
                    models.Index(fields=["is_active", "last_heartbeat_at"], name="idx_afk_active_heartbeat"),
                ],
                "constraints": [
                    models.UniqueConstraint(condition=models.Q(("is_active", True)), fields=("user",), name="afk_one_active_session_per_user"),
                    models.CheckConstraint(condition=models.Q(("last_heartbeat_at__gte", models.F("started_at"))), name="afk_heartbeat_after_start"),
                    models.CheckConstraint(condition=models.Q(("session_coins_earned__gte", 0), ("daily_coins_earned__gte", 0)), name="afk_counters_non_negative"),
                ],
            },
        ),
    ]
