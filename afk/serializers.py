from rest_framework import serializers

from .models import AfkSession, AfkSettings


class AfkSessionSerializer(serializers.ModelSerializer):
    userId = serializers.IntegerField(source="user_id", read_only=True)
    startedAt = serializers.DateTimeField(source="started_at", read_only=True)
    lastHeartbeatAt = serializers.DateTimeField(source="last_heartbeat_at", read_only=True)
    isActive = serializers.BooleanField(source="is_active", read_only=True)
    sessionCoinsEarned = serializers.DecimalField(
        source="session_coins_earned", max_digits=12, decimal_places=2, read_only=True
    )
    dailyCoinsEarned = serializers.DecimalField(
        source="daily_coins_earned", max_digits=12, decimal_places=2, read_only=True
    )
    lastResetDate = serializers.DateField(source="last_reset_date", read_only=True)

    class Meta:
        model = AfkSession
        fields = (
            "id", "userId", "startedAt", "lastHeartbeatAt", "isActive",
            "sessionCoinsEarned", "dailyCoinsEarned", "lastResetDate",
        )


class HeartbeatResponseSerializer(serializers.Serializer):
    coinsEarned = serializers.DecimalField(max_digits=12, decimal_places=2)
    dailyCoinsEarned = serializers.DecimalField(max_digits=12, decimal_places=2)
    limitReached = serializers.BooleanField()


class StopResponseSerializer(serializers.Serializer):
    coinsEarned = serializers.DecimalField(max_digits=12, decimal_places=2)


class AfkSettingsSerializer(serializers.ModelSerializer):
    coinsPerMinute = serializers.DecimalField(
        source="coins_per_minute", max_digits=10, decimal_places=2, min_value=0, required=False
    )
    maxCoinsPerDay = serializers.DecimalField(
        source="max_coins_per_day", max_digits=12, decimal_places=2, min_value=0, required=False
    )

    class Meta:
        model = AfkSettings
        fields = ("enabled", "coinsPerMinute", "maxCoinsPerDay", "updated_at")
        read_only_fields = ("updated_at",)
