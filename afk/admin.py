from django.contrib import admin
from .models import AfkSession, AfkSettings


@admin.register(AfkSettings)
class AfkSettingsAdmin(admin.ModelAdmin):
    list_display = ("id", "enabled", "coins_per_minute", "max_coins_per_day", "updated_at")

    def has_add_permission(self, request):
        return not AfkSettings.objects.exists()

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(AfkSession)
class AfkSessionAdmin(admin.ModelAdmin):
    list_display = (
        "id", "user", "is_active", "started_at", "last_heartbeat_at",
        "session_coins_earned", "daily_coins_earned", "end_reason",
    )
    list_filter = ("is_active", "end_reason", "started_at")
    search_fields = ("user__email",)
    date_hierarchy = "started_at"
    # counters move only with ledger postings
    readonly_fields = [f.name for f in AfkSession._meta.fields]

    def has_add_permission(self, request):
        return False
