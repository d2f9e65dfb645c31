from django.contrib import admin
from .models import RedeemCode, Redemption

@admin.register(RedeemCode)
class RedeemCodeAdmin(admin.ModelAdmin):
    list_display = ("id", "code", "amount", "used_count", "max_uses", "expires_at", "created_at")
    search_fields = ("code",)
    list_filter = ("created_at",)
    readonly_fields = ("used_count",)
    date_hierarchy = "created_at"

@admin.register(Redemption)
class RedemptionAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "code", "transaction", "created_at")
    search_fields = ("user__email", "code__code")
    date_hierarchy = "created_at"
