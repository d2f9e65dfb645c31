# wallets/admin.py
from django.contrib import admin
from .models import Wallet, Transaction


@admin.register(Wallet)
class WalletAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "balance", "updated_at", "created_at")
    search_fields = ("user__email", "id")
    # balance only moves through the ledger (POST /api/wallet/adjust/)
    readonly_fields = ("balance", "created_at", "updated_at")
    ordering = ("-updated_at",)
    date_hierarchy = "created_at"


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    """
    Read-only view of the append-only ledger.
    """
    list_display = ("id", "user", "type", "amount", "balance_after", "description", "created_at")
    list_filter = ("type", "created_at")
    search_fields = ("user__email", "description", "id")
    ordering = ("-created_at",)
    date_hierarchy = "created_at"

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
