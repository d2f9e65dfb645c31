# wallets/urls.py
from django.urls import path
from .views import (
    WalletBalanceView,
    TransactionListView,
    AdjustView,
)

urlpatterns = [
    path("wallet/", WalletBalanceView.as_view(), name="wallet-balance"),
    path("wallet/adjust/", AdjustView.as_view(), name="wallet-adjust"),
    path("coins/history", TransactionListView.as_view(), name="coin-history"),
]
