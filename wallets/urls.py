# wallets/urls.py
from django.urls import path
from .views import (
    WalletBalanceView,
    WalletTransactionListView,
    AdminAddFundView,
)

urlpatterns = [
    path("wallet/", WalletBalanceView.as_view(), name="wallet-balance"),
    path("wallet/transactions/", WalletTransactionListView.as_view(), name="wallet-transactions"),
    path("wallet/add-fund/", AdminAddFundView.as_view(), name="wallet-add-fund"),
]
