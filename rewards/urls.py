from django.urls import path
from .views import LoyaltyTransactionListView, PointToWalletView

urlpatterns = [
    path("transactions/", LoyaltyTransactionListView.as_view(), name="loyalty-transactions"),
    path("point-to-wallet/", PointToWalletView.as_view(), name="loyalty-point-to-wallet"),
]
