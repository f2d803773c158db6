from django.db import models
from django.conf import settings

from wallets.models import LedgerEntry


class LoyaltyTransaction(LedgerEntry):

    class Type(models.TextChoices):
        ORDER_PLACE = "order_place", "Order place"
        POINT_TO_WALLET = "point_to_wallet", "Point to wallet"
        LOYALTY_POINT_TO_WALLET = "loyalty_point_to_wallet", "Loyalty point to wallet"

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="loyalty_transactions")
    transaction_type = models.CharField(max_length=32, choices=Type.choices)
    credit = models.IntegerField(default=0)
    debit = models.IntegerField(default=0)
    balance = models.IntegerField()

    class Meta:
        indexes = [
            models.Index(fields=["user", "created_at"]),
        ]
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"{self.user_id} +{self.credit} -{self.debit} {self.transaction_type} bal={self.balance}"
