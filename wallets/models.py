# wallets/models.py
from __future__ import annotations

import uuid
from decimal import Decimal, ROUND_DOWN

from django.conf import settings
from django.db import models


TWO_PLACES = Decimal("0.01")


def q(amount: Decimal | int | float | str) -> Decimal:
    """
    Quantize any numeric input to a 2dp Decimal.
    """
    if isinstance(amount, Decimal):
        d = amount
    else:
        d = Decimal(str(amount))
    # Use ROUND_DOWN to avoid accidental over-spend from rounding up.
    return d.quantize(TWO_PLACES, rounding=ROUND_DOWN)


def new_transaction_id() -> str:
    return str(uuid.uuid4())


class LedgerEntry(models.Model):
    """
    Append-only ledger row. Exactly one of credit/debit is non-zero and
    balance is the owner's balance right after this row was written.
    """
    transaction_id = models.CharField(max_length=36, unique=True, default=new_transaction_id, editable=False)
    reference = models.CharField(max_length=100, blank=True, null=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        if self.pk is not None and not self._state.adding:
            raise ValueError("LEDGER_ROWS_ARE_IMMUTABLE")
        super().save(*args, **kwargs)

    @property
    def amount(self):
        return self.credit - self.debit


class WalletTransaction(LedgerEntry):

    class Type(models.TextChoices):
        ADD_FUND_BY_ADMIN = "add_fund_by_admin", "Add fund by admin"
        ADD_FUND = "add_fund", "Add fund"
        LOYALTY_POINT = "loyalty_point", "Loyalty point"
        REFERRER = "referrer", "Referrer"
        ORDER_PLACE = "order_place", "Order place"
        LOYALTY_POINT_TO_WALLET = "loyalty_point_to_wallet", "Loyalty point to wallet"

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="wallet_transactions"
    )
    transaction_type = models.CharField(max_length=32, choices=Type.choices)
    credit = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    debit = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    balance = models.DecimalField(max_digits=12, decimal_places=2)

    class Meta:
        indexes = [
            models.Index(fields=["user", "created_at"]),
        ]
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:
        return (
            f"WalletTxn<{self.transaction_type} +{self.credit} -{self.debit} "
            f"u={self.user_id} bal={self.balance} ref={self.reference or '-'}>"
        )
