from django.contrib import admin

from wallets.admin import LedgerAdmin
from .models import LoyaltyTransaction

@admin.register(LoyaltyTransaction)
class LoyaltyTransactionAdmin(LedgerAdmin):
    pass
