# wallets/admin.py
from django.contrib import admin
from .models import WalletTransaction


class LedgerAdmin(admin.ModelAdmin):
    """
    Read-only admin for append-only ledgers. Balances are adjusted through
    the services (e.g. the add-fund endpoint), never by editing rows.
    """
    list_display = ("id", "user", "transaction_type", "credit", "debit", "balance", "reference", "created_at")
    list_filter = ("transaction_type", "created_at")
    search_fields = ("user__email", "transaction_id", "reference")
    date_hierarchy = "created_at"
    ordering = ("-created_at", "-id")

    def get_readonly_fields(self, request, obj=None):
        return [f.name for f in self.model._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(WalletTransaction)
class WalletTransactionAdmin(LedgerAdmin):
    pass
