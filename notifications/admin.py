from django.contrib import admin
from .models import EmailLog


@admin.register(EmailLog)
class EmailLogAdmin(admin.ModelAdmin):
    list_display = ("id", "to", "kind", "order_number", "status", "created_at")
    search_fields = ("to", "subject", "order_number")
    list_filter = ("kind", "status", "created_at")
    date_hierarchy = "created_at"
    raw_id_fields = ("order",)
    readonly_fields = ("to", "kind", "order", "order_number", "subject", "body", "status", "error", "created_at")

    def has_add_permission(self, request):
        return False
