from django.contrib import admin

from .models import PaymentIntent, ProviderLog


def _short(s, n=120):
    if s is None:
        return ""
    s = str(s)
    return s[:n] + ("..." if len(s) > n else "")


@admin.register(PaymentIntent)
class PaymentIntentAdmin(admin.ModelAdmin):
    list_display = ("reference", "user", "amount", "currency", "status", "paid_at", "created")
    list_filter = ("status", "currency", "created")
    search_fields = ("reference", "user__email")
    date_hierarchy = "created"
    readonly_fields = (
        "user", "amount", "currency", "reference", "status", "authorization_url", "access_code",
        "paid_at", "init_response", "verify_response", "webhook_events", "created", "updated",
    )


@admin.register(ProviderLog)
class ProviderLogAdmin(admin.ModelAdmin):
    list_display = ("client_reference", "endpoint", "status_code", "timestamp", "response_preview")
    list_filter = ("status_code", "timestamp")
    search_fields = ("client_reference", "endpoint", "status_code")
    date_hierarchy = "timestamp"
    ordering = ("-timestamp",)
    readonly_fields = (
        "user", "provider", "client_reference", "endpoint", "status_code",
        "request_payload", "response_payload", "timestamp",
    )

    @admin.display(description="Response (first 120 chars)")
    def response_preview(self, obj: ProviderLog):
        return _short(obj.response_payload, 120)
