# payments/models.py
from django.conf import settings
from django.db import models


def _default_currency():
    return settings.PAYSTACK_CURRENCY


class PaymentIntent(models.Model):
    """A wallet top-up attempt through Paystack."""

    STATUS = [
        ("initialized", "Initialized"),
        ("pending", "Pending"),
        ("success", "Success"),
        ("failed", "Failed"),
        ("abandoned", "Abandoned"),
    ]

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="payment_intents")
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    currency = models.CharField(max_length=8, default=_default_currency)
    reference = models.CharField(max_length=64, unique=True, db_index=True)
    status = models.CharField(max_length=16, choices=STATUS, default="initialized")

    # Paystack fields
    authorization_url = models.URLField(blank=True, null=True)
    access_code = models.CharField(max_length=64, blank=True, null=True)
    paid_at = models.DateTimeField(blank=True, null=True)

    # Raw provider payloads for audit
    init_response = models.JSONField(blank=True, null=True)
    verify_response = models.JSONField(blank=True, null=True)
    webhook_events = models.JSONField(blank=True, null=True)

    created = models.DateTimeField(auto_now_add=True)
    updated = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("-created",)

    def __str__(self):
        return f"{self.reference} | {self.user_id} | {self.amount} {self.currency} | {self.status}"

    def mark_success(self, when=None):
        self.status = "success"
        if when and not self.paid_at:
            self.paid_at = when
        self.save(update_fields=["status", "paid_at", "updated"])


class ProviderLog(models.Model):
    """Paystack request/response log."""

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True)
    provider = models.CharField(max_length=32, default="paystack")
    client_reference = models.CharField(max_length=100, blank=True, null=True, db_index=True)
    endpoint = models.CharField(max_length=128, blank=True, null=True)

    request_payload = models.JSONField(default=dict)
    response_payload = models.JSONField(default=dict)
    status_code = models.CharField(max_length=10)

    timestamp = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("-timestamp",)
        indexes = [
            models.Index(fields=["status_code", "timestamp"]),
        ]

    def __str__(self):
        return f"{self.provider} | {self.client_reference or '-'} | {self.status_code}"
