from django.db import models


class EmailLog(models.Model):
    """One outgoing customer email and how its delivery went."""

    class Kind(models.TextChoices):
        ORDER_CONFIRMATION = "order_confirmation", "Order confirmation"
        OTHER = "other", "Other"

    to = models.EmailField()
    kind = models.CharField(max_length=32, choices=Kind.choices, default=Kind.OTHER)
    # Order the email is about, when there is one
    order = models.ForeignKey(
        "orders.Order", on_delete=models.SET_NULL, null=True, blank=True, related_name="emails",
    )
    order_number = models.PositiveBigIntegerField(null=True, blank=True, db_index=True)

    subject = models.CharField(max_length=200)
    body = models.TextField(blank=True)
    status = models.CharField(max_length=16, choices=[("queued", "Queued"), ("sent", "Sent"), ("failed", "Failed")], default="queued")
    error = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [models.Index(fields=["to", "created_at"])]
        ordering = ("-created_at",)

    def __str__(self):
        if self.order_number:
            return f"{self.to} [{self.status}] order #{self.order_number}"
        return f"{self.to} [{self.status}] {self.subject}"
