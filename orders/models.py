from __future__ import annotations

from django.conf import settings
from django.db import models


PAYMENT_STATUS_CHOICES = [
    ("unpaid", "Unpaid"),
    ("paid", "Paid"),
]

DELIVERY_STATUS_CHOICES = [
    ("pending", "Pending"),
    ("confirmed", "Confirmed"),
    ("processing", "Processing"),
    ("out_for_delivery", "Out for delivery"),
    ("delivered", "Delivered"),
    ("canceled", "Canceled"),
]


class Order(models.Model):
    PAYMENT_METHOD_CHOICES = [
        ("cash_on_delivery", "Cash on delivery"),
        ("digital_payment", "Digital payment"),
        ("wallet", "Wallet"),
    ]

    # Human-facing order number, ORDER_NUMBER_OFFSET + pk
    number = models.PositiveBigIntegerField(unique=True, null=True, blank=True, editable=False)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="orders")

    order_amount = models.DecimalField(max_digits=12, decimal_places=2)
    payment_status = models.CharField(max_length=10, choices=PAYMENT_STATUS_CHOICES, default="unpaid")
    order_status = models.CharField(max_length=20, choices=DELIVERY_STATUS_CHOICES, default="pending")
    payment_method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES, default="cash_on_delivery")
    transaction_reference = models.CharField(max_length=100, blank=True, null=True)

    discount_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    coupon_code = models.CharField(max_length=32, blank=True, null=True, db_index=True)
    discount_type = models.CharField(max_length=20, blank=True, null=True)

    delivery_charge = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    shipping_address = models.JSONField(default=dict, blank=True)
    order_note = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("-created_at",)
        indexes = [
            models.Index(fields=["user", "coupon_code"]),
            models.Index(fields=["order_status", "created_at"]),
        ]

    def __str__(self):
        return f"Order #{self.number} | {self.user_id} | {self.order_amount} | {self.order_status}"


class OrderDetail(models.Model):
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="details")
    product = models.ForeignKey("catalog.Product", on_delete=models.SET_NULL, null=True, related_name="order_details")
    seller_id = models.CharField(max_length=36, default="0")

    # Copy of the product as it was sold
    product_details = models.JSONField(default=dict)

    qty = models.PositiveIntegerField()
    price = models.DecimalField(max_digits=12, decimal_places=2)
    tax = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    discount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    discount_type = models.CharField(max_length=30, default="discount_on_product")
    variant = models.CharField(max_length=100, blank=True)
    variation = models.JSONField(default=list, blank=True)

    delivery_status = models.CharField(max_length=20, choices=DELIVERY_STATUS_CHOICES, default="pending")
    payment_status = models.CharField(max_length=10, choices=PAYMENT_STATUS_CHOICES, default="unpaid")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("id",)

    def __str__(self):
        return f"Line<{self.order_id}> {self.product_id} x{self.qty}"
