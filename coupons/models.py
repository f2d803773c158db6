from django.conf import settings
from django.db import models


class Coupon(models.Model):

    class CouponType(models.TextChoices):
        DEFAULT = "default", "Default"
        FIRST_ORDER = "first_order", "First order"
        FREE_DELIVERY = "free_delivery", "Free delivery"
        CUSTOMER_WISE = "customer_wise", "Customer wise"

    class DiscountType(models.TextChoices):
        PERCENT = "percent", "Percent"
        AMOUNT = "amount", "Amount"

    title = models.CharField(max_length=100, blank=True)
    code = models.CharField(max_length=32, unique=True)
    coupon_type = models.CharField(max_length=20, choices=CouponType.choices, default=CouponType.DEFAULT)
    discount_type = models.CharField(max_length=10, choices=DiscountType.choices, default=DiscountType.AMOUNT)
    discount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    max_discount = models.DecimalField(
        max_digits=12, decimal_places=2, default=0,
        help_text="Cap for percent coupons",
    )
    min_purchase = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    limit = models.PositiveIntegerField(default=1, help_text="Redemptions allowed per customer")
    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, null=True, blank=True,
        related_name="personal_coupons",
        help_text="Required for customer_wise coupons",
    )
    status = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("-created_at",)

    def __str__(self) -> str:
        return f"{self.code} ({self.coupon_type})"

    def clean(self):
        from django.core.exceptions import ValidationError

        if self.coupon_type == self.CouponType.CUSTOMER_WISE and not self.customer_id:
            raise ValidationError({"customer": "customer_wise coupons need a customer."})
