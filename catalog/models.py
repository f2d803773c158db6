from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.forms.models import model_to_dict

from wallets.models import q


class Category(models.Model):
    """
    Up to three levels: position 0 is a top-level category, 1 a sub
    category, 2 a sub-sub category.
    """
    name = models.CharField(max_length=100)
    parent = models.ForeignKey(
        "self", on_delete=models.CASCADE, null=True, blank=True, related_name="children"
    )
    position = models.PositiveSmallIntegerField(default=0)
    status = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("position", "name")
        verbose_name_plural = "categories"

    def __str__(self) -> str:
        return self.name

    def save(self, *args, **kwargs):
        self.position = self.parent.position + 1 if self.parent_id else 0
        super().save(*args, **kwargs)


class Product(models.Model):
    ADDED_BY_CHOICES = [
        ("admin", "Admin"),
        ("seller", "Seller"),
    ]
    DISCOUNT_TYPE_CHOICES = [
        ("percent", "Percent"),
        ("amount", "Amount"),
    ]

    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    category = models.ForeignKey(
        Category, on_delete=models.SET_NULL, null=True, blank=True, related_name="products"
    )
    tags = models.CharField(max_length=255, blank=True, help_text="Comma separated search tags")
    price = models.DecimalField(max_digits=12, decimal_places=2)
    # flat tax per unit
    tax = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    discount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    discount_type = models.CharField(max_length=10, choices=DISCOUNT_TYPE_CHOICES, default="percent")
    unit = models.CharField(max_length=20, blank=True)
    capacity = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    total_stock = models.PositiveIntegerField(default=0)
    variations = models.JSONField(default=list, blank=True)
    is_featured = models.BooleanField(default=False)

    added_by = models.CharField(max_length=10, choices=ADDED_BY_CHOICES, default="admin")
    seller = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name="products"
    )
    status = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("name",)
        indexes = [models.Index(fields=["status", "created_at"])]

    def __str__(self) -> str:
        return self.name

    @property
    def seller_id_for_order(self) -> str:
        """Seller recorded on an order line; "0" means the store itself."""
        if self.added_by == "seller" and self.seller_id:
            return str(self.seller_id)
        return "0"

    @property
    def unit_discount(self) -> Decimal:
        """Discount off one unit, never more than the price."""
        if self.discount_type == "percent":
            discount = q(Decimal(self.price) * Decimal(self.discount) / 100)
        else:
            discount = q(self.discount)
        return min(discount, q(self.price))

    @property
    def unit_tax(self) -> Decimal:
        return q(self.tax)

    def sellable_snapshot(self) -> dict:
        """JSON-safe copy of the attributes a customer bought."""
        data = model_to_dict(
            self,
            fields=[
                "name", "description", "price", "tax", "discount", "discount_type",
                "unit", "capacity", "variations", "added_by", "category",
            ],
        )
        data["id"] = self.pk
        for key in ("price", "tax", "discount", "capacity"):
            if data.get(key) is not None:
                data[key] = str(data[key])
        return data


class Review(models.Model):
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name="reviews")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="reviews")
    order = models.ForeignKey(
        "orders.Order", on_delete=models.SET_NULL, null=True, blank=True, related_name="reviews"
    )
    comment = models.TextField(blank=True)
    rating = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    # inactive reviews are hidden and left out of ratings
    status = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("-created_at",)
        indexes = [models.Index(fields=["product", "status"])]

    def __str__(self) -> str:
        return f"{self.product_id} by {self.user_id}: {self.rating}"
