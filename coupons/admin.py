from django.contrib import admin
from .models import Coupon


@admin.register(Coupon)
class CouponAdmin(admin.ModelAdmin):
    list_display = ("code", "coupon_type", "discount_type", "discount", "max_discount", "min_purchase", "limit", "status")
    search_fields = ("code", "title", "customer__email")
    list_filter = ("coupon_type", "discount_type", "status")
