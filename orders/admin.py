from django.contrib import admin
from .models import Order, OrderDetail


class OrderDetailInline(admin.TabularInline):
    model = OrderDetail
    extra = 0
    readonly_fields = ("product", "seller_id", "product_details", "qty", "price", "tax", "discount", "variant", "variation")


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ("number", "user", "order_amount", "payment_method", "payment_status", "order_status", "coupon_code", "created_at")
    search_fields = ("number", "user__email", "coupon_code")
    list_filter = ("order_status", "payment_status", "payment_method", "created_at")
    date_hierarchy = "created_at"
    readonly_fields = ("number", "order_amount", "discount_amount", "coupon_code", "discount_type")
    inlines = [OrderDetailInline]
