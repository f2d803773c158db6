from django.contrib import admin
from .models import Category, Product, Review


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "parent", "position", "status")
    list_filter = ("position", "status")
    search_fields = ("name",)
    readonly_fields = ("position",)


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "category", "price", "tax", "discount", "discount_type", "total_stock", "added_by", "status")
    search_fields = ("name", "tags")
    list_filter = ("status", "is_featured", "added_by", "discount_type", "category")


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ("id", "product", "user", "rating", "status", "created_at")
    list_filter = ("status", "rating")
    search_fields = ("product__name", "user__email", "comment")
    list_editable = ("status",)
    raw_id_fields = ("product", "user", "order")
