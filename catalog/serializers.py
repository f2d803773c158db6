from decimal import Decimal, ROUND_HALF_UP

from rest_framework import serializers

from orders.models import Order
from .models import Category, Product, Review


class CategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ("id", "name", "parent", "position")


class ProductSerializer(serializers.ModelSerializer):
    category = CategorySerializer(read_only=True)
    unit_discount = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    rating = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = (
            "id", "name", "description", "category", "price", "tax", "discount", "discount_type",
            "unit_discount", "unit", "capacity", "total_stock", "variations", "is_featured",
            "rating", "created_at",
        )
        read_only_fields = fields

    def get_rating(self, obj):
        # [average, count] over active reviews, as annotated by catalog.services
        avg = getattr(obj, "average_rating", None)
        count = getattr(obj, "review_count", 0) or 0
        average = Decimal(str(avg)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP) if avg else Decimal("0")
        return [str(average), count]


class ReviewSerializer(serializers.ModelSerializer):
    customer = serializers.CharField(source="user.get_full_name", read_only=True)

    class Meta:
        model = Review
        fields = ("id", "customer", "rating", "comment", "created_at")
        read_only_fields = fields


class ReviewCreateSerializer(serializers.Serializer):
    rating = serializers.IntegerField(min_value=1, max_value=5)
    comment = serializers.CharField(required=False, allow_blank=True, default="")
    order = serializers.PrimaryKeyRelatedField(queryset=Order.objects.all(), required=False, allow_null=True)

    def validate_order(self, order):
        request = self.context.get("request")
        if order is not None and request is not None and order.user_id != request.user.pk:
            raise serializers.ValidationError("Not your order.")
        return order


class ReviewStatsSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    average = serializers.DecimalField(max_digits=3, decimal_places=1)
    rating_count = serializers.DictField(child=serializers.IntegerField())
