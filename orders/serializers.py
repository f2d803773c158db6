from decimal import Decimal

from rest_framework import serializers
from .models import Order, OrderDetail


class CartLineSerializer(serializers.Serializer):
    # Prices come from the catalog, never from the request.
    id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1)
    variant = serializers.CharField(required=False, allow_blank=True, default="")
    variations = serializers.ListField(required=False, default=list)


class PlaceOrderRequestSerializer(serializers.Serializer):
    cart = CartLineSerializer(many=True, allow_empty=False)
    payment_method = serializers.ChoiceField(choices=Order.PAYMENT_METHOD_CHOICES)
    coupon_code = serializers.CharField(max_length=32, required=False, allow_blank=True)
    delivery_charge = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0"), required=False, default=Decimal("0")
    )
    address = serializers.DictField(required=False, default=dict)
    order_note = serializers.CharField(required=False, allow_blank=True, default="")


class OrderDetailSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderDetail
        fields = (
            "id", "product", "seller_id", "product_details", "qty", "price", "tax",
            "discount", "variant", "variation", "delivery_status", "payment_status",
        )


class OrderSerializer(serializers.ModelSerializer):
    details = OrderDetailSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = (
            "id", "number", "order_amount", "payment_status", "order_status", "payment_method",
            "discount_amount", "coupon_code", "discount_type", "delivery_charge",
            "shipping_address", "order_note", "created_at", "details",
        )
        read_only_fields = fields
