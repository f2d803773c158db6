# payments/serializers.py
from decimal import Decimal
from rest_framework import serializers

MIN_TOP_UP = Decimal("100")


class PaymentInitRequestSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    metadata = serializers.DictField(required=False)

    def validate_amount(self, v: Decimal):
        if v < MIN_TOP_UP:
            raise serializers.ValidationError(f"Minimum top-up is {MIN_TOP_UP}.")
        return v
