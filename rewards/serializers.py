from rest_framework import serializers
from .models import LoyaltyTransaction


class LoyaltyTransactionSerializer(serializers.ModelSerializer):
    class Meta:
        model = LoyaltyTransaction
        fields = ('transaction_id', 'transaction_type', 'credit', 'debit', 'balance', 'reference', 'created_at')


class PointConversionSerializer(serializers.Serializer):
    point = serializers.IntegerField(min_value=1)
