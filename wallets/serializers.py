from decimal import Decimal

from rest_framework import serializers
from django.contrib.auth import get_user_model
from .models import WalletTransaction

User = get_user_model()


class WalletBalanceSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ('wallet_balance', 'loyalty_point')


class WalletTransactionSerializer(serializers.ModelSerializer):
    class Meta:
        model = WalletTransaction
        fields = ('transaction_id', 'transaction_type', 'credit', 'debit', 'balance', 'reference', 'created_at')


class AddFundSerializer(serializers.Serializer):
    user = serializers.PrimaryKeyRelatedField(queryset=User.objects.all())
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0.01"))
    reference = serializers.CharField(max_length=100, required=False, allow_blank=True)
