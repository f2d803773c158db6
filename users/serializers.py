from rest_framework import serializers
from django.contrib.auth import get_user_model

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True)
    referral_code = serializers.CharField(read_only=True)
    referred_by_code = serializers.CharField(write_only=True, required=False, allow_blank=True)

    class Meta:
        model = User
        fields = ("id", "email", "password", "first_name", "last_name", "phone",
                  "referral_code", "referred_by_code", "date_joined")
        read_only_fields = ("id", "date_joined")
        extra_kwargs = {
            "email": {"required": True},
        }

    def validate_referred_by_code(self, value):
        if not value:
            return None
        referrer = User.objects.filter(referral_code=value.strip().upper()).first()
        if referrer is None:
            raise serializers.ValidationError("Unknown referral code.")
        return referrer

    def create(self, validated_data):
        referrer = validated_data.pop("referred_by_code", None)
        # Ensure password is hashed using create_user
        return User.objects.create_user(referred_by=referrer, **validated_data)


class DashboardSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ("id", "email", "first_name", "last_name", "referral_code",
                  "wallet_balance", "loyalty_point", "date_joined")
        read_only_fields = fields


# ---- Schemas for Swagger docs ----

class LoginRequestSchema(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField()


class TokenPairSchema(serializers.Serializer):
    refresh = serializers.CharField()
    access = serializers.CharField()
