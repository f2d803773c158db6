from decimal import Decimal

from django.contrib.auth import get_user_model

from business.config import BusinessConfig
from business.models import BusinessSetting
from catalog.models import Product

User = get_user_model()


def make_user(email="customer@example.com", **extra):
    return User.objects.create_user(email=email, password="Str0ng-pass-123", **extra)


def make_product(name="Tomatoes", price="10.00", **extra):
    return Product.objects.create(name=name, price=Decimal(price), **extra)


def enabled_config(**overrides):
    values = dict(
        wallet_status=True,
        loyalty_point_status=True,
        loyalty_point_exchange_rate=Decimal("10"),
        loyalty_point_percent_on_item_purchase=Decimal("5"),
        ref_earning_status=True,
        ref_earning_exchange_rate=Decimal("50"),
    )
    values.update(overrides)
    return BusinessConfig(**values)


def store_settings(**values):
    for key, value in values.items():
        BusinessSetting.objects.update_or_create(key=key, defaults={"value": str(value)})
