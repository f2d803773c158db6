# business/config.py
from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

from django.conf import settings

logger = logging.getLogger(__name__)

TRUTHY = {"1", "true", "yes", "on"}
FALSY = {"0", "false", "no", "off", ""}


def _as_bool(raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    s = str(raw).strip().lower()
    if s in TRUTHY:
        return True
    if s in FALSY:
        return False
    raise ValueError(f"not a boolean: {raw!r}")


def _as_decimal(raw: Any) -> Decimal:
    try:
        return Decimal(str(raw).strip())
    except InvalidOperation:
        raise ValueError(f"not a number: {raw!r}")


def _as_int(raw: Any) -> int:
    return int(_as_decimal(raw))


_CASTS = {"bool": _as_bool, "Decimal": _as_decimal, "int": _as_int}


@dataclass(frozen=True)
class BusinessConfig:
    """
    Every business setting the ledger and order services read.

    Build one with ``BusinessConfig.load()`` (defaults, then
    ``settings.BUSINESS_SETTINGS``, then BusinessSetting rows) and pass it to
    the services at construction.
    """

    wallet_status: bool = False
    loyalty_point_status: bool = False
    # points needed for one unit of wallet currency
    loyalty_point_exchange_rate: Decimal = Decimal("1")
    loyalty_point_percent_on_item_purchase: Decimal = Decimal("0")
    loyalty_point_minimum_point: int = 0
    ref_earning_status: bool = False
    # flat wallet reward paid to a referrer
    ref_earning_exchange_rate: Decimal = Decimal("0")
    order_confirmation_email_status: bool = False

    @classmethod
    def keys(cls) -> list[str]:
        return [f.name for f in dataclasses.fields(cls)]

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "BusinessConfig":
        kwargs = {}
        for f in dataclasses.fields(cls):
            if f.name not in values or values[f.name] is None:
                continue
            cast = _CASTS[f.type if isinstance(f.type, str) else f.type.__name__]
            try:
                kwargs[f.name] = cast(values[f.name])
            except ValueError:
                logger.warning("Ignoring invalid business setting %s=%r", f.name, values[f.name])
        return cls(**kwargs)

    @classmethod
    def load(cls) -> "BusinessConfig":
        from .models import BusinessSetting

        values: dict[str, Any] = dict(getattr(settings, "BUSINESS_SETTINGS", {}) or {})
        for key, value in BusinessSetting.objects.filter(key__in=cls.keys()).values_list("key", "value"):
            values[key] = value
        return cls.from_mapping(values)

    # ----------------------------- derived ----------------------------- #

    @property
    def points_per_currency_unit(self) -> Decimal:
        """Exchange rate, with unset or non-positive rates read as 1."""
        rate = self.loyalty_point_exchange_rate
        return rate if rate > 0 else Decimal("1")
