# coupons/evaluator.py
from __future__ import annotations

import logging
from decimal import Decimal

from wallets.models import q
from .models import Coupon

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def _dec(value) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value or 0))


class CouponEvaluator:
    """
    Discount a coupon code is worth for one order.

    evaluate() never raises and never writes: an unknown, inactive or
    ineligible coupon is worth Decimal("0"). Redemptions are counted from
    the customer's orders carrying the code, so attaching coupon_code to the
    placed order is what records a use.
    """

    def evaluate(self, code, order_amount, customer_id, delivery_charge=0) -> Decimal:
        if not code:
            return ZERO
        coupon = Coupon.objects.filter(code=code, status=True).first()
        if coupon is None:
            logger.debug("No active coupon %r", code)
            return ZERO

        order_amount = _dec(order_amount)
        used = self.redemption_count(customer_id, code)
        below_minimum = _dec(coupon.min_purchase) > order_amount

        if coupon.coupon_type == Coupon.CouponType.DEFAULT:
            if used > coupon.limit or below_minimum:
                return ZERO
            return self._discount(coupon, order_amount)

        if coupon.coupon_type == Coupon.CouponType.FIRST_ORDER:
            if used != 0 or below_minimum:
                return ZERO
            return self._discount(coupon, order_amount)

        if coupon.coupon_type == Coupon.CouponType.FREE_DELIVERY:
            if used > coupon.limit or below_minimum:
                return ZERO
            return _dec(delivery_charge)

        if coupon.coupon_type == Coupon.CouponType.CUSTOMER_WISE:
            if used > coupon.limit or below_minimum:
                return ZERO
            if str(coupon.customer_id) != str(customer_id):
                return ZERO
            return self._discount(coupon, order_amount)

        logger.warning("Coupon %s has unrecognised type %r", coupon.code, coupon.coupon_type)
        return ZERO

    @staticmethod
    def redemption_count(customer_id, code) -> int:
        from orders.models import Order

        return Order.objects.filter(user_id=customer_id, coupon_code=code).count()

    @staticmethod
    def _discount(coupon: Coupon, order_amount: Decimal) -> Decimal:
        if coupon.discount_type == Coupon.DiscountType.PERCENT:
            discount = order_amount / 100 * _dec(coupon.discount)
            return q(min(discount, _dec(coupon.max_discount)))
        return _dec(coupon.discount)
