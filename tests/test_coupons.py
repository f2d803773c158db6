"""
Tests for CouponEvaluator and the coupon apply endpoint.
"""

from decimal import Decimal

from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APIClient

from coupons.evaluator import CouponEvaluator
from coupons.models import Coupon
from orders.models import Order
from tests.helpers import make_user


def redeem(user, code, times=1):
    for _ in range(times):
        Order.objects.create(user=user, order_amount=Decimal("10.00"), coupon_code=code)


class CouponEvaluatorTests(TestCase):

    def setUp(self):
        self.customer = make_user()
        self.evaluator = CouponEvaluator()
        Coupon.objects.create(
            code="SAVE10",
            coupon_type=Coupon.CouponType.DEFAULT,
            discount_type=Coupon.DiscountType.PERCENT,
            discount=Decimal("10"),
            max_discount=Decimal("8"),
            min_purchase=Decimal("50"),
            limit=3,
        )

    def test_percent_discount_capped_at_max(self):
        redeem(self.customer, "SAVE10")
        self.assertEqual(self.evaluator.evaluate("SAVE10", 100, self.customer.pk, 5), Decimal("8"))

    def test_percent_discount_below_cap(self):
        self.assertEqual(self.evaluator.evaluate("SAVE10", 60, self.customer.pk), Decimal("6.00"))

    def test_below_minimum_purchase(self):
        redeem(self.customer, "SAVE10")
        self.assertEqual(self.evaluator.evaluate("SAVE10", 40, self.customer.pk, 5), Decimal("0"))

    def test_limit_boundary(self):
        redeem(self.customer, "SAVE10", times=3)
        self.assertEqual(self.evaluator.evaluate("SAVE10", 100, self.customer.pk), Decimal("8"))
        redeem(self.customer, "SAVE10")
        self.assertEqual(self.evaluator.evaluate("SAVE10", 100, self.customer.pk), Decimal("0"))

    def test_other_customers_redemptions_do_not_count(self):
        other = make_user(email="other@example.com")
        redeem(other, "SAVE10", times=5)
        self.assertEqual(self.evaluator.evaluate("SAVE10", 100, self.customer.pk), Decimal("8"))

    def test_flat_amount_discount(self):
        Coupon.objects.create(code="FLAT5", discount_type=Coupon.DiscountType.AMOUNT, discount=Decimal("5"))
        self.assertEqual(self.evaluator.evaluate("FLAT5", 20, self.customer.pk), Decimal("5"))

    def test_first_order_after_a_redemption(self):
        Coupon.objects.create(
            code="WELCOME",
            coupon_type=Coupon.CouponType.FIRST_ORDER,
            discount_type=Coupon.DiscountType.AMOUNT,
            discount=Decimal("15"),
        )
        self.assertEqual(self.evaluator.evaluate("WELCOME", 500, self.customer.pk), Decimal("15"))
        redeem(self.customer, "WELCOME")
        for amount in (10, 500, 10000):
            self.assertEqual(self.evaluator.evaluate("WELCOME", amount, self.customer.pk), Decimal("0"))

    def test_free_delivery_returns_delivery_charge(self):
        Coupon.objects.create(
            code="FREESHIP",
            coupon_type=Coupon.CouponType.FREE_DELIVERY,
            discount=Decimal("99"),
            min_purchase=Decimal("20"),
        )
        for amount in (20, 75, 5000):
            self.assertEqual(
                self.evaluator.evaluate("FREESHIP", amount, self.customer.pk, Decimal("7.50")),
                Decimal("7.50"),
            )

    def test_customer_wise_only_for_its_customer(self):
        Coupon.objects.create(
            code="JUSTYOU",
            coupon_type=Coupon.CouponType.CUSTOMER_WISE,
            discount_type=Coupon.DiscountType.AMOUNT,
            discount=Decimal("12"),
            customer=self.customer,
        )
        other = make_user(email="other@example.com")
        self.assertEqual(self.evaluator.evaluate("JUSTYOU", 50, self.customer.pk), Decimal("12"))
        self.assertEqual(self.evaluator.evaluate("JUSTYOU", 50, other.pk), Decimal("0"))

    def test_inactive_and_unknown_codes(self):
        Coupon.objects.create(code="OLD", discount=Decimal("5"), status=False)
        self.assertEqual(self.evaluator.evaluate("OLD", 100, self.customer.pk), Decimal("0"))
        self.assertEqual(self.evaluator.evaluate("NOPE", 100, self.customer.pk), Decimal("0"))
        self.assertEqual(self.evaluator.evaluate("", 100, self.customer.pk), Decimal("0"))

    def test_unrecognised_type_is_worth_nothing(self):
        coupon = Coupon.objects.create(code="ODD", discount=Decimal("5"))
        Coupon.objects.filter(pk=coupon.pk).update(coupon_type="mystery")
        with self.assertLogs("coupons.evaluator", level="WARNING"):
            self.assertEqual(self.evaluator.evaluate("ODD", 100, self.customer.pk), Decimal("0"))

    def test_evaluate_writes_nothing(self):
        self.evaluator.evaluate("SAVE10", 100, self.customer.pk)
        self.assertFalse(Order.objects.exists())


class CouponApiTests(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.customer = make_user()
        self.client.force_authenticate(self.customer)
        Coupon.objects.create(code="FLAT5", discount=Decimal("5"), min_purchase=Decimal("10"))

    def test_apply(self):
        resp = self.client.get(reverse("coupon-apply"), {"code": "FLAT5", "amount": "30"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data["discount"], "5.00")

    def test_apply_ineligible(self):
        resp = self.client.get(reverse("coupon-apply"), {"code": "FLAT5", "amount": "3"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data["discount"], "0.00")

    def test_amount_required(self):
        resp = self.client.get(reverse("coupon-apply"), {"code": "FLAT5"})
        self.assertEqual(resp.status_code, 400)

    def test_requires_authentication(self):
        resp = APIClient().get(reverse("coupon-apply"), {"code": "FLAT5", "amount": "30"})
        # SessionAuthentication is listed first, so DRF answers 403 rather than 401
        self.assertEqual(resp.status_code, 403)
