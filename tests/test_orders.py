"""
Tests for order placement, wallet payment and tracking.
"""

from decimal import Decimal
from unittest.mock import patch

from django.core import mail
from django.db import DatabaseError
from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APIClient

from business.config import BusinessConfig
from coupons.models import Coupon
from notifications.models import EmailLog
from orders.cart import cart_grand_total, line_total, price_cart
from orders.models import Order, OrderDetail
from orders.placement import OrderPlacementService, track_order
from rewards.models import LoyaltyTransaction
from wallets.models import WalletTransaction
from wallets.services import WalletService
from tests.helpers import enabled_config, make_product, make_user, store_settings


class CartTotalTests(TestCase):

    def test_line_total(self):
        line = {"id": 1, "quantity": 3, "price": "10.00", "discount": "1.50", "tax": "0.50"}
        self.assertEqual(line_total(line), Decimal("27.00"))

    def test_grand_total(self):
        cart = [
            {"id": 1, "quantity": 2, "price": "4.99"},
            {"id": 2, "quantity": 1, "price": "20.00", "discount": "2.00", "tax": "1.00"},
        ]
        self.assertEqual(cart_grand_total(cart), Decimal("28.98"))
        self.assertEqual(cart_grand_total([]), Decimal("0"))

    def test_price_cart_reads_the_catalog(self):
        bread = make_product("Bread", "8.00", tax=Decimal("0.40"), discount=Decimal("25"), discount_type="percent")
        rice = make_product("Rice", "30.00", discount=Decimal("50"), discount_type="amount")

        cart = price_cart([
            {"id": bread.pk, "quantity": 2, "price": "0.01", "discount": "8.00"},
            {"id": rice.pk, "quantity": 1, "variant": "5kg"},
        ])

        self.assertEqual(
            [(line["price"], line["tax"], line["discount"]) for line in cart],
            [(Decimal("8.00"), Decimal("0.40"), Decimal("2.00")), (Decimal("30.00"), Decimal("0.00"), Decimal("30.00"))],
        )
        self.assertEqual(cart[1]["variant"], "5kg")
        self.assertEqual(cart_grand_total(cart), Decimal("12.80"))

    def test_price_cart_rejects_unsellable_products(self):
        hidden = make_product("Hidden", "5.00", status=False)
        with self.assertRaisesMessage(ValueError, "UNKNOWN_PRODUCT"):
            price_cart([{"id": hidden.pk, "quantity": 1}])
        with self.assertRaisesMessage(ValueError, "UNKNOWN_PRODUCT"):
            price_cart([{"id": 987654, "quantity": 1}])


class PlaceOrderTests(TestCase):

    def setUp(self):
        self.customer = make_user()
        self.product = make_product("Milk", "4.00")
        self.service = OrderPlacementService(BusinessConfig())
        self.address = {"contact_person_name": "Ada", "address": "1 Market Road"}

    def place(self, cart, **kwargs):
        params = dict(
            customer_id=self.customer.pk,
            email=self.customer.email,
            customer_info=self.address,
            cart=cart,
            payment_method="cash_on_delivery",
            discount=kwargs.pop("discount", 0),
        )
        params.update(kwargs)
        return self.service.place_order(**params)

    def test_unresolved_line_is_skipped(self):
        cart = [
            {"id": self.product.pk, "quantity": 2, "price": "4.00"},
            {"id": 987654, "quantity": 1, "price": "10.00"},
        ]
        with self.assertLogs("orders.placement", level="WARNING"):
            pk = self.place(cart, discount=Decimal("3.00"))

        order = Order.objects.get(pk=pk)
        self.assertEqual(order.details.count(), 1)
        # amount is taken from the whole cart: 8 + 10 - 3
        self.assertEqual(order.order_amount, Decimal("15.00"))
        self.assertEqual(order.discount_type, "coupon_discount")

    def test_order_fields_and_line_snapshot(self):
        seller = make_user(email="seller@example.com")
        honey = make_product("Honey", "12.00", added_by="seller", seller=seller)
        cart = [{"id": honey.pk, "quantity": 2, "price": "12.00", "tax": "0.60", "discount": "1.00"}]

        pk = self.place(cart, coupon_code="", delivery_charge="5", order_note="Ring twice")

        order = Order.objects.get(pk=pk)
        self.assertEqual(order.number, 100000 + order.pk)
        self.assertEqual(order.order_amount, Decimal("23.20"))
        self.assertEqual((order.payment_status, order.order_status), ("unpaid", "pending"))
        self.assertIsNone(order.coupon_code)
        self.assertIsNone(order.discount_type)
        self.assertEqual(order.delivery_charge, Decimal("5.00"))
        self.assertEqual(order.shipping_address, self.address)
        self.assertEqual(order.order_note, "Ring twice")

        line = order.details.get()
        self.assertEqual(line.seller_id, str(seller.pk))
        self.assertEqual(line.product_details["name"], "Honey")
        self.assertEqual(line.product_details["price"], "12.00")
        self.assertEqual(line.tax, Decimal("1.20"))
        self.assertEqual(line.discount, Decimal("2.00"))
        self.assertEqual((line.delivery_status, line.payment_status), ("pending", "unpaid"))

    def test_admin_product_has_store_seller(self):
        pk = self.place([{"id": self.product.pk, "quantity": 1, "price": "4.00"}])
        self.assertEqual(OrderDetail.objects.get(order_id=pk).seller_id, "0")

    def test_order_numbers_are_distinct(self):
        line = [{"id": self.product.pk, "quantity": 1, "price": "4.00"}]
        numbers = {Order.objects.get(pk=self.place(line)).number for _ in range(3)}
        self.assertEqual(len(numbers), 3)

    def test_failed_line_write_rolls_back_order(self):
        cart = [{"id": self.product.pk, "quantity": 1, "price": "4.00"}]
        with patch.object(OrderDetail.objects, "create", side_effect=DatabaseError("disk full")):
            pk = self.place(cart)

        self.assertIsNone(pk)
        self.assertFalse(Order.objects.exists())

    def test_rolled_back_order_sends_nothing(self):
        service = OrderPlacementService(enabled_config(order_confirmation_email_status=True))
        cart = [{"id": self.product.pk, "quantity": 1, "price": "400.00"}]
        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            with patch.object(OrderDetail.objects, "create", side_effect=DatabaseError("disk full")):
                service.place_order(self.customer.pk, self.customer.email, {}, cart, "cash_on_delivery", 0)

        self.assertEqual(callbacks, [])
        self.assertEqual(len(mail.outbox), 0)
        self.assertFalse(LoyaltyTransaction.objects.exists())

    def test_points_and_email_after_commit(self):
        service = OrderPlacementService(enabled_config(order_confirmation_email_status=True))
        cart = [{"id": self.product.pk, "quantity": 50, "price": "4.00"}]

        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            pk = service.place_order(self.customer.pk, self.customer.email, {}, cart, "cash_on_delivery", 0)
            # nothing happens before the commit
            self.assertFalse(LoyaltyTransaction.objects.exists())

        self.assertEqual(len(callbacks), 1)
        order = Order.objects.get(pk=pk)
        points = LoyaltyTransaction.objects.get(user=self.customer)
        self.assertEqual(points.transaction_type, "order_place")
        self.assertEqual(points.credit, 10)  # 5% of 200
        self.assertEqual(points.reference, str(order.number))

        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].subject, f"Order #{order.number} placed")
        self.assertEqual(mail.outbox[0].to, [self.customer.email])
        self.assertIn("50 x Milk @ 4.00", mail.outbox[0].body)

        log = EmailLog.objects.get()
        self.assertEqual(log.kind, EmailLog.Kind.ORDER_CONFIRMATION)
        self.assertEqual(log.order, order)
        self.assertEqual(log.order_number, order.number)
        self.assertEqual(log.status, "sent")
        self.assertEqual(list(order.emails.all()), [log])

    def test_email_toggle_off(self):
        service = OrderPlacementService(enabled_config())
        cart = [{"id": self.product.pk, "quantity": 1, "price": "4.00"}]
        with self.captureOnCommitCallbacks(execute=True):
            service.place_order(self.customer.pk, self.customer.email, {}, cart, "cash_on_delivery", 0)
        self.assertEqual(len(mail.outbox), 0)

    def test_failing_email_does_not_fail_order(self):
        service = OrderPlacementService(enabled_config(order_confirmation_email_status=True))
        cart = [{"id": self.product.pk, "quantity": 1, "price": "4.00"}]
        with patch("notifications.utils.send_mail", side_effect=OSError("smtp down")):
            with self.captureOnCommitCallbacks(execute=True):
                pk = service.place_order(self.customer.pk, self.customer.email, {}, cart, "cash_on_delivery", 0)

        self.assertTrue(Order.objects.filter(pk=pk).exists())
        self.assertEqual(EmailLog.objects.get().status, "failed")

    def test_track_order(self):
        pk = self.place([{"id": self.product.pk, "quantity": 1, "price": "4.00"}])
        order = track_order(pk)
        self.assertEqual(order.pk, pk)
        self.assertEqual(len(order.details.all()), 1)
        self.assertIsNone(track_order(424242))


class PayWithWalletTests(TestCase):

    def setUp(self):
        self.customer = make_user()
        self.product = make_product("Rice", "30.00")
        self.config = enabled_config()
        self.service = OrderPlacementService(self.config)
        cart = [{"id": self.product.pk, "quantity": 1, "price": "30.00"}]
        self.order_pk = self.service.place_order(self.customer.pk, self.customer.email, {}, cart, "wallet", 0)

    def fund(self, amount):
        WalletService(self.config).credit_or_debit(self.customer.pk, amount, "add_fund_by_admin")

    def test_pays_and_marks_paid(self):
        self.fund(Decimal("50"))

        self.assertIs(self.service.pay_with_wallet(self.order_pk), True)

        order = Order.objects.get(pk=self.order_pk)
        self.assertEqual((order.payment_status, order.payment_method), ("paid", "wallet"))
        self.assertEqual(order.details.get().payment_status, "paid")
        debit = WalletTransaction.objects.get(transaction_type="order_place")
        self.assertEqual((debit.debit, debit.balance), (Decimal("30.00"), Decimal("20.00")))
        self.assertEqual(debit.reference, str(order.number))
        self.customer.refresh_from_db()
        self.assertEqual(self.customer.wallet_balance, Decimal("20.00"))

    def test_insufficient_funds(self):
        self.fund(Decimal("10"))
        with self.assertRaisesMessage(ValueError, "INSUFFICIENT_FUNDS"):
            self.service.pay_with_wallet(self.order_pk)

        self.assertEqual(Order.objects.get(pk=self.order_pk).payment_status, "unpaid")
        self.assertFalse(WalletTransaction.objects.filter(transaction_type="order_place").exists())

    def test_already_paid(self):
        self.fund(Decimal("100"))
        self.assertIs(self.service.pay_with_wallet(self.order_pk), True)
        self.assertIs(self.service.pay_with_wallet(self.order_pk), False)
        self.assertEqual(WalletTransaction.objects.filter(transaction_type="order_place").count(), 1)

    def test_wallet_disabled(self):
        self.fund(Decimal("100"))
        service = OrderPlacementService(BusinessConfig())
        self.assertIs(service.pay_with_wallet(self.order_pk), False)

    def test_missing_order(self):
        self.assertIs(self.service.pay_with_wallet(999999), False)


class OrderApiTests(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.customer = make_user()
        self.client.force_authenticate(self.customer)
        self.product = make_product("Eggs", "20.00")
        self.cart = [{"id": self.product.pk, "quantity": 2, "price": "20.00"}]

    def test_place_with_coupon(self):
        Coupon.objects.create(code="FLAT5", discount=Decimal("5"))

        resp = self.client.post(
            reverse("order-place"),
            {"cart": self.cart, "payment_method": "cash_on_delivery", "coupon_code": "FLAT5"},
            format="json",
        )

        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.data["order_amount"], "35.00")
        self.assertEqual(resp.data["coupon_code"], "FLAT5")
        self.assertEqual(len(resp.data["details"]), 1)

    def test_ineligible_coupon_not_recorded(self):
        Coupon.objects.create(code="BIG", discount=Decimal("5"), min_purchase=Decimal("1000"))

        resp = self.client.post(
            reverse("order-place"),
            {"cart": self.cart, "payment_method": "cash_on_delivery", "coupon_code": "BIG"},
            format="json",
        )

        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.data["order_amount"], "40.00")
        self.assertIsNone(resp.data["coupon_code"])

    def test_wallet_order_without_funds(self):
        store_settings(wallet_status=1)
        resp = self.client.post(
            reverse("order-place"), {"cart": self.cart, "payment_method": "wallet"}, format="json",
        )
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.data["payment_status"], "unpaid")
        self.assertEqual(resp.data["payment_error"], "INSUFFICIENT_FUNDS")

    def test_empty_cart_rejected(self):
        resp = self.client.post(
            reverse("order-place"), {"cart": [], "payment_method": "cash_on_delivery"}, format="json",
        )
        self.assertEqual(resp.status_code, 400)

    def test_list_and_track(self):
        self.client.post(
            reverse("order-place"), {"cart": self.cart, "payment_method": "cash_on_delivery"}, format="json",
        )
        listed = self.client.get(reverse("order-list"))
        self.assertEqual(listed.data["count"], 1)
        pk = listed.data["results"][0]["id"]

        tracked = self.client.get(reverse("order-track", args=[pk]))
        self.assertEqual(tracked.status_code, 200)
        self.assertEqual(tracked.data["number"], 100000 + pk)

    def test_cannot_track_someone_elses_order(self):
        self.client.post(
            reverse("order-place"), {"cart": self.cart, "payment_method": "cash_on_delivery"}, format="json",
        )
        pk = Order.objects.get().pk

        other = APIClient()
        other.force_authenticate(make_user(email="nosy@example.com"))
        self.assertEqual(other.get(reverse("order-track", args=[pk])).status_code, 404)

    def test_client_price_is_ignored(self):
        flour = make_product("Flour", "10.00")
        cart = [{"id": flour.pk, "quantity": 5, "price": "0.01", "discount": "9.99"}]

        resp = self.client.post(
            reverse("order-place"), {"cart": cart, "payment_method": "cash_on_delivery"}, format="json",
        )

        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.data["order_amount"], "50.00")
        line = OrderDetail.objects.get(order_id=resp.data["id"])
        self.assertEqual(line.price, Decimal("10.00"))
        self.assertEqual(line.discount, Decimal("0.00"))

    def test_catalog_discount_and_tax_applied(self):
        oil = make_product("Oil", "40.00", tax=Decimal("1.00"), discount=Decimal("10"), discount_type="percent")
        cart = [{"id": oil.pk, "quantity": 2}]

        resp = self.client.post(
            reverse("order-place"), {"cart": cart, "payment_method": "cash_on_delivery"}, format="json",
        )

        self.assertEqual(resp.status_code, 201)
        # (40 - 4 + 1) * 2
        self.assertEqual(resp.data["order_amount"], "74.00")

    def test_unknown_product_rejected(self):
        hidden = make_product("Hidden", "5.00", status=False)
        for pk in (hidden.pk, 987654):
            resp = self.client.post(
                reverse("order-place"),
                {"cart": [{"id": pk, "quantity": 1}], "payment_method": "cash_on_delivery"},
                format="json",
            )
            self.assertEqual(resp.status_code, 400)
            self.assertEqual(resp.data["detail"], "UNKNOWN_PRODUCT")
        self.assertFalse(Order.objects.exists())
