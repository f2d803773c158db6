# orders/placement.py
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Iterable, Mapping, Optional

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import DatabaseError

from business.config import BusinessConfig
from catalog.models import Product
from core.uow import UnitOfWork
from wallets.models import WalletTransaction, q
from wallets.services import WalletService
from .cart import cart_grand_total
from .models import Order, OrderDetail
from .signals import order_placed

logger = logging.getLogger(__name__)

User = get_user_model()


def _resolve_product(product_id) -> Optional[Product]:
    try:
        pk = int(product_id)
    except (TypeError, ValueError):
        return None
    return Product.objects.filter(pk=pk).first()


class OrderPlacementService:
    """
    Creates an order and its lines as one unit of work. Purchase points and
    the confirmation email follow after commit (see orders.signals) and can
    never undo or fail the order.
    """

    def __init__(self, config: Optional[BusinessConfig] = None, wallet: Optional[WalletService] = None):
        self.config = config if config is not None else BusinessConfig.load()
        self.wallet = wallet if wallet is not None else WalletService(self.config)

    def place_order(
        self,
        customer_id,
        email: str,
        customer_info: Mapping,
        cart: Iterable[Mapping],
        payment_method: str,
        discount: Decimal | int | float | str,
        coupon_code: Optional[str] = None,
        delivery_charge: Decimal | int | float | str = 0,
        order_note: str = "",
    ) -> Optional[int]:
        """
        Returns the new order's primary key, or None if nothing could be
        committed. Cart lines whose product no longer exists are skipped;
        the order amount is still taken from the whole cart.
        """
        cart = list(cart)
        discount = q(discount or 0)
        order_amount = cart_grand_total(cart) - discount

        try:
            with UnitOfWork() as uow:
                order = Order.objects.create(
                    user_id=customer_id,
                    order_amount=order_amount,
                    payment_status="unpaid",
                    order_status="pending",
                    payment_method=payment_method,
                    discount_amount=discount,
                    coupon_code=coupon_code or None,
                    discount_type="coupon_discount" if discount > 0 else None,
                    delivery_charge=q(delivery_charge or 0),
                    shipping_address=dict(customer_info or {}),
                    order_note=order_note or "",
                )
                # The pk comes from the database sequence, so two concurrent
                # placements can never share a number.
                order.number = settings.ORDER_NUMBER_OFFSET + order.pk
                order.save(update_fields=["number"])

                for line in cart:
                    product = _resolve_product(line.get("id"))
                    if product is None:
                        logger.warning("Order %s: skipping line for missing product %r", order.number, line.get("id"))
                        continue
                    qty = int(line.get("quantity") or 0)
                    OrderDetail.objects.create(
                        order=order,
                        product=product,
                        seller_id=product.seller_id_for_order,
                        product_details=product.sellable_snapshot(),
                        qty=qty,
                        price=q(line.get("price") or 0),
                        tax=q(Decimal(str(line.get("tax") or 0)) * qty),
                        discount=q(Decimal(str(line.get("discount") or 0)) * qty),
                        variant=line.get("variant") or "",
                        variation=line.get("variations") or [],
                        delivery_status="pending",
                        payment_status="unpaid",
                    )

                uow.on_commit(lambda: order_placed.send_robust(
                    sender=Order, order=order, email=email, config=self.config,
                ))
        except DatabaseError:
            logger.exception("Order placement rolled back for customer=%s", customer_id)
            return None

        logger.info("Order %s placed for customer=%s amount=%s", order.number, customer_id, order.order_amount)
        return order.pk

    def pay_with_wallet(self, order_pk) -> bool:
        """
        Debit the order amount from the customer's wallet and mark the order
        paid, together.

        Returns False when the wallet is disabled, the order is missing or
        already paid, or the write was rolled back. Raises
        ValueError("INSUFFICIENT_FUNDS") when the wallet cannot cover it.
        """
        if not self.config.wallet_status:
            return False

        try:
            with UnitOfWork() as uow:
                order = Order.objects.select_for_update().get(pk=order_pk)
                if order.payment_status == "paid":
                    return False
                user = uow.lock_user(order.user_id)
                if q(user.wallet_balance) < q(order.order_amount):
                    raise ValueError("INSUFFICIENT_FUNDS")

                self.wallet.post(
                    uow, user,
                    credit=Decimal("0.00"), debit=q(order.order_amount),
                    transaction_type=WalletTransaction.Type.ORDER_PLACE,
                    reference=str(order.number),
                )
                order.payment_status = "paid"
                order.payment_method = "wallet"
                order.save(update_fields=["payment_status", "payment_method", "updated_at"])
                order.details.update(payment_status="paid")
        except (Order.DoesNotExist, User.DoesNotExist):
            return False
        except DatabaseError:
            logger.exception("Wallet payment rolled back for order=%s", order_pk)
            return False
        return True


def track_order(order_pk) -> Optional[Order]:
    """Order with its lines, or None."""
    return (
        Order.objects.prefetch_related("details")
        .select_related("user")
        .filter(pk=order_pk)
        .first()
    )
