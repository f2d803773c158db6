# orders/signals
from __future__ import annotations

import logging

from django.dispatch import Signal, receiver

from notifications.utils import send_order_confirmation_email

logger = logging.getLogger(__name__)

# Sent once the order's transaction has committed.
# kwargs: order, email, config (business.config.BusinessConfig)
order_placed = Signal()


@receiver(order_placed)
def award_purchase_points(sender, order, config, **kwargs):
    from rewards.models import LoyaltyTransaction
    from rewards.services import LoyaltyService

    ok = LoyaltyService(config).credit_or_debit_points(
        order.user_id, str(order.number), order.order_amount, LoyaltyTransaction.Type.ORDER_PLACE,
    )
    if not ok:
        logger.warning("Purchase points not awarded for order %s", order.number)


@receiver(order_placed)
def send_confirmation(sender, order, email, config, **kwargs):
    if not config.order_confirmation_email_status or not email:
        return
    send_order_confirmation_email(email, order)
