import logging

from django.core.mail import send_mail
from .models import EmailLog

logger = logging.getLogger(__name__)


def send_email_logged(to_email: str, subject: str, body: str, *, kind=EmailLog.Kind.OTHER, order=None) -> EmailLog:
    """Send one email and keep an EmailLog row. Never raises."""
    log = EmailLog.objects.create(
        to=to_email,
        kind=kind,
        order=order,
        order_number=getattr(order, "number", None),
        subject=subject,
        body=body,
        status="queued",
    )
    try:
        send_mail(subject, body, None, [to_email], fail_silently=False)
        log.status = "sent"
    except Exception as e:
        logger.warning("Email to %s failed: %s", to_email, e)
        log.status = "failed"
        log.error = str(e)
    finally:
        log.save(update_fields=["status", "error"])
    return log


def _order_text(order) -> str:
    lines = [
        "Hi,",
        "",
        f"Your order #{order.number} has been placed successfully.",
        "",
    ]
    for detail in order.details.all():
        name = (detail.product_details or {}).get("name") or "Item"
        label = f"{name} ({detail.variant})" if detail.variant else name
        lines.append(f"  {detail.qty} x {label} @ {detail.price}")
    lines += [
        "",
        f"Delivery charge: {order.delivery_charge}",
    ]
    if order.coupon_code:
        lines.append(f"Coupon: {order.coupon_code} (-{order.discount_amount})")
    lines += [
        f"Total: {order.order_amount}",
        f"Payment method: {order.get_payment_method_display()}",
        f"Status: {order.order_status}",
    ]
    address = (order.shipping_address or {}).get("address")
    if address:
        lines.append(f"Deliver to: {address}")
    lines += ["", "Thanks for shopping with GrocerHub."]
    return "\n".join(lines)


def send_order_confirmation_email(to_email: str, order) -> EmailLog:
    return send_email_logged(
        to_email=to_email,
        subject=f"Order #{order.number} placed",
        body=_order_text(order),
        kind=EmailLog.Kind.ORDER_CONFIRMATION,
        order=order,
    )
