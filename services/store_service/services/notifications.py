"""Best-effort order notifications. Never raises into the caller."""

from libs.common.config import get_settings
from libs.common.emails.store import send_new_order_notification_email
from libs.common.logging import get_logger
from services.store_service.schemas import OrderResponse

logger = get_logger(__name__)


async def notify_new_order(order: OrderResponse) -> bool:
    """Email the shop admins about a new order.

    Takes the serialized order so it can run after the request session closed.
    """
    settings = get_settings()
    address = order.shipping_address or {}
    customer_name = order.guest_name if order.is_guest else address.get("fullName")
    customer_email = order.guest_email if order.is_guest else address.get("email")

    try:
        return await send_new_order_notification_email(
            to_emails=settings.admin_email_list,
            order_number=order.order_number,
            customer_name=customer_name or "Customer",
            customer_email=customer_email,
            is_guest=order.is_guest,
            items=[
                {
                    "name": item.name,
                    "quantity": item.quantity,
                    "unit_price": float(item.unit_price),
                }
                for item in order.order_items
            ],
            items_price=float(order.items_price),
            shipping_price=float(order.shipping_price),
            total_price=float(order.total_price),
            shipping_address=address,
            payment_method=order.payment_method,
        )
    except Exception:
        logger.exception("Order notification failed for %s", order.order_number)
        return False
