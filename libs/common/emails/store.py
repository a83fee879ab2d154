"""
Store-related email templates.
"""

from typing import Optional, Sequence

from libs.common.config import get_settings
from libs.common.emails.core import send_email


def _format_amount(value: float) -> str:
    return f"Rs {value:,.0f}"


def _format_address(address: dict) -> str:
    parts = [
        address.get("address"),
        address.get("city"),
        address.get("state"),
        address.get("postalCode"),
        address.get("country"),
    ]
    return ", ".join(p for p in parts if p)


async def send_new_order_notification_email(
    to_emails: Sequence[str],
    order_number: str,
    customer_name: str,
    customer_email: Optional[str],
    is_guest: bool,
    items: list[dict],  # [{"name": str, "quantity": int, "unit_price": float}]
    items_price: float,
    shipping_price: float,
    total_price: float,
    shipping_address: dict,
    payment_method: str,
) -> bool:
    """
    Tell the shop admins that a new order was placed.
    """
    site_name = get_settings().SITE_NAME
    subject = f"New Order {order_number} - {site_name}"
    customer_type = "Guest" if is_guest else "Registered"
    address_line = _format_address(shipping_address)
    phones = " / ".join(
        p for p in (shipping_address.get("phone"), shipping_address.get("secondPhone")) if p
    )

    items_text = "\n".join(
        f"  - {item['name']} x{item['quantity']} - {_format_amount(item['unit_price'] * item['quantity'])}"
        for item in items
    )
    items_html = "".join(
        f"<tr><td>{item['name']}</td><td style='text-align:center'>{item['quantity']}</td>"
        f"<td style='text-align:right'>{_format_amount(item['unit_price'] * item['quantity'])}</td></tr>"
        for item in items
    )
    shipping_text = (
        "Free" if shipping_price <= 0 else _format_amount(shipping_price)
    )

    body = f"""New order received on {site_name}.

Order {order_number}
Customer: {customer_name} ({customer_type})
Email: {customer_email or "No email provided"}
Phone: {phones or "-"}

Items:
{items_text}

Items: {_format_amount(items_price)}
Shipping: {shipping_text}
Total: {_format_amount(total_price)}

Payment method: {payment_method}
Ship to: {shipping_address.get("fullName", customer_name)}, {address_line}
"""

    html_body = f"""
<!DOCTYPE html>
<html>
<head>
    <style>
        body {{ font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; line-height: 1.6; color: #333; }}
        .container {{ max-width: 600px; margin: 0 auto; padding: 20px; }}
        .header {{ background: #111827; color: white; padding: 24px; border-radius: 12px 12px 0 0; }}
        .content {{ background: #f8fafc; padding: 24px; border-radius: 0 0 12px 12px; }}
        table {{ width: 100%; border-collapse: collapse; background: white; }}
        th, td {{ padding: 10px; text-align: left; border-bottom: 1px solid #e2e8f0; }}
        th {{ color: #64748b; font-size: 12px; text-transform: uppercase; }}
        .total-row {{ font-weight: bold; font-size: 18px; }}
    </style>
</head>
<body>
    <div class="container">
        <div class="header">
            <h1 style="margin: 0;">New Order {order_number}</h1>
            <p style="margin: 8px 0 0 0; opacity: 0.9;">{customer_type} customer</p>
        </div>
        <div class="content">
            <p><strong>{customer_name}</strong><br/>{customer_email or "No email provided"}<br/>{phones or "-"}</p>
            <table>
                <thead>
                    <tr><th>Item</th><th style="text-align:center">Qty</th><th style="text-align:right">Amount</th></tr>
                </thead>
                <tbody>
                    {items_html}
                </tbody>
            </table>
            <p>Items: {_format_amount(items_price)}<br/>Shipping: {shipping_text}</p>
            <p class="total-row">Total: {_format_amount(total_price)}</p>
            <p>Payment method: {payment_method}<br/>Ship to: {address_line}</p>
        </div>
    </div>
</body>
</html>
"""

    return await send_email(
        to_emails=to_emails,
        subject=subject,
        body=body,
        html_body=html_body,
    )
