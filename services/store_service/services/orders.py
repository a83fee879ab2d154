"""Order lifecycle: checkout, retrieval, cancellation and status changes.

An order belongs either to a registered user or to a guest identified by the
email/name on the shipping address. Callers pass that owner explicitly as a
``RegisteredOwner`` or ``GuestOwner``; the database enforces the same rule
with a check constraint.
"""

import uuid
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Union

from libs.auth.models import AuthUser
from libs.common.datetime_utils import utc_now
from libs.common.logging import get_logger
from services.store_service.errors import (
    AuthorizationError,
    NotFoundError,
    ValidationError,
)
from services.store_service.models import (
    AnalyticsEventType,
    Order,
    OrderItem,
    OrderStatus,
)
from services.store_service.schemas import (
    LineItemInput,
    OrderCreate,
    OrderStatusUpdate,
)
from services.store_service.services import analytics, carts
from services.store_service.services.order_numbers import (
    next_order_number,
    normalize_order_number,
)
from services.store_service.services.pagination import (
    LIKE_ESCAPE,
    contains_pattern,
    paginate,
)
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

logger = get_logger(__name__)

# Free shipping, tax-inclusive prices
SHIPPING_PRICE = Decimal("0")
TAX_PRICE = Decimal("0")

PLACEHOLDER_IMAGE = "/placeholder.png"


# ============================================================================
# OWNERSHIP
# ============================================================================


@dataclass(frozen=True)
class RegisteredOwner:
    user_id: str


@dataclass(frozen=True)
class GuestOwner:
    email: str
    name: str


OrderOwner = Union[RegisteredOwner, GuestOwner]


def _normalize_email(email: Optional[str]) -> Optional[str]:
    return email.strip().lower() if email else None


def resolve_owner(user: Optional[AuthUser], order_in: OrderCreate) -> OrderOwner:
    """Decide who owns a new order.

    A signed-in caller always owns the order. Without a token the request must
    be flagged as guest checkout and carry a contact email.
    """
    if user is not None:
        return RegisteredOwner(user_id=user.user_id)

    if not order_in.is_guest:
        raise AuthorizationError("Authentication required")

    email = _normalize_email(order_in.shipping_address.email)
    if not email:
        raise ValidationError("Email is required for guest checkout")
    return GuestOwner(email=email, name=order_in.shipping_address.full_name)


# ============================================================================
# STATUS TRANSITIONS
# ============================================================================

ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset(
        {
            OrderStatus.CONFIRMED,
            OrderStatus.PROCESSING,
            OrderStatus.SHIPPED,
            OrderStatus.DELIVERED,
            OrderStatus.CANCELLED,
        }
    ),
    OrderStatus.CONFIRMED: frozenset(
        {
            OrderStatus.PROCESSING,
            OrderStatus.SHIPPED,
            OrderStatus.DELIVERED,
            OrderStatus.CANCELLED,
        }
    ),
    OrderStatus.PROCESSING: frozenset({OrderStatus.SHIPPED, OrderStatus.DELIVERED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

CANCELLABLE_STATUSES = frozenset(
    status
    for status, targets in ALLOWED_TRANSITIONS.items()
    if OrderStatus.CANCELLED in targets
)


def can_transition(current: OrderStatus, new: OrderStatus) -> bool:
    """Re-asserting the current status is allowed (e.g. to edit tracking)."""
    return new == current or new in ALLOWED_TRANSITIONS[current]


# ============================================================================
# LOADING / AUTHORIZATION HELPERS
# ============================================================================


def _parse_order_id(order_id) -> uuid.UUID:
    if isinstance(order_id, uuid.UUID):
        return order_id
    try:
        return uuid.UUID(str(order_id))
    except ValueError:
        raise NotFoundError("Order not found")


def _orders_query():
    return select(Order).options(selectinload(Order.items))


async def get_order(db: AsyncSession, order_id) -> Order:
    query = (
        _orders_query()
        .where(Order.id == _parse_order_id(order_id))
        .execution_options(populate_existing=True)
    )
    order = (await db.execute(query)).scalar_one_or_none()
    if not order:
        raise NotFoundError("Order not found")
    return order


def _is_owner(order: Order, user: Optional[AuthUser], email: Optional[str]) -> bool:
    if user is not None and order.user_id is not None and order.user_id == user.user_id:
        return True
    email = _normalize_email(email)
    return bool(order.is_guest and email and order.guest_email == email)


# ============================================================================
# CHECKOUT
# ============================================================================


def _lines_from_cart(cart) -> list[LineItemInput]:
    lines = []
    for item in cart.items:
        product = item.product
        lines.append(
            LineItemInput(
                product_id=str(item.product_id),
                name=product.title if product else item.name,
                image=(
                    (product.primary_image if product else None)
                    or item.image
                    or PLACEHOLDER_IMAGE
                ),
                unit_price=item.unit_price,
                quantity=item.quantity,
                category=product.category if product else None,
                selected_options=item.selected_options or {},
            )
        )
    return lines


def items_total(lines: list[LineItemInput]) -> Decimal:
    return sum((line.unit_price * line.quantity for line in lines), Decimal("0"))


async def create_order(
    db: AsyncSession, owner: OrderOwner, order_in: OrderCreate
) -> Order:
    """Place an order from explicit items or from the owner's saved cart.

    Explicit items (guest checkout, client-held cart) may carry client
    computed totals, which are kept. Otherwise the saved cart is converted at
    its stored prices and deleted in the same transaction as the insert.
    Shipping and tax are always zero.
    """
    cart = None
    if order_in.items:
        lines = list(order_in.items)
        items_price = (
            order_in.items_price
            if order_in.items_price is not None
            else items_total(lines)
        )
        total_price = (
            order_in.total_price
            if order_in.total_price is not None
            else items_price + SHIPPING_PRICE + TAX_PRICE
        )
    elif isinstance(owner, GuestOwner):
        raise ValidationError("No items provided")
    else:
        cart = await carts.get_cart(db, owner.user_id, with_products=True)
        if not cart or not cart.items:
            raise ValidationError("Cart is empty")
        lines = _lines_from_cart(cart)
        items_price = items_total(lines)
        total_price = items_price + SHIPPING_PRICE + TAX_PRICE

    order_number = await next_order_number(db)

    order = Order(
        order_number=order_number,
        shipping_address=order_in.shipping_address.model_dump(
            mode="json", by_alias=True, exclude_none=True
        ),
        payment_method=order_in.payment_method,
        items_price=items_price,
        shipping_price=SHIPPING_PRICE,
        tax_price=TAX_PRICE,
        total_price=total_price,
        order_status=OrderStatus.PENDING,
        items=[
            OrderItem(
                position=position,
                product_id=line.product_id,
                name=line.name,
                image=line.image,
                unit_price=line.unit_price,
                quantity=line.quantity,
                category=line.category,
                selected_options=line.selected_options,
            )
            for position, line in enumerate(lines)
        ],
    )
    if isinstance(owner, GuestOwner):
        order.is_guest = True
        order.guest_email = owner.email
        order.guest_name = owner.name
    else:
        order.is_guest = False
        order.user_id = owner.user_id

    db.add(order)
    if cart is not None:
        await db.delete(cart)
    await db.commit()

    logger.info(
        "Created order %s (%s, %d items, total=%s)",
        order.order_number,
        "guest" if order.is_guest else f"user {order.user_id}",
        len(lines),
        total_price,
    )

    # A failed analytics write rolls back and expires the session
    order_id = order.id
    await analytics.record_event(
        db,
        AnalyticsEventType.PURCHASE_INTENT,
        user_id=order.user_id,
        order_id=str(order_id),
        metadata={
            "order_number": order_number,
            "total_price": float(total_price),
            "item_count": len(lines),
            "is_guest": isinstance(owner, GuestOwner),
        },
    )
    return await get_order(db, order_id)


# ============================================================================
# RETRIEVAL
# ============================================================================


async def list_caller_orders(
    db: AsyncSession,
    user: Optional[AuthUser],
    email: Optional[str],
    *,
    page: int,
    limit: int,
) -> tuple[list[Order], int]:
    """A registered caller's orders, or a guest's orders by email."""
    query = _orders_query()
    if user is not None:
        query = query.where(Order.user_id == user.user_id)
    elif email:
        query = query.where(
            Order.is_guest.is_(True), Order.guest_email == _normalize_email(email)
        )
    else:
        raise ValidationError("Email is required to look up guest orders")

    return await paginate(db, query.order_by(Order.created_at.desc()), page, limit)


async def get_order_for_caller(
    db: AsyncSession,
    order_id,
    user: Optional[AuthUser],
    email: Optional[str] = None,
) -> Order:
    """Owner, guest with the matching email, or admin."""
    order = await get_order(db, order_id)
    if user is not None and user.is_admin:
        return order
    if not _is_owner(order, user, email):
        raise AuthorizationError("Not authorized to view this order")
    return order


async def get_guest_order(
    db: AsyncSession, email: str, order_number: Optional[str] = None
) -> Order:
    """Public guest tracking lookup.

    With an order number the match is exact; without one the most recent
    guest order for the email is returned.
    """
    email = _normalize_email(email)
    if not email:
        raise ValidationError("Email is required")

    query = _orders_query().where(
        Order.is_guest.is_(True), Order.guest_email == email
    )
    if order_number:
        query = query.where(Order.order_number == normalize_order_number(order_number))

    result = await db.execute(query.order_by(Order.created_at.desc()).limit(1))
    order = result.scalar_one_or_none()
    if not order:
        raise NotFoundError("No order found for this email")
    return order


async def list_all_orders(
    db: AsyncSession,
    *,
    page: int,
    limit: int,
    status: Optional[str] = None,
    search: Optional[str] = None,
) -> tuple[list[Order], int]:
    """Admin listing with optional status filter and free-text search."""
    query = _orders_query()

    if status and status != "all":
        try:
            query = query.where(Order.order_status == OrderStatus(status))
        except ValueError:
            raise ValidationError(f"Unknown order status: {status}")

    if search and search.strip():
        term = search.strip()
        pattern = contains_pattern(term)
        conditions = [
            column.ilike(pattern, escape=LIKE_ESCAPE)
            for column in (
                Order.order_number,
                Order.guest_name,
                Order.guest_email,
                Order.shipping_address["fullName"].as_string(),
                Order.user_id,
            )
        ]
        try:
            conditions.append(Order.id == uuid.UUID(term))
        except ValueError:
            pass
        query = query.where(or_(*conditions))

    return await paginate(db, query.order_by(Order.created_at.desc()), page, limit)


# ============================================================================
# STATUS CHANGES
# ============================================================================


async def cancel_order(
    db: AsyncSession,
    order_id,
    user: Optional[AuthUser],
    email: Optional[str] = None,
) -> Order:
    """Customer cancellation; only before the order is being processed.

    Stock is not returned to inventory.
    """
    order = await get_order(db, order_id)
    if not _is_owner(order, user, email):
        raise AuthorizationError("Not authorized to cancel this order")
    if order.order_status not in CANCELLABLE_STATUSES:
        raise ValidationError("Order cannot be cancelled at this stage")

    order.order_status = OrderStatus.CANCELLED
    order.cancelled_at = utc_now()
    await db.commit()
    logger.info("Order %s cancelled by customer", order.order_number)
    return await get_order(db, order.id)


async def update_order_status(
    db: AsyncSession, order_id, status_in: OrderStatusUpdate
) -> Order:
    """Admin status/tracking update.

    Moving into ``delivered`` stamps delivery and records one purchase event;
    re-asserting ``delivered`` does not record another.
    """
    order = await get_order(db, order_id)
    old_status = order.order_status
    new_status = status_in.order_status
    became_delivered = False

    if new_status is not None:
        if not can_transition(old_status, new_status):
            raise ValidationError(
                f"Cannot change order status from {old_status.value} to {new_status.value}"
            )
        order.order_status = new_status
        if new_status == OrderStatus.DELIVERED and old_status != OrderStatus.DELIVERED:
            order.is_delivered = True
            order.delivered_at = utc_now()
            became_delivered = True
        elif new_status == OrderStatus.CANCELLED and old_status != OrderStatus.CANCELLED:
            order.cancelled_at = utc_now()

    if status_in.tracking_number:
        order.tracking_number = status_in.tracking_number

    await db.commit()
    logger.info(
        "Order %s status %s -> %s",
        order.order_number,
        old_status.value,
        order.order_status.value,
    )

    order_id = order.id
    if became_delivered:
        await analytics.record_event(
            db,
            AnalyticsEventType.PURCHASE,
            user_id=order.user_id,
            order_id=str(order_id),
            metadata={
                "order_number": order.order_number,
                "total_price": float(order.total_price),
                "is_guest": order.is_guest,
            },
        )
    return await get_order(db, order_id)
