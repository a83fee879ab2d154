"""Persisted carts for registered users."""

import uuid
from decimal import Decimal
from typing import Optional

from libs.common.logging import get_logger
from services.store_service.errors import NotFoundError, ValidationError
from services.store_service.models import Cart, CartItem
from services.store_service.schemas import CartItemCreate
from services.store_service.services.catalog import get_product
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

logger = get_logger(__name__)


async def get_cart(
    db: AsyncSession, user_id: str, *, with_products: bool = False
) -> Optional[Cart]:
    """Load the user's cart with items (and their products, if asked)."""
    loader = selectinload(Cart.items)
    if with_products:
        loader = loader.selectinload(CartItem.product)
    query = (
        select(Cart)
        .where(Cart.user_id == user_id)
        .options(loader)
        .execution_options(populate_existing=True)
    )
    result = await db.execute(query)
    return result.scalar_one_or_none()


def cart_items_price(cart: Optional[Cart]) -> Decimal:
    if not cart:
        return Decimal("0")
    return sum((item.unit_price * item.quantity for item in cart.items), Decimal("0"))


async def add_item(db: AsyncSession, user_id: str, item_in: CartItemCreate) -> Cart:
    """Add a product or set its quantity, refreshing the price/name snapshot."""
    product = await get_product(db, item_in.product_id)
    if item_in.quantity > product.stock:
        raise ValidationError(f"Only {product.stock} available")

    cart = await get_cart(db, user_id)
    if not cart:
        cart = Cart(user_id=user_id, items=[])
        db.add(cart)
        await db.flush()

    existing = next(
        (item for item in cart.items if item.product_id == product.id), None
    )
    if existing:
        existing.quantity = item_in.quantity
        existing.unit_price = product.price
        existing.name = product.title
        existing.image = product.primary_image
        if item_in.selected_options is not None:
            existing.selected_options = item_in.selected_options
    else:
        cart.items.append(
            CartItem(
                product_id=product.id,
                name=product.title,
                image=product.primary_image,
                unit_price=product.price,
                quantity=item_in.quantity,
                selected_options=item_in.selected_options,
            )
        )

    await db.commit()
    return await get_cart(db, user_id)


async def remove_item(db: AsyncSession, user_id: str, product_id: uuid.UUID) -> Cart:
    cart = await get_cart(db, user_id)
    if not cart:
        raise NotFoundError("Cart not found")

    item = next((i for i in cart.items if i.product_id == product_id), None)
    if item is None:
        raise NotFoundError("Item not in cart")

    cart.items.remove(item)
    await db.commit()
    return await get_cart(db, user_id)


async def clear_cart(db: AsyncSession, user_id: str) -> None:
    cart = await get_cart(db, user_id)
    if cart:
        await db.delete(cart)
        await db.commit()
        logger.info("Cleared cart for user %s", user_id)
