"""Store cart router: the signed-in user's persisted cart."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, status
from libs.auth.dependencies import get_current_user
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.store_service.models import Cart
from services.store_service.schemas import (
    CartItemCreate,
    CartItemResponse,
    CartResponse,
)
from services.store_service.services import carts
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/cart", tags=["store"])


def _cart_response(cart: Optional[Cart]) -> CartResponse:
    if cart is None:
        return CartResponse()
    return CartResponse(
        id=cart.id,
        items=[CartItemResponse.model_validate(item) for item in cart.items],
        items_price=carts.cart_items_price(cart),
    )


@router.get("", response_model=CartResponse)
async def get_cart(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Get the current user's cart (empty when none exists yet)."""
    cart = await carts.get_cart(db, current_user.user_id)
    return _cart_response(cart)


@router.post("/items", response_model=CartResponse)
async def add_cart_item(
    item_in: CartItemCreate,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Add a product to the cart, or set its quantity if already there."""
    cart = await carts.add_item(db, current_user.user_id, item_in)
    return _cart_response(cart)


@router.delete("/items/{product_id}", response_model=CartResponse)
async def remove_cart_item(
    product_id: uuid.UUID,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    cart = await carts.remove_item(db, current_user.user_id, product_id)
    return _cart_response(cart)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def clear_cart(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    await carts.clear_cart(db, current_user.user_id)
