"""Saved payment methods of the signed-in user."""

from fastapi import APIRouter, Depends, status
from libs.auth.dependencies import get_current_user
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.store_service.schemas import (
    PaymentMethodCreate,
    PaymentMethodResponse,
    PaymentMethodUpdate,
)
from services.store_service.services import customers
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/payments", tags=["store"])


@router.get("", response_model=list[PaymentMethodResponse])
async def list_payment_methods(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Active payment methods, default first."""
    return await customers.list_payment_methods(db, current_user.user_id)


@router.post(
    "", response_model=PaymentMethodResponse, status_code=status.HTTP_201_CREATED
)
async def add_payment_method(
    payment_in: PaymentMethodCreate,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    return await customers.add_payment_method(db, current_user.user_id, payment_in)


@router.put("/{payment_id}", response_model=PaymentMethodResponse)
async def update_payment_method(
    payment_id: str,
    payment_in: PaymentMethodUpdate,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    return await customers.update_payment_method(
        db, current_user.user_id, payment_id, payment_in
    )


@router.delete("/{payment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_payment_method(
    payment_id: str,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Deactivate a payment method. It stops being listed or usable as default."""
    await customers.remove_payment_method(db, current_user.user_id, payment_id)


@router.patch("/{payment_id}/default", response_model=PaymentMethodResponse)
async def set_default_payment_method(
    payment_id: str,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    return await customers.set_default_payment_method(
        db, current_user.user_id, payment_id
    )
