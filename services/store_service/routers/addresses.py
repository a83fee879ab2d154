"""Saved shipping addresses of the signed-in user."""

from fastapi import APIRouter, Depends, status
from libs.auth.dependencies import get_current_user
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.store_service.schemas import (
    AddressCreate,
    AddressResponse,
    AddressUpdate,
)
from services.store_service.services import customers
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/addresses", tags=["store"])


@router.get("", response_model=list[AddressResponse])
async def list_addresses(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Default address first, then newest first."""
    return await customers.list_addresses(db, current_user.user_id)


@router.post("", response_model=AddressResponse, status_code=status.HTTP_201_CREATED)
async def add_address(
    address_in: AddressCreate,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    return await customers.add_address(db, current_user.user_id, address_in)


@router.put("/{address_id}", response_model=AddressResponse)
async def update_address(
    address_id: str,
    address_in: AddressUpdate,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    return await customers.update_address(
        db, current_user.user_id, address_id, address_in
    )


@router.delete("/{address_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_address(
    address_id: str,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    await customers.delete_address(db, current_user.user_id, address_id)


@router.patch("/{address_id}/default", response_model=AddressResponse)
async def set_default_address(
    address_id: str,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Make this the default address; the previous default is cleared."""
    return await customers.set_default_address(db, current_user.user_id, address_id)
