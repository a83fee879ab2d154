"""Saved addresses and payment methods for registered users.

Each collection keeps exactly one default per user while it is non-empty:
the first saved row becomes the default, choosing a new default clears the
old one, and removing or un-defaulting the default promotes the most recently
added remaining row. Removing a payment method deactivates it rather than
deleting it, so payment rules always look at active rows only.
"""

import uuid
from typing import Optional, Union

from libs.common.logging import get_logger
from services.store_service.errors import (
    AuthorizationError,
    NotFoundError,
    ValidationError,
)
from services.store_service.models import Address, PaymentMethod, PaymentMethodType
from services.store_service.schemas import (
    AddressCreate,
    AddressUpdate,
    PaymentMethodCreate,
    PaymentMethodUpdate,
)
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

SavedRow = Union[Address, PaymentMethod]


# ============================================================================
# DEFAULT HANDLING
# ============================================================================


def _scope(model, user_id: str) -> list:
    conditions = [model.user_id == user_id]
    if model is PaymentMethod:
        conditions.append(PaymentMethod.is_active.is_(True))
    return conditions


async def _clear_default(db: AsyncSession, model, user_id: str) -> None:
    """Unset the user's current default. Run before setting a new one."""
    await db.execute(
        update(model)
        .where(model.user_id == user_id, model.is_default.is_(True))
        .values(is_default=False)
    )


async def _make_default(db: AsyncSession, row: SavedRow) -> None:
    if row.is_default:
        return
    await _clear_default(db, type(row), row.user_id)
    row.is_default = True


async def _has_rows(db: AsyncSession, model, user_id: str) -> bool:
    count = await db.scalar(
        select(func.count()).select_from(model).where(*_scope(model, user_id))
    )
    return bool(count)


async def _ensure_default(
    db: AsyncSession, model, user_id: str, *, avoid: Optional[uuid.UUID] = None
) -> None:
    """Promote the newest row (other than ``avoid`` when possible) if none is default."""
    await db.flush()
    scope = _scope(model, user_id)
    has_default = await db.scalar(
        select(func.count())
        .select_from(model)
        .where(*scope, model.is_default.is_(True))
    )
    if has_default:
        return

    query = select(model).where(*scope)
    if avoid is not None:
        query = query.order_by((model.id == avoid).asc())
    query = query.order_by(model.created_at.desc()).limit(1)
    candidate = (await db.execute(query)).scalar_one_or_none()
    if candidate is not None:
        candidate.is_default = True
        await db.flush()


def _parse_id(row_id, label: str) -> uuid.UUID:
    if isinstance(row_id, uuid.UUID):
        return row_id
    try:
        return uuid.UUID(str(row_id))
    except ValueError:
        raise NotFoundError(f"{label} not found")


# ============================================================================
# ADDRESSES
# ============================================================================


async def list_addresses(db: AsyncSession, user_id: str) -> list[Address]:
    result = await db.execute(
        select(Address)
        .where(Address.user_id == user_id)
        .order_by(Address.is_default.desc(), Address.created_at.desc())
    )
    return list(result.scalars().all())


async def get_address(
    db: AsyncSession, user_id: str, address_id, *, action: str = "update"
) -> Address:
    address = await db.get(Address, _parse_id(address_id, "Address"))
    if not address:
        raise NotFoundError("Address not found")
    if address.user_id != user_id:
        raise AuthorizationError(f"Not authorized to {action} this address")
    return address


async def add_address(
    db: AsyncSession, user_id: str, address_in: AddressCreate
) -> Address:
    data = address_in.model_dump(exclude={"is_default"})
    make_default = address_in.is_default or not await _has_rows(db, Address, user_id)
    if make_default:
        await _clear_default(db, Address, user_id)

    address = Address(user_id=user_id, is_default=make_default, **data)
    db.add(address)
    await db.commit()
    await db.refresh(address)
    logger.info("Saved address %s for user %s", address.id, user_id)
    return address


async def update_address(
    db: AsyncSession, user_id: str, address_id, address_in: AddressUpdate
) -> Address:
    address = await get_address(db, user_id, address_id)
    data = address_in.model_dump(exclude_unset=True)
    is_default = data.pop("is_default", None)

    for field, value in data.items():
        if value is not None:
            setattr(address, field, value)

    if is_default:
        await _make_default(db, address)
    elif is_default is False and address.is_default:
        address.is_default = False
        await _ensure_default(db, Address, user_id, avoid=address.id)

    await db.commit()
    await db.refresh(address)
    return address


async def set_default_address(db: AsyncSession, user_id: str, address_id) -> Address:
    address = await get_address(db, user_id, address_id)
    await _make_default(db, address)
    await db.commit()
    await db.refresh(address)
    return address


async def delete_address(db: AsyncSession, user_id: str, address_id) -> None:
    address = await get_address(db, user_id, address_id, action="delete")
    was_default = address.is_default
    await db.delete(address)
    if was_default:
        await _ensure_default(db, Address, user_id)
    await db.commit()
    logger.info("Deleted address %s for user %s", address_id, user_id)


# ============================================================================
# PAYMENT METHODS
# ============================================================================


def _check_payment_details(payment: PaymentMethod) -> None:
    card = payment.card or {}
    bank = payment.bank or {}
    if payment.method_type == PaymentMethodType.CARD and not (
        card.get("last4") and card.get("brand")
    ):
        raise ValidationError("Card details are required for card payments")
    if payment.method_type == PaymentMethodType.BANK and not (
        bank.get("bankName") and bank.get("accountNumber")
    ):
        raise ValidationError("Bank details are required for bank transfers")
    if payment.method_type == PaymentMethodType.WALLET and not payment.wallet:
        raise ValidationError("Wallet type is required for wallet payments")


def _apply_payment_details(payment: PaymentMethod, payment_in) -> None:
    """Copy only the details block that matches the method type."""
    method = payment.method_type
    if payment_in.card is not None or method != PaymentMethodType.CARD:
        payment.card = (
            payment_in.card.model_dump(mode="json", by_alias=True, exclude_none=True)
            if method == PaymentMethodType.CARD and payment_in.card
            else None
        )
    if payment_in.bank is not None or method != PaymentMethodType.BANK:
        payment.bank = (
            payment_in.bank.model_dump(mode="json", by_alias=True, exclude_none=True)
            if method == PaymentMethodType.BANK and payment_in.bank
            else None
        )
    if payment_in.wallet is not None or method != PaymentMethodType.WALLET:
        payment.wallet = (
            payment_in.wallet.value
            if method == PaymentMethodType.WALLET and payment_in.wallet
            else None
        )


async def list_payment_methods(db: AsyncSession, user_id: str) -> list[PaymentMethod]:
    result = await db.execute(
        select(PaymentMethod)
        .where(*_scope(PaymentMethod, user_id))
        .order_by(PaymentMethod.is_default.desc(), PaymentMethod.created_at.desc())
    )
    return list(result.scalars().all())


async def get_payment_method(
    db: AsyncSession, user_id: str, payment_id, *, action: str = "update"
) -> PaymentMethod:
    payment = await db.get(PaymentMethod, _parse_id(payment_id, "Payment method"))
    if not payment or not payment.is_active:
        raise NotFoundError("Payment method not found")
    if payment.user_id != user_id:
        raise AuthorizationError(f"Not authorized to {action} this payment method")
    return payment


async def add_payment_method(
    db: AsyncSession, user_id: str, payment_in: PaymentMethodCreate
) -> PaymentMethod:
    payment = PaymentMethod(user_id=user_id, method_type=payment_in.method_type)
    _apply_payment_details(payment, payment_in)
    _check_payment_details(payment)

    make_default = payment_in.is_default or not await _has_rows(
        db, PaymentMethod, user_id
    )
    if make_default:
        await _clear_default(db, PaymentMethod, user_id)
    payment.is_default = make_default

    db.add(payment)
    await db.commit()
    await db.refresh(payment)
    logger.info(
        "Saved %s payment method %s for user %s",
        payment.method_type.value,
        payment.id,
        user_id,
    )
    return payment


async def update_payment_method(
    db: AsyncSession, user_id: str, payment_id, payment_in: PaymentMethodUpdate
) -> PaymentMethod:
    payment = await get_payment_method(db, user_id, payment_id)
    if payment_in.method_type is not None:
        payment.method_type = payment_in.method_type
    _apply_payment_details(payment, payment_in)
    _check_payment_details(payment)

    if payment_in.is_default:
        await _make_default(db, payment)
    elif payment_in.is_default is False and payment.is_default:
        payment.is_default = False
        await _ensure_default(db, PaymentMethod, user_id, avoid=payment.id)

    await db.commit()
    await db.refresh(payment)
    return payment


async def set_default_payment_method(
    db: AsyncSession, user_id: str, payment_id
) -> PaymentMethod:
    payment = await get_payment_method(db, user_id, payment_id)
    await _make_default(db, payment)
    await db.commit()
    await db.refresh(payment)
    return payment


async def remove_payment_method(db: AsyncSession, user_id: str, payment_id) -> None:
    payment = await get_payment_method(db, user_id, payment_id, action="delete")
    was_default = payment.is_default
    payment.is_active = False
    payment.is_default = False
    if was_default:
        await _ensure_default(db, PaymentMethod, user_id)
    await db.commit()
    logger.info("Deactivated payment method %s for user %s", payment_id, user_id)
