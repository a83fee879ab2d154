"""Store orders router: checkout, order history, guest tracking and admin."""

from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from libs.auth.dependencies import get_optional_user, require_admin
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.store_service.models import Order
from services.store_service.schemas import (
    OrderCancelRequest,
    OrderCreate,
    OrderListResponse,
    OrderResponse,
    OrderStatusUpdate,
)
from services.store_service.services import orders
from services.store_service.services.notifications import notify_new_order
from services.store_service.services.pagination import (
    DEFAULT_LIMIT,
    MAX_LIMIT,
    page_count,
)
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/orders", tags=["orders"])


def _order_list(
    rows: list[Order], total: int, page: int, limit: int
) -> OrderListResponse:
    return OrderListResponse(
        orders=[OrderResponse.model_validate(order) for order in rows],
        page=page,
        pages=page_count(total, limit),
        total=total,
    )


# ============================================================================
# CHECKOUT
# ============================================================================


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
async def create_order(
    order_in: OrderCreate,
    background_tasks: BackgroundTasks,
    current_user: Optional[AuthUser] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Place an order as a signed-in user or as a guest (``isGuest``)."""
    owner = orders.resolve_owner(current_user, order_in)
    order = await orders.create_order(db, owner, order_in)

    response = OrderResponse.model_validate(order)
    background_tasks.add_task(notify_new_order, response)
    return response


# ============================================================================
# CUSTOMER / GUEST RETRIEVAL
# ============================================================================


@router.get("/myorders", response_model=OrderListResponse)
async def list_my_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
    email: Optional[str] = None,
    current_user: Optional[AuthUser] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Order history for the signed-in user, or for a guest email."""
    rows, total = await orders.list_caller_orders(
        db, current_user, email, page=page, limit=limit
    )
    return _order_list(rows, total, page, limit)


@router.get("/guest", response_model=OrderResponse)
async def get_guest_order(
    email: str,
    order_number: Optional[str] = Query(None, alias="orderNumber"),
    db: AsyncSession = Depends(get_async_db),
):
    """Public order tracking for guests."""
    return await orders.get_guest_order(db, email, order_number)


# ============================================================================
# ADMIN
# ============================================================================


@router.get("/admin/filtered", response_model=OrderListResponse)
async def list_filtered_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
    status_filter: Optional[str] = Query(None, alias="status"),
    search: Optional[str] = None,
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """All orders, filtered by status and free-text search."""
    rows, total = await orders.list_all_orders(
        db, page=page, limit=limit, status=status_filter, search=search
    )
    return _order_list(rows, total, page, limit)


@router.get("", response_model=OrderListResponse)
async def list_all_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    rows, total = await orders.list_all_orders(db, page=page, limit=limit)
    return _order_list(rows, total, page, limit)


@router.put("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: str,
    status_in: OrderStatusUpdate,
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Move an order along its lifecycle and/or set its tracking number."""
    return await orders.update_order_status(db, order_id, status_in)


# ============================================================================
# SINGLE ORDER
# ============================================================================


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: str,
    email: Optional[str] = None,
    current_user: Optional[AuthUser] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Order detail for its owner, the guest with the order email, or an admin."""
    return await orders.get_order_for_caller(db, order_id, current_user, email)


@router.put("/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(
    order_id: str,
    cancel_in: Optional[OrderCancelRequest] = None,
    current_user: Optional[AuthUser] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Cancel a pending or confirmed order."""
    email = cancel_in.email if cancel_in else None
    return await orders.cancel_order(db, order_id, current_user, email)
