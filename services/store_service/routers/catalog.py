"""Store catalog router: public product browsing and admin product editing."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.store_service.schemas import (
    ProductCreate,
    ProductListResponse,
    ProductResponse,
    ProductUpdate,
)
from services.store_service.services import catalog
from services.store_service.services.pagination import (
    DEFAULT_LIMIT,
    MAX_LIMIT,
    page_count,
)
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/products", tags=["store"])


# ============================================================================
# CATALOG - PRODUCTS
# ============================================================================


@router.get("", response_model=ProductListResponse)
async def list_products(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
    category: Optional[str] = None,
    search: Optional[str] = None,
    db: AsyncSession = Depends(get_async_db),
):
    """List active products with pagination."""
    products, total = await catalog.list_products(
        db, page=page, limit=limit, category=category, search=search
    )
    return ProductListResponse(
        products=[ProductResponse.model_validate(p) for p in products],
        page=page,
        pages=page_count(total, limit),
        total=total,
    )


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: str,
    db: AsyncSession = Depends(get_async_db),
):
    return await catalog.get_product(db, product_id)


# ============================================================================
# ADMIN - PRODUCTS
# ============================================================================


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    product_in: ProductCreate,
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Create a new product."""
    return await catalog.create_product(db, product_in)


@router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: str,
    product_in: ProductUpdate,
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Update a product. Orders already placed keep their line-item snapshot."""
    return await catalog.update_product(db, product_id, product_in)
