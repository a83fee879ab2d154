"""Product catalog operations."""

import uuid
from typing import Optional

from libs.common.logging import get_logger
from services.store_service.errors import NotFoundError
from services.store_service.models import Product
from services.store_service.schemas import ProductCreate, ProductUpdate
from services.store_service.services.pagination import (
    LIKE_ESCAPE,
    contains_pattern,
    paginate,
)
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


def _parse_id(product_id) -> uuid.UUID:
    if isinstance(product_id, uuid.UUID):
        return product_id
    try:
        return uuid.UUID(str(product_id))
    except ValueError:
        raise NotFoundError("Product not found")


async def list_products(
    db: AsyncSession,
    *,
    page: int,
    limit: int,
    category: Optional[str] = None,
    search: Optional[str] = None,
) -> tuple[list[Product], int]:
    query = select(Product).where(Product.is_active.is_(True))
    if category:
        query = query.where(Product.category == category)
    if search:
        pattern = contains_pattern(search)
        query = query.where(
            or_(
                Product.title.ilike(pattern, escape=LIKE_ESCAPE),
                Product.description.ilike(pattern, escape=LIKE_ESCAPE),
            )
        )
    query = query.order_by(Product.created_at.desc())
    return await paginate(db, query, page, limit)


async def get_product(
    db: AsyncSession, product_id, *, active_only: bool = True
) -> Product:
    product = await db.get(Product, _parse_id(product_id))
    if not product or (active_only and not product.is_active):
        raise NotFoundError("Product not found")
    return product


async def create_product(db: AsyncSession, product_in: ProductCreate) -> Product:
    product = Product(**product_in.model_dump())
    db.add(product)
    await db.commit()
    await db.refresh(product)
    logger.info("Created product %s (%s)", product.id, product.title)
    return product


async def update_product(
    db: AsyncSession, product_id, product_in: ProductUpdate
) -> Product:
    """Partial update. Existing orders keep their own snapshot of the product."""
    product = await get_product(db, product_id, active_only=False)
    for field, value in product_in.model_dump(exclude_unset=True).items():
        setattr(product, field, value)
    await db.commit()
    await db.refresh(product)
    return product
