"""Human-facing order numbers ("#1001", "#1002", ...).

Numbers come from a counter row advanced with a single
``UPDATE ... SET value = value + 1 RETURNING value``, so two checkouts can
never observe the same value. The row is created on first use, seeded from
the orders already in the table so numbering continues where it left off.
"""

import re
from typing import Optional

from libs.common.config import get_settings
from libs.common.logging import get_logger
from services.store_service.models import Order, StoreCounter
from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

ORDER_NUMBER_COUNTER = "order_number"
ORDER_NUMBER_PREFIX = "#"

_NUMERIC_SUFFIX = re.compile(r"(\d+)$")


def format_order_number(value: int) -> str:
    return f"{ORDER_NUMBER_PREFIX}{value}"


def parse_order_number(order_number: Optional[str]) -> Optional[int]:
    """Return the numeric suffix of an order number, or None if there is none."""
    if not order_number:
        return None
    match = _NUMERIC_SUFFIX.search(order_number.strip())
    return int(match.group(1)) if match else None


def normalize_order_number(order_number: str) -> str:
    """Accept "1001", "#1001" or " #1001 " and return "#1001"."""
    value = parse_order_number(order_number)
    if value is None:
        return order_number.strip()
    return format_order_number(value)


async def _seed_value(db: AsyncSession) -> int:
    """Last number issued before the counter existed.

    The most recent order's numeric suffix when it has one, otherwise
    ``ORDER_NUMBER_START + number of orders`` (START when the table is empty).
    """
    last_number = (
        await db.execute(
            select(Order.order_number).order_by(Order.created_at.desc()).limit(1)
        )
    ).scalar_one_or_none()

    parsed = parse_order_number(last_number)
    if parsed is not None:
        return parsed

    order_count = await db.scalar(select(func.count()).select_from(Order))
    return get_settings().ORDER_NUMBER_START + (order_count or 0)


async def _increment(db: AsyncSession) -> Optional[int]:
    result = await db.execute(
        update(StoreCounter)
        .where(StoreCounter.name == ORDER_NUMBER_COUNTER)
        .values(value=StoreCounter.value + 1)
        .returning(StoreCounter.value)
        .execution_options(synchronize_session=False)
    )
    return result.scalar_one_or_none()


async def next_order_number(db: AsyncSession) -> str:
    """Allocate the next order number inside the caller's transaction."""
    value = await _increment(db)
    if value is not None:
        return format_order_number(value)

    seed = await _seed_value(db)
    try:
        async with db.begin_nested():
            db.add(StoreCounter(name=ORDER_NUMBER_COUNTER, value=seed + 1))
        logger.info("Seeded order number counter at %d", seed + 1)
        return format_order_number(seed + 1)
    except IntegrityError:
        # Another checkout created the row first; its increment is now visible
        logger.info("Order number counter seeded concurrently, retrying increment")

    value = await _increment(db)
    if value is None:
        raise RuntimeError("Order number counter is missing after seeding")
    return format_order_number(value)
