"""Listing helpers shared by the listing endpoints: paging and text search."""

import math
from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100

LIKE_ESCAPE = "\\"


def page_count(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0


def contains_pattern(term: str) -> str:
    """``%term%`` for ILIKE, with ``%`` and ``_`` in ``term`` matched literally.

    Use together with ``escape=LIKE_ESCAPE``.
    """
    escaped = (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


async def paginate(
    db: AsyncSession, query: Select, page: int, limit: int
) -> tuple[list[Any], int]:
    """Run ``query`` for one page. Returns ``(rows, total)``."""
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total = await db.scalar(count_query)
    result = await db.execute(query.offset((page - 1) * limit).limit(limit))
    return list(result.scalars().all()), total or 0
