"""Analytics event ingestion.

Events are written as they arrive; reporting reads them elsewhere. Writes
triggered by other operations (orders) are best-effort and never raise.
"""

from datetime import timedelta
from typing import Optional

from libs.auth.models import AuthUser
from libs.common.datetime_utils import utc_now
from libs.common.logging import get_logger
from services.store_service.models import AnalyticsEvent, AnalyticsEventType
from services.store_service.schemas import AnalyticsEventCreate
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

ANONYMOUS_USER = "anonymous"
DUPLICATE_WINDOW = timedelta(hours=1)


async def record_event(
    db: AsyncSession,
    event_type: AnalyticsEventType,
    *,
    user_id: Optional[str] = None,
    order_id: Optional[str] = None,
    product_id: Optional[str] = None,
    metadata: Optional[dict] = None,
) -> Optional[AnalyticsEvent]:
    """Store a server-side event. Failures are logged and swallowed."""
    event = AnalyticsEvent(
        event_type=event_type,
        user_id=user_id or ANONYMOUS_USER,
        order_id=order_id,
        product_id=product_id,
        event_metadata=metadata,
    )
    try:
        db.add(event)
        await db.commit()
    except Exception:
        await db.rollback()
        logger.exception(
            "Failed to record %s analytics event (order=%s)", event_type.value, order_id
        )
        return None
    return event


async def track_event(
    db: AsyncSession,
    event_in: AnalyticsEventCreate,
    *,
    user: Optional[AuthUser] = None,
    user_agent: Optional[str] = None,
    ip_address: Optional[str] = None,
) -> tuple[AnalyticsEvent, bool]:
    """Ingest a client event.

    Returns ``(event, already_tracked)``. The same event from the same user on
    the same page/product within the last hour is not stored twice; the
    earlier event is returned instead.
    """
    user_id = user.user_id if user else ANONYMOUS_USER

    duplicate_query = select(AnalyticsEvent).where(
        AnalyticsEvent.event_type == event_in.event_type,
        AnalyticsEvent.user_id == user_id,
        AnalyticsEvent.created_at >= utc_now() - DUPLICATE_WINDOW,
    )
    if event_in.page_url is None:
        duplicate_query = duplicate_query.where(AnalyticsEvent.page_url.is_(None))
    else:
        duplicate_query = duplicate_query.where(
            AnalyticsEvent.page_url == event_in.page_url
        )
    if event_in.product_id is None:
        duplicate_query = duplicate_query.where(AnalyticsEvent.product_id.is_(None))
    else:
        duplicate_query = duplicate_query.where(
            AnalyticsEvent.product_id == event_in.product_id
        )

    existing = (await db.execute(duplicate_query.limit(1))).scalar_one_or_none()
    if existing:
        return existing, True

    event = AnalyticsEvent(
        event_type=event_in.event_type,
        user_id=user_id,
        session_id=event_in.session_id,
        product_id=event_in.product_id,
        page_url=event_in.page_url,
        event_metadata=event_in.metadata,
        user_agent=user_agent,
        ip_address=ip_address,
    )
    db.add(event)
    await db.commit()
    await db.refresh(event)
    logger.debug("Tracked %s for %s", event.event_type.value, user_id)
    return event, False
